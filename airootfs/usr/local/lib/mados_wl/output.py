"""madOS WL - Output stream helper."""

from .errors import OutputError


def write_bytes(stream, data: bytes) -> None:
    """Write ``data`` to a binary stream and flush it.

    Raises:
        OutputError: If the stream cannot be written or flushed.
    """
    try:
        stream.write(data)
        stream.flush()
    except (OSError, ValueError) as exc:
        # ValueError: the stream is already closed
        raise OutputError(str(exc)) from exc
