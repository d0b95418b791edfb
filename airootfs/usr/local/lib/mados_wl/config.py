"""
madOS WL - Configuration constants
"""

# ========== BACKEND MODE ==========
# 'production' runs nmcli, 'test' uses the in-memory mock backend
MODE_ENV = 'MADOS_WL_MODE'
DEFAULT_MODE = 'production'
# ==================================

# External network backend program (overridable through the environment)
NMCLI_ENV = 'MADOS_WL_NMCLI'
NMCLI_PROGRAM = 'nmcli'

# Byte nmcli puts between fields of terse (-t / -g) output
NMCLI_FIELD_SEPARATOR = b':'

# Signal strength bounds accepted by the scan filter
MIN_SIGNAL_STRENGTH = 0
MAX_SIGNAL_STRENGTH = 100

# Fields requested when scanning for the interactive SSID menu
SCAN_MENU_FIELDS = 'SSID,SIGNAL'

# Exit code used when a failure carries no code of its own
DEFAULT_EXIT_CODE = 1

# Logging
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
