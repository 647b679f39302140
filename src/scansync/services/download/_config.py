"""
Constants for the download engine.

Tunable values live in ScanSyncSettings; these are fixed by the instrument.
"""

# Names the instrument uses for files still being written (top level only)
RESERVED_BASE_NAMES = frozenset({"work", "upload"})

# Login banner marker identifying an Axis (V2) electronics box
AXIS_BANNER_MARKER = "AXIS"

# Remote scratch names
REMOTE_COMMAND_FILE = "command.txt"
REMOTE_CFG_FILE = "cfg.txt"

# Returned by refresh_listing() when login or entering the folder fails
LISTING_LOGIN_FAILED = -1
LISTING_FOLDER_FAILED = -2
