"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LIST_LIMIT = 500
INITIAL_RECORD_VERSION = 1
MAX_NOTES_LENGTH = 2000
