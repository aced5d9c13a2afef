from __future__ import annotations

# Interchange format
CSV_HEADER = ("folder", "title", "prompt", "context")
CSV_DELIMITER = ","
CSV_QUOTE = '"'
FOLDER_SEPARATOR = "/"

# Menu context values; "both" is the fallback.
CONTEXT_PAGE = "page"
CONTEXT_SELECTION = "selection"
CONTEXT_BOTH = "both"
VALID_CONTEXTS = (CONTEXT_PAGE, CONTEXT_SELECTION, CONTEXT_BOTH)
DEFAULT_CONTEXT = CONTEXT_BOTH

# Size ceilings
MAX_FILE_BYTES = 10 * 1024 * 1024
MAX_TEXT_CHARS = 5 * 1024 * 1024
MAX_ROW_CHARS = 50_000
SCAN_SLACK = 1000

# Field ceilings
MAX_FOLDER_CHARS = 200
MAX_TITLE_CHARS = 100
MAX_PROMPT_CHARS = 10_000

# Reporting caps
MAX_REPORTED_ISSUES = 10
MAX_AGGREGATE_REASONS = 5

# Tree defaults
DEFAULT_IMPORT_FOLDER = "Import"
IMPORT_FOLDER_DESCRIPTION = "Imported menus"
CUSTOM_FOLDER_ID = "custom-folder"
CUSTOM_FOLDER_NAME = "Custom"
CUSTOM_FOLDER_DESCRIPTION = "User-defined menus"

EXPORT_FILENAME_PREFIX = "menupad-menus"

# Persistence
DEFAULT_MENUS_PATH = "~/.menupad/menus.json"
