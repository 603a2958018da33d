# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets (SAS tokens, web app URLs). Use a local, gitignored .env.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "PLANNER_APP_NAME": "App display name, used as the console prompt (default: planner).",
    "PLANNER_LOG_LEVEL": "Console logging level (default: WARNING; the log file always gets DEBUG).",
    # Paths (gitignored)
    "PLANNER_DATA_DIR": "Local data directory (default: .local/planner).",
    "PLANNER_TASKS_CSV_PATH": "Local-first task file (default: <data_dir>/tasks.csv).",
    # Schema
    "PLANNER_EXTENDED_FIELDS": "Write category/priority columns (true/false, default: true).",
    # Spreadsheet sync (Apps Script web app)
    "PLANNER_SHEETS_URL": "Deployed web app URL; empty disables the spreadsheet mirror.",
    # Blob sync
    "PLANNER_BLOB_ACCOUNT": "Storage account name; empty disables the blob mirror (unless emulator).",
    "PLANNER_BLOB_CONTAINER": "Blob container (default: tasks).",
    "PLANNER_BLOB_FILENAME": "Blob name (default: tasks.csv).",
    "PLANNER_BLOB_SAS_TOKEN": "Shared access signature query string with read/write rights.",
    "PLANNER_BLOB_USE_EMULATOR": "Use the local emulator at http://localhost:10000 (true/false).",
    "PLANNER_BLOB_API_VERSION": "x-ms-version header (default: 2020-10-02).",
    # Remote sync
    "PLANNER_HTTP_TIMEOUT_SECONDS": "Timeout for spreadsheet/blob requests (default: 10).",
}
