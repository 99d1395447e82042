# config.py
"""
Runtime settings. Every value can be overridden via environment variables
in deployment.
"""

import os

# History store
HISTORY_CAPACITY = 50
STORE_BACKEND = os.getenv("PHISHGUARD_STORE_BACKEND", "json")  # json | sqlite | memory
HISTORY_FILE = os.getenv("PHISHGUARD_HISTORY_FILE", "phishguard_history.json")
DB_FILE = os.getenv("PHISHGUARD_DB", "phishguard.db")
DATABASE_URL = f"sqlite:///{DB_FILE}"

# Default size of the "recent scans" breakdown
RECENT_WINDOW = int(os.getenv("PHISHGUARD_RECENT_WINDOW", "10"))

# API
API_KEY = os.getenv("PHISHGUARD_API_KEY", None)
REDIS_URL = os.getenv("REDIS_URL")
PORT = int(os.getenv("PORT", "5050"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
