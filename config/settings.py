"""
Configuration settings for the Suggestion Box.

Centralized configuration for the record store, analytics and CLI.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("SUGGESTION_BOX_DATA_ROOT", str(PROJECT_ROOT / "data")))
EXPORT_ROOT = Path(os.getenv("SUGGESTION_BOX_EXPORT_ROOT", str(PROJECT_ROOT / "output")))

# Storage keys (one JSON document per key)
SUGGESTIONS_KEY = "suggestions_db"
USERS_KEY = "users_db"
CURRENT_USER_KEY = "current_user"
SETTINGS_KEY = "user_settings"
VOTES_KEY = "user_votes"  # Legacy key, only cleared on full reset
COMMENTS_KEY = "comments_db"
NOTIFICATIONS_KEY = "notifications_db"

# Live refresh
POLL_INTERVAL_SECONDS = float(os.getenv("SUGGESTION_BOX_POLL_INTERVAL", "2.0"))

# Authentication
MIN_PASSWORD_LENGTH = 6
ADMIN_DEFAULT_DEPARTMENT = "Manufacturing"

# Analytics
DEFAULT_TIME_WINDOW = "30days"  # "7days", "30days", "90days" or "1year"
TOP_TAGS_LIMIT = 8
TOP_CONTRIBUTORS_LIMIT = 3

DEPARTMENTS = [
    "Quality Control",
    "Sales & Client Relations",
    "Logistics",
    "Marketing",
    "Manufacturing",
]

CATEGORIES = [
    "Process Improvement",
    "Technology",
    "Customer Experience",
    "Cost Reduction",
    "Safety",
    "Environment",
    "Communication",
    "Training",
    "Other",
]

# Demo data
DEMO_SEED_COUNT = 60
DEMO_SEED_WINDOW_DAYS = 90

# Logging
LOG_LEVEL = os.getenv("SUGGESTION_BOX_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "suggestion_box.log"
