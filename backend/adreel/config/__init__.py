"""
Application configuration and settings
"""

# Load environment variables from .env file before any path or setting is read
from dotenv import load_dotenv
load_dotenv()

from .paths import (
    APP_DIR,
    BACKEND_DIR,
    CAMPAIGN_OUTPUT_DIR,
    DATA_DIR,
    EXPORT_JOBS_FILE,
)
from .constants import *  # noqa: F401,F403
from .constants import __all__ as _constants_all
from .settings import Settings

__all__ = [
    "APP_DIR",
    "BACKEND_DIR",
    "CAMPAIGN_OUTPUT_DIR",
    "DATA_DIR",
    "EXPORT_JOBS_FILE",
    "Settings",
    *_constants_all,
]
