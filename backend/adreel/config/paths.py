"""
Paths configuration

Centralized directory paths for the application. Both output roots can be
moved with environment variables.
"""

import os
from pathlib import Path

APP_DIR = Path(__file__).parent.parent
BACKEND_DIR = APP_DIR.parent
CAMPAIGN_OUTPUT_DIR = Path(os.getenv("CAMPAIGN_OUTPUT_DIR") or BACKEND_DIR / "campaigns")
DATA_DIR = Path(os.getenv("DATA_DIR") or BACKEND_DIR / "data")
EXPORT_JOBS_FILE = DATA_DIR / "export-jobs.json"

__all__ = ["APP_DIR", "BACKEND_DIR", "CAMPAIGN_OUTPUT_DIR", "DATA_DIR", "EXPORT_JOBS_FILE"]
