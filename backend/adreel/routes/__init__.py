"""
Routes module - contains all API route handlers
"""

from .campaigns import router as campaigns_router
from .catalog import router as catalog_router
from .export_jobs import router as export_jobs_router

__all__ = [
    "campaigns_router",
    "catalog_router",
    "export_jobs_router",
]
