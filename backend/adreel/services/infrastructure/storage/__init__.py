"""Storage - durable mirror of the export job table."""

from .job_store import ExportJobStore

__all__ = ["ExportJobStore"]
