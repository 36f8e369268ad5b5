"""Job orchestration - export jobs, their exporters and the service container."""

from .job_manager import ExportJob, ExportJobManager, ExportOutcome, generate_job_id
from .exporters import create_cdn_exporter

__all__ = [
    "ExportJob",
    "ExportJobManager",
    "ExportOutcome",
    "generate_job_id",
    "create_cdn_exporter",
]
