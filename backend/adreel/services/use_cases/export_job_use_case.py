"""
ExportJobUseCase - create, schedule and query asynchronous export jobs.

Jobs are created and returned before any export work starts; the work runs
on tasks owned by the job manager.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from adreel.config import EXPORT_JOB_LIST_LIMIT
from adreel.core import CredentialMissingError
from adreel.models.status import ExportJobStatus
from adreel.services.infrastructure.orchestration import ExportJob
from adreel.services.infrastructure.orchestration.lifecycle import ServiceContainer

from .base import UseCase


@dataclass
class ExportJobInput:
    design_id: str
    campaign_name: Optional[str] = None


class ExportJobUseCase(UseCase[ExportJobInput, ExportJob]):
    def __init__(self, container: ServiceContainer):
        self.container = container
        self.job_manager = container.job_manager

    def _credential(self) -> str:
        credential = self.container.design_credential
        if not credential:
            raise CredentialMissingError("CANVA_ACCESS_TOKEN")
        return credential

    async def execute(self, request: ExportJobInput) -> ExportJob:
        """Create one job and start exporting it in the background"""
        credential = self._credential()
        job = self.job_manager.create_job(request.design_id, request.campaign_name or "export")
        self.job_manager.schedule(job.job_id, credential, self.container.create_export_fn())
        return job

    async def execute_batch(self, design_ids: Sequence[str], campaign_name: Optional[str] = None) -> List[ExportJob]:
        credential = self._credential()
        return self.job_manager.schedule_batch(
            design_ids,
            campaign_name or "export",
            credential,
            self.container.create_export_fn(),
            stagger=self.container.settings.batch_export_stagger_seconds,
        )

    def get_job(self, job_id: str) -> ExportJob:
        return self.job_manager.require_job(job_id)

    def list_jobs(self, status: Optional[str] = None, limit: int = EXPORT_JOB_LIST_LIMIT) -> List[ExportJob]:
        status_filter = ExportJobStatus(status) if status else None
        return self.job_manager.list_jobs(status_filter, limit=limit)

