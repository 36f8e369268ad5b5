"""
Export Job Manager - asynchronous design exports with poll-based status.

Jobs are created synchronously (visible as QUEUED before any work starts),
processed by one background task each, raced against a timeout and finally
swept after the retention window. Every mutation goes through
``_transition``/``_save`` so the durable mirror never lags the table.
"""

import asyncio
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, UTC
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from adreel.config import (
    EXPORT_JOB_PROGRESS_PROCESSING,
    EXPORT_JOB_RETENTION_HOURS,
    EXPORT_JOB_SWEEP_INTERVAL_SECONDS,
    EXPORT_JOB_TIMEOUT_SECONDS,
)
from adreel.core import (
    ExportTimeoutError,
    InvalidJobTransitionError,
    JobAlreadyScheduledError,
    JobNotFoundError,
    get_logger,
    set_job_id,
)
from adreel.models.status import ExportJobStatus
from adreel.services.infrastructure.storage import ExportJobStore

logger = get_logger(__name__, component="export_jobs")

NO_URLS_MESSAGE = "Export completed but no download URLs returned"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_iso(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return datetime.min.replace(tzinfo=UTC)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def generate_job_id(moment: Optional[datetime] = None) -> str:
    """``exp_<epoch ms>_<8 hex>``"""
    moment = moment or _utc_now()
    return f"exp_{int(moment.timestamp() * 1000)}_{secrets.token_hex(4)}"


@dataclass
class ExportOutcome:
    download_urls: List[str] = field(default_factory=list)
    thumbnail_url: Optional[str] = None


ExportFn = Callable[[str, str, str], Awaitable[ExportOutcome]]


@dataclass
class ExportJob:
    job_id: str
    design_id: str
    campaign_name: str = "export"
    status: ExportJobStatus = ExportJobStatus.QUEUED
    progress: int = 0
    download_urls: List[str] = field(default_factory=list)
    thumbnail_url: Optional[str] = None
    error: Optional[str] = None
    created_at: str = field(default_factory=lambda: _iso(_utc_now()))
    updated_at: str = field(default_factory=lambda: _iso(_utc_now()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jobId": self.job_id,
            "designId": self.design_id,
            "campaignName": self.campaign_name,
            "status": self.status.value,
            "progress": self.progress,
            "downloadUrls": list(self.download_urls),
            "thumbnailUrl": self.thumbnail_url,
            "error": self.error,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportJob":
        now = _iso(_utc_now())
        return cls(
            job_id=data["jobId"],
            design_id=data.get("designId", ""),
            campaign_name=data.get("campaignName") or "export",
            status=ExportJobStatus(data.get("status", ExportJobStatus.QUEUED.value)),
            progress=int(data.get("progress", 0)),
            download_urls=list(data.get("downloadUrls") or []),
            thumbnail_url=data.get("thumbnailUrl"),
            error=data.get("error"),
            created_at=data.get("createdAt", now),
            updated_at=data.get("updatedAt", now),
        )


class ExportJobManager:
    """Owns the export job table and the background tasks that work on it."""

    def __init__(
        self,
        store: Optional[ExportJobStore] = None,
        *,
        timeout_seconds: float = EXPORT_JOB_TIMEOUT_SECONDS,
        retention_hours: float = EXPORT_JOB_RETENTION_HOURS,
        sweep_interval_seconds: float = EXPORT_JOB_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._store = store
        self.timeout_seconds = timeout_seconds
        self.retention = timedelta(hours=retention_hours)
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock

        self._jobs: Dict[str, ExportJob] = {}
        self._tasks: Dict[str, asyncio.Task] = {}

        self._load()

    # ------------------------------------------------------------------
    # Persistence

    def _load(self) -> None:
        if self._store is None:
            return
        for job_id, data in self._store.load():
            try:
                job = ExportJob.from_dict({**data, "jobId": job_id})
            except (KeyError, ValueError, TypeError) as e:
                logger.warning("Skipping unreadable export job", extra={"export_job": job_id, "error": str(e)})
                continue
            self._jobs[job_id] = job

        abandoned = [job.job_id for job in self._jobs.values() if not job.status.is_terminal()]
        if abandoned:
            # Not resumed: the credential and export function are gone with the old process.
            logger.warning(
                "Export jobs left unfinished by a previous run; treat as abandoned",
                extra={"job_ids": abandoned},
            )
        logger.info("Export jobs loaded", extra={"count": len(self._jobs)})

    def _save(self) -> None:
        if self._store is None:
            return
        try:
            self._store.save((job_id, job.to_dict()) for job_id, job in self._jobs.items())
        except OSError as e:
            logger.error("Failed to persist export jobs", extra={"error": str(e)})

    def flush(self) -> None:
        self._save()

    # ------------------------------------------------------------------
    # Table operations

    def create_job(self, design_id: str, campaign_name: str = "export") -> ExportJob:
        now = self._clock()
        job = ExportJob(
            job_id=generate_job_id(now),
            design_id=design_id,
            campaign_name=campaign_name or "export",
            created_at=_iso(now),
            updated_at=_iso(now),
        )
        while job.job_id in self._jobs:
            job.job_id = generate_job_id(now)
        self._jobs[job.job_id] = job
        self._save()
        logger.info("Export job created", extra={"export_job": job.job_id, "design_id": design_id})
        return job

    def get_job(self, job_id: str) -> Optional[ExportJob]:
        return self._jobs.get(job_id)

    def require_job(self, job_id: str) -> ExportJob:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def list_jobs(self, status: Optional[ExportJobStatus] = None, limit: Optional[int] = None) -> List[ExportJob]:
        """Jobs newest first; ties on creation time fall back to job id"""
        jobs = [job for job in self._jobs.values() if status is None or job.status is status]
        jobs.sort(key=lambda job: (_parse_iso(job.created_at), job.job_id), reverse=True)
        return jobs[:limit] if limit is not None else jobs

    def delete_job(self, job_id: str) -> Optional[ExportJob]:
        job = self._jobs.pop(job_id, None)
        if job is not None:
            self._save()
        return job

    def _transition(self, job_id: str, target: ExportJobStatus, **changes: Any) -> ExportJob:
        job = self.require_job(job_id)
        if not job.status.can_transition_to(target):
            raise InvalidJobTransitionError(job_id, job.status.value, target.value)
        job.status = target
        for name, value in changes.items():
            setattr(job, name, value)
        job.updated_at = _iso(self._clock())
        self._save()
        return job

    def start_processing(self, job_id: str) -> ExportJob:
        return self._transition(job_id, ExportJobStatus.PROCESSING, progress=EXPORT_JOB_PROGRESS_PROCESSING)

    def complete_job(self, job_id: str, download_urls: Sequence[str], thumbnail_url: Optional[str] = None) -> ExportJob:
        job = self._transition(
            job_id,
            ExportJobStatus.COMPLETED,
            progress=100,
            download_urls=list(download_urls),
            thumbnail_url=thumbnail_url,
        )
        logger.info("Export job completed", extra={"export_job": job_id, "url_count": len(job.download_urls)})
        return job

    def fail_job(self, job_id: str, error: str) -> ExportJob:
        job = self._transition(job_id, ExportJobStatus.FAILED, error=error)
        logger.error("Export job failed", extra={"export_job": job_id, "error": error})
        return job

    # ------------------------------------------------------------------
    # Background processing

    async def process_job(self, job_id: str, credential: str, export_fn: ExportFn) -> None:
        job = self.get_job(job_id)
        if job is None:
            logger.error("Cannot process unknown export job", extra={"export_job": job_id})
            return
        if job.status is not ExportJobStatus.QUEUED:
            logger.warning(
                "Export job is not queued, ignoring",
                extra={"export_job": job_id, "status": job.status.value},
            )
            return

        set_job_id(job_id)
        try:
            self.start_processing(job_id)
            try:
                outcome = await asyncio.wait_for(
                    export_fn(credential, job.design_id, job.campaign_name),
                    timeout=self.timeout_seconds,
                )
            except asyncio.TimeoutError:
                self.fail_job(job_id, str(ExportTimeoutError(self.timeout_seconds)))
                return
            except Exception as e:
                self.fail_job(job_id, str(e) or e.__class__.__name__)
                return

            urls = list(outcome.download_urls) if outcome else []
            if not urls:
                self.fail_job(job_id, NO_URLS_MESSAGE)
                return
            self.complete_job(job_id, urls, outcome.thumbnail_url)
        except InvalidJobTransitionError as e:
            logger.warning("Export result discarded", extra={"export_job": job_id, "error": str(e)})
        finally:
            set_job_id(None)

    def schedule(self, job_id: str, credential: str, export_fn: ExportFn, delay: float = 0.0) -> asyncio.Task:
        """Start background processing of a queued job, optionally after ``delay`` seconds"""
        self.require_job(job_id)
        existing = self._tasks.get(job_id)
        if existing is not None and not existing.done():
            raise JobAlreadyScheduledError(job_id)

        async def _run() -> None:
            if delay > 0:
                await asyncio.sleep(delay)
            await self.process_job(job_id, credential, export_fn)

        task = asyncio.create_task(_run(), name=f"export-job-{job_id}")
        self._tasks[job_id] = task
        task.add_done_callback(lambda finished: self._task_done(job_id, finished))
        return task

    def _task_done(self, job_id: str, task: asyncio.Task) -> None:
        if self._tasks.get(job_id) is task:
            del self._tasks[job_id]
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "Export job task crashed",
                extra={"export_job": job_id, "error": str(task.exception())},
            )

    def schedule_batch(
        self,
        design_ids: Sequence[str],
        campaign_name: str,
        credential: str,
        export_fn: ExportFn,
        stagger: float = 2.0,
    ) -> List[ExportJob]:
        """Create every job first, then start job ``i`` after ``i * stagger`` seconds"""
        jobs = [self.create_job(design_id, campaign_name) for design_id in design_ids]
        for index, job in enumerate(jobs):
            self.schedule(job.job_id, credential, export_fn, delay=index * stagger)
        logger.info("Batch export scheduled", extra={"count": len(jobs), "stagger_seconds": stagger})
        return jobs

    @property
    def active_tasks(self) -> Dict[str, asyncio.Task]:
        return dict(self._tasks)

    # ------------------------------------------------------------------
    # Retention

    def sweep_expired(self, now: Optional[datetime] = None) -> int:
        cutoff = (now or self._clock()) - self.retention
        expired = [job_id for job_id, job in self._jobs.items() if _parse_iso(job.created_at) < cutoff]
        for job_id in expired:
            del self._jobs[job_id]
        if expired:
            self._save()
            logger.info("Swept expired export jobs", extra={"count": len(expired)})
        return len(expired)

    async def run_periodic_sweep(self) -> None:
        while True:
            try:
                self.sweep_expired()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.error("Export job sweep failed", extra={"error": str(exc)}, exc_info=True)
            await asyncio.sleep(self.sweep_interval_seconds)

    async def shutdown(self) -> None:
        """Cancel in-flight tasks and flush the table"""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._save()
