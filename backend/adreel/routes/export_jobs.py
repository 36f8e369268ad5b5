"""
Export job routes.

Creation responds 202 as soon as the job exists; clients poll
``GET /api/export-jobs/{job_id}`` until the job is completed or failed.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from adreel.config import EXPORT_JOB_LIST_LIMIT
from adreel.core import CredentialMissingError, JobNotFoundError, validate_job_id
from adreel.models import (
    BatchExportAccepted,
    BatchExportRequest,
    BatchJobEntry,
    ExportJobAccepted,
    ExportJobList,
    ExportJobPayload,
    ExportJobRequest,
)
from adreel.services.infrastructure.orchestration.lifecycle import ServiceContainer
from adreel.services.use_cases import ExportJobInput, ExportJobUseCase

from .dependencies import get_container

router = APIRouter(tags=["export-jobs"])


@router.post("/api/export-jobs", status_code=202, response_model=ExportJobAccepted)
async def create_export_job(request: ExportJobRequest, container: ServiceContainer = Depends(get_container)):
    if not request.designId:
        raise HTTPException(status_code=400, detail="designId is required")

    try:
        job = await ExportJobUseCase(container).execute(ExportJobInput(request.designId, request.campaignName))
    except CredentialMissingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ExportJobAccepted(
        jobId=job.job_id,
        status=job.status.value,
        message="Export job created. Poll /api/export-jobs/{jobId} for status.",
    )


@router.get("/api/export-jobs/{job_id}", response_model=ExportJobPayload)
async def get_export_job(job_id: str, container: ServiceContainer = Depends(get_container)):
    if not validate_job_id(job_id):
        raise HTTPException(status_code=400, detail="Invalid job ID format")
    try:
        job = ExportJobUseCase(container).get_job(job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
    return job.to_dict()


@router.get("/api/export-jobs", response_model=ExportJobList)
async def list_export_jobs(status: Optional[str] = None, container: ServiceContainer = Depends(get_container)):
    try:
        jobs = ExportJobUseCase(container).list_jobs(status, limit=EXPORT_JOB_LIST_LIMIT)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown status '{status}'")
    return {"success": True, "total": len(jobs), "jobs": [job.to_dict() for job in jobs]}


@router.post("/api/batch-export-jobs", status_code=202, response_model=BatchExportAccepted)
async def create_batch_export_jobs(request: BatchExportRequest, container: ServiceContainer = Depends(get_container)):
    if not request.designIds:
        raise HTTPException(status_code=400, detail="designIds array is required")

    try:
        jobs = await ExportJobUseCase(container).execute_batch(request.designIds, request.campaignName)
    except CredentialMissingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return BatchExportAccepted(
        total=len(jobs),
        jobs=[BatchJobEntry(jobId=job.job_id, designId=job.design_id, status=job.status.value) for job in jobs],
        message=f"{len(jobs)} export jobs created. Poll each jobId for status.",
    )
