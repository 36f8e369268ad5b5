"""
API schemas for export job endpoints

Field names follow the camelCase job table so status payloads and the
persisted table read the same.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ExportJobRequest(BaseModel):
    designId: Optional[str] = None
    campaignName: Optional[str] = None


class BatchExportRequest(BaseModel):
    designIds: List[str] = Field(default_factory=list)
    campaignName: Optional[str] = None


class ExportJobPayload(BaseModel):
    """Full job record as returned by status polling"""
    jobId: str
    designId: str
    campaignName: str
    status: str
    progress: int
    downloadUrls: List[str] = Field(default_factory=list)
    thumbnailUrl: Optional[str] = None
    error: Optional[str] = None
    createdAt: str
    updatedAt: str


class ExportJobAccepted(BaseModel):
    success: bool = True
    jobId: str
    status: str
    message: str


class BatchJobEntry(BaseModel):
    jobId: str
    designId: str
    status: str


class BatchExportAccepted(BaseModel):
    success: bool = True
    total: int
    jobs: List[BatchJobEntry]
    message: str


class ExportJobList(BaseModel):
    success: bool = True
    total: int
    jobs: List[ExportJobPayload]
