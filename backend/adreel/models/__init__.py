"""
Pydantic models for API requests and responses, plus shared status enums.
"""

from .status import ExportJobStatus, PipelineStage, StageStatus, ALLOWED_TRANSITIONS
from .campaigns import (
    VariationInput,
    CampaignRequest,
    CampaignSummary,
    CampaignResponse,
)
from .jobs import (
    ExportJobRequest,
    BatchExportRequest,
    ExportJobPayload,
    ExportJobAccepted,
    BatchJobEntry,
    BatchExportAccepted,
    ExportJobList,
)

__all__ = [
    # Status
    "ExportJobStatus",
    "PipelineStage",
    "StageStatus",
    "ALLOWED_TRANSITIONS",
    # Campaigns
    "VariationInput",
    "CampaignRequest",
    "CampaignSummary",
    "CampaignResponse",
    # Export jobs
    "ExportJobRequest",
    "BatchExportRequest",
    "ExportJobPayload",
    "ExportJobAccepted",
    "BatchJobEntry",
    "BatchExportAccepted",
    "ExportJobList",
]
