"""
Use Cases package - Business logic layer.

Modules:
- base: Base use case abstract class
- campaign_use_case: Run a campaign end to end
- export_job_use_case: Asynchronous export jobs
- catalog_use_case: Template and voice discovery
"""

from .base import UseCase
from .campaign_use_case import RunCampaignUseCase, to_campaign_spec
from .export_job_use_case import ExportJobInput, ExportJobUseCase
from .catalog_use_case import TemplateCatalogUseCase, VoiceCatalogUseCase

__all__ = [
    "UseCase",
    "RunCampaignUseCase",
    "to_campaign_spec",
    "ExportJobInput",
    "ExportJobUseCase",
    "TemplateCatalogUseCase",
    "VoiceCatalogUseCase",
]
