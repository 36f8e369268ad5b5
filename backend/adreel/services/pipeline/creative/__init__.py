"""Creative pipeline - per-variation stages, campaign orchestration and manifests."""

from .results import CreativeResult, StageOutcome, Variation
from .manifest import MANIFEST_FILENAME, CampaignManifest, write_variant_error
from .pipeline import ERROR_LOGGED_STAGES, CreativePipeline, StageContext
from .campaign import CampaignOrchestrator, CampaignSpec, build_variations

__all__ = [
    "CreativeResult",
    "StageOutcome",
    "Variation",
    "MANIFEST_FILENAME",
    "CampaignManifest",
    "write_variant_error",
    "ERROR_LOGGED_STAGES",
    "CreativePipeline",
    "StageContext",
    "CampaignOrchestrator",
    "CampaignSpec",
    "build_variations",
]
