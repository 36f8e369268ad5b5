"""
RunCampaignUseCase - runs a campaign request through the orchestrator.
"""

from typing import Any, Dict

from adreel.core import CredentialMissingError, get_logger
from adreel.models import CampaignRequest
from adreel.services.infrastructure.orchestration.lifecycle import ServiceContainer
from adreel.services.pipeline.creative import CampaignSpec, Variation

from .base import UseCase

logger = get_logger(__name__, component="campaign_use_case")


def to_campaign_spec(request: CampaignRequest) -> CampaignSpec:
    variations = None
    if request.variations:
        variations = [
            Variation(creative_data=item.creative_data, voiceover_script=item.voiceover_script)
            for item in request.variations
        ]
    return CampaignSpec(
        name=request.name,
        template_id=request.template_id,
        base_creative_data=dict(request.base_creative_data),
        voiceover_scripts=request.voiceover_scripts,
        variations=variations,
    )


class RunCampaignUseCase(UseCase[CampaignRequest, Dict[str, Any]]):
    """Run every variation of a campaign and return the manifest"""

    def __init__(self, container: ServiceContainer):
        self.container = container

    async def execute(self, request: CampaignRequest) -> Dict[str, Any]:
        if not self.container.design_credential:
            raise CredentialMissingError("CANVA_ACCESS_TOKEN")

        pipeline = self.container.create_pipeline(
            voice=request.voice,
            export_format=request.export_format,
            export_quality=request.export_quality,
        )
        orchestrator = self.container.create_orchestrator(pipeline)
        manifest = await orchestrator.run(to_campaign_spec(request))
        return manifest.to_dict()
