"""
Campaign routes - run a campaign and return its manifest.
"""

from fastapi import APIRouter, Depends, HTTPException

from adreel.core import CredentialMissingError, get_logger
from adreel.models import CampaignRequest, CampaignResponse
from adreel.services.infrastructure.orchestration.lifecycle import ServiceContainer
from adreel.services.use_cases import RunCampaignUseCase

from .dependencies import get_container

router = APIRouter(tags=["campaigns"])
logger = get_logger(__name__, component="campaign_routes")


@router.post("/api/campaigns", response_model=CampaignResponse)
async def run_campaign(request: CampaignRequest, container: ServiceContainer = Depends(get_container)):
    """Run every variation of a campaign; responds once the manifest is written"""
    try:
        return await RunCampaignUseCase(container).execute(request)
    except CredentialMissingError as e:
        raise HTTPException(status_code=503, detail=str(e))
