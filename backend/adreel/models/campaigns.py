"""
API schemas for campaign runs
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VariationInput(BaseModel):
    """One explicit variation: creative field values plus an optional script"""
    model_config = ConfigDict(populate_by_name=True)

    creative_data: Dict[str, Any] = Field(default_factory=dict, alias="creativeData")
    voiceover_script: Optional[str] = Field(default=None, alias="voiceoverScript")


class CampaignRequest(BaseModel):
    """Request to run a campaign.

    ``variations`` wins over ``voiceover_scripts``; with neither, one
    variation is built from ``base_creative_data`` alone.
    """
    model_config = ConfigDict(populate_by_name=True)

    # a plain label: no path separators, not just dots
    name: str = Field(min_length=1, pattern=r"^[^/\\]*[^/\\.][^/\\]*$")
    template_id: str = Field(min_length=1, alias="templateId")
    base_creative_data: Dict[str, Any] = Field(default_factory=dict, alias="baseCreativeData")
    voiceover_scripts: Optional[List[str]] = Field(default=None, alias="voiceoverScripts")
    variations: Optional[List[VariationInput]] = None
    voice: Optional[str] = None
    export_format: Optional[str] = Field(default=None, alias="exportFormat")
    export_quality: Optional[str] = Field(default=None, alias="exportQuality")


class CampaignSummary(BaseModel):
    total: int
    successful: int
    failed: int


class CampaignResponse(BaseModel):
    campaign: str
    templateId: str
    directory: str
    creatives: List[Dict[str, Any]]
    summary: CampaignSummary
