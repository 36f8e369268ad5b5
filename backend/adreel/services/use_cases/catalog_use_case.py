"""
Catalog use cases - brand templates and narration voices available to a
campaign.
"""

from typing import Any, Dict, List, Optional

from adreel.core import DEFAULT_VOICE, RECOMMENDED_VOICES, CredentialMissingError, get_logger
from adreel.services.infrastructure.orchestration.lifecycle import ServiceContainer

from .base import UseCase

logger = get_logger(__name__, component="catalog_use_case")


class TemplateCatalogUseCase(UseCase[str, Dict[str, Any]]):
    """Template discovery: ``list_templates`` for the catalog, ``execute`` for one template's fields"""

    def __init__(self, container: ServiceContainer):
        self.container = container

    def _credential(self) -> str:
        credential = self.container.design_credential
        if not credential:
            raise CredentialMissingError("CANVA_ACCESS_TOKEN")
        return credential

    async def list_templates(self) -> List[Dict[str, Any]]:
        return await self.container.generator.list_templates(self._credential())

    async def execute(self, template_id: str) -> Dict[str, Any]:
        fields = await self.container.generator.get_template_fields(self._credential(), template_id)
        return {"templateId": template_id, "fields": fields}


class VoiceCatalogUseCase(UseCase[Optional[str], Dict[str, Any]]):
    """Recommended voices, plus the account's own voices when a key is configured"""

    def __init__(self, container: ServiceContainer):
        self.container = container

    async def execute(self, request: Optional[str] = None) -> Dict[str, Any]:
        credential = self.container.settings.elevenlabs_api_key
        voices: List[Dict[str, Any]] = []
        if credential:
            voices = await self.container.voiceover.list_voices(credential)
        else:
            logger.info("ELEVENLABS_API_KEY not configured, listing recommended voices only")

        return {
            "default": self.container.settings.voice or DEFAULT_VOICE,
            "recommended": [{"key": key, **voice} for key, voice in RECOMMENDED_VOICES.items()],
            "voices": voices,
        }
