import pytest
from unittest.mock import AsyncMock

from adreel.core import CredentialMissingError
from adreel.services.infrastructure.orchestration.lifecycle import ServiceContainer
from adreel.services.use_cases import TemplateCatalogUseCase, VoiceCatalogUseCase


@pytest.fixture
def container(test_settings, fake_generator, fake_voiceover):
    return ServiceContainer(test_settings, generator=fake_generator, voiceover=fake_voiceover)


@pytest.mark.asyncio
class TestTemplateCatalogUseCase:
    async def test_list_templates(self, container):
        assert await TemplateCatalogUseCase(container).list_templates() == [{"id": "TPL", "title": "Spring promo"}]

    async def test_template_fields(self, container):
        result = await TemplateCatalogUseCase(container).execute("TPL")

        assert result["templateId"] == "TPL"
        assert set(result["fields"]) == {"headline", "hero"}

    async def test_requires_design_credential(self, container, test_settings):
        test_settings.canva_access_token = None
        with pytest.raises(CredentialMissingError):
            await TemplateCatalogUseCase(container).list_templates()


@pytest.mark.asyncio
class TestVoiceCatalogUseCase:
    async def test_includes_account_voices(self, container):
        catalog = await VoiceCatalogUseCase(container).execute()

        assert catalog["default"] == "sarah"
        assert catalog["voices"] == [{"voice_id": "v1", "name": "Remote"}]
        sarah = next(voice for voice in catalog["recommended"] if voice["key"] == "sarah")
        assert sarah["id"] == "EXAVITQu4vr4xnSDxMaL"

    async def test_without_key_lists_recommended_only(self, container, test_settings):
        test_settings.elevenlabs_api_key = None
        container.voiceover.list_voices = AsyncMock()

        catalog = await VoiceCatalogUseCase(container).execute()

        assert catalog["voices"] == []
        assert len(catalog["recommended"]) > 0
        container.voiceover.list_voices.assert_not_awaited()
