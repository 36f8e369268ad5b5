"""
Catalog routes - brand templates, their autofill fields and narration voices.
"""

from fastapi import APIRouter, Depends, HTTPException

from adreel.core import CredentialMissingError, IntegrationError, get_logger
from adreel.services.infrastructure.orchestration.lifecycle import ServiceContainer
from adreel.services.use_cases import TemplateCatalogUseCase, VoiceCatalogUseCase

from .dependencies import get_container

router = APIRouter(tags=["catalog"])
logger = get_logger(__name__, component="catalog_routes")


@router.get("/api/templates")
async def list_templates(container: ServiceContainer = Depends(get_container)):
    try:
        templates = await TemplateCatalogUseCase(container).list_templates()
    except CredentialMissingError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except IntegrationError as e:
        logger.error("Template listing failed", extra={"error": str(e)})
        raise HTTPException(status_code=502, detail=str(e))
    return {"total": len(templates), "templates": templates}


@router.get("/api/templates/{template_id}")
async def get_template_fields(template_id: str, container: ServiceContainer = Depends(get_container)):
    """Autofill fields of one brand template"""
    try:
        return await TemplateCatalogUseCase(container).execute(template_id)
    except CredentialMissingError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except IntegrationError as e:
        logger.error("Template field discovery failed", extra={"template_id": template_id, "error": str(e)})
        status = 404 if e.status_code == 404 else 502
        raise HTTPException(status_code=status, detail=str(e))


@router.get("/api/voices")
async def list_voices(container: ServiceContainer = Depends(get_container)):
    try:
        return await VoiceCatalogUseCase(container).execute()
    except IntegrationError as e:
        logger.error("Voice listing failed", extra={"error": str(e)})
        raise HTTPException(status_code=502, detail=str(e))
