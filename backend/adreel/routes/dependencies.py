"""
Route dependencies - resolve the service container attached at startup.
"""

from fastapi import HTTPException, Request

from adreel.services.infrastructure.orchestration.lifecycle import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(status_code=503, detail="Services are not ready")
    return container
