"""Service status routes (unauthenticated, no store access)."""

from fastapi import APIRouter, Request

router = APIRouter(tags=["status"])


@router.get("/")
async def root(request: Request) -> dict[str, str]:
    return {"status": "ok", "service": request.app.state.settings.APP_NAME}


@router.get("/health")
async def health(request: Request) -> dict[str, str]:
    return {"status": "ok", "service": request.app.state.settings.APP_NAME}
