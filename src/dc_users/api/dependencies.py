"""FastAPI dependencies for dc_users routes."""

from fastapi import Request

from src.dc_users.application.service import UserApplicationService


def get_user_service(request: Request) -> UserApplicationService:
    """Coordinator built by the lifespan and stored on app.state."""
    return request.app.state.user_service
