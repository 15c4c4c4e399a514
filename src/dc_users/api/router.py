"""Users API router: create and list.

All endpoints return ApiResponse; success_response copies the request ID
assigned by RequestLogMiddleware. Errors are AppError subclasses raised by
the service and rendered by the app-level exception handler.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.dc_common.database import get_db_session
from src.dc_common.response import ApiResponse, success_response
from src.dc_users.api.dependencies import get_user_service
from src.dc_users.application.schemas import CreateUserRequest, UserItem
from src.dc_users.application.service import UserApplicationService

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Create user",
)
async def create_user(
    request: Request,
    body: CreateUserRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserApplicationService, Depends(get_user_service)],
) -> ApiResponse:
    user = await service.create_user(db, body.name, body.email)
    return success_response(
        UserItem.from_domain(user).model_dump(), "User created", request=request
    )


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="List users",
)
async def list_users(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[UserApplicationService, Depends(get_user_service)],
) -> ApiResponse:
    users = await service.list_users(db)
    return success_response(
        [UserItem.from_domain(u).model_dump() for u in users], request=request
    )
