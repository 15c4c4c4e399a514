"""FastAPI application entry point.

Run with: uvicorn src.main:app --port 3000

Connection handles (SQLAlchemy engine, Redis client) and the user service are
built inside the lifespan from a Settings object and stored on app.state.
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import Settings, settings
from src.dc_common.database import create_engine, create_schema, create_session_factory
from src.dc_common.errors import AppError
from src.dc_common.redis_client import close_redis, create_redis
from src.dc_common.response import error_response
from src.dc_gateway.api.router import router as status_router
from src.dc_gateway.middleware.request_log import RequestLogMiddleware
from src.dc_users.api.router import router as users_router
from src.dc_users.application.service import UserApplicationService
from src.dc_users.infrastructure import db_models  # noqa: F401  -- registers users table
from src.dc_users.infrastructure.redis_cache import RedisCache

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings | None = None) -> FastAPI:
    cfg = app_settings or settings
    logging.basicConfig(
        level=cfg.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: connect + verify PostgreSQL and Redis. Shutdown: dispose."""
        engine = create_engine(cfg)
        redis = create_redis(cfg)
        try:
            try:
                await redis.ping()
                logger.info("Connected to Redis")
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
                if cfg.AUTO_CREATE_SCHEMA:
                    await create_schema(engine)
                logger.info("Connected to PostgreSQL")
            except Exception:
                logger.exception("Fatal initialization failure")
                raise

            app.state.session_factory = create_session_factory(engine)
            app.state.user_service = UserApplicationService.from_settings(
                cfg, RedisCache(redis)
            )
            logger.info("%s ready", cfg.APP_NAME)
            yield
        finally:
            await engine.dispose()
            await close_redis(redis)

    app = FastAPI(
        title=cfg.APP_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = cfg

    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        resp = error_response(exc.code, exc.message, request=request)
        return JSONResponse(
            status_code=exc.http_status,
            content=resp.model_dump(),
        )

    app.include_router(status_router)
    app.include_router(users_router)
    return app


app = create_app()
