"""
Application factory.

Run with:  uvicorn gigaeats.app.main:create_app --factory
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from redis.asyncio import Redis

from gigaeats.app.api import order_history
from gigaeats.app.core.database import create_engine, create_sessionmaker
from gigaeats.app.core.logging import setup_logging, get_logger
from gigaeats.app.core.metrics import PrometheusMiddleware, get_metrics_response
from gigaeats.app.core.settings import Settings, get_settings

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    # JSON logs in production, console output while developing
    setup_logging(
        log_level=settings.LOG_LEVEL,
        json_format=settings.is_production,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_engine(settings)
        app.state.sessionmaker = create_sessionmaker(engine)
        app.state.redis = Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            decode_responses=True,
        )
        logger.info(
            "Application configuration loaded",
            environment=settings.ENVIRONMENT,
            db_host=settings.DB_HOST,
            redis_host=settings.REDIS_HOST,
            timezone=settings.TIMEZONE,
            missing_timestamp_policy=settings.MISSING_TIMESTAMP_POLICY,
        )
        try:
            yield
        finally:
            await app.state.redis.aclose()
            await engine.dispose()
            logger.info("Application shut down")

    app = FastAPI(title="GigaEats Order History", lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(PrometheusMiddleware)
    app.include_router(order_history.router, prefix="/order-history", tags=["order-history"])

    @app.get("/health")
    async def health():
        return {"status": "ok", "environment": settings.ENVIRONMENT}

    @app.get("/metrics")
    async def metrics():
        return get_metrics_response()

    return app
