"""
FastAPI Main Application
Loads the scenario catalog, builds the engines and serves classification routes
"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from capital_flow.config import settings
from capital_flow.core.logging import get_logger, setup_logging
from capital_flow.infrastructure.db.database import init_db, close_db
from capital_flow.domain.services.config_engine import ConfigEngine
from capital_flow.domain.services.scenario_matcher import ScenarioMatcher
from capital_flow.domain.services.regime_context_engine import RegimeContextEngine
from capital_flow.services.classification_service import FlowClassificationService
from capital_flow.api.routes import flow, scenarios, health

setup_logging(settings.LOG_LEVEL, debug=settings.DEBUG)
logger = get_logger(__name__)


# Global instances
config_engine: ConfigEngine | None = None
classification_service: FlowClassificationService | None = None


def build_service(engine: ConfigEngine) -> FlowClassificationService:
    """Wire engines from a loaded configuration"""
    analyzer_settings = engine.analyzer_settings
    return FlowClassificationService(
        matcher=ScenarioMatcher(engine.catalog, analyzer_settings),
        context_engine=RegimeContextEngine(engine.catalog, analyzer_settings),
        settings=analyzer_settings,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles startup and shutdown
    """
    global config_engine, classification_service

    logger.info("Starting Capital Flow Tracker (%s)", settings.APP_ENV)

    await init_db()
    logger.info("Database initialized")

    config_engine = ConfigEngine(settings.CONFIG_DIR)
    config_engine.load_all()
    classification_service = build_service(config_engine)
    logger.info(
        "Window %d days, retention %d days",
        config_engine.analyzer_settings.window_size,
        config_engine.analyzer_settings.retention_days,
    )

    yield

    logger.info("Shutting down")
    await close_db()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Capital Flow Tracker",
        description="Classify daily BTC / Gold / USDJPY / EURUSD signals into capital-flow scenarios",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(health.router, tags=["Health"])
    app.include_router(flow.router, prefix="/api/v1/flow", tags=["Classification"])
    app.include_router(scenarios.router, prefix="/api/v1/scenarios", tags=["Scenarios"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "capital_flow.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
