"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rrsp_planner import __version__
from rrsp_planner.api.dependencies import get_engine
from rrsp_planner.api.routes import health_router, planner_router
from rrsp_planner.calculators.errors import PlannerError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup: refuse to serve without a usable bracket table
    try:
        engine = get_engine()
    except PlannerError as e:
        logger.error("Cannot start planner engine: %s", e)
        raise
    logger.info("Planner engine ready with %d tax brackets", len(engine.brackets))
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="RRSP Planner API",
        description="Contribution limit, tax reduction and growth projections",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PlannerError)
    async def planner_exception_handler(
        request: Request, exc: PlannerError
    ) -> JSONResponse:
        """Report calculations the engine refused to run."""
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "code": exc.code},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(planner_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
