"""FastAPI application for CellPilot."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cellpilot import __version__
from cellpilot.api.routes import access, analysis, formula, health
from cellpilot.utils.config import get_config
from cellpilot.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

ROUTERS = (health.router, analysis.router, formula.router, access.router)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    setup_logging(level=config.get("api.log_level", "INFO"))
    logger.info(
        f"CellPilot API {__version__} starting "
        f"(sample_size={config.get('analysis.sample_size')}, "
        f"max_formula_length={config.get('formula.max_length')})"
    )
    yield
    logger.info("CellPilot API stopped")


def create_app() -> FastAPI:
    """Build the FastAPI app with all routers registered.

    Returns:
        FastAPI app
    """
    app = FastAPI(
        title="CellPilot API",
        description="Spreadsheet structure analysis, cross-sheet formulas and feature access",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_config().get("api.cors_origins", ["*"]),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "internal_server_error", "detail": str(exc)},
        )

    @app.get("/")
    async def index():
        """List the available endpoints."""
        return {
            "name": "CellPilot API",
            "version": __version__,
            "endpoints": {
                "health": "/health",
                "analyze": "/api/v1/analyze",
                "formula": "/api/v1/formula",
                "access": "/api/v1/access/{feature}",
                "docs": "/docs",
            },
        }

    for router in ROUTERS:
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_config()
    uvicorn.run(app, host=config.get("api.host", "0.0.0.0"), port=config.get("api.port", 8000))
