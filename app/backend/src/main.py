"""Entrypoint for the FastAPI application."""

import os
from datetime import datetime, timezone

from dotenv import load_dotenv

# Load .env locally only (hosted deployments inject env vars)
env_path = os.path.join(os.path.dirname(__file__), "../.env")
if os.path.exists(env_path):
    load_dotenv(dotenv_path=os.path.abspath(env_path))

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import health, webhook
from .core.config import get_settings
from .core.logging import configure_logging
from .reports import NoModulesAvailable

LOGGER = structlog.get_logger(__name__)


async def no_modules_handler(request: Request, exc: NoModulesAvailable) -> JSONResponse:
    LOGGER.error("no_modules_available", path=request.url.path, fallback=exc.fallback_module)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "error": str(exc),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def create_app() -> FastAPI:
    configure_logging()
    settings = get_settings()
    app = FastAPI(title="Farm Report Dispatcher", version=settings.service_version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(NoModulesAvailable, no_modules_handler)

    app.include_router(health.router)
    app.include_router(webhook.router)

    return app


app = create_app()
