"""FastAPI application entrypoint. No business logic; only wiring, startup checks and middleware."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import router as v1_router
from app.core.config import get_settings, settings
from app.core.session import require_auth_secret

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Refuse to start when session tokens cannot be signed (AUTH_ENABLED=true)."""
    current = get_settings()
    if current.AUTH_ENABLED:
        require_auth_secret(current)
    else:
        logger.warning("AUTH_ENABLED is false; login and registration will fail until AUTH_SECRET is set")
    yield


app = FastAPI(
    title="People Directory API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "People Directory API"}
