"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from techmarket.api.router import api_router
from techmarket.config import get_settings
from techmarket.db.engine import engine, init_db
from techmarket.errors import MarketplaceError

_settings = get_settings()

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    if not _settings.jwt_secret:
        logger.warning("JWT_SECRET is not set: logins will fail and every token will be rejected")
    yield
    await engine.dispose()


app = FastAPI(
    title="TechMarket",
    description="Marketplace API connecting users with local service technicians.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(api_router)


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Schema violations are client errors: 400 with a readable message per field."""
    errors = [
        f"{'.'.join(str(part) for part in err.get('loc', ()) if part != 'body')}: {err.get('msg')}"
        for err in exc.errors()
    ]
    logger.info("Validation error for %s: %s", request.url.path, errors)
    return JSONResponse(status_code=400, content={"detail": "; ".join(errors) or "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Server error"})


@app.get("/")
async def root():
    return {"message": "API is running"}
