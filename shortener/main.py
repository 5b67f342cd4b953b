"""ASGI entry point.

Run with ``uvicorn shortener.main:app``. Builds the FastAPI application,
wires middleware and routers, and turns errors into ``{"detail": ...}``
JSON bodies.
"""

import time

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortener.api import api_router
from shortener.core.config import settings
from shortener.core.logging import setup_logging
from shortener.db.base import engine, init_models
from shortener.middleware.logging import RequestLoggingMiddleware

logger = setup_logging()

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.REQUEST_LOGGING_ENABLED:
    app.add_middleware(RequestLoggingMiddleware)
else:
    logger.info("Request logging is disabled in settings")

app.include_router(api_router)


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Reject malformed bodies with 422 and the field errors."""
    logger.warning(f"Rejected {request.method} {request.url.path}: invalid request body")
    return JSONResponse(
        status_code=422,
        content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Log anything the routes did not handle and answer 500 with an error id."""
    error_id = f"error-{time.time()}"

    logger.bind(
        error_id=error_id,
        url=str(request.url),
        method=request.method,
    ).opt(exception=exc).error("Unhandled exception in {} {}", request.method, request.url.path)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error occurred",
            "error_id": error_id,
            "message": str(exc) if settings.DEBUG else "Internal server error",
        },
    )


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT.value})")

    if settings.DB_CREATE_TABLES:
        await init_models()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}")
    await engine.dispose()
