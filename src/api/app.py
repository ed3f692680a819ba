"""FastAPI application factory"""

import logging
import time
import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from src.api.error import ClientError
from src.api.routes import discounts, eligibility

logger = logging.getLogger(__name__)


def _init_sentry(config) -> None:
    sentry_sdk.init(dsn=config.DSN_SENTRY, environment=config.SENTRY_ENVIRONMENT)
    logger.info("Sentry initialized")


def create_app(config, lifespan=None) -> FastAPI:
    logging.basicConfig(level=config.LOG_LEVEL)

    if config.ENABLE_SENTRY and config.DSN_SENTRY:
        _init_sentry(config)

    app = FastAPI(
        title="School Eligibility Engine",
        description="Payment and registration eligibility, and automated discount issuance",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ClientError)
    async def client_error_handler(request: Request, exc: ClientError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    if config.ENABLE_LOGGING_MIDDLEWARE:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            start = time.time()
            response = await call_next(request)
            elapsed_ms = int((time.time() - start) * 1000)
            logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)")
            return response

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    app.include_router(eligibility.router)
    app.include_router(discounts.router)

    return app
