import logging
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from src.api.error import ClientError, client_error_handler
from src.api.routes import admin_revenue, orders, points

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    if config.ENABLE_SENTRY and config.DSN_SENTRY:
        import sentry_sdk

        sentry_sdk.init(
            dsn=config.DSN_SENTRY,
            environment=config.SENTRY_ENVIRONMENT,
            traces_sample_rate=0.1,
        )

    app = FastAPI(title="Points Ledger & Escrow Service", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.ENABLE_LOGGING_MIDDLEWARE:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(f"{request.method} {request.url.path} - Error: {e}")
                raise
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms")
            return response

    app.add_exception_handler(ClientError, client_error_handler)

    app.include_router(points.router, prefix=config.API_PREFIX)
    app.include_router(orders.router, prefix=config.API_PREFIX)
    app.include_router(orders.cron_router, prefix=config.API_PREFIX)
    app.include_router(admin_revenue.router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
