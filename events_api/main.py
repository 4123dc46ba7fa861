from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from events_api.api.errors import register_exception_handlers
from events_api.api.router import router as api_router
from events_api.core.config import settings
from events_api.core.logging import configure_logging
from events_api.db import SessionLocal, init_db
from events_api.middleware.rate_limit import RateLimitMiddleware
from events_api.middleware.request_id import RequestIdMiddleware
from events_api.middleware.security_headers import SecurityHeadersMiddleware
from events_api.services.accounts_service import AccountService

configure_logging()

logger = structlog.get_logger(__name__)


def bootstrap() -> None:
    """Create tables and the default accounts."""
    init_db()
    db = SessionLocal()
    try:
        AccountService(db).ensure_default_accounts()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("startup", env=settings.env)
    bootstrap()
    yield
    logger.info("shutdown")


app = FastAPI(title="Events API", lifespan=lifespan)

# Starlette runs the LAST added middleware FIRST (outermost):
# RequestId wraps everything, RateLimit sits closest to the routes.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location", "X-Request-ID"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIdMiddleware)

register_exception_handlers(app)

Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(api_router)
