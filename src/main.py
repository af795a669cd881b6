"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.ct_account.api.router import router as account_router
from src.ct_admin.api.router import router as admin_router
from src.ct_cart.api.router import router as cart_router
from src.ct_catalog.api.router import router as product_router
from src.ct_common.database import check_database, engine
from src.ct_common.errors import AppError
from src.ct_common.redis_client import close_redis, redis_available
from src.ct_common.response import error_response_for
from src.ct_dispute.api.router import router as dispute_router
from src.ct_gateway.api.router import router as auth_router
from src.ct_gateway.api.users_router import router as users_router
from src.ct_gateway.middleware.rate_limit import RateLimitMiddleware
from src.ct_gateway.middleware.request_log import RequestLogMiddleware
from src.ct_order.api.router import router as order_router
from src.ct_review.api.router import router as review_router
from src.ct_settlement.api.router import router as settlement_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: PostgreSQL must answer; Redis is optional (rate limiting fails open)."""
    await check_database()
    if not await redis_available():
        logger.warning("Starting without Redis: rate limiting is effectively disabled")
    logger.info(
        "%s started (payout price source: %s)", settings.APP_NAME, settings.PAYOUT_PRICE_SOURCE
    )
    yield
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# Added last = outermost: request ids exist before rate limiting runs
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response_for(exc, getattr(request.state, "request_id", None))
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(account_router, prefix="/api/v1")
app.include_router(product_router, prefix="/api/v1")
app.include_router(cart_router, prefix="/api/v1")
app.include_router(settlement_router, prefix="/api/v1")
app.include_router(order_router, prefix="/api/v1")
app.include_router(review_router, prefix="/api/v1")
app.include_router(dispute_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
