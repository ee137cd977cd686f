"""
TierCheck API -- FastAPI application entry point.
Solana wallet reward-tier eligibility service.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tiercheck.config import config
from tiercheck.errors import InvalidSecret, PersistenceFailure, TierCheckError
from tiercheck.models.common import ErrorResponse
from tiercheck.routes import eligibility
from tiercheck.utils.logger import logger
from tiercheck.database import init_database, close_database, get_pool
from tiercheck.cache import init_redis, close_redis, get_redis
from tiercheck.services.eligibility_service import EligibilityService
from tiercheck.services.history_service import HistoryFetcher
from tiercheck.services.record_service import RecordService
from tiercheck.services.solana_service import SolanaService


def build_eligibility_service(ledger: SolanaService) -> EligibilityService:
    fetcher = HistoryFetcher(
        ledger,
        page_size=config.SIGNATURE_PAGE_SIZE,
        cache_ttl=config.TX_COUNT_CACHE_TTL,
    )
    return EligibilityService(
        fetcher,
        RecordService(config.DATA_FILE),
        history_timeout=config.HISTORY_TIMEOUT_SECONDS,
        store_secret_input=config.STORE_SECRET_INPUT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle. Database and Redis are optional -- each failure degrades gracefully."""
    logger.info("TierCheck API starting up...")

    # Database (graceful -- falls back to the JSON record file)
    try:
        await init_database(config.DATABASE_URL)
    except Exception as e:
        logger.warning(f"Database init failed (recording to {config.DATA_FILE}): {e}")

    # Redis (graceful -- works without the tx-count cache)
    try:
        await init_redis(config.REDIS_URL)
    except Exception as e:
        logger.warning(f"Redis init failed (will run without cache): {e}")

    ledger = SolanaService(
        config.SOLANA_RPC_URL,
        commitment=config.SOLANA_COMMITMENT,
        requests_per_second=config.RPC_REQUESTS_PER_SECOND,
        timeout=config.RPC_TIMEOUT_SECONDS,
        max_retries=config.RPC_MAX_RETRIES,
    )
    app.state.eligibility_service = build_eligibility_service(ledger)

    logger.info("TierCheck API ready.")
    yield

    logger.info("TierCheck API shutting down...")
    try:
        await ledger.close()
    except Exception as e:
        logger.warning(f"Solana client cleanup error: {e}")
    try:
        await close_redis()
    except Exception as e:
        logger.warning(f"Redis cleanup error: {e}")
    try:
        await close_database()
    except Exception as e:
        logger.warning(f"Database cleanup error: {e}")
    logger.info("TierCheck API stopped.")


app = FastAPI(
    title="TierCheck API",
    description="Solana wallet reward-tier eligibility -- transaction history scan and tier classification.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in config.CORS_ORIGINS],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(eligibility.router, tags=["eligibility"])


@app.get("/health")
async def health():
    """Health check with dependency status."""
    return {
        "status": "ok",
        "service": "tiercheck-api",
        "version": "0.1.0",
        "dependencies": {
            "database": "connected" if get_pool() is not None else "disconnected",
            "redis": "connected" if get_redis() is not None else "disconnected",
        },
    }


def _error_response(exc: TierCheckError, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=message, error=exc.error_code).model_dump(),
    )


@app.exception_handler(PersistenceFailure)
async def persistence_exception_handler(request: Request, exc: PersistenceFailure):
    logger.error(f"Persistence failure: {exc.message}")
    return _error_response(exc, "Failed to save data")


@app.exception_handler(TierCheckError)
async def tiercheck_exception_handler(request: Request, exc: TierCheckError):
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {exc.message}")
    else:
        logger.info(f"Rejected request ({exc.error_code}): {exc.message}")
    return _error_response(exc, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """/check-eligibility always answers 400 INVALID_SECRET, never 422"""
    if request.url.path != eligibility.CHECK_ELIGIBILITY_PATH:
        return await request_validation_exception_handler(request, exc)

    # body 누락 / seed 누락 -> required, 그 외 (숫자 등 비문자열 seed) -> invalid
    only_missing = all(err.get("type") == "missing" for err in exc.errors())
    message = "Seed phrase or private key is required" if only_missing else "Invalid seed phrase or private key"
    return _error_response(InvalidSecret(message), message)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Eligibility check error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(message="Error checking eligibility", error="INTERNAL_ERROR").model_dump(),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tiercheck.main:app",
        host="0.0.0.0",
        port=config.PORT,
        reload=config.DEBUG,
    )
