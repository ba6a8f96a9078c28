import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.deps import engine
from app.api.routers.bookings import router as bookings_router
from app.api.routers.health import router as health_router
from app.api.routers.payments import router as payments_router
from app.api.routers.photos import router as photos_router
from app.api.routers.worker import router as worker_router
from app.config import get_settings
from app.domain.errors import DomainError
from app.infrastructure.db.tables import metadata

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Domain error code -> HTTP status
ERROR_STATUS_CODES: dict[str, int] = {
    "INVALID_WINDOW": 400,
    "INVALID_SIGNATURE": 400,
    "PAYMENT_REJECTED": 402,
    "ACCESS_DENIED": 403,
    "BOOKING_NOT_FOUND": 404,
    "PAYMENT_NOT_FOUND": 404,
    "TRAILER_NOT_FOUND": 404,
    "PHOTO_NOT_FOUND": 404,
    "UNKNOWN_PAYMENT": 404,
    "DEPOSIT_REFUND_NOT_FOUND": 404,
    "SLOT_UNAVAILABLE": 409,
    "INVALID_TRANSITION": 409,
    "OPTIMISTIC_LOCK_ERROR": 409,
    "PAYMENT_ALREADY_COMPLETED": 409,
    "PHOTO_PHASE_CLOSED": 409,
    "SETTLEMENT_FAILED": 502,
    "GATEWAY_UNAVAILABLE": 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if not settings.use_in_memory:
        # Initialize DB tables (for dev/demo purposes)
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
    yield
    # Cleanup
    await engine.dispose()

app = FastAPI(
    title="Trailer Bookings API",
    version="0.1.0",
    lifespan=lifespan
)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    status_code = ERROR_STATUS_CODES.get(exc.code, 400)
    log = logger.warning if status_code < 500 else logger.error
    log(
        "Domain error",
        extra={
            "code": exc.code,
            "path": request.url.path,
            "method": request.method,
            "status_code": status_code,
        },
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
    )


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to prevent stack trace exposure to clients.
    All unhandled exceptions are logged internally and return a generic error message.
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "message": "An unexpected error occurred. Please contact support with the error_id if the issue persists."
        }
    )


app.include_router(health_router, tags=["Health"])
app.include_router(bookings_router, prefix="/api/v1", tags=["Bookings"])
app.include_router(photos_router, prefix="/api/v1", tags=["Photos"])
app.include_router(payments_router, prefix="/api/v1", tags=["Payments"])
app.include_router(worker_router, prefix="/api/v1", tags=["Worker"])
