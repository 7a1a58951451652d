from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import structlog
import time
import uvicorn

from analytics_engine.core.config import settings
from analytics_engine.core.errors import AnalyticsEngineError, StoreUnavailable
from analytics_engine.core.redis_client import create_redis_client
from analytics_engine.api import analytics, events, stats
from analytics_engine.middleware.auth import auth_middleware
from analytics_engine.services.store import PartitionedEventStore

# Configure structured logging
structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
    ]
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle events"""
    logger.info("application_startup", app_name=settings.app_name, store_prefix=settings.store_prefix)
    redis_client = create_redis_client(settings.redis_url)
    app.state.store = PartitionedEventStore(redis_client, settings.store_prefix)
    app.state.started_at = time.time()
    yield
    redis_client.close()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan
)


# Added before log_requests, which then wraps it and also logs rejected requests
app.middleware("http")(auth_middleware)


# Middleware for logging requests
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        "request_completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(duration * 1000, 2)
    )

    return response


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": status_code, "error": message})


@app.exception_handler(AnalyticsEngineError)
async def engine_error_handler(request: Request, exc: AnalyticsEngineError):
    if isinstance(exc, StoreUnavailable):
        logger.error(
            "store_unavailable",
            operation=exc.operation,
            partition_key=exc.partition_key,
            path=request.url.path
        )
    else:
        logger.warning("request_failed", error=str(exc), path=request.url.path)
    return error_response(exc.status_code, str(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(
        ".".join(str(p) for p in err["loc"] if p != "body") or "body" for err in exc.errors()
    )
    logger.warning("invalid_input", path=request.url.path, fields=fields)
    return error_response(status.HTTP_400_BAD_REQUEST, f"Invalid input: {fields}")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(exc.status_code, "Route not found.")
    return error_response(exc.status_code, str(exc.detail))


# Include routers
app.include_router(events.router)
app.include_router(analytics.router)
app.include_router(stats.router)


@app.get("/health")
def health_check(request: Request):
    """Health check endpoint"""
    store = getattr(request.app.state, "store", None)
    if store is None or not store.ping():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "app": settings.app_name}
        )
    return {"status": "healthy", "app": settings.app_name}


@app.get("/")
async def root():
    """Root endpoint"""
    return {"status": status.HTTP_200_OK, "data": "Analytics Engine is running."}


def run():
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
