from fastapi import Request, status
from fastapi.responses import JSONResponse
import hmac
import structlog
from analytics_engine.core.config import settings

logger = structlog.get_logger()

# Paths reachable without the shared secret
PUBLIC_PATHS = {"/", "/health"}


def is_authorized(header_value: str | None) -> bool:
    """Constant-time comparison of the Authorization header with the configured secret"""
    if header_value is None:
        return False
    return hmac.compare_digest(header_value.encode(), settings.api_auth.encode())


async def auth_middleware(request: Request, call_next):
    """
    Shared-secret authentication

    The raw Authorization header must equal the configured API_AUTH value.
    """
    if request.url.path in PUBLIC_PATHS:
        return await call_next(request)

    if not is_authorized(request.headers.get("Authorization")):
        client_ip = request.client.host if request.client else "unknown"
        logger.warning("unauthorized_request", path=request.url.path, client_ip=client_ip)

        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"status": status.HTTP_401_UNAUTHORIZED, "error": "Unauthorized."}
        )

    return await call_next(request)
