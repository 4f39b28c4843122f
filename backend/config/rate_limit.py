from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from fastapi.responses import JSONResponse
from fastapi import Request, status
from slowapi import Limiter
import logging
import os

logger = logging.getLogger("app.config.rate_limit")

# Get environment variables
LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "20/15 minutes")
RATE_LIMIT_STORAGE_URI = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")

# Requests are counted per client address
limiter = Limiter(
    key_func = get_remote_address,
    storage_uri = RATE_LIMIT_STORAGE_URI,
    strategy = "fixed-window",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit exceeded for %s on %s: %s", get_remote_address(request), request.url.path, exc.detail)
    return JSONResponse(
        status_code = status.HTTP_429_TOO_MANY_REQUESTS,
        content = {"detail": "Too many login attempts, please try again later"},
    )
