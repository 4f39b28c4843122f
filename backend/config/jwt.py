from errors.auth_errors import InvalidTokenError
from datetime import datetime, timedelta, timezone
from schemas.auth_schema import SessionClaims
from jose import JWTError, jwt
from pydantic import ValidationError
from typing import Optional
import logging
import os

logger = logging.getLogger("app.config.jwt")

# Get environment variables
JWT_SECRET = os.getenv("JWT_SECRET", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRATION_MINUTES = int(os.getenv("JWT_EXPIRATION_MINUTES", str(24 * 60)))

if not JWT_SECRET:
    logger.fatal("JWT_SECRET is not set in environment")
    raise RuntimeError("JWT_SECRET missing")

logger.info("JWT configuration loaded successfully")


# Issue a signed session token
def create_access_token(subject: str, extra_claims: Optional[dict] = None, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes = JWT_EXPIRATION_MINUTES))

    to_encode = dict(extra_claims or {})
    to_encode.update({"sub": subject, "iat": now, "exp": expire})
    return jwt.encode(to_encode, JWT_SECRET, algorithm = JWT_ALGORITHM)


# Verify signature and expiry, return the identity carried by the token
def decode_access_token(token: str) -> SessionClaims:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms = [JWT_ALGORITHM])
    except JWTError as e:
        logger.warning("Token rejected: %s", e)
        raise InvalidTokenError()

    try:
        return SessionClaims(user_id = payload.get("sub"), role = payload.get("role"))
    except ValidationError:
        logger.warning("Token carries malformed claims")
        raise InvalidTokenError()
