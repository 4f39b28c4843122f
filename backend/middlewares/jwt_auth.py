# Bearer token authentication and role checks, both run as dependencies before any endpoint logic

from errors.auth_errors import AuthenticationRequiredError, InvalidTokenError, InsufficientPermissionsError
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from fastapi import Depends, HTTPException, status
from schemas.auth_schema import SessionClaims
from config.jwt import decode_access_token
from models.user_model import UserRole
from typing import Optional
import logging

logger = logging.getLogger("app.middlewares.jwt")

bearer_scheme = HTTPBearer(auto_error = False)


def authenticate(credentials: Optional[HTTPAuthorizationCredentials]) -> SessionClaims:
    if credentials is None or not credentials.credentials:
        raise AuthenticationRequiredError()
    return decode_access_token(credentials.credentials)


def authorize(claims: SessionClaims, allowed_roles: tuple) -> SessionClaims:
    if claims.role not in allowed_roles:
        raise InsufficientPermissionsError(claims.role.value, [r.value for r in allowed_roles])
    return claims


# Any authenticated caller
def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> SessionClaims:
    try:
        claims = authenticate(credentials)
    except AuthenticationRequiredError as e:
        logger.info("Request without bearer token")
        raise HTTPException(
            status_code = status.HTTP_401_UNAUTHORIZED,
            detail = str(e),
            headers = {"WWW-Authenticate": "Bearer"},
        )
    except InvalidTokenError as e:
        raise HTTPException(status_code = status.HTTP_403_FORBIDDEN, detail = str(e))

    logger.debug("Authenticated user id=%s role=%s", claims.user_id, claims.role.value)
    return claims


# Callers whose role is in the allow-list
def require_roles(*roles: UserRole):
    def role_checker(current_user: SessionClaims = Depends(get_current_user)) -> SessionClaims:
        try:
            return authorize(current_user, roles)
        except InsufficientPermissionsError as e:
            logger.warning("User id=%s with role=%s denied, required=%s", current_user.user_id, e.user_role, e.required_roles)
            raise HTTPException(
                status_code = status.HTTP_403_FORBIDDEN,
                detail = {
                    "message": str(e),
                    "user_role": e.user_role,
                    "required_roles": e.required_roles,
                },
            )

    return role_checker
