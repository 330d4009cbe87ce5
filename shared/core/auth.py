import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from shared.utils.app_status_code import AppStatusCode
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import AdminToken

security = HTTPBearer(auto_error=False)


def create_access_token(data: dict):
    payload = data.copy()
    expires = datetime.now(timezone.utc) + \
        timedelta(days=settings.ADMIN_JWT_EXPIRE_DAYS)
    payload['exp'] = expires

    return jwt.encode(payload, settings.ADMIN_JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def authenticate_admin(email: Optional[str], password: Optional[str]) -> str:
    """Check the configured admin credentials and issue a token."""
    if not settings.admin_auth_configured:
        return error_response(
            message="Admin authentication is not configured.",
            status_code=AppStatusCode.CONFIGURATION_MISSING,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    email_ok = secrets.compare_digest(
        (email or "").encode(), settings.ADMIN_EMAIL.encode())
    password_ok = secrets.compare_digest(
        (password or "").encode(), settings.ADMIN_PASSWORD.encode())
    if not (email_ok and password_ok):
        return error_response(
            message="Invalid credentials.",
            status_code=AppStatusCode.AUTHENTICATION_CREDENTIALS_INVALID,
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    return create_access_token({"role": "admin", "email": settings.ADMIN_EMAIL})


def verify_token(token: str) -> AdminToken:
    """Verify and decode an admin JWT."""
    try:
        payload = jwt.decode(token, settings.ADMIN_JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return AdminToken(**payload)
    except (JWTError, ValueError):
        return error_response(
            message="Unauthorized.",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_INVALID,
            http_status=status.HTTP_401_UNAUTHORIZED
        )


def require_admin(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> AdminToken:
    if credentials is None or not settings.ADMIN_JWT_SECRET:
        return error_response(
            message="Unauthorized.",
            status_code=AppStatusCode.AUTHENTICATION_UNAUTHORIZED,
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    admin = verify_token(credentials.credentials)
    if admin.role != "admin":
        return error_response(
            message="Unauthorized.",
            status_code=AppStatusCode.AUTHENTICATION_UNAUTHORIZED,
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    return admin
