from fastapi import Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from typing import Optional, List

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.security import (
    token_header, verify_token, AuthenticationError,
    AuthorizationError, UserRole, CredentialUser
)
from ..models.user import User
from ..services.auth_service import AuthService

async def get_current_user_token(
    token: Optional[str] = Depends(token_header)
) -> CredentialUser:
    """Extract and verify the access token from the credential header.

    The embedded identity is trusted for the token's lifetime; role changes
    are not seen until the user logs in again.
    """
    if not token:
        raise AuthenticationError("No token, authorization denied")

    token_payload = verify_token(token)
    if not token_payload or token_payload.token_type != "access" or not token_payload.user:
        raise AuthenticationError("Token is not valid")

    return token_payload.user

async def get_current_user(
    credential: CredentialUser = Depends(get_current_user_token),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from database."""
    return AuthService(db).get_user(credential.id)

# Role-based access control dependencies
def require_role(allowed_roles: List[UserRole], detail: str):
    """Create a dependency that requires specific user roles."""
    async def role_checker(
        credential: CredentialUser = Depends(get_current_user_token)
    ) -> CredentialUser:
        if credential.role not in allowed_roles:
            raise AuthorizationError(detail)
        return credential

    return role_checker

# Specific role dependencies
async def get_admin_user(
    credential: CredentialUser = Depends(
        require_role([UserRole.ADMIN], "Access denied, not an admin")
    )
) -> CredentialUser:
    """Require admin role."""
    return credential

async def get_doctor_user(
    credential: CredentialUser = Depends(
        require_role([UserRole.DOCTOR], "Access denied, not a doctor")
    )
) -> CredentialUser:
    """Require doctor role."""
    return credential

async def get_customer_user(
    credential: CredentialUser = Depends(
        require_role([UserRole.CUSTOMER, UserRole.ADMIN], "Access denied, not a customer")
    )
) -> CredentialUser:
    """Require customer or admin role."""
    return credential

# Rate limiting dependency
async def rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Basic rate limiting for authentication endpoints."""
    if not settings.RATE_LIMIT_ENABLED:
        return

    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{request.url.path}:{client_ip}"

    current_requests = redis_client.get(key)
    if current_requests is None:
        redis_client.setex(key, settings.RATE_LIMIT_WINDOW_SECONDS, 1)
    else:
        if int(current_requests) >= settings.RATE_LIMIT_REQUESTS:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )
        redis_client.incr(key)
