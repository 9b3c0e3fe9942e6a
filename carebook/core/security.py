from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import HTTPException, status
from fastapi.security import APIKeyHeader
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from enum import Enum

from .config import settings

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Credential header; missing tokens are reported by the guard, not by FastAPI
token_header = APIKeyHeader(name=settings.TOKEN_HEADER, auto_error=False)

class UserRole(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    CUSTOMER = "customer"

class CredentialUser(BaseModel):
    """Identity snapshot embedded in an access token."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    role: UserRole
    username: str
    is_approved: bool = False

class TokenPayload(BaseModel):
    sub: Optional[str] = None
    user: Optional[CredentialUser] = None
    exp: Optional[int] = None
    token_type: Optional[str] = None

# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

# JWT utilities
def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({
        "exp": expire,
        "token_type": "access"
    })

    encoded_jwt = jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )
    return encoded_jwt

def verify_token(token: str) -> Optional[TokenPayload]:
    """Verify and decode JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )

        return TokenPayload(**payload)

    except (JWTError, ValueError):
        return None

def create_user_token(
    user_id: int,
    role: UserRole,
    username: str,
    is_approved: bool,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create an access token carrying the user's identity snapshot."""
    credential = CredentialUser(
        id=user_id, role=role, username=username, is_approved=is_approved
    )
    token_data = {
        "sub": str(user_id),
        "user": credential.model_dump(mode="json", by_alias=True),
    }
    return create_access_token(token_data, expires_delta)

# Security exceptions
class AuthenticationError(HTTPException):
    def __init__(self, detail: str = "Token is not valid"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
        )

class AuthorizationError(HTTPException):
    def __init__(self, detail: str = "Access denied"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )
