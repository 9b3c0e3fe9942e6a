from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel
from ..core.security import CredentialUser, UserRole


class UserRegister(CamelModel):
    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserLogin(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    role: UserRole
    is_approved: bool
    created_at: Optional[datetime] = None


class UserSummary(CamelModel):
    id: int
    username: str
    email: str


class RegisterResponse(CamelModel):
    token: str
    msg: str
    role: UserRole


class LoginResponse(CamelModel):
    token: str
    msg: str
    role: UserRole
    user: CredentialUser
