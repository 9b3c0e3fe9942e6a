from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import get_current_user, rate_limit_check
from ...services.auth_service import AuthService
from ...schemas.auth import (
    UserLogin, UserRegister, UserResponse, RegisterResponse, LoginResponse
)
from ...core.security import CredentialUser
from ...models.user import User

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/register", response_model=RegisterResponse)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Register a new user. Doctor-domain emails become unapproved doctors."""
    auth_service = AuthService(db)
    user = auth_service.register_user(user_data)

    return RegisterResponse(
        token=auth_service.issue_token(user),
        msg="Registration successful!",
        role=user.role
    )

@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Authenticate user and return an access token."""
    auth_service = AuthService(db)
    user = auth_service.authenticate_user(login_data)

    return LoginResponse(
        token=auth_service.issue_token(user),
        msg="Login successful!",
        role=user.role,
        user=CredentialUser(
            id=user.id,
            role=user.role,
            username=user.username,
            is_approved=user.is_approved
        )
    )

@router.get("/user", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user information."""
    return UserResponse.model_validate(current_user)
