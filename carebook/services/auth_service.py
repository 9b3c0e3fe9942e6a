from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from ..models.user import User
from ..models.doctor_profile import DoctorProfile
from ..core.config import settings
from ..core.exceptions import ConflictError, NotFoundError
from ..core.lifecycle import role_for_email, initial_approval
from ..core.security import (
    verify_password, get_password_hash, create_user_token,
    AuthenticationError, UserRole
)
from ..schemas.auth import UserLogin, UserRegister

logger = logging.getLogger(__name__)

# Same message for unknown email and wrong password
INVALID_CREDENTIALS = "Invalid Credentials"

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(self, user_data: UserRegister) -> User:
        """Register a new user, with an empty profile for doctors."""
        existing_user = self.db.query(User).filter(
            or_(User.email == user_data.email, User.username == user_data.username)
        ).first()

        if existing_user:
            logger.warning(f"Registration rejected, duplicate identity: {user_data.email}")
            raise ConflictError("User already exists")

        role = role_for_email(user_data.email, settings.DOCTOR_EMAIL_SUFFIX)

        new_user = User(
            username=user_data.username,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            role=role,
            is_approved=initial_approval(role)
        )
        try:
            self.db.add(new_user)

            if role == UserRole.DOCTOR:
                # Flushed for its id; user and profile commit together
                self.db.flush()
                self.db.add(DoctorProfile(
                    user_id=new_user.id,
                    specialty=settings.DEFAULT_SPECIALTY,
                    is_approved=False
                ))

            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            self.db.rollback()
            raise ConflictError("User already exists")

        self.db.refresh(new_user)
        logger.info(f"Registered user {new_user.id} ({new_user.username}) as {role.value}")

        return new_user

    def authenticate_user(self, login_data: UserLogin) -> User:
        """Check credentials and return the matching user."""
        user = self.db.query(User).filter(
            User.email == login_data.email
        ).first()

        if not user or not verify_password(login_data.password, user.password_hash):
            logger.warning(f"Failed login for {login_data.email}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info(f"User {user.id} logged in")
        return user

    def issue_token(self, user: User) -> str:
        return create_user_token(user.id, user.role, user.username, user.is_approved)

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def ensure_admin(self, username: str, email: str, password: str) -> User:
        """Create the bootstrap admin account unless it already exists."""
        user = self.db.query(User).filter(User.email == email).first()
        if user:
            return user

        user = User(
            username=username,
            email=email,
            password_hash=get_password_hash(password),
            role=UserRole.ADMIN,
            is_approved=initial_approval(UserRole.ADMIN)
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Created admin account {user.id} ({user.username})")

        return user
