from sqlalchemy.orm import Session
from typing import List, Tuple
import logging

from ..models.user import User
from ..models.doctor_profile import DoctorProfile
from ..models.appointment import Appointment
from ..core.exceptions import NotFoundError
from ..core.security import AuthorizationError, UserRole

logger = logging.getLogger(__name__)

class AdminService:
    def __init__(self, db: Session):
        self.db = db

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def approve_doctor(self, user_id: int) -> Tuple[User, DoctorProfile]:
        """Approve a doctor; the user and profile flags are committed together."""
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user or user.role != UserRole.DOCTOR:
            raise NotFoundError("Doctor not found or not a doctor role")

        profile = self.db.query(DoctorProfile).filter(
            DoctorProfile.user_id == user_id
        ).first()
        if not profile:
            raise NotFoundError("Doctor profile not found")

        user.is_approved = True
        profile.is_approved = True
        self.db.commit()
        self.db.refresh(user)
        self.db.refresh(profile)

        logger.info(f"Approved doctor {user.id} ({user.username})")
        return user, profile

    def delete_user(self, user_id: int, acting_user_id: int) -> None:
        """Delete a user and everything that hangs off it in one transaction."""
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")

        if user.role == UserRole.ADMIN:
            raise AuthorizationError("Cannot delete an admin user.")
        if user.id == acting_user_id:
            raise AuthorizationError("You cannot delete your own account.")

        role = user.role
        if role == UserRole.DOCTOR:
            self.db.query(DoctorProfile).filter(
                DoctorProfile.user_id == user.id
            ).delete(synchronize_session=False)
            removed = self.db.query(Appointment).filter(
                Appointment.doctor_id == user.id
            ).delete(synchronize_session=False)
        else:
            removed = self.db.query(Appointment).filter(
                Appointment.customer_id == user.id
            ).delete(synchronize_session=False)

        self.db.delete(user)
        self.db.commit()

        logger.info(
            f"Deleted {role.value} {user_id} by admin {acting_user_id}, "
            f"removed {removed} appointment(s)"
        )
