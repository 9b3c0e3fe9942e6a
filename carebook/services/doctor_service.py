from sqlalchemy.orm import Session, joinedload
from typing import List, Tuple
import logging

from ..models.doctor_profile import DoctorProfile
from ..core.exceptions import NotFoundError
from ..schemas.doctor import DoctorProfileUpdate

logger = logging.getLogger(__name__)

class DoctorService:
    def __init__(self, db: Session):
        self.db = db

    def upsert_profile(self, user_id: int, profile_data: DoctorProfileUpdate) -> Tuple[DoctorProfile, bool]:
        """Create or update the doctor's own profile. Returns (profile, created)."""
        profile = self.db.query(DoctorProfile).filter(
            DoctorProfile.user_id == user_id
        ).first()
        created = profile is None

        if created:
            # Normally created at registration; new profiles still need approval
            profile = DoctorProfile(user_id=user_id, is_approved=False)
            self.db.add(profile)

        # is_approved belongs to the admin approval flow
        profile.specialty = profile_data.specialty
        profile.clinic_name = profile_data.clinic_name
        profile.address = profile_data.address
        profile.phone = profile_data.phone

        self.db.commit()
        self.db.refresh(profile)

        logger.info(f"Doctor {user_id} {'created' if created else 'updated'} profile {profile.id}")
        return profile, created

    def get_profile(self, user_id: int) -> DoctorProfile:
        profile = self.db.query(DoctorProfile).options(
            joinedload(DoctorProfile.user)
        ).filter(DoctorProfile.user_id == user_id).first()

        if not profile:
            raise NotFoundError("Doctor profile not found")
        return profile

    def list_approved(self) -> List[DoctorProfile]:
        return self.db.query(DoctorProfile).options(
            joinedload(DoctorProfile.user)
        ).filter(DoctorProfile.is_approved == True).order_by(DoctorProfile.id).all()  # noqa: E712
