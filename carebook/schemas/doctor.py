from datetime import datetime
from typing import Optional

from pydantic import Field

from .auth import UserResponse, UserSummary
from .common import CamelModel


class DoctorProfileUpdate(CamelModel):
    specialty: str = Field(..., min_length=1)
    clinic_name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None


class DoctorProfileResponse(CamelModel):
    id: int
    user_id: int
    specialty: str
    clinic_name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    is_approved: bool
    created_at: Optional[datetime] = None


class DoctorOwner(UserSummary):
    is_approved: bool


class OwnDoctorProfileResponse(DoctorProfileResponse):
    user: DoctorOwner


class ApprovedDoctorResponse(DoctorProfileResponse):
    user: UserSummary


class DoctorProfileEnvelope(CamelModel):
    msg: str
    profile: DoctorProfileResponse


class DoctorApprovalResponse(CamelModel):
    msg: str
    user: UserResponse
    doctor_profile: DoctorProfileResponse
