from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import CredentialUser
from ...api.deps import get_doctor_user
from ...services.doctor_service import DoctorService
from ...services.appointment_service import AppointmentService
from ...schemas.common import MAX_ID
from ...schemas.doctor import (
    DoctorProfileUpdate, DoctorProfileEnvelope, DoctorProfileResponse,
    OwnDoctorProfileResponse
)
from ...schemas.appointment import (
    AppointmentStatusUpdate, AppointmentEnvelope, AppointmentResponse,
    DoctorAppointmentResponse
)

router = APIRouter(prefix="/doctor", tags=["Doctor"])

@router.post("/profile", response_model=DoctorProfileEnvelope)
async def upsert_profile(
    profile_data: DoctorProfileUpdate,
    response: Response,
    db: Session = Depends(get_db),
    doctor: CredentialUser = Depends(get_doctor_user)
):
    """Create or update the caller's practice profile."""
    profile, created = DoctorService(db).upsert_profile(doctor.id, profile_data)

    if created:
        response.status_code = status.HTTP_201_CREATED
    return DoctorProfileEnvelope(
        msg="Doctor profile created" if created else "Doctor profile updated",
        profile=DoctorProfileResponse.model_validate(profile)
    )

@router.get("/profile/me", response_model=OwnDoctorProfileResponse)
async def get_own_profile(
    db: Session = Depends(get_db),
    doctor: CredentialUser = Depends(get_doctor_user)
):
    """Get the caller's profile along with their approval state."""
    profile = DoctorService(db).get_profile(doctor.id)
    return OwnDoctorProfileResponse.model_validate(profile)

@router.get("/appointments", response_model=List[DoctorAppointmentResponse])
async def list_appointments(
    emergency_first: bool = Query(False, alias="emergencyFirst"),
    db: Session = Depends(get_db),
    doctor: CredentialUser = Depends(get_doctor_user)
):
    """List the caller's appointments by date and time.

    Pass ``emergencyFirst=true`` to move emergency appointments to the top.
    """
    appointments = AppointmentService(db).list_for_doctor(doctor.id, emergency_first)
    return [DoctorAppointmentResponse.model_validate(a) for a in appointments]

@router.put("/appointments/{appointment_id}/status", response_model=AppointmentEnvelope)
async def update_appointment_status(
    update: AppointmentStatusUpdate,
    appointment_id: int = Path(..., le=MAX_ID),
    db: Session = Depends(get_db),
    doctor: CredentialUser = Depends(get_doctor_user)
):
    """Change an appointment's status and/or reschedule it."""
    appointment = AppointmentService(db).update_status(doctor.id, appointment_id, update)

    return AppointmentEnvelope(
        msg="Appointment updated successfully",
        appointment=AppointmentResponse.model_validate(appointment)
    )
