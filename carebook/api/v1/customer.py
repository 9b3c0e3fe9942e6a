from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import CredentialUser
from ...api.deps import get_customer_user
from ...services.appointment_service import AppointmentService
from ...services.doctor_service import DoctorService
from ...services.payment_service import PaymentGateway, get_payment_gateway
from ...schemas.common import MAX_ID
from ...schemas.doctor import ApprovedDoctorResponse
from ...schemas.appointment import (
    AppointmentCreate, AppointmentEnvelope, AppointmentResponse,
    CustomerAppointmentResponse, PaymentRequest
)

router = APIRouter(prefix="/customer", tags=["Customer"])

@router.get("/doctors", response_model=List[ApprovedDoctorResponse])
async def list_doctors(
    db: Session = Depends(get_db),
    _: CredentialUser = Depends(get_customer_user)
):
    """List approved doctors available for booking."""
    profiles = DoctorService(db).list_approved()
    return [ApprovedDoctorResponse.model_validate(p) for p in profiles]

@router.post(
    "/appointments",
    response_model=AppointmentEnvelope,
    status_code=status.HTTP_201_CREATED
)
async def book_appointment(
    booking: AppointmentCreate,
    db: Session = Depends(get_db),
    customer: CredentialUser = Depends(get_customer_user)
):
    """Request an appointment with an approved doctor."""
    appointment = AppointmentService(db).book(customer.id, booking)

    return AppointmentEnvelope(
        msg='Appointment requested successfully! Proceed to "My Appointments" to pay.',
        appointment=AppointmentResponse.model_validate(appointment)
    )

@router.get("/appointments/me", response_model=List[CustomerAppointmentResponse])
async def list_my_appointments(
    db: Session = Depends(get_db),
    customer: CredentialUser = Depends(get_customer_user)
):
    """List the caller's appointments, newest first."""
    appointments = AppointmentService(db).list_for_customer(customer.id)
    return [CustomerAppointmentResponse.model_validate(a) for a in appointments]

@router.put("/appointments/{appointment_id}/cancel", response_model=AppointmentEnvelope)
async def cancel_appointment(
    appointment_id: int = Path(..., le=MAX_ID),
    db: Session = Depends(get_db),
    customer: CredentialUser = Depends(get_customer_user)
):
    """Cancel one of the caller's appointments."""
    appointment = AppointmentService(db).cancel(customer.id, appointment_id)

    return AppointmentEnvelope(
        msg="Appointment cancelled successfully",
        appointment=AppointmentResponse.model_validate(appointment)
    )

@router.post("/appointments/{appointment_id}/pay", response_model=AppointmentEnvelope)
async def pay_for_appointment(
    payment: PaymentRequest,
    appointment_id: int = Path(..., le=MAX_ID),
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    customer: CredentialUser = Depends(get_customer_user)
):
    """Simulate payment; a pending appointment becomes scheduled once paid."""
    appointment = AppointmentService(db, gateway).pay(
        customer.id, appointment_id, payment.payment_method
    )

    return AppointmentEnvelope(
        msg=(
            f"Payment successful via {payment.payment_method}! "
            f"Appointment is now {appointment.status.value}."
        ),
        appointment=AppointmentResponse.model_validate(appointment)
    )
