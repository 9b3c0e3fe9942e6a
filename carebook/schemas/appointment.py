from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .auth import UserSummary
from .common import CamelModel
from ..models.appointment import AppointmentStatus, PaymentStatus


class AppointmentCreate(CamelModel):
    doctor_id: int
    date: str = Field(..., min_length=1)
    time: str = Field(..., min_length=1)
    documents: List[str] = []
    notes: Optional[str] = None
    is_emergency: bool = False


class AppointmentStatusUpdate(CamelModel):
    # Kept as a plain string so unknown values surface as a lifecycle error
    status: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None


class PaymentRequest(CamelModel):
    payment_method: str = Field(..., min_length=1)


class AppointmentResponse(CamelModel):
    id: int
    customer_id: int
    doctor_id: int
    date: str
    time: str
    documents: List[str] = []
    notes: Optional[str] = None
    is_emergency: bool
    status: AppointmentStatus
    payment_status: PaymentStatus
    created_at: Optional[datetime] = None


class CustomerAppointmentResponse(AppointmentResponse):
    doctor: UserSummary


class DoctorAppointmentResponse(AppointmentResponse):
    customer: UserSummary


class AppointmentEnvelope(CamelModel):
    msg: str
    appointment: AppointmentResponse
