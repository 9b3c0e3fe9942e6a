from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.exc import StaleDataError
from typing import List, Optional
import logging

from ..models.appointment import Appointment, AppointmentStatus, PaymentStatus
from ..models.doctor_profile import DoctorProfile
from ..core.exceptions import BadRequestError, ConflictError, NotFoundError
from ..core.security import AuthenticationError
from ..core import lifecycle
from ..core.lifecycle import InvalidTransition
from ..schemas.appointment import AppointmentCreate, AppointmentStatusUpdate
from .payment_service import PaymentGateway

logger = logging.getLogger(__name__)

class AppointmentService:
    def __init__(self, db: Session, payment_gateway: Optional[PaymentGateway] = None):
        self.db = db
        self.payment_gateway = payment_gateway or PaymentGateway()

    def book(self, customer_id: int, booking: AppointmentCreate) -> Appointment:
        """Book an appointment with an approved doctor."""
        profile = self.db.query(DoctorProfile).filter(
            DoctorProfile.user_id == booking.doctor_id
        ).first()
        if not profile or not profile.is_approved:
            logger.warning(f"Customer {customer_id} tried to book unavailable doctor {booking.doctor_id}")
            raise BadRequestError("Doctor not found or not yet approved.")

        appointment = Appointment(
            customer_id=customer_id,
            doctor_id=booking.doctor_id,
            date=booking.date,
            time=booking.time,
            documents=list(booking.documents),
            notes=booking.notes,
            is_emergency=booking.is_emergency,
            status=AppointmentStatus.PENDING,
            payment_status=PaymentStatus.PENDING
        )
        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"Customer {customer_id} booked appointment {appointment.id} with doctor "
            f"{booking.doctor_id} on {appointment.date} {appointment.time}"
        )
        return appointment

    def list_for_customer(self, customer_id: int) -> List[Appointment]:
        """Customer's appointments, newest first."""
        return self.db.query(Appointment).options(
            joinedload(Appointment.doctor)
        ).filter(
            Appointment.customer_id == customer_id
        ).order_by(Appointment.created_at.desc(), Appointment.id.desc()).all()

    def list_for_doctor(self, doctor_id: int, emergency_first: bool = False) -> List[Appointment]:
        """Doctor's appointments by date then time, optionally emergencies first."""
        appointments = self.db.query(Appointment).options(
            joinedload(Appointment.customer)
        ).filter(
            Appointment.doctor_id == doctor_id
        ).order_by(Appointment.date, Appointment.time, Appointment.id).all()

        if emergency_first:
            return lifecycle.prioritize_emergencies(appointments)
        return appointments

    def update_status(
        self, doctor_id: int, appointment_id: int, update: AppointmentStatusUpdate
    ) -> Appointment:
        """Doctor changes status and/or reschedules one of their appointments."""
        appointment = self._get_appointment(appointment_id)
        if appointment.doctor_id != doctor_id:
            raise AuthenticationError("Not authorized to update this appointment")

        try:
            # Terminal appointments keep their slot
            if update.date or update.time:
                lifecycle.check_reschedulable(appointment.status)
            if update.status:
                target = lifecycle.parse_status(update.status)
                lifecycle.check_doctor_transition(appointment.status, target)
                appointment.status = target
        except InvalidTransition as exc:
            logger.warning(f"Doctor {doctor_id} status change rejected on {appointment_id}: {exc}")
            raise BadRequestError(str(exc))

        if update.date:
            appointment.date = update.date
        if update.time:
            appointment.time = update.time

        self._commit()
        self.db.refresh(appointment)

        logger.info(
            f"Doctor {doctor_id} updated appointment {appointment.id}: "
            f"{appointment.status.value} on {appointment.date} {appointment.time}"
        )
        return appointment

    def cancel(self, customer_id: int, appointment_id: int) -> Appointment:
        """Customer cancels their own appointment."""
        appointment = self._get_appointment(appointment_id)
        if appointment.customer_id != customer_id:
            raise AuthenticationError("Not authorized to cancel this appointment")

        try:
            lifecycle.check_cancellable(appointment.status)
        except InvalidTransition as exc:
            raise BadRequestError(str(exc))

        appointment.status = AppointmentStatus.CANCELLED
        self._commit()
        self.db.refresh(appointment)

        logger.info(f"Customer {customer_id} cancelled appointment {appointment.id}")
        return appointment

    def pay(self, customer_id: int, appointment_id: int, payment_method: str) -> Appointment:
        """Customer pays for their own appointment through the gateway."""
        appointment = self._get_appointment(appointment_id)
        if appointment.customer_id != customer_id:
            raise AuthenticationError("Not authorized to pay for this appointment")

        try:
            lifecycle.check_payable(appointment.status, appointment.payment_status)
        except InvalidTransition as exc:
            raise BadRequestError(str(exc))

        succeeded = self.payment_gateway.charge(appointment, payment_method)
        appointment.status, appointment.payment_status = lifecycle.settle_payment(
            appointment.status, succeeded
        )
        self._commit()
        self.db.refresh(appointment)

        if not succeeded:
            logger.warning(f"Payment failed for appointment {appointment.id}")
            raise BadRequestError("Payment failed. Please try again.")

        logger.info(f"Customer {customer_id} paid for appointment {appointment.id} via {payment_method}")
        return appointment

    def _get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.db.query(Appointment).filter(
            Appointment.id == appointment_id
        ).first()
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    def _commit(self) -> None:
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            raise ConflictError(
                "Appointment was modified by another request. Reload and try again."
            )
