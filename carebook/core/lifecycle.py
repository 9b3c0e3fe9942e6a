"""
Appointment and approval lifecycle rules.

Pure functions with no database access. Services call these to decide whether
a change is allowed and what the resulting state is, then persist it.
"""
from typing import Dict, FrozenSet, Iterable, List, Tuple

from .security import UserRole
from ..models.appointment import AppointmentStatus, PaymentStatus


class InvalidTransition(Exception):
    """Raised when a requested state change is not allowed."""


# Statuses a doctor may move an appointment to from each current status.
# Pending may jump anywhere; completed and cancelled are terminal.
DOCTOR_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset(AppointmentStatus),
    AppointmentStatus.SCHEDULED: frozenset({
        AppointmentStatus.SCHEDULED,
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.COMPLETED: frozenset({AppointmentStatus.COMPLETED}),
    AppointmentStatus.CANCELLED: frozenset({AppointmentStatus.CANCELLED}),
}

PAYABLE_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.SCHEDULED})


def role_for_email(email: str, doctor_suffix: str) -> UserRole:
    """Doctors are recognised only by their organisational email domain."""
    if email.endswith(doctor_suffix):
        return UserRole.DOCTOR
    return UserRole.CUSTOMER


def initial_approval(role: UserRole) -> bool:
    return role in (UserRole.CUSTOMER, UserRole.ADMIN)


def parse_status(value: str) -> AppointmentStatus:
    try:
        return AppointmentStatus(value)
    except ValueError:
        raise InvalidTransition(f"Invalid appointment status: {value}")


def check_doctor_transition(current: AppointmentStatus, target: AppointmentStatus) -> None:
    if target not in DOCTOR_TRANSITIONS[current]:
        raise InvalidTransition(
            f"Cannot change appointment status from {current.value} to {target.value}."
        )


def check_reschedulable(status: AppointmentStatus) -> None:
    if status in (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED):
        raise InvalidTransition(f"Cannot reschedule a {status.value} appointment.")


def check_cancellable(status: AppointmentStatus) -> None:
    if status == AppointmentStatus.COMPLETED:
        raise InvalidTransition("Cannot cancel a completed appointment.")
    if status == AppointmentStatus.CANCELLED:
        raise InvalidTransition("Appointment is already cancelled.")


def check_payable(status: AppointmentStatus, payment_status: PaymentStatus) -> None:
    if status not in PAYABLE_STATUSES:
        raise InvalidTransition(f"Cannot pay for an appointment with status: {status.value}")
    if payment_status == PaymentStatus.PAID:
        raise InvalidTransition("Payment has already been made for this appointment.")


def settle_payment(
    status: AppointmentStatus, succeeded: bool
) -> Tuple[AppointmentStatus, PaymentStatus]:
    """Return the (status, payment status) pair after a payment attempt."""
    if not succeeded:
        return status, PaymentStatus.FAILED
    if status == AppointmentStatus.PENDING:
        return AppointmentStatus.SCHEDULED, PaymentStatus.PAID
    return status, PaymentStatus.PAID


def prioritize_emergencies(appointments: Iterable) -> List:
    """Move emergency appointments to the front, keeping relative order otherwise."""
    return sorted(appointments, key=lambda a: not a.is_emergency)
