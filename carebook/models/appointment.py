from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Text, JSON, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base

class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"

class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)

    # Both parties are users; either one's deletion removes the appointment
    customer_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    doctor_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Appointment details; YYYY-MM-DD and HH:mm so string order is time order
    date = Column(String(10), nullable=False)
    time = Column(String(5), nullable=False)
    documents = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    is_emergency = Column(Boolean, nullable=False, default=False)
    status = Column(SQLEnum(AppointmentStatus), nullable=False, default=AppointmentStatus.PENDING)
    payment_status = Column(SQLEnum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)

    # Optimistic concurrency counter, bumped by SQLAlchemy on every UPDATE
    version = Column(Integer, nullable=False)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    customer = relationship("User", foreign_keys=[customer_id])
    doctor = relationship("User", foreign_keys=[doctor_id])

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Appointment(id={self.id}, customer_id={self.customer_id}, doctor_id={self.doctor_id}, date='{self.date}', status='{self.status}')>"
