import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Numeric, TIMESTAMP

from app.core.base import Base, TimestampedTenantMixin

class HealthEvent(Base, TimestampedTenantMixin):
    __tablename__ = "health_event"

    animal_id: Mapped[uuid.UUID] = mapped_column(index=True)
    type: Mapped[str] = mapped_column(String(16))  # VACCINATION | TREATMENT | CHECKUP | ...
    date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), index=True)
    description: Mapped[str] = mapped_column(Text)
    veterinarian_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    medication: Mapped[str | None] = mapped_column(String(200), nullable=True)
    dosage: Mapped[str | None] = mapped_column(String(120), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    next_due_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="COMPLETED")  # SCHEDULED | COMPLETED | CANCELLED
    cost: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    updated_by: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
