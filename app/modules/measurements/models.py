import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Numeric, TIMESTAMP
from app.core.base import Base, TimestampedTenantMixin

class Measurement(Base, TimestampedTenantMixin):
    animal_id: Mapped[uuid.UUID] = mapped_column(index=True)
    measured_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), index=True)
    weight_kg: Mapped[float | None] = mapped_column(Numeric(7, 2, asdecimal=False), nullable=True)
    height_cm: Mapped[float | None] = mapped_column(Numeric(6, 2, asdecimal=False), nullable=True)
    body_length_cm: Mapped[float | None] = mapped_column(Numeric(6, 2, asdecimal=False), nullable=True)
    scrotal_circumference_cm: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=True)
    body_condition_score: Mapped[float | None] = mapped_column(Numeric(3, 1, asdecimal=False), nullable=True)  # 1..9
    measured_by: Mapped[str | None] = mapped_column(String(120), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
