import uuid
from datetime import date, datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Date, Integer, Index, TIMESTAMP, text
from app.core.base import Base, TimestampedTenantMixin

class Animal(Base, TimestampedTenantMixin):
    # tag numbers are unique per farm among live animals; a deleted animal frees its tag
    __table_args__ = (
        Index(
            "uq_animal_farm_tag", "farm_id", "tag_number", unique=True,
            postgresql_where=text("deleted_at IS NULL"), sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    company_id: Mapped[uuid.UUID] = mapped_column(index=True)
    farm_id: Mapped[uuid.UUID] = mapped_column(index=True)
    species: Mapped[str] = mapped_column(String(16))  # CATTLE | SHEEP | GOAT | ...
    breed: Mapped[str] = mapped_column(String(120))
    sex: Mapped[str] = mapped_column(String(8))
    tag_number: Mapped[str] = mapped_column(String(64))
    birth_date_estimated: Mapped[date | None] = mapped_column(Date, nullable=True)
    age_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    parent_male_id: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    parent_female_id: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_health_check: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="ACTIVE")
