import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, BigInteger, TIMESTAMP
from app.core.base import Base, TimestampedTenantMixin

class AnimalMedia(Base, TimestampedTenantMixin):
    __tablename__ = "animal_media"

    animal_id: Mapped[uuid.UUID] = mapped_column(index=True)
    kind: Mapped[str] = mapped_column(String(8))  # PHOTO | VIDEO
    pose: Mapped[str] = mapped_column(String(8))  # FRONT | LEFT | RIGHT | GAIT
    # Object key in the storage provider. The row and the object are not kept
    # in sync transactionally: deleting/copying one never touches the other.
    key: Mapped[str] = mapped_column(String(512), unique=True)
    url: Mapped[str] = mapped_column(String(1024))
    file_size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    checksum: Mapped[str | None] = mapped_column(String(128), nullable=True)
    taken_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
