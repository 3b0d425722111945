import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, JSON, TIMESTAMP
from app.core.base import Base, TimestampedTenantMixin

PENDING, DELIVERED, READ = "pending", "delivered", "read"

# read -> delivered is "mark as unread"
TRANSITIONS: dict[str, set[str]] = {
    PENDING: {DELIVERED, READ},
    DELIVERED: {READ},
    READ: {DELIVERED},
}

class Notification(Base, TimestampedTenantMixin):
    user_id: Mapped[uuid.UUID] = mapped_column(index=True)
    type: Mapped[str] = mapped_column(String(32))  # health_alert | breeding | system | ...
    title: Mapped[str] = mapped_column(String(200))
    message: Mapped[str] = mapped_column(Text)
    priority: Mapped[str] = mapped_column(String(8), default="medium")  # low | medium | high
    meta: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default=PENDING)
    delivered_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    read_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    def transition(self, to: str, at: datetime) -> None:
        if to not in TRANSITIONS.get(self.status, set()):
            raise ValueError("invalid_transition")
        if to == DELIVERED:
            self.delivered_at = self.delivered_at or at
            self.read_at = None
        elif to == READ:
            self.delivered_at = self.delivered_at or at
            self.read_at = at
        self.status = to
