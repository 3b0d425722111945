import uuid
from datetime import datetime
from pydantic import BaseModel, Field

class NotificationCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=32)
    title: str = Field(..., min_length=1, max_length=200)
    message: str
    priority: str = Field("medium", pattern="^(low|medium|high)$")
    metadata: dict = Field(default_factory=dict)

class NotificationOut(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    type: str
    title: str
    message: str
    priority: str
    meta: dict | None
    status: str
    delivered_at: datetime | None
    read_at: datetime | None

    class Config:
        from_attributes = True

class NotificationList(BaseModel):
    notifications: list[NotificationOut]

class MarkNotifications(BaseModel):
    notification_ids: list[uuid.UUID] = Field(..., min_length=1)
    mark_as_read: bool = True

class MarkResult(BaseModel):
    success: bool
    updated: int
