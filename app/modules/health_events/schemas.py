import uuid
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field, field_validator

EventType = Literal["VACCINATION", "TREATMENT", "CHECKUP", "SURGERY", "MEDICATION", "OBSERVATION"]
EventStatus = Literal["SCHEDULED", "COMPLETED", "CANCELLED"]

class HealthEventCreate(BaseModel):
    type: EventType
    date: datetime
    description: str = Field(..., min_length=1)
    veterinarian_name: str | None = Field(None, max_length=120)
    medication: str | None = Field(None, max_length=200)
    dosage: str | None = Field(None, max_length=120)
    notes: str | None = None
    next_due_date: datetime | None = None
    status: EventStatus = "COMPLETED"
    cost: float | None = Field(None, ge=0)

class HealthEventUpdate(BaseModel):
    type: EventType | None = None
    date: datetime | None = None
    description: str | None = Field(None, min_length=1)
    veterinarian_name: str | None = Field(None, max_length=120)
    medication: str | None = Field(None, max_length=200)
    dosage: str | None = Field(None, max_length=120)
    notes: str | None = None
    next_due_date: datetime | None = None
    status: EventStatus | None = None
    cost: float | None = Field(None, ge=0)

    @field_validator("type", "date", "description", "status")
    @classmethod
    def _not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be cleared")
        return v

class HealthEventOut(BaseModel):
    id: uuid.UUID
    animal_id: uuid.UUID
    type: str
    date: datetime
    description: str
    veterinarian_name: str | None
    medication: str | None
    dosage: str | None
    notes: str | None
    next_due_date: datetime | None
    status: str
    cost: float | None
    created_by: uuid.UUID | None
    updated_by: uuid.UUID | None

    class Config:
        from_attributes = True

class OffsetPagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool

class HealthEventList(BaseModel):
    health_events: list[HealthEventOut]
    pagination: OffsetPagination
