import uuid
from datetime import datetime
from pydantic import BaseModel, Field

class MeasurementCreate(BaseModel):
    measured_at: datetime
    weight_kg: float | None = Field(None, ge=0, le=2000)
    height_cm: float | None = Field(None, ge=0, le=300)
    body_length_cm: float | None = Field(None, ge=0, le=400)
    scrotal_circumference_cm: float | None = Field(None, ge=0, le=60)
    body_condition_score: float | None = Field(None, ge=1, le=9)
    measured_by: str | None = Field(None, max_length=120)
    notes: str | None = None

class MeasurementOut(BaseModel):
    id: uuid.UUID
    animal_id: uuid.UUID
    measured_at: datetime
    weight_kg: float | None
    height_cm: float | None
    body_length_cm: float | None
    scrotal_circumference_cm: float | None
    body_condition_score: float | None
    measured_by: str | None
    notes: str | None

    class Config:
        from_attributes = True

class AnimalSummary(BaseModel):
    id: uuid.UUID
    species: str
    sex: str

    class Config:
        from_attributes = True

class MeasurementPagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

class MeasurementPage(BaseModel):
    measurements: list[MeasurementOut]
    pagination: MeasurementPagination
    animal: AnimalSummary
