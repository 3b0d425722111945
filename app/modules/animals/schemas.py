import uuid
from datetime import date, datetime
from typing import Literal
from pydantic import BaseModel, Field, field_validator
from app.modules.media.schemas import MediaOut
from app.modules.measurements.schemas import MeasurementOut

Species = Literal["CATTLE", "SHEEP", "GOAT", "BUFFALO", "HORSE", "CAMEL", "LLAMA"]
Sex = Literal["MALE", "FEMALE"]
Status = Literal["ACTIVE", "SOLD", "DIED", "TRANSFERRED"]

class AnimalCreate(BaseModel):
    company_id: uuid.UUID
    farm_id: uuid.UUID
    species: Species
    breed: str = Field(..., min_length=1, max_length=120)
    sex: Sex
    tag_number: str = Field(..., min_length=1, max_length=64)
    birth_date_estimated: date | None = None
    age_months: int | None = Field(None, ge=0, le=300)
    parent_male_id: uuid.UUID | None = None
    parent_female_id: uuid.UUID | None = None
    notes: str | None = None

class AnimalUpdate(BaseModel):
    """Partial update. Omitted fields are untouched; optional fields can be cleared with null."""
    species: Species | None = None
    breed: str | None = Field(None, min_length=1, max_length=120)
    sex: Sex | None = None
    tag_number: str | None = Field(None, min_length=1, max_length=64)
    birth_date_estimated: date | None = None
    age_months: int | None = Field(None, ge=0, le=300)
    parent_male_id: uuid.UUID | None = None
    parent_female_id: uuid.UUID | None = None
    notes: str | None = None
    status: Status | None = None

    @field_validator("species", "breed", "sex", "tag_number", "status")
    @classmethod
    def _not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be cleared")
        return v

class AnimalFilter(BaseModel):
    species: Species | None = None
    sex: Sex | None = None
    status: Status | None = None
    breed: str | None = None
    search: str | None = None

class AnimalOut(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    company_id: uuid.UUID
    farm_id: uuid.UUID
    species: str
    breed: str
    sex: str
    tag_number: str
    birth_date_estimated: date | None
    age_months: int | None
    parent_male_id: uuid.UUID | None
    parent_female_id: uuid.UUID | None
    notes: str | None
    status: str
    last_health_check: datetime | None = None

    class Config:
        from_attributes = True

class AnimalListItem(AnimalOut):
    # latest FRONT photo and latest measurement, for list previews
    front_photo: MediaOut | None = None
    latest_measurement: MeasurementOut | None = None

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

class AnimalPage(BaseModel):
    animals: list[AnimalListItem]
    pagination: Pagination
