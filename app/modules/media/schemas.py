import uuid
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field

Pose = Literal["FRONT", "LEFT", "RIGHT", "GAIT"]
Kind = Literal["PHOTO", "VIDEO"]

class MediaUploadRequest(BaseModel):
    pose: Pose
    content_type: str = Field(..., pattern=r"^(image|video)/[\w.+-]+$")

class UploadMetadata(BaseModel):
    kind: Kind
    pose: Pose
    animal_id: uuid.UUID

class MediaUploadOut(BaseModel):
    upload_url: str
    fields: dict[str, str]
    key: str
    expires_in: int
    strategy: str
    metadata: UploadMetadata

class MediaCreate(BaseModel):
    kind: Kind
    pose: Pose
    key: str = Field(..., min_length=1, max_length=512)
    file_size: int | None = Field(None, ge=0)
    checksum: str | None = Field(None, max_length=128)

class MediaCopyRequest(BaseModel):
    target_animal_id: uuid.UUID

class MediaOut(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    animal_id: uuid.UUID
    kind: str
    pose: str
    key: str
    url: str
    file_size: int | None
    checksum: str | None
    taken_at: datetime

    class Config:
        from_attributes = True

class MediaList(BaseModel):
    media: list[MediaOut]

class MediaDownloadOut(BaseModel):
    url: str
    key: str
    expires_in: int
