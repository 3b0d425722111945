from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

MAX_UPLOAD_BYTES = 200 * 1024 * 1024

def top_level_type(content_type: str) -> str:
    """`image/jpeg` -> `image/`. Parameters after `;` are ignored."""
    major = content_type.split(";", 1)[0].split("/", 1)[0].strip().lower()
    return f"{major}/"

@dataclass(frozen=True)
class UploadPolicy:
    """Constraints the storage service enforces when the client posts the object."""
    max_bytes: int
    content_type_prefix: str
    min_bytes: int = 0

    @classmethod
    def for_content_type(cls, content_type: str, max_bytes: int | None = None) -> "UploadPolicy":
        limit = MAX_UPLOAD_BYTES if max_bytes is None else min(max_bytes, MAX_UPLOAD_BYTES)
        return cls(max_bytes=limit, content_type_prefix=top_level_type(content_type))

    def allows(self, size: int, content_type: str) -> bool:
        if size < self.min_bytes or size > self.max_bytes:
            return False
        return content_type.lower().startswith(self.content_type_prefix)

    def conditions(self) -> list:
        return [
            ["content-length-range", self.min_bytes, self.max_bytes],
            ["starts-with", "$Content-Type", self.content_type_prefix],
        ]

@dataclass(frozen=True)
class PresignedUpload:
    url: str
    fields: dict[str, str]
    key: str
    expires_in: int
    policy: UploadPolicy
    strategy: str = "s3-presigned-post"

@dataclass(frozen=True)
class PresignedDownload:
    url: str
    key: str
    expires_in: int

@runtime_checkable
class ObjectStoragePort(Protocol):
    def presign_upload(self, key: str, content_type: str, expires_seconds: int | None = None, max_bytes: int | None = None) -> PresignedUpload: ...
    def presign_download(self, key: str, expires_seconds: int | None = None) -> PresignedDownload: ...
    def put_bytes(self, key: str, data: bytes, content_type: str) -> None: ...
    def delete(self, key: str) -> None: ...
    def copy(self, source_key: str, destination_key: str) -> None: ...
    def public_url(self, key: str) -> str: ...
