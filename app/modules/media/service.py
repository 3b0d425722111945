import logging
import uuid
from typing import Sequence
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.platform.ports.object_storage import ObjectStoragePort, PresignedDownload
from app.platform.provider_registry import registry
from app.modules.animals.repository import AnimalRepository
from app.modules.animals.models import Animal
from app.modules.media.repository import MediaRepository
from app.modules.media.models import AnimalMedia
from app.modules.media.schemas import MediaCreate
from app.modules.media.keys import KEY_PATTERN, derive_media_key, extension_for, kind_for

log = logging.getLogger("media.service")

class MediaService:
    """Animal photos and videos.

    Bytes never pass through the API: clients upload and download with
    presigned capabilities, and the database only stores object keys.

    Rows and objects are not updated atomically. Deletes remove the row
    first and the object second, copies write the object first and the row
    second; a crash in between leaves an orphaned object behind and nothing
    reconciles it later.
    """

    def __init__(self, session: AsyncSession, storage: ObjectStoragePort | None = None):
        self.session = session
        self.repo = MediaRepository(session)
        self.animals = AnimalRepository(session)
        self.storage = storage or registry.object_storage()

    async def _animal(self, tenant_id: uuid.UUID, animal_id: uuid.UUID) -> Animal:
        animal = await self.animals.get(tenant_id, animal_id)
        if animal is None:
            raise ValueError("animal_not_found")
        return animal

    @staticmethod
    def _check_key(animal: Animal, key: str, pose: str) -> None:
        match = KEY_PATTERN.fullmatch(key)
        if match is None:
            raise ValueError("malformed_key")
        owner = (str(animal.tenant_id), str(animal.company_id), str(animal.farm_id), str(animal.id))
        if match.group("tenant_id", "company_id", "farm_id", "animal_id") != owner:
            raise ValueError("key_outside_namespace")
        if match.group("pose") != pose.lower():
            raise ValueError("key_pose_mismatch")

    async def list(self, tenant_id: uuid.UUID, animal_id: uuid.UUID) -> Sequence[AnimalMedia]:
        await self._animal(tenant_id, animal_id)
        return await self.repo.list_for_animal(tenant_id, animal_id)

    async def request_upload(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, *, pose: str, content_type: str) -> dict:
        animal = await self._animal(tenant_id, animal_id)
        kind = kind_for(content_type)
        key = derive_media_key(animal.tenant_id, animal.company_id, animal.farm_id, animal.id, pose, extension_for(content_type))
        max_bytes = settings.MEDIA_MAX_UPLOAD_BYTES if kind == "VIDEO" else settings.MEDIA_MAX_IMAGE_BYTES
        upload = self.storage.presign_upload(key, content_type, max_bytes=max_bytes)
        log.info(f"Issued upload capability key={key} kind={kind} expires_in={upload.expires_in}")
        return {
            "upload_url": upload.url,
            "fields": upload.fields,
            "key": upload.key,
            "expires_in": upload.expires_in,
            "strategy": upload.strategy,
            "metadata": {"kind": kind, "pose": pose, "animal_id": animal.id},
        }

    async def confirm_upload(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, payload: MediaCreate) -> AnimalMedia:
        animal = await self._animal(tenant_id, animal_id)
        self._check_key(animal, payload.key, payload.pose)
        # keys are never reused, so a key stays taken after its row is deleted
        try:
            obj = await self.repo.create(
                tenant_id, animal.id,
                kind=payload.kind, pose=payload.pose, key=payload.key,
                url=self.storage.public_url(payload.key),
                file_size=payload.file_size, checksum=payload.checksum,
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("key_exists")
        return obj

    async def download(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, media_id: uuid.UUID, expires_seconds: int | None = None) -> PresignedDownload | None:
        obj = await self.repo.get(tenant_id, animal_id, media_id)
        if obj is None:
            return None
        return self.storage.presign_download(obj.key, expires_seconds=expires_seconds)

    async def copy_to(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, media_id: uuid.UUID, target_animal_id: uuid.UUID) -> AnimalMedia | None:
        obj = await self.repo.get(tenant_id, animal_id, media_id)
        if obj is None:
            return None
        target = await self._animal(tenant_id, target_animal_id)
        extension = obj.key.rsplit(".", 1)[-1]
        new_key = derive_media_key(target.tenant_id, target.company_id, target.farm_id, target.id, obj.pose, extension)
        self.storage.copy(obj.key, new_key)
        copied = await self.repo.create(
            tenant_id, target.id,
            kind=obj.kind, pose=obj.pose, key=new_key, url=self.storage.public_url(new_key),
            file_size=obj.file_size, checksum=obj.checksum, taken_at=obj.taken_at,
        )
        await self.session.commit()
        log.info(f"Copied media {obj.id} -> {copied.id} key={new_key}")
        return copied

    async def delete(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, media_id: uuid.UUID) -> bool:
        obj = await self.repo.get(tenant_id, animal_id, media_id)
        if obj is None:
            return False
        await self.repo.soft_delete(obj)
        await self.session.commit()
        try:
            self.storage.delete(obj.key)
        except Exception:
            log.warning(f"Media row {obj.id} deleted but object {obj.key} was not; it is now orphaned")
            raise
        return True
