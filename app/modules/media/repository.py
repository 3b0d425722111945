import uuid
from datetime import datetime, timezone
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.modules.media.models import AnimalMedia

class MediaRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, *, kind: str, pose: str, key: str, url: str,
                     file_size: int | None = None, checksum: str | None = None, taken_at: datetime | None = None) -> AnimalMedia:
        obj = AnimalMedia(
            tenant_id=tenant_id, animal_id=animal_id, kind=kind, pose=pose, key=key, url=url,
            file_size=file_size, checksum=checksum, taken_at=taken_at or datetime.now(timezone.utc),
        )
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, media_id: uuid.UUID) -> AnimalMedia | None:
        q = select(AnimalMedia).where(
            AnimalMedia.id == media_id,
            AnimalMedia.animal_id == animal_id,
            AnimalMedia.tenant_id == tenant_id,
            AnimalMedia.deleted_at.is_(None),
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list_for_animal(self, tenant_id: uuid.UUID, animal_id: uuid.UUID) -> Sequence[AnimalMedia]:
        q = select(AnimalMedia).where(
            AnimalMedia.animal_id == animal_id,
            AnimalMedia.tenant_id == tenant_id,
            AnimalMedia.deleted_at.is_(None),
        ).order_by(AnimalMedia.taken_at.desc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def soft_delete(self, obj: AnimalMedia) -> None:
        obj.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()

    async def latest_for_animals(self, tenant_id: uuid.UUID, animal_ids: list[uuid.UUID], *, kind: str, pose: str) -> dict[uuid.UUID, AnimalMedia]:
        if not animal_ids:
            return {}
        q = select(AnimalMedia).where(
            AnimalMedia.tenant_id == tenant_id,
            AnimalMedia.animal_id.in_(animal_ids),
            AnimalMedia.kind == kind,
            AnimalMedia.pose == pose,
            AnimalMedia.deleted_at.is_(None),
        ).order_by(AnimalMedia.taken_at.desc())
        latest: dict[uuid.UUID, AnimalMedia] = {}
        for m in (await self.session.execute(q)).scalars():
            latest.setdefault(m.animal_id, m)
        return latest
