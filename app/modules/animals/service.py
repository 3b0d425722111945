import math
import uuid
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.modules.animals.repository import AnimalRepository
from app.modules.animals.schemas import AnimalCreate, AnimalUpdate, AnimalFilter, AnimalOut, AnimalListItem
from app.modules.media.schemas import MediaOut
from app.modules.measurements.schemas import MeasurementOut
from app.modules.animals.models import Animal
from app.modules.media.repository import MediaRepository
from app.modules.measurements.repository import MeasurementRepository

class AnimalService:
    def __init__(self, session: AsyncSession):
        self.repo = AnimalRepository(session)
        self.media = MediaRepository(session)
        self.measurements = MeasurementRepository(session)
        self.session = session

    async def _commit(self) -> None:
        # the partial unique index on (farm_id, tag_number) backs the get_by_tag checks under concurrency
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("tag_number_exists")

    async def create(self, tenant_id: uuid.UUID, payload: AnimalCreate) -> Animal:
        if await self.repo.get_by_tag(tenant_id, payload.farm_id, payload.tag_number):
            raise ValueError("tag_number_exists")
        try:
            obj = await self.repo.create(tenant_id, **payload.model_dump(exclude_unset=True))
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("tag_number_exists")
        await self._commit()
        return obj

    async def get(self, tenant_id: uuid.UUID, animal_id: uuid.UUID) -> Animal | None:
        return await self.repo.get(tenant_id, animal_id)

    async def list(self, tenant_id: uuid.UUID, farm_id: uuid.UUID, filters: AnimalFilter, page: int = 1, limit: int = 20) -> dict:
        rows, total = await self.repo.list(
            tenant_id, farm_id, filters.model_dump(exclude_none=True),
            limit=limit, offset=(page - 1) * limit,
        )
        ids = [a.id for a in rows]
        photos = await self.media.latest_for_animals(tenant_id, ids, kind="PHOTO", pose="FRONT")
        measurements = await self.measurements.latest_for_animals(tenant_id, ids)
        animals = []
        for a in rows:
            photo, measurement = photos.get(a.id), measurements.get(a.id)
            animals.append(AnimalListItem(
                **AnimalOut.model_validate(a).model_dump(),
                front_photo=MediaOut.model_validate(photo) if photo else None,
                latest_measurement=MeasurementOut.model_validate(measurement) if measurement else None,
            ))
        return {
            "animals": animals,
            "pagination": {"page": page, "limit": limit, "total": total, "pages": math.ceil(total / limit)},
        }

    async def update(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, payload: AnimalUpdate) -> Animal | None:
        data = payload.model_dump(exclude_unset=True)
        if data.get("tag_number"):
            current = await self.repo.get(tenant_id, animal_id)
            if current is not None and current.tag_number != data["tag_number"]:
                if await self.repo.get_by_tag(tenant_id, current.farm_id, data["tag_number"]):
                    raise ValueError("tag_number_exists")
        try:
            obj = await self.repo.update(tenant_id, animal_id, **data)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("tag_number_exists")
        if obj:
            await self._commit()
        return obj

    async def delete(self, tenant_id: uuid.UUID, animal_id: uuid.UUID) -> bool:
        ok = await self.repo.soft_delete(tenant_id, animal_id)
        if ok:
            await self.session.commit()
        return ok
