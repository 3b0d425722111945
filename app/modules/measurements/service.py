import logging
import math
import uuid
from datetime import timezone
from sqlalchemy.ext.asyncio import AsyncSession
from app.modules.animals.repository import AnimalRepository
from app.modules.animals.models import Animal
from app.modules.measurements.repository import MeasurementRepository
from app.modules.measurements.models import Measurement
from app.modules.measurements.schemas import MeasurementCreate

log = logging.getLogger("measurements.service")

class MeasurementService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = MeasurementRepository(session)
        self.animals = AnimalRepository(session)

    async def _animal(self, tenant_id: uuid.UUID, animal_id: uuid.UUID) -> Animal:
        animal = await self.animals.get(tenant_id, animal_id)
        if animal is None:
            raise ValueError("animal_not_found")
        return animal

    async def list(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, page: int = 1, limit: int = 50) -> dict:
        animal = await self._animal(tenant_id, animal_id)
        rows, total = await self.repo.list_for_animal(tenant_id, animal_id, limit=limit, offset=(page - 1) * limit)
        return {
            "measurements": rows,
            "pagination": {"page": page, "limit": limit, "total": total, "pages": math.ceil(total / limit)},
            "animal": animal,
        }

    async def create(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, payload: MeasurementCreate) -> Measurement:
        animal = await self._animal(tenant_id, animal_id)
        if payload.scrotal_circumference_cm is not None and animal.sex != "MALE":
            raise ValueError("scrotal_circumference_male_only")
        data = payload.model_dump()
        if data["measured_at"].tzinfo is None:
            data["measured_at"] = data["measured_at"].replace(tzinfo=timezone.utc)
        obj = await self.repo.create(tenant_id, animal.id, **data)
        await self.session.commit()
        log.info(f"Recorded measurement {obj.id} for animal={animal.id}")
        return obj
