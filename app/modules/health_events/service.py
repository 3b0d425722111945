import logging
import uuid
from datetime import datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from app.modules.animals.repository import AnimalRepository
from app.modules.animals.models import Animal
from app.modules.health_events.repository import HealthEventRepository
from app.modules.health_events.models import HealthEvent
from app.modules.health_events.schemas import HealthEventCreate, HealthEventUpdate

log = logging.getLogger("health_events.service")

VACCINATION_WINDOW = timedelta(days=30)

def _utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)

class HealthEventService:
    """Vaccinations, treatments and checkups recorded against an animal.

    Events dated in the future cannot be COMPLETED, a COMPLETED vaccination
    with the same description is accepted at most once per 30 days, and
    COMPLETED events are permanent. A COMPLETED checkup moves the animal's
    ``last_health_check`` forward.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = HealthEventRepository(session)
        self.animals = AnimalRepository(session)

    async def _animal(self, tenant_id: uuid.UUID, animal_id: uuid.UUID) -> Animal:
        animal = await self.animals.get(tenant_id, animal_id)
        if animal is None:
            raise ValueError("animal_not_found")
        return animal

    @staticmethod
    def _record_checkup(animal: Animal, event: HealthEvent) -> None:
        if event.type == "CHECKUP" and event.status == "COMPLETED":
            animal.last_health_check = event.date

    async def list(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, *, type: str | None = None,
                   status: str | None = None, limit: int = 50, offset: int = 0) -> dict:
        await self._animal(tenant_id, animal_id)
        rows, total = await self.repo.list_for_animal(tenant_id, animal_id, type=type, status=status,
                                                      limit=limit, offset=offset)
        return {
            "health_events": rows,
            "pagination": {"total": total, "limit": limit, "offset": offset, "has_more": offset + limit < total},
        }

    async def get(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, event_id: uuid.UUID) -> HealthEvent | None:
        return await self.repo.get(tenant_id, animal_id, event_id)

    async def create(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, user_id: uuid.UUID, payload: HealthEventCreate) -> HealthEvent:
        animal = await self._animal(tenant_id, animal_id)
        data = payload.model_dump()
        data["date"] = _utc(data["date"])
        data["next_due_date"] = _utc(data["next_due_date"])
        now = datetime.now(timezone.utc)
        if data["status"] == "COMPLETED" and data["date"] > now:
            raise ValueError("future_event_completed")
        if data["type"] == "VACCINATION":
            if await self.repo.recent_completed_vaccination(tenant_id, animal.id, data["description"], now - VACCINATION_WINDOW):
                raise ValueError("duplicate_vaccination")
        event = await self.repo.create(tenant_id, animal.id, created_by=user_id, **data)
        self._record_checkup(animal, event)
        await self.session.commit()
        log.info(f"Health event {event.id} type={event.type} status={event.status} animal={animal.id}")
        return event

    async def update(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, event_id: uuid.UUID, user_id: uuid.UUID,
                     payload: HealthEventUpdate) -> HealthEvent | None:
        animal = await self._animal(tenant_id, animal_id)
        event = await self.repo.get(tenant_id, animal_id, event_id)
        if event is None:
            return None
        data = payload.model_dump(exclude_unset=True)
        for field in ("date", "next_due_date"):
            if field in data:
                data[field] = _utc(data[field])
        date = data.get("date") or _utc(event.date)
        if data.get("status", event.status) == "COMPLETED" and date > datetime.now(timezone.utc):
            raise ValueError("future_event_completed")
        for k, v in data.items():
            setattr(event, k, v)
        event.updated_by = user_id
        self._record_checkup(animal, event)
        await self.session.commit()
        return event

    async def delete(self, tenant_id: uuid.UUID, animal_id: uuid.UUID, event_id: uuid.UUID) -> bool:
        event = await self.repo.get(tenant_id, animal_id, event_id)
        if event is None:
            return False
        if event.status == "COMPLETED":
            raise ValueError("completed_event_locked")
        await self.repo.soft_delete(event)
        await self.session.commit()
        return True
