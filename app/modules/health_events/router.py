import uuid
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_session
from app.core.security import get_principal, require_scopes, Principal
from app.modules.health_events.schemas import (
    HealthEventCreate, HealthEventUpdate, HealthEventOut, HealthEventList, EventType, EventStatus,
)
from app.modules.health_events.service import HealthEventService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> HealthEventService:
    return HealthEventService(session)

ERRORS = {
    "animal_not_found": (404, "Animal not found"),
    "future_event_completed": (400, "Cannot mark future events as completed"),
    "duplicate_vaccination": (400, "Similar vaccination already recorded in the last 30 days"),
    "completed_event_locked": (400, "Cannot delete completed health events"),
}

def _raise_for(e: ValueError):
    if str(e) in ERRORS:
        code, detail = ERRORS[str(e)]
        raise HTTPException(status_code=code, detail=detail)
    raise e

@router.get("", response_model=HealthEventList, dependencies=[Depends(require_scopes("health:read"))])
async def list_health_events(
    animal_id: uuid.UUID,
    type: EventType | None = None,
    status: EventStatus | None = None,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(get_principal),
    service: HealthEventService = Depends(svc),
):
    try:
        return await service.list(principal.tenant_id, animal_id, type=type, status=status, limit=limit, offset=offset)
    except ValueError as e:
        _raise_for(e)

@router.post("", response_model=HealthEventOut, status_code=201, dependencies=[Depends(require_scopes("health:write"))])
async def create_health_event(
    animal_id: uuid.UUID,
    payload: HealthEventCreate,
    principal: Principal = Depends(get_principal),
    service: HealthEventService = Depends(svc),
):
    try:
        return await service.create(principal.tenant_id, animal_id, principal.user_id, payload)
    except ValueError as e:
        _raise_for(e)

@router.get("/{event_id}", response_model=HealthEventOut, dependencies=[Depends(require_scopes("health:read"))])
async def get_health_event(
    animal_id: uuid.UUID,
    event_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: HealthEventService = Depends(svc),
):
    obj = await service.get(principal.tenant_id, animal_id, event_id)
    if not obj:
        raise HTTPException(404, "Health event not found")
    return obj

@router.put("/{event_id}", response_model=HealthEventOut, dependencies=[Depends(require_scopes("health:write"))])
async def update_health_event(
    animal_id: uuid.UUID,
    event_id: uuid.UUID,
    payload: HealthEventUpdate,
    principal: Principal = Depends(get_principal),
    service: HealthEventService = Depends(svc),
):
    try:
        obj = await service.update(principal.tenant_id, animal_id, event_id, principal.user_id, payload)
    except ValueError as e:
        _raise_for(e)
    if not obj:
        raise HTTPException(404, "Health event not found")
    return obj

@router.delete("/{event_id}", status_code=204, dependencies=[Depends(require_scopes("health:write"))])
async def delete_health_event(
    animal_id: uuid.UUID,
    event_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: HealthEventService = Depends(svc),
):
    try:
        ok = await service.delete(principal.tenant_id, animal_id, event_id)
    except ValueError as e:
        _raise_for(e)
    if not ok:
        raise HTTPException(404, "Health event not found")
    return
