import uuid
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_session
from app.core.security import get_principal, require_scopes, Principal
from app.modules.measurements.schemas import MeasurementCreate, MeasurementOut, MeasurementPage
from app.modules.measurements.service import MeasurementService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> MeasurementService:
    return MeasurementService(session)

def _raise_for(e: ValueError):
    if str(e) == "animal_not_found":
        raise HTTPException(status_code=404, detail="Animal not found")
    if str(e) == "scrotal_circumference_male_only":
        raise HTTPException(400, "Scrotal circumference can only be recorded for male animals")
    raise e

@router.get("", response_model=MeasurementPage, dependencies=[Depends(require_scopes("animals:read"))])
async def list_measurements(
    animal_id: uuid.UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    principal: Principal = Depends(get_principal),
    service: MeasurementService = Depends(svc),
):
    try:
        return await service.list(principal.tenant_id, animal_id, page, limit)
    except ValueError as e:
        _raise_for(e)

@router.post("", response_model=MeasurementOut, status_code=201, dependencies=[Depends(require_scopes("animals:write"))])
async def create_measurement(
    animal_id: uuid.UUID,
    payload: MeasurementCreate,
    principal: Principal = Depends(get_principal),
    service: MeasurementService = Depends(svc),
):
    try:
        return await service.create(principal.tenant_id, animal_id, payload)
    except ValueError as e:
        _raise_for(e)
