import uuid
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_session
from app.core.security import get_principal, require_scopes, Principal
from app.modules.animals.schemas import AnimalCreate, AnimalUpdate, AnimalOut, AnimalFilter, AnimalPage, Species, Sex, Status
from app.modules.animals.service import AnimalService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> AnimalService:
    return AnimalService(session)

@router.get("", response_model=AnimalPage, dependencies=[Depends(require_scopes("animals:read"))])
async def list_animals(
    farm_id: uuid.UUID | None = None,
    species: Species | None = None,
    sex: Sex | None = None,
    status_: Status | None = Query(None, alias="status"),
    breed: str | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    principal: Principal = Depends(get_principal),
    service: AnimalService = Depends(svc),
):
    if farm_id is None:
        raise HTTPException(status_code=400, detail="Farm ID is required")
    filters = AnimalFilter(species=species, sex=sex, status=status_, breed=breed, search=search)
    return await service.list(principal.tenant_id, farm_id, filters, page, limit)

@router.post("", response_model=AnimalOut, status_code=201, dependencies=[Depends(require_scopes("animals:write"))])
async def create_animal(
    payload: AnimalCreate,
    principal: Principal = Depends(get_principal),
    service: AnimalService = Depends(svc),
):
    try:
        return await service.create(principal.tenant_id, payload)
    except ValueError as e:
        if str(e) == "tag_number_exists":
            raise HTTPException(400, "Tag number already exists in this farm")
        raise

@router.get("/{animal_id}", response_model=AnimalOut, dependencies=[Depends(require_scopes("animals:read"))])
async def get_animal(
    animal_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: AnimalService = Depends(svc),
):
    obj = await service.get(principal.tenant_id, animal_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Animal not found")
    return obj

@router.patch("/{animal_id}", response_model=AnimalOut, dependencies=[Depends(require_scopes("animals:write"))])
async def update_animal(
    animal_id: uuid.UUID,
    payload: AnimalUpdate,
    principal: Principal = Depends(get_principal),
    service: AnimalService = Depends(svc),
):
    try:
        obj = await service.update(principal.tenant_id, animal_id, payload)
    except ValueError as e:
        if str(e) == "tag_number_exists":
            raise HTTPException(400, "Tag number already exists in this farm")
        raise
    if not obj:
        raise HTTPException(status_code=404, detail="Animal not found")
    return obj

@router.delete("/{animal_id}", status_code=204, dependencies=[Depends(require_scopes("animals:write"))])
async def delete_animal(
    animal_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: AnimalService = Depends(svc),
):
    ok = await service.delete(principal.tenant_id, animal_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Animal not found")
    return
