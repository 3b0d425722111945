import uuid
from fastapi import APIRouter, UploadFile, File, Form, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_session
from app.core.security import get_principal, require_scopes, Principal
from app.modules.media.schemas import (
    MediaUploadRequest, MediaUploadOut, MediaCreate, MediaOut, MediaList, MediaDownloadOut, MediaCopyRequest,
)
from app.modules.media.service import MediaService
from app.platform.ports.object_storage import ObjectStoragePort, UploadPolicy
from app.platform.adapters.storage_local import LocalFilesystemStorage
from app.platform.provider_registry import get_object_storage
from app.core.config import settings

router = APIRouter()
ingest_router = APIRouter()

def svc(session: AsyncSession = Depends(get_session), storage: ObjectStoragePort = Depends(get_object_storage)) -> MediaService:
    return MediaService(session, storage)

def _not_found(e: ValueError):
    if str(e) == "animal_not_found":
        raise HTTPException(status_code=404, detail="Animal not found")
    raise e

@router.get("", response_model=MediaList, dependencies=[Depends(require_scopes("media:read"))])
async def list_media(
    animal_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: MediaService = Depends(svc),
):
    try:
        rows = await service.list(principal.tenant_id, animal_id)
    except ValueError as e:
        _not_found(e)
    return {"media": rows}

# Generate signed URL for upload
@router.post("", response_model=MediaUploadOut, dependencies=[Depends(require_scopes("media:write"))])
async def request_upload(
    animal_id: uuid.UUID,
    payload: MediaUploadRequest,
    principal: Principal = Depends(get_principal),
    service: MediaService = Depends(svc),
):
    try:
        return await service.request_upload(principal.tenant_id, animal_id, pose=payload.pose, content_type=payload.content_type)
    except ValueError as e:
        _not_found(e)

# Confirm upload and save metadata
@router.put("", response_model=MediaOut, status_code=201, dependencies=[Depends(require_scopes("media:write"))])
async def confirm_upload(
    animal_id: uuid.UUID,
    payload: MediaCreate,
    principal: Principal = Depends(get_principal),
    service: MediaService = Depends(svc),
):
    try:
        return await service.confirm_upload(principal.tenant_id, animal_id, payload)
    except ValueError as e:
        if str(e) == "malformed_key":
            raise HTTPException(400, "Key is not a media key")
        if str(e) == "key_outside_namespace":
            raise HTTPException(400, "Key does not belong to this animal")
        if str(e) == "key_pose_mismatch":
            raise HTTPException(400, "Key pose does not match")
        if str(e) == "key_exists":
            raise HTTPException(409, "Media already recorded for this key")
        _not_found(e)

@router.get("/{media_id}/download", response_model=MediaDownloadOut, dependencies=[Depends(require_scopes("media:read"))])
async def download_media(
    animal_id: uuid.UUID,
    media_id: uuid.UUID,
    expires_seconds: int | None = Query(None, ge=1, le=7 * 24 * 3600),
    principal: Principal = Depends(get_principal),
    service: MediaService = Depends(svc),
):
    dl = await service.download(principal.tenant_id, animal_id, media_id, expires_seconds)
    if dl is None:
        raise HTTPException(404, "Media not found")
    return {"url": dl.url, "key": dl.key, "expires_in": dl.expires_in}

@router.post("/{media_id}/copy", response_model=MediaOut, status_code=201, dependencies=[Depends(require_scopes("media:write"))])
async def copy_media(
    animal_id: uuid.UUID,
    media_id: uuid.UUID,
    payload: MediaCopyRequest,
    principal: Principal = Depends(get_principal),
    service: MediaService = Depends(svc),
):
    try:
        obj = await service.copy_to(principal.tenant_id, animal_id, media_id, payload.target_animal_id)
    except ValueError as e:
        _not_found(e)
    if obj is None:
        raise HTTPException(404, "Media not found")
    return obj

@router.delete("/{media_id}", status_code=204, dependencies=[Depends(require_scopes("media:write"))])
async def delete_media(
    animal_id: uuid.UUID,
    media_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    service: MediaService = Depends(svc),
):
    ok = await service.delete(principal.tenant_id, animal_id, media_id)
    if not ok:
        raise HTTPException(404, "Media not found")
    return

@ingest_router.post("/direct-upload", status_code=204, dependencies=[Depends(require_scopes("media:write"))])
async def direct_upload(
    key: str = Form(...),
    content_type: str = Form(..., alias="Content-Type"),
    file: UploadFile = File(...),
    principal: Principal = Depends(get_principal),
    storage: ObjectStoragePort = Depends(get_object_storage),
):
    # target of LocalFilesystemStorage.presign_upload; S3 clients post to the bucket
    if not isinstance(storage, LocalFilesystemStorage):
        raise HTTPException(404, "Direct upload is only available with local storage")
    if not key.startswith(f"tenant/{principal.tenant_id}/"):
        raise HTTPException(403, "Key outside tenant namespace")
    data = await file.read()
    max_bytes = settings.MEDIA_MAX_UPLOAD_BYTES if content_type.startswith("video/") else settings.MEDIA_MAX_IMAGE_BYTES
    policy = UploadPolicy.for_content_type(content_type, max_bytes)
    if not policy.allows(len(data), file.content_type or content_type):
        raise HTTPException(400, "Upload violates policy (size or content type)")
    storage.put_bytes(key, data, content_type=content_type)
    return
