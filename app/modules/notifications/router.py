import json
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.db import get_session
from app.core.security import get_principal, require_scopes, Principal
from app.modules.notifications.schemas import NotificationCreate, NotificationOut, NotificationList, MarkNotifications, MarkResult
from app.modules.notifications.service import NotificationsService
from app.platform.ports.notification_bus import NotificationBusPort
from app.platform.provider_registry import get_notification_bus

router = APIRouter()
def svc(s: AsyncSession = Depends(get_session), bus: NotificationBusPort = Depends(get_notification_bus)) -> NotificationsService:
    return NotificationsService(s, bus)

@router.get("", response_model=NotificationList, dependencies=[Depends(require_scopes("notify:read"))])
async def list_notifications(principal: Principal = Depends(get_principal), service: NotificationsService = Depends(svc)):
    return {"notifications": await service.list_unread(principal.tenant_id, principal.user_id)}

@router.post("", response_model=NotificationOut, status_code=201, dependencies=[Depends(require_scopes("notify:write"))])
async def create_notification(payload: NotificationCreate, principal: Principal = Depends(get_principal), service: NotificationsService = Depends(svc)):
    return await service.create(principal.tenant_id, principal.user_id, type=payload.type, title=payload.title,
                                message=payload.message, priority=payload.priority, metadata=payload.metadata)

@router.patch("", response_model=MarkResult, dependencies=[Depends(require_scopes("notify:write"))])
async def mark_notifications(payload: MarkNotifications, principal: Principal = Depends(get_principal), service: NotificationsService = Depends(svc)):
    try:
        updated = await service.mark(principal.tenant_id, principal.user_id, payload.notification_ids, read=payload.mark_as_read)
    except ValueError as e:
        if str(e) == "invalid_transition":
            raise HTTPException(409, "Invalid notification state transition")
        raise
    return {"success": True, "updated": updated}

@router.get("/stream", dependencies=[Depends(require_scopes("notify:read"))])
async def stream_notifications(principal: Principal = Depends(get_principal), bus: NotificationBusPort = Depends(get_notification_bus)):
    async def event_stream():
        async for payload in bus.subscribe(str(principal.user_id)):
            yield "event: notification\n"
            yield f"data: {json.dumps(payload, default=str)}\n\n"

    return StreamingResponse(event_stream(), media_type="text/event-stream")
