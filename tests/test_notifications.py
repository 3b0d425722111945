import asyncio
import json
import uuid
from datetime import datetime, timezone

import pytest

from app.core.security import Principal
from app.modules.notifications.models import Notification, PENDING, DELIVERED, READ
from app.modules.notifications.router import stream_notifications
from app.modules.notifications.service import NotificationsService

API = "/api/v1/notifications"
TENANT = uuid.UUID(int=1)
USER = uuid.UUID(int=42)


def test_state_machine():
    n = Notification(status=PENDING)
    now = datetime.now(timezone.utc)

    n.transition(DELIVERED, now)
    assert n.status == DELIVERED and n.delivered_at == now and n.read_at is None

    n.transition(READ, now)
    assert n.status == READ and n.read_at == now

    n.transition(DELIVERED, now)  # mark unread
    assert n.status == DELIVERED and n.read_at is None

    with pytest.raises(ValueError, match="invalid_transition"):
        n.transition(PENDING, now)


def test_pending_can_be_read_directly():
    n = Notification(status=PENDING)
    n.transition(READ, datetime.now(timezone.utc))
    assert n.status == READ
    assert n.delivered_at is not None


async def test_create_without_subscribers_stays_pending(session, bus):
    service = NotificationsService(session, bus)
    n = await service.create(TENANT, USER, type="system", title="Welcome", message="hello")
    assert n.status == PENDING
    assert n.delivered_at is None


async def test_create_with_subscriber_is_delivered(session, bus):
    received = []

    async def listen():
        async for payload in bus.subscribe(str(USER)):
            received.append(payload)
            break

    listener = asyncio.create_task(listen())
    await asyncio.sleep(0)
    assert bus.subscriber_count(str(USER)) == 1

    service = NotificationsService(session, bus)
    n = await service.create(TENANT, USER, type="health_alert", title="Vaccine due", message="BRH-001",
                             priority="high", metadata={"animal_tag": "BRH-001"})
    await asyncio.wait_for(listener, timeout=1)

    assert n.status == DELIVERED
    assert received[0]["id"] == str(n.id)
    assert received[0]["metadata"] == {"animal_tag": "BRH-001"}


async def test_bus_is_keyed_by_user(bus):
    other = []

    async def listen():
        async for payload in bus.subscribe("someone-else"):
            other.append(payload)

    task = asyncio.create_task(listen())
    await asyncio.sleep(0)
    assert await bus.publish(str(USER), {"id": "x"}) == 0
    assert await bus.publish("someone-else", {"id": "y"}) == 1
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert other == [{"id": "y"}]


async def test_mark_read_and_unread(session, bus):
    service = NotificationsService(session, bus)
    a = await service.create(TENANT, USER, type="system", title="A", message="a")
    b = await service.create(TENANT, USER, type="system", title="B", message="b")
    await service.create(TENANT, uuid.uuid4(), type="system", title="C", message="not mine")

    assert await service.mark(TENANT, USER, [a.id]) == 1
    unread = await service.list_unread(TENANT, USER)
    assert [n.id for n in unread] == [b.id]

    assert await service.mark(TENANT, USER, [a.id]) == 0
    assert await service.mark(TENANT, USER, [a.id], read=False) == 1
    assert {n.id for n in await service.list_unread(TENANT, USER)} == {a.id, b.id}


def test_notifications_api(client):
    created = client.post(API, json={"type": "breeding", "title": "Heat detected", "message": "LIM-001"})
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "pending"
    assert body["priority"] == "medium"

    listed = client.get(API).json()["notifications"]
    assert [n["id"] for n in listed] == [body["id"]]

    marked = client.patch(API, json={"notification_ids": [body["id"]]})
    assert marked.json() == {"success": True, "updated": 1}
    assert client.get(API).json()["notifications"] == []

    unread = client.patch(API, json={"notification_ids": [body["id"]], "mark_as_read": False})
    assert unread.json()["updated"] == 1
    assert len(client.get(API).json()["notifications"]) == 1


def test_notifications_api_validation(client):
    assert client.post(API, json={"type": "x", "title": "t", "message": "m", "priority": "urgent"}).status_code == 422
    assert client.patch(API, json={"notification_ids": []}).status_code == 422


async def test_stream_emits_notification_frames(session, bus):
    principal = Principal(user_id=USER, tenant_id=TENANT, scopes=["notify:read"])
    resp = await stream_notifications(principal=principal, bus=bus)
    assert resp.media_type == "text/event-stream"

    frames = resp.body_iterator
    first = asyncio.ensure_future(frames.__anext__())
    await asyncio.sleep(0)
    assert bus.subscriber_count(str(USER)) == 1

    n = await NotificationsService(session, bus).create(TENANT, USER, type="breeding", title="Heat detected",
                                                        message="LIM-001")
    assert n.status == DELIVERED

    assert await asyncio.wait_for(first, timeout=1) == "event: notification\n"
    data = await asyncio.wait_for(frames.__anext__(), timeout=1)
    assert data.startswith("data: ") and data.endswith("\n\n")
    assert json.loads(data[len("data: "):])["id"] == str(n.id)
    await frames.aclose()
