import uuid

from jose import jwt

from app.core.config import settings
from app.core.db import get_session
from app.main import app


class UnreachableDatabase:
    async def execute(self, *args, **kwargs):
        raise ConnectionRefusedError("database is down")


def token(**claims) -> str:
    payload = {"sub": str(uuid.uuid4()), "tenant_id": settings.DEFAULT_TENANT_ID, **claims}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def test_health_reports_database(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["checks"]["database"] == "healthy"
    assert body["environment"] == settings.ENV
    assert "uptime" in body and "timestamp" in body


def test_health_head(client):
    assert client.head("/api/v1/health").status_code == 200


def test_health_reports_unreachable_database(client):
    app.dependency_overrides[get_session] = lambda: UnreachableDatabase()

    resp = client.get("/api/v1/health")
    assert resp.status_code == 503
    assert resp.json()["status"] == "unhealthy"
    assert resp.json()["checks"]["database"] == "unhealthy"

    assert client.head("/api/v1/health").status_code == 503


def test_scopes_are_enforced(client, animal_payload):
    headers = {"Authorization": f"Bearer {token(scopes=['animals:read'])}"}
    assert client.post("/api/v1/animals", json=animal_payload, headers=headers).status_code == 403
    assert client.get("/api/v1/animals", params={"farm_id": animal_payload["farm_id"]}, headers=headers).status_code == 200


def test_tenants_are_isolated(client, animal):
    other_tenant = {"Authorization": f"Bearer {token(tenant_id=str(uuid.uuid4()), scopes=['*'])}"}
    assert client.get(f"/api/v1/animals/{animal['id']}", headers=other_tenant).status_code == 404
    resp = client.post(f"/api/v1/animals/{animal['id']}/media", json={"pose": "FRONT", "content_type": "image/jpeg"},
                       headers=other_tenant)
    assert resp.status_code == 404


def test_bad_token(client):
    resp = client.get("/api/v1/animals", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_missing_token_outside_local(client, monkeypatch):
    monkeypatch.setattr(settings, "ENV", "prod")
    assert client.get("/api/v1/notifications").status_code == 401
