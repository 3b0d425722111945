import uuid


def measurements_api(animal_id) -> str:
    return f"/api/v1/animals/{animal_id}/measurements"


def test_record_and_list_newest_first(client, animal):
    api = measurements_api(animal["id"])
    first = client.post(api, json={"measured_at": "2024-01-10T08:00:00Z", "weight_kg": 410, "body_condition_score": 5})
    second = client.post(api, json={"measured_at": "2024-02-10T08:00:00Z", "weight_kg": 425.5, "height_cm": 131,
                                    "measured_by": "Dr. Sari"})
    assert first.status_code == 201, first.text
    assert second.status_code == 201
    assert second.json()["animal_id"] == animal["id"]

    body = client.get(api).json()
    assert [m["id"] for m in body["measurements"]] == [second.json()["id"], first.json()["id"]]
    assert body["measurements"][0]["weight_kg"] == 425.5
    assert body["pagination"] == {"page": 1, "limit": 50, "total": 2, "pages": 1}
    assert body["animal"] == {"id": animal["id"], "species": "CATTLE", "sex": "FEMALE"}

    page2 = client.get(api, params={"limit": 1, "page": 2}).json()
    assert [m["id"] for m in page2["measurements"]] == [first.json()["id"]]


def test_scrotal_circumference_only_for_males(client, animal, animal_payload):
    payload = {"measured_at": "2024-01-10T08:00:00Z", "scrotal_circumference_cm": 34}
    resp = client.post(measurements_api(animal["id"]), json=payload)
    assert resp.status_code == 400
    assert "male" in resp.json()["detail"]

    bull = client.post("/api/v1/animals", json={**animal_payload, "tag_number": "BRH-100", "sex": "MALE"}).json()
    assert client.post(measurements_api(bull["id"]), json=payload).status_code == 201


def test_measurement_validation(client, animal):
    api = measurements_api(animal["id"])
    assert client.post(api, json={"measured_at": "2024-01-10T08:00:00Z", "weight_kg": 2001}).status_code == 422
    assert client.post(api, json={"measured_at": "2024-01-10T08:00:00Z", "body_condition_score": 0}).status_code == 422
    assert client.post(api, json={"weight_kg": 400}).status_code == 422


def test_unknown_animal(client):
    api = measurements_api(uuid.uuid4())
    assert client.get(api).status_code == 404
    assert client.post(api, json={"measured_at": "2024-01-10T08:00:00Z"}).status_code == 404
