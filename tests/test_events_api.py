from __future__ import annotations

from fastapi.testclient import TestClient

from events_api.domain.events import EventRecord
from events_api.models.event import EventStatus
from events_api.stores.sqlalchemy_store import SqlAlchemyEventStore

HAL_JSON = "application/hal+json"


def _generate_event(db_session, i: int, manager_id: int | None = None) -> EventRecord:
    store = SqlAlchemyEventStore(db_session)
    return store.save(
        EventRecord(name=f"name_{i}", description=f"description_{i}", manager_id=manager_id)
    )


def _create(client: TestClient, headers: dict, payload: dict):
    return client.post(
        "/api/events",
        json=payload,
        headers={**headers, "Accept": HAL_JSON},
    )


def test_create_event(client: TestClient, admin_headers, event_payload):
    resp = _create(client, admin_headers, event_payload())

    assert resp.status_code == 201
    assert resp.headers["content-type"] == HAL_JSON
    body = resp.json()
    assert body["id"] is not None
    assert resp.headers["location"].endswith(f"/api/events/{body['id']}")
    assert body["free"] is False
    assert body["offline"] is True
    assert body["eventStatus"] == EventStatus.DRAFT.value
    assert body["beginEnrollmentDateTime"] == "2021-08-01T08:30:00"
    assert body["limitOfEnrollment"] == 1000
    for rel in ("self", "query-events", "update-event", "profile"):
        assert "href" in body["_links"][rel]
    assert body["_links"]["profile"]["href"].endswith("#resources-events-create")


def test_create_free_offline_flags(client: TestClient, admin_headers, event_payload):
    resp = _create(client, admin_headers, event_payload(basePrice=0, maxPrice=0, location=None))

    assert resp.status_code == 201
    assert resp.json()["free"] is True
    assert resp.json()["offline"] is False


def test_create_event_requires_authentication(client: TestClient, event_payload):
    resp = client.post("/api/events", json=event_payload())

    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_create_event_with_invalid_token(client: TestClient, event_payload):
    resp = _create(client, {"Authorization": "Bearer not-a-token"}, event_payload())

    assert resp.status_code == 401


def test_create_event_bad_request_system_fields(client: TestClient, admin_headers, event_payload):
    payload = event_payload(id=100, free=True, offline=False, eventStatus="PUBLISHED")

    resp = _create(client, admin_headers, payload)

    assert resp.status_code == 400
    fields = {e["field"] for e in resp.json()["errors"]}
    assert {"id", "free", "offline", "eventStatus"} <= fields


def test_create_event_bad_request_empty_input(client: TestClient, admin_headers):
    resp = _create(client, admin_headers, {})

    assert resp.status_code == 400
    errors = resp.json()["errors"]
    assert errors
    assert {e["field"] for e in errors} >= {"name", "description", "endEventDateTime"}


def test_create_event_bad_request_negative_price(client: TestClient, admin_headers, event_payload):
    resp = _create(client, admin_headers, event_payload(basePrice=-1))

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "basePrice"


def test_create_event_bad_request_price_out_of_range(client: TestClient, admin_headers, event_payload):
    resp = _create(client, admin_headers, event_payload(basePrice=10**20, maxPrice=10**21))

    assert resp.status_code == 400
    assert {e["field"] for e in resp.json()["errors"]} == {"basePrice", "maxPrice"}


def test_update_event_enrollment_limit_out_of_range(client: TestClient, admin_headers, event_payload):
    created = _create(client, admin_headers, event_payload()).json()

    resp = client.put(
        f"/api/events/{created['id']}",
        json=event_payload(limitOfEnrollment=2**31),
        headers=admin_headers,
    )

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "limitOfEnrollment"


def test_create_event_bad_request_wrong_input(client: TestClient, admin_headers, event_payload):
    payload = event_payload(
        beginEnrollmentDateTime="2021-08-31T08:30:00",
        closeEnrollmentDateTime="2021-08-01T05:30:00",
        beginEventDateTime="2021-08-31T08:30:00",
        endEventDateTime="2021-08-01T05:30:00",
        basePrice=2000,
        maxPrice=1000,
    )

    resp = _create(client, admin_headers, payload)

    assert resp.status_code == 400
    body = resp.json()
    assert body["errors"][0]["objectName"]
    assert body["errors"][0]["defaultMessage"]
    assert body["errors"][0]["code"] == "wrongPrice"
    assert body["errors"][1]["code"] == "wrongValue"
    assert len(body["errors"]) == 2
    assert body["_links"]["index"]["href"].endswith("/api")


def test_create_event_accepts_offset_timestamps(client: TestClient, admin_headers, event_payload):
    resp = _create(
        client,
        admin_headers,
        event_payload(
            beginEnrollmentDateTime="2021-08-01T17:30:00+09:00",
            closeEnrollmentDateTime="2021-08-31T05:30:00Z",
            beginEventDateTime="2021-08-01T08:30:00Z",
            endEventDateTime="2021-08-31T05:30:00Z",
        ),
    )

    assert resp.status_code == 201
    assert resp.json()["beginEnrollmentDateTime"] == "2021-08-01T08:30:00"


def test_query_events(client: TestClient, db_session):
    for i in range(30):
        _generate_event(db_session, i)

    resp = client.get("/api/events", params={"page": 1, "size": 10, "sort": "name,DESC"})

    assert resp.status_code == 200
    assert resp.headers["content-type"] == HAL_JSON
    body = resp.json()
    assert body["page"] == {"size": 10, "totalElements": 30, "totalPages": 3, "number": 1}
    assert len(body["_embedded"]["eventList"]) == 10
    assert body["_embedded"]["eventList"][0]["_links"]["self"]["href"]
    for rel in ("self", "profile", "first", "prev", "next", "last"):
        assert rel in body["_links"]
    assert "page=2" in body["_links"]["next"]["href"]
    assert "sort=name%2Cdesc" in body["_links"]["self"]["href"]
    assert "create-event" not in body["_links"]


def test_query_events_sorted_descending(client: TestClient, db_session):
    for name in ("alpha", "charlie", "bravo"):
        SqlAlchemyEventStore(db_session).save(EventRecord(name=name, description="d"))

    resp = client.get("/api/events", params={"sort": "name,desc"})

    names = [e["name"] for e in resp.json()["_embedded"]["eventList"]]
    assert names == ["charlie", "bravo", "alpha"]


def test_query_events_with_authentication(client: TestClient, db_session, admin_headers):
    for i in range(30):
        _generate_event(db_session, i)

    resp = client.get(
        "/api/events",
        params={"page": 1, "size": 10, "sort": "name,DESC"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    assert "create-event" in resp.json()["_links"]


def test_query_events_empty(client: TestClient):
    resp = client.get("/api/events")

    assert resp.status_code == 200
    body = resp.json()
    assert "_embedded" not in body
    assert body["page"]["totalElements"] == 0
    assert "next" not in body["_links"]


def test_query_events_unknown_sort_property(client: TestClient):
    resp = client.get("/api/events", params={"sort": "password,asc"})

    assert resp.status_code == 400


def test_query_events_bad_page_size(client: TestClient):
    resp = client.get("/api/events", params={"size": 0})

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "size"


def test_query_events_page_number_out_of_range(client: TestClient):
    resp = client.get("/api/events", params={"page": 10**19, "size": 10})

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "page"


def test_query_events_far_page_is_empty(client: TestClient, db_session):
    _generate_event(db_session, 1)

    resp = client.get("/api/events", params={"page": 2_147_483_647, "size": 2000})

    assert resp.status_code == 200
    assert "_embedded" not in resp.json()


def test_get_event(client: TestClient, db_session):
    event = _generate_event(db_session, 100)

    resp = client.get(f"/api/events/{event.id}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "name_100"
    assert body["id"] == event.id
    assert body["_links"]["self"]["href"]
    assert body["_links"]["profile"]["href"]
    assert "update-event" not in body["_links"]


def test_get_event_shows_update_link_to_manager(client: TestClient, admin_headers, event_payload):
    created = _create(client, admin_headers, event_payload()).json()

    resp = client.get(f"/api/events/{created['id']}", headers=admin_headers)

    assert "update-event" in resp.json()["_links"]


def test_get_event_404(client: TestClient):
    resp = client.get("/api/events/99999")

    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "EVENT_NOT_FOUND"


def test_update_event(client: TestClient, admin_headers, event_payload):
    created = _create(client, admin_headers, event_payload()).json()

    resp = client.put(
        f"/api/events/{created['id']}",
        json=event_payload(name="Updated Event"),
        headers=admin_headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Updated Event"
    assert body["_links"]["self"]["href"]
    assert body["_links"]["profile"]["href"].endswith("#resources-events-update")


def test_update_event_rederives_flags(client: TestClient, admin_headers, event_payload):
    created = _create(client, admin_headers, event_payload()).json()
    assert created["free"] is False
    assert created["offline"] is True

    resp = client.put(
        f"/api/events/{created['id']}",
        json=event_payload(basePrice=0, maxPrice=0, location="  "),
        headers=admin_headers,
    )

    assert resp.status_code == 200
    assert resp.json()["free"] is True
    assert resp.json()["offline"] is False


def test_update_event_empty_input(client: TestClient, admin_headers, event_payload):
    created = _create(client, admin_headers, event_payload()).json()

    resp = client.put(f"/api/events/{created['id']}", json={}, headers=admin_headers)

    assert resp.status_code == 400


def test_update_event_wrong_input(client: TestClient, admin_headers, event_payload):
    created = _create(client, admin_headers, event_payload()).json()

    resp = client.put(
        f"/api/events/{created['id']}",
        json=event_payload(basePrice=20000, maxPrice=1000),
        headers=admin_headers,
    )

    assert resp.status_code == 400
    assert [e["code"] for e in resp.json()["errors"]] == ["wrongPrice"]

    unchanged = client.get(f"/api/events/{created['id']}").json()
    assert unchanged["basePrice"] == 1000


def test_update_event_not_found(client: TestClient, admin_headers, event_payload):
    resp = client.put("/api/events/123123", json=event_payload(), headers=admin_headers)

    assert resp.status_code == 404


def test_update_event_by_non_manager(client: TestClient, admin_headers, user_headers, event_payload):
    created = _create(client, admin_headers, event_payload()).json()

    resp = client.put(
        f"/api/events/{created['id']}",
        json=event_payload(name="Not yours"),
        headers=user_headers,
    )

    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "NOT_EVENT_MANAGER"


def test_update_event_requires_authentication(client: TestClient, admin_headers, event_payload):
    created = _create(client, admin_headers, event_payload()).json()

    resp = client.put(f"/api/events/{created['id']}", json=event_payload())

    assert resp.status_code == 401


def test_index(client: TestClient):
    resp = client.get("/api")

    assert resp.status_code == 200
    assert resp.json()["_links"]["events"]["href"].endswith("/api/events")


def test_health_and_request_id(client: TestClient):
    resp = client.get("/health", headers={"X-Request-ID": "abc-123"})

    assert resp.status_code == 200
    assert resp.headers["x-request-id"] == "abc-123"
    assert resp.headers["x-content-type-options"] == "nosniff"
