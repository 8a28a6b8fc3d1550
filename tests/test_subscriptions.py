"""Tests for the subscription management routes."""

from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from notion_relay.db.repository import Repository
from notion_relay.webhook import subscriptions
from notion_relay.webhook.models import Namespace

PAGE_ID = "5c6a28216bb14a7eb6e1c50111515c3d"


@pytest.fixture
def client(tmp_path):
    repo = Repository(f"sqlite+aiosqlite:///{tmp_path / 'relay.db'}")

    # Keep all database work on the TestClient's event loop
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await repo.init_db()
        yield
        await repo.close()

    subscriptions.configure(repo)
    app = FastAPI(lifespan=lifespan)
    app.include_router(subscriptions.router)

    with TestClient(app) as client:
        yield client, repo


def test_create_subscription(client):
    client, repo = client

    resp = client.post(
        "/subscriptions",
        json={"namespace": "page", "event_types": ["page.created", "page.moved"]},
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["namespace"] == "page"
    assert body["event_types"] == ["page.created", "page.moved"]
    assert body["entity_id"] is None
    assert isinstance(body["id"], int)


def test_event_types_must_share_namespace(client):
    client, repo = client

    resp = client.post(
        "/subscriptions",
        json={"namespace": "page", "event_types": ["page.created", "comment.created"]},
    )

    assert resp.status_code == 422
    assert client.get("/subscriptions").json() == []


def test_entity_id_normalized(client):
    client, repo = client

    resp = client.post(
        "/subscriptions",
        json={
            "namespace": "database",
            "entity_id": "https://www.notion.so/acme/5C6A2821-6BB1-4A7E-B6E1-C50111515C3D?v=1",
        },
    )

    assert resp.status_code == 201
    assert resp.json()["entity_id"] == PAGE_ID


def test_invalid_entity_id_rejected(client):
    client, repo = client

    resp = client.post("/subscriptions", json={"namespace": "page", "entity_id": "my page"})

    assert resp.status_code == 422


def test_unknown_namespace_rejected(client):
    client, repo = client

    resp = client.post("/subscriptions", json={"namespace": "workspace"})

    assert resp.status_code == 422


def test_list_filters_by_namespace(client):
    client, repo = client
    client.post("/subscriptions", json={"namespace": "page"})
    client.post("/subscriptions", json={"namespace": "comment"})
    client.post("/subscriptions", json={"namespace": "data_source"})

    assert len(client.get("/subscriptions").json()) == 3
    comments = client.get("/subscriptions", params={"namespace": "comment"}).json()
    assert [s["namespace"] for s in comments] == ["comment"]


def test_delete_subscription(client):
    client, repo = client
    sub_id = client.post("/subscriptions", json={"namespace": "page"}).json()["id"]

    assert client.delete(f"/subscriptions/{sub_id}").status_code == 204
    assert client.get("/subscriptions").json() == []
    assert client.delete(f"/subscriptions/{sub_id}").status_code == 404


def test_delete_unknown_subscription(client):
    client, repo = client

    assert client.delete("/subscriptions/999").status_code == 404


def test_deliveries_unknown_subscription(client):
    client, repo = client

    assert client.get("/subscriptions/999/deliveries").status_code == 404


def test_deliveries_projection(client):
    client, repo = client
    sub_id = client.post("/subscriptions", json={"namespace": "page"}).json()["id"]
    event = {"id": "evt_1", "type": "page.created", "entity": {"id": PAGE_ID}}
    client.portal.call(repo.record_deliveries, [sub_id], "evt_1", "page.created", event)

    resp = client.get(f"/subscriptions/{sub_id}/deliveries")

    assert resp.status_code == 200
    [delivery] = resp.json()
    assert delivery["eventId"] == "evt_1"
    assert delivery["eventType"] == "page.created"
    assert delivery["event"] == event
    assert isinstance(delivery["id"], int)
    assert delivery["deliveredAt"]


def test_listing_uses_registration_namespace(client):
    client, repo = client
    client.post("/subscriptions", json={"namespace": "page"})

    [registration] = client.portal.call(repo.list_subscribers, Namespace.PAGE)
    assert registration.namespace is Namespace.PAGE
