"""
tests.test_resources_api

End-to-end behaviour of the resource endpoints for a single user.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import httpx
import pytest

from conftest import dev_login


async def _client_and_order(
    client: httpx.AsyncClient, headers: dict[str, str], **order: object
) -> tuple[str, dict]:
    c = await client.post(
        "/clients", json={"name": " Acme ", "contact": "@acme", "source": "ads"}, headers=headers
    )
    client_id = c.json()["item"]["id"]
    o = await client.post(
        "/orders", json={"clientId": client_id, "title": "Landing page", **order}, headers=headers
    )
    assert o.status_code == 200, o.text
    return client_id, o.json()["item"]


@pytest.mark.asyncio
async def test_client_crud(client: httpx.AsyncClient) -> None:
    user_id, h = await dev_login(client, 10)

    created = (
        await client.post("/clients", json={"name": " Acme ", "contact": "@acme"}, headers=h)
    ).json()["item"]
    assert created["name"] == "Acme"
    assert created["userId"] == user_id
    assert created["source"] is None

    patched = await client.patch(
        f"/clients/{created['id']}", json={"contact": None, "source": "referral"}, headers=h
    )
    assert patched.status_code == 200
    assert patched.json()["item"]["contact"] is None
    assert patched.json()["item"]["source"] == "referral"
    assert patched.json()["item"]["name"] == "Acme"

    rejected = await client.patch(f"/clients/{created['id']}", json={"name": None}, headers=h)
    assert rejected.status_code == 400

    deleted = await client.delete(f"/clients/{created['id']}", headers=h)
    assert deleted.json() == {"success": True}
    assert (await client.get("/clients", headers=h)).json() == {"items": []}


@pytest.mark.asyncio
async def test_create_order_embeds_client(client: httpx.AsyncClient) -> None:
    _, h = await dev_login(client, 10)

    client_id, order = await _client_and_order(
        client, h, budget=1500.5, deadline="2031-05-01T12:00:00+03:00"
    )

    assert order["status"] == "NEW"
    assert order["budget"] == 1500.5
    assert order["clientId"] == client_id
    assert order["client"]["name"] == "Acme"
    assert order["deadline"] == "2031-05-01T09:00:00+00:00"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"clientId": None, "title": "no client"},
        {"clientId": "not-a-uuid", "title": "x"},
        {"title": "   "},
        {"title": "x", "status": "PAUSED"},
        {"title": "x", "budget": "lots"},
    ],
)
async def test_create_order_validation(client: httpx.AsyncClient, body: dict) -> None:
    _, h = await dev_login(client, 10)
    c = (await client.post("/clients", json={"name": "Acme"}, headers=h)).json()["item"]

    r = await client.post("/orders", json={"clientId": c["id"], **body}, headers=h)

    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request"


@pytest.mark.asyncio
async def test_order_patch_and_status(client: httpx.AsyncClient) -> None:
    _, h = await dev_login(client, 10)
    _, order = await _client_and_order(client, h, budget=200)
    other = (await client.post("/clients", json={"name": "Globex"}, headers=h)).json()["item"]

    r = await client.patch(
        f"/orders/{order['id']}", json={"clientId": other["id"], "budget": None}, headers=h
    )
    assert r.status_code == 200, r.text
    assert r.json()["item"]["client"]["name"] == "Globex"
    assert r.json()["item"]["budget"] == 0

    assert (await client.patch(f"/orders/{order['id']}", json={"title": None}, headers=h)).status_code == 400

    s = await client.post(f"/orders/{order['id']}/status", json={"status": "IN_PROGRESS"}, headers=h)
    assert s.json()["item"]["status"] == "IN_PROGRESS"


@pytest.mark.asyncio
async def test_order_list_filters(client: httpx.AsyncClient) -> None:
    _, h = await dev_login(client, 10)
    past = (datetime.now(UTC) - timedelta(days=3)).isoformat()
    future = (datetime.now(UTC) + timedelta(days=3)).isoformat()
    client_id, late = await _client_and_order(client, h, deadline=past)
    soon = (
        await client.post(
            "/orders",
            json={"clientId": client_id, "title": "Brand book", "deadline": future},
            headers=h,
        )
    ).json()["item"]
    await client.post(f"/orders/{soon['id']}/status", json={"status": "DONE"}, headers=h)

    async def ids(**params: str) -> list[str]:
        r = await client.get("/orders", params=params, headers=h)
        assert r.status_code == 200, r.text
        return [o["id"] for o in r.json()["items"]]

    assert set(await ids()) == {late["id"], soon["id"]}
    assert await ids(status="DONE") == [soon["id"]]
    assert await ids(search="brand") == [soon["id"]]
    assert await ids(deadline="overdue") == [late["id"]]
    assert await ids(deadline="upcoming") == [soon["id"]]

    bad = await client.get("/orders", params={"deadline": "someday"}, headers=h)
    assert bad.status_code == 400
    assert bad.json() == {"error": "Query parameter 'deadline' has invalid value"}
    assert (await client.get("/orders", params={"status": "nope"}, headers=h)).status_code == 400


@pytest.mark.asyncio
async def test_order_detail_tasks_notes_reminders(client: httpx.AsyncClient) -> None:
    _, h = await dev_login(client, 10)
    _, order = await _client_and_order(client, h)
    oid = order["id"]

    second = (await client.post(f"/orders/{oid}/tasks", json={"title": "B", "position": 2}, headers=h)).json()
    first = (await client.post(f"/orders/{oid}/tasks", json={"title": "A", "position": 1}, headers=h)).json()
    done = await client.patch(f"/tasks/{first['item']['id']}", json={"done": True}, headers=h)
    assert done.json()["item"]["done"] is True
    assert (await client.patch(f"/tasks/{first['item']['id']}", json={"done": "yes"}, headers=h)).status_code == 400

    await client.post(f"/orders/{oid}/notes", json={"text": "first"}, headers=h)
    rem = await client.post(
        "/reminders", json={"orderId": oid, "remindAt": "2031-01-01T09:00:00Z"}, headers=h
    )
    assert rem.json()["item"]["channel"] == "TELEGRAM"
    assert rem.json()["item"]["order"] == {"id": oid, "title": "Landing page"}

    detail = (await client.get(f"/orders/{oid}", headers=h)).json()["item"]
    assert [t["title"] for t in detail["tasks"]] == ["A", "B"]
    assert [n["text"] for n in detail["notes"]] == ["first"]
    assert detail["reminders"][0]["remindAt"] == "2031-01-01T09:00:00+00:00"

    assert (await client.delete(f"/tasks/{second['item']['id']}", headers=h)).json() == {"success": True}
    listed = (await client.get(f"/orders/{oid}/tasks", headers=h)).json()["items"]
    assert [t["title"] for t in listed] == ["A"]


@pytest.mark.asyncio
async def test_reminder_patch_nulls_restore_defaults(client: httpx.AsyncClient) -> None:
    _, h = await dev_login(client, 10)
    _, order = await _client_and_order(client, h)
    rem = (
        await client.post(
            "/reminders",
            json={"orderId": order["id"], "remindAt": "2031-01-01T09:00:00Z", "channel": "EMAIL", "sent": True},
            headers=h,
        )
    ).json()["item"]

    r = await client.patch(f"/reminders/{rem['id']}", json={"channel": None, "sent": None}, headers=h)

    assert r.status_code == 200, r.text
    assert r.json()["item"]["channel"] == "TELEGRAM"
    assert r.json()["item"]["sent"] is False
    assert (await client.patch(f"/reminders/{rem['id']}", json={"remindAt": None}, headers=h)).status_code == 400


@pytest.mark.asyncio
async def test_deleting_order_removes_children(client: httpx.AsyncClient) -> None:
    _, h = await dev_login(client, 10)
    _, order = await _client_and_order(client, h)
    task = (await client.post(f"/orders/{order['id']}/tasks", json={"title": "t"}, headers=h)).json()
    await client.post(
        "/reminders", json={"orderId": order["id"], "remindAt": "2031-01-01T09:00:00Z"}, headers=h
    )

    assert (await client.delete(f"/orders/{order['id']}", headers=h)).status_code == 200

    assert (await client.get("/reminders", headers=h)).json() == {"items": []}
    assert (await client.patch(f"/tasks/{task['item']['id']}", json={"done": True}, headers=h)).status_code == 404


@pytest.mark.asyncio
async def test_templates_crud(client: httpx.AsyncClient) -> None:
    _, h = await dev_login(client, 10)

    tpl = (await client.post("/templates", json={"title": "Hi", "body": "Hello {name}"}, headers=h)).json()["item"]
    r = await client.patch(f"/templates/{tpl['id']}", json={"body": "Hey"}, headers=h)

    assert r.json()["item"] == {**tpl, "body": "Hey"}
    assert (await client.post("/templates", json={"title": "Hi"}, headers=h)).status_code == 400


@pytest.mark.asyncio
async def test_dashboard_summary(client: httpx.AsyncClient) -> None:
    _, h = await dev_login(client, 10)
    future = (datetime.now(UTC) + timedelta(days=2)).isoformat()
    past = (datetime.now(UTC) - timedelta(days=2)).isoformat()
    client_id, upcoming = await _client_and_order(client, h, deadline=future)
    await client.post("/orders", json={"clientId": client_id, "title": "Late", "deadline": past}, headers=h)
    paid = (
        await client.post("/orders", json={"clientId": client_id, "title": "Paid", "budget": 300}, headers=h)
    ).json()["item"]
    await client.post(f"/orders/{paid['id']}/status", json={"status": "DONE"}, headers=h)

    summary = (await client.get("/dashboard/summary", headers=h)).json()

    assert summary["activeOrders"] == 2
    assert summary["overdueOrders"] == 1
    assert summary["monthlyIncome"] == 300
    assert [d["id"] for d in summary["upcomingDeadlines"]] == [upcoming["id"]]
    assert summary["upcomingDeadlines"][0]["clientName"] == "Acme"


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    assert (await client.get("/healthz")).json() == {"status": "ok"}
    assert (await client.get("/readyz")).json() == {"status": "ready"}

    r = await client.get("/health")
    assert r.json()["database"] == "connected"
    assert r.headers["x-request-id"]


@pytest.mark.asyncio
@pytest.mark.parametrize("position", [2**31, -(2**31) - 1, 10**20, 1e20])
async def test_task_position_outside_integer_column(
    client: httpx.AsyncClient, position: float
) -> None:
    _, h = await dev_login(client, 10)
    _, order = await _client_and_order(client, h)
    task = (await client.post(f"/orders/{order['id']}/tasks", json={"title": "t"}, headers=h)).json()

    created = await client.post(
        f"/orders/{order['id']}/tasks", json={"title": "t", "position": position}, headers=h
    )
    patched = await client.patch(
        f"/tasks/{task['item']['id']}", json={"position": position}, headers=h
    )

    assert created.status_code == 400
    assert created.json()["error"] == "Invalid request"
    assert patched.status_code == 400
