from urllib.parse import unquote

import httpx
import pytest
from sqlalchemy import text

from infrastructure.database.base import get_db_session
from isready.api import create_app


@pytest.fixture
async def client(session_maker):
    app = create_app(use_lifespan=False)

    async def override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def token(client):
    response = await client.post("/api/auth/register", json={"shop_name": "Stitch Perfect"})
    assert response.status_code == 201
    return response.json()["api_token"]


async def create(client, token, **form):
    payload = {"customer_name": "John Doe", "customer_phone": "+91 98765-43210", **form}
    return await client.post("/api/orders", json=payload, headers={"X-Shop-Token": token})


async def test_health(client):
    response = await client.get("/health")

    assert response.json() == {"status": "ok", "service": "isready"}


async def test_orders_need_a_token(client):
    response = await client.get("/api/orders")

    assert response.status_code == 401


async def test_create_order_returns_handoff_uri(client, token):
    response = await create(client, token, items="2 shirts", price=1500, advance_payment="500")

    assert response.status_code == 201
    body = response.json()
    assert body["order"]["status"] == "In Progress"
    assert body["handoff_uri"].startswith("https://wa.me/919876543210?text=")
    assert "Your order has been received at Stitch Perfect" in unquote(body["handoff_uri"])


async def test_create_order_validation_error(client, token):
    response = await create(client, token, customer_name="")

    assert response.status_code == 422
    assert response.json() == {"detail": "Please fill in customer name and phone number"}


async def test_full_lifecycle(client, token):
    headers = {"X-Shop-Token": token}
    order_id = (await create(client, token, price="1200", advance_payment="200")).json()["order"]["id"]

    extended = await client.post(
        f"/api/orders/{order_id}/delivery-date",
        json={"delivery_date": "2026-11-01"},
        headers=headers,
    )
    assert extended.status_code == 200
    assert extended.json()["order"]["delivery_date"] == "2026-11-01"
    assert "New Delivery Date: 2026-11-01" in unquote(extended.json()["handoff_uri"])

    ready = await client.post(f"/api/orders/{order_id}/status", json={"status": "Ready"}, headers=headers)
    assert ready.status_code == 200
    assert "Balance Due: ₹1,000" in unquote(ready.json()["handoff_uri"])

    done = await client.post(f"/api/orders/{order_id}/status", json={"status": "Completed"}, headers=headers)
    assert done.status_code == 200
    assert done.json()["handoff_uri"] is None

    view = (await client.get("/api/orders", headers=headers)).json()
    assert view["stats"] == {"in_progress": 0, "ready": 0, "completed": 1}
    assert view["active"] == []
    assert [o["id"] for o in view["completed"]] == [order_id]


async def test_search_filters_active_orders(client, token):
    await create(client, token, customer_name="John Doe", customer_phone="+1 202 000")
    await create(client, token, customer_name="Amy", customer_phone="5551234")

    view = (await client.get("/api/orders", params={"q": "555"}, headers={"X-Shop-Token": token})).json()

    assert [o["customer_name"] for o in view["active"]] == ["Amy"]
    assert len(view["recent"]) == 2


async def test_unknown_order_is_404(client, token):
    response = await client.post("/api/orders/999/status", json={"status": "Ready"}, headers={"X-Shop-Token": token})

    assert response.status_code == 404


async def test_illegal_transition_is_422(client, token):
    order_id = (await create(client, token)).json()["order"]["id"]

    response = await client.post(
        f"/api/orders/{order_id}/status",
        json={"status": "Completed"},
        headers={"X-Shop-Token": token},
    )

    assert response.status_code == 422


async def test_empty_delivery_date_is_422(client, token):
    order_id = (await create(client, token)).json()["order"]["id"]

    response = await client.post(
        f"/api/orders/{order_id}/delivery-date",
        json={"delivery_date": ""},
        headers={"X-Shop-Token": token},
    )

    assert response.status_code == 422


async def test_logout_closes_session(client, token):
    headers = {"X-Shop-Token": token}

    assert (await client.post("/api/auth/logout", headers=headers)).status_code == 204
    assert (await client.get("/api/orders", headers=headers)).status_code == 401


async def test_shops_do_not_see_each_other(client, token):
    await create(client, token)
    other = (await client.post("/api/auth/register", json={"shop_name": "Other"})).json()["api_token"]

    view = (await client.get("/api/orders", headers={"X-Shop-Token": other})).json()

    assert view["recent"] == []


async def test_store_failure_is_503_without_sql(client, token, session_maker):
    async with session_maker() as session:
        await session.execute(text("DROP TABLE orders"))
        await session.commit()

    response = await client.get("/api/orders", headers={"X-Shop-Token": token})

    assert response.status_code == 503
    assert response.json() == {"detail": "Error loading orders"}
