"""Тесты HTTP-обработчиков API сладостей."""

import uuid
from typing import Any
from unittest.mock import AsyncMock, patch

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sweet_shop.db.models import Sweet
from sweet_shop.services import sweet_service

SWEETS_URL = "/api/sweets"


async def add_sweet(client: AsyncClient, **overrides: Any) -> dict[str, Any]:
    """Хелпер: POST /api/sweets и возврат созданной записи."""
    payload = {"name": "Kaju Katli", "category": "Nut-Based", "price": 50, "quantity": 20}
    payload.update(overrides)
    response = await client.post(SWEETS_URL, json=payload)
    assert response.status_code == 201
    return response.json()  # type: ignore[no-any-return]


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "OK", "message": "Sweet Shop API is running"}


async def test_add_sweet(
    client: AsyncClient, session_factory: async_sessionmaker[AsyncSession]
) -> None:
    """Новая сладость возвращается с 201 и сохраняется в БД."""
    body = await add_sweet(client)

    assert body["name"] == "Kaju Katli"
    assert body["category"] == "Nut-Based"
    assert body["price"] == 50
    assert body["quantity"] == 20
    assert "createdAt" in body
    assert "updatedAt" in body

    async with session_factory() as session:
        stored = await session.get(Sweet, uuid.UUID(body["id"]))
    assert stored is not None
    assert stored.name == "Kaju Katli"

    response = await client.get(f"{SWEETS_URL}/{body['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Kaju Katli"


async def test_add_sweet_missing_fields(client: AsyncClient) -> None:
    response = await client.post(SWEETS_URL, json={})
    assert response.status_code == 400
    assert "error" in response.json()


async def test_add_sweet_negative_price(client: AsyncClient) -> None:
    response = await client.post(
        SWEETS_URL,
        json={"name": "Test Sweet", "category": "Test Category", "price": -10, "quantity": 5},
    )
    assert response.status_code == 400
    assert "price" in response.json()["error"]


async def test_add_sweet_malformed_json(client: AsyncClient) -> None:
    response = await client.post(
        SWEETS_URL, content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert "error" in response.json()


async def test_add_sweet_unexpected_failure(client: AsyncClient) -> None:
    """Непредвиденная ошибка дает 500 без внутренних подробностей."""
    with patch.object(
        sweet_service, "create_sweet", AsyncMock(side_effect=RuntimeError("db down"))
    ):
        response = await client.post(
            SWEETS_URL,
            json={"name": "Test", "category": "Test", "price": 1, "quantity": 1},
        )
    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}


async def test_list_sweets_empty(client: AsyncClient) -> None:
    response = await client.get(SWEETS_URL)
    assert response.status_code == 200
    assert response.json() == []


async def test_list_sweets_newest_first(client: AsyncClient) -> None:
    for name in ("First", "Second", "Third"):
        await add_sweet(client, name=name)

    response = await client.get(SWEETS_URL)
    assert response.status_code == 200
    assert [sweet["name"] for sweet in response.json()] == ["Third", "Second", "First"]


async def test_search_sweets(client: AsyncClient) -> None:
    await add_sweet(client, name="Kaju Katli", category="Nut-Based", price=50)
    await add_sweet(client, name="Gulab Jamun", category="Milk-Based", price=10)
    await add_sweet(client, name="Kaju Roll", category="Nut-Based", price=80)

    response = await client.get(f"{SWEETS_URL}/search", params={"name": "KAJU"})
    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == ["Kaju Roll", "Kaju Katli"]

    response = await client.get(
        f"{SWEETS_URL}/search", params={"minPrice": "10", "maxPrice": "50"}
    )
    assert {s["name"] for s in response.json()} == {"Kaju Katli", "Gulab Jamun"}

    response = await client.get(
        f"{SWEETS_URL}/search", params={"category": "Milk-Based"}
    )
    assert [s["name"] for s in response.json()] == ["Gulab Jamun"]

    response = await client.get(f"{SWEETS_URL}/search", params={"name": "laddu"})
    assert response.status_code == 200
    assert response.json() == []


async def test_search_sweets_unparsable_price(client: AsyncClient) -> None:
    """Нечисловая граница цены не совпадает ни с одной сладостью."""
    await add_sweet(client, price=50)

    for params in (
        {"minPrice": "cheap"},
        {"maxPrice": ""},
        {"minPrice": "abc", "name": "kaju"},
    ):
        response = await client.get(f"{SWEETS_URL}/search", params=params)
        assert response.status_code == 200
        assert response.json() == []

    response = await client.get(f"{SWEETS_URL}/search", params={"minPrice": "40usd"})
    assert response.status_code == 200
    assert [s["price"] for s in response.json()] == [50]


async def test_delete_sweet(client: AsyncClient) -> None:
    body = await add_sweet(client)

    response = await client.delete(f"{SWEETS_URL}/{body['id']}")
    assert response.status_code == 200
    assert response.json()["message"] == "Sweet deleted successfully"
    assert response.json()["sweet"]["id"] == body["id"]

    response = await client.get(f"{SWEETS_URL}/{body['id']}")
    assert response.status_code == 404

    response = await client.delete(f"{SWEETS_URL}/{body['id']}")
    assert response.status_code == 404
    assert response.json() == {"error": "Sweet not found"}


async def test_delete_sweet_invalid_id(client: AsyncClient) -> None:
    response = await client.delete(f"{SWEETS_URL}/invalid-id")
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid sweet ID"}


async def test_purchase_sweet(client: AsyncClient) -> None:
    """Покупка 5 шт. по 50 из 20: остаток 15, стоимость 250."""
    body = await add_sweet(client, price=50, quantity=20)

    response = await client.post(
        f"{SWEETS_URL}/{body['id']}/purchase", json={"quantity": 5}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Purchase successful"
    assert data["sweet"]["quantity"] == 15
    assert data["purchaseDetails"] == {
        "purchasedQuantity": 5,
        "totalCost": 250,
        "remainingStock": 15,
    }


async def test_purchase_sweet_not_enough_stock(client: AsyncClient) -> None:
    body = await add_sweet(client, quantity=5)

    response = await client.post(
        f"{SWEETS_URL}/{body['id']}/purchase", json={"quantity": 10}
    )
    assert response.status_code == 400
    assert response.json() == {
        "error": "Not enough stock available. Available: 5, Requested: 10"
    }

    response = await client.get(f"{SWEETS_URL}/{body['id']}")
    assert response.json()["quantity"] == 5


async def test_purchase_sweet_invalid_quantity(client: AsyncClient) -> None:
    body = await add_sweet(client)

    for payload in ({"quantity": 0}, {"quantity": -1}, {"quantity": 1.5}, {"quantity": "2"}, {}):
        response = await client.post(f"{SWEETS_URL}/{body['id']}/purchase", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": "Quantity must be a positive number"}

    response = await client.post(f"{SWEETS_URL}/{body['id']}/purchase")
    assert response.status_code == 400


async def test_purchase_sweet_not_found_and_invalid_id(client: AsyncClient) -> None:
    response = await client.post(
        f"{SWEETS_URL}/{uuid.uuid4()}/purchase", json={"quantity": 1}
    )
    assert response.status_code == 404

    response = await client.post(f"{SWEETS_URL}/123/purchase", json={"quantity": 1})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid sweet ID"}


async def test_restock_sweet(client: AsyncClient) -> None:
    body = await add_sweet(client, quantity=100)

    response = await client.post(
        f"{SWEETS_URL}/{body['id']}/restock", json={"quantity": 1000}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Restock successful"
    assert data["sweet"]["quantity"] == 1100
    assert data["restockDetails"] == {
        "restockedQuantity": 1000,
        "previousStock": 100,
        "newStock": 1100,
    }


async def test_restock_sweet_invalid_quantity(client: AsyncClient) -> None:
    body = await add_sweet(client, quantity=7)

    response = await client.post(
        f"{SWEETS_URL}/{body['id']}/restock", json={"quantity": -5}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Quantity must be a positive number"}

    response = await client.get(f"{SWEETS_URL}/{body['id']}")
    assert response.json()["quantity"] == 7


async def test_restock_sweet_not_found(client: AsyncClient) -> None:
    response = await client.post(
        f"{SWEETS_URL}/{uuid.uuid4()}/restock", json={"quantity": 10}
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Sweet not found"}


async def test_restock_sweet_beyond_max_stock(client: AsyncClient) -> None:
    """Переполнение остатка отклоняется с 400, запись не портится."""
    body = await add_sweet(client, quantity=9223372036854775000)

    response = await client.post(
        f"{SWEETS_URL}/{body['id']}/restock", json={"quantity": 9223372036854775000}
    )
    assert response.status_code == 400
    assert "maximum stock" in response.json()["error"]

    response = await client.post(
        f"{SWEETS_URL}/{body['id']}/restock", json={"quantity": 2**63}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Quantity must be a positive number"}

    response = await client.get(SWEETS_URL)
    assert response.status_code == 200
    assert response.json()[0]["quantity"] == 9223372036854775000


async def test_add_sweet_non_finite_price(client: AsyncClient) -> None:
    for raw_price in (b"Infinity", b"NaN"):
        response = await client.post(
            SWEETS_URL,
            content=b'{"name": "Test", "category": "Test", "price": '
            + raw_price
            + b', "quantity": 1}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "price" in response.json()["error"]

    response = await client.get(SWEETS_URL)
    assert response.json() == []


async def test_response_building_failure_is_server_error(client: AsyncClient) -> None:
    """Ошибка при сборке ответа тоже превращается в 500."""
    with patch.object(
        sweet_service, "get_all_sweets", AsyncMock(return_value=[object()])
    ):
        response = await client.get(SWEETS_URL)
    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}

    with patch.object(sweet_service, "get_sweet", AsyncMock(return_value=object())):
        response = await client.get(f"{SWEETS_URL}/{uuid.uuid4()}")
    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}
