import asyncio
import os
import tempfile

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="rentals-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["AUTH_PROVIDER"] = "local"
os.environ["AUTO_CREATE_TABLES"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from app import app  # noqa: E402
from core.get_db import AsyncSessionLocal, Base, async_engine  # noqa: E402
from services.auth_service import AuthService  # noqa: E402

ADMIN_EMAIL = "admin@ramakuti.in"
ADMIN_PASSWORD = "admin-pass-123"


async def reset_database():
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as db:
        await AuthService(db).create_admin(
            name="Site Admin", email=ADMIN_EMAIL, password=ADMIN_PASSWORD
        )
    await async_engine.dispose()


@pytest.fixture
def client():
    asyncio.run(reset_database())
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    res = client.post(
        "/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert res.status_code == 200, res.text
    return auth_header(res.json()["token"])


def register_tenant(client, name="Ravi Sharma", email="ravi@example.com"):
    res = client.post(
        "/api/auth/register",
        json={
            "name": name,
            "email": email,
            "phone": "9876543210",
            "password": "secret123",
            "address": {"city": "Jaipur", "state": "Rajasthan", "pincode": "302001"},
        },
    )
    assert res.status_code == 201, res.text
    body = res.json()
    return body["user"], auth_header(body["token"])


@pytest.fixture
def tenant(client):
    return register_tenant(client)


def property_payload(**overrides) -> dict:
    payload = {
        "title": "Sunny 2BHK near Bapu Bazaar",
        "description": "Bright two bedroom flat with balcony, close to the old city markets.",
        "type": "apartment",
        "location": {
            "address": "12 MI Road",
            "city": "Jaipur",
            "pincode": "302001",
        },
        "rent": {"amount": 10000, "deposit": 20000, "maintenance": 500},
        "amenities": ["wifi", "parking"],
        "specifications": {
            "bedrooms": 2,
            "bathrooms": 1,
            "area": {"value": 850, "unit": "sqft"},
            "furnished": "semi",
        },
    }
    payload.update(overrides)
    return payload


def create_property(client, headers, **overrides) -> dict:
    res = client.post(
        "/api/properties/", json=property_payload(**overrides), headers=headers
    )
    assert res.status_code == 201, res.text
    return res.json()["property"]


def create_rental(client, headers, property_id, tenant_id, **overrides) -> dict:
    payload = {
        "propertyId": property_id,
        "tenantId": tenant_id,
        "startDate": "2024-01-01",
        "endDate": "2024-04-01",
        "monthlyRent": 10000,
        "securityDeposit": 20000,
        "maintenanceCharges": 500,
    }
    payload.update(overrides)
    return client.post("/api/rentals/", json=payload, headers=headers)
