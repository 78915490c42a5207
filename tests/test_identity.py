import uuid
from types import SimpleNamespace

import httpx
import pytest
from fastapi import HTTPException
from jose import jwt

from conftest import register_tenant
from app import app
from core.identity import (
    Identity,
    IdentityProvider,
    LocalJWTProvider,
    RemoteIdentityProvider,
    get_identity_provider,
)
from models.enums import UserRole


def fake_user(role=UserRole.TENANT):
    return SimpleNamespace(id=uuid.uuid4(), email="ravi@example.com", role=role)


async def test_local_token_round_trip():
    provider = LocalJWTProvider(secret_key="k1", issuer="rentals-test")
    user = fake_user()

    identity = await provider.verify(provider.issue(user))

    assert identity == Identity(user_id=user.id, email=user.email, role="tenant")


async def test_local_rejects_token_signed_with_other_key():
    issuer = LocalJWTProvider(secret_key="k1", issuer="rentals-test")
    verifier = LocalJWTProvider(secret_key="k2", issuer="rentals-test")

    with pytest.raises(HTTPException) as exc:
        await verifier.verify(issuer.issue(fake_user()))
    assert exc.value.status_code == 401
    assert exc.value.detail == "Invalid token"


async def test_local_rejects_foreign_issuer():
    issuer = LocalJWTProvider(secret_key="k1", issuer="someone-else")
    verifier = LocalJWTProvider(secret_key="k1", issuer="rentals-test")

    with pytest.raises(HTTPException) as exc:
        await verifier.verify(issuer.issue(fake_user()))
    assert exc.value.status_code == 401


async def test_local_reports_expired_tokens():
    provider = LocalJWTProvider(secret_key="k1", issuer="rentals-test", expire_hours=-1)

    with pytest.raises(HTTPException) as exc:
        await provider.verify(provider.issue(fake_user()))
    assert exc.value.detail == "Token expired"


async def test_local_rejects_token_without_subject():
    token = jwt.encode({"iss": "rentals-test"}, "k1", algorithm="HS256")
    with pytest.raises(HTTPException) as exc:
        await LocalJWTProvider(secret_key="k1", issuer="rentals-test").verify(token)
    assert exc.value.status_code == 401


async def test_remote_provider_reads_user_from_response():
    user_id = uuid.uuid4()
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(
            200, json={"user": {"id": str(user_id), "email": "a@b.in", "role": "admin"}}
        )

    provider = RemoteIdentityProvider(
        base_url="https://id.example.test/",
        verify_path="/auth/verify",
        transport=httpx.MockTransport(handler),
    )
    identity = await provider.verify("abc")

    assert identity.user_id == user_id
    assert identity.role == "admin"
    assert seen == {"path": "/auth/verify", "auth": "Bearer abc"}


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(401, json={"message": "nope"}),
        httpx.Response(200, json={"user": {"email": "a@b.in"}}),
        httpx.Response(200, json={"user": {"id": "not-a-uuid"}}),
    ],
)
async def test_remote_provider_rejects_bad_answers(response):
    provider = RemoteIdentityProvider(
        base_url="https://id.example.test",
        transport=httpx.MockTransport(lambda request: response),
    )
    with pytest.raises(HTTPException) as exc:
        await provider.verify("abc")
    assert exc.value.status_code == 401


async def test_remote_provider_unreachable_is_401():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    provider = RemoteIdentityProvider(
        base_url="https://id.example.test", transport=httpx.MockTransport(handler)
    )
    with pytest.raises(HTTPException) as exc:
        await provider.verify("abc")
    assert exc.value.detail == "Unable to verify token"


def test_remote_provider_requires_url():
    with pytest.raises(RuntimeError):
        RemoteIdentityProvider(base_url=None)


def test_missing_bearer_token_is_401(client):
    res = client.get("/api/auth/profile")
    assert res.status_code == 401
    assert res.json() == {
        "success": False,
        "message": "No token provided, authorization denied",
    }

    wrong_scheme = client.get(
        "/api/auth/profile", headers={"Authorization": "Basic abc"}
    )
    assert wrong_scheme.status_code == 401


def test_garbage_token_is_401(client):
    res = client.get("/api/auth/profile", headers={"Authorization": "Bearer xyz"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid token"


def test_swapped_identity_provider(client):
    user, _ = register_tenant(client)

    class StaticProvider(IdentityProvider):
        async def verify(self, token):
            if token != "external-token":
                raise HTTPException(status_code=401, detail="Invalid token")
            return Identity(user_id=uuid.UUID(user["id"]))

    app.dependency_overrides[get_identity_provider] = lambda: StaticProvider()

    res = client.get(
        "/api/auth/profile", headers={"Authorization": "Bearer external-token"}
    )
    assert res.status_code == 200
    assert res.json()["user"]["email"] == "ravi@example.com"

    rejected = client.get(
        "/api/auth/profile", headers={"Authorization": "Bearer other"}
    )
    assert rejected.status_code == 401


def test_provider_identity_for_unknown_user_is_401(client):
    class GhostProvider(IdentityProvider):
        async def verify(self, token):
            return Identity(user_id=uuid.uuid4())

    app.dependency_overrides[get_identity_provider] = lambda: GhostProvider()
    res = client.get("/api/auth/profile", headers={"Authorization": "Bearer any"})
    assert res.status_code == 401
