import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import httpx
from fastapi import HTTPException
from jose import ExpiredSignatureError, JWTError, jwt

from .settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    user_id: uuid.UUID
    email: str | None = None
    role: str | None = None


class IdentityProvider:
    """Turns a bearer token into an :class:`Identity` or raises a 401."""

    async def verify(self, token: str) -> Identity:
        raise NotImplementedError


class LocalJWTProvider(IdentityProvider):
    def __init__(
        self,
        secret_key: str = settings.JWT_SECRET_KEY,
        algorithm: str = settings.ALGORITHM,
        issuer: str = settings.TOKEN_ISSUER,
        expire_hours: int = settings.ACCESS_EXPIRE_HOURS,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.expire_hours = expire_hours

    def issue(self, user) -> str:
        now = datetime.now(timezone.utc)
        return jwt.encode(
            {
                "sub": str(user.id),
                "email": user.email,
                "role": user.role.value,
                "iss": self.issuer,
                "iat": now,
                "exp": now + timedelta(hours=self.expire_hours),
            },
            self.secret_key,
            algorithm=self.algorithm,
        )

    async def verify(self, token: str) -> Identity:
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
            )
            return Identity(
                user_id=uuid.UUID(payload["sub"]),
                email=payload.get("email"),
                role=payload.get("role"),
            )
        except ExpiredSignatureError:
            raise HTTPException(status_code=401, detail="Token expired")
        except (JWTError, KeyError, ValueError):
            raise HTTPException(status_code=401, detail="Invalid token")


class RemoteIdentityProvider(IdentityProvider):
    """Delegates verification to an external identity service.

    The service is called with the caller's bearer token and must answer
    ``{"user": {"id": ..., "email": ..., "role": ...}}``.
    """

    def __init__(
        self,
        base_url: str | None = settings.IDENTITY_PROVIDER_URL,
        verify_path: str = settings.IDENTITY_PROVIDER_VERIFY_PATH,
        timeout: float = settings.IDENTITY_PROVIDER_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not base_url:
            raise RuntimeError("IDENTITY_PROVIDER_URL is not configured")
        self.base_url = base_url.rstrip("/")
        self.verify_path = verify_path
        self.timeout = timeout
        self.transport = transport

    async def verify(self, token: str) -> Identity:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(
                    self.verify_path,
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Identity provider unreachable: {e}")
            raise HTTPException(
                status_code=401, detail="Unable to verify token"
            )

        if response.status_code != 200:
            raise HTTPException(status_code=401, detail="Invalid token")

        try:
            user = response.json()["user"]
            return Identity(
                user_id=uuid.UUID(str(user["id"])),
                email=user.get("email"),
                role=user.get("role"),
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Identity provider returned an unexpected payload")
            raise HTTPException(status_code=401, detail="Invalid token")


local_provider = LocalJWTProvider()


def get_identity_provider() -> IdentityProvider:
    if settings.AUTH_PROVIDER.lower() == "remote":
        return RemoteIdentityProvider()
    return local_provider
