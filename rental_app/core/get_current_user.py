from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request
from models.models import User
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .get_db import get_db_async
from .identity import IdentityProvider, get_identity_provider


@dataclass
class RequestContext:
    user: User
    token: str

    @property
    def user_id(self):
        return self.user.id


def get_bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=401, detail="No token provided, authorization denied"
        )
    return token.strip()


async def get_request_context(
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db_async),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> RequestContext:
    identity = await provider.verify(token)

    result = await db.execute(select(User).where(User.id == identity.user_id))
    user = result.scalars().first()

    if not user:
        raise HTTPException(status_code=401, detail="Token is not valid")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is deactivated")

    return RequestContext(user=user, token=token)
