from fastapi import APIRouter, Depends, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import RequestContext, get_request_context
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import LoginSchema, RegisterSchema
from services.auth_service import AuthService

router = APIRouter(tags=["User Authentication"])


@cbv(router)
class UserRoutes:
    @router.post("/register", status_code=201)
    @safe_handler
    async def register(
        self,
        request: Request,
        data: RegisterSchema,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await AuthService(db).register(data)

    @router.post("/login")
    @safe_handler
    async def login(
        self,
        request: Request,
        data: LoginSchema,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await AuthService(db).login(data)

    @router.get("/profile")
    @safe_handler
    async def profile(
        self,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await AuthService(db).profile(ctx)
