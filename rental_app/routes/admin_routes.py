import uuid
from typing import Optional

from core.get_current_user import RequestContext, get_request_context
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from models.enums import PropertyListingStatus, PropertyTypes, RentalStatus, UserRole
from repos.property_repo import PropertyFilters
from services.admin_service import AdminService
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["Admin"])


@cbv(router)
class AdminRoutes:
    @router.get("/dashboard")
    @safe_handler
    async def dashboard(
        self,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await AdminService(db).dashboard(ctx)

    @router.get("/users")
    @safe_handler
    async def list_users(
        self,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
        page: int = 1,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        role: Optional[UserRole] = None,
        status: Optional[str] = None,
    ):
        return await AdminService(db).list_users(
            ctx,
            page=page,
            limit=limit,
            search=search,
            role=role,
            status=status,
        )

    @router.get("/users/{user_id}")
    @safe_handler
    async def get_user(
        self,
        user_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await AdminService(db).get_user(ctx, user_id)

    @router.patch("/users/{user_id}/toggle-status")
    @safe_handler
    async def toggle_user_status(
        self,
        user_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await AdminService(db).toggle_user_status(ctx, user_id)

    @router.get("/properties")
    @safe_handler
    async def list_properties(
        self,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
        page: int = 1,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        type: Optional[PropertyTypes] = None,
        status: Optional[PropertyListingStatus] = None,
        city: Optional[str] = None,
    ):
        filters = PropertyFilters(
            city=city,
            property_type=type,
            search=search,
            status=status,
            public_only=False,
        )
        return await AdminService(db).list_properties(
            ctx, filters, page=page, limit=limit
        )

    @router.get("/rentals")
    @safe_handler
    async def list_rentals(
        self,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
        page: int = 1,
        limit: Optional[int] = None,
        status: Optional[RentalStatus] = None,
        search: Optional[str] = None,
    ):
        return await AdminService(db).list_rentals(
            ctx, page=page, limit=limit, status=status, search=search
        )

    @router.get("/overdue")
    @safe_handler
    async def overdue_rentals(
        self,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await AdminService(db).overdue_rentals(ctx)

    @router.get("/payments/overview")
    @safe_handler
    async def payments_overview(
        self,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await AdminService(db).payments_overview(ctx)

    @router.get("/stats")
    @safe_handler
    async def system_stats(
        self,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await AdminService(db).system_stats(ctx)
