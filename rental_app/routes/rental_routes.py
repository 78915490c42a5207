import uuid

from core.get_current_user import RequestContext, get_request_context
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from schemas.schema import (
    MaintenanceCreate,
    MaintenanceUpdate,
    NoticeCreate,
    RecordPaymentSchema,
    RentalCreate,
    RentalStatusUpdate,
)
from services.rental_service import RentalService
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["Rental Management"])


@cbv(router)
class RentalRoutes:
    # Literal paths are declared before "/{rental_id}".
    @router.get("/my-rentals")
    @safe_handler
    async def my_rentals(
        self,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).my_rentals(ctx)

    @router.get("/payments/pending")
    @safe_handler
    async def pending_payments(
        self,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).pending_payments(ctx)

    @router.get("/stats/overview")
    @safe_handler
    async def stats_overview(
        self,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).stats_overview(ctx)

    @router.post("/", status_code=201)
    @safe_handler
    async def create(
        self,
        data: RentalCreate,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).create_rental(ctx=ctx, data=data)

    @router.get("/{rental_id}")
    @safe_handler
    async def get_rental(
        self,
        rental_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).get_rental(ctx=ctx, rental_id=rental_id)

    @router.patch("/{rental_id}/status")
    @safe_handler
    async def update_status(
        self,
        rental_id: uuid.UUID,
        data: RentalStatusUpdate,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).update_status(
            ctx=ctx, rental_id=rental_id, status=data.status
        )

    @router.post("/{rental_id}/payments/{payment_id}/pay")
    @safe_handler
    async def record_payment(
        self,
        rental_id: uuid.UUID,
        payment_id: uuid.UUID,
        data: RecordPaymentSchema,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).record_payment(
            ctx=ctx, rental_id=rental_id, payment_id=payment_id, data=data
        )

    @router.post("/{rental_id}/maintenance", status_code=201)
    @safe_handler
    async def add_maintenance(
        self,
        rental_id: uuid.UUID,
        data: MaintenanceCreate,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).add_maintenance(
            ctx=ctx, rental_id=rental_id, data=data
        )

    @router.get("/{rental_id}/maintenance")
    @safe_handler
    async def list_maintenance(
        self,
        rental_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).list_maintenance(ctx=ctx, rental_id=rental_id)

    @router.patch("/{rental_id}/maintenance/{ticket_id}")
    @safe_handler
    async def update_maintenance(
        self,
        rental_id: uuid.UUID,
        ticket_id: uuid.UUID,
        data: MaintenanceUpdate,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).update_maintenance(
            ctx=ctx, rental_id=rental_id, ticket_id=ticket_id, data=data
        )

    @router.post("/{rental_id}/notices", status_code=201)
    @safe_handler
    async def add_notice(
        self,
        rental_id: uuid.UUID,
        data: NoticeCreate,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).add_notice(
            ctx=ctx, rental_id=rental_id, data=data
        )

    @router.patch("/{rental_id}/notices/{notice_id}/acknowledge")
    @safe_handler
    async def acknowledge_notice(
        self,
        rental_id: uuid.UUID,
        notice_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await RentalService(db).acknowledge_notice(
            ctx=ctx, rental_id=rental_id, notice_id=notice_id
        )
