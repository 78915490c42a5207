import logging
import uuid
from decimal import Decimal

from fastapi import HTTPException

from core.check_permission import CheckRolePermission
from core.mapper import ORMMapper
from core.settings import settings
from models.enums import (
    PROPERTY_HOLDING_STATUSES,
    RENT_PAYMENT_STATUS,
    MaintenanceStatus,
    RentalStatus,
    UserRole,
)
from models.models import (
    MaintenanceRequest,
    Rental,
    RentalNotice,
    RentalPayment,
)
from models.utils import build_payment_schedule, to_decimal, utcnow
from repos.auth_repo import AuthRepo
from repos.property_repo import PropertyRepo
from repos.rental_repo import RentalRepo
from repos.report_repo import ReportRepo
from schemas.schema import (
    MaintenanceOut,
    NoticeOut,
    PaymentOut,
    PendingPaymentOut,
    RentalOut,
)

logger = logging.getLogger(__name__)


class RentalService:
    def __init__(self, db):
        self.repo: RentalRepo = RentalRepo(db)
        self.property_repo: PropertyRepo = PropertyRepo(db)
        self.auth_repo: AuthRepo = AuthRepo(db)
        self.reports: ReportRepo = ReportRepo(db)
        self.permission: CheckRolePermission = CheckRolePermission()
        self.mapper: ORMMapper = ORMMapper()

    async def get_rental_or_404(self, rental_id: uuid.UUID) -> Rental:
        rental = await self.repo.get_by_id(rental_id)
        if not rental:
            raise HTTPException(status_code=404, detail="Rental not found")
        return rental

    async def create_rental(self, ctx, data):
        await self.permission.check_admin(ctx)

        tenant = await self.auth_repo.by_id(data.tenant_id)
        if not tenant or tenant.role != UserRole.TENANT:
            raise HTTPException(status_code=404, detail="Tenant not found")

        prop = await self.property_repo.get_by_id(data.property_id)
        if not prop:
            raise HTTPException(
                status_code=400, detail="Property not available for rent"
            )

        # The availability flip and the rental insert share one transaction;
        # a competing booking that already flipped the flag makes this a no-op.
        if not await self.property_repo.claim_for_rental(prop.id):
            await self.repo.rollback()
            raise HTTPException(
                status_code=400, detail="Property not available for rent"
            )
        prop.is_available = False

        rental = Rental(
            property_id=prop.id,
            tenant_id=tenant.id,
            landlord_id=ctx.user.id,
            start_date=data.start_date,
            end_date=data.end_date,
            monthly_rent=to_decimal(data.monthly_rent),
            security_deposit=to_decimal(data.security_deposit),
            maintenance_charges=to_decimal(data.maintenance_charges),
            terms=data.terms,
            document_url=data.document_url,
            status=RentalStatus.ACTIVE,
        )
        rental.payments = [
            RentalPayment(status=RENT_PAYMENT_STATUS.PENDING, **row)
            for row in build_payment_schedule(
                data.start_date,
                data.end_date,
                data.monthly_rent,
                data.maintenance_charges,
                due_day=settings.RENT_DUE_DAY,
            )
        ]
        rental = await self.repo.save(rental)
        logger.info(
            f"Rental {rental.id} created for property {prop.id} with "
            f"{len(rental.payments)} scheduled payments"
        )

        return {
            "success": True,
            "message": "Rental created successfully",
            "rental": self.mapper.dump(rental, RentalOut),
        }

    async def my_rentals(self, ctx):
        rentals = await self.repo.for_tenant(ctx.user.id)
        return {"success": True, "rentals": self.mapper.dump_many(rentals, RentalOut)}

    async def get_rental(self, ctx, rental_id: uuid.UUID):
        rental = await self.get_rental_or_404(rental_id)
        await self.permission.check_rental_access(ctx, rental)
        return {"success": True, "rental": self.mapper.dump(rental, RentalOut)}

    async def pending_payments(self, ctx):
        rows = await self.repo.pending_payments_for(ctx.user.id)
        payments = []
        total = Decimal("0")
        for payment, rental in rows:
            total += to_decimal(payment.amount) + to_decimal(payment.late_fee)
            item = PaymentOut.model_validate(payment).model_dump()
            item["rental_id"] = rental.id
            item["property_title"] = rental.property.title if rental.property else None
            payments.append(
                PendingPaymentOut.model_validate(item).model_dump(
                    mode="json", by_alias=True
                )
            )
        return {"success": True, "pendingPayments": payments, "totalDue": float(total)}

    async def update_status(self, ctx, rental_id: uuid.UUID, status: RentalStatus):
        await self.permission.check_admin(ctx)
        rental = await self.get_rental_or_404(rental_id)
        held_before = rental.status in PROPERTY_HOLDING_STATUSES
        held_after = status in PROPERTY_HOLDING_STATUSES

        # Reopening a closed rental has to win the property back, the same
        # way a new booking does.
        if held_after and not held_before:
            if not await self.property_repo.claim_for_rental(rental.property_id):
                await self.repo.rollback()
                raise HTTPException(
                    status_code=400, detail="Property not available for rent"
                )
            if rental.property:
                rental.property.is_available = False
        elif held_before and not held_after and rental.property:
            rental.property.is_available = True

        rental.status = status
        rental = await self.repo.save(rental)
        return {
            "success": True,
            "message": "Rental status updated successfully",
            "rental": self.mapper.dump(rental, RentalOut),
        }

    async def stats_overview(self, ctx):
        await self.permission.check_admin(ctx)
        return {
            "success": True,
            "stats": {
                "totalRentals": await self.reports.count_rentals(),
                "activeRentals": await self.reports.count_rentals(RentalStatus.ACTIVE),
                "pendingRentals": await self.reports.count_rentals(
                    RentalStatus.PENDING
                ),
                "totalDueAmount": await self.reports.total_due_for(
                    RentalStatus.ACTIVE
                ),
            },
        }

    async def record_payment(
        self, ctx, rental_id: uuid.UUID, payment_id: uuid.UUID, data
    ):
        await self.permission.check_admin(ctx)
        rental = await self.get_rental_or_404(rental_id)
        payment = rental.find_payment(payment_id)
        if not payment:
            raise HTTPException(status_code=404, detail="Payment not found")
        if payment.status == RENT_PAYMENT_STATUS.PAID:
            raise HTTPException(status_code=400, detail="Payment already recorded")

        paid_at = utcnow()
        recorded = await self.repo.mark_payment_paid(
            payment.id,
            paid_date=paid_at,
            payment_method=data.payment_method,
            transaction_id=data.transaction_id,
            notes=data.notes,
        )
        if not recorded:
            await self.repo.rollback()
            raise HTTPException(status_code=400, detail="Payment already recorded")

        await self.repo.refresh(payment)
        rental.last_payment_date = paid_at
        rental = await self.repo.save(rental)
        logger.info(f"Payment {payment.id} recorded on rental {rental.id}")

        return {
            "success": True,
            "message": "Payment recorded successfully",
            "rental": self.mapper.dump(rental, RentalOut),
        }

    async def add_maintenance(self, ctx, rental_id: uuid.UUID, data):
        rental = await self.get_rental_or_404(rental_id)
        await self.permission.check_rental_access(ctx, rental, allow_landlord=False)

        ticket = MaintenanceRequest(
            issue=data.issue,
            description=data.description,
            images=list(data.images),
            status=MaintenanceStatus.REPORTED,
            reported_date=utcnow(),
        )
        rental.maintenance_requests.append(ticket)
        rental = await self.repo.save(rental)
        return {
            "success": True,
            "message": "Maintenance request submitted successfully",
            "maintenanceRequest": self.mapper.dump(ticket, MaintenanceOut),
        }

    async def list_maintenance(self, ctx, rental_id: uuid.UUID):
        rental = await self.get_rental_or_404(rental_id)
        await self.permission.check_rental_access(ctx, rental, allow_landlord=False)
        return {
            "success": True,
            "maintenanceRequests": self.mapper.dump_many(
                rental.maintenance_requests, MaintenanceOut
            ),
        }

    async def update_maintenance(
        self, ctx, rental_id: uuid.UUID, ticket_id: uuid.UUID, data
    ):
        rental = await self.get_rental_or_404(rental_id)
        await self.permission.check_rental_access(ctx, rental, allow_landlord=False)
        ticket = rental.find_maintenance(ticket_id)
        if not ticket:
            raise HTTPException(status_code=404, detail="Maintenance request not found")

        ticket.status = data.status
        if data.assigned_to is not None:
            ticket.assigned_to = data.assigned_to
        if data.cost is not None:
            ticket.cost = to_decimal(data.cost)
        if data.status == MaintenanceStatus.COMPLETED:
            ticket.completed_date = utcnow()

        await self.repo.save(rental)
        await self.repo.refresh(ticket)
        return {
            "success": True,
            "message": "Maintenance request updated successfully",
            "maintenanceRequest": self.mapper.dump(ticket, MaintenanceOut),
        }

    async def add_notice(self, ctx, rental_id: uuid.UUID, data):
        await self.permission.check_admin(ctx)
        rental = await self.get_rental_or_404(rental_id)
        notice = RentalNotice(notice_type=data.type, message=data.message, date=utcnow())
        rental.notices.append(notice)
        await self.repo.save(rental)
        return {
            "success": True,
            "message": "Notice sent successfully",
            "notice": self.mapper.dump(notice, NoticeOut),
        }

    async def acknowledge_notice(
        self, ctx, rental_id: uuid.UUID, notice_id: uuid.UUID
    ):
        rental = await self.get_rental_or_404(rental_id)
        await self.permission.check_rental_tenant(ctx, rental)
        notice = rental.find_notice(notice_id)
        if not notice:
            raise HTTPException(status_code=404, detail="Notice not found")
        notice.acknowledged = True
        await self.repo.save(rental)
        return {
            "success": True,
            "message": "Notice acknowledged",
            "notice": self.mapper.dump(notice, NoticeOut),
        }
