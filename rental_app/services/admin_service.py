import logging
import uuid

from fastapi import HTTPException

from core.check_permission import CheckRolePermission
from core.mapper import ORMMapper
from core.paginate import PaginatePage
from models.enums import (
    RENT_PAYMENT_STATUS,
    RentalStatus,
    UserRole,
)
from repos.auth_repo import AuthRepo
from repos.property_repo import PropertyFilters, PropertyRepo
from repos.rental_repo import RentalRepo
from repos.report_repo import ReportRepo
from schemas.schema import PropertyOut, RentalOut, UserOut

logger = logging.getLogger(__name__)


class AdminService:
    """Admin dashboards. Aggregations live in :class:`ReportRepo`."""

    def __init__(self, db):
        self.reports: ReportRepo = ReportRepo(db)
        self.auth_repo: AuthRepo = AuthRepo(db)
        self.property_repo: PropertyRepo = PropertyRepo(db)
        self.rental_repo: RentalRepo = RentalRepo(db)
        self.permission: CheckRolePermission = CheckRolePermission()
        self.paginate: PaginatePage = PaginatePage()
        self.mapper: ORMMapper = ORMMapper()

    async def dashboard(self, ctx):
        await self.permission.check_admin(ctx)
        pending = await self.reports.payment_totals(
            [RENT_PAYMENT_STATUS.PENDING, RENT_PAYMENT_STATUS.OVERDUE]
        )
        recent_properties = await self.property_repo.recent(limit=5)
        recent_users = await self.auth_repo.recent_tenants(limit=5)

        return {
            "success": True,
            "dashboard": {
                "stats": {
                    "totalUsers": await self.reports.count_tenants(),
                    "totalProperties": await self.reports.count_active_properties(),
                    "totalRentals": await self.reports.count_rentals(),
                    "activeRentals": await self.reports.count_rentals(
                        RentalStatus.ACTIVE
                    ),
                    "pendingPaymentsCount": pending["count"],
                    "pendingPaymentsAmount": pending["total"],
                },
                "recentProperties": self.mapper.dump_many(
                    recent_properties, PropertyOut
                ),
                "recentUsers": self.mapper.dump_many(recent_users, UserOut),
            },
        }

    async def list_users(
        self,
        ctx,
        *,
        page: int,
        limit: int | None,
        search: str | None = None,
        role: UserRole | None = None,
        status: str | None = None,
    ):
        await self.permission.check_admin(ctx)
        page, limit = self.paginate.normalize(page, limit)
        is_active = None
        if status == "active":
            is_active = True
        elif status == "inactive":
            is_active = False
        elif status not in (None, "", "all"):
            raise HTTPException(
                status_code=400, detail="Status must be active, inactive or all"
            )

        users, total = await self.auth_repo.search(
            search=search,
            role=role,
            is_active=is_active,
            offset=self.paginate.offset(page, limit),
            limit=limit,
        )
        return {
            "success": True,
            "users": self.mapper.dump_many(users, UserOut),
            "pagination": self.paginate.pagination(page, limit, total, "Users"),
        }

    async def get_user(self, ctx, user_id: uuid.UUID):
        await self.permission.check_admin(ctx)
        user = await self.auth_repo.by_id(user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        rentals = await self.auth_repo.rental_history(user.id)
        return {
            "success": True,
            "user": self.mapper.dump(user, UserOut),
            "rentals": self.mapper.dump_many(rentals, RentalOut),
        }

    async def toggle_user_status(self, ctx, user_id: uuid.UUID):
        await self.permission.check_admin(ctx)
        user = await self.auth_repo.by_id(user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        if user.id == ctx.user.id:
            raise HTTPException(
                status_code=400, detail="You cannot deactivate your own account"
            )
        user.is_active = not user.is_active
        user = await self.auth_repo.update(user)
        state = "activated" if user.is_active else "deactivated"
        logger.info(f"User {user.email} {state} by {ctx.user.email}")
        return {
            "success": True,
            "message": f"User {state} successfully",
            "user": self.mapper.dump(user, UserOut),
        }

    async def list_properties(
        self, ctx, filters: PropertyFilters, *, page: int, limit: int | None
    ):
        await self.permission.check_admin(ctx)
        page, limit = self.paginate.normalize(page, limit)
        items, total = await self.property_repo.search(
            filters,
            sort="createdAt",
            order="desc",
            offset=self.paginate.offset(page, limit),
            limit=limit,
        )
        return {
            "success": True,
            "properties": self.mapper.dump_many(items, PropertyOut),
            "pagination": self.paginate.pagination(page, limit, total, "Properties"),
        }

    async def list_rentals(
        self,
        ctx,
        *,
        page: int,
        limit: int | None,
        status: RentalStatus | None = None,
        search: str | None = None,
    ):
        await self.permission.check_admin(ctx)
        page, limit = self.paginate.normalize(page, limit)
        rentals, total = await self.rental_repo.search(
            status=status,
            search=search,
            offset=self.paginate.offset(page, limit),
            limit=limit,
        )
        return {
            "success": True,
            "rentals": self.mapper.dump_many(rentals, RentalOut),
            "pagination": self.paginate.pagination(page, limit, total, "Rentals"),
        }

    async def overdue_rentals(self, ctx):
        await self.permission.check_admin(ctx)
        rows = await self.rental_repo.overdue_rentals()
        items = []
        for rental, next_due_date in rows:
            item = self.mapper.dump(rental, RentalOut)
            item["nextDueDate"] = next_due_date.isoformat() if next_due_date else None
            items.append(item)
        return {"success": True, "overdueRentals": items, "count": len(items)}

    async def payments_overview(self, ctx):
        await self.permission.check_admin(ctx)
        return {
            "success": True,
            "overview": {
                "totalCollected": await self.reports.collected_total(),
                "pendingPayments": await self.reports.payment_totals(
                    [RENT_PAYMENT_STATUS.PENDING]
                ),
                "overduePayments": await self.reports.payment_totals(
                    [RENT_PAYMENT_STATUS.OVERDUE]
                ),
                "monthlyStats": await self.reports.monthly_revenue(limit=12),
            },
        }

    async def system_stats(self, ctx):
        await self.permission.check_admin(ctx)
        return {
            "success": True,
            "stats": {
                "userStats": await self.reports.users_by_role(),
                "propertyStats": await self.reports.properties_by_type(),
                "rentalStats": await self.reports.rentals_by_status(),
                "cityStats": await self.reports.properties_by_city(limit=10),
            },
        }
