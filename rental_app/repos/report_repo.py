from typing import Iterable

from sqlalchemy import func, select

from models.enums import (
    RENT_PAYMENT_STATUS,
    RentalStatus,
    UserRole,
)
from models.models import Property, Rental, RentalPayment, User


def _money(value) -> float:
    return float(value or 0)


class ReportRepo:
    """Read-only aggregations behind the admin dashboards.

    Every method is one named query returning plain python values, so the
    admin service never composes SQL itself.
    """

    def __init__(self, db):
        self.db = db

    async def count_tenants(self) -> int:
        total = await self.db.scalar(
            select(func.count(User.id)).where(User.role == UserRole.TENANT)
        )
        return total or 0

    async def count_active_properties(self) -> int:
        total = await self.db.scalar(
            select(func.count(Property.id)).where(Property.is_active.is_(True))
        )
        return total or 0

    async def count_rentals(self, status: RentalStatus | None = None) -> int:
        stmt = select(func.count(Rental.id))
        if status is not None:
            stmt = stmt.where(Rental.status == status)
        total = await self.db.scalar(stmt)
        return total or 0

    async def payment_totals(
        self, statuses: Iterable[RENT_PAYMENT_STATUS]
    ) -> dict:
        result = await self.db.execute(
            select(
                func.count(RentalPayment.id), func.sum(RentalPayment.amount)
            ).where(RentalPayment.status.in_(list(statuses)))
        )
        count, total = result.one()
        return {"count": count or 0, "total": _money(total)}

    async def collected_total(self) -> float:
        totals = await self.payment_totals([RENT_PAYMENT_STATUS.PAID])
        return totals["total"]

    async def monthly_revenue(self, limit: int = 12) -> list[dict]:
        """Paid amounts per month key, the latest ``limit`` months, oldest first."""
        result = await self.db.execute(
            select(
                RentalPayment.month,
                func.sum(RentalPayment.amount),
                func.count(RentalPayment.id),
            )
            .where(RentalPayment.status == RENT_PAYMENT_STATUS.PAID)
            .group_by(RentalPayment.month)
            .order_by(RentalPayment.month.desc())
            .limit(limit)
        )
        rows = [
            {"month": month, "amount": _money(amount), "count": count}
            for month, amount, count in result.all()
        ]
        rows.reverse()
        return rows

    async def users_by_role(self) -> list[dict]:
        result = await self.db.execute(
            select(User.role, func.count(User.id)).group_by(User.role)
        )
        return [{"role": role.value, "count": count} for role, count in result.all()]

    async def properties_by_type(self) -> list[dict]:
        result = await self.db.execute(
            select(
                Property.property_type,
                func.count(Property.id),
                func.avg(Property.rent_amount),
            ).group_by(Property.property_type)
        )
        return [
            {"type": ptype.value, "count": count, "avgRent": _money(avg)}
            for ptype, count, avg in result.all()
        ]

    async def rentals_by_status(self) -> list[dict]:
        result = await self.db.execute(
            select(Rental.status, func.count(Rental.id)).group_by(Rental.status)
        )
        return [
            {"status": status.value, "count": count}
            for status, count in result.all()
        ]

    async def properties_by_city(self, limit: int = 10) -> list[dict]:
        count_col = func.count(Property.id).label("property_count")
        result = await self.db.execute(
            select(Property.city, count_col, func.avg(Property.rent_amount))
            .group_by(Property.city)
            .order_by(count_col.desc(), Property.city)
            .limit(limit)
        )
        return [
            {"city": city, "count": count, "avgRent": _money(avg)}
            for city, count, avg in result.all()
        ]

    async def total_due_for(self, status: RentalStatus) -> float:
        total = await self.db.scalar(
            select(func.sum(Rental.total_due)).where(Rental.status == status)
        )
        return _money(total)
