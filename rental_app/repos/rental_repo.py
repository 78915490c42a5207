import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from models.enums import (
    OUTSTANDING_PAYMENT_STATUSES,
    RENT_PAYMENT_STATUS,
    RentalStatus,
)
from models.models import Property, Rental, RentalPayment, User
from models.utils import LIKE_ESCAPE, contains_pattern


class RentalRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, rental_id: uuid.UUID) -> Optional[Rental]:
        result = await self.db.execute(select(Rental).where(Rental.id == rental_id))
        return result.scalar_one_or_none()

    async def for_tenant(self, tenant_id: uuid.UUID) -> list[Rental]:
        result = await self.db.execute(
            select(Rental)
            .where(Rental.tenant_id == tenant_id)
            .order_by(Rental.created_at.desc())
        )
        return list(result.scalars().all())

    async def pending_payments_for(
        self, tenant_id: uuid.UUID
    ) -> list[tuple[RentalPayment, Rental]]:
        result = await self.db.execute(
            select(RentalPayment, Rental)
            .join(Rental, RentalPayment.rental_id == Rental.id)
            .where(
                Rental.tenant_id == tenant_id,
                Rental.status == RentalStatus.ACTIVE,
                RentalPayment.status.in_(
                    [RENT_PAYMENT_STATUS.PENDING, RENT_PAYMENT_STATUS.OVERDUE]
                ),
            )
            .order_by(RentalPayment.due_date.asc())
        )
        return [(row[0], row[1]) for row in result.all()]

    async def search(
        self,
        *,
        status: RentalStatus | None = None,
        search: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Rental], int]:
        stmt = (
            select(Rental)
            .join(Property, Rental.property_id == Property.id)
            .join(User, Rental.tenant_id == User.id)
        )
        count_stmt = (
            select(func.count(Rental.id))
            .join(Property, Rental.property_id == Property.id)
            .join(User, Rental.tenant_id == User.id)
        )
        conditions = []
        if status is not None:
            conditions.append(Rental.status == status)
        if search:
            pattern = contains_pattern(search.lower())
            conditions.append(
                or_(
                    func.lower(Property.title).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(User.name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(User.email).like(pattern, escape=LIKE_ESCAPE),
                )
            )

        total = await self.db.scalar(count_stmt.where(*conditions))
        result = await self.db.execute(
            stmt.where(*conditions)
            .order_by(Rental.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def overdue_rentals(self) -> list[tuple[Rental, Optional[date]]]:
        """Active rentals with a balance, earliest open due date first."""
        next_due = (
            select(
                RentalPayment.rental_id.label("rental_id"),
                func.min(RentalPayment.due_date).label("next_due_date"),
            )
            .where(RentalPayment.status.in_(list(OUTSTANDING_PAYMENT_STATUSES)))
            .group_by(RentalPayment.rental_id)
            .subquery()
        )
        result = await self.db.execute(
            select(Rental, next_due.c.next_due_date)
            .outerjoin(next_due, next_due.c.rental_id == Rental.id)
            .where(Rental.status == RentalStatus.ACTIVE, Rental.total_due > 0)
            .order_by(next_due.c.next_due_date.asc(), Rental.created_at.asc())
        )
        return [(row[0], row[1]) for row in result.all()]

    async def mark_payment_paid(
        self,
        payment_id: uuid.UUID,
        *,
        paid_date: datetime,
        payment_method,
        transaction_id: str | None,
        notes: str | None,
    ) -> bool:
        """Conditional write: only an unpaid entry is ever flipped to paid."""
        values = {
            "status": RENT_PAYMENT_STATUS.PAID,
            "paid_date": paid_date,
            "payment_method": payment_method,
            "transaction_id": transaction_id,
        }
        if notes is not None:
            values["notes"] = notes
        result = await self.db.execute(
            update(RentalPayment)
            .where(
                RentalPayment.id == payment_id,
                RentalPayment.status != RENT_PAYMENT_STATUS.PAID,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def refresh(self, obj) -> None:
        await self.db.refresh(obj)

    async def rollback(self) -> None:
        await self.db.rollback()

    async def save(self, rental: Rental) -> Rental:
        self.db.add(rental)
        try:
            await self.db.commit()
            await self.db.refresh(rental)
            return rental
        except SQLAlchemyError:
            await self.db.rollback()
            raise
