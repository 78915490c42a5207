from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import select

from conftest import ADMIN_EMAIL, reset_database
from core.get_db import AsyncSessionLocal, async_engine
from models.enums import (
    RENT_PAYMENT_STATUS,
    PaymentMethod,
    PropertyTypes,
    RentalStatus,
    UserRole,
)
from models.models import Property, Rental, RentalPayment, User
from models.utils import build_payment_schedule
from repos.property_repo import PropertyRepo
from repos.rental_repo import RentalRepo


@pytest.fixture
async def db():
    await reset_database()
    async with AsyncSessionLocal() as session:
        yield session
    await async_engine.dispose()


async def seed(db):
    admin = (
        await db.execute(select(User).where(User.email == ADMIN_EMAIL))
    ).scalar_one()
    tenant = User(
        name="Ravi Sharma",
        email="ravi@example.com",
        phone="9876543210",
        role=UserRole.TENANT,
    )
    tenant.set_password("secret123")
    prop = Property(
        title="Sunny 2BHK near Bapu Bazaar",
        description="Bright two bedroom flat close to the old city markets.",
        property_type=PropertyTypes.APARTMENT,
        address="12 MI Road",
        city=" Jaipur ",
        pincode="302001",
        rent_amount=Decimal("10000"),
        deposit=Decimal("20000"),
        bedrooms=2,
        bathrooms=1,
        area_value=850,
        created_by_id=admin.id,
    )
    db.add_all([tenant, prop])
    await db.commit()
    return admin, tenant, prop


async def make_rental(db, admin, tenant, prop):
    rental = Rental(
        property_id=prop.id,
        tenant_id=tenant.id,
        landlord_id=admin.id,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 4, 1),
        monthly_rent=Decimal("10000"),
        security_deposit=Decimal("20000"),
        maintenance_charges=Decimal("500"),
        status=RentalStatus.ACTIVE,
    )
    rental.payments = [
        RentalPayment(status=RENT_PAYMENT_STATUS.PENDING, **row)
        for row in build_payment_schedule(
            rental.start_date, rental.end_date, 10000, 500
        )
    ]
    db.add(rental)
    await db.commit()
    await db.refresh(rental)
    return rental


async def test_availability_claim_succeeds_once(db):
    _, _, prop = await seed(db)
    repo = PropertyRepo(db)

    assert await repo.claim_for_rental(prop.id) is True
    assert await repo.claim_for_rental(prop.id) is False
    await db.commit()

    await db.refresh(prop)
    assert prop.is_available is False
    assert prop.city == "Jaipur"


async def test_total_due_tracks_payment_status_changes(db):
    admin, tenant, prop = await seed(db)
    rental = await make_rental(db, admin, tenant, prop)
    assert rental.total_due == Decimal("31500")

    rental.payments[0].status = RENT_PAYMENT_STATUS.PAID
    await db.commit()
    await db.refresh(rental)
    assert rental.total_due == Decimal("21000")

    rental.payments[1].status = RENT_PAYMENT_STATUS.OVERDUE
    rental.payments[1].late_fee = Decimal("250")
    await db.commit()
    await db.refresh(rental)
    assert rental.total_due == Decimal("21250")


async def test_payment_can_only_be_marked_paid_once(db):
    admin, tenant, prop = await seed(db)
    rental = await make_rental(db, admin, tenant, prop)
    payment = rental.payments[0]
    repo = RentalRepo(db)

    first = await repo.mark_payment_paid(
        payment.id,
        paid_date=datetime(2024, 1, 3, 10, 0),
        payment_method=PaymentMethod.UPI,
        transaction_id="UPI-1",
        notes=None,
    )
    second = await repo.mark_payment_paid(
        payment.id,
        paid_date=datetime(2024, 1, 9, 10, 0),
        payment_method=PaymentMethod.CASH,
        transaction_id="CASH-1",
        notes="late duplicate",
    )
    await db.commit()

    assert (first, second) == (True, False)
    await db.refresh(payment)
    assert payment.transaction_id == "UPI-1"
    assert payment.notes is None
