from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List

from dateutil.relativedelta import relativedelta


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def month_key(day: date) -> str:
    return f"{day.year}-{day.month:02d}"


def build_payment_schedule(
    start_date: date,
    end_date: date,
    monthly_rent,
    maintenance_charges=0,
    due_day: int = 5,
) -> List[dict]:
    """Monthly payment rows from ``start_date`` up to, not including, ``end_date``.

    Steps are calendar months counted from the start date, so a lease that
    starts on the 31st still produces one row per month. Every row is due on
    ``due_day`` of its own month and carries rent plus maintenance.
    """
    amount = to_decimal(monthly_rent) + to_decimal(maintenance_charges)
    schedule = []
    step = 0
    current = start_date
    while current < end_date:
        schedule.append(
            {
                "month": month_key(current),
                "amount": amount,
                "due_date": current.replace(day=due_day),
            }
        )
        step += 1
        current = start_date + relativedelta(months=step)
    return schedule


LIKE_ESCAPE = "\\"


def contains_pattern(value: str) -> str:
    """``%value%`` with LIKE wildcards in ``value`` matched literally."""
    escaped = (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
