from sqlalchemy import event
from sqlalchemy.orm import Session

from .models import Property, Rental, RentalPayment, User


@event.listens_for(User, "before_insert")
@event.listens_for(User, "before_update")
def normalize_user(mapper, connection, target: User):
    target.normalize()


@event.listens_for(Property, "before_insert")
@event.listens_for(Property, "before_update")
def normalize_location(mapper, connection, target: Property):
    if target.city:
        target.city = target.city.strip()
    if target.state:
        target.state = target.state.strip()


@event.listens_for(Session, "before_flush")
def recalculate_rental_totals(session, flush_context, instances):
    rentals = {}
    for obj in list(session.new) + list(session.dirty):
        if isinstance(obj, Rental):
            rentals[id(obj)] = obj
        elif isinstance(obj, RentalPayment) and obj.rental is not None:
            rentals[id(obj.rental)] = obj.rental

    for rental in rentals.values():
        if rental in session.deleted:
            continue
        rental.recalculate_total_due()
