import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from models.enums import Amenity, Furnishing, PropertyListingStatus, PropertyTypes
from models.models import Property, PropertyAmenity
from models.utils import LIKE_ESCAPE, contains_pattern

# Public sort keys mapped onto columns. Anything else is rejected.
SORT_FIELDS = {
    "createdAt": Property.created_at,
    "updatedAt": Property.updated_at,
    "rent.amount": Property.rent_amount,
    "views": Property.views,
    "title": Property.title,
    "specifications.bedrooms": Property.bedrooms,
}


@dataclass
class PropertyFilters:
    city: Optional[str] = None
    property_type: Optional[PropertyTypes] = None
    min_rent: Optional[Decimal] = None
    max_rent: Optional[Decimal] = None
    bedrooms: Optional[int] = None
    furnished: Optional[Furnishing] = None
    amenities: List[Amenity] = field(default_factory=list)
    search: Optional[str] = None
    status: Optional[PropertyListingStatus] = None
    public_only: bool = True

    def conditions(self) -> list:
        conditions = []
        if self.public_only:
            conditions.append(Property.is_active.is_(True))
            conditions.append(Property.is_available.is_(True))
        if self.city:
            conditions.append(
                func.lower(Property.city).like(
                    contains_pattern(self.city.strip().lower()), escape=LIKE_ESCAPE
                )
            )
        if self.property_type is not None:
            conditions.append(Property.property_type == self.property_type)
        if self.min_rent is not None:
            conditions.append(Property.rent_amount >= self.min_rent)
        if self.max_rent is not None:
            conditions.append(Property.rent_amount <= self.max_rent)
        if self.bedrooms is not None:
            conditions.append(Property.bedrooms == self.bedrooms)
        if self.furnished is not None:
            conditions.append(Property.furnished == self.furnished)
        if self.amenities:
            conditions.append(
                Property.amenities.any(PropertyAmenity.name.in_(self.amenities))
            )
        if self.search:
            pattern = contains_pattern(self.search.lower())
            conditions.append(
                or_(
                    func.lower(Property.title).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(Property.description).like(pattern, escape=LIKE_ESCAPE),
                )
            )
        if self.status == PropertyListingStatus.AVAILABLE:
            conditions.append(Property.is_active.is_(True))
            conditions.append(Property.is_available.is_(True))
        elif self.status == PropertyListingStatus.RENTED:
            conditions.append(Property.is_active.is_(True))
            conditions.append(Property.is_available.is_(False))
        elif self.status == PropertyListingStatus.INACTIVE:
            conditions.append(Property.is_active.is_(False))
        return conditions


class PropertyRepo:
    def __init__(self, db):
        self.db = db

    @staticmethod
    def resolve_sort(sort: str, order: str):
        column = SORT_FIELDS.get(sort)
        if column is None:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid sort field. Allowed: {', '.join(SORT_FIELDS)}",
            )
        if order not in ("asc", "desc"):
            raise HTTPException(
                status_code=400, detail="Sort order must be 'asc' or 'desc'"
            )
        return column.asc() if order == "asc" else column.desc()

    async def get_by_id(self, property_id: uuid.UUID) -> Optional[Property]:
        result = await self.db.execute(
            select(Property).where(Property.id == property_id)
        )
        return result.scalar_one_or_none()

    async def get_active(self, property_id: uuid.UUID) -> Optional[Property]:
        result = await self.db.execute(
            select(Property).where(
                Property.id == property_id, Property.is_active.is_(True)
            )
        )
        return result.scalar_one_or_none()

    async def search(
        self,
        filters: PropertyFilters,
        *,
        sort: str = "createdAt",
        order: str = "desc",
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Property], int]:
        ordering = self.resolve_sort(sort, order)
        conditions = filters.conditions()

        total = await self.db.scalar(
            select(func.count()).select_from(Property).where(*conditions)
        )
        result = await self.db.execute(
            select(Property)
            .where(*conditions)
            .order_by(ordering, Property.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def featured(self, limit: int) -> list[Property]:
        result = await self.db.execute(
            select(Property)
            .where(
                Property.featured.is_(True),
                Property.is_active.is_(True),
                Property.is_available.is_(True),
            )
            .order_by(Property.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def recent(self, limit: int = 5) -> list[Property]:
        result = await self.db.execute(
            select(Property)
            .where(Property.is_active.is_(True))
            .order_by(Property.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def increment_views(self, prop: Property) -> Property:
        await self.db.execute(
            update(Property)
            .where(Property.id == prop.id)
            .values(views=Property.views + 1)
            .execution_options(synchronize_session=False)
        )
        await self.commit()
        await self.db.refresh(prop)
        return prop

    async def claim_for_rental(self, property_id: uuid.UUID) -> bool:
        """Flips ``is_available`` off only if it is still on.

        Runs inside the caller's transaction; the caller commits or rolls back.
        """
        result = await self.db.execute(
            update(Property)
            .where(
                Property.id == property_id,
                Property.is_available.is_(True),
                Property.is_active.is_(True),
            )
            .values(is_available=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def save(self, prop: Property) -> Property:
        self.db.add(prop)
        try:
            await self.db.commit()
            await self.db.refresh(prop)
            return prop
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
