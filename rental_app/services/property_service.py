import logging
import uuid

from fastapi import HTTPException

from core.check_permission import CheckRolePermission
from core.mapper import ORMMapper
from core.paginate import PaginatePage
from core.settings import settings
from models.models import Property
from models.utils import to_decimal, utcnow
from repos.property_repo import PropertyFilters, PropertyRepo
from schemas.schema import PropertyOut

logger = logging.getLogger(__name__)


class PropertyService:
    def __init__(self, db):
        self.repo: PropertyRepo = PropertyRepo(db)
        self.paginate: PaginatePage = PaginatePage()
        self.permission: CheckRolePermission = CheckRolePermission()
        self.mapper: ORMMapper = ORMMapper()

    @staticmethod
    def apply_payload(prop: Property, data) -> Property:
        """Copies a validated create payload onto the flat columns."""
        location = data.location
        coordinates = location.coordinates
        rent = data.rent
        spec = data.specifications
        availability = data.availability
        owner = data.owner

        prop.title = data.title
        prop.description = data.description
        prop.property_type = data.type
        prop.address = location.address
        prop.city = location.city
        prop.state = location.state
        prop.pincode = location.pincode
        prop.latitude = coordinates.latitude if coordinates else None
        prop.longitude = coordinates.longitude if coordinates else None
        prop.rent_amount = to_decimal(rent.amount)
        prop.currency = rent.currency
        prop.deposit = to_decimal(rent.deposit)
        prop.maintenance_charge = to_decimal(rent.maintenance)
        prop.bedrooms = spec.bedrooms
        prop.bathrooms = spec.bathrooms
        prop.area_value = spec.area.value
        prop.area_unit = spec.area.unit
        prop.floor = spec.floor
        prop.total_floors = spec.total_floors
        prop.furnished = spec.furnished
        prop.is_available = availability.is_available
        prop.available_from = availability.available_from or utcnow()
        prop.preferred_tenant = availability.preferred_tenant
        prop.owner_name = owner.name if owner else None
        prop.owner_phone = owner.phone if owner else None
        prop.owner_email = owner.email if owner else None
        prop.owner_verified = owner.is_verified if owner else False
        prop.set_amenities(data.amenities)
        return prop

    async def get_or_404(self, property_id: uuid.UUID) -> Property:
        prop = await self.repo.get_by_id(property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found")
        return prop

    async def list_properties(
        self,
        filters: PropertyFilters,
        *,
        page: int,
        limit: int | None,
        sort: str,
        order: str,
    ):
        page, limit = self.paginate.normalize(page, limit)
        items, total = await self.repo.search(
            filters,
            sort=sort,
            order=order,
            offset=self.paginate.offset(page, limit),
            limit=limit,
        )
        return {
            "success": True,
            "properties": self.mapper.dump_many(items, PropertyOut),
            "pagination": self.paginate.pagination(page, limit, total, "Properties"),
        }

    async def featured(self):
        items = await self.repo.featured(limit=settings.FEATURED_LIMIT)
        return {"success": True, "properties": self.mapper.dump_many(items, PropertyOut)}

    async def get_property(self, property_id: uuid.UUID):
        prop = await self.repo.get_active(property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found")
        prop = await self.repo.increment_views(prop)
        return {"success": True, "property": self.mapper.dump(prop, PropertyOut)}

    async def create_property(self, ctx, data):
        await self.permission.check_admin(ctx)
        prop = Property(created_by_id=ctx.user.id)
        self.apply_payload(prop, data)
        prop = await self.repo.save(prop)
        logger.info(f"Property {prop.id} created by {ctx.user.email}")
        return {
            "success": True,
            "message": "Property created successfully",
            "property": self.mapper.dump(prop, PropertyOut),
        }

    async def update_property(self, ctx, property_id: uuid.UUID, data):
        await self.permission.check_admin(ctx)
        prop = await self.get_or_404(property_id)
        self.apply_payload(prop, data)
        prop = await self.repo.save(prop)
        return {
            "success": True,
            "message": "Property updated successfully",
            "property": self.mapper.dump(prop, PropertyOut),
        }

    async def delete_property(self, ctx, property_id: uuid.UUID):
        await self.permission.check_admin(ctx)
        prop = await self.get_or_404(property_id)
        prop.is_active = False
        await self.repo.save(prop)
        logger.info(f"Property {prop.id} deactivated by {ctx.user.email}")
        return {"success": True, "message": "Property deleted successfully"}

    async def toggle_featured(self, ctx, property_id: uuid.UUID):
        await self.permission.check_admin(ctx)
        prop = await self.get_or_404(property_id)
        prop.featured = not prop.featured
        prop = await self.repo.save(prop)
        state = "featured" if prop.featured else "unfeatured"
        return {
            "success": True,
            "message": f"Property {state} successfully",
            "property": self.mapper.dump(prop, PropertyOut),
        }
