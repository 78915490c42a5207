import uuid
from typing import Optional

from core.get_current_user import RequestContext, get_request_context
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi_utils.cbv import cbv
from models.enums import Amenity, Furnishing, PropertyTypes
from models.utils import to_decimal
from repos.property_repo import PropertyFilters
from schemas.schema import PropertyCreate
from services.property_service import PropertyService
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["Property Management"])


def parse_amenities(raw: Optional[str]) -> list[Amenity]:
    if not raw:
        return []
    try:
        return [Amenity(a.strip()) for a in raw.split(",") if a.strip()]
    except ValueError:
        raise HTTPException(status_code=400, detail="Unknown amenity in filter")


@cbv(router=router)
class PropertyRoutes:
    @router.get("/")
    @safe_handler
    async def list_properties(
        self,
        db: AsyncSession = Depends(get_db_async),
        city: Optional[str] = None,
        type: Optional[PropertyTypes] = None,
        min_rent: Optional[float] = Query(default=None, alias="minRent", ge=0),
        max_rent: Optional[float] = Query(default=None, alias="maxRent", ge=0),
        bedrooms: Optional[int] = Query(default=None, ge=0),
        furnished: Optional[Furnishing] = None,
        amenities: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
        sort: str = "createdAt",
        order: str = "desc",
    ):
        filters = PropertyFilters(
            city=city,
            property_type=type,
            min_rent=to_decimal(min_rent) if min_rent is not None else None,
            max_rent=to_decimal(max_rent) if max_rent is not None else None,
            bedrooms=bedrooms,
            furnished=furnished,
            amenities=parse_amenities(amenities),
        )
        return await PropertyService(db).list_properties(
            filters, page=page, limit=limit, sort=sort, order=order
        )

    @router.get("/featured/list")
    @safe_handler
    async def featured(self, db: AsyncSession = Depends(get_db_async)):
        return await PropertyService(db).featured()

    @router.get("/{property_id}")
    @safe_handler
    async def get_property(
        self,
        property_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).get_property(property_id)

    @router.post("/", status_code=201)
    @safe_handler
    async def create(
        self,
        data: PropertyCreate,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await PropertyService(db).create_property(ctx=ctx, data=data)

    @router.put("/{property_id}")
    @safe_handler
    async def update(
        self,
        property_id: uuid.UUID,
        data: PropertyCreate,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await PropertyService(db).update_property(
            ctx=ctx, property_id=property_id, data=data
        )

    @router.delete("/{property_id}")
    @safe_handler
    async def delete_property(
        self,
        property_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await PropertyService(db).delete_property(
            ctx=ctx, property_id=property_id
        )

    @router.patch("/{property_id}/featured")
    @safe_handler
    async def toggle_featured(
        self,
        property_id: uuid.UUID,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await PropertyService(db).toggle_featured(
            ctx=ctx, property_id=property_id
        )
