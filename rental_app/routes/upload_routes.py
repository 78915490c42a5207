import uuid
from typing import List, Optional

from core.get_current_user import RequestContext, get_request_context
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi_utils.cbv import cbv
from schemas.schema import DeleteImageSchema, SetPrimaryImageSchema
from services.property_image_service import PropertyImageService
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["Uploads"])


@cbv(router)
class UploadRoutes:
    @router.post("/property-images", status_code=201)
    @safe_handler
    async def upload_property_images(
        self,
        property_id: uuid.UUID = Form(..., alias="propertyId"),
        images: List[UploadFile] = File(...),
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await PropertyImageService(db).upload_property_images(
            ctx=ctx, property_id=property_id, files=images
        )

    @router.delete("/property-images/{image_id}")
    @safe_handler
    async def delete_property_image(
        self,
        image_id: uuid.UUID,
        data: DeleteImageSchema,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await PropertyImageService(db).delete_property_image(
            ctx=ctx, image_id=image_id, property_id=data.property_id
        )

    @router.patch("/property-images/{image_id}/primary")
    @safe_handler
    async def set_primary_image(
        self,
        image_id: uuid.UUID,
        data: SetPrimaryImageSchema,
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await PropertyImageService(db).set_primary_image(
            ctx=ctx, image_id=image_id, property_id=data.property_id
        )

    @router.post("/profile-image")
    @safe_handler
    async def upload_profile_image(
        self,
        image: Optional[UploadFile] = File(default=None),
        db: AsyncSession = Depends(get_db_async),
        ctx: RequestContext = Depends(get_request_context),
    ):
        return await PropertyImageService(db).upload_profile_image(ctx=ctx, file=image)
