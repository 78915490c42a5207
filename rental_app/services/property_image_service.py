import logging
import uuid

from fastapi import HTTPException, UploadFile

from core.check_permission import CheckRolePermission
from core.cloudinary_setup import (
    PROFILE_IMAGE_TRANSFORMATION,
    PROPERTY_IMAGE_TRANSFORMATION,
    CloudinaryClient,
    cloudinary_client,
)
from core.mapper import ORMMapper
from core.settings import settings
from repos.auth_repo import AuthRepo
from repos.property_image_repo import PropertyImageRepo
from repos.property_repo import PropertyRepo
from schemas.schema import PropertyImageOut, UserOut

logger = logging.getLogger(__name__)


class PropertyImageService:
    def __init__(self, db, cloudinary: CloudinaryClient = cloudinary_client):
        self.repo: PropertyImageRepo = PropertyImageRepo(db)
        self.property_repo: PropertyRepo = PropertyRepo(db)
        self.auth_repo: AuthRepo = AuthRepo(db)
        self.cloudinary: CloudinaryClient = cloudinary
        self.permission: CheckRolePermission = CheckRolePermission()
        self.mapper: ORMMapper = ORMMapper()

    async def _read_image(self, file: UploadFile) -> bytes:
        content = await file.read()
        self.cloudinary.validate_image(
            file.content_type, len(content), file_name=file.filename
        )
        return content

    async def _get_property(self, property_id: uuid.UUID):
        prop = await self.property_repo.get_by_id(property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found")
        return prop

    async def upload_property_images(
        self, ctx, property_id: uuid.UUID, files: list[UploadFile]
    ):
        await self.permission.check_admin(ctx)
        if not files:
            raise HTTPException(status_code=400, detail="No images uploaded")
        if len(files) > settings.MAX_UPLOAD_FILES:
            raise HTTPException(
                status_code=400,
                detail=f"At most {settings.MAX_UPLOAD_FILES} images per upload",
            )

        prop = await self._get_property(property_id)
        contents = [await self._read_image(f) for f in files]

        uploads = []
        for file, content in zip(files, contents):
            result = await self.cloudinary.upload_image(
                content,
                folder=settings.PROPERTY_IMAGE_FOLDER,
                transformation=PROPERTY_IMAGE_TRANSFORMATION,
            )
            uploads.append({**result, "caption": file.filename or ""})

        prop = await self.repo.add_many(prop, uploads)
        logger.info(f"Uploaded {len(uploads)} images for property {prop.id}")

        return {
            "success": True,
            "message": "Images uploaded successfully",
            "images": self.mapper.dump_many(prop.images, PropertyImageOut),
        }

    async def delete_property_image(
        self, ctx, image_id: uuid.UUID, property_id: uuid.UUID
    ):
        await self.permission.check_admin(ctx)
        prop = await self._get_property(property_id)
        image = await self.repo.get_one(image_id=image_id, property_id=property_id)
        if not image:
            raise HTTPException(status_code=404, detail="Image not found")

        # A CDN failure never blocks removing the database row.
        await self.cloudinary.safe_delete_cloudinary(image.public_id)

        prop = await self.repo.remove(prop, image)
        return {
            "success": True,
            "message": "Image deleted successfully",
            "images": self.mapper.dump_many(prop.images, PropertyImageOut),
        }

    async def set_primary_image(
        self, ctx, image_id: uuid.UUID, property_id: uuid.UUID
    ):
        await self.permission.check_admin(ctx)
        prop = await self._get_property(property_id)
        image = await self.repo.get_one(image_id=image_id, property_id=property_id)
        if not image:
            raise HTTPException(status_code=404, detail="Image not found")

        prop = await self.repo.set_primary(prop, image.id)
        return {
            "success": True,
            "message": "Primary image updated successfully",
            "images": self.mapper.dump_many(prop.images, PropertyImageOut),
        }

    async def upload_profile_image(self, ctx, file: UploadFile | None):
        if file is None:
            raise HTTPException(status_code=400, detail="No image uploaded")
        content = await self._read_image(file)

        result = await self.cloudinary.upload_image(
            content,
            folder=settings.PROFILE_IMAGE_FOLDER,
            transformation=PROFILE_IMAGE_TRANSFORMATION,
        )
        user = ctx.user
        user.profile_image = result["url"]
        user = await self.auth_repo.update(user)
        logger.info(f"Profile image updated for {user.email}")

        return {
            "success": True,
            "message": "Profile image uploaded successfully",
            "user": self.mapper.dump(user, UserOut),
        }
