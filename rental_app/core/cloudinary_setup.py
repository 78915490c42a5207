import asyncio
import logging

import cloudinary
import cloudinary.api
import cloudinary.uploader
from fastapi import HTTPException

from core.settings import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_PREFIX = "image/"

PROPERTY_IMAGE_TRANSFORMATION = [
    {"width": 1200, "height": 800, "crop": "fill", "quality": "auto"},
    {"format": "webp"},
]

PROFILE_IMAGE_TRANSFORMATION = [
    {"width": 400, "height": 400, "crop": "fill", "quality": "auto"},
    {"format": "webp"},
]


class CloudinaryClient:
    def __init__(self):
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_SECRET_KEY,
            secure=True,
        )

    async def connect(self) -> bool:
        try:
            loop = asyncio.get_running_loop()
            info = await loop.run_in_executor(None, cloudinary.api.ping)
            return info.get("status") == "ok"
        except Exception as e:
            raise HTTPException(500, f"Cloudinary connection failed: {e}")

    def validate_image(
        self, content_type: str | None, size: int, file_name: str | None = None
    ) -> None:
        if not content_type or not content_type.startswith(ALLOWED_IMAGE_PREFIX):
            raise HTTPException(
                status_code=400, detail="Only image files are allowed"
            )
        if size > settings.MAX_FILE_SIZE:
            raise HTTPException(
                status_code=400,
                detail=f"File '{file_name or 'unknown'}' exceeds maximum allowed size.",
            )

    async def upload_image(
        self, content: bytes, folder: str, transformation: list[dict]
    ) -> dict:
        """Uploads raw bytes and returns ``{"url", "public_id"}``.

        The SDK call is blocking, so it runs in the default executor.
        """
        try:
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(
                None,
                lambda: cloudinary.uploader.upload(
                    content,
                    folder=folder,
                    resource_type="image",
                    transformation=transformation,
                ),
            )
        except Exception as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise HTTPException(500, "Image upload failed")

        return {"url": result["secure_url"], "public_id": result["public_id"]}

    async def delete_image(self, public_id: str, resource_type: str = "image") -> dict:
        try:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(
                None,
                lambda: cloudinary.uploader.destroy(
                    public_id, resource_type=resource_type, invalidate=True
                ),
            )
        except Exception as e:
            raise HTTPException(500, f"Failed to delete image: {e}")

    async def safe_delete_cloudinary(
        self, public_id: str | None, resource_type: str = "image"
    ) -> bool:
        if not public_id:
            return False
        try:
            await self.delete_image(public_id, resource_type=resource_type)
            return True
        except Exception as e:
            logger.warning(f"Error deleting image {public_id} from Cloudinary: {e}")
            return False


cloudinary_client = CloudinaryClient()
