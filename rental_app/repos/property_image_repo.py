import uuid

from sqlalchemy import case, select, update
from sqlalchemy.exc import SQLAlchemyError

from models.models import Property, PropertyImage


class PropertyImageRepo:
    def __init__(self, db):
        self.db = db

    async def get_one(
        self, image_id: uuid.UUID, property_id: uuid.UUID
    ) -> PropertyImage | None:
        result = await self.db.execute(
            select(PropertyImage).where(
                PropertyImage.id == image_id,
                PropertyImage.property_id == property_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_many(self, prop: Property, uploads: list[dict]) -> Property:
        position = max((img.position for img in prop.images), default=-1) + 1
        for offset, item in enumerate(uploads):
            prop.images.append(
                PropertyImage(
                    url=item["url"],
                    public_id=item.get("public_id"),
                    caption=item.get("caption", ""),
                    is_primary=False,
                    position=position + offset,
                )
            )
        prop.ensure_primary_image()
        return await self._commit_and_refresh(prop)

    async def remove(self, prop: Property, image: PropertyImage) -> Property:
        was_primary = image.is_primary
        prop.images.remove(image)
        if was_primary:
            prop.ensure_primary_image()
        return await self._commit_and_refresh(prop)

    async def set_primary(self, prop: Property, image_id: uuid.UUID) -> Property:
        """Marks one image primary and clears the flag on every sibling.

        A single UPDATE over the property's images, so no reader ever sees
        two primaries.
        """
        await self.db.execute(
            update(PropertyImage)
            .where(PropertyImage.property_id == prop.id)
            .values(
                is_primary=case((PropertyImage.id == image_id, True), else_=False)
            )
            .execution_options(synchronize_session=False)
        )
        return await self._commit_and_refresh(prop)

    async def _commit_and_refresh(self, prop: Property) -> Property:
        try:
            await self.db.commit()
            await self.db.refresh(prop)
            for img in prop.images:
                await self.db.refresh(img)
            return prop
        except SQLAlchemyError:
            await self.db.rollback()
            raise
