from fastapi import HTTPException
from models.enums import UserRole


class CheckRolePermission:
    async def check_admin(self, ctx):
        if ctx.user.role != UserRole.ADMIN:
            raise HTTPException(status_code=403, detail="Admin access required")

    async def check_rental_access(self, ctx, rental, allow_landlord: bool = True):
        user = ctx.user
        if user.role == UserRole.ADMIN:
            return
        if rental.tenant_id == user.id:
            return
        if allow_landlord and rental.landlord_id == user.id:
            return
        raise HTTPException(status_code=403, detail="Access denied")

    async def check_rental_tenant(self, ctx, rental):
        if rental.tenant_id != ctx.user.id:
            raise HTTPException(status_code=403, detail="Access denied")
