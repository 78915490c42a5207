import logging

from core.identity import LocalJWTProvider, local_provider
from core.mapper import ORMMapper
from fastapi import HTTPException
from models.enums import UserRole
from models.models import User
from repos.auth_repo import AuthRepo
from schemas.schema import UserOut

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db, token_provider: LocalJWTProvider = local_provider):
        self.repo: AuthRepo = AuthRepo(db)
        self.tokens: LocalJWTProvider = token_provider
        self.mapper: ORMMapper = ORMMapper()

    async def register(self, data):
        if await self.repo.get_by_email(email=data.email):
            raise HTTPException(
                status_code=400, detail="User already exists with this email"
            )

        address = data.address
        user = User(
            name=data.name,
            email=data.email,
            phone=data.phone,
            role=UserRole.TENANT,
            address_street=address.street if address else None,
            address_city=address.city if address else None,
            address_state=address.state if address else None,
            address_district=address.district if address else None,
            address_pincode=address.pincode if address else None,
        )
        user.set_password(raw_password=data.password)
        await self.repo.create(user)
        logger.info(f"Registered tenant {user.email}")

        return {
            "success": True,
            "message": "User registered successfully",
            "token": self.tokens.issue(user),
            "user": self.mapper.dump(user, UserOut),
        }

    async def create_admin(self, name: str, email: str, password: str) -> User:
        existing = await self.repo.get_by_email(email=email)
        if existing:
            if existing.role != UserRole.ADMIN:
                existing.role = UserRole.ADMIN
                existing = await self.repo.update(existing)
                logger.info(f"Promoted {existing.email} to admin")
            return existing

        user = User(name=name, email=email, role=UserRole.ADMIN)
        user.set_password(raw_password=password)
        await self.repo.create(user)
        logger.info(f"Created admin {user.email}")
        return user

    async def login(self, data):
        user = await self.repo.get_by_email(data.email)
        if not user or not user.check_password(raw_password=data.password):
            raise HTTPException(status_code=401, detail="Invalid credentials")
        if not user.is_active:
            raise HTTPException(
                status_code=401, detail="Account is deactivated. Contact admin."
            )

        return {
            "success": True,
            "message": "Login successful",
            "token": self.tokens.issue(user),
            "user": self.mapper.dump(user, UserOut),
        }

    async def profile(self, ctx):
        return {"success": True, "user": self.mapper.dump(ctx.user, UserOut)}
