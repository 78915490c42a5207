import os
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

from .url_parser import parser

load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "RAMA KUTI RENTAL MARKETPLACE"
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL", "sqlite+aiosqlite:///./rentals.db"
    )
    AUTO_CREATE_TABLES: bool = False
    API_PREFIX: str = "/api"

    JWT_SECRET_KEY: str = os.getenv(
        "JWT_SECRET_KEY", "change-me-in-production-rental-secret"
    )
    ALGORITHM: str = "HS256"
    ACCESS_EXPIRE_HOURS: int = 24
    TOKEN_ISSUER: str = "rama-kuti-rentals"

    # "local" signs and verifies tokens in-process, "remote" delegates
    # verification to IDENTITY_PROVIDER_URL.
    AUTH_PROVIDER: str = "local"
    IDENTITY_PROVIDER_URL: str | None = os.getenv("IDENTITY_PROVIDER_URL")
    IDENTITY_PROVIDER_VERIFY_PATH: str = "/auth/verify"
    IDENTITY_PROVIDER_TIMEOUT: float = 5.0

    CLOUDINARY_CLOUD_NAME: str | None = os.getenv("CLOUDINARY_CLOUD_NAME")
    CLOUDINARY_API_KEY: str | None = os.getenv("CLOUDINARY_API_KEY")
    CLOUDINARY_SECRET_KEY: str | None = os.getenv("CLOUDINARY_SECRET_KEY")
    PROPERTY_IMAGE_FOLDER: str = "rama-kuti-properties"
    PROFILE_IMAGE_FOLDER: str = "rama-kuti-profiles"
    MAX_UPLOAD_FILES: int = 10
    MAX_FILE_SIZE: int = 5 * 1024 * 1024

    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    RENT_DUE_DAY: int = 5
    FEATURED_LIMIT: int = 6

    ALLOWED_HOSTS_RAW: str = os.getenv(
        "ALLOWED_HOSTS", "http://localhost:5173,http://localhost:8080"
    )

    @property
    def ALLOWED_HOSTS(self) -> List[str]:
        return parser.parse_url_list(self.ALLOWED_HOSTS_RAW, "ALLOWED_HOSTS")

    class Config:
        env_file = ".env"
        extra = "ignore"
        case_sensitive = False


settings = Settings()
