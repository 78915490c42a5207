import math

from fastapi import HTTPException

from .settings import settings


class PaginatePage:
    def normalize(self, page: int, limit: int | None) -> tuple[int, int]:
        if page < 1:
            raise HTTPException(status_code=400, detail="Page must be at least 1")
        limit = limit or settings.DEFAULT_PAGE_SIZE
        if limit < 1:
            raise HTTPException(status_code=400, detail="Limit must be at least 1")
        return page, min(limit, settings.MAX_PAGE_SIZE)

    def offset(self, page: int, limit: int) -> int:
        return (page - 1) * limit

    def pagination(self, page: int, limit: int, total: int, entity: str) -> dict:
        return {
            "currentPage": page,
            "totalPages": math.ceil(total / limit) if limit else 0,
            f"total{entity}": total,
            "hasNext": self.offset(page, limit) + limit < total,
            "hasPrev": page > 1,
        }
