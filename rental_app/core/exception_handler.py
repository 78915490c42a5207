from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ValidationErrorHandler:
    async def __call__(self, request: Request, exc: RequestValidationError):

        errors = []

        for err in exc.errors():
            errors.append({
                "loc": err.get("loc"),
                "msg": str(err.get("msg")),
                "type": err.get("type"),
            })

        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": "Validation failed",
                "details": errors,
            },
        )


class HTTPErrorHandler:
    async def __call__(self, request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message},
            headers=getattr(exc, "headers", None),
        )
