import logging

import uvicorn
from core.catch_error_middleware import ErrorHandlerMiddleware
from core.exception_handler import HTTPErrorHandler, ValidationErrorHandler
from core.lifespan import lifespan
from core.settings import settings
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from models import event_listener  # noqa: F401  registers ORM listeners
from routes.admin_routes import router as admin_router
from routes.auth_routes import router as auth_router
from routes.property_routes import router as property_router
from routes.rental_routes import router as rental_router
from routes.upload_routes import router as upload_router
from starlette.exceptions import HTTPException as StarletteHTTPException

logging.basicConfig(level=logging.INFO)

app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version="1.0.0",
)

API = settings.API_PREFIX

app.include_router(auth_router, prefix=f"{API}/auth")
app.include_router(property_router, prefix=f"{API}/properties")
app.include_router(rental_router, prefix=f"{API}/rentals")
app.include_router(admin_router, prefix=f"{API}/admin")
app.include_router(upload_router, prefix=f"{API}/upload")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["System"])
async def health_check():
    return {"success": True, "status": "ok", "message": "Server is running"}


app.add_exception_handler(RequestValidationError, ValidationErrorHandler())
app.add_exception_handler(StarletteHTTPException, HTTPErrorHandler())

app.add_middleware(ErrorHandlerMiddleware)


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8001)
