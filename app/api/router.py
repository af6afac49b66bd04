from fastapi import APIRouter

from app.api.routes import admin
from app.api.routes import auth
from app.api.routes import location
from app.api.routes import notifications
from app.api.routes import status
from app.api.routes import weather

api_router = APIRouter(prefix="/v1")

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(location.router, prefix="/location", tags=["location"])
api_router.include_router(status.router, prefix="/status", tags=["presence"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(weather.router, prefix="/weather", tags=["weather"])
