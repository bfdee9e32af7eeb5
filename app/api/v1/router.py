from fastapi import APIRouter

from app.api.v1.endpoints.health import router as health_router
from app.api.v1.endpoints.admin import router as admin_router
from app.api.v1.endpoints.listings import router as listings_router
from app.api.v1.endpoints.builders import router as builders_router
from app.schemas.common import ErrorResponse


router = APIRouter(prefix="/v1", responses={422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}})
router.include_router(health_router, tags=["health"])
router.include_router(
    admin_router,
    tags=["admin"],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
router.include_router(listings_router, tags=["listings"], responses={404: {"model": ErrorResponse}})
router.include_router(builders_router, tags=["builders"], responses={404: {"model": ErrorResponse}})
