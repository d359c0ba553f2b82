"""API router initializers."""

from fastapi import APIRouter

from video_service.metadata import APP_SLUG


def get_api_router() -> APIRouter:
    """Construct and return the API router."""

    from backend.routers.squadcast import router as squadcast_router

    api_router = APIRouter()
    api_router.include_router(squadcast_router, prefix=f"/apps/{APP_SLUG}", tags=[APP_SLUG])
    return api_router
