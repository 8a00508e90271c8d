from fastapi import APIRouter

from src.server.settings.config import settings

router = APIRouter(tags=["system"])


@router.get("/health")
def health():
    return {
        "message": "ok",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }
