from fastapi import APIRouter

from dynform.core.config import settings

router = APIRouter()

@router.get("/")
def root():
    return {
        "name": settings.APP_NAME,
        "status": "ok",
        "docs": "/docs",
        "health": "/api/health",
    }
