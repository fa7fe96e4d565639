import time
from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])

STARTED_AT = time.monotonic()


@router.get("/api/health")
def health():
    return {
        "status": "ok",
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
