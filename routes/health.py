# routes/health.py
from fastapi import APIRouter, Request
from datetime import datetime, timezone
import time

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request):
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": time.monotonic() - request.app.state.started_at,
    }
