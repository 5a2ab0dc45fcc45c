from fastapi import APIRouter

from src.domain.base import utc_now

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness probe, exempt from rate limiting"""
    return {"status": "ok", "timestamp": utc_now().isoformat() + "Z"}
