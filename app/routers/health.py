"""
Health check endpoints
"""

from datetime import datetime

from fastapi import APIRouter

from app.config import settings

router = APIRouter()


@router.get("/")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "incentive-api"}


@router.get("/detailed")
async def detailed_health():
    """Health check with the business clock and calculation defaults"""
    return {
        "status": "healthy",
        "version": "1.0.0",
        "business_time": settings.business_now().isoformat(),
        "server_time": datetime.now().isoformat(),
        "components": {
            "calculations": "healthy",
            "api": "healthy"
        },
        "defaults": {
            "bonus_achieved_rate": float(settings.DEFAULT_BONUS_ACHIEVED_RATE),
            "bonus_not_achieved_rate": float(settings.DEFAULT_BONUS_NOT_ACHIEVED_RATE),
            "stores": settings.STORE_NAMES
        }
    }
