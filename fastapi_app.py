"""
FastAPI Application for the Retail Incentive API
Goal progress, cashier goals, dashboards and bonus payouts over sales snapshots
"""

import logging
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.routers import bonus, cashier, goals, health, periods

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Retail Incentive API",
    description="Sales goal progress, cashier payment-mix goals and bonus payout calculations",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api/health", tags=["health"])
app.include_router(periods.router, prefix="/api/periods", tags=["periods"])
app.include_router(goals.router, prefix="/api/goals", tags=["goals"])
app.include_router(cashier.progress_router, prefix="/api/cashier-goals", tags=["cashier"])
app.include_router(cashier.dashboard_router, prefix="/api/cashier", tags=["cashier"])
app.include_router(bonus.router, prefix="/api/bonus", tags=["bonus"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "Retail Incentive API v1.0",
        "version": "1.0.0",
        "timestamp": datetime.now().isoformat(),
        "endpoints": {
            "health": "GET /api/health/",
            "period_window": "GET /api/periods/window",
            "goal_progress": "POST /api/goals/progress",
            "goal_dashboard": "POST /api/goals/dashboard",
            "personal_goals": "POST /api/goals/personal",
            "cashier_goal_progress": "POST /api/cashier-goals/progress",
            "cashier_dashboard": "POST /api/cashier/dashboard",
            "bonus_summary": "POST /api/bonus/summary",
            "payment_summary": "POST /api/bonus/payment-summary",
            "docs": "/docs"
        }
    }


# Exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error", "detail": str(exc)}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
