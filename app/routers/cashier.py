"""
Cashier goal endpoints
"""

import logging

from fastapi import APIRouter, HTTPException

from app.models.incentive_models import CashierDashboardRequest, CashierGoalProgressRequest, IncentiveResponse
from app.services.incentive_service import EntityNotFoundError, IncentiveService

logger = logging.getLogger(__name__)

progress_router = APIRouter()
dashboard_router = APIRouter()

incentive_service = IncentiveService()


@progress_router.post("/progress", response_model=IncentiveResponse)
async def cashier_goal_progress(request: CashierGoalProgressRequest):
    """
    Evaluate cashier goals (payment-method share of store sales)
    """
    try:
        if not request.cashier_goals:
            raise HTTPException(status_code=400, detail="cashierGoals cannot be empty")

        result = await incentive_service.cashier_goal_progress(request)

        return IncentiveResponse(
            success=True,
            data=result['data'],
            message=f"Evaluated {result['record_count']} cashier goals",
            execution_time=result['execution_time'],
            record_count=result['record_count']
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Cashier goal progress failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Cashier goal progress failed: {str(e)}")


@dashboard_router.post("/dashboard", response_model=IncentiveResponse)
async def cashier_dashboard(request: CashierDashboardRequest):
    """
    Current weekly goal of a cashier with pacing
    """
    try:
        result = await incentive_service.cashier_dashboard(request)

        return IncentiveResponse(
            success=True,
            data=result['data'],
            message="Cashier dashboard composed" if result['record_count'] else "No current cashier goal",
            execution_time=result['execution_time'],
            record_count=result['record_count']
        )

    except HTTPException:
        raise
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Cashier dashboard failed for {request.cashier_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Cashier dashboard failed: {str(e)}")
