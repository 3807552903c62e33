"""
Bonus endpoints: live period totals and the payout report
"""

import logging

from fastapi import APIRouter, HTTPException

from app.models.incentive_models import BonusSummaryRequest, IncentiveResponse, PaymentSummaryRequest
from app.services.incentive_service import IncentiveService
from calculations.period_calculations import InvalidPeriodError

logger = logging.getLogger(__name__)
router = APIRouter()

incentive_service = IncentiveService()


@router.post("/summary", response_model=IncentiveResponse)
async def bonus_summary(request: BonusSummaryRequest):
    """
    Estimated bonus totals by role for the current week and month
    """
    try:
        result = await incentive_service.bonus_summary(request)

        return IncentiveResponse(
            success=True,
            data=result['data'],
            message="Bonus summary calculated",
            execution_time=result['execution_time'],
            record_count=result['record_count']
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Bonus summary failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Bonus summary failed: {str(e)}")


@router.post("/payment-summary", response_model=IncentiveResponse)
async def payment_summary(request: PaymentSummaryRequest):
    """
    Consolidated payout report (previous week unless a period is given)
    """
    try:
        result = await incentive_service.payment_summary(request)

        return IncentiveResponse(
            success=True,
            data=result['data'],
            message=f"Payment summary with {result['record_count']} line items",
            execution_time=result['execution_time'],
            record_count=result['record_count']
        )

    except HTTPException:
        raise
    except InvalidPeriodError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Payment summary failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Payment summary failed: {str(e)}")
