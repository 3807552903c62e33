"""
Goal period endpoints
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from app.models.incentive_models import IncentiveResponse
from app.services.incentive_service import IncentiveService
from calculations.period_calculations import InvalidPeriodError

router = APIRouter()

incentive_service = IncentiveService()


@router.get("/window", response_model=IncentiveResponse)
async def period_window(period: str = Query(..., description="weekly or monthly"),
                        reference_date: Optional[date] = Query(None, alias="referenceDate")):
    """Window boundaries used when creating a goal"""
    try:
        result = await incentive_service.resolve_period_window(period, reference_date)

        return IncentiveResponse(
            success=True,
            data=result['data'],
            message=f"{period} window resolved",
            execution_time=result['execution_time'],
            record_count=result['record_count']
        )

    except InvalidPeriodError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
