"""
Sales goal endpoints: single-goal progress, role dashboards and personal history
"""

import logging

from fastapi import APIRouter, HTTPException

from app.models.incentive_models import (
    GoalDashboardRequest, GoalProgressRequest, IncentiveResponse, PersonalGoalsRequest,
)
from app.services.incentive_service import EntityNotFoundError, IncentiveService

logger = logging.getLogger(__name__)
router = APIRouter()

incentive_service = IncentiveService()


@router.post("/progress", response_model=IncentiveResponse)
async def goal_progress(request: GoalProgressRequest):
    """
    Evaluate one sales goal against a sales snapshot
    """
    try:
        result = await incentive_service.goal_progress(request)

        return IncentiveResponse(
            success=True,
            data=result['data'],
            message=f"Progress calculated for goal {request.goal.id}",
            execution_time=result['execution_time'],
            record_count=result['record_count']
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Goal progress failed for {request.goal.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Goal progress calculation failed: {str(e)}")


@router.post("/dashboard", response_model=IncentiveResponse)
async def goal_dashboard(request: GoalDashboardRequest):
    """
    Current goals as seen by the viewer (vendor rows or aggregated rows)
    """
    try:
        if not request.viewer_id.strip():
            raise HTTPException(status_code=400, detail="viewerId is required and cannot be empty")

        result = await incentive_service.goal_dashboard(request)

        return IncentiveResponse(
            success=True,
            data=result['data'],
            message="Goal dashboard composed",
            execution_time=result['execution_time'],
            record_count=result['record_count']
        )

    except HTTPException:
        raise
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Goal dashboard failed for {request.viewer_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Goal dashboard failed: {str(e)}")


@router.post("/personal", response_model=IncentiveResponse)
async def personal_goals(request: PersonalGoalsRequest):
    """
    Recent goals of one employee with progress, bonus and summary
    """
    try:
        result = await incentive_service.personal_goals(request)

        return IncentiveResponse(
            success=True,
            data=result['data'],
            message=f"Found {result['record_count']} goals",
            execution_time=result['execution_time'],
            record_count=result['record_count']
        )

    except HTTPException:
        raise
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Personal goals failed for {request.employee_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Personal goals failed: {str(e)}")
