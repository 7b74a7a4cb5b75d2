"""Dashboard API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from eventdesk.auth.dependencies import get_current_owner_id
from eventdesk.dashboard.engine import compute_dashboard
from eventdesk.dashboard.schemas import DashboardStatsResponse
from eventdesk.database import get_session_factory

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    owner_id: str = Depends(get_current_owner_id),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    """
    Get the consolidated financial snapshot for the current owner.

    Returns:
        Month receivables, overdue receivables, upcoming events, six-month
        series, lifetime margin, cash position and 90-day cash flow projection
    """
    try:
        snapshot = await compute_dashboard(session_factory, owner_id)
    except SQLAlchemyError as e:
        logger.error(f"Error computing dashboard for {owner_id}: {e}")
        raise HTTPException(status_code=500, detail="Erro ao calcular dashboard")

    return DashboardStatsResponse.model_validate(snapshot.to_dict())
