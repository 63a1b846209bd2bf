"""Composite leaderboard route handler."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from courtboard.database.db import get_db_session
from courtboard.models.schemas import LeaderboardResponse
from courtboard.services import data_service

router = APIRouter()


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(session: AsyncSession = Depends(get_db_session)):
    """Ranked players and all courts in one response."""
    try:
        return await data_service.get_leaderboard(session)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading leaderboard: {str(e)}")
