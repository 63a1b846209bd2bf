"""Match history and match recording route handlers."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from courtboard.api.routes import limiter, WRITE_RATE_LIMIT
from courtboard.database.db import get_db_session
from courtboard.models.schemas import CreateMatchRequest, CreateMatchResponse, MatchResponse
from courtboard.services import data_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/matches", response_model=List[MatchResponse])
async def list_matches(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    session: AsyncSession = Depends(get_db_session),
):
    """Get matches, newest first. Paginated like /players."""
    try:
        return await data_service.list_matches(session, page=page, limit=limit)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading matches: {str(e)}")


@router.post("/matches", status_code=201, response_model=CreateMatchResponse)
@limiter.limit(WRITE_RATE_LIMIT)
async def create_match(
    request: Request,
    match_request: CreateMatchRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Record a match and award the winner points.

    Request body:
        {
            "winnerId": 1,
            "loserId": 2,
            "sport": "padel",   // padel | tennis | badminton
            "courtId": 3
        }

    Returns:
        dict: Confirmation with the created match
    """
    try:
        match = await data_service.record_match(
            session,
            winner_id=match_request.winner_id,
            loser_id=match_request.loser_id,
            sport=match_request.sport.value,
            court_id=match_request.court_id,
        )
        return {"status": "success", "message": "Match recorded", "match": match}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error recording match: {str(e)}")
