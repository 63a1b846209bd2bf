"""Event route handlers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from courtboard.api.routes import limiter, WRITE_RATE_LIMIT
from courtboard.database.db import get_db_session
from courtboard.models.schemas import CreateEventRequest, EventResponse
from courtboard.services import data_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/events", response_model=List[EventResponse])
async def list_events(session: AsyncSession = Depends(get_db_session)):
    """
    Get live events followed by upcoming ones, each by start time.

    Events that have already ended are not returned. Status is worked out
    against the clock at request time.
    """
    try:
        return await data_service.list_current_events(session)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading events: {str(e)}")


@router.post("/events", status_code=201, response_model=EventResponse)
@limiter.limit(WRITE_RATE_LIMIT)
async def create_event(
    request: Request,
    event_request: CreateEventRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Create an event.

    Request body:
        {
            "name": "Friday Americano",
            "startDateTime": "2026-05-01T18:00:00Z",
            "endDateTime": "2026-05-01T21:00:00Z",
            "organizer": "Club staff"
        }
    """
    try:
        return await data_service.create_event(
            session,
            name=event_request.name,
            start_date_time=event_request.start_date_time,
            end_date_time=event_request.end_date_time,
            organizer=event_request.organizer,
        )
    except Exception as e:
        logger.error("Error creating event", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating event: {str(e)}")
