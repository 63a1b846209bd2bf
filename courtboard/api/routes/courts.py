"""Court route handlers."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from courtboard.database.db import get_db_session
from courtboard.models.schemas import CourtResponse
from courtboard.services import data_service

router = APIRouter()


@router.get("/courts", response_model=List[CourtResponse])
async def list_courts(session: AsyncSession = Depends(get_db_session)):
    """List all courts."""
    try:
        return await data_service.list_courts(session)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error listing courts: {str(e)}")
