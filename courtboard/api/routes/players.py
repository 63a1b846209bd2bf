"""Player list, search, create and update route handlers."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from courtboard.api.routes import limiter, WRITE_RATE_LIMIT
from courtboard.database.db import get_db_session
from courtboard.models.schemas import CreatePlayerRequest, PlayerResponse, UpdatePlayerRequest
from courtboard.services import data_service
from courtboard.services.avatar_service import InvalidAvatarError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/players", response_model=List[PlayerResponse])
async def list_players(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    search: Optional[str] = None,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Get players ranked by points, highest first.

    Query params: page (default 1), limit (default: no limit, every player),
    search (case-insensitive name substring).
    """
    try:
        return await data_service.list_players(session, page=page, limit=limit, search=search)
    except Exception as e:
        logger.error("Error loading players", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error loading players: {str(e)}")


@router.get("/players/{player_id}", response_model=PlayerResponse)
async def get_player(player_id: int, session: AsyncSession = Depends(get_db_session)):
    """Get a single player."""
    try:
        player = await data_service.get_player(session, player_id)
        if not player:
            raise HTTPException(status_code=404, detail="Player not found")
        return player
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading player: {str(e)}")


@router.post("/players", status_code=201, response_model=List[PlayerResponse])
@limiter.limit(WRITE_RATE_LIMIT)
async def create_player(
    request: Request,
    player_request: CreatePlayerRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Register a player.

    Request body:
        {
            "name": "Alice",
            "avatarUrl": "data:image/png;base64,...",  // optional, URL or embedded image
            "instagramHandle": "alice"                  // optional
        }

    Returns:
        A one-element list with the created player
    """
    try:
        player = await data_service.create_player(
            session,
            name=player_request.name,
            avatar_url=player_request.avatar_url,
            instagram_handle=player_request.instagram_handle,
        )
        return [player]
    except (InvalidAvatarError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Error creating player", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating player: {str(e)}")


@router.put("/players/{player_id}", response_model=List[PlayerResponse])
@limiter.limit(WRITE_RATE_LIMIT)
async def update_player(
    request: Request,
    player_id: int,
    player_request: UpdatePlayerRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Update a player's name, points, avatar or Instagram handle.

    Only fields present in the body are changed; "avatarUrl": null or ""
    removes the avatar.

    Returns:
        A one-element list with the updated player
    """
    try:
        player = await data_service.update_player(session, player_id, player_request.changes())
        if not player:
            raise HTTPException(status_code=404, detail="Player not found")
        return [player]
    except HTTPException:
        raise
    except (InvalidAvatarError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Error updating player %s", player_id, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error updating player: {str(e)}")
