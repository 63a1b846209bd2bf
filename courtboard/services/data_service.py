"""
Data service layer for database operations.
Handles the players, courts, matches and events of the leaderboard.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import false, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from courtboard.database.models import Court, Event, Match, Player
from courtboard.services import avatar_service, event_service, s3_service
from courtboard.utils.constants import MATCH_WIN_POINTS
from courtboard.utils.datetime_utils import isoformat_utc, to_utc, utcnow

logger = logging.getLogger(__name__)

#
# Serialization helpers
#

def player_to_dict(player: Player) -> Dict:
    return {
        "id": player.id,
        "name": player.name,
        "avatarUrl": s3_service.resolve_asset_url(player.avatar_url),
        "instagramHandle": player.instagram_handle,
        "points": player.points,
        "lastMatchAt": isoformat_utc(player.last_match_at),
        "lastCourtId": player.last_court_id,
    }


def court_to_dict(court: Court) -> Dict:
    return {"id": court.id, "name": court.name, "type": court.type}


def match_to_dict(match: Match) -> Dict:
    return {
        "id": match.id,
        "winnerId": match.winner_id,
        "loserId": match.loser_id,
        "sport": match.sport,
        "courtId": match.court_id,
        "createdAt": isoformat_utc(match.created_at),
    }


def event_to_dict(event: Event, status: Optional[str] = None) -> Dict:
    result = {
        "id": event.id,
        "name": event.name,
        "startDateTime": isoformat_utc(event.start_date_time),
        "endDateTime": isoformat_utc(event.end_date_time),
        "organizer": event.organizer,
        "createdAt": isoformat_utc(event.created_at),
    }
    if status is not None:
        result["status"] = status
    return result


def _paginate(query, page: int = 1, limit: Optional[int] = None):
    """
    Apply offset pagination. Without a limit the whole ordered set is one
    page, which keeps older clients that never send paging params working;
    every later page is empty.
    """
    if limit is None:
        return query if page <= 1 else query.where(false())
    page = max(page, 1)
    return query.offset((page - 1) * limit).limit(limit)


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so search terms match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


#
# Players
#

async def list_players(
    session: AsyncSession,
    page: int = 1,
    limit: Optional[int] = None,
    search: Optional[str] = None,
) -> List[Dict]:
    """
    List players ranked by points (highest first, ties by id ascending).

    Args:
        session: Database session
        page: 1-based page number, only used together with limit
        limit: Page size; None returns every player
        search: Optional case-insensitive substring of the player's name

    Returns:
        List of player dicts; empty for out-of-range pages
    """
    query = select(Player).order_by(Player.points.desc(), Player.id.asc())
    if search and search.strip():
        pattern = f"%{_escape_like(search.strip())}%"
        query = query.where(Player.name.ilike(pattern, escape="\\"))
    query = _paginate(query, page, limit)

    result = await session.execute(query)
    return [player_to_dict(p) for p in result.scalars().all()]


async def get_player(session: AsyncSession, player_id: int) -> Optional[Dict]:
    """Get a single player, or None if it does not exist."""
    result = await session.execute(select(Player).where(Player.id == player_id))
    player = result.scalar_one_or_none()
    return player_to_dict(player) if player else None


async def create_player(
    session: AsyncSession,
    name: str,
    avatar_url: Optional[str] = None,
    instagram_handle: Optional[str] = None,
) -> Dict:
    """
    Register a new player with zero points.

    An embedded (data URL) avatar is uploaded to the object store first and
    the stored reference replaces it.

    Raises:
        ValueError: if name is blank
        InvalidAvatarError: if an embedded avatar is not an acceptable image
    """
    if not name or not name.strip():
        raise ValueError("Name is required")

    player = Player(
        name=name.strip(),
        avatar_url=await avatar_service.resolve_avatar_input(avatar_url),
        instagram_handle=instagram_handle or None,
        points=0,
    )
    session.add(player)
    await session.commit()
    await session.refresh(player)

    logger.info("Created player %s (%s)", player.id, player.name)
    return player_to_dict(player)


async def update_player(session: AsyncSession, player_id: int, changes: Dict) -> Optional[Dict]:
    """
    Apply a partial update to a player.

    Args:
        session: Database session
        player_id: Player to update
        changes: Only the fields the caller provided, keyed by
            name / points / avatar_url / instagram_handle. A None or empty
            avatar_url clears the avatar.

    Returns:
        Updated player dict, or None if the player does not exist
    """
    result = await session.execute(select(Player).where(Player.id == player_id))
    player = result.scalar_one_or_none()
    if not player:
        return None

    if "name" in changes and changes["name"] is not None:
        name = changes["name"].strip()
        if not name:
            raise ValueError("Name cannot be empty")
        player.name = name
    if "points" in changes and changes["points"] is not None:
        player.points = changes["points"]
    if "instagram_handle" in changes:
        player.instagram_handle = changes["instagram_handle"] or None
    old_avatar = player.avatar_url
    if "avatar_url" in changes:
        player.avatar_url = await avatar_service.resolve_avatar_input(changes["avatar_url"])

    await session.commit()
    await session.refresh(player)

    # Stored object of a replaced or cleared avatar; external URLs are left alone
    old_key = s3_service.key_from_asset_path(old_avatar)
    if old_key and old_avatar != player.avatar_url:
        await s3_service.delete_file(old_key)

    return player_to_dict(player)


#
# Courts
#

async def list_courts(session: AsyncSession) -> List[Dict]:
    """List all courts. The set is small, so it is never paginated."""
    result = await session.execute(select(Court).order_by(Court.id.asc()))
    return [court_to_dict(c) for c in result.scalars().all()]


#
# Matches
#

async def list_matches(
    session: AsyncSession,
    page: int = 1,
    limit: Optional[int] = None,
) -> List[Dict]:
    """List matches newest first, paginated like players."""
    query = select(Match).order_by(Match.created_at.desc(), Match.id.desc())
    query = _paginate(query, page, limit)
    result = await session.execute(query)
    return [match_to_dict(m) for m in result.scalars().all()]


async def record_match(
    session: AsyncSession,
    winner_id: int,
    loser_id: int,
    sport: str,
    court_id: int,
) -> Dict:
    """
    Record a match and apply it to the points ledger in one transaction.

    Inserts the match, adds MATCH_WIN_POINTS to the winner, and stamps both
    players with the match time and court. The increment is a relative
    update (points = points + N) so concurrent wins are not lost. If any
    write fails, all three are rolled back.

    Player existence and sport/court consistency are not checked here.

    Returns:
        The created match as a dict
    """
    now = utcnow()
    try:
        match = Match(
            winner_id=winner_id,
            loser_id=loser_id,
            sport=sport,
            court_id=court_id,
            created_at=now,
        )
        session.add(match)
        await session.flush()

        await session.execute(
            update(Player)
            .where(Player.id == winner_id)
            .values(
                points=Player.points + MATCH_WIN_POINTS,
                last_match_at=now,
                last_court_id=court_id,
            )
        )
        await session.execute(
            update(Player)
            .where(Player.id == loser_id)
            .values(last_match_at=now, last_court_id=court_id)
        )
        await session.commit()
    except Exception:
        await session.rollback()
        logger.error(
            "Recording match failed (winner=%s loser=%s court=%s); rolled back",
            winner_id, loser_id, court_id, exc_info=True,
        )
        raise

    await session.refresh(match)
    logger.info(
        "Recorded match %s: player %s beat player %s on court %s (+%d points)",
        match.id, winner_id, loser_id, court_id, MATCH_WIN_POINTS,
    )
    return match_to_dict(match)


#
# Events
#

async def list_current_events(session: AsyncSession, now: Optional[datetime] = None) -> List[Dict]:
    """
    Live events followed by upcoming ones, each ordered by start time.
    Events that have already ended are left out.
    """
    now = to_utc(now or utcnow())
    result = await session.execute(select(Event))
    events = event_service.active_then_upcoming(result.scalars().all(), now)
    return [event_to_dict(e, event_service.event_status(e, now)) for e in events]


async def create_event(
    session: AsyncSession,
    name: str,
    start_date_time: datetime,
    end_date_time: datetime,
    organizer: str,
) -> Dict:
    """Create an event. The end is not checked against the start."""
    event = Event(
        name=name,
        start_date_time=to_utc(start_date_time),
        end_date_time=to_utc(end_date_time),
        organizer=organizer,
        created_at=utcnow(),
    )
    session.add(event)
    await session.commit()
    await session.refresh(event)

    logger.info("Created event %s (%s)", event.id, event.name)
    return event_to_dict(event)


#
# Leaderboard
#

async def get_leaderboard(session: AsyncSession) -> Dict:
    """Full ranking plus every court, for the board's single read."""
    return {
        "players": await list_players(session),
        "courts": await list_courts(session),
    }
