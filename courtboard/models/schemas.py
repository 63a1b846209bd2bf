"""
Pydantic models for API request/response validation.

Request bodies use camelCase on the wire (winnerId, avatarUrl, ...) and
reject unknown fields.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from courtboard.database.models import Sport


class CamelModel(BaseModel):
    """Base for request/response models exchanged as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


def _require_text(value: str) -> str:
    if value is None or not value.strip():
        raise ValueError("must not be empty")
    return value.strip()


class CreatePlayerRequest(CamelModel):
    """Request to register a player."""

    name: str
    avatar_url: Optional[str] = None  # URL or data:image/...;base64,...
    instagram_handle: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _require_text(value)


class UpdatePlayerRequest(CamelModel):
    """Partial player update. Only fields present in the body are applied."""

    name: Optional[str] = None
    points: Optional[int] = None
    avatar_url: Optional[str] = None
    instagram_handle: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _require_text(value)

    @model_validator(mode="after")
    def at_least_one_field(self):
        # null name/points change nothing; null avatarUrl/instagramHandle clears
        provided = (
            self.name is not None
            or self.points is not None
            or "avatar_url" in self.model_fields_set
            or "instagram_handle" in self.model_fields_set
        )
        if not provided:
            raise ValueError("Name, points, avatarUrl or instagramHandle is required")
        return self

    def changes(self) -> dict:
        """The provided fields only, keyed by attribute name."""
        return {field: getattr(self, field) for field in self.model_fields_set}


class CreateMatchRequest(CamelModel):
    """Request to record a match."""

    winner_id: int = Field(gt=0)
    loser_id: int = Field(gt=0)
    sport: Sport
    court_id: int = Field(gt=0)


class CreateEventRequest(CamelModel):
    """Request to create an event."""

    name: str
    start_date_time: datetime
    end_date_time: datetime
    organizer: str

    @field_validator("name", "organizer")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _require_text(value)


class PlayerResponse(CamelModel):
    """Player as returned by the API."""

    id: int
    name: str
    avatar_url: Optional[str] = None
    instagram_handle: Optional[str] = None
    points: int
    last_match_at: Optional[str] = None
    last_court_id: Optional[int] = None


class CourtResponse(CamelModel):
    """Court reference data."""

    id: int
    name: str
    type: Sport


class MatchResponse(CamelModel):
    """Recorded match."""

    id: int
    winner_id: int
    loser_id: int
    sport: Sport
    court_id: Optional[int] = None
    created_at: str


class CreateMatchResponse(BaseModel):
    """Response from recording a match."""

    status: str
    message: str
    match: MatchResponse


class EventResponse(CamelModel):
    """Event with its derived status (only on listings)."""

    id: int
    name: str
    start_date_time: str
    end_date_time: str
    organizer: str
    created_at: Optional[str] = None
    status: Optional[str] = None


class LeaderboardResponse(BaseModel):
    """Composite ranking + courts view."""

    players: List[PlayerResponse]
    courts: List[CourtResponse]
