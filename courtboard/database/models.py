"""
SQLAlchemy ORM models for the court leaderboard.
"""

import enum
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from courtboard.database.db import Base


class Sport(str, enum.Enum):
    """Sports a court can host and a match can be played in."""

    PADEL = "padel"
    TENNIS = "tennis"
    BADMINTON = "badminton"


_SPORT_VALUES = ", ".join(f"'{s.value}'" for s in Sport)


class Court(Base):
    """Courts players record matches on. Reference data."""

    __tablename__ = "courts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    type = Column(String(20), nullable=False)

    __table_args__ = (
        CheckConstraint(f"type IN ({_SPORT_VALUES})", name="ck_courts_type"),
        Index("idx_courts_name", "name"),
    )


class Player(Base):
    """Player profiles and their points ledger."""

    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    avatar_url = Column(String, nullable=True)  # External URL or /assets/<key> reference
    instagram_handle = Column(String, nullable=True)
    points = Column(Integer, default=0, server_default="0", nullable=False)
    last_match_at = Column(DateTime(timezone=True), nullable=True)
    last_court_id = Column(Integer, ForeignKey("courts.id"), nullable=True)

    # Relationships
    last_court = relationship("Court", foreign_keys=[last_court_id])

    __table_args__ = (
        Index("idx_players_name", "name"),
        Index("idx_players_points", "points"),
    )


class Match(Base):
    """Recorded singles matches. Append-only."""

    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    winner_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    loser_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    sport = Column(String(20), nullable=False)
    court_id = Column(Integer, ForeignKey("courts.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    winner = relationship("Player", foreign_keys=[winner_id])
    loser = relationship("Player", foreign_keys=[loser_id])
    court = relationship("Court", foreign_keys=[court_id])

    __table_args__ = (
        CheckConstraint(f"sport IN ({_SPORT_VALUES})", name="ck_matches_sport"),
        Index("idx_matches_created_at", "created_at"),
        Index("idx_matches_winner", "winner_id"),
        Index("idx_matches_loser", "loser_id"),
    )


class Event(Base):
    """Scheduled events shown on the board while live or upcoming."""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    start_date_time = Column(DateTime(timezone=True), nullable=False)
    end_date_time = Column(DateTime(timezone=True), nullable=False)
    organizer = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (Index("idx_events_start", "start_date_time"),)
