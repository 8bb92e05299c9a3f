"""
Database module for GlickoTR.

Usage:
    from glickotr.db import get_session, Player, Match

    with get_session() as session:
        player = session.get(Player, 1)
"""

from glickotr.db.models import Base, Match, Player
from glickotr.db.session import SessionLocal, get_engine, get_session

__all__ = [
    "Base",
    "Player",
    "Match",
    "get_session",
    "get_engine",
    "SessionLocal",
]
