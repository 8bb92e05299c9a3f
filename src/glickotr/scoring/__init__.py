"""
Score handling for rating updates.

- Parsing score strings (tiebreaks, match tiebreaks, retirements, walkovers)
- Summing games won from stored structured scores
"""

from glickotr.scoring.score import (
    ParsedScore,
    ScoreParseError,
    SetScore,
    games_from_structured,
    parse_score,
)

__all__ = [
    "parse_score",
    "games_from_structured",
    "ParsedScore",
    "SetScore",
    "ScoreParseError",
]
