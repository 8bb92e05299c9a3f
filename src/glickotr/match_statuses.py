"""Shared match-status definitions and helpers.

This module is the single source of truth for the status values used by the
rating calculator (how a contest ended) and by the match lifecycle (whether a
recorded match is ready to be rated).
"""

from __future__ import annotations

# How a contest ended. Drives the match weight.
CONTEST_STATUSES: tuple[str, ...] = (
    "completed",
    "retired",
    "walkover",
)

# What kind of contest was played.
CONTEST_CATEGORIES: tuple[str, ...] = (
    "standard",
    "tiebreak",
)

# Lifecycle of a recorded match.
ALL_MATCH_STATUSES: tuple[str, ...] = (
    "pending",
    "disputed",
    "confirmed",
    "rated",
    "cancelled",
)

MATCH_STATUS_GROUPS: dict[str, tuple[str, ...]] = {
    # Both players agreed on the result; rating update may run.
    "rateable": ("confirmed",),
    # Awaiting confirmation from one of the players.
    "open": ("pending", "disputed"),
    # Nothing further will happen to these.
    "terminal": ("rated", "cancelled"),
    "all": ALL_MATCH_STATUSES,
}


def get_status_group(group_name: str) -> tuple[str, ...]:
    """Return a named status group, raising KeyError for unknown names."""
    return MATCH_STATUS_GROUPS[group_name]


def _normalize(raw: str, allowed: tuple[str, ...], kind: str) -> str:
    value = raw.strip().lower() if isinstance(raw, str) else raw
    if value not in allowed:
        raise ValueError(f"Unknown {kind} {raw!r}; expected one of {allowed}")
    return value


def normalize_contest_status(raw: str) -> str:
    """Lower-case and validate a contest status ('completed', 'retired', 'walkover')."""
    return _normalize(raw, CONTEST_STATUSES, "contest status")


def normalize_category(raw: str) -> str:
    """Lower-case and validate a contest category ('standard', 'tiebreak')."""
    return _normalize(raw, CONTEST_CATEGORIES, "contest category")
