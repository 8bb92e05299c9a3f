"""
Tennis score parsing and game totals.

The rating update needs three things from a score: games won by each
player, how the match ended and whether it was a full match or only a
match tiebreak. Scores arrive either as display strings or as the
structured per-set list stored on a match row.

Supported strings:
- Regular sets: "6-4 6-3"
- Tiebreak sets: "7-6(5)" or "7-6(7-5)"; the set counts as 7-6 in games
- Match tiebreak: "10-8" or "[10-8]"; in place of a deciding set it counts
  as one game for its winner, on its own it keeps its points
- Retirements: "6-4 2-1 RET"
- Walkovers: "W/O"
"""

import re
from dataclasses import dataclass
from typing import Optional

from glickotr.glicko.rating import ContestOutcome


class ScoreParseError(Exception):
    """Raised when a score cannot be parsed."""
    pass


@dataclass
class SetScore:
    """
    A single set.

    Attributes:
        games_a: Games won by player A (points, for a match tiebreak)
        games_b: Games won by player B
        tiebreak_a: Player A's tiebreak points, if the set had one
        tiebreak_b: Player B's tiebreak points
        is_match_tiebreak: Set was a first-to-10 match tiebreak
    """
    games_a: int
    games_b: int
    tiebreak_a: Optional[int] = None
    tiebreak_b: Optional[int] = None
    is_match_tiebreak: bool = False

    @property
    def is_tiebreak(self) -> bool:
        return self.tiebreak_a is not None

    def __repr__(self) -> str:
        if self.is_tiebreak:
            loser_points = self.tiebreak_b if self.games_a > self.games_b else self.tiebreak_a
            return f"{self.games_a}-{self.games_b}({loser_points})"
        if self.is_match_tiebreak:
            return f"[{self.games_a}-{self.games_b}]"
        return f"{self.games_a}-{self.games_b}"


@dataclass
class ParsedScore:
    """
    Parsed score with everything the rating update needs.

    Attributes:
        sets: Sets in playing order
        winner: 'A', 'B' or None when undecided
        status: 'completed', 'retired' or 'walkover'
        raw_score: Original score string
    """
    sets: list[SetScore]
    winner: Optional[str] = None
    status: str = "completed"
    raw_score: str = ""

    @property
    def games_a(self) -> int:
        return self._game_totals()[0]

    @property
    def games_b(self) -> int:
        return self._game_totals()[1]

    def _game_totals(self) -> tuple[int, int]:
        tiebreak_only = self.category == "tiebreak"
        units = [_set_units(s.games_a, s.games_b, s.is_match_tiebreak, tiebreak_only) for s in self.sets]
        return sum(u[0] for u in units), sum(u[1] for u in units)

    @property
    def category(self) -> str:
        """'tiebreak' when the whole contest was a single match tiebreak."""
        if self.sets and all(s.is_match_tiebreak for s in self.sets):
            return "tiebreak"
        return "standard"

    def to_outcome(self, is_public: bool = False) -> ContestOutcome:
        """Contest metadata for the rating calculator."""
        return ContestOutcome(status=self.status, category=self.category, is_public=is_public)

    def to_structured(self) -> list[dict]:
        """
        Convert to the structured list stored on a match row.

        Returns:
            List of dicts with 'a', 'b' and optionally 'tb_a', 'tb_b', 'mtb' keys
        """
        result = []
        for s in self.sets:
            set_dict = {"a": s.games_a, "b": s.games_b}
            if s.is_tiebreak:
                set_dict["tb_a"] = s.tiebreak_a
                set_dict["tb_b"] = s.tiebreak_b
            if s.is_match_tiebreak:
                set_dict["mtb"] = True
            result.append(set_dict)
        return result

    def to_display_string(self) -> str:
        """Convert back to display format like '6-4 7-6(5)'."""
        if self.status == "walkover":
            return "W/O"
        parts = [repr(s) for s in self.sets]
        if self.status == "retired":
            parts.append("RET")
        return " ".join(parts)

    def __repr__(self) -> str:
        return f"<ParsedScore({self.to_display_string()}, winner={self.winner})>"


def parse_score(score_str: str) -> ParsedScore:
    """
    Parse a tennis score string.

    Args:
        score_str: Score as entered, e.g. "6-4 3-6 [10-7]"

    Returns:
        ParsedScore with sets, winner and status

    Raises:
        ScoreParseError: If the score cannot be parsed

    Examples:
        >>> parse_score("6-4 6-3").games_a
        12

        >>> parse_score("6-4 2-1 RET").status
        'retired'

        >>> parse_score("10-8").category
        'tiebreak'
    """
    if not score_str or not score_str.strip():
        raise ScoreParseError("Empty score string")

    score = score_str.strip()
    original = score

    if _is_walkover(score):
        return ParsedScore(sets=[], winner=None, status="walkover", raw_score=original)

    is_retired, score = _extract_retirement(score)

    set_strings = _split_sets(score)
    if not set_strings:
        raise ScoreParseError(f"Could not parse score: {original}")

    sets = [_parse_set(set_str, original) for set_str in set_strings]

    return ParsedScore(
        sets=sets,
        winner=_determine_winner(sets, is_retired),
        status="retired" if is_retired else "completed",
        raw_score=original,
    )


def games_from_structured(score_structured: Optional[list[dict]]) -> tuple[int, int]:
    """
    Total games won by each player from a stored structured score.

    Missing keys count as zero, mirroring how partially entered sets
    are stored. Sets flagged 'mtb' follow the same rule as parse_score:
    one game to the winner, unless every set is a match tiebreak.

    Returns:
        (games_a, games_b)
    """
    sets = score_structured or []
    tiebreak_only = bool(sets) and all(s.get("mtb") for s in sets)
    games_a = 0
    games_b = 0
    for set_data in sets:
        units = _set_units(
            set_data.get("a") or 0,
            set_data.get("b") or 0,
            bool(set_data.get("mtb")),
            tiebreak_only,
        )
        games_a += units[0]
        games_b += units[1]
    return games_a, games_b


def _set_units(games_a: int, games_b: int, is_match_tiebreak: bool, tiebreak_only: bool) -> tuple[int, int]:
    """
    Games a set contributes to the totals.

    A match tiebreak played in place of a deciding set counts as a
    single game for its winner. A contest decided by the match
    tiebreak alone keeps its points.
    """
    if not is_match_tiebreak or tiebreak_only:
        return games_a, games_b
    if games_a == games_b:
        return 0, 0
    return (1, 0) if games_a > games_b else (0, 1)


def _is_walkover(score: str) -> bool:
    return score.lower().strip() in ("w/o", "wo", "walkover", "w.o.", "w.o")


def _extract_retirement(score: str) -> tuple[bool, str]:
    """
    Check for and remove a retirement marker.

    Returns:
        (is_retired, cleaned_score)
    """
    retirement_patterns = [
        r"\s*ret\.?\s*$",
        r"\s*retired\.?\s*$",
        r"\s*\(ret\)\.?\s*$",
    ]
    for pattern in retirement_patterns:
        if re.search(pattern, score, re.IGNORECASE):
            return True, re.sub(pattern, "", score, flags=re.IGNORECASE).strip()
    return False, score


_SET_PATTERN = re.compile(r"^\[?\d+-\d+\]?(\(\d+(-\d+)?\))?$")


def _split_sets(score: str) -> list[str]:
    """Split a score into set tokens, rejecting anything that is not a set."""
    parts = score.split()
    for part in parts:
        if not _SET_PATTERN.match(part):
            raise ScoreParseError(f"Unexpected token '{part}' in score '{score}'")
    return parts


def _parse_set(set_str: str, original: str) -> SetScore:
    """
    Parse one set token.

    Handles "6-4", "7-6(5)", "7-6(7-5)", "10-8" and "[10-8]".
    """
    tb_match = re.match(r"^(\d+)-(\d+)\((\d+)(?:-(\d+))?\)$", set_str)
    if tb_match:
        games_a = int(tb_match.group(1))
        games_b = int(tb_match.group(2))
        tb_first = int(tb_match.group(3))
        tb_second = tb_match.group(4)

        if tb_second:
            tb_a, tb_b = tb_first, int(tb_second)
        elif games_a > games_b:
            # Only the loser's points are shown; winner had 7 or won by two
            tb_a, tb_b = max(7, tb_first + 2), tb_first
        else:
            tb_a, tb_b = tb_first, max(7, tb_first + 2)

        return SetScore(games_a=games_a, games_b=games_b, tiebreak_a=tb_a, tiebreak_b=tb_b)

    bracketed = set_str.startswith("[") and set_str.endswith("]")
    regular_match = re.match(r"^\[?(\d+)-(\d+)\]?$", set_str)
    if regular_match:
        games_a = int(regular_match.group(1))
        games_b = int(regular_match.group(2))
        return SetScore(
            games_a=games_a,
            games_b=games_b,
            is_match_tiebreak=bracketed or games_a >= 10 or games_b >= 10,
        )

    raise ScoreParseError(f"Could not parse set '{set_str}' in '{original}'")


def _determine_winner(sets: list[SetScore], is_retired: bool) -> Optional[str]:
    """
    Winner by sets won.

    A lone match tiebreak decides the contest by itself. For a
    retirement, whoever was ahead in sets (then in the last set) when
    play stopped is recorded.
    """
    sets_a = sum(1 for s in sets if s.games_a > s.games_b)
    sets_b = sum(1 for s in sets if s.games_b > s.games_a)

    needed = 1 if len(sets) == 1 and sets[0].is_match_tiebreak else 2
    if sets_a >= needed and sets_a > sets_b and not is_retired:
        return "A"
    if sets_b >= needed and sets_b > sets_a and not is_retired:
        return "B"

    if is_retired:
        if sets_a != sets_b:
            return "A" if sets_a > sets_b else "B"
        last_set = sets[-1]
        if last_set.games_a != last_set.games_b:
            return "A" if last_set.games_a > last_set.games_b else "B"
        return None

    return None
