"""Validation utilities for Club League.

This module provides reusable validation functions for submitted set scores,
with consistent error reporting.
"""

from typing import List, Optional, Sequence

from clubleague.constants import GAMES_PER_SET, MAX_SETS_PER_MATCH, MIN_TIEBREAK_POINTS
from clubleague.exceptions import InvalidSetScoreException
from clubleague.models.match import SetResult


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        set_index: 1-based index of the offending set, if any
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        set_index: Optional[int] = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.set_index = set_index

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return "ValidationResult(VALID)"
        return f"ValidationResult(INVALID, {self.error_message!r})"

    def raise_if_invalid(self) -> None:
        """Raise InvalidSetScoreException when the validation failed."""
        if not self.is_valid:
            raise InvalidSetScoreException(self.error_message)


def _invalid(index: int, message: str) -> ValidationResult:
    return ValidationResult(
        is_valid=False, error_message=f"Set {index}: {message}", set_index=index
    )


# ========== Set Validation ==========


def validate_set(
    set_result: SetResult, index: int = 1, games_per_set: int = GAMES_PER_SET
) -> ValidationResult:
    """Validate the score of a single set.

    Rules, with G games per set:
    - No negative games
    - G-G must go to a tie-break (enter G+1-G with tie-break points)
    - G+1-G needs tie-break points, at least 7 and won by 2
    - Otherwise the winner needs at least G games, a 2-game margin at G,
      and exactly 2 games margin beyond G

    Args:
        set_result: The set to check
        index: 1-based position of the set, used in messages
        games_per_set: Games needed to take a set

    Returns:
        ValidationResult with validation status

    Example:
        >>> bool(validate_set(SetResult(6, 4)))
        True
    """
    home, away = set_result.home_games, set_result.away_games

    if home < 0 or away < 0:
        return _invalid(index, "Games cannot be negative")

    high, low = max(home, away), min(home, away)
    margin = high - low

    if home == games_per_set and away == games_per_set:
        return _invalid(
            index,
            f"At {games_per_set}-{games_per_set}, a tie-break must be played "
            f"(enter {games_per_set + 1}-{games_per_set} with tie-break score)",
        )

    if high == games_per_set + 1 and low == games_per_set:
        tiebreak = set_result.tiebreak
        if tiebreak is None:
            return _invalid(
                index,
                f"Tie-break score required for a {high}-{low} result",
            )
        if tiebreak.home_points < 0 or tiebreak.away_points < 0:
            return _invalid(index, "Tie-break points cannot be negative")
        tb_high = max(tiebreak.home_points, tiebreak.away_points)
        tb_low = min(tiebreak.home_points, tiebreak.away_points)
        if tb_high < MIN_TIEBREAK_POINTS or tb_high - tb_low < 2:
            return _invalid(
                index,
                f"Tie-break must reach at least {MIN_TIEBREAK_POINTS} points "
                "with 2-point difference",
            )
        if (tiebreak.home_points > tiebreak.away_points) != (home > away):
            return _invalid(index, "Tie-break winner must also win the set")
        return ValidationResult(is_valid=True)

    if high < games_per_set:
        return _invalid(index, f"Winner must have at least {games_per_set} games")
    if high == games_per_set and margin < 2:
        return _invalid(index, f"Must win by at least 2 games at {games_per_set}")
    if high > games_per_set and margin != 2:
        return _invalid(
            index, f"Must win by exactly 2 games when going beyond {games_per_set}"
        )
    return ValidationResult(is_valid=True)


def validate_sets(
    sets: Sequence[SetResult],
    games_per_set: int = GAMES_PER_SET,
    max_sets: int = MAX_SETS_PER_MATCH,
) -> ValidationResult:
    """Validate every set of a match result.

    Args:
        sets: Sets in playing order
        games_per_set: Games needed to take a set
        max_sets: Maximum number of sets in a match

    Returns:
        The first failing ValidationResult, or a valid one
    """
    if not sets or len(sets) > max_sets:
        return ValidationResult(
            is_valid=False,
            error_message=f"A match must have 1 to {max_sets} sets",
        )

    for index, set_result in enumerate(sets, start=1):
        result = validate_set(set_result, index, games_per_set)
        if not result:
            return result
    return ValidationResult(is_valid=True)


def sets_won(sets: Sequence[SetResult]) -> List[int]:
    """Count sets won as ``[home, away]``."""
    tally = [0, 0]
    for set_result in sets:
        side = set_result.winner_side
        if side == "home":
            tally[0] += 1
        elif side == "away":
            tally[1] += 1
    return tally
