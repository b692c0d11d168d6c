"""Standing data class (derived, never persisted)."""

# Club League
# Copyright (C) 2025  Club League developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class Standing:
    """One row of a standings table.

    Attributes
    ----------
    participant_id : str
    group : str, optional
    played, won, drawn, lost, points : int
    sets_won, sets_lost, games_won, games_lost : int
    tiebreaker_wins : int
        Wins in tie-breaker matches. Orders otherwise identical rows but is
        never added to the regular counters.
    position : int
        1-based rank, assigned after sorting.
    """

    participant_id: str
    group: Optional[str] = None
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    points: int = 0
    sets_won: int = 0
    sets_lost: int = 0
    games_won: int = 0
    games_lost: int = 0
    tiebreaker_wins: int = 0
    position: int = 0

    @property
    def set_difference(self) -> int:
        return self.sets_won - self.sets_lost

    @property
    def game_difference(self) -> int:
        return self.games_won - self.games_lost

    def is_level_with(self, other: "Standing") -> bool:
        """Equal on points, set difference, game difference and tie-breaker wins."""
        return (
            self.points == other.points
            and self.set_difference == other.set_difference
            and self.game_difference == other.game_difference
            and self.tiebreaker_wins == other.tiebreaker_wins
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "participant_id": self.participant_id,
            "group": self.group,
            "position": self.position,
            "played": self.played,
            "won": self.won,
            "drawn": self.drawn,
            "lost": self.lost,
            "points": self.points,
            "sets_won": self.sets_won,
            "sets_lost": self.sets_lost,
            "set_difference": self.set_difference,
            "games_won": self.games_won,
            "games_lost": self.games_lost,
            "game_difference": self.game_difference,
            "tiebreaker_wins": self.tiebreaker_wins,
        }
