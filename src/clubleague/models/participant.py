"""Participant data class."""

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

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

COUNTER_FIELDS = (
    "played",
    "won",
    "drawn",
    "lost",
    "points",
    "sets_won",
    "sets_lost",
    "games_won",
    "games_lost",
)


@dataclass
class Participant:
    """A team or pair taking part in a competition.

    Attributes
    ----------
    id : str
        Opaque identifier supplied by the persistence collaborator.
    name : str
        Display name, e.g. "Pair 3".
    group : str, optional
        Group label ("A", "B", ...) once groups are assigned.
    player_ids : list of str
        Identifiers of the players forming the pair.
    played, won, drawn, lost, points, sets_won, sets_lost, games_won, games_lost : int
        Cumulative counters. Written only by the standings calculator.
    """

    id: str
    name: str = ""
    group: Optional[str] = None
    player_ids: List[str] = field(default_factory=list)
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    points: int = 0
    sets_won: int = 0
    sets_lost: int = 0
    games_won: int = 0
    games_lost: int = 0

    def __post_init__(self):
        if not self.name:
            self.name = self.id

    def reset_counters(self) -> None:
        """Zero every cumulative counter."""
        for counter in COUNTER_FIELDS:
            setattr(self, counter, 0)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize participant to dictionary."""
        data = {
            "id": self.id,
            "name": self.name,
            "group": self.group,
            "player_ids": list(self.player_ids),
        }
        for counter in COUNTER_FIELDS:
            data[counter] = getattr(self, counter)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Participant":
        """Deserialize participant from dictionary."""
        participant = cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            group=data.get("group"),
            player_ids=list(data.get("player_ids", [])),
        )
        for counter in COUNTER_FIELDS:
            setattr(participant, counter, int(data.get(counter, 0)))
        return participant
