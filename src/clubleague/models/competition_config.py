"""CompetitionConfig data class."""

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

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from clubleague.constants import (
    DEFAULT_COURTS,
    DEFAULT_NUMBER_OF_GROUPS,
    DEFAULT_ROUND_ROBIN_CYCLES,
    DEFAULT_SLOT_MINUTES,
    DEFAULT_TEAMS_ADVANCE_PER_GROUP,
    DEFAULT_TIER_SIZES,
    DEFAULT_TIEBREAK_SORT_ORDER,
    GAMES_PER_SET,
    MAX_SETS_PER_MATCH,
    POINTS_FOR_DRAW,
    POINTS_FOR_LOSS,
    POINTS_FOR_WIN,
    TIEBREAK_NAMES,
)
from clubleague.exceptions import InvalidConfigurationException
from clubleague.models.enums import CompetitionFormat


@dataclass
class CompetitionConfig:
    """Competition configuration settings.

    One value per competition, resolved once at creation time. The algorithms
    read it as-is and never fall back to defaults of their own.

    Attributes
    ----------
    points_for_win, points_for_draw, points_for_loss : int
        Table points per match outcome.
    allow_draws : bool
        Whether a regular-phase match may finish without a winner.
    games_per_set : int
        Games needed to take a set (6 in padel and tennis).
    max_sets : int
        Maximum number of sets in a match.
    number_of_groups : int
        Groups used by the groups + playoff format.
    teams_advance_per_group : int
        Participants per group seeded into the single-tier bracket.
    multi_tier_playoffs : bool
        Build parallel Gold/Silver/Bronze brackets instead of one.
    tier_sizes : dict of str to int
        Bracket size per tier for the round robin + tiered playoff format.
    discard_exhibition_set : bool
        Drop a third set played after a 2-0 lead from set and game tallies.
    round_robin_cycles : int
        How many times every pair meets in the regular phase.
    third_place_match : bool, optional
        Whether semifinal losers play for third place. None until resolved.
    tiebreak_order : list of str
        Criteria applied after points, in priority order.
    courts : int
        Courts available at the same time.
    slot_minutes : int
        Length of one global round on the calendar.
    """

    points_for_win: int = POINTS_FOR_WIN
    points_for_draw: int = POINTS_FOR_DRAW
    points_for_loss: int = POINTS_FOR_LOSS
    allow_draws: bool = False
    games_per_set: int = GAMES_PER_SET
    max_sets: int = MAX_SETS_PER_MATCH
    number_of_groups: int = DEFAULT_NUMBER_OF_GROUPS
    teams_advance_per_group: int = DEFAULT_TEAMS_ADVANCE_PER_GROUP
    multi_tier_playoffs: bool = False
    tier_sizes: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_TIER_SIZES))
    discard_exhibition_set: bool = False
    round_robin_cycles: int = DEFAULT_ROUND_ROBIN_CYCLES
    third_place_match: Optional[bool] = None
    tiebreak_order: List[str] = field(
        default_factory=lambda: list(DEFAULT_TIEBREAK_SORT_ORDER)
    )
    courts: int = DEFAULT_COURTS
    slot_minutes: int = DEFAULT_SLOT_MINUTES

    def resolve(self, competition_format: CompetitionFormat) -> "CompetitionConfig":
        """Return a copy with format-dependent defaults fixed and values checked.

        Raises:
            InvalidConfigurationException: If a value is out of range
        """
        resolved = replace(
            self,
            tier_sizes={**DEFAULT_TIER_SIZES, **self.tier_sizes},
            tiebreak_order=list(self.tiebreak_order),
        )
        if resolved.third_place_match is None:
            resolved.third_place_match = (
                competition_format == CompetitionFormat.ROUND_ROBIN_PLAYOFF
            )
        resolved.validate()
        return resolved

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            InvalidConfigurationException: If a value is out of range
        """
        if self.games_per_set < 1:
            raise InvalidConfigurationException("games_per_set must be at least 1")
        if self.max_sets < 1:
            raise InvalidConfigurationException("max_sets must be at least 1")
        if self.number_of_groups < 1:
            raise InvalidConfigurationException("number_of_groups must be at least 1")
        if self.teams_advance_per_group < 1:
            raise InvalidConfigurationException(
                "teams_advance_per_group must be at least 1"
            )
        if self.round_robin_cycles < 1:
            raise InvalidConfigurationException(
                "round_robin_cycles must be at least 1"
            )
        if self.courts < 1:
            raise InvalidConfigurationException("courts must be at least 1")
        if self.slot_minutes < 1:
            raise InvalidConfigurationException("slot_minutes must be at least 1")
        if any(size < 0 for size in self.tier_sizes.values()):
            raise InvalidConfigurationException("tier sizes cannot be negative")
        unknown = [key for key in self.tiebreak_order if key not in TIEBREAK_NAMES]
        if unknown:
            raise InvalidConfigurationException(
                f"Unknown tiebreak criteria: {', '.join(unknown)}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "points_for_win": self.points_for_win,
            "points_for_draw": self.points_for_draw,
            "points_for_loss": self.points_for_loss,
            "allow_draws": self.allow_draws,
            "games_per_set": self.games_per_set,
            "max_sets": self.max_sets,
            "number_of_groups": self.number_of_groups,
            "teams_advance_per_group": self.teams_advance_per_group,
            "multi_tier_playoffs": self.multi_tier_playoffs,
            "tier_sizes": dict(self.tier_sizes),
            "discard_exhibition_set": self.discard_exhibition_set,
            "round_robin_cycles": self.round_robin_cycles,
            "third_place_match": self.third_place_match,
            "tiebreak_order": list(self.tiebreak_order),
            "courts": self.courts,
            "slot_minutes": self.slot_minutes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompetitionConfig":
        """Deserialize configuration from dictionary."""
        return cls(
            points_for_win=data.get("points_for_win", POINTS_FOR_WIN),
            points_for_draw=data.get("points_for_draw", POINTS_FOR_DRAW),
            points_for_loss=data.get("points_for_loss", POINTS_FOR_LOSS),
            allow_draws=data.get("allow_draws", False),
            games_per_set=data.get("games_per_set", GAMES_PER_SET),
            max_sets=data.get("max_sets", MAX_SETS_PER_MATCH),
            number_of_groups=data.get("number_of_groups", DEFAULT_NUMBER_OF_GROUPS),
            teams_advance_per_group=data.get(
                "teams_advance_per_group", DEFAULT_TEAMS_ADVANCE_PER_GROUP
            ),
            multi_tier_playoffs=data.get("multi_tier_playoffs", False),
            tier_sizes=dict(data.get("tier_sizes", DEFAULT_TIER_SIZES)),
            discard_exhibition_set=data.get("discard_exhibition_set", False),
            round_robin_cycles=data.get(
                "round_robin_cycles", DEFAULT_ROUND_ROBIN_CYCLES
            ),
            third_place_match=data.get("third_place_match"),
            tiebreak_order=list(
                data.get("tiebreak_order", DEFAULT_TIEBREAK_SORT_ORDER)
            ),
            courts=data.get("courts", DEFAULT_COURTS),
            slot_minutes=data.get("slot_minutes", DEFAULT_SLOT_MINUTES),
        )
