"""Enumerations shared by the Club League data model."""

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

from enum import Enum


class CompetitionFormat(Enum):
    """Supported competition formats."""

    ROUND_ROBIN = "round_robin"
    GROUPS_PLAYOFF = "groups_playoff"
    ROUND_ROBIN_PLAYOFF = "round_robin_playoff"

    @property
    def has_bracket(self) -> bool:
        return self is not CompetitionFormat.ROUND_ROBIN


class CompetitionStatus(Enum):
    """Lifecycle of a competition. COMPLETED is terminal."""

    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class MatchStatus(Enum):
    """Lifecycle of a single match."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class MatchPhase(Enum):
    """Which part of the competition a match belongs to."""

    GROUP = "group"  # Regular phase: group or league table
    PLAYOFF = "playoff"
    TIE_BREAKER = "tie_breaker"


class PlayoffTier(Enum):
    """Parallel playoff brackets. MAIN is the single-tier bracket."""

    MAIN = ""
    GOLD = "Gold"
    SILVER = "Silver"
    BRONZE = "Bronze"


class PlayoffStage(Enum):
    """Bracket stages, in playing order."""

    QUARTER_FINAL = "QF"
    SEMI_FINAL = "SF"
    FINAL = "F"
    THIRD_PLACE = "3rd"

    @property
    def order(self) -> int:
        """Round number used for matches of this stage."""
        return _STAGE_ORDER[self]


_STAGE_ORDER = {
    PlayoffStage.QUARTER_FINAL: 1,
    PlayoffStage.SEMI_FINAL: 2,
    PlayoffStage.FINAL: 3,
    PlayoffStage.THIRD_PLACE: 3,
}

# Brackets are walked in this order when checking for progression
TIER_ORDER = [
    PlayoffTier.MAIN,
    PlayoffTier.GOLD,
    PlayoffTier.SILVER,
    PlayoffTier.BRONZE,
]
