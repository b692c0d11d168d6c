"""Competition engine: standings, playoff progression, tie-breakers and fixtures.

Each controller works on an in-memory Competition and performs no I/O.
"""

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

from clubleague.controllers.competition.fixture_manager import FixtureManager
from clubleague.controllers.competition.playoff_state_machine import (
    AdvanceOutcome,
    AdvanceStatus,
    PlayoffStateMachine,
)
from clubleague.controllers.competition.result_recorder import ResultRecorder
from clubleague.controllers.competition.standings_calculator import (
    StandingsCalculator,
    counted_sets,
)
from clubleague.controllers.competition.tiebreaker_resolver import TieBreakerResolver

__all__ = [
    "AdvanceOutcome",
    "AdvanceStatus",
    "FixtureManager",
    "PlayoffStateMachine",
    "ResultRecorder",
    "StandingsCalculator",
    "TieBreakerResolver",
    "counted_sets",
]
