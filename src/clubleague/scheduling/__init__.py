"""Fixture scheduling: round robin pairing, group draw and court calendar."""

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

from clubleague.scheduling.court_coordinator import (
    CourtSlot,
    GlobalRound,
    assign_slot_times,
    coordinate_across_groups,
)
from clubleague.scheduling.groups import assign_groups, check_group_layout, group_labels
from clubleague.scheduling.round_robin import RoundRobin, generate_round_robin

__all__ = [
    "CourtSlot",
    "GlobalRound",
    "RoundRobin",
    "assign_groups",
    "assign_slot_times",
    "check_group_layout",
    "coordinate_across_groups",
    "generate_round_robin",
    "group_labels",
]
