"""Multi-court coordination of per-group round robin schedules.

Each group is scheduled independently; this module merges the group schedules
into one calendar of global rounds, each limited to the number of courts that
can be played at the same time.
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

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta

from clubleague.exceptions import InvalidConfigurationException
from clubleague.type_hints import GroupSchedules
from clubleague.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class CourtSlot:
    """One match placed on a court within a global round."""

    court: int
    group: Optional[str]
    internal_round: int
    home_id: str
    away_id: str


@dataclass
class GlobalRound:
    """A court-constrained time slot aggregating matches of several groups."""

    number: int
    slots: List[CourtSlot] = field(default_factory=list)
    starts_at: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self.slots)

    def internal_rounds_by_group(self) -> Dict[Optional[str], set]:
        rounds: Dict[Optional[str], set] = {}
        for slot in self.slots:
            rounds.setdefault(slot.group, set()).add(slot.internal_round)
        return rounds


class _GroupCursor:
    """Position of the next unplaced match in one group's schedule."""

    def __init__(self, group: Optional[str], schedule: List[list]):
        self.group = group
        # Empty rounds are skipped, they have nothing to place
        self.rounds = [
            (number, pairings)
            for number, pairings in enumerate(schedule, start=1)
            if pairings
        ]
        self.round_index = 0
        self.offset = 0

    @property
    def exhausted(self) -> bool:
        return self.round_index >= len(self.rounds)

    def take(self, capacity: int) -> List[CourtSlot]:
        """Take up to ``capacity`` matches from the current internal round only."""
        number, pairings = self.rounds[self.round_index]
        chunk = pairings[self.offset : self.offset + capacity]
        self.offset += len(chunk)
        if self.offset >= len(pairings):
            self.round_index += 1
            self.offset = 0
        return [
            CourtSlot(
                court=0,
                group=self.group,
                internal_round=number,
                home_id=home,
                away_id=away,
            )
            for home, away in chunk
        ]


def coordinate_across_groups(
    group_schedules: GroupSchedules, courts: int
) -> List[GlobalRound]:
    """Merge per-group schedules into court-limited global rounds.

    Groups are visited in label order. A group contributes at most once per
    global round and only from its current internal round, so no global round
    mixes two internal rounds of the same group and nobody is double-booked.
    Courts are numbered 1..k inside each global round.

    Args:
        group_schedules: Round robin schedule per group label
        courts: Number of courts available at the same time

    Returns:
        Global rounds in playing order

    Raises:
        InvalidConfigurationException: If fewer than 1 court is available
    """
    if courts < 1:
        raise InvalidConfigurationException(
            f"At least one court is required, got {courts}"
        )

    cursors = [
        _GroupCursor(group, group_schedules[group])
        for group in sorted(group_schedules, key=lambda g: (g is None, g or ""))
    ]
    global_rounds: List[GlobalRound] = []

    while not all(cursor.exhausted for cursor in cursors):
        current = GlobalRound(number=len(global_rounds) + 1)
        for cursor in cursors:
            capacity = courts - len(current.slots)
            if capacity <= 0:
                break
            if cursor.exhausted:
                continue
            current.slots.extend(cursor.take(capacity))

        for court, slot in enumerate(current.slots, start=1):
            slot.court = court
        global_rounds.append(current)

    total = sum(len(r) for r in global_rounds)
    logger.info(
        f"Coordinated {total} matches from {len(cursors)} group(s) "
        f"into {len(global_rounds)} global rounds on {courts} court(s)"
    )
    return global_rounds


def assign_slot_times(
    global_rounds: List[GlobalRound], start: datetime, slot_minutes: int
) -> List[GlobalRound]:
    """Stamp each global round with its start time on the calendar.

    Args:
        global_rounds: Rounds produced by coordinate_across_groups
        start: Start of the first global round
        slot_minutes: Length of one global round

    Returns:
        The same rounds, with ``starts_at`` filled in
    """
    if slot_minutes < 1:
        raise InvalidConfigurationException("slot_minutes must be at least 1")
    for index, global_round in enumerate(global_rounds):
        global_round.starts_at = start + relativedelta(minutes=slot_minutes * index)
    return global_rounds
