"""Round robin scheduling using the circle method.

One participant stays fixed while the others rotate around it; every rotation
yields one round. An odd field gets a bye sentinel whose pairings are dropped.
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

from typing import List, Optional, Sequence

from clubleague.exceptions import (
    InsufficientParticipantsException,
    InvalidConfigurationException,
)
from clubleague.type_hints import MaybeParticipantId, RoundPairings, Schedule
from clubleague.utils import setup_logger

logger = setup_logger(__name__)


class RoundRobin:
    """Full round robin schedule for a fixed list of participants.

    Rounds are 1-indexed. With more than one cycle, later cycles repeat the
    pairings of the first with home and away swapped on every odd cycle.
    """

    def __init__(self, participant_ids: Sequence[str], cycles: int = 1):
        if len(participant_ids) < 2:
            raise InsufficientParticipantsException(
                f"A round robin needs at least 2 participants, got {len(participant_ids)}"
            )
        if len(set(participant_ids)) != len(participant_ids):
            raise InvalidConfigurationException(
                "Participant ids in a round robin must be unique"
            )
        if cycles < 1:
            raise InvalidConfigurationException("A round robin needs at least 1 cycle")

        self.participant_ids = list(participant_ids)
        self.cycles = cycles
        self._first_cycle = self._build_cycle()

    @property
    def rounds_per_cycle(self) -> int:
        """N-1 rounds for an even field, N for an odd one."""
        return len(self._first_cycle)

    @property
    def number_of_rounds(self) -> int:
        return self.rounds_per_cycle * self.cycles

    @property
    def has_bye(self) -> bool:
        return len(self.participant_ids) % 2 == 1

    def _build_cycle(self) -> Schedule:
        working: List[MaybeParticipantId] = list(self.participant_ids)
        if len(working) % 2:
            working.append(None)

        total_rounds = len(working) - 1
        per_round = len(working) // 2
        rounds: Schedule = []

        for round_index in range(total_rounds):
            pairings: RoundPairings = []
            for slot in range(per_round):
                home = working[slot]
                away = working[len(working) - 1 - slot]
                if home is None or away is None:
                    continue
                # The fixed participant alternates sides between rounds
                if slot == 0 and round_index % 2 == 1:
                    home, away = away, home
                pairings.append((home, away))
            rounds.append(pairings)

            # Rotate everything but the fixed first entry one step clockwise
            working = [working[0], working[-1]] + working[1:-1]

        return rounds

    def get_round_pairings(self, round_number: int) -> RoundPairings:
        """Pairings of a round (1-indexed, counted across cycles).

        Raises:
            ValueError: If the round number is outside the schedule
        """
        if not 1 <= round_number <= self.number_of_rounds:
            raise ValueError(
                f"Round {round_number} outside schedule of {self.number_of_rounds} rounds"
            )
        cycle_index, offset = divmod(round_number - 1, self.rounds_per_cycle)
        pairings = self._first_cycle[offset]
        if cycle_index % 2 == 1:
            return [(away, home) for home, away in pairings]
        return list(pairings)

    def rounds(self) -> Schedule:
        """Every round of every cycle, in playing order."""
        return [
            self.get_round_pairings(number)
            for number in range(1, self.number_of_rounds + 1)
        ]


def generate_round_robin(
    participant_ids: Sequence[str], cycles: int = 1, group: Optional[str] = None
) -> Schedule:
    """Generate a round robin schedule.

    Args:
        participant_ids: Participants to schedule, in seeding order
        cycles: How many times every pair meets
        group: Group label, used for logging only

    Returns:
        List of rounds, each a list of (home, away) pairings

    Raises:
        InsufficientParticipantsException: With fewer than 2 participants
        InvalidConfigurationException: With duplicate ids or cycles < 1
    """
    schedule = RoundRobin(participant_ids, cycles)
    logger.debug(
        f"Round robin{f' for group {group}' if group else ''}: "
        f"{len(participant_ids)} participants (bye={schedule.has_bye}), "
        f"{schedule.number_of_rounds} rounds over {cycles} cycle(s)"
    )
    return schedule.rounds()
