"""Tie detection and tie-breaker fixture generation.

Only podium-adjacent positions are examined: (1,2), (2,3) and (3,4).
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

from typing import Iterable, List, Sequence

from clubleague.constants import PODIUM_TIE_POSITIONS, TIE_BREAKER_ROUND
from clubleague.exceptions import NoTieDetectedException
from clubleague.models import Match, MatchPhase, Standing
from clubleague.scheduling.round_robin import generate_round_robin
from clubleague.utils import setup_logger

logger = setup_logger(__name__)


class TieBreakerResolver:
    """Finds unresolved podium ties and builds the matches that settle them."""

    def detect_ties(self, standings: Sequence[Standing]) -> List[str]:
        """Participants tied at podium-adjacent positions.

        A pair is tied when points, set difference and game difference are all
        equal and no tie-breaker result separates them yet.

        Args:
            standings: Sorted standings, best first

        Returns:
            Tied participant ids, in standings order, without duplicates
        """
        tied: List[str] = []
        for upper, lower in PODIUM_TIE_POSITIONS:
            if lower >= len(standings):
                break
            first, second = standings[upper], standings[lower]
            if first.is_level_with(second):
                for pid in (first.participant_id, second.participant_id):
                    if pid not in tied:
                        tied.append(pid)

        if tied:
            logger.info(f"Detected podium tie between: {', '.join(tied)}")
        return tied

    def next_round_number(self, existing_matches: Iterable[Match]) -> int:
        """First free tie-breaker round number, never below TIE_BREAKER_ROUND."""
        rounds = [
            m.round for m in existing_matches if m.phase == MatchPhase.TIE_BREAKER
        ]
        return max(rounds) + 1 if rounds else TIE_BREAKER_ROUND

    def generate_tie_breakers(
        self,
        tied_participant_ids: Sequence[str],
        existing_matches: Iterable[Match] = (),
    ) -> List[Match]:
        """Build the matches that resolve a tie.

        Two tied participants get one direct match; three or more play a mini
        round robin. Round numbers start at TIE_BREAKER_ROUND, or after any
        earlier tie-breaker round.

        Args:
            tied_participant_ids: Participants to separate
            existing_matches: Matches already in the competition

        Returns:
            New, pending tie-breaker matches

        Raises:
            NoTieDetectedException: With fewer than 2 tied participants
        """
        if len(tied_participant_ids) < 2:
            raise NoTieDetectedException("No ties detected for the top positions")

        first_round = self.next_round_number(existing_matches)

        if len(tied_participant_ids) == 2:
            home, away = tied_participant_ids
            matches = [
                Match(
                    home_id=home,
                    away_id=away,
                    round=first_round,
                    phase=MatchPhase.TIE_BREAKER,
                    bracket_slot=1,
                )
            ]
        else:
            schedule = generate_round_robin(list(tied_participant_ids))
            matches = []
            for offset, pairings in enumerate(schedule):
                for home, away in pairings:
                    matches.append(
                        Match(
                            home_id=home,
                            away_id=away,
                            round=first_round + offset,
                            phase=MatchPhase.TIE_BREAKER,
                            bracket_slot=len(matches) + 1,
                        )
                    )

        logger.info(
            f"Generated {len(matches)} tie-breaker match(es) for "
            f"{len(tied_participant_ids)} tied participants"
        )
        return matches
