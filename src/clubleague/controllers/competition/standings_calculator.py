"""Standings calculation for competitions.

This module aggregates completed matches into a sorted table, applying the
configured points and tie-break cascade.
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

import functools
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from clubleague.constants import (
    TB_GAME_DIFFERENCE,
    TB_GAMES_WON,
    TB_HEAD_TO_HEAD,
    TB_MATCHES_WON,
    TB_SET_DIFFERENCE,
)
from clubleague.exceptions import InvalidResultException
from clubleague.models import (
    CompetitionConfig,
    Match,
    MatchPhase,
    Participant,
    SetResult,
    Standing,
)
from clubleague.utils import setup_logger

logger = setup_logger(__name__)


def counted_sets(
    sets: Sequence[SetResult], discard_exhibition_set: bool
) -> List[SetResult]:
    """Sets that count towards set and game tallies.

    With the exhibition rule on, a third set played after one side already led
    2-0 is left out. A 1-1 split, or any other shape, keeps every set.
    """
    if discard_exhibition_set and len(sets) == 3:
        first, second = sets[0].winner_side, sets[1].winner_side
        if first is not None and first == second:
            return list(sets[:2])
    return list(sets)


class StandingsCalculator:
    """Computes standings tables from completed matches.

    Tables are a pure function of the matches and the configuration: nothing
    is cached between calls and the input objects are never modified, except
    through apply_to_participants.

    Sort cascade:
    - Points
    - The configured tiebreak order (default: game difference, head-to-head,
      set difference)
    - Wins in tie-breaker matches
    - Input order of the participants
    """

    def __init__(self, config: CompetitionConfig):
        self.config = config

    def compute_standings(
        self,
        participants: Iterable[Participant],
        matches: Iterable[Match],
        group: Optional[str] = None,
        phase: MatchPhase = MatchPhase.GROUP,
    ) -> List[Standing]:
        """Compute a sorted standings table.

        Args:
            participants: Participants of the competition, in registration order
            matches: All matches of the competition
            group: Restrict the table to one group
            phase: Which matches feed the table (regular phase by default)

        Returns:
            Standings sorted best first, positions assigned from 1
        """
        all_matches = list(matches)
        table_matches = [
            m
            for m in all_matches
            if m.is_completed
            and m.phase == phase
            and (group is None or m.group == group)
        ]

        members = [p for p in participants if group is None or p.group == group]
        if phase != MatchPhase.GROUP:
            # Playoff and tie-breaker tables only list who actually played
            playing = {pid for m in table_matches for pid in m.sides}
            members = [p for p in members if p.id in playing]

        rows: Dict[str, Standing] = {
            p.id: Standing(participant_id=p.id, group=p.group) for p in members
        }

        for match in table_matches:
            self._apply_match(rows, match)

        if phase != MatchPhase.TIE_BREAKER:
            for match in all_matches:
                if (
                    match.is_completed
                    and match.phase == MatchPhase.TIE_BREAKER
                    and match.winner_id in rows
                ):
                    rows[match.winner_id].tiebreaker_wins += 1

        head_to_head = self._head_to_head_wins(
            m for m in all_matches if m.is_completed and m.phase == MatchPhase.GROUP
        )

        # Best first; the sort is stable so fully level rows keep input order
        standings = sorted(
            rows.values(),
            key=functools.cmp_to_key(
                lambda a, b: self._compare_standings(b, a, head_to_head)
            ),
        )

        for position, standing in enumerate(standings, start=1):
            standing.position = position

        logger.debug(
            f"Computed {len(standings)} standings "
            f"(group={group or 'all'}, phase={phase.value}, "
            f"{len(table_matches)} matches)"
        )
        return standings

    # ========== Match Aggregation ==========

    def _apply_match(self, rows: Dict[str, Standing], match: Match) -> None:
        home = rows.get(match.home_id)
        away = rows.get(match.away_id)
        if home is None or away is None:
            logger.warning(
                f"Match {match.id} references a participant outside the table, skipped"
            )
            return

        if match.winner_id is not None and not match.involves(match.winner_id):
            raise InvalidResultException(
                f"Match {match.id}: winner {match.winner_id} is not one of its sides"
            )

        home.played += 1
        away.played += 1

        if match.winner_id == match.home_id:
            self._award(home, away)
        elif match.winner_id == match.away_id:
            self._award(away, home)
        elif self.config.allow_draws:
            home.drawn += 1
            away.drawn += 1
            home.points += self.config.points_for_draw
            away.points += self.config.points_for_draw
        else:
            logger.warning(
                f"Match {match.id} completed without a winner while draws are "
                "disabled; outcome not counted"
            )

        for set_result in counted_sets(match.sets, self.config.discard_exhibition_set):
            home.games_won += set_result.home_games
            home.games_lost += set_result.away_games
            away.games_won += set_result.away_games
            away.games_lost += set_result.home_games

            side = set_result.winner_side
            if side == "home":
                home.sets_won += 1
                away.sets_lost += 1
            elif side == "away":
                away.sets_won += 1
                home.sets_lost += 1

    def _award(self, winner: Standing, loser: Standing) -> None:
        winner.won += 1
        winner.points += self.config.points_for_win
        loser.lost += 1
        loser.points += self.config.points_for_loss

    def _head_to_head_wins(
        self, matches: Iterable[Match]
    ) -> Dict[Tuple[str, str], int]:
        """Wins per (winner, loser) pair over regular-phase matches."""
        wins: Dict[Tuple[str, str], int] = {}
        for match in matches:
            if match.winner_id is None or not match.involves(match.winner_id):
                continue
            key = (match.winner_id, match.loser_id)
            wins[key] = wins.get(key, 0) + 1
        return wins

    # ========== Sorting ==========

    def _compare_standings(
        self,
        a: Standing,
        b: Standing,
        head_to_head: Dict[Tuple[str, str], int],
    ) -> int:
        """Compare two rows for standings order.

        Returns:
            1 if a ranks higher, -1 if b ranks higher, 0 if equal
        """
        if a.points != b.points:
            return 1 if a.points > b.points else -1

        for tb_key in self.config.tiebreak_order:
            if tb_key == TB_HEAD_TO_HEAD:
                a_wins = head_to_head.get((a.participant_id, b.participant_id), 0)
                b_wins = head_to_head.get((b.participant_id, a.participant_id), 0)
                if a_wins != b_wins:
                    return 1 if a_wins > b_wins else -1
                continue

            tb1 = self._criterion_value(a, tb_key)
            tb2 = self._criterion_value(b, tb_key)
            if tb1 != tb2:
                return 1 if tb1 > tb2 else -1

        if a.tiebreaker_wins != b.tiebreaker_wins:
            return 1 if a.tiebreaker_wins > b.tiebreaker_wins else -1

        return 0

    @staticmethod
    def _criterion_value(standing: Standing, tb_key: str) -> int:
        if tb_key == TB_GAME_DIFFERENCE:
            return standing.game_difference
        if tb_key == TB_SET_DIFFERENCE:
            return standing.set_difference
        if tb_key == TB_GAMES_WON:
            return standing.games_won
        if tb_key == TB_MATCHES_WON:
            return standing.won
        return 0

    # ========== Participant Counters ==========

    @staticmethod
    def apply_to_participants(
        participants: Dict[str, Participant], standings: Iterable[Standing]
    ) -> None:
        """Write computed counters back onto the participant records.

        Participants missing from ``standings`` are reset to zero.
        """
        for participant in participants.values():
            participant.reset_counters()
        for standing in standings:
            participant = participants.get(standing.participant_id)
            if participant is None:
                continue
            participant.played = standing.played
            participant.won = standing.won
            participant.drawn = standing.drawn
            participant.lost = standing.lost
            participant.points = standing.points
            participant.sets_won = standing.sets_won
            participant.sets_lost = standing.sets_lost
            participant.games_won = standing.games_won
            participant.games_lost = standing.games_lost
