"""Recording of match results."""

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

from typing import Any, Dict, Iterable, List, Optional, Union

from clubleague.exceptions import InvalidResultException, StateConflictException
from clubleague.models import (
    Competition,
    Match,
    MatchPhase,
    MatchStatus,
    PlayoffStage,
    SetResult,
)
from clubleague.utils import setup_logger
from clubleague.utils.validation import sets_won, validate_sets

logger = setup_logger(__name__)

SetInput = Union[SetResult, Dict[str, Any]]

# Stages whose existence freezes the result of a match in the keyed stage
SUCCESSOR_STAGES = {
    PlayoffStage.QUARTER_FINAL: (PlayoffStage.SEMI_FINAL,),
    PlayoffStage.SEMI_FINAL: (PlayoffStage.FINAL, PlayoffStage.THIRD_PLACE),
}


def normalize_sets(sets: Iterable[SetInput]) -> List[SetResult]:
    """Accept SetResult objects or plain dictionaries."""
    return [s if isinstance(s, SetResult) else SetResult.from_dict(s) for s in sets]


class ResultRecorder:
    """Validates submitted results and applies them to matches."""

    def record(
        self,
        competition: Competition,
        match_id: str,
        sets: Iterable[SetInput],
        declared_winner_id: Optional[str] = None,
    ) -> Match:
        """Validate a result and mark the match completed.

        The winner is whoever won more sets. A declared winner must be one of
        the sides and must agree with the sets when they decide the match; it
        is only taken as-is when the sets are level (e.g. a retirement).

        Args:
            competition: Competition owning the match
            match_id: Match to record
            sets: Set scores in playing order
            declared_winner_id: Winner as reported by the caller

        Returns:
            The updated match

        Raises:
            CompetitionCompletedException: If the competition is completed
            MatchNotFoundException: If the match does not exist
            InvalidSetScoreException: If a set score is malformed
            InvalidResultException: If the winner is inconsistent or a draw is not allowed
            StateConflictException: If a later stage already depends on this result
        """
        competition.ensure_mutable()
        match = competition.get_match(match_id)
        set_results = normalize_sets(sets)

        config = competition.config
        validation = validate_sets(set_results, config.games_per_set, config.max_sets)
        validation.raise_if_invalid()

        home_sets, away_sets = sets_won(set_results)
        computed: Optional[str] = None
        if home_sets > away_sets:
            computed = match.home_id
        elif away_sets > home_sets:
            computed = match.away_id

        if declared_winner_id is not None:
            if not match.involves(declared_winner_id):
                raise InvalidResultException(
                    f"Declared winner {declared_winner_id} does not play match {match.id}"
                )
            if computed is not None and declared_winner_id != computed:
                raise InvalidResultException(
                    f"Declared winner {declared_winner_id} contradicts the set "
                    f"scores ({home_sets}-{away_sets})"
                )
        winner_id = computed or declared_winner_id

        if winner_id is None:
            if not match.is_regular:
                raise InvalidResultException(
                    f"{match.label} match {match.id} must finish with a winner"
                )
            if not config.allow_draws:
                raise InvalidResultException(
                    f"Draws are not allowed in competition {competition.name}"
                )

        if match.is_completed:
            self._ensure_editable(competition, match)

        match.sets = set_results
        match.winner_id = winner_id
        match.status = MatchStatus.COMPLETED
        logger.debug(
            f"Recorded {match.label or 'league'} match {match.id}: "
            f"{home_sets}-{away_sets}, winner={winner_id or 'draw'}"
        )
        return match

    def start_match(self, competition: Competition, match_id: str) -> Match:
        """Move a pending match to in progress.

        Raises:
            CompetitionCompletedException: If the competition is completed
            MatchNotFoundException: If the match does not exist
            StateConflictException: If the match is already completed
        """
        competition.ensure_mutable()
        match = competition.get_match(match_id)
        if match.is_completed:
            raise StateConflictException(f"Match {match.id} is already completed")
        match.status = MatchStatus.IN_PROGRESS
        return match

    def _ensure_editable(self, competition: Competition, match: Match) -> None:
        """Refuse to change a result that a generated stage was built from."""
        if match.phase == MatchPhase.PLAYOFF:
            successors = [
                m
                for stage in SUCCESSOR_STAGES.get(match.stage, ())
                for m in competition.stage_matches(match.tier, stage)
            ]
        elif match.phase == MatchPhase.TIE_BREAKER:
            successors = competition.matches_in_phase(MatchPhase.PLAYOFF)
        else:
            successors = competition.matches_in_phase(
                MatchPhase.PLAYOFF
            ) + competition.matches_in_phase(MatchPhase.TIE_BREAKER)

        if successors:
            raise StateConflictException(
                f"Result of match {match.id} cannot change: "
                f"{successors[0].label} has already been generated from it"
            )
