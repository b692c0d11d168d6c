"""Public operations on competitions.

``CompetitionService`` is the boundary between callers (CLI, HTTP layer) and
the engine. Each operation runs under the lock of its competition, loads a
snapshot from the repository, computes, and writes the whole competition back
in one ``save`` call. Engine exceptions are turned into failed
``OperationResult`` values here and nowhere else.
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

import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from clubleague.controllers.competition import (
    AdvanceOutcome,
    AdvanceStatus,
    FixtureManager,
    PlayoffStateMachine,
    ResultRecorder,
    StandingsCalculator,
    TieBreakerResolver,
)
from clubleague.exceptions import (
    ClubLeagueException,
    InvalidConfigurationException,
    PhaseNotReadyException,
    StageExistsException,
)
from clubleague.models import (
    Competition,
    CompetitionConfig,
    CompetitionFormat,
    CompetitionStatus,
    Match,
    MatchPhase,
    Participant,
    Standing,
)
from clubleague.repository import CompetitionRepository, InMemoryCompetitionRepository
from clubleague.utils import setup_logger

logger = setup_logger(__name__)


class OperationResult:
    """Outcome of a service operation.

    Attributes:
        ok: Whether the operation succeeded
        data: Operation payload on success
        error_code: Stable error code on failure
        message: Human-readable error message on failure
    """

    def __init__(
        self,
        ok: bool,
        data: Any = None,
        error_code: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.ok = ok
        self.data = data
        self.error_code = error_code
        self.message = message

    @classmethod
    def success(cls, data: Any = None) -> "OperationResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: ClubLeagueException) -> "OperationResult":
        return cls(ok=False, error_code=error.code, message=str(error))

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.ok

    def __repr__(self) -> str:
        if self.ok:
            return f"OperationResult(OK, {type(self.data).__name__})"
        return f"OperationResult(FAILED, {self.error_code}: {self.message!r})"


@dataclass
class SubmissionOutcome:
    """Everything one result submission changed."""

    match: Match
    standings: List[Standing]
    advance: AdvanceOutcome
    competition_completed: bool = False
    new_matches: List[Match] = field(default_factory=list)


class CompetitionService:
    """Serialized, all-or-nothing operations on stored competitions."""

    def __init__(self, repository: Optional[CompetitionRepository] = None):
        self.repository = repository or InMemoryCompetitionRepository()
        self.fixture_manager = FixtureManager()
        self.result_recorder = ResultRecorder()
        self.playoff_state_machine = PlayoffStateMachine()
        self.tiebreaker_resolver = TieBreakerResolver()
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ========== Plumbing ==========

    def _lock_for(self, competition_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(competition_id)
        if lock is not None:
            return lock
        # Unknown ids raise here and never get a lock
        self.repository.get(competition_id)
        with self._locks_guard:
            return self._locks.setdefault(competition_id, threading.Lock())

    def _execute(
        self,
        action: str,
        competition_id: str,
        operation: Callable[[Competition], Any],
        mutate: bool = True,
    ) -> OperationResult:
        """Run ``operation`` on a fresh snapshot under the competition lock.

        Nothing is saved when the operation raises.
        """
        try:
            with self._lock_for(competition_id):
                competition = self.repository.get(competition_id)
                data = operation(competition)
                if mutate:
                    self.repository.save(competition)
        except ClubLeagueException as e:
            logger.warning(f"{action} failed for competition {competition_id}: {e}")
            return OperationResult.failure(e)
        return OperationResult.success(data)

    def _execute_for_match(
        self,
        action: str,
        match_id: str,
        operation: Callable[[Competition], Any],
    ) -> OperationResult:
        try:
            competition_id = self.repository.find_by_match(match_id).id
        except ClubLeagueException as e:
            logger.warning(f"{action} failed for match {match_id}: {e}")
            return OperationResult.failure(e)
        return self._execute(action, competition_id, operation)

    def _complete(self, competition: Competition) -> None:
        competition.status = CompetitionStatus.COMPLETED
        if competition.end_date is None:
            competition.end_date = date.today()
        logger.info(f"Competition {competition.name} completed")

    # ========== Operations ==========

    def create_competition(
        self,
        name: str,
        competition_format: Union[CompetitionFormat, str],
        participants: Iterable[Union[Participant, str]],
        config: Optional[CompetitionConfig] = None,
        start_date: Optional[date] = None,
    ) -> OperationResult:
        """Create and store a draft competition.

        Participants may be given as Participant objects or as plain ids.
        """
        try:
            competition_format = CompetitionFormat(competition_format)
        except ValueError as e:
            return OperationResult.failure(InvalidConfigurationException(str(e)))

        try:
            competition = Competition(
                name=name,
                competition_format=competition_format,
                participants=[
                    p if isinstance(p, Participant) else Participant(id=str(p))
                    for p in participants
                ],
                config=config,
                start_date=start_date,
            )
            self.repository.add(competition)
        except ClubLeagueException as e:
            logger.warning(f"Creating competition {name} failed: {e}")
            return OperationResult.failure(e)

        with self._locks_guard:
            self._locks.setdefault(competition.id, threading.Lock())

        logger.info(
            f"Created {competition.format.value} competition {name} "
            f"with {len(competition.participants)} participants"
        )
        return OperationResult.success(competition)

    def get_competition(self, competition_id: str) -> OperationResult:
        return self._execute(
            "Loading", competition_id, lambda competition: competition, mutate=False
        )

    def assign_groups(
        self,
        competition_id: str,
        assignment: Optional[Dict[str, str]] = None,
        seed: Optional[int] = None,
    ) -> OperationResult:
        """Assign groups by hand or draw them. Data: ids per group label."""
        return self._execute(
            "Group assignment",
            competition_id,
            lambda competition: self.fixture_manager.assign_groups(
                competition, assignment=assignment, seed=seed
            ),
        )

    def generate_fixtures(
        self,
        competition_id: str,
        start: Optional[datetime] = None,
        seed: Optional[int] = None,
    ) -> OperationResult:
        """Generate all regular-phase matches. Data: the new matches."""
        return self._execute(
            "Fixture generation",
            competition_id,
            lambda competition: self.fixture_manager.generate_fixtures(
                competition, start=start, seed=seed
            ),
        )

    def start_match(self, match_id: str) -> OperationResult:
        return self._execute_for_match(
            "Starting match",
            match_id,
            lambda competition: self.result_recorder.start_match(
                competition, match_id
            ),
        )

    def submit_result(
        self,
        match_id: str,
        sets: Iterable[Any],
        declared_winner_id: Optional[str] = None,
    ) -> OperationResult:
        """Record a result, then refresh standings, playoffs and completion.

        All effects of one submission are saved together or not at all.
        Data: a SubmissionOutcome.
        """
        sets = list(sets)

        def submit(competition: Competition) -> SubmissionOutcome:
            match = self.result_recorder.record(
                competition, match_id, sets, declared_winner_id
            )
            standings = self._refresh_counters(competition)
            advance = self.playoff_state_machine.advance(competition)
            completed = advance.status == AdvanceStatus.COMPLETE
            if completed:
                self._complete(competition)
            return SubmissionOutcome(
                match=match,
                standings=standings,
                advance=advance,
                competition_completed=completed,
                new_matches=list(advance.matches),
            )

        return self._execute_for_match("Result submission", match_id, submit)

    def get_standings(
        self,
        competition_id: str,
        group: Optional[str] = None,
        phase: Optional[Union[MatchPhase, str]] = None,
    ) -> OperationResult:
        """Standings table, regular phase unless another phase is requested."""
        try:
            table_phase = MatchPhase(phase) if phase is not None else MatchPhase.GROUP
        except ValueError as e:
            return OperationResult.failure(InvalidConfigurationException(str(e)))

        def standings(competition: Competition) -> List[Standing]:
            calculator = StandingsCalculator(competition.config)
            return calculator.compute_standings(
                competition.participant_list,
                competition.match_list,
                group=group,
                phase=table_phase,
            )

        return self._execute("Standings", competition_id, standings, mutate=False)

    def generate_tie_breakers(self, competition_id: str) -> OperationResult:
        """Generate matches resolving a podium tie. Data: the new matches."""
        return self._execute(
            "Tie-breaker generation", competition_id, self._generate_tie_breakers
        )

    def _generate_tie_breakers(self, competition: Competition) -> List[Match]:
        competition.ensure_mutable()
        if competition.format == CompetitionFormat.GROUPS_PLAYOFF:
            raise InvalidConfigurationException(
                "Tie-breakers apply to league tables, not to group brackets"
            )

        regular = competition.matches_in_phase(MatchPhase.GROUP)
        if not regular or any(not m.is_completed for m in regular):
            raise PhaseNotReadyException(
                "Tie-breakers can only be generated once every regular match is played"
            )
        if competition.matches_in_phase(MatchPhase.PLAYOFF):
            raise StageExistsException("Playoffs have already been seeded")
        pending = [
            m
            for m in competition.matches_in_phase(MatchPhase.TIE_BREAKER)
            if not m.is_completed
        ]
        if pending:
            raise StageExistsException(
                f"{len(pending)} tie-breaker match(es) are still pending"
            )

        standings = self.playoff_state_machine.league_table(competition)
        tied = self.tiebreaker_resolver.detect_ties(standings)
        matches = self.tiebreaker_resolver.generate_tie_breakers(
            tied, competition.match_list
        )
        competition.add_matches(matches)
        return matches

    def advance_playoffs(self, competition_id: str) -> OperationResult:
        """Run the playoff check on request. Data: the AdvanceOutcome."""

        def advance(competition: Competition) -> AdvanceOutcome:
            outcome = self.playoff_state_machine.advance(competition)
            if outcome.status == AdvanceStatus.COMPLETE:
                self._complete(competition)
            return outcome

        return self._execute("Playoff advance", competition_id, advance)

    def suggest_next_match(self, competition_id: str) -> OperationResult:
        return self._execute(
            "Match suggestion",
            competition_id,
            self.fixture_manager.suggest_next_match,
            mutate=False,
        )

    def complete_competition(self, competition_id: str) -> OperationResult:
        """Close a competition by hand. Every match must be completed."""

        def complete(competition: Competition) -> Competition:
            if competition.is_completed:
                return competition
            pending = [m for m in competition.match_list if not m.is_completed]
            if pending:
                raise PhaseNotReadyException(
                    f"{len(pending)} match(es) are still pending"
                )
            self._complete(competition)
            return competition

        return self._execute("Completion", competition_id, complete)

    # ========== Helpers ==========

    @staticmethod
    def _refresh_counters(competition: Competition) -> List[Standing]:
        calculator = StandingsCalculator(competition.config)
        standings = calculator.compute_standings(
            competition.participant_list, competition.match_list
        )
        calculator.apply_to_participants(competition.participants, standings)
        return standings
