"""Fixture generation for the regular phase of a competition.

Draws groups when needed, builds one round robin per group and lays the
resulting matches out on the shared court calendar.
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

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from clubleague.controllers.competition.playoff_state_machine import (
    PlayoffStateMachine,
)
from clubleague.controllers.competition.standings_calculator import (
    StandingsCalculator,
)
from clubleague.exceptions import (
    FixturesExistException,
    InvalidConfigurationException,
    MatchNotFoundException,
)
from clubleague.models import (
    Competition,
    CompetitionFormat,
    CompetitionStatus,
    Match,
    MatchPhase,
    MatchStatus,
)
from clubleague.scheduling import (
    assign_groups,
    assign_slot_times,
    check_group_layout,
    coordinate_across_groups,
    generate_round_robin,
)
from clubleague.utils import setup_logger

logger = setup_logger(__name__)

SlotKey = Tuple[Optional[str], int, str, str]


class FixtureManager:
    """Creates the regular-phase matches of a competition."""

    def assign_groups(
        self,
        competition: Competition,
        assignment: Optional[Dict[str, str]] = None,
        seed: Optional[int] = None,
    ) -> Dict[str, List[str]]:
        """Put participants into groups, by hand or by random draw.

        Args:
            competition: A groups + playoff competition without fixtures
            assignment: Explicit participant id to group label mapping; drawn
                at random when omitted
            seed: Random seed for the draw

        Returns:
            Participant ids per group label

        Raises:
            CompetitionCompletedException: If the competition is completed
            FixturesExistException: If fixtures were already generated
            InvalidConfigurationException: If the format has no groups
            ParticipantNotFoundException: If the mapping names an unknown participant
        """
        competition.ensure_mutable()
        if competition.format != CompetitionFormat.GROUPS_PLAYOFF:
            raise InvalidConfigurationException(
                f"Format {competition.format.value} does not use groups"
            )
        if competition.matches_in_phase(MatchPhase.GROUP):
            raise FixturesExistException(
                f"Groups of {competition.name} cannot change once fixtures exist"
            )

        if assignment is None:
            assignment = assign_groups(
                list(competition.participants),
                competition.config.number_of_groups,
                seed=seed,
            )
        else:
            for pid in assignment:
                competition.get_participant(pid)

        for pid, label in assignment.items():
            competition.participants[pid].group = label

        return self.group_members(competition)

    @staticmethod
    def group_members(competition: Competition) -> Dict[str, List[str]]:
        return {
            label: [p.id for p in competition.participants_in_group(label)]
            for label in competition.group_labels
        }

    def generate_fixtures(
        self,
        competition: Competition,
        start: Optional[datetime] = None,
        seed: Optional[int] = None,
    ) -> List[Match]:
        """Generate every regular-phase match of a competition.

        Groups are drawn first when a groups + playoff competition has none.
        Matches get their internal round, global slot and court; with a
        ``start`` they also get a start time.

        Args:
            competition: Competition to schedule, modified in place
            start: Start of the first global round on the calendar
            seed: Random seed for an automatic group draw

        Returns:
            The new matches, in calendar order

        Raises:
            CompetitionCompletedException: If the competition is completed
            FixturesExistException: If fixtures were already generated
            ConfigurationException: On too few participants, a bad group layout
                or a playoff bracket the participants cannot fill
        """
        competition.ensure_mutable()
        if competition.matches_in_phase(MatchPhase.GROUP):
            raise FixturesExistException(
                f"Fixtures for {competition.name} have already been generated"
            )

        config = competition.config
        if competition.format == CompetitionFormat.GROUPS_PLAYOFF:
            if not competition.group_labels:
                logger.info(f"No groups assigned for {competition.name}, drawing")
                self.assign_groups(competition, seed=seed)
            unassigned = [p.id for p in competition.participant_list if not p.group]
            if unassigned:
                raise InvalidConfigurationException(
                    f"Participants without a group: {', '.join(unassigned)}"
                )
            groups = self.group_members(competition)
            check_group_layout(groups, config.number_of_groups)
            PlayoffStateMachine().group_brackets(
                len(groups), min(len(members) for members in groups.values()), config
            )
            schedules = {
                label: generate_round_robin(
                    members, cycles=config.round_robin_cycles, group=label
                )
                for label, members in groups.items()
            }
        else:
            if competition.format == CompetitionFormat.ROUND_ROBIN_PLAYOFF:
                PlayoffStateMachine.table_tiers(len(competition.participants), config)
            schedules = {
                None: generate_round_robin(
                    list(competition.participants), cycles=config.round_robin_cycles
                )
            }

        by_slot_key: Dict[SlotKey, Match] = {}
        for label, schedule in schedules.items():
            for round_number, pairings in enumerate(schedule, start=1):
                for home, away in pairings:
                    by_slot_key[(label, round_number, home, away)] = Match(
                        home_id=home,
                        away_id=away,
                        round=round_number,
                        group=label,
                    )

        global_rounds = coordinate_across_groups(schedules, config.courts)
        if start is not None:
            assign_slot_times(global_rounds, start, config.slot_minutes)

        matches: List[Match] = []
        for global_round in global_rounds:
            for slot in global_round.slots:
                match = by_slot_key[
                    (slot.group, slot.internal_round, slot.home_id, slot.away_id)
                ]
                match.slot = global_round.number
                match.court = slot.court
                match.scheduled_at = global_round.starts_at
                matches.append(match)

        competition.add_matches(matches)
        competition.status = CompetitionStatus.IN_PROGRESS
        if start is not None and competition.start_date is None:
            competition.start_date = start.date()

        logger.info(
            f"Generated {len(matches)} fixtures for {competition.name} "
            f"in {len(global_rounds)} global rounds"
        )
        return matches

    def suggest_next_match(self, competition: Competition) -> Match:
        """The most competitive pending match: smallest gap in table points.

        Equal gaps keep calendar order.

        Raises:
            MatchNotFoundException: If no match is pending
        """
        pending = [m for m in competition.match_list if m.status == MatchStatus.PENDING]
        if not pending:
            raise MatchNotFoundException(
                f"No pending matches found in competition {competition.name}"
            )

        calculator = StandingsCalculator(competition.config)
        points = {
            s.participant_id: s.points
            for s in calculator.compute_standings(
                competition.participant_list, competition.match_list
            )
        }

        def points_gap(match: Match) -> int:
            return abs(points.get(match.home_id, 0) - points.get(match.away_id, 0))

        return min(pending, key=points_gap)
