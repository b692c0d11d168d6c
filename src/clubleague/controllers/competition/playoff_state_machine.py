"""Playoff progression for bracket formats.

The state machine decides, from the current matches alone, whether the
regular phase or a bracket stage is finished and which bracket matches come
next. It never regenerates a stage that already has matches, so calling
``advance`` again without new results yields nothing.
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
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from clubleague.constants import TIER_BRONZE, TIER_GOLD, TIER_SILVER
from clubleague.controllers.competition.standings_calculator import (
    StandingsCalculator,
)
from clubleague.controllers.competition.tiebreaker_resolver import TieBreakerResolver
from clubleague.exceptions import (
    InsufficientParticipantsException,
    InvalidConfigurationException,
    PhaseNotReadyException,
    StageExistsException,
)
from clubleague.models import (
    Competition,
    CompetitionConfig,
    CompetitionFormat,
    Match,
    MatchPhase,
    PlayoffStage,
    PlayoffTier,
    Standing,
)
from clubleague.models.enums import TIER_ORDER
from clubleague.utils import setup_logger

logger = setup_logger(__name__)

# A seed is (group index, position); positions are 1-based and shifted by the
# tier offset (0 for the first tier, 2 for the second, 4 for the third).
Seed = Tuple[int, int]
SeedPairs = List[Tuple[Seed, Seed]]

TWO_GROUP_SF: SeedPairs = [((0, 1), (1, 2)), ((1, 1), (0, 2))]
TWO_GROUP_QF: SeedPairs = [
    ((0, 1), (1, 4)),
    ((1, 2), (0, 3)),
    ((1, 1), (0, 4)),
    ((0, 2), (1, 3)),
]
TWO_GROUP_FINAL: SeedPairs = [((0, 1), (1, 1))]
FOUR_GROUP_QF: SeedPairs = [
    ((0, 1), (1, 2)),
    ((2, 1), (3, 2)),
    ((1, 1), (0, 2)),
    ((3, 1), (2, 2)),
]
FOUR_GROUP_SF: SeedPairs = [((0, 1), (1, 1)), ((2, 1), (3, 1))]

TABLE_TIERS = [
    (TIER_GOLD, PlayoffTier.GOLD),
    (TIER_SILVER, PlayoffTier.SILVER),
    (TIER_BRONZE, PlayoffTier.BRONZE),
]


class AdvanceStatus(Enum):
    """Coded result of an advance check. None of these is an error."""

    WAITING = "waiting"  # Feeding matches still pending, or a podium tie open
    GENERATED = "generated"
    BLOCKED = "blocked"  # A feeding match finished without a winner
    COMPLETE = "complete"
    IDLE = "idle"  # Nothing to do: no fixtures yet or already completed


@dataclass
class AdvanceOutcome:
    """What an advance check found and produced."""

    status: AdvanceStatus
    matches: List[Match] = field(default_factory=list)
    blocked_match_ids: List[str] = field(default_factory=list)
    tied_participant_ids: List[str] = field(default_factory=list)
    message: str = ""

    @property
    def code(self) -> str:
        return self.status.value

    def to_dict(self) -> Dict[str, object]:
        return {
            "code": self.code,
            "matches": [m.to_dict() for m in self.matches],
            "blocked_match_ids": list(self.blocked_match_ids),
            "tied_participant_ids": list(self.tied_participant_ids),
            "message": self.message,
        }


class PlayoffStateMachine:
    """Phase detection and bracket generation.

    Groups + single elimination runs ``group phase -> QF -> SF -> F`` with
    stages only as needed. Round robin + tiered playoff seeds Gold, Silver and
    Bronze brackets from consecutive slices of the league table. Semifinal
    completion produces the Final and, when configured, the 3rd-place match
    in the same call.
    """

    def __init__(self) -> None:
        self.tiebreaker_resolver = TieBreakerResolver()

    # ========== Public API ==========

    def advance(self, competition: Competition) -> AdvanceOutcome:
        """Generate whatever bracket matches are due and add them.

        Args:
            competition: The competition, modified in place when matches are due

        Returns:
            AdvanceOutcome describing the state found
        """
        if competition.is_completed:
            return AdvanceOutcome(
                AdvanceStatus.IDLE, message="Competition is already completed"
            )

        outcome = self.plan(competition)
        if outcome.matches:
            competition.add_matches(outcome.matches)
            logger.info(
                f"Competition {competition.name}: generated "
                f"{', '.join(sorted({m.label for m in outcome.matches}))} "
                f"({len(outcome.matches)} matches)"
            )
        elif outcome.status == AdvanceStatus.BLOCKED:
            logger.warning(f"Competition {competition.name}: {outcome.message}")
        return outcome

    def plan(self, competition: Competition) -> AdvanceOutcome:
        """Work out the next step without touching the competition."""
        regular = competition.matches_in_phase(MatchPhase.GROUP)
        if not regular:
            return AdvanceOutcome(
                AdvanceStatus.IDLE, message="No fixtures have been generated yet"
            )

        if not competition.format.has_bracket:
            return self._plan_round_robin(competition)

        feeding = regular + competition.matches_in_phase(MatchPhase.TIE_BREAKER)
        pending = [m.id for m in feeding if not m.is_completed]
        if pending:
            return AdvanceOutcome(
                AdvanceStatus.WAITING,
                message=f"Regular phase still has {len(pending)} pending match(es)",
            )

        if competition.matches_in_phase(MatchPhase.PLAYOFF):
            return self._plan_progression(competition)

        if competition.format == CompetitionFormat.ROUND_ROBIN_PLAYOFF:
            standings = self.league_table(competition)
            tied = self.tiebreaker_resolver.detect_ties(standings)
            if tied:
                return AdvanceOutcome(
                    AdvanceStatus.WAITING,
                    tied_participant_ids=tied,
                    message="Unresolved tie at the top of the table; "
                    "tie-breakers are required before seeding",
                )
            matches = self.seed_from_table(standings, competition)
        else:
            matches = self.seed_from_groups(competition)

        return AdvanceOutcome(
            AdvanceStatus.GENERATED,
            matches=matches,
            message=f"Seeded {len(matches)} playoff match(es)",
        )

    def is_complete(self, competition: Competition) -> bool:
        """Whether the competition has reached its terminal state."""
        return self.plan(competition).status == AdvanceStatus.COMPLETE

    def generate_stage(
        self, competition: Competition, tier: PlayoffTier, stage: PlayoffStage
    ) -> List[Match]:
        """Generate one specific stage on request.

        Raises:
            CompetitionCompletedException: If the competition is completed
            StageExistsException: If the stage already has matches
            PhaseNotReadyException: If the feeding matches are not finished
        """
        competition.ensure_mutable()
        if competition.stage_matches(tier, stage):
            raise StageExistsException(
                f"Stage {stage.value} of tier {tier.value or 'main'} already exists"
            )

        outcome = self.plan(competition)
        matches = [m for m in outcome.matches if m.tier == tier and m.stage == stage]
        if not matches:
            reason = outcome.message or "feeding matches are not finished"
            raise PhaseNotReadyException(
                f"Cannot generate {stage.value} for tier {tier.value or 'main'}: "
                f"{reason}"
            )

        competition.add_matches(matches)
        logger.info(f"Competition {competition.name}: generated {matches[0].label}")
        return matches

    def league_table(self, competition: Competition) -> List[Standing]:
        """Regular-phase standings over all participants."""
        calculator = StandingsCalculator(competition.config)
        return calculator.compute_standings(
            competition.participant_list, competition.match_list
        )

    # ========== Round Robin Completion ==========

    def _plan_round_robin(self, competition: Competition) -> AdvanceOutcome:
        pending = [m for m in competition.match_list if not m.is_completed]
        if pending:
            return AdvanceOutcome(
                AdvanceStatus.WAITING,
                message=f"{len(pending)} match(es) still pending",
            )

        tied = self.tiebreaker_resolver.detect_ties(self.league_table(competition))
        if tied:
            return AdvanceOutcome(
                AdvanceStatus.WAITING,
                tied_participant_ids=tied,
                message="All matches played but the top positions are tied",
            )
        return AdvanceOutcome(AdvanceStatus.COMPLETE, message="League finished")

    # ========== Initial Seeding ==========

    def seed_from_groups(self, competition: Competition) -> List[Match]:
        """Seed the first bracket stage(s) from the group tables.

        Raises:
            InvalidConfigurationException: Unsupported group count or advance value
            InsufficientParticipantsException: A group is too small for the bracket
        """
        calculator = StandingsCalculator(competition.config)
        tables = [
            [
                s.participant_id
                for s in calculator.compute_standings(
                    competition.participant_list, competition.match_list, group=label
                )
            ]
            for label in competition.group_labels
        ]
        smallest = min(len(table) for table in tables) if tables else 0

        matches: List[Match] = []
        for pairs, tier, stage, offset in self.group_brackets(
            len(tables), smallest, competition.config
        ):
            for slot, ((home_group, home_pos), (away_group, away_pos)) in enumerate(
                pairs, start=1
            ):
                home = tables[home_group][home_pos + offset - 1]
                away = tables[away_group][away_pos + offset - 1]
                matches.append(self._playoff_match(home, away, tier, stage, slot))
        return matches

    def group_brackets(
        self, group_count: int, smallest: int, config: CompetitionConfig
    ) -> List[Tuple[SeedPairs, PlayoffTier, PlayoffStage, int]]:
        """Seeding templates to apply as (pairs, tier, stage, position offset).

        Args:
            group_count: Number of groups feeding the bracket
            smallest: Size of the smallest group
            config: Competition configuration

        Raises:
            InvalidConfigurationException: Unsupported group count or advance value
            InsufficientParticipantsException: A group is too small for the bracket
        """
        if group_count not in (2, 4):
            raise InvalidConfigurationException(
                f"Playoff seeding supports 2 or 4 groups, found {group_count}"
            )

        if not config.multi_tier_playoffs:
            advance = config.teams_advance_per_group
            if group_count == 2 and advance == 2:
                brackets = [
                    (TWO_GROUP_SF, PlayoffTier.MAIN, PlayoffStage.SEMI_FINAL, 0)
                ]
            elif group_count == 2 and advance == 4:
                brackets = [
                    (TWO_GROUP_QF, PlayoffTier.MAIN, PlayoffStage.QUARTER_FINAL, 0)
                ]
            elif group_count == 4 and advance == 2:
                brackets = [
                    (FOUR_GROUP_QF, PlayoffTier.MAIN, PlayoffStage.QUARTER_FINAL, 0)
                ]
            else:
                raise InvalidConfigurationException(
                    f"{advance} participants per group cannot advance from "
                    f"{group_count} groups"
                )
            self._require_group_size(smallest, advance)
            return brackets

        self._require_group_size(smallest, 2)
        if group_count == 2:
            brackets = [(TWO_GROUP_SF, PlayoffTier.GOLD, PlayoffStage.SEMI_FINAL, 0)]
            if smallest >= 4:
                brackets.append(
                    (TWO_GROUP_SF, PlayoffTier.SILVER, PlayoffStage.SEMI_FINAL, 2)
                )
            if smallest >= 6:
                brackets.append(
                    (TWO_GROUP_SF, PlayoffTier.BRONZE, PlayoffStage.SEMI_FINAL, 4)
                )
            elif smallest == 5:
                # Fifth places only: a direct Bronze final
                brackets.append(
                    (TWO_GROUP_FINAL, PlayoffTier.BRONZE, PlayoffStage.FINAL, 4)
                )
            return brackets

        brackets = [(FOUR_GROUP_QF, PlayoffTier.GOLD, PlayoffStage.QUARTER_FINAL, 0)]
        if smallest >= 4:
            brackets.append(
                (FOUR_GROUP_QF, PlayoffTier.SILVER, PlayoffStage.QUARTER_FINAL, 2)
            )
        if smallest >= 5:
            brackets.append(
                (FOUR_GROUP_SF, PlayoffTier.BRONZE, PlayoffStage.SEMI_FINAL, 4)
            )
        return brackets

    def seed_from_table(
        self, standings: Sequence[Standing], competition: Competition
    ) -> List[Match]:
        """Seed tier brackets from consecutive slices of the league table.

        A tier of 8 or more plays quarterfinals (1v8, 4v5, 2v7, 3v6), 4 to 7
        semifinals (1v4, 2v3), 2 or 3 a direct final (1v2). Seeds inside a
        slice that do not fit the bracket take no part.

        Raises:
            InvalidConfigurationException: A tier size of 1, or no tier at all
            InsufficientParticipantsException: The table is too short for the tiers
        """
        ids = [s.participant_id for s in standings]
        matches: List[Match] = []

        for tier, offset, size in self.table_tiers(len(ids), competition.config):
            seeds = ids[offset:offset + size]
            if size >= 8:
                pairs = [(0, 7), (3, 4), (1, 6), (2, 5)]
                stage = PlayoffStage.QUARTER_FINAL
            elif size >= 4:
                pairs = [(0, 3), (1, 2)]
                stage = PlayoffStage.SEMI_FINAL
            else:
                pairs = [(0, 1)]
                stage = PlayoffStage.FINAL
            matches += [
                self._playoff_match(seeds[h], seeds[a], tier, stage, slot)
                for slot, (h, a) in enumerate(pairs, start=1)
            ]
        return matches

    @staticmethod
    def table_tiers(
        table_size: int, config: CompetitionConfig
    ) -> List[Tuple[PlayoffTier, int, int]]:
        """Configured table tiers as (tier, position offset, size).

        Raises:
            InvalidConfigurationException: A tier size of 1, or no tier at all
            InsufficientParticipantsException: The table is too short for the tiers
        """
        tiers = []
        offset = 0
        for key, tier in TABLE_TIERS:
            size = config.tier_sizes.get(key, 0)
            if size == 0:
                continue
            if size < 2:
                raise InvalidConfigurationException(
                    f"Tier {key} needs at least 2 participants (got {size})"
                )
            if offset + size > table_size:
                raise InsufficientParticipantsException(
                    f"Tier {key} needs positions {offset + 1}-{offset + size}, "
                    f"but the table has only {table_size} entries"
                )
            tiers.append((tier, offset, size))
            offset += size

        if not tiers:
            raise InvalidConfigurationException(
                "No playoff tier is configured (all tier sizes are 0)"
            )
        return tiers

    @staticmethod
    def _require_group_size(smallest: int, advance: int) -> None:
        if smallest < advance:
            raise InsufficientParticipantsException(
                f"Every group needs at least {advance} participants to advance "
                f"{advance} (smallest has {smallest})"
            )

    # ========== Bracket Progression ==========

    def _plan_progression(self, competition: Competition) -> AdvanceOutcome:
        playoff = competition.matches_in_phase(MatchPhase.PLAYOFF)
        tiers = [t for t in TIER_ORDER if any(m.tier == t for m in playoff)]

        generated: List[Match] = []
        blocked: List[str] = []
        finished = True
        for tier in tiers:
            outcome = self._plan_tier(competition, tier)
            generated += outcome.matches
            blocked += outcome.blocked_match_ids
            if outcome.status != AdvanceStatus.COMPLETE:
                finished = False

        if generated:
            return AdvanceOutcome(
                AdvanceStatus.GENERATED,
                matches=generated,
                blocked_match_ids=blocked,
                message=f"Generated {len(generated)} bracket match(es)",
            )
        if blocked:
            return AdvanceOutcome(
                AdvanceStatus.BLOCKED,
                blocked_match_ids=blocked,
                message="Bracket match(es) completed without a winner: "
                + ", ".join(blocked),
            )
        if finished:
            return AdvanceOutcome(AdvanceStatus.COMPLETE, message="All finals played")
        return AdvanceOutcome(
            AdvanceStatus.WAITING, message="Bracket matches still pending"
        )

    def _plan_tier(self, competition: Competition, tier: PlayoffTier) -> AdvanceOutcome:
        quarter_finals = competition.stage_matches(tier, PlayoffStage.QUARTER_FINAL)
        semi_finals = competition.stage_matches(tier, PlayoffStage.SEMI_FINAL)
        finals = competition.stage_matches(tier, PlayoffStage.FINAL)
        third_place = competition.stage_matches(tier, PlayoffStage.THIRD_PLACE)
        third_place_due = bool(semi_finals) and bool(
            competition.config.third_place_match
        )

        if quarter_finals and not semi_finals:
            state = self._feeder_state(quarter_finals)
            if state is not None:
                return state
            winners = [m.winner_id for m in quarter_finals]
            return AdvanceOutcome(
                AdvanceStatus.GENERATED,
                matches=self._paired(winners, tier, PlayoffStage.SEMI_FINAL),
            )

        if semi_finals and (not finals or (third_place_due and not third_place)):
            state = self._feeder_state(semi_finals)
            if state is not None:
                return state
            matches = []
            if not finals:
                winners = [m.winner_id for m in semi_finals]
                matches += self._paired(winners, tier, PlayoffStage.FINAL)
            if third_place_due and not third_place:
                losers = [m.loser_id for m in semi_finals]
                matches += self._paired(losers, tier, PlayoffStage.THIRD_PLACE)
            return AdvanceOutcome(AdvanceStatus.GENERATED, matches=matches)

        terminal = finals + (third_place if third_place_due else [])
        state = self._feeder_state(terminal)
        if state is not None:
            return state
        return AdvanceOutcome(AdvanceStatus.COMPLETE)

    @staticmethod
    def _feeder_state(feeders: Sequence[Match]) -> Optional[AdvanceOutcome]:
        """WAITING or BLOCKED outcome for unfinished feeders, None when ready."""
        if any(not m.is_completed for m in feeders):
            return AdvanceOutcome(AdvanceStatus.WAITING)
        undecided = [m.id for m in feeders if m.winner_id is None]
        if undecided:
            return AdvanceOutcome(AdvanceStatus.BLOCKED, blocked_match_ids=undecided)
        return None

    def _paired(
        self,
        participant_ids: List[Optional[str]],
        tier: PlayoffTier,
        stage: PlayoffStage,
    ) -> List[Match]:
        """Pair consecutive entries (slot 1 v slot 2, slot 3 v slot 4)."""
        if len(participant_ids) % 2:
            raise InvalidConfigurationException(
                f"Cannot pair {len(participant_ids)} participants into {stage.value}"
            )
        return [
            self._playoff_match(
                participant_ids[i], participant_ids[i + 1], tier, stage, i // 2 + 1
            )
            for i in range(0, len(participant_ids), 2)
        ]

    @staticmethod
    def _playoff_match(
        home_id: str, away_id: str, tier: PlayoffTier, stage: PlayoffStage, slot: int
    ) -> Match:
        return Match(
            home_id=home_id,
            away_id=away_id,
            round=stage.order,
            phase=MatchPhase.PLAYOFF,
            tier=tier,
            stage=stage,
            bracket_slot=slot,
        )
