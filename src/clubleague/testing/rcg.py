"""Random Competition Generator (RCG) - internal testing system for the engine.

This module builds competitions with realistic pairs and set scores and plays
them to the end through the public service, so every format can be exercised
from fixture generation to the last final.
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

import json
import math
import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from clubleague.constants import (
    DEFAULT_TIER_SIZES,
    GAMES_PER_SET,
    MIN_TIEBREAK_POINTS,
)
from clubleague.controllers.competition import AdvanceStatus, StandingsCalculator
from clubleague.models import (
    Competition,
    CompetitionConfig,
    CompetitionFormat,
    Match,
    MatchPhase,
    Participant,
    PlayoffStage,
    SetResult,
    TiebreakScore,
)
from clubleague.models.enums import TIER_ORDER
from clubleague.service import CompetitionService, OperationResult
from clubleague.utils import setup_logger

logger = setup_logger(__name__)


class StrengthDistribution(Enum):
    """Level distribution patterns for realistic club pairs."""

    UNIFORM = "uniform"
    NORMAL = "normal"
    CLUB = "club"


class ResultPattern(Enum):
    """Result generation patterns for competitions."""

    REALISTIC = "realistic"
    BALANCED = "balanced"
    UPSET_FRIENDLY = "upset_friendly"
    RANDOM = "random"


@dataclass
class RCGConfig:
    """Configuration for Random Competition Generator."""

    num_participants: int
    competition_format: CompetitionFormat = CompetitionFormat.ROUND_ROBIN
    strength_distribution: StrengthDistribution = StrengthDistribution.NORMAL
    level_range: Tuple[float, float] = (1.0, 7.0)
    result_pattern: ResultPattern = ResultPattern.REALISTIC
    seed: Optional[int] = None
    number_of_groups: int = 2
    teams_advance_per_group: int = 2
    multi_tier_playoffs: bool = False
    tier_sizes: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_TIER_SIZES))
    round_robin_cycles: int = 1
    courts: int = 2
    discard_exhibition_set: bool = False
    exhibition_set_rate: float = 0.1
    tiebreak_rate: float = 0.15
    start: Optional[datetime] = None
    max_steps: int = 500

    def competition_config(self) -> CompetitionConfig:
        return CompetitionConfig(
            number_of_groups=self.number_of_groups,
            teams_advance_per_group=self.teams_advance_per_group,
            multi_tier_playoffs=self.multi_tier_playoffs,
            tier_sizes=dict(self.tier_sizes),
            round_robin_cycles=self.round_robin_cycles,
            courts=self.courts,
            discard_exhibition_set=self.discard_exhibition_set,
        )


class ParticipantFactory:
    """Factory for creating pairs with a playing level."""

    def __init__(self, config: RCGConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )

    def create_participants(self) -> Tuple[List[Participant], Dict[str, float]]:
        """Create participants and their levels, keyed by participant id."""
        participants = []
        levels = {}
        for i in range(self.config.num_participants):
            pid = f"P{i + 1:02d}"
            participants.append(
                Participant(
                    id=pid,
                    name=f"Pair {i + 1}",
                    player_ids=[f"{pid}-1", f"{pid}-2"],
                )
            )
            levels[pid] = self._generate_level()

        logger.info(
            f"Created {len(participants)} participants with "
            f"{self.config.strength_distribution.value} distribution"
        )
        return participants, levels

    def _generate_level(self) -> float:
        low, high = self.config.level_range
        if self.config.strength_distribution == StrengthDistribution.UNIFORM:
            return round(self.random.uniform(low, high), 2)
        if self.config.strength_distribution == StrengthDistribution.CLUB:
            base = self.random.choice([2.0, 3.0, 3.5, 4.0, 5.0])
            return round(max(low, min(high, base + self.random.uniform(-0.5, 0.5))), 2)
        mean = (low + high) / 2
        std_dev = (high - low) / 6
        return round(max(low, min(high, self.random.gauss(mean, std_dev))), 2)


class ResultSimulator:
    """Simulates set scores for a match between two levels."""

    def __init__(self, config: RCGConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )

    def home_win_probability(self, home_level: float, away_level: float) -> float:
        diff = home_level - away_level
        if self.config.result_pattern == ResultPattern.RANDOM:
            return 0.5
        if self.config.result_pattern == ResultPattern.BALANCED:
            return max(0.1, min(0.9, 0.5 + diff / 12))
        if self.config.result_pattern == ResultPattern.UPSET_FRIENDLY:
            return max(0.1, min(0.9, 0.5 - diff / 12))
        return math.erfc(-diff / math.sqrt(2.0)) / 2.0

    def simulate_match(self, home_level: float, away_level: float) -> List[SetResult]:
        """Best of three sets, with an occasional exhibition third set."""
        probability = self.home_win_probability(home_level, away_level)
        sets: List[SetResult] = []
        home_sets = away_sets = 0
        while home_sets < 2 and away_sets < 2:
            home_takes = self.random.random() < probability
            sets.append(self._simulate_set(home_takes))
            if home_takes:
                home_sets += 1
            else:
                away_sets += 1

        if len(sets) == 2 and self.random.random() < self.config.exhibition_set_rate:
            sets.append(self._simulate_set(self.random.random() < 0.5))
        return sets

    def _simulate_set(self, home_takes: bool) -> SetResult:
        games = GAMES_PER_SET
        roll = self.random.random()
        tiebreak = None
        if roll < self.config.tiebreak_rate:
            winner_games, loser_games = games + 1, games
            loser_points = self.random.randint(0, MIN_TIEBREAK_POINTS + 3)
            winner_points = max(MIN_TIEBREAK_POINTS, loser_points + 2)
            tiebreak = (winner_points, loser_points)
        elif roll < self.config.tiebreak_rate + 0.15:
            winner_games, loser_games = games + 1, games - 1
        else:
            winner_games, loser_games = games, self.random.randint(0, games - 2)

        if home_takes:
            return SetResult(
                winner_games,
                loser_games,
                TiebreakScore(*tiebreak) if tiebreak else None,
            )
        return SetResult(
            loser_games,
            winner_games,
            TiebreakScore(tiebreak[1], tiebreak[0]) if tiebreak else None,
        )


class RandomCompetitionGenerator:
    """Main competition generator: creates, schedules and plays a competition."""

    def __init__(self, config: RCGConfig, service: Optional[CompetitionService] = None):
        self.config = config
        self.participant_factory = ParticipantFactory(config)
        self.result_simulator = ResultSimulator(config)
        self.service = service or CompetitionService()
        self.levels: Dict[str, float] = {}

    def generate_complete_competition(self) -> Dict[str, Any]:
        """Generate a competition and play it until it is completed.

        Returns:
            Summary with the final competition, standings and podiums

        Raises:
            RuntimeError: If an operation fails or the competition stalls
        """
        logger.info(
            f"Generating {self.config.competition_format.value} competition: "
            f"{self.config.num_participants} participants"
        )
        participants, self.levels = self.participant_factory.create_participants()
        competition = self._check(
            self.service.create_competition(
                f"RCG {self.config.competition_format.value}",
                self.config.competition_format,
                participants,
                config=self.config.competition_config(),
            )
        )
        competition_id = competition.id

        if self.config.competition_format == CompetitionFormat.GROUPS_PLAYOFF:
            self._check(
                self.service.assign_groups(competition_id, seed=self.config.seed)
            )
        self._check(
            self.service.generate_fixtures(competition_id, start=self.config.start)
        )

        steps = 0
        matches_played = 0
        tie_breaker_rounds = 0
        while True:
            steps += 1
            if steps > self.config.max_steps:
                raise RuntimeError(
                    f"Competition {competition_id} did not finish "
                    f"within {self.config.max_steps} steps"
                )

            competition = self._check(self.service.get_competition(competition_id))
            if competition.is_completed:
                break

            pending = sorted(
                (m for m in competition.match_list if not m.is_completed),
                key=lambda m: (m.slot or 0, m.round, m.bracket_slot),
            )
            if pending:
                for match in pending:
                    self._play(match)
                    matches_played += 1
                continue

            outcome = self._check(self.service.advance_playoffs(competition_id))
            if outcome.status == AdvanceStatus.COMPLETE:
                break
            if outcome.tied_participant_ids:
                self._check(self.service.generate_tie_breakers(competition_id))
                tie_breaker_rounds += 1
                continue
            raise RuntimeError(
                f"Competition {competition_id} stalled: {outcome.message}"
            )

        competition = self._check(self.service.get_competition(competition_id))
        standings = self._check(self.service.get_standings(competition_id))
        logger.info(
            f"Competition generation complete: {matches_played} matches, "
            f"{tie_breaker_rounds} tie-breaker round(s)"
        )
        return {
            "config": self.config,
            "competition": competition,
            "levels": dict(self.levels),
            "standings": standings,
            "podiums": podiums(competition),
            "matches_played": matches_played,
            "tie_breaker_rounds": tie_breaker_rounds,
            "steps": steps,
        }

    def _play(self, match: Match) -> None:
        sets = self.result_simulator.simulate_match(
            self.levels.get(match.home_id, 0.0), self.levels.get(match.away_id, 0.0)
        )
        self._check(self.service.submit_result(match.id, sets))

    @staticmethod
    def _check(result: OperationResult) -> Any:
        if not result:
            raise RuntimeError(f"{result.error_code}: {result.message}")
        return result.data

    def export_json_format(self, competition_data: Dict[str, Any]) -> str:
        competition: Competition = competition_data["competition"]
        export_data = {
            "rcg_config": {
                "num_participants": self.config.num_participants,
                "competition_format": self.config.competition_format.value,
                "strength_distribution": self.config.strength_distribution.value,
                "result_pattern": self.config.result_pattern.value,
                "seed": self.config.seed,
            },
            "levels": competition_data["levels"],
            "competition": competition.to_dict(),
            "standings": [s.to_dict() for s in competition_data["standings"]],
            "podiums": competition_data["podiums"],
        }
        return json.dumps(export_data, indent=2)


def podiums(competition: Competition) -> Dict[str, List[str]]:
    """Winner, runner-up and (where played) third place per playoff tier.

    A competition without playoffs reports the top three of the league table.
    """
    result: Dict[str, List[str]] = {}
    for tier in TIER_ORDER:
        finals = competition.stage_matches(tier, PlayoffStage.FINAL)
        if not finals or finals[0].winner_id is None:
            continue
        final = finals[0]
        podium = [final.winner_id, final.loser_id]
        third = competition.stage_matches(tier, PlayoffStage.THIRD_PLACE)
        if third and third[0].winner_id is not None:
            podium.append(third[0].winner_id)
        result[tier.value or "main"] = podium

    if not result and not competition.matches_in_phase(MatchPhase.PLAYOFF):
        table = StandingsCalculator(competition.config).compute_standings(
            competition.participant_list, competition.match_list
        )
        result["league"] = [s.participant_id for s in table[:3]]
    return result


def create_round_robin(
    num_participants: int = 6, seed: Optional[int] = None
) -> RandomCompetitionGenerator:
    """Create a plain league."""
    return RandomCompetitionGenerator(
        RCGConfig(num_participants=num_participants, seed=seed)
    )


def create_groups_playoff(
    num_participants: int = 8,
    number_of_groups: int = 2,
    multi_tier: bool = False,
    seed: Optional[int] = None,
) -> RandomCompetitionGenerator:
    """Create a groups + single elimination competition."""
    return RandomCompetitionGenerator(
        RCGConfig(
            num_participants=num_participants,
            competition_format=CompetitionFormat.GROUPS_PLAYOFF,
            number_of_groups=number_of_groups,
            multi_tier_playoffs=multi_tier,
            seed=seed,
        )
    )


def create_round_robin_playoff(
    num_participants: int = 8,
    tier_sizes: Optional[Dict[str, int]] = None,
    seed: Optional[int] = None,
) -> RandomCompetitionGenerator:
    """Create a round robin + tiered playoff competition."""
    return RandomCompetitionGenerator(
        RCGConfig(
            num_participants=num_participants,
            competition_format=CompetitionFormat.ROUND_ROBIN_PLAYOFF,
            tier_sizes=dict(tier_sizes or DEFAULT_TIER_SIZES),
            seed=seed,
        )
    )
