"""Match and set result data classes."""

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

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from dateutil import parser as date_parser

from clubleague.constants import PLAYOFF_LABEL, TIE_BREAKER_LABEL
from clubleague.models.enums import MatchPhase, MatchStatus, PlayoffStage, PlayoffTier


def new_match_id() -> str:
    """Generate an identifier for a freshly created match."""
    return uuid.uuid4().hex


@dataclass
class TiebreakScore:
    """Points of a set-deciding tie-break (e.g. 7-5 inside a 7-6 set)."""

    home_points: int
    away_points: int

    def to_dict(self) -> Dict[str, Any]:
        return {"home_points": self.home_points, "away_points": self.away_points}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TiebreakScore":
        return cls(
            home_points=int(data.get("home_points", data.get("team1Points", 0))),
            away_points=int(data.get("away_points", data.get("team2Points", 0))),
        )


@dataclass
class SetResult:
    """Games won by each side in one set.

    Attributes
    ----------
    home_games : int
        Games won by the home side.
    away_games : int
        Games won by the away side.
    tiebreak : TiebreakScore, optional
        Tie-break points when the set was decided by one.
    """

    home_games: int
    away_games: int
    tiebreak: Optional[TiebreakScore] = None

    @property
    def winner_side(self) -> Optional[str]:
        """'home' or 'away' for the side with more games, None when level."""
        if self.home_games > self.away_games:
            return "home"
        if self.away_games > self.home_games:
            return "away"
        return None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "home_games": self.home_games,
            "away_games": self.away_games,
        }
        if self.tiebreak is not None:
            data["tiebreak"] = self.tiebreak.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SetResult":
        """Deserialize a set, accepting the team1/pairA naming used by clients."""
        home = data.get("home_games", data.get("team1Games", data.get("pairAGames", 0)))
        away = data.get("away_games", data.get("team2Games", data.get("pairBGames", 0)))
        tiebreak = data.get("tiebreak")
        return cls(
            home_games=int(home or 0),
            away_games=int(away or 0),
            tiebreak=TiebreakScore.from_dict(tiebreak) if tiebreak else None,
        )

    @classmethod
    def from_tuple(cls, score: Tuple[int, ...]) -> "SetResult":
        """Build a set from ``(home, away)`` or ``(home, away, tb_home, tb_away)``."""
        if len(score) == 4:
            return cls(score[0], score[1], TiebreakScore(score[2], score[3]))
        return cls(score[0], score[1])


@dataclass
class Match:
    """A fixture between two participants.

    Attributes
    ----------
    home_id, away_id : str
        Participant identifiers of both sides.
    group : str, optional
        Group label for group-phase matches.
    round : int
        Internal round number (cycle offset included). Tie-breaker matches use
        numbers from TIE_BREAKER_ROUND upward.
    phase : MatchPhase
        Group (regular), playoff or tie-breaker.
    tier, stage : optional
        Composite playoff tag, set only for playoff matches.
    bracket_slot : int
        Position of the match inside its stage; drives pairing of the next stage.
    status : MatchStatus
    sets : list of SetResult
    winner_id : str, optional
        None denotes a draw where draws are permitted.
    slot, court : int, optional
        Global round and court assigned by the court coordinator.
    scheduled_at : datetime, optional
        Start time of the global round, when a calendar start was given.
    """

    home_id: str
    away_id: str
    round: int = 1
    group: Optional[str] = None
    phase: MatchPhase = MatchPhase.GROUP
    tier: Optional[PlayoffTier] = None
    stage: Optional[PlayoffStage] = None
    bracket_slot: int = 0
    status: MatchStatus = MatchStatus.PENDING
    sets: List[SetResult] = field(default_factory=list)
    winner_id: Optional[str] = None
    slot: Optional[int] = None
    court: Optional[int] = None
    scheduled_at: Optional[datetime] = None
    id: str = field(default_factory=new_match_id)

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED

    @property
    def is_regular(self) -> bool:
        return self.phase == MatchPhase.GROUP

    @property
    def sides(self) -> Tuple[str, str]:
        return self.home_id, self.away_id

    @property
    def loser_id(self) -> Optional[str]:
        """Side that did not win, None while undecided or drawn."""
        if self.winner_id is None:
            return None
        return self.opponent_of(self.winner_id)

    @property
    def label(self) -> str:
        """Composite phase tag, e.g. 'A', 'Playoff_Gold_SF' or 'TieBreaker'."""
        if self.phase == MatchPhase.TIE_BREAKER:
            return TIE_BREAKER_LABEL
        if self.phase == MatchPhase.PLAYOFF:
            parts = [PLAYOFF_LABEL]
            if self.tier is not None and self.tier is not PlayoffTier.MAIN:
                parts.append(self.tier.value)
            if self.stage is not None:
                parts.append(self.stage.value)
            return "_".join(parts)
        return self.group or ""

    def involves(self, participant_id: str) -> bool:
        return participant_id in (self.home_id, self.away_id)

    def opponent_of(self, participant_id: str) -> str:
        return self.away_id if participant_id == self.home_id else self.home_id

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "home_id": self.home_id,
            "away_id": self.away_id,
            "round": self.round,
            "group": self.group,
            "phase": self.phase.value,
            "tier": self.tier.value if self.tier is not None else None,
            "stage": self.stage.value if self.stage is not None else None,
            "bracket_slot": self.bracket_slot,
            "status": self.status.value,
            "sets": [s.to_dict() for s in self.sets],
            "winner_id": self.winner_id,
            "slot": self.slot,
            "court": self.court,
            "scheduled_at": (
                self.scheduled_at.isoformat() if self.scheduled_at else None
            ),
            "label": self.label,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        tier = data.get("tier")
        stage = data.get("stage")
        scheduled_at = data.get("scheduled_at")
        return cls(
            id=str(data["id"]) if data.get("id") else new_match_id(),
            home_id=str(data["home_id"]),
            away_id=str(data["away_id"]),
            round=int(data.get("round", 1)),
            group=data.get("group"),
            phase=MatchPhase(data.get("phase", MatchPhase.GROUP.value)),
            tier=PlayoffTier(tier) if tier is not None else None,
            stage=PlayoffStage(stage) if stage is not None else None,
            bracket_slot=int(data.get("bracket_slot", 0)),
            status=MatchStatus(data.get("status", MatchStatus.PENDING.value)),
            sets=[SetResult.from_dict(s) for s in data.get("sets", []) or []],
            winner_id=data.get("winner_id"),
            slot=data.get("slot"),
            court=data.get("court"),
            scheduled_at=(
                date_parser.isoparse(scheduled_at) if scheduled_at else None
            ),
        )
