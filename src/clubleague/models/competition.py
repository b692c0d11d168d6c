"""Competition aggregate: participants plus an arena of matches."""

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
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from dateutil import parser as date_parser

from clubleague.exceptions import (
    CompetitionCompletedException,
    InvalidConfigurationException,
    MatchNotFoundException,
    ParticipantNotFoundException,
)
from clubleague.models.competition_config import CompetitionConfig
from clubleague.models.enums import (
    CompetitionFormat,
    CompetitionStatus,
    MatchPhase,
    PlayoffStage,
    PlayoffTier,
)
from clubleague.models.match import Match
from clubleague.models.participant import Participant


class Competition:
    """A league or tournament with its participants and matches.

    Matches live in an arena keyed by id. Participants never hold references
    to their matches; the side index maps a participant id to the ids of the
    matches it plays in.
    """

    def __init__(
        self,
        name: str,
        competition_format: CompetitionFormat,
        participants: Iterable[Participant],
        config: Optional[CompetitionConfig] = None,
        competition_id: Optional[str] = None,
        status: CompetitionStatus = CompetitionStatus.DRAFT,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> None:
        self.id = competition_id or uuid.uuid4().hex
        self.name = name
        self.format = competition_format
        self.config = (config or CompetitionConfig()).resolve(competition_format)
        self.status = status
        self.start_date = start_date
        self.end_date = end_date

        self.participants: Dict[str, Participant] = {}
        for participant in participants:
            if participant.id in self.participants:
                raise InvalidConfigurationException(
                    f"Duplicate participant id: {participant.id}"
                )
            self.participants[participant.id] = participant

        self.matches: Dict[str, Match] = {}
        self.side_index: Dict[str, List[str]] = {
            pid: [] for pid in self.participants
        }

    # ========== Properties ==========

    @property
    def is_completed(self) -> bool:
        return self.status == CompetitionStatus.COMPLETED

    @property
    def participant_list(self) -> List[Participant]:
        """Participants in registration order."""
        return list(self.participants.values())

    @property
    def match_list(self) -> List[Match]:
        """Matches in creation order."""
        return list(self.matches.values())

    @property
    def group_labels(self) -> List[str]:
        """Sorted labels of the groups participants are assigned to."""
        return sorted({p.group for p in self.participants.values() if p.group})

    # ========== Lookups ==========

    def get_participant(self, participant_id: str) -> Participant:
        participant = self.participants.get(participant_id)
        if participant is None:
            raise ParticipantNotFoundException(
                f"Participant {participant_id} not found in competition {self.id}"
            )
        return participant

    def get_match(self, match_id: str) -> Match:
        match = self.matches.get(match_id)
        if match is None:
            raise MatchNotFoundException(
                f"Match {match_id} not found in competition {self.id}"
            )
        return match

    def matches_for(self, participant_id: str) -> List[Match]:
        """All matches a participant plays in, via the side index."""
        return [self.matches[mid] for mid in self.side_index.get(participant_id, [])]

    def matches_in_phase(self, phase: MatchPhase) -> List[Match]:
        return [m for m in self.matches.values() if m.phase == phase]

    def stage_matches(self, tier: PlayoffTier, stage: PlayoffStage) -> List[Match]:
        """Matches of one bracket stage, in bracket order."""
        found = [
            m
            for m in self.matches.values()
            if m.phase == MatchPhase.PLAYOFF and m.tier == tier and m.stage == stage
        ]
        return sorted(found, key=lambda m: m.bracket_slot)

    def participants_in_group(self, group: str) -> List[Participant]:
        return [p for p in self.participants.values() if p.group == group]

    # ========== Mutation ==========

    def ensure_mutable(self) -> None:
        """Raise if the competition no longer accepts changes.

        Raises:
            CompetitionCompletedException: If the competition is completed
        """
        if self.is_completed:
            raise CompetitionCompletedException(
                f"Competition {self.name} is completed and cannot be modified"
            )

    def add_match(self, match: Match) -> Match:
        """Place a match in the arena and index both sides."""
        for side in match.sides:
            if side not in self.participants:
                raise ParticipantNotFoundException(
                    f"Participant {side} not found in competition {self.id}"
                )
        self.matches[match.id] = match
        for side in match.sides:
            self.side_index.setdefault(side, []).append(match.id)
        return match

    def add_matches(self, matches: Iterable[Match]) -> List[Match]:
        return [self.add_match(m) for m in matches]

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize competition to dictionary.

        Returns:
            Dictionary containing all competition data
        """
        return {
            "id": self.id,
            "name": self.name,
            "format": self.format.value,
            "status": self.status.value,
            "config": self.config.to_dict(),
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "participants": [p.to_dict() for p in self.participants.values()],
            "matches": [m.to_dict() for m in self.matches.values()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Competition":
        """Deserialize competition from dictionary.

        Args:
            data: Dictionary containing competition data

        Returns:
            Reconstructed Competition object
        """
        start_date = data.get("start_date")
        end_date = data.get("end_date")
        competition = cls(
            name=data.get("name", "Untitled Competition"),
            competition_format=CompetitionFormat(data["format"]),
            participants=[
                Participant.from_dict(p) for p in data.get("participants", [])
            ],
            config=CompetitionConfig.from_dict(data.get("config", {})),
            competition_id=data.get("id"),
            status=CompetitionStatus(data.get("status", CompetitionStatus.DRAFT.value)),
            start_date=date_parser.isoparse(start_date).date() if start_date else None,
            end_date=date_parser.isoparse(end_date).date() if end_date else None,
        )
        competition.add_matches(Match.from_dict(m) for m in data.get("matches", []))
        return competition
