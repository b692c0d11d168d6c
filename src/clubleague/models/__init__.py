from clubleague.models.competition import Competition
from clubleague.models.competition_config import CompetitionConfig
from clubleague.models.enums import (
    CompetitionFormat,
    CompetitionStatus,
    MatchPhase,
    MatchStatus,
    PlayoffStage,
    PlayoffTier,
)
from clubleague.models.match import Match, SetResult, TiebreakScore
from clubleague.models.participant import Participant
from clubleague.models.standing import Standing

__all__ = [
    "Competition",
    "CompetitionConfig",
    "CompetitionFormat",
    "CompetitionStatus",
    "Match",
    "MatchPhase",
    "MatchStatus",
    "Participant",
    "PlayoffStage",
    "PlayoffTier",
    "SetResult",
    "Standing",
    "TiebreakScore",
]
