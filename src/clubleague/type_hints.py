"""Type hints used in Club League."""

from typing import Dict, List, Literal, Optional, Tuple

# Home/away side string constants (for runtime use)
HOME = "home"
AWAY = "away"

Side = Literal["home", "away"]

# Participant identifier
ParticipantId = str
# A single fixture: (home participant id, away participant id)
Pairing = Tuple[ParticipantId, ParticipantId]
# All pairings for one round
RoundPairings = List[Pairing]
# A complete round robin: rounds in playing order
Schedule = List[RoundPairings]
# One schedule per group label
GroupSchedules = Dict[str, Schedule]
# Entry of a participant into a mini table, None for the bye sentinel
MaybeParticipantId = Optional[ParticipantId]

#  LocalWords:  RoundPairings GroupSchedules
