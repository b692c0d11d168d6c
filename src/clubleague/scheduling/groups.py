"""Group assignment for the groups + playoff format."""

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

import random
from typing import Dict, List, Optional, Sequence

from clubleague.constants import GROUP_LABELS, MIN_PARTICIPANTS_PER_GROUP
from clubleague.exceptions import (
    InsufficientParticipantsException,
    InvalidConfigurationException,
)
from clubleague.utils import setup_logger

logger = setup_logger(__name__)


def group_labels(number_of_groups: int) -> List[str]:
    """Labels A, B, C... for the requested number of groups."""
    if not 1 <= number_of_groups <= len(GROUP_LABELS):
        raise InvalidConfigurationException(
            f"Number of groups must be between 1 and {len(GROUP_LABELS)}"
        )
    return list(GROUP_LABELS[:number_of_groups])


def assign_groups(
    participant_ids: Sequence[str],
    number_of_groups: int,
    seed: Optional[int] = None,
) -> Dict[str, str]:
    """Shuffle participants and deal them into groups.

    Args:
        participant_ids: Participants to distribute
        number_of_groups: How many groups to create
        seed: Random seed for a reproducible draw

    Returns:
        Mapping of participant id to group label

    Raises:
        InsufficientParticipantsException: If a group would get fewer than 2
    """
    labels = group_labels(number_of_groups)
    if len(participant_ids) < number_of_groups * MIN_PARTICIPANTS_PER_GROUP:
        raise InsufficientParticipantsException(
            f"Not enough participants ({len(participant_ids)}) for "
            f"{number_of_groups} groups (min {MIN_PARTICIPANTS_PER_GROUP} per group)"
        )

    rng = random.Random(seed) if seed is not None else random.Random()
    shuffled = list(participant_ids)
    rng.shuffle(shuffled)

    assignment = {
        pid: labels[index % number_of_groups] for index, pid in enumerate(shuffled)
    }
    logger.info(
        f"Assigned {len(shuffled)} participants to groups {', '.join(labels)}"
    )
    return assignment


def check_group_layout(groups: Dict[str, List[str]], number_of_groups: int) -> None:
    """Verify assigned groups before any fixture is generated.

    Args:
        groups: Participant ids per group label
        number_of_groups: Configured group count

    Raises:
        InvalidConfigurationException: If the group count does not match
        InsufficientParticipantsException: If a group has fewer than 2 participants
    """
    if len(groups) != number_of_groups:
        raise InvalidConfigurationException(
            f"Expected {number_of_groups} groups, found {len(groups)} "
            f"({', '.join(sorted(groups))})"
        )
    for label, members in sorted(groups.items()):
        if len(members) < MIN_PARTICIPANTS_PER_GROUP:
            raise InsufficientParticipantsException(
                f"Group {label} has {len(members)} participant(s), "
                f"at least {MIN_PARTICIPANTS_PER_GROUP} are required"
            )
