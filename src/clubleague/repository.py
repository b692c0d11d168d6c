"""Persistence collaborator contract and its bundled implementations.

The engine itself performs no I/O. The service loads a competition snapshot
through a repository, works on it in memory, and hands the whole competition
back in a single ``save`` call.
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
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Union

from clubleague.constants import SAVE_FILE_EXTENSION
from clubleague.exceptions import (
    CompetitionNotFoundException,
    InvalidConfigurationException,
    MatchNotFoundException,
)
from clubleague.models import Competition
from clubleague.utils import setup_logger

logger = setup_logger(__name__)


class CompetitionRepository(ABC):
    """Storage interface for competitions.

    Implementations hand out independent snapshots: mutating a loaded
    competition has no effect until it is saved.
    """

    @abstractmethod
    def get(self, competition_id: str) -> Competition:
        """Load a competition with all participants and matches.

        Raises:
            CompetitionNotFoundException: If the id is unknown
        """
        pass

    @abstractmethod
    def find_by_match(self, match_id: str) -> Competition:
        """Load the competition that owns a match.

        Raises:
            MatchNotFoundException: If no competition has the match
        """
        pass

    @abstractmethod
    def add(self, competition: Competition) -> None:
        """Store a new competition.

        Raises:
            InvalidConfigurationException: If the id is already taken
        """
        pass

    @abstractmethod
    def save(self, competition: Competition) -> None:
        """Replace the stored competition with this one, all at once."""
        pass

    @abstractmethod
    def list_ids(self) -> List[str]:
        pass


class InMemoryCompetitionRepository(CompetitionRepository):
    """Keeps serialized snapshots in a dictionary."""

    def __init__(self) -> None:
        self._snapshots: Dict[str, Dict[str, Any]] = {}
        self._match_index: Dict[str, str] = {}
        self._lock = threading.RLock()

    def get(self, competition_id: str) -> Competition:
        with self._lock:
            snapshot = self._snapshots.get(competition_id)
        if snapshot is None:
            raise CompetitionNotFoundException(
                f"Competition {competition_id} not found"
            )
        return Competition.from_dict(snapshot)

    def find_by_match(self, match_id: str) -> Competition:
        with self._lock:
            competition_id = self._match_index.get(match_id)
        if competition_id is None:
            raise MatchNotFoundException(f"Match {match_id} not found")
        return self.get(competition_id)

    def add(self, competition: Competition) -> None:
        with self._lock:
            if competition.id in self._snapshots:
                raise InvalidConfigurationException(
                    f"Competition {competition.id} already exists"
                )
            self._store(competition)

    def save(self, competition: Competition) -> None:
        with self._lock:
            if competition.id not in self._snapshots:
                raise CompetitionNotFoundException(
                    f"Competition {competition.id} not found"
                )
            self._store(competition)

    def list_ids(self) -> List[str]:
        with self._lock:
            return list(self._snapshots)

    def _store(self, competition: Competition) -> None:
        # Serialize first so a failure leaves the previous snapshot untouched
        snapshot = competition.to_dict()
        self._snapshots[competition.id] = snapshot
        for match in snapshot["matches"]:
            self._match_index[match["id"]] = competition.id


class JsonFileCompetitionRepository(CompetitionRepository):
    """One JSON file per competition in a directory.

    Files are written to a temporary name and moved into place, so a reader
    never sees a half-written competition.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()

    def _path(self, competition_id: str) -> Path:
        return self.directory / f"{competition_id}{SAVE_FILE_EXTENSION}"

    def get(self, competition_id: str) -> Competition:
        path = self._path(competition_id)
        with self._lock:
            if not path.exists():
                raise CompetitionNotFoundException(
                    f"Competition {competition_id} not found in {self.directory}"
                )
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        return Competition.from_dict(data)

    def find_by_match(self, match_id: str) -> Competition:
        for competition_id in self.list_ids():
            competition = self.get(competition_id)
            if match_id in competition.matches:
                return competition
        raise MatchNotFoundException(f"Match {match_id} not found")

    def add(self, competition: Competition) -> None:
        with self._lock:
            if self._path(competition.id).exists():
                raise InvalidConfigurationException(
                    f"Competition {competition.id} already exists"
                )
            self._write(competition)

    def save(self, competition: Competition) -> None:
        with self._lock:
            if not self._path(competition.id).exists():
                raise CompetitionNotFoundException(
                    f"Competition {competition.id} not found in {self.directory}"
                )
            self._write(competition)

    def list_ids(self) -> List[str]:
        return sorted(
            p.stem
            for p in self.directory.glob(f"*{SAVE_FILE_EXTENSION}")
            if not p.name.startswith(".")
        )

    def _write(self, competition: Competition) -> None:
        data = competition.to_dict()
        fd, tmp_name = tempfile.mkstemp(
            dir=self.directory, prefix=".tmp-", suffix=SAVE_FILE_EXTENSION
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self._path(competition.id))
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Saved competition {competition.id} to {self.directory}")
