"""Exceptions for use in Club League"""

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


# ========== Base Application Exception ==========


class ClubLeagueException(Exception):
    """Base exception for all Club League errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.

    Every exception carries a stable ``code`` so the service layer can hand
    callers a structured result instead of a traceback.
    """

    code = "error"


# ========== Configuration Exceptions ==========


class ConfigurationException(ClubLeagueException):
    """Base exception for configuration errors. The caller must fix its input."""

    code = "configuration_error"


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass


class InsufficientParticipantsException(ConfigurationException):
    """Raised when a group, table or bracket has too few participants."""

    pass


# ========== State Conflict Exceptions ==========


class StateConflictException(ClubLeagueException):
    """Base exception for operations that clash with the competition state.

    These are recoverable: the user retries after some other action.
    """

    code = "state_conflict"


class CompetitionCompletedException(StateConflictException):
    """Raised when mutating a competition that is already completed."""

    code = "competition_completed"


class StageExistsException(StateConflictException):
    """Raised when requesting a playoff stage that has already been generated."""

    code = "stage_exists"


class FixturesExistException(StateConflictException):
    """Raised when fixtures have already been generated for a competition."""

    code = "fixtures_exist"


class PhaseNotReadyException(StateConflictException):
    """Raised when the feeding phase or stage is not finished yet."""

    code = "phase_not_ready"


# ========== Validation Exceptions ==========


class ValidationException(ClubLeagueException):
    """Base exception for input-local validation errors."""

    code = "validation_error"


class InvalidSetScoreException(ValidationException):
    """Raised when submitted set scores are malformed."""

    code = "invalid_set_score"


class InvalidResultException(ValidationException):
    """Raised when a result is inconsistent (e.g. unknown winner)."""

    code = "invalid_result"


class NoTieDetectedException(ValidationException):
    """Raised when tie-breakers are requested but no tie exists."""

    code = "no_tie_detected"


# ========== Lookup Exceptions ==========


class NotFoundException(ClubLeagueException):
    """Base exception for unknown identifiers."""

    code = "not_found"


class CompetitionNotFoundException(NotFoundException):
    """Raised when a requested competition cannot be found."""

    pass


class MatchNotFoundException(NotFoundException):
    """Raised when a requested match cannot be found."""

    pass


class ParticipantNotFoundException(NotFoundException):
    """Raised when a requested participant cannot be found."""

    pass
