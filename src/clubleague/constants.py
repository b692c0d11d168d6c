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

# --- Constants ---
SAVE_FILE_EXTENSION = ".json"

# Points awarded per match outcome
POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1
POINTS_FOR_LOSS = 1

# Set scoring
GAMES_PER_SET = 6
MAX_SETS_PER_MATCH = 3
MIN_TIEBREAK_POINTS = 7

# Group phase defaults
DEFAULT_NUMBER_OF_GROUPS = 2
DEFAULT_TEAMS_ADVANCE_PER_GROUP = 2
MIN_PARTICIPANTS_PER_GROUP = 2
GROUP_LABELS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Round robin defaults
DEFAULT_ROUND_ROBIN_CYCLES = 1

# Court calendar defaults
DEFAULT_COURTS = 1
DEFAULT_SLOT_MINUTES = 90

# Playoff tier sizes (round robin + tiered playoff)
TIER_GOLD = "gold"
TIER_SILVER = "silver"
TIER_BRONZE = "bronze"
DEFAULT_TIER_SIZES = {TIER_GOLD: 4, TIER_SILVER: 0, TIER_BRONZE: 0}

# Tie-breaker matches are numbered from this round upward so they never
# collide with regular scheduling
TIE_BREAKER_ROUND = 99

# Labels used to render the composite phase tag of a match
PLAYOFF_LABEL = "Playoff"
TIE_BREAKER_LABEL = "TieBreaker"

# Tiebreaker Keys
TB_GAME_DIFFERENCE = "game_difference"
TB_SET_DIFFERENCE = "set_difference"
TB_HEAD_TO_HEAD = "h2h"
TB_GAMES_WON = "games_won"
TB_MATCHES_WON = "matches_won"

TIEBREAK_NAMES = {
    TB_GAME_DIFFERENCE: "Game Difference",
    TB_SET_DIFFERENCE: "Set Difference",
    TB_HEAD_TO_HEAD: "Head-to-Head",
    TB_GAMES_WON: "Games Won",
    TB_MATCHES_WON: "Matches Won",
}

# Default order used for sorting if not configured otherwise
DEFAULT_TIEBREAK_SORT_ORDER = [
    TB_GAME_DIFFERENCE,
    TB_HEAD_TO_HEAD,
    TB_SET_DIFFERENCE,
]

# Standings positions compared when looking for podium ties: (1,2), (2,3), (3,4)
PODIUM_TIE_POSITIONS = ((0, 1), (1, 2), (2, 3))
