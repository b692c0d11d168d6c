import pytest

from clubleague.exceptions import InvalidSetScoreException
from clubleague.models import SetResult
from clubleague.utils.validation import sets_won, validate_set, validate_sets


@pytest.mark.parametrize(
    "score",
    [
        (6, 4),
        (4, 6),
        (6, 0),
        (7, 5),
        (5, 7),
        (8, 6),
        (7, 6, 7, 5),
        (6, 7, 3, 7),
        (7, 6, 12, 10),
    ],
)
def test_valid_set_scores(score):
    assert validate_set(SetResult.from_tuple(score))


@pytest.mark.parametrize(
    "score, reason",
    [
        ((6, 5), "2 games"),
        ((8, 5), "exactly 2"),
        ((6, 6), "tie-break must be played"),
        ((7, 6), "Tie-break score required"),
        ((5, 3), "at least 6"),
        ((-1, 6), "negative"),
        ((7, 6, 6, 4), "at least 7"),
        ((7, 6, 8, 7), "2-point"),
        ((7, 6, 5, 7), "must also win the set"),
    ],
)
def test_invalid_set_scores(score, reason):
    result = validate_set(SetResult.from_tuple(score), index=2)

    assert not result
    assert result.set_index == 2
    assert result.error_message.startswith("Set 2:")
    assert reason in result.error_message


def test_custom_games_per_set():
    assert validate_set(SetResult(4, 2), games_per_set=4)
    assert not validate_set(SetResult(4, 2))


def test_match_needs_one_to_max_sets():
    assert not validate_sets([])
    assert not validate_sets([SetResult(6, 4)] * 4)
    assert validate_sets([SetResult(6, 4), SetResult(3, 6), SetResult(7, 5)])


def test_first_bad_set_is_reported():
    result = validate_sets([SetResult(6, 4), SetResult(6, 5), SetResult(6, 6)])

    assert result.set_index == 2
    with pytest.raises(InvalidSetScoreException):
        result.raise_if_invalid()


def test_sets_won_tally():
    assert sets_won([SetResult(6, 4), SetResult(3, 6), SetResult(7, 5)]) == [2, 1]
    assert sets_won([SetResult(4, 6), SetResult(6, 4)]) == [1, 1]
