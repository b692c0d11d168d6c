import pytest

from clubleague.constants import TIE_BREAKER_ROUND
from clubleague.controllers.competition import (
    AdvanceStatus,
    FixtureManager,
    PlayoffStateMachine,
    ResultRecorder,
    StandingsCalculator,
    TieBreakerResolver,
)
from clubleague.exceptions import NoTieDetectedException
from clubleague.models import (
    Competition,
    CompetitionConfig,
    CompetitionFormat,
    Match,
    MatchPhase,
    Participant,
    SetResult,
    Standing,
)


def _level_league():
    """P1 and P2 draw each other and beat P3 and P4 by the same scores."""
    competition = Competition(
        "Winter League",
        CompetitionFormat.ROUND_ROBIN,
        [Participant(id=f"P{i}") for i in range(1, 5)],
        config=CompetitionConfig(allow_draws=True),
    )
    FixtureManager().generate_fixtures(competition)
    recorder = ResultRecorder()
    for match in competition.match_list:
        sides = set(match.sides)
        if sides == {"P1", "P2"}:
            sets = [SetResult(6, 4), SetResult(4, 6)]
        elif min(sides) == match.home_id:
            sets = [SetResult(6, 2), SetResult(6, 2)]
        else:
            sets = [SetResult(2, 6), SetResult(2, 6)]
        recorder.record(competition, match.id, sets)
    return competition


def test_top_two_tie_gets_one_direct_match():
    competition = _level_league()
    machine = PlayoffStateMachine()
    resolver = TieBreakerResolver()

    outcome = machine.advance(competition)
    assert outcome.status == AdvanceStatus.WAITING
    assert outcome.tied_participant_ids == ["P1", "P2"]

    matches = resolver.generate_tie_breakers(
        outcome.tied_participant_ids, competition.match_list
    )

    assert len(matches) == 1
    (match,) = matches
    assert match.phase == MatchPhase.TIE_BREAKER
    assert match.round == TIE_BREAKER_ROUND
    assert set(match.sides) == {"P1", "P2"}
    assert match.label == "TieBreaker"


def test_tie_breaker_result_settles_the_table():
    competition = _level_league()
    machine = PlayoffStateMachine()
    matches = TieBreakerResolver().generate_tie_breakers(["P1", "P2"])
    competition.add_matches(matches)

    assert machine.advance(competition).status == AdvanceStatus.WAITING

    ResultRecorder().record(
        competition, matches[0].id, [SetResult(3, 6), SetResult(4, 6)]
    )
    table = StandingsCalculator(competition.config).compute_standings(
        competition.participant_list, competition.match_list
    )

    assert [s.participant_id for s in table[:2]] == ["P2", "P1"]
    assert table[0].tiebreaker_wins == 1
    assert table[0].played == table[1].played == 3
    assert machine.advance(competition).status == AdvanceStatus.COMPLETE


def test_three_way_tie_plays_mini_round_robin():
    matches = TieBreakerResolver().generate_tie_breakers(["A", "B", "C"])

    assert len(matches) == 3
    assert [m.round for m in matches] == [99, 100, 101]
    assert {frozenset(m.sides) for m in matches} == {
        frozenset(("A", "B")),
        frozenset(("A", "C")),
        frozenset(("B", "C")),
    }


def test_later_tie_breakers_continue_round_numbers():
    resolver = TieBreakerResolver()
    earlier = [
        Match(home_id="A", away_id="B", round=101, phase=MatchPhase.TIE_BREAKER),
        Match(home_id="A", away_id="B", round=4),
    ]

    assert resolver.next_round_number(earlier) == 102
    assert resolver.next_round_number([]) == TIE_BREAKER_ROUND
    (match,) = resolver.generate_tie_breakers(["A", "B"], earlier)
    assert match.round == 102


def test_detect_ties_checks_podium_positions_only():
    resolver = TieBreakerResolver()
    standings = [
        Standing(participant_id="A", points=9, games_won=30, games_lost=10),
        Standing(participant_id="B", points=7, games_won=20, games_lost=20),
        Standing(participant_id="C", points=5, games_won=15, games_lost=20),
        Standing(participant_id="D", points=3, games_won=10, games_lost=20),
        Standing(participant_id="E", points=3, games_won=10, games_lost=20),
    ]

    # D and E are level but sit at positions 4 and 5
    assert resolver.detect_ties(standings) == []

    standings[3].points = 5
    standings[3].games_won = 15
    assert resolver.detect_ties(standings) == ["C", "D"]

    standings[1].tiebreaker_wins = 0
    standings[2].tiebreaker_wins = 1
    assert resolver.detect_ties(standings) == []


def test_no_tie_raises():
    with pytest.raises(NoTieDetectedException):
        TieBreakerResolver().generate_tie_breakers(["A"])
