import pytest

from clubleague.controllers.competition import (
    FixtureManager,
    PlayoffStateMachine,
    ResultRecorder,
)
from clubleague.exceptions import (
    CompetitionCompletedException,
    InvalidResultException,
    InvalidSetScoreException,
    MatchNotFoundException,
    StateConflictException,
)
from clubleague.models import (
    Competition,
    CompetitionConfig,
    CompetitionFormat,
    CompetitionStatus,
    MatchPhase,
    MatchStatus,
    Participant,
    SetResult,
)


def _league(count=4, **config):
    competition = Competition(
        "Spring League",
        CompetitionFormat.ROUND_ROBIN,
        [Participant(id=f"P{i}") for i in range(1, count + 1)],
        config=CompetitionConfig(**config),
    )
    FixtureManager().generate_fixtures(competition)
    return competition


def test_winner_follows_the_sets():
    competition = _league()
    match = competition.match_list[0]

    recorded = ResultRecorder().record(
        competition, match.id, [SetResult(4, 6), SetResult(6, 3), SetResult(5, 7)]
    )

    assert recorded.status == MatchStatus.COMPLETED
    assert recorded.winner_id == match.away_id
    assert len(recorded.sets) == 3


def test_sets_accept_client_dictionaries():
    competition = _league()
    match = competition.match_list[0]

    recorded = ResultRecorder().record(
        competition,
        match.id,
        [
            {
                "team1Games": 7,
                "team2Games": 6,
                "tiebreak": {"team1Points": 7, "team2Points": 4},
            },
            {"home_games": 6, "away_games": 2},
        ],
    )

    assert recorded.winner_id == match.home_id
    assert recorded.sets[0].tiebreak.home_points == 7


def test_declared_winner_must_agree():
    competition = _league()
    match = competition.match_list[0]
    recorder = ResultRecorder()

    with pytest.raises(InvalidResultException):
        recorder.record(
            competition,
            match.id,
            [SetResult(6, 1), SetResult(6, 1)],
            declared_winner_id=match.away_id,
        )
    with pytest.raises(InvalidResultException):
        recorder.record(
            competition,
            match.id,
            [SetResult(6, 1), SetResult(6, 1)],
            declared_winner_id="P99",
        )
    assert match.status == MatchStatus.PENDING


def test_declared_winner_decides_level_sets():
    competition = _league()
    match = competition.match_list[0]

    recorded = ResultRecorder().record(
        competition,
        match.id,
        [SetResult(6, 4), SetResult(3, 6)],
        declared_winner_id=match.away_id,
    )

    assert recorded.winner_id == match.away_id


def test_draw_needs_draws_enabled():
    competition = _league()
    match = competition.match_list[0]

    with pytest.raises(InvalidResultException):
        ResultRecorder().record(
            competition, match.id, [SetResult(6, 4), SetResult(4, 6)]
        )

    drawn = _league(allow_draws=True)
    recorded = ResultRecorder().record(
        drawn, drawn.match_list[0].id, [SetResult(6, 4), SetResult(4, 6)]
    )
    assert recorded.winner_id is None
    assert recorded.is_completed


def test_malformed_scores_are_rejected():
    competition = _league()
    match = competition.match_list[0]

    with pytest.raises(InvalidSetScoreException):
        ResultRecorder().record(competition, match.id, [SetResult(7, 6)])
    with pytest.raises(InvalidSetScoreException):
        ResultRecorder().record(competition, match.id, [])
    with pytest.raises(MatchNotFoundException):
        ResultRecorder().record(competition, "missing", [SetResult(6, 0)])


def test_completed_competition_is_frozen():
    competition = _league()
    competition.status = CompetitionStatus.COMPLETED

    with pytest.raises(CompetitionCompletedException):
        ResultRecorder().record(
            competition,
            competition.match_list[0].id,
            [SetResult(6, 0), SetResult(6, 0)],
        )


def test_result_can_be_corrected_until_something_depends_on_it():
    competition = Competition(
        "Cup",
        CompetitionFormat.GROUPS_PLAYOFF,
        [Participant(id=f"P{i}") for i in range(1, 5)],
    )
    manager = FixtureManager()
    manager.assign_groups(
        competition, assignment={"P1": "A", "P2": "A", "P3": "B", "P4": "B"}
    )
    manager.generate_fixtures(competition)
    recorder = ResultRecorder()
    group_a, group_b = competition.match_list

    recorder.record(competition, group_a.id, [SetResult(6, 0), SetResult(6, 0)])
    recorder.record(competition, group_a.id, [SetResult(0, 6), SetResult(0, 6)])
    assert group_a.winner_id == group_a.away_id

    recorder.record(competition, group_b.id, [SetResult(6, 0), SetResult(6, 0)])
    PlayoffStateMachine().advance(competition)
    assert competition.matches_in_phase(MatchPhase.PLAYOFF)

    with pytest.raises(StateConflictException):
        recorder.record(competition, group_a.id, [SetResult(6, 0), SetResult(6, 0)])


def test_playoff_match_needs_a_winner():
    competition = Competition(
        "Cup",
        CompetitionFormat.GROUPS_PLAYOFF,
        [Participant(id=f"P{i}") for i in range(1, 5)],
        config=CompetitionConfig(allow_draws=True),
    )
    FixtureManager().generate_fixtures(competition, seed=3)
    recorder = ResultRecorder()
    for match in competition.match_list:
        recorder.record(competition, match.id, [SetResult(6, 2), SetResult(6, 2)])
    (semi_final, _) = PlayoffStateMachine().advance(competition).matches

    with pytest.raises(InvalidResultException):
        recorder.record(competition, semi_final.id, [SetResult(6, 4), SetResult(4, 6)])


def test_start_match():
    competition = _league()
    match = competition.match_list[0]
    recorder = ResultRecorder()

    assert recorder.start_match(competition, match.id).status == MatchStatus.IN_PROGRESS

    recorder.record(competition, match.id, [SetResult(6, 0), SetResult(6, 0)])
    with pytest.raises(StateConflictException):
        recorder.start_match(competition, match.id)
