import json

from clubleague.models import SetResult
from clubleague.repository import JsonFileCompetitionRepository
from clubleague.service import CompetitionService
from clubleague.testing.__main__ import run_standard_mode


def _stored(store):
    repository = JsonFileCompetitionRepository(store)
    (competition_id,) = repository.list_ids()
    return repository.get(competition_id)


def test_schedule_keeps_config_file_values(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(
        json.dumps({"courts": 3, "round_robin_cycles": 2, "slot_minutes": 60}),
        encoding="utf-8",
    )
    store = tmp_path / "store"

    code = run_standard_mode(
        [
            "schedule",
            "--participants",
            "4",
            "--config",
            str(config_file),
            "--store",
            str(store),
        ]
    )

    assert code == 0
    competition = _stored(store)
    assert competition.config.courts == 3
    assert competition.config.round_robin_cycles == 2
    assert competition.config.slot_minutes == 60
    assert len(competition.matches) == 12


def test_schedule_flags_override_config_file(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"courts": 3}), encoding="utf-8")
    store = tmp_path / "store"

    run_standard_mode(
        [
            "schedule",
            "--participants",
            "4",
            "--config",
            str(config_file),
            "--courts",
            "1",
            "--store",
            str(store),
        ]
    )

    competition = _stored(store)
    assert competition.config.courts == 1
    assert {m.court for m in competition.match_list} == {1}


def test_schedule_reports_unplayable_bracket(tmp_path, capsys):
    code = run_standard_mode(
        ["schedule", "--format", "round_robin_playoff", "--participants", "3"]
    )

    assert code == 1
    assert "configuration_error" in capsys.readouterr().out


def test_standings_of_a_stored_competition(tmp_path, capsys):
    store = tmp_path / "store"
    run_standard_mode(["schedule", "--participants", "4", "--store", str(store)])
    competition = _stored(store)

    service = CompetitionService(JsonFileCompetitionRepository(store))
    for match in competition.matches_for("P01"):
        if match.home_id == "P01":
            sets = [SetResult(6, 2), SetResult(6, 3)]
        else:
            sets = [SetResult(2, 6), SetResult(3, 6)]
        assert service.submit_result(match.id, sets)
    capsys.readouterr()

    code = run_standard_mode(
        [
            "standings",
            "--store",
            str(store),
            "--competition",
            competition.id,
            "--participant",
            "P01",
        ]
    )

    output = capsys.readouterr().out
    assert code == 0
    assert "Matches of P01" in output
    assert output.count(" won ") == 3
    assert "6-2 6-3" in output or "2-6 3-6" in output


def test_standings_store_needs_a_competition_id(tmp_path, capsys):
    code = run_standard_mode(["standings", "--store", str(tmp_path)])

    assert code == 1
    assert "--competition" in capsys.readouterr().out
