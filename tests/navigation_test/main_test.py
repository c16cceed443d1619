import json

from navigation.rehearsal.main import main

from route_analyzer_test import sample_route


def test_cli_rehearses_route(tmp_path, capsys):
    route_file = tmp_path / "route.json"
    route_file.write_text(json.dumps(sample_route()), encoding="utf-8")

    code = main([str(route_file), "--log-dir", str(tmp_path), "--csv", str(tmp_path / "r.csv")])
    out = capsys.readouterr().out

    assert code == 0
    assert "--- Rehearsal ---" in out
    assert "Most lingered moments" in out
    assert (tmp_path / "r.csv").exists()


def test_cli_straightforward_route(tmp_path, capsys):
    route_file = tmp_path / "route.json"
    route_file.write_text(json.dumps({"routes": [{"legs": []}]}), encoding="utf-8")

    assert main([str(route_file), "--log-dir", str(tmp_path)]) == 0
    assert "straightforward drive" in capsys.readouterr().out


def test_cli_unreadable_route(tmp_path):
    assert main([str(tmp_path / "missing.json"), "--log-dir", str(tmp_path)]) == 1
