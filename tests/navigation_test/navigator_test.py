from navigation.rehearsal.models import PlaybackStatus
from navigation.rehearsal.nav_config import RehearsalConfig
from navigation.rehearsal.navigator import RehearsalSystem
from navigation.rehearsal.scheduler import VirtualScheduler

from route_analyzer_test import sample_route


def make_system(tmp_path, **overrides):
    clock = VirtualScheduler()
    config = RehearsalConfig(log_dir=str(tmp_path), **overrides)
    return RehearsalSystem(config, scheduler=clock), clock


def test_no_route_reports_failure(tmp_path):
    system, _ = make_system(tmp_path)
    success, msg = system.analyze({"routes": []})

    assert success is False
    assert "route" in msg
    assert system.start_rehearsal() == (False, "Nothing to rehearse.")


def test_full_rehearsal_produces_stress_summary(tmp_path):
    system, clock = make_system(tmp_path)
    success, _ = system.analyze(sample_route())
    assert success

    ok, _ = system.start_rehearsal()
    assert ok
    system.sequencer.play()
    clock.run_until_idle()

    assert system.sequencer.status is PlaybackStatus.COMPLETED
    assert system.is_completed
    lingered = system.lingered
    assert len(lingered) == 3
    # decision points dwell 8 s, the rest 5 s
    assert lingered[0].dwell_seconds == 8.0
    assert "Most lingered moments" in system.debug_report()


def test_start_at_selected_junction(tmp_path):
    system, _ = make_system(tmp_path)
    system.analyze(sample_route())
    system.start_rehearsal(2)
    assert system.sequencer.current_index == 2


def test_new_analysis_tears_down_playback(tmp_path):
    system, clock = make_system(tmp_path)
    system.analyze(sample_route())
    system.start_rehearsal()
    system.sequencer.play()

    system.analyze(sample_route())
    assert system.sequencer.status is PlaybackStatus.IDLE
    assert clock.pending == 0
    assert not system.is_completed


def test_events_and_points_saved(tmp_path):
    system, clock = make_system(tmp_path, log_events=True)
    system.analyze(sample_route())
    system.start_rehearsal()
    system.sequencer.play()
    clock.run_until_idle()

    assert system.save(str(tmp_path / "report.csv"))
    assert (tmp_path / "decision_points.json").exists()
    assert (tmp_path / "rehearsal_session.jsonl").exists()
    assert (tmp_path / "report.csv").exists()


def test_overview_includes_summary(tmp_path):
    system, _ = make_system(tmp_path)
    system.analyze(sample_route())
    overview = system.overview()
    assert overview["total"] == len(system.points)
    assert overview["roundabouts"] == 1
    assert "→" in overview["summary"]
