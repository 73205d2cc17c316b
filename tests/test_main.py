"""
Test script for the command line entry point

Runs the Application end to end on a Qt event loop inside a temporary
working directory, so config.json and game_state.json never touch the
checkout.

Usage:
    python tests/test_main.py
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

QtCore = pytest.importorskip("PyQt5.QtCore")

from main import Application, parse_args
from fifteen.game_state import GAME_STATE_FILE
from fifteen.settings import DEFAULT_SETTINGS, SETTINGS_FILE


@pytest.fixture(scope="module")
def qt_app():
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    yield app


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = dict(DEFAULT_SETTINGS, comparison_pause_ms=0, move_delay_ms=0)
    (tmp_path / SETTINGS_FILE).write_text(json.dumps(settings), encoding="utf-8")
    return tmp_path


def run_cli(app, argv):
    application = Application(parse_args(argv))
    application.setup()
    return application, application.run(app)


def test_solve_mode_replays_and_saves(qt_app, workdir, capsys):
    application, code = run_cli(qt_app, ["--depth", "6", "--seed", "3", "--strategy", "astar"])

    assert code == 0
    assert application.manager.game.win
    assert application.manager.board.is_goal()
    assert "Final board" in capsys.readouterr().out

    saved = json.loads((workdir / GAME_STATE_FILE).read_text(encoding="utf-8"))
    assert saved["win"] is True
    assert saved["selectedAlgorithm"] == "astar"

    settings = json.loads((workdir / SETTINGS_FILE).read_text(encoding="utf-8"))
    assert settings["strategy_name"] == "astar"


def test_compare_mode_prints_ranked_table(qt_app, workdir, capsys):
    application, code = run_cli(qt_app, ["--compare", "--depth", "4", "--seed", "5", "--no-playback"])

    assert code == 0
    assert len(application.manager.comparison_results) == 6
    assert not application.manager.game.win

    out = capsys.readouterr().out
    for label in ("Greedy", "BFS", "Weighted A*", "Beam Search", "A*", "IDA*"):
        assert label in out


def test_failed_search_gives_nonzero_exit(qt_app, workdir):
    settings = dict(DEFAULT_SETTINGS, single_timeout_sec=0.05, move_delay_ms=0)
    (workdir / SETTINGS_FILE).write_text(json.dumps(settings), encoding="utf-8")
    (workdir / GAME_STATE_FILE).write_text(json.dumps({
        "tiles": [14, 13, 7, 11, 9, 10, 8, 12, 1, 5, 4, 0, 2, 6, 3, ""],
    }), encoding="utf-8")

    application, code = run_cli(qt_app, ["--strategy", "idastar", "--no-playback"])

    assert code == 1
    assert application.manager.last_result.timed_out
    assert not application.manager.game.win


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
