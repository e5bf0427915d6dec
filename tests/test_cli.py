import logging
from pathlib import Path

import numpy as np
import pytest

from slide2048 import cli
from slide2048.config import DEFAULT_DELAY_MS, SessionConfig
from slide2048.game import Snapshot, Summary
from slide2048.render import format_frame, format_summary


def test_config_defaults():
    config = SessionConfig.from_args([])
    assert isinstance(config.seed, int)
    assert config.delay_ms == DEFAULT_DELAY_MS == 250
    assert config.record_path is None
    assert config.playback_path is None
    assert not config.batch_mode


def test_config_batch_mode():
    config = SessionConfig.from_args(["-s", "9", "-r", "out.log", "-p", "in.log"])
    assert config.seed == 9
    assert config.record_path == Path("out.log")
    assert config.playback_path == Path("in.log")
    assert config.batch_mode

    assert not SessionConfig(seed=1, record_path=Path("out.log")).batch_mode
    assert not SessionConfig(seed=1, playback_path=Path("in.log")).batch_mode


def test_config_negative_delay():
    with pytest.raises(SystemExit):
        SessionConfig.from_args(["-d", "-5"])


def test_format_frame():
    board = np.zeros((4, 4), dtype=np.int8)
    board[0, 0] = 1
    board[3, 3] = 11
    frame = format_frame(Snapshot(score=36, turns=7, board=board))

    assert frame.splitlines() == [
        "Score:     36  Turns:    7",
        "",
        "   2    .    .    .",
        "   .    .    .    .",
        "   .    .    .    .",
        "   .    .    . 2048",
    ]


def test_format_summary():
    text = format_summary(Summary("lost", 1234, 150, 128))
    assert text == "You lost after scoring 1234 points in 150 turns, with largest tile 128"


def test_keyboard_input(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "  d\n")
    assert cli.keyboard_input() == "d"

    def eof(prompt):
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)
    assert cli.keyboard_input() == "q"


def test_missing_playback_file(tmp_path, capsys):
    path = tmp_path / "missing.log"
    assert cli.main(["-p", str(path)]) == 1

    err = capsys.readouterr().err
    assert str(path) in err


def test_batch_mode_rederives_log(tmp_path, capsys, recorded_game):
    _, log, _ = recorded_game(31, list("wasd" * 50))
    playback = tmp_path / "in.log"
    playback.write_text(log, encoding="utf-8")
    record = tmp_path / "out.log"

    assert cli.main(["-s", "31", "-p", str(playback), "-r", str(record)]) == 0

    assert record.read_text(encoding="utf-8") == log
    assert capsys.readouterr().out == ""


def test_watch_playback(tmp_path, capsys, recorded_game):
    summary, log, _ = recorded_game(8, list("dsaw" * 3))
    playback = tmp_path / "in.log"
    playback.write_text(log, encoding="utf-8")
    log_file = tmp_path / "session.log"

    argv = ["-s", "8", "-p", str(playback), "-d", "0", "--log-file", str(log_file)]
    assert cli.main(argv) == 0

    out = capsys.readouterr().out
    assert "Score:" in out
    assert out.rstrip().endswith(
        f"You quit after scoring {summary.score} points in {summary.turns} turns,"
        f" with largest tile {summary.maxcell}"
    )
    assert "Start game seed=8" in log_file.read_text(encoding="utf-8")


def test_unopenable_record_file(tmp_path, capsys, recorded_game):
    _, log, _ = recorded_game(4, list("wasd"))
    playback = tmp_path / "in.log"
    playback.write_text(log, encoding="utf-8")
    record = tmp_path / "missing" / "out.log"

    assert cli.main(["-s", "4", "-p", str(playback), "-r", str(record)]) == 1

    captured = capsys.readouterr()
    assert str(record) in captured.err
    assert captured.out == ""


def test_unopenable_log_file(tmp_path, capsys, recorded_game):
    _, log, _ = recorded_game(1, list("wasd"))
    playback = tmp_path / "in.log"
    playback.write_text(log, encoding="utf-8")
    record = tmp_path / "out.log"
    record.write_text("keep\n", encoding="utf-8")
    log_file = tmp_path / "missing" / "session.log"

    argv = ["-s", "1", "-p", str(playback), "-r", str(record)]
    assert cli.main(argv + ["--log-file", str(log_file)]) == 1

    assert str(log_file) in capsys.readouterr().err
    # the record file is left untouched
    assert record.read_text(encoding="utf-8") == "keep\n"


def test_log_file_per_session(tmp_path, recorded_game):
    _, log, _ = recorded_game(6, list("sdwa" * 3))
    playback = tmp_path / "in.log"
    playback.write_text(log, encoding="utf-8")
    first = tmp_path / "first.log"
    second = tmp_path / "second.log"

    argv = ["-s", "6", "-p", str(playback), "-r", str(tmp_path / "out.log")]
    assert cli.main(argv + ["--log-file", str(first)]) == 0
    size = len(first.read_text(encoding="utf-8"))

    assert cli.main(argv + ["--log-file", str(second)]) == 0

    assert len(first.read_text(encoding="utf-8")) == size
    assert "Start game seed=6" in second.read_text(encoding="utf-8")
    assert logging.getLogger("slide2048").handlers == []
