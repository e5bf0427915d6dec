"""
Record and play back games.

A replay log is plain text with one line per accepted move::

    a:4
    s:8
    d:8

The key is the input that moved the board and the number is the score once
the move and its spawn are done. Playback only feeds the keys back to the
game, the scores are checked but never applied.
"""

import logging
import re
import time
from pathlib import Path
from typing import Callable, NamedTuple, TextIO

from slide2048.game import Game, Summary
from slide2048.runner import KEY_QUIT, GameRunner

_RECORD_PATTERN = re.compile(r"[ \t]*(?P<key>\S):(?P<score>-?\d+)[ \t]*\r?\n?")


class ReplayFileError(OSError):
    """A record or playback file cannot be opened"""


class ReplayRecord(NamedTuple):
    key: str
    score: int


def format_record(key: str, score: int) -> str:
    return f"{key}:{score}\n"


def parse_record(line: str) -> ReplayRecord | None:
    """
    Parse one log line.

    Leading spaces and tabs are ignored. Returns None for a blank,
    short or malformed line.
    """
    match = _RECORD_PATTERN.fullmatch(line)
    if match is None:
        return None
    return ReplayRecord(match["key"], int(match["score"]))


def open_replay(path: str | Path, mode: str) -> TextIO:
    """
    Open a replay log as line-buffered text.

    :param mode: "w" to record, "r" to play back
    """
    assert mode in ("r", "w"), mode

    try:
        return open(path, mode, encoding="utf-8", buffering=1)
    except OSError as ex:
        raise ReplayFileError(ex.errno, ex.strerror, str(path)) from ex


class ReplayRecorder:
    def __init__(self, stream: TextIO):
        self._stream = stream
        self.count = 0

    def record(self, key: str, score: int):
        self._stream.write(format_record(key, score))
        self._stream.flush()
        self.count += 1

    def on_stepped(self, key: str, game: Game):
        """GameRunner callback"""
        self.record(key, game.score)


class ReplayPlayer:
    """
    Input source reading keys from a replay log.

    Each call returns the key of the next record. End of input and bad
    lines turn into the quit key.
    """

    last_record: ReplayRecord | None

    def __init__(
        self,
        stream: TextIO,
        *,
        delay_ms: int = 250,
        throttle: bool = True,
        logger: logging.Logger | None = None,
        sleep: Callable[[float], object] = time.sleep,
    ):
        assert delay_ms >= 0, delay_ms

        self._stream = stream
        self._delay = delay_ms / 1000
        self._throttle = throttle
        self._logger = logger
        self._sleep = sleep

        self.line_no = 0
        self.mismatches = 0
        self.last_record = None

    def __call__(self) -> str:
        return self.read_key()

    def read_key(self) -> str:
        if self._throttle:
            self._sleep(self._delay)

        line = self._stream.readline()
        self.last_record = None

        if not line:
            return KEY_QUIT

        self.line_no += 1
        record = parse_record(line)

        if record is None:
            if line.strip() and self._logger is not None:
                self._logger.warning(
                    "Bad record at line %d: %r, stop playing", self.line_no, line
                )
            return KEY_QUIT

        self.last_record = record
        return record.key

    def on_stepped(self, key: str, game: Game):
        """GameRunner callback, compare the score with the log"""
        record = self.last_record
        if record is None or record.score == game.score:
            return

        self.mismatches += 1
        if self._logger is not None:
            self._logger.warning(
                "Score mismatch at line %d: log=%d game=%d",
                self.line_no,
                record.score,
                game.score,
            )


def replay_file(
    path: str | Path,
    seed: int | None,
    *,
    sink: TextIO | None = None,
    logger: logging.Logger | None = None,
) -> tuple[Summary, int]:
    """
    Replay a log as fast as possible with a new game.

    :param sink: record the replayed game into it. Equal logs mean
        the game is reproducible with this seed.

    Return the summary and the number of score mismatches.
    """
    with open_replay(path, "r") as stream:
        player = ReplayPlayer(stream, throttle=False, logger=logger)
        runner = GameRunner(Game(seed), player, batch_mode=True, logger=logger)
        runner.add_callback(GameRunner.EVENT_STEPPED, player.on_stepped)

        if sink is not None:
            recorder = ReplayRecorder(sink)
            runner.add_callback(GameRunner.EVENT_STEPPED, recorder.on_stepped)

        summary = runner.run()

    return summary, player.mismatches
