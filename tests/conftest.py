import io
from typing import Callable, Iterable

import pytest

from slide2048.game import Game, Summary
from slide2048.replay import ReplayRecorder
from slide2048.runner import KEY_QUIT, GameRunner


def key_source(keys: Iterable[str]) -> Callable[[], str]:
    """Input source yielding keys, then quit"""
    it = iter(keys)
    return lambda: next(it, KEY_QUIT)


def play_recorded(seed: int, keys: Iterable[str]) -> tuple[Summary, str, Game]:
    sink = io.StringIO()
    game = Game(seed)
    runner = GameRunner(game, key_source(keys), batch_mode=True)
    runner.add_callback(GameRunner.EVENT_STEPPED, ReplayRecorder(sink).on_stepped)
    summary = runner.run()
    return summary, sink.getvalue(), game


@pytest.fixture
def recorded_game():
    return play_recorded
