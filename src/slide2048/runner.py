import logging
from typing import Any, Callable

from slide2048.board import STEP_DOWN, STEP_LEFT, STEP_RIGHT, STEP_UP
from slide2048.event import EventEmitter
from slide2048.game import Game, NoSpaceError, Summary

STATUS_PLAYING = "playing"
STATUS_LOST = "lost"
STATUS_QUIT = "quit"

KEY_QUIT = "q"
ACTION_QUIT = -1

_KEY_ACTIONS = {
    "a": STEP_LEFT,
    "s": STEP_DOWN,
    "w": STEP_UP,
    "d": STEP_RIGHT,
    "KEY_LEFT": STEP_LEFT,
    "KEY_DOWN": STEP_DOWN,
    "KEY_UP": STEP_UP,
    "KEY_RIGHT": STEP_RIGHT,
    KEY_QUIT: ACTION_QUIT,
}

# Key written to replay logs for each direction
DIRECTION_KEYS = {
    STEP_LEFT: "a",
    STEP_DOWN: "s",
    STEP_UP: "w",
    STEP_RIGHT: "d",
}

InputSource = Callable[[], str]


def parse_key(key: str) -> int | None:
    """
    Map a key to a direction constant or ACTION_QUIT.

    None for keys without a binding.
    """
    return _KEY_ACTIONS.get(key)


class GameRunner:
    """
    Drive one game from an input source until it is lost or quit.

    Every iteration renders, checks for loss, then reads one key.
    An accepted move spawns a tile before the stepped event fires.
    """

    EVENT_RENDER: str = "render"
    """
    args: (snapshot,)
    """

    EVENT_STEPPED: str = "stepped"
    """
    args: (key, game)
    """

    EVENT_FINISHED: str = "finished"
    """
    args: (summary,)
    """

    def __init__(
        self,
        game: Game,
        input_source: InputSource,
        *,
        batch_mode: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.game = game
        self.batch_mode = batch_mode
        self.status = STATUS_PLAYING

        self._input_source = input_source
        self._logger = logger
        self._emitter = EventEmitter(
            (self.EVENT_RENDER, self.EVENT_STEPPED, self.EVENT_FINISHED)
        )

    def add_callback(self, event: str, fn: Callable[..., Any]):
        self._emitter.add_listener(event, fn)

    @property
    def finished(self) -> bool:
        return self.status != STATUS_PLAYING

    def _log(self, level: int, msg: str, *args):
        if self._logger is not None:
            self._logger.log(level, msg, *args)

    def feed(self, key: str) -> str:
        """Apply one key and return the new status"""

        if self.finished:
            raise RuntimeError(f"Game is {self.status}")

        action = parse_key(key)

        if action is None:
            return self.status

        if action == ACTION_QUIT:
            self.status = STATUS_QUIT
            self._log(logging.INFO, "Quit at turn %d", self.game.turns)
            return self.status

        if not self.game.move(action):
            return self.status

        try:
            self.game.place_tile()
        except NoSpaceError:
            # unreachable in a normal game: an accepted move on a full board
            # always merges something
            self.status = STATUS_LOST
            self._log(logging.WARNING, "No space after turn %d", self.game.turns)

        record_key = DIRECTION_KEYS[action]
        self._log(
            logging.DEBUG,
            "turn=%d key=%s score=%d",
            self.game.turns,
            record_key,
            self.game.score,
        )
        self._emitter.emit(self.EVENT_STEPPED, record_key, self.game)

        return self.status

    def step_once(self) -> str:
        if self.finished:
            raise RuntimeError(f"Game is {self.status}")

        if not self.batch_mode:
            self._emitter.emit(self.EVENT_RENDER, self.game.snapshot())

        if self.game.is_lost():
            self.status = STATUS_LOST
            self._log(
                logging.INFO,
                "Lost at turn %d with score %d",
                self.game.turns,
                self.game.score,
            )
            return self.status

        return self.feed(self._input_source())

    def run(self) -> Summary:
        self._log(
            logging.INFO,
            "Start game seed=%r batch_mode=%s",
            self.game.seed,
            self.batch_mode,
        )

        while not self.finished:
            self.step_once()

        summary = self.game.summary(self.status)
        self._emitter.emit(self.EVENT_FINISHED, summary)
        return summary
