"""
Play 2048 in the terminal.

Moves are read line by line from stdin: a, s, w, d then enter. q quits.
"""

import contextlib
import logging
import sys
from typing import Sequence

from slide2048.config import SessionConfig
from slide2048.game import Game
from slide2048.render import TextRenderer, format_summary
from slide2048.replay import ReplayPlayer, ReplayRecorder, open_replay
from slide2048.runner import KEY_QUIT, STATUS_LOST, GameRunner


def keyboard_input() -> str:
    try:
        line = input("Move: ")
    except EOFError:
        return KEY_QUIT

    line = line.strip()
    return line[:1]


def _make_logger(
    config: SessionConfig,
    stack: contextlib.ExitStack,
) -> logging.Logger | None:
    """Attach a file handler for this session, detached when the stack closes"""
    if config.log_file is None:
        return None

    logger = logging.getLogger("slide2048")
    logger.setLevel(logging.DEBUG)

    stream = logging.FileHandler(str(config.log_file), encoding="utf-8")
    stack.callback(stream.close)
    stream.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))

    logger.addHandler(stream)
    stack.callback(logger.removeHandler, stream)
    return logger


def main(argv: Sequence[str] | None = None) -> int:
    config = SessionConfig.from_args(argv)

    with contextlib.ExitStack() as stack:
        try:
            logger = _make_logger(config, stack)

            recfile = playfile = None
            if config.record_path is not None:
                recfile = stack.enter_context(open_replay(config.record_path, "w"))
            if config.playback_path is not None:
                playfile = stack.enter_context(open_replay(config.playback_path, "r"))
        except OSError as ex:
            # ReplayFileError or a log file that cannot be created
            print(f"{ex.filename}: {ex.strerror}", file=sys.stderr)
            return 1

        batch_mode = config.batch_mode

        player = None
        if playfile is not None:
            player = ReplayPlayer(
                playfile,
                delay_ms=config.delay_ms,
                throttle=not batch_mode,
                logger=logger,
            )
            input_source = player
        else:
            input_source = keyboard_input

        game = Game(config.seed)
        runner = GameRunner(game, input_source, batch_mode=batch_mode, logger=logger)

        if recfile is not None:
            runner.add_callback(
                GameRunner.EVENT_STEPPED, ReplayRecorder(recfile).on_stepped
            )
        if player is not None:
            runner.add_callback(GameRunner.EVENT_STEPPED, player.on_stepped)
        if not batch_mode:
            runner.add_callback(GameRunner.EVENT_RENDER, TextRenderer())

        summary = runner.run()

    if batch_mode:
        return 0

    if summary.status == STATUS_LOST:
        print("You lose!")
    print(format_summary(summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())
