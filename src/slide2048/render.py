import sys
from typing import TextIO

from slide2048.board import ITEM_VALUES
from slide2048.game import Snapshot, Summary


def format_tile(power: int) -> str:
    if not power:
        return "   ."
    return f"{ITEM_VALUES[power]:4d}"


def format_frame(snapshot: Snapshot) -> str:
    lines = [f"Score: {snapshot.score:6d}  Turns: {snapshot.turns:4d}", ""]

    for row in snapshot.board:
        lines.append(" ".join(format_tile(int(p)) for p in row))

    return "\n".join(lines)


def format_summary(summary: Summary) -> str:
    return (
        f"You {summary.status} after scoring {summary.score} points"
        f" in {summary.turns} turns, with largest tile {summary.maxcell}"
    )


class TextRenderer:
    """GameRunner render callback printing plain text frames"""

    def __init__(self, output: TextIO | None = None):
        self._output = output

    def __call__(self, snapshot: Snapshot):
        output = self._output if self._output is not None else sys.stdout
        print(format_frame(snapshot), end="\n\n", file=output)
