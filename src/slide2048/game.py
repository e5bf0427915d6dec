"""
Game state and spawn policy
"""

from typing import NamedTuple, Optional

import numpy as np

from slide2048.board import (
    ITEM_VALUES,
    is_lost,
    max_exponent,
    move_board,
    new_board,
)


class NoSpaceError(RuntimeError):
    """No empty cell is left for a new tile"""


class Snapshot(NamedTuple):
    score: int
    turns: int
    board: np.ndarray


class Summary(NamedTuple):
    status: str
    score: int
    turns: int
    maxcell: int


def spawn_tile(board: np.ndarray, rand: np.random.Generator) -> int:
    """
    Spawn one number in an empty cell

    Two draws are taken from ``rand`` in a fixed order: the position among
    the empty cells in row-major order, then the value.

    Returns the flat index of the new tile.
    """

    cells = board.reshape(-1)
    empty_indices = np.flatnonzero(cells == 0)
    if empty_indices.size == 0:
        raise NoSpaceError("No empty cell")

    target = rand.integers(0, empty_indices.size)
    idx = empty_indices[target].item()

    # 2 in nine cases out of ten, otherwise 4
    if rand.integers(0, 10):
        cells[idx] = 1
    else:
        cells[idx] = 2

    return idx


class Game:
    seed: Optional[int]
    turns: int
    score: int
    board: np.ndarray
    _rand: np.random.Generator

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.turns = 0
        self.score = 0
        self.board = new_board()
        self._rand = np.random.default_rng(seed)

        self.place_tile()
        self.place_tile()

    def place_tile(self) -> int:
        return spawn_tile(self.board, self._rand)

    def move(self, direction: int) -> bool:
        """
        Move the board without spawning.

        An accepted move counts as a turn and adds the merge score.
        """
        changed, score = move_board(self.board, direction)
        if changed:
            self.turns += 1
            self.score += score
        return changed

    def is_lost(self) -> bool:
        return is_lost(self.board)

    def maxcell(self) -> int:
        return int(ITEM_VALUES[max_exponent(self.board)])

    def snapshot(self) -> Snapshot:
        return Snapshot(
            score=self.score,
            turns=self.turns,
            board=self.board.copy(),
        )

    def summary(self, status: str) -> Summary:
        return Summary(
            status=status,
            score=self.score,
            turns=self.turns,
            maxcell=self.maxcell(),
        )
