"""
Board and move engine

The board is a square grid of exponents: a cell holding ``v`` is the tile
``2 ** v`` and ``0`` is an empty cell.

Only the left move is implemented. The other directions rotate the board so
that the requested direction points left, move left and rotate back.
"""

import numpy as np
from numba import njit

"""
+----+----+----+----+
|  0 |  1 |  2 |  3 |
|  4 |  5 |  6 |  7 |
|  8 |  9 | 10 | 11 |
| 12 | 13 | 14 | 15 |
+----+----+----+----+
"""

BOARD_SIZE = 4
BOARD_SHAPE = (BOARD_SIZE, BOARD_SIZE)
BOARD_DTYPE = np.int8

STEP_LEFT = 0
STEP_RIGHT = 1
STEP_UP = 2
STEP_DOWN = 3

DIRECTIONS = (STEP_LEFT, STEP_RIGHT, STEP_UP, STEP_DOWN)

# Clockwise quarter turns that bring a direction to the left
_ROTATIONS = {
    STEP_LEFT: 0,
    STEP_RIGHT: 2,
    STEP_UP: 3,
    STEP_DOWN: 1,
}

# Map exponent to its rendered value.
ITEM_VALUES = np.array(
    [
        0,  # 0
        2,
        4,
        8,
        16,
        32,
        64,
        128,
        256,  # 8
        512,
        1024,
        2048,
        4096,
        8192,
        16384,
        32768,
        65536,  # 16
        131072,  # 17
    ],
    dtype=np.int32,
)


def new_board() -> np.ndarray:
    return np.zeros(BOARD_SHAPE, dtype=BOARD_DTYPE)


@njit
def _deflate(row: np.ndarray) -> bool:
    """Slide non-zero cells to the left. Return True if any cell moved."""
    size = row.shape[0]
    moved = False
    w = 0  # write pointer

    for r in range(size):  # read pointer
        num = row[r]
        if num == 0:
            continue

        if w != r:
            row[w] = num
            moved = True
        w += 1

    while w < size:
        row[w] = 0
        w += 1

    return moved


@njit
def _combine(row: np.ndarray) -> tuple[bool, int]:
    """
    Merge equal neighbours in one left-to-right sweep.

    The right cell of a pair is cleared so it cannot take part in another
    merge during the same sweep.
    """
    combined = False
    score = 0

    for c in range(1, row.shape[0]):
        if row[c] != 0 and row[c - 1] == row[c]:
            row[c - 1] += 1
            row[c] = 0
            score += 1 << np.int64(row[c - 1])
            combined = True

    return combined, score


@njit
def _resolve_row(row: np.ndarray) -> tuple[bool, int]:
    changed = _deflate(row)

    combined, score = _combine(row)
    if combined:
        changed = True

    if _deflate(row):
        changed = True

    return changed, score


@njit
def _move_left(board: np.ndarray) -> tuple[bool, int]:
    changed = False
    score = 0

    for r in range(board.shape[0]):
        row_changed, row_score = _resolve_row(board[r])
        if row_changed:
            changed = True
        score += row_score

    return changed, score


def resolve_line(line) -> tuple[np.ndarray, bool, int]:
    """
    Move one line of exponents to the left.

    A tuple:

    1. The resolved line, a new array
    2. Did any cell move or merge?
    3. Score gained from merges
    """
    row = np.array(line, dtype=BOARD_DTYPE)
    changed, score = _resolve_row(row)
    return row, bool(changed), int(score)


def rotate_clockwise(board: np.ndarray, times: int = 1) -> np.ndarray:
    """Rotate by ``times`` quarter turns clockwise into a new array"""
    return np.rot90(board, -(times % 4)).copy()


def move_board(board: np.ndarray, direction: int) -> tuple[bool, int]:
    """
    Move the board in place.

    Return whether the board changed and the score gained.
    """
    try:
        turns = _ROTATIONS[direction]
    except KeyError:
        raise ValueError(f"Bad direction {direction!r}") from None

    work = rotate_clockwise(board, turns)
    changed, score = _move_left(work)

    if changed:
        board[:, :] = rotate_clockwise(work, 4 - turns)

    return bool(changed), int(score)


def would_move(board: np.ndarray, direction: int) -> bool:
    """Test a move on a throwaway copy"""
    changed, _ = move_board(board.copy(), direction)
    return changed


def valid_actions(board: np.ndarray) -> np.ndarray:
    """
    Given a board, return the mask of directions that change it.

    The mask is indexed by direction constant.
    """
    result = np.zeros((len(DIRECTIONS),), dtype=np.bool_)
    for direction in DIRECTIONS:
        result[direction] = would_move(board, direction)
    return result


def is_lost(board: np.ndarray) -> bool:
    return not valid_actions(board).any()


def max_exponent(board: np.ndarray) -> int:
    return int(board.max())
