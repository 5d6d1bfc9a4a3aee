"""
Yayagram board text format.

Each cell is drawn 4 characters wide and 2 lines tall, `1` when filled and a
space when empty:

    +--------+
    |1111    |
    |1111    |
    +--------+
    1: filled
    Automatically generated using img2yaya
"""
from __future__ import annotations

from typing import BinaryIO

import numpy as np

FILLED_CHAR = "1"
EMPTY_CHAR = " "
CELL_WIDTH = 4
CELL_HEIGHT = 2

LEGEND = f"{FILLED_CHAR}: filled"
ATTRIBUTION = "Automatically generated using img2yaya"


def _border(cols: int) -> str:
    return "+" + "-" * (cols * CELL_WIDTH) + "+"


def _row_content(row: np.ndarray) -> str:
    return "".join((FILLED_CHAR if filled else EMPTY_CHAR) * CELL_WIDTH for filled in row)


def board_lines(grid: np.ndarray) -> list[str]:
    """Board lines without line terminators, borders and trailer included."""
    grid = np.asarray(grid, dtype=bool)
    if grid.size == 0 and grid.ndim < 2:
        grid = grid.reshape(0, 0)
    if grid.ndim != 2:
        raise ValueError(f"Expected a 2-D cell grid, got shape {grid.shape}")
    rows, cols = grid.shape
    border = _border(cols)
    lines = [border]
    for r in range(rows):
        line = "|" + _row_content(grid[r]) + "|"
        lines.extend([line] * CELL_HEIGHT)
    lines.append(border)
    lines.append(LEGEND)
    lines.append(ATTRIBUTION)
    return lines


def encode_board(grid: np.ndarray) -> bytes:
    return "".join(line + "\n" for line in board_lines(grid)).encode("ascii")


def write_board(grid: np.ndarray, sink: BinaryIO) -> None:
    """Write the whole board to `sink` in one write, then flush it."""
    sink.write(encode_board(grid))
    sink.flush()
