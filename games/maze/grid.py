"""Maze grid generation and path queries.

Grids are square ``numpy`` arrays with ``WALL`` (1) and ``PATH`` (0)
cells.  Generation is a randomized depth-first carve over the odd
coordinates starting at ``(1, 1)``; it is written with an explicit stack
so large grids do not hit the interpreter recursion limit, but visits
cells in the same order as the recursive formulation.
"""

from __future__ import annotations

from collections import deque

import numpy as np

WALL = 1
PATH = 0

Cell = tuple[int, int]

DIRECTIONS: tuple[Cell, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def generate_maze(size: int, rng: np.random.Generator) -> np.ndarray:
    """Carve a perfect maze into a ``size x size`` wall grid.

    Parameters
    ----------
    size : int
        Side length.  Must be odd and at least 3 so that the entry
        ``(1, 1)`` and exit ``(size-2, size-2)`` sit on carved cells.
    rng : np.random.Generator
        Source of the neighbour visiting order.

    Returns
    -------
    np.ndarray
        ``int8`` grid with ``PATH`` cells carved.

    Raises
    ------
    ValueError
        If ``size`` is even or smaller than 3.
    """
    if size < 3 or size % 2 == 0:
        raise ValueError(f"Maze size must be an odd number >= 3, got {size}")

    grid = np.full((size, size), WALL, dtype=np.int8)
    grid[1, 1] = PATH
    stack = [((1, 1), _shuffled_directions(rng))]

    while stack:
        (row, col), pending = stack[-1]
        if not pending:
            stack.pop()
            continue
        d_row, d_col = pending.pop(0)
        next_row, next_col = row + 2 * d_row, col + 2 * d_col
        if next_row <= 0 or next_col <= 0 or next_row >= size - 1 or next_col >= size - 1:
            continue
        if grid[next_row, next_col] == WALL:
            grid[row + d_row, col + d_col] = PATH
            grid[next_row, next_col] = PATH
            stack.append(((next_row, next_col), _shuffled_directions(rng)))

    grid[1, 1] = PATH
    grid[size - 2, size - 2] = PATH
    return grid


def _shuffled_directions(rng: np.random.Generator) -> list[Cell]:
    return [DIRECTIONS[i] for i in rng.permutation(len(DIRECTIONS))]


def is_open(grid: np.ndarray, cell: Cell) -> bool:
    """True if ``cell`` is inside the grid and not a wall."""
    row, col = cell
    rows, cols = grid.shape
    return 0 <= row < rows and 0 <= col < cols and grid[row, col] == PATH


def open_cells(grid: np.ndarray) -> set[Cell]:
    """All path cells as ``(row, col)`` tuples."""
    return {(int(r), int(c)) for r, c in np.argwhere(grid == PATH)}


def reachable_from(grid: np.ndarray, start: Cell) -> set[Cell]:
    """Breadth-first flood fill of path cells connected to ``start``."""
    if not is_open(grid, start):
        return set()
    seen = {start}
    queue = deque([start])
    while queue:
        row, col = queue.popleft()
        for d_row, d_col in DIRECTIONS:
            nxt = (row + d_row, col + d_col)
            if nxt not in seen and is_open(grid, nxt):
                seen.add(nxt)
                queue.append(nxt)
    return seen


def shortest_path(grid: np.ndarray, start: Cell, goal: Cell) -> list[Cell] | None:
    """Shortest sequence of cells from ``start`` to ``goal`` (both included).

    Returns None when ``goal`` is unreachable.
    """
    if not is_open(grid, start) or not is_open(grid, goal):
        return None
    parents: dict[Cell, Cell | None] = {start: None}
    queue = deque([start])
    while queue:
        cell = queue.popleft()
        if cell == goal:
            path = []
            node: Cell | None = cell
            while node is not None:
                path.append(node)
                node = parents[node]
            return path[::-1]
        row, col = cell
        for d_row, d_col in DIRECTIONS:
            nxt = (row + d_row, col + d_col)
            if nxt not in parents and is_open(grid, nxt):
                parents[nxt] = cell
                queue.append(nxt)
    return None
