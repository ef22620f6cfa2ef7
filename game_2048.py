"""
Stateless 2048 Game Implementation
Pure functional approach: grids go in, new grids come out.
"""

import random
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union


Grid = List[List[int]]
Coord = Tuple[int, int]

DEFAULT_ROWS = 4
DEFAULT_COLS = 4

# Probability of spawning a 2-tile or a 4-tile
SPAWN_RATES = {2: 0.95, 4: 0.05}


class Direction(Enum):
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'


DIRECTIONS = [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]


class MoveOutcome(NamedTuple):
    grid: Grid
    score_delta: int
    changed: bool


def as_direction(direction: Union[Direction, str]) -> Direction:
    """
    Accept a Direction or one of 'up', 'down', 'left', 'right' (any case).

    Raises:
        ValueError: if the value names no direction
    """
    if isinstance(direction, Direction):
        return direction
    try:
        return Direction(str(direction).lower())
    except ValueError:
        raise ValueError(f"Invalid direction: {direction}. Must be 'left', 'right', 'up', or 'down'") from None


def init_grid(rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS) -> Grid:
    """
    Create an empty rows x cols grid.

    The game loop places the first tile itself, the same way it places
    every tile after a successful move.
    """
    if rows < 1 or cols < 1:
        raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
    return [[0] * cols for _ in range(rows)]


def copy_grid(grid: Sequence[Sequence[int]]) -> Grid:
    return [list(row) for row in grid]


def empty_cells(grid: Sequence[Sequence[int]]) -> List[Coord]:
    return [
        (i, j) for i, row in enumerate(grid) for j, val in enumerate(row) if val == 0
    ]


def add_random_tile(grid: Sequence[Sequence[int]], rng=random) -> Tuple[Grid, Coord, int]:
    """
    Put a 2 (95%) or a 4 (5%) on a uniformly chosen empty cell.

    Args:
        grid: grid to spawn into, left untouched
        rng: source of randomness (the random module or a random.Random)

    Returns:
        Tuple of (new grid, (row, col) of the spawned tile, spawned value)

    Raises:
        ValueError: if the grid has no empty cell
    """
    empty_positions = empty_cells(grid)
    if not empty_positions:
        raise ValueError("Cannot spawn a tile: the grid has no empty cell")

    i, j = rng.choice(empty_positions)
    value = rng.choices(list(SPAWN_RATES), weights=list(SPAWN_RATES.values()), k=1)[0]

    new_grid = copy_grid(grid)
    new_grid[i][j] = value
    return new_grid, (i, j), value


def line_coordinates(direction: Direction, rows: int, cols: int) -> List[List[Coord]]:
    """
    Map a direction onto the lines it moves tiles along.

    Each line is a list of (row, col) cells ordered from the edge the tiles
    travel towards back to the opposite edge, so position 0 of every line is
    the target edge whatever the direction.
    """
    if direction is Direction.LEFT:
        return [[(r, c) for c in range(cols)] for r in range(rows)]
    if direction is Direction.RIGHT:
        return [[(r, c) for c in reversed(range(cols))] for r in range(rows)]
    if direction is Direction.UP:
        return [[(r, c) for r in range(rows)] for c in range(cols)]
    return [[(r, c) for r in reversed(range(rows))] for c in range(cols)]


def _sweep_line(line: List[int]) -> Tuple[int, bool]:
    """
    Slide and merge one line towards position 0, in place.

    Tiles are visited from position 1 outward. Each one slides towards the
    edge over empty cells; it merges into the tile it stops at when the
    values match and that tile is not already the result of a merge in this
    sweep, otherwise it settles right behind it.

    Returns:
        Tuple of (score gained, whether anything moved or merged)
    """
    merged = [False] * len(line)
    score = 0
    changed = False

    for j in range(1, len(line)):
        value = line[j]
        if value == 0:
            continue

        k = j - 1
        while k >= 0 and line[k] == 0:
            k -= 1

        if k >= 0 and line[k] == value and not merged[k]:
            line[k] = value * 2
            line[j] = 0
            merged[k] = True
            score += value * 2
            changed = True
        else:
            target = k + 1
            if target != j:
                line[j] = 0
                line[target] = value
                changed = True

    return score, changed


def apply_move(grid: Sequence[Sequence[int]], direction: Union[Direction, str]) -> MoveOutcome:
    """
    Shift all tiles in the given direction, merging equal neighbours once.

    Args:
        grid: current grid (list of lists), not modified
        direction: a Direction or one of 'left', 'right', 'up', 'down'

    Returns:
        MoveOutcome(grid, score_delta, changed) where grid is a fresh grid,
        score_delta is the sum of every merged tile produced and changed is
        True iff any cell differs from the input
    """
    direction = as_direction(direction)
    new_grid = copy_grid(grid)
    rows = len(new_grid)
    cols = len(new_grid[0]) if rows else 0

    score_delta = 0
    changed = False
    for coords in line_coordinates(direction, rows, cols):
        line = [new_grid[r][c] for r, c in coords]
        line_score, line_changed = _sweep_line(line)
        if line_changed:
            for (r, c), val in zip(coords, line):
                new_grid[r][c] = val
            changed = True
        score_delta += line_score

    return MoveOutcome(new_grid, score_delta, changed)


def can_move(grid: Sequence[Sequence[int]], direction: Union[Direction, str]) -> bool:
    return apply_move(grid, direction).changed


def is_terminal(grid: Sequence[Sequence[int]]) -> bool:
    """
    Check if the game is over (no direction changes the grid).

    An empty cell alone does not make a grid playable: a 1x2 grid [[2, 0]]
    moves right but [[0]] never moves at all.
    """
    return not any(can_move(grid, direction) for direction in DIRECTIONS)


def max_tile(grid: Sequence[Sequence[int]]) -> int:
    return max((max(row) for row in grid if row), default=0)


def display(grid: Sequence[Sequence[int]], score: Optional[int] = None) -> str:
    """
    Display a grid as a markdown table, optionally followed by the score.

    Args:
        grid: grid to display
        score: accumulated merge score; omitted from the output when None
    """
    res = ''
    width = max(4, len(str(max_tile(grid))))
    for row in grid:
        res += "| " + " | ".join(f"{val if val else '':^{width}}" for val in row) + " |\n"

    if score is not None:
        res += f"\nScore: {score}"

    return res
