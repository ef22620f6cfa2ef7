"""
Terminal 2048 Game
Plays 2048 in the terminal with coloured tiles and logs every move to JSON.
"""

import argparse
import json
import os
import random
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

from colorama import Cursor, Fore, Style, ansi, init

from game_2048 import (
    DEFAULT_COLS,
    DEFAULT_ROWS,
    Direction,
    MoveOutcome,
    add_random_tile,
    apply_move,
    as_direction,
    copy_grid,
    init_grid,
    is_terminal,
    max_tile,
)
from keypress import QUIT, key_to_command, read_command as read_key_command


CLEAR_SCREEN = ansi.clear_screen() + Cursor.POS(1, 1)

TILE_COLORS = {
    0: Fore.LIGHTBLACK_EX,
    2: Fore.LIGHTCYAN_EX,
    4: Fore.LIGHTMAGENTA_EX,
    8: Fore.LIGHTRED_EX,
    16: Fore.LIGHTGREEN_EX,
    32: Fore.LIGHTYELLOW_EX,
    64: Fore.LIGHTYELLOW_EX,
    128: Fore.CYAN,
    256: Fore.LIGHTCYAN_EX,
    512: Fore.MAGENTA,
    1024: Fore.LIGHTMAGENTA_EX,
}
DEFAULT_TILE_COLOR = Fore.LIGHTRED_EX

CELL_WIDTH = 6

HELP_LINE = "Use arrow keys (or WASD) to move the tiles. Press q or Ctrl-C to exit."


def tile_color(value: int) -> str:
    """Foreground colour code for a tile value."""
    return TILE_COLORS.get(value, DEFAULT_TILE_COLOR)


def render(grid, score: int) -> str:
    """
    Render the grid with one colour per tile value, then the score.
    Styling is reset after every cell so colours never bleed.
    """
    lines = ['']
    for row in grid:
        lines.append(''.join(
            f"{tile_color(val)}{val:>{CELL_WIDTH}}{Style.RESET_ALL}" for val in row
        ))
        lines.append('')
    lines.append(f"Score: {score}")
    return '\n'.join(lines)


class Game2048:
    """Live game state: the grid, the cumulative score and the move count."""

    def __init__(self, rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS, rng=None):
        self.grid = init_grid(rows, cols)
        self.score = 0
        self.moves = 0
        self.rng = rng or random.Random()

    def spawn(self):
        """Place a new tile and return ((row, col), value)."""
        self.grid, cell, value = add_random_tile(self.grid, self.rng)
        return cell, value

    def move(self, direction: Union[Direction, str]) -> MoveOutcome:
        outcome = apply_move(self.grid, direction)
        if outcome.changed:
            self.grid = outcome.grid
            self.score += outcome.score_delta
            self.moves += 1
        return outcome

    def is_over(self) -> bool:
        return is_terminal(self.grid)


LOG_PREFIX = 'game_log_'


def find_logs(log_dir: str) -> List[Path]:
    """Game logs in log_dir, oldest name first."""
    return sorted(Path(log_dir).glob(f'{LOG_PREFIX}*.json'))


def game_name(log_file: Union[str, Path]) -> str:
    """The part of a log's file name between game_log_ and .json."""
    name = Path(log_file).stem
    return name[len(LOG_PREFIX):] if name.startswith(LOG_PREFIX) else name


def write_log(log_file: str, game_log: list) -> None:
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    with open(log_file, 'w') as f:
        json.dump(game_log, f, indent=2)


def _spawn_entry(spawned):
    (row, col), value = spawned
    return {"row": row, "col": col, "value": value}


def play_game(read_command: Callable[[], Optional[Union[Direction, str]]],
              rows: int = DEFAULT_ROWS,
              cols: int = DEFAULT_COLS,
              log_file: Optional[str] = None,
              rng=None,
              max_moves: Optional[int] = None,
              out: Callable[[str], None] = print,
              clear_screen: bool = True) -> int:
    """
    Play a full game of 2048 and log all moves.

    Args:
        read_command: callable returning a Direction, QUIT, or None for
            input that is not a move
        rows: number of grid rows
        cols: number of grid columns
        log_file: path to the JSON log file, or None to skip logging
        rng: random.Random used for spawns
        max_moves: stop after this many accepted moves
        out: where rendered frames and messages go
        clear_screen: clear the terminal before every frame

    The log file is rewritten after every entry, rejected moves included,
    and the closing stats entry is written even when the loop raises.

    Returns:
        Final score
    """
    game = Game2048(rows, cols, rng)
    spawned = game.spawn()
    game_end_reason = "unknown"

    game_log = []

    def log_entry(entry):
        game_log.append(entry)
        if log_file:
            write_log(log_file, game_log)

    log_entry({
        "game_state": copy_grid(game.grid),
        "action": "INITIAL",
        "current_score": game.score,
        "score_delta": 0,
        "spawned": _spawn_entry(spawned),
    })

    try:
        while True:
            if clear_screen:
                out(CLEAR_SCREEN)
            out(render(game.grid, game.score))

            if game.is_over():
                out(f"{Fore.RED}Game Over! No moves left.{Style.RESET_ALL}")
                game_end_reason = "no_moves_available"
                break

            if max_moves is not None and game.moves >= max_moves:
                out("Maximum moves reached!")
                game_end_reason = "max_moves_reached"
                break

            out(HELP_LINE)
            try:
                command = read_command()
            except (KeyboardInterrupt, EOFError):
                command = QUIT

            if command == QUIT:
                out("Thanks for playing!")
                game_end_reason = "quit"
                break

            if command is None:
                continue

            direction = as_direction(command)
            outcome = game.move(direction)

            if not outcome.changed:
                log_entry({
                    "game_state": copy_grid(game.grid),
                    "action": direction.name,
                    "current_score": game.score,
                    "score_delta": 0,
                    "invalid_move": True,
                })
                continue

            spawned = game.spawn()
            log_entry({
                "game_state": copy_grid(game.grid),
                "action": direction.name,
                "current_score": game.score,
                "score_delta": outcome.score_delta,
                "spawned": _spawn_entry(spawned),
            })

    except Exception as e:
        out(f"Error occurred: {e}")
        game_end_reason = f"error: {e}"
        raise

    finally:
        out(f"Final Score: {game.score}")
        out(f"Total Moves: {game.moves}")
        out(f"Max Tile: {max_tile(game.grid)}")

        log_entry({
            "final_score": game.score,
            "total_moves": game.moves,
            "max_tile": max_tile(game.grid),
            "game_end_reason": game_end_reason,
        })
        if log_file:
            out(f"Game log saved to: {log_file}")

    return game.score


def read_line_command():
    """Read a w/a/s/d/q command typed on its own line."""
    return key_to_command(input("\nEnter move: ").strip())


def main(argv=None):
    parser = argparse.ArgumentParser(description='Play 2048 in the terminal')
    parser.add_argument('--rows', type=int, default=DEFAULT_ROWS, help='Number of grid rows (default: 4)')
    parser.add_argument('--cols', type=int, default=DEFAULT_COLS, help='Number of grid columns (default: 4)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for deterministic spawns')
    parser.add_argument('--log_file', type=str, default=None,
                        help='Path of the JSON game log (default: game_logs/game_log_<timestamp>.json)')
    parser.add_argument('--max_moves', type=int, default=None, help='Stop after this many moves')
    parser.add_argument('--line_input', action='store_true',
                        help='Type w/a/s/d/q followed by Enter instead of pressing keys')
    parser.add_argument('--no_clear', action='store_true', help='Do not clear the screen between moves')

    args = parser.parse_args(argv)

    if args.rows < 1 or args.cols < 1:
        parser.error("--rows and --cols must be positive")

    log_file = args.log_file
    if log_file is None:
        log_file = os.path.join("game_logs", f"{LOG_PREFIX}{datetime.now():%Y%m%d-%H%M%S}.json")

    init()
    return play_game(
        read_command=read_line_command if args.line_input else read_key_command,
        rows=args.rows,
        cols=args.cols,
        log_file=log_file,
        rng=random.Random(args.seed),
        max_moves=args.max_moves,
        clear_screen=not args.no_clear,
    )


if __name__ == "__main__":
    main()
