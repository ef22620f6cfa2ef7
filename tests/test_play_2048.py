from __future__ import annotations

import io
import itertools
import json
import random

import pytest
from colorama import Fore, Style

import keypress
import play_2048
from game_2048 import Direction
from keypress import QUIT
from play_2048 import Game2048, play_game, render, tile_color


def _scripted(commands):
    it = iter(commands)
    return lambda: next(it)


def _play(commands, **kwargs):
    output: list[str] = []
    kwargs.setdefault("clear_screen", False)
    score = play_game(_scripted(commands), out=output.append, **kwargs)
    return score, output


def test_tile_color_per_value() -> None:
    assert tile_color(0) == Fore.LIGHTBLACK_EX
    assert tile_color(2) == Fore.LIGHTCYAN_EX
    assert tile_color(128) == Fore.CYAN
    assert tile_color(512) == Fore.MAGENTA
    assert tile_color(2048) == Fore.LIGHTRED_EX
    assert tile_color(65536) == Fore.LIGHTRED_EX


def test_render_resets_style_after_each_cell() -> None:
    text = render([[2, 0], [0, 1024]], 10)

    assert f"{Fore.LIGHTCYAN_EX}     2{Style.RESET_ALL}" in text
    assert f"{Fore.LIGHTMAGENTA_EX}  1024{Style.RESET_ALL}" in text
    assert text.count(Style.RESET_ALL) == 4
    assert text.endswith("Score: 10")


def test_game_only_scores_changed_moves(first_choice_rng) -> None:
    game = Game2048(2, 2, first_choice_rng)
    game.grid = [[2, 4], [4, 2]]

    outcome = game.move(Direction.LEFT)

    assert outcome.changed is False
    assert game.score == 0
    assert game.moves == 0
    assert game.is_over() is True

    game.grid = [[2, 2], [0, 0]]
    game.move("left")
    assert game.grid == [[4, 0], [0, 0]]
    assert game.score == 4
    assert game.moves == 1


def test_scripted_game_until_no_moves(tmp_path, first_choice_rng) -> None:
    log_file = tmp_path / "logs" / "game_log_scripted.json"

    score, output = _play(
        [Direction.LEFT, None, Direction.RIGHT, "left"],
        rows=1,
        cols=2,
        rng=first_choice_rng,
        log_file=str(log_file),
    )

    assert score == 4
    assert any("Game Over!" in line for line in output)
    assert "Final Score: 4" in output

    log = json.loads(log_file.read_text())
    assert [entry.get("action") for entry in log[:-1]] == ["INITIAL", "LEFT", "RIGHT", "LEFT"]

    initial, rejected, shifted, merged, final = log
    assert initial["game_state"] == [[2, 0]]
    assert initial["spawned"] == {"row": 0, "col": 0, "value": 2}
    assert rejected["invalid_move"] is True
    assert rejected["game_state"] == [[2, 0]]
    assert shifted["game_state"] == [[2, 2]]
    assert shifted["score_delta"] == 0
    assert merged["game_state"] == [[4, 2]]
    assert merged["score_delta"] == 4
    assert merged["current_score"] == 4
    assert final == {
        "final_score": 4,
        "total_moves": 2,
        "max_tile": 4,
        "game_end_reason": "no_moves_available",
    }


def test_single_cell_board_ends_before_reading_input() -> None:
    def never_called():
        raise AssertionError("input read on a terminal board")

    output: list[str] = []
    score = play_game(never_called, rows=1, cols=1, out=output.append, clear_screen=False)

    assert score == 0
    assert any("Game Over!" in line for line in output)


def test_quit_command_ends_game(tmp_path) -> None:
    log_file = tmp_path / "game_log_quit.json"

    score, output = _play([QUIT], rng=random.Random(0), log_file=str(log_file))

    assert score == 0
    assert "Thanks for playing!" in output
    final = json.loads(log_file.read_text())[-1]
    assert final["game_end_reason"] == "quit"
    assert final["total_moves"] == 0


def test_ctrl_c_quits_and_still_writes_log(tmp_path) -> None:
    log_file = tmp_path / "game_log_interrupted.json"

    def interrupt():
        raise KeyboardInterrupt

    play_game(interrupt, rng=random.Random(0), log_file=str(log_file), out=lambda _: None)

    assert json.loads(log_file.read_text())[-1]["game_end_reason"] == "quit"


def test_max_moves_stops_game(first_choice_rng) -> None:
    output: list[str] = []
    play_game(
        _scripted(itertools.cycle([Direction.RIGHT, Direction.LEFT])),
        rng=first_choice_rng,
        max_moves=1,
        out=output.append,
        clear_screen=False,
    )

    assert "Maximum moves reached!" in output
    assert "Total Moves: 1" in output


def test_clear_screen_is_emitted_before_each_frame() -> None:
    output: list[str] = []
    play_game(_scripted([QUIT]), rng=random.Random(0), out=output.append)

    assert output[0] == play_2048.CLEAR_SCREEN


def test_random_game_log_is_consistent(tmp_path) -> None:
    log_file = tmp_path / "game_log_random.json"
    directions = itertools.cycle([Direction.UP, Direction.LEFT, Direction.DOWN, Direction.RIGHT])

    score, _ = _play(directions, rng=random.Random(3), max_moves=40, log_file=str(log_file))

    log = json.loads(log_file.read_text())
    final = log[-1]
    assert final["final_score"] == score
    assert final["game_end_reason"] in ("max_moves_reached", "no_moves_available")

    accepted = [entry for entry in log[:-1] if not entry.get("invalid_move")]
    assert len(accepted) == final["total_moves"] + 1
    for prev, entry in zip(accepted, accepted[1:]):
        spawned = entry["spawned"]
        assert spawned["value"] in (2, 4)
        assert entry["game_state"][spawned["row"]][spawned["col"]] == spawned["value"]
        assert entry["current_score"] == prev["current_score"] + entry["score_delta"]
        before = sum(map(sum, prev["game_state"]))
        after = sum(map(sum, entry["game_state"]))
        assert after == before + spawned["value"]


def test_main_line_input_quits(tmp_path, monkeypatch) -> None:
    log_file = tmp_path / "game_log_cli.json"
    monkeypatch.setattr(play_2048, "init", lambda: None)
    monkeypatch.setattr("builtins.input", lambda prompt="": "q")

    score = play_2048.main(["--line_input", "--seed", "5", "--no_clear", "--log_file", str(log_file)])

    assert score == 0
    assert json.loads(log_file.read_text())[0]["action"] == "INITIAL"


def test_main_rejects_empty_board() -> None:
    with pytest.raises(SystemExit):
        play_2048.main(["--rows", "0"])


def test_piped_keys_end_with_closing_log_entry(tmp_path, first_choice_rng) -> None:
    log_file = tmp_path / "game_log_piped.json"
    stream = io.StringIO("d")

    output: list[str] = []
    score = play_game(
        lambda: keypress.read_command(stream),
        rows=1,
        cols=2,
        rng=first_choice_rng,
        log_file=str(log_file),
        out=output.append,
        clear_screen=False,
    )

    assert score == 0
    assert "Thanks for playing!" in output
    log = json.loads(log_file.read_text())
    assert log[-2]["game_state"] == [[2, 2]]
    assert log[-1] == {
        "final_score": 0,
        "total_moves": 1,
        "max_tile": 2,
        "game_end_reason": "quit",
    }


def test_rejected_move_is_on_disk_before_next_read(tmp_path, first_choice_rng) -> None:
    log_file = tmp_path / "game_log_rejected.json"
    seen: list[dict] = []

    def check_log_then_quit():
        seen.append(json.loads(log_file.read_text())[-1])
        return QUIT

    commands = iter([lambda: Direction.LEFT, check_log_then_quit])
    play_game(
        lambda: next(commands)(),
        rows=1,
        cols=2,
        rng=first_choice_rng,
        log_file=str(log_file),
        out=lambda _: None,
        clear_screen=False,
    )

    assert seen[0]["action"] == "LEFT"
    assert seen[0]["invalid_move"] is True


def test_unexpected_error_still_closes_log(tmp_path) -> None:
    log_file = tmp_path / "game_log_crash.json"

    def broken():
        raise RuntimeError("input device lost")

    with pytest.raises(RuntimeError):
        play_game(broken, rng=random.Random(0), log_file=str(log_file), out=lambda _: None)

    final = json.loads(log_file.read_text())[-1]
    assert final["game_end_reason"] == "error: input device lost"
    assert final["total_moves"] == 0
