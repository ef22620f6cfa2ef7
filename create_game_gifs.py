"""
Create animated GIFs showing how each logged 2048 game evolved.
One frame per accepted move, any grid size.
"""

import argparse
import io
import json
import os

import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
import numpy as np
from PIL import Image

from play_2048 import find_logs, game_name


# Color scheme for tiles (similar to the original 2048 game)
TILE_COLORS = {
    0: '#CDC1B4',      # Empty
    2: '#EEE4DA',
    4: '#EDE0C8',
    8: '#F2B179',
    16: '#F59563',
    32: '#F67C5F',
    64: '#F65E3B',
    128: '#EDCF72',
    256: '#EDCC61',
    512: '#EDC850',
    1024: '#EDC53F',
    2048: '#EDC22E',
}
LARGE_TILE_COLOR = '#3C3A32'   # 4096+

# Text colors
DARK_TEXT_COLOR = '#776E65'
LIGHT_TEXT_COLOR = '#F9F6F2'

BACKGROUND_COLOR = '#FAF8EF'
GRID_LINE_COLOR = '#BBADA0'


def get_tile_color(value):
    return TILE_COLORS.get(value, LARGE_TILE_COLOR)


def get_text_color(value):
    return DARK_TEXT_COLOR if value <= 4 else LIGHT_TEXT_COLOR


def get_font_size(value, cell_scale=1.0):
    digits = len(str(value))
    base = 40 if digits <= 2 else (32 if digits == 3 else 24)
    return max(6, int(base * cell_scale))


def render_game_state(game_state, score, move_num, action, ax):
    """Render a single grid of any size onto a matplotlib axis."""
    rows = len(game_state)
    cols = len(game_state[0]) if rows else 0
    # Fonts were tuned for a 4x4 board
    cell_scale = 4 / max(rows, cols, 1)

    ax.clear()
    ax.set_xlim(0, cols)
    ax.set_ylim(0, rows)
    ax.set_aspect('equal')
    ax.axis('off')

    for i in range(rows):
        for j in range(cols):
            value = game_state[i][j]
            y = rows - 1 - i

            rect = mpatches.Rectangle((j, y), 1, 1,
                                      facecolor=get_tile_color(value),
                                      edgecolor=GRID_LINE_COLOR,
                                      linewidth=3)
            ax.add_patch(rect)

            if value != 0:
                ax.text(j + 0.5, y + 0.5, str(value),
                        ha='center', va='center',
                        fontsize=get_font_size(value, cell_scale), fontweight='bold',
                        color=get_text_color(value))

    info_text = f"Move: {move_num} | Action: {action} | Score: {score}"
    ax.set_title(info_text, fontsize=12, fontweight='bold', color=DARK_TEXT_COLOR)


def load_game_states(log_file):
    """
    Load the grid after each accepted move from a game log.
    Rejected moves left the grid unchanged and are skipped.
    """
    with open(log_file, 'r') as f:
        data = json.load(f)

    states = []
    move_num = 0
    for entry in data:
        if 'final_score' in entry:
            break
        if 'game_state' not in entry or entry.get('invalid_move'):
            continue
        states.append({
            'state': entry['game_state'],
            'score': entry.get('current_score', 0),
            'action': entry.get('action', 'UNKNOWN'),
            'move_num': move_num,
        })
        move_num += 1

    return states


def sample_states(states, max_frames):
    """Pick at most max_frames states, evenly spaced, keeping first and last."""
    if not max_frames or len(states) <= max_frames:
        return states
    indices = np.linspace(0, len(states) - 1, max_frames, dtype=int)
    return [states[i] for i in indices]


def render_frames(states):
    rows = len(states[0]['state'])
    cols = len(states[0]['state'][0])
    # Fixed canvas: every frame of a GIF must share one size
    fig, ax = plt.subplots(figsize=(max(4.5, 1.5 * cols), 1.5 * rows + 0.8))

    frames = []
    try:
        for s in states:
            render_game_state(s['state'], s['score'], s['move_num'], s['action'], ax)
            buf = io.BytesIO()
            fig.savefig(buf, format='png', dpi=100, facecolor=BACKGROUND_COLOR)
            buf.seek(0)
            frames.append(Image.open(buf).copy())
    finally:
        plt.close(fig)

    return frames


def create_gif(log_file, output_dir='gifs', fps=2, max_frames=None):
    """
    Replay one game log as an animated GIF named game_<name>.gif.

    Returns:
        Path of the written GIF, or None when nothing was written
    """
    name = game_name(log_file)

    try:
        states = load_game_states(log_file)
        if not states:
            print(f"  No states found for {name}")
            return None

        frames = render_frames(sample_states(states, max_frames))
        os.makedirs(output_dir, exist_ok=True)
        output_file = os.path.join(output_dir, f'game_{name}.gif')
        frames[0].save(output_file, save_all=True, append_images=frames[1:],
                       duration=int(1000 / fps), loop=0)
    except (OSError, ValueError, KeyError, IndexError) as e:
        print(f"  ✗ Error creating GIF for {name}: {e}")
        return None

    print(f"  ✓ Saved {output_file} ({len(frames)} frames)")
    return output_file


def create_all_gifs(log_dir='game_logs', output_dir='gifs', fps=2, max_frames=None):
    """Create one GIF per game log and return the paths written."""
    log_files = find_logs(log_dir)
    if not log_files:
        print(f"No game logs found in {log_dir}")
        return []

    written = [create_gif(f, output_dir, fps, max_frames) for f in log_files]
    return [path for path in written if path]


def main(argv=None):
    parser = argparse.ArgumentParser(description='Replay logged 2048 games as animated GIFs')
    parser.add_argument('--log_dir', type=str, default='game_logs',
                        help='Directory containing game log JSON files')
    parser.add_argument('--output_dir', type=str, default='gifs',
                        help='Directory to save GIFs')
    parser.add_argument('--fps', type=int, default=2,
                        help='Frames per second for GIF animation')
    parser.add_argument('--max_frames', type=int, default=None,
                        help='Maximum number of frames per GIF (samples evenly if exceeded)')

    args = parser.parse_args(argv)
    return create_all_gifs(args.log_dir, args.output_dir, args.fps, args.max_frames)


if __name__ == "__main__":
    main()
