"""
Plot scores per move for logged 2048 games.
Creates line plots showing score progression, plus the points gained per move.
"""

import argparse
import json
import os

import matplotlib.pyplot as plt

from play_2048 import find_logs, game_name


def load_game_log(log_file):
    """
    Load a game log JSON file and extract the score after each accepted move.

    Returns:
        Tuple of (moves, scores, deltas) as parallel lists
    """
    with open(log_file, 'r') as f:
        data = json.load(f)

    moves = []
    scores = []
    deltas = []

    for entry in data:
        if 'final_score' in entry:
            break
        if 'current_score' not in entry or entry.get('invalid_move'):
            continue
        moves.append(len(moves))
        scores.append(entry['current_score'])
        deltas.append(entry.get('score_delta', 0))

    return moves, scores, deltas


def load_all_games(log_dir):
    game_data = {}
    for log_file in find_logs(log_dir):
        try:
            game_data[game_name(log_file)] = load_game_log(log_file)
        except (OSError, ValueError, KeyError) as e:
            print(f"Error loading {log_file}: {e}")
    return game_data


def plot_all_scores(log_dir='game_logs', output_file='scores_per_turn.png'):
    """Plot every game's score curve on one figure."""
    game_data = load_all_games(log_dir)
    if not game_data:
        print("No game logs found!")
        return None

    fig, ax = plt.subplots(figsize=(14, 8))
    for name, (moves, scores, _) in game_data.items():
        ax.plot(moves, scores, marker='o', markersize=2, linewidth=1.5, label=name, alpha=0.8)

    ax.set_xlabel('Move Number', fontsize=12)
    ax.set_ylabel('Score', fontsize=12)
    ax.set_title('2048 Score Progression by Game', fontsize=14, fontweight='bold')
    ax.legend(bbox_to_anchor=(1.05, 1), loc='upper left', fontsize=9)
    ax.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(output_file, dpi=300, bbox_inches='tight')
    plt.close(fig)
    print(f"Plot saved to {output_file}")
    return output_file


def plot_individual_scores(log_dir='game_logs', output_dir='plots'):
    """One figure per game: cumulative score on top, points gained per move below."""
    os.makedirs(output_dir, exist_ok=True)
    written = []

    for name, (moves, scores, deltas) in load_all_games(log_dir).items():
        fig, (top, bottom) = plt.subplots(2, 1, figsize=(10, 8), sharex=True)

        top.plot(moves, scores, marker='o', markersize=3, linewidth=2, color='#2E86AB')
        top.fill_between(moves, scores, alpha=0.3, color='#2E86AB')
        top.set_ylabel('Score', fontsize=12)
        top.set_title(f'Score Progression: {name}', fontsize=14, fontweight='bold')
        top.grid(True, alpha=0.3)

        bottom.bar(moves, deltas, color='#F65E3B', alpha=0.8)
        bottom.set_xlabel('Move Number', fontsize=12)
        bottom.set_ylabel('Points Gained', fontsize=12)
        bottom.grid(True, alpha=0.3, axis='y')

        fig.tight_layout()
        output_file = os.path.join(output_dir, f'score_progression_{name}.png')
        fig.savefig(output_file, dpi=300, bbox_inches='tight')
        plt.close(fig)

        print(f"Saved {output_file}")
        written.append(output_file)

    return written


def main(argv=None):
    parser = argparse.ArgumentParser(description='Plot 2048 game scores per move')
    parser.add_argument('--log_dir', type=str, default='game_logs',
                        help='Directory containing game log JSON files')
    parser.add_argument('--output', type=str, default='scores_per_turn.png',
                        help='Output filename for combined plot')
    parser.add_argument('--individual_dir', type=str, default=None,
                        help='Also write one plot per game into this directory')

    args = parser.parse_args(argv)
    plot_all_scores(args.log_dir, args.output)
    if args.individual_dir:
        plot_individual_scores(args.log_dir, args.individual_dir)


if __name__ == "__main__":
    main()
