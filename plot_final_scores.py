"""
Plot final results of logged 2048 games.
One bar per game, best score first, labelled with its move count and highest tile.
"""

import argparse
import json

import matplotlib.pyplot as plt
import numpy as np

from game_2048 import max_tile
from play_2048 import find_logs, game_name


def load_final_score(log_file):
    """Load a game log JSON file and extract final score and stats."""
    with open(log_file, 'r') as f:
        data = json.load(f)

    if not data:
        return None

    final_entry = data[-1]
    if 'final_score' in final_entry:
        return {
            'final_score': final_entry['final_score'],
            'total_moves': final_entry.get('total_moves', 0),
            'max_tile': final_entry.get('max_tile', 0),
            'end_reason': final_entry.get('game_end_reason', 'unknown')
        }

    # Game still running, or killed before the closing entry was written
    states = [entry for entry in data if 'game_state' in entry and not entry.get('invalid_move')]
    if not states:
        return None
    last = states[-1]
    return {
        'final_score': last.get('current_score', 0),
        'total_moves': len(states) - 1,
        'max_tile': max_tile(last['game_state']),
        'end_reason': 'unknown'
    }


def load_all_final_scores(log_dir):
    game_scores = {}
    for log_file in find_logs(log_dir):
        try:
            stats = load_final_score(log_file)
        except (OSError, ValueError, KeyError) as e:
            print(f"Error loading {log_file}: {e}")
            continue
        if stats:
            game_scores[game_name(log_file)] = stats
    return game_scores


def summarize(scores, moves, max_tiles):
    return {
        'average_score': float(np.mean(scores)),
        'median_score': float(np.median(scores)),
        'average_moves': float(np.mean(moves)),
        'best_tile': int(np.max(max_tiles)),
    }


def plot_final_scores(log_dir='game_logs', output_file='final_scores_barplot.png'):
    """
    Bar plot of final scores across games.

    Returns:
        Summary statistics dict, or None when no log was found
    """
    game_scores = load_all_final_scores(log_dir)
    if not game_scores:
        print("No game logs found!")
        return None

    ranked = sorted(game_scores.items(), key=lambda x: x[1]['final_score'], reverse=True)
    names = [name for name, _ in ranked]
    scores = [stats['final_score'] for _, stats in ranked]
    moves = [stats['total_moves'] for _, stats in ranked]
    max_tiles = [stats['max_tile'] for _, stats in ranked]

    fig, ax = plt.subplots(figsize=(14, 6))
    colors = plt.cm.viridis(np.linspace(0, 1, len(names)))
    bars = ax.bar(range(len(names)), scores, color=colors, alpha=0.8, edgecolor='black', linewidth=1.2)
    for bar, n_moves, tile in zip(bars, moves, max_tiles):
        ax.text(bar.get_x() + bar.get_width() / 2., bar.get_height(),
                f'{n_moves} moves\nmax {tile}',
                ha='center', va='bottom', fontsize=8)

    ax.set_xlabel('Game', fontsize=12, fontweight='bold')
    ax.set_ylabel('Final Score', fontsize=12, fontweight='bold')
    ax.set_title('2048 Final Scores by Game', fontsize=14, fontweight='bold', pad=20)
    ax.set_xticks(range(len(names)))
    ax.set_xticklabels(names, rotation=45, ha='right', fontsize=9)
    ax.grid(True, alpha=0.3, axis='y')

    fig.tight_layout()
    fig.savefig(output_file, dpi=300, bbox_inches='tight')
    plt.close(fig)
    print(f"Barplot saved to {output_file}")

    summary = summarize(scores, moves, max_tiles)
    print(f"{len(names)} games | best {names[0]} ({scores[0]}) | "
          f"mean score {summary['average_score']:.1f} | median {summary['median_score']:.1f} | "
          f"mean moves {summary['average_moves']:.1f} | highest tile {summary['best_tile']}")
    return summary


def main(argv=None):
    parser = argparse.ArgumentParser(description='Plot 2048 final scores')
    parser.add_argument('--log_dir', type=str, default='game_logs',
                        help='Directory containing game log JSON files')
    parser.add_argument('--output', type=str, default='final_scores_barplot.png',
                        help='Output filename for barplot')

    args = parser.parse_args(argv)
    return plot_final_scores(args.log_dir, args.output)


if __name__ == "__main__":
    main()
