"""
Performance benchmark script for blocks.

Tests the speed of the game engine and of its hot paths.
"""
import argparse
import sys
import time
from pathlib import Path
from typing import Dict, Any
import numpy as np
from tqdm import tqdm

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def benchmark_engine(num_games: int = 200, seed: int = 42) -> Dict[str, float]:
    """
    Benchmark whole random games.

    Args:
        num_games: Number of games to play
        seed: Random seed

    Returns:
        Dictionary of benchmark results
    """
    from blocks.engine import play_random_game
    from utils.logger import MetricsTracker

    tracker = MetricsTracker(window_size=num_games)
    start = time.perf_counter()
    for i in tqdm(range(num_games), desc="Games"):
        tracker.update(play_random_game(seed=seed + i))
    total_time = time.perf_counter() - start

    pieces = tracker.get_summary('pieces')['mean'] * num_games
    results = {
        'num_games': num_games,
        'total_pieces': int(pieces),
        'total_time': total_time,
        'pieces_per_second': pieces / total_time,
        'games_per_second': num_games / total_time,
    }
    for name, summary in tracker.get_all_summaries().items():
        results[f'mean_{name.lower()}'] = summary['mean']
    return results


def benchmark_moves(num_moves: int = 100000, seed: int = 42) -> Dict[str, float]:
    """
    Benchmark single player actions on a running game.

    Args:
        num_moves: Number of actions to apply
        seed: Random seed

    Returns:
        Dictionary of benchmark results
    """
    from blocks.engine import GameEngine, GameState
    from blocks.keymap import Action

    engine = GameEngine(seed=seed)
    rng = np.random.default_rng(seed)
    moves = [Action.MOVE_LEFT, Action.MOVE_RIGHT, Action.ROTATE_LEFT,
             Action.ROTATE_RIGHT, Action.SOFT_DROP]
    actions = rng.integers(len(moves), size=num_moves)
    games = 0
    now = 0.0

    start = time.perf_counter()
    for a in tqdm(actions, desc="Moves", mininterval=0.5):
        engine.handle_actions([moves[a]], now)
        if engine.state != GameState.RUNNING:
            wake = engine.next_wake()
            now = max(now, wake if wake is not None else now)
            engine.update(now)
        if engine.is_game_over():
            engine.reset(now=now)
            games += 1
    total_time = time.perf_counter() - start

    return {
        'num_moves': num_moves,
        'num_games': games,
        'total_time': total_time,
        'moves_per_second': num_moves / total_time,
    }


def benchmark_rows(num_iters: int = 100000) -> Dict[str, float]:
    """
    Benchmark full row detection and compaction on a nearly full field.

    Args:
        num_iters: Number of detect-and-compact rounds

    Returns:
        Dictionary of benchmark results
    """
    from blocks import cells
    from blocks.field import FieldBuffer
    from blocks.pieces import PieceKind, new_piece
    from blocks.rows import compact, find_full_rows

    field = FieldBuffer(12, 22)
    field.draw_border()
    piece = new_piece(PieceKind.I)
    piece.spawn(field)
    piece.y = 17  # visible cells on row 18
    bottom = field.data[18:21, 1:11]

    start = time.perf_counter()
    for _ in range(num_iters):
        bottom[:] = cells.RED
        full = find_full_rows(field, piece)
        compact(field, *full)
    total_time = time.perf_counter() - start

    return {
        'num_iters': num_iters,
        'total_time': total_time,
        'clears_per_second': num_iters / total_time,
    }


def print_results(title: str, results: Dict[str, Any]) -> None:
    """Print benchmark results."""
    print(f"\n{'='*60}")
    print(title)
    print('='*60)
    for key, value in results.items():
        if isinstance(value, float):
            print(f"  {key}: {value:.2f}")
        else:
            print(f"  {key}: {value}")
    print('='*60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Benchmark the blocks engine")
    parser.add_argument(
        "--engine",
        action="store_true",
        help="Benchmark whole random games"
    )
    parser.add_argument(
        "--moves",
        action="store_true",
        help="Benchmark single player actions"
    )
    parser.add_argument(
        "--rows",
        action="store_true",
        help="Benchmark row detection and compaction"
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Run all benchmarks"
    )
    parser.add_argument(
        "--games",
        type=int,
        default=200,
        help="Number of games for the engine benchmark"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed"
    )

    args = parser.parse_args()

    if args.all or args.engine:
        results = benchmark_engine(num_games=args.games, seed=args.seed)
        print_results("GAME ENGINE BENCHMARK", results)

    if args.all or args.moves:
        results = benchmark_moves(seed=args.seed)
        print_results("PLAYER ACTION BENCHMARK", results)

    if args.all or args.rows:
        results = benchmark_rows()
        print_results("ROW CLEAR BENCHMARK", results)

    if not any([args.all, args.engine, args.moves, args.rows]):
        print("No benchmark selected. Use --all to run all benchmarks.")
        parser.print_help()


if __name__ == "__main__":
    main()
