"""
Terminal play script for blocks.

Play manually one key batch at a time, watch a random player, or run
many random games and show statistics.
"""
import argparse
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional
import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blocks.engine import GameEngine, GameState, play_random_game
from blocks.keymap import Action
from blocks.renderer import Renderer, clear_screen
from blocks.title import Title
from utils.config import Settings
from utils.logger import Logger

# Typed commands and the key names a window system would deliver for them.
COMMANDS: Dict[str, str] = {
    "h": "LeftArrow",
    "l": "RightArrow",
    "k": "UpArrow",
    "j": "DownArrow",
    "a": "A",
    "z": "Z",
    "p": "Escape",
}


def show_title(settings: Settings, duration: float = 3.0) -> None:
    """Run the title animation in real time for a few seconds."""
    title = Title(texture=settings.texture)
    title.set_gravity(settings.level)
    renderer = Renderer()
    start = time.monotonic()
    while time.monotonic() - start < duration:
        now = (time.monotonic() - start) * 1000
        title.update(now)
        clear_screen()
        print("\n".join(renderer.render_grid(title.grid)))
        wake = title.next_wake()
        delay = (wake - now) / 1000 if wake is not None else 0.05
        time.sleep(min(max(delay, 0.0), 0.25))


def finish_game(engine: GameEngine, settings: Settings, player: Optional[str]) -> None:
    """Report the final scores and offer them to the leaderboard."""
    snapshot = engine.leave()
    if snapshot is None:
        return
    board = settings.leaderboard()
    rank = board.submit(snapshot)
    if rank is not None:
        if player is None:
            player = input(f"New best score, rank {rank + 1}! Name: ").strip()
        board.name(rank, player)
        settings.update(leaderboard=board)
    print(Renderer().render_leaderboard(board))


def play_manual(settings: Settings, seed: int = 42, logger: Optional[Logger] = None) -> GameEngine:
    """
    Play in the terminal, one batch of commands per line.

    Each line is applied, then the game clock advances by one gravity
    interval and any running animation plays out.
    """
    engine = GameEngine(level=settings.level, attr=settings.texture,
                        keymap=settings.keymap(), seed=seed, logger=logger)
    renderer = Renderer()
    now = 0.0

    print("\n" + "=" * 60)
    print("BLOCKS - Manual Play")
    print("=" * 60)
    print("\nControls (several per line allowed):")
    print("  h/l: move left/right   k: hard drop   j: soft drop")
    print("  a/z: rotate left/right p: pause/resume")
    print("  Type 'q' to quit, 'r' to restart")
    print("=" * 60 + "\n")

    while True:
        clear_screen()
        print(renderer.render_game_state(engine))

        if engine.is_game_over():
            print("\n*** GAME OVER! ***")
            print(f"Final Score: {engine.score.total:,}")
            action = input("\nPlay again? (y/n): ").strip().lower()
            if action == 'y':
                engine.reset(now=now)
                continue
            break

        user_input = input("\n> ").strip().lower()
        if user_input == 'q':
            print("Thanks for playing!")
            break
        if user_input == 'r':
            engine.reset(now=now)
            continue

        keys = [COMMANDS[c] for c in user_input if c in COMMANDS]
        engine.update(now, keys)
        if engine.state == GameState.PAUSED:
            continue
        now += engine.timer.interval or 0
        engine.update(now)
        # Play the row clear through.
        while engine.state in (GameState.FULL_LINES, GameState.LINE_ANIM):
            wake = engine.next_wake()
            now = max(now, wake if wake is not None else now)
            engine.update(now)
    return engine


def watch_random(settings: Settings, delay: float = 0.1, seed: int = 42,
                 logger: Optional[Logger] = None) -> GameEngine:
    """
    Watch a random player.

    Args:
        settings: player settings
        delay: Delay between moves (seconds)
        seed: Random seed
        logger: Optional event logger
    """
    engine = GameEngine(level=settings.level, attr=settings.texture,
                        keymap=settings.keymap(), seed=seed, logger=logger)
    renderer = Renderer()
    rng = np.random.default_rng(seed)
    moves = [a for a in Action if a != Action.PAUSE]
    now = 0.0

    while not engine.is_game_over():
        if engine.state == GameState.RUNNING:
            engine.handle_actions([moves[int(rng.integers(len(moves)))]], now)
        wake = engine.next_wake()
        now = max(now, wake if wake is not None else now)
        engine.update(now)
        clear_screen()
        print(renderer.render_game_state(engine))
        time.sleep(delay)
    return engine


def play_random(num_games: int = 10, seed: int = 42) -> None:
    """
    Play random games and show statistics.

    Args:
        num_games: Number of games to play
        seed: Random seed
    """
    print(f"\nPlaying {num_games} random games...")

    scores: List[int] = []
    lines: List[int] = []
    pieces: List[int] = []

    for i in range(num_games):
        stats = play_random_game(seed=seed + i)
        scores.append(stats['SCORE'])
        lines.append(stats['LINES'])
        pieces.append(stats['pieces'])

        print(f"Game {i+1}: Score={stats['SCORE']:,}, "
              f"Pieces={stats['pieces']}, "
              f"Lines={stats['LINES']}")

    print("\n" + "=" * 60)
    print("RANDOM PLAYER STATISTICS")
    print("=" * 60)
    print(f"Games: {num_games}")
    print(f"Mean Score: {np.mean(scores):.1f} ± {np.std(scores):.1f}")
    print(f"Max Score: {max(scores)}")
    print(f"Mean Pieces: {np.mean(pieces):.1f}")
    print(f"Mean Lines: {np.mean(lines):.1f}")
    print("=" * 60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Play blocks in the terminal")
    parser.add_argument(
        "--mode",
        type=str,
        choices=["manual", "watch", "random", "scores", "title"],
        default="manual",
        help="Play manually, watch a random player, run random games, "
             "show the best scores or show the title"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Settings file (default: ~/.config/blocks/blocks.yaml)"
    )
    parser.add_argument(
        "--level",
        type=int,
        default=None,
        help="Starting level, 0-9 (saved in the settings)"
    )
    parser.add_argument(
        "--games",
        type=int,
        default=10,
        help="Number of games to play (random mode)"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.1,
        help="Delay between moves (seconds) for watch mode"
    )
    parser.add_argument(
        "--player",
        type=str,
        default=None,
        help="Player name for the leaderboard (asked for when omitted)"
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Write game events as JSON lines to this directory"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed"
    )

    args = parser.parse_args()

    settings = Settings.load(args.config)
    if args.level is not None:
        if not 0 <= args.level <= 9:
            print(f"Error: level must be 0-9, got {args.level}")
            sys.exit(1)
        settings.level = args.level

    logger = Logger(args.log_dir, "blocks") if args.log_dir else None

    if args.mode == "manual":
        engine = play_manual(settings, seed=args.seed, logger=logger)
        finish_game(engine, settings, args.player)
    elif args.mode == "watch":
        engine = watch_random(settings, delay=args.delay, seed=args.seed, logger=logger)
        finish_game(engine, settings, args.player)
    elif args.mode == "random":
        play_random(num_games=args.games, seed=args.seed)
    elif args.mode == "scores":
        print(Renderer().render_leaderboard(settings.leaderboard()))
    elif args.mode == "title":
        show_title(settings)

    if logger is not None:
        logger.save_summary()
        print(f"Events logged to {logger.log_file}")
    path = settings.save(args.config)
    print(f"Settings saved to {path}")


if __name__ == "__main__":
    main()
