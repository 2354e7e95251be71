"""
Blocks Game Engine.

This module implements the game loop state machine:
- gravity timer (armed interval kept apart from the live deadline)
- piece spawning from an injected catalogue and random generator
- landing, full row detection and the row clear animation
- scoring, leveling and gravity speed-up
- pause/resume, game over and leaving the game

The engine is driven from a single thread: the caller delivers key
batches and the current time, in milliseconds, through ``update``.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from . import cells
from .anim import Animator, CollapseStep
from .field import FieldBuffer
from .keymap import Action, KeyMap
from .movement import apply_action, move_down
from .pieces import CATALOGUE, Piece, Shape, random_piece
from .rows import compact, find_full_rows
from .scoring import ScoreState, gravity_interval

FIELD_COLUMNS = 10
FIELD_ROWS = 20
DEFAULT_CELL_SIZE = (30, 30)


class GameState(Enum):
    """Game state enumeration."""
    RUNNING = "running"
    FULL_LINES = "fullLinesDetected"
    LINE_ANIM = "lineAnimating"
    PAUSED = "paused"
    OVER = "over"
    EXITED = "exited"


class GravityTimer:
    """
    Periodic gravity source.

    The armed interval survives suspension: ``suspend`` only drops the
    pending deadline and ``resume`` re-arms a full interval from now.
    """

    def __init__(self):
        self.interval: Optional[float] = None  # armed period in ms
        self.deadline: Optional[float] = None  # next tick, None while suspended
        self.stopped = False

    @property
    def running(self) -> bool:
        return self.deadline is not None

    def arm(self, interval: float, now: float) -> None:
        """Set the period and restart counting from now."""
        self.interval = interval
        self.deadline = now + interval
        self.stopped = False

    def suspend(self) -> None:
        self.deadline = None

    def resume(self, now: float) -> None:
        if self.stopped or self.interval is None:
            return
        self.deadline = now + self.interval

    def stop(self) -> None:
        """Stop for good, until the next arm."""
        self.deadline = None
        self.stopped = True

    def due(self, now: float) -> bool:
        """Report whether a tick is due at now, consuming it."""
        if self.deadline is None or now < self.deadline:
            return False
        self.deadline += self.interval
        if self.deadline <= now:
            # Do not replay ticks missed while the caller was late.
            self.deadline = now + self.interval
        return True


class RowClear:
    """The full rows being cleared and the collapse animation over them."""

    def __init__(self):
        self.first = 0
        self.last = 0
        self.anim = Animator(CollapseStep(0))

    @property
    def span(self) -> int:
        return self.last - self.first

    def start(self, first: int, last: int, cell_height: int) -> None:
        """Animate the band from 1 pixel to its full height."""
        self.first = first
        self.last = last
        self.anim.step = CollapseStep(self.span)
        self.anim.start(1, self.span * max(cell_height, 1))

    def animate(self, now: float) -> Tuple[int, bool]:
        """Return (collapsed band height in pixels, done)."""
        pos = self.anim.animate(now)
        return pos, not self.anim.active


@dataclass
class LandingResult:
    """Outcome of a piece landing."""
    drop_steps: int = 0
    full_rows: Optional[Tuple[int, int]] = None
    game_over: bool = False


class GameEngine:
    """
    Falling block game engine.

    The field has a hidden top row (so pieces can rotate while entering),
    invisible left/right walls and an invisible floor. Renderers read
    ``field``, ``current``, ``next``, ``score`` and ``state``; the engine
    never calls into them.
    """

    def __init__(
        self,
        columns: int = FIELD_COLUMNS,
        rows: int = FIELD_ROWS,
        level: int = 0,
        attr: int = cells.BLACK | cells.UNIFORM,
        keymap: Optional[KeyMap] = None,
        catalogue: Sequence[Shape] = CATALOGUE,
        seed: Optional[int] = None,
        logger: Optional[Any] = None,
        cell_size: Tuple[int, int] = DEFAULT_CELL_SIZE,
        now: float = 0.0,
    ):
        """
        Initialize and start a new game.

        Args:
            columns: playable columns, walls excluded
            rows: visible rows, hidden top row and floor excluded
            level: starting level
            attr: display attribute of the pieces
            keymap: key to action resolver
            catalogue: piece shapes to draw from
            seed: random seed for reproducible piece sequences
            logger: optional event logger with a ``log(dict)`` method
            cell_size: on-screen cell size in pixels
            now: current time in milliseconds
        """
        self.start_level = level
        self.attr = attr
        self.keymap = keymap or KeyMap()
        self.catalogue = tuple(catalogue)
        self.rng = np.random.default_rng(seed)
        self.logger = logger

        self.field = FieldBuffer(columns + 2, rows + 2, cell_size)
        self.field.draw_border()
        self.preview = FieldBuffer()
        self.timer = GravityTimer()
        self.row_clear = RowClear()
        self.collapse = 0  # collapsed band height while animating

        self.state: Optional[GameState] = None
        self._paused_from: Optional[GameState] = None
        self._reported = False
        self.score = ScoreState(level)
        self.current: Optional[Piece] = None
        self.next: Optional[Piece] = None
        self.pieces_spawned = 0

        self.start(now)

    def _random_piece(self) -> Piece:
        return random_piece(self.rng, self.attr, self.catalogue)

    def _log(self, event: str, **fields: Any) -> None:
        if self.logger is not None:
            self.logger.log({"event": event, **fields})

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self, now: float = 0.0) -> None:
        """
        Start a new game, or continue a paused one.

        A new game clears the field, resets the score to the starting
        level and arms the gravity timer.
        """
        if self.state == GameState.PAUSED:
            self.resume(now)
            return
        if self.state is not None:
            self.field.clear()
            self.field.draw_border()
        self.state = GameState.RUNNING
        self._paused_from = None
        self._reported = False
        self.collapse = 0
        self.row_clear.anim.stop()
        self.score = ScoreState(self.start_level)
        self.pieces_spawned = 0
        self.timer.arm(gravity_interval(self.score.level), now)
        self.current = self._random_piece()
        self.next = self._random_piece()
        self._log("game_start", level=self.start_level)
        self._place_current()

    def reset(self, seed: Optional[int] = None, now: float = 0.0) -> None:
        """Start over, optionally reseeding the piece sequence."""
        if seed is not None:
            self.rng = np.random.default_rng(seed)
        if self.state == GameState.PAUSED:
            self.state = GameState.OVER
        self.start(now)

    def pause(self) -> bool:
        """Pause the game, keeping the gravity interval. Returns whether it paused."""
        if self.state not in (GameState.RUNNING, GameState.FULL_LINES, GameState.LINE_ANIM):
            return False
        self._paused_from = self.state
        self.state = GameState.PAUSED
        self.timer.suspend()
        self._log("pause")
        return True

    def resume(self, now: float = 0.0) -> bool:
        """Continue a paused game in the state it was paused in."""
        if self.state != GameState.PAUSED:
            return False
        self.state = self._paused_from
        self._paused_from = None
        if self.state == GameState.RUNNING:
            self.timer.resume(now)
        self._log("resume")
        return True

    def leave(self) -> Optional[List[int]]:
        """
        Leave the game.

        Returns:
            The final score snapshot, once; None on later calls
        """
        if self.state == GameState.EXITED:
            return None
        self.state = GameState.EXITED
        self._paused_from = None
        self.timer.stop()
        return self._report()

    def _report(self) -> Optional[List[int]]:
        if self._reported:
            return None
        self._reported = True
        snapshot = self.score.snapshot()
        self._log("exit", scores=snapshot)
        return snapshot

    def _game_over(self) -> None:
        self.state = GameState.OVER
        self.timer.stop()
        self._log("game_over", **self.score.to_dict())

    # -------------------------------------------------------------------------
    # Pieces
    # -------------------------------------------------------------------------

    def _spawn(self) -> None:
        """Make the next piece current and draw a new next piece."""
        self.current = self.next
        self.next = self._random_piece()

    def _place_current(self) -> bool:
        """Put the current piece on the field for the first time."""
        if not self.current.spawn(self.field):
            self._game_over()
            return False
        self.current.layout(self.field)
        self.pieces_spawned += 1
        return True

    def _land(self, drop_steps: int) -> LandingResult:
        """Handle a piece that could not move down."""
        result = LandingResult(drop_steps=drop_steps)
        full = find_full_rows(self.field, self.current)
        self.score.add_drops(drop_steps)
        self._spawn()
        if full is not None:
            self.state = GameState.FULL_LINES
            self.row_clear.first, self.row_clear.last = full
            result.full_rows = full
            return result
        result.game_over = not self._place_current()
        return result

    def step(self, drop_steps: int = 0) -> Optional[LandingResult]:
        """
        Run one game loop step: move the current piece down.

        Called on gravity ticks and when the player lands a piece.

        Returns:
            The landing result, or None if the piece moved down or the
            game is not running
        """
        if self.state != GameState.RUNNING:
            return None
        if move_down(self.current, self.field):
            return None
        return self._land(drop_steps)

    # -------------------------------------------------------------------------
    # Inputs and time
    # -------------------------------------------------------------------------

    def handle_actions(self, actions: Iterable[int], now: float = 0.0) -> None:
        """Apply a batch of player actions."""
        for action in actions:
            if action == Action.PAUSE:
                if self.state == GameState.PAUSED:
                    self.resume(now)
                else:
                    self.pause()
                continue
            if self.state != GameState.RUNNING:
                continue
            drop_steps, landed = apply_action(self.current, self.field, action)
            if landed:
                self.step(drop_steps)
            else:
                self.score.add_drops(drop_steps)

    def handle_keys(self, keys: Iterable[str], now: float = 0.0) -> None:
        """Resolve raw key names with the key map and apply them."""
        self.handle_actions(self.keymap.actions(keys), now)

    def tick(self, now: float) -> bool:
        """Run a gravity step if one is due. Returns whether it ran."""
        if not self.timer.due(now):
            return False
        self.step(0)
        return True

    def animate(self, now: float) -> None:
        """Move the row clear and score flash animations forward."""
        if self.state == GameState.FULL_LINES:
            self.state = GameState.LINE_ANIM
            self.row_clear.start(self.row_clear.first, self.row_clear.last,
                                 self.field.cell_size[1])
            self.timer.suspend()
        if self.state == GameState.LINE_ANIM:
            pos, done = self.row_clear.animate(now)
            if done:
                self._finish_row_clear(now)
            else:
                self.collapse = pos
        self.score.update_flashes(now)

    def _finish_row_clear(self, now: float) -> None:
        first, last = self.row_clear.first, self.row_clear.last
        num = last - first
        self.collapse = 0
        self.state = GameState.RUNNING
        self.timer.resume(now)
        compact(self.field, first, last)
        points = self.score.line_points(num)
        leveled = self.score.add_lines(num)
        self._log("lines", rows=num, points=points, total=self.score.total)
        if leveled:
            self.timer.arm(gravity_interval(self.score.level), now)
            self._log("level_up", level=self.score.level,
                      interval_ms=gravity_interval(self.score.level))
        self._place_current()

    def update(self, now: float, keys: Iterable[str] = ()) -> None:
        """
        Process everything due at time now, in order: the key batch, the
        gravity tick, then animations.
        """
        self.handle_keys(keys, now)
        self.tick(now)
        self.animate(now)

    def next_wake(self) -> Optional[float]:
        """Earliest time at which ``update`` has something to do."""
        deadlines = [self.timer.deadline, self.score.next_wake()]
        if self.state == GameState.FULL_LINES:
            return 0.0
        if self.state == GameState.LINE_ANIM:
            deadlines.append(self.row_clear.anim.wake_at)
        deadlines = [d for d in deadlines if d is not None]
        return min(deadlines) if deadlines else None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def level(self) -> int:
        return self.score.level

    def is_game_over(self) -> bool:
        return self.state == GameState.OVER

    def visible_field(self) -> FieldBuffer:
        """The field without its hidden top row, sharing its cells."""
        return self.field.slice((0, 1), self.field.size)

    def next_field(self) -> FieldBuffer:
        """A grid holding the next piece, sized to its padded dims."""
        self.preview.resize(*self.next.dims())
        self.preview.clear()
        self.preview.set_cell_size(self.field.cell_size)
        piece = Piece(self.next.shape, self.next.attr)
        piece.layout(self.preview)
        return self.preview

    def get_statistics(self) -> Dict[str, Any]:
        """Get game statistics."""
        return {
            'state': self.state.value,
            'pieces': self.pieces_spawned,
            **self.score.to_dict(),
        }

    def __str__(self) -> str:
        """String representation of the game state."""
        lines = [str(self.field)]
        lines.append(f"Score: {self.score.total} | Lines: {self.score.lines} | "
                     f"Level: {self.score.level} | State: {self.state.value}")
        lines.append(f"Current: {self.current!r}")
        lines.append(f"Next: {self.next.kind.name}")
        return "\n".join(lines)


def play_random_game(seed: Optional[int] = None, max_steps: int = 100000,
                     verbose: bool = False) -> Dict[str, Any]:
    """
    Play a complete game with random actions, as fast as possible.

    Args:
        seed: random seed for both the pieces and the actions
        max_steps: upper bound on simulated gravity ticks
        verbose: print every row clear

    Returns:
        Dictionary with game statistics
    """
    engine = GameEngine(seed=seed)
    rng = np.random.default_rng(seed)
    moves = [a for a in Action if a != Action.PAUSE]
    now = 0.0
    for _ in range(max_steps):
        if engine.is_game_over():
            break
        action = moves[int(rng.integers(len(moves)))]
        lines = engine.score.lines
        engine.handle_actions([action], now)
        wake = engine.next_wake()
        now = max(now, wake if wake is not None else now)
        engine.update(now)
        if verbose and engine.score.lines > lines:
            print(f"Cleared {engine.score.lines - lines} lines, score {engine.score.total}")
    return engine.get_statistics()


if __name__ == "__main__":
    stats = play_random_game(seed=42, verbose=True)
    print(f"\nFinal statistics: {stats}")
