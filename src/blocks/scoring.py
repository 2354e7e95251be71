"""
Blocks Scoring and Gravity.

This module implements the classic (NES) rules:
- soft/hard drop bonus: 1 point per row fallen
- line clears: 40/100/300/1200 points times (level + 1)
- variable level-up threshold on lines cleared since the last level-up
- level -> gravity interval table, in frames of 50 ms

See https://tetris.wiki/Scoring#Original_Nintendo_scoring_system
and https://tetris.wiki/Tetris_(NES,_Nintendo).
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Any

from .anim import Animator, FixedStep

LINE_POINTS = (40, 100, 300, 1200)
SCORE_FLASH_THRESHOLD = 10000
FRAME_MS = 1500 // 30  # 30 frames ~ 1500 ms
FLASH_STEPS = 10
FLASH_DELAY_MS = 200


class ScoreKind(IntEnum):
    """Score counters, in display order."""
    TOTAL = 0
    LINES = 1
    LEVEL = 2
    LINE1 = 3
    LINE2 = 4
    LINE3 = 5
    LINE4 = 6


SCORE_LABELS = {
    ScoreKind.TOTAL: "SCORE",
    ScoreKind.LINES: "LINES",
    ScoreKind.LEVEL: "LEVEL",
    ScoreKind.LINE1: "1 LINE",
    ScoreKind.LINE2: "2 LINES",
    ScoreKind.LINE3: "3 LINES",
    ScoreKind.LINE4: "4 LINES",
}


def gravity_frames(level: int) -> int:
    """Frames per row at the given level."""
    if level <= 8:
        return 48 - 5 * level
    if level == 9:
        return 6
    if level <= 12:
        return 5
    if level <= 15:
        return 4
    if level <= 18:
        return 3
    if level <= 28:
        return 2
    return 1


def gravity_interval(level: int) -> int:
    """Milliseconds between two automatic one-row falls at the given level."""
    return gravity_frames(level) * FRAME_MS


@dataclass
class ScoreField:
    """A named counter that can flash when it reaches a milestone."""
    text: str
    value: int = 0
    flash: bool = False  # start flashing on the next update
    anim: Animator = field(default_factory=lambda: Animator(FixedStep(1, FLASH_DELAY_MS)))

    @property
    def flashing(self) -> bool:
        return self.anim.active

    @property
    def dimmed(self) -> bool:
        """Whether the field is in the hidden half of a flash cycle."""
        return self.anim.active and self.anim.value % 2 == 1


class ScoreState:
    """
    Score, lines and level counters for one game.

    Scoring methods only update counters and raise flash flags;
    ``update_flashes`` runs the flash animations.
    """

    def __init__(self, level: int = 0):
        """
        Args:
            level: starting level
        """
        self.fields: List[ScoreField] = [ScoreField(SCORE_LABELS[kind]) for kind in ScoreKind]
        self.fields[ScoreKind.LEVEL].value = level
        self.clears = 0  # lines cleared since the last level-up

    def __getitem__(self, kind: int) -> int:
        return self.fields[kind].value

    @property
    def total(self) -> int:
        return self.fields[ScoreKind.TOTAL].value

    @property
    def lines(self) -> int:
        return self.fields[ScoreKind.LINES].value

    @property
    def level(self) -> int:
        return self.fields[ScoreKind.LEVEL].value

    def add_drops(self, steps: int) -> None:
        """Award the drop bonus: one point per row fallen on player request."""
        self.fields[ScoreKind.TOTAL].value += steps

    def line_points(self, num: int) -> int:
        """Points for clearing num rows at once at the current level."""
        return LINE_POINTS[num - 1] * (self.level + 1)

    def add_lines(self, num: int) -> bool:
        """
        Score num rows cleared at once.

        Args:
            num: simultaneous rows cleared, 1 to 4

        Returns:
            True if the level went up
        """
        total = self.fields[ScoreKind.TOTAL]
        before = total.value
        points = self.line_points(num)
        total.value += points
        if total.value // SCORE_FLASH_THRESHOLD > before // SCORE_FLASH_THRESHOLD:
            total.flash = True
        self.fields[ScoreKind.LINES].value += num
        self.fields[ScoreKind.LINE1 + num - 1].value += 1

        clears = self.clears + num
        level = self.level
        if clears >= level * 10 + 10 or clears >= max(100, level * 10 - 50):
            level_field = self.fields[ScoreKind.LEVEL]
            level_field.value += 1
            level_field.flash = True
            self.clears = 0
            return True
        self.clears = clears
        return False

    def update_flashes(self, now: float) -> None:
        """Start pending flashes and move running ones forward."""
        for score_field in self.fields:
            if score_field.flash:
                score_field.flash = False
                score_field.anim.start(0, FLASH_STEPS)
            score_field.anim.animate(now)

    def dimmed(self, kind: int) -> bool:
        return self.fields[kind].dimmed

    def next_wake(self) -> Optional[float]:
        """Earliest flash deadline, if any flash is running."""
        deadlines = [f.anim.wake_at for f in self.fields if f.anim.wake_at is not None]
        return min(deadlines) if deadlines else None

    def snapshot(self) -> List[int]:
        """Counter values in ScoreKind order."""
        return [score_field.value for score_field in self.fields]

    def to_dict(self) -> Dict[str, Any]:
        return {score_field.text: score_field.value for score_field in self.fields}

    def __repr__(self) -> str:
        return f"ScoreState(score={self.total}, lines={self.lines}, level={self.level})"
