"""
Title sequence.

The word "Blocks" is drawn with blocks on a field buffer, then animated
in a loop:
- wait 10 steps of 200 ms
- flash the "o" 5 times, 200 ms each, by toggling its blur flag
- drop the "o" from the top of the title back to its place, one row per
  gravity interval

Each phase reuses the same animator with a different step strategy.
"""
from enum import Enum
from typing import Dict, List, Optional, Tuple

from . import cells
from .anim import Animator, AnimationStep, FixedStep
from .field import FieldBuffer
from .scoring import gravity_interval

TITLE_TEXT = "Blocks"
MAX_CELL_SIZE = 64
WAIT_STEPS = 10
FLASH_STEPS = 5
FALL_STEPS = 3
STEP_MS = 200
FLASHING_LETTER = "o"

# '#' is a block, '.' is empty. Every glyph is 7 rows high.
GLYPHS: Dict[str, Tuple[str, ...]] = {
    "B": (
        "###..",
        "#.#..",
        "#.#..",
        "#####",
        "#..##",
        "#..##",
        "#####",
    ),
    "l": ("#",) * 7,
    "o": (
        "....",
        "....",
        "....",
        "####",
        "#.##",
        "#.##",
        "####",
    ),
    "c": (
        "...",
        "...",
        "...",
        "###",
        "#..",
        "#..",
        "###",
    ),
    "k": (
        "#..",
        "#.#",
        "#.#",
        "##.",
        "#.#",
        "#.#",
        "#.#",
    ),
    "s": (
        "...",
        "...",
        "###",
        "#..",
        "###",
        "..#",
        "###",
    ),
}


class TitlePhase(Enum):
    NONE = "none"
    WAIT = "wait"
    FLASH = "flash"
    FALL = "fall"


class FlashStep(AnimationStep):
    """Repaint a letter, blurred on even steps and sharp on odd ones."""

    def __init__(self, title: "Title", delay_ms: float = STEP_MS):
        self.title = title
        self.delay_ms = delay_ms

    def advance(self, value: int) -> Tuple[int, float]:
        self.title.paint_letter(FLASHING_LETTER, blurred=value % 2 == 0)
        return value + 1, self.delay_ms


class Title:
    """The animated game title."""

    def __init__(self, texture: int = cells.RED | cells.UNIFORM,
                 gravity_ms: Optional[float] = None, text: str = TITLE_TEXT):
        """
        Args:
            texture: attribute of every block of the title
            gravity_ms: fall speed of the letter, defaults to level 0 gravity
            text: letters to draw, each must have a glyph
        """
        for letter in text:
            if letter not in GLYPHS:
                raise ValueError(f"No glyph for letter {letter!r}")
        self.text = text
        self.texture = texture
        self.gravity_ms = gravity_interval(0) if gravity_ms is None else gravity_ms
        self.phase = TitlePhase.NONE
        self.anim = Animator(FixedStep(1, STEP_MS))
        self.grid = FieldBuffer()
        self._build()

    def _build(self) -> None:
        # One empty column before each letter and after the last one.
        width = sum(len(GLYPHS[c][0]) + 1 for c in self.text) + 1
        height = len(GLYPHS[self.text[0]])
        self.grid.resize(width, height)
        for y in range(height):
            line: List[int] = []
            for letter in self.text:
                line.append(cells.TRANSPARENT)
                line.extend(self.texture if c == "#" else cells.TRANSPARENT
                            for c in GLYPHS[letter][y])
            line.append(cells.TRANSPARENT)
            self.grid.set_line(0, y, *line)

    def set_texture(self, texture: int) -> None:
        """Repaint every block of the title."""
        if texture == self.texture:
            return
        self.texture = texture
        data = self.grid.data
        data[data != cells.TRANSPARENT] = texture

    def set_gravity(self, level: int) -> None:
        """Make the letter fall at the speed of the given level."""
        self.gravity_ms = gravity_interval(level)

    def fit(self, max_width: int) -> int:
        """Size cells so the title fits max_width pixels, up to a bound."""
        cell = min(max_width // self.grid.width, MAX_CELL_SIZE)
        self.grid.set_cell_size((cell, cell))
        return cell

    def letter_x(self, letter: str) -> int:
        """Column of the first occurrence of letter, or -1."""
        x = 1
        for c in self.text:
            if c == letter:
                return x
            x += len(GLYPHS[c][0]) + 1
        return -1

    def paint_letter(self, letter: str, blurred: bool = False) -> None:
        """Repaint the blocks of a letter with the title texture."""
        x0 = self.letter_x(letter)
        width = len(GLYPHS[letter][0])
        texture = cells.blur(self.texture) if blurred else self.texture
        region = self.grid.data[:, x0:x0 + width]
        region[region != cells.TRANSPARENT] = texture

    def drop_letter(self, letter: str, pos: int) -> None:
        """
        Draw a letter with its top block row at row pos.

        Position 0 erases the letter from its resting place first; later
        positions erase the row the letter just left.
        """
        glyph = GLYPHS[letter]
        x0 = self.letter_x(letter)
        width = len(glyph[0])
        top = next(y for y, row in enumerate(glyph) if "#" in row)
        rows = glyph[top:]
        if pos == 0:
            self.grid.data[top:, x0:x0 + width] = cells.TRANSPARENT
        else:
            self.grid.data[pos - 1, x0:x0 + width] = cells.TRANSPARENT
        for y, row in enumerate(rows):
            self.grid.set_line(x0, pos + y, *(
                self.texture if c == "#" else cells.TRANSPARENT for c in row))

    def update(self, now: float) -> TitlePhase:
        """
        Advance the title sequence to time now.

        Returns:
            The phase running after the update
        """
        if self.phase == TitlePhase.NONE:
            self.phase = TitlePhase.WAIT
            self.anim.step = FixedStep(1, STEP_MS)
            self.anim.start(0, WAIT_STEPS)
        if self.phase == TitlePhase.WAIT:
            if self.anim.active:
                self.anim.animate(now)
                return self.phase
            self.phase = TitlePhase.FLASH
            self.anim.step = FlashStep(self, STEP_MS)
            self.anim.start(0, FLASH_STEPS)
        if self.phase == TitlePhase.FLASH:
            if self.anim.active:
                self.anim.animate(now)
                return self.phase
            self.phase = TitlePhase.FALL
            self.anim.step = FixedStep(1, self.gravity_ms)
            self.anim.start(0, FALL_STEPS)
        if self.phase == TitlePhase.FALL:
            if self.anim.active:
                self.drop_letter(FLASHING_LETTER, self.anim.animate(now))
                return self.phase
            self.phase = TitlePhase.NONE
        return self.phase

    def next_wake(self) -> Optional[float]:
        return self.anim.wake_at

    def __str__(self) -> str:
        return str(self.grid)
