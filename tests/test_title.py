"""
Tests for the title sequence.
"""
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blocks import cells
from blocks.title import GLYPHS, Title, TitlePhase

TEXTURE = cells.RED | cells.UNIFORM


def run_cycle(title: Title, on_update=None, limit: int = 1000):
    """Update the title at each wake-up through one whole sequence."""
    phases = []
    now = 0.0
    for _ in range(limit):
        phase = title.update(now)
        phases.append(phase)
        if on_update is not None:
            on_update(title, phase)
        if phase == TitlePhase.NONE:
            return phases
        wake = title.next_wake()
        now = max(now, wake if wake is not None else now)
    raise AssertionError("title sequence did not loop")


class TestTitleGrid:
    """Test the drawn word."""

    def test_size(self):
        """One empty column around every letter."""
        title = Title()
        assert title.grid.size == (26, 7)

    def test_blocks_drawn(self):
        """Every glyph block is drawn with the texture."""
        title = Title(texture=TEXTURE)
        blocks = sum(row.count("#") for c in "Blocks" for row in GLYPHS[c])
        assert np.count_nonzero(title.grid.data == TEXTURE) == blocks
        assert np.all(title.grid.data[:, 0] == cells.TRANSPARENT)

    def test_letter_x(self):
        """Letters are located by column."""
        title = Title()
        assert title.letter_x("B") == 1
        assert title.letter_x("o") == 9
        assert title.letter_x("x") == -1

    def test_set_texture_repaints(self):
        """A new texture repaints every block."""
        title = Title(texture=TEXTURE)
        count = np.count_nonzero(title.grid.data)
        title.set_texture(cells.BLUE | cells.HOLLOW)
        assert np.count_nonzero(title.grid.data == cells.BLUE | cells.HOLLOW) == count

    def test_unknown_letter(self):
        """Only letters with a glyph can be drawn."""
        with pytest.raises(ValueError):
            Title(text="Blockz")

    def test_fit(self):
        """Cells fit the width, up to a maximum size."""
        title = Title()
        assert title.fit(260) == 10
        assert title.grid.cell_size == (10, 10)
        assert title.fit(10000) == 64


class TestTitleSequence:
    """Test the animation phases."""

    def test_phase_order(self):
        """Wait, flash, fall, then start over."""
        phases = run_cycle(Title())
        order = [p for i, p in enumerate(phases) if i == 0 or p != phases[i - 1]]
        assert order == [TitlePhase.WAIT, TitlePhase.FLASH, TitlePhase.FALL, TitlePhase.NONE]

    def test_flash_blurs_letter(self):
        """The flashing letter is blurred part of the time."""
        seen = []

        def check(title, phase):
            if phase == TitlePhase.FLASH:
                x0 = title.letter_x("o")
                seen.append(np.any(title.grid.data[:, x0:x0 + 4] == cells.blur(TEXTURE)))

        run_cycle(Title(texture=TEXTURE), check)
        assert any(seen)
        assert not all(seen)

    def test_letter_falls_from_top(self):
        """The fall starts with the letter on the top row."""
        tops = []

        def check(title, phase):
            if phase == TitlePhase.FALL and not tops:
                x0 = title.letter_x("o")
                tops.append(title.grid.data[0, x0:x0 + 4].copy())
                assert np.all(title.grid.data[6, x0:x0 + 4] == cells.TRANSPARENT)

        run_cycle(Title(texture=TEXTURE), check)
        assert np.all(tops[0] == TEXTURE)

    def test_cycle_restores_grid(self):
        """After a whole cycle the title looks as it started."""
        title = Title(texture=TEXTURE)
        before = title.grid.get_state()
        run_cycle(title)
        assert np.array_equal(title.grid.data, before)

    def test_gravity(self):
        """The fall speed follows the chosen level."""
        title = Title()
        title.set_gravity(9)
        assert title.gravity_ms == 300
