"""
Tests for cell attributes.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blocks import cells


class TestSubFields:
    """Test color and pattern extraction."""

    def test_color_and_pattern_are_independent(self):
        """Combining with OR keeps both sub-fields intact."""
        attr = cells.RED | cells.CORNER
        assert cells.color(attr) == cells.RED
        assert cells.pattern(attr) == cells.CORNER

    def test_pattern_defaults_to_uniform(self):
        """A bare color has the uniform pattern."""
        assert cells.pattern(cells.BLUE) == cells.UNIFORM
        assert cells.pattern(cells.TRANSPARENT) == cells.UNIFORM

    def test_pattern_ignores_blur(self):
        """Blur is not part of the pattern."""
        attr = cells.blur(cells.GREEN | cells.HOLLOW)
        assert cells.pattern(attr) == cells.HOLLOW
        assert cells.color(attr) == cells.GREEN

    def test_gradient(self):
        """Only gradient patterns are reported as gradients."""
        assert cells.gradient(cells.RED | cells.GRADIENT_SE) == cells.GRADIENT_SE
        assert cells.gradient(cells.RED | cells.PYRAMID) == cells.UNIFORM
        assert cells.gradient(cells.RED) == cells.UNIFORM


class TestBlur:
    """Test the alpha reduction flag."""

    def test_blur_roundtrip(self):
        """Unblurring a blurred attribute gives it back."""
        attr = cells.YELLOW | cells.SQUARE
        assert cells.is_blurred(cells.blur(attr))
        assert not cells.is_blurred(attr)
        assert cells.unblur(cells.blur(attr)) == attr

    def test_blur_halves_alpha(self):
        """Blurred colors are half transparent."""
        assert cells.rgba(cells.RED)[3] == 255
        assert cells.rgba(cells.blur(cells.RED))[3] == 128

    def test_transparent_has_no_rgba(self):
        """Transparent and invisible cells draw nothing."""
        assert cells.rgba(cells.TRANSPARENT) == (0, 0, 0, 0)
        assert cells.rgba(cells.INVISIBLE) == (0, 0, 0, 0)


class TestGradientRotation:
    """Test gradient remapping on rotation."""

    @pytest.mark.parametrize("family", [cells.CARDINAL_GRADIENTS, cells.DIAGONAL_GRADIENTS])
    def test_cycle_within_family(self, family):
        """Each gradient advances within its own family of four."""
        for i, g in enumerate(family):
            assert cells.next_gradient(g) == family[(i + 1) % 4]

    def test_four_turns_is_identity(self):
        """A full turn gives the original gradient back."""
        for g in cells.CARDINAL_GRADIENTS + cells.DIAGONAL_GRADIENTS:
            assert cells.rotate_gradient(g, 4) == g
            assert cells.rotate_gradient(g, 0) == g

    def test_color_is_ignored(self):
        """The color sub-field does not change the family."""
        attr = cells.VIOLET | cells.GRADIENT_SW
        assert cells.next_gradient(attr) == cells.GRADIENT_NW

    def test_rotate_by_two(self):
        """A half turn points the gradient the other way."""
        assert cells.rotate_gradient(cells.GRADIENT_N, 2) == cells.GRADIENT_S
        assert cells.rotate_gradient(cells.GRADIENT_NE, 2) == cells.GRADIENT_SW


class TestSelection:
    """Test the selectable colors and patterns."""

    def test_color_range(self):
        """Selectable colors exclude transparent and invisible."""
        start, end = cells.color_range()
        assert start == cells.WHITE
        assert cells.TRANSPARENT < start and cells.INVISIBLE < start
        assert end <= cells.COLOR_END

    def test_patterns(self):
        """Selectable patterns run from uniform to the first gradient."""
        n = cells.pattern_count()
        assert cells.pattern_at(0) == cells.UNIFORM
        assert cells.pattern_at(n - 1) == cells.GRADIENT_N

    def test_is_image(self):
        """Image-backed colors are told apart from plain ones."""
        assert cells.is_image(cells.GIOLOGO | cells.UNIFORM)
        assert not cells.is_image(cells.RED)

    def test_names(self):
        """Short names are used for field dumps."""
        assert cells.name(cells.TRANSPARENT) == "T"
        assert cells.name(cells.INVISIBLE) == "_"
        assert cells.name(cells.RED) == "R"
        assert cells.name(cells.RED | cells.CORNER).startswith("cell(")
