"""
Cell Attribute Definitions.

A cell attribute is a plain integer describing what a field cell looks like:
- color: low bits (transparent, invisible, solid colors, image-backed colors)
- pattern: high bits (uniform, 4 solid patterns, 8 directional gradients)
- blur: a single flag halving the alpha channel

Color and pattern are independent sub-fields and combine with bitwise OR,
e.g. ``RED | CORNER``.
"""
from typing import Dict, Tuple

PATTERN_BITS = 10
COLOR_MASK = (1 << PATTERN_BITS) - 1
BLUR = 1 << 15

# -----------------------------------------------------------------------------
# Colors
# -----------------------------------------------------------------------------
TRANSPARENT = 0  # never obscures what is beneath
INVISIBLE = 1  # solid but never drawn (walls)
WHITE = 2
BLACK = 3
RED = 4
ORANGE = 5
YELLOW = 6
GREEN = 7
BLUE = 8
INDIGO = 9
VIOLET = 10
COLOR_END = 11
# Image-backed colors are numbered from here on, in asset file name order.
GIOLOGO = 12
IMAGE_END = 13

# -----------------------------------------------------------------------------
# Patterns
# -----------------------------------------------------------------------------
UNIFORM = 1 << PATTERN_BITS
SQUARE = 2 << PATTERN_BITS
HOLLOW = 3 << PATTERN_BITS
CORNER = 4 << PATTERN_BITS
PYRAMID = 5 << PATTERN_BITS
GRADIENT_N = 6 << PATTERN_BITS
GRADIENT_E = 7 << PATTERN_BITS
GRADIENT_S = 8 << PATTERN_BITS
GRADIENT_W = 9 << PATTERN_BITS
GRADIENT_NW = 10 << PATTERN_BITS
GRADIENT_NE = 11 << PATTERN_BITS
GRADIENT_SE = 12 << PATTERN_BITS
GRADIENT_SW = 13 << PATTERN_BITS
PATTERN_END = 14 << PATTERN_BITS

CARDINAL_GRADIENTS = (GRADIENT_N, GRADIENT_E, GRADIENT_S, GRADIENT_W)
DIAGONAL_GRADIENTS = (GRADIENT_NW, GRADIENT_NE, GRADIENT_SE, GRADIENT_SW)

NAMES: Dict[int, str] = {
    TRANSPARENT: "T",
    INVISIBLE: "_",
    WHITE: "W",
    BLACK: "b",
    RED: "R",
    ORANGE: "O",
    YELLOW: "Y",
    GREEN: "G",
    BLUE: "B",
    INDIGO: "I",
    VIOLET: "V",
    GIOLOGO: "giologo",
    UNIFORM: "uniform",
    SQUARE: "square",
    HOLLOW: "hollow",
    CORNER: "corner",
    PYRAMID: "pyramid",
    GRADIENT_N: "gradientN",
    GRADIENT_E: "gradientE",
    GRADIENT_S: "gradientS",
    GRADIENT_W: "gradientW",
    GRADIENT_NW: "gradientNW",
    GRADIENT_NE: "gradientNE",
    GRADIENT_SE: "gradientSE",
    GRADIENT_SW: "gradientSW",
}

RGBA: Dict[int, Tuple[int, int, int, int]] = {
    WHITE: (255, 255, 255, 255),
    BLACK: (0, 0, 0, 255),
    RED: (255, 0, 0, 255),
    ORANGE: (255, 127, 0, 255),
    YELLOW: (255, 255, 0, 255),
    GREEN: (0, 255, 0, 255),
    BLUE: (0, 0, 255, 255),
    INDIGO: (75, 0, 130, 255),
    VIOLET: (238, 130, 238, 255),
}


def color(attr: int) -> int:
    """Extract the color sub-field."""
    return attr & COLOR_MASK


def unblur(attr: int) -> int:
    """Return the attribute with full alpha."""
    return attr & ~BLUR


def blur(attr: int) -> int:
    """Return the attribute with its alpha channel halved."""
    return attr | BLUR


def is_blurred(attr: int) -> bool:
    return attr & BLUR != 0


def pattern(attr: int) -> int:
    """
    Extract the pattern sub-field.

    The blur flag is ignored and attributes without any pattern bit
    are reported as UNIFORM.
    """
    p = unblur(attr) & ~COLOR_MASK
    if p >= UNIFORM:
        return p
    return UNIFORM


def gradient(attr: int) -> int:
    """Return the attribute's gradient pattern, or UNIFORM if it has none."""
    p = pattern(attr)
    if p >= GRADIENT_N:
        return p
    return UNIFORM


def next_gradient(attr: int) -> int:
    """
    Advance a gradient by a quarter clockwise turn.

    Cardinal gradients cycle N -> E -> S -> W and diagonal ones
    NW -> NE -> SE -> SW, so the apparent light source stays put when
    a piece rotates. The color sub-field is dropped.
    """
    current = gradient(attr)
    anchor = GRADIENT_NW if current >= GRADIENT_NW else GRADIENT_N
    g = (current - anchor) >> PATTERN_BITS
    g = (g + 1) % 4
    return (g << PATTERN_BITS) + anchor


def rotate_gradient(attr: int, quarter_turns: int) -> int:
    """Apply next_gradient once per clockwise quarter turn."""
    for _ in range(quarter_turns % 4):
        attr = next_gradient(attr)
    return attr


def color_range() -> Tuple[int, int]:
    """Return the [start, end) range of player selectable colors."""
    return INVISIBLE + 1, COLOR_END - 1


def pattern_count() -> int:
    """Return the number of selectable patterns (a single gradient included)."""
    return ((GRADIENT_N - UNIFORM) >> PATTERN_BITS) + 1


def pattern_at(n: int) -> int:
    """Return the nth selectable pattern."""
    return UNIFORM + (n << PATTERN_BITS)


def is_image(attr: int) -> bool:
    """Report whether the attribute's color is backed by an image asset."""
    return COLOR_END < color(attr) < IMAGE_END


def name(attr: int) -> str:
    """Short name of an attribute, as used by text dumps of a field."""
    if attr in NAMES:
        return NAMES[attr]
    return f"cell({attr})"


def rgba(attr: int) -> Tuple[int, int, int, int]:
    """
    Get the RGBA color of an attribute.

    Transparent, invisible and image colors have no RGBA value and map
    to (0, 0, 0, 0). Blurred attributes get an alpha of 128.
    """
    r, g, b, a = RGBA.get(color(attr), (0, 0, 0, 0))
    if is_blurred(attr) and a:
        a = 128
    return r, g, b, a
