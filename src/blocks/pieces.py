"""
Blocks Piece Definitions.

This module defines the 7 tetrominoes and the falling piece:
- Shape: an immutable, padded attribute matrix plus its visible extent
- CATALOGUE: the fixed tuple of shapes, indexed by PieceKind
- Piece: a shape with a rotation, a position and a display attribute

Shape cells hold either TRANSPARENT or a pattern. Gradient patterns are
chosen so that a gradient display attribute lights every piece from the
same side whatever its orientation.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterator, List, Sequence, Tuple

import numpy as np

from . import cells
from .field import FieldBuffer

T = cells.TRANSPARENT
U = cells.UNIFORM
N = cells.GRADIENT_N
E = cells.GRADIENT_E
S = cells.GRADIENT_S
W = cells.GRADIENT_W
NW = cells.GRADIENT_NW
NE = cells.GRADIENT_NE
SE = cells.GRADIENT_SE
SW = cells.GRADIENT_SW


class PieceKind(IntEnum):
    """The 7 tetrominoes."""
    I = 0
    J = 1
    L = 2
    O = 3
    S = 4
    T = 5
    Z = 6


class Rotation(IntEnum):
    """Clockwise piece orientations."""
    R0 = 0
    R90 = 1
    R180 = 2
    R270 = 3

    def next(self) -> "Rotation":
        """Quarter turn clockwise."""
        return Rotation((self + 1) % 4)

    def prev(self) -> "Rotation":
        """Quarter turn counterclockwise."""
        return Rotation((self + 3) % 4)


@dataclass(frozen=True)
class Shape:
    """An unrotated tetromino."""
    kind: PieceKind
    data: Tuple[Tuple[int, ...], ...]  # padded square matrix, row-major
    width: int  # visible width, padding excluded
    height: int  # visible height, padding excluded

    @property
    def size(self) -> int:
        """Side of the padded matrix."""
        return len(self.data)

    @property
    def num_blocks(self) -> int:
        return sum(1 for row in self.data for t in row if t != T)

    def __repr__(self) -> str:
        return f"Shape({self.kind.name}, {self.width}x{self.height})"


def _make_shape(kind: PieceKind, rows: Sequence[Sequence[int]], width: int, height: int) -> Shape:
    """Helper to create a Shape with immutable rows."""
    data = tuple(tuple(row) for row in rows)
    if any(len(row) != len(data) for row in data):
        raise ValueError(f"shape {kind.name} is not square")
    return Shape(kind, data, width, height)


# =============================================================================
# THE 7 TETROMINOES
# =============================================================================

I_SHAPE = _make_shape(PieceKind.I, [
    [T, T, T, T],
    [N, N, N, N],
    [T, T, T, T],
    [T, T, T, T],
], width=4, height=1)  # ▢▢▢▢

J_SHAPE = _make_shape(PieceKind.J, [
    [T, T, T],
    [N, N, NE],
    [T, T, E],
], width=3, height=2)  # ▢▢▢
                       #   ▢

L_SHAPE = _make_shape(PieceKind.L, [
    [T, T, T],
    [NW, N, N],
    [W, T, T],
], width=3, height=2)  # ▢▢▢
                       # ▢

O_SHAPE = _make_shape(PieceKind.O, [
    [SE, SW],
    [NE, NW],
], width=2, height=2)  # ▢▢
                       # ▢▢

S_SHAPE = _make_shape(PieceKind.S, [
    [T, T, T],
    [T, U, N],
    [S, U, T],
], width=3, height=2)  #  ▢▢
                       # ▢▢

T_SHAPE = _make_shape(PieceKind.T, [
    [T, T, T],
    [N, U, N],
    [T, N, T],
], width=3, height=2)  # ▢▢▢
                       #  ▢

Z_SHAPE = _make_shape(PieceKind.Z, [
    [T, T, T],
    [N, U, T],
    [T, U, S],
], width=3, height=2)  # ▢▢
                       #  ▢▢

# Indexed by PieceKind.
CATALOGUE: Tuple[Shape, ...] = (
    I_SHAPE,
    J_SHAPE,
    L_SHAPE,
    O_SHAPE,
    S_SHAPE,
    T_SHAPE,
    Z_SHAPE,
)
NUM_KINDS: int = len(CATALOGUE)

assert all(shape.kind == i for i, shape in enumerate(CATALOGUE))


def get_shape(kind: int, catalogue: Sequence[Shape] = CATALOGUE) -> Shape:
    """Get a shape by its kind."""
    if not 0 <= kind < len(catalogue):
        raise ValueError(f"Piece kind must be 0-{len(catalogue) - 1}, got {kind}")
    return catalogue[kind]


def random_shape(rng: np.random.Generator, catalogue: Sequence[Shape] = CATALOGUE) -> Shape:
    """Pick a shape uniformly with the given random generator."""
    return catalogue[int(rng.integers(len(catalogue)))]


Visit = Callable[[int, int, int], bool]


class Piece:
    """
    A falling piece.

    The shape matrix is never rotated in place: the rotation only changes
    how ``walk`` reads it. The position is the top-left corner of the
    padded matrix on the field and may lie above the field while the
    piece enters it.
    """

    def __init__(self, shape: Shape, attr: int = cells.BLACK | cells.UNIFORM):
        """
        Args:
            shape: the piece's shape from the catalogue
            attr: display attribute (color | pattern) chosen by the player
        """
        self.shape = shape
        self.attr = attr
        self.rotation = Rotation.R0
        self.x = 0
        self.y = 0
        self.ready = False  # positioned at least once

    @property
    def kind(self) -> PieceKind:
        return self.shape.kind

    @property
    def width(self) -> int:
        """Visible width, without padding."""
        return self.shape.width

    @property
    def height(self) -> int:
        """Visible height, without padding."""
        return self.shape.height

    @property
    def position(self) -> Tuple[int, int]:
        """Position on the field, clamped to its top row."""
        return self.x, max(0, self.y)

    def dims(self) -> Tuple[int, int]:
        """Full (width, height) of the piece, padding included."""
        return len(self.shape.data[0]), len(self.shape.data)

    def blocks(self) -> Iterator[Tuple[int, int, int]]:
        """
        Yield (x, y, attr) for every visible cell in the current rotation.

        Coordinates are relative to the piece position. Gradient display
        attributes are remapped so that rotation preserves the light
        direction; any other display attribute is used as is.
        """
        data = self.shape.data
        xn, yn = self.dims()
        rot = self.rotation
        display = self.attr
        is_gradient = cells.gradient(display) != cells.UNIFORM
        for y in range(yn):
            for x in range(xn):
                xx, yy = x, y
                if rot == Rotation.R0:
                    t = data[y][x]
                elif rot == Rotation.R90:
                    t = data[yn - 1 - y][x]
                    xx, yy = y, x
                elif rot == Rotation.R180:
                    t = data[yn - 1 - y][xn - 1 - x]
                else:
                    t = data[y][xn - 1 - x]
                    xx, yy = y, x
                if t == cells.TRANSPARENT:
                    continue
                if is_gradient:
                    if cells.gradient(t) != cells.UNIFORM:
                        t = cells.rotate_gradient(t, rot)
                    t |= cells.color(display)
                else:
                    t = display
                yield xx, yy, t

    def walk(self, visit: Visit) -> None:
        """Call visit(x, y, attr) for every visible cell until it returns True."""
        for x, y, t in self.blocks():
            if visit(x, y, t):
                return

    def check(self, field: FieldBuffer) -> bool:
        """
        Check that the piece fits the field at its current position and rotation.

        Cells above the field's top edge are always vacant; every other
        cell must land on an in-bounds, transparent field cell.
        """
        cols, rows = field.size
        for x, y, _ in self.blocks():
            fx, fy = self.x + x, self.y + y
            if fy < 0:
                continue
            if not (0 <= fx < cols and fy < rows):
                return False
            if not field.is_empty(fx, fy):
                return False
        return True

    def layout(self, field: FieldBuffer, clear: bool = False) -> None:
        """Draw the piece on the field, or erase it back to transparent."""
        for x, y, t in self.blocks():
            if clear:
                t = cells.TRANSPARENT
            if self.y + y >= 0:
                field.set(self.x + x, self.y + y, t)

    def first_row(self) -> int:
        """Index of the topmost row holding a visible cell."""
        return min((y for _, y, _ in self.blocks()), default=0)

    def spawn(self, field: FieldBuffer) -> bool:
        """
        Position the piece for the first time.

        The piece is centered horizontally and its first visible row is
        put on row 1, just below the field's hidden top row. Later calls
        do nothing.

        Returns:
            False if the piece collides right away (the game is over)
        """
        if self.ready:
            return True
        self.ready = True
        cols = field.width
        self.x = (cols - self.width) // 2
        self.y = 1 - self.first_row()
        return self.check(field)

    def footprint(self) -> List[Tuple[int, int]]:
        """Field coordinates of the visible cells."""
        return [(self.x + x, self.y + y) for x, y, _ in self.blocks()]

    def __repr__(self) -> str:
        return (f"Piece({self.kind.name}, rot={self.rotation * 90}, "
                f"pos=({self.x}, {self.y}), ready={self.ready})")


def new_piece(kind: int, attr: int = cells.BLACK | cells.UNIFORM,
              catalogue: Sequence[Shape] = CATALOGUE) -> Piece:
    """Create an unpositioned piece of the given kind."""
    return Piece(get_shape(kind, catalogue), attr)


def random_piece(rng: np.random.Generator, attr: int = cells.BLACK | cells.UNIFORM,
                 catalogue: Sequence[Shape] = CATALOGUE) -> Piece:
    """Create an unpositioned piece of a random kind."""
    return Piece(random_shape(rng, catalogue), attr)


def visualize_piece(piece: Piece) -> str:
    """Create a string visualization of a piece in its current rotation."""
    xn, yn = piece.dims()
    grid = [[" "] * xn for _ in range(yn)]
    for x, y, _ in piece.blocks():
        grid[y][x] = "□"
    return "\n".join("".join(row) for row in grid)


if __name__ == "__main__":
    # Print every piece in every rotation for verification
    for shape in CATALOGUE:
        piece = Piece(shape)
        print(f"\n{shape.kind.name} ({shape.num_blocks} blocks, {shape.width}x{shape.height}):")
        for rot in Rotation:
            piece.rotation = rot
            print(f"-- {rot * 90}")
            print(visualize_piece(piece))
