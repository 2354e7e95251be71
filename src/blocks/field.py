"""
Blocks Field Buffer Module.

This module implements the playing field storage:
- width x height matrix of cell attributes backed by a flat numpy array
- aliasing sub-views (writes through a view show up in its parent)
- resizing that keeps the top-left overlap of the previous content
- an invisible wall/floor border around the playable area
"""
from typing import Optional, Tuple

import numpy as np

from . import cells

Point = Tuple[int, int]


class FieldBuffer:
    """
    A 2-D grid of cell attributes.

    Cells live in a flat ``uint16`` numpy array; ``data`` is a
    ``(height, width)`` view into it. Buffers returned by ``slice`` share
    that storage and never copy, so the parent and all of its views
    observe each other's writes. Only the owning buffer can be resized.

    The cell size is the on-screen size of a cell in pixels. The engine
    never looks at it beyond sizing animations.
    """

    def __init__(self, width: int = 0, height: int = 0, cell_size: Point = (0, 0)):
        """Create a transparent buffer of the given size."""
        self._store: Optional[np.ndarray] = np.zeros(width * height, dtype=np.uint16)
        self.data = self._store[: width * height].reshape(height, width)
        self.cell_size = cell_size

    @classmethod
    def _view(cls, data: np.ndarray, cell_size: Point) -> "FieldBuffer":
        view = cls.__new__(cls)
        view._store = None
        view.data = data
        view.cell_size = cell_size
        return view

    @property
    def is_view(self) -> bool:
        """Whether this buffer borrows its storage from another one."""
        return self._store is None

    @property
    def size(self) -> Point:
        """Return (width, height)."""
        height, width = self.data.shape
        return width, height

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]

    def set_cell_size(self, size: Point) -> None:
        """Update the on-screen cell size (window reflow only)."""
        self.cell_size = size

    def get(self, x: int, y: int) -> int:
        """Get the attribute at column x, row y."""
        return int(self.data[y, x])

    def set(self, x: int, y: int, attr: int) -> None:
        """Set the attribute at column x, row y."""
        self.data[y, x] = attr

    def set_line(self, x: int, y: int, *attrs: int) -> None:
        """Write attrs on row y starting at column x, truncated at the row end."""
        n = min(len(attrs), self.width - x)
        if n > 0:
            self.data[y, x:x + n] = attrs[:n]

    def fill(self, attr: int) -> None:
        """Set every cell to attr."""
        self.data.fill(attr)

    def clear(self) -> None:
        """Reset every cell to transparent."""
        self.data.fill(cells.TRANSPARENT)

    def slice(self, min_pt: Point, max_pt: Point) -> "FieldBuffer":
        """
        Return the [min_pt, max_pt) sub-region as a view sharing this buffer's cells.

        Args:
            min_pt: (x, y) of the top-left cell, inclusive
            max_pt: (x, y) of the bottom-right corner, exclusive

        Returns:
            A buffer aliasing this one's storage
        """
        if self.data.size == 0:
            return self
        (x0, y0), (x1, y1) = min_pt, max_pt
        if x0 == 0 and x1 == self.width:
            # Rows only: no column bookkeeping needed.
            data = self.data[y0:y1]
        else:
            data = self.data[y0:y1, x0:x1]
        return FieldBuffer._view(data, self.cell_size)

    def resize(self, width: int, height: int) -> None:
        """
        Resize the buffer, keeping the top-left overlap of its content.

        The flat storage is only reallocated when it is too small for
        the new size; cells outside the kept overlap become transparent.
        """
        if self.is_view:
            raise ValueError("cannot resize a field buffer view")
        old_width, old_height = self.size
        keep = self.data[: min(height, old_height), : min(width, old_width)].copy()
        if self._store.size < width * height:
            self._store = np.zeros(width * height, dtype=np.uint16)
        self.data = self._store[: width * height].reshape(height, width)
        self.data.fill(cells.TRANSPARENT)
        kept_height, kept_width = keep.shape
        self.data[:kept_height, :kept_width] = keep

    def draw_border(self) -> None:
        """Draw invisible walls on the left, right and bottom edges (the top stays open)."""
        cols, rows = self.size
        self.data[rows - 1, :] = cells.INVISIBLE
        self.data[:, 0] = cells.INVISIBLE
        self.data[:, cols - 1] = cells.INVISIBLE

    def is_empty(self, x: int, y: int) -> bool:
        """Check if a cell is transparent."""
        return self.data[y, x] == cells.TRANSPARENT

    def get_state(self) -> np.ndarray:
        """Get a copy of the cells as a numpy array."""
        return self.data.copy()

    def __str__(self) -> str:
        """One line per row, one short cell name per cell."""
        lines = []
        for row in self.data:
            lines.append("".join(cells.name(int(attr)) for attr in row))
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        width, height = self.size
        kind = "view" if self.is_view else "buffer"
        return f"FieldBuffer({kind}, width={width}, height={height})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldBuffer):
            return False
        return np.array_equal(self.data, other.data)

    __hash__ = None
