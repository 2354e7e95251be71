"""
Full row detection and compaction.

Rows are scanned only where the piece that just landed lies, so a scan
costs at most a few rows of the field. Field row 0 is hidden and the
last row is the floor: neither is ever scanned. Columns 0 and width-1
are walls and are never scanned nor moved.
"""
from typing import Optional, Tuple

from . import cells
from .field import FieldBuffer
from .pieces import Piece


def is_full_row(field: FieldBuffer, y: int) -> bool:
    """Check that no interior cell of row y is transparent."""
    interior = field.data[y, 1:field.width - 1]
    return bool((interior != cells.TRANSPARENT).all())


def find_full_rows(field: FieldBuffer, piece: Piece) -> Optional[Tuple[int, int]]:
    """
    Find the full rows crossed by a landed piece.

    Args:
        field: the playing field, piece drawn in it
        piece: the piece that could not move down

    Returns:
        (first, last) with last exclusive, or None if no row is full.
        Full rows are expected to be contiguous: a non full row between
        two full ones is included in the span.
    """
    _, y = piece.position
    _, padded_height = piece.dims()
    start = max(y, 1)
    end = min(y + padded_height, field.height - 1)
    first, last = -1, -1
    for row in range(start, end):
        if not is_full_row(field, row):
            continue
        if first < 0:
            first = row
        last = row + 1
    if first < 0:
        return None
    return first, last


def compact(field: FieldBuffer, first: int, last: int) -> None:
    """
    Remove rows [first, last) by moving every row above them down.

    Rows entering from above the field are transparent.
    """
    num = last - first
    xn = field.width - 1
    for y in range(first - 1, -num - 1, -1):
        if y >= 0:
            field.data[y + num, 1:xn] = field.data[y, 1:xn]
        else:
            field.data[y + num, 1:xn] = cells.TRANSPARENT
