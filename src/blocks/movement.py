"""
Piece movement and collision.

Every move follows the same steps: erase the piece, change its position
or rotation, check it against the field, undo the change if it collides,
then draw the piece where it ended up. Illegal moves are not errors:
they simply leave the piece where it was.
"""
from typing import Tuple

from .field import FieldBuffer
from .keymap import Action
from .pieces import Piece


def _shift(piece: Piece, field: FieldBuffer, dx: int) -> bool:
    piece.layout(field, clear=True)
    piece.x += dx
    ok = piece.check(field)
    if not ok:
        piece.x -= dx
    piece.layout(field)
    return ok


def _turn(piece: Piece, field: FieldBuffer, clockwise: bool) -> bool:
    rot = piece.rotation
    piece.layout(field, clear=True)
    piece.rotation = rot.next() if clockwise else rot.prev()
    ok = piece.check(field)
    if not ok:
        piece.rotation = rot
    piece.layout(field)
    return ok


def move_left(piece: Piece, field: FieldBuffer) -> bool:
    """Move the piece one column left."""
    return _shift(piece, field, -1)


def move_right(piece: Piece, field: FieldBuffer) -> bool:
    """Move the piece one column right."""
    return _shift(piece, field, 1)


def rotate_left(piece: Piece, field: FieldBuffer) -> bool:
    """Rotate the piece a quarter turn counterclockwise, in place (no wall kicks)."""
    return _turn(piece, field, clockwise=False)


def rotate_right(piece: Piece, field: FieldBuffer) -> bool:
    """Rotate the piece a quarter turn clockwise, in place (no wall kicks)."""
    return _turn(piece, field, clockwise=True)


def move_down(piece: Piece, field: FieldBuffer) -> bool:
    """
    Move the piece one row down.

    A piece that has not been positioned yet always succeeds.

    Returns:
        False if the piece could not move: it has landed
    """
    if not piece.ready:
        return True
    piece.layout(field, clear=True)
    piece.y += 1
    ok = piece.check(field)
    if not ok:
        piece.y -= 1
    piece.layout(field)
    return ok


def hard_drop(piece: Piece, field: FieldBuffer) -> int:
    """Drop the piece until it lands and return the number of rows it fell."""
    steps = 0
    while move_down(piece, field):
        steps += 1
    return steps


def soft_drop(piece: Piece, field: FieldBuffer) -> Tuple[int, bool]:
    """
    Move the piece one row down on player request.

    Returns:
        (rows fallen, landed)
    """
    if move_down(piece, field):
        return 1, False
    return 0, True


def apply_action(piece: Piece, field: FieldBuffer, action: int) -> Tuple[int, bool]:
    """
    Apply a player action to the piece.

    Args:
        piece: the falling piece, already drawn on the field
        field: the playing field
        action: an Action; PAUSE and unknown values do nothing here

    Returns:
        (drop steps scored, whether the piece landed)
    """
    if action == Action.MOVE_LEFT:
        move_left(piece, field)
    elif action == Action.MOVE_RIGHT:
        move_right(piece, field)
    elif action == Action.ROTATE_LEFT:
        rotate_left(piece, field)
    elif action == Action.ROTATE_RIGHT:
        rotate_right(piece, field)
    elif action == Action.SOFT_DROP:
        return soft_drop(piece, field)
    elif action == Action.HARD_DROP:
        return hard_drop(piece, field), True
    return 0, False
