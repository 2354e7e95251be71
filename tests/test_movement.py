"""
Tests for piece movement and collision.
"""
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blocks import cells
from blocks.field import FieldBuffer
from blocks.keymap import Action
from blocks.movement import (
    apply_action, hard_drop, move_down, move_left, move_right,
    rotate_left, rotate_right, soft_drop,
)
from blocks.pieces import PieceKind, Rotation, new_piece


@pytest.fixture
def field():
    """A bordered 10x20 playing field."""
    field = FieldBuffer(12, 22)
    field.draw_border()
    return field


def spawned(field, kind, attr=cells.RED):
    piece = new_piece(kind, attr)
    assert piece.spawn(field)
    piece.layout(field)
    return piece


class TestShift:
    """Test horizontal moves."""

    def test_move_left_and_right(self, field):
        """A free piece moves one column."""
        piece = spawned(field, PieceKind.O)
        assert move_left(piece, field)
        assert piece.x == 4
        assert field.get(4, 1) == cells.RED
        assert field.get(6, 1) == cells.TRANSPARENT
        assert move_right(piece, field)
        assert piece.x == 5

    def test_blocked_by_wall(self, field):
        """Moves into the wall fail and leave the piece drawn."""
        piece = spawned(field, PieceKind.O)
        for _ in range(4):
            assert move_left(piece, field)
        assert piece.x == 1
        assert not move_left(piece, field)
        assert piece.x == 1
        assert field.get(1, 1) == cells.RED

    def test_blocked_by_block(self, field):
        """Moves into settled blocks fail."""
        field.set(7, 2, cells.BLUE)
        piece = spawned(field, PieceKind.O)
        assert not move_right(piece, field)
        assert piece.x == 5


class TestTurn:
    """Test rotations."""

    def test_rotate_right(self, field):
        """A free piece turns clockwise in place."""
        piece = spawned(field, PieceKind.T)
        assert rotate_right(piece, field)
        assert piece.rotation == Rotation.R90
        assert np.count_nonzero(field.data == cells.RED) == 4

    def test_rotate_left(self, field):
        """A free piece turns counterclockwise in place."""
        piece = spawned(field, PieceKind.T)
        assert rotate_left(piece, field)
        assert piece.rotation == Rotation.R270

    def test_no_wall_kick(self, field):
        """A rotation into the wall fails, no kick is tried."""
        piece = spawned(field, PieceKind.I)
        piece.layout(field, clear=True)
        piece.rotation = Rotation.R90
        piece.layout(field)
        while move_left(piece, field):
            pass
        x = piece.x
        assert not rotate_right(piece, field)
        assert piece.rotation == Rotation.R90
        assert piece.x == x


class TestDrop:
    """Test moving down."""

    def test_move_down_unready(self, field):
        """A piece that was never positioned always moves."""
        piece = new_piece(PieceKind.O)
        assert move_down(piece, field)
        assert piece.y == 0

    def test_move_down_redraws(self, field):
        """The piece is drawn on its new row."""
        piece = spawned(field, PieceKind.O)
        assert move_down(piece, field)
        assert field.get(5, 1) == cells.TRANSPARENT
        assert field.get(5, 3) == cells.RED

    def test_hard_drop(self, field):
        """A hard drop falls to the floor and counts the rows."""
        piece = spawned(field, PieceKind.O)
        assert hard_drop(piece, field) == 18
        assert piece.y == 19
        assert field.get(5, 20) == cells.RED
        assert field.get(6, 19) == cells.RED

    def test_soft_drop(self, field):
        """A soft drop moves one row, or lands."""
        piece = spawned(field, PieceKind.O)
        assert soft_drop(piece, field) == (1, False)
        hard_drop(piece, field)
        assert soft_drop(piece, field) == (0, True)


class TestApplyAction:
    """Test the action dispatcher."""

    def test_hard_drop_lands(self, field):
        """Hard drops always land."""
        piece = spawned(field, PieceKind.O)
        assert apply_action(piece, field, Action.HARD_DROP) == (18, True)

    def test_moves_score_nothing(self, field):
        """Horizontal moves and rotations never land."""
        piece = spawned(field, PieceKind.T)
        for action in (Action.MOVE_LEFT, Action.MOVE_RIGHT,
                       Action.ROTATE_LEFT, Action.ROTATE_RIGHT):
            assert apply_action(piece, field, action) == (0, False)

    def test_pause_ignored(self, field):
        """Pause does not touch the piece."""
        piece = spawned(field, PieceKind.T)
        state = field.get_state()
        assert apply_action(piece, field, Action.PAUSE) == (0, False)
        assert np.array_equal(field.data, state)
