"""
Tests for the best score table.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blocks.leaderboard import MAX_ENTRIES, Leaderboard, ScoreEntry


def snapshot(total: int, lines: int = 0, level: int = 0):
    return [total, lines, level, 0, 0, 0, 0]


class TestSubmit:
    """Test adding games."""

    def test_empty_table(self):
        """Any positive total goes in an empty table."""
        board = Leaderboard()
        assert board.submit(snapshot(10)) == 0
        assert len(board) == 1

    def test_zero_total_rejected(self):
        """Games without points are not kept."""
        board = Leaderboard()
        assert board.submit(snapshot(0)) is None
        assert len(board) == 0

    def test_sorted_descending(self):
        """Entries are kept highest first."""
        board = Leaderboard()
        for total in (50, 200, 100):
            board.submit(snapshot(total))
        assert [e.total for e in board.entries] == [200, 100, 50]

    def test_rank(self):
        """The returned rank is the new entry's position."""
        board = Leaderboard()
        board.submit(snapshot(300))
        board.submit(snapshot(100))
        assert board.submit(snapshot(200)) == 1

    def test_ties_are_stable(self):
        """A new entry ranks after equal totals."""
        board = Leaderboard()
        board.submit(snapshot(100))
        board.name(0, "first")
        rank = board.submit(snapshot(100))
        assert rank == 1
        assert board[0].player == "first"

    def test_full_table(self):
        """A full table only takes games beating its lowest entry."""
        board = Leaderboard()
        for total in range(10, 110, 10):
            board.submit(snapshot(total))
        assert len(board) == MAX_ENTRIES
        assert board.submit(snapshot(10)) is None
        assert board.submit(snapshot(5)) is None
        assert board.submit(snapshot(15)) == 9
        assert len(board) == MAX_ENTRIES
        assert board[-1].total == 15


class TestNames:
    """Test player names."""

    def test_name_truncated(self):
        """Names are cut to 10 characters."""
        board = Leaderboard()
        board.submit(snapshot(10))
        board.name(0, "averyveryverylongname")
        assert board[0].player == "averyveryv"


class TestPersistence:
    """Test conversion for the settings file."""

    def test_roundtrip(self):
        """Entries survive to_list/from_list."""
        board = Leaderboard()
        board.submit(snapshot(100, lines=3, level=1))
        board.name(0, "ann")
        restored = Leaderboard.from_list(board.to_list())
        assert restored[0] == ScoreEntry("ann", snapshot(100, lines=3, level=1))

    def test_from_list_sorts_and_caps(self):
        """Loaded tables are sorted and capped."""
        data = [{"player": str(i), "score": snapshot(i + 1)} for i in range(12)]
        board = Leaderboard.from_list(data)
        assert len(board) == MAX_ENTRIES
        assert board[0].total == 12

    def test_short_scores_padded(self):
        """Missing counters are read as zero."""
        entry = ScoreEntry.from_dict({"player": "x", "score": [5]})
        assert entry.score == [5, 0, 0, 0, 0, 0, 0]
