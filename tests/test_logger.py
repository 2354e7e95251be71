"""
Tests for session logging.
"""
import json
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blocks.engine import GameEngine, GameState
from blocks.keymap import Action
from utils.logger import Logger, MetricsTracker, convert_to_serializable


class TestSerialization:
    """Test JSON conversion."""

    def test_numpy_values(self):
        """Numpy scalars and arrays become plain Python values."""
        data = {"a": np.int64(3), "b": np.float32(0.5), "c": np.arange(3)}
        assert convert_to_serializable(data) == {"a": 3, "b": 0.5, "c": [0, 1, 2]}

    def test_enums(self):
        """Enums are written by value."""
        assert convert_to_serializable(GameState.OVER) == "over"
        assert convert_to_serializable([Action.PAUSE]) == [6]


class TestLogger:
    """Test the JSON lines logger."""

    def test_records(self, tmp_path):
        """Each record is a JSON line with step and time."""
        logger = Logger(str(tmp_path), "test")
        logger.log({"event": "lines", "rows": 2})
        logger.log({"event": "pause"})
        records = logger.read()
        assert [r["step"] for r in records] == [1, 2]
        assert records[0]["rows"] == 2
        assert "timestamp" in records[0]
        assert logger.log_file.suffix == ".jsonl"

    def test_metrics_history(self, tmp_path):
        """Numeric fields are kept for summaries."""
        logger = Logger(str(tmp_path), "test")
        for rows in (1, 2, 3):
            logger.log({"event": "lines", "rows": rows})
        assert logger.get_recent("rows") == [1.0, 2.0, 3.0]
        assert logger.get_mean("rows") == pytest.approx(2.0)

    def test_summary(self, tmp_path):
        """The summary counts events and describes metrics."""
        logger = Logger(str(tmp_path), "test")
        logger.log({"event": "lines", "points": 40})
        logger.log({"event": "lines", "points": 100})
        path = logger.save_summary()
        with open(path) as f:
            summary = json.load(f)
        assert summary["events"] == {"lines": 2}
        assert summary["metrics"]["points"]["max"] == 100.0

    def test_engine_events(self, tmp_path):
        """The engine writes its lifecycle to the log."""
        logger = Logger(str(tmp_path), "game")
        engine = GameEngine(seed=0, logger=logger)
        engine.pause()
        engine.resume(0)
        engine.leave()
        events = [r["event"] for r in logger.read()]
        assert events == ["game_start", "pause", "resume", "exit"]


class TestMetricsTracker:
    """Test rolling statistics."""

    def test_window(self):
        """Only the last values are kept."""
        tracker = MetricsTracker(window_size=3)
        for v in range(5):
            tracker.add("score", v)
        assert tracker.metrics["score"] == [2, 3, 4]
        assert tracker.get_summary("score")["mean"] == pytest.approx(3.0)

    def test_update_from_statistics(self):
        """Numeric statistics are tracked, others skipped."""
        tracker = MetricsTracker()
        tracker.update({"state": "over", "SCORE": 120, "pieces": 9})
        assert set(tracker.metrics) == {"SCORE", "pieces"}

    def test_all_summaries(self):
        """Every tracked metric is summarized."""
        tracker = MetricsTracker()
        tracker.update({"SCORE": 100, "pieces": 10})
        tracker.update({"SCORE": 300, "pieces": 20})
        summaries = tracker.get_all_summaries()
        assert set(summaries) == {"SCORE", "pieces"}
        assert summaries["SCORE"]["mean"] == pytest.approx(200.0)
        assert summaries["pieces"]["last"] == 20.0

    def test_empty_summary(self):
        """Unknown metrics summarize to zeros."""
        assert MetricsTracker().get_summary("x")["max"] == 0.0
