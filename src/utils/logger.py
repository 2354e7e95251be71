"""
Session logging utilities.

Game events are appended as JSON lines to a file per session; numeric
fields are also kept in memory so scripts can summarize a session.
"""
from typing import Dict, Any, Optional, List
from pathlib import Path
import json
import time
from datetime import datetime
from collections import Counter, defaultdict
import numpy as np


def convert_to_serializable(obj):
    """Convert numpy and enum values to plain Python types for JSON."""
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, dict):
        return {str(k): convert_to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_to_serializable(i) for i in obj]
    elif hasattr(obj, 'value') and hasattr(obj, 'name'):
        return convert_to_serializable(obj.value)
    return obj


class Logger:
    """
    JSON lines event logger for game sessions.

    Every record carries a sequence number (``step``), the seconds since
    the logger was created and a wall clock timestamp.
    """

    def __init__(self, log_dir: str, name: str = "blocks"):
        """
        Initialize logger.

        Args:
            log_dir: Directory to save logs
            name: Session name, used as the file prefix
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.name = name
        self.start_time = time.time()

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"{name}_{timestamp}.jsonl"

        self.metrics_history: Dict[str, List[float]] = defaultdict(list)
        self.event_counts: Counter = Counter()
        self.step = 0

    def log(self, fields: Dict[str, Any], step: Optional[int] = None) -> None:
        """
        Append a record.

        Args:
            fields: Record fields; an "event" field names the event
            step: Optional sequence number, defaults to the next one
        """
        if step is not None:
            self.step = step
        else:
            self.step += 1

        record = {
            'step': self.step,
            'time': time.time() - self.start_time,
            'timestamp': datetime.now().isoformat(),
            **fields,
        }
        record = convert_to_serializable(record)

        if 'event' in fields:
            self.event_counts[str(fields['event'])] += 1
        for key, value in fields.items():
            if isinstance(value, bool):
                continue
            if isinstance(value, (int, float, np.integer, np.floating)):
                self.metrics_history[key].append(float(value))

        with open(self.log_file, 'a') as f:
            f.write(json.dumps(record) + '\n')

    def read(self) -> List[Dict[str, Any]]:
        """Read back every record of this session."""
        if not self.log_file.exists():
            return []
        with open(self.log_file, 'r') as f:
            return [json.loads(line) for line in f if line.strip()]

    def get_recent(self, metric: str, n: int = 100) -> List[float]:
        """Get recent values of a metric."""
        return self.metrics_history[metric][-n:]

    def get_mean(self, metric: str, n: int = 100) -> float:
        """Get mean of recent values."""
        recent = self.get_recent(metric, n)
        return float(np.mean(recent)) if recent else 0.0

    def save_summary(self) -> Path:
        """Save event counts and metric statistics next to the log file."""
        summary = {
            'name': self.name,
            'total_events': self.step,
            'total_time': time.time() - self.start_time,
            'events': dict(self.event_counts),
            'metrics': {},
        }

        for key, values in self.metrics_history.items():
            summary['metrics'][key] = {
                'mean': float(np.mean(values)),
                'std': float(np.std(values)),
                'min': float(np.min(values)),
                'max': float(np.max(values)),
                'last': float(values[-1]),
            }

        summary_file = self.log_dir / f"{self.name}_summary.json"
        with open(summary_file, 'w') as f:
            json.dump(summary, f, indent=2)
        return summary_file


class MetricsTracker:
    """
    Track running statistics over the last games played.
    """

    def __init__(self, window_size: int = 100):
        """
        Args:
            window_size: Number of most recent values kept per metric
        """
        self.window_size = window_size
        self.metrics: Dict[str, List[float]] = defaultdict(list)

    def add(self, name: str, value: float) -> None:
        """Add a value to a metric."""
        self.metrics[name].append(value)
        if len(self.metrics[name]) > self.window_size:
            self.metrics[name].pop(0)

    def update(self, stats: Dict[str, Any]) -> None:
        """Add every numeric value of a statistics dictionary."""
        for name, value in stats.items():
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                self.add(name, value)

    def get_summary(self, name: str) -> Dict[str, float]:
        """Get summary statistics for a metric."""
        values = self.metrics.get(name, [])
        if not values:
            return {'mean': 0.0, 'std': 0.0, 'min': 0.0, 'max': 0.0, 'last': 0.0}
        return {
            'mean': float(np.mean(values)),
            'std': float(np.std(values)),
            'min': float(np.min(values)),
            'max': float(np.max(values)),
            'last': float(values[-1]),
        }

    def get_all_summaries(self) -> Dict[str, Dict[str, float]]:
        """Get summaries for all metrics."""
        return {name: self.get_summary(name) for name in self.metrics}
