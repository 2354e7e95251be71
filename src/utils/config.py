"""
Persisted player settings.

Settings are stored as YAML:
- level: starting level, 0 to 9
- keys: ordered key map entries ({text, key})
- block_color / block_pattern: the display attribute of the pieces
- scores: the leaderboard entries ({player, score})
"""
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from blocks import cells
from blocks.keymap import KeyMap, default_entries
from blocks.leaderboard import Leaderboard

CONFIG_NAME = "blocks.yaml"
MAX_START_LEVEL = 9


def default_path() -> Path:
    """Default settings file, under the user's config directory."""
    return Path.home() / ".config" / "blocks" / CONFIG_NAME


def _start_level(value: Any) -> int:
    """Starting level from a stored value; 0 unless it is a whole number in range."""
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value if 0 <= value <= MAX_START_LEVEL else 0


@dataclass
class Settings:
    """Player settings kept between sessions."""
    level: int = 0
    keys: List[Dict[str, Any]] = field(
        default_factory=lambda: [entry.to_dict() for entry in default_entries()])
    block_color: int = cells.TRANSPARENT
    block_pattern: int = cells.UNIFORM
    scores: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self):
        self.level = _start_level(self.level)
        if not isinstance(self.block_color, int):
            self.block_color = cells.TRANSPARENT
        if not isinstance(self.block_pattern, int):
            self.block_pattern = cells.UNIFORM
        # Nothing chosen yet.
        if cells.color(self.block_color) == cells.TRANSPARENT:
            self.block_color = cells.RED
            self.block_pattern = cells.CORNER
        if not self.keys:
            self.keys = [entry.to_dict() for entry in default_entries()]
        if self.scores is None:
            self.scores = []

    @property
    def texture(self) -> int:
        """Display attribute of the pieces."""
        return self.block_color | self.block_pattern

    def keymap(self) -> KeyMap:
        return KeyMap.from_list(self.keys)

    def leaderboard(self) -> Leaderboard:
        return Leaderboard.from_list(self.scores)

    def update(self, keymap: Optional[KeyMap] = None,
               leaderboard: Optional[Leaderboard] = None) -> None:
        """Copy back the live key map and leaderboard before saving."""
        if keymap is not None:
            self.keys = keymap.to_list()
        if leaderboard is not None:
            self.scores = leaderboard.to_list()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        known = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        return cls(**known)

    @classmethod
    def load(cls, path: Union[str, Path, None] = None) -> "Settings":
        """
        Load settings from a YAML file.

        A missing file gives the default settings. Unreadable or
        malformed files raise.

        Args:
            path: settings file, defaults to default_path()
        """
        path = Path(path) if path is not None else default_path()
        if not path.exists():
            return cls()
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"settings in {path}: expected a mapping, got {type(data).__name__}")
        return cls.from_dict(data)

    def save(self, path: Union[str, Path, None] = None) -> Path:
        """Write the settings to a YAML file, creating its directory."""
        path = Path(path) if path is not None else default_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        return path
