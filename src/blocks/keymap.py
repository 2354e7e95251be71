"""
Input actions and key resolution.

The engine never sees physical keys: a KeyMap turns raw key names
delivered by the windowing layer into actions.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Sequence

NO_ACTION = -1


class Action(IntEnum):
    """Player actions, in key map order."""
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    HARD_DROP = 2
    SOFT_DROP = 3
    ROTATE_LEFT = 4
    ROTATE_RIGHT = 5
    PAUSE = 6


@dataclass
class KeymapEntry:
    """A key map line: the action label and the key bound to it."""
    text: str
    key: str

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "key": self.key}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KeymapEntry":
        return cls(text=str(data["text"]), key=str(data["key"]))


def default_entries() -> List[KeymapEntry]:
    """Return the default bindings, indexed by Action."""
    return [
        KeymapEntry("Move left", "LeftArrow"),
        KeymapEntry("Move right", "RightArrow"),
        KeymapEntry("Hard drop", "UpArrow"),
        KeymapEntry("Soft drop", "DownArrow"),
        KeymapEntry("Rotate left", "A"),
        KeymapEntry("Rotate right", "Z"),
        KeymapEntry("Pause", "Escape"),
    ]


class KeyMap:
    """
    Resolve raw key names to actions.

    Entry i of the map binds a key to Action(i).
    """

    def __init__(self, entries: Sequence[KeymapEntry] = ()):
        self.entries: List[KeymapEntry] = list(entries) or default_entries()

    def resolve(self, key: str) -> int:
        """
        Get the action bound to a key.

        Returns:
            The Action, or NO_ACTION (-1) if the key is not bound
        """
        for i, entry in enumerate(self.entries):
            if entry.key == key:
                if i < len(Action):
                    return Action(i)
                return NO_ACTION
        return NO_ACTION

    def rebind(self, action: int, key: str) -> bool:
        """
        Bind a key to an action.

        A key already bound to another action is left alone.

        Returns:
            True if the binding changed
        """
        if any(entry.key == key for entry in self.entries):
            return False
        self.entries[action].key = key
        return True

    def actions(self, keys: Iterable[str]) -> List[Action]:
        """Resolve a batch of keys, dropping unbound ones."""
        resolved = (self.resolve(key) for key in keys)
        return [action for action in resolved if action != NO_ACTION]

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.entries]

    @classmethod
    def from_list(cls, data: Iterable[Dict[str, Any]]) -> "KeyMap":
        return cls([KeymapEntry.from_dict(item) for item in data])
