"""
Best score table.

Keeps the 10 best games, highest total first. A new game goes in only if
its total is positive and it beats the lowest kept game (or the table is
not full yet); the player then types a name for the returned rank.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .scoring import ScoreKind

MAX_ENTRIES = 10
MAX_NAME_LENGTH = 10


@dataclass
class ScoreEntry:
    """A kept game: who played it and its final counters."""
    player: str = ""
    score: List[int] = field(default_factory=lambda: [0] * len(ScoreKind))

    @property
    def total(self) -> int:
        return self.score[ScoreKind.TOTAL]

    def to_dict(self) -> Dict[str, Any]:
        return {"player": self.player, "score": list(self.score)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreEntry":
        score = [int(v) for v in data.get("score", [])]
        score += [0] * (len(ScoreKind) - len(score))
        return cls(player=str(data.get("player", "")), score=score[:len(ScoreKind)])


class Leaderboard:
    """The best games, sorted by total, highest first."""

    def __init__(self, entries: Iterable[ScoreEntry] = ()):
        self.entries: List[ScoreEntry] = sorted(entries, key=lambda e: e.total, reverse=True)
        del self.entries[MAX_ENTRIES:]

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, rank: int) -> ScoreEntry:
        return self.entries[rank]

    def qualifies(self, total: int) -> bool:
        """Check whether a game with this total would be kept."""
        if total <= 0:
            return False
        if len(self.entries) < MAX_ENTRIES:
            return True
        return total > self.entries[-1].total

    def submit(self, snapshot: Sequence[int]) -> Optional[int]:
        """
        Offer a finished game.

        Args:
            snapshot: final counters in ScoreKind order

        Returns:
            The rank of the new entry (0 is best), or None if not kept
        """
        entry = ScoreEntry(score=list(snapshot))
        if not self.qualifies(entry.total):
            return None
        rank = len(self.entries)
        # Stable: a new entry ranks after the ones it only ties with.
        for i, kept in enumerate(self.entries):
            if entry.total > kept.total:
                rank = i
                break
        self.entries.insert(rank, entry)
        del self.entries[MAX_ENTRIES:]
        return rank

    def name(self, rank: int, player: str) -> None:
        """Set the player name of an entry, truncated to the allowed length."""
        self.entries[rank].player = player[:MAX_NAME_LENGTH]

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.entries]

    @classmethod
    def from_list(cls, data: Iterable[Dict[str, Any]]) -> "Leaderboard":
        return cls(ScoreEntry.from_dict(item) for item in data)

    def __str__(self) -> str:
        lines = []
        for i, entry in enumerate(self.entries):
            lines.append(f"{i + 1:2d}. {entry.player or '-':<{MAX_NAME_LENGTH}} "
                         f"{entry.total:>8d}  lines {entry.score[ScoreKind.LINES]:>4d}  "
                         f"level {entry.score[ScoreKind.LEVEL]:>2d}")
        return "\n".join(lines)
