"""
Temporal debouncing of per-frame gesture classifications.
"""
import time
from collections import Counter, deque
from typing import List, Optional

from .types import GestureResult, HistoryEntry


class GestureStabilizer:
    """
    Majority vote over the most recent classifications.

    A gesture is reported only when it occurs in at least `min_votes` of the
    last `window` frames and the oldest of those occurrences is more confident
    than `min_confidence`.

    When several types reach the vote threshold (only possible with a window
    wider than 3), the type seen most recently is tried first.
    """

    def __init__(self, history_size: int = 5, window: int = 3,
                 min_votes: int = 2, min_confidence: float = 0.75):
        """Initialize an empty history."""
        if not 0 < window <= history_size:
            raise ValueError(f"window must be in 1..{history_size}, got {window}")
        self.history_size = history_size
        self.window = window
        self.min_votes = min_votes
        self.min_confidence = min_confidence
        self.history: deque[HistoryEntry] = deque(maxlen=history_size)

    def __len__(self) -> int:
        return len(self.history)

    def push(self, result: GestureResult, timestamp: Optional[float] = None) -> None:
        """Record a classification, evicting the oldest beyond capacity."""
        self.history.append(HistoryEntry(
            type=result.type,
            confidence=result.confidence,
            message=result.message or result.type,
            timestamp=time.time() if timestamp is None else timestamp,
        ))

    def clear(self) -> None:
        """Drop all history (the hand was lost)."""
        self.history.clear()

    def recent(self) -> List[HistoryEntry]:
        """The entries inside the voting window, oldest first."""
        return list(self.history)[-self.window:]

    def stable(self) -> Optional[GestureResult]:
        """
        Return the debounced gesture, or None if history hasn't settled.

        Returns:
            The oldest entry of the winning type in the voting window, or None
            if that entry is not confident enough
        """
        if len(self.history) < self.window:
            return None

        recent = self.recent()
        counts = Counter(entry.type for entry in recent)

        seen = set()
        for entry in reversed(recent):
            gesture_type = entry.type
            if gesture_type in seen:
                continue
            seen.add(gesture_type)
            if counts[gesture_type] < self.min_votes:
                continue

            # The oldest entry of the winning type speaks for it
            first = next(e for e in recent if e.type == gesture_type)
            if first.confidence > self.min_confidence:
                return GestureResult(type=first.type, confidence=first.confidence, message=first.message)

        return None
