"""
Mock effect scheduler that logs the visual effect for each stable gesture change.
"""
import logging
from typing import Dict, List

from .types import GestureChangeEvent

logger = logging.getLogger(__name__)

# Effect a particle renderer runs when a gesture becomes stable
GESTURE_EFFECTS: Dict[str, str] = {
    "open": "expand",
    "closed": "contract",
    "pinch": "disperse",
    "point": "attract",
    "letter_i": "sparkle",
    "love": "heartbeat",
    "you": "push_forward",
}


class MockEffectScheduler:
    """Mock scheduler that records effects instead of rendering them."""

    def __init__(self):
        """Initialize the mock scheduler."""
        self.event_count = 0
        self.effects: List[str] = []

    async def on_gesture_change(self, event: GestureChangeEvent) -> None:
        """Log the effect for the new stable gesture."""
        self.event_count += 1
        if event.current is None:
            logger.info("[MockEffectScheduler] Gesture released: %s (event #%d)",
                        event.previous, self.event_count)
            return

        effect = GESTURE_EFFECTS.get(event.current.type, "none")
        self.effects.append(effect)
        logger.info("[MockEffectScheduler] %s -> %s: effect=%s confidence=%.2f (event #%d)",
                    event.previous, event.current.type, effect,
                    event.current.confidence, self.event_count)

    def reset_counters(self) -> None:
        """Reset recorded effects for testing."""
        self.event_count = 0
        self.effects = []
