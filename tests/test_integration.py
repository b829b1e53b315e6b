"""
Integration test: config, processor and effect scheduler working together.
"""
import asyncio
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handsign.config import load_config
from handsign.effects_mock import MockEffectScheduler
from handsign.gestures import GestureProcessor
from handsign.types import EffectSchedulerProto
from tests.hands import letter_i_hand, love_hand, pinch_hand, pointing_hand


class TestSignSentence(unittest.TestCase):
    """Drive the pipeline through the I / LOVE / YOU sentence."""

    def setUp(self):
        """Set up processor and scheduler from the default config."""
        self.config = load_config()
        self.processor = GestureProcessor(self.config)
        self.scheduler = MockEffectScheduler()
        self.assertIsInstance(self.scheduler, EffectSchedulerProto)

    async def run_frames(self, frames):
        stable_types = []
        t_now = 0.0
        for observation in frames:
            t_now += self.config.pipeline.frame_interval_ms / 1000.0
            result = self.processor.process_frame(observation, t_now=t_now)
            if result.event is not None:
                await self.scheduler.on_gesture_change(result.event)
                if result.event.current is not None:
                    stable_types.append(result.event.current.message)
        return stable_types

    def test_sentence(self):
        """Each sign is held for three frames with the hand dropped in between."""
        frames = (
            [letter_i_hand()] * 3 + [None]
            + [love_hand()] * 3 + [None]
            + [pointing_hand()] * 3 + [None]
            + [pinch_hand()] * 3
        )
        messages = asyncio.run(self.run_frames(frames))

        self.assertEqual(messages, ["I", "LOVE", "YOU", "pinch"])
        self.assertEqual(self.scheduler.effects, ["sparkle", "heartbeat", "push_forward", "disperse"])
        # four gestures plus three releases
        self.assertEqual(self.scheduler.event_count, 7)

    def test_flicker_is_debounced(self):
        """A single stray frame doesn't change the stable gesture."""
        frames = [letter_i_hand()] * 3 + [pointing_hand()] + [letter_i_hand()] * 2
        messages = asyncio.run(self.run_frames(frames))

        self.assertEqual(messages, ["I"])
        self.assertEqual(self.scheduler.event_count, 1)


if __name__ == '__main__':
    unittest.main()
