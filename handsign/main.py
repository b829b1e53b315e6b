"""
Main application for hand gesture and sign recognition.
"""
import argparse
import asyncio
import logging
import time
from typing import Optional

import cv2

from .config import Cfg, load_config
from .display import confidence_color, describe_result
from .effects_mock import MockEffectScheduler
from .gestures import GestureProcessor
from .landmarks import HandsTracker, draw_landmarks
from .types import EffectSchedulerProto

logger = logging.getLogger(__name__)


class GestureRecognitionApp:
    """Main application class for hand gesture recognition."""

    def __init__(self, config_path: Optional[str] = None,
                 scheduler: Optional[EffectSchedulerProto] = None,
                 config: Optional[Cfg] = None):
        """Initialize the application with configuration (loaded from config_path unless given)."""
        self.config = config if config is not None else load_config(config_path)
        self.tracker = HandsTracker(
            model_path=self.config.mediapipe.model_path,
            num_hands=self.config.mediapipe.num_hands,
            min_detection_conf=self.config.mediapipe.min_hand_detection_confidence,
            min_presence_conf=self.config.mediapipe.min_hand_presence_confidence,
            min_tracking_conf=self.config.mediapipe.min_tracking_confidence
        )
        self.scheduler = scheduler or MockEffectScheduler()
        self.gesture_processor = GestureProcessor(self.config)

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    async def run(self):
        """Run the main application loop."""
        logger.info("Starting %s", self.config.display.window_name)
        logger.info("Signs: I (pinky up), LOVE (fingers together, hand low), YOU (index forward)")
        logger.info("Gestures: open, closed, pinch, point. Press 'q' to quit")

        interval_s = self.config.pipeline.frame_interval_ms / 1000.0
        t_start = time.monotonic()

        try:
            while True:
                t_frame = time.monotonic()
                ret, frame = self.cap.read()
                if not ret:
                    logger.error("Failed to read frame from camera")
                    break

                timestamp_ms = int((t_frame - t_start) * 1000)
                observation = self.tracker.process(frame, timestamp_ms)
                result = self.gesture_processor.process_frame(observation, t_now=time.time())

                if result.event is not None:
                    await self.scheduler.on_gesture_change(result.event)

                if observation is not None and self.config.display.show_landmarks:
                    frame = draw_landmarks(frame, observation)

                message, status = describe_result(result)
                confidence = result.stable.confidence if result.stable else 0.0
                cv2.putText(frame, message, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
                cv2.putText(frame, f"{status} {round(confidence * 100)}%", (10, 60),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.6, confidence_color(confidence), 2)
                cv2.putText(frame, "Press 'q' to quit", (10, frame.shape[0] - 20),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

                cv2.imshow(self.config.display.window_name, frame)
                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break

                # Pace the loop to the configured frame interval
                elapsed = time.monotonic() - t_frame
                await asyncio.sleep(max(0.0, interval_s - elapsed))
        finally:
            self.close()

    def close(self):
        """Release camera, landmarker and windows."""
        if self.cap.isOpened():
            self.cap.release()
        self.tracker.close()
        cv2.destroyAllWindows()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hand gesture and sign recognition")
    parser.add_argument("--config", help="Path to a YAML config (defaults to config.default.yaml)")
    return parser.parse_args(argv)


async def main(argv=None):
    """Entry point for the application."""
    args = parse_args(argv)
    config = load_config(args.config)
    logging.basicConfig(level=getattr(logging, config.logging.level.upper(), logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        app = GestureRecognitionApp(config=config)
        await app.run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except (RuntimeError, FileNotFoundError) as e:
        logger.error("Error: %s", e)
        raise


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
