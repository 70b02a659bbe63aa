"""
Main application for hand gesture recognition.
"""
import argparse
import asyncio
import logging
import time
from typing import Optional

import cv2

from .actions import ActionRouter, ContinuousActionDispatcher
from .config import load_config
from .controller_mock import MockController
from .gestures import FrameResult, GestureProcessor
from .tracker import HandsTracker
from .types import GESTURE_LABELS, ContinuousMode

logger = logging.getLogger(__name__)


class GestureRecognitionApp:
    """Main application class for hand gesture recognition."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.tracker = HandsTracker(
            max_num_hands=self.config.mediapipe.max_num_hands,
            min_detection_conf=self.config.mediapipe.min_detection_confidence,
            min_tracking_conf=self.config.mediapipe.min_tracking_confidence
        )

        self.controller = MockController()
        self.router = ActionRouter(self.controller, self.config.mappings)
        self.dispatcher = ContinuousActionDispatcher(self.controller)
        self.gesture_processor = GestureProcessor(self.config)

        self.last_confirmed: Optional[str] = None

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    async def handle_frame(self, result: FrameResult) -> None:
        """Send one frame's output to the controller."""
        await self.dispatcher.dispatch_all(result.events)

        if result.confirmed is not None:
            self.last_confirmed = GESTURE_LABELS[result.confirmed.gesture]
            await self.router.execute(result.confirmed.gesture)

    def draw_status(self, frame, hand_count: int, result: FrameResult) -> None:
        status_text = f"Hands: {hand_count}" if hand_count else "No hand detected"
        if result.mode != ContinuousMode.INACTIVE:
            mode_text = f"Mode: {result.mode.value.upper()}"
        elif result.classifications and result.classifications[0].gesture is not None:
            mode_text = f"Seeing: {GESTURE_LABELS[result.classifications[0].gesture]}"
        else:
            mode_text = ""
        fired_text = f"Last: {self.last_confirmed}" if self.last_confirmed else ""

        cv2.putText(frame, status_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        cv2.putText(frame, mode_text, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 0), 2)
        cv2.putText(frame, fired_text, (10, 90), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 200, 255), 2)
        cv2.putText(frame, "Two index fingers = zoom, thumb = click", (10, frame.shape[0] - 40),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, "Press 'q' to quit", (10, frame.shape[0] - 20),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

    async def run(self):
        """Run the main application loop."""
        logger.info(f"Starting {self.config.display.window_name}")

        try:
            while True:
                ret, frame = self.cap.read()
                if not ret:
                    logger.error("Failed to read frame from camera")
                    break

                hands = self.tracker.process(frame)

                t_now = time.monotonic()
                self.gesture_processor.set_viewport(frame.shape[1], frame.shape[0])
                result = self.gesture_processor.process_frame(hands, t_now)
                await self.handle_frame(result)

                if self.config.display.show_landmarks:
                    for landmarks in hands:
                        frame = self.tracker.draw_landmarks(frame, landmarks)
                if self.config.display.show_status:
                    self.draw_status(frame, len(hands), result)

                cv2.imshow(self.config.display.window_name, frame)

                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break
        finally:
            self.gesture_processor.reset()
            await self.dispatcher.deactivate()
            self.cap.release()
            self.tracker.close()
            cv2.destroyAllWindows()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hand gesture control")
    parser.add_argument('--config', type=str, default=None,
                        help='Path to YAML config (default: config.default.yaml)')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


async def main(argv=None):
    """Entry point for the application."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    try:
        app = GestureRecognitionApp(config_path=args.config)
        await app.run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
