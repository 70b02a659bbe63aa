"""
Per-frame gesture routing.

Every frame is owned by exactly one pipeline: the continuous processor
gets first refusal on frames with pointing hands; if it declines, the
primary hand's classification goes to the discrete stabilizer. The
pipeline that did not get the frame is reset so no state leaks between
them.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .classifier import GestureClassifier
from .config import Cfg
from .continuous import ContinuousGestureProcessor
from .stabilizer import GestureStabilizer
from .types import (
    ClassificationResult,
    ContinuousEvent,
    ContinuousMode,
    GestureType,
    Hand,
    PointingHand,
    StabilizedGesture,
)

logger = logging.getLogger(__name__)


class FrameRoute(str, Enum):
    """Which pipeline owned a frame."""
    CONTINUOUS = "continuous"
    DISCRETE = "discrete"
    IDLE = "idle"  # no hands: both pipelines reset


@dataclass
class FrameResult:
    """Outcome of one processed frame."""
    route: FrameRoute
    classifications: List[ClassificationResult] = field(default_factory=list)
    confirmed: Optional[StabilizedGesture] = None
    events: List[ContinuousEvent] = field(default_factory=list)
    mode: ContinuousMode = ContinuousMode.INACTIVE


class GestureProcessor:
    """
    Main gesture processor that coordinates the discrete and continuous pipelines.
    """

    def __init__(self, cfg: Optional[Cfg] = None):
        """Initialize gesture processor with configuration."""
        self.classifier = GestureClassifier()
        self.stabilizer = GestureStabilizer()
        self.continuous = ContinuousGestureProcessor()
        self.apply_config(cfg or Cfg())

        self._frame_events: List[ContinuousEvent] = []
        self.last_route = FrameRoute.IDLE
        self.continuous.set_callback(self._frame_events.append)

    def apply_config(self, cfg: Cfg) -> None:
        """Push configuration values into all three components."""
        self.cfg = cfg
        self.classifier.threshold = cfg.classifier.confidence_threshold
        self.stabilizer.dwell_time_ms = cfg.stabilizer.dwell_time_ms
        self.stabilizer.cooldown_time_ms = cfg.stabilizer.cooldown_time_ms
        self.stabilizer.min_consecutive_frames = cfg.stabilizer.min_consecutive_frames
        self.continuous.enabled = cfg.continuous.enabled
        self.continuous.smoothing_alpha = cfg.continuous.smoothing_alpha
        self.continuous.zoom_sensitivity = cfg.continuous.zoom_sensitivity

    def set_viewport(self, width: float, height: float) -> None:
        self.continuous.set_viewport(width, height)

    def process_frame(self, hands: Sequence[Hand], t_now: float) -> FrameResult:
        """
        Process all hands detected in a frame.

        Args:
            hands: Detected hands, primary hand first; empty when no hand is visible
            t_now: Frame timestamp in seconds

        Returns:
            FrameResult with the route taken and everything emitted this frame
        """
        self._frame_events.clear()

        if not hands:
            self.reset()
            return self._result(FrameRoute.IDLE, [])

        classifications = [self.classifier.classify(lm) for lm in hands]
        pointing = [
            PointingHand(landmarks=lm, fingers=c.finger_states)
            for lm, c in zip(hands, classifications)
            if c.gesture == GestureType.POINTING
        ]

        if self.continuous.update(pointing):
            self.stabilizer.reset()
            return self._result(FrameRoute.CONTINUOUS, classifications)

        # Declined: discrete pipeline on the primary hand
        self.continuous.reset()
        confirmed = self.stabilizer.update(classifications[0], t_now)
        return self._result(FrameRoute.DISCRETE, classifications, confirmed)

    def reset(self) -> None:
        """Hand lost or camera stopped: clear both pipelines."""
        self.stabilizer.reset()
        self.continuous.reset()

    def _result(self, route: FrameRoute, classifications: List[ClassificationResult],
                confirmed: Optional[StabilizedGesture] = None) -> FrameResult:
        if route != self.last_route:
            logger.debug(f"Frame route {self.last_route.value} -> {route.value}")
            self.last_route = route
        return FrameResult(
            route=route,
            classifications=classifications,
            confirmed=confirmed,
            events=list(self._frame_events),
            mode=self.continuous.mode,
        )
