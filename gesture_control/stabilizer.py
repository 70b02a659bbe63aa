"""
Temporal stabilizer for the discrete gesture pipeline.

Turns the classifier's jittery per-frame output for the primary hand
into single confirmed gesture events with dwell, minimum-frame,
cooldown and release-to-fire-again semantics.
"""
import logging
from typing import Callable, Optional

from .types import CONTINUOUS_GESTURES, ClassificationResult, GestureType, StabilizedGesture

logger = logging.getLogger(__name__)

OnGestureConfirmed = Callable[[StabilizedGesture], None]


class GestureStabilizer:
    """
    Confirms a discrete gesture once it has been held steadily.

    Features:
    - Dwell: gesture must be held for dwell_time_ms
    - Minimum consecutive frames, so a two-frame blip never fires
    - Cooldown between any two fires
    - Re-arm lock: a fired gesture fires again only after something else was seen
    """

    def __init__(self, dwell_time_ms: float = 400, cooldown_time_ms: float = 1000,
                 min_consecutive_frames: int = 3):
        """Initialize stabilizer with timing parameters in milliseconds."""
        self.dwell_time_ms = dwell_time_ms
        self.cooldown_time_ms = cooldown_time_ms
        self.min_consecutive_frames = min_consecutive_frames
        self.on_confirmed: Optional[OnGestureConfirmed] = None

        self.current_gesture: Optional[GestureType] = None
        self.tracking_start_time: float = 0.0
        self.consecutive_frames = 0
        self.last_fired_time: Optional[float] = None
        self.fired_gesture: Optional[GestureType] = None  # re-arm lock

    def set_callback(self, callback: Optional[OnGestureConfirmed]) -> None:
        self.on_confirmed = callback

    def update(self, result: ClassificationResult, t_now: float) -> Optional[StabilizedGesture]:
        """
        Feed one frame's classification of the primary hand.

        Args:
            result: Classifier output for this frame
            t_now: Frame timestamp in seconds, non-decreasing between calls

        Returns:
            The confirmed gesture if it fired on this frame, None otherwise
        """
        gesture = result.gesture

        # Nothing, or a gesture reserved for the continuous pipeline: release lock
        if gesture is None or gesture in CONTINUOUS_GESTURES:
            self.fired_gesture = None
            self._reset_tracking()
            return None

        if self.fired_gesture is not None and gesture != self.fired_gesture:
            self.fired_gesture = None

        # Still holding what already fired
        if gesture == self.fired_gesture:
            return None

        if gesture != self.current_gesture:
            logger.debug(f"Tracking {gesture.value}")
            self.current_gesture = gesture
            self.tracking_start_time = t_now
            self.consecutive_frames = 1
            return None

        self.consecutive_frames += 1

        elapsed_ms = (t_now - self.tracking_start_time) * 1000
        past_cooldown = (
            self.last_fired_time is None
            or (t_now - self.last_fired_time) * 1000 >= self.cooldown_time_ms
        )

        if (self.consecutive_frames >= self.min_consecutive_frames
                and elapsed_ms >= self.dwell_time_ms
                and past_cooldown):
            self.last_fired_time = t_now
            self.fired_gesture = gesture
            confirmed = StabilizedGesture(gesture=gesture, confidence=result.confidence)
            logger.info(f"Gesture confirmed: {gesture.value} ({result.confidence:.2f})")
            if self.on_confirmed is not None:
                self.on_confirmed(confirmed)
            self._reset_tracking()
            return confirmed

        return None

    def reset(self) -> None:
        """Clear tracking, the re-arm lock and the cooldown reference."""
        self._reset_tracking()
        self.last_fired_time = None
        self.fired_gesture = None

    def _reset_tracking(self) -> None:
        self.current_gesture = None
        self.tracking_start_time = 0.0
        self.consecutive_frames = 0
