"""
Two-phase continuous gesture processor.

Phase 1, ZOOM: both hands pointing (index only). Each index tip drives its
own cursor and the change in distance between the tips becomes zoom.
Phase 2, CURSOR: one hand withdrawn. The remaining hand drives a single
cursor; the thumb acts as the mouse button (quick tap = click, held =
drag). Bringing the second hand back returns to ZOOM.

Entry needs two pointing hands. Exit happens when no pointing hand
remains, releasing any held button first.
"""
import logging
from typing import Callable, Optional, Sequence, Tuple

from .landmarks import INDEX_TIP, dist, is_valid_hand
from .types import (
    ContinuousEvent,
    ContinuousMode,
    CursorsMove,
    Landmark,
    ModeEnter,
    ModeExit,
    MouseDown,
    MouseUp,
    PointingHand,
    Zoom,
)

logger = logging.getLogger(__name__)

OnContinuousEvent = Callable[[ContinuousEvent], None]

# Raw camera range mapped onto the full viewport; outside is clipped
ZONE_MIN = 0.12
ZONE_MAX = 0.88

# Inter-fingertip distance change (normalized) below which no zoom is emitted
ZOOM_DEADBAND = 0.002

THUMB_DEBOUNCE = 2          # frames to confirm thumb extend / click release
DRAG_THRESHOLD = 8          # confirmed-hold frames before a click becomes a drag
DRAG_RELEASE_DEBOUNCE = 6   # frames to confirm drag release


def zone_map(value: float, lo: float = ZONE_MIN, hi: float = ZONE_MAX) -> float:
    """Linearly remap [lo, hi] onto [0, 1], clipping outside values."""
    return max(0.0, min(1.0, (value - lo) / (hi - lo)))


class ContinuousGestureProcessor:
    """
    State machine over the hands currently classified as Pointing.

    Modes: INACTIVE -> ZOOMING (2 hands) -> CURSOR (1 hand) <-> CLICKING (drag).
    """

    def __init__(self, enabled: bool = True, smoothing_alpha: float = 0.15,
                 zoom_sensitivity: float = 15.0):
        """Initialize the processor with smoothing and zoom settings."""
        self.enabled = enabled
        self.smoothing_alpha = smoothing_alpha
        self.zoom_sensitivity = zoom_sensitivity
        self.on_event: Optional[OnContinuousEvent] = None

        self.mode = ContinuousMode.INACTIVE

        # Viewport scaling; 1x1 yields normalized output until a viewport is set
        self.viewport_width: float = 1.0
        self.viewport_height: float = 1.0

        # Smoothed cursor positions in [0, 1]; cursor 1 is only used while zooming
        self.smooth0: Tuple[float, float] = (0.0, 0.0)
        self.smooth1: Tuple[float, float] = (0.0, 0.0)
        self.has_initial = False
        self.prev_index_dist = 0.0

        # Click/drag separation
        self.thumb_down = False        # mouse_down actually sent (drag)
        self.thumb_confirmed = False   # thumb extension past debounce
        self.thumb_on_frames = 0
        self.thumb_off_frames = 0
        self.thumb_hold_frames = 0     # frames since confirmation

    def set_callback(self, callback: Optional[OnContinuousEvent]) -> None:
        self.on_event = callback

    def set_viewport(self, width: float, height: float) -> None:
        self.viewport_width = width
        self.viewport_height = height

    @property
    def active(self) -> bool:
        return self.mode != ContinuousMode.INACTIVE

    def update(self, pointing_hands: Sequence[PointingHand]) -> bool:
        """
        Process the pointing hands of one frame.

        Args:
            pointing_hands: Hands classified as Pointing this frame, in detection order

        Returns:
            True if the frame was consumed by the continuous pipeline
        """
        if not self.enabled:
            if self.active:
                self._exit_mode()
            return False

        hands = [h for h in pointing_hands if is_valid_hand(h.landmarks)]

        if len(hands) >= 2:
            return self._handle_zoom(hands[0].landmarks, hands[1].landmarks)

        # A lone pointing hand only keeps an already active session alive
        if len(hands) == 1 and self.active:
            return self._handle_cursor(hands[0])

        if self.active:
            self._exit_mode()
        return False

    def reset(self) -> None:
        """Force an exit (releasing any held button) and clear smoothing history."""
        if self.active:
            self._exit_mode()
        self.has_initial = False
        self._reset_thumb_state()

    # === Zoom phase ===

    def _handle_zoom(self, lm0: Sequence[Landmark], lm1: Sequence[Landmark]) -> bool:
        idx0 = lm0[INDEX_TIP]
        idx1 = lm1[INDEX_TIP]
        index_dist = dist(idx0, idx1)

        # A drag cannot survive the second hand coming back
        if self.thumb_down:
            self._release_click()
        self._reset_thumb_state()

        was_inactive = not self.active
        # Entering from inactive or cursor mode: the previous distance is stale
        new_baseline = self.mode != ContinuousMode.ZOOMING
        if new_baseline:
            logger.debug(f"Continuous mode {self.mode.value} -> zooming")
            self.mode = ContinuousMode.ZOOMING
            if was_inactive:
                logger.info("Continuous mode entered")
                self._emit(ModeEnter())

        self._update_dual_positions(idx0, idx1, reseed_secondary=new_baseline)
        px0, py0 = self._to_viewport(self.smooth0)
        px1, py1 = self._to_viewport(self.smooth1)

        self._emit(CursorsMove(x=px0, y=py0, x2=px1, y2=py1))

        if not new_baseline:
            delta = index_dist - self.prev_index_dist
            if abs(delta) > ZOOM_DEADBAND:
                self._emit(Zoom(x=(px0 + px1) / 2, y=(py0 + py1) / 2,
                                delta=-delta * self.zoom_sensitivity))

        self.prev_index_dist = index_dist
        return True

    # === Cursor phase ===

    def _handle_cursor(self, hand: PointingHand) -> bool:
        if self.mode == ContinuousMode.ZOOMING:
            # Keep smooth0 for continuity; start thumb tracking from scratch
            logger.debug("Continuous mode zooming -> cursor")
            self.mode = ContinuousMode.CURSOR
            self._reset_thumb_state()

        self._update_single_position(hand.landmarks[INDEX_TIP])
        px, py = self._to_viewport(self.smooth0)

        # No secondary cursor: consumer hides the second indicator
        self._emit(CursorsMove(x=px, y=py))

        if hand.fingers[0]:
            self._thumb_extended_frame(px, py)
        else:
            self._thumb_retracted_frame(px, py)
        return True

    def _thumb_extended_frame(self, px: float, py: float) -> None:
        self.thumb_on_frames += 1
        self.thumb_off_frames = 0

        if not self.thumb_confirmed and self.thumb_on_frames >= THUMB_DEBOUNCE:
            self.thumb_confirmed = True
            self.thumb_hold_frames = 0

        if self.thumb_confirmed:
            self.thumb_hold_frames += 1
            if not self.thumb_down and self.thumb_hold_frames >= DRAG_THRESHOLD:
                logger.debug("Continuous mode cursor -> clicking (drag)")
                self.thumb_down = True
                self.mode = ContinuousMode.CLICKING
                self._emit(MouseDown(x=px, y=py))

    def _thumb_retracted_frame(self, px: float, py: float) -> None:
        self.thumb_off_frames += 1
        self.thumb_on_frames = 0

        release_threshold = DRAG_RELEASE_DEBOUNCE if self.thumb_down else THUMB_DEBOUNCE
        if self.thumb_confirmed and self.thumb_off_frames >= release_threshold:
            if self.thumb_down:
                self._release_click()
            else:
                self._emit(MouseDown(x=px, y=py))
                self._emit(MouseUp(x=px, y=py))
            self.thumb_confirmed = False
            self.thumb_hold_frames = 0

    # === Position helpers ===

    def _update_dual_positions(self, idx0: Landmark, idx1: Landmark,
                               reseed_secondary: bool = False) -> None:
        raw0 = self._map(idx0)
        raw1 = self._map(idx1)
        if not self.has_initial:
            self.smooth0, self.smooth1 = raw0, raw1
            self.has_initial = True
        else:
            self.smooth0 = self._ema(self.smooth0, raw0)
            # Second cursor was hidden during cursor mode; start it at the hand
            self.smooth1 = raw1 if reseed_secondary else self._ema(self.smooth1, raw1)

    def _update_single_position(self, idx: Landmark) -> None:
        raw = self._map(idx)
        if not self.has_initial:
            self.smooth0 = raw
            self.has_initial = True
        else:
            self.smooth0 = self._ema(self.smooth0, raw)

    def _ema(self, prev: Tuple[float, float], raw: Tuple[float, float]) -> Tuple[float, float]:
        a = self.smoothing_alpha
        return (a * raw[0] + (1 - a) * prev[0], a * raw[1] + (1 - a) * prev[1])

    @staticmethod
    def _map(point: Landmark) -> Tuple[float, float]:
        # x mirrored: the camera image is a mirror of the user
        return (zone_map(1 - point[0]), zone_map(point[1]))

    def _to_viewport(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        return (pos[0] * self.viewport_width, pos[1] * self.viewport_height)

    # === Click helpers ===

    def _release_click(self) -> None:
        px, py = self._to_viewport(self.smooth0)
        self._emit(MouseUp(x=px, y=py))
        self.thumb_down = False
        self.mode = ContinuousMode.CURSOR

    def _exit_mode(self) -> None:
        if self.thumb_down:
            self._release_click()
        self._emit(ModeExit())
        logger.info("Continuous mode exited")
        self.mode = ContinuousMode.INACTIVE
        self.has_initial = False
        self._reset_thumb_state()

    def _reset_thumb_state(self) -> None:
        self.thumb_down = False
        self.thumb_confirmed = False
        self.thumb_on_frames = 0
        self.thumb_off_frames = 0
        self.thumb_hold_frames = 0

    def _emit(self, event: ContinuousEvent) -> None:
        if self.on_event is not None:
            self.on_event(event)
