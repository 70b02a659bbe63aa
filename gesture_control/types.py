"""
Type definitions for hand gesture recognition system.
"""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, NamedTuple, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable


class Landmark(NamedTuple):
    """Normalized hand keypoint (x, y in [0..1]; z is depth, unused)."""
    x: float
    y: float
    z: float = 0.0


Hand = Sequence[Landmark]

# [thumb, index, middle, ring, pinky], True = extended
FingerState = Tuple[bool, bool, bool, bool, bool]


class GestureType(str, Enum):
    """Closed gesture vocabulary."""
    PALM = "palm"
    FIST = "fist"
    THUMB_UP = "thumb_up"
    THUMB_DOWN = "thumb_down"
    VICTORY = "victory"
    I_LOVE_YOU = "i_love_you"
    OK = "ok"
    THREE = "three"
    POINTING = "pointing"
    PINCH = "pinch"


# Gestures that feed the continuous (every-frame) pipeline
CONTINUOUS_GESTURES: FrozenSet[GestureType] = frozenset({
    GestureType.POINTING,
    GestureType.PINCH,
})

GESTURE_LABELS = {
    GestureType.PALM: "Palm",
    GestureType.FIST: "Fist",
    GestureType.THUMB_UP: "Thumb Up",
    GestureType.THUMB_DOWN: "Thumb Down",
    GestureType.VICTORY: "Victory",
    GestureType.I_LOVE_YOU: "I Love You",
    GestureType.OK: "OK",
    GestureType.THREE: "Three",
    GestureType.POINTING: "Pointing",
    GestureType.PINCH: "Pinch",
}


@dataclass
class ClassificationResult:
    """Per-hand, per-frame classifier output."""
    gesture: Optional[GestureType]
    confidence: float
    finger_states: FingerState
    landmarks: Optional[Hand] = None


@dataclass
class StabilizedGesture:
    """Confirmed discrete gesture emitted by the stabilizer."""
    gesture: GestureType
    confidence: float


@dataclass
class PointingHand:
    """A hand currently classified as Pointing, as fed to the continuous pipeline."""
    landmarks: Hand
    fingers: FingerState


class ContinuousMode(str, Enum):
    """Continuous pipeline state. CLICKING is an active drag inside CURSOR."""
    INACTIVE = "inactive"
    ZOOMING = "zooming"
    CURSOR = "cursor"
    CLICKING = "clicking"


@dataclass
class ModeEnter:
    """Continuous mode was entered."""


@dataclass
class ModeExit:
    """Continuous mode was left."""


@dataclass
class CursorsMove:
    """Cursor positions in viewport pixels. x2/y2 are None in cursor mode."""
    x: float
    y: float
    x2: Optional[float] = None
    y2: Optional[float] = None

    @property
    def has_secondary(self) -> bool:
        return self.x2 is not None and self.y2 is not None


@dataclass
class Zoom:
    """Zoom step anchored at (x, y). Positive delta = zoom in."""
    x: float
    y: float
    delta: float


@dataclass
class MouseDown:
    x: float
    y: float


@dataclass
class MouseUp:
    x: float
    y: float


ContinuousEvent = Union[ModeEnter, ModeExit, CursorsMove, Zoom, MouseDown, MouseUp]


@runtime_checkable
class ControllerProto(Protocol):
    """Abstract protocol for controllers that execute gesture output."""

    async def run_command(self, command_id: str) -> bool:
        """Execute a named command. Returns False if it could not be run."""
        ...

    async def move_cursors(self, x: float, y: float,
                           x2: Optional[float] = None, y2: Optional[float] = None) -> None:
        """Move the primary (and optionally secondary) pointer indicator."""
        ...

    async def zoom(self, x: float, y: float, delta: float) -> None:
        """Zoom by delta around the given point."""
        ...

    async def mouse_down(self, x: float, y: float) -> None:
        """Press the primary button at the given point."""
        ...

    async def mouse_up(self, x: float, y: float) -> None:
        """Release the primary button at the given point."""
        ...

    async def set_active(self, active: bool) -> None:
        """Show or hide pointer indicators when continuous mode starts/ends."""
        ...
