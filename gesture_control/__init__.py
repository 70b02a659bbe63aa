"""
Hand Gesture Control

Turns per-frame hand landmarks into confirmed discrete gesture events and a
continuous pointing / zoom / click interaction stream.
"""

__version__ = "0.1.0"

from .types import (
    GestureType,
    Landmark,
    ClassificationResult,
    StabilizedGesture,
    PointingHand,
    ContinuousMode,
    ModeEnter,
    ModeExit,
    CursorsMove,
    Zoom,
    MouseDown,
    MouseUp,
    ControllerProto,
)
from .config import load_config, Cfg
from .classifier import GestureClassifier
from .stabilizer import GestureStabilizer
from .continuous import ContinuousGestureProcessor
from .gestures import GestureProcessor, FrameRoute, FrameResult
from .actions import ActionRouter, ContinuousActionDispatcher
from .controller_mock import MockController

__all__ = [
    "GestureType",
    "Landmark",
    "ClassificationResult",
    "StabilizedGesture",
    "PointingHand",
    "ContinuousMode",
    "ModeEnter",
    "ModeExit",
    "CursorsMove",
    "Zoom",
    "MouseDown",
    "MouseUp",
    "ControllerProto",
    "load_config",
    "Cfg",
    "GestureClassifier",
    "GestureStabilizer",
    "ContinuousGestureProcessor",
    "GestureProcessor",
    "FrameRoute",
    "FrameResult",
    "ActionRouter",
    "ContinuousActionDispatcher",
    "MockController",
]
