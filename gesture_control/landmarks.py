"""
Hand landmark geometry helpers.

MediaPipe 21-keypoint layout:
    0: wrist
    1-4: thumb (CMC, MCP, IP, TIP)
    5-8: index (MCP, PIP, DIP, TIP)
    9-12: middle (MCP, PIP, DIP, TIP)
    13-16: ring (MCP, PIP, DIP, TIP)
    17-20: pinky (MCP, PIP, DIP, TIP)
"""
import math
from typing import Sequence

from .types import FingerState, Landmark

NUM_LANDMARKS = 21

THUMB_IP = 3
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_TIP = 8
MIDDLE_PIP = 10
MIDDLE_TIP = 12
RING_PIP = 14
RING_TIP = 16
PINKY_PIP = 18
PINKY_TIP = 20

# (tip, pip) pairs for the four non-thumb fingers
FINGER_TIP_PIP = [
    (INDEX_TIP, INDEX_PIP),
    (MIDDLE_TIP, MIDDLE_PIP),
    (RING_TIP, RING_PIP),
    (PINKY_TIP, PINKY_PIP),
]

# Thumb tip must be this much farther from the index MCP than the thumb IP is
THUMB_SPLAY_RATIO = 1.1


def dist(a: Landmark, b: Landmark) -> float:
    """Euclidean distance in the image plane (z ignored)."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def is_valid_hand(landmarks: Sequence[Landmark]) -> bool:
    """True if the hand carries the full 21-point skeleton."""
    return landmarks is not None and len(landmarks) == NUM_LANDMARKS


def is_thumb_extended(landmarks: Sequence[Landmark]) -> bool:
    """
    Check thumb splay independent of hand rotation.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        True if the thumb tip sits clearly farther from the index MCP than the thumb IP
    """
    tip_dist = dist(landmarks[THUMB_TIP], landmarks[INDEX_MCP])
    ip_dist = dist(landmarks[THUMB_IP], landmarks[INDEX_MCP])
    return tip_dist > ip_dist * THUMB_SPLAY_RATIO


def is_finger_extended(landmarks: Sequence[Landmark], tip: int, pip: int) -> bool:
    """A finger is extended when its tip is above its PIP joint (smaller y)."""
    return landmarks[tip][1] < landmarks[pip][1]


def finger_states(landmarks: Sequence[Landmark]) -> FingerState:
    """
    Compute extension flags for every finger.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        (thumb, index, middle, ring, pinky) booleans
    """
    index, middle, ring, pinky = (
        is_finger_extended(landmarks, tip, pip) for tip, pip in FINGER_TIP_PIP
    )
    return (is_thumb_extended(landmarks), index, middle, ring, pinky)
