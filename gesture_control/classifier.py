"""
Heuristic per-frame gesture classifier.

Maps the 21 landmarks of one hand to a gesture from the fixed vocabulary.
Rules are evaluated in table order and the first match wins, so more
specific shapes (Pinch, OK) must stay ahead of the general ones that
would also match them (Pointing, Palm).
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .landmarks import INDEX_TIP, THUMB_IP, THUMB_TIP, dist, finger_states, is_valid_hand
from .types import ClassificationResult, FingerState, GestureType, Landmark


# Thumb-tip to index-tip distance below which the two count as touching
PINCH_DISTANCE = 0.08

NO_FINGERS: FingerState = (False, False, False, False, False)


@dataclass
class HandShape:
    """Features a rule predicate may look at."""
    landmarks: Sequence[Landmark]
    fingers: FingerState
    thumb_index_dist: float

    @property
    def extended_count(self) -> int:
        return sum(self.fingers)


@dataclass
class GestureRule:
    gesture: GestureType
    matches: Callable[[HandShape], bool]
    confidence: Callable[[HandShape], float] = lambda shape: 1.0


def _pinch(s: HandShape) -> bool:
    _, index, middle, ring, pinky = s.fingers
    return s.thumb_index_dist < PINCH_DISTANCE and index and not (middle or ring or pinky)


def _ok(s: HandShape) -> bool:
    _, _, middle, ring, pinky = s.fingers
    return s.thumb_index_dist < PINCH_DISTANCE and middle and ring and pinky


def _pointing(s: HandShape) -> bool:
    # thumb is unconstrained: the continuous pipeline reads it as a click trigger
    _, index, middle, ring, pinky = s.fingers
    return index and not (middle or ring or pinky)


def _i_love_you(s: HandShape) -> bool:
    thumb, index, middle, ring, pinky = s.fingers
    return thumb and index and pinky and not (middle or ring)


def _victory(s: HandShape) -> bool:
    _, index, middle, ring, pinky = s.fingers
    return index and middle and not (ring or pinky)


def _three(s: HandShape) -> bool:
    _, index, middle, ring, pinky = s.fingers
    return index and middle and ring and not pinky


def _thumb_only(s: HandShape) -> bool:
    return s.fingers == (True, False, False, False, False)


def _thumb_up(s: HandShape) -> bool:
    return _thumb_only(s) and s.landmarks[THUMB_TIP][1] < s.landmarks[THUMB_IP][1]


def _palm(s: HandShape) -> bool:
    return s.extended_count >= 5


def _fist(s: HandShape) -> bool:
    return s.extended_count == 0


# Evaluation order is part of the contract.
GESTURE_RULES: List[GestureRule] = [
    GestureRule(GestureType.PINCH, _pinch),
    GestureRule(GestureType.OK, _ok),
    GestureRule(GestureType.POINTING, _pointing),
    GestureRule(GestureType.I_LOVE_YOU, _i_love_you),
    GestureRule(GestureType.VICTORY, _victory),
    GestureRule(GestureType.THREE, _three),
    GestureRule(GestureType.THUMB_UP, _thumb_up),
    GestureRule(GestureType.THUMB_DOWN, _thumb_only),
    GestureRule(GestureType.PALM, _palm, lambda s: s.extended_count / 5),
    GestureRule(GestureType.FIST, _fist),
]


class GestureClassifier:
    """
    Stateless classifier: landmarks in, ClassificationResult out.

    The only tunable is the confidence threshold; results below it are
    reported as no gesture.
    """

    def __init__(self, confidence_threshold: float = 0.7):
        self.threshold = confidence_threshold

    def classify(self, landmarks: Optional[Sequence[Landmark]]) -> ClassificationResult:
        """
        Classify one hand.

        Args:
            landmarks: 21 hand landmarks in normalized coordinates

        Returns:
            ClassificationResult; gesture is None if nothing matched or the
            hand is malformed
        """
        if not is_valid_hand(landmarks):
            return ClassificationResult(gesture=None, confidence=0.0,
                                        finger_states=NO_FINGERS, landmarks=None)

        shape = HandShape(
            landmarks=landmarks,
            fingers=finger_states(landmarks),
            thumb_index_dist=dist(landmarks[THUMB_TIP], landmarks[INDEX_TIP]),
        )

        gesture: Optional[GestureType] = None
        confidence = 0.0
        for rule in GESTURE_RULES:
            if rule.matches(shape):
                gesture = rule.gesture
                confidence = rule.confidence(shape)
                break

        if confidence < self.threshold:
            gesture = None
            confidence = 0.0

        return ClassificationResult(gesture=gesture, confidence=confidence,
                                    finger_states=shape.fingers, landmarks=landmarks)
