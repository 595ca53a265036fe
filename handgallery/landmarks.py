"""
Gesture classification from MediaPipe hand landmarks.

Every function here is a pure function of one hand's 21 landmarks; nothing is
remembered between frames.
"""
import numpy as np
from typing import Optional, List, Sequence, Tuple

from .config import ClassifierConfig
from .types import HandSignal, Handedness, Landmark, Point


NUM_LANDMARKS = 21

WRIST = 0
THUMB_CMC, THUMB_MCP, THUMB_IP, THUMB_TIP = 1, 2, 3, 4
INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP = 5, 6, 7, 8
MIDDLE_MCP, MIDDLE_PIP, MIDDLE_DIP, MIDDLE_TIP = 9, 10, 11, 12
RING_MCP, RING_PIP, RING_DIP, RING_TIP = 13, 14, 15, 16
PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP = 17, 18, 19, 20

# Index, middle, ring, pinky
FINGER_TIPS = [INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP]
FINGER_PIPS = [INDEX_PIP, MIDDLE_PIP, RING_PIP, PINKY_PIP]


def sanitize_landmarks(landmarks: Optional[Sequence[Sequence[float]]]) -> Optional[List[Landmark]]:
    """
    Validate a landmark set coming from the detector.

    Args:
        landmarks: Sequence of (x, y, z) points

    Returns:
        List of 21 float triples, or None if the set is malformed
    """
    if landmarks is None or len(landmarks) != NUM_LANDMARKS:
        return None

    try:
        arr = np.asarray(landmarks, dtype=float)
    except (TypeError, ValueError):
        return None

    if arr.shape != (NUM_LANDMARKS, 3) or not np.isfinite(arr).all():
        return None

    return [(float(x), float(y), float(z)) for x, y, z in arr]


def calculate_pinch(landmarks: Sequence[Landmark], threshold: float) -> Tuple[bool, Point, float]:
    """
    Measure the thumb/index pinch.

    Args:
        landmarks: List of 21 hand landmarks
        threshold: Tip distance below which the hand counts as pinching

    Returns:
        (is_pinching, midpoint of the two tips, strength in [0, 1])
    """
    thumb_tip = np.asarray(landmarks[THUMB_TIP], dtype=float)
    index_tip = np.asarray(landmarks[INDEX_TIP], dtype=float)

    distance = float(np.linalg.norm(thumb_tip - index_tip))

    is_pinching = distance < threshold
    strength = max(0.0, min(1.0, 1.0 - distance / threshold))
    position = (
        float((thumb_tip[0] + index_tip[0]) / 2),
        float((thumb_tip[1] + index_tip[1]) / 2),
    )

    return is_pinching, position, strength


def fingers_curled(landmarks: Sequence[Landmark]) -> bool:
    """Check that index, middle, ring and pinky tips are below their PIP joints."""
    return all(landmarks[tip][1] > landmarks[pip][1] for tip, pip in zip(FINGER_TIPS, FINGER_PIPS))


def fingers_extended(landmarks: Sequence[Landmark]) -> bool:
    """Check that index, middle, ring and pinky tips are above their PIP joints."""
    return all(landmarks[tip][1] < landmarks[pip][1] for tip, pip in zip(FINGER_TIPS, FINGER_PIPS))


def detect_thumb_gesture(landmarks: Sequence[Landmark], cfg: ClassifierConfig) -> Tuple[bool, bool]:
    """
    Detect thumbs-up and thumbs-down.

    Both require the four fingers curled and the thumb extended away from the
    wrist. The sign of (thumb CMC y - thumb tip y) then decides the direction;
    a sideways thumb within the threshold is neither.

    Args:
        landmarks: List of 21 hand landmarks
        cfg: Classifier thresholds

    Returns:
        (is_thumbs_up, is_thumbs_down)
    """
    thumb_tip = landmarks[THUMB_TIP]
    thumb_cmc = landmarks[THUMB_CMC]
    wrist = landmarks[WRIST]

    curled = fingers_curled(landmarks)
    thumb_extended = (abs(thumb_tip[0] - wrist[0]) > cfg.thumb_extended_x or
                      abs(thumb_tip[1] - wrist[1]) > cfg.thumb_extended_y)

    # Positive = tip above its base (y grows downward)
    thumb_vertical = thumb_cmc[1] - thumb_tip[1]

    is_up = curled and thumb_extended and thumb_vertical > cfg.thumb_gesture_threshold
    is_down = curled and thumb_extended and thumb_vertical < -cfg.thumb_gesture_threshold

    return is_up, is_down


def is_open_palm(landmarks: Sequence[Landmark], cfg: ClassifierConfig) -> bool:
    """
    Check for an open palm: four fingers extended and the thumb splayed out.

    Args:
        landmarks: List of 21 hand landmarks
        cfg: Classifier thresholds

    Returns:
        True if the hand is an open palm
    """
    thumb_spread = abs(landmarks[THUMB_TIP][0] - landmarks[THUMB_MCP][0])
    return fingers_extended(landmarks) and thumb_spread > cfg.palm_thumb_spread


def classify_hand(landmarks: Optional[Sequence[Sequence[float]]], handedness: Handedness,
                  cfg: ClassifierConfig) -> Optional[HandSignal]:
    """
    Compute all gesture signals for one hand.

    Args:
        landmarks: Raw landmark set from the detector
        handedness: Corrected hand label
        cfg: Classifier thresholds

    Returns:
        HandSignal, or None when the landmark set is malformed
    """
    points = sanitize_landmarks(landmarks)
    if points is None:
        return None

    is_pinching, position, strength = calculate_pinch(points, cfg.pinch_threshold)
    is_up, is_down = detect_thumb_gesture(points, cfg)

    return HandSignal(
        handedness=handedness,
        is_pinching=is_pinching,
        pinch_position=position,
        pinch_strength=strength,
        is_thumbs_up=is_up,
        is_thumbs_down=is_down,
        is_open_palm=is_open_palm(points, cfg),
        landmarks=tuple(points),
    )
