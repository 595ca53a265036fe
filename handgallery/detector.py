"""
Hand landmark detection using MediaPipe.
"""
import cv2
import mediapipe as mp
import numpy as np
from typing import List, Sequence

from .config import MediaPipeConfig
from .types import DetectedHand, HandSignal, Landmark


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, cfg: MediaPipeConfig):
        """
        Initialize the hands tracker.

        Args:
            cfg: MediaPipe settings (hand count, model complexity, confidences)
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=cfg.max_num_hands,
            model_complexity=cfg.model_complexity,
            min_detection_confidence=cfg.min_detection_confidence,
            min_tracking_confidence=cfg.min_tracking_confidence
        )

    def detect(self, frame_bgr: np.ndarray) -> List[DetectedHand]:
        """
        Process a frame and return every detected hand.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            Zero to two hands with 21 (x, y, z) landmarks and the raw detector label
        """
        # Convert BGR to RGB for MediaPipe
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.hands.process(frame_rgb)

        detected: List[DetectedHand] = []
        if not results.multi_hand_landmarks or not results.multi_handedness:
            return detected

        for hand_landmarks, handedness in zip(results.multi_hand_landmarks, results.multi_handedness):
            landmarks = [(lm.x, lm.y, lm.z) for lm in hand_landmarks.landmark]
            label = handedness.classification[0].label
            detected.append(DetectedHand(landmarks=landmarks, label=label))

        return detected

    def close(self) -> None:
        """Release the MediaPipe graph."""
        self.hands.close()


def draw_landmarks(frame: np.ndarray, landmarks: Sequence[Landmark], mirror: bool = True) -> np.ndarray:
    """
    Draw hand landmarks on the frame.

    Args:
        frame: Input frame (already mirrored for display when mirror is True)
        landmarks: List of (x, y, z) coordinates in [0..1] range
        mirror: Flip x so points line up with a mirrored frame

    Returns:
        Frame with landmarks drawn
    """
    height, width = frame.shape[:2]

    for i, (x, y, _z) in enumerate(landmarks):
        px = int(((1 - x) if mirror else x) * width)
        py = int(y * height)
        cv2.circle(frame, (px, py), 3, (0, 255, 0), -1)
        cv2.putText(frame, str(i), (px + 5, py - 5), cv2.FONT_HERSHEY_SIMPLEX, 0.3, (255, 255, 255), 1)

    return frame


def draw_cursor(frame: np.ndarray, hand: HandSignal, color: tuple) -> np.ndarray:
    """Draw the pinch cursor ring of one hand, shrunk while pinching."""
    height, width = frame.shape[:2]
    x, y = hand.pinch_position
    center = (int((1 - x) * width), int(y * height))

    radius = 14 if hand.is_pinching else 20
    cv2.circle(frame, center, radius, color, 2)
    cv2.circle(frame, center, 6 if hand.is_pinching else 4, color, -1)
    cv2.putText(frame, hand.handedness[0], (center[0] - 4, center[1] + radius + 14),
                cv2.FONT_HERSHEY_SIMPLEX, 0.4, color, 1)
    return frame
