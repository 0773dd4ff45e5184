"""
Hand keypoint detection using the MediaPipe Tasks HandLandmarker.
"""
from pathlib import Path
from typing import List

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from .config import TrackerConfig

HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),          # thumb
    (0, 5), (5, 6), (6, 7), (7, 8),          # index
    (0, 9), (9, 10), (10, 11), (11, 12),     # middle
    (0, 13), (13, 14), (14, 15), (15, 16),   # ring
    (0, 17), (17, 18), (18, 19), (19, 20),   # pinky
    (5, 9), (9, 13), (13, 17),               # palm
]


def hands_from_result(result) -> List[np.ndarray]:
    """Convert a HandLandmarkerResult into a list of (21, 3) arrays."""
    if not result.hand_landmarks:
        return []
    return [
        np.array([[lm.x, lm.y, lm.z] for lm in hand], dtype=float)
        for hand in result.hand_landmarks
    ]


class HandsTracker:
    """Hand keypoint tracker running HandLandmarker in VIDEO mode."""

    def __init__(self, cfg: TrackerConfig):
        """
        Initialize the hands tracker.

        Args:
            cfg: Model path, number of hands and confidence thresholds

        Raises:
            FileNotFoundError: if the .task model file is missing
        """
        model_path = Path(cfg.model_path)
        if not model_path.exists():
            raise FileNotFoundError(f"Missing model file: {model_path}")

        options = vision.HandLandmarkerOptions(
            base_options=python.BaseOptions(model_asset_path=str(model_path)),
            running_mode=vision.RunningMode.VIDEO,
            num_hands=cfg.num_hands,
            min_hand_detection_confidence=cfg.min_detection_confidence,
            min_tracking_confidence=cfg.min_tracking_confidence,
        )
        self.landmarker = vision.HandLandmarker.create_from_options(options)
        self.last_timestamp_ms = -1

    def process(self, frame_bgr: np.ndarray, timestamp_ms: float) -> List[np.ndarray]:
        """
        Process a frame and return hand keypoints.

        Args:
            frame_bgr: Input frame in BGR format
            timestamp_ms: Monotonic capture time in milliseconds

        Returns:
            One (21, 3) array per detected hand, primary hand first; empty if none
        """
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)

        # VIDEO mode rejects repeated or decreasing timestamps
        ts = max(self.last_timestamp_ms + 1, int(timestamp_ms))
        self.last_timestamp_ms = ts

        return hands_from_result(self.landmarker.detect_for_video(image, ts))

    def close(self) -> None:
        self.landmarker.close()


def draw_landmarks(frame: np.ndarray, points: np.ndarray) -> np.ndarray:
    """
    Draw a hand skeleton on the frame.

    Args:
        frame: Input frame
        points: (21, 3) keypoints in [0..1] image coordinates

    Returns:
        Frame with the skeleton drawn
    """
    height, width = frame.shape[:2]
    px = [(int(x * width), int(y * height)) for x, y, _ in points]

    for start, end in HAND_CONNECTIONS:
        cv2.line(frame, px[start], px[end], (0, 255, 0), 2)
    for i, (x, y) in enumerate(px):
        cv2.circle(frame, (x, y), 3, (0, 255, 255), -1)
        cv2.putText(frame, str(i), (x + 5, y - 5), cv2.FONT_HERSHEY_SIMPLEX, 0.3, (255, 255, 255), 1)

    return frame
