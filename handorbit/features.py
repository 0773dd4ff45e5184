"""
Hand feature extraction from 21-point keypoint frames.

Everything here is a pure function of the current frame, except PinchHistory
which only buffers pinch strength for display.
"""
import math
from collections import deque
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

import numpy as np

from .config import FeaturesConfig
from .geometry import clamp, clamp01, dist2, dist3, heading_deg, normalize, plane_normal
from .types import (
    FingerExtension,
    HandFeatures,
    HandOrientation,
    KeypointFrame,
    PinchState,
    PoseLabel,
)


# MediaPipe landmark indices
class LM:
    WRIST = 0
    THUMB_CMC, THUMB_MCP, THUMB_IP, THUMB_TIP = 1, 2, 3, 4
    INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP = 5, 6, 7, 8
    MIDDLE_MCP, MIDDLE_PIP, MIDDLE_DIP, MIDDLE_TIP = 9, 10, 11, 12
    RING_MCP, RING_PIP, RING_DIP, RING_TIP = 13, 14, 15, 16
    PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP = 17, 18, 19, 20


FINGER_MCP_TIP = {
    "thumb": (LM.THUMB_MCP, LM.THUMB_TIP),
    "index": (LM.INDEX_MCP, LM.INDEX_TIP),
    "middle": (LM.MIDDLE_MCP, LM.MIDDLE_TIP),
    "ring": (LM.RING_MCP, LM.RING_TIP),
    "pinky": (LM.PINKY_MCP, LM.PINKY_TIP),
}
FINGERTIPS = [LM.THUMB_TIP, LM.INDEX_TIP, LM.MIDDLE_TIP, LM.RING_TIP, LM.PINKY_TIP]
PALM_INDICES = [LM.WRIST, LM.INDEX_MCP, LM.MIDDLE_MCP, LM.RING_MCP, LM.PINKY_MCP]


class PinchHistory:
    """Sliding window of recent pinch strengths, oldest evicted first."""

    def __init__(self, maxlen: int = 50):
        self._values: deque = deque(maxlen=maxlen)

    def add(self, strength: float) -> Tuple[float, ...]:
        self._values.append(strength)
        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def values(self) -> Tuple[float, ...]:
        return tuple(self._values)


def palm_center(points: np.ndarray) -> np.ndarray:
    """Mean of the wrist and the four finger MCP joints."""
    return points[PALM_INDICES].mean(axis=0)


def finger_extension(points: np.ndarray, cfg: FeaturesConfig) -> FingerExtension:
    """
    Estimate how open each finger is.

    Uses the fingertip-to-wrist distance relative to the MCP-to-wrist
    distance, so the result does not depend on how far the hand is from the
    camera.
    """
    wrist = points[LM.WRIST]

    def extension(mcp: int, tip: int) -> float:
        tip_to_wrist = dist3(points[tip], wrist)
        base_to_wrist = dist3(points[mcp], wrist) + 1e-9
        raw = clamp01(
            (tip_to_wrist - cfg.extension_base_ratio * base_to_wrist)
            / (cfg.extension_span_ratio * base_to_wrist)
        )
        return min(1.0, raw * cfg.extension_gain)

    return FingerExtension(**{
        name: extension(mcp, tip) for name, (mcp, tip) in FINGER_MCP_TIP.items()
    })


def hand_orientation(points: np.ndarray) -> HandOrientation:
    """Heading, pitch and roll of the palm plane normal."""
    normal = plane_normal(points[LM.WRIST], points[LM.INDEX_MCP], points[LM.PINKY_MCP])
    pitch = math.degrees(math.asin(clamp(float(normal[1]), -1.0, 1.0)))
    roll = math.degrees(math.atan2(normal[0], normal[2]))
    return HandOrientation(heading=heading_deg(normal), pitch=pitch, roll=roll)


def pinch_state(points: np.ndarray, cfg: FeaturesConfig,
                history: Optional[PinchHistory] = None) -> PinchState:
    """Thumb-index pinch strength; appends to history when one is given."""
    distance = dist2(points[LM.THUMB_TIP], points[LM.INDEX_TIP])
    strength = clamp01(1.0 - normalize(distance, 0.0, cfg.pinch_distance))
    recent = history.add(strength) if history is not None else ()
    return PinchState(strength=strength, distance=distance, history=recent)


def extract_features(frame: KeypointFrame, cfg: FeaturesConfig,
                     history: Optional[PinchHistory] = None) -> HandFeatures:
    """
    Extract hand features from one keypoint frame.

    Args:
        frame: 21 normalized keypoints plus timestamp
        cfg: Feature extraction constants
        history: Optional pinch display buffer to append to

    Returns:
        HandFeatures with extension, orientation, pinch and key positions
    """
    points = frame.points
    return HandFeatures(
        extension=finger_extension(points, cfg),
        orientation=hand_orientation(points),
        pinch=pinch_state(points, cfg, history),
        wrist=points[LM.WRIST],
        thumb_tip=points[LM.THUMB_TIP],
        index_tip=points[LM.INDEX_TIP],
        fingertips=points[FINGERTIPS],
        palm_center=palm_center(points),
        timestamp_ms=frame.timestamp_ms,
    )


@dataclass(frozen=True)
class Motion:
    """Frame-to-frame movement of a single keypoint."""
    dx: float
    dy: float
    speed: float  # units per second
    horizontal_speed: float
    direction: Literal["left", "right", "none"]


STILL = Motion(dx=0.0, dy=0.0, speed=0.0, horizontal_speed=0.0, direction="none")


def point_motion(current: np.ndarray, previous: Optional[np.ndarray], dt_s: float,
                 direction_dead_band: float = 0.01) -> Motion:
    """Velocity of a point between two frames (STILL without a previous sample)."""
    if previous is None or dt_s <= 0:
        return STILL

    dx = float(current[0] - previous[0])
    dy = float(current[1] - previous[1])
    direction = "none"
    if abs(dx) > direction_dead_band:
        direction = "right" if dx > 0 else "left"

    return Motion(
        dx=dx,
        dy=dy,
        speed=math.hypot(dx, dy) / dt_s,
        horizontal_speed=abs(dx) / dt_s,
        direction=direction,
    )


def wrist_velocity(current: HandFeatures, previous: Optional[HandFeatures]) -> Motion:
    """Wrist motion between two feature samples."""
    if previous is None:
        return STILL
    dt_s = (current.timestamp_ms - previous.timestamp_ms) / 1000.0
    return point_motion(current.wrist, previous.wrist, dt_s)


def index_tip_velocity(current: HandFeatures, previous: Optional[HandFeatures]) -> Motion:
    """Index fingertip motion between two feature samples."""
    if previous is None:
        return STILL
    dt_s = (current.timestamp_ms - previous.timestamp_ms) / 1000.0
    return point_motion(current.index_tip, previous.index_tip, dt_s)


def classify_pose(features: HandFeatures, extended: float = 0.6,
                  curled: float = 0.3) -> Tuple[PoseLabel, float]:
    """
    Coarse static pose label for status display.

    Fist-like poses are checked before pinch since a closed hand also brings
    the thumb and index tips together.
    """
    ext = features.extension
    fingers = ext.non_thumb()

    if all(f < curled for f in fingers):
        thumb_above_wrist = features.thumb_tip[1] < features.wrist[1] - 0.05
        if ext.thumb >= extended and thumb_above_wrist:
            return PoseLabel.THUMBS_UP, ext.thumb
        return PoseLabel.CLOSED, 1.0 - ext.average

    if features.pinch.strength >= 0.8:
        return PoseLabel.PINCH, features.pinch.strength

    if all(f >= extended for f in fingers):
        return PoseLabel.OPEN, ext.average

    if ext.index >= extended and ext.middle >= extended and ext.ring < curled and ext.pinky < curled:
        return PoseLabel.VICTORY, (ext.index + ext.middle) / 2.0

    if ext.index >= extended and max(ext.middle, ext.ring, ext.pinky) < curled:
        return PoseLabel.POINT, ext.index

    return PoseLabel.NONE, 0.0
