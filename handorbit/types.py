"""
Type definitions for the hand gesture control pipeline.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np


NUM_KEYPOINTS = 21

Point3 = Tuple[float, float, float]
IntentKind = Literal["advance", "retreat", "none"]


@dataclass(frozen=True, eq=False)
class KeypointFrame:
    """21 hand keypoints (x, y in [0..1], z relative depth) captured at one instant."""
    points: np.ndarray  # (21, 3)
    timestamp_ms: float

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]], timestamp_ms: float) -> "KeypointFrame":
        """Build a frame from any (21, 3)-shaped sequence of points."""
        arr = np.asarray(points, dtype=float).reshape(NUM_KEYPOINTS, 3)
        arr.setflags(write=False)
        return cls(points=arr, timestamp_ms=float(timestamp_ms))


@dataclass(frozen=True)
class FingerExtension:
    """Per-finger openness, 0 = fully curled, 1 = fully extended."""
    thumb: float
    index: float
    middle: float
    ring: float
    pinky: float

    @property
    def average(self) -> float:
        """Mean extension of the four non-thumb fingers."""
        return (self.index + self.middle + self.ring + self.pinky) / 4.0

    def non_thumb(self) -> Tuple[float, float, float, float]:
        return (self.index, self.middle, self.ring, self.pinky)


@dataclass(frozen=True)
class HandOrientation:
    """Palm orientation in degrees."""
    heading: float  # [0, 360)
    pitch: float  # [-90, 90]
    roll: float  # [-180, 180]


@dataclass(frozen=True)
class PinchState:
    """Thumb-index pinch measurement for one frame."""
    strength: float  # 1 = touching
    distance: float  # 2-D, normalized image units
    history: Tuple[float, ...] = ()  # display only


class PoseLabel(Enum):
    """Coarse static hand pose, used for status display."""
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    PINCH = "PINCH"
    POINT = "POINT"
    VICTORY = "VICTORY"
    THUMBS_UP = "THUMBS_UP"
    NONE = "NONE"


@dataclass(frozen=True, eq=False)
class HandFeatures:
    """Everything downstream stages need from one keypoint frame."""
    extension: FingerExtension
    orientation: HandOrientation
    pinch: PinchState
    wrist: np.ndarray
    thumb_tip: np.ndarray
    index_tip: np.ndarray
    fingertips: np.ndarray  # (5, 3): thumb, index, middle, ring, pinky
    palm_center: np.ndarray
    timestamp_ms: float


@dataclass(frozen=True)
class ContinuousDeltas:
    """Smoothed zoom level and per-axis rotation deltas for one frame."""
    zoom: float
    rotation_delta_x: float = 0.0
    rotation_delta_y: float = 0.0
    rotation_delta_z: float = 0.0


@dataclass(frozen=True)
class IntentEvent:
    """Discrete navigation decision for one frame."""
    kind: IntentKind = "none"
    magnitude: float = 0.0  # diagnostics only
    source: Optional[str] = None

    @classmethod
    def none(cls) -> "IntentEvent":
        return cls()

    @property
    def is_none(self) -> bool:
        return self.kind == "none"


class TrackingPhase(Enum):
    NO_HAND = "NO_HAND"
    TRACKING = "TRACKING"


@dataclass
class ControlState:
    """Accumulated control values; owned and mutated only by the accumulator."""
    zoom: float = 1.0
    rotation_x: float = 0.0
    rotation_y: float = 0.0
    rotation_z: float = 0.0
    current_index: int = 0


@dataclass(frozen=True)
class ControlSnapshot:
    """Read-only copy of the control state handed to consumers each frame."""
    zoom: float
    rotation_x: float
    rotation_y: float
    rotation_z: float
    current_index: int
    phase: TrackingPhase


@dataclass(frozen=True)
class FrameResult:
    """Output of one pipeline step."""
    snapshot: ControlSnapshot
    intent: IntentEvent = field(default_factory=IntentEvent.none)
    features: Optional[HandFeatures] = None
    pose: PoseLabel = PoseLabel.NONE
    pose_confidence: float = 0.0


@runtime_checkable
class RendererProto(Protocol):
    """Abstract protocol for consumers that display the controlled object."""

    async def render(self, snapshot: ControlSnapshot) -> None:
        """Apply the latest control snapshot."""
        ...

    async def show_item(self, index: int, name: str) -> None:
        """Switch the displayed catalog item."""
        ...
