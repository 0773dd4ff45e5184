"""
Hand Orbit Control

Turns a per-frame stream of 21-point hand keypoints into smooth zoom and
rotation values plus debounced next/previous catalog navigation.

The MediaPipe tracker and the OpenCV app live in handorbit.tracking and
handorbit.main and are imported on demand.
"""

__version__ = "0.1.0"

from .types import (
    KeypointFrame,
    FingerExtension,
    HandOrientation,
    PinchState,
    HandFeatures,
    ContinuousDeltas,
    IntentEvent,
    ControlState,
    ControlSnapshot,
    FrameResult,
    PoseLabel,
    TrackingPhase,
    RendererProto,
)
from .config import load_config, Cfg
from .catalog import Catalog, CatalogItem
from .features import extract_features, classify_pose, PinchHistory
from .mapping import ContinuousControlMapper
from .intents import IntentDetector, is_fist
from .accumulator import ControlStateAccumulator
from .pipeline import ControlPipeline
from .renderer_mock import MockRenderer

__all__ = [
    "KeypointFrame",
    "FingerExtension",
    "HandOrientation",
    "PinchState",
    "HandFeatures",
    "ContinuousDeltas",
    "IntentEvent",
    "ControlState",
    "ControlSnapshot",
    "FrameResult",
    "PoseLabel",
    "TrackingPhase",
    "RendererProto",
    "load_config",
    "Cfg",
    "Catalog",
    "CatalogItem",
    "extract_features",
    "classify_pose",
    "PinchHistory",
    "ContinuousControlMapper",
    "IntentDetector",
    "is_fist",
    "ControlStateAccumulator",
    "ControlPipeline",
    "MockRenderer",
]
