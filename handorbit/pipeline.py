"""
Per-frame pipeline: keypoints -> features -> {deltas, intent} -> control state.
"""
from typing import Optional, Sequence

import numpy as np

from .accumulator import ControlStateAccumulator
from .catalog import Catalog
from .config import Cfg
from .features import PinchHistory, classify_pose, extract_features
from .intents import IntentDetector
from .mapping import ContinuousControlMapper
from .types import ControlSnapshot, FrameResult, HandFeatures, KeypointFrame


class ControlPipeline:
    """
    Main processor that coordinates feature extraction, mapping, intent
    detection and accumulation for the primary hand.
    """

    def __init__(self, cfg: Cfg, catalog: Optional[Catalog] = None):
        """Initialize the pipeline with configuration."""
        self.cfg = cfg
        self.catalog = catalog if catalog is not None else Catalog.from_config(cfg.catalog)
        self.mapper = ContinuousControlMapper(cfg)
        self.detector = IntentDetector(cfg)
        self.accumulator = ControlStateAccumulator(self.catalog, cfg.zoom)
        self.pinch_history = PinchHistory(cfg.features.pinch_history_size)

        # Previous processed frame, cleared whenever the hand disappears
        self.prev_features: Optional[HandFeatures] = None
        self.prev_wrist: Optional[np.ndarray] = None
        self.prev_timestamp: Optional[float] = None

    def process_frame(self, hands: Optional[Sequence[Sequence[Sequence[float]]]],
                      timestamp_ms: float) -> FrameResult:
        """
        Process one camera frame.

        Args:
            hands: Detected hands, each 21 (x, y, z) points; only the first is used
            timestamp_ms: Monotonic capture time in milliseconds

        Returns:
            FrameResult with the control snapshot, the accepted intent and features
        """
        if hands is None or len(hands) == 0:
            return FrameResult(snapshot=self._hand_lost())

        frame = KeypointFrame.from_points(hands[0], timestamp_ms)
        features = extract_features(frame, self.cfg.features, self.pinch_history)

        deltas = self.mapper.map(features, self.prev_features, self.accumulator.zoom)
        intent = self.detector.detect(
            features,
            self.prev_features,
            features.wrist,
            self.prev_wrist,
            frame.timestamp_ms,
            self.prev_timestamp,
        )
        snapshot = self.accumulator.step(deltas, intent)

        self.prev_features = features
        self.prev_wrist = features.wrist
        self.prev_timestamp = frame.timestamp_ms

        pose, confidence = classify_pose(features)
        return FrameResult(snapshot=snapshot, intent=intent, features=features,
                           pose=pose, pose_confidence=confidence)

    def _hand_lost(self) -> ControlSnapshot:
        self.prev_features = None
        self.prev_wrist = None
        self.prev_timestamp = None
        self.mapper.reset()
        self.detector.reset_samples()
        return self.accumulator.hand_lost()

    def reset_rotation(self) -> ControlSnapshot:
        return self.accumulator.reset_rotation()

    def select(self, index: int) -> ControlSnapshot:
        return self.accumulator.select(index)

    @property
    def state(self) -> ControlSnapshot:
        return self.accumulator.snapshot()

    @property
    def current_item_name(self) -> str:
        return self.catalog.name_at(self.accumulator.snapshot().current_index)
