"""
Discrete intent recognizers that turn hand motion into advance/retreat events.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import numpy as np

from .config import Cfg, IntentsConfig
from .features import point_motion
from .geometry import angle_delta_deg, dist2
from .types import FingerExtension, HandFeatures, IntentEvent

logger = logging.getLogger(__name__)

# Row of each finger in HandFeatures.fingertips
FINGER_ROWS = {"index": 1, "middle": 2, "ring": 3, "pinky": 4}


@dataclass
class RecognizerState:
    """Cooldown timestamp plus whatever a recognizer remembers between frames."""
    last_fired_at: Optional[float] = None
    pending: Any = None

    def ready(self, now_ms: float, cooldown_ms: float) -> bool:
        """True if the cooldown since the last firing has fully elapsed."""
        return self.last_fired_at is None or now_ms - self.last_fired_at > cooldown_ms

    def fire(self, now_ms: float) -> None:
        self.last_fired_at = now_ms


@dataclass
class FrameSample:
    """Current and previous sample handed to every recognizer."""
    features: HandFeatures
    previous: Optional[HandFeatures]
    wrist: np.ndarray
    previous_wrist: Optional[np.ndarray]
    now_ms: float
    previous_ms: Optional[float]

    @property
    def dt_ms(self) -> Optional[float]:
        if self.previous_ms is None:
            return None
        return self.now_ms - self.previous_ms


def is_fist(extension: FingerExtension, threshold: float) -> bool:
    """All four non-thumb fingers curled below threshold."""
    return all(value < threshold for value in extension.non_thumb())


class Recognizer:
    """Base class: one gesture, one cooldown."""

    name = "recognizer"

    def __init__(self, cfg: IntentsConfig):
        self.cfg = cfg
        self.state = RecognizerState()

    @property
    def enabled(self) -> bool:
        return True

    def update(self, sample: FrameSample) -> Optional[IntentEvent]:
        raise NotImplementedError

    def reset_samples(self) -> None:
        """Drop pending per-sample state; the cooldown survives."""
        self.state.pending = None

    def _usable_delta(self, sample: FrameSample) -> Optional[float]:
        """Δt in seconds, or None if the previous sample is missing or too old."""
        dt_ms = sample.dt_ms
        if sample.previous_wrist is None or dt_ms is None:
            return None
        if dt_ms <= 0 or dt_ms > self.cfg.max_sample_gap_ms:
            return None
        return dt_ms / 1000.0


@dataclass
class PinchPending:
    """Double-pinch memory: finger currently in contact and the open first pinch."""
    contact: Optional[str] = None
    first_finger: Optional[str] = None
    first_at: Optional[float] = None

    def start(self, finger: str, now_ms: float) -> None:
        self.first_finger = finger
        self.first_at = now_ms

    def clear_first(self) -> None:
        self.first_finger = None
        self.first_at = None


class DoublePinchRecognizer(Recognizer):
    """
    Two quick thumb-to-finger pinches with the same finger.

    Features:
    - Contact uses hysteresis (enter below threshold, release above
      threshold * release_ratio)
    - Only crossings made while the other three fingers stay extended count
    - The second crossing must come from the same finger within window_ms
    """

    name = "double_pinch"

    @property
    def enabled(self) -> bool:
        return self.cfg.double_pinch.enabled

    @property
    def pending(self) -> PinchPending:
        if self.state.pending is None:
            self.state.pending = PinchPending()
        return self.state.pending

    def observe(self, sample: FrameSample) -> None:
        """Track pinch contact without firing (used while other rules suppress)."""
        self.pending.contact = self._contact_finger(sample.features)

    def update(self, sample: FrameSample) -> Optional[IntentEvent]:
        cfg = self.cfg.double_pinch
        pending = self.pending
        contact = self._contact_finger(sample.features)
        crossed = (contact is not None and contact != pending.contact
                   and sample.previous is not None)
        pending.contact = contact

        if not crossed or not self._others_extended(sample.features, contact):
            return None

        now = sample.now_ms
        same_finger = pending.first_finger == contact
        in_window = pending.first_at is not None and now - pending.first_at <= cfg.window_ms

        if not (same_finger and in_window):
            pending.start(contact, now)
            logger.debug("first %s pinch at %.0f ms", contact, now)
            return None

        interval = now - pending.first_at
        pending.clear_first()
        if not self.state.ready(now, cfg.cooldown_ms):
            logger.debug("double pinch ignored, cooling down")
            pending.start(contact, now)
            return None

        self.state.fire(now)
        return IntentEvent(kind=cfg.fingers[contact], magnitude=interval, source=self.name)

    def _contact_finger(self, features: HandFeatures) -> Optional[str]:
        cfg = self.cfg.double_pinch
        current = self.pending.contact
        best, best_dist = None, None
        for finger in cfg.fingers:
            d = dist2(features.thumb_tip, features.fingertips[FINGER_ROWS[finger]])
            limit = cfg.distance_threshold
            if finger == current:
                limit *= cfg.release_ratio
            if d < limit and (best_dist is None or d < best_dist):
                best, best_dist = finger, d
        return best

    def _others_extended(self, features: HandFeatures, finger: str) -> bool:
        ext = features.extension
        others = [getattr(ext, name) for name in FINGER_ROWS if name != finger]
        return all(value >= self.cfg.other_finger_extended for value in others)


class SwipeRecognizer(Recognizer):
    """Fast horizontal wrist movement between consecutive frames."""

    name = "swipe"

    @property
    def enabled(self) -> bool:
        return self.cfg.swipe.enabled

    def update(self, sample: FrameSample) -> Optional[IntentEvent]:
        cfg = self.cfg.swipe
        dt_s = self._usable_delta(sample)
        if dt_s is None:
            return None

        motion = point_motion(sample.wrist, sample.previous_wrist, dt_s)
        velocity = motion.horizontal_speed
        if abs(motion.dx) < cfg.min_distance or velocity < cfg.velocity_threshold:
            return None

        if not self.state.ready(sample.now_ms, cfg.cooldown_ms):
            logger.debug("swipe dropped, cooling down (v=%.2f)", velocity)
            return None

        self.state.fire(sample.now_ms)
        return IntentEvent(kind="advance" if motion.dx > 0 else "retreat",
                           magnitude=velocity, source=self.name)


class VerticalSwingRecognizer(Recognizer):
    """Large vertical wrist displacement; up advances, down retreats."""

    name = "vertical_swing"

    @property
    def enabled(self) -> bool:
        return self.cfg.vertical_swing.enabled

    def update(self, sample: FrameSample) -> Optional[IntentEvent]:
        cfg = self.cfg.vertical_swing
        dt_s = self._usable_delta(sample)
        if dt_s is None:
            return None

        dy = point_motion(sample.wrist, sample.previous_wrist, dt_s).dy
        if abs(dy) < cfg.min_distance:
            return None
        if not self.state.ready(sample.now_ms, cfg.cooldown_ms):
            return None

        self.state.fire(sample.now_ms)
        # Image y grows downward
        return IntentEvent(kind="advance" if dy < 0 else "retreat",
                           magnitude=abs(dy) / dt_s, source=self.name)


class RollSnapRecognizer(Recognizer):
    """Abrupt palm roll between consecutive frames."""

    name = "roll_snap"

    @property
    def enabled(self) -> bool:
        return self.cfg.roll_snap.enabled

    def update(self, sample: FrameSample) -> Optional[IntentEvent]:
        cfg = self.cfg.roll_snap
        if sample.previous is None or self._usable_delta(sample) is None:
            return None

        d_roll = angle_delta_deg(sample.previous.orientation.roll, sample.features.orientation.roll)
        if abs(d_roll) < cfg.threshold_deg:
            return None
        if not self.state.ready(sample.now_ms, cfg.cooldown_ms):
            return None

        self.state.fire(sample.now_ms)
        return IntentEvent(kind="advance" if d_roll > 0 else "retreat",
                           magnitude=abs(d_roll), source=self.name)


class IntentDetector:
    """
    Runs the recognizers in priority order behind the fist-exclusion guard.

    Only the first recognizer to fire in a frame produces an event; the
    lower-priority ones are not consulted for that frame.
    """

    def __init__(self, cfg: Cfg):
        self.cfg = cfg
        intents = cfg.intents
        self.double_pinch = DoublePinchRecognizer(intents)
        self.recognizers: List[Recognizer] = [
            self.double_pinch,
            SwipeRecognizer(intents),
            VerticalSwingRecognizer(intents),
            RollSnapRecognizer(intents),
        ]

    def detect(self, features: HandFeatures, previous_features: Optional[HandFeatures],
               wrist: np.ndarray, previous_wrist: Optional[np.ndarray],
               timestamp_ms: float, previous_timestamp_ms: Optional[float]) -> IntentEvent:
        """
        Decide the intent for one frame.

        Returns:
            The highest-priority event that fired, or a 'none' event
        """
        sample = FrameSample(
            features=features,
            previous=previous_features,
            wrist=wrist,
            previous_wrist=previous_wrist,
            now_ms=timestamp_ms,
            previous_ms=previous_timestamp_ms,
        )

        if is_fist(features.extension, self.cfg.intents.fist_threshold):
            self.double_pinch.observe(sample)
            return IntentEvent.none()

        for recognizer in self.recognizers:
            if not recognizer.enabled:
                continue
            event = recognizer.update(sample)
            if event is not None:
                logger.debug("%s fired %s (%.3f)", recognizer.name, event.kind, event.magnitude)
                return event

        return IntentEvent.none()

    def reset_samples(self) -> None:
        """Hand lost: clear pending state so reappearance starts clean."""
        for recognizer in self.recognizers:
            recognizer.reset_samples()
