"""
Continuous control mapping: hand features to zoom level and rotation deltas.
"""
from typing import Optional

import numpy as np

from .config import Cfg, ZoomConfig
from .features import index_tip_velocity, wrist_velocity
from .geometry import angle_delta_deg, clamp, dead_zone
from .types import ContinuousDeltas, HandFeatures


class ExponentialSmoother:
    """Per-axis exponential smoothing: value += (raw - value) * alpha."""

    def __init__(self, alpha: float, axes: int = 3):
        self.alpha = alpha
        self.value = np.zeros(axes)

    def update(self, raw: np.ndarray) -> np.ndarray:
        self.value = self.value + (raw - self.value) * self.alpha
        return self.value

    def reset(self) -> None:
        self.value = np.zeros_like(self.value)


def smooth_zoom(avg_extension: float, current_zoom: float, cfg: ZoomConfig) -> float:
    """
    Move zoom a fraction of the way toward the pose target.

    An open hand targets cfg.min (zoomed out), a closed hand cfg.max.
    """
    target = cfg.min + (cfg.max - cfg.min) * (1.0 - avg_extension)
    zoom = current_zoom + (target - current_zoom) * cfg.smoothing
    return clamp(zoom, cfg.min, cfg.max)


class ContinuousControlMapper:
    """
    Converts features and their frame-to-frame deltas into control values.

    Rotation is layered from three contributions, each with its own smoother:
    - index fingertip drag (fine, slow)
    - wrist translation, boosted while the hand is closed (coarse, fast)
    - palm orientation change behind a dead zone

    Axis convention: rotation X follows vertical motion, Y follows horizontal
    motion (inverted) and heading, Z follows roll.
    """

    def __init__(self, cfg: Cfg):
        self.cfg = cfg
        rot = cfg.rotation
        self.finger_smoother = ExponentialSmoother(rot.finger.smoothing)
        self.wrist_smoother = ExponentialSmoother(rot.wrist.smoothing)
        self.orientation_smoother = ExponentialSmoother(rot.orientation.smoothing)

    def reset(self) -> None:
        """Forget smoother momentum (hand lost)."""
        self.finger_smoother.reset()
        self.wrist_smoother.reset()
        self.orientation_smoother.reset()

    def map(self, features: HandFeatures, previous: Optional[HandFeatures],
            current_zoom: float) -> ContinuousDeltas:
        """
        Compute the smoothed zoom and per-axis rotation deltas for one frame.

        Args:
            features: Current frame features
            previous: Features of the immediately preceding frame, None after
                the hand (re)appears
            current_zoom: Zoom currently held by the accumulator

        Returns:
            ContinuousDeltas; all rotation deltas are zero without a previous frame
        """
        avg_extension = features.extension.average
        zoom = smooth_zoom(avg_extension, current_zoom, self.cfg.zoom)

        if previous is None:
            self.reset()
            return ContinuousDeltas(zoom=zoom)

        finger = self.finger_smoother.update(self._finger_delta(features, previous))
        wrist = self.wrist_smoother.update(self._wrist_delta(features, previous, avg_extension))
        orientation = self.orientation_smoother.update(self._orientation_delta(features, previous))

        total = finger + wrist + orientation
        return ContinuousDeltas(
            zoom=zoom,
            rotation_delta_x=float(total[0]),
            rotation_delta_y=float(total[1]),
            rotation_delta_z=float(total[2]),
        )

    @staticmethod
    def _drag_to_rotation(dx: float, dy: float, gain: float, max_step: float) -> np.ndarray:
        # Moving right turns the object right, i.e. negative Y.
        rot_x = clamp(dy * gain * 180.0, -max_step, max_step)
        rot_y = clamp(-dx * gain * 180.0, -max_step, max_step)
        return np.array([rot_x, rot_y, 0.0])

    def _finger_delta(self, features: HandFeatures, previous: HandFeatures) -> np.ndarray:
        cfg = self.cfg.rotation.finger
        motion = index_tip_velocity(features, previous)
        return self._drag_to_rotation(motion.dx, motion.dy, cfg.sensitivity, cfg.max_step_deg)

    def _wrist_delta(self, features: HandFeatures, previous: HandFeatures,
                     avg_extension: float) -> np.ndarray:
        cfg = self.cfg.rotation.wrist
        boost = 1.0 + (cfg.fist_boost - 1.0) * (1.0 - avg_extension)
        motion = wrist_velocity(features, previous)
        return self._drag_to_rotation(motion.dx, motion.dy, cfg.sensitivity * boost, cfg.max_step_deg * boost)

    def _orientation_delta(self, features: HandFeatures, previous: HandFeatures) -> np.ndarray:
        cfg = self.cfg.rotation.orientation
        cur, prev = features.orientation, previous.orientation
        d_heading = dead_zone(angle_delta_deg(prev.heading, cur.heading), cfg.dead_zone_deg)
        d_pitch = dead_zone(cur.pitch - prev.pitch, cfg.dead_zone_deg)
        d_roll = dead_zone(angle_delta_deg(prev.roll, cur.roll), cfg.dead_zone_deg)
        return np.array([
            d_pitch * cfg.sensitivity,
            d_heading * cfg.sensitivity,
            d_roll * cfg.sensitivity * cfg.roll_factor,
        ])
