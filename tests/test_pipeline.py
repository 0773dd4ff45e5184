"""
Test cases for the per-frame control pipeline.
"""
import unittest
import sys
from pathlib import Path

import numpy as np

# Add project root and tests dir to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from handorbit.config import load_config
from handorbit.pipeline import ControlPipeline
from handorbit.types import PoseLabel, TrackingPhase
from hand_factory import make_hand


class TestControlPipeline(unittest.TestCase):
    """Test the full keypoints-to-state path."""

    def setUp(self):
        self.cfg = load_config()
        self.pipeline = ControlPipeline(self.cfg)

    def test_no_hand_at_start(self):
        result = self.pipeline.process_frame(None, 0)
        self.assertEqual(result.snapshot.phase, TrackingPhase.NO_HAND)
        self.assertTrue(result.intent.is_none)
        self.assertIsNone(result.features)

    def test_tracking_phase(self):
        result = self.pipeline.process_frame([make_hand()], 0)
        self.assertEqual(result.snapshot.phase, TrackingPhase.TRACKING)
        self.assertEqual(result.pose, PoseLabel.OPEN)
        result = self.pipeline.process_frame([], 33)
        self.assertEqual(result.snapshot.phase, TrackingPhase.NO_HAND)

    def test_closing_hand_zooms_in_smoothly(self):
        t = 0
        for _ in range(5):
            zoom = self.pipeline.process_frame([make_hand(1.0)], t).snapshot.zoom
            t += 33
        self.assertLess(zoom, 1.0)

        for _ in range(40):
            next_zoom = self.pipeline.process_frame([make_hand(0.0)], t).snapshot.zoom
            self.assertGreater(next_zoom, zoom)
            self.assertLessEqual(next_zoom, self.cfg.zoom.max)
            zoom = next_zoom
            t += 33

    def test_reappearance_does_not_jump(self):
        t = 0
        for x in (0.40, 0.41, 0.42):
            self.pipeline.process_frame([make_hand(wrist=(x, 0.7))], t)
            t += 33
        before = self.pipeline.state

        for _ in range(3):
            self.pipeline.process_frame(None, t)
            t += 33

        result = self.pipeline.process_frame([make_hand(wrist=(0.9, 0.3), yaw_deg=60.0)], t)
        self.assertTrue(result.intent.is_none)
        self.assertEqual(result.snapshot.rotation_x, before.rotation_x)
        self.assertEqual(result.snapshot.rotation_y, before.rotation_y)
        self.assertEqual(result.snapshot.rotation_z, before.rotation_z)
        self.assertEqual(result.snapshot.current_index, before.current_index)

    def test_pinch_history_is_capped(self):
        for i in range(60):
            result = self.pipeline.process_frame([make_hand(pinch="index", pinch_gap=0.001 * (i % 20))], i * 33)
        self.assertEqual(len(result.features.pinch.history), self.cfg.features.pinch_history_size)

    def test_only_primary_hand_is_used(self):
        primary = make_hand(wrist=(0.3, 0.7))
        other = make_hand(0.0, wrist=(0.8, 0.6), yaw_deg=45.0)
        both = self.pipeline.process_frame([primary, other], 0)
        alone = ControlPipeline(self.cfg).process_frame([primary], 0)
        self.assertEqual(list(both.features.wrist), list(alone.features.wrist))
        self.assertEqual(both.snapshot, alone.snapshot)

    def test_double_pinch_advances_catalog(self):
        frames = [make_hand(), make_hand(pinch="index"), make_hand(), make_hand(pinch="index")]
        for i, hand in enumerate(frames):
            result = self.pipeline.process_frame([hand], i * 100)
        self.assertEqual(result.intent.kind, "advance")
        self.assertEqual(result.snapshot.current_index, 1)
        self.assertEqual(self.pipeline.current_item_name, "Venus")

    def test_swipe_left_retreats_catalog(self):
        self.pipeline.process_frame([make_hand(wrist=(0.60, 0.7))], 0)
        result = self.pipeline.process_frame([make_hand(wrist=(0.52, 0.7))], 50)
        self.assertEqual(result.snapshot.current_index, 7)
        self.assertEqual(self.pipeline.current_item_name, "Neptune")

    def test_fist_never_navigates(self):
        t = 0
        for x in (0.2, 0.3, 0.4, 0.5, 0.6, 0.7):
            result = self.pipeline.process_frame([make_hand(0.0, wrist=(x, 0.7))], t)
            self.assertTrue(result.intent.is_none)
            self.assertEqual(result.snapshot.current_index, 0)
            t += 50

    def test_reset_rotation_and_select(self):
        self.pipeline.process_frame([make_hand(wrist=(0.40, 0.7))], 0)
        self.pipeline.process_frame([make_hand(wrist=(0.41, 0.72))], 33)
        self.assertNotEqual(self.pipeline.state.rotation_y, 0.0)

        snap = self.pipeline.reset_rotation()
        self.assertEqual((snap.rotation_x, snap.rotation_y, snap.rotation_z), (0.0, 0.0, 0.0))
        self.assertEqual(self.pipeline.select(4).current_index, 4)
        self.assertEqual(self.pipeline.current_item_name, "Jupiter")

    def test_hands_as_numpy_array(self):
        primary = make_hand(wrist=(0.3, 0.7))
        result = self.pipeline.process_frame(np.stack([primary, make_hand(0.0)]), 0)
        self.assertEqual(result.snapshot.phase, TrackingPhase.TRACKING)
        self.assertEqual(list(result.features.wrist), list(primary[0]))

        result = self.pipeline.process_frame(np.empty((0, 21, 3)), 33)
        self.assertEqual(result.snapshot.phase, TrackingPhase.NO_HAND)

    def test_pose_confidence_is_reported(self):
        result = self.pipeline.process_frame([make_hand(1.0)], 0)
        self.assertEqual(result.pose, PoseLabel.OPEN)
        self.assertAlmostEqual(result.pose_confidence, 1.0, places=6)
        self.assertEqual(self.pipeline.process_frame(None, 33).pose_confidence, 0.0)


if __name__ == '__main__':
    unittest.main()
