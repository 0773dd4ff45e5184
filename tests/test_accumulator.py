"""
Test cases for the control state accumulator and catalog.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handorbit.accumulator import ControlStateAccumulator
from handorbit.catalog import Catalog, CatalogItem
from handorbit.config import load_config
from handorbit.types import ContinuousDeltas, IntentEvent, TrackingPhase


def advance():
    return IntentEvent(kind="advance", magnitude=1.0, source="test")


def retreat():
    return IntentEvent(kind="retreat", magnitude=1.0, source="test")


class TestCatalog(unittest.TestCase):
    """Test catalog navigation."""

    def setUp(self):
        self.catalog = Catalog.from_config(load_config().catalog)

    def test_default_catalog(self):
        self.assertEqual(len(self.catalog), 8)
        self.assertEqual(self.catalog.name_at(0), "Mercury")
        self.assertEqual(self.catalog.name_at(7), "Neptune")

    def test_wraparound(self):
        self.assertEqual(self.catalog.next_index(7), 0)
        self.assertEqual(self.catalog.previous_index(0), 7)
        self.assertEqual(self.catalog[9].name, "Venus")

    def test_index_of(self):
        self.assertEqual(self.catalog.index_of("earth"), 2)
        with self.assertRaises(KeyError):
            self.catalog.index_of("Pluto")

    def test_empty_catalog_rejected(self):
        with self.assertRaises(ValueError):
            Catalog([])


class TestAccumulator(unittest.TestCase):
    """Test accumulation of deltas and intents."""

    def setUp(self):
        self.cfg = load_config()
        self.catalog = Catalog.from_config(self.cfg.catalog)
        self.acc = ControlStateAccumulator(self.catalog, self.cfg.zoom)

    def test_initial_state(self):
        snap = self.acc.snapshot()
        self.assertEqual(snap.zoom, 1.0)
        self.assertEqual((snap.rotation_x, snap.rotation_y, snap.rotation_z), (0.0, 0.0, 0.0))
        self.assertEqual(snap.current_index, 0)
        self.assertEqual(snap.phase, TrackingPhase.NO_HAND)

    def test_rotation_accumulates(self):
        for _ in range(3):
            snap = self.acc.step(ContinuousDeltas(zoom=1.0, rotation_delta_x=1.0,
                                                  rotation_delta_y=-2.0, rotation_delta_z=0.5),
                                 IntentEvent.none())
        self.assertAlmostEqual(snap.rotation_x, 3.0)
        self.assertAlmostEqual(snap.rotation_y, -6.0)
        self.assertAlmostEqual(snap.rotation_z, 1.5)
        self.assertEqual(snap.phase, TrackingPhase.TRACKING)

    def test_rotation_is_unbounded(self):
        for _ in range(100):
            snap = self.acc.step(ContinuousDeltas(zoom=1.0, rotation_delta_y=10.0), IntentEvent.none())
        self.assertAlmostEqual(snap.rotation_y, 1000.0)

    def test_zoom_is_clamped(self):
        self.assertEqual(self.acc.step(ContinuousDeltas(zoom=5.0), IntentEvent.none()).zoom, 2.0)
        self.assertEqual(self.acc.step(ContinuousDeltas(zoom=0.1), IntentEvent.none()).zoom, 0.5)

    def test_advance_wraps(self):
        for _ in range(8):
            snap = self.acc.step(ContinuousDeltas(zoom=1.0), advance())
        self.assertEqual(snap.current_index, 0)

    def test_retreat_wraps(self):
        snap = self.acc.step(ContinuousDeltas(zoom=1.0), retreat())
        self.assertEqual(snap.current_index, 7)

    def test_index_always_in_range(self):
        intents = [advance(), retreat(), retreat(), advance(), advance(), IntentEvent.none()] * 5
        for intent in intents:
            snap = self.acc.step(ContinuousDeltas(zoom=1.0), intent)
            self.assertGreaterEqual(snap.current_index, 0)
            self.assertLess(snap.current_index, len(self.catalog))

    def test_hand_lost_keeps_state(self):
        self.acc.step(ContinuousDeltas(zoom=1.3, rotation_delta_x=4.0), advance())
        before = self.acc.snapshot()
        after = self.acc.hand_lost()
        self.assertEqual(after.phase, TrackingPhase.NO_HAND)
        self.assertEqual(after.zoom, before.zoom)
        self.assertEqual(after.rotation_x, before.rotation_x)
        self.assertEqual(after.current_index, before.current_index)

    def test_reset_rotation(self):
        self.acc.step(ContinuousDeltas(zoom=1.2, rotation_delta_x=4.0, rotation_delta_z=2.0), advance())
        snap = self.acc.reset_rotation()
        self.assertEqual((snap.rotation_x, snap.rotation_y, snap.rotation_z), (0.0, 0.0, 0.0))
        self.assertEqual(snap.zoom, 1.2)
        self.assertEqual(snap.current_index, 1)

    def test_select(self):
        self.assertEqual(self.acc.select(3).current_index, 3)
        self.assertEqual(self.acc.select(10).current_index, 2)

    def test_snapshot_is_a_copy(self):
        snap = self.acc.snapshot()
        self.acc.step(ContinuousDeltas(zoom=1.5, rotation_delta_x=1.0), advance())
        self.assertEqual(snap.current_index, 0)
        self.assertEqual(snap.rotation_x, 0.0)

    def test_custom_catalog(self):
        acc = ControlStateAccumulator(Catalog([CatalogItem("a"), CatalogItem("b")]), self.cfg.zoom)
        acc.step(ContinuousDeltas(zoom=1.0), advance())
        self.assertEqual(acc.step(ContinuousDeltas(zoom=1.0), advance()).current_index, 0)


if __name__ == '__main__':
    unittest.main()
