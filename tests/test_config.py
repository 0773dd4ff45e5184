"""
Test cases for YAML configuration loading.
"""
import unittest
import sys
import tempfile
from pathlib import Path

import yaml

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handorbit.config import load_config

DEFAULT_CONFIG = Path(__file__).parent.parent / "handorbit" / "config.default.yaml"


class TestLoadConfig(unittest.TestCase):
    """Test loading and validating configuration files."""

    def setUp(self):
        with open(DEFAULT_CONFIG, 'r') as f:
            self.data = yaml.safe_load(f)
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, data):
        path = Path(self.tmp.name) / "config.yaml"
        with open(path, 'w') as f:
            yaml.safe_dump(data, f)
        return str(path)

    def test_defaults(self):
        cfg = load_config()
        self.assertEqual(cfg.zoom.min, 0.5)
        self.assertEqual(cfg.zoom.max, 2.0)
        self.assertEqual(cfg.zoom.smoothing, 0.06)
        self.assertEqual(cfg.features.pinch_history_size, 50)
        self.assertEqual(cfg.intents.double_pinch.fingers, {"index": "advance", "middle": "retreat"})
        self.assertEqual(cfg.intents.swipe.cooldown_ms, 150)
        self.assertFalse(cfg.intents.vertical_swing.enabled)
        self.assertEqual([item.name for item in cfg.catalog.items][:3], ["Mercury", "Venus", "Earth"])

    def test_explicit_path(self):
        self.data['zoom']['max'] = 3.0
        cfg = load_config(self.write(self.data))
        self.assertEqual(cfg.zoom.max, 3.0)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config(str(Path(self.tmp.name) / "nope.yaml"))

    def test_inverted_zoom_range(self):
        self.data['zoom']['min'] = 2.0
        self.data['zoom']['max'] = 1.0
        with self.assertRaises(ValueError):
            load_config(self.write(self.data))

    def test_bad_smoothing(self):
        self.data['zoom']['smoothing'] = 0.0
        with self.assertRaises(ValueError):
            load_config(self.write(self.data))

    def test_empty_catalog(self):
        self.data['catalog']['items'] = []
        with self.assertRaises(ValueError):
            load_config(self.write(self.data))

    def test_unknown_pinch_finger(self):
        self.data['intents']['double_pinch']['fingers'] = {"thumb": "advance"}
        with self.assertRaises(ValueError):
            load_config(self.write(self.data))

    def test_unknown_intent_kind(self):
        self.data['intents']['double_pinch']['fingers'] = {"index": "sideways"}
        with self.assertRaises(ValueError):
            load_config(self.write(self.data))

    def test_catalog_color_defaults(self):
        self.data['catalog']['items'] = [{'name': 'Cube'}]
        cfg = load_config(self.write(self.data))
        self.assertEqual(cfg.catalog.items[0].color, "#FFFFFF")


if __name__ == '__main__':
    unittest.main()
