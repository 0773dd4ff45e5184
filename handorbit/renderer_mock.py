"""
Mock renderer implementation for exercising the control pipeline.
"""
import logging
from typing import List

from .types import ControlSnapshot

logger = logging.getLogger(__name__)


class MockRenderer:
    """Mock renderer that logs what it would draw instead of drawing it."""

    def __init__(self):
        """Initialize the mock renderer."""
        self.render_count = 0
        self.switch_count = 0
        self.shown: List[str] = []
        self.last_snapshot = None

    async def render(self, snapshot: ControlSnapshot) -> None:
        """Remember the snapshot instead of rendering it."""
        self.render_count += 1
        self.last_snapshot = snapshot
        logger.debug(
            "[MockRenderer] zoom=%.2f rot=(%.1f, %.1f, %.1f) (frame #%d)",
            snapshot.zoom, snapshot.rotation_x, snapshot.rotation_y,
            snapshot.rotation_z, self.render_count,
        )

    async def show_item(self, index: int, name: str) -> None:
        """Log a catalog switch instead of loading the object."""
        self.switch_count += 1
        self.shown.append(name)
        logger.info("[MockRenderer] Show item %d: %s (switch #%d)", index, name, self.switch_count)

    def reset_counters(self) -> None:
        """Reset counters for testing."""
        self.render_count = 0
        self.switch_count = 0
        self.shown.clear()
        self.last_snapshot = None
