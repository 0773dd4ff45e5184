"""
Control state accumulator: the only writer of ControlState.
"""
import logging

from .catalog import Catalog
from .config import ZoomConfig
from .geometry import clamp
from .types import ContinuousDeltas, ControlSnapshot, ControlState, IntentEvent, TrackingPhase

logger = logging.getLogger(__name__)


class ControlStateAccumulator:
    """
    Integrates per-frame deltas and intents into the session's ControlState.

    States:
    - NO_HAND: nothing is mutated; waiting for a hand
    - TRACKING: rotation accumulates, zoom follows the mapper, intents move
      the catalog cursor
    """

    def __init__(self, catalog: Catalog, zoom_cfg: ZoomConfig):
        self.catalog = catalog
        self.zoom_cfg = zoom_cfg
        self._state = ControlState()
        self.phase = TrackingPhase.NO_HAND

    def step(self, deltas: ContinuousDeltas, intent: IntentEvent) -> ControlSnapshot:
        """
        Apply one tracked frame.

        Args:
            deltas: Smoothed zoom and rotation deltas
            intent: At most one accepted navigation intent

        Returns:
            Snapshot after the update
        """
        if self.phase is TrackingPhase.NO_HAND:
            logger.info("Hand detected, tracking")
            self.phase = TrackingPhase.TRACKING

        state = self._state
        state.rotation_x += deltas.rotation_delta_x
        state.rotation_y += deltas.rotation_delta_y
        state.rotation_z += deltas.rotation_delta_z
        state.zoom = clamp(deltas.zoom, self.zoom_cfg.min, self.zoom_cfg.max)

        if intent.kind == "advance":
            state.current_index = self.catalog.next_index(state.current_index)
        elif intent.kind == "retreat":
            state.current_index = self.catalog.previous_index(state.current_index)

        if not intent.is_none:
            logger.info("%s via %s -> %s", intent.kind, intent.source,
                        self.catalog.name_at(state.current_index))

        return self.snapshot()

    def hand_lost(self) -> ControlSnapshot:
        """No hand this frame: switch to NO_HAND without touching the state."""
        if self.phase is TrackingPhase.TRACKING:
            logger.info("Hand lost")
            self.phase = TrackingPhase.NO_HAND
        return self.snapshot()

    def reset_rotation(self) -> ControlSnapshot:
        """Zero all rotation axes (calibration)."""
        self._state.rotation_x = 0.0
        self._state.rotation_y = 0.0
        self._state.rotation_z = 0.0
        return self.snapshot()

    def select(self, index: int) -> ControlSnapshot:
        """Jump the cursor to a catalog entry (wrapped into range)."""
        self._state.current_index = index % len(self.catalog)
        return self.snapshot()

    @property
    def zoom(self) -> float:
        return self._state.zoom

    def snapshot(self) -> ControlSnapshot:
        state = self._state
        return ControlSnapshot(
            zoom=state.zoom,
            rotation_x=state.rotation_x,
            rotation_y=state.rotation_y,
            rotation_z=state.rotation_z,
            current_index=state.current_index,
            phase=self.phase,
        )
