"""
Mock presenter implementation for exercising interaction events.
"""
import logging
from typing import List

from .types import InteractionEvent, TrackingSnapshot

logger = logging.getLogger(__name__)


class MockPresenter:
    """Mock presenter that logs and records events instead of rendering them."""

    def __init__(self):
        """Initialize the mock presenter."""
        self.snapshot_count = 0
        self.events: List[InteractionEvent] = []
        self.last_snapshot: TrackingSnapshot = TrackingSnapshot()

    async def on_snapshot(self, snapshot: TrackingSnapshot) -> None:
        """Keep the latest snapshot."""
        self.snapshot_count += 1
        self.last_snapshot = snapshot

    async def on_event(self, event: InteractionEvent) -> None:
        """Log the event instead of rendering it."""
        self.events.append(event)
        logger.info(f"[MockPresenter] {event} (event #{len(self.events)})")

    def reset_counters(self) -> None:
        """Reset recorded state for testing."""
        self.snapshot_count = 0
        self.events = []
