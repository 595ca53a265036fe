"""
Composition of the interaction controllers over one stream of snapshots.
"""
import logging
from typing import Iterable, List, Optional

from .config import Cfg
from .controllers import (
    DragSelectController, MoveDismissController, NavigationController, ZoomPanController,
)
from .gallery import Gallery
from .layout import Layout
from .types import (
    Closed, Dismissed, Dropped, GalleryItem, InteractionEvent, Navigated, Point,
    Selected, SnappedBack, TrackingSnapshot,
)

logger = logging.getLogger(__name__)


class InteractionSession:
    """
    Owns the selection and feeds every snapshot to the controllers.

    Evaluation order per snapshot:
    1. Move/dismiss (right hand), only while an item is open
    2. Zoom/pan (left hand), only while an item is open and not being moved
    3. Gallery drag/select (right hand)
    4. Thumbs navigation (right hand), not while a gallery drag is engaged
    """

    def __init__(self, cfg: Cfg, gallery: Optional[Gallery] = None, layout: Optional[Layout] = None):
        """Initialize the session with its controllers."""
        self.cfg = cfg
        self.layout = layout or Layout(cfg.layout)
        self.gallery = gallery if gallery is not None else Gallery.from_config(cfg.gallery)

        self.move_dismiss = MoveDismissController(cfg, self.layout)
        self.zoom_pan = ZoomPanController(cfg, self.layout)
        self.drag_select = DragSelectController(cfg, self.layout, self.gallery)
        self.navigation = NavigationController(cfg, self.layout, self.gallery)

        self.selected: Optional[GalleryItem] = None
        self.last_selected_id: Optional[str] = None
        self.initial_position: Optional[Point] = None
        self.torn_down = False

    def update(self, snapshot: TrackingSnapshot, t_now: float) -> List[InteractionEvent]:
        """
        Run all controllers on one snapshot.

        Args:
            snapshot: Latest tracking snapshot
            t_now: Current timestamp in seconds

        Returns:
            Events in the order they were produced
        """
        if self.torn_down:
            return []

        left, right = snapshot.left_hand, snapshot.right_hand
        events: List[InteractionEvent] = []

        if self.selected is not None:
            events.extend(self._apply_viewer(self.move_dismiss.update(right, t_now)))

        if self.selected is not None:
            if self.move_dismiss.is_dragging:
                self.zoom_pan.update(None, t_now)
            else:
                events.extend(self.zoom_pan.update(left, t_now))

        events.extend(self._apply_gallery(self.drag_select.update(right, t_now)))

        current = self.gallery.index_of(self.selected.id if self.selected else self.last_selected_id)
        events.extend(self._apply_gallery(self.navigation.update(
            right, t_now, current, suppressed=self.drag_select.is_engaged)))

        return events

    def poll(self, t_now: float) -> List[InteractionEvent]:
        """Advance timers without a new snapshot."""
        if self.torn_down:
            return []
        return self._apply_viewer(self.move_dismiss.poll(t_now))

    def _apply_viewer(self, events: List[InteractionEvent]) -> List[InteractionEvent]:
        out: List[InteractionEvent] = []
        for event in events:
            out.append(event)
            if isinstance(event, SnappedBack):
                changed = self.zoom_pan.set_pan((0.0, 0.0))
                if changed is not None:
                    out.append(changed)
            elif isinstance(event, Dismissed):
                out.extend(self.close())

        if self.move_dismiss.is_dragging:
            changed = self.zoom_pan.set_pan(self.move_dismiss.offset)
            if changed is not None:
                out.append(changed)
        return out

    def _apply_gallery(self, events: List[InteractionEvent]) -> List[InteractionEvent]:
        out: List[InteractionEvent] = []
        for event in events:
            out.append(event)
            if isinstance(event, Dropped):
                out.extend(self.select(event.item, event.position))
            elif isinstance(event, Navigated):
                self.drag_select.scroll_y = event.scroll_offset
                out.extend(self.select(event.item))
        return out

    def select(self, item: GalleryItem, position: Optional[Point] = None) -> List[InteractionEvent]:
        """
        Open an item in the viewer (also used for externally driven selection).

        Args:
            item: Item to open
            position: Screen position the item was dropped at, if any

        Returns:
            The Selected event
        """
        if self.torn_down:
            return []

        if self.selected is None or self.selected.id != item.id:
            self._reset_viewer()

        self.selected = item
        self.last_selected_id = item.id
        self.initial_position = position
        logger.info(f"🖼️ Selected {item.title!r} ({item.id})")
        return [Selected(item=item, position=position)]

    def close(self) -> List[InteractionEvent]:
        """Close the viewer. No-op when nothing is open."""
        if self.selected is None:
            return []

        logger.info(f"Closed {self.selected.title!r}")
        self.selected = None
        self.initial_position = None
        self._reset_viewer()
        return [Closed()]

    def set_items(self, items: Iterable[GalleryItem]) -> List[InteractionEvent]:
        """Replace the gallery contents; closes the viewer if its item disappeared."""
        self.gallery.items = list(items)
        self.drag_select.reset()

        if self.selected is not None and self.gallery.index_of(self.selected.id) < 0:
            return self.close()
        return []

    def _reset_viewer(self) -> None:
        self.zoom_pan.reset()
        self.move_dismiss.cancel()

    def teardown(self) -> None:
        """Cancel pending timers; nothing fires afterwards."""
        self.torn_down = True
        self.move_dismiss.cancel()
        self.drag_select.reset()
        logger.info("🧹 Interaction session torn down")
