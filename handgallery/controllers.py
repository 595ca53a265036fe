"""
Interaction controllers that turn per-hand gesture signals into gallery and
viewer events.

Each controller is a small state machine fed with the latest `HandSignal` of
its hand channel (or None when that hand is not visible) and the current time
in seconds. Positions in emitted events are screen pixels.
"""
import logging
from enum import Enum
from typing import List, Optional

from .config import Cfg
from .gallery import Gallery
from .layout import Layout
from .types import (
    DragCancelled, DragStarted, DragStateChanged, Dismissed, Dropped, GalleryItem,
    HandSignal, InteractionEvent, Navigated, Point, SnappedBack, ZoomPanChanged,
)

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class DragState(Enum):
    IDLE = "idle"
    ENGAGED = "engaged"


class DragSelectController:
    """
    Pinch-to-drag a gallery item into the main view.

    Features:
    - Engages on the pinch rising edge over a gallery item
    - Target resolved once at engage time, never re-resolved during the drag
    - Drops over the main view, cancels anywhere else
    - Losing the hand mid-drag counts as a release at the last known position
    """

    def __init__(self, cfg: Cfg, layout: Layout, gallery: Gallery):
        """Initialize the drag controller."""
        self.cfg = cfg
        self.layout = layout
        self.gallery = gallery

        self.state = DragState.IDLE
        self.target: Optional[GalleryItem] = None
        self.position: Optional[Point] = None  # screen px of the dragged item
        self.hovered: Optional[str] = None  # id of the item under the idle hand
        self.scroll_y: float = 0.0
        self.last_pinch = False

    @property
    def is_engaged(self) -> bool:
        return self.state is DragState.ENGAGED

    def update(self, hand: Optional[HandSignal], t_now: float) -> List[InteractionEvent]:
        """
        Advance the drag state machine by one snapshot.

        Args:
            hand: Right hand signal (None if the hand is not visible)
            t_now: Current timestamp in seconds

        Returns:
            Events emitted on this tick
        """
        if hand is None:
            self.hovered = None
            self.last_pinch = False
            if self.is_engaged:
                logger.debug("Hand lost mid-drag, releasing")
                return [self._release(self.position)]
            return []

        point = self.layout.to_screen(hand.pinch_position)
        rising = hand.is_pinching and not self.last_pinch
        self.last_pinch = hand.is_pinching

        if self.is_engaged:
            self.position = point
            if not hand.is_pinching:
                return [self._release(point)]
            return []

        index = self.layout.hit_test(point, self.scroll_y, len(self.gallery))
        self.hovered = self.gallery[index].id if index is not None else None

        # Thumb gestures belong to navigation
        if hand.is_thumbs_up or hand.is_thumbs_down:
            return []

        if not rising or index is None:
            return []

        self.state = DragState.ENGAGED
        self.target = self.gallery[index]
        self.position = point
        self.hovered = None
        logger.debug(f"Drag started on item {self.target.id}")
        return [DragStarted(item=self.target, position=point)]

    def _release(self, point: Point) -> InteractionEvent:
        item = self.target
        self.reset()

        if self.layout.in_main_view(point):
            logger.debug(f"Dropped item {item.id} at {point}")
            return Dropped(item=item, position=point)

        logger.debug(f"Drag of item {item.id} cancelled")
        return DragCancelled(item=item, position=point)

    def reset(self) -> None:
        """Return to idle without emitting anything."""
        self.state = DragState.IDLE
        self.target = None
        self.position = None


class ZoomPanController:
    """
    Left-hand pinch zoom and horizontal pan of the open image.

    The first pinching tick only captures a reference position. Later ticks
    zoom on mostly-vertical motion and pan on horizontal motion past a dead
    zone; both may apply on the same tick.
    """

    def __init__(self, cfg: Cfg, layout: Layout):
        """Initialize zoom/pan processor."""
        self.cfg = cfg
        self.layout = layout

        self.zoom: float = 1.0
        self.pan: Point = (0.0, 0.0)
        self.is_pinching = False
        self.last_position: Optional[Point] = None

    def update(self, hand: Optional[HandSignal], t_now: float) -> List[InteractionEvent]:
        """
        Process one snapshot of the zoom hand.

        Args:
            hand: Left hand signal (None if not visible or suppressed)
            t_now: Current timestamp in seconds

        Returns:
            ZoomPanChanged if zoom or pan moved, otherwise nothing
        """
        if hand is None or not hand.is_pinching:
            self.is_pinching = False
            self.last_position = None
            return []

        point = self.layout.to_screen(hand.pinch_position)

        if not self.is_pinching:
            self.is_pinching = True
            self.last_position = point
            return []

        viewer = self.cfg.viewer
        dx = point[0] - self.last_position[0]
        dy = point[1] - self.last_position[1]
        self.last_position = point

        zoom = self.zoom
        pan_x, pan_y = self.pan

        if abs(dy) > abs(dx) * viewer.zoom_dominance:
            # Hand moving up zooms in
            zoom = _clamp(zoom - dy * viewer.zoom_gain, viewer.zoom_min, viewer.zoom_max)

        if abs(dx) > viewer.pan_deadzone_px:
            pan_x = _clamp(pan_x + dx * viewer.pan_gain, viewer.pan_min, viewer.pan_max)

        if zoom == self.zoom and (pan_x, pan_y) == self.pan:
            return []

        self.zoom = zoom
        self.pan = (pan_x, pan_y)
        return [ZoomPanChanged(zoom=self.zoom, pan=self.pan)]

    def set_pan(self, pan: Point) -> Optional[ZoomPanChanged]:
        """Overwrite the pan offset (used while the image is being moved)."""
        if pan == self.pan:
            return None
        self.pan = pan
        return ZoomPanChanged(zoom=self.zoom, pan=self.pan)

    def reset(self) -> None:
        """Back to zoom 1, no pan, no reference."""
        self.zoom = 1.0
        self.pan = (0.0, 0.0)
        self.is_pinching = False
        self.last_position = None


class MoveState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DISMISSING = "dismissing"


class MoveDismissController:
    """
    Right-hand pinch that moves the open image and dismisses it when released
    over the bottom of the screen.

    Features:
    - Offset follows the hand 1:1 from the anchor captured at the rising edge
    - Dismiss zone flag exposed for feedback
    - Release in the dismiss zone starts a timed DISMISSING state ending in
      exactly one Dismissed event; anywhere else snaps the image back
    """

    def __init__(self, cfg: Cfg, layout: Layout):
        """Initialize move/dismiss processor."""
        self.cfg = cfg
        self.layout = layout

        self.state = MoveState.IDLE
        self.anchor: Optional[Point] = None
        self.offset: Point = (0.0, 0.0)
        self.in_dismiss_zone = False
        self.dismiss_deadline: Optional[float] = None
        self.last_pinch = False

    @property
    def is_dragging(self) -> bool:
        return self.state is MoveState.DRAGGING

    @property
    def is_dismissing(self) -> bool:
        return self.state is MoveState.DISMISSING

    def poll(self, t_now: float) -> List[InteractionEvent]:
        """Fire the pending dismissal once its deadline has passed."""
        if self.state is MoveState.DISMISSING and t_now >= self.dismiss_deadline:
            self.state = MoveState.IDLE
            self.dismiss_deadline = None
            logger.debug("Dismiss delay elapsed")
            return [Dismissed()]
        return []

    def update(self, hand: Optional[HandSignal], t_now: float) -> List[InteractionEvent]:
        """
        Process one snapshot of the move hand.

        Args:
            hand: Right hand signal (None if the hand is not visible)
            t_now: Current timestamp in seconds

        Returns:
            Events emitted on this tick
        """
        events = self.poll(t_now)

        pinching = hand is not None and hand.is_pinching
        rising = pinching and not self.last_pinch
        self.last_pinch = pinching

        if self.state is MoveState.DISMISSING:
            return events

        if self.state is MoveState.DRAGGING:
            if not pinching:
                events.extend(self._release(t_now))
                return events

            point = self.layout.to_screen(hand.pinch_position)
            if not self.layout.in_main_view(point):
                return events

            self.offset = (point[0] - self.anchor[0], point[1] - self.anchor[1])
            in_zone = self.layout.in_dismiss_zone(point, self.cfg.viewer.dismiss_zone_fraction)
            if in_zone != self.in_dismiss_zone:
                self.in_dismiss_zone = in_zone
                events.append(DragStateChanged(is_dragging=True, is_in_dismiss_zone=in_zone))
            return events

        if not rising:
            return events

        point = self.layout.to_screen(hand.pinch_position)
        if not self.layout.in_main_view(point):
            return events

        self.state = MoveState.DRAGGING
        self.anchor = point
        self.offset = (0.0, 0.0)
        self.in_dismiss_zone = self.layout.in_dismiss_zone(point, self.cfg.viewer.dismiss_zone_fraction)
        events.append(DragStateChanged(is_dragging=True, is_in_dismiss_zone=self.in_dismiss_zone))
        return events

    def _release(self, t_now: float) -> List[InteractionEvent]:
        events: List[InteractionEvent] = [DragStateChanged(is_dragging=False, is_in_dismiss_zone=False)]
        self.anchor = None

        if self.in_dismiss_zone:
            self.state = MoveState.DISMISSING
            self.dismiss_deadline = t_now + self.cfg.viewer.dismiss_delay_ms / 1000.0
            self.in_dismiss_zone = False
            logger.debug("Released in dismiss zone, dismissing")
            return events

        self.state = MoveState.IDLE
        self.offset = (0.0, 0.0)
        events.append(SnappedBack())
        return events

    def cancel(self) -> None:
        """Drop any drag or pending dismissal without emitting events."""
        self.state = MoveState.IDLE
        self.anchor = None
        self.offset = (0.0, 0.0)
        self.in_dismiss_zone = False
        self.dismiss_deadline = None


class NavigationController:
    """
    Thumbs-up / thumbs-down selects the next / previous gallery item.

    One event per gesture onset; holding the gesture does not repeat. After an
    event, further thumb gestures are ignored for the cooldown period.
    """

    def __init__(self, cfg: Cfg, layout: Layout, gallery: Gallery):
        """Initialize navigation processor."""
        self.cfg = cfg
        self.layout = layout
        self.gallery = gallery

        self.cooldown_until: float = 0.0
        self.last_gesture: Optional[str] = None  # "up" or "down"
        self.indicator: Optional[str] = None  # gallery edge to highlight

    def update(self, hand: Optional[HandSignal], t_now: float, current_index: int,
               suppressed: bool = False) -> List[InteractionEvent]:
        """
        Process one snapshot of the navigation hand.

        Args:
            hand: Right hand signal (None if the hand is not visible)
            t_now: Current timestamp in seconds
            current_index: Index of the selected (or last selected) item, -1 if none
            suppressed: True while a gallery drag is in progress

        Returns:
            Navigated event on a qualifying gesture onset, otherwise nothing
        """
        if hand is None or suppressed:
            self.last_gesture = None
            self.indicator = None
            return []

        if hand.is_thumbs_up:
            gesture = "up"
        elif hand.is_thumbs_down:
            gesture = "down"
        else:
            gesture = None

        onset = gesture is not None and gesture != self.last_gesture
        self.last_gesture = gesture

        if gesture is None:
            self.indicator = None
            return []

        if not onset or t_now < self.cooldown_until or len(self.gallery) == 0:
            return []

        if gesture == "up":
            index = self.gallery.next_index(current_index)
            direction = "next"
            self.indicator = "down"
        else:
            index = self.gallery.prev_index(current_index)
            direction = "prev"
            self.indicator = "up"

        self.cooldown_until = t_now + (self.cfg.navigation.cooldown_ms / 1000.0)
        logger.debug(f"Navigate {direction} -> {index}")

        return [Navigated(
            index=index,
            item=self.gallery[index],
            direction=direction,
            scroll_offset=self.layout.scroll_target(index),
        )]
