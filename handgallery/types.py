"""
Type definitions for the hand-tracked gallery and viewer.
"""
from dataclasses import dataclass
from typing import List, Literal, Optional, Protocol, Tuple, Union, runtime_checkable


# (x, y, z): x, y normalized to [0..1] with y growing downward, z relative depth
Landmark = Tuple[float, float, float]
Point = Tuple[float, float]
Handedness = Literal["Left", "Right"]


@dataclass(frozen=True)
class DetectedHand:
    """One raw detection as reported by the landmark source (label not yet flipped)."""
    landmarks: List[Landmark]
    label: Handedness


@dataclass(frozen=True)
class HandSignal:
    """Per-frame gesture signals derived from one hand's landmarks."""
    handedness: Handedness
    is_pinching: bool
    pinch_position: Point  # normalized midpoint of thumb tip and index tip
    pinch_strength: float  # 0 at threshold, 1 when tips touch
    is_thumbs_up: bool
    is_thumbs_down: bool
    is_open_palm: bool
    landmarks: Tuple[Landmark, ...]


@dataclass(frozen=True)
class TrackingSnapshot:
    """Latest published view of both hands."""
    left_hand: Optional[HandSignal] = None
    right_hand: Optional[HandSignal] = None
    is_ready: bool = False
    timestamp: float = 0.0


@dataclass(frozen=True)
class GalleryItem:
    """A selectable entry of the gallery, identified by a stable id."""
    id: str
    src: str
    title: str


@dataclass(frozen=True)
class DragStarted:
    """A gallery item was picked up by a pinch."""
    item: GalleryItem
    position: Point


@dataclass(frozen=True)
class Dropped:
    """A dragged item was released over the main view."""
    item: GalleryItem
    position: Point


@dataclass(frozen=True)
class DragCancelled:
    """A dragged item was released outside the main view."""
    item: GalleryItem
    position: Point


@dataclass(frozen=True)
class ZoomPanChanged:
    """Viewer zoom factor or pan offset changed."""
    zoom: float
    pan: Point


@dataclass(frozen=True)
class DragStateChanged:
    """Viewer move-drag started/stopped or entered/left the dismiss zone."""
    is_dragging: bool
    is_in_dismiss_zone: bool


@dataclass(frozen=True)
class SnappedBack:
    """A move drag ended outside the dismiss zone; the image returns to center."""


@dataclass(frozen=True)
class Dismissed:
    """The dismiss animation delay elapsed; the viewer should close."""


@dataclass(frozen=True)
class Navigated:
    """Thumbs gesture moved the selection to a neighbouring item."""
    index: int
    item: GalleryItem
    direction: Literal["next", "prev"]
    scroll_offset: float  # gallery scroll (px) that keeps the item visible


@dataclass(frozen=True)
class Selected:
    """The open item changed."""
    item: GalleryItem
    position: Optional[Point] = None


@dataclass(frozen=True)
class Closed:
    """The viewer was closed."""


InteractionEvent = Union[
    DragStarted, Dropped, DragCancelled, ZoomPanChanged, DragStateChanged,
    SnappedBack, Dismissed, Navigated, Selected, Closed,
]


@runtime_checkable
class LandmarkSourceProto(Protocol):
    """Opaque hand-landmark detector: one image in, zero to two hands out."""

    def detect(self, frame) -> List[DetectedHand]:
        """Run detection on a single frame."""
        ...


@runtime_checkable
class PresenterProto(Protocol):
    """Abstract protocol for consumers of tracking state and interaction events."""

    async def on_snapshot(self, snapshot: TrackingSnapshot) -> None:
        """Receive the latest published snapshot."""
        ...

    async def on_event(self, event: InteractionEvent) -> None:
        """Receive one interaction event."""
        ...
