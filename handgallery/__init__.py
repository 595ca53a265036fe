"""
Hand-Tracked Gallery

Reads hand landmarks from MediaPipe, classifies pinch, thumbs-up/down and
open-palm gestures, and drives drag-select, zoom/pan, dismiss and next/prev
navigation for an image gallery and viewer.
"""

__version__ = "0.1.0"

from .types import HandSignal, TrackingSnapshot, DetectedHand, GalleryItem, PresenterProto
from .config import load_config, Cfg
from .landmarks import classify_hand, calculate_pinch, detect_thumb_gesture, is_open_palm
from .tracking import FrameAssembler, FrameLoop
from .gallery import Gallery
from .layout import Layout
from .controllers import DragSelectController, ZoomPanController, MoveDismissController, NavigationController
from .session import InteractionSession
from .presenter_mock import MockPresenter

__all__ = [
    "HandSignal",
    "TrackingSnapshot",
    "DetectedHand",
    "GalleryItem",
    "PresenterProto",
    "load_config",
    "Cfg",
    "classify_hand",
    "calculate_pinch",
    "detect_thumb_gesture",
    "is_open_palm",
    "FrameAssembler",
    "FrameLoop",
    "Gallery",
    "Layout",
    "DragSelectController",
    "ZoomPanController",
    "MoveDismissController",
    "NavigationController",
    "InteractionSession",
    "MockPresenter",
]
