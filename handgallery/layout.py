"""
Screen geometry: maps normalized hand positions to pixels and answers
"which region / which gallery item is under this point".
"""
import math
from typing import Optional, Tuple

from .config import LayoutConfig
from .types import Point


class Layout:
    """
    Fixed screen layout of the app.

    The main view covers the left `main_view_fraction` of the screen; the
    gallery sidebar covers the rest, below a header. Gallery thumbnails are
    stacked vertically with a constant pitch, so hit testing is purely
    geometric.
    """

    def __init__(self, cfg: LayoutConfig):
        self.cfg = cfg
        self.width = float(cfg.screen_width)
        self.height = float(cfg.screen_height)

    def to_screen(self, position: Point) -> Point:
        """Convert a normalized camera position to mirrored screen pixels."""
        x, y = position
        return ((1 - x) * self.width, y * self.height)

    def in_main_view(self, point: Point) -> bool:
        return point[0] < self.width * self.cfg.main_view_fraction

    @property
    def gallery_rect(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) of the scrollable gallery area."""
        return (self.width * self.cfg.main_view_fraction, self.cfg.gallery_header_px,
                self.width, self.height)

    def in_gallery(self, point: Point) -> bool:
        left, top, right, bottom = self.gallery_rect
        x, y = point
        return left <= x <= right and top <= y <= bottom

    @property
    def item_height(self) -> float:
        left, _, right, _ = self.gallery_rect
        return (right - left - 2 * self.cfg.gallery_padding_px) / self.cfg.item_aspect

    @property
    def item_pitch(self) -> float:
        return self.item_height + self.cfg.gallery_gap_px

    def hit_test(self, point: Point, scroll_y: float, count: int) -> Optional[int]:
        """
        Find the gallery item under a screen point.

        Args:
            point: Screen position in pixels
            scroll_y: Current gallery scroll offset in pixels
            count: Number of items in the gallery

        Returns:
            Index of the item, or None for padding, gaps and empty space
        """
        if not self.in_gallery(point):
            return None

        left, top, right, _ = self.gallery_rect
        x, y = point
        pad = self.cfg.gallery_padding_px
        if x < left + pad or x > right - pad:
            return None

        rel_y = y - top - pad + scroll_y
        if rel_y < 0:
            return None

        index = int(math.floor(rel_y / self.item_pitch))
        if rel_y - index * self.item_pitch > self.item_height:
            return None  # gap between two items

        if index >= count:
            return None
        return index

    def scroll_target(self, index: int) -> float:
        """Gallery scroll offset that brings an item near the top of the list."""
        return max(0.0, index * self.item_pitch - self.cfg.scroll_margin_px)

    def in_dismiss_zone(self, point: Point, fraction: float) -> bool:
        """True when the point lies in the bottom `fraction` of the screen."""
        return point[1] > self.height * (1 - fraction)
