"""
Synthetic hand poses and signals for tests.
"""
from typing import List, Optional

from handgallery.types import HandSignal, Landmark

SCREEN_W = 1280
SCREEN_H = 720


def _set(points: List[Landmark], index: int, x: float, y: float, z: float = 0.0) -> None:
    points[index] = (x, y, z)


def fist_with_thumb(thumb_vertical: float) -> List[Landmark]:
    """
    Four fingers curled, thumb extended sideways from the wrist, thumb tip
    `thumb_vertical` above its CMC joint (negative = below).
    """
    points: List[Landmark] = [(0.5, 0.5, 0.0)] * 21
    _set(points, 0, 0.50, 0.80)          # wrist
    _set(points, 1, 0.45, 0.75)          # thumb CMC
    _set(points, 2, 0.42, 0.72)          # thumb MCP
    _set(points, 3, 0.40, 0.70)          # thumb IP
    _set(points, 4, 0.38, 0.75 - thumb_vertical)  # thumb tip

    for base, x in zip((5, 9, 13, 17), (0.48, 0.51, 0.54, 0.57)):
        _set(points, base, x, 0.60)      # MCP
        _set(points, base + 1, x, 0.55)  # PIP
        _set(points, base + 2, x, 0.58)  # DIP
        _set(points, base + 3, x, 0.62)  # tip, below PIP = curled
    return points


def open_palm() -> List[Landmark]:
    """All fingers up, thumb splayed outward."""
    points: List[Landmark] = [(0.5, 0.5, 0.0)] * 21
    _set(points, 0, 0.50, 0.85)
    _set(points, 1, 0.45, 0.78)
    _set(points, 2, 0.42, 0.72)
    _set(points, 3, 0.38, 0.66)
    _set(points, 4, 0.35, 0.62)

    for base, x in zip((5, 9, 13, 17), (0.46, 0.50, 0.54, 0.58)):
        _set(points, base, x, 0.60)
        _set(points, base + 1, x, 0.48)
        _set(points, base + 2, x, 0.40)
        _set(points, base + 3, x, 0.32)  # tip above PIP = extended
    return points


def pinch_pose(x: float, y: float, gap: float = 0.0) -> List[Landmark]:
    """
    Thumb tip and index tip centered on (x, y), `gap` apart horizontally.
    Index pointing up and middle curled, so neither thumbs nor palm fire.
    """
    points: List[Landmark] = [(x, y + 0.2, 0.0)] * 21
    _set(points, 4, x - gap / 2, y)
    _set(points, 8, x + gap / 2, y)
    _set(points, 6, x + gap / 2, y + 0.05)   # index PIP below tip
    _set(points, 10, x, y + 0.10)            # middle PIP
    _set(points, 12, x, y + 0.15)            # middle tip below PIP
    return points


def signal(x: float = 0.5, y: float = 0.5, pinching: bool = False, up: bool = False,
           down: bool = False, handedness: str = "Right") -> HandSignal:
    """HandSignal at a normalized camera position."""
    return HandSignal(
        handedness=handedness,
        is_pinching=pinching,
        pinch_position=(x, y),
        pinch_strength=1.0 if pinching else 0.0,
        is_thumbs_up=up,
        is_thumbs_down=down,
        is_open_palm=False,
        landmarks=(),
    )


def at_screen(sx: float, sy: float, pinching: bool = False, up: bool = False,
              down: bool = False, handedness: str = "Right") -> HandSignal:
    """HandSignal whose mirrored screen position is (sx, sy) on the default layout."""
    return signal(1 - sx / SCREEN_W, sy / SCREEN_H, pinching, up, down, handedness)


def thumbs(up: bool = True) -> Optional[HandSignal]:
    """Right hand showing thumbs up (or down) in the main view."""
    return at_screen(400, 300, up=up, down=not up)
