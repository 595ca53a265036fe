"""
Configuration management for the hand-tracked gallery.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    model_complexity: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class ClassifierConfig:
    """Landmark geometry thresholds (normalized units)."""
    pinch_threshold: float
    thumb_gesture_threshold: float
    thumb_extended_x: float
    thumb_extended_y: float
    palm_thumb_spread: float


@dataclass
class TrackingConfig:
    """Frame assembler settings."""
    publish_throttle_ms: int


@dataclass
class LayoutConfig:
    """Screen geometry used to map normalized positions to pixels."""
    screen_width: int
    screen_height: int
    main_view_fraction: float  # main view is the left part, gallery the rest
    gallery_header_px: float
    gallery_padding_px: float
    gallery_gap_px: float
    item_aspect: float  # width / height of a gallery thumbnail
    scroll_margin_px: float


@dataclass
class ViewerConfig:
    """Zoom/pan and dismiss settings of the image viewer."""
    zoom_min: float
    zoom_max: float
    zoom_gain: float
    zoom_dominance: float
    pan_min: float
    pan_max: float
    pan_gain: float
    pan_deadzone_px: float
    dismiss_zone_fraction: float
    dismiss_delay_ms: int


@dataclass
class NavigationConfig:
    """Thumbs-up/down navigation settings."""
    cooldown_ms: int


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    show_cursors: bool
    window_name: str


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str


@dataclass
class ServerConfig:
    """WebSocket broadcaster settings."""
    host: str
    port: int


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    classifier: ClassifierConfig
    tracking: TrackingConfig
    layout: LayoutConfig
    viewer: ViewerConfig
    navigation: NavigationConfig
    display: DisplayConfig
    logging: LoggingConfig
    server: ServerConfig
    gallery: List[Dict[str, str]]


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses the packaged config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        path = Path(__file__).parent / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps']
    )

    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data['max_num_hands'],
        model_complexity=mp_data['model_complexity'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    cls_data = data['classifier']
    classifier = ClassifierConfig(
        pinch_threshold=cls_data['pinch_threshold'],
        thumb_gesture_threshold=cls_data['thumb_gesture_threshold'],
        thumb_extended_x=cls_data['thumb_extended_x'],
        thumb_extended_y=cls_data['thumb_extended_y'],
        palm_thumb_spread=cls_data['palm_thumb_spread']
    )
    for name, value in vars(classifier).items():
        if value <= 0:
            raise ValueError(f"classifier.{name} must be positive, got {value}")

    tracking = TrackingConfig(
        publish_throttle_ms=data['tracking']['publish_throttle_ms']
    )

    layout_data = data['layout']
    layout = LayoutConfig(
        screen_width=layout_data['screen_width'],
        screen_height=layout_data['screen_height'],
        main_view_fraction=layout_data['main_view_fraction'],
        gallery_header_px=layout_data['gallery_header_px'],
        gallery_padding_px=layout_data['gallery_padding_px'],
        gallery_gap_px=layout_data['gallery_gap_px'],
        item_aspect=layout_data['item_aspect'],
        scroll_margin_px=layout_data['scroll_margin_px']
    )

    viewer_data = data['viewer']
    viewer = ViewerConfig(
        zoom_min=viewer_data['zoom_range'][0],
        zoom_max=viewer_data['zoom_range'][1],
        zoom_gain=viewer_data['zoom_gain'],
        zoom_dominance=viewer_data['zoom_dominance'],
        pan_min=viewer_data['pan_range'][0],
        pan_max=viewer_data['pan_range'][1],
        pan_gain=viewer_data['pan_gain'],
        pan_deadzone_px=viewer_data['pan_deadzone_px'],
        dismiss_zone_fraction=viewer_data['dismiss_zone_fraction'],
        dismiss_delay_ms=viewer_data['dismiss_delay_ms']
    )

    navigation = NavigationConfig(
        cooldown_ms=data['navigation']['cooldown_ms']
    )

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        show_cursors=display_data['show_cursors'],
        window_name=display_data['window_name']
    )

    logging_cfg = LoggingConfig(level=data['logging']['level'])

    server = ServerConfig(
        host=data['server']['host'],
        port=data['server']['port']
    )

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        classifier=classifier,
        tracking=tracking,
        layout=layout,
        viewer=viewer,
        navigation=navigation,
        display=display,
        logging=logging_cfg,
        server=server,
        gallery=list(data.get('gallery', []))
    )
