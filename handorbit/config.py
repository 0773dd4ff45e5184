"""
Configuration management for the hand gesture control pipeline.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass


INTENT_KINDS = ("advance", "retreat")
FINGER_NAMES = ("index", "middle", "ring", "pinky")


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class TrackerConfig:
    """MediaPipe HandLandmarker configuration settings."""
    model_path: str
    num_hands: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class FeaturesConfig:
    """Pose feature extraction constants."""
    extension_base_ratio: float
    extension_span_ratio: float
    extension_gain: float
    pinch_distance: float
    pinch_history_size: int


@dataclass
class ZoomConfig:
    """Zoom range and smoothing."""
    min: float
    max: float
    smoothing: float


@dataclass
class FingerRotationConfig:
    """Index fingertip drag rotation (fine control)."""
    sensitivity: float
    smoothing: float
    max_step_deg: float


@dataclass
class WristRotationConfig:
    """Wrist translation rotation (coarse control)."""
    sensitivity: float
    smoothing: float
    max_step_deg: float
    fist_boost: float


@dataclass
class OrientationRotationConfig:
    """Palm orientation rotation."""
    sensitivity: float
    roll_factor: float
    smoothing: float
    dead_zone_deg: float


@dataclass
class RotationConfig:
    """Rotation contributions, each smoothed independently."""
    finger: FingerRotationConfig
    wrist: WristRotationConfig
    orientation: OrientationRotationConfig


@dataclass
class DoublePinchConfig:
    """Double-pinch recognizer configuration."""
    enabled: bool
    distance_threshold: float
    release_ratio: float
    window_ms: int
    cooldown_ms: int
    fingers: Dict[str, str]


@dataclass
class SwipeConfig:
    """Directional swipe recognizer configuration."""
    enabled: bool
    min_distance: float
    velocity_threshold: float
    cooldown_ms: int


@dataclass
class VerticalSwingConfig:
    """Vertical swing recognizer configuration."""
    enabled: bool
    min_distance: float
    cooldown_ms: int


@dataclass
class RollSnapConfig:
    """Hand-roll snap recognizer configuration."""
    enabled: bool
    threshold_deg: float
    cooldown_ms: int


@dataclass
class IntentsConfig:
    """Discrete intent detection configuration."""
    fist_threshold: float
    other_finger_extended: float
    max_sample_gap_ms: int
    double_pinch: DoublePinchConfig
    swipe: SwipeConfig
    vertical_swing: VerticalSwingConfig
    roll_snap: RollSnapConfig


@dataclass
class CatalogItemConfig:
    """One entry of the ordered object catalog."""
    name: str
    color: str


@dataclass
class CatalogConfig:
    """Ordered catalog of controllable objects."""
    items: List[CatalogItemConfig]


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    show_palm_center: bool
    window_name: str


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    tracker: TrackerConfig
    features: FeaturesConfig
    zoom: ZoomConfig
    rotation: RotationConfig
    intents: IntentsConfig
    catalog: CatalogConfig
    display: DisplayConfig
    logging: LoggingConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses the bundled config.default.yaml

    Returns:
        Configuration object with all settings

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if a value is out of its allowed range
    """
    if path is None:
        path = Path(__file__).parent / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    cfg = _dict_to_config(data)
    _validate(cfg)
    return cfg


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps']
    )

    tracker_data = data['tracker']
    tracker = TrackerConfig(
        model_path=tracker_data['model_path'],
        num_hands=tracker_data['num_hands'],
        min_detection_confidence=tracker_data['min_detection_confidence'],
        min_tracking_confidence=tracker_data['min_tracking_confidence']
    )

    features_data = data['features']
    features = FeaturesConfig(
        extension_base_ratio=features_data['extension_base_ratio'],
        extension_span_ratio=features_data['extension_span_ratio'],
        extension_gain=features_data['extension_gain'],
        pinch_distance=features_data['pinch_distance'],
        pinch_history_size=features_data['pinch_history_size']
    )

    zoom_data = data['zoom']
    zoom = ZoomConfig(
        min=zoom_data['min'],
        max=zoom_data['max'],
        smoothing=zoom_data['smoothing']
    )

    rotation_data = data['rotation']
    finger = FingerRotationConfig(
        sensitivity=rotation_data['finger']['sensitivity'],
        smoothing=rotation_data['finger']['smoothing'],
        max_step_deg=rotation_data['finger']['max_step_deg']
    )
    wrist = WristRotationConfig(
        sensitivity=rotation_data['wrist']['sensitivity'],
        smoothing=rotation_data['wrist']['smoothing'],
        max_step_deg=rotation_data['wrist']['max_step_deg'],
        fist_boost=rotation_data['wrist']['fist_boost']
    )
    orientation = OrientationRotationConfig(
        sensitivity=rotation_data['orientation']['sensitivity'],
        roll_factor=rotation_data['orientation']['roll_factor'],
        smoothing=rotation_data['orientation']['smoothing'],
        dead_zone_deg=rotation_data['orientation']['dead_zone_deg']
    )
    rotation = RotationConfig(finger=finger, wrist=wrist, orientation=orientation)

    intents_data = data['intents']
    double_pinch = DoublePinchConfig(
        enabled=intents_data['double_pinch']['enabled'],
        distance_threshold=intents_data['double_pinch']['distance_threshold'],
        release_ratio=intents_data['double_pinch']['release_ratio'],
        window_ms=intents_data['double_pinch']['window_ms'],
        cooldown_ms=intents_data['double_pinch']['cooldown_ms'],
        fingers=dict(intents_data['double_pinch']['fingers'])
    )
    swipe = SwipeConfig(
        enabled=intents_data['swipe']['enabled'],
        min_distance=intents_data['swipe']['min_distance'],
        velocity_threshold=intents_data['swipe']['velocity_threshold'],
        cooldown_ms=intents_data['swipe']['cooldown_ms']
    )
    vertical_swing = VerticalSwingConfig(
        enabled=intents_data['vertical_swing']['enabled'],
        min_distance=intents_data['vertical_swing']['min_distance'],
        cooldown_ms=intents_data['vertical_swing']['cooldown_ms']
    )
    roll_snap = RollSnapConfig(
        enabled=intents_data['roll_snap']['enabled'],
        threshold_deg=intents_data['roll_snap']['threshold_deg'],
        cooldown_ms=intents_data['roll_snap']['cooldown_ms']
    )
    intents = IntentsConfig(
        fist_threshold=intents_data['fist_threshold'],
        other_finger_extended=intents_data['other_finger_extended'],
        max_sample_gap_ms=intents_data['max_sample_gap_ms'],
        double_pinch=double_pinch,
        swipe=swipe,
        vertical_swing=vertical_swing,
        roll_snap=roll_snap
    )

    catalog = CatalogConfig(items=[
        CatalogItemConfig(name=item['name'], color=item.get('color', '#FFFFFF'))
        for item in data['catalog']['items']
    ])

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        show_palm_center=display_data['show_palm_center'],
        window_name=display_data['window_name']
    )

    logging_cfg = LoggingConfig(level=data.get('logging', {}).get('level', 'INFO'))

    return Cfg(
        camera=camera,
        tracker=tracker,
        features=features,
        zoom=zoom,
        rotation=rotation,
        intents=intents,
        catalog=catalog,
        display=display,
        logging=logging_cfg
    )


def _validate(cfg: Cfg) -> None:
    """Reject values the pipeline cannot work with."""
    if cfg.zoom.min >= cfg.zoom.max:
        raise ValueError(f"zoom.min ({cfg.zoom.min}) must be below zoom.max ({cfg.zoom.max})")
    if not 0.0 < cfg.zoom.smoothing <= 1.0:
        raise ValueError(f"zoom.smoothing must be in (0, 1], got {cfg.zoom.smoothing}")
    if not cfg.catalog.items:
        raise ValueError("catalog.items must list at least one entry")
    if cfg.features.pinch_distance <= 0:
        raise ValueError("features.pinch_distance must be positive")
    if cfg.features.pinch_history_size < 1:
        raise ValueError("features.pinch_history_size must be at least 1")
    for finger, kind in cfg.intents.double_pinch.fingers.items():
        if finger not in FINGER_NAMES:
            raise ValueError(f"Unknown pinch finger: {finger}")
        if kind not in INTENT_KINDS:
            raise ValueError(f"Unknown intent for {finger} pinch: {kind}")
