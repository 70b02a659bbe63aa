"""
Configuration management for hand gesture recognition system.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field, fields

from .types import CONTINUOUS_GESTURES, GestureType


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int = 0
    width: int = 640
    height: int = 480
    fps: int = 15


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int = 2
    min_detection_confidence: float = 0.6
    min_tracking_confidence: float = 0.6


@dataclass
class ClassifierConfig:
    """Per-frame classifier configuration."""
    confidence_threshold: float = 0.7


@dataclass
class StabilizerConfig:
    """Discrete gesture confirmation timing."""
    dwell_time_ms: int = 500
    cooldown_time_ms: int = 1000
    min_consecutive_frames: int = 3


@dataclass
class ContinuousConfig:
    """Pointing / zoom / click pipeline configuration."""
    enabled: bool = True
    smoothing_alpha: float = 0.15
    zoom_sensitivity: float = 15.0


@dataclass
class GestureMapping:
    """Binds a discrete gesture to a command id."""
    gesture: GestureType
    command_id: str = ""
    enabled: bool = True


def default_mappings() -> List[GestureMapping]:
    return [
        GestureMapping(GestureType.PALM, "app:toggle-left-sidebar"),
        GestureMapping(GestureType.FIST, "app:go-back"),
        GestureMapping(GestureType.THUMB_UP, "gesture:dictation-toggle"),
        GestureMapping(GestureType.VICTORY, "file-explorer:new-file"),
        GestureMapping(GestureType.I_LOVE_YOU, "command-palette:open"),
        GestureMapping(GestureType.OK, "", enabled=False),
        GestureMapping(GestureType.THUMB_DOWN, "", enabled=False),
        GestureMapping(GestureType.THREE, "", enabled=False),
    ]


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool = True
    show_status: bool = True
    window_name: str = "Gesture Control"


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    stabilizer: StabilizerConfig = field(default_factory=StabilizerConfig)
    continuous: ContinuousConfig = field(default_factory=ContinuousConfig)
    mappings: List[GestureMapping] = field(default_factory=default_mappings)
    display: DisplayConfig = field(default_factory=DisplayConfig)


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses config.default.yaml

    Returns:
        Configuration object with all settings

    Raises:
        FileNotFoundError: If the config file does not exist
        ValueError: If a section or key is unknown, a value is out of range
            or a gesture name is unknown
    """
    if path is None:
        # Use default config file in project root
        project_root = Path(__file__).parent.parent
        path = project_root / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return _dict_to_config(data)


def _parse_gesture(name: str) -> GestureType:
    try:
        return GestureType(name)
    except ValueError:
        raise ValueError(f"Unknown gesture in mappings: {name!r}") from None


def _section(data: Dict[str, Any], name: str, cls):
    """Build one config dataclass from its YAML section. An empty section keeps all defaults."""
    values = data.get(name) or {}
    if not isinstance(values, dict):
        raise ValueError(f"Config section {name} must be a mapping")

    unknown = set(values) - {f.name for f in fields(cls)}
    if unknown:
        raise ValueError(f"Unknown key in {name}: {', '.join(sorted(map(str, unknown)))}")
    return cls(**values)


def _parse_mapping(m: Dict[str, Any]) -> GestureMapping:
    if not isinstance(m, dict) or 'gesture' not in m:
        raise ValueError(f"Mapping entry needs a gesture: {m!r}")
    return GestureMapping(
        gesture=_parse_gesture(m['gesture']),
        command_id=m.get('command_id') or "",
        enabled=m.get('enabled', True)
    )


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object. Missing keys keep their defaults."""
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping of sections")

    camera = _section(data, 'camera', CameraConfig)
    mediapipe = _section(data, 'mediapipe', MediaPipeConfig)
    classifier = _section(data, 'classifier', ClassifierConfig)
    stabilizer = _section(data, 'stabilizer', StabilizerConfig)
    continuous = _section(data, 'continuous', ContinuousConfig)
    display = _section(data, 'display', DisplayConfig)

    if 'mappings' in data:
        # An empty "mappings:" key binds nothing
        mappings = [_parse_mapping(m) for m in data['mappings'] or []]
    else:
        mappings = default_mappings()

    cfg = Cfg(
        camera=camera,
        mediapipe=mediapipe,
        classifier=classifier,
        stabilizer=stabilizer,
        continuous=continuous,
        mappings=mappings,
        display=display
    )
    validate_config(cfg)
    return cfg


def validate_config(cfg: Cfg) -> None:
    """Raise ValueError for settings the gesture pipelines cannot work with."""
    if not 0.0 <= cfg.classifier.confidence_threshold <= 1.0:
        raise ValueError("classifier.confidence_threshold must be within [0, 1]")
    if cfg.stabilizer.dwell_time_ms < 0 or cfg.stabilizer.cooldown_time_ms < 0:
        raise ValueError("stabilizer times must not be negative")
    if cfg.stabilizer.min_consecutive_frames < 1:
        raise ValueError("stabilizer.min_consecutive_frames must be at least 1")
    if not 0.0 < cfg.continuous.smoothing_alpha < 1.0:
        raise ValueError("continuous.smoothing_alpha must be within (0, 1)")
    if cfg.continuous.zoom_sensitivity <= 0:
        raise ValueError("continuous.zoom_sensitivity must be positive")
    for mapping in cfg.mappings:
        if mapping.gesture in CONTINUOUS_GESTURES:
            raise ValueError(f"{mapping.gesture.value} drives the continuous pipeline and cannot be mapped")
