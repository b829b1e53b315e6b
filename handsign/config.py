"""
Configuration management for the hand gesture and sign classifier.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
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
    """MediaPipe hand landmarker settings."""
    model_path: str
    num_hands: int
    min_hand_detection_confidence: float
    min_hand_presence_confidence: float
    min_tracking_confidence: float


@dataclass
class PipelineConfig:
    """Admission thresholds and pacing of the classification loop."""
    sign_min_confidence: float
    base_min_confidence: float
    frame_interval_ms: int


@dataclass
class StabilizerConfig:
    """Gesture history and majority-vote settings."""
    history_size: int
    window: int
    min_votes: int
    min_confidence: float


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    window_name: str


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    pipeline: PipelineConfig
    stabilizer: StabilizerConfig
    display: DisplayConfig
    logging: LoggingConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        # Use default config file in project root
        project_root = Path(__file__).parent.parent
        path = project_root / "config.default.yaml"

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
        model_path=mp_data['model_path'],
        num_hands=mp_data['num_hands'],
        min_hand_detection_confidence=mp_data['min_hand_detection_confidence'],
        min_hand_presence_confidence=mp_data['min_hand_presence_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    pipeline_data = data['pipeline']
    pipeline = PipelineConfig(
        sign_min_confidence=pipeline_data['sign_min_confidence'],
        base_min_confidence=pipeline_data['base_min_confidence'],
        frame_interval_ms=pipeline_data['frame_interval_ms']
    )

    stabilizer_data = data['stabilizer']
    stabilizer = StabilizerConfig(
        history_size=stabilizer_data['history_size'],
        window=stabilizer_data['window'],
        min_votes=stabilizer_data['min_votes'],
        min_confidence=stabilizer_data['min_confidence']
    )

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        window_name=display_data['window_name']
    )

    logging_data = data.get('logging') or {}
    logging_cfg = LoggingConfig(level=logging_data.get('level', 'INFO'))

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        pipeline=pipeline,
        stabilizer=stabilizer,
        display=display,
        logging=logging_cfg
    )
