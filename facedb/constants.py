"""Centralized constants and configuration loader.

This module provides the canonical image sizes of the face database and the
settings used by the command-line tools. Values are loaded from
config/config.yaml when available, otherwise defaults are used.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Path to the default configuration file
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"

# Canonical raster sizes (width, height)
STD_FACE_REC_SIZE: Tuple[int, int] = (64, 64)
STD_PROTRAIT_SIZE: Tuple[int, int] = (256, 256)
STD_DETECT_FRAME_SIZE: Tuple[int, int] = (320, 240)

# Database sub-directories (spelling is part of the on-disk layout)
FACES_DIR = "faces"
PROTRAITS_DIR = "protraits"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. Uses default if None.

    Returns:
        Configuration dictionary.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    try:
        if path.exists():
            with open(path, "r") as f:
                return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {path}: {e}")

    return {}


def _get_nested(config: Dict, *keys: str, default: Any = None) -> Any:
    """Get nested config value with default fallback."""
    value = config
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
        else:
            return default
        if value is None:
            return default
    return value


def _size(value: Any, default: Tuple[int, int]) -> Tuple[int, int]:
    if value is None:
        return default
    width, height = value
    return (int(width), int(height))


# ============================================================
# Face Database Layout
# ============================================================

@dataclass
class FaceDatabaseConfig:
    """On-disk layout and canonical sizes of the face database."""
    # Size every training/query face is normalized to
    face_size: Tuple[int, int] = STD_FACE_REC_SIZE
    # Size portraits are stored at
    portrait_size: Tuple[int, int] = STD_PROTRAIT_SIZE
    faces_dir: str = FACES_DIR
    portraits_dir: str = PROTRAITS_DIR

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "FaceDatabaseConfig":
        """Create from config dictionary."""
        db = _get_nested(config, "face_database") or {}

        return cls(
            face_size=_size(db.get("face_size"), STD_FACE_REC_SIZE),
            portrait_size=_size(db.get("portrait_size"), STD_PROTRAIT_SIZE),
            faces_dir=db.get("faces_dir", FACES_DIR),
            portraits_dir=db.get("portraits_dir", PROTRAITS_DIR),
        )


# ============================================================
# Recognition Model
# ============================================================

@dataclass
class RecognitionConfig:
    """Recognition model selection."""
    # fisher, eigen or lbph
    backend: str = "fisher"
    # Extra keyword arguments for the cv2.face factory
    params: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RecognitionConfig":
        """Create from config dictionary."""
        rec = _get_nested(config, "recognition") or {}

        return cls(
            backend=rec.get("backend", "fisher"),
            params=dict(rec.get("params") or {}),
        )


# ============================================================
# Haar Cascade Detection
# ============================================================

@dataclass
class DetectionConfig:
    """Haar cascade detectMultiScale parameters."""
    scale_factor: float = 1.1
    min_neighbors: int = 3
    # No lower bound by default
    min_size: Optional[Tuple[int, int]] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DetectionConfig":
        """Create from config dictionary."""
        det = _get_nested(config, "detection") or {}
        min_size = det.get("min_size")

        return cls(
            scale_factor=det.get("scale_factor", 1.1),
            min_neighbors=det.get("min_neighbors", 3),
            min_size=tuple(min_size) if min_size else None,
        )


# ============================================================
# Live Capture
# ============================================================

@dataclass
class CaptureConfig:
    """Live capture session settings."""
    # Frames are down-scaled to this size before detection
    detect_frame_size: Tuple[int, int] = STD_DETECT_FRAME_SIZE
    # sync: retrain before the next frame; background: worker thread
    retrain: str = "sync"
    window_name: str = "face_collection"
    image_extension: str = ".jpg"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CaptureConfig":
        """Create from config dictionary."""
        cap = _get_nested(config, "capture") or {}

        retrain = cap.get("retrain", "sync")
        if retrain not in ("sync", "background"):
            raise ValueError(f"Unknown retrain mode: {retrain}")

        return cls(
            detect_frame_size=_size(cap.get("detect_frame_size"), STD_DETECT_FRAME_SIZE),
            retrain=retrain,
            window_name=cap.get("window_name", "face_collection"),
            image_extension=cap.get("image_extension", ".jpg"),
        )


# ============================================================
# Logging
# ============================================================

@dataclass
class LoggingConfig:
    """Logging level and format."""
    level: str = "INFO"
    format: str = LOG_FORMAT

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "LoggingConfig":
        """Create from config dictionary."""
        log = _get_nested(config, "logging") or {}

        return cls(
            level=str(log.get("level", "INFO")).upper(),
            format=log.get("format", LOG_FORMAT),
        )


@dataclass
class Settings:
    """All settings of the face database tools."""
    database: FaceDatabaseConfig = field(default_factory=FaceDatabaseConfig)
    recognition: RecognitionConfig = field(default_factory=RecognitionConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Settings":
        """Create from config dictionary."""
        return cls(
            database=FaceDatabaseConfig.from_config(config),
            recognition=RecognitionConfig.from_config(config),
            detection=DetectionConfig.from_config(config),
            capture=CaptureConfig.from_config(config),
            logging=LoggingConfig.from_config(config),
        )


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from a YAML file, falling back to defaults.

    Raises:
        ConfigurationError: If a setting has an invalid value
    """
    config = load_config(config_path)
    try:
        return Settings.from_config(config)
    except (ValueError, TypeError, AttributeError) as e:
        raise ConfigurationError(f"Invalid settings in {config_path or DEFAULT_CONFIG_PATH}: {e}") from e


def setup_logging(config: Optional[LoggingConfig] = None, debug: bool = False) -> None:
    """Configure the root logger for command-line use."""
    config = config or LoggingConfig()
    level = logging.DEBUG if debug else getattr(logging, config.level, logging.INFO)
    logging.basicConfig(level=level, format=config.format)
    logging.getLogger().setLevel(level)
