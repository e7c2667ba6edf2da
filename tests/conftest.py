"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import write_database  # noqa: E402


@pytest.fixture
def sample_image():
    """Create a sample test image."""
    return np.random.randint(0, 255, (480, 640, 3), dtype=np.uint8)


@pytest.fixture
def sample_grayscale_image():
    """Create a sample grayscale test image."""
    return np.random.randint(0, 255, (480, 640), dtype=np.uint8)


@pytest.fixture
def face_database(tmp_path):
    """Database with alice and bob, 3 images each, at 64x64."""
    images = write_database(tmp_path, {"alice": 3, "bob": 3})
    return tmp_path, images


@pytest.fixture
def mock_config():
    """Create a mock configuration dictionary."""
    return {
        "face_database": {
            "face_size": [48, 48],
            "portrait_size": [128, 128],
        },
        "recognition": {
            "backend": "lbph",
            "params": {"radius": 2},
        },
        "detection": {
            "scale_factor": 1.2,
            "min_neighbors": 5,
            "min_size": [30, 30],
        },
        "capture": {
            "detect_frame_size": [160, 120],
            "retrain": "background",
        },
        "logging": {
            "level": "debug",
        },
    }
