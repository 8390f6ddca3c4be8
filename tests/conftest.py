"""
Pytest fixtures for the badge validator tests
"""

import numpy as np
import pytest
from PIL import Image

from badge_validator import circle_distances


def badge_buffer(size=512, color=(255, 0, 0), background=(0, 0, 0, 0)):
    """Opaque `color` disc on a `background`, using the validator's own circle."""
    buffer = np.zeros((size, size, 4), dtype=np.uint8)
    buffer[:, :] = background
    inside = circle_distances(size) <= size / 2.0
    buffer[inside] = (*color, 255)
    return buffer


@pytest.fixture
def valid_badge():
    """512x512 red disc with transparent corners"""
    return badge_buffer()


@pytest.fixture
def opaque_image():
    """512x512 image without any transparent pixel"""
    buffer = np.zeros((512, 512, 4), dtype=np.uint8)
    buffer[:, :] = (255, 0, 0, 255)
    return buffer


@pytest.fixture
def badge_file(tmp_path, valid_badge):
    """Valid badge written as a PNG file"""
    path = tmp_path / "badge.png"
    Image.fromarray(valid_badge).save(path)
    return path


@pytest.fixture
def photo_file(tmp_path):
    """Non-square opaque RGB picture in a palette color"""
    path = tmp_path / "photo.png"
    Image.new("RGB", (300, 200), (0, 0, 255)).save(path)
    return path


@pytest.fixture
def make_badge():
    """Factory for badge buffers of any size and color"""
    return badge_buffer
