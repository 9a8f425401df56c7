"""
Pytest configuration and fixtures for stereo processing tests.
"""

import pytest
import numpy as np

from stereo_proc.calibration.camera_model import StereoCameraModel
from stereo_proc.data_models import CameraParameters, StereoParameters
from stereo_proc.utils.config_manager import ConfigManager


def pytest_configure(config):
    config.addinivalue_line("markers", "property: hypothesis property-based test")


@pytest.fixture
def config_manager():
    """Fixture providing a configuration manager instance."""
    return ConfigManager()


@pytest.fixture
def sample_camera_params():
    """Fixture providing sample camera parameters."""
    camera_matrix = np.array([
        [721.5, 0, 609.5],
        [0, 721.5, 172.8],
        [0, 0, 1]
    ], dtype=np.float64)

    distortion_coeffs = np.zeros(5, dtype=np.float64)

    return CameraParameters(
        camera_matrix=camera_matrix,
        distortion_coeffs=distortion_coeffs,
        reprojection_error=0.08,
        image_size=(1241, 376)
    )


@pytest.fixture
def sample_stereo_params(sample_camera_params):
    """Fixture providing sample stereo parameters (right camera 0.54m to the right)."""
    return StereoParameters(
        left_camera=sample_camera_params,
        right_camera=sample_camera_params,
        rotation_matrix=np.eye(3, dtype=np.float64),
        translation_vector=np.array([-0.54, 0, 0], dtype=np.float64),
        baseline=0.54
    )


@pytest.fixture
def stereo_model():
    """Rectified, distortion-free stereo model for a 160x120 image."""
    return StereoCameraModel.from_intrinsics(
        fx=721.5, fy=721.5, cx_left=80.0, cx_right=80.0, cy=60.0,
        baseline=0.54, image_size=(160, 120)
    )


@pytest.fixture
def synthetic_stereo_pair():
    """Fixture providing a textured synthetic stereo pair with a 10 pixel shift."""
    rng = np.random.default_rng(0)
    height, width = 120, 160

    left_img = rng.integers(0, 255, (height, width), dtype=np.uint8)

    right_img = np.zeros_like(left_img)
    shift = 10
    right_img[:, :-shift] = left_img[:, shift:]

    return left_img, right_img


class FakeMatcher:
    """Matching engine returning a fixed raw buffer."""

    def __init__(self, raw, disparity_scale=16):
        self.raw = np.asarray(raw, dtype=np.int16)
        self.disparity_scale = disparity_scale
        self.calls = 0

    def compute(self, left_image, right_image):
        self.calls += 1
        return self.raw.copy()


@pytest.fixture
def fake_matcher_factory():
    """Fixture providing the FakeMatcher class."""
    return FakeMatcher
