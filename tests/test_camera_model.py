"""
Tests for Pinhole and Stereo Camera Models
"""

import pytest
import numpy as np
import yaml

from stereo_proc.calibration.camera_model import PinholeCameraModel, StereoCameraModel
from stereo_proc.errors import CameraModelError


def camera_info(cx, tx=0.0):
    return {
        'image_width': 640,
        'image_height': 480,
        'camera_matrix': {'rows': 3, 'cols': 3,
                          'data': [500.0, 0, cx, 0, 510.0, 240.0, 0, 0, 1]},
        'distortion_coefficients': {'rows': 1, 'cols': 5, 'data': [0, 0, 0, 0, 0]},
        'rectification_matrix': {'rows': 3, 'cols': 3, 'data': [1, 0, 0, 0, 1, 0, 0, 0, 1]},
        'projection_matrix': {'rows': 3, 'cols': 4,
                              'data': [500.0, 0, cx, tx, 0, 510.0, 240.0, 0, 0, 0, 1, 0]},
    }


class TestPinholeCameraModel:
    """Test suite for the pinhole camera model."""

    def test_from_camera_info(self):
        model = PinholeCameraModel.from_camera_info(camera_info(320.0, tx=-50.0))

        assert model.fx == 500.0
        assert model.fy == 510.0
        assert model.cx == 320.0
        assert model.cy == 240.0
        assert model.Tx == -50.0
        assert model.image_size == (640, 480)

    def test_incomplete_camera_info(self):
        info = camera_info(320.0)
        del info['projection_matrix']

        with pytest.raises(CameraModelError, match="Incomplete"):
            PinholeCameraModel.from_camera_info(info)

    def test_zero_focal_length_rejected(self):
        with pytest.raises(CameraModelError):
            PinholeCameraModel(np.eye(3), np.zeros(5), np.eye(3), np.zeros((3, 4)), (10, 10))

    def test_identity_rectification(self):
        model = PinholeCameraModel.from_camera_info(camera_info(320.0))
        image = np.random.randint(0, 255, (480, 640), dtype=np.uint8)

        rectified = model.rectify_image(image)

        assert rectified.shape == image.shape
        assert rectified.dtype == np.uint8
        assert np.abs(rectified[10:-10, 10:-10].astype(int) - image[10:-10, 10:-10]).max() <= 1


class TestStereoCameraModel:
    """Test suite for the stereo camera model."""

    def test_baseline_from_projection(self):
        model = StereoCameraModel(PinholeCameraModel.from_camera_info(camera_info(320.0)),
                                  PinholeCameraModel.from_camera_info(camera_info(310.0, tx=-50.0)))

        assert model.baseline == pytest.approx(0.1)
        assert model.left.cx - model.right.cx == 10.0

    def test_from_yaml(self, tmp_path):
        left_path = tmp_path / "left.yaml"
        right_path = tmp_path / "right.yaml"
        left_path.write_text(yaml.dump(camera_info(320.0)))
        right_path.write_text(yaml.dump(camera_info(320.0, tx=-25.0)))

        model = StereoCameraModel.from_yaml(str(left_path), str(right_path))

        assert model.baseline == pytest.approx(0.05)

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            StereoCameraModel.from_yaml(str(tmp_path / "a.yaml"), str(tmp_path / "b.yaml"))

    def test_from_stereo_parameters(self, sample_stereo_params):
        model = StereoCameraModel.from_stereo_parameters(sample_stereo_params)

        assert model.baseline == pytest.approx(0.54, rel=1e-3)
        assert model.right.fx > 0

    def test_from_stereo_parameters_column_translation(self, sample_stereo_params):
        sample_stereo_params.translation_vector = np.array([[-0.54], [0.0], [0.0]])
        sample_stereo_params.rotation_matrix = np.eye(3).ravel().tolist()

        model = StereoCameraModel.from_stereo_parameters(sample_stereo_params)

        assert model.baseline == pytest.approx(0.54, rel=1e-3)

    def test_unprojection_geometry(self, stereo_model):
        disparity = np.full((120, 160), 8.0, dtype=np.float32)
        disparity[0, 0] = 4.0  # minimum disparity is marked missing

        points = stereo_model.project_disparity_image_to_3d(disparity)

        assert points.shape == (120, 160, 3)
        assert points.dtype == np.float32
        assert points[0, 0, 2] == StereoCameraModel.MISSING_Z

        # Z = f * B / d, X = B * (u - cx) / d, Y = B * (v - cy) / d for fx == fy
        u, v = 100, 90
        np.testing.assert_allclose(points[v, u], [0.54 * (u - 80.0) / 8.0,
                                                  0.54 * (v - 60.0) / 8.0,
                                                  721.5 * 0.54 / 8.0], rtol=1e-5)

    def test_zero_disparity_is_infinite(self, stereo_model):
        disparity = np.full((120, 160), 8.0, dtype=np.float32)
        disparity[0, 0] = -1.0
        disparity[5, 7] = 0.0

        points = stereo_model.project_disparity_image_to_3d(disparity)

        assert np.isinf(points[5, 7, 2])

    def test_empty_disparity(self, stereo_model):
        points = stereo_model.project_disparity_image_to_3d(np.zeros((0, 5), dtype=np.float32))
        assert points.shape == (0, 5, 3)
