"""
Pinhole and Stereo Camera Models

Wraps rectified calibration (intrinsics, rectification and projection
matrices) and performs image rectification and disparity-to-3D unprojection.
"""

import cv2
import numpy as np
from typing import Dict, Any, Tuple
import logging
import yaml

from ..data_models import StereoParameters, DisparityImage, DensePointGrid
from ..errors import CameraModelError


logger = logging.getLogger(__name__)


class PinholeCameraModel:
    """Rectified pinhole camera described by K, D, R and the 3x4 projection P."""

    def __init__(self,
                 camera_matrix: np.ndarray,
                 distortion_coeffs: np.ndarray,
                 rectification_matrix: np.ndarray,
                 projection_matrix: np.ndarray,
                 image_size: Tuple[int, int]):
        """
        Initialize camera model.

        Args:
            camera_matrix: 3x3 intrinsic matrix of the raw camera
            distortion_coeffs: Distortion coefficients of the raw camera
            rectification_matrix: 3x3 rectifying rotation
            projection_matrix: 3x4 projection matrix of the rectified camera
            image_size: (width, height)
        """
        self.K = np.asarray(camera_matrix, dtype=np.float64).reshape(3, 3)
        self.D = np.asarray(distortion_coeffs, dtype=np.float64).ravel()
        self.R = np.asarray(rectification_matrix, dtype=np.float64).reshape(3, 3)
        self.P = np.asarray(projection_matrix, dtype=np.float64).reshape(3, 4)
        self.image_size = (int(image_size[0]), int(image_size[1]))

        if self.P[0, 0] == 0 or self.P[1, 1] == 0:
            raise CameraModelError("Projection matrix has zero focal length",
                                   {'P': self.P.tolist()})

        self._maps = None

    @classmethod
    def from_camera_info(cls, info: Dict[str, Any]) -> 'PinholeCameraModel':
        """
        Build a model from a camera-info dictionary.

        The layout matches the YAML files written by ROS camera_calibration:
        image_width, image_height and camera_matrix, distortion_coefficients,
        rectification_matrix, projection_matrix each holding a ``data`` list.
        """
        try:
            size = (info['image_width'], info['image_height'])
            K = np.array(info['camera_matrix']['data'])
            D = np.array(info.get('distortion_coefficients', {}).get('data', [0.0] * 5))
            R = np.array(info.get('rectification_matrix', {}).get('data', np.eye(3).ravel()))
            P = np.array(info['projection_matrix']['data'])
        except (KeyError, TypeError) as e:
            raise CameraModelError(f"Incomplete camera info: missing {e}")

        return cls(K, D, R, P, size)

    @classmethod
    def from_yaml(cls, path: str) -> 'PinholeCameraModel':
        """Load a camera-info YAML file."""
        try:
            with open(path, 'r') as file:
                info = yaml.safe_load(file)
        except FileNotFoundError:
            raise FileNotFoundError(f"Camera info file not found: {path}")
        except yaml.YAMLError as e:
            raise CameraModelError(f"Error parsing camera info file: {e}", {'path': path})

        return cls.from_camera_info(info)

    @property
    def fx(self) -> float:
        return float(self.P[0, 0])

    @property
    def fy(self) -> float:
        return float(self.P[1, 1])

    @property
    def cx(self) -> float:
        return float(self.P[0, 2])

    @property
    def cy(self) -> float:
        return float(self.P[1, 2])

    @property
    def Tx(self) -> float:
        """Projection of the baseline, -fx * B for the right camera of a pair."""
        return float(self.P[0, 3])

    def rectification_maps(self) -> Tuple[np.ndarray, np.ndarray]:
        """Undistort-rectify maps, computed once and cached."""
        if self._maps is None:
            self._maps = cv2.initUndistortRectifyMap(
                self.K, self.D, self.R, self.P, self.image_size, cv2.CV_32FC1
            )
            logger.debug(f"Rectification maps computed for image size {self.image_size}")
        return self._maps

    def rectify_image(self, raw: np.ndarray, interpolation: int = cv2.INTER_LINEAR) -> np.ndarray:
        """
        Rectify an image of this camera.

        Args:
            raw: Unrectified image (single or multi channel)
            interpolation: OpenCV interpolation flag

        Returns:
            Rectified image with the same dtype and channel count
        """
        map_x, map_y = self.rectification_maps()
        return cv2.remap(raw, map_x, map_y, interpolation)


class StereoCameraModel:
    """Pair of rectified pinhole models sharing the left camera frame."""

    # Depth assigned to pixels at the minimum disparity by reprojectImageTo3D
    MISSING_Z = 10000.0

    def __init__(self, left: PinholeCameraModel, right: PinholeCameraModel):
        self.left = left
        self.right = right
        self.Q = self._reprojection_matrix()

    @classmethod
    def from_stereo_parameters(cls,
                               stereo_params: StereoParameters,
                               alpha: float = 0.0) -> 'StereoCameraModel':
        """
        Build a rectified model from raw stereo calibration.

        Args:
            stereo_params: Intrinsics and extrinsics of the raw camera pair
            alpha: Free scaling parameter passed to cv2.stereoRectify
        """
        image_size = stereo_params.left_camera.image_size

        R1, R2, P1, P2, Q, roi1, roi2 = cv2.stereoRectify(
            stereo_params.left_camera.camera_matrix,
            stereo_params.left_camera.distortion_coeffs,
            stereo_params.right_camera.camera_matrix,
            stereo_params.right_camera.distortion_coeffs,
            image_size,
            np.asarray(stereo_params.rotation_matrix, dtype=np.float64).reshape(3, 3),
            np.asarray(stereo_params.translation_vector, dtype=np.float64).reshape(3, 1),
            alpha=alpha
        )

        left = PinholeCameraModel(stereo_params.left_camera.camera_matrix,
                                  stereo_params.left_camera.distortion_coeffs,
                                  R1, P1, image_size)
        right = PinholeCameraModel(stereo_params.right_camera.camera_matrix,
                                   stereo_params.right_camera.distortion_coeffs,
                                   R2, P2, stereo_params.right_camera.image_size)
        return cls(left, right)

    @classmethod
    def from_intrinsics(cls,
                        fx: float,
                        fy: float,
                        cx_left: float,
                        cx_right: float,
                        cy: float,
                        baseline: float,
                        image_size: Tuple[int, int]) -> 'StereoCameraModel':
        """Build an already-rectified, distortion-free pair."""
        D = np.zeros(5)
        R = np.eye(3)

        K_left = np.array([[fx, 0, cx_left], [0, fy, cy], [0, 0, 1]], dtype=np.float64)
        K_right = np.array([[fx, 0, cx_right], [0, fy, cy], [0, 0, 1]], dtype=np.float64)
        P_left = np.hstack([K_left, np.zeros((3, 1))])
        P_right = np.hstack([K_right, [[-fx * baseline], [0.0], [0.0]]])

        return cls(PinholeCameraModel(K_left, D, R, P_left, image_size),
                   PinholeCameraModel(K_right, D, R, P_right, image_size))

    @classmethod
    def from_yaml(cls, left_path: str, right_path: str) -> 'StereoCameraModel':
        return cls(PinholeCameraModel.from_yaml(left_path),
                   PinholeCameraModel.from_yaml(right_path))

    @property
    def baseline(self) -> float:
        return -self.right.Tx / self.right.fx

    def _reprojection_matrix(self) -> np.ndarray:
        """
        4x4 Q matrix mapping (u, v, d, 1) to homogeneous left-frame points.

        Disparities are already corrected for the principal point offset
        by the normalizer, so Q[3, 3] stays zero.
        """
        Tx = -self.baseline
        fx, fy = self.left.fx, self.left.fy
        cx, cy = self.left.cx, self.left.cy

        Q = np.zeros((4, 4), dtype=np.float64)
        Q[0, 0] = fy * Tx
        Q[0, 3] = -fy * cx * Tx
        Q[1, 1] = fx * Tx
        Q[1, 3] = -fx * cy * Tx
        Q[2, 3] = fx * fy * Tx
        Q[3, 2] = -fy
        return Q

    def project_disparity_image_to_3d(self,
                                      disparity: np.ndarray,
                                      handle_missing_values: bool = True) -> DensePointGrid:
        """
        Unproject every disparity pixel into the left camera frame.

        Args:
            disparity: HxW float32 disparity image
            handle_missing_values: Map pixels at the minimum disparity to MISSING_Z

        Returns:
            HxWx3 float32 grid of points; zero disparity yields infinite depth
        """
        disparity = np.asarray(disparity, dtype=np.float32)
        if disparity.size == 0:
            return np.empty(disparity.shape + (3,), dtype=np.float32)

        return cv2.reprojectImageTo3D(disparity, self.Q,
                                      handleMissingValues=handle_missing_values)

    def unproject(self, disparity: DisparityImage) -> DensePointGrid:
        """Unproject a DisparityImage with missing-value handling enabled."""
        return self.project_disparity_image_to_3d(disparity.image, handle_missing_values=True)
