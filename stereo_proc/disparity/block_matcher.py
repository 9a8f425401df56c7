"""
Stereo Matching Engines

OpenCV block matching variants producing 16-bit signed fixed-point disparity.
Each engine advertises its fixed-point scale (disparity_scale, the number of
raw units per disparity pixel).
"""

from abc import ABC, abstractmethod
import cv2
import numpy as np
from typing import Optional, Tuple
import logging

from ..utils.config_manager import ConfigManager


class StereoMatchingEngine(ABC):
    """Parameters and compute step shared by the OpenCV matchers."""

    # Raw units per disparity pixel
    disparity_scale = 16

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """
        Initialize matching engine.

        Args:
            config_manager: Configuration manager instance
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)
        self.params = dict(self.config.get_matcher_params())
        self.matcher = self._create_matcher()

        self.logger.info(f"{type(self).__name__} initialized: range={self.disparity_range}, "
                         f"window={self.correlation_window_size}")

    @abstractmethod
    def _create_matcher(self):
        """Build the underlying OpenCV matcher from ``self.params``."""

    def compute(self, left_image: np.ndarray, right_image: np.ndarray) -> np.ndarray:
        """
        Compute a raw disparity buffer.

        Args:
            left_image: Left rectified image
            right_image: Right rectified image

        Returns:
            Disparity map (16-bit fixed point, divide by disparity_scale for pixels)
        """
        if left_image.shape != right_image.shape:
            raise ValueError("Left and right images must have same dimensions")

        if left_image.dtype != np.uint8 or right_image.dtype != np.uint8:
            raise ValueError("Stereo matching requires 8-bit images")

        # Convert to grayscale if needed
        if len(left_image.shape) == 3:
            left_gray = cv2.cvtColor(left_image, cv2.COLOR_BGR2GRAY)
            right_gray = cv2.cvtColor(right_image, cv2.COLOR_BGR2GRAY)
        else:
            left_gray = left_image
            right_gray = right_image

        disparity = self.matcher.compute(left_gray, right_gray)

        self.logger.debug(f"Computed disparity map: "
                          f"{np.count_nonzero(disparity > self.min_disparity * self.disparity_scale)} "
                          f"pixels above minimum disparity")

        return disparity

    def get_disparity_range(self) -> Tuple[int, int]:
        """
        Get the current disparity search window.

        Returns:
            Tuple of (min_disparity, min_disparity + disparity_range)
        """
        return self.min_disparity, self.min_disparity + self.disparity_range

    @property
    def correlation_window_size(self) -> int:
        return self.matcher.getBlockSize()

    @correlation_window_size.setter
    def correlation_window_size(self, size: int) -> None:
        if size % 2 == 0 or size < 5:
            raise ValueError(f"Correlation window size must be odd and >= 5, got {size}")
        self.matcher.setBlockSize(int(size))

    @property
    def min_disparity(self) -> int:
        return self.matcher.getMinDisparity()

    @min_disparity.setter
    def min_disparity(self, min_d: int) -> None:
        self.matcher.setMinDisparity(int(min_d))

    @property
    def disparity_range(self) -> int:
        """Number of disparities searched."""
        return self.matcher.getNumDisparities()

    @disparity_range.setter
    def disparity_range(self, value: int) -> None:
        if value <= 0 or value % 16 != 0:
            raise ValueError(f"Disparity range must be a positive multiple of 16, got {value}")
        self.matcher.setNumDisparities(int(value))

    @property
    def prefilter_cap(self) -> int:
        return self.matcher.getPreFilterCap()

    @prefilter_cap.setter
    def prefilter_cap(self, cap: int) -> None:
        if not 1 <= cap <= 63:
            raise ValueError(f"Pre-filter cap must be between 1 and 63, got {cap}")
        self.matcher.setPreFilterCap(int(cap))

    @property
    def uniqueness_ratio(self) -> float:
        return float(self.matcher.getUniquenessRatio())

    @uniqueness_ratio.setter
    def uniqueness_ratio(self, ratio: float) -> None:
        self.matcher.setUniquenessRatio(int(max(0, ratio)))

    @property
    def speckle_size(self) -> int:
        return self.matcher.getSpeckleWindowSize()

    @speckle_size.setter
    def speckle_size(self, size: int) -> None:
        self.matcher.setSpeckleWindowSize(int(max(0, size)))

    @property
    def speckle_range(self) -> int:
        return self.matcher.getSpeckleRange()

    @speckle_range.setter
    def speckle_range(self, value: int) -> None:
        self.matcher.setSpeckleRange(int(max(0, value)))


class BlockMatchingEngine(StereoMatchingEngine):
    """CPU block matcher (cv2.StereoBM)."""

    def _create_matcher(self):
        matcher = cv2.StereoBM_create(
            numDisparities=self.params.get('disparity_range', 64),
            blockSize=self.params.get('correlation_window_size', 15)
        )
        matcher.setPreFilterType(cv2.StereoBM_PREFILTER_XSOBEL)
        matcher.setPreFilterSize(self.params.get('prefilter_size', 9))
        matcher.setPreFilterCap(self.params.get('prefilter_cap', 31))
        matcher.setMinDisparity(self.params.get('min_disparity', 0))
        matcher.setTextureThreshold(self.params.get('texture_threshold', 10))
        matcher.setUniquenessRatio(int(self.params.get('uniqueness_ratio', 15)))
        matcher.setSpeckleWindowSize(self.params.get('speckle_size', 100))
        matcher.setSpeckleRange(self.params.get('speckle_range', 4))
        return matcher

    @property
    def prefilter_size(self) -> int:
        return self.matcher.getPreFilterSize()

    @prefilter_size.setter
    def prefilter_size(self, size: int) -> None:
        if size % 2 == 0 or not 5 <= size <= 255:
            raise ValueError(f"Pre-filter size must be odd and between 5 and 255, got {size}")
        self.matcher.setPreFilterSize(int(size))

    @property
    def texture_threshold(self) -> int:
        return self.matcher.getTextureThreshold()

    @texture_threshold.setter
    def texture_threshold(self, threshold: int) -> None:
        self.matcher.setTextureThreshold(int(max(0, threshold)))


class SGBMEngine(StereoMatchingEngine):
    """Semi-global block matcher (cv2.StereoSGBM)."""

    def _create_matcher(self):
        mode_str = self.params.get('mode', 'StereoSGBM_MODE_SGBM')
        return cv2.StereoSGBM_create(
            minDisparity=self.params.get('min_disparity', 0),
            numDisparities=self.params.get('disparity_range', 64),
            blockSize=self.params.get('correlation_window_size', 15),
            P1=self.params.get('P1', 600),
            P2=self.params.get('P2', 2400),
            disp12MaxDiff=self.params.get('disp12_max_diff', 1),
            preFilterCap=self.params.get('prefilter_cap', 31),
            uniquenessRatio=int(self.params.get('uniqueness_ratio', 15)),
            speckleWindowSize=self.params.get('speckle_size', 100),
            speckleRange=self.params.get('speckle_range', 4),
            mode=getattr(cv2, mode_str)
        )


def create_matching_engine(config_manager: Optional[ConfigManager] = None) -> StereoMatchingEngine:
    """Build the matching engine variant selected by ``matcher.type``."""
    config = config_manager or ConfigManager()
    engine_type = config.get('matcher.type', 'block_matching')

    if engine_type == 'sgbm':
        return SGBMEngine(config)
    return BlockMatchingEngine(config)
