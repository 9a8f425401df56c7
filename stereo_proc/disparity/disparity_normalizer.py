"""
Disparity Normalizer

Converts the fixed-point output of a stereo matching engine into a float
disparity image corrected for the principal point offset between the two
rectified cameras.
"""

import numpy as np
import logging

from ..data_models import DisparityImage, RectifiedImagePair


# Reported search window, matching the default 64-disparity block matcher.
# Not derived from the configured disparity range.
MIN_DISPARITY = 0
MAX_DISPARITY = 63


class DisparityNormalizer:
    """Runs the matching engine and produces a calibrated DisparityImage."""

    def __init__(self, matcher):
        """
        Initialize disparity normalizer.

        Args:
            matcher: Engine with ``compute(left, right)`` returning int16
                fixed-point disparity and a ``disparity_scale`` attribute
        """
        self.matcher = matcher
        self.logger = logging.getLogger(__name__)

    @property
    def delta_d(self) -> float:
        """Disparity pixels per raw unit."""
        return 1.0 / self.matcher.disparity_scale

    def normalize(self, pair: RectifiedImagePair, model) -> DisparityImage:
        """
        Compute the disparity image for a rectified pair.

        Args:
            pair: Rectified left/right images
            model: Stereo camera model providing cx, fx and baseline

        Returns:
            Floating point disparity image with stereo metadata
        """
        raw = self.matcher.compute(pair.left, pair.right)
        return self.convert(raw, model)

    def convert(self, raw: np.ndarray, model) -> DisparityImage:
        """
        Convert a raw fixed-point buffer: d = raw * delta_d - (cx_l - cx_r).

        Args:
            raw: HxW int16 fixed-point disparity
            model: Stereo camera model

        Returns:
            Floating point disparity image
        """
        delta_d = self.delta_d
        offset = model.left.cx - model.right.cx

        image = (raw.astype(np.float64) * delta_d - offset).astype(np.float32)

        self.logger.debug(f"Normalized {raw.shape[1]}x{raw.shape[0]} disparity: "
                          f"delta_d={delta_d}, principal point offset={offset}")

        return DisparityImage(
            image=image,
            f=model.right.fx,
            T=model.baseline,
            min_disparity=MIN_DISPARITY,
            max_disparity=MAX_DISPARITY,
            delta_d=delta_d
        )
