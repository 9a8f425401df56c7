"""
Structured Point Cloud Builder

Emits one 16-byte record per source pixel (x, y, z, rgb as float32) in
raster order. Invalid pixels are kept and marked with NaN.
"""

from typing import Optional
import logging
import numpy as np

from ..data_models import DisparityImage, PointField, StructuredPointCloud
from .grid_visitor import PixelClassification, visit_grid


POINT_FIELDS = [
    PointField("x", 0, PointField.FLOAT32),
    PointField("y", 4, PointField.FLOAT32),
    PointField("z", 8, PointField.FLOAT32),
    PointField("rgb", 12, PointField.FLOAT32),
]

POINT_STEP = 16

# Bit pattern of the quiet NaN written into invalid records
NAN_BITS = np.array([np.nan], dtype='<f4').view('<u4')[0]


class StructuredCloudBuilder:
    """Builds StructuredPointCloud outputs with the x/y/z/rgb record layout."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def build(self,
              disparity: DisparityImage,
              color: Optional[np.ndarray],
              encoding: Optional[str],
              model) -> StructuredPointCloud:
        """
        Project a disparity image into a structured point cloud.

        Args:
            disparity: Calibrated disparity image
            color: Rectified left colour image
            encoding: Encoding tag of ``color``
            model: Stereo camera model used for unprojection

        Returns:
            Point cloud with height * width records; rgb is NaN everywhere
            when the colour encoding is not recognized
        """
        points = model.unproject(disparity)
        cloud = visit_grid(points, color, encoding, self._emit)

        self.logger.debug(f"Structured cloud: {cloud.width}x{cloud.height} records, "
                          f"{len(cloud.data)} bytes")
        return cloud

    @staticmethod
    def _emit(classification: PixelClassification) -> StructuredPointCloud:
        height, width = classification.valid.shape
        n = height * width
        valid = classification.valid.reshape(n)

        records = np.empty((n, 4), dtype='<f4')
        records[:, :3] = np.ascontiguousarray(classification.points).reshape(n, 3)
        records[~valid, :3] = np.nan

        # rgb holds packed integers, written through an integer view to keep the bits
        bits = records.view('<u4')
        if classification.packed_rgb is not None:
            bits[:, 3] = np.where(valid, classification.packed_rgb.reshape(n), NAN_BITS)
        else:
            bits[:, 3] = NAN_BITS

        return StructuredPointCloud(
            height=height,
            width=width,
            fields=list(POINT_FIELDS),
            point_step=POINT_STEP,
            row_step=POINT_STEP * width,
            data=records.tobytes(),
            is_dense=False,
            is_bigendian=False,
            diagnostics=list(classification.diagnostics)
        )
