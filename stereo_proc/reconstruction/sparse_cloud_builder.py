"""
Sparse Point Cloud Builder

Emits only the valid points of the unprojected disparity image, in raster
scan order, together with their packed colour and source pixel.
"""

from typing import Optional
import logging
import numpy as np

from ..data_models import DisparityImage, PointChannel, SparsePointCloud
from .color_packing import packed_to_float
from .grid_visitor import PixelClassification, visit_grid


class SparseCloudBuilder:
    """Builds SparsePointCloud outputs with "rgb", "u" (row) and "v" (column) channels."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def build(self,
              disparity: DisparityImage,
              color: Optional[np.ndarray],
              encoding: Optional[str],
              model) -> SparsePointCloud:
        """
        Project a disparity image into a sparse point cloud.

        Args:
            disparity: Calibrated disparity image
            color: Rectified left colour image
            encoding: Encoding tag of ``color``
            model: Stereo camera model used for unprojection

        Returns:
            Point cloud of valid points; the rgb channel is empty when the
            colour encoding is not recognized
        """
        points = model.unproject(disparity)
        cloud = visit_grid(points, color, encoding, self._emit)

        self.logger.debug(f"Sparse cloud: {len(cloud)} of {disparity.width * disparity.height} pixels valid")
        return cloud

    @staticmethod
    def _emit(classification: PixelClassification) -> SparsePointCloud:
        valid = classification.valid

        # np.nonzero walks the mask in row-major order
        rows, cols = np.nonzero(valid)
        points = np.ascontiguousarray(classification.points[valid], dtype=np.float32).reshape(-1, 3)

        if classification.packed_rgb is not None:
            rgb = packed_to_float(classification.packed_rgb[valid])
        else:
            rgb = np.empty(0, dtype=np.float32)

        return SparsePointCloud(
            points=points,
            channels=[
                PointChannel("rgb", rgb),
                PointChannel("u", rows.astype(np.float32)),
                PointChannel("v", cols.astype(np.float32)),
            ],
            diagnostics=list(classification.diagnostics)
        )
