"""Depth validity of unprojected points."""

import math
import numpy as np

from ..calibration.camera_model import StereoCameraModel


MISSING_Z = StereoCameraModel.MISSING_Z


def is_valid_point(point) -> bool:
    """
    Whether an unprojected point has usable depth.

    Only z is inspected: it must be neither the missing-value marker
    nor infinite (zero disparity).
    """
    z = float(point[2])
    return z != MISSING_Z and not math.isinf(z)


def valid_mask(points: np.ndarray) -> np.ndarray:
    """Vectorized is_valid_point over an HxWx3 grid, returns an HxW bool mask."""
    z = points[..., 2]
    return (z != MISSING_Z) & ~np.isinf(z)
