"""
Dense Grid Traversal

Classifies every pixel of a dense point grid and packs its colour once, then
hands the result to an emit function. Both point cloud layouts are produced
through this single routine so they agree on which pixels are valid.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, TypeVar
import logging
import numpy as np

from ..data_models import DensePointGrid
from ..errors import Diagnostic, UNRECOGNIZED_COLOR_ENCODING
from .color_packing import pack_color_image
from .validity import valid_mask


logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class PixelClassification:
    """Per-pixel validity and packed colour of a dense grid."""
    points: DensePointGrid  # HxWx3 float32
    valid: np.ndarray  # HxW bool
    packed_rgb: Optional[np.ndarray]  # HxW uint32, None when colour is unavailable
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def valid_count(self) -> int:
        return int(np.count_nonzero(self.valid))


def classify_grid(points: DensePointGrid,
                  color: Optional[np.ndarray],
                  encoding: Optional[str]) -> PixelClassification:
    """
    Classify validity and pack colour for every pixel.

    Args:
        points: HxWx3 grid of unprojected points
        color: Colour image colocated with the grid
        encoding: Pixel encoding tag of ``color``

    Returns:
        PixelClassification; an unsupported encoding leaves packed_rgb None
        and records a diagnostic
    """
    valid = valid_mask(points)
    diagnostics = []

    packed = None
    if color is not None:
        if color.shape[:2] != points.shape[:2]:
            raise ValueError(f"Color image shape {color.shape[:2]} must match "
                             f"disparity shape {points.shape[:2]}")
        packed = pack_color_image(color, encoding)

    if packed is None:
        message = (f"Could not fill color channel of the point cloud, "
                   f"unrecognized encoding '{encoding}'")
        logger.warning(message)
        diagnostics.append(Diagnostic(UNRECOGNIZED_COLOR_ENCODING, message))

    return PixelClassification(points=points, valid=valid,
                               packed_rgb=packed, diagnostics=diagnostics)


def visit_grid(points: DensePointGrid,
               color: Optional[np.ndarray],
               encoding: Optional[str],
               emit: Callable[[PixelClassification], T]) -> T:
    """Classify the grid in raster order and return what ``emit`` builds from it."""
    classification = classify_grid(points, color, encoding)
    logger.debug(f"Classified {points.shape[0]}x{points.shape[1]} grid: "
                 f"{classification.valid_count} valid points")
    return emit(classification)
