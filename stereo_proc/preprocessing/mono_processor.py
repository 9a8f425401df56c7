"""
Monocular Image Processor

Debayers, converts and rectifies a single camera image into the mono,
colour and rectified variants requested by a flag set.
"""

import enum
import cv2
import numpy as np
import logging

from .. import image_encodings as enc
from ..calibration.camera_model import PinholeCameraModel
from ..data_models import RawImage, ImageSet


class MonoFlags(enum.IntFlag):
    """Outputs of the monocular stage for one camera."""
    MONO = 1 << 0
    RECT = 1 << 1
    COLOR = 1 << 2
    RECT_COLOR = 1 << 3

    ALL = MONO | RECT | COLOR | RECT_COLOR


# ROS Bayer pattern names are offset by one pixel from OpenCV's naming
_BAYER_TO_BGR = {
    enc.BAYER_RGGB8: cv2.COLOR_BayerBG2BGR,
    enc.BAYER_BGGR8: cv2.COLOR_BayerRG2BGR,
    enc.BAYER_GBRG8: cv2.COLOR_BayerGR2BGR,
    enc.BAYER_GRBG8: cv2.COLOR_BayerGB2BGR,
}

_BAYER_TO_GRAY = {
    enc.BAYER_RGGB8: cv2.COLOR_BayerBG2GRAY,
    enc.BAYER_BGGR8: cv2.COLOR_BayerRG2GRAY,
    enc.BAYER_GBRG8: cv2.COLOR_BayerGR2GRAY,
    enc.BAYER_GRBG8: cv2.COLOR_BayerGB2GRAY,
}


class MonoProcessor:
    """Produces mono/colour/rectified images for one camera."""

    def __init__(self, interpolation: int = cv2.INTER_LINEAR):
        """
        Initialize monocular processor.

        Args:
            interpolation: OpenCV interpolation flag used for rectification
        """
        self.interpolation = interpolation
        self.logger = logging.getLogger(__name__)

    def process(self,
                raw: RawImage,
                model: PinholeCameraModel,
                output: ImageSet,
                flags: int) -> bool:
        """
        Fill the requested outputs of ``output`` from a raw image.

        Args:
            raw: Raw camera image
            model: Calibrated camera model used for rectification
            output: Image set to fill
            flags: Combination of MonoFlags

        Returns:
            True on success, False if the raw image cannot be processed
        """
        flags = MonoFlags(flags)
        need_mono = bool(flags & (MonoFlags.MONO | MonoFlags.RECT))
        need_color = bool(flags & (MonoFlags.COLOR | MonoFlags.RECT_COLOR))

        data = raw.data
        if data.dtype != np.uint8:
            self.logger.error(f"Unsupported raw image depth {data.dtype}, expected 8-bit")
            return False

        if enc.is_mono(raw.encoding):
            mono = data
            color, color_encoding = data, enc.MONO8
        elif enc.is_color(raw.encoding):
            code = cv2.COLOR_RGB2GRAY if raw.encoding == enc.RGB8 else cv2.COLOR_BGR2GRAY
            mono = cv2.cvtColor(data, code) if need_mono else None
            color, color_encoding = data, raw.encoding
        elif enc.is_bayer(raw.encoding):
            mono = cv2.cvtColor(data, _BAYER_TO_GRAY[raw.encoding]) if need_mono else None
            if need_color:
                color = cv2.cvtColor(data, _BAYER_TO_BGR[raw.encoding])
            else:
                color = None
            color_encoding = enc.BGR8
        else:
            self.logger.error(f"Unsupported raw image encoding '{raw.encoding}'")
            return False

        if flags & MonoFlags.MONO:
            output.mono = mono
        if flags & MonoFlags.RECT:
            output.rect = model.rectify_image(mono, self.interpolation)
        if flags & MonoFlags.COLOR:
            output.color = color
            output.color_encoding = color_encoding
        if flags & MonoFlags.RECT_COLOR:
            output.rect_color = model.rectify_image(color, self.interpolation)
            output.color_encoding = color_encoding

        return True
