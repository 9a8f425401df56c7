"""
Stereo Processor

Runs monocular processing on both cameras, disparity normalization and point
cloud generation for the outputs requested by a flag set.

A processor owns stateful OpenCV matcher objects; calls on one instance must
not interleave. Every call allocates its own output buffers.
"""

import enum
from typing import Optional
import cv2
import logging

from .calibration.camera_model import StereoCameraModel
from .data_models import RawImage, RectifiedImagePair, StereoImageSet
from .disparity.block_matcher import create_matching_engine
from .disparity.disparity_normalizer import DisparityNormalizer
from .errors import MonocularProcessingError
from .preprocessing.mono_processor import MonoProcessor
from .reconstruction.sparse_cloud_builder import SparseCloudBuilder
from .reconstruction.structured_cloud_builder import StructuredCloudBuilder
from .utils.config_manager import ConfigManager


class ProcessingFlags(enum.IntFlag):
    """Outputs a caller can request from StereoProcessor.process."""
    LEFT_MONO = 1 << 0
    LEFT_RECT = 1 << 1
    LEFT_COLOR = 1 << 2
    LEFT_RECT_COLOR = 1 << 3
    RIGHT_MONO = 1 << 4
    RIGHT_RECT = 1 << 5
    RIGHT_COLOR = 1 << 6
    RIGHT_RECT_COLOR = 1 << 7
    DISPARITY = 1 << 8
    POINT_CLOUD = 1 << 9
    POINT_CLOUD2 = 1 << 10

    LEFT_ALL = LEFT_MONO | LEFT_RECT | LEFT_COLOR | LEFT_RECT_COLOR
    RIGHT_ALL = RIGHT_MONO | RIGHT_RECT | RIGHT_COLOR | RIGHT_RECT_COLOR
    STEREO_ALL = DISPARITY | POINT_CLOUD | POINT_CLOUD2
    ALL = LEFT_ALL | RIGHT_ALL | STEREO_ALL


# Right camera flags sit four bits above their monocular equivalents
RIGHT_SHIFT = 4


def expand_flags(flags: int) -> ProcessingFlags:
    """
    Add the outputs the requested ones depend on.

    Point clouds need disparity and the left rectified colour image;
    disparity needs both rectified mono images.
    """
    flags = ProcessingFlags(flags)
    if flags & (ProcessingFlags.POINT_CLOUD | ProcessingFlags.POINT_CLOUD2):
        flags |= ProcessingFlags.DISPARITY | ProcessingFlags.LEFT_RECT_COLOR
    if flags & ProcessingFlags.DISPARITY:
        flags |= ProcessingFlags.LEFT_RECT | ProcessingFlags.RIGHT_RECT
    return flags


class StereoProcessor:
    """Turns a raw stereo pair into disparity and point clouds."""

    def __init__(self,
                 config_manager: Optional[ConfigManager] = None,
                 matcher=None,
                 mono_processor=None):
        """
        Initialize stereo processor.

        Args:
            config_manager: Configuration manager instance
            matcher: Stereo matching engine; built from configuration if None
            mono_processor: Monocular stage; a MonoProcessor if None
        """
        self.config = config_manager or ConfigManager()
        self.logger = logging.getLogger(__name__)

        self.matcher = matcher or create_matching_engine(self.config)
        if mono_processor is None:
            interpolation = self.config.get('mono.interpolation', 'INTER_LINEAR')
            mono_processor = MonoProcessor(getattr(cv2, interpolation))
        self.mono_processor = mono_processor

        self.normalizer = DisparityNormalizer(self.matcher)
        self.sparse_builder = SparseCloudBuilder()
        self.structured_builder = StructuredCloudBuilder()

    @property
    def interpolation(self) -> int:
        return self.mono_processor.interpolation

    @interpolation.setter
    def interpolation(self, interp: int) -> None:
        self.mono_processor.interpolation = interp

    def process(self,
                left_raw: RawImage,
                right_raw: RawImage,
                model: StereoCameraModel,
                flags: int) -> StereoImageSet:
        """
        Produce the requested outputs for one stereo pair.

        Args:
            left_raw: Raw left camera image
            right_raw: Raw right camera image
            model: Stereo camera model
            flags: Combination of ProcessingFlags

        Returns:
            StereoImageSet with the requested (and implied) outputs filled in

        Raises:
            MonocularProcessingError: If either monocular stage fails
        """
        flags = expand_flags(flags)
        left_flags = int(flags & ProcessingFlags.LEFT_ALL)
        right_flags = int(flags & ProcessingFlags.RIGHT_ALL) >> RIGHT_SHIFT

        output = StereoImageSet()
        if not self.mono_processor.process(left_raw, model.left, output.left, left_flags):
            raise MonocularProcessingError("Monocular processing failed", {'side': 'left'})
        if not self.mono_processor.process(right_raw, model.right, output.right, right_flags):
            raise MonocularProcessingError("Monocular processing failed", {'side': 'right'})

        if flags & ProcessingFlags.DISPARITY:
            pair = RectifiedImagePair(left=output.left.rect, right=output.right.rect,
                                      left_color=output.left.rect_color,
                                      color_encoding=output.left.color_encoding,
                                      stamp=left_raw.stamp)
            output.disparity = self.normalizer.normalize(pair, model)

        if flags & ProcessingFlags.POINT_CLOUD:
            output.points = self.sparse_builder.build(output.disparity,
                                                      output.left.rect_color,
                                                      output.left.color_encoding,
                                                      model)

        if flags & ProcessingFlags.POINT_CLOUD2:
            output.points2 = self.structured_builder.build(output.disparity,
                                                           output.left.rect_color,
                                                           output.left.color_encoding,
                                                           model)

        return output
