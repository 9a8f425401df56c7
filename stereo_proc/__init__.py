"""
Stereo Disparity and Point Cloud Pipeline

Converts rectified stereo pairs into calibrated disparity images and
coloured point clouds.

This package implements:
- Fixed-point to float disparity conversion with principal point correction
- Sparse point clouds of valid points with rgb/u/v channels
- Structured per-pixel point clouds with a 16-byte x/y/z/rgb record layout
- A processor that expands requested outputs into the stages they need
"""

__version__ = "1.0.0"
__author__ = "Advanced Stereo Vision Team"

from .calibration import PinholeCameraModel, StereoCameraModel
from .disparity import BlockMatchingEngine, SGBMEngine, DisparityNormalizer
from .reconstruction import SparseCloudBuilder, StructuredCloudBuilder
from .preprocessing import MonoProcessor, MonoFlags
from .processor import StereoProcessor, ProcessingFlags
from .errors import StereoProcError, MonocularProcessingError
from .data_models import (
    RawImage, ImageSet, RectifiedImagePair, DisparityImage,
    SparsePointCloud, StructuredPointCloud, StereoImageSet
)

__all__ = [
    # Calibration
    'PinholeCameraModel', 'StereoCameraModel',
    # Disparity
    'BlockMatchingEngine', 'SGBMEngine', 'DisparityNormalizer',
    # Reconstruction
    'SparseCloudBuilder', 'StructuredCloudBuilder',
    # Processing
    'MonoProcessor', 'MonoFlags', 'StereoProcessor', 'ProcessingFlags',
    # Errors
    'StereoProcError', 'MonocularProcessingError',
    # Data Models
    'RawImage', 'ImageSet', 'RectifiedImagePair', 'DisparityImage',
    'SparsePointCloud', 'StructuredPointCloud', 'StereoImageSet'
]
