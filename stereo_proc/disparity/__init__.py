"""
Disparity Module

Stereo matching engines and conversion of their fixed-point output into
calibrated float disparity images.
"""

from .block_matcher import (
    StereoMatchingEngine, BlockMatchingEngine, SGBMEngine, create_matching_engine
)
from .disparity_normalizer import DisparityNormalizer

__all__ = ['StereoMatchingEngine', 'BlockMatchingEngine', 'SGBMEngine',
           'create_matching_engine', 'DisparityNormalizer']
