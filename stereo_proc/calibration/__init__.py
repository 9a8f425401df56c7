"""
Camera Calibration Module

Rectified pinhole and stereo camera models used for rectification and
disparity unprojection.
"""

from .camera_model import PinholeCameraModel, StereoCameraModel

__all__ = ['PinholeCameraModel', 'StereoCameraModel']
