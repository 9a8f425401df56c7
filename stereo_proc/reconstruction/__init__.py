"""
3D Reconstruction Module

Projects disparity images into sparse and structured coloured point clouds.
"""

from .validity import is_valid_point, valid_mask, MISSING_Z
from .color_packing import pack_rgb, pack_color_image, packed_to_float, unpack_rgb
from .grid_visitor import PixelClassification, classify_grid, visit_grid
from .sparse_cloud_builder import SparseCloudBuilder
from .structured_cloud_builder import StructuredCloudBuilder, POINT_FIELDS, POINT_STEP

__all__ = ['is_valid_point', 'valid_mask', 'MISSING_Z',
           'pack_rgb', 'pack_color_image', 'packed_to_float', 'unpack_rgb',
           'PixelClassification', 'classify_grid', 'visit_grid',
           'SparseCloudBuilder', 'StructuredCloudBuilder', 'POINT_FIELDS', 'POINT_STEP']
