"""
Packed RGB colour.

Colours are packed as 0x00RRGGBB in a 32-bit integer whose bit pattern is
then reinterpreted (not converted) as a float32, the layout point cloud
consumers expect in an "rgb" field.
"""

from typing import Optional, Tuple
import numpy as np

from .. import image_encodings as enc


def pack_rgb(r, g, b) -> np.ndarray:
    """Pack channel arrays (or scalars) into uint32 0x00RRGGBB values."""
    r = np.asarray(r, dtype=np.uint32)
    g = np.asarray(g, dtype=np.uint32)
    b = np.asarray(b, dtype=np.uint32)
    return (r << 16) | (g << 8) | b


def packed_to_float(packed: np.ndarray) -> np.ndarray:
    """Reinterpret packed uint32 values as float32 without changing bits."""
    return np.asarray(packed, dtype=np.uint32).view(np.float32)


def unpack_rgb(value) -> Tuple[int, int, int]:
    """Recover (r, g, b) from a bit-cast packed float."""
    bits = int(np.asarray(value, dtype=np.float32).reshape(()).view(np.uint32))
    return (bits >> 16) & 0xFF, (bits >> 8) & 0xFF, bits & 0xFF


def pack_color_image(color: np.ndarray, encoding: str) -> Optional[np.ndarray]:
    """
    Pack every pixel of a colour image.

    Args:
        color: HxW (mono8) or HxWx3 (rgb8, bgr8) uint8 image
        encoding: Pixel encoding tag of ``color``

    Returns:
        HxW uint32 packed values, or None if the encoding is not supported
        or the channel layout does not match it
    """
    if encoding not in enc.COLOR_PACKING_ENCODINGS:
        return None

    channels = 1 if color.ndim == 2 else color.shape[2]
    if channels != (1 if encoding == enc.MONO8 else 3):
        return None

    if encoding == enc.MONO8:
        gray = color.reshape(color.shape[:2])
        return pack_rgb(gray, gray, gray)
    if encoding == enc.RGB8:
        return pack_rgb(color[..., 0], color[..., 1], color[..., 2])
    return pack_rgb(color[..., 2], color[..., 1], color[..., 0])
