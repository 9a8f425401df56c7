"""
Pixel encoding tags.

Tag strings follow the sensor_msgs naming used by robotics camera drivers.
"""

MONO8 = "mono8"
RGB8 = "rgb8"
BGR8 = "bgr8"

BAYER_RGGB8 = "bayer_rggb8"
BAYER_BGGR8 = "bayer_bggr8"
BAYER_GBRG8 = "bayer_gbrg8"
BAYER_GRBG8 = "bayer_grbg8"

TYPE_32FC1 = "32FC1"

# Encodings a colour channel can be packed from
COLOR_PACKING_ENCODINGS = (MONO8, RGB8, BGR8)

BAYER_ENCODINGS = (BAYER_RGGB8, BAYER_BGGR8, BAYER_GBRG8, BAYER_GRBG8)


def is_color(encoding: str) -> bool:
    return encoding in (RGB8, BGR8)


def is_bayer(encoding: str) -> bool:
    return encoding in BAYER_ENCODINGS


def is_mono(encoding: str) -> bool:
    return encoding == MONO8
