"""
Data Models for the Stereo Processing Pipeline

Defines the images, disparity maps and point clouds passed between stages.
"""

from dataclasses import dataclass, field
from typing import Tuple, List, Optional
import numpy as np

from . import image_encodings as enc
from .errors import Diagnostic


# HxWx3 float32 grid of unprojected points, one per disparity pixel
DensePointGrid = np.ndarray


@dataclass
class CameraParameters:
    """Camera intrinsic parameters and calibration quality metrics."""
    camera_matrix: np.ndarray  # 3x3 intrinsic matrix
    distortion_coeffs: np.ndarray  # 5x1 distortion coefficients
    reprojection_error: float  # RMS reprojection error
    image_size: Tuple[int, int]  # (width, height)


@dataclass
class StereoParameters:
    """Stereo camera system parameters."""
    left_camera: CameraParameters
    right_camera: CameraParameters
    rotation_matrix: np.ndarray  # 3x3 rotation between cameras
    translation_vector: np.ndarray  # 3x1 translation vector
    baseline: float  # Distance between camera centers


@dataclass
class RawImage:
    """Unprocessed camera image as delivered by the driver."""
    data: np.ndarray
    encoding: str
    stamp: float = 0.0

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def width(self) -> int:
        return self.data.shape[1]


@dataclass
class ImageSet:
    """Outputs of the monocular stage for one camera."""
    mono: Optional[np.ndarray] = None
    rect: Optional[np.ndarray] = None
    color: Optional[np.ndarray] = None
    rect_color: Optional[np.ndarray] = None
    color_encoding: Optional[str] = None


@dataclass(frozen=True)
class RectifiedImagePair:
    """Rectified single-channel left/right images plus optional left colour."""
    left: np.ndarray
    right: np.ndarray
    left_color: Optional[np.ndarray] = None
    color_encoding: Optional[str] = None
    stamp: float = 0.0

    def __post_init__(self):
        if self.left.shape != self.right.shape:
            raise ValueError(
                f"Left and right images must have same dimensions, "
                f"got {self.left.shape} and {self.right.shape}"
            )
        if self.left.ndim != 2:
            raise ValueError("Rectified images must be single-channel")


@dataclass
class DisparityImage:
    """Floating point disparity image with stereo metadata."""
    image: np.ndarray  # HxW float32, disparity in pixels
    f: float  # focal length in pixels
    T: float  # baseline in world units
    min_disparity: float
    max_disparity: float
    delta_d: float  # quantization step of the source fixed-point encoding
    encoding: str = enc.TYPE_32FC1

    @property
    def height(self) -> int:
        return self.image.shape[0]

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def step(self) -> int:
        """Row stride in bytes."""
        return self.width * np.dtype(np.float32).itemsize

    @property
    def data(self) -> bytes:
        return np.ascontiguousarray(self.image, dtype=np.float32).tobytes()


@dataclass
class PointChannel:
    """Named per-point attribute of a sparse point cloud."""
    name: str
    values: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.float32))


@dataclass
class SparsePointCloud:
    """Valid points only, in raster order, with parallel attribute channels."""
    points: np.ndarray  # Nx3 float32
    channels: List[PointChannel]
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def channel(self, name: str) -> np.ndarray:
        for ch in self.channels:
            if ch.name == name:
                return ch.values
        raise KeyError(f"No channel named '{name}'")

    @property
    def has_color(self) -> bool:
        return len(self.channel("rgb")) == len(self.points)


@dataclass(frozen=True)
class PointField:
    """Describes one field of a structured point record."""
    name: str
    offset: int
    datatype: int
    count: int = 1

    # Datatype codes as used by sensor_msgs/PointField
    INT8 = 1
    UINT8 = 2
    INT16 = 3
    UINT16 = 4
    INT32 = 5
    UINT32 = 6
    FLOAT32 = 7
    FLOAT64 = 8


@dataclass
class StructuredPointCloud:
    """Fixed-size record per source pixel, invalid pixels marked with NaN."""
    height: int
    width: int
    fields: List[PointField]
    point_step: int
    row_step: int
    data: bytes
    is_dense: bool = False
    is_bigendian: bool = False
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def record_dtype(self) -> np.dtype:
        order = '>' if self.is_bigendian else '<'
        return np.dtype({
            'names': [f.name for f in self.fields],
            'formats': [order + 'f4'] * len(self.fields),
            'offsets': [f.offset for f in self.fields],
            'itemsize': self.point_step,
        })

    def as_records(self) -> np.ndarray:
        """View the buffer as an HxW structured array."""
        records = np.frombuffer(self.data, dtype=self.record_dtype)
        return records.reshape(self.height, self.width)


@dataclass
class StereoImageSet:
    """Everything one processing call can produce."""
    left: ImageSet = field(default_factory=ImageSet)
    right: ImageSet = field(default_factory=ImageSet)
    disparity: Optional[DisparityImage] = None
    points: Optional[SparsePointCloud] = None
    points2: Optional[StructuredPointCloud] = None
