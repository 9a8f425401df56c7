"""
Main entry point for the stereo processing pipeline

Processes one raw stereo pair and writes disparity and point clouds to disk.
"""

import argparse
import logging
import sys
from pathlib import Path

import cv2
import numpy as np

from stereo_proc import image_encodings as enc
from stereo_proc.calibration.camera_model import StereoCameraModel
from stereo_proc.data_models import RawImage
from stereo_proc.errors import StereoProcError
from stereo_proc.processor import StereoProcessor, ProcessingFlags
from stereo_proc.utils.config_manager import ConfigManager


OUTPUTS = {
    'disparity': ProcessingFlags.DISPARITY,
    'points': ProcessingFlags.POINT_CLOUD,
    'points2': ProcessingFlags.POINT_CLOUD2,
}


def load_raw_image(path: str) -> RawImage:
    """Read an image file as mono8 or bgr8."""
    image = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise FileNotFoundError(f"Could not read image: {path}")
    if image.ndim == 3 and image.shape[2] == 4:
        image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    encoding = enc.MONO8 if image.ndim == 2 else enc.BGR8
    return RawImage(data=image, encoding=encoding)


def save_outputs(output, output_dir: Path) -> None:
    """Write whatever the processor produced into ``output_dir``."""
    if output.disparity is not None:
        np.save(output_dir / "disparity.npy", output.disparity.image)

    if output.points is not None:
        cloud = output.points
        np.savez(output_dir / "points.npz", points=cloud.points,
                 **{ch.name: ch.values for ch in cloud.channels})

    if output.points2 is not None:
        with open(output_dir / "points2.bin", 'wb') as file:
            file.write(output.points2.data)


def main(argv=None):
    """Main entry point for the stereo processing pipeline."""
    parser = argparse.ArgumentParser(
        description="Compute disparity and point clouds from a stereo image pair"
    )

    parser.add_argument("--config", type=str, help="Path to configuration file")
    parser.add_argument("--left", type=str, required=True, help="Left raw image")
    parser.add_argument("--right", type=str, required=True, help="Right raw image")
    parser.add_argument("--left-info", type=str, required=True,
                        help="Left camera-info YAML file")
    parser.add_argument("--right-info", type=str, required=True,
                        help="Right camera-info YAML file")
    parser.add_argument("--output-dir", type=str, default="output",
                        help="Output directory for results")
    parser.add_argument("--outputs", nargs='+', choices=sorted(OUTPUTS),
                        default=sorted(OUTPUTS), help="Outputs to produce")
    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    logger = logging.getLogger("stereo_proc")

    try:
        config = ConfigManager(args.config)
        model = StereoCameraModel.from_yaml(args.left_info, args.right_info)
        left = load_raw_image(args.left)
        right = load_raw_image(args.right)
    except (FileNotFoundError, ValueError, StereoProcError) as e:
        logger.error(f"Error loading inputs: {e}")
        return 1

    flags = 0
    for name in args.outputs:
        flags |= OUTPUTS[name]

    processor = StereoProcessor(config)
    try:
        output = processor.process(left, right, model, flags)
    except StereoProcError as e:
        logger.error(f"Processing failed: {e}")
        return 1

    output_path = Path(args.output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    save_outputs(output, output_path)

    logger.info(f"Wrote {', '.join(args.outputs)} to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
