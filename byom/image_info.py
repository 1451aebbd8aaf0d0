"""Map image inspection."""

from pathlib import Path

import cv2

from byom.types import Pixels


def read_image_size(path: str | Path) -> tuple[Pixels, Pixels]:
    """
    Read the pixel dimensions of a map image.

    Args:
        path: Image file (any format OpenCV can decode)

    Returns:
        Tuple of (width, height) in pixels

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be decoded as an image
    """
    image_path = Path(path)
    if not image_path.is_file():
        raise FileNotFoundError(f"Image file not found: {image_path}")

    image = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ValueError(f"Could not decode image: {image_path}")

    height, width = image.shape[:2]
    return Pixels(int(width)), Pixels(int(height))
