"""Binary mask utilities: hole filling, opening and resizing."""

from typing import Tuple

import cv2
import numpy as np


def fill_holes(mask: np.ndarray) -> np.ndarray:
    """
    Erase white blobs that aren't connected to the image border.

    The input is assumed to be a binary 0/255 image. It is not modified.
    """
    if mask.ndim != 2:
        raise ValueError(f"Mask must be 2-D, got shape {mask.shape}")

    filled = mask.copy()

    # A white border lets one flood from (0, 0) reach every white area
    # that touches any edge pixel.
    filled[0, :] = 255
    filled[-1, :] = 255
    filled[:, 0] = 255
    filled[:, -1] = 255

    h, w = filled.shape
    flood_mask = np.zeros((h + 2, w + 2), dtype=np.uint8)
    cv2.floodFill(filled, flood_mask, (0, 0), 0)

    # Only the enclosed blobs are still white; invert so they are the
    # only black pixels, then zero them out of the original.
    enclosed = cv2.bitwise_not(filled)
    return cv2.bitwise_and(mask, enclosed)


def apply_opening(mask: np.ndarray, kernel_size: int = 7) -> np.ndarray:
    """Erode then dilate with an elliptical kernel to wipe out small specks."""
    kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (kernel_size, kernel_size))
    return cv2.morphologyEx(mask, cv2.MORPH_OPEN, kernel)


def shrink(image: np.ndarray, max_size: int) -> Tuple[np.ndarray, float]:
    """
    Resize image down so its smaller dimension is at most max_size.

    Returns:
        The resized image, and the factor to multiply by to get back to
        the original coordinates (1.0 if no resize happened)
    """
    h, w = image.shape[:2]
    size = min(h, w)
    if size <= max_size:
        return image.copy(), 1.0

    scale = max_size / size
    dsize = (max(1, int(round(w * scale))), max(1, int(round(h * scale))))
    resized = cv2.resize(image, dsize, interpolation=cv2.INTER_LINEAR)
    return resized, size / max_size
