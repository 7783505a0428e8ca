"""Edge map generation for pupil boundary detection."""

import cv2
import numpy as np

from irisloc.preprocessing.masking import apply_opening, fill_holes


def sobel_edge(image: np.ndarray, ksize: int = 3) -> np.ndarray:
    """
    Detect edges using Sobel gradients.

    Args:
        image: Input uint8 image
        ksize: Sobel kernel size

    Returns:
        Edge strength image normalized to 0-255
    """
    # Absolute values make dark-to-bright and bright-to-dark edges
    # equally important.
    dx = cv2.convertScaleAbs(cv2.Sobel(image, cv2.CV_16S, 1, 0, ksize=ksize))
    dy = cv2.convertScaleAbs(cv2.Sobel(image, cv2.CV_16S, 0, 1, ksize=ksize))

    # Averaging approximates the gradient magnitude without a square root.
    magnitude = cv2.addWeighted(dx, 0.5, dy, 0.5, 0)

    return cv2.normalize(magnitude, None, 0, 255, cv2.NORM_MINMAX)


class EdgeMapGenerator:
    """
    Builds two edge maps with different noise and fuses them.

    The threshold map has false edges around non-pupil dark patches, the
    gradient map around reflections, eyelids and eyelashes. Mostly only
    the pupil edge is common to both.
    """

    def __init__(self, dark_threshold: int = 25, open_kernel: int = 7,
                 sobel_kernel: int = 3):
        """
        Initialize edge map generator.

        Args:
            dark_threshold: Intensity at or below which a pixel is a pupil
                candidate, tuned for min-max normalized input
            open_kernel: Elliptical kernel size for morphological opening
            sobel_kernel: Sobel kernel size
        """
        self.dark_threshold = dark_threshold
        self.open_kernel = open_kernel
        self.sobel_kernel = sobel_kernel

    def generate(self, image: np.ndarray) -> np.ndarray:
        """Compute both edge maps and AND them together."""
        return self.fuse(self.threshold_edge_map(image), self.gradient_edge_map(image))

    def threshold_edge_map(self, image: np.ndarray) -> np.ndarray:
        """Edge map from thresholding, hole filling and opening."""
        # The darkest pixels go black, the rest white.
        _, binary = cv2.threshold(image, self.dark_threshold, 255, cv2.THRESH_BINARY)

        # Reflections of the camera's lights inside the pupil make a false
        # circle; filling them in removes it.
        filled = fill_holes(binary)

        opened = apply_opening(filled, self.open_kernel)
        return sobel_edge(opened, self.sobel_kernel)

    def gradient_edge_map(self, image: np.ndarray) -> np.ndarray:
        """Naive edge map over the whole image."""
        return sobel_edge(image, self.sobel_kernel)

    @staticmethod
    def fuse(map_a: np.ndarray, map_b: np.ndarray) -> np.ndarray:
        """Bitwise AND of two edge maps."""
        if map_a.shape != map_b.shape:
            raise ValueError(f"Edge map shapes differ: {map_a.shape} vs {map_b.shape}")
        return cv2.bitwise_and(map_a, map_b)
