"""Image enhancement applied before edge extraction."""

import cv2
import numpy as np


class ImageEnhancer:
    """Intensity normalization and smoothing for grayscale eye images."""

    def __init__(self, blur_kernel: int = 5):
        """
        Initialize image enhancer.

        Args:
            blur_kernel: Gaussian blur kernel size (odd)
        """
        self.blur_kernel = blur_kernel

    def enhance(self, image: np.ndarray) -> np.ndarray:
        """
        Apply full enhancement pipeline.

        Args:
            image: Input single-channel image

        Returns:
            Normalized and blurred uint8 image
        """
        gray = self.validate(image)

        # Poor quality images can have a brightness floor that's too high;
        # stretch so the pupil lands among the darkest pixels.
        normalized = self.normalize(gray)

        return self.reduce_noise(normalized)

    @staticmethod
    def validate(image: np.ndarray) -> np.ndarray:
        """Check that image is a non-empty single-channel buffer."""
        if image is None:
            raise ValueError("Image is None")
        if not isinstance(image, np.ndarray):
            raise ValueError(f"Image must be a numpy array, got {type(image).__name__}")

        if image.ndim == 3 and image.shape[2] == 1:
            image = image[:, :, 0]
        if image.ndim != 2:
            raise ValueError(f"Image must be single-channel, got shape {image.shape}")
        if image.shape[0] == 0 or image.shape[1] == 0:
            raise ValueError(f"Image is empty, got shape {image.shape}")

        if image.dtype == np.bool_:
            image = image.astype(np.uint8)
        elif image.dtype in (np.int64, np.uint32, np.uint64):
            # No OpenCV depth for these.
            image = image.astype(np.float64)
        return image

    @staticmethod
    def normalize(image: np.ndarray) -> np.ndarray:
        """Stretch intensities linearly so min maps to 0 and max to 255."""
        return cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX, dtype=cv2.CV_8U)

    def reduce_noise(self, image: np.ndarray) -> np.ndarray:
        """Apply Gaussian blur to reduce noise."""
        return cv2.GaussianBlur(image, (self.blur_kernel, self.blur_kernel), 0)


def normalize_intensity(image: np.ndarray) -> np.ndarray:
    """Stretch intensities to the full 0-255 range."""
    return ImageEnhancer.normalize(ImageEnhancer.validate(image))


def reduce_noise(image: np.ndarray, kernel_size: int = 5) -> np.ndarray:
    """Apply Gaussian blur to reduce noise."""
    enhancer = ImageEnhancer(kernel_size)
    return enhancer.reduce_noise(image)
