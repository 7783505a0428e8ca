"""
irisloc Core Processor
Main entry point for pupil localization
"""

import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np

from irisloc.config import merge_config
from irisloc.detection.circle_detector import CircleSearchResult, HoughCircleSearch
from irisloc.detection.edge_detector import EdgeMapGenerator
from irisloc.geometry.circle import Circle
from irisloc.preprocessing.enhancement import ImageEnhancer
from irisloc.utils.metrics import PerformanceMetrics

logger = logging.getLogger(__name__)


class PupilLocator:
    """
    Locates a single pupil in a grayscale eye image.

    This is the algorithm from "Accurate Iris Localization Using Edge Map
    Generation and Adaptive Circular Hough Transform for Less Constrained
    Iris Images" by Kumar, Asati and Gupta.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize pupil locator

        Args:
            config: Configuration overrides, see irisloc.config (optional)
        """
        self.config = merge_config(config)

        preprocessing = self.config["preprocessing"]
        edge_map = self.config["edge_map"]
        search = self.config["search"]

        self.enhancer = ImageEnhancer(blur_kernel=preprocessing["blur_kernel"])
        self.edge_generator = EdgeMapGenerator(
            dark_threshold=edge_map["dark_threshold"],
            open_kernel=edge_map["open_kernel"],
            sobel_kernel=edge_map["sobel_kernel"]
        )
        self.circle_search = HoughCircleSearch(
            radii=range(search["min_radius"], search["max_radius"] + 1),
            max_small_size=search["max_small_size"],
            workers=search["workers"]
        )
        self.metrics = PerformanceMetrics()

    def edge_map(self, image: np.ndarray) -> np.ndarray:
        """Preprocess image and return its fused edge map."""
        self.metrics.start_timer("preprocess")
        enhanced = self.enhancer.enhance(image)
        self.metrics.stop_timer("preprocess")

        self.metrics.start_timer("edge_map")
        edge = self.edge_generator.generate(enhanced)
        self.metrics.stop_timer("edge_map")
        return edge

    def locate(self, image: np.ndarray) -> CircleSearchResult:
        """
        Locate the pupil.

        Args:
            image: Single-channel intensity image

        Returns:
            CircleSearchResult; coarse_votes is zero when nothing was found
        """
        self.metrics.reset()
        edge = self.edge_map(image)

        self.metrics.start_timer("coarse_search")
        winner, votes, mult = self.circle_search.coarse_search(edge)
        self.metrics.stop_timer("coarse_search")

        self.metrics.start_timer("refine")
        result = self.circle_search.refine(edge, winner, votes, mult)
        self.metrics.stop_timer("refine")

        if logger.isEnabledFor(logging.DEBUG):
            timings = ", ".join(f"{name} {ms:.1f}ms" for name, ms in self.last_timings.items())
            logger.debug(f"Pupil approximate {result.approximate}, refined {result.refined} ({timings})")
        return result

    @property
    def last_timings(self) -> Dict[str, float]:
        """Stage durations in milliseconds from the last call."""
        return self.metrics.get_summary()


def find_pupil(image: np.ndarray, config: Optional[Dict[str, Any]] = None) -> Tuple[Circle, Circle]:
    """Locate a single pupil and return its (approximate, refined) circles."""
    result = PupilLocator(config).locate(image)
    return result.approximate, result.refined
