"""Coarse-to-fine Circular Hough search for a single circle."""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from irisloc.geometry.circle import COARSE_RADII, Circle, Offset, get_circle_points
from irisloc.preprocessing.masking import shrink

logger = logging.getLogger(__name__)

NO_CIRCLE = Circle(0, 0, 0)


class CircleSearchResult(NamedTuple):
    """Outcome of a coarse-to-fine circle search."""

    approximate: Circle
    refined: Circle
    coarse_votes: int
    refined_votes: int
    mult: float

    @property
    def found(self) -> bool:
        return self.coarse_votes > 0


def cast_votes(foreground: np.ndarray, offsets: Iterable[Offset]) -> np.ndarray:
    """
    Build the Hough voting grid for one radius.

    Every foreground pixel (row, col) casts one vote for each candidate
    center (row + dy, col + dx). Centers outside the grid are dropped.
    """
    h, w = foreground.shape
    votes = np.zeros((h, w), dtype=np.int32)
    for dx, dy in offsets:
        if abs(dx) >= w or abs(dy) >= h:
            continue
        src_rows = slice(max(-dy, 0), h - max(dy, 0))
        dst_rows = slice(max(dy, 0), h - max(-dy, 0))
        src_cols = slice(max(-dx, 0), w - max(dx, 0))
        dst_cols = slice(max(dx, 0), w - max(-dx, 0))
        votes[dst_rows, dst_cols] += foreground[src_rows, src_cols]
    return votes


def circle_support(edge: np.ndarray, circle: Circle,
                   offsets: Optional[Sequence[Offset]] = None) -> int:
    """Count the circle's points that fall on non-zero pixels of edge."""
    if circle.r <= 0:
        return 0
    if offsets is None:
        offsets = get_circle_points(circle.r)

    h, w = edge.shape
    points = np.asarray(offsets, dtype=np.intp)
    rows = circle.y + points[:, 1]
    cols = circle.x + points[:, 0]

    # Samples outside the image count as background.
    inside = (rows >= 0) & (rows < h) & (cols >= 0) & (cols < w)
    return int(np.count_nonzero(edge[rows[inside], cols[inside]]))


class HoughCircleSearch:
    """
    Finds the single best defined circle in an edge image.

    Voting is expensive in the number of pixels, so it first runs on a
    small version of the image across a range of radii, then searches a
    small cube of (x, y, r) around the scaled-up answer at full resolution.
    """

    def __init__(self, radii: Iterable[int] = COARSE_RADII, max_small_size: int = 60,
                 workers: int = 1):
        """
        Initialize circle search.

        Args:
            radii: Radii tried on the downscaled image
            max_small_size: Cap on the smaller dimension of the downscaled image
            workers: Threads used to cast per-radius votes in the coarse pass
        """
        self.radii = sorted(radii)
        self.max_small_size = max_small_size
        self.workers = workers

    def find_best_circle(self, edge: np.ndarray) -> CircleSearchResult:
        """
        Run the coarse and fine passes over an edge image.

        Args:
            edge: Edge image; zero pixels are background, anything else is
                a candidate point on the circle

        Returns:
            CircleSearchResult with approximate and refined circles
        """
        winner, votes, mult = self.coarse_search(edge)
        return self.refine(edge, winner, votes, mult)

    def coarse_search(self, edge: np.ndarray) -> Tuple[Circle, int, float]:
        """
        Vote for circle centers on a downscaled edge image.

        Returns:
            Winning circle in downscaled coordinates, its votes, and the
            multiplier back to full resolution
        """
        small, mult = shrink(edge, self.max_small_size)
        foreground = (small != 0).astype(np.int32)

        if self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                grids = pool.map(lambda r: cast_votes(foreground, get_circle_points(r)),
                                 self.radii)
                peaks = [self._peak(grid) for grid in grids]
        else:
            peaks = [self._peak(cast_votes(foreground, get_circle_points(r)))
                     for r in self.radii]

        winner = NO_CIRCLE
        winner_votes = 0
        # Strict comparison keeps the earliest radius on ties.
        for r, (row, col, count) in zip(self.radii, peaks):
            if count > winner_votes:
                winner = Circle(col, row, r)
                winner_votes = count

        logger.debug(f"Coarse winner {winner} with {winner_votes} votes "
                     f"on {small.shape[1]}x{small.shape[0]} (mult {mult:.3f})")
        return winner, winner_votes, mult

    @staticmethod
    def _peak(votes: np.ndarray) -> Tuple[int, int, int]:
        # argmax returns the first maximum in row-major order.
        row, col = np.unravel_index(int(np.argmax(votes)), votes.shape)
        return int(row), int(col), int(votes[row, col])

    def refine(self, edge: np.ndarray, winner: Circle, winner_votes: int,
               mult: float) -> CircleSearchResult:
        """
        Refine a coarse winner on the full-resolution edge image.

        The coarse answer can be up to mult pixels out on both center and
        radius, so every (x, y, r) within ceil(mult / 2) of the scaled-up
        circle is scored exhaustively.
        """
        if winner_votes <= 0:
            logger.warning("No circle votes cast; returning empty circle")
            return CircleSearchResult(NO_CIRCLE, NO_CIRCLE, 0, 0, mult)

        approximate = Circle(int(winner.x * mult), int(winner.y * mult), int(winner.r * mult))
        if mult == 1:
            return CircleSearchResult(approximate, approximate, winner_votes,
                                      circle_support(edge, approximate), mult)

        uncertainty = int(math.ceil(mult / 2))
        h, w = edge.shape

        best = NO_CIRCLE
        best_votes = 0
        for r in range(max(1, approximate.r - uncertainty), approximate.r + uncertainty + 1):
            offsets = get_circle_points(r)
            for row in range(max(0, approximate.y - uncertainty),
                             min(h - 1, approximate.y + uncertainty) + 1):
                for col in range(max(0, approximate.x - uncertainty),
                                 min(w - 1, approximate.x + uncertainty) + 1):
                    candidate = Circle(col, row, r)
                    votes = circle_support(edge, candidate, offsets)
                    if votes > best_votes:
                        best = candidate
                        best_votes = votes

        # Nothing in the cube touches an edge pixel; keep the scaled-up
        # coarse circle rather than collapsing to the empty one.
        if best_votes == 0:
            best = approximate

        logger.debug(f"Refined {approximate} to {best} with {best_votes} votes")
        return CircleSearchResult(approximate, best, winner_votes, best_votes, mult)
