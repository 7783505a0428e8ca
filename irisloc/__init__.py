"""
irisloc - pupil localization for less constrained iris images.
"""

from .core import PupilLocator, find_pupil
from .detection.circle_detector import CircleSearchResult
from .geometry.circle import Circle

__all__ = ['Circle', 'CircleSearchResult', 'PupilLocator', 'find_pupil']
__version__ = '1.0.0'
