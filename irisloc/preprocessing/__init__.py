"""Image preprocessing and mask utilities."""

from .enhancement import ImageEnhancer, normalize_intensity, reduce_noise
from .masking import apply_opening, fill_holes, shrink

__all__ = ['ImageEnhancer', 'apply_opening', 'fill_holes', 'normalize_intensity',
           'reduce_noise', 'shrink']
