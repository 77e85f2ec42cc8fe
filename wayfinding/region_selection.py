"""
Region Selection Module

Decides which rectangle of the frame is handed to the payload decoder.
Two interchangeable policies:
- FixedWindowSelector: centered square scan window, no segmentation needed
- BlobTrackingSelector: bounding box of the largest qualifying color blob
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from config import PipelineConfig


@dataclass(frozen=True)
class Region:
    """Axis-aligned crop rectangle in pixel coordinates."""
    x: int
    y: int
    width: int
    height: int

    @property
    def min_side(self) -> int:
        return min(self.width, self.height)

    def padded(self, ratio: float, frame_w: int, frame_h: int) -> 'Region':
        """Grow by round(min_side * ratio) on every side, clamped to the frame."""
        pad = int(round(self.min_side * ratio))
        x = max(0, self.x - pad)
        y = max(0, self.y - pad)
        w = min(frame_w - x, self.width + pad * 2)
        h = min(frame_h - y, self.height + pad * 2)
        return Region(x, y, w, h)

    def clamped(self, frame_w: int, frame_h: int) -> 'Region':
        x = min(max(0, self.x), frame_w)
        y = min(max(0, self.y), frame_h)
        w = max(0, min(frame_w - x, self.width))
        h = max(0, min(frame_h - y, self.height))
        return Region(x, y, w, h)

    def as_slices(self) -> Tuple[slice, slice]:
        return slice(self.y, self.y + self.height), slice(self.x, self.x + self.width)


class RegionSelector(ABC):
    """Policy that picks the decode region for a frame."""

    # Whether select() needs a segmentation mask
    requires_mask = False
    # Whether the caller applies the move-closer proximity gate
    proximity_gate = False
    # Crop padding ratio applied by the decoder adapter
    padding_ratio = 0.0

    @abstractmethod
    def select(self, frame_shape: Tuple[int, ...], mask: np.ndarray = None) -> Optional[Region]:
        """
        Pick a region.

        Args:
            frame_shape: Shape of the frame, (H, W[, C])
            mask: Cleaned color mask, only used by mask-based policies

        Returns:
            Region, or None if nothing qualifies this tick
        """


class FixedWindowSelector(RegionSelector):
    """Centered square scan window, recomputed only when frame dimensions change."""

    def __init__(self, config: dict = None):
        self.config = config or PipelineConfig.REGION
        self.side = self.config['FIXED_WINDOW_SIDE']
        self._dims = None
        self._region = None

    def select(self, frame_shape, mask=None):
        h, w = frame_shape[:2]
        if self._dims != (w, h):
            side = min(self.side, w, h)
            self._region = Region((w - side) // 2, (h - side) // 2, side, side)
            self._dims = (w, h)
        return self._region


class BlobTrackingSelector(RegionSelector):
    """Bounding box of the largest mask blob wider and taller than MIN_BLOB_SIZE."""

    requires_mask = True
    proximity_gate = True

    def __init__(self, segmenter, config: dict = None, padding_ratio: float = None):
        """
        Initialize blob tracker.

        Args:
            segmenter: ColorSegmenter used for contour extraction
            config: Optional config dict, uses PipelineConfig.REGION if None
            padding_ratio: Crop padding, uses PipelineConfig.DECODER if None
        """
        self.segmenter = segmenter
        self.config = config or PipelineConfig.REGION
        self.min_size = self.config['MIN_BLOB_SIZE']
        self.proximity_fraction = self.config['PROXIMITY_FRACTION']
        if padding_ratio is None:
            padding_ratio = PipelineConfig.DECODER['PADDING_RATIO']
        self.padding_ratio = padding_ratio

    def select(self, frame_shape, mask=None):
        if mask is None:
            raise ValueError("BlobTrackingSelector requires a mask")
        blob = self.segmenter.largest_blob(mask, self.min_size)
        return blob.bbox if blob else None

    def is_close_enough(self, region: Region, frame_shape) -> bool:
        """Region's shorter side must exceed a fraction of the frame's shorter side."""
        h, w = frame_shape[:2]
        return region.min_side > min(w, h) * self.proximity_fraction


def create_region_selector(policy: str, segmenter, config: dict = None) -> RegionSelector:
    """Build the selector named by policy ('blob' or 'fixed')."""
    policy = (policy or '').strip().lower()
    if policy == 'fixed':
        return FixedWindowSelector(config)
    if policy == 'blob':
        return BlobTrackingSelector(segmenter, config)
    raise ValueError(f"Unknown region policy '{policy}' (expected 'blob' or 'fixed')")
