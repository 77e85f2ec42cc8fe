"""
Segmentation Module

Converts a camera frame to a binary mask for one target color band.
Uses HSV color filtering followed by morphological open/close cleanup,
and extracts outer blobs from the resulting mask.
"""

import cv2
import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional

from config import COLOR_BANDS, ColorBand, PipelineConfig
from wayfinding.region_selection import Region


@dataclass(frozen=True)
class Blob:
    """Outer connected component of a mask."""
    area: float
    bbox: Region


def to_bgr(frame: np.ndarray) -> np.ndarray:
    """Return a 3-channel BGR view of the frame, dropping alpha if present."""
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    if frame.shape[2] == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2BGR)
    return frame


class ColorSegmenter:
    """Builds cleaned color masks for the configured color bands."""

    def __init__(self, config: dict = None, bands: Dict[ColorBand, dict] = None):
        """
        Initialize segmenter.

        Args:
            config: Optional config dict, uses PipelineConfig.SEGMENTATION if None
            bands: Optional HSV range table, uses COLOR_BANDS if None
        """
        self.config = config or PipelineConfig.SEGMENTATION
        self.bands = bands or COLOR_BANDS
        size = self.config['KERNEL_SIZE']
        self.kernel = np.ones((size, size), np.uint8)

    def preprocess_image(self, frame: np.ndarray) -> np.ndarray:
        """Convert frame to HSV."""
        return cv2.cvtColor(to_bgr(frame), cv2.COLOR_BGR2HSV)

    def threshold(self, hsv_image: np.ndarray, color: ColorBand) -> np.ndarray:
        """Raw in-range mask, OR-ing every sub-range of the band."""
        ranges = self.bands[ColorBand.parse(color)]['ranges']
        mask = np.zeros(hsv_image.shape[:2], dtype=np.uint8)

        for lower, upper in ranges:
            mask |= cv2.inRange(hsv_image, lower, upper)

        return mask

    def clean(self, mask: np.ndarray) -> np.ndarray:
        """Opening removes specks, closing fills small gaps."""
        mask = cv2.morphologyEx(mask, cv2.MORPH_OPEN, self.kernel,
                                iterations=self.config['OPEN_ITERATIONS'])
        mask = cv2.morphologyEx(mask, cv2.MORPH_CLOSE, self.kernel,
                                iterations=self.config['CLOSE_ITERATIONS'])
        return mask

    def segment(self, frame: np.ndarray, color: ColorBand) -> np.ndarray:
        """
        Main segmentation method.

        Args:
            frame: BGR (or BGRA) input image, left untouched
            color: Target color band

        Returns:
            uint8 mask (0/255) with the frame's height and width
        """
        hsv = self.preprocess_image(frame)
        return self.clean(self.threshold(hsv, color))

    def find_blobs(self, mask: np.ndarray) -> List[Blob]:
        """Outer contours of the mask with their area and bounding box, largest first."""
        contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        blobs = []
        for cnt in contours:
            x, y, w, h = cv2.boundingRect(cnt)
            blobs.append(Blob(area=float(cv2.contourArea(cnt)), bbox=Region(x, y, w, h)))

        blobs.sort(key=lambda b: b.area, reverse=True)
        return blobs

    def largest_blob(self, mask: np.ndarray, min_size: int = 0) -> Optional[Blob]:
        """Largest blob whose width and height both exceed min_size."""
        for blob in self.find_blobs(mask):
            if blob.bbox.width > min_size and blob.bbox.height > min_size:
                return blob
        return None
