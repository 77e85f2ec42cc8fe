"""
Payload Decoding Module

Crops the selected region from the frame and hands it to a decode capability.
The capability is a black box: pixels in, text out (or None).
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from config import PipelineConfig
from wayfinding.region_selection import Region

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedPayload:
    text: str
    timestamp: float


class PayloadDecoder(ABC):
    """Decode capability: finds a symbol in a pixel buffer."""

    @abstractmethod
    def decode(self, pixels: np.ndarray, width: int, height: int) -> Optional[str]:
        """Return the payload text, or None if no symbol was found."""


class OpenCVQRDecoder(PayloadDecoder):
    """QR decoding backed by cv2.QRCodeDetector."""

    def __init__(self, try_inverted: bool = None):
        if try_inverted is None:
            try_inverted = PipelineConfig.DECODER['TRY_INVERTED']
        self.try_inverted = try_inverted
        self.detector = cv2.QRCodeDetector()

    def _detect(self, gray: np.ndarray) -> Optional[str]:
        try:
            data, points, _ = self.detector.detectAndDecode(gray)
        except cv2.error as e:
            logger.debug(f"QR backend error: {e}")
            return None
        return data or None

    def decode(self, pixels, width, height):
        if width <= 0 or height <= 0:
            return None

        if pixels.ndim == 3:
            code = cv2.COLOR_BGRA2GRAY if pixels.shape[2] == 4 else cv2.COLOR_BGR2GRAY
            gray = cv2.cvtColor(pixels, code)
        else:
            gray = pixels

        data = self._detect(gray)
        if data is None and self.try_inverted:
            data = self._detect(cv2.bitwise_not(gray))
        return data


class PayloadDecoderAdapter:
    """Crops the frame to a region and delegates to a PayloadDecoder."""

    def __init__(self, decoder: PayloadDecoder):
        self.decoder = decoder

    def crop(self, frame: np.ndarray, region: Region, padding_ratio: float = 0.0) -> np.ndarray:
        """Crop region (optionally padded) from the frame, clamped to frame bounds."""
        h, w = frame.shape[:2]
        if padding_ratio > 0:
            region = region.padded(padding_ratio, w, h)
        else:
            region = region.clamped(w, h)
        rows, cols = region.as_slices()
        return np.ascontiguousarray(frame[rows, cols])

    def decode(self, frame: np.ndarray, region: Region, now: float,
               padding_ratio: float = 0.0) -> Optional[DecodedPayload]:
        """
        Decode the payload inside region.

        Args:
            frame: Source frame, not modified
            region: Region picked by the region selector
            now: Timestamp recorded on the payload
            padding_ratio: Padding proportional to the region's shorter side

        Returns:
            DecodedPayload with trimmed text, or None if nothing was found
        """
        pixels = self.crop(frame, region, padding_ratio)
        ph, pw = pixels.shape[:2]
        if pw == 0 or ph == 0:
            return None

        text = self.decoder.decode(pixels, pw, ph)
        if text is None:
            return None

        text = str(text).strip()
        if not text:
            return None
        return DecodedPayload(text=text, timestamp=now)
