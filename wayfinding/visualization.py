"""
Visualization utilities for the scanning pipeline.
Overlay drawing shared by the live session and the still-image CLI.
"""

import cv2
import numpy as np
from typing import Optional, Tuple

from config import PipelineConfig
from wayfinding.region_selection import Region


FONT = cv2.FONT_HERSHEY_SIMPLEX
BANNER_ALPHA = 0.6
BANNER_MARGIN = 8


def fit_text(text: str, max_width: int, base_scale: float) -> Tuple[float, int]:
    """
    Shrink the font scale until text fits within max_width pixels.

    Args:
        text: Text to render
        max_width: Available width in pixels
        base_scale: Scale to start from

    Returns:
        Tuple of (font_scale, thickness)
    """
    scale = base_scale
    while scale > 0.3:
        thickness = max(1, int(round(scale * 1.5)))
        (text_w, _), _ = cv2.getTextSize(text, FONT, scale, thickness)
        if text_w <= max_width:
            return scale, thickness
        scale *= 0.9
    return scale, 1


def draw_banner(img: np.ndarray,
                text: str,
                text_color: Tuple[int, int, int] = (255, 255, 255),
                bg_color: Tuple[int, int, int] = (0, 0, 0),
                at_bottom: bool = False) -> np.ndarray:
    """
    Blend a translucent text strip across the top or bottom edge.

    The strip height follows the rendered text, so long guidance lines are
    shrunk to the frame width rather than clipped. Grayscale masks come back as BGR.
    """
    vis = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR) if img.ndim == 2 else img.copy()
    h, w = vis.shape[:2]

    scale, thickness = fit_text(text, w - 2 * BANNER_MARGIN, max(0.4, h / 600.0))
    (_, text_h), baseline = cv2.getTextSize(text, FONT, scale, thickness)
    strip_h = min(h, text_h + baseline + 2 * BANNER_MARGIN)
    top = h - strip_h if at_bottom else 0

    strip = vis[top:top + strip_h]
    fill = np.empty_like(strip)
    fill[:] = bg_color
    strip[:] = cv2.addWeighted(fill, BANNER_ALPHA, strip, 1.0 - BANNER_ALPHA, 0)

    cv2.putText(vis, text, (BANNER_MARGIN, top + BANNER_MARGIN + text_h), FONT,
                scale, text_color, thickness, cv2.LINE_AA)
    return vis


def draw_region(img: np.ndarray, region: Region,
                color: Tuple[int, int, int], thickness: int = 3) -> np.ndarray:
    """Draw region outline in place."""
    cv2.rectangle(img, (region.x, region.y),
                  (region.x + region.width, region.y + region.height), color, thickness)
    return img


def draw_overlay(frame: np.ndarray,
                 region: Optional[Region],
                 status: str,
                 result: str = '',
                 color_name: str = 'red',
                 tracking: bool = True,
                 mismatched: bool = False) -> np.ndarray:
    """
    Compose the on-screen view: tracking box (or scan window), status and result banners.

    Args:
        frame: Original BGR frame, not modified
        region: Region to outline, if any
        status: Status line text
        result: Last guidance display text
        color_name: Selected color band, shown in the status banner
        tracking: True for blob tracking, False for the fixed scan window
        mismatched: Result belongs to another color route, drawn in the warning color
    """
    colors = PipelineConfig.VIZ_COLORS
    vis = frame.copy()

    if region is not None:
        box_color = colors['TRACK_BOX'] if tracking else colors['SCAN_WINDOW']
        draw_region(vis, region, box_color, 3 if tracking else 2)

    band_color = colors['BAND'].get(color_name, colors['STATUS_TEXT'])
    vis = draw_banner(vis, f"[{color_name.upper()}] {status}",
                      text_color=band_color, bg_color=colors['STATUS_BG'])
    if result:
        result_color = colors['MISMATCH'] if mismatched else colors['STATUS_TEXT']
        vis = draw_banner(vis, result, text_color=result_color,
                          bg_color=colors['STATUS_BG'], at_bottom=True)
    return vis


def mask_panel(mask: np.ndarray, label: str) -> np.ndarray:
    """Mask as a labeled BGR panel for tuning grids."""
    return draw_banner(mask, label)
