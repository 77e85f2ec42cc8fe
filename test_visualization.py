# test_visualization.py
import cv2
import numpy as np

from wayfinding import Region
from wayfinding.visualization import FONT, draw_banner, draw_overlay, fit_text, mask_panel

GUIDANCE = 'You are at the Block N entrance. Next, proceed to Walkway.'


def red_text_pixels(img):
    return int(np.count_nonzero((img[..., 2] > 120) & (img[..., 1] < 60) & (img[..., 0] < 60)))


def test_mismatch_flag_selects_warning_color(blank_frame):
    half = blank_frame.shape[0] // 2
    warned = draw_overlay(blank_frame, None, 'Decoded', '[RED] Block N Entrance',
                          color_name='green', mismatched=True)
    plain = draw_overlay(blank_frame, None, 'Decoded', '[RED] Block N Entrance',
                         color_name='green', mismatched=False)
    assert red_text_pixels(warned[half:]) > 0
    assert red_text_pixels(plain[half:]) == 0


def test_overlay_outlines_region_without_touching_frame(blank_frame):
    vis = draw_overlay(blank_frame, Region(100, 150, 200, 120), 'Scanning', tracking=False)
    assert not blank_frame.any()
    assert tuple(vis[200, 100]) == (255, 255, 255)


def test_banner_is_translucent():
    white = np.full((240, 320, 3), 255, dtype=np.uint8)
    vis = draw_banner(white, 'Walkway')
    assert 90 < vis[0, 0, 0] < 115
    assert vis[-1, -1, 0] == 255


def test_long_text_is_shrunk_to_width():
    scale, thickness = fit_text(GUIDANCE, 624, 0.8)
    (text_w, _), _ = cv2.getTextSize(GUIDANCE, FONT, scale, thickness)
    assert scale < 0.8
    assert text_w <= 624


def test_mask_panel_is_bgr():
    panel = mask_panel(np.zeros((100, 200), dtype=np.uint8), 'RED MASK')
    assert panel.shape == (100, 200, 3)
