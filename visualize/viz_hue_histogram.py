"""
Visualize Hue Histogram

Plots the hue distribution of saturated pixels in an image (or a region of it)
with the configured color band ranges shaded, to help retune COLOR_BANDS.

Usage:
    python viz_hue_histogram.py <image> [--roi x y w h] [--save out.png]
"""

import argparse
import cv2
import numpy as np
import matplotlib.pyplot as plt
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from config import COLOR_BANDS, PipelineConfig


def main():
    parser = argparse.ArgumentParser(description='Hue histogram with color band ranges')
    parser.add_argument('image', type=str, help='Input image')
    parser.add_argument('--roi', type=int, nargs=4, metavar=('X', 'Y', 'W', 'H'), help='Region to sample')
    parser.add_argument('--save', type=str, help='Save the plot instead of showing it')
    args = parser.parse_args()

    image = cv2.imread(args.image)
    if image is None:
        print(f"Error: Could not read image: {args.image}")
        sys.exit(1)

    if args.roi:
        x, y, w, h = args.roi
        image = image[y:y + h, x:x + w]

    hsv = cv2.cvtColor(image, cv2.COLOR_BGR2HSV)
    h_ch, s_ch, v_ch = hsv[:, :, 0], hsv[:, :, 1], hsv[:, :, 2]

    # Ignore washed-out and dark pixels, which carry no reliable hue
    min_s = min(int(lo[1]) for band in COLOR_BANDS.values() for lo, _ in band['ranges'])
    min_v = min(int(lo[2]) for band in COLOR_BANDS.values() for lo, _ in band['ranges'])
    valid = (s_ch >= min_s) & (v_ch >= min_v)
    hues = h_ch[valid]

    fig, (ax_h, ax_sv) = plt.subplots(1, 2, figsize=(13, 4.5))

    ax_h.hist(hues, bins=180, range=(0, 180), color='dimgray')
    for color, band in COLOR_BANDS.items():
        bgr = PipelineConfig.VIZ_COLORS['BAND'][color.value]
        rgb = tuple(c / 255.0 for c in bgr[::-1])
        for lower, upper in band['ranges']:
            ax_h.axvspan(lower[0], upper[0], color=rgb, alpha=0.2, label=color.value)
    handles, labels = ax_h.get_legend_handles_labels()
    unique = dict(zip(labels, handles))
    ax_h.legend(unique.values(), unique.keys())
    ax_h.set_xlabel('Hue (OpenCV 0-179)')
    ax_h.set_ylabel('Pixels')
    ax_h.set_title(f'Hue of {len(hues)} pixels with S>={min_s}, V>={min_v}')

    sample = np.random.default_rng(0).choice(s_ch.size, size=min(5000, s_ch.size), replace=False)
    ax_sv.scatter(s_ch.ravel()[sample], v_ch.ravel()[sample], s=2, c=h_ch.ravel()[sample],
                  cmap='hsv', vmin=0, vmax=180)
    ax_sv.axvline(min_s, color='k', linestyle='--', linewidth=1)
    ax_sv.axhline(min_v, color='k', linestyle='--', linewidth=1)
    ax_sv.set_xlabel('Saturation')
    ax_sv.set_ylabel('Value')
    ax_sv.set_title('Saturation / Value (colored by hue)')

    fig.tight_layout()
    if args.save:
        fig.savefig(args.save, dpi=120)
        print(f"Saved: {args.save}")
    else:
        plt.show()


if __name__ == "__main__":
    main()
