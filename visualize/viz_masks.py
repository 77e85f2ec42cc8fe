"""
Visualize Color Masks

Standalone script to test and tune the segmentation module. For each image,
saves a 2x2 grid: raw image with the tracked blob, and the red/green/blue masks.

Usage:
    python viz_masks.py <image_directory_or_file>
"""

import cv2
import numpy as np
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from wayfinding import ColorSegmenter, BlobTrackingSelector
from wayfinding.visualization import draw_banner, draw_region, mask_panel
from config import ColorBand, PipelineConfig


def main():
    if len(sys.argv) < 2:
        print("Usage: python viz_masks.py <image_directory>")
        sys.exit(1)

    target = Path(sys.argv[1])
    if not target.exists():
        print(f"Error: Path does not exist: {target}")
        sys.exit(1)

    if target.is_dir():
        image_paths = []
        for ext in ('*.jpg', '*.jpeg', '*.png', '*.JPG', '*.JPEG', '*.PNG'):
            image_paths.extend(target.glob(ext))
        image_paths = sorted({p.resolve() for p in image_paths})
        output_dir = target / "viz_masks"
    else:
        image_paths = [target]
        output_dir = target.parent / "viz_masks"

    output_dir.mkdir(exist_ok=True)

    segmenter = ColorSegmenter()
    selector = BlobTrackingSelector(segmenter)
    band_colors = PipelineConfig.VIZ_COLORS['BAND']

    print(f"Found {len(image_paths)} image(s) to process\n")

    for idx, image_path in enumerate(image_paths, 1):
        image = cv2.imread(str(image_path))
        if image is None:
            print(f"[{idx}/{len(image_paths)}] Skipping unreadable image: {image_path.name}")
            continue

        raw = image.copy()
        panels = []
        summary = []
        for color in ColorBand:
            mask = segmenter.segment(image, color)
            region = selector.select(image.shape, mask)
            coverage = 100.0 * np.count_nonzero(mask) / mask.size

            if region is not None:
                close = selector.is_close_enough(region, image.shape)
                draw_region(raw, region, band_colors[color.value], 3 if close else 1)
                summary.append(f"{color.value}={region.width}x{region.height}{'' if close else ' (far)'}")
            else:
                summary.append(f"{color.value}=none")

            panels.append(mask_panel(mask, f"{color.value.upper()} MASK ({coverage:.1f}%)"))

        raw = draw_banner(raw, "RAW + BLOBS")

        h, w = image.shape[:2]
        sep_v = np.ones((h, 4, 3), dtype=np.uint8) * 255
        sep_h = np.ones((4, w * 2 + 4, 3), dtype=np.uint8) * 255

        top_row = np.hstack([raw, sep_v, panels[0]])
        bottom_row = np.hstack([panels[1], sep_v, panels[2]])
        grid = np.vstack([top_row, sep_h, bottom_row])

        grid_path = output_dir / f"{image_path.stem}_masks.jpg"
        cv2.imwrite(str(grid_path), grid)

        print(f"[{idx}/{len(image_paths)}] {image_path.name}: {', '.join(summary)}. Saved {grid_path.name}")

    print(f"\nResults saved to: {output_dir}")


if __name__ == "__main__":
    main()
