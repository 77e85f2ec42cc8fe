"""
Color Marker Scanning Pipeline

Orchestrates one processing tick per camera frame.
Process: Segmentation -> Region Selection -> Throttle -> Decode -> Dedup -> Graph Lookup -> Guidance

Usage:
    python pipeline.py <image_directory> [--color red] [--policy blob] [--output <output_dir>] [--visualize]
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np

from config import ColorBand, PipelineConfig
from wayfinding import (ColorSegmenter, DecodeThrottle, DecodedPayload, GuidanceMessage,
                        GuidanceResolver, OpenCVQRDecoder, PayloadDecoder,
                        PayloadDecoderAdapter, Region, RegionSelector, Resolution,
                        ScanState, WaypointGraph)
from wayfinding.region_selection import create_region_selector
from wayfinding.visualization import draw_overlay

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    """What one tick produced. status is None when the status line should stay as is."""
    status: Optional[str] = None
    region: Optional[Region] = None
    mask: Optional[np.ndarray] = None
    decoded: Optional[DecodedPayload] = None
    resolution: Optional[Resolution] = None
    message: Optional[GuidanceMessage] = None


class ScanPipeline:
    """Per-frame scanning pipeline. Holds no session state of its own."""

    def __init__(self,
                 graph: WaypointGraph,
                 decoder: PayloadDecoder = None,
                 selector: RegionSelector = None,
                 segmenter: ColorSegmenter = None,
                 throttle: DecodeThrottle = None,
                 guidance: GuidanceResolver = None):
        """Initialize all pipeline stages; defaults come from PipelineConfig."""
        self.graph = graph
        self.segmenter = segmenter or ColorSegmenter()
        self.selector = selector or create_region_selector(
            PipelineConfig.REGION['POLICY'], self.segmenter)
        self.adapter = PayloadDecoderAdapter(decoder or OpenCVQRDecoder())
        self.throttle = throttle or DecodeThrottle()
        self.guidance = guidance or GuidanceResolver(graph)
        self.status_texts = PipelineConfig.STATUS

    def process_frame(self, frame: np.ndarray, state: ScanState,
                      now: float) -> Tuple[ScanState, TickResult]:
        """
        Run one tick.

        Args:
            frame: BGR camera frame, not modified
            state: Session state from the previous tick
            now: Monotonic timestamp in seconds

        Returns:
            Tuple of (new_state, tick_result)
        """
        try:
            return self._tick(frame, state, now)
        except Exception as e:
            # A bad frame or decoder hiccup never stops the loop
            logger.warning(f"Frame processing error: {e}")
            return state, TickResult()

    def _tick(self, frame, state, now):
        status = self.status_texts

        mask = None
        if self.selector.requires_mask:
            mask = self.segmenter.segment(frame, state.selected_color)

        region = self.selector.select(frame.shape, mask)
        if region is None:
            return state, TickResult(status=status['SCANNING'], mask=mask)

        if self.selector.proximity_gate and not self.selector.is_close_enough(region, frame.shape):
            return state, TickResult(status=status['MOVE_CLOSER'], region=region, mask=mask)

        state, acquired = self.throttle.try_acquire(state, now)
        if not acquired:
            return state, TickResult(region=region, mask=mask)

        try:
            decoded = self.adapter.decode(frame, region, now, self.selector.padding_ratio)
        except Exception as e:
            # Busy stays set: the cooldown holds whatever the decode outcome
            logger.warning(f"Decode error: {e}")
            return state, TickResult(region=region, mask=mask)
        if decoded is None:
            return state, TickResult(status=status['ACQUIRING'], region=region, mask=mask)

        state, is_new = self.throttle.accept_payload(state, decoded.text)
        if not is_new:
            return state, TickResult(status=status['DECODED'], region=region,
                                     mask=mask, decoded=decoded)

        resolution = self.graph.resolve(decoded.text, state.selected_color)
        message = self.guidance.build_message(resolution, state.selected_color)
        logger.debug(f"Decoded {decoded.text!r} -> {message.display_text!r}")

        return state, TickResult(status=status['DECODED'], region=region, mask=mask,
                                 decoded=decoded, resolution=resolution, message=message)


def main():
    parser = argparse.ArgumentParser(description='Color Marker Scanning Pipeline (still images)')
    parser.add_argument('input_dir', type=str, help='Directory containing input images')
    parser.add_argument('--color', '-c', type=str, default='red',
                        choices=[c.value for c in ColorBand], help='Selected color band')
    parser.add_argument('--policy', '-p', type=str, default=PipelineConfig.REGION['POLICY'],
                        choices=['blob', 'fixed'], help='Region selection policy')
    parser.add_argument('--graph', '-g', type=str, help='Waypoint graph JSON file')
    parser.add_argument('--output', '-o', type=str, help='Output directory (default: input_dir/scan_results)')
    parser.add_argument('--visualize', '-v', action='store_true', help='Save overlay images')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    input_dir = Path(args.input_dir)
    if not input_dir.exists():
        print(f"Error: Input directory does not exist: {input_dir}")
        sys.exit(1)

    output_dir = Path(args.output) if args.output else input_dir / "scan_results"
    if args.visualize:
        output_dir.mkdir(exist_ok=True, parents=True)

    image_files = []
    for ext in ['*.jpg', '*.jpeg', '*.png', '*.JPG', '*.JPEG', '*.PNG']:
        image_files.extend(input_dir.glob(ext))
    image_files = sorted(set(image_files))

    print(f"Found {len(image_files)} image(s) to process\n")

    if not image_files:
        print("No images found!")
        sys.exit(1)

    graph = WaypointGraph.load(args.graph)
    segmenter = ColorSegmenter()
    pipeline = ScanPipeline(graph, selector=create_region_selector(args.policy, segmenter),
                            segmenter=segmenter)
    state = ScanState(selected_color=ColorBand.parse(args.color))

    # Each still image is a separate tick, spaced past the decode cooldown
    step = pipeline.throttle.cooldown * 2
    for idx, img_path in enumerate(image_files, 1):
        print(f"[{idx}/{len(image_files)}] Processing {img_path.name}...")

        image = cv2.imread(str(img_path))
        if image is None:
            print(f"  Warning: Could not read image")
            continue

        state, result = pipeline.process_frame(image, state, now=idx * step)

        payload = result.decoded.text if result.decoded else '-'
        shown = result.message.display_text if result.message else '-'
        print(f"  Status: {result.status or '-'} | Payload: {payload} | Guidance: {shown}")

        if args.visualize:
            vis = draw_overlay(image, result.region, result.status or '',
                               shown if result.message else '', state.selected_color.value,
                               tracking=pipeline.selector.proximity_gate,
                               mismatched=bool(result.resolution and result.resolution.mismatched))
            out_path = output_dir / f"{img_path.stem}_scan.jpg"
            cv2.imwrite(str(out_path), vis)
            print(f"  Saved: {out_path.name}")

    print("\nDone!")


if __name__ == "__main__":
    main()
