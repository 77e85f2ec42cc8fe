"""
Live Color Marker Wayfinding

Opens the camera, scans each frame for a marker of the selected color, decodes
it and announces directions toward the next waypoint.

Keys while running:
    r / g / b   select the red / green / blue route
    q / Esc     stop scanning

Usage:
    python main.py [--camera 0] [--color red] [--policy blob] [--graph data/waypoints.json]
"""

import argparse
import logging
import sys
import time

import cv2

from config import ColorBand, PipelineConfig
from pipeline import ScanPipeline, TickResult
from wayfinding import ColorSegmenter, ScanState, WaypointGraph, GraphConfigError
from wayfinding.feedback import Haptics, Speaker, StatusBoard
from wayfinding.region_selection import create_region_selector
from wayfinding.visualization import draw_overlay

logger = logging.getLogger(__name__)

WINDOW_NAME = 'Wayfinding'
COLOR_KEYS = {ord('r'): ColorBand.RED, ord('g'): ColorBand.GREEN, ord('b'): ColorBand.BLUE}
STOP_KEYS = {ord('q'), 27}


class CameraUnavailableError(RuntimeError):
    """Camera could not be opened or delivered no frames."""


class ScanSession:
    """Camera loop driving ScanPipeline and routing its output to the sinks."""

    def __init__(self,
                 pipeline: ScanPipeline,
                 speaker: Speaker,
                 haptics: Haptics,
                 status: StatusBoard,
                 camera_index: int = 0,
                 color: ColorBand = ColorBand.RED,
                 headless: bool = False,
                 clock=time.monotonic):
        self.pipeline = pipeline
        self.speaker = speaker
        self.haptics = haptics
        self.status = status
        self.camera_index = camera_index
        self.headless = headless
        self.clock = clock
        self.state = ScanState(selected_color=ColorBand.parse(color))
        self.running = False
        self._capture = None
        self._last_region = None
        self._last_mismatched = False

    def start(self):
        """Open the camera. Raises CameraUnavailableError if it cannot deliver frames."""
        capture = cv2.VideoCapture(self.camera_index)
        if not capture.isOpened():
            capture.release()
            raise CameraUnavailableError(f"Cannot open camera {self.camera_index}")

        ok, frame = capture.read()
        if not ok or frame is None:
            capture.release()
            raise CameraUnavailableError(f"Camera {self.camera_index} returned no frames")

        h, w = frame.shape[:2]
        logger.info(f"Camera {self.camera_index} opened at {w}x{h}")

        self._capture = capture
        self.running = True
        self.status.set_status(PipelineConfig.STATUS['READY'])
        self.speaker.speak(PipelineConfig.FEEDBACK['SESSION_START_SPEECH'], force=True)

    def select_color(self, color):
        self.state = self.state.with_color(color)
        logger.info(f"Selected color: {self.state.selected_color.value}")

    def handle_tick(self, frame, now: float) -> TickResult:
        """Run one pipeline tick and route the result to the sinks."""
        self.state, result = self.pipeline.process_frame(frame, self.state, now)

        self.status.set_status(result.status)
        if result.region is not None or result.status is not None:
            self._last_region = result.region

        if result.message is not None:
            mismatched = result.resolution is not None and result.resolution.mismatched
            self._last_mismatched = mismatched
            self.status.set_result(result.message.display_text)
            # Wrong-route warnings are never dropped by the speech cooldown
            self.speaker.speak(result.message.speech_text, force=mismatched)
            self.haptics.vibrate(result.message.vibrate_ms)

        return result

    def handle_key(self, key: int):
        if key in COLOR_KEYS:
            self.select_color(COLOR_KEYS[key])
        elif key in STOP_KEYS:
            self.running = False

    def run(self):
        """Frame loop; returns when stopped or the camera stops delivering frames."""
        if not self.running:
            self.start()

        try:
            while self.running:
                ok, frame = self._capture.read()
                if not ok or frame is None:
                    logger.warning("Camera stopped delivering frames")
                    break

                self.handle_tick(frame, self.clock())

                if not self.headless:
                    vis = draw_overlay(frame, self._last_region, self.status.status,
                                       self.status.result, self.state.selected_color.value,
                                       tracking=self.pipeline.selector.proximity_gate,
                                       mismatched=self._last_mismatched)
                    cv2.imshow(WINDOW_NAME, vis)
                    key = cv2.waitKey(1) & 0xFF
                    if key != 0xFF:
                        self.handle_key(key)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()

    def stop(self):
        was_running = self.running or self._capture is not None
        self.running = False
        if self._capture is not None:
            self._capture.release()
            self._capture = None
        if not self.headless:
            cv2.destroyAllWindows()
        if was_running:
            self.status.set_status(PipelineConfig.STATUS['STOPPED'])
            self.speaker.speak(PipelineConfig.FEEDBACK['SESSION_STOP_SPEECH'], force=True)


def main():
    parser = argparse.ArgumentParser(description='Live color marker wayfinding')
    parser.add_argument('--camera', type=int, default=0, help='Camera index')
    parser.add_argument('--color', '-c', type=str, default='red',
                        choices=[c.value for c in ColorBand], help='Initial color band')
    parser.add_argument('--policy', '-p', type=str, default=PipelineConfig.REGION['POLICY'],
                        choices=['blob', 'fixed'], help='Region selection policy')
    parser.add_argument('--graph', '-g', type=str, help='Waypoint graph JSON file')
    parser.add_argument('--no-speech', action='store_true', help='Log speech instead of speaking')
    parser.add_argument('--headless', action='store_true', help='No preview window')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    print("=" * 60)
    print("Color Marker Wayfinding")
    print("=" * 60)

    try:
        graph = WaypointGraph.load(args.graph)
    except (OSError, GraphConfigError) as e:
        print(f"Error: Could not load waypoint graph: {e}")
        sys.exit(1)

    segmenter = ColorSegmenter()
    pipeline = ScanPipeline(graph, selector=create_region_selector(args.policy, segmenter),
                            segmenter=segmenter)

    status = StatusBoard()
    session = ScanSession(pipeline,
                          speaker=Speaker(enabled=not args.no_speech),
                          haptics=Haptics(),
                          status=status,
                          camera_index=args.camera,
                          color=args.color,
                          headless=args.headless)

    print(f"  - Waypoints: {len(graph)}")
    print(f"  - Policy: {args.policy}")
    print(f"  - Color: {args.color}")
    if not args.headless:
        print("  - Keys: r/g/b select color, q to quit")

    try:
        session.start()
    except CameraUnavailableError as e:
        logger.error(str(e))
        status.set_status(PipelineConfig.STATUS['CAMERA_UNAVAILABLE'])
        print(f"\n{status.status}")
        sys.exit(1)

    session.run()
    print("\nDone!")


if __name__ == "__main__":
    main()
