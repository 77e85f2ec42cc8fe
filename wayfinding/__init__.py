"""
Wayfinding Modules

This package contains modular components for color-marker wayfinding:
- segmentation: HSV color masks and blob extraction
- region_selection: fixed scan window or largest-blob decode regions
- decoding: region cropping and the QR decode capability
- throttle: scan state, decode cooldown and payload dedup
- waypoint_graph: color-partitioned waypoint lookup
- guidance: display and speech messages for a lookup result
- feedback: speech, haptic and status sinks
"""

from .region_selection import Region, RegionSelector, FixedWindowSelector, BlobTrackingSelector
from .segmentation import ColorSegmenter
from .decoding import PayloadDecoder, OpenCVQRDecoder, PayloadDecoderAdapter, DecodedPayload
from .throttle import ScanState, DecodeThrottle
from .waypoint_graph import WaypointGraph, WaypointNode, Resolution, GraphConfigError
from .guidance import GuidanceResolver, GuidanceMessage

__all__ = [
    'Region',
    'RegionSelector',
    'FixedWindowSelector',
    'BlobTrackingSelector',
    'ColorSegmenter',
    'PayloadDecoder',
    'OpenCVQRDecoder',
    'PayloadDecoderAdapter',
    'DecodedPayload',
    'ScanState',
    'DecodeThrottle',
    'WaypointGraph',
    'WaypointNode',
    'Resolution',
    'GraphConfigError',
    'GuidanceResolver',
    'GuidanceMessage'
]
