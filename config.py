"""
Configuration settings for the color-marker wayfinding pipeline.
Centralized configuration for all modules.
"""

import numpy as np
from enum import Enum
from pathlib import Path


class ColorBand(str, Enum):
    """Target marker hues. Declaration order is the graph search order."""

    RED = 'red'
    GREEN = 'green'
    BLUE = 'blue'

    @classmethod
    def parse(cls, value) -> 'ColorBand':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ', '.join(c.value for c in cls)
            raise ValueError(f"Unknown color band '{value}' (expected one of: {valid})")


# HSV ranges use the OpenCV scale (H 0-179, S/V 0-255). Tuned for indoor lighting.
# Red straddles the hue wrap point, so it carries two sub-ranges that are OR-ed.
COLOR_BANDS = {
    ColorBand.RED: {
        'name': 'red',
        'ranges': [
            (np.array([0, 120, 80]), np.array([10, 255, 255])),
            (np.array([170, 120, 80]), np.array([180, 255, 255]))
        ]
    },
    ColorBand.GREEN: {
        'name': 'green',
        'ranges': [
            (np.array([35, 80, 80]), np.array([85, 255, 255]))
        ]
    },
    ColorBand.BLUE: {
        'name': 'blue',
        'ranges': [
            (np.array([90, 80, 80]), np.array([130, 255, 255]))
        ]
    },
}


class PipelineConfig:
    """Configuration for the entire scanning pipeline."""

    # Segmentation Engine
    SEGMENTATION = {
        'KERNEL_SIZE': 5,
        'OPEN_ITERATIONS': 1,
        'CLOSE_ITERATIONS': 1
    }

    # Region Selector
    REGION = {
        'POLICY': 'blob',
        'FIXED_WINDOW_SIDE': 320,
        'MIN_BLOB_SIZE': 20,
        'PROXIMITY_FRACTION': 0.18
    }

    # Payload Decoder Adapter
    DECODER = {
        'PADDING_RATIO': 0.12,
        'TRY_INVERTED': True
    }

    # Decode Throttle & Dedup
    THROTTLE = {
        'COOLDOWN_MS': 220
    }

    # Guidance Resolver templates
    GUIDANCE = {
        'UNKNOWN_DISPLAY': 'Unknown code: {payload}',
        'UNKNOWN_SPEECH': 'This code is unknown.',
        'NEXT_SPEECH': ' Next, proceed to {next_text}.',
        'MISMATCH_DISPLAY': '[{expected}] {text}',
        'MISMATCH_SPEECH': ('Warning: this marker for {text} belongs to the {expected} route, '
                            'but {selected} is selected. Please find the {selected} marker.'),
        'VIBRATE_MATCHED_MS': 250,
        'VIBRATE_UNKNOWN_MS': 120,
        'VIBRATE_MISMATCH_MS': 400
    }

    # Status line texts
    STATUS = {
        'SCANNING': 'Scanning for colored marker...',
        'MOVE_CLOSER': 'Marker in view - move closer',
        'ACQUIRING': 'Marker present - acquiring...',
        'DECODED': 'Decoded successfully',
        'READY': 'Camera ready. Scanning...',
        'STOPPED': 'Stopped.',
        'CAMERA_UNAVAILABLE': 'Camera unavailable. Check camera permissions.'
    }

    # Speech / haptic sinks
    FEEDBACK = {
        'SPEAK_COOLDOWN_MS': 2500,
        'SPEECH_RATE': 170,
        'SPEECH_VOLUME': 1.0,
        'SESSION_START_SPEECH': 'Scanning started',
        'SESSION_STOP_SPEECH': 'Scanning stopped'
    }

    # Waypoint graph source
    GRAPH = {
        'PATH': Path(__file__).parent / 'data' / 'waypoints.json'
    }

    # Visualization Colors (BGR)
    VIZ_COLORS = {
        'TRACK_BOX': (136, 255, 0),
        'SCAN_WINDOW': (255, 255, 255),
        'STATUS_TEXT': (255, 255, 255),
        'STATUS_BG': (0, 0, 0),
        'MISMATCH': (0, 0, 255),
        'BAND': {
            'red': (0, 0, 255),
            'green': (0, 200, 0),
            'blue': (255, 0, 0)
        }
    }
