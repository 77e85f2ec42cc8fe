"""Pytest configuration and shared fixtures for the wayfinding pipeline."""
import logging

import cv2
import numpy as np
import pytest

from wayfinding import PayloadDecoder, WaypointGraph


logging.getLogger('matplotlib').setLevel(logging.WARNING)

FRAME_SHAPE = (480, 640)


def hsv_to_bgr(h, s, v):
    """BGR triple for one OpenCV-scale HSV color."""
    pixel = np.array([[[h, s, v]]], dtype=np.uint8)
    return cv2.cvtColor(pixel, cv2.COLOR_HSV2BGR)[0, 0]


def solid_frame(h, s, v, shape=FRAME_SHAPE):
    frame = np.zeros((shape[0], shape[1], 3), dtype=np.uint8)
    frame[:, :] = hsv_to_bgr(h, s, v)
    return frame


def frame_with_patch(x, y, w, h, hsv=(5, 220, 220), shape=FRAME_SHAPE):
    """Black frame with one colored rectangle."""
    frame = np.zeros((shape[0], shape[1], 3), dtype=np.uint8)
    frame[y:y + h, x:x + w] = hsv_to_bgr(*hsv)
    return frame


class ScriptedDecoder(PayloadDecoder):
    """Returns scripted payloads in order (None = nothing found) and records calls."""

    def __init__(self, payloads=None, error=None):
        self.payloads = list(payloads or [])
        self.error = error
        self.calls = []

    def decode(self, pixels, width, height):
        self.calls.append((width, height))
        if self.error is not None:
            raise self.error
        if not self.payloads:
            return None
        return self.payloads.pop(0)


@pytest.fixture
def graph_data():
    return {
        'red': {
            'R_ENTR': {'text': 'Block N Entrance', 'voice': 'You are at the Block N entrance.',
                       'category': 'entrance', 'next': 'R_WALKWAY'},
            'R_WALKWAY': {'text': 'Walkway'},
        },
        'green': [
            {'code': 'G_LIFT', 'text': 'Lift Lobby', 'voice': 'You are at the lift lobby.', 'next': 'R_ENTR'},
        ],
        'blue': [],
    }


@pytest.fixture
def graph(graph_data):
    return WaypointGraph.from_dict(graph_data)


@pytest.fixture
def blank_frame():
    return np.zeros((FRAME_SHAPE[0], FRAME_SHAPE[1], 3), dtype=np.uint8)
