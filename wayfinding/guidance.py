"""
Guidance Module

Turns a graph resolution into the user-facing display/speech message.
Pure: no I/O, same input always gives the same output.
"""

from dataclasses import dataclass

from config import ColorBand, PipelineConfig
from wayfinding.waypoint_graph import Resolution, WaypointGraph


@dataclass(frozen=True)
class GuidanceMessage:
    display_text: str
    speech_text: str
    vibrate_ms: int = 0


class GuidanceResolver:
    """Builds display/speech text for a Resolution."""

    def __init__(self, graph: WaypointGraph, config: dict = None):
        """
        Args:
            graph: Waypoint graph used to look up successors
            config: Optional config dict, uses PipelineConfig.GUIDANCE if None
        """
        self.graph = graph
        self.config = config or PipelineConfig.GUIDANCE

    def build_message(self, resolution: Resolution, selected_color) -> GuidanceMessage:
        cfg = self.config
        selected_color = ColorBand.parse(selected_color)

        if resolution.is_unknown:
            return GuidanceMessage(
                display_text=cfg['UNKNOWN_DISPLAY'].format(payload=resolution.code),
                speech_text=cfg['UNKNOWN_SPEECH'],
                vibrate_ms=cfg['VIBRATE_UNKNOWN_MS']
            )

        node = resolution.node

        if resolution.mismatched:
            expected = resolution.expected_color.value
            return GuidanceMessage(
                display_text=cfg['MISMATCH_DISPLAY'].format(expected=expected.upper(), text=node.text),
                speech_text=cfg['MISMATCH_SPEECH'].format(
                    text=node.text, expected=expected, selected=selected_color.value),
                vibrate_ms=cfg['VIBRATE_MISMATCH_MS']
            )

        speech = node.spoken
        successor = self.graph.successor(node)
        if successor is not None:
            speech += cfg['NEXT_SPEECH'].format(next_text=successor.text)

        return GuidanceMessage(
            display_text=node.text,
            speech_text=speech,
            vibrate_ms=cfg['VIBRATE_MATCHED_MS']
        )
