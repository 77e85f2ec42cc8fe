"""
Decode Throttle & Dedup

Per-session scan state plus the two gates in front of graph resolution:
- a time-based Idle/Busy cooldown capping decode attempts per second
- payload dedup so an unchanged payload is announced only once
"""

from dataclasses import dataclass, replace
from typing import Tuple

from config import ColorBand, PipelineConfig


@dataclass(frozen=True)
class ScanState:
    """Immutable session state threaded through each pipeline tick."""
    selected_color: ColorBand = ColorBand.RED
    last_decoded: str = ''
    busy_until: float = 0.0

    def decode_in_flight(self, now: float) -> bool:
        return now < self.busy_until

    def with_color(self, color) -> 'ScanState':
        return replace(self, selected_color=ColorBand.parse(color))


class DecodeThrottle:
    """Idle/Busy gate and payload dedup over ScanState."""

    def __init__(self, config: dict = None):
        """
        Args:
            config: Optional config dict, uses PipelineConfig.THROTTLE if None
        """
        self.config = config or PipelineConfig.THROTTLE
        self.cooldown = self.config['COOLDOWN_MS'] / 1000.0

    def try_acquire(self, state: ScanState, now: float) -> Tuple[ScanState, bool]:
        """
        Idle -> Busy transition.

        Returns (new_state, acquired). While Busy the request is dropped and the
        state comes back unchanged. Busy expires on its own after the cooldown,
        whatever the decode outcome.
        """
        if state.decode_in_flight(now):
            return state, False
        return replace(state, busy_until=now + self.cooldown), True

    def accept_payload(self, state: ScanState, payload: str) -> Tuple[ScanState, bool]:
        """Returns (new_state, is_new). Only a changed payload updates last_decoded."""
        if payload == state.last_decoded:
            return state, False
        return replace(state, last_decoded=payload), True
