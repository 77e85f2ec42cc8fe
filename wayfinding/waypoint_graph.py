"""
Waypoint Graph Module

Color-partitioned lookup table from marker code to waypoint metadata.
Built once at start-up and read-only afterwards.

Partition data may be given either as a list of entries:
    {"red": [{"code": "R_ENTR", "text": "...", "voice": "...", "next": "R_WALKWAY"}]}
or keyed by code:
    {"red": {"R_ENTR": {"text": "...", "next": "R_WALKWAY"}}}
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from config import ColorBand, PipelineConfig

logger = logging.getLogger(__name__)


class GraphConfigError(ValueError):
    """Static waypoint data is malformed or inconsistent."""


@dataclass(frozen=True)
class WaypointNode:
    code: str
    color: ColorBand
    text: str
    voice: str = ''
    category: Optional[str] = None
    next: Optional[str] = None

    @property
    def spoken(self) -> str:
        return self.voice or self.text


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a decoded payload. node is None for unknown codes."""
    code: str
    node: Optional[WaypointNode] = None
    mismatched: bool = False
    expected_color: Optional[ColorBand] = None

    @property
    def is_unknown(self) -> bool:
        return self.node is None


class WaypointGraph:
    """Read-only mapping ColorBand -> code -> WaypointNode."""

    def __init__(self, partitions: Dict[ColorBand, Dict[str, WaypointNode]]):
        # Fixed enumeration order, independent of input order
        self._partitions = {color: dict(partitions.get(color, {})) for color in ColorBand}

    @classmethod
    def from_dict(cls, data: dict) -> 'WaypointGraph':
        """Build and validate a graph from parsed configuration data."""
        if not isinstance(data, dict):
            raise GraphConfigError("Waypoint data must be a mapping of color -> entries")

        partitions = {}
        for key, entries in data.items():
            try:
                color = ColorBand.parse(key)
            except ValueError as e:
                raise GraphConfigError(str(e)) from e
            partitions[color] = cls._parse_partition(color, entries)

        graph = cls(partitions)
        graph.validate()
        return graph

    @classmethod
    def load(cls, path=None) -> 'WaypointGraph':
        """Load a graph from a JSON file (PipelineConfig.GRAPH['PATH'] by default)."""
        path = Path(path or PipelineConfig.GRAPH['PATH'])
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise GraphConfigError(f"Invalid JSON in {path}: {e}") from e

        graph = cls.from_dict(data)
        logger.info(f"Loaded {len(graph)} waypoints from {path}")
        return graph

    @staticmethod
    def _parse_partition(color: ColorBand, entries) -> Dict[str, WaypointNode]:
        if isinstance(entries, dict):
            entries = [dict(fields, code=code) for code, fields in entries.items()]
        if not isinstance(entries, list):
            raise GraphConfigError(f"Partition '{color.value}' must be a list or mapping")

        nodes = {}
        for entry in entries:
            if not isinstance(entry, dict):
                raise GraphConfigError(f"Malformed entry in '{color.value}': {entry!r}")
            code = str(entry.get('code', '')).strip()
            text = entry.get('text')
            if not code:
                raise GraphConfigError(f"Entry without code in '{color.value}': {entry!r}")
            if not text:
                raise GraphConfigError(f"Waypoint {code} ({color.value}) has no text")
            if code in nodes:
                raise GraphConfigError(f"Waypoint {code} listed twice in '{color.value}'")
            nodes[code] = WaypointNode(
                code=code,
                color=color,
                text=str(text),
                voice=str(entry.get('voice') or ''),
                category=entry.get('category'),
                next=entry.get('next') or None
            )
        return nodes

    def validate(self):
        """Dangling successors fail fast; cross-partition duplicates only warn."""
        seen = {}
        for color, code, _ in self.nodes():
            if code in seen:
                logger.warning(f"Code {code} appears in both '{seen[code].value}' and "
                               f"'{color.value}'; '{seen[code].value}' wins on lookup")
            else:
                seen[code] = color

        for color, code, node in self.nodes():
            if node.next and node.next not in seen:
                raise GraphConfigError(
                    f"Waypoint {code} ({color.value}) points to unknown next code '{node.next}'")

    def nodes(self) -> Iterator[Tuple[ColorBand, str, WaypointNode]]:
        for color, partition in self._partitions.items():
            for code, node in partition.items():
                yield color, code, node

    def partition(self, color) -> Dict[str, WaypointNode]:
        return dict(self._partitions[ColorBand.parse(color)])

    def find(self, code: str) -> Optional[WaypointNode]:
        """First node with this code across partitions, in enumeration order."""
        for partition in self._partitions.values():
            if code in partition:
                return partition[code]
        return None

    def successor(self, node: WaypointNode) -> Optional[WaypointNode]:
        if not node.next:
            return None
        return self.find(node.next)

    def resolve(self, code: str, selected_color) -> Resolution:
        """
        Resolve a decoded payload against the selected color.

        Args:
            code: Decoded payload text
            selected_color: Currently selected ColorBand

        Returns:
            Resolution: matched, matched-but-mismatched with expected_color, or unknown
        """
        selected_color = ColorBand.parse(selected_color)

        node = self._partitions[selected_color].get(code)
        if node is not None:
            return Resolution(code=code, node=node)

        for color, partition in self._partitions.items():
            if color is selected_color:
                continue
            if code in partition:
                return Resolution(code=code, node=partition[code],
                                  mismatched=True, expected_color=color)

        return Resolution(code=code)

    def __len__(self):
        return sum(len(p) for p in self._partitions.values())

    def __contains__(self, code):
        return self.find(code) is not None
