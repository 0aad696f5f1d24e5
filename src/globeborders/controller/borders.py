"""
Border Lines and the Shared-Border Index
========================================
Border polylines float slightly above the globe. External borders belong to
the outer ring of a region; internal borders (hole rings, enclaves) are
collected in a BorderIndex keyed by canonical ring key.

Why is this file needed?
------------------------
1. Deduplication: Two neighbouring regions describe their common boundary
   twice, usually in opposite winding order. Equal canonical keys group
   those copies.
2. Classification: Once every feature is ingested, groups of two or more
   segments are marked shared, except global-wrap artifacts.

Classes:
    BorderKind: External (outer ring) or internal (indexed) border.
    BorderSegment: One polyline with its metadata.
    BorderIndex: Canonical key -> segments, plus the classification pass.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, TYPE_CHECKING

import numpy as np

from globeborders.config import DEFAULT_WRAP_THRESHOLD_DEGREES
from globeborders.model.extent import angular_extent, is_global_wrap
from globeborders.model.geometry_primitives import Ring, open_ring_array
from globeborders.model.projection import offset_radially, project_ring

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class BorderKind(str, Enum):
    EXTERNAL = "border-external"
    INTERNAL = "border-internal"


@dataclass(eq=False)
class BorderSegment:
    """
    A closed polyline offset radially outward from the globe surface.

    Segments compare by identity: the index intentionally holds several
    segments with equal content.
    """
    points: npt.NDArray[np.float64]
    kind: BorderKind
    country: str
    ring: Ring
    key: Optional[str] = None
    shared: bool = False
    closed: bool = field(default=True)

    @property
    def n_points(self) -> int:
        return int(self.points.shape[0])


def build_border(
    ring: Ring,
    radius: float,
    offset: float,
    kind: BorderKind,
    country: str,
    key: Optional[str] = None,
) -> BorderSegment:
    """
    Creates the border polyline of a ring at `radius + offset`.

    The explicit closing point is dropped; the segment is a closed loop.
    """
    pts2d = open_ring_array(ring)
    points = offset_radially(project_ring(pts2d, radius), radius, offset)
    return BorderSegment(points=points, kind=kind, country=country, ring=ring, key=key)


class BorderIndex:
    """
    Multimap from canonical key to border segments, in insertion order.

    The index is owned by a single coordinator and is only ever cleared and
    repopulated as a whole.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, List[BorderSegment]] = {}
        self._classified = False

    def register(self, key: str, segment: BorderSegment) -> None:
        """Appends the segment to the key's list. Identical segments are not merged."""
        self._entries.setdefault(key, []).append(segment)
        self._classified = False

    def clear(self) -> None:
        self._entries.clear()
        self._classified = False

    def classify(self, wrap_threshold: float = DEFAULT_WRAP_THRESHOLD_DEGREES) -> int:
        """
        Marks every segment of each candidate group as shared.

        A group is a candidate when its key has at least two segments. The ring
        of the first segment represents the group; if its longitude span exceeds
        `wrap_threshold` the group is a global-wrap artifact and stays unshared.

        Must run once, after all features are registered.

        Returns:
            Number of keys whose segments were marked shared.
        """
        marked = 0
        skipped = 0
        for key, segments in self._entries.items():
            if len(segments) < 2:
                continue

            representative = segments[0].ring
            if is_global_wrap(representative, wrap_threshold):
                skipped += 1
                span = angular_extent(representative)
                logger.debug(
                    f"Skipping global-wrap group of {len(segments)} segments "
                    f"(lon span {span.lon_span:.1f} > {wrap_threshold:.1f})."
                )
                continue

            for segment in segments:
                segment.shared = True
            marked += 1

        self._classified = True
        logger.info(f"Classified {marked} shared border groups ({skipped} wrap artifacts ignored).")
        return marked

    @property
    def is_classified(self) -> bool:
        return self._classified

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def segments(self, key: str) -> List[BorderSegment]:
        return list(self._entries.get(key, []))

    def candidates(self) -> Dict[str, List[BorderSegment]]:
        """Keys with two or more segments."""
        return {k: list(v) for k, v in self._entries.items() if len(v) >= 2}

    def all_segments(self) -> List[BorderSegment]:
        return [s for segments in self._entries.values() for s in segments]

    def shared_segments(self) -> List[BorderSegment]:
        return [s for s in self.all_segments() if s.shared]

    def segments_for_country(self, country: str) -> List[BorderSegment]:
        return [s for s in self.all_segments() if s.country == country]

    def snapshot(self) -> Dict[str, List[bool]]:
        """Key -> shared flags of its segments. Used to compare builds."""
        return {k: [s.shared for s in v] for k, v in self._entries.items()}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
