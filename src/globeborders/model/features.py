"""
Features and Ring Records
=========================
Normalized, immutable view of the source feature collection.

Why is this file needed?
------------------------
The source dataset mixes single polygons and multi-polygons. This module
flattens both into one sequence of `RingRecord`s per feature, each tagged with
whether it is the outer ring of its polygon. Nothing downstream knows the
original geometry type.

Classes:
    RingRecord: One ring of one polygon of one feature.
    Feature: A named region with one or more polygons.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from globeborders.model.geometry_primitives import Ring, as_ring

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"

POLYGON = "Polygon"
MULTI_POLYGON = "MultiPolygon"


@dataclass(frozen=True)
class RingRecord:
    """A ring tagged with its owner and its role inside the polygon."""
    country: str
    ring: Ring
    is_outer: bool
    polygon_index: int = 0
    ring_index: int = 0


@dataclass(frozen=True)
class Feature:
    """A named region. Each polygon is an outer ring followed by its holes."""
    name: str = UNKNOWN_NAME
    polygons: tuple = field(default_factory=tuple)

    def rings(self) -> List[RingRecord]:
        """Flattens all polygons into (ring, is_outer) records in source order."""
        records: List[RingRecord] = []
        for p_idx, polygon in enumerate(self.polygons):
            for r_idx, ring in enumerate(polygon):
                records.append(
                    RingRecord(
                        country=self.name,
                        ring=ring,
                        is_outer=(r_idx == 0),
                        polygon_index=p_idx,
                        ring_index=r_idx,
                    )
                )
        return records

    @property
    def ring_count(self) -> int:
        return sum(len(polygon) for polygon in self.polygons)

    @classmethod
    def from_geojson(cls, feature: Mapping[str, Any]) -> Optional[Feature]:
        """
        Builds a Feature from a GeoJSON feature mapping.

        Returns None for features without a Polygon or MultiPolygon geometry.
        """
        properties = feature.get("properties") or {}
        name = properties.get("name") or UNKNOWN_NAME

        geometry = feature.get("geometry") or {}
        geom_type = geometry.get("type")
        coordinates = geometry.get("coordinates") or []

        if geom_type == POLYGON:
            raw_polygons: Sequence = [coordinates]
        elif geom_type == MULTI_POLYGON:
            raw_polygons = coordinates
        else:
            logger.warning(f"Skipping feature '{name}': unsupported geometry type {geom_type!r}.")
            return None

        polygons = tuple(
            tuple(as_ring(ring) for ring in polygon)
            for polygon in raw_polygons
        )
        return cls(name=name, polygons=polygons)


def records_from_features(features: Sequence[Feature]) -> List[RingRecord]:
    """All ring records of all features, in dataset order."""
    records: List[RingRecord] = []
    for feature in features:
        records.extend(feature.rings())
    return records


def count_by_role(records: Sequence[RingRecord]) -> Dict[str, int]:
    outer = sum(1 for r in records if r.is_outer)
    return {"outer": outer, "inner": len(records) - outer}
