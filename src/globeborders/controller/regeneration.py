"""
Regeneration Coordinator
========================
Owner of every piece of derived globe state: region meshes, border lines, the
border index and the shell description.

Why is this file needed?
------------------------
1. Consistency: Any parameter change (radius, extrusion height, tessellation,
   wrap threshold) discards all derived state and replays the whole pipeline
   from the cached rings. There is no incremental path, so a stale `shared`
   flag or an orphaned index entry cannot survive a rebuild.
2. Ownership: The border index and the region list belong to one coordinator
   instance that readers receive by reference. There are no module globals.

Classes:
    CoordinatorState: STABLE or REBUILDING.
    RegionMesh: The solid of one ring plus its external border.
    GlobeShell: Sizes of the ocean and atmosphere spheres.
    HighlightResult: Internal borders affected by hovering a country.
    RegenerationCoordinator: The pipeline and its queries.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from globeborders.config import ExtrusionPolicy, GlobeParameters
from globeborders.controller.borders import BorderIndex, BorderKind, BorderSegment, build_border
from globeborders.controller.extrusion import ExtrusionMeshBuilder
from globeborders.controller.triangulator import RingTriangulator
from globeborders.model.canonical import canonical_key
from globeborders.model.errors import DatasetUnavailableError
from globeborders.model.features import Feature, RingRecord, count_by_role, records_from_features
from globeborders.model.geometry_primitives import Ring
from globeborders.model.io import load_features, parse_features
from globeborders.model.materials import MaterialSettings
from globeborders.model.mesh import Mesh

logger = logging.getLogger(__name__)


class CoordinatorState(Enum):
    STABLE = "stable"
    REBUILDING = "rebuilding"


@dataclass
class RegionMesh:
    """Derived from one ring. Outer rings carry their external border."""
    country: str
    ring: Ring
    is_outer: bool
    mesh: Mesh
    border: Optional[BorderSegment] = None
    material: MaterialSettings = field(default_factory=MaterialSettings)

    def set_material(self, settings: MaterialSettings) -> None:
        self.material = settings


@dataclass(frozen=True)
class GlobeShell:
    """Spheres drawn around the regions. Only these use the tessellation."""
    ocean_radius: float
    atmosphere_radius: float
    segments: int

    @classmethod
    def from_parameters(cls, params: GlobeParameters) -> GlobeShell:
        return cls(
            ocean_radius=params.ocean_radius,
            atmosphere_radius=params.atmosphere_radius,
            segments=int(params.tessellation_segments),
        )


@dataclass
class HighlightResult:
    highlighted: List[BorderSegment] = field(default_factory=list)
    dimmed: List[BorderSegment] = field(default_factory=list)


class RegenerationCoordinator:
    def __init__(
        self,
        parameters: Optional[GlobeParameters] = None,
        triangulator: Optional[RingTriangulator] = None,
    ):
        self._parameters = parameters or GlobeParameters()
        self._parameters.validate()

        self._builder = ExtrusionMeshBuilder(
            triangulator=triangulator,
            policy=self._parameters.extrusion_policy,
        )
        self._state = CoordinatorState.STABLE
        self._records: tuple = ()
        self._regions: List[RegionMesh] = []
        self._index = BorderIndex()
        self._shell = GlobeShell.from_parameters(self._parameters)
        self._base_material = MaterialSettings()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def parameters(self) -> GlobeParameters:
        return self._parameters

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def records(self) -> tuple:
        """Cached ring records from the last ingestion. Read-only."""
        return self._records

    @property
    def regions(self) -> List[RegionMesh]:
        return list(self._regions)

    @property
    def border_index(self) -> BorderIndex:
        return self._index

    @property
    def shell(self) -> GlobeShell:
        return self._shell

    @property
    def base_material(self) -> MaterialSettings:
        return self._base_material

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------
    def ingest(self, features: Sequence[Feature]) -> bool:
        """
        Caches the rings of a complete feature collection and builds the globe.

        Replaces anything ingested before.
        """
        self._records = tuple(records_from_features(features))
        roles = count_by_role(self._records)
        logger.info(
            f"Ingested {len(features)} features with {sum(f.ring_count for f in features)} rings "
            f"({roles['outer']} outer, {roles['inner']} inner)."
        )
        return self._regenerate()

    def ingest_collection(self, collection: Mapping[str, Any]) -> bool:
        """Ingests an already deserialized GeoJSON FeatureCollection."""
        return self.ingest(parse_features(collection))

    def load_dataset(self, filepath: str) -> bool:
        """
        Reads a dataset file and ingests it.

        An unavailable dataset is not fatal: the globe is built with zero
        features and False is returned.
        """
        try:
            features = load_features(filepath)
        except DatasetUnavailableError as e:
            logger.error(f"Dataset unavailable, building an empty globe: {e}")
            self.ingest([])
            return False
        return self.ingest(features)

    # ------------------------------------------------------------------
    # Rebuild
    # ------------------------------------------------------------------
    def rebuild(
        self,
        radius: Optional[float] = None,
        extrusion_height: Optional[float] = None,
        tessellation_segments: Optional[int] = None,
        wrap_threshold: Optional[float] = None,
        extrusion_policy: Optional[ExtrusionPolicy] = None,
    ) -> bool:
        """
        Applies new parameters and regenerates everything from the cached rings.

        Invalid parameters raise ValueError before any state is touched.

        Returns:
            True if the rebuild completed; False if it failed internally, in
            which case meshes, borders and the index are left empty.
        """
        changes: Dict[str, Any] = {}
        if radius is not None:
            changes["radius"] = float(radius)
        if extrusion_height is not None:
            changes["extrusion_height"] = float(extrusion_height)
        if tessellation_segments is not None:
            changes["tessellation_segments"] = tessellation_segments
        if wrap_threshold is not None:
            changes["wrap_threshold_degrees"] = float(wrap_threshold)
        if extrusion_policy is not None:
            changes["extrusion_policy"] = ExtrusionPolicy(extrusion_policy)

        self._parameters = self._parameters.replace(**changes)
        self._builder.policy = self._parameters.extrusion_policy
        logger.info(
            f"Rebuilding at radius={self._parameters.radius}, "
            f"height={self._parameters.extrusion_height}, "
            f"segments={self._parameters.tessellation_segments}."
        )
        return self._regenerate()

    def _regenerate(self) -> bool:
        params = self._parameters
        self._state = CoordinatorState.REBUILDING
        try:
            # 1. Discard everything derived
            self._clear()

            # 2. Shells
            self._shell = GlobeShell.from_parameters(params)

            # 3. Replay every cached ring
            for record in self._records:
                self._add_region(record, params)

            # 4. One classification pass over the complete index
            self._index.classify(params.wrap_threshold_degrees)
        except Exception as e:
            logger.exception(f"Rebuild failed, derived state cleared: {e}")
            self._clear()
            return False
        finally:
            self._state = CoordinatorState.STABLE

        empty = sum(1 for r in self._regions if r.mesh.is_empty)
        logger.info(
            f"Built {len(self._regions)} regions ({empty} empty), "
            f"{len(self._index)} internal border keys."
        )
        return True

    def _clear(self) -> None:
        self._regions = []
        self._index.clear()

    def _add_region(self, record: RingRecord, params: GlobeParameters) -> None:
        mesh = self._builder.build(record.ring, params.radius, params.extrusion_height)
        if mesh.is_empty:
            logger.debug(
                f"{record.country}: ring {record.ring_index} of polygon "
                f"{record.polygon_index} produced an empty mesh."
            )
        region = RegionMesh(
            country=record.country,
            ring=record.ring,
            is_outer=record.is_outer,
            mesh=mesh,
            material=self._base_material,
        )

        if record.is_outer:
            region.border = build_border(
                record.ring, params.radius, params.border_offset,
                kind=BorderKind.EXTERNAL, country=record.country,
            )
        else:
            key = canonical_key(record.ring, params.key_precision)
            segment = build_border(
                record.ring, params.radius, params.internal_border_offset,
                kind=BorderKind.INTERNAL, country=record.country, key=key,
            )
            self._index.register(key, segment)

        self._regions.append(region)

    # ------------------------------------------------------------------
    # Material
    # ------------------------------------------------------------------
    def set_region_material(self, settings: MaterialSettings) -> None:
        """Applies the settings to the base material and every region."""
        self._base_material = settings
        for region in self._regions:
            region.set_material(settings)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def internal_borders(self) -> List[BorderSegment]:
        return self._index.all_segments()

    @property
    def external_borders(self) -> List[BorderSegment]:
        return [r.border for r in self._regions if r.border is not None]

    def regions_for_country(self, country: str) -> List[RegionMesh]:
        return [r for r in self._regions if r.country == country]

    def borders_for_country(self, country: str, kind: Optional[BorderKind] = None) -> List[BorderSegment]:
        """All border segments owned by a country, optionally of one kind."""
        segments = self.external_borders + self.internal_borders
        return [
            s for s in segments
            if s.country == country and (kind is None or s.kind == kind)
        ]

    @staticmethod
    def is_shared(segment: BorderSegment) -> bool:
        return segment.shared

    def visible_internal_borders(self, show_internal: bool = True, shared_only: bool = False) -> List[BorderSegment]:
        """Internal borders that a view should draw under the given toggles."""
        if not show_internal:
            return []
        if shared_only:
            return self._index.shared_segments()
        return self.internal_borders

    def highlight(self, country: Optional[str]) -> HighlightResult:
        """
        Splits internal borders into those of the hovered country and the rest.

        With no country hovered nothing is highlighted or dimmed.
        """
        result = HighlightResult()
        if country is None:
            return result
        for segment in self.internal_borders:
            if segment.country == country:
                result.highlighted.append(segment)
            else:
                result.dimmed.append(segment)
        return result

    def summary(self) -> Dict[str, int]:
        candidates = self._index.candidates()
        return {
            "rings": len(self._records),
            "regions": len(self._regions),
            "empty_meshes": sum(1 for r in self._regions if r.mesh.is_empty),
            "external_borders": len(self.external_borders),
            "internal_borders": len(self.internal_borders),
            "border_keys": len(self._index),
            "candidate_keys": len(candidates),
            "shared_keys": sum(1 for v in candidates.values() if v and v[0].shared),
        }
