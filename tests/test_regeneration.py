"""
Integration tests for the regeneration coordinator
"""

import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from globeborders.config import ExtrusionPolicy, GlobeParameters
from globeborders.controller.borders import BorderKind
from globeborders.controller.regeneration import CoordinatorState, RegenerationCoordinator
from globeborders.model.canonical import canonical_key
from globeborders.model.materials import MaterialSettings

OUTER_A = [[0, 0], [4, 0], [4, 4], [0, 4], [0, 0]]
OUTER_B = [[4, 0], [8, 0], [8, 4], [4, 4], [4, 0]]
OUTER_B2 = [[10, 0], [12, 0], [12, 2], [10, 2], [10, 0]]
SHARED_HOLE = [[1, 1], [2, 1], [2, 2], [1, 2], [1, 1]]
UNIQUE_HOLE = [[10.5, 0.5], [11, 0.5], [11, 1], [10.5, 1], [10.5, 0.5]]
WRAP_RING = [
    [-170, 10], [-5, 10], [5, 10], [170, 10],
    [170, -10], [5, -10], [-5, -10], [-170, -10], [-170, 10],
]


def polygon_feature(name, rings):
    return {
        "type": "Feature",
        "properties": {"name": name},
        "geometry": {"type": "Polygon", "coordinates": rings},
    }


def multipolygon_feature(name, polygons):
    return {
        "type": "Feature",
        "properties": {"name": name},
        "geometry": {"type": "MultiPolygon", "coordinates": polygons},
    }


def adjacent_collection():
    """Alpha and Beta both describe the same enclave, wound in opposite order."""
    return {
        "type": "FeatureCollection",
        "features": [
            polygon_feature("Alpha", [OUTER_A, SHARED_HOLE]),
            multipolygon_feature("Beta", [
                [OUTER_B, SHARED_HOLE[::-1]],
                [OUTER_B2, UNIQUE_HOLE],
            ]),
        ],
    }


def wrap_collection():
    return {
        "type": "FeatureCollection",
        "features": [
            polygon_feature("East", [OUTER_A, WRAP_RING]),
            polygon_feature("West", [OUTER_B, WRAP_RING[::-1]]),
        ],
    }


class TestEndToEnd(unittest.TestCase):
    """Test a full build over a small collection"""

    def setUp(self):
        self.coordinator = RegenerationCoordinator()
        self.assertTrue(self.coordinator.ingest_collection(adjacent_collection()))

    def test_counts(self):
        summary = self.coordinator.summary()
        self.assertEqual(summary["rings"], 6)
        self.assertEqual(summary["regions"], 6)
        self.assertEqual(summary["empty_meshes"], 0)
        self.assertEqual(summary["external_borders"], 3)
        self.assertEqual(summary["internal_borders"], 3)
        self.assertEqual(summary["border_keys"], 2)
        self.assertEqual(summary["candidate_keys"], 1)
        self.assertEqual(summary["shared_keys"], 1)

    def test_exactly_one_shared_key(self):
        index = self.coordinator.border_index
        shared_key = canonical_key(tuple(tuple(map(float, p)) for p in SHARED_HOLE))
        for key in index:
            segments = index.segments(key)
            if key == shared_key:
                self.assertEqual(len(segments), 2)
                self.assertEqual([s.country for s in segments], ["Alpha", "Beta"])
                self.assertTrue(all(self.coordinator.is_shared(s) for s in segments))
            else:
                self.assertEqual(len(segments), 1)
                self.assertFalse(segments[0].shared)

    def test_outer_regions_own_external_borders(self):
        for region in self.coordinator.regions:
            if region.is_outer:
                self.assertIsNotNone(region.border)
                self.assertEqual(region.border.kind, BorderKind.EXTERNAL)
            else:
                self.assertIsNone(region.border)

    def test_border_offsets(self):
        external = self.coordinator.external_borders[0]
        internal = self.coordinator.internal_borders[0]
        np.testing.assert_allclose(np.linalg.norm(external.points, axis=1), 3.5)
        np.testing.assert_allclose(np.linalg.norm(internal.points, axis=1), 3.45)

    def test_borders_for_country(self):
        self.assertEqual(len(self.coordinator.borders_for_country("Beta")), 4)
        internal = self.coordinator.borders_for_country("Beta", kind=BorderKind.INTERNAL)
        self.assertEqual(len(internal), 2)
        self.assertEqual(self.coordinator.borders_for_country("Nowhere"), [])
        self.assertEqual(len(self.coordinator.regions_for_country("Alpha")), 2)

    def test_visibility_filter(self):
        self.assertEqual(len(self.coordinator.visible_internal_borders()), 3)
        self.assertEqual(len(self.coordinator.visible_internal_borders(shared_only=True)), 2)
        self.assertEqual(self.coordinator.visible_internal_borders(show_internal=False), [])

    def test_highlight(self):
        result = self.coordinator.highlight("Alpha")
        self.assertEqual(len(result.highlighted), 1)
        self.assertEqual(len(result.dimmed), 2)
        none = self.coordinator.highlight(None)
        self.assertEqual((none.highlighted, none.dimmed), ([], []))


class TestRebuild(unittest.TestCase):
    """Test full regeneration under parameter changes"""

    def setUp(self):
        self.coordinator = RegenerationCoordinator(GlobeParameters(radius=3.4, extrusion_height=0.1))
        self.coordinator.ingest_collection(adjacent_collection())

    def test_rebuild_round_trip_is_deterministic(self):
        before = self.coordinator.border_index.snapshot()
        vertices_before = [r.mesh.vertices.copy() for r in self.coordinator.regions]

        self.assertTrue(self.coordinator.rebuild(radius=5.0, extrusion_height=0.2))
        self.assertEqual(self.coordinator.border_index.snapshot(), before)

        self.assertTrue(self.coordinator.rebuild(radius=3.4, extrusion_height=0.1))
        self.assertEqual(self.coordinator.border_index.snapshot(), before)
        for old, region in zip(vertices_before, self.coordinator.regions):
            np.testing.assert_array_equal(old, region.mesh.vertices)

    def test_rebuild_uses_new_radius(self):
        self.coordinator.rebuild(radius=5.0, extrusion_height=0.2)
        self.assertEqual(self.coordinator.parameters.radius, 5.0)
        internal = self.coordinator.internal_borders[0]
        np.testing.assert_allclose(np.linalg.norm(internal.points, axis=1), 5.05)
        top = self.coordinator.regions[0].mesh.vertices[4:]
        np.testing.assert_allclose(np.linalg.norm(top, axis=1), 5.2)

    def test_rebuild_replaces_segment_objects(self):
        old = self.coordinator.internal_borders
        self.coordinator.rebuild(extrusion_height=0.3)
        new = self.coordinator.internal_borders
        self.assertEqual(len(old), len(new))
        self.assertTrue(all(a is not b for a, b in zip(old, new)))
        self.assertEqual(len(self.coordinator.border_index), 2)

    def test_tessellation_only_changes_shell(self):
        before = self.coordinator.border_index.snapshot()
        self.coordinator.rebuild(tessellation_segments=16)
        self.assertEqual(self.coordinator.shell.segments, 16)
        self.assertAlmostEqual(self.coordinator.shell.ocean_radius, 3.38)
        self.assertAlmostEqual(self.coordinator.shell.atmosphere_radius, 4.2)
        self.assertEqual(self.coordinator.border_index.snapshot(), before)

    def test_policy_change(self):
        self.coordinator.rebuild(extrusion_policy=ExtrusionPolicy.CENTROID_NORMAL)
        mesh = self.coordinator.regions[0].mesh
        shift = mesh.vertices[4:] - mesh.vertices[:4]
        np.testing.assert_allclose(shift, np.repeat(shift[:1], 4, axis=0))

    def test_invalid_parameters_leave_state_untouched(self):
        before = self.coordinator.border_index.snapshot()
        for kwargs in ({"radius": -1.0}, {"extrusion_height": -0.1}, {"tessellation_segments": 0}):
            with self.assertRaises(ValueError):
                self.coordinator.rebuild(**kwargs)
        self.assertEqual(self.coordinator.parameters.radius, 3.4)
        self.assertEqual(self.coordinator.border_index.snapshot(), before)
        self.assertEqual(len(self.coordinator.regions), 6)

    def test_non_finite_parameters_raise_value_error(self):
        before = self.coordinator.border_index.snapshot()
        for kwargs in (
            {"radius": float("inf")},
            {"extrusion_height": float("nan")},
            {"tessellation_segments": float("inf")},
            {"tessellation_segments": float("nan")},
        ):
            with self.assertRaises(ValueError):
                self.coordinator.rebuild(**kwargs)
        self.assertEqual(self.coordinator.parameters, GlobeParameters(radius=3.4, extrusion_height=0.1))
        self.assertEqual(self.coordinator.border_index.snapshot(), before)

    def test_internal_failure_leaves_index_cleared(self):
        with patch.object(self.coordinator._builder, "build", side_effect=RuntimeError("boom")):
            with self.assertLogs("globeborders.controller.regeneration", level="ERROR"):
                self.assertFalse(self.coordinator.rebuild(radius=4.0))
        self.assertEqual(self.coordinator.state, CoordinatorState.STABLE)
        self.assertEqual(len(self.coordinator.border_index), 0)
        self.assertEqual(self.coordinator.regions, [])

        # cached rings survive and a later rebuild recovers
        self.assertTrue(self.coordinator.rebuild(radius=3.4))
        self.assertEqual(self.coordinator.summary()["shared_keys"], 1)

    def test_state_is_rebuilding_during_replay(self):
        seen = []
        original = self.coordinator._builder.build

        def spy(*args, **kwargs):
            seen.append(self.coordinator.state)
            return original(*args, **kwargs)

        with patch.object(self.coordinator._builder, "build", side_effect=spy):
            self.coordinator.rebuild(radius=4.0)
        self.assertTrue(seen)
        self.assertTrue(all(s == CoordinatorState.REBUILDING for s in seen))
        self.assertEqual(self.coordinator.state, CoordinatorState.STABLE)


class TestWrapExclusion(unittest.TestCase):
    """Test that global-wrap rings are never shared"""

    def test_wrap_ring_not_shared(self):
        coordinator = RegenerationCoordinator()
        coordinator.ingest_collection(wrap_collection())
        candidates = coordinator.border_index.candidates()
        self.assertEqual(len(candidates), 1)
        self.assertFalse(any(s.shared for s in coordinator.internal_borders))

    def test_raising_threshold_rebuilds_classification(self):
        coordinator = RegenerationCoordinator()
        coordinator.ingest_collection(wrap_collection())
        coordinator.rebuild(wrap_threshold=355.0)
        self.assertTrue(all(s.shared for s in coordinator.internal_borders))
        coordinator.rebuild(wrap_threshold=300.0)
        self.assertFalse(any(s.shared for s in coordinator.internal_borders))


class TestDatasetLoading(unittest.TestCase):
    """Test file ingestion and the empty-globe fallback"""

    def test_empty_mesh_is_reported_with_its_position(self):
        collection = {
            "type": "FeatureCollection",
            "features": [
                multipolygon_feature("Beta", [
                    [OUTER_B],
                    [OUTER_B2, [[10.5, 0.5], [11, 0.5], [10.5, 0.5]]],
                ]),
            ],
        }
        coordinator = RegenerationCoordinator()
        with self.assertLogs("globeborders.controller.regeneration", level="DEBUG") as logs:
            self.assertTrue(coordinator.ingest_collection(collection))
        output = "\n".join(logs.output)
        self.assertIn("with 3 rings (2 outer, 1 inner)", output)
        self.assertIn("Beta: ring 1 of polygon 1 produced an empty mesh.", output)
        self.assertEqual(coordinator.summary()["empty_meshes"], 1)

    def test_missing_dataset_builds_empty_globe(self):
        coordinator = RegenerationCoordinator()
        coordinator.ingest_collection(adjacent_collection())
        self.assertFalse(coordinator.load_dataset("/nonexistent/countries.geo.json"))
        summary = coordinator.summary()
        self.assertEqual(summary["rings"], 0)
        self.assertEqual(summary["regions"], 0)
        self.assertEqual(len(coordinator.border_index), 0)

    def test_load_dataset_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "countries.geo.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump(adjacent_collection(), f)
            coordinator = RegenerationCoordinator()
            self.assertTrue(coordinator.load_dataset(path))
        self.assertEqual(coordinator.summary()["shared_keys"], 1)

    def test_empty_collection(self):
        coordinator = RegenerationCoordinator()
        self.assertTrue(coordinator.ingest_collection({"type": "FeatureCollection", "features": []}))
        self.assertEqual(coordinator.regions, [])


class TestMaterial(unittest.TestCase):
    """Test the typed material setter"""

    def test_material_applies_and_survives_rebuild(self):
        coordinator = RegenerationCoordinator()
        coordinator.ingest_collection(adjacent_collection())
        settings = (
            MaterialSettings()
            .with_opacity(0.5)
            .with_roughness(0.3)
            .with_metalness(0.4)
            .with_emissive(0x00FFCC, 0.5)
        )
        coordinator.set_region_material(settings)
        self.assertTrue(all(r.material == settings for r in coordinator.regions))

        coordinator.rebuild(radius=4.0)
        self.assertTrue(all(r.material == settings for r in coordinator.regions))
        self.assertEqual(coordinator.base_material.opacity, 0.5)

    def test_invalid_material_rejected(self):
        with self.assertRaises(ValueError):
            MaterialSettings(opacity=1.5)
        with self.assertRaises(ValueError):
            MaterialSettings().with_color(0x1000000)


if __name__ == '__main__':
    unittest.main()
