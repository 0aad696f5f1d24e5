"""
Configuration & Path Management
===============================
This module is the central registry for global parameters and data paths.

Why is this file needed?
------------------------
1. Parameters: Radius, extrusion height, tessellation and the border
   heuristics live in one validated dataclass that the regeneration
   coordinator owns. Changing any of them means a full rebuild.
2. Deployment: It resolves the data directory the same way in development
   and when the app is frozen (sys._MEIPASS).

Exports:
    GlobeParameters: Validated set of build parameters.
    ExtrusionPolicy: How the top ring of a region solid is placed.
    DATA_PATH (str): Absolute path to the data directory.
    DEFAULT_DATASET_PATH (str): Absolute path to the default country dataset.
"""
from __future__ import annotations

import dataclasses
import math
import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # config.py is in src/globeborders/
    project_root: Path = Path(__file__).parent.parent.parent
    return os.path.join(str(project_root), relative_path)


DATA_PATH: str = get_resource_path("data")
DEFAULT_DATASET_PATH: str = os.path.join(DATA_PATH, "countries.geo.json")

# Heuristics without a geometric derivation, kept as tunable defaults
DEFAULT_WRAP_THRESHOLD_DEGREES: float = 300.0
DEFAULT_KEY_PRECISION: int = 5

# Shells around the globe, relative to the radius
OCEAN_RADIUS_INSET: float = 0.02
ATMOSPHERE_RADIUS_OUTSET: float = 0.8


class ExtrusionPolicy(str, Enum):
    """Placement of the top ring of an extruded region."""
    RADIAL = "radial"                    # every vertex pushed out along its own radius
    CENTROID_NORMAL = "centroid-normal"  # whole ring translated along the centroid direction


@dataclass(frozen=True)
class GlobeParameters:
    """
    Global build parameters. Instances are immutable; use `replace` to derive
    a changed, validated copy.
    """
    radius: float = 3.4
    extrusion_height: float = 0.1
    tessellation_segments: int = 64
    wrap_threshold_degrees: float = DEFAULT_WRAP_THRESHOLD_DEGREES
    key_precision: int = DEFAULT_KEY_PRECISION
    border_offset: float = 0.1
    internal_border_ratio: float = 0.5
    extrusion_policy: ExtrusionPolicy = ExtrusionPolicy.RADIAL

    def validate(self) -> None:
        """Raises ValueError if any parameter is outside its valid range."""
        if not (math.isfinite(self.radius) and self.radius > 0.0):
            raise ValueError(f"radius must be finite and positive, got {self.radius}")
        if not (math.isfinite(self.extrusion_height) and self.extrusion_height >= 0.0):
            raise ValueError(f"extrusion_height must be finite and non-negative, got {self.extrusion_height}")
        segments = self.tessellation_segments
        if not math.isfinite(segments) or int(segments) != segments or segments < 1:
            raise ValueError(f"tessellation_segments must be a positive integer, got {segments}")
        if not 0.0 <= self.wrap_threshold_degrees <= 360.0:
            raise ValueError(f"wrap_threshold_degrees must lie in [0, 360], got {self.wrap_threshold_degrees}")
        if self.key_precision < 0:
            raise ValueError(f"key_precision must be non-negative, got {self.key_precision}")
        if not (math.isfinite(self.border_offset) and self.border_offset >= 0.0):
            raise ValueError(f"border_offset must be finite and non-negative, got {self.border_offset}")
        if not (math.isfinite(self.internal_border_ratio) and self.internal_border_ratio >= 0.0):
            raise ValueError(f"internal_border_ratio must be finite and non-negative, got {self.internal_border_ratio}")
        if not isinstance(self.extrusion_policy, ExtrusionPolicy):
            raise ValueError(f"Unknown extrusion policy: {self.extrusion_policy!r}")

    def replace(self, **changes) -> GlobeParameters:
        """Returns a validated copy with the given fields changed."""
        params = dataclasses.replace(self, **changes)
        params.validate()
        return params

    @property
    def internal_border_offset(self) -> float:
        return self.border_offset * self.internal_border_ratio

    @property
    def ocean_radius(self) -> float:
        return self.radius - OCEAN_RADIUS_INSET

    @property
    def atmosphere_radius(self) -> float:
        return self.radius + ATMOSPHERE_RADIUS_OUTSET
