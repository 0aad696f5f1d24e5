"""
Region Material Settings
Explicit, typed material configuration for extruded regions.
"""
from __future__ import annotations

from dataclasses import dataclass, replace


def _check_unit(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must lie in [0, 1], got {value}")


def _check_color(name: str, value: int) -> None:
    if not 0 <= value <= 0xFFFFFF:
        raise ValueError(f"{name} must be a 24-bit RGB integer, got {value!r}")


@dataclass(frozen=True)
class MaterialSettings:
    """Physical surface parameters shared by region meshes."""
    color: int = 0x00FFCC
    opacity: float = 1.0
    roughness: float = 0.0
    metalness: float = 0.0
    emissive: int = 0x000000
    emissive_intensity: float = 0.0

    def __post_init__(self) -> None:
        _check_color("color", self.color)
        _check_color("emissive", self.emissive)
        _check_unit("opacity", self.opacity)
        _check_unit("roughness", self.roughness)
        _check_unit("metalness", self.metalness)
        if self.emissive_intensity < 0.0:
            raise ValueError(f"emissive_intensity must be non-negative, got {self.emissive_intensity}")

    def with_color(self, color: int) -> MaterialSettings:
        return replace(self, color=color)

    def with_opacity(self, opacity: float) -> MaterialSettings:
        return replace(self, opacity=opacity)

    def with_roughness(self, roughness: float) -> MaterialSettings:
        return replace(self, roughness=roughness)

    def with_metalness(self, metalness: float) -> MaterialSettings:
        return replace(self, metalness=metalness)

    def with_emissive(self, emissive: int, intensity: float) -> MaterialSettings:
        return replace(self, emissive=emissive, emissive_intensity=intensity)
