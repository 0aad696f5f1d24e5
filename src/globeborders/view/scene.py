"""
Scene Assembly (PyVista)
Converts core output into PyVista datasets for preview and export.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

import numpy as np
import pyvista as pv

from globeborders.controller.borders import BorderSegment
from globeborders.model.mesh import Mesh

if TYPE_CHECKING:
    from globeborders.controller.regeneration import GlobeShell, RegenerationCoordinator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineStyle:
    color: int
    opacity: float


EXTERNAL_BORDER_STYLE = LineStyle(color=0x00FFFF, opacity=0.8)
INTERNAL_BORDER_STYLE = LineStyle(color=0xFFAA00, opacity=0.9)
HIGHLIGHT_BORDER_STYLE = LineStyle(color=0xFFCC66, opacity=1.0)
DIMMED_BORDER_STYLE = LineStyle(color=0xFFAA00, opacity=0.15)
OCEAN_COLOR = 0x020408


def hex_to_rgb(color: int) -> tuple:
    return ((color >> 16) & 0xFF) / 255.0, ((color >> 8) & 0xFF) / 255.0, (color & 0xFF) / 255.0


def mesh_to_polydata(mesh: Mesh) -> pv.PolyData:
    """Triangle mesh -> PolyData with a 'Normals' point array."""
    if mesh.is_empty:
        return pv.PolyData()

    faces = np.hstack([
        np.full((mesh.n_triangles, 1), 3, dtype=np.int64),
        mesh.faces,
    ]).ravel()
    pd = pv.PolyData(mesh.vertices, faces)
    pd.point_data["Normals"] = mesh.normals
    return pd


def border_to_polydata(segment: BorderSegment) -> pv.PolyData:
    """Border segment -> PolyData with one closed polyline cell."""
    n = segment.n_points
    if n == 0:
        return pv.PolyData()

    ids = np.arange(n, dtype=np.int64)
    if segment.closed and n > 2:
        ids = np.append(ids, 0)
    pd = pv.PolyData(segment.points)
    pd.lines = np.hstack([[len(ids)], ids])
    pd.field_data["country"] = [segment.country]
    pd.field_data["shared"] = [int(segment.shared)]
    return pd


def shell_polydata(radius: float, segments: int) -> pv.PolyData:
    """A sphere with `segments` subdivisions in both directions."""
    resolution = max(3, int(segments))
    return pv.Sphere(radius=radius, theta_resolution=resolution, phi_resolution=resolution)


def _borders_block(segments: List[BorderSegment]) -> pv.MultiBlock:
    block = pv.MultiBlock()
    for i, segment in enumerate(segments):
        block.append(border_to_polydata(segment), f"{segment.country}-{i}")
    return block


def build_scene(
    coordinator: RegenerationCoordinator,
    show_internal: bool = True,
    shared_only: bool = False,
) -> pv.MultiBlock:
    """
    Assembles shells, regions and borders into a named MultiBlock.

    Empty region meshes are left out.
    """
    shell: GlobeShell = coordinator.shell
    scene = pv.MultiBlock()
    scene.append(shell_polydata(shell.ocean_radius, shell.segments), "ocean")
    scene.append(shell_polydata(shell.atmosphere_radius, shell.segments), "atmosphere")

    regions = pv.MultiBlock()
    for i, region in enumerate(coordinator.regions):
        if region.mesh.is_empty:
            continue
        regions.append(mesh_to_polydata(region.mesh), f"{region.country}-{i}")
    scene.append(regions, "regions")

    scene.append(_borders_block(coordinator.external_borders), "external_borders")
    scene.append(
        _borders_block(coordinator.visible_internal_borders(show_internal, shared_only)),
        "internal_borders",
    )

    logger.debug(f"Scene assembled with {regions.n_blocks} region meshes.")
    return scene


def export_scene(scene: pv.MultiBlock, filepath: str) -> None:
    """Writes the scene to a VTK multiblock file (.vtm)."""
    logger.info(f"Exporting scene to: {filepath}")
    scene.save(filepath)


def show_scene(
    coordinator: RegenerationCoordinator,
    shared_only: bool = False,
    hovered_country: Optional[str] = None,
) -> None:
    """Opens an interactive preview window."""
    plotter = pv.Plotter()
    shell = coordinator.shell
    plotter.add_mesh(shell_polydata(shell.ocean_radius, shell.segments), color=hex_to_rgb(OCEAN_COLOR))

    for region in coordinator.regions:
        if region.mesh.is_empty:
            continue
        material = region.material
        plotter.add_mesh(
            mesh_to_polydata(region.mesh),
            color=hex_to_rgb(material.color),
            opacity=material.opacity,
            pbr=True,
            metallic=material.metalness,
            roughness=material.roughness,
        )

    for segment in coordinator.external_borders:
        plotter.add_mesh(
            border_to_polydata(segment),
            color=hex_to_rgb(EXTERNAL_BORDER_STYLE.color),
            opacity=EXTERNAL_BORDER_STYLE.opacity,
        )

    highlight = coordinator.highlight(hovered_country)
    highlighted = set(id(s) for s in highlight.highlighted)
    dimmed = set(id(s) for s in highlight.dimmed)
    for segment in coordinator.visible_internal_borders(shared_only=shared_only):
        if id(segment) in highlighted:
            style = HIGHLIGHT_BORDER_STYLE
        elif id(segment) in dimmed:
            style = DIMMED_BORDER_STYLE
        else:
            style = INTERNAL_BORDER_STYLE
        plotter.add_mesh(border_to_polydata(segment), color=hex_to_rgb(style.color), opacity=style.opacity)

    plotter.show()
