"""
Application Initialization
==========================
Command-line entry point: loads a dataset, builds the globe and reports the
border classification. Optionally exports the scene or opens a preview.

Why is this file needed?
------------------------
It acts as the composition root. It:
1. Configures logging.
2. Instantiates the RegenerationCoordinator with the requested parameters.
3. Hands the finished state to the view layer for export or preview.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from globeborders.config import DEFAULT_DATASET_PATH, ExtrusionPolicy, GlobeParameters
from globeborders.controller.regeneration import RegenerationCoordinator
from globeborders.logging_config import setup_logging
from globeborders.model.io import APP_VERSION

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    defaults = GlobeParameters()
    parser = argparse.ArgumentParser(
        prog="globeborders",
        description="Extrude country polygons onto a globe and classify shared borders.",
    )
    parser.add_argument("dataset", nargs="?", default=DEFAULT_DATASET_PATH,
                        help="GeoJSON FeatureCollection of countries")
    parser.add_argument("--radius", type=float, default=defaults.radius)
    parser.add_argument("--height", type=float, default=defaults.extrusion_height,
                        help="extrusion height of the regions")
    parser.add_argument("--segments", type=int, default=defaults.tessellation_segments,
                        help="tessellation of the ocean/atmosphere spheres")
    parser.add_argument("--wrap-threshold", type=float, default=defaults.wrap_threshold_degrees,
                        help="longitude span (deg) above which a ring is a global-wrap artifact")
    parser.add_argument("--policy", choices=[p.value for p in ExtrusionPolicy],
                        default=defaults.extrusion_policy.value)
    parser.add_argument("--export", metavar="FILE.vtm", help="write the scene to a VTK multiblock file")
    parser.add_argument("--show", action="store_true", help="open an interactive preview")
    parser.add_argument("--shared-only", action="store_true", help="draw only shared internal borders")
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--quiet", action="store_true", help="console shows warnings and errors only")
    parser.add_argument("--log-file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(
        level=logging.DEBUG if args.debug else logging.INFO,
        log_file=args.log_file,
        quiet=args.quiet,
    )

    # 2. Parameters
    try:
        params = GlobeParameters(
            radius=args.radius,
            extrusion_height=args.height,
            tessellation_segments=args.segments,
            wrap_threshold_degrees=args.wrap_threshold,
            extrusion_policy=ExtrusionPolicy(args.policy),
        )
        params.validate()
    except ValueError as e:
        logger.error(f"Invalid parameters: {e}")
        return 2

    # 3. Build
    coordinator = RegenerationCoordinator(params)
    coordinator.load_dataset(args.dataset)

    for name, value in coordinator.summary().items():
        print(f"{name:>18}: {value}")

    # 4. Output (the view layer is only imported when needed)
    if args.export or args.show:
        from globeborders.view.scene import build_scene, export_scene, show_scene

        if args.export:
            export_scene(build_scene(coordinator, shared_only=args.shared_only), args.export)
        if args.show:
            show_scene(coordinator, shared_only=args.shared_only)

    return 0


if __name__ == "__main__":
    sys.exit(main())
