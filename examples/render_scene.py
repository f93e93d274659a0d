#!/usr/bin/env python3
"""Render an XML scene or the built-in Cornell box.

This script demonstrates end-to-end rendering with the Whitted raytracer:
it loads (or builds) a scene, frames it with a camera, renders the image
row by row, optionally across worker processes, and saves a PNG.

Usage:
    python -m examples.render_scene [options]

Options:
    --scene PATH        XML scene file (default: built-in Cornell box)
    --width WIDTH       Image width in pixels (default: 400)
    --height HEIGHT     Image height in pixels (default: 400)
    --tracer TYPE       "voxel" or "simple" (default: voxel)
    --workers N         Worker processes, 0 renders serially (default: 0)
    --output OUTPUT     Output file path (default: render.png)
    --dof N APERTURE FOCAL
                        Depth of field: N rays per pixel, aperture size, focal distance
    --grid INTERVAL     Overlay a grid every INTERVAL pixels
    --reference PATH    Print the RMSE against a reference PNG
    --preview           Show the image in a Matplotlib window
    --quiet             Suppress progress output

The camera for XML scenes looks from (0, 0, 1000) towards the origin with
a 200 x 200 view plane at distance 1000, the setup the bundled scenes are
modelled for.

Example:
    python -m examples.render_scene --scene examples/scenes/spheres.xml --workers 4
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render an XML scene or the Cornell box.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="XML scene file (default: built-in Cornell box)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=400,
        help="Image height in pixels (default: 400)",
    )
    parser.add_argument(
        "--tracer",
        choices=("voxel", "simple"),
        default="voxel",
        help="Intersection strategy (default: voxel)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=0,
        help="Worker processes, 0 renders serially (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path (default: render.png)",
    )
    parser.add_argument(
        "--dof",
        nargs=3,
        type=float,
        metavar=("RAYS", "APERTURE", "FOCAL"),
        default=None,
        help="Depth of field: rays per pixel, aperture size and focal distance",
    )
    parser.add_argument(
        "--grid",
        type=int,
        default=None,
        help="Overlay a grid line every GRID pixels",
    )
    parser.add_argument(
        "--reference",
        type=str,
        default=None,
        help="Reference PNG to compare the render against (prints the RMSE)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the rendered image in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_scene(
    scene_path: str | None = None,
    width: int = 400,
    height: int = 400,
    tracer_type: str = "voxel",
    workers: int = 0,
    output_path: str = "render.png",
    dof: tuple[float, float, float] | None = None,
    grid: int | None = None,
    reference_path: str | None = None,
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to a PNG file.

    Args:
        scene_path: XML scene file, or None for the Cornell box.
        width: Image width in pixels.
        height: Image height in pixels.
        tracer_type: "voxel" or "simple".
        workers: Worker processes; 0 renders in this process.
        output_path: Output file path (PNG).
        dof: Depth of field as (rays per pixel, aperture, focal distance).
        grid: Grid overlay interval in pixels, or None for no grid.
        reference_path: PNG to compare against; the RMSE is printed.
        preview: If True, show the result in a Matplotlib window.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.whitted.camera.pinhole import CameraBuilder
    from src.whitted.core.color import Color
    from src.whitted.core.config import RenderConfig
    from src.whitted.core.integrator import TracerType, create_tracer
    from src.whitted.core.ray import Point
    from src.whitted.core.renderer import Renderer
    from src.whitted.preview.display import show_preview
    from src.whitted.preview.export import compute_rmse, load_png, save_png
    from src.whitted.scene.cornell_box import create_cornell_box_scene
    from src.whitted.scene.xml_parser import load_scene

    if scene_path is None:
        if not quiet:
            print(f"Creating Cornell box scene ({width}x{height})...")
        scene, camera = create_cornell_box_scene(resolution=(width, height))
    else:
        if not quiet:
            print(f"Loading {scene_path} ({width}x{height})...")
        scene = load_scene(scene_path)
        camera = (
            CameraBuilder()
            .set_location(Point(0, 0, 1000))
            .look_at(Point(0, 0, 0))
            .set_vp_size(200 * width / height, 200)
            .set_vp_distance(1000)
            .set_resolution(width, height)
            .build()
        )

    if dof is not None:
        rays, aperture, focal_distance = dof
        camera = dataclasses.replace(
            camera, dof_rays=int(rays), aperture=aperture, focal_distance=focal_distance
        )

    config = RenderConfig(workers=workers)
    tracer = create_tracer(scene, TracerType(tracer_type), config)

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (done / total) * 100 if total > 0 else 0
            rows_per_sec = done / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {done}/{total} rows "
                f"({progress_pct:.1f}%) - {rows_per_sec:.1f} rows/s",
                end="",
                flush=True,
            )

    renderer = Renderer(camera, tracer, progress=progress_callback)
    target = renderer.render()
    if grid is not None:
        target.draw_grid(grid, Color(255, 255, 255))

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    save_png(target, str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if reference_path is not None:
        rmse = compute_rmse(target.to_image(), load_png(reference_path))
        print(f"RMSE vs {reference_path}: {rmse:.6f}")

    if preview:
        show_preview(target, title=f"{scene.name} - {width}x{height}")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # The camera's direction kernel is small; the CPU backend is enough
    ti.init(arch=ti.cpu)

    try:
        render_scene(
            scene_path=args.scene,
            width=args.width,
            height=args.height,
            tracer_type=args.tracer,
            workers=args.workers,
            output_path=args.output,
            dof=args.dof,
            grid=args.grid,
            reference_path=args.reference,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
