"""Command-line entry point.

Renders one of the demo scenes and writes the image to disk.

Usage:
    lightpath [options]

Example:
    lightpath --image-height 90 --rays-per-pixel 50 --seed 7 --output spheres.png
    lightpath --scene cubes --aspect-ratio 1 1 --rows 0 50 --output top.ppm
"""

import argparse
import sys
import time
from collections.abc import Sequence
from pathlib import Path

import taichi as ti

SCENES = ("spheres", "cubes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lightpath",
        description="Render a demo scene with a Monte Carlo path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    camera = parser.add_argument_group("camera settings")
    camera.add_argument(
        "--aspect-ratio",
        "--aspect_ratio",
        dest="aspect_ratio",
        type=float,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        default=[16.0, 9.0],
        help="Aspect ratio of the picture (default: 16 9)",
    )
    camera.add_argument(
        "--fov",
        type=float,
        default=90.0,
        metavar="DEGREES",
        help="Vertical field of view in degrees (default: 90)",
    )
    camera.add_argument(
        "--aperture",
        type=float,
        default=0.0,
        help="Lens radius for depth of field; 0 is a pinhole (default: 0)",
    )
    camera.add_argument(
        "--focus-distance",
        "--focus_distance",
        dest="focus_distance",
        type=float,
        default=None,
        help="Distance to the plane in focus (default: distance to the target)",
    )

    output = parser.add_argument_group("output settings")
    output.add_argument(
        "--image-height",
        "--image_height",
        dest="image_height",
        type=int,
        default=100,
        help="Output image height in pixels (default: 100)",
    )
    output.add_argument(
        "--rows",
        type=int,
        nargs=2,
        metavar=("START", "END"),
        default=None,
        help="Render only rows START <= y < END, counted from the bottom (default: all)",
    )
    output.add_argument(
        "--output",
        type=str,
        default="out.ppm",
        help="Output file; .ppm is written as plain PPM, other extensions via Pillow "
        "(default: out.ppm)",
    )

    quality = parser.add_argument_group("quality settings")
    quality.add_argument(
        "--rays-per-pixel",
        "--rays_per_pixel",
        dest="rays_per_pixel",
        type=int,
        default=200,
        help="Number of rays to cast per pixel (default: 200)",
    )
    quality.add_argument(
        "--max-scatter-depth",
        "--max_scatter_depth",
        dest="max_scatter_depth",
        type=int,
        default=30,
        help="Maximum number of ray bounces (default: 30)",
    )
    quality.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random streams (default: random)",
    )

    parser.add_argument(
        "--scene",
        choices=SCENES,
        default="spheres",
        help="Demo scene to render (default: spheres)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def render(args: argparse.Namespace) -> Path:
    """Render the scene selected by ``args`` and save it.

    Taichi must already be initialised.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from lightpath.camera.thin_lens import Camera
    from lightpath.core.config import CameraSettings, RenderConfig
    from lightpath.core.renderer import Renderer
    from lightpath.preview.export import save_image
    from lightpath.scene.demo import create_cube_scene, create_sphere_scene

    quiet = args.quiet
    config = RenderConfig.from_args(args)

    if args.scene == "cubes":
        world, settings = create_cube_scene()
    else:
        world, settings = create_sphere_scene()
    if args.focus_distance is not None:
        settings = CameraSettings(settings.lookfrom, settings.lookat, args.focus_distance)

    renderer = Renderer(world, Camera.from_settings(settings, config), config)

    if not quiet:
        row_start, row_end = config.rows
        print(
            f"Rendering '{args.scene}' at {config.image_width}x{config.image_height}, "
            f"rows {row_start}..{row_end}, {config.rays_per_pixel} rays per pixel..."
        )

    start_time = time.time()

    def progress_callback(rows_done: int, rows_total: int) -> None:
        if not quiet:
            print(f"\r  Rendering rows {rows_done}/{rows_total}", end="", flush=True)

    canvas = renderer.render(callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(args.output)
    save_image(canvas, output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Seed: {renderer.last_seed}")
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    arch = ti.gpu if args.arch == "gpu" else ti.cpu
    ti.init(arch=arch)
    if not args.quiet:
        print(f"Using {args.arch.upper()} backend")

    try:
        render(args)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
