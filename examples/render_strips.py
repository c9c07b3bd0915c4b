#!/usr/bin/env python3
"""Render a scene in horizontal strips.

This script builds a small scene with the library API and renders it one
strip of rows at a time into a shared canvas, the way a render could be split
across several processes. Every strip uses the same seed, so the assembled
image matches a single full render.

Usage:
    python examples/render_strips.py [options]

Example:
    python examples/render_strips.py --height 120 --strips 4 --output strips.png
"""

import argparse
import math
import sys
import time

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Render a scene in horizontal strips.")
    parser.add_argument("--height", type=int, default=120, help="Image height in pixels (default: 120)")
    parser.add_argument("--strips", type=int, default=4, help="Number of strips (default: 4)")
    parser.add_argument("--samples", type=int, default=50, help="Rays per pixel (default: 50)")
    parser.add_argument("--seed", type=int, default=2024, help="Random seed (default: 2024)")
    parser.add_argument("--output", type=str, default="strips.png", help="Output file path")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    ti.init(arch=ti.cpu)

    from lightpath.camera.thin_lens import Camera
    from lightpath.core.colors import Color
    from lightpath.core.config import RenderConfig
    from lightpath.core.matrix import Matrix
    from lightpath.core.renderer import render_scene
    from lightpath.core.transformations import Axis
    from lightpath.core.tuples import Point
    from lightpath.materials.base import Dielectric, Lambertian, Metallic
    from lightpath.preview.canvas import Canvas
    from lightpath.preview.export import save_image
    from lightpath.scene.group import ObjectGroup
    from lightpath.scene.object import Object

    world = ObjectGroup(
        [
            Object.cube(Lambertian(Color(0.4, 0.4, 0.45))).with_transform(
                Matrix.identity(4).scale(20.0, 0.5, 20.0).translate(0.0, -1.5, 0.0)
            ),
            Object.cube(Metallic(Color(0.9, 0.9, 0.9), fuzz=0.0)).with_transform(
                Matrix.identity(4).rotate(Axis.Y, math.pi / 4.0).translate(-1.8, 0.0, 0.5)
            ),
            Object.sphere(Dielectric(1.5)),
            Object.sphere(Lambertian(Color(0.2, 0.3, 0.8))).with_transform(
                Matrix.identity(4).scale(0.6, 0.6, 0.6).translate(1.8, -0.4, -0.5)
            ),
        ]
    )

    full = RenderConfig(
        aspect_ratio=4.0 / 3.0,
        fov_radians=math.radians(60.0),
        image_height=args.height,
        rays_per_pixel=args.samples,
        seed=args.seed,
    )
    camera = Camera.look_at(
        Point(0.0, 1.5, -6.0), Point(0.0, 0.0, 0.0), full.aspect_ratio, full.fov_radians
    )
    canvas = Canvas(full.image_width, full.image_height)

    start_time = time.time()
    bounds = [round(i * args.height / args.strips) for i in range(args.strips + 1)]
    for start, end in zip(bounds, bounds[1:]):
        strip = RenderConfig(
            aspect_ratio=full.aspect_ratio,
            fov_radians=full.fov_radians,
            image_height=full.image_height,
            row_range=(start, end),
            rays_per_pixel=full.rays_per_pixel,
            seed=full.seed,
        )
        render_scene(world, camera, strip, canvas=canvas)
        print(f"  Rows {start}..{end} done")

    save_image(canvas, args.output)
    print(f"Saved to: {args.output} ({time.time() - start_time:.2f}s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
