"""Render and camera configuration.

``RenderConfig`` is the read-only bundle of settings the render loop consumes.
It validates its values on construction; the rendering code itself uses them
as given.

Example:
    >>> from lightpath.core.config import RenderConfig
    >>> config = RenderConfig(aspect_ratio=1.0, image_height=64, rays_per_pixel=16)
    >>> config.image_width
    64
    >>> config.rows
    (0, 64)
"""

from __future__ import annotations

import argparse
import math
from dataclasses import dataclass

from lightpath.core.tuples import Point

# Upper bound on width * height; one random stream is reserved per pixel
MAX_IMAGE_PIXELS = 2048 * 2048


@dataclass(frozen=True)
class RenderConfig:
    """Settings for one render.

    Attributes:
        aspect_ratio: Image width divided by height.
        fov_radians: Vertical field of view, in (0, pi).
        aperture_radius: Lens radius for depth of field; 0 is a pinhole.
        image_height: Image height in pixels.
        row_range: Half-open (start, end) range of rows to render, counted
            from the bottom of the image. None renders every row.
        rays_per_pixel: Jittered samples averaged per pixel.
        max_scatter_depth: Number of bounces after which a path is black.
        seed: Seed for the per-pixel random streams. None picks one at random.
    """

    aspect_ratio: float = 16.0 / 9.0
    fov_radians: float = math.pi / 2.0
    aperture_radius: float = 0.0
    image_height: int = 100
    row_range: tuple[int, int] | None = None
    rays_per_pixel: int = 200
    max_scatter_depth: int = 30
    seed: int | None = None

    def __post_init__(self) -> None:
        if not self.aspect_ratio > 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if not 0.0 < self.fov_radians < math.pi:
            raise ValueError(f"fov_radians must lie in (0, pi), got {self.fov_radians}")
        if self.aperture_radius < 0.0:
            raise ValueError(f"aperture_radius must be >= 0, got {self.aperture_radius}")
        if self.image_height < 1:
            raise ValueError(f"image_height must be >= 1, got {self.image_height}")
        if self.image_width < 1:
            raise ValueError(
                f"aspect_ratio {self.aspect_ratio} with image_height {self.image_height} "
                "gives an image with no columns"
            )
        if self.image_width * self.image_height > MAX_IMAGE_PIXELS:
            raise ValueError(
                f"Image of {self.image_width}x{self.image_height} pixels exceeds the "
                f"maximum of {MAX_IMAGE_PIXELS} pixels"
            )
        if self.rays_per_pixel < 1:
            raise ValueError(f"rays_per_pixel must be >= 1, got {self.rays_per_pixel}")
        if self.max_scatter_depth < 0:
            raise ValueError(f"max_scatter_depth must be >= 0, got {self.max_scatter_depth}")
        if self.row_range is not None:
            start, end = self.row_range
            if not 0 <= start <= end <= self.image_height:
                raise ValueError(
                    f"row_range {self.row_range} must satisfy "
                    f"0 <= start <= end <= image_height ({self.image_height})"
                )

    @property
    def image_width(self) -> int:
        return int(self.aspect_ratio * self.image_height)

    @property
    def rows(self) -> tuple[int, int]:
        """The resolved half-open row range."""
        if self.row_range is None:
            return (0, self.image_height)
        return (int(self.row_range[0]), int(self.row_range[1]))

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> RenderConfig:
        """Build a config from the command-line namespace produced by ``lightpath.cli``."""
        width, height = args.aspect_ratio
        if height <= 0:
            raise ValueError(f"Aspect ratio height must be positive, got {height}")
        row_range = tuple(args.rows) if args.rows is not None else None
        return cls(
            aspect_ratio=width / height,
            fov_radians=math.radians(args.fov),
            aperture_radius=args.aperture,
            image_height=args.image_height,
            row_range=row_range,
            rays_per_pixel=args.rays_per_pixel,
            max_scatter_depth=args.max_scatter_depth,
            seed=args.seed,
        )


@dataclass(frozen=True)
class CameraSettings:
    """Where the camera stands and what it looks at.

    Attributes:
        lookfrom: Camera position.
        lookat: Point at the centre of the view.
        focus_distance: Distance to the plane in focus. None uses
            ``|lookfrom - lookat|``.
    """

    lookfrom: Point
    lookat: Point
    focus_distance: float | None = None
