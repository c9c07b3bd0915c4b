"""Ready-made demo scenes.

Each factory returns the world as an ``ObjectGroup`` together with the
``CameraSettings`` it is meant to be viewed from. The optics (field of view,
aperture, image size) come from the ``RenderConfig`` at render time.

Example:
    >>> from lightpath.scene.demo import create_sphere_scene
    >>> world, settings = create_sphere_scene()
    >>> len(world)
    4
"""

import math

from lightpath.core.colors import Color
from lightpath.core.config import CameraSettings
from lightpath.core.matrix import Matrix
from lightpath.core.transformations import Axis
from lightpath.core.tuples import Point
from lightpath.materials.base import Dielectric, Lambertian, Metallic
from lightpath.scene.group import ObjectGroup
from lightpath.scene.object import Object

# Radius of the sphere that stands in for the ground plane
GROUND_RADIUS = 100.0

# Index of refraction used for the glass objects
GLASS_INDEX = 1.52


def create_sphere_scene() -> tuple[ObjectGroup, CameraSettings]:
    """Three unit spheres resting on a very large ground sphere.

    From left to right: brushed metal, matte red and glass.
    """
    world = ObjectGroup()

    world.add(
        Object.sphere(Lambertian(Color(0.5, 0.6, 0.2))).with_transform(
            Matrix.identity(4)
            .scale(GROUND_RADIUS, GROUND_RADIUS, GROUND_RADIUS)
            .translate(0.0, -GROUND_RADIUS - 1.0, 0.0)
        )
    )
    world.add(
        Object.sphere(Metallic(Color(0.8, 0.8, 0.8), fuzz=0.2)).with_transform(
            Matrix.identity(4).translate(-2.1, 0.0, 0.0)
        )
    )
    world.add(Object.sphere(Lambertian(Color(0.7, 0.2, 0.2))))
    world.add(
        Object.sphere(Dielectric(GLASS_INDEX)).with_transform(
            Matrix.identity(4).translate(2.1, 0.0, 0.0)
        )
    )

    settings = CameraSettings(lookfrom=Point(0.0, 1.0, -5.0), lookat=Point(0.0, 0.0, 0.0))
    return world, settings


def create_cube_scene() -> tuple[ObjectGroup, CameraSettings]:
    """Glass cubes spread along the diagonal, turned at different angles."""
    world = ObjectGroup()

    world.add(Object.cube(Dielectric(GLASS_INDEX)))
    world.add(
        Object.cube(Dielectric(GLASS_INDEX)).with_transform(
            Matrix.identity(4).rotate(Axis.Y, math.pi / 6.0).translate(-3.0, -3.0, -3.0)
        )
    )
    world.add(
        Object.cube(Dielectric(GLASS_INDEX)).with_transform(
            Matrix.identity(4)
            .rotate(Axis.X, math.pi / 4.0)
            .rotate(Axis.Z, math.pi / 8.0)
            .translate(-6.0, -6.0, -6.0)
        )
    )
    world.add(
        Object.cube(Metallic(Color(0.9, 0.7, 0.3), fuzz=0.05)).with_transform(
            Matrix.identity(4).scale(0.5, 0.5, 0.5).translate(2.0, -1.0, -2.0)
        )
    )

    settings = CameraSettings(lookfrom=Point(2.0, 2.0, 2.0), lookat=Point(0.0, 0.0, 0.0))
    return world, settings
