"""Core rendering module.

Components:
    tuples: Points and vectors with approximate equality
    colors: RGB colors and the sky gradient
    matrix: Dense matrices with inversion and fluent transform composition
    transformations: Translation, scaling, rotation and shearing builders
    ray: Python-scope rays
    config: Render and camera configuration
    vecmath: Vector helpers for Taichi functions
    sampling: Seedable per-pixel random streams
    integrator: Path tracing of single rays
    renderer: The render loop

Only the modules without Taichi fields are imported here. Import
``sampling``, ``integrator`` and ``renderer`` directly once Taichi is
initialised.
"""

from .colors import BLACK, WHITE, Color
from .config import CameraSettings, RenderConfig
from .matrix import Matrix
from .ray import Ray
from .transformations import Axis, rotation, scaling, shearing, translation
from .tuples import EPSILON, ORIGIN, Point, Vector

__all__ = [
    "EPSILON",
    "ORIGIN",
    "Point",
    "Vector",
    "Color",
    "BLACK",
    "WHITE",
    "Matrix",
    "Axis",
    "translation",
    "scaling",
    "rotation",
    "shearing",
    "Ray",
    "RenderConfig",
    "CameraSettings",
]
