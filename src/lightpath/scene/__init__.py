"""Scene description.

Components:
    object: A shape with a material and a transform
    group: Flat, insertion-ordered collection of objects
    intersection: Intersections and hit selection
    storage: Taichi field storage for kernels (import after ``ti.init``)
    demo: Ready-made demo scenes
"""

from .group import ObjectGroup
from .intersection import Intersection, hit
from .object import Object

__all__ = ["Object", "ObjectGroup", "Intersection", "hit"]
