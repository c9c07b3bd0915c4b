"""Material models.

Components:
    base: Material dataclasses (Lambertian, Metallic, Dielectric)
    lambertian: Diffuse scattering and its registry
    metal: Specular reflection with fuzz and its registry
    dielectric: Refraction with Schlick reflectance and its registry

The variant modules hold Taichi fields and are not imported here.
"""

from .base import Dielectric, Lambertian, Material, MaterialKind, Metallic, Scattered, default_material

__all__ = [
    "Material",
    "MaterialKind",
    "Lambertian",
    "Metallic",
    "Dielectric",
    "Scattered",
    "default_material",
]
