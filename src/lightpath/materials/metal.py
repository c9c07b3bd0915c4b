"""Metallic (specular reflective) scattering.

The incoming direction is mirrored about the surface normal:

    R = I - 2(I . N)N

then perturbed by ``fuzz`` times a random point in the unit ball. A fuzz of
0 gives a perfect mirror; larger values blur reflections. The material
always scatters, even when the perturbation pushes the ray below the surface.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lightpath.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, direction = scatter_metal(
    >>> #     albedo, fuzz, stream, incident_dir, normal
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from lightpath.core.sampling import random_in_unit_sphere
from lightpath.core.vecmath import reflect
from lightpath.materials.base import check_fuzz

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    stream: ti.i32,
    incident_direction: vec3,
    normal: vec3,
):
    """Scatter off a metallic surface.

    Args:
        albedo: The reflective color.
        fuzz: Perturbation radius in [0, 1].
        stream: Random stream to draw from.
        incident_direction: The incoming ray direction (any length).
        normal: Unit outward surface normal.

    Returns:
        A tuple of (did_scatter, attenuation, direction); ``did_scatter`` is
        always 1 and the attenuation is the albedo.
    """
    reflected = reflect(tm.normalize(incident_direction), normal)
    direction = reflected + fuzz * random_in_unit_sphere(stream)
    return 1, albedo, direction


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of metallic materials in the scene; one per object at most
MAX_METAL_MATERIALS = 1024

metal_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_METAL_MATERIALS)
metal_fuzz = ti.field(dtype=ti.f32, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    """Forget all registered metallic materials."""
    num_metal_materials[None] = 0


def add_metal_material(albedo: tuple[float, float, float], fuzz: float = 0.0) -> int:
    """Register a metallic material.

    Args:
        albedo: The RGB reflective color.
        fuzz: Perturbation radius in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        ValueError: If ``fuzz`` is outside [0, 1].
        RuntimeError: If the maximum number of materials is exceeded.
    """
    check_fuzz(fuzz)

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded")

    metal_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    metal_fuzz[idx] = fuzz
    num_metal_materials[None] = idx + 1
    return idx


def get_metal_material_count() -> int:
    return int(num_metal_materials[None])


@ti.func
def scatter_metal_by_id(
    material_idx: ti.i32,
    stream: ti.i32,
    incident_direction: vec3,
    normal: vec3,
):
    """Scatter using the registered material at ``material_idx``."""
    return scatter_metal(
        metal_albedos[material_idx],
        metal_fuzz[material_idx],
        stream,
        incident_direction,
        normal,
    )
