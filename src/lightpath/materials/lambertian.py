"""Lambertian (ideal diffuse) scattering.

The scattered direction is the surface normal plus a random unit vector,
which distributes outgoing rays with a cos(theta) falloff around the normal.
When the random vector almost exactly cancels the normal the sum has no
usable direction, and the normal itself is used instead.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lightpath.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, direction = scatter_lambertian(albedo, stream, normal)
"""

import taichi as ti
import taichi.math as tm

from lightpath.core.sampling import random_unit_vector
from lightpath.core.vecmath import near_zero

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_lambertian(albedo: vec3, stream: ti.i32, normal: vec3):
    """Scatter off a diffuse surface.

    Args:
        albedo: The surface color.
        stream: Random stream to draw from.
        normal: Unit outward surface normal at the hit point.

    Returns:
        A tuple of (did_scatter, attenuation, direction). Diffuse surfaces
        always scatter and attenuate by their albedo.
    """
    direction = normal + random_unit_vector(stream)

    # Catch degenerate scatter direction
    if near_zero(direction):
        direction = normal

    return 1, albedo, direction


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambertian materials in the scene; one per object at most
MAX_LAMBERTIAN_MATERIALS = 1024

lambertian_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Forget all registered Lambertian materials."""
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Register a Lambertian material.

    Args:
        albedo: The RGB surface color.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )
    lambertian_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    return int(num_lambertian_materials[None])


@ti.func
def scatter_lambertian_by_id(material_idx: ti.i32, stream: ti.i32, normal: vec3):
    """Scatter using the registered material at ``material_idx``."""
    return scatter_lambertian(lambertian_albedos[material_idx], stream, normal)
