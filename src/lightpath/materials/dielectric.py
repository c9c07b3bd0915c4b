"""Dielectric (glass/water) scattering.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for the Fresnel reflectance
    - Total internal reflection when sin(theta_t) would exceed 1

Whether the ray is entering or leaving the material is read from the sign
of ``dot(direction, outward_normal)``. The ray then either reflects (always
under total internal reflection, otherwise with the Schlick probability) or
refracts. Dielectrics never absorb, so the attenuation is white.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lightpath.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, direction = scatter_dielectric(
    >>> #     refractive_index, stream, incident_dir, normal
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from lightpath.core.sampling import random_f32
from lightpath.core.vecmath import reflect, refract, schlick_reflectance
from lightpath.materials.base import check_refractive_index

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def _orient(refractive_index: ti.f32, unit_direction: vec3, normal: vec3):
    """Facing normal and index ratio for a ray meeting the surface.

    Returns:
        A tuple (facing_normal, ratio). Entering rays see the outward normal
        and ratio 1/n; leaving rays see the flipped normal and ratio n.
    """
    facing_normal = normal
    ratio = 1.0 / refractive_index
    if tm.dot(unit_direction, normal) >= 0.0:
        facing_normal = -normal
        ratio = refractive_index
    return facing_normal, ratio


@ti.func
def total_internal_reflection(refractive_index: ti.f32, incident_direction: vec3, normal: vec3) -> ti.i32:
    """1 if the ray cannot refract out of the surface.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: Unit outward surface normal.
    """
    unit_direction = tm.normalize(incident_direction)
    facing_normal, ratio = _orient(refractive_index, unit_direction, normal)
    cos_theta = tm.min(-tm.dot(unit_direction, facing_normal), 1.0)
    sin_theta = tm.sqrt(tm.max(1.0 - cos_theta * cos_theta, 0.0))
    return 1 if ratio * sin_theta > 1.0 else 0


@ti.func
def dielectric_reflectance(refractive_index: ti.f32, incident_direction: vec3, normal: vec3) -> ti.f32:
    """Schlick reflectance for a ray meeting the surface.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: Unit outward surface normal.
    """
    unit_direction = tm.normalize(incident_direction)
    facing_normal, ratio = _orient(refractive_index, unit_direction, normal)
    cos_theta = tm.min(-tm.dot(unit_direction, facing_normal), 1.0)
    return schlick_reflectance(cos_theta, ratio)


@ti.func
def scatter_dielectric(
    refractive_index: ti.f32,
    stream: ti.i32,
    incident_direction: vec3,
    normal: vec3,
):
    """Reflect or refract at a dielectric surface.

    Args:
        refractive_index: Index of refraction of the material.
        stream: Random stream to draw from.
        incident_direction: The incoming ray direction (any length).
        normal: Unit outward surface normal.

    Returns:
        A tuple of (did_scatter, attenuation, direction); ``did_scatter`` is
        always 1 and the attenuation is white.
    """
    attenuation = vec3(1.0, 1.0, 1.0)

    unit_direction = tm.normalize(incident_direction)
    facing_normal, ratio = _orient(refractive_index, unit_direction, normal)

    cos_theta = tm.min(-tm.dot(unit_direction, facing_normal), 1.0)
    sin_theta = tm.sqrt(tm.max(1.0 - cos_theta * cos_theta, 0.0))
    cannot_refract = ratio * sin_theta > 1.0

    # One draw per event keeps stream consumption independent of the branch
    draw = random_f32(stream)

    direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract or draw < schlick_reflectance(cos_theta, ratio):
        direction = reflect(unit_direction, facing_normal)
    else:
        direction = refract(unit_direction, facing_normal, ratio)

    return 1, attenuation, direction


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene; one per object at most
MAX_DIELECTRIC_MATERIALS = 1024

dielectric_indices = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Forget all registered dielectric materials."""
    num_dielectric_materials[None] = 0


def add_dielectric_material(refractive_index: float = 1.5) -> int:
    """Register a dielectric material.

    Args:
        refractive_index: Index of refraction; must be positive.

    Returns:
        The index of the added material.

    Raises:
        ValueError: If the refractive index is not positive.
        RuntimeError: If the maximum number of materials is exceeded.
    """
    check_refractive_index(refractive_index)

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_indices[idx] = refractive_index
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    return int(num_dielectric_materials[None])


@ti.func
def scatter_dielectric_by_id(
    material_idx: ti.i32,
    stream: ti.i32,
    incident_direction: vec3,
    normal: vec3,
):
    """Scatter using the registered material at ``material_idx``."""
    return scatter_dielectric(dielectric_indices[material_idx], stream, incident_direction, normal)
