"""Recursive Monte Carlo integrator.

The color seen along a ray is defined recursively:

    color(ray, depth) = black                                  if depth > max_depth
                      = attenuation * color(scattered, depth+1) if the ray hits and scatters
                      = black                                  if the ray hits and is absorbed
                      = sky(ray.direction)                     if the ray misses

The primary ray accepts any hit with t > 0; scattered rays use a small
positive threshold so they do not immediately re-hit the surface they left.

Kernels cannot recurse, so ``trace_ray`` unrolls the recursion into a loop
that carries the running product of attenuations (the throughput). A path
that reaches the sky returns throughput * sky; one that is absorbed or runs
out of depth returns black. This is the same estimator as the recursion.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lightpath.core.integrator import trace_ray
    >>> # color = trace_ray(origin, direction, max_depth, stream) within a kernel
"""

import taichi as ti
import taichi.math as tm

from lightpath.core.colors import SKY_BLUE, SKY_LIGHT_BLUE, Color, sky_gradient
from lightpath.core.sampling import ensure_streams_seeded
from lightpath.core.tuples import Point, Vector
from lightpath.materials.base import Dielectric, Lambertian, Material, MaterialKind, Metallic
from lightpath.materials.dielectric import scatter_dielectric, scatter_dielectric_by_id
from lightpath.materials.lambertian import scatter_lambertian, scatter_lambertian_by_id
from lightpath.materials.metal import scatter_metal, scatter_metal_by_id
from lightpath.scene.storage import intersect_scene, object_material_indices, object_material_kinds

# Type alias for 3D vectors
vec3 = tm.vec3
vec7 = ti.types.vector(7, ti.f32)

# =============================================================================
# Rendering Constants
# =============================================================================

# Hit threshold for rays leaving the camera
PRIMARY_T_MIN = 0.0

# Hit threshold for scattered rays, against self-intersection (shadow acne)
SCATTER_T_MIN = 0.001

# Sky gradient end points
SKY_ZENITH = vec3(*SKY_BLUE)
SKY_NADIR = vec3(*SKY_LIGHT_BLUE)


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Vertical gradient seen by rays that escape the scene."""
    t = (1.0 + tm.normalize(direction).y) / 2.0
    return SKY_ZENITH * t + SKY_NADIR * (1.0 - t)


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def scatter_material(object_index: ti.i32, stream: ti.i32, incident_direction: vec3, normal: vec3):
    """Scatter off the material of a stored object.

    Args:
        object_index: Index of the hit object in scene storage.
        stream: Random stream to draw from.
        incident_direction: The incoming ray direction.
        normal: Unit outward surface normal at the hit point.

    Returns:
        A tuple of (did_scatter, attenuation, direction).
    """
    kind = object_material_kinds[object_index]
    idx = object_material_indices[object_index]

    did_scatter = 0
    attenuation = vec3(0.0, 0.0, 0.0)
    direction = vec3(0.0, 0.0, 0.0)

    if kind == int(MaterialKind.LAMBERTIAN):
        did_scatter, attenuation, direction = scatter_lambertian_by_id(idx, stream, normal)
    elif kind == int(MaterialKind.METALLIC):
        did_scatter, attenuation, direction = scatter_metal_by_id(
            idx, stream, incident_direction, normal
        )
    elif kind == int(MaterialKind.DIELECTRIC):
        did_scatter, attenuation, direction = scatter_dielectric_by_id(
            idx, stream, incident_direction, normal
        )

    return did_scatter, attenuation, direction


@ti.func
def scatter_with_params(
    kind: ti.i32,
    albedo: vec3,
    fuzz: ti.f32,
    refractive_index: ti.f32,
    stream: ti.i32,
    incident_direction: vec3,
    normal: vec3,
):
    """Scatter off a material given by value rather than by registry index."""
    did_scatter = 0
    attenuation = vec3(0.0, 0.0, 0.0)
    direction = vec3(0.0, 0.0, 0.0)

    if kind == int(MaterialKind.LAMBERTIAN):
        did_scatter, attenuation, direction = scatter_lambertian(albedo, stream, normal)
    elif kind == int(MaterialKind.METALLIC):
        did_scatter, attenuation, direction = scatter_metal(
            albedo, fuzz, stream, incident_direction, normal
        )
    elif kind == int(MaterialKind.DIELECTRIC):
        did_scatter, attenuation, direction = scatter_dielectric(
            refractive_index, stream, incident_direction, normal
        )

    return did_scatter, attenuation, direction


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def trace_ray(origin: vec3, direction: vec3, max_depth: ti.i32, stream: ti.i32) -> vec3:
    """Estimate the color arriving along a ray.

    Args:
        origin: World-space ray origin.
        direction: World-space ray direction (need not be normalised).
        max_depth: Number of scattering events allowed before a path is
            black. 0 means any hit is black.
        stream: Random stream to draw from.

    Returns:
        One sample of the color along the ray.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    ray_origin = origin
    ray_direction = direction
    t_min = PRIMARY_T_MIN

    # Taichi functions cannot return from inside loops, so track liveness
    active = 1

    # Depths 0..max_depth may bounce; reaching depth max_depth + 1 is black
    for _ in range(max_depth + 1):
        if active == 1:
            rec = intersect_scene(ray_origin, ray_direction, t_min)

            if rec.hit == 0:
                color = throughput * sky_color(ray_direction)
                active = 0
            else:
                did_scatter, attenuation, scattered = scatter_material(
                    rec.object_index, stream, ray_direction, rec.normal
                )
                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    ray_origin = rec.point
                    ray_direction = scattered
                    t_min = SCATTER_T_MIN

    return color


# =============================================================================
# Python-scope entry points
# =============================================================================


@ti.kernel
def _trace_kernel(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    max_depth: ti.i32,
    stream: ti.i32,
) -> vec3:
    return trace_ray(vec3(ox, oy, oz), vec3(dx, dy, dz), max_depth, stream)


@ti.kernel
def _scatter_once_kernel(
    kind: ti.i32,
    red: ti.f32,
    green: ti.f32,
    blue: ti.f32,
    fuzz: ti.f32,
    refractive_index: ti.f32,
    stream: ti.i32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    nx: ti.f32,
    ny: ti.f32,
    nz: ti.f32,
) -> vec7:
    did_scatter, attenuation, direction = scatter_with_params(
        kind,
        vec3(red, green, blue),
        fuzz,
        refractive_index,
        stream,
        vec3(dx, dy, dz),
        vec3(nx, ny, nz),
    )
    return vec7(
        ti.cast(did_scatter, ti.f32),
        attenuation.x,
        attenuation.y,
        attenuation.z,
        direction.x,
        direction.y,
        direction.z,
    )


def trace(origin: Point, direction: Vector, max_depth: int, stream: int = 0) -> Color:
    """One sample of the color along a ray through the loaded scene.

    The scene must already be in storage (``lightpath.scene.storage.load_scene``).
    """
    ensure_streams_seeded()
    c = _trace_kernel(
        origin.x, origin.y, origin.z, direction.x, direction.y, direction.z, max_depth, stream
    )
    return Color(float(c[0]), float(c[1]), float(c[2]))


def sky(direction: Vector) -> Color:
    """Sky color for a direction; ``sky_color`` is the kernel counterpart."""
    return sky_gradient(direction.unit().y)


def scatter_once(
    material: Material,
    incident_direction: Vector,
    normal: Vector,
    stream: int = 0,
) -> tuple[Color, Vector] | None:
    """Scatter a single ray off ``material``.

    Args:
        material: Any material variant; it need not be registered.
        incident_direction: The incoming ray direction.
        normal: Unit outward surface normal at ``point``.
        stream: Random stream to draw from.

    Returns:
        Tuple of (attenuation, outgoing direction), or None if absorbed.

    Raises:
        TypeError: If ``material`` is not a known variant.
    """
    if not isinstance(material, (Lambertian, Metallic, Dielectric)):
        raise TypeError(f"Unsupported material type: {type(material).__name__}")
    ensure_streams_seeded()

    albedo = getattr(material, "albedo", Color(1.0, 1.0, 1.0))
    result = _scatter_once_kernel(
        int(material.kind),
        albedo.red,
        albedo.green,
        albedo.blue,
        getattr(material, "fuzz", 0.0),
        getattr(material, "refractive_index", 1.0),
        stream,
        incident_direction.x,
        incident_direction.y,
        incident_direction.z,
        normal.x,
        normal.y,
        normal.z,
    )
    if int(round(result[0])) == 0:
        return None
    attenuation = Color(float(result[1]), float(result[2]), float(result[3]))
    direction = Vector(float(result[4]), float(result[5]), float(result[6]))
    return attenuation, direction
