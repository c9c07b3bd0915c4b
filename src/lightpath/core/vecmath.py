"""Kernel-side ray type and vector utilities.

Everything here is a Taichi function operating on ``ti.math.vec3`` values and
4x4 matrices, for use inside kernels. The Python-scope equivalents live in
``lightpath.core.tuples``, ``lightpath.core.matrix`` and ``lightpath.core.ray``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lightpath.core.vecmath import DeviceRay, ray_at
    >>> # Use ray_at within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4
mat4 = tm.mat4


@ti.dataclass
class DeviceRay:
    """A ray inside a kernel.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Not normalised.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: DeviceRay, t: ti.f32) -> vec3:
    """The point ``ray.origin + t * ray.direction``."""
    return ray.origin + t * ray.direction


@ti.func
def transform_point(m: mat4, p: vec3) -> vec3:
    """Apply a 4x4 affine transform to a point (w = 1)."""
    r = m @ vec4(p.x, p.y, p.z, 1.0)
    return vec3(r.x, r.y, r.z)


@ti.func
def transform_vector(m: mat4, v: vec3) -> vec3:
    """Apply a 4x4 affine transform to a vector (w = 0); translation is ignored."""
    r = m @ vec4(v.x, v.y, v.z, 0.0)
    return vec3(r.x, r.y, r.z)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    return tm.dot(v, v)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect ``incident`` about a unit ``normal``.

    The result has the same length as ``incident`` and its dot product with
    the normal is negated.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta: ti.f32) -> vec3:
    """Refract a unit ``incident`` direction through a surface.

    Snell's law in vector form, split into the components perpendicular and
    parallel to the normal.

    Args:
        incident: Unit incoming direction, with ``dot(incident, normal) < 0``.
        normal: Unit surface normal facing the incoming ray.
        eta: Ratio of refractive indices, n_from / n_to.

    Returns:
        The refracted direction (unit length when refraction is possible).
    """
    cos_theta = tm.min(-tm.dot(incident, normal), 1.0)
    out_perp = eta * (incident + cos_theta * normal)
    out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(out_perp))) * normal
    return out_perp + out_parallel


@ti.func
def schlick_reflectance(cosine: ti.f32, eta: ti.f32) -> ti.f32:
    """Schlick's approximation of the Fresnel reflectance.

    ``R0 + (1 - R0)(1 - cos)^5`` with ``R0 = ((1 - eta) / (1 + eta))^2``.
    """
    r0 = (1.0 - eta) / (1.0 + eta)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """1 if every component of ``v`` is within 1e-8 of zero."""
    s = 1e-8
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s
