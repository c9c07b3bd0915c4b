"""Kernel-side scene storage and closest-hit queries.

Objects are uploaded into preallocated Structure-of-Arrays fields: shape tag,
inverse transform, inverse-transpose, material kind and the material's index
in its kind's registry. Kernels refer to objects by their position in these
fields, which is also their position in the group they came from.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lightpath.scene.storage import load_scene, intersect_scene
    >>> load_scene(group)
    >>> # Use intersect_scene within a Taichi kernel
"""

from collections.abc import Iterable

import taichi as ti
import taichi.math as tm

from lightpath.core.matrix import Matrix
from lightpath.core.vecmath import DeviceRay, ray_at, transform_point, transform_vector
from lightpath.geometry.shapes import intersect_local, local_normal
from lightpath.materials.base import Dielectric, Lambertian, Material, MaterialKind, Metallic
from lightpath.materials.dielectric import add_dielectric_material, clear_dielectric_materials
from lightpath.materials.lambertian import add_lambertian_material, clear_lambertian_materials
from lightpath.materials.metal import add_metal_material, clear_metal_materials
from lightpath.scene.object import Object

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class SceneHitRecord:
    """Closest intersection of a ray with the scene.

    Attributes:
        hit: 1 if any object was hit beyond the threshold, 0 otherwise.
        t: Ray parameter of the hit. Only valid if hit == 1.
        point: World-space hit point. Only valid if hit == 1.
        normal: Unit outward world-space normal (not flipped toward the ray).
            Only valid if hit == 1.
        object_index: Index of the hit object in scene storage, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    object_index: ti.i32


# Maximum number of objects supported in the scene
MAX_OBJECTS = 1024

object_shapes = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_inverses = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_OBJECTS)
object_inverse_transposes = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_OBJECTS)
object_material_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_material_indices = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all objects. Field contents are overwritten on the next load."""
    num_objects[None] = 0


def clear_materials() -> None:
    """Empty every material registry."""
    clear_lambertian_materials()
    clear_metal_materials()
    clear_dielectric_materials()


def add_material(material: Material) -> tuple[int, int]:
    """Register ``material`` in the registry for its kind.

    Returns:
        Tuple of (kind, index within that kind's registry).

    Raises:
        TypeError: If ``material`` is not one of the known variants.
        RuntimeError: If the registry for its kind is full.
    """
    if isinstance(material, Lambertian):
        return int(MaterialKind.LAMBERTIAN), add_lambertian_material(material.albedo.to_tuple())
    if isinstance(material, Metallic):
        return int(MaterialKind.METALLIC), add_metal_material(
            material.albedo.to_tuple(), material.fuzz
        )
    if isinstance(material, Dielectric):
        return int(MaterialKind.DIELECTRIC), add_dielectric_material(material.refractive_index)
    raise TypeError(f"Unsupported material type: {type(material).__name__}")


def _to_ti_matrix(m: Matrix) -> ti.Matrix:
    return ti.Matrix(m.rows())


def add_object(obj: Object, material_kind: int, material_index: int) -> int:
    """Append an object whose material is already registered.

    Returns:
        The index of the added object.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
    """
    idx = num_objects[None]
    if idx >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
    object_shapes[idx] = int(obj.shape)
    object_inverses[idx] = _to_ti_matrix(obj.inverse_transform)
    object_inverse_transposes[idx] = _to_ti_matrix(obj.inverse_transpose)
    object_material_kinds[idx] = material_kind
    object_material_indices[idx] = material_index
    num_objects[None] = idx + 1
    return idx


def _material_key(material: Material) -> tuple:
    if isinstance(material, Lambertian):
        return (MaterialKind.LAMBERTIAN, material.albedo.to_tuple())
    if isinstance(material, Metallic):
        return (MaterialKind.METALLIC, material.albedo.to_tuple(), material.fuzz)
    if isinstance(material, Dielectric):
        return (MaterialKind.DIELECTRIC, material.refractive_index)
    # Unknown variants are rejected by add_material
    return (type(material), id(material))


def load_scene(objects: Iterable[Object]) -> int:
    """Replace the stored scene with ``objects``.

    Materials that are equal by value are registered once, so a scene of
    up to ``MAX_OBJECTS`` objects always fits the material registries.

    Returns:
        The number of objects loaded.
    """
    clear_scene()
    clear_materials()
    registered: dict[tuple, tuple[int, int]] = {}
    for obj in objects:
        key = _material_key(obj.material)
        if key not in registered:
            registered[key] = add_material(obj.material)
        add_object(obj, *registered[key])
    return get_object_count()


def get_object_count() -> int:
    return int(num_objects[None])


# =============================================================================
# Kernel-side queries
# =============================================================================


@ti.func
def object_normal(index: ti.i32, world_point: vec3) -> vec3:
    """Unit outward world-space normal of object ``index`` at ``world_point``."""
    local_point = transform_point(object_inverses[index], world_point)
    n = local_normal(object_shapes[index], local_point)
    return tm.normalize(transform_vector(object_inverse_transposes[index], n))


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        object_index=-1,
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3, t_min: ti.f32) -> SceneHitRecord:
    """Closest hit of a world-space ray over every stored object.

    Each object is tested in its own space. A candidate wins only with a
    strictly smaller t, so among equal parameters the first in storage order
    is kept.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (need not be normalised).
        t_min: Only parameters strictly greater than this count.

    Returns:
        A SceneHitRecord for the closest hit, or a miss record.
    """
    found = 0
    closest_t = 0.0
    closest_index = -1

    for i in range(num_objects[None]):
        inverse = object_inverses[i]
        local_origin = transform_point(inverse, ray_origin)
        local_direction = transform_vector(inverse, ray_direction)
        count, t0, t1 = intersect_local(object_shapes[i], local_origin, local_direction)
        if count >= 1:
            if t0 > t_min and (found == 0 or t0 < closest_t):
                found = 1
                closest_t = t0
                closest_index = i
        if count >= 2:
            if t1 > t_min and (found == 0 or t1 < closest_t):
                found = 1
                closest_t = t1
                closest_index = i

    result = _make_miss_record()
    if found == 1:
        point = ray_at(DeviceRay(origin=ray_origin, direction=ray_direction), closest_t)
        result = SceneHitRecord(
            hit=1,
            t=closest_t,
            point=point,
            normal=object_normal(closest_index, point),
            object_index=closest_index,
        )
    return result
