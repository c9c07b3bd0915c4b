"""Renderable objects: a shape, a material and a transform.

An object stores its transform together with the inverse and the
inverse-transpose. All three are replaced together whenever the transform is
assigned, so they never disagree, and nothing is re-derived per ray. A
transform that cannot be inverted is rejected with ``ValueError`` and the
object keeps its previous transform.

Example:
    >>> from lightpath.core.transformations import scaling
    >>> from lightpath.geometry.shapes import Shape
    >>> from lightpath.scene.object import Object
    >>> ball = Object(Shape.SPHERE).with_transform(scaling(2.0, 2.0, 2.0))
"""

from __future__ import annotations

from lightpath.core.matrix import Matrix
from lightpath.core.ray import Ray
from lightpath.core.tuples import Point, Vector
from lightpath.geometry.shapes import Shape, intersect_shape, shape_normal
from lightpath.materials.base import Material, default_material
from lightpath.scene.intersection import Intersection


class Object:
    """A shape placed in the world with a material.

    Attributes:
        shape: Which primitive this object is.
        material: How light scatters off it.
    """

    def __init__(
        self,
        shape: Shape = Shape.SPHERE,
        material: Material | None = None,
        transform: Matrix | None = None,
    ) -> None:
        """Create an object.

        Args:
            shape: The primitive, in object space.
            material: Surface material. Defaults to a near-white Lambertian.
            transform: Object-to-world transform. Defaults to the identity.

        Raises:
            ValueError: If ``transform`` is not an invertible 4x4 matrix.
        """
        self.shape = Shape(shape)
        self.material = material if material is not None else default_material()
        self.group = None
        self.set_transform(transform if transform is not None else Matrix.identity(4))

    @classmethod
    def sphere(cls, material: Material | None = None) -> Object:
        return cls(Shape.SPHERE, material)

    @classmethod
    def cube(cls, material: Material | None = None) -> Object:
        return cls(Shape.CUBE, material)

    def __repr__(self) -> str:
        return f"Object({self.shape.name}, {self.material!r})"

    # -------------------------------------------------------------------------
    # Transform
    # -------------------------------------------------------------------------

    # The three cached matrices are private; the properties return copies.

    @property
    def transform(self) -> Matrix:
        return self._transform.copy()

    @property
    def inverse_transform(self) -> Matrix:
        return self._inverse.copy()

    @property
    def inverse_transpose(self) -> Matrix:
        return self._inverse_transpose.copy()

    def set_transform(self, transform: Matrix) -> None:
        """Replace the transform and its cached inverse and inverse-transpose.

        Raises:
            ValueError: If ``transform`` is not an invertible 4x4 matrix.
        """
        if transform.shape != (4, 4):
            raise ValueError(f"Object transform must be 4x4, got {transform.height}x{transform.width}")
        transform = transform.copy()
        inverse = transform.inverse()
        self._transform, self._inverse, self._inverse_transpose = (
            transform,
            inverse,
            inverse.transpose(),
        )

    def with_transform(self, transform: Matrix) -> Object:
        """Set the transform and return the object, for chained construction."""
        self.set_transform(transform)
        return self

    def with_material(self, material: Material) -> Object:
        self.material = material
        return self

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def intersect(self, ray: Ray) -> list[Intersection]:
        """Intersect a world-space ray with this object.

        The ray is moved into object space with the inverse transform; the
        returned parameters therefore apply to the original world ray.
        """
        local = ray.transform(self._inverse)
        return [Intersection(t, self) for t in intersect_shape(self.shape, local.origin, local.direction)]

    def normal_at(self, world_point: Point) -> Vector:
        """Unit world-space surface normal at ``world_point``.

        The local normal is mapped back with the inverse-transpose, which
        keeps it perpendicular to the surface under non-uniform scaling.
        """
        local_point = self._inverse @ world_point
        local_normal = shape_normal(self.shape, local_point)
        return (self._inverse_transpose @ local_normal).unit()
