"""Material value types.

A material answers one question: given an incoming ray and the point where it
hit a surface, does the light scatter, and if so with what attenuation and in
which direction? The set of materials is closed. Each variant is a frozen
dataclass tagged with a ``MaterialKind``; kernels switch on the tag (see
``lightpath.core.integrator``), so this module holds no Taichi state and can
be imported before ``ti.init``.

Example:
    >>> from lightpath.core.colors import Color
    >>> from lightpath.materials.base import Metallic
    >>> steel = Metallic(albedo=Color(0.8, 0.8, 0.8), fuzz=0.1)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, ClassVar

from lightpath.core.colors import Color
from lightpath.core.ray import Ray

if TYPE_CHECKING:
    from lightpath.scene.intersection import Intersection


class MaterialKind(IntEnum):
    """Material tags stored in scene fields."""

    LAMBERTIAN = 0
    METALLIC = 1
    DIELECTRIC = 2


def check_fuzz(fuzz: float) -> None:
    """Raise ValueError unless ``fuzz`` lies in [0, 1]."""
    if not 0.0 <= fuzz <= 1.0:
        raise ValueError(f"Metallic fuzz must lie in [0, 1], got {fuzz}")


def check_refractive_index(refractive_index: float) -> None:
    """Raise ValueError unless ``refractive_index`` is positive."""
    if not refractive_index > 0.0:
        raise ValueError(f"Refractive index must be positive, got {refractive_index}")


@dataclass(frozen=True)
class Scattered:
    """The result of a scattering event.

    Attributes:
        attenuation: Fraction of light kept per channel.
        ray: The outgoing ray, starting at the hit point.
    """

    attenuation: Color
    ray: Ray


class Material:
    """Base class for the material variants.

    Subclasses set ``kind``; scattering itself is implemented once, in the
    Taichi functions the renderer uses.
    """

    kind: ClassVar[MaterialKind]

    def scatter(self, ray: Ray, hit: Intersection) -> Scattered | None:
        """Scatter ``ray`` at ``hit``.

        Draws randomness from random stream 0; call
        ``lightpath.core.sampling.seed_streams`` first for repeatable results.

        Args:
            ray: The incoming world-space ray.
            hit: The intersection being shaded.

        Returns:
            The attenuation and outgoing ray, or None if the light is absorbed.
        """
        # Deferred: the integrator declares Taichi fields
        from lightpath.core.integrator import scatter_once

        point = ray.position(hit.t)
        normal = hit.object.normal_at(point)
        result = scatter_once(self, ray.direction, normal)
        if result is None:
            return None
        attenuation, direction = result
        return Scattered(attenuation=attenuation, ray=Ray(point, direction))


@dataclass(frozen=True)
class Lambertian(Material):
    """Ideal diffuse surface.

    Attributes:
        albedo: Reflected color.
    """

    kind: ClassVar[MaterialKind] = MaterialKind.LAMBERTIAN

    albedo: Color = field(default_factory=lambda: Color(0.9, 0.9, 0.9))


@dataclass(frozen=True)
class Metallic(Material):
    """Mirror-like surface, optionally blurred.

    Attributes:
        albedo: Reflected color.
        fuzz: Radius of the random perturbation added to the mirror
            direction, in [0, 1]. 0 is a perfect mirror.
    """

    kind: ClassVar[MaterialKind] = MaterialKind.METALLIC

    albedo: Color
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        check_fuzz(self.fuzz)


@dataclass(frozen=True)
class Dielectric(Material):
    """Clear refracting material such as glass or water.

    Attributes:
        refractive_index: Index of refraction relative to the surrounding
            medium. Common values: water 1.33, glass 1.5, diamond 2.4.
    """

    kind: ClassVar[MaterialKind] = MaterialKind.DIELECTRIC

    refractive_index: float = 1.5

    def __post_init__(self) -> None:
        check_refractive_index(self.refractive_index)


def default_material() -> Lambertian:
    """The material given to objects that are not assigned one."""
    return Lambertian(Color(0.9, 0.9, 0.9))
