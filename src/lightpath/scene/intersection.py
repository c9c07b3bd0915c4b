"""Python-scope intersections and hit selection.

An ``Intersection`` pairs a ray parameter with the object that produced it.
It is short-lived: it refers to an object in the group being rendered and is
only meaningful while that group is.

Example:
    >>> from lightpath.scene.intersection import Intersection, hit
    >>> xs = [Intersection(-1.0, obj), Intersection(1.0, obj)]
    >>> hit(xs).t
    1.0
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lightpath.scene.object import Object


@dataclass(frozen=True, eq=False)
class Intersection:
    """A ray parameter ``t`` at which ``object`` was hit.

    Attributes:
        t: Distance along the ray, in units of its direction's length.
        object: The object that was hit.
    """

    t: float
    object: Object


def hit(intersections: Iterable[Intersection], t_min: float = 0.0) -> Intersection | None:
    """Select the intersection a ray actually sees.

    Args:
        intersections: Candidate intersections in any order.
        t_min: Only parameters strictly greater than this qualify.

    Returns:
        The qualifying intersection with the smallest ``t``, the earliest in
        list order among equal values, or None if nothing qualifies.
    """
    best = None
    for candidate in intersections:
        if candidate.t > t_min and (best is None or candidate.t < best.t):
            best = candidate
    return best
