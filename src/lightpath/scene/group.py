"""Flat, insertion-ordered collections of objects.

A group answers ``intersect`` the same way a single object does, by testing
every member and concatenating the results. There is no spatial index.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from lightpath.core.ray import Ray
from lightpath.scene.intersection import Intersection
from lightpath.scene.object import Object


class ObjectGroup:
    """An ordered collection of objects forming a scene.

    Each object belongs to at most one group.
    """

    def __init__(self, objects: Iterable[Object] = ()) -> None:
        self._objects: list[Object] = []
        for obj in objects:
            self.add(obj)

    def add(self, obj: Object) -> Object:
        """Append ``obj`` to the group and return it.

        Raises:
            ValueError: If ``obj`` already belongs to a group.
        """
        if obj.group is not None:
            raise ValueError(f"{obj!r} already belongs to a group")
        obj.group = self
        self._objects.append(obj)
        return obj

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Object]:
        return iter(self._objects)

    def __getitem__(self, index: int) -> Object:
        return self._objects[index]

    def intersect(self, ray: Ray) -> list[Intersection]:
        """All intersections of ``ray`` with every member, in member order."""
        intersections = []
        for obj in self._objects:
            intersections.extend(obj.intersect(ray))
        return intersections
