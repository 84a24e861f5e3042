"""Oriented-box geometry for cards on an unbounded plane.

Every card shares one fixed size (:data:`snapcards.config.CARD`). A location
is an :class:`OrientedBox`: a center point plus a rotation in degrees, always
kept in ``[0, 360)``. Points are ``pygame.Vector2`` instances in a y-down
coordinate system, so positive rotations turn clockwise on screen.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from pygame import Vector2

from .collision import boxes_collide
from .config import CARD

Point = Vector2
Edge = Tuple[Vector2, Vector2]


class CenterReassignmentError(AttributeError):
    """Raised when code tries to replace the center point of a location."""


# Angle helpers ----------------------------------------------------


def normalize_angle(degrees: float) -> float:
    """Return *degrees* wrapped into ``[0, 360)``."""

    wrapped = float(degrees) % 360.0
    # Tiny negative inputs round up to exactly 360.0.
    if wrapped >= 360.0:
        return 0.0
    return wrapped


def angle_difference(current: float, target: float) -> float:
    """Return the shortest signed rotation taking *current* to *target*."""

    diff = (target - current) % 360.0
    if diff > 180.0:
        diff -= 360.0
    return diff


def angles_equivalent(
    first: float, second: float, tolerance: float = 0.1, period: float = 180.0
) -> bool:
    """Return whether two headings match modulo *period* within *tolerance*."""

    diff = (second - first) % period
    return min(diff, period - diff) <= tolerance


# Segment helpers --------------------------------------------------


def point_along(edge: Edge, fraction: float) -> Vector2:
    """Return the point at *fraction* of the way from ``edge[0]`` to ``edge[1]``."""

    start, end = edge
    return Vector2(start) + (Vector2(end) - Vector2(start)) * fraction


def closest_point_on_segment(point: Vector2, edge: Edge) -> Vector2:
    """Project *point* onto *edge*, clamped to the segment."""

    start, end = Vector2(edge[0]), Vector2(edge[1])
    along = end - start
    length_squared = along.length_squared()
    if length_squared == 0:
        return start
    t = (Vector2(point) - start).dot(along) / length_squared
    t = max(0.0, min(1.0, t))
    return start + along * t


def edges_equivalent(first: Edge, second: Edge, tolerance: float) -> bool:
    """Return whether two edges share endpoints, in either order."""

    a0, a1 = first
    b0, b1 = second
    same_order = a0.distance_to(b0) < tolerance and a1.distance_to(b1) < tolerance
    reversed_order = a0.distance_to(b1) < tolerance and a1.distance_to(b0) < tolerance
    return same_order or reversed_order


# Locations --------------------------------------------------------


class OrientedBox:
    """A card-sized rectangle at a center point and rotation.

    The center vector is owned by the box. It can be changed in place
    (``box.center.x += 1`` or :meth:`copy`) but never replaced, so two boxes
    can never end up sharing one mutable point.
    """

    __slots__ = ("_center", "_rotation")

    def __init__(self, center: Iterable[float] = (0.0, 0.0), rotation: float = 0.0) -> None:
        x, y = center
        self._center = Vector2(float(x), float(y))
        self._rotation = normalize_angle(rotation)

    @property
    def center(self) -> Vector2:
        return self._center

    @center.setter
    def center(self, value: Vector2) -> None:
        raise CenterReassignmentError(
            "Cannot re-assign center; use copy() or set x and y on the existing point."
        )

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, value: float) -> None:
        self._rotation = normalize_angle(value)

    def copy(self, source: "OrientedBox") -> None:
        """Copy the center and rotation of *source* into this box."""

        self._center.x = source.center.x
        self._center.y = source.center.y
        self._rotation = normalize_angle(source.rotation)

    def clone(self) -> "OrientedBox":
        return OrientedBox(self._center, self._rotation)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrientedBox):
            return NotImplemented
        return (
            self._center.x == other.center.x
            and self._center.y == other.center.y
            and self._rotation == other.rotation
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(center=({self._center.x:.3f}, {self._center.y:.3f}), "
            f"rotation={self._rotation:.3f})"
        )

    # Derived geometry ---------------------------------------------

    def corners(self) -> tuple[Vector2, Vector2, Vector2, Vector2]:
        """Return the four corners, clockwise on screen from the top-left."""

        half_w = CARD.width / 2
        half_h = CARD.height / 2
        offsets = (
            Vector2(-half_w, -half_h),
            Vector2(half_w, -half_h),
            Vector2(half_w, half_h),
            Vector2(-half_w, half_h),
        )
        top_left, top_right, bottom_right, bottom_left = (
            self._center + offset.rotate(self._rotation) for offset in offsets
        )
        return top_left, top_right, bottom_right, bottom_left

    def edges(self) -> tuple[Edge, Edge, Edge, Edge]:
        """Return the sides as ``(corner[i], corner[i + 1])`` pairs, wrapping."""

        c = self.corners()
        return (c[0], c[1]), (c[1], c[2]), (c[2], c[3]), (c[3], c[0])

    def snaps(self) -> list["Snap"]:
        """Return the 12 locations where another card can sit flush against this one.

        Each edge yields one parallel snap (two corners aligned) and two
        perpendicular snaps (turned 90 degrees, one corner aligned and the far
        end overhanging). Half-turn duplicates are not listed; callers compare
        rotations modulo 180.
        """

        snaps: list[Snap] = []
        overhang = (CARD.height - CARD.width) / 2
        for edge in self.edges():
            start, end = edge
            middle = (start + end) / 2
            along = end - start
            length = along.length()
            tangent = along / length
            normal = Vector2(along.y, -along.x) / length
            short_edge = length < CARD.mean_side_length

            parallel_depth = CARD.height / 2 if short_edge else CARD.width / 2
            snaps.append(Snap(middle + normal * parallel_depth, self._rotation, edge))

            perpendicular_depth = CARD.width / 2 if short_edge else CARD.height / 2
            for sign in (-1, 1):
                center = middle + normal * perpendicular_depth + tangent * (sign * overhang)
                snaps.append(Snap(center, normalize_angle(self._rotation + 90), edge))
        return snaps

    def collides_with(self, other: "OrientedBox") -> bool:
        return boxes_collide(self, other)

    def contains_point(self, point: Vector2) -> bool:
        """Return whether *point* lies within this box."""

        local = (Vector2(point) - self._center).rotate(-self._rotation)
        return abs(local.x) <= CARD.width / 2 and abs(local.y) <= CARD.height / 2

    # Derived locations --------------------------------------------

    def rotated(self, delta: float, pivot: Vector2 | None = None) -> "OrientedBox":
        """Return a new box turned by *delta* degrees about *pivot* (default: center)."""

        if pivot is None:
            return OrientedBox(self._center, self._rotation + delta)
        pivot = Vector2(pivot)
        center = pivot + (self._center - pivot).rotate(delta)
        return OrientedBox(center, self._rotation + delta)

    def translated(self, offset: Sequence[float]) -> "OrientedBox":
        return OrientedBox(self._center + Vector2(offset), self._rotation)

    def heading(self, offset_degrees: float = 0.0) -> Vector2:
        """Return the unit vector along the box's x axis, turned by *offset_degrees*."""

        return Vector2(1, 0).rotate(self._rotation + offset_degrees)


@dataclass(frozen=True, slots=True)
class Snap:
    """A candidate placement generated from one edge of an existing card."""

    center: Vector2
    rotation: float
    edge: Edge

    def to_box(self) -> OrientedBox:
        return OrientedBox(self.center, self.rotation)


@dataclass(frozen=True, slots=True)
class CombinedSnap:
    """The nearest snap plus every coincident edge, across all neighbours."""

    center: Vector2
    rotation: float
    edges: tuple[Edge, ...] = ()

    @property
    def is_corner(self) -> bool:
        """True when the snap is formed by more than one edge."""

        return len(self.edges) > 1

    def to_box(self) -> OrientedBox:
        return OrientedBox(self.center, self.rotation)
