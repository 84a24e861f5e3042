"""Overlap test between two card-sized oriented boxes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from pygame import Vector2

from .config import CARD, CollisionConfig

if TYPE_CHECKING:
    from .geometry import OrientedBox

DEFAULT_COLLISION = CollisionConfig()


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _shrink(corners: Sequence[Vector2], center: Vector2, leniency: float) -> list[Vector2]:
    return [corner + (center - corner) * leniency for corner in corners]


def has_separating_axis(polygon: Sequence[Vector2], others: Sequence[Vector2]) -> bool:
    """Return whether an edge normal of *polygon* separates it from *others*.

    For each edge, the sign of an adjacent edge projected onto the normal
    tells which side is inside. If every vertex of *others* falls on the
    opposite side (or on the line), that normal is a separating axis.
    """

    count = len(polygon)
    previous = polygon[count - 1] - polygon[0]
    for index in range(count):
        origin = polygon[index]
        side = polygon[(index + 1) % count] - origin
        normal = Vector2(-side.y, side.x)
        inside = _sign(previous.dot(normal))
        if all(inside * _sign((vertex - origin).dot(normal)) <= 0 for vertex in others):
            return True
        previous = -side
    return False


def boxes_collide(
    first: "OrientedBox",
    second: "OrientedBox",
    config: CollisionConfig = DEFAULT_COLLISION,
) -> bool:
    """Return whether two card locations overlap.

    Cards whose centers are further apart than the bounding diameter are
    rejected early. Corners are pulled slightly toward their centers so that
    cards lying flush against each other do not count as overlapping.
    """

    if first.center.distance_to(second.center) > CARD.bounding_diameter:
        return False

    corners_a = _shrink(first.corners(), first.center, config.leniency)
    corners_b = _shrink(second.corners(), second.center, config.leniency)
    return not has_separating_axis(corners_a, corners_b) and not has_separating_axis(
        corners_b, corners_a
    )
