"""Board-level snap resolution.

A corner snap is simply several single-edge snaps landing on (almost) the
same point, so the resolver first finds the nearest eligible snap and then
collects every edge that produces an equivalent one.
"""

from __future__ import annotations

from typing import Iterable

from pygame import Vector2

from .config import SnapConfig
from .geometry import CombinedSnap, Edge, OrientedBox, Snap, angles_equivalent, edges_equivalent

DEFAULT_SNAP = SnapConfig()


def dedupe_edges(edges: Iterable[Edge], tolerance: float) -> list[Edge]:
    """Drop edges whose endpoints match an earlier edge, in either order."""

    unique: list[Edge] = []
    for edge in edges:
        if not any(edges_equivalent(edge, kept, tolerance) for kept in unique):
            unique.append(edge)
    return unique


def resolve_snap(
    candidate: OrientedBox,
    neighbours: Iterable[OrientedBox],
    config: SnapConfig = DEFAULT_SNAP,
) -> CombinedSnap | None:
    """Return the snap nearest to *candidate*, or ``None`` if none is close enough.

    *neighbours* are the locations of every other card that can be snapped to.
    A snap is eligible only if its rotation matches the candidate's, or is a
    half turn away.
    """

    all_snaps: list[Snap] = []
    closest: Snap | None = None
    closest_distance = 0.0
    for neighbour in neighbours:
        for snap in neighbour.snaps():
            all_snaps.append(snap)
            if not angles_equivalent(snap.rotation, candidate.rotation, config.angle_tolerance):
                continue
            distance = snap.center.distance_to(candidate.center)
            if closest is None or distance < closest_distance:
                closest = snap
                closest_distance = distance

    if closest is None or closest_distance > config.max_distance:
        return None

    edges = [
        snap.edge
        for snap in all_snaps
        if snap.center.distance_to(closest.center) < config.equivalence_distance
        and angles_equivalent(snap.rotation, closest.rotation, config.angle_tolerance)
    ]
    return CombinedSnap(
        center=Vector2(closest.center),
        rotation=closest.rotation,
        edges=tuple(dedupe_edges(edges, config.equivalence_distance)),
    )
