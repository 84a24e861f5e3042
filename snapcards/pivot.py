"""Pivot search shared by cards that move themselves.

A card may turn about a point only if that point rests on another card's
edge. Candidate pivots are the card's own corners and the points at the
configured fractions along each of its edges.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable

from pygame import Vector2

from .config import PivotConfig
from .geometry import OrientedBox, closest_point_on_segment, point_along

if TYPE_CHECKING:
    from .board import Board
    from .game_objects import Card

logger = logging.getLogger(__name__)

DEFAULT_PIVOT = PivotConfig()


def candidate_pivots(box: OrientedBox, fractions: Iterable[float] = DEFAULT_PIVOT.fractions) -> list[Vector2]:
    """Return the corners of *box*, then the fractional points of each edge."""

    fractions = tuple(fractions)
    pivots = list(box.corners())
    for edge in box.edges():
        pivots.extend(point_along(edge, fraction) for fraction in fractions)
    return pivots


def is_grounded(point: Vector2, neighbours: Iterable[OrientedBox], epsilon: float = DEFAULT_PIVOT.ground_epsilon) -> bool:
    """Return whether *point* lies on an edge of any box in *neighbours*."""

    for neighbour in neighbours:
        for edge in neighbour.edges():
            if closest_point_on_segment(point, edge).distance_to(point) < epsilon:
                return True
    return False


def find_pivot_rotation(
    box: OrientedBox,
    delta: float,
    neighbours: Iterable[OrientedBox],
    is_free: Callable[[OrientedBox], bool],
    config: PivotConfig = DEFAULT_PIVOT,
) -> OrientedBox | None:
    """Return *box* turned by *delta* about the first grounded pivot that leaves it free.

    *is_free* decides whether a candidate location is collision-free.
    Returns ``None`` when no candidate works.
    """

    neighbours = list(neighbours)
    for pivot in candidate_pivots(box, config.fractions):
        if not is_grounded(pivot, neighbours, config.ground_epsilon):
            continue
        rotated = box.rotated(delta, pivot)
        if is_free(rotated):
            return rotated
    return None


class PivotMover:
    """Turns cards about grounded pivots on a board."""

    def __init__(self, board: "Board", config: PivotConfig = DEFAULT_PIVOT) -> None:
        self.board = board
        self.config = config

    def find_rotation(self, card: "Card", delta: float) -> OrientedBox | None:
        board = self.board
        return find_pivot_rotation(
            card.logical_loc,
            delta,
            (other.logical_loc for other in board.solid_tiles(exclude=card)),
            lambda location: not board.find_collisions(location, exclude=card),
            self.config,
        )

    def rotate(
        self,
        card: "Card",
        delta: float,
        on_blocked: Callable[[], None] | None = None,
    ) -> bool:
        """Commit a pivot rotation of *card* by *delta*, or run *on_blocked*.

        Returns whether the card moved.
        """

        rotated = self.find_rotation(card, delta)
        if rotated is None:
            logger.debug("%r found no pivot for %+.0f degrees", card, delta)
            if on_blocked is not None:
                on_blocked()
            return False
        logger.debug("%r pivots %+.0f degrees to %r", card, delta, rotated)
        card.move_to(rotated)
        return True
