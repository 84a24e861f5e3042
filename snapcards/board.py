"""The shared set of cards on the table and the queries that span it."""

from __future__ import annotations

import logging
import math
from random import Random
from typing import Iterator, TypeVar

from pygame import Vector2

from .collision import boxes_collide
from .config import CARD, GameConfig
from .game_objects import Card, FractalCard, LocationMarker, PlayerCard, PlayingCard, RollerCard, StepOutcome
from .geometry import CombinedSnap, OrientedBox
from .models import Deck
from .motion import AnimationScheduler
from .pivot import PivotMover
from .snapping import resolve_snap

logger = logging.getLogger(__name__)

CardT = TypeVar("CardT", bound=Card)


class Board:
    """Ordered collection of cards, bottom-most first.

    Every query scans the full live set; nothing is cached between calls.
    """

    def __init__(
        self, config: GameConfig | None = None, scheduler: AnimationScheduler | None = None
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.scheduler = scheduler if scheduler is not None else AnimationScheduler()
        self.tiles: list[Card] = []
        self.pivot_mover = PivotMover(self, self.config.pivot)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self.tiles))

    def __len__(self) -> int:
        return len(self.tiles)

    def __contains__(self, tile: object) -> bool:
        return tile in self.tiles

    # Membership -----------------------------------------------------

    def add(self, tile: CardT, *, bottom: bool = False) -> CardT:
        """Place *tile* on top of the others (or beneath them) and return it."""

        if tile.motion.scheduler is None:
            tile.motion.scheduler = self.scheduler
        if bottom:
            self.tiles.insert(0, tile)
        else:
            self.tiles.append(tile)
        return tile

    def remove(self, tile: Card) -> None:
        if tile in self.tiles:
            self.tiles.remove(tile)
            self.scheduler.cancel(tile.motion)

    def clear(self) -> None:
        for tile in list(self.tiles):
            self.remove(tile)

    def bring_to_front(self, tile: Card) -> None:
        if tile in self.tiles:
            self.tiles.remove(tile)
            self.tiles.append(tile)

    def solid_tiles(self, exclude: Card | None = None) -> list[Card]:
        return [tile for tile in self.tiles if tile.solid and tile is not exclude]

    def markers(self) -> list[LocationMarker]:
        return [tile for tile in self.tiles if isinstance(tile, LocationMarker)]

    def clear_markers(self) -> None:
        for marker in self.markers():
            self.remove(marker)

    def tile_at(self, point: Vector2) -> Card | None:
        """Return the top-most solid card whose logical location contains *point*."""

        for tile in reversed(self.tiles):
            if tile.solid and tile.logical_loc.contains_point(point):
                return tile
        return None

    # Queries --------------------------------------------------------

    def find_snap(self, candidate: OrientedBox, exclude: Card | None = None) -> CombinedSnap | None:
        """Return the snap for a card dragged to *candidate*, ignoring *exclude*."""

        neighbours = [tile.logical_loc for tile in self.solid_tiles(exclude)]
        snap = resolve_snap(candidate, neighbours, self.config.snap)
        if snap is not None and logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Snap for %r: center=(%.1f, %.1f) rotation=%.1f edges=%d",
                candidate,
                snap.center.x,
                snap.center.y,
                snap.rotation,
                len(snap.edges),
            )
        return snap

    def find_collisions(self, location: OrientedBox, exclude: Card | None = None) -> list[Card]:
        """Return every solid card overlapping *location*, other than *exclude*."""

        return [
            tile
            for tile in self.solid_tiles(exclude)
            if boxes_collide(location, tile.logical_loc, self.config.collision)
        ]

    # Game flow ------------------------------------------------------

    def deal(self, rng: Random | None = None) -> None:
        """Clear the table and lay out a fresh shuffled deck plus the special cards."""

        self.clear()
        play = self.config.play
        rng = rng or Random(play.seed)
        deck = Deck.standard()
        deck.shuffle(rng)

        tiles: list[Card] = [PlayingCard(face) for face in deck.faces]
        tiles.extend(RollerCard(angle) for angle in play.roller_angles)
        tiles.append(FractalCard())
        tiles.append(PlayerCard())

        columns = max(1, play.deal_columns)
        rows = math.ceil(len(tiles) / columns)
        pitch = Vector2(CARD.width + play.deal_gap, CARD.height + play.deal_gap)
        origin = Vector2(-(columns - 1) * pitch.x / 2, -(rows - 1) * pitch.y / 2)
        for index, tile in enumerate(tiles):
            row, column = divmod(index, columns)
            center = origin + Vector2(column * pitch.x, row * pitch.y)
            self.add(tile)
            tile.move_to(OrientedBox(center), animate=False)
        logger.info("Dealt %d cards", len(tiles))

    def step(self) -> dict[Card, StepOutcome]:
        """Advance every face-up card by one step."""

        self.clear_markers()
        outcomes = {}
        for tile in list(self.tiles):
            if not tile.flipped:
                outcomes[tile] = tile.step(self)
        return outcomes

    def walk(self, direction: int) -> dict[Card, StepOutcome]:
        """Walk every face-up card that knows how to walk."""

        outcomes = {}
        for tile in list(self.tiles):
            if not tile.flipped:
                outcomes[tile] = tile.walk(self, direction)
        return outcomes
