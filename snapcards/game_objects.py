"""Cards that live on the board, including the ones that move themselves."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Tuple

from pygame import Vector2

from .config import CARD, MotionConfig
from .geometry import OrientedBox
from .models import CardFace
from .motion import DEFAULT_MOTION, AnimationScheduler, MotionController
from .pivot import is_grounded

if TYPE_CHECKING:
    from .board import Board

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


class StepOutcome(Enum):
    """What a card did when asked to step or walk."""

    IDLE = "idle"
    COMMITTED = "committed"
    REVERSED = "reversed"
    BUMPED = "bumped"
    SPAWNED = "spawned"


class Card:
    """Base class for anything placed on the board.

    Solid cards take part in snapping and collision queries. Game logic
    reads ``logical_loc``; renderers read ``visual_loc``.
    """

    solid: ClassVar[bool] = True
    face_color: ClassVar[Color] = (24, 24, 24)

    def __init__(
        self,
        location: OrientedBox | None = None,
        *,
        scheduler: AnimationScheduler | None = None,
        motion_config: MotionConfig = DEFAULT_MOTION,
    ) -> None:
        self.motion = MotionController(location, scheduler=scheduler, config=motion_config)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.face_text!r} at {self.logical_loc!r})"

    @property
    def face_text(self) -> str:
        return ""

    @property
    def logical_loc(self) -> OrientedBox:
        return self.motion.logical_loc

    @property
    def visual_loc(self) -> OrientedBox:
        return self.motion.visual_loc

    @property
    def target_visual_loc(self) -> OrientedBox:
        return self.motion.target_visual_loc

    @property
    def flipped(self) -> bool:
        return self.motion.flipped

    @property
    def flip_angle(self) -> float:
        return self.motion.flip_angle

    def move_to(self, location: OrientedBox, *, animate: bool = True) -> None:
        self.motion.move_to(location, animate=animate)

    def flip(self) -> None:
        self.motion.flip()

    def step(self, board: "Board") -> StepOutcome:
        return StepOutcome.IDLE

    def walk(self, board: "Board", direction: int) -> StepOutcome:
        return StepOutcome.IDLE


class PlayingCard(Card):
    """A standard suit-and-value card. It never moves on its own."""

    def __init__(self, face: CardFace, location: OrientedBox | None = None, **kwargs) -> None:
        super().__init__(location, **kwargs)
        self.face = face

    @property
    def face_text(self) -> str:
        return self.face.label

    @property
    def face_color(self) -> Color:  # type: ignore[override]
        return (200, 16, 46) if self.face.is_red else (20, 20, 20)


class RollerCard(Card):
    """Rolls over other cards by a fixed angle each step, reversing when stuck."""

    face_color: ClassVar[Color] = (128, 0, 128)

    def __init__(self, delta_angle: float = 45.0, location: OrientedBox | None = None, **kwargs) -> None:
        super().__init__(location, **kwargs)
        self.delta_angle = delta_angle

    @property
    def face_text(self) -> str:
        if abs(self.delta_angle) == 90:
            return "↱" if self.delta_angle > 0 else "↰"
        return "↻" if self.delta_angle > 0 else "↺"

    def reverse(self) -> None:
        self.delta_angle = -self.delta_angle

    def step(self, board: "Board") -> StepOutcome:
        if board.pivot_mover.rotate(self, self.delta_angle, on_blocked=self.reverse):
            return StepOutcome.COMMITTED
        return StepOutcome.REVERSED


class PlayerCard(Card):
    """Walks across the other cards, stepping up, down and around corners."""

    face_color: ClassVar[Color] = (200, 0, 0)

    @property
    def face_text(self) -> str:
        return "☺"

    def footing(self, location: OrientedBox) -> Vector2:
        """Return the middle of the card's bottom edge when placed at *location*."""

        return location.center + self.logical_loc.heading(90) * (CARD.height / 2)

    def walkable(self, board: "Board", location: OrientedBox) -> bool:
        """Return whether *location* is free and has ground under its bottom edge.

        Only used for translations; pivots are validated by the pivot search.
        """

        if board.find_collisions(location, exclude=self):
            return False
        neighbours = (other.logical_loc for other in board.solid_tiles(exclude=self))
        return is_grounded(self.footing(location), neighbours, board.config.pivot.ground_epsilon)

    def walk(self, board: "Board", direction: int) -> StepOutcome:
        if direction not in (-1, 1):
            raise ValueError(f"Walk direction must be -1 or 1, got {direction!r}")

        play = board.config.play
        here = self.logical_loc
        forward = here.translated(here.heading() * (play.walk_distance * direction))
        step_height = CARD.height / 3
        attempts = (
            forward,
            forward.translated(here.heading(-90) * step_height),
            forward.translated(here.heading(90) * step_height),
        )
        for attempt in attempts:
            if self.walkable(board, attempt):
                self.move_to(attempt)
                return StepOutcome.COMMITTED

        bumped = here.translated(here.heading() * (play.bump_distance * direction))
        if board.pivot_mover.rotate(
            self,
            play.walker_pivot_angle * direction,
            on_blocked=lambda: self.motion.nudge(bumped),
        ):
            return StepOutcome.COMMITTED
        return StepOutcome.BUMPED


class FractalCard(Card):
    """Spawns copies of itself around its corners, then switches itself off."""

    face_color: ClassVar[Color] = (0, 128, 0)

    @property
    def face_text(self) -> str:
        return "∞"

    def spawn_locations(self) -> list[OrientedBox]:
        """Return the card turned a quarter about its first and third corners.

        Alternating corners give a symmetrical, braid-like pattern.
        """

        corners = self.logical_loc.corners()
        return [self.logical_loc.rotated(90, corner) for corner in corners[::2]]

    def step(self, board: "Board") -> StepOutcome:
        spawned = 0
        for location in self.spawn_locations():
            if board.find_collisions(location, exclude=self):
                marker = board.add(LocationMarker(self.logical_loc))
                marker.move_to(location)
                continue
            child = board.add(FractalCard(self.logical_loc), bottom=True)
            child.move_to(location)
            spawned += 1
        logger.debug("%r spawned %d copies", self, spawned)
        self.flip()
        return StepOutcome.SPAWNED if spawned else StepOutcome.IDLE


class LocationMarker(Card):
    """Ghost outline showing a location that was tried; never blocks anything."""

    solid: ClassVar[bool] = False
    face_color: ClassVar[Color] = (255, 255, 255)
