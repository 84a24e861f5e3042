"""Configuration helpers for the snapcards table."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class DisplayConfig:
    """Visual settings for the pygame display."""

    width: int = 1280
    height: int = 720
    caption: str = "snapcards"
    frame_rate: int = 60
    fullscreen: bool = False
    background: tuple[int, int, int] = (32, 48, 64)


@dataclass(frozen=True)
class CardConfig:
    """Fixed size shared by every card on the table."""

    width: float = 100.0
    height: float = 150.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Card size must be positive, got {self.width}x{self.height}")

    @property
    def mean_side_length(self) -> float:
        """Edges shorter than this are the card's short edges."""

        return (self.width + self.height) / 2

    @property
    def bounding_diameter(self) -> float:
        """Diameter of the circle enclosing the card from its center."""

        return math.hypot(self.width, self.height)


@dataclass(frozen=True)
class SnapConfig:
    """Tolerances used when resolving snaps between cards."""

    max_distance: float = 20.0
    equivalence_distance: float = 0.1
    angle_tolerance: float = 0.1


@dataclass(frozen=True)
class CollisionConfig:
    """Collision leniency, as a fraction of each corner's distance to its center."""

    leniency: float = 0.01


@dataclass(frozen=True)
class MotionConfig:
    """Exponential smoothing rates for the visual location of a card."""

    position_lerp: float = 0.2
    rotation_lerp: float = 0.3
    flip_lerp: float = 0.1
    settle_epsilon: float = 0.01


@dataclass(frozen=True)
class PivotConfig:
    """Parameters for finding pivots that are anchored to other cards.

    ``fractions`` are the points along each edge tried after the corners;
    halves and thirds are where a 2:3 card can meet another card's corner.
    """

    ground_epsilon: float = 1.0
    fractions: tuple[float, ...] = (1 / 2, 2 / 3, 1 / 3)


@dataclass(frozen=True)
class PlayConfig:
    """Rules for self-moving cards and for dealing."""

    walk_distance: float = 50.0
    bump_distance: float = 10.0
    walker_pivot_angle: float = 45.0
    roller_angles: tuple[float, ...] = (45.0, -45.0, 90.0, -90.0)
    wheel_rotation_step: float = 45.0
    step_interval_ms: int = 0
    seed: int | None = None
    deal_columns: int = 10
    deal_gap: float = 20.0


CARD = CardConfig()


@dataclass(frozen=True)
class GameConfig:
    """High-level configuration structure for the game."""

    display: DisplayConfig = DisplayConfig()
    card: CardConfig = CARD
    snap: SnapConfig = SnapConfig()
    collision: CollisionConfig = CollisionConfig()
    motion: MotionConfig = MotionConfig()
    pivot: PivotConfig = PivotConfig()
    play: PlayConfig = PlayConfig()
