"""Logical and visual locations of a card, and their damped animation."""

from __future__ import annotations

from typing import Callable

from .config import MotionConfig
from .geometry import OrientedBox, angle_difference

DEFAULT_MOTION = MotionConfig()

TransformListener = Callable[["MotionController"], None]


class AnimationScheduler:
    """Runs pending animation steps once per host frame.

    Controllers are keyed by identity, so requesting a controller that is
    already pending replaces its previous request instead of adding a second one.
    """

    def __init__(self) -> None:
        self._pending: dict[int, MotionController] = {}

    def request(self, controller: "MotionController") -> None:
        self._pending.pop(id(controller), None)
        self._pending[id(controller)] = controller

    def cancel(self, controller: "MotionController") -> None:
        self._pending.pop(id(controller), None)

    def is_pending(self, controller: "MotionController") -> bool:
        return id(controller) in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def tick(self) -> int:
        """Advance every pending controller by one step and return how many ran."""

        due = list(self._pending.values())
        self._pending.clear()
        for controller in due:
            controller.animate()
        return len(due)


class MotionController:
    """Holds where a card is (logical) and where it is drawn (visual).

    ``logical_loc`` is authoritative for snapping and collisions.
    ``visual_loc`` eases toward ``target_visual_loc`` each frame; the target
    normally equals the logical location.
    """

    def __init__(
        self,
        location: OrientedBox | None = None,
        *,
        scheduler: AnimationScheduler | None = None,
        config: MotionConfig = DEFAULT_MOTION,
        on_transform: TransformListener | None = None,
    ) -> None:
        start = location if location is not None else OrientedBox()
        self.logical_loc = start.clone()
        self.visual_loc = start.clone()
        self.target_visual_loc = start.clone()
        self.flipped = False
        self.flip_angle = 0.0
        self.scheduler = scheduler
        self.config = config
        self.on_transform = on_transform

    @property
    def target_flip_angle(self) -> float:
        return 180.0 if self.flipped else 0.0

    @property
    def settled(self) -> bool:
        """True once every animated quantity has reached its target exactly."""

        visual = self.visual_loc
        target = self.target_visual_loc
        return (
            self.flip_angle == self.target_flip_angle
            and visual.center.x == target.center.x
            and visual.center.y == target.center.y
            and visual.rotation == target.rotation
        )

    @property
    def animating(self) -> bool:
        if self.scheduler is not None and self.scheduler.is_pending(self):
            return True
        return not self.settled

    def move_to(self, location: OrientedBox, *, animate: bool = True) -> None:
        """Move the card; jump the visual location too when *animate* is false."""

        self.logical_loc.copy(location)
        self.target_visual_loc.copy(location)
        if animate:
            self.animate()
        else:
            self.visual_loc.copy(location)
            self.update_transform()

    def preview(self, location: OrientedBox) -> None:
        """Ease the visual location toward *location*; the logical location stays put."""

        self.target_visual_loc.copy(location)
        self.animate()

    def cancel_preview(self) -> None:
        self.target_visual_loc.copy(self.logical_loc)
        self.animate()

    def nudge(self, location: OrientedBox) -> None:
        """Show the card at *location* briefly, then ease back to its target."""

        self.visual_loc.copy(location)
        self.animate()

    def flip(self) -> None:
        self.flipped = not self.flipped
        self.animate()

    def update_transform(self) -> None:
        if self.on_transform is not None:
            self.on_transform(self)

    def animate(self) -> bool:
        """Advance the visual state one step toward its target.

        Safe to call any number of times: each call recomputes from the current
        and target state, and leaves at most one pending request with the
        scheduler. Returns whether more steps are needed.
        """

        if self.scheduler is not None:
            self.scheduler.cancel(self)

        config = self.config
        visual = self.visual_loc
        target = self.target_visual_loc
        epsilon = config.settle_epsilon
        target_flip = self.target_flip_angle

        self.flip_angle += (target_flip - self.flip_angle) * config.flip_lerp
        visual.center.x += (target.center.x - visual.center.x) * config.position_lerp
        visual.center.y += (target.center.y - visual.center.y) * config.position_lerp
        visual.rotation += angle_difference(visual.rotation, target.rotation) * config.rotation_lerp

        if abs(self.flip_angle - target_flip) < epsilon:
            self.flip_angle = target_flip
        if abs(visual.center.x - target.center.x) < epsilon:
            visual.center.x = target.center.x
        if abs(visual.center.y - target.center.y) < epsilon:
            visual.center.y = target.center.y
        if abs(angle_difference(visual.rotation, target.rotation)) < epsilon:
            visual.rotation = target.rotation

        self.update_transform()

        if self.settled:
            return False
        if self.scheduler is not None:
            self.scheduler.request(self)
        return True
