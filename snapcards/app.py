"""Pygame application bootstrap for the snapcards table."""

from __future__ import annotations

import logging
import math

import pygame

from .board import Board
from .config import CARD, GameConfig
from .events import AUTO_STEP
from .game_objects import Card, LocationMarker, PlayerCard
from .geometry import Edge, OrientedBox

logger = logging.getLogger(__name__)

CARD_PADDING = 3


class Camera:
    """Maps world coordinates to the screen through a pan offset and a zoom."""

    def __init__(
        self,
        screen_size: tuple[int, int],
        center: tuple[float, float] = (0.0, 0.0),
        zoom: float = 1.0,
        min_zoom: float = 0.25,
        max_zoom: float = 4.0,
    ) -> None:
        self.screen_size = screen_size
        self.center = pygame.Vector2(center)
        self.zoom = zoom
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom

    def world_to_screen(self, point: pygame.Vector2) -> pygame.Vector2:
        """Convert a world-space *point* to screen-space coordinates."""

        screen_center = pygame.Vector2(self.screen_size) / 2
        return screen_center + (pygame.Vector2(point) - self.center) * self.zoom

    def screen_to_world(self, point: pygame.Vector2) -> pygame.Vector2:
        """Convert a screen-space *point* to world-space coordinates."""

        screen_center = pygame.Vector2(self.screen_size) / 2
        offset = pygame.Vector2(point) - screen_center
        if self.zoom != 0:
            offset /= self.zoom
        return self.center + offset

    def pan(self, screen_delta: pygame.Vector2) -> None:
        """Move the view so the world follows a pointer moved by *screen_delta*."""

        self.center -= pygame.Vector2(screen_delta) / max(self.zoom, 1e-6)

    def zoom_at(self, steps: float, focus: pygame.Vector2) -> None:
        """Zoom by *steps* wheel increments, keeping the world point under *focus* fixed."""

        if steps == 0:
            return
        new_zoom = max(self.min_zoom, min(self.max_zoom, self.zoom * 1.2**steps))
        if abs(new_zoom - self.zoom) < 1e-6:
            return
        focus_before = self.screen_to_world(focus)
        self.zoom = new_zoom
        focus_after = self.screen_to_world(focus)
        self.center += focus_before - focus_after


class WheelAccumulator:
    """Collects wheel motion until it amounts to one whole notch.

    Touchpads report many tiny deltas; rounding each one would never rotate.
    """

    def __init__(self, threshold: float = 1.0) -> None:
        self.threshold = threshold
        self.total = 0.0

    def feed(self, amount: float) -> int:
        """Add *amount* and return -1, 0 or 1 notches."""

        self.total += amount
        if abs(self.total) < self.threshold:
            return 0
        notch = 1 if self.total > 0 else -1
        self.total = 0.0
        return notch

    def reset(self) -> None:
        self.total = 0.0


class CardRenderer:
    """Draws cards from their visual location, with cached face images."""

    RENDER_SCALE = 3
    FACE_COLOR = (246, 246, 246)
    OUTLINE_COLOR = (24, 24, 24)
    BACK_COLOR = (120, 0, 0)
    BACK_ACCENT = (230, 200, 200)
    HIGHLIGHT_COLOR = (255, 215, 0)
    CORNER_COLOR = (0, 220, 255)
    COLLISION_COLOR = (220, 40, 40)
    MARKER_COLOR = (255, 255, 255)

    def __init__(self) -> None:
        self._face_cache: dict[tuple[str, tuple[int, int, int]], pygame.Surface] = {}
        self._back: pygame.Surface | None = None

    @staticmethod
    def _load_font(size: int, bold: bool = False) -> pygame.font.Font:
        """Load a font that supports suit glyphs with sensible fallbacks."""

        preferred_fonts = [
            "dejavusans",
            "arialunicode",
            "arial",
            "liberationsans",
        ]
        for name in preferred_fonts:
            path = pygame.font.match_font(name, bold=bold)
            if path:
                return pygame.font.Font(path, size)
        return pygame.font.Font(None, size)

    def _blank(self, color: tuple[int, int, int]) -> tuple[pygame.Surface, pygame.Rect]:
        scale = self.RENDER_SCALE
        size = (int(CARD.width * scale), int(CARD.height * scale))
        surface = pygame.Surface(size, pygame.SRCALPHA)
        surface.fill((0, 0, 0, 0))
        card_rect = surface.get_rect().inflate(-2 * CARD_PADDING * scale, -2 * CARD_PADDING * scale)
        pygame.draw.rect(surface, color, card_rect, border_radius=8 * scale)
        pygame.draw.rect(
            surface, self.OUTLINE_COLOR, card_rect, width=2 * scale, border_radius=8 * scale
        )
        return surface, card_rect

    def face(self, text: str, color: tuple[int, int, int]) -> pygame.Surface:
        key = (text, color)
        cached = self._face_cache.get(key)
        if cached is not None:
            return cached
        surface, card_rect = self._blank(self.FACE_COLOR)
        if text:
            font = self._load_font(36 * self.RENDER_SCALE, bold=True)
            rendered = font.render(text, True, color)
            surface.blit(rendered, rendered.get_rect(center=card_rect.center))
        self._face_cache[key] = surface
        return surface

    def back(self) -> pygame.Surface:
        if self._back is None:
            surface, card_rect = self._blank(self.BACK_COLOR)
            scale = self.RENDER_SCALE
            pygame.draw.rect(
                surface,
                self.BACK_ACCENT,
                card_rect.inflate(-10 * scale, -10 * scale),
                width=max(1, 2 * scale),
                border_radius=4 * scale,
            )
            self._back = surface
        return self._back

    def draw_card(self, surface: pygame.Surface, card: Card, camera: Camera) -> None:
        """Draw *card* squashed by its flip angle, showing the back past 90 degrees."""

        loc = card.visual_loc
        if isinstance(card, LocationMarker):
            self.draw_outline(surface, loc, camera, self.MARKER_COLOR)
            return

        flip = card.flip_angle
        source = self.face(card.face_text, card.face_color) if flip < 90 else self.back()
        squash = abs(math.cos(math.radians(flip)))
        width = max(1, int(round(CARD.width * camera.zoom * squash)))
        height = max(1, int(round(CARD.height * camera.zoom)))
        image = pygame.transform.smoothscale(source, (width, height))
        # Positive rotations turn clockwise on a y-down screen; pygame turns counter-clockwise.
        image = pygame.transform.rotate(image, -loc.rotation)
        center = camera.world_to_screen(loc.center)
        surface.blit(image, image.get_rect(center=(round(center.x), round(center.y))))

    def draw_outline(
        self,
        surface: pygame.Surface,
        loc: OrientedBox,
        camera: Camera,
        color: tuple[int, int, int],
    ) -> None:
        points = [camera.world_to_screen(corner) for corner in loc.corners()]
        pygame.draw.polygon(surface, color, points, width=max(1, int(round(2 * camera.zoom))))

    def draw_edges(
        self, surface: pygame.Surface, edges: list[Edge], camera: Camera, corner: bool = False
    ) -> None:
        """Highlight snap edges; a snap that meets two or more edges gets the corner colour."""

        color = self.CORNER_COLOR if corner else self.HIGHLIGHT_COLOR
        width = max(2, int(round(4 * camera.zoom)))
        for start, end in edges:
            pygame.draw.line(
                surface,
                color,
                camera.world_to_screen(start),
                camera.world_to_screen(end),
                width,
            )


class CardGameApp:
    """Minimal pygame wrapper that wires together the systems."""

    def __init__(self, config: GameConfig | None = None) -> None:
        self.config = config if config is not None else GameConfig()
        self.board = Board(self.config)
        self.renderer = CardRenderer()
        self.camera = Camera((self.config.display.width, self.config.display.height))
        self.wheel = WheelAccumulator()
        self.screen: pygame.Surface | None = None
        self.clock: pygame.time.Clock | None = None
        self.running = False
        self.dragged_card: Card | None = None
        self.drag_offset = pygame.Vector2()
        self.drag_rotation = 0.0
        self.drag_location: OrientedBox | None = None
        self.drag_colliding = False
        self.snap_edges: list[Edge] = []
        self.snap_is_corner = False
        self.pan_active = False
        self.pan_last_pos = pygame.Vector2()
        self.last_escape_press_time = 0
        self.escape_double_press_threshold_ms = 500

    def setup(self) -> None:
        """Initialise pygame and the display surface."""

        pygame.init()
        display = self.config.display
        flags = 0
        size = (display.width, display.height)

        if display.fullscreen:
            flags |= pygame.FULLSCREEN
            if display.width <= 0 or display.height <= 0:
                info = pygame.display.Info()
                size = (info.current_w, info.current_h)

        self.screen = pygame.display.set_mode(size, flags)
        pygame.display.set_caption(display.caption)
        self.camera.screen_size = self.screen.get_size()
        self.clock = pygame.time.Clock()
        self.running = True
        if self.config.play.step_interval_ms > 0:
            pygame.time.set_timer(AUTO_STEP, self.config.play.step_interval_ms)
        logger.info("Display ready at %dx%d", *self.camera.screen_size)
        self.new_game()

    # Game actions -----------------------------------------------------

    def new_game(self) -> None:
        self._cancel_drag()
        self.board.deal()
        logger.info("New game started")

    def step_game(self) -> None:
        self.board.step()

    def walk_player(self, direction: int) -> None:
        self.board.walk(direction)

    # Events -----------------------------------------------------------

    def handle_events(self) -> None:
        """Consume pygame events."""

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == AUTO_STEP:
                self.step_game()
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                pointer_screen = pygame.Vector2(event.pos)
                pointer_world = self.camera.screen_to_world(pointer_screen)
                if event.button == 1:
                    if not self._begin_drag(pointer_world):
                        self._begin_pan(pointer_screen)
                elif event.button == 2:
                    self._place_snap_markers(pointer_world)
                elif event.button == 3:
                    card = self.board.tile_at(pointer_world)
                    if card is not None:
                        card.flip()
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self._end_drag()
                self._end_pan()
            elif event.type == pygame.MOUSEWHEEL:
                amount = getattr(event, "precise_y", event.y)
                if self.dragged_card is not None:
                    self._rotate_dragged(self.wheel.feed(amount))
                else:
                    self.camera.zoom_at(event.y, pygame.Vector2(pygame.mouse.get_pos()))

    def _handle_key(self, key: int) -> None:
        if key == pygame.K_ESCAPE:
            self._handle_escape_press()
        elif key == pygame.K_r:
            self.new_game()
        elif key == pygame.K_SPACE:
            self.step_game()
        elif key in (pygame.K_RIGHT, pygame.K_LEFT):
            self.walk_player(1 if key == pygame.K_RIGHT else -1)

    def _handle_escape_press(self) -> None:
        """Center the camera on the player card when escape is pressed twice."""

        now = pygame.time.get_ticks()
        if (
            self.last_escape_press_time
            and 0 < now - self.last_escape_press_time <= self.escape_double_press_threshold_ms
        ):
            self._center_view()
            self.last_escape_press_time = 0
        else:
            self.last_escape_press_time = now

    def _center_view(self) -> None:
        player = next((card for card in self.board if isinstance(card, PlayerCard)), None)
        if player is not None:
            self.camera.center = pygame.Vector2(player.logical_loc.center)
        else:
            self.camera.center = pygame.Vector2(0, 0)
        self.pan_active = False

    # Dragging ---------------------------------------------------------

    def _begin_drag(self, pointer: pygame.Vector2) -> bool:
        """Start dragging the top-most card under *pointer* if any."""

        card = self.board.tile_at(pointer)
        if card is None:
            return False
        self.dragged_card = card
        self.drag_offset = pointer - card.logical_loc.center
        self.drag_rotation = card.logical_loc.rotation
        self.wheel.reset()
        self.board.bring_to_front(card)
        self._drag_to(pointer)
        return True

    def _drag_to(self, pointer: pygame.Vector2) -> None:
        """Show the dragged card under *pointer*, snapping to nearby cards.

        Only the visual location follows the pointer. The logical location
        changes on drop, and only if the drop location is free.
        """

        card = self.dragged_card
        if card is None:
            return
        candidate = OrientedBox(pointer - self.drag_offset, self.drag_rotation)
        snap = self.board.find_snap(candidate, exclude=card)
        if snap is not None:
            # Keep the card's own heading; the snap may be the half-turn equivalent.
            candidate = OrientedBox(snap.center, candidate.rotation)
            self.snap_edges = list(snap.edges)
            self.snap_is_corner = snap.is_corner
        else:
            self.snap_edges = []
            self.snap_is_corner = False
        self.drag_location = candidate
        if candidate != card.target_visual_loc:
            card.motion.preview(candidate)
        self.drag_colliding = bool(self.board.find_collisions(candidate, exclude=card))

    def _rotate_dragged(self, notches: int) -> None:
        if notches == 0 or self.dragged_card is None:
            return
        self.drag_rotation += notches * self.config.play.wheel_rotation_step
        self._drag_to(self.camera.screen_to_world(pygame.Vector2(pygame.mouse.get_pos())))

    def _end_drag(self) -> None:
        """Drop the dragged card, sending it back if the drop location is taken."""

        card = self.dragged_card
        if card is None:
            return
        location = self.drag_location
        if location is not None and not self.board.find_collisions(location, exclude=card):
            card.move_to(location)
        else:
            logger.debug("%r dropped on another card; returning it", card)
            card.motion.cancel_preview()
        self._cancel_drag()

    def _cancel_drag(self) -> None:
        self.dragged_card = None
        self.drag_location = None
        self.drag_colliding = False
        self.snap_edges = []
        self.snap_is_corner = False
        self.wheel.reset()

    def _place_snap_markers(self, pointer: pygame.Vector2) -> None:
        """Show a marker at every snap of the card under *pointer*."""

        card = self.board.tile_at(pointer)
        if card is None:
            return
        self.board.clear_markers()
        for snap in card.logical_loc.snaps():
            marker = self.board.add(LocationMarker(card.logical_loc))
            marker.move_to(snap.to_box())

    # Panning ----------------------------------------------------------

    def _begin_pan(self, screen_position: pygame.Vector2) -> None:
        self.pan_active = True
        self.pan_last_pos = pygame.Vector2(screen_position)

    def _update_pan(self, screen_position: pygame.Vector2) -> None:
        if not self.pan_active:
            return
        delta = pygame.Vector2(screen_position) - self.pan_last_pos
        if delta.length_squared() > 0:
            self.camera.pan(delta)
            self.pan_last_pos = pygame.Vector2(screen_position)

    def _end_pan(self) -> None:
        self.pan_active = False

    # Frame ------------------------------------------------------------

    def update(self, dt: float) -> None:
        """Advance the game state by *dt* seconds."""

        pointer_screen = pygame.Vector2(pygame.mouse.get_pos())
        if self.dragged_card is not None:
            self._drag_to(self.camera.screen_to_world(pointer_screen))
        elif self.pan_active:
            self._update_pan(pointer_screen)
        self.board.scheduler.tick()

    def draw(self) -> None:
        """Render the current frame."""

        assert self.screen is not None
        self.screen.fill(self.config.display.background)
        for card in self.board:
            self.renderer.draw_card(self.screen, card, self.camera)
        if self.dragged_card is not None and self.drag_colliding:
            self.renderer.draw_outline(
                self.screen, self.dragged_card.visual_loc, self.camera, CardRenderer.COLLISION_COLOR
            )
        self.renderer.draw_edges(self.screen, self.snap_edges, self.camera, self.snap_is_corner)
        pygame.display.flip()

    def run(self) -> None:
        """Run the main loop until the app stops."""

        if not self.running:
            self.setup()

        assert self.clock is not None
        display = self.config.display

        while self.running:
            self.handle_events()
            dt = self.clock.tick(display.frame_rate) / 1000.0
            self.update(dt)
            self.draw()

        logger.info("Shutting down")
        pygame.quit()
