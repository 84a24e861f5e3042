"""Tests for snapcards/board.py — membership, queries, dealing and stepping."""

from __future__ import annotations

from random import Random

import pytest
from pygame import Vector2

from snapcards.board import Board
from snapcards.config import GameConfig, PlayConfig
from snapcards.game_objects import (
    FractalCard,
    LocationMarker,
    PlayerCard,
    PlayingCard,
    RollerCard,
    StepOutcome,
)
from snapcards.geometry import OrientedBox
from snapcards.models import CardFace, Deck
from snapcards.motion import AnimationScheduler


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def card_at(x: float, y: float, rotation: float = 0.0) -> PlayingCard:
    return PlayingCard(CardFace("♠", "7"), OrientedBox((x, y), rotation))


def faces(board: Board) -> list[str]:
    return [tile.face_text for tile in board if isinstance(tile, PlayingCard)]


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------

class TestMembership:
    def test_add_on_top_and_beneath(self):
        board = Board()
        first = board.add(card_at(0, 0))
        second = board.add(card_at(200, 0))
        bottom = board.add(card_at(400, 0), bottom=True)
        assert board.tiles == [bottom, first, second]
        assert len(board) == 3
        assert first in board

    def test_add_shares_scheduler(self):
        scheduler = AnimationScheduler()
        board = Board(scheduler=scheduler)
        card = board.add(card_at(0, 0))
        assert card.motion.scheduler is scheduler
        card.move_to(OrientedBox((50, 0)))
        assert scheduler.is_pending(card.motion)

    def test_host_scheduler_drives_animation(self):
        host = AnimationScheduler()
        board = Board(scheduler=host)
        assert board.scheduler is host
        card = board.add(card_at(0, 0))
        card.move_to(OrientedBox((100, 0)))
        assert host.tick() == 1
        assert card.visual_loc.center.x == pytest.approx(36)

    def test_remove_cancels_pending_animation(self):
        board = Board()
        card = board.add(card_at(0, 0))
        card.move_to(OrientedBox((50, 0)))
        board.remove(card)
        assert card not in board
        assert len(board.scheduler) == 0

    def test_bring_to_front(self):
        board = Board()
        first = board.add(card_at(0, 0))
        second = board.add(card_at(200, 0))
        board.bring_to_front(first)
        assert board.tiles == [second, first]

    def test_iteration_is_a_snapshot(self):
        board = Board()
        board.add(card_at(0, 0))
        for tile in board:
            board.add(card_at(500, 0))
        assert len(board) == 2

    def test_clear_markers_keeps_cards(self):
        board = Board()
        card = board.add(card_at(0, 0))
        board.add(LocationMarker(OrientedBox((0, -150))))
        board.clear_markers()
        assert board.tiles == [card]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

class TestQueries:
    def test_find_collisions_excludes_self(self):
        board = Board()
        card = board.add(card_at(0, 0))
        other = board.add(card_at(40, 0))
        assert board.find_collisions(card.logical_loc, exclude=card) == [other]
        assert board.find_collisions(OrientedBox((500, 0)), exclude=card) == []

    def test_markers_never_collide(self):
        board = Board()
        board.add(LocationMarker(OrientedBox((0, 0))))
        assert board.find_collisions(OrientedBox((0, 0))) == []

    def test_find_snap_ignores_moving_card(self):
        board = Board()
        board.add(card_at(0, 0))
        moving = board.add(card_at(3, -148))
        snap = board.find_snap(moving.logical_loc, exclude=moving)
        assert snap is not None
        assert (snap.center.x, snap.center.y) == pytest.approx((0, -150))

    def test_find_snap_ignores_markers(self):
        board = Board()
        board.add(LocationMarker(OrientedBox((0, 0))))
        assert board.find_snap(OrientedBox((3, -148))) is None

    def test_tile_at_prefers_top_card(self):
        board = Board()
        below = board.add(card_at(0, 0))
        above = board.add(card_at(30, 0))
        board.add(LocationMarker(OrientedBox((0, 0))))
        assert board.tile_at(Vector2(40, 0)) is above
        assert board.tile_at(Vector2(-40, 0)) is below
        assert board.tile_at(Vector2(500, 500)) is None


# ---------------------------------------------------------------------------
# Dealing
# ---------------------------------------------------------------------------

class TestDeal:
    def test_deals_full_table(self):
        board = Board()
        board.deal(Random(1))
        assert len(board) == 58
        assert len(faces(board)) == 52
        assert len({text for text in faces(board)}) == 52
        assert sum(isinstance(tile, RollerCard) for tile in board) == 4
        assert sum(isinstance(tile, FractalCard) for tile in board) == 1
        assert isinstance(board.tiles[-1], PlayerCard)

    def test_dealt_cards_do_not_overlap(self):
        board = Board()
        board.deal(Random(1))
        for tile in board:
            assert board.find_collisions(tile.logical_loc, exclude=tile) == []
            assert tile.motion.settled

    def test_seed_makes_deal_repeatable(self):
        config = GameConfig(play=PlayConfig(seed=7))
        first, second = Board(config), Board(config)
        first.deal()
        second.deal()
        assert faces(first) == faces(second)

    def test_redeal_replaces_table(self):
        board = Board()
        board.deal(Random(1))
        board.deal(Random(2))
        assert len(board) == 58

    def test_standard_deck_shuffles_repeatably(self):
        first, second = Deck.standard(), Deck.standard()
        first.shuffle(Random(3))
        second.shuffle(Random(3))
        assert first.faces == second.faces
        assert len(set(first.faces)) == 52

    def test_roller_angles_follow_config(self):
        board = Board(GameConfig(play=PlayConfig(roller_angles=(90,))))
        board.deal(Random(1))
        rollers = [tile for tile in board if isinstance(tile, RollerCard)]
        assert [roller.delta_angle for roller in rollers] == [90]


# ---------------------------------------------------------------------------
# Step and walk
# ---------------------------------------------------------------------------

class TestStep:
    def test_step_reports_each_face_up_card(self):
        board = Board()
        plain = board.add(card_at(0, 150))
        roller = board.add(RollerCard(90, OrientedBox((0, 0))))
        outcomes = board.step()
        assert outcomes == {plain: StepOutcome.IDLE, roller: StepOutcome.COMMITTED}

    def test_flipped_cards_are_skipped(self):
        board = Board()
        roller = board.add(RollerCard(90, OrientedBox((0, 0))))
        roller.flip()
        assert board.step() == {}
        assert roller.delta_angle == 90

    def test_step_clears_old_markers(self):
        board = Board()
        board.add(LocationMarker(OrientedBox((0, 0))))
        board.step()
        assert board.markers() == []

    def test_spawned_copies_wait_for_next_step(self):
        board = Board()
        fractal = board.add(FractalCard(OrientedBox((0, 0))))
        outcomes = board.step()
        assert outcomes == {fractal: StepOutcome.SPAWNED}
        assert len(board) == 3

    def test_walk_moves_player_only(self):
        board = Board()
        for x in (-100, 0, 100):
            board.add(card_at(x, 150))
        player = board.add(PlayerCard(OrientedBox((0, 0))))
        outcomes = board.walk(1)
        assert outcomes[player] is StepOutcome.COMMITTED
        assert all(
            outcome is StepOutcome.IDLE for tile, outcome in outcomes.items() if tile is not player
        )
        assert (player.logical_loc.center.x, player.logical_loc.center.y) == pytest.approx((50, 0))
