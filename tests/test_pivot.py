"""Tests for snapcards/pivot.py — grounded pivots and rotation search."""

from __future__ import annotations

import pytest
from pygame import Vector2

from snapcards.board import Board
from snapcards.game_objects import PlayingCard
from snapcards.geometry import OrientedBox
from snapcards.models import CardFace
from snapcards.pivot import candidate_pivots, find_pivot_rotation, is_grounded


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def xy(point: Vector2) -> tuple[float, float]:
    return (point.x, point.y)


def always_free(_: OrientedBox) -> bool:
    return True


def free_of(*blockers: OrientedBox):
    def is_free(location: OrientedBox) -> bool:
        return not any(location.collides_with(blocker) for blocker in blockers)
    return is_free


MOVER = OrientedBox((0, 0), 0)
GROUND = OrientedBox((0, 150), 0)  # flush beneath MOVER


# ---------------------------------------------------------------------------
# Candidates
# ---------------------------------------------------------------------------

class TestCandidatePivots:
    def test_corners_then_fractions(self):
        pivots = candidate_pivots(MOVER)
        assert len(pivots) == 16
        assert [xy(p) for p in pivots[:4]] == [xy(c) for c in MOVER.corners()]
        # First edge runs from (-50, -75) to (50, -75): 1/2, then 2/3, then 1/3.
        assert xy(pivots[4]) == pytest.approx((0, -75))
        assert xy(pivots[5]) == pytest.approx((50 / 3, -75))
        assert xy(pivots[6]) == pytest.approx((-50 / 3, -75))

    def test_custom_fractions(self):
        assert len(candidate_pivots(MOVER, fractions=(0.5,))) == 8


class TestIsGrounded:
    def test_point_on_edge(self):
        assert is_grounded(Vector2(10, 75), [GROUND])

    def test_point_near_edge_within_epsilon(self):
        assert is_grounded(Vector2(10, 74.5), [GROUND])

    def test_point_off_edge(self):
        assert not is_grounded(Vector2(10, 72), [GROUND])
        assert not is_grounded(Vector2(200, 75), [GROUND])

    def test_no_neighbours(self):
        assert not is_grounded(Vector2(0, 0), [])

    def test_stays_grounded_on_static_board(self):
        point = Vector2(-50, 75)
        results = {is_grounded(point, [GROUND]) for _ in range(5)}
        assert results == {True}


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

class TestFindPivotRotation:
    def test_rolls_over_first_grounded_corner(self):
        rotated = find_pivot_rotation(MOVER, 90, [GROUND], free_of(GROUND))
        assert rotated is not None
        assert xy(rotated.center) == pytest.approx((125, 25))
        assert rotated.rotation == pytest.approx(90)

    def test_skips_pivots_that_collide(self):
        # Turning the other way, the first grounded corner (50, 75) swings the
        # card into GROUND; the next one, (-50, 75), swings it clear.
        rotated = find_pivot_rotation(MOVER, -90, [GROUND], free_of(GROUND))
        assert rotated is not None
        assert xy(rotated.center) == pytest.approx((-125, 25))
        assert rotated.rotation == pytest.approx(270)
        assert not rotated.collides_with(GROUND)

    def test_wall_blocks_last_free_pivot(self):
        wall = OrientedBox((-150, 0), 0)
        assert find_pivot_rotation(MOVER, -90, [GROUND, wall], free_of(GROUND, wall)) is None

    def test_no_ground_means_no_rotation(self):
        assert find_pivot_rotation(MOVER, 45, [], always_free) is None

    def test_all_blocked(self):
        assert find_pivot_rotation(MOVER, 45, [GROUND], lambda _: False) is None

    def test_does_not_modify_input(self):
        box = MOVER.clone()
        find_pivot_rotation(box, 90, [GROUND], always_free)
        assert box == MOVER


class TestPivotMover:
    def test_rotate_commits_and_reports(self):
        board = Board()
        board.add(PlayingCard(CardFace("♠", "A"), GROUND))
        mover = board.add(PlayingCard(CardFace("♥", "2"), MOVER))
        assert board.pivot_mover.rotate(mover, 90)
        assert xy(mover.logical_loc.center) == pytest.approx((125, 25))

    def test_rotate_runs_fallback_when_blocked(self):
        board = Board()
        lonely = board.add(PlayingCard(CardFace("♠", "A"), MOVER))
        calls = []
        assert not board.pivot_mover.rotate(lonely, 90, on_blocked=lambda: calls.append(1))
        assert calls == [1]
        assert lonely.logical_loc == MOVER
