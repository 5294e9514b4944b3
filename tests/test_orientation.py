from __future__ import annotations

import random
from collections import Counter

import pytest

from colortrainer.faces import NEIGHBOR_CYCLES, OPPOSITES, Face
from colortrainer.orientation import (
    InvalidOrientation,
    Orientation,
    ResolvedQuiz,
    all_orientations,
    generate_round,
    is_adjacent,
    resolve_sides,
)

ALL_PAIRS = [(front, top) for front in Face for top in Face]
VALID_PAIRS = [(front, top) for front, top in ALL_PAIRS if front != top and front != OPPOSITES[top]]
INVALID_PAIRS = [(front, top) for front, top in ALL_PAIRS if (front, top) not in VALID_PAIRS]


def test_pair_counts():
    assert len(VALID_PAIRS) == 24
    assert len(INVALID_PAIRS) == 12


@pytest.mark.parametrize("front,top", VALID_PAIRS)
def test_resolve_valid_orientation(front, top):
    left, right = resolve_sides(front, top)
    assert OPPOSITES[left] == right
    assert len({front, top, left, right}) == 4
    for f in (left, right):
        assert f not in (OPPOSITES[front], OPPOSITES[top])
    assert is_adjacent(front, top)


@pytest.mark.parametrize("front,top", INVALID_PAIRS)
def test_resolve_invalid_orientation(front, top):
    with pytest.raises(InvalidOrientation):
        resolve_sides(front, top)
    with pytest.raises(InvalidOrientation):
        Orientation(front, top)
    assert not is_adjacent(front, top)


def test_invalid_orientation_is_a_value_error():
    with pytest.raises(ValueError, match="White cannot have Yellow on top"):
        resolve_sides(Face.WHITE, Face.YELLOW)


@pytest.mark.parametrize("top", list(Face))
def test_rotating_front_around_top_cycles_the_sides(top):
    cycle = NEIGHBOR_CYCLES[top]
    for i in range(4):
        assert resolve_sides(cycle[i], top) == (cycle[(i + 3) % 4], cycle[(i + 1) % 4])
        left, right = resolve_sides(cycle[i], top)
        # Turning to face the right side puts the old front on the left
        assert resolve_sides(right, top)[0] == cycle[i]


def test_white_front_green_top():
    assert resolve_sides(Face.WHITE, Face.GREEN) == (Face.ORANGE, Face.RED)
    o = Orientation(Face.WHITE, Face.GREEN)
    assert o.left == Face.ORANGE
    assert o.right == Face.RED
    assert o.back == Face.YELLOW
    assert o.bottom == Face.BLUE
    assert o.resolve() == ResolvedQuiz(Face.WHITE, Face.GREEN, Face.ORANGE, Face.RED)


def test_resolve_is_deterministic():
    assert all(resolve_sides(f, t) == resolve_sides(f, t) for f, t in VALID_PAIRS)


def test_all_orientations():
    orientations = all_orientations()
    assert len(orientations) == 24
    assert len(set(orientations)) == 24
    assert Orientation(Face.RED, Face.WHITE) in orientations


def test_generate_round_uses_enabled_fronts():
    rng = random.Random(7)
    pool = {Face.WHITE, Face.RED, Face.BLUE}
    fronts = Counter()
    for _ in range(500):
        quiz = generate_round(pool, None, rng)
        assert quiz.front in pool
        assert quiz.top in pool
        assert quiz.top not in (quiz.front, OPPOSITES[quiz.front])
        assert resolve_sides(quiz.front, quiz.top) == (quiz.left, quiz.right)
        fronts[quiz.front] += 1
    assert set(fronts) == pool


def test_generate_round_with_fixed_top():
    rng = random.Random(3)
    pool = set(Face)
    fronts = set()
    for _ in range(200):
        quiz = generate_round(pool, Face.YELLOW, rng)
        assert quiz.top == Face.YELLOW
        fronts.add(quiz.front)
    assert fronts == set(NEIGHBOR_CYCLES[Face.YELLOW])


def test_generate_round_fixed_top_filters_fronts():
    rng = random.Random(5)
    pool = {Face.WHITE, Face.RED, Face.ORANGE}
    for _ in range(100):
        quiz = generate_round(pool, Face.WHITE, rng)
        assert quiz.top == Face.WHITE
        assert quiz.front in (Face.RED, Face.ORANGE)


def test_generate_round_fixed_top_falls_back_to_full_cycle():
    rng = random.Random(11)
    for _ in range(100):
        quiz = generate_round({Face.WHITE, Face.YELLOW}, Face.WHITE, rng)
        assert quiz.top == Face.WHITE
        assert quiz.front in {Face.GREEN, Face.RED, Face.BLUE, Face.ORANGE}


def test_generate_round_ignores_disabled_fixed_top():
    rng = random.Random(13)
    pool = {Face.WHITE, Face.RED, Face.BLUE}
    for _ in range(100):
        quiz = generate_round(pool, Face.YELLOW, rng)
        assert quiz.front in pool


def test_generate_round_falls_back_to_all_tops():
    rng = random.Random(17)
    # Any front drawn from an opposite pair leaves no enabled top
    for _ in range(100):
        quiz = generate_round({Face.RED, Face.ORANGE}, None, rng)
        assert quiz.front in (Face.RED, Face.ORANGE)
        assert quiz.top in {Face.WHITE, Face.YELLOW, Face.BLUE, Face.GREEN}


def test_generate_round_is_reproducible_with_seed():
    a = [generate_round(set(Face), None, random.Random(42)) for _ in range(5)]
    b = [generate_round(set(Face), None, random.Random(42)) for _ in range(5)]
    assert a == b


def test_generate_round_default_rng():
    quiz = generate_round(set(Face))
    assert is_adjacent(quiz.front, quiz.top)
