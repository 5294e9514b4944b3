from __future__ import annotations

import pytest

from colortrainer.faces import DISPLAY_NAMES, NEIGHBOR_CYCLES, OPPOSITES, Face, neighbors, opposite


def test_six_faces():
    assert len(list(Face)) == 6
    assert sorted(f.value for f in Face) == list(range(6))


@pytest.mark.parametrize("face", list(Face))
def test_opposite_is_an_involution(face):
    assert opposite(opposite(face)) == face
    assert opposite(face) != face


def test_opposite_pairs():
    assert OPPOSITES[Face.WHITE] == Face.YELLOW
    assert OPPOSITES[Face.RED] == Face.ORANGE
    assert OPPOSITES[Face.BLUE] == Face.GREEN
    pairs = {frozenset((f, opposite(f))) for f in Face}
    assert len(pairs) == 3


@pytest.mark.parametrize("face", list(Face))
def test_neighbor_cycle_holds_the_four_adjacent_faces(face):
    cycle = neighbors(face)
    assert len(cycle) == 4
    assert len(set(cycle)) == 4
    assert face not in cycle
    assert opposite(face) not in cycle


def test_neighbors_returns_a_copy():
    cycle = neighbors(Face.WHITE)
    cycle.append(Face.YELLOW)
    assert len(NEIGHBOR_CYCLES[Face.WHITE]) == 4


def test_green_cycle():
    assert NEIGHBOR_CYCLES[Face.GREEN] == [Face.WHITE, Face.RED, Face.YELLOW, Face.ORANGE]


def test_display_names():
    assert Face.WHITE.display_name() == "White"
    assert Face.ORANGE.display_name("zh") == "橙色"
    assert Face.BLUE.display_name("xx") == "Blue"
    for names in DISPLAY_NAMES.values():
        assert set(names) == set(Face)

