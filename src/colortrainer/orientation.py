import random
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from colortrainer.faces import Face, NEIGHBOR_CYCLES, OPPOSITES


class InvalidOrientation(ValueError):
    """Front and top are not adjacent faces"""

    def __init__(self, front: Face, top: Face):
        super().__init__(f"Invalid orientation: {front.title} cannot have {top.title} on top")
        self.front = front
        self.top = top


@dataclass(frozen=True)
class ResolvedQuiz:
    front: Face
    top: Face
    left: Face
    right: Face

    def faces(self) -> Tuple[Face, Face, Face, Face]:
        return self.front, self.top, self.left, self.right


def resolve_sides(front: Face, top: Face) -> Tuple[Face, Face]:
    """
    Left and right faces when looking at front with top above.
    Going clockwise around the top face, the face after front is on the right,
    and the one before it is on the left.
    """
    rot = NEIGHBOR_CYCLES[top]
    if front not in rot:
        raise InvalidOrientation(front, top)
    i = rot.index(front)
    return rot[(i + 3) % 4], rot[(i + 1) % 4]


def is_adjacent(front: Face, top: Face) -> bool:
    return front in NEIGHBOR_CYCLES[top]


class Orientation:
    def __init__(self, front: Face, top: Face):
        if not is_adjacent(front, top):
            raise InvalidOrientation(front, top)
        self.front = front
        self.top = top

    @property
    def right(self) -> Face:
        return resolve_sides(self.front, self.top)[1]

    @property
    def left(self) -> Face:
        return resolve_sides(self.front, self.top)[0]

    @property
    def back(self) -> Face:
        return OPPOSITES[self.front]

    @property
    def bottom(self) -> Face:
        return OPPOSITES[self.top]

    def resolve(self) -> ResolvedQuiz:
        left, right = resolve_sides(self.front, self.top)
        return ResolvedQuiz(front=self.front, top=self.top, left=left, right=right)

    def __repr__(self):
        return f"front={self.front.title}, top={self.top.title}"

    def __eq__(self, other):
        if self.__class__ == other.__class__:
            return self.front == other.front and self.top == other.top
        return False

    def __hash__(self):
        return hash((self.front, self.top))


def all_orientations():
    return [Orientation(front, top) for top in Face for front in NEIGHBOR_CYCLES[top]]


def generate_round(
    enabled_faces: Iterable[Face], fixed_top: Optional[Face] = None, rng=None
) -> ResolvedQuiz:
    """
    Pick a random orientation using the enabled faces.
    When the pool cannot supply a front or top, the pool is ignored for that
    face rather than failing to produce a question.
    """
    rng = rng or random
    # Iterate in enum order so a seeded rng gives repeatable rounds
    enabled = [f for f in Face if f in set(enabled_faces)]

    if fixed_top is not None and fixed_top in enabled:
        top = fixed_top
        fronts = [f for f in NEIGHBOR_CYCLES[top] if f in enabled]
        if not fronts:
            fronts = NEIGHBOR_CYCLES[top]
        front = rng.choice(fronts)
    else:
        front = rng.choice(enabled)
        excluded = {front, OPPOSITES[front]}
        tops = [f for f in enabled if f not in excluded]
        if not tops:
            tops = [f for f in Face if f not in excluded]
        top = rng.choice(tops)

    return Orientation(front, top).resolve()
