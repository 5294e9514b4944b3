from enum import Enum
from typing import Dict, List


class Face(Enum):
    WHITE = 0
    YELLOW = 1
    RED = 2
    ORANGE = 3
    BLUE = 4
    GREEN = 5

    @property
    def title(self) -> str:
        return self.name.capitalize()

    def display_name(self, language: str = "en") -> str:
        names = DISPLAY_NAMES.get(language, DISPLAY_NAMES["en"])
        return names[self]


OPPOSITES: Dict[Face, Face] = {
    Face.WHITE: Face.YELLOW,
    Face.YELLOW: Face.WHITE,
    Face.RED: Face.ORANGE,
    Face.ORANGE: Face.RED,
    Face.BLUE: Face.GREEN,
    Face.GREEN: Face.BLUE,
}

# Clockwise neighbors of each face, when that face is on top
NEIGHBOR_CYCLES: Dict[Face, List[Face]] = {
    Face.WHITE: [Face.GREEN, Face.RED, Face.BLUE, Face.ORANGE],
    Face.YELLOW: [Face.GREEN, Face.ORANGE, Face.BLUE, Face.RED],
    Face.RED: [Face.WHITE, Face.BLUE, Face.YELLOW, Face.GREEN],
    Face.ORANGE: [Face.WHITE, Face.GREEN, Face.YELLOW, Face.BLUE],
    Face.BLUE: [Face.WHITE, Face.ORANGE, Face.YELLOW, Face.RED],
    Face.GREEN: [Face.WHITE, Face.RED, Face.YELLOW, Face.ORANGE],
}

DISPLAY_NAMES: Dict[str, Dict[Face, str]] = {
    "en": {f: f.title for f in Face},
    "zh": {
        Face.WHITE: "白色",
        Face.YELLOW: "黄色",
        Face.RED: "红色",
        Face.ORANGE: "橙色",
        Face.BLUE: "蓝色",
        Face.GREEN: "绿色",
    },
}


def opposite(f: Face) -> Face:
    return OPPOSITES[f]


def neighbors(f: Face) -> List[Face]:
    return list(NEIGHBOR_CYCLES[f])


def _check_tables():
    for f in Face:
        o = OPPOSITES.get(f)
        if o is None or o == f or OPPOSITES.get(o) != f:
            raise AssertionError(f"Bad opposite for {f}: {o}")
        cycle = NEIGHBOR_CYCLES.get(f)
        if cycle is None or len(cycle) != 4:
            raise AssertionError(f"Neighbor cycle of {f} must have 4 faces")
        if set(cycle) != set(Face) - {f, o}:
            raise AssertionError(f"Neighbor cycle of {f} is not its adjacent faces")
        # Faces across the cycle from each other are opposites
        for i in range(2):
            if OPPOSITES[cycle[i]] != cycle[i + 2]:
                raise AssertionError(f"Neighbor cycle of {f} is out of order")
    for language, names in DISPLAY_NAMES.items():
        if set(names) != set(Face):
            raise AssertionError(f"Missing display names for {language}")


_check_tables()
