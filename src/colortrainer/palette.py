from typing import Dict, Tuple

from colortrainer.faces import Face

# Sticker colors of a standard cube
FACE_COLORS: Dict[Face, Tuple[int, int, int]] = {
    Face.WHITE: (255, 255, 255),
    Face.YELLOW: (255, 213, 0),
    Face.RED: (183, 18, 52),
    Face.ORANGE: (255, 88, 0),
    Face.BLUE: (0, 70, 173),
    Face.GREEN: (0, 155, 72),
}

# Faces light enough to need dark text
_LIGHT_FACES = {Face.WHITE, Face.YELLOW}


class Palette:
    def __init__(
        self,
        name: str,
        background: Tuple,
        panel: Tuple,
        text: Tuple,
        muted_text: Tuple,
        correct: Tuple,
        wrong: Tuple,
        hidden_color: Tuple,
        opacity: int = 255,
        colors: Dict[Face, Tuple] = None,
    ):
        """Colors for drawing the quiz in one visual theme"""
        self.name = name
        self.background = background
        self.panel = panel
        self.text = text
        self.muted_text = muted_text
        self.correct = correct
        self.wrong = wrong
        self.hidden_color = hidden_color
        self.opacity = opacity
        self.colors = dict(colors or FACE_COLORS)

    def color_of(self, f: Face) -> Tuple:
        c = self.colors[f]
        return c + (self.opacity,) if len(c) < 4 else c

    def text_color_on(self, f: Face) -> Tuple:
        return (15, 23, 42) if f in _LIGHT_FACES else (255, 255, 255)

    @staticmethod
    def by_name(name) -> "Palette":
        if name == "light":
            return Palette(
                "light",
                background=(241, 245, 249),
                panel=(255, 255, 255),
                text=(15, 23, 42),
                muted_text=(100, 116, 139),
                correct=(16, 185, 129),
                wrong=(239, 68, 68),
                hidden_color=(0, 0, 0, 40),
            )
        return Palette(
            "dark",
            background=(2, 6, 23),
            panel=(15, 23, 42),
            text=(255, 255, 255),
            muted_text=(100, 116, 139),
            correct=(52, 211, 153),
            wrong=(248, 113, 113),
            hidden_color=(255, 255, 255, 40),
        )


def css(color: Tuple) -> str:
    """Qt style sheet notation for an RGB or RGBA tuple"""
    if len(color) == 4:
        return f"rgba({color[0]}, {color[1]}, {color[2]}, {color[3]})"
    return f"rgb({color[0]}, {color[1]}, {color[2]})"


THEMES = ("dark", "light")
