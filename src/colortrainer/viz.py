import math
from typing import Callable, Dict, List, Optional

import numpy as np
from PyQt5.QtCore import Qt, QPointF
from PyQt5.QtWidgets import QWidget
from PyQt5.QtGui import QPainter, QColor, QPen, QBrush, QPolygonF
from pyquaternion import Quaternion

from colortrainer.faces import OPPOSITES
from colortrainer.palette import Palette
from colortrainer.session import QuizSession, Stage

_X = np.array([1.0, 0.0, 0.0])
_Y = np.array([0.0, 1.0, 0.0])
_Z = np.array([0.0, 0.0, 1.0])

# Center of each side of the cube and two unit vectors spanning it.
# The viewer looks at the front (-y) with the top (+z) above.
SIDES = {
    "top": (1.5 * _Z, _X, _Y),
    "bottom": (-1.5 * _Z, _X, _Y),
    "front": (-1.5 * _Y, _X, _Z),
    "back": (1.5 * _Y, _X, _Z),
    "right": (1.5 * _X, _Y, _Z),
    "left": (-1.5 * _X, _Y, _Z),
}

STICKER_HALF_WIDTH = 0.46


def sticker_polygons(side: str) -> List[List[np.ndarray]]:
    """Corners of the 9 stickers on one side of the cube"""
    center, a, b = SIDES[side]
    w = STICKER_HALF_WIDTH
    polygons = []
    for i in (-1, 0, 1):
        for j in (-1, 0, 1):
            c = center + i * a + j * b
            polygons.append([c - w * a - w * b, c + w * a - w * b, c + w * a + w * b, c - w * a + w * b])
    return polygons


class CubeViz:
    """Draws the cube for the current round, hiding sides not yet revealed"""

    def __init__(self, session: QuizSession, palette: Callable[[], Palette]):
        self.session = session
        self.palette = palette
        self.init_camera(0, -10, 6)
        self.reset_view()

    def init_camera(self, x, y, z):
        self.camera = np.array([x, y, z])

        screen_x_dir = np.cross(-self.camera, _Z)
        self.screen_x_dir = screen_x_dir / np.linalg.norm(screen_x_dir)
        screen_y_dir = np.cross(self.camera, self.screen_x_dir)
        self.screen_y_dir = screen_y_dir / np.linalg.norm(screen_y_dir)

    def reset_view(self):
        self.view_x = 0.0
        self.view_y = -math.pi / 6

    def side_colors(self) -> Dict[str, Optional[tuple]]:
        """Color of each side, None if it is hidden"""
        quiz = self.session.quiz
        if quiz is None:
            return dict((s, None) for s in SIDES)
        palette = self.palette()
        revealed = self.session.stage == Stage.REVEALED
        colors = {
            "top": palette.color_of(quiz.top),
            "front": palette.color_of(quiz.front),
            "left": None,
            "right": None,
            "back": palette.color_of(OPPOSITES[quiz.front]) if revealed else None,
            "bottom": palette.color_of(OPPOSITES[quiz.top]) if revealed else None,
        }
        if self.session.left_revealed:
            colors["left"] = palette.color_of(quiz.left)
        if self.session.right_revealed:
            colors["right"] = palette.color_of(quiz.right)
        return colors

    def project(self, v: np.ndarray, w: int, h: int):
        scale_factor = min(w, h) * np.linalg.norm(self.camera) / 6
        d = np.linalg.norm(v - self.camera)
        return (
            w / 2 + scale_factor * np.dot(v, self.screen_x_dir) / d,
            h / 2 - scale_factor * np.dot(v, self.screen_y_dir) / d,
        )

    def draw(self, painter: QPainter, w: int, h: int):
        palette = self.palette()
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(0, 0, w, h, QColor(*palette.panel))

        q = Quaternion(axis=[1, 0, 0], angle=self.view_x) * Quaternion(
            axis=[0, 0, 1], angle=self.view_y
        )
        rotation_matrix = q.rotation_matrix

        # Order sides from back to front
        def distance(side):
            return np.linalg.norm(rotation_matrix @ SIDES[side][0] - self.camera)

        colors = self.side_colors()
        painter.setPen(QPen(QColor(0, 0, 0, 160), 2))
        for side in sorted(SIDES, key=lambda s: -distance(s)):
            color = colors[side] or palette.hidden_color
            painter.setBrush(QBrush(QColor(*color)))
            for corners in sticker_polygons(side):
                points = [self.project(rotation_matrix @ v, w, h) for v in corners]
                painter.drawPolygon(QPolygonF([QPointF(x, y) for x, y in points]))

    def rotate(self, dx, dy=0):
        self.view_y += dx * 0.005
        self.view_x += dy * 0.005


class CubeWidget(QWidget):
    """Widget that uses CubeViz for rendering"""

    def __init__(self, viz: CubeViz, size: int = 260, parent=None):
        super(CubeWidget, self).__init__(parent)
        self.viz = viz
        self.viz.session.add_round_listener(self.update)
        self.viz.session.add_stage_listener(self.update)
        self.setMinimumSize(size, size)

        self.last_mouse_pos = None
        self.dragging = False

    def paintEvent(self, event):
        painter = QPainter(self)
        self.viz.draw(painter, self.width(), self.height())

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.dragging = True
            self.last_mouse_pos = event.pos()

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.dragging = False

    def mouseDoubleClickEvent(self, event):
        self.viz.reset_view()
        self.update()

    def mouseMoveEvent(self, event):
        if self.dragging and self.last_mouse_pos:
            dx = event.x() - self.last_mouse_pos.x()
            dy = event.y() - self.last_mouse_pos.y()
            self.viz.rotate(dx, dy)
            self.last_mouse_pos = event.pos()
            self.update()
