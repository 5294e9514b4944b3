import logging
import os
import sys
from functools import cached_property
from typing import Dict, Optional

from PyQt5.QtWidgets import (
    QApplication,
    QMainWindow,
    QVBoxLayout,
    QHBoxLayout,
    QGridLayout,
    QWidget,
    QLabel,
    QPushButton,
    QGroupBox,
    QButtonGroup,
    QMessageBox,
    QAction,
)
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence

from colortrainer import catch_errors, prefs
from colortrainer.faces import Face
from colortrainer.hints import GeminiHintProvider, fallback_text
from colortrainer.palette import Palette, css
from colortrainer.prefs import preferences
from colortrainer.session import QuizSession, Stage
from colortrainer.timers import QtScheduler
from colortrainer.viz import CubeViz, CubeWidget

TEXT = {
    "en": {
        "title": "Cube Color Trainer",
        "total": "Total",
        "correct": "Correct",
        "streak": "Streak",
        "accuracy": "Accuracy",
        "top": "TOP",
        "front": "FRONT",
        "ask_left": "1. What color is on the left?",
        "ask_right": "2. What color is on the right?",
        "perfect": "Perfect! ✓",
        "incorrect": "Incorrect ✗",
        "answer": "{side}: you chose {chosen}, answer {expected}",
        "left": "Left",
        "right": "Right",
        "next": "Next (N)",
        "hint": "Mnemonic (H)",
        "loading": "Thinking...",
        "faces": "Faces in play (at least 3)",
        "fixed_top": "Fixed top",
        "random": "Random",
    },
    "zh": {
        "title": "魔方配色训练",
        "total": "总计",
        "correct": "正确",
        "streak": "连胜",
        "accuracy": "正确率",
        "top": "顶面 TOP",
        "front": "正面 FRONT",
        "ask_left": "1. 左边是什么颜色？",
        "ask_right": "2. 右边是什么颜色？",
        "perfect": "完美！✓",
        "incorrect": "错误 ✗",
        "answer": "{side}：你的选择 {chosen}，正确答案 {expected}",
        "left": "左侧",
        "right": "右侧",
        "next": "下一题 (N)",
        "hint": "记忆技巧 (H)",
        "loading": "思考中...",
        "faces": "训练颜色（至少 3 个）",
        "fixed_top": "固定顶面",
        "random": "随机",
    },
}


def tr(key: str) -> str:
    return TEXT.get(preferences.language, TEXT["en"])[key]


def face_name(f: Optional[Face]) -> str:
    return f.display_name(preferences.language) if f is not None else "-"


class AppWindow(QMainWindow):
    """Main window of the color scheme drill"""

    def __init__(self):
        super(AppWindow, self).__init__()
        self.resize(900, 760)

        self.scheduler = QtScheduler(self)
        self.hint_provider = GeminiHintProvider(
            model=preferences.hint_model,
            timeout=preferences.hint_timeout,
            language=preferences.language,
        )
        self.session = QuizSession(
            self.scheduler,
            delays=preferences.delays(),
            hint_source=self.hint_provider.mnemonic_or_fallback,
            hint_fallback=fallback_text(preferences.language),
        )
        self.session.add_round_listener(self.refresh_round)
        self.session.add_stage_listener(self.refresh_stage)
        self.session.add_stats_listener(self.refresh_stats)
        self.session.add_hint_listener(self.refresh_hint)
        self.session.add_config_listener(self.refresh_config)
        preferences.add_listener(self.preferences_changed)

        self._create_menus()
        self._create_shortcuts()

        central_widget = self._empty_container(QVBoxLayout())
        central_widget.layout().setSpacing(12)
        central_widget.layout().setContentsMargins(16, 16, 16, 16)
        self.setCentralWidget(central_widget)
        central_widget.layout().addWidget(self.header_widget)
        w = self._empty_container(QHBoxLayout())
        w.layout().setSpacing(16)
        w.layout().addWidget(self.cube_widget)
        w.layout().addWidget(self.quiz_widget, 1)
        central_widget.layout().addWidget(w, 1)
        central_widget.layout().addWidget(self.config_widget)

        self.preferences_changed()

    @property
    def palette_(self) -> Palette:
        return Palette.by_name(preferences.theme)

    def _empty_container(self, layout) -> QWidget:
        w = QWidget()
        w.setLayout(layout)
        w.setContentsMargins(0, 0, 0, 0)
        w.layout().setContentsMargins(0, 0, 0, 0)
        w.layout().setSpacing(0)
        return w

    @cached_property
    def stat_labels(self) -> Dict[str, QLabel]:
        return dict((k, QLabel()) for k in ["total", "correct", "streak", "accuracy"])

    @cached_property
    def header_widget(self) -> QWidget:
        w = self._empty_container(QHBoxLayout())
        self.title_label = QLabel()
        self.title_label.setObjectName("title")
        w.layout().addWidget(self.title_label)
        w.layout().addStretch(1)
        for label in self.stat_labels.values():
            label.setObjectName("stat")
            label.setAlignment(Qt.AlignCenter)
            label.setMinimumWidth(80)
            w.layout().addWidget(label)
        return w

    @cached_property
    def cube_widget(self) -> CubeWidget:
        self.viz = CubeViz(self.session, lambda: self.palette_)
        return CubeWidget(self.viz, preferences.cube_size)

    @cached_property
    def face_tiles(self) -> Dict[str, QLabel]:
        tiles = {}
        for key in ["top", "front"]:
            tile = QLabel()
            tile.setAlignment(Qt.AlignCenter)
            tile.setFixedSize(110, 110)
            tiles[key] = tile
        return tiles

    @cached_property
    def answer_buttons(self) -> Dict[Face, QPushButton]:
        buttons = {}
        for f in Face:
            b = QPushButton()
            b.setMinimumHeight(64)
            b.setFocusPolicy(Qt.NoFocus)
            b.clicked.connect(lambda checked=False, face=f: self.answer(face))
            buttons[f] = b
        return buttons

    @cached_property
    def reveal_tiles(self) -> Dict[str, Dict[Face, QLabel]]:
        tiles = {}
        for side in ["left", "right"]:
            tiles[side] = {}
            for f in Face:
                tile = QLabel()
                tile.setAlignment(Qt.AlignCenter)
                tile.setMinimumHeight(40)
                tiles[side][f] = tile
        return tiles

    @cached_property
    def reveal_widget(self) -> QWidget:
        """Both answers side by side once the round is over"""
        w = QWidget()
        layout = QGridLayout(w)
        layout.setSpacing(6)
        self.reveal_captions = {}
        for row, (side, tiles) in enumerate(self.reveal_tiles.items()):
            caption = QLabel()
            caption.setObjectName("caption")
            self.reveal_captions[side] = caption
            layout.addWidget(caption, row, 0)
            for col, tile in enumerate(tiles.values()):
                layout.addWidget(tile, row, col + 1)
        w.hide()
        return w

    @cached_property
    def quiz_widget(self) -> QWidget:
        w = self._empty_container(QVBoxLayout())
        w.layout().setSpacing(12)

        tiles = self._empty_container(QHBoxLayout())
        tiles.layout().setSpacing(24)
        tiles.layout().addStretch(1)
        self.tile_captions = {}
        for key, tile in self.face_tiles.items():
            col = self._empty_container(QVBoxLayout())
            caption = QLabel()
            caption.setObjectName("caption")
            caption.setAlignment(Qt.AlignCenter)
            self.tile_captions[key] = caption
            col.layout().addWidget(caption)
            col.layout().addWidget(tile)
            tiles.layout().addWidget(col)
        tiles.layout().addStretch(1)
        w.layout().addWidget(tiles)

        self.prompt_label = QLabel()
        self.prompt_label.setObjectName("prompt")
        self.prompt_label.setAlignment(Qt.AlignCenter)
        w.layout().addWidget(self.prompt_label)

        self.answer_grid = QWidget()
        grid_layout = QGridLayout(self.answer_grid)
        grid_layout.setSpacing(10)
        for i, b in enumerate(self.answer_buttons.values()):
            grid_layout.addWidget(b, i // 3, i % 3)
        w.layout().addWidget(self.answer_grid)
        w.layout().addWidget(self.reveal_widget)

        self.result_label = QLabel()
        self.result_label.setObjectName("result")
        self.result_label.setAlignment(Qt.AlignCenter)
        self.result_label.setWordWrap(True)
        w.layout().addWidget(self.result_label)

        row = self._empty_container(QHBoxLayout())
        row.layout().setSpacing(10)
        self.next_button = QPushButton()
        self.next_button.clicked.connect(self.next_round)
        self.hint_button = QPushButton()
        self.hint_button.clicked.connect(self.request_hint)
        row.layout().addWidget(self.next_button)
        row.layout().addWidget(self.hint_button)
        w.layout().addWidget(row)

        self.hint_label = QLabel()
        self.hint_label.setObjectName("hint")
        self.hint_label.setWordWrap(True)
        self.hint_label.setAlignment(Qt.AlignCenter)
        w.layout().addWidget(self.hint_label)
        w.layout().addStretch(1)
        return w

    @cached_property
    def config_widget(self) -> QWidget:
        w = self._empty_container(QHBoxLayout())
        w.layout().setSpacing(16)

        self.faces_group = QGroupBox()
        faces_layout = QHBoxLayout(self.faces_group)
        self.face_toggles = {}
        for f in Face:
            b = QPushButton()
            b.setCheckable(True)
            b.setFocusPolicy(Qt.NoFocus)
            b.clicked.connect(lambda checked=False, face=f: self.toggle_face(face))
            self.face_toggles[f] = b
            faces_layout.addWidget(b)
        w.layout().addWidget(self.faces_group, 1)

        self.top_group = QGroupBox()
        top_layout = QHBoxLayout(self.top_group)
        self.top_buttons = QButtonGroup(self.top_group)
        self.top_buttons.setExclusive(True)
        self.top_selectors = {}
        for f in [None] + list(Face):
            b = QPushButton()
            b.setCheckable(True)
            b.setFocusPolicy(Qt.NoFocus)
            b.clicked.connect(lambda checked=False, face=f: self.set_fixed_top(face))
            self.top_buttons.addButton(b)
            self.top_selectors[f] = b
            top_layout.addWidget(b)
        w.layout().addWidget(self.top_group, 1)
        return w

    @catch_errors
    def answer(self, face: Face):
        self.session.submit(face)

    @catch_errors
    def next_round(self, *args):
        self.session.new_round()

    @catch_errors
    def request_hint(self, *args):
        self.session.request_hint()

    @catch_errors
    def toggle_face(self, face: Face):
        if not self.session.toggle_face(face):
            # Rejected, put the button back the way it was
            self.refresh_config()

    @catch_errors
    def set_fixed_top(self, face: Optional[Face]):
        if not self.session.set_fixed_top(face):
            self.refresh_config()

    def refresh_round(self):
        quiz = self.session.quiz
        p = self.palette_
        for key, tile in self.face_tiles.items():
            f = getattr(quiz, key)
            tile.setText(face_name(f))
            tile.setStyleSheet(
                f"background-color: {css(p.color_of(f))}; color: {css(p.text_color_on(f))};"
                "border: 4px solid black; border-radius: 18px; font-weight: bold; font-size: 16px;"
            )

    def answer_style(self, f: Face, chosen: Optional[Face], expected: Optional[Face]) -> str:
        p = self.palette_
        border = "transparent"
        if expected is not None and f == expected:
            border = css(p.correct)
        elif chosen is not None and f == chosen:
            border = css(p.wrong)
        return (
            f"background-color: {css(p.color_of(f))}; color: {css(p.text_color_on(f))};"
            f"border: 5px solid {border}; border-radius: 14px; font-weight: bold; font-size: 18px;"
        )

    def refresh_stage(self):
        s = self.session
        quiz = s.quiz
        if s.stage == Stage.AWAITING_LEFT:
            prompt = tr("ask_left")
            chosen, revealed = s.left_answer, s.left_revealed
            expected = quiz.left if revealed else None
        elif s.stage == Stage.AWAITING_RIGHT:
            prompt = tr("ask_right")
            chosen, revealed = s.right_answer, s.right_revealed
            expected = quiz.right if revealed else None
        else:
            prompt = tr("perfect") if s.is_correct else tr("incorrect")
            chosen, revealed, expected = None, True, None

        self.prompt_label.setText(prompt)
        color = self.palette_.text
        if s.stage == Stage.REVEALED:
            color = self.palette_.correct if s.is_correct else self.palette_.wrong
        self.prompt_label.setStyleSheet(f"color: {css(color)};")
        for f, b in self.answer_buttons.items():
            b.setText(face_name(f))
            b.setEnabled(not revealed)
            b.setStyleSheet(self.answer_style(f, chosen, expected))

        if s.stage == Stage.REVEALED:
            lines = [
                tr("answer").format(
                    side=tr("left"), chosen=face_name(s.left_answer), expected=face_name(quiz.left)
                ),
                tr("answer").format(
                    side=tr("right"), chosen=face_name(s.right_answer), expected=face_name(quiz.right)
                ),
            ]
            self.result_label.setText("\n".join(lines))
            answers = {
                "left": (s.left_answer, quiz.left),
                "right": (s.right_answer, quiz.right),
            }
            for side, tiles in self.reveal_tiles.items():
                side_chosen, side_expected = answers[side]
                for f, tile in tiles.items():
                    tile.setText(face_name(f))
                    tile.setStyleSheet(self.answer_style(f, side_chosen, side_expected))
        else:
            self.result_label.setText("")
        self.answer_grid.setVisible(s.stage != Stage.REVEALED)
        self.reveal_widget.setVisible(s.stage == Stage.REVEALED)
        self.refresh_hint()

    def refresh_stats(self):
        stats = self.session.stats
        values = {
            "total": stats.total,
            "correct": stats.correct,
            "streak": stats.streak,
            "accuracy": f"{stats.accuracy:.0%}",
        }
        for key, label in self.stat_labels.items():
            label.setText(f"{tr(key)}\n{values[key]}")

    def refresh_hint(self):
        s = self.session
        self.hint_button.setEnabled(
            s.stage == Stage.REVEALED and not s.hint_loading and s.hint is None
        )
        self.hint_button.setText(tr("loading") if s.hint_loading else tr("hint"))
        self.hint_label.setText(f"“{s.hint}”" if s.hint else "")

    def refresh_config(self):
        config = self.session.configuration
        p = self.palette_
        for f, b in self.face_toggles.items():
            enabled = f in config.enabled_faces
            b.setText(face_name(f))
            b.setChecked(enabled)
            b.setStyleSheet(
                f"background-color: {css(p.color_of(f)) if enabled else css(p.hidden_color)};"
                f"color: {css(p.text_color_on(f)) if enabled else css(p.muted_text)};"
                "border-radius: 8px; padding: 6px;"
            )
        for f, b in self.top_selectors.items():
            b.setText(tr("random") if f is None else face_name(f))
            b.setEnabled(f is None or f in config.enabled_faces)
            b.setChecked(f == config.effective_top)

    def apply_theme(self):
        p = self.palette_
        self.centralWidget().setStyleSheet(
            f"QWidget {{ background-color: {css(p.background)}; color: {css(p.text)}; }}"
            f"QGroupBox {{ background-color: {css(p.panel)}; border-radius: 10px; padding-top: 18px; }}"
            f"QLabel#title {{ font-size: 26px; font-weight: 900; }}"
            f"QLabel#stat {{ background-color: {css(p.panel)}; border-radius: 8px; padding: 6px; font-weight: bold; }}"
            f"QLabel#caption {{ color: {css(p.muted_text)}; font-size: 11px; font-weight: bold; }}"
            f"QLabel#prompt {{ font-size: 22px; font-weight: 900; }}"
            f"QLabel#hint {{ font-style: italic; }}"
        )

    @catch_errors
    def preferences_changed(self):
        self.session.delays = preferences.delays()
        self.hint_provider.model = preferences.hint_model
        self.hint_provider.timeout = preferences.hint_timeout
        self.hint_provider.language = preferences.language
        self.session.hint_fallback = fallback_text(preferences.language)
        self.cube_widget.setMinimumSize(preferences.cube_size, preferences.cube_size)
        self.setWindowTitle(tr("title"))
        self.title_label.setText(tr("title"))
        for key, caption in self.tile_captions.items():
            caption.setText(tr(key))
        for side, caption in self.reveal_captions.items():
            caption.setText(tr(side))
        self.next_button.setText(tr("next"))
        self.faces_group.setTitle(tr("faces"))
        self.top_group.setTitle(tr("fixed_top"))
        self.apply_theme()
        self.refresh_round()
        self.refresh_stage()
        self.refresh_stats()
        self.refresh_hint()
        self.refresh_config()
        self.cube_widget.update()

    def _create_shortcuts(self):
        def add(keys, callback):
            action = QAction(self)
            action.setShortcuts([QKeySequence(k) for k in keys])
            action.triggered.connect(callback)
            self.addAction(action)

        for f in Face:
            add([f.name[0]], lambda checked=False, face=f: self.answer(face))
        add(["N", "Space"], self.next_round)
        add(["H"], self.request_hint)

    def _create_menus(self):
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("&File")

        prefs_action = QAction("&Preferences...", self)
        prefs_action.setShortcut(QKeySequence.Preferences)
        prefs_action.triggered.connect(lambda: prefs.show_dialog(self))
        file_menu.addAction(prefs_action)

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        help_menu = menu_bar.addMenu("&Help")
        about_action = QAction("&About", self)
        about_action.triggered.connect(self.show_about)
        help_menu.addAction(about_action)

    def show_about(self):
        about = QMessageBox(self)
        about.setWindowTitle("About")
        about.setText(
            f"{tr('title')}\n\n"
            "Look at the front face with the top face above it, "
            "then name the colors on the left and on the right.\n\n"
            "Keys: W Y R O B G answer, N next, H mnemonic.\n"
            "Set GEMINI_API_KEY to enable mnemonics."
        )
        about.setStandardButtons(QMessageBox.Ok)
        about.show()

    def closeEvent(self, event):
        self.session.shutdown()
        self.scheduler.shutdown()
        super().closeEvent(event)


def main():
    app = QApplication(sys.argv)
    app.setApplicationName("Cube Color Trainer")
    window = AppWindow()
    window.show()
    sys.exit(app.exec_())


def run():
    logfile = prefs.app_dir() / "colortrainer.log"
    logging.basicConfig(
        filename=logfile,
        filemode="w",
        level=logging.DEBUG,
        format="%(levelname)s - %(message)s",
    )

    if getattr(sys, "frozen", False):  # Running from a PyInstaller bundle
        bundle_dir = os.path.dirname(sys.executable)
        if os.path.basename(bundle_dir) == "MacOS":
            logging.debug(f"Running bundle from {bundle_dir}")
            os.chdir(os.path.dirname(os.path.dirname(bundle_dir)))
    main()


if __name__ == "__main__":
    run()
