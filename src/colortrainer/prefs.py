import json
import logging
import os
import sys
from dataclasses import dataclass, field, fields
from functools import cached_property
from pathlib import Path
from typing import List

from PyQt5.QtWidgets import (
    QDialog,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QGroupBox,
    QDialogButtonBox,
    QSlider,
    QLabel,
    QLineEdit,
    QButtonGroup,
    QRadioButton,
)
from PyQt5.QtCore import Qt

from colortrainer.hints import DEFAULT_MODEL, DEFAULT_TIMEOUT
from colortrainer.palette import THEMES
from colortrainer.session import Delays

LANGUAGES = {"en": "English", "zh": "中文"}

# Numeric settings that may be zero; the rest must be positive
_ZERO_ALLOWED = {"left_reveal_ms", "right_reveal_ms", "next_round_ms"}


@dataclass
class Preferences:
    """Top-level preferences object"""

    theme: str = "dark"
    language: str = "en"
    left_reveal_ms: int = 800
    right_reveal_ms: int = 800
    next_round_ms: int = 1500
    hint_model: str = DEFAULT_MODEL
    hint_timeout: float = DEFAULT_TIMEOUT
    cube_size: int = 260
    listeners: List = field(default_factory=list)

    def delays(self) -> Delays:
        return Delays(
            left_reveal_ms=self.left_reveal_ms,
            right_reveal_ms=self.right_reveal_ms,
            next_round_ms=self.next_round_ms,
        )

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "listeners"}

    def save(self):
        prefs_path = Preferences.get_preferences_path()
        try:
            with open(prefs_path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
        except Exception as e:
            logging.error(f"Error saving preferences: {e}")

    def add_listener(self, callback):
        self.listeners.append(callback)

    def notify(self):
        for listener in self.listeners:
            listener()

    @staticmethod
    def from_dict(prefs: dict) -> "Preferences":
        defaults = Preferences()
        p = Preferences()
        for f in fields(Preferences):
            if f.name == "listeners" or f.name not in prefs:
                continue
            value = prefs[f.name]
            default = getattr(defaults, f.name)
            if isinstance(value, bool) and not isinstance(default, bool):
                continue
            if isinstance(default, (int, float)):
                if not isinstance(value, (int, float)):
                    continue
                if value > 0 or (value == 0 and f.name in _ZERO_ALLOWED):
                    setattr(p, f.name, type(default)(value))
            elif isinstance(value, type(default)):
                setattr(p, f.name, value)
        if p.theme not in THEMES:
            p.theme = defaults.theme
        if p.language not in LANGUAGES:
            p.language = defaults.language
        return p

    @staticmethod
    def load() -> "Preferences":
        prefs_path = Preferences.get_preferences_path()

        if prefs_path.exists():
            try:
                with open(prefs_path, "r", encoding="utf-8") as f:
                    prefs = json.load(f)
                if not isinstance(prefs, dict):
                    raise ValueError("Preferences file must hold an object")
                return Preferences.from_dict(prefs)
            except Exception as e:
                logging.error(f"Error loading preferences: {e}")
                return Preferences()
        else:
            return Preferences()

    @staticmethod
    def get_preferences_path() -> Path:
        return app_dir() / "preferences.json"


class PreferencesDialog(QDialog):
    """Dialog for modifying preferences"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Preferences")
        self.setWindowModality(Qt.NonModal)
        self.setMinimumWidth(320)

        layout = QVBoxLayout()
        self.setLayout(layout)
        layout.addWidget(self.appearance_widget)
        layout.addWidget(self.timing_widget)
        layout.addWidget(self.hint_widget)

        def close():
            preferences.save()
            self.hide()

        button_box = QDialogButtonBox(QDialogButtonBox.Save)
        button_box.accepted.connect(close)
        layout.addWidget(button_box)

    def choice_group(self, name: str, options: dict, current: str, attr: str) -> QGroupBox:
        group = QGroupBox(name)
        layout = QHBoxLayout()
        group.setLayout(layout)
        buttons = QButtonGroup(group)
        for key, label in options.items():
            b = QRadioButton(label)
            b.setObjectName(key)
            b.setChecked(key == current)
            buttons.addButton(b)
            layout.addWidget(b)
        layout.addStretch(1)

        def update(button):
            setattr(preferences, attr, button.objectName())
            preferences.notify()

        buttons.buttonClicked.connect(update)
        return group

    def slider(self, name: str, attr: str, minimum: int, maximum: int) -> QWidget:
        group = QGroupBox(name)
        layout = QHBoxLayout()
        group.setLayout(layout)
        slider = QSlider(Qt.Horizontal)
        label = QLabel()
        layout.addWidget(slider)
        layout.addWidget(label)
        slider.setMinimum(minimum)
        slider.setMaximum(maximum)
        slider.setValue(getattr(preferences, attr))
        label.setText(str(slider.value()))

        def update():
            setattr(preferences, attr, slider.value())
            label.setText(str(slider.value()))
            preferences.notify()

        slider.valueChanged.connect(update)
        return group

    @cached_property
    def appearance_widget(self) -> QWidget:
        group = QGroupBox("Appearance")
        layout = QVBoxLayout()
        group.setLayout(layout)
        layout.addWidget(
            self.choice_group(
                "Theme",
                {t: t.capitalize() for t in THEMES},
                preferences.theme,
                "theme",
            )
        )
        layout.addWidget(
            self.choice_group("Language", LANGUAGES, preferences.language, "language")
        )
        layout.addWidget(self.slider("Cube size", "cube_size", 150, 500))
        return group

    @cached_property
    def timing_widget(self) -> QWidget:
        group = QGroupBox("Timing (ms)")
        layout = QVBoxLayout()
        group.setLayout(layout)
        layout.addWidget(self.slider("Show left answer", "left_reveal_ms", 200, 3000))
        layout.addWidget(self.slider("Show right answer", "right_reveal_ms", 200, 3000))
        layout.addWidget(self.slider("Show result", "next_round_ms", 300, 5000))
        return group

    @cached_property
    def hint_widget(self) -> QWidget:
        group = QGroupBox("Hints")
        layout = QHBoxLayout()
        group.setLayout(layout)
        layout.addWidget(QLabel("Model:"))
        model = QLineEdit(preferences.hint_model)
        layout.addWidget(model, 1)

        def update():
            text = model.text().strip()
            if text:
                preferences.hint_model = text
                preferences.notify()

        model.editingFinished.connect(update)
        return group


_dialog = None


def show_dialog(parent):
    """Show preferences dialog"""
    global _dialog
    if _dialog is None or not _dialog.isVisible():
        _dialog = PreferencesDialog(parent)
    _dialog.show()
    _dialog.raise_()
    _dialog.activateWindow()


def app_dir() -> Path:
    """Return platform-appropriate application home directory"""
    override = os.environ.get("COLORTRAINER_HOME")
    if override:
        path = Path(override)
    elif sys.platform == "darwin":  # macOS
        path = Path.home() / "Library" / "Preferences" / "colortrainer"
    elif sys.platform == "win32":  # Windows
        path = Path(os.environ.get("APPDATA", str(Path.home()))) / "colortrainer"
    else:  # Linux/Unix
        path = Path.home() / ".config" / "colortrainer"
    path.mkdir(parents=True, exist_ok=True)
    return path


# Preferences as saved by the user
preferences = Preferences.load()
