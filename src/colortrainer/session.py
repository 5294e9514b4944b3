import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, FrozenSet, Iterable, List, Optional

from colortrainer.faces import Face
from colortrainer.orientation import ResolvedQuiz, generate_round
from colortrainer.timers import Scheduler

# Smallest pool of enabled faces the user may configure
MIN_ENABLED_FACES = 3

DEFAULT_FIXED_TOP = Face.YELLOW


class Stage(Enum):
    AWAITING_LEFT = "left"
    AWAITING_RIGHT = "right"
    REVEALED = "revealed"


@dataclass
class Statistics:
    total: int = 0
    correct: int = 0
    streak: int = 0

    def record(self, is_correct: bool):
        self.total += 1
        if is_correct:
            self.correct += 1
            self.streak += 1
        else:
            self.streak = 0

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0


@dataclass(frozen=True)
class Configuration:
    enabled_faces: FrozenSet[Face] = field(default_factory=lambda: frozenset(Face))
    fixed_top: Optional[Face] = DEFAULT_FIXED_TOP

    @property
    def effective_top(self) -> Optional[Face]:
        """Fixed top, if it is currently in use"""
        if self.fixed_top in self.enabled_faces:
            return self.fixed_top
        return None


@dataclass
class Delays:
    """Pauses, in milliseconds, that let the learner see each answer"""

    left_reveal_ms: int = 800
    right_reveal_ms: int = 800
    next_round_ms: int = 1500


class QuizSession:
    """State of the drill: the current round, answers and statistics"""

    def __init__(
        self,
        scheduler: Scheduler,
        configuration: Optional[Configuration] = None,
        delays: Optional[Delays] = None,
        hint_source: Optional[Callable[[ResolvedQuiz], str]] = None,
        hint_fallback: str = "No tip available.",
        rng=None,
    ):
        self.scheduler = scheduler
        self.configuration = configuration or Configuration()
        self.delays = delays or Delays()
        self.hint_source = hint_source
        self.hint_fallback = hint_fallback
        self.rng = rng
        self.stats = Statistics()

        self.quiz: Optional[ResolvedQuiz] = None
        self.stage = Stage.AWAITING_LEFT
        self.left_answer: Optional[Face] = None
        self.right_answer: Optional[Face] = None
        self.left_revealed = False
        self.right_revealed = False
        self.hint: Optional[str] = None
        self.hint_loading = False
        self.generation = 0

        self._pending = None
        self._hint_task = None
        self._round_listeners = []
        self._stage_listeners = []
        self._stats_listeners = []
        self._hint_listeners = []
        self._config_listeners = []

        self.new_round()

    @property
    def is_correct(self) -> Optional[bool]:
        """Outcome of the current round, once both answers are in"""
        if self.quiz is None or self.left_answer is None or self.right_answer is None:
            return None
        return self.left_answer == self.quiz.left and self.right_answer == self.quiz.right

    def submit_left(self, face: Face) -> bool:
        if self.stage != Stage.AWAITING_LEFT or self.left_revealed:
            return False
        self.left_answer = face
        self.left_revealed = True
        logging.debug(f"Left answer {face.title}, expected {self.quiz.left.title}")
        self._schedule(self.delays.left_reveal_ms, self._ask_right)
        self.notify_stage_listeners()
        return True

    def submit_right(self, face: Face) -> bool:
        if self.stage != Stage.AWAITING_RIGHT or self.right_revealed:
            return False
        self.right_answer = face
        self.right_revealed = True
        logging.debug(f"Right answer {face.title}, expected {self.quiz.right.title}")
        self.stats.record(self.is_correct)
        self._schedule(self.delays.right_reveal_ms, self._reveal)
        self.notify_stats_listeners()
        self.notify_stage_listeners()
        return True

    def submit(self, face: Face) -> bool:
        """Answer whichever side is currently being asked"""
        if self.stage == Stage.AWAITING_LEFT:
            return self.submit_left(face)
        if self.stage == Stage.AWAITING_RIGHT:
            return self.submit_right(face)
        return False

    def new_round(self):
        self._cancel_pending()
        if self._hint_task is not None:
            self._hint_task.cancel()
            self._hint_task = None
        self.generation += 1
        config = self.configuration
        self.quiz = generate_round(config.enabled_faces, config.fixed_top, self.rng)
        self.stage = Stage.AWAITING_LEFT
        self.left_answer = None
        self.right_answer = None
        self.left_revealed = False
        self.right_revealed = False
        self.hint = None
        self.hint_loading = False
        logging.debug(f"Round {self.generation}: {self.quiz}")
        self.notify_round_listeners()
        self.notify_stage_listeners()
        self.notify_hint_listeners()

    def toggle_face(self, face: Face) -> bool:
        enabled = set(self.configuration.enabled_faces)
        if face in enabled:
            enabled.remove(face)
        else:
            enabled.add(face)
        return self.update_configuration(enabled, self.configuration.fixed_top)

    def set_fixed_top(self, face: Optional[Face]) -> bool:
        return self.update_configuration(self.configuration.enabled_faces, face)

    def update_configuration(
        self, enabled_faces: Iterable[Face], fixed_top: Optional[Face]
    ) -> bool:
        enabled = frozenset(enabled_faces)
        if len(enabled) < MIN_ENABLED_FACES:
            logging.debug(f"Rejected configuration with {len(enabled)} faces")
            return False
        # A stored fixed top may lapse when its face is disabled, but a disabled
        # face cannot be chosen as the fixed top
        if fixed_top is not None and fixed_top != self.configuration.fixed_top:
            if fixed_top not in enabled:
                logging.debug(f"Rejected fixed top {fixed_top.title}: not enabled")
                return False
        config = Configuration(enabled_faces=enabled, fixed_top=fixed_top)
        if config == self.configuration:
            return False
        self.configuration = config
        self.notify_config_listeners()
        self.new_round()
        return True

    def request_hint(self) -> bool:
        # The mnemonic names both answers, so it is only offered after the reveal
        if self.hint_source is None or self.quiz is None:
            return False
        if self.stage != Stage.REVEALED:
            return False
        if self.hint_loading or self.hint is not None:
            return False
        self.hint_loading = True
        generation = self.generation
        quiz = self.quiz
        self.notify_hint_listeners()
        task = self.scheduler.run_in_background(
            lambda: self._fetch_hint(quiz),
            lambda text: self._hint_ready(generation, text),
        )
        if self.hint_loading and generation == self.generation:
            self._hint_task = task
        return True

    def _fetch_hint(self, quiz: ResolvedQuiz) -> str:
        try:
            return self.hint_source(quiz)
        except Exception as e:
            logging.exception(f"Hint source failed: {e}")
            return self.hint_fallback

    def _hint_ready(self, generation: int, text: str):
        if generation != self.generation:
            logging.debug(f"Discarding hint for round {generation}")
            return
        self._hint_task = None
        self.hint = text
        self.hint_loading = False
        self.notify_hint_listeners()

    def _ask_right(self):
        self._pending = None
        self.stage = Stage.AWAITING_RIGHT
        self.notify_stage_listeners()

    def _reveal(self):
        self._pending = None
        self.stage = Stage.REVEALED
        self._schedule(self.delays.next_round_ms, self.new_round)
        self.notify_stage_listeners()

    def _schedule(self, delay_ms: int, callback: Callable[[], None]):
        self._cancel_pending()
        self._pending = self.scheduler.call_later(delay_ms, callback)

    def _cancel_pending(self):
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def shutdown(self):
        self._cancel_pending()
        if self._hint_task is not None:
            self._hint_task.cancel()
            self._hint_task = None

    def add_round_listener(self, callback: Callable):
        self._round_listeners.append(callback)

    def add_stage_listener(self, callback: Callable):
        self._stage_listeners.append(callback)

    def add_stats_listener(self, callback: Callable):
        self._stats_listeners.append(callback)

    def add_hint_listener(self, callback: Callable):
        self._hint_listeners.append(callback)

    def add_config_listener(self, callback: Callable):
        self._config_listeners.append(callback)

    def notify_round_listeners(self):
        for listener in self._round_listeners:
            listener()

    def notify_stage_listeners(self):
        for listener in self._stage_listeners:
            listener()

    def notify_stats_listeners(self):
        for listener in self._stats_listeners:
            listener()

    def notify_hint_listeners(self):
        for listener in self._hint_listeners:
            listener()

    def notify_config_listeners(self):
        for listener in self._config_listeners:
            listener()
