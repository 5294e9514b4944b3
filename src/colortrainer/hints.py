import logging
import os
from typing import Optional

import requests

from colortrainer.orientation import ResolvedQuiz

_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TIMEOUT = 10.0

FALLBACK_TEXT = {
    "en": "No tip available. Focus on the standard scheme: white opposite yellow, "
    "blue opposite green, red opposite orange.",
    "zh": "无法获取建议，请专注于记忆标准配色方案：白对黄，蓝对绿，红对橙。",
}

_LANGUAGE_NAMES = {"en": "English", "zh": "Chinese"}


class HintUnavailable(RuntimeError):
    """The hint service could not produce a mnemonic"""


def fallback_text(language: str) -> str:
    return FALLBACK_TEXT.get(language, FALLBACK_TEXT["en"])


class GeminiHintProvider:
    """Asks a Gemini text model for a mnemonic describing an orientation"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        language: str = "en",
    ):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
        self.model = model
        self.timeout = timeout
        self.language = language

    def _base_url(self) -> str:
        value = os.getenv("COLORTRAINER_GEMINI_URL", _DEFAULT_BASE_URL)
        return value.strip().rstrip("/") or _DEFAULT_BASE_URL

    def prompt(self, front: str, top: str, left: str, right: str) -> str:
        language = _LANGUAGE_NAMES.get(self.language, "English")
        return (
            "I am trying to memorize the Rubik's cube color scheme.\n"
            f"Right now I am looking at the {front} face, and {top} is on top.\n"
            f"The results are: Left is {left}, Right is {right}.\n"
            "Can you give me a short, clever mnemonic (1-2 sentences) to remember "
            "this specific relative orientation?\n"
            f"Answer in {language}."
        )

    def fetch_mnemonic(self, front: str, top: str, left: str, right: str) -> str:
        if not self.api_key:
            raise HintUnavailable("No API key configured")
        url = f"{self._base_url()}/models/{self.model}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": self.prompt(front, top, left, right)}]}],
            "generationConfig": {"temperature": 0.7},
        }
        try:
            res = requests.post(
                url,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise HintUnavailable(f"Timed out after {self.timeout}s") from e
        except (requests.RequestException, ValueError) as e:
            raise HintUnavailable(f"Request failed: {e}") from e

        if res.status_code != 200:
            raise HintUnavailable(f"Status {res.status_code}")
        try:
            body = res.json()
            parts = body["candidates"][0]["content"]["parts"]
            text = "".join(p.get("text", "") for p in parts).strip()
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise HintUnavailable(f"Unexpected response: {e!r}") from e
        if not text:
            raise HintUnavailable("Empty response")
        return text

    def mnemonic_for(self, quiz: ResolvedQuiz) -> str:
        names = [f.display_name(self.language) for f in quiz.faces()]
        return self.fetch_mnemonic(*names)

    def mnemonic_or_fallback(self, quiz: ResolvedQuiz) -> str:
        try:
            return self.mnemonic_for(quiz)
        except HintUnavailable as e:
            logging.warning(f"Hint unavailable: {e}")
        except Exception as e:
            logging.exception(f"Hint provider failed: {e}")
        return fallback_text(self.language)

