"""Allow-List der erlaubten Prompts.

Abgleich nur per exakter Gleichheit nach Normalisierung (trim + lower);
kein Fuzzy- oder Teilstring-Matching."""
import logging
from typing import Iterable, Tuple

from promptrelay.core.errors import PromptNotAllowedError

logger = logging.getLogger(__name__)

NOT_ALLOWED_MESSAGE = "Sorry, I can only answer specific questions."


def normalize(text: str) -> str:
    return text.strip().lower()


class PromptAllowList:
    """Unveränderliche, geordnete Liste erlaubter Prompts."""

    def __init__(self, prompts: Iterable[str]) -> None:
        self._prompts: Tuple[str, ...] = tuple(prompts)
        self._normalized = frozenset(normalize(prompt) for prompt in self._prompts)

    @property
    def prompts(self) -> Tuple[str, ...]:
        """Die konfigurierten Prompts, unverändert und in Originalreihenfolge."""
        return self._prompts

    def __len__(self) -> int:
        return len(self._prompts)

    def is_allowed(self, message: str) -> bool:
        return normalize(message) in self._normalized

    def check(self, message: str) -> None:
        """Wirft ``PromptNotAllowedError`` (403) samt Allow-List, falls nicht erlaubt."""
        if not self.is_allowed(message):
            logger.info("Rejected prompt not on allow-list: %r", message)
            raise PromptNotAllowedError(NOT_ALLOWED_MESSAGE, self._prompts)
