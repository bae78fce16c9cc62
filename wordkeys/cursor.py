"""Sequential, wrapping iteration over the loaded words."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from wordkeys.base import Resettable


@dataclass(frozen=True)
class WordStep:
    """A word handed out by the cursor with its position in the sequence."""

    word: str
    index: int


class WordCursor(Resettable):
    """Hands out words one at a time, wrapping back to the first word.

    The token sequence is replaced wholesale by reset, which also rewinds
    the position. An empty sequence never raises; next simply reports
    that there is nothing to speak.
    """

    def __init__(self, tokens: Iterable[str] = ()) -> None:
        self._tokens: Tuple[str, ...] = tuple(tokens)
        self._index = 0

    @property
    def tokens(self) -> Tuple[str, ...]:
        return self._tokens

    @property
    def total(self) -> int:
        return len(self._tokens)

    @property
    def index(self) -> int:
        """Position of the word the next call to next will return."""
        return self._index

    def empty(self) -> bool:
        return not self._tokens

    def reset(self, tokens: Optional[Iterable[str]] = None) -> None:
        """Rewind to the first word, optionally replacing the sequence.

        Args:
            tokens: The new token sequence, or None to keep the current one.
        """
        if tokens is not None:
            self._tokens = tuple(tokens)
        self._index = 0

    def next(self) -> Optional[WordStep]:
        """Return the current word and advance, wrapping at the end.

        Returns:
            The word with its index, or None if the sequence is empty.
        """
        if not self._tokens:
            return None
        step = WordStep(word=self._tokens[self._index], index=self._index)
        self._index = (self._index + 1) % len(self._tokens)
        return step
