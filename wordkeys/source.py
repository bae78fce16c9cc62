"""Text input collaborator: where the performed text comes from."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class TextEvent:
    """The full current text after a change."""

    text: str


class TextSource:
    """Literal text, or a file whose text is reloaded whenever it changes.

    A missing or unreadable file is reported once per failure and polled
    again later; the previously loaded text stays in effect meanwhile.
    """

    def __init__(self, text: Optional[str] = None, path: Optional[Path] = None) -> None:
        if text is not None and path is not None:
            raise ValueError("Give either literal text or a text file, not both")
        self._text = text
        self._path = path
        self._mtime: Optional[float] = None
        self._failing = False

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def initial(self) -> Optional[TextEvent]:
        """The text to load at startup, if any."""
        if self._text is not None:
            return TextEvent(self._text)
        return self.poll()

    def poll(self) -> Optional[TextEvent]:
        """Return the file's text if it changed since the last poll."""
        if self._path is None:
            return None
        try:
            mtime = self._path.stat().st_mtime
            if mtime == self._mtime:
                return None
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            if not self._failing:
                logging.warning("Cannot read text file %s: %s", self._path, e)
            self._failing = True
            return None
        self._failing = False
        self._mtime = mtime
        logging.debug("Text file %s changed", self._path)
        return TextEvent(text)
