"""The dispatcher ties a note trigger to the next spoken word.

It owns the performance state (the loaded words and the cursor over
them), so independent performances are just independent dispatchers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from wordkeys import constants
from wordkeys.cursor import WordCursor
from wordkeys.display import Display
from wordkeys.pitch import note_to_pitch
from wordkeys.speech import Speaker, SpeechRequest
from wordkeys.text import tokenize


@dataclass(frozen=True)
class NoteDispatch:
    """What a single note trigger produced."""

    word: str
    index: int
    total: int
    pitch: float


class Dispatcher:
    """Turns notes into spoken words, in order, wrapping at the end of the text."""

    def __init__(
        self,
        speaker: Speaker,
        display: Display,
        rate: float = constants.DEFAULT_RATE,
        volume: float = constants.DEFAULT_VOLUME,
    ) -> None:
        self._speaker = speaker
        self._display = display
        self._rate = rate
        self._volume = volume
        self._cursor = WordCursor()

    @property
    def cursor(self) -> WordCursor:
        return self._cursor

    def load_text(self, text: Optional[str]) -> int:
        """Replace the words with those of a new text and start over.

        Args:
            text: The full current text.

        Returns:
            The number of words loaded.
        """
        self._cursor.reset(tokenize(text))
        logging.info("Loaded %d words", self._cursor.total)
        self._display.show_word(constants.PLACEHOLDER_WORD, 0, self._cursor.total)
        return self._cursor.total

    def on_note(self, note: int) -> Optional[NoteDispatch]:
        """Speak the next word at the pitch of the note.

        Order is fixed: advance the cursor, compute the pitch, request
        speech, then update the display.

        Args:
            note: The MIDI note number of the trigger.

        Returns:
            What was spoken, or None if no text is loaded.
        """
        step = self._cursor.next()
        if step is None:
            logging.info("No text loaded, ignoring note %d", note)
            return None
        pitch = note_to_pitch(note)
        self._speaker.speak(
            SpeechRequest(
                word=step.word, pitch=pitch, rate=self._rate, volume=self._volume
            )
        )
        total = self._cursor.total
        self._display.show_word(step.word, step.index, total, note)
        return NoteDispatch(word=step.word, index=step.index, total=total, pitch=pitch)
