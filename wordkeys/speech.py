"""Speech collaborator: turning word and pitch requests into audio.

Requests are fire-and-forget for the caller. The pyttsx3 speaker works
through them one at a time on its own thread and drops new requests while
its backlog is full, so a fast player cannot build up minutes of lag.
"""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from queue import Full, Queue
from threading import Event, Thread
from typing import Any, Callable, Iterable, Optional, Sequence

import pyttsx3

from wordkeys import constants
from wordkeys.base import Closeable


@dataclass(frozen=True)
class SpeechRequest:
    """A word to speak and how to speak it."""

    word: str
    pitch: float
    rate: float = constants.DEFAULT_RATE
    volume: float = constants.DEFAULT_VOLUME


class SpeechError(Exception):
    """Raised when the speech engine cannot be started."""


class Speaker(Closeable, metaclass=ABCMeta):
    """Accepts speech requests without waiting for them to be spoken."""

    @abstractmethod
    def speak(self, request: SpeechRequest) -> None:
        """Request that a word be spoken. Must not block."""
        raise NotImplementedError()


def select_voice(voices: Iterable[Any], hints: Sequence[str]) -> Optional[Any]:
    """Pick the first voice whose name contains one of the hints.

    Hints are tried in order, so earlier hints win over later ones.

    Args:
        voices: Engine voices, each with a ``name`` attribute.
        hints: Name fragments in order of preference.

    Returns:
        The chosen voice, or None to keep the engine default.
    """
    candidates = list(voices)
    for hint in hints:
        for voice in candidates:
            if hint in (getattr(voice, "name", None) or ""):
                return voice
    return None


def _log_driver_error(exception: Exception, name: Optional[str] = None) -> None:
    logging.error("Speech driver error: %s", exception)


def engine_pitch(pitch: float) -> int:
    """Scale a speech pitch to the engine's pitch property."""
    value = round(pitch * constants.ENGINE_PITCH_CENTER)
    return max(0, min(constants.ENGINE_PITCH_MAX, value))


class Pyttsx3Speaker(Speaker):
    """Speaks requests in order through a pyttsx3 engine on a worker thread."""

    def __init__(
        self,
        voice_hints: Sequence[str] = tuple(constants.DEFAULT_VOICE_HINTS),
        max_pending: int = constants.DEFAULT_MAX_PENDING,
        engine_factory: Callable[[], Any] = pyttsx3.init,
    ) -> None:
        """Start the worker thread and its engine.

        Args:
            voice_hints: Preferred voice name fragments.
            max_pending: Requests allowed to wait while one is spoken.
            engine_factory: Creates the engine on the worker thread.

        Raises:
            SpeechError: If the engine fails to start.
        """
        self._voice_hints = list(voice_hints)
        self._engine_factory = engine_factory
        self._queue: Queue[Optional[SpeechRequest]] = Queue(maxsize=max_pending)
        self._ready = Event()
        self._error: Optional[Exception] = None
        self._thread = Thread(target=self._run, name="speech", daemon=True)
        self._thread.start()
        self._ready.wait()
        if self._error is not None:
            raise SpeechError(f"Cannot start speech engine: {self._error}") from self._error

    def speak(self, request: SpeechRequest) -> None:
        try:
            self._queue.put_nowait(request)
        except Full:
            logging.warning("Speech backlog full, dropping %r", request.word)

    def close(self) -> None:
        """Finish the request being spoken and the backlog, then stop."""
        if self._thread.is_alive():
            self._queue.put(None)
            self._thread.join()

    def _start_engine(self) -> Any:
        engine = self._engine_factory()
        engine.connect("error", _log_driver_error)
        voice = select_voice(engine.getProperty("voices") or [], self._voice_hints)
        if voice is not None:
            logging.info("Using voice %s", voice.name)
            engine.setProperty("voice", voice.id)
        return engine

    def _run(self) -> None:
        try:
            engine = self._start_engine()
        except Exception as e:
            self._error = e
            self._ready.set()
            return
        self._ready.set()
        base_rate = engine.getProperty("rate")
        pitch_supported = self._has_pitch(engine)
        while True:
            request = self._queue.get()
            if request is None:
                break
            try:
                self._say(engine, request, base_rate, pitch_supported)
            except Exception as e:
                logging.error("Failed to speak %r: %s", request.word, e)
        engine.stop()

    def _has_pitch(self, engine: Any) -> bool:
        # setProperty is queued by the driver proxy, getProperty is not
        try:
            engine.getProperty("pitch")
        except KeyError:
            logging.warning("Speech driver has no pitch control")
            return False
        return True

    def _say(
        self, engine: Any, request: SpeechRequest, base_rate: int, pitch_supported: bool
    ) -> None:
        engine.setProperty("rate", int(base_rate * request.rate))
        engine.setProperty("volume", request.volume)
        if pitch_supported:
            engine.setProperty("pitch", engine_pitch(request.pitch))
        logging.debug("Speaking %r at pitch %.2f", request.word, request.pitch)
        engine.say(request.word)
        engine.runAndWait()
