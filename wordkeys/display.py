"""Presentation and user prompt collaborators.

The core reports words, connection status and notices through Display and
asks the user to pick a device through SelectionPrompt. Console versions of
both are provided for the command-line application.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from typing import Callable, List, Optional, TextIO

from wordkeys.pitch import note_to_frequency, note_to_pitch


class Display(metaclass=ABCMeta):
    """Where the core reports what is happening."""

    @abstractmethod
    def show_word(
        self, word: str, index: int, total: int, note: Optional[int] = None
    ) -> None:
        """Show the word just spoken.

        Args:
            word: The word, or a placeholder when nothing has been spoken.
            index: Zero-based position of the word in the sequence.
            total: Number of words in the sequence.
            note: The MIDI note that triggered the word, if any.
        """
        raise NotImplementedError()

    @abstractmethod
    def show_status(self, connected: bool, device_name: str = "") -> None:
        """Show whether a MIDI device is active, and which one."""
        raise NotImplementedError()

    @abstractmethod
    def notify(self, message: str) -> None:
        """Tell the user about a non-fatal problem."""
        raise NotImplementedError()


class SelectionPrompt(metaclass=ABCMeta):
    """Asks the user which of several devices to use."""

    @abstractmethod
    def choose(self, names: List[str]) -> Optional[int]:
        """Ask for a device.

        Args:
            names: The device names in the order they are offered.

        Returns:
            The 1-based number of the chosen device, or None if cancelled.
        """
        raise NotImplementedError()


def parse_choice(answer: Optional[str], count: int) -> Optional[int]:
    """Parse a 1-based device number typed by the user.

    Returns:
        The number if it is within 1..count, None otherwise.
    """
    if answer is None:
        return None
    try:
        choice = int(answer.strip())
    except ValueError:
        return None
    if 1 <= choice <= count:
        return choice
    return None


class ConsoleDisplay(Display):
    """Writes words, status lines and notices to a text stream."""

    def __init__(self, out: TextIO) -> None:
        self._out = out

    def _write(self, line: str) -> None:
        self._out.write(line + "\n")
        self._out.flush()

    def show_word(
        self, word: str, index: int, total: int, note: Optional[int] = None
    ) -> None:
        line = f"[{index + 1}/{total}] {word}"
        if note is not None:
            line += f"  (note {note}, pitch {note_to_pitch(note):.1f}, {note_to_frequency(note):.1f} Hz)"
        self._write(line)

    def show_status(self, connected: bool, device_name: str = "") -> None:
        if connected:
            self._write(f"Connected: {device_name}")
        else:
            self._write("No MIDI device connected")

    def notify(self, message: str) -> None:
        self._write(f"! {message}")


class ConsolePrompt(SelectionPrompt):
    """Lists devices on a stream and reads the answer with an input function."""

    def __init__(self, out: TextIO, read: Callable[[str], str] = input) -> None:
        self._out = out
        self._read = read

    def choose(self, names: List[str]) -> Optional[int]:
        self._out.write("Multiple MIDI devices found:\n")
        for number, name in enumerate(names, start=1):
            self._out.write(f"{number}. {name}\n")
        self._out.flush()
        try:
            answer = self._read(f"Enter device number (1-{len(names)}): ")
        except EOFError:
            return None
        return parse_choice(answer, len(names))
