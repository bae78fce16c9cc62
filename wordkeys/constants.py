"""Constants and defaults for the wordkeys application.

MIDI status codes, pitch mapping bounds, speech defaults and event loop
timing used throughout the application.
"""

from typing import List

NOTE_ON_STATUS = 0x90
"""Status byte of a note-on message on the first MIDI channel (144)."""

STATUS_TYPE_MASK = 0xF0
"""Mask selecting the message type nibble of a status byte."""

REFERENCE_NOTE = 60
"""MIDI note that maps to the neutral speech pitch."""

NEUTRAL_PITCH = 1.0
"""Speech pitch for the reference note."""

PITCH_STEP = 0.1
"""Speech pitch change per semitone away from the reference note."""

MIN_PITCH = 0.3
"""Lowest speech pitch ever requested."""

MAX_PITCH = 2.5
"""Highest speech pitch ever requested."""

A4_NOTE = 69
"""MIDI note of concert A."""

A4_FREQUENCY = 440.0
"""Frequency of concert A in Hz."""

STRIP_CHARS = ".,!?;:"
"""Punctuation removed from every token."""

PLACEHOLDER_WORD = "—"
"""Word shown when text has been loaded but nothing spoken yet."""

DEFAULT_RATE = 0.6
"""Relative speech rate; slow enough that pitch differences are audible."""

DEFAULT_VOLUME = 1.0
"""Speech volume in the range 0 to 1."""

DEFAULT_VOICE_HINTS: List[str] = ["Samantha", "Alex", "Google"]
"""Voice name fragments preferred when choosing an engine voice."""

DEFAULT_MAX_PENDING = 4
"""Speech requests allowed to wait behind the one being spoken."""

DEFAULT_POLL_INTERVAL = 0.5
"""Seconds between idle rescans of MIDI ports and the text file."""

ENGINE_PITCH_CENTER = 50
"""Engine pitch property value for neutral pitch (espeak scale)."""

ENGINE_PITCH_MAX = 100
"""Largest engine pitch property value."""
