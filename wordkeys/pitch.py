"""Mapping MIDI note numbers to speech engine pitch values.

The mapping is deliberately steep: every semitone moves the pitch by a
fixed step so that adjacent keys stay distinguishable through a speech
engine's coarse pitch control.
"""

from wordkeys import constants


def note_to_pitch(note: int) -> float:
    """Convert a MIDI note number to a speech pitch.

    The reference note maps to neutral pitch and each semitone adds a
    fixed step. Results are clamped, so any integer is accepted.

    Args:
        note: The MIDI note number.

    Returns:
        A pitch between MIN_PITCH and MAX_PITCH inclusive.
    """
    pitch = constants.NEUTRAL_PITCH + constants.PITCH_STEP * (
        note - constants.REFERENCE_NOTE
    )
    return max(constants.MIN_PITCH, min(constants.MAX_PITCH, pitch))


def note_to_frequency(note: int) -> float:
    """Convert a MIDI note number to its equal-tempered frequency in Hz."""
    return constants.A4_FREQUENCY * 2 ** ((note - constants.A4_NOTE) / 12)
