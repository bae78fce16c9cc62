import pytest
from hypothesis import given
from hypothesis import strategies as st

from tests.wordkeys.hypo import configure_hypo
from wordkeys.pitch import note_to_frequency, note_to_pitch

configure_hypo()

NOTES = st.integers(min_value=-1000, max_value=1000)


@pytest.mark.parametrize(
    "note, pitch",
    [
        (60, 1.0),
        (70, 2.0),
        (72, 2.2),
        (50, 0.3),
        (53, 0.3),
        (54, 0.4),
        (0, 0.3),
        (75, 2.5),
        (120, 2.5),
        (127, 2.5),
        (-5, 0.3),
    ],
)
def test_note_to_pitch(note: int, pitch: float) -> None:
    assert note_to_pitch(note) == pytest.approx(pitch)


def test_reference_note_is_exactly_neutral() -> None:
    assert note_to_pitch(60) == 1.0


@given(NOTES)
def test_pitch_in_range(note: int) -> None:
    assert 0.3 <= note_to_pitch(note) <= 2.5


@given(NOTES, NOTES)
def test_pitch_monotonic(a: int, b: int) -> None:
    low, high = min(a, b), max(a, b)
    assert note_to_pitch(low) <= note_to_pitch(high)


@given(NOTES)
def test_pitch_deterministic(note: int) -> None:
    assert note_to_pitch(note) == note_to_pitch(note)


def test_note_to_frequency() -> None:
    assert note_to_frequency(69) == pytest.approx(440.0)
    assert note_to_frequency(81) == pytest.approx(880.0)
    assert note_to_frequency(60) == pytest.approx(261.6256, rel=1e-6)
