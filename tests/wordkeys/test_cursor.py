from typing import List

from hypothesis import given
from hypothesis import strategies as st

from tests.wordkeys.hypo import configure_hypo
from wordkeys.cursor import WordCursor, WordStep

configure_hypo()


def test_cycles_through_words() -> None:
    cursor = WordCursor(["a", "b", "c"])
    steps = [cursor.next() for _ in range(7)]
    assert steps == [
        WordStep("a", 0),
        WordStep("b", 1),
        WordStep("c", 2),
        WordStep("a", 0),
        WordStep("b", 1),
        WordStep("c", 2),
        WordStep("a", 0),
    ]


def test_empty_reports_nothing() -> None:
    cursor = WordCursor()
    assert cursor.empty()
    for _ in range(3):
        assert cursor.next() is None
    assert cursor.index == 0


def test_reset_mid_cycle_restarts() -> None:
    cursor = WordCursor(["a", "b", "c"])
    cursor.next()
    cursor.next()
    cursor.reset(["x", "y"])
    assert cursor.total == 2
    assert cursor.next() == WordStep("x", 0)


def test_reset_without_tokens_rewinds() -> None:
    cursor = WordCursor(["a", "b"])
    cursor.next()
    cursor.reset()
    assert cursor.tokens == ("a", "b")
    assert cursor.next() == WordStep("a", 0)


def test_reset_to_empty() -> None:
    cursor = WordCursor(["a"])
    cursor.reset([])
    assert cursor.next() is None


def test_tokens_not_aliased() -> None:
    words = ["a", "b"]
    cursor = WordCursor(words)
    words.append("c")
    assert cursor.total == 2


@given(
    st.lists(st.text(min_size=1), min_size=1, max_size=10),
    st.integers(min_value=0, max_value=50),
)
def test_index_always_valid(words: List[str], presses: int) -> None:
    cursor = WordCursor(words)
    for press in range(presses):
        step = cursor.next()
        assert step is not None
        assert step.index == press % len(words)
        assert step.word == words[step.index]
        assert 0 <= cursor.index < len(words)
