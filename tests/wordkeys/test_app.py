"""Tests for event routing through the whole application."""

from pathlib import Path
from queue import SimpleQueue
from typing import List, Optional, Tuple

import pytest

from tests.wordkeys.fakes import FakeAccess, FakePrompt, RecordingDisplay, RecordingSpeaker
from wordkeys.app import App, AppEvent, run_loop
from wordkeys.dispatch import Dispatcher
from wordkeys.midi import DeviceHandle, MidiEvent, PortWatcher
from wordkeys.session import Connected, MidiSession, NoDevice
from wordkeys.source import TextEvent, TextSource

KEYS = DeviceHandle("keys")
PADS = DeviceHandle("pads")


class Harness:
    def __init__(self, names: List[str], source: TextSource, answer: Optional[int] = 1) -> None:
        self.access = FakeAccess(names)
        self.display = RecordingDisplay()
        self.speaker = RecordingSpeaker()
        self.dispatcher = Dispatcher(self.speaker, self.display)
        self.session = MidiSession(
            self.access, FakePrompt(answer), self.display, self.dispatcher.on_note
        )
        self.watcher = PortWatcher(lambda: list(self.access.names))
        self.app = App(self.session, self.dispatcher, source, self.watcher)

    def spoken(self) -> List[Tuple[str, float]]:
        return [(request.word, request.pitch) for request in self.speaker.requests]


def note_on(handle: DeviceHandle, note: int, velocity: int = 100) -> MidiEvent:
    return MidiEvent(handle, (144, note, velocity))


def test_start_loads_text_and_connects() -> None:
    harness = Harness(["keys"], TextSource(text="blue skies"))
    assert isinstance(harness.app.start(), Connected)
    assert harness.display.words == [("—", 0, 2)]
    assert harness.display.statuses == [(True, "keys")]


def test_start_without_text() -> None:
    harness = Harness(["keys"], TextSource())
    harness.app.start()
    assert harness.display.words == [("—", 0, 0)]
    harness.app.handle_event(note_on(KEYS, 60))
    assert harness.spoken() == []


def test_notes_speak_words() -> None:
    harness = Harness(["keys"], TextSource(text="blue skies smiling at me"))
    harness.app.start()
    for event in [
        note_on(KEYS, 60),
        note_on(KEYS, 60, velocity=0),
        MidiEvent(KEYS, (128, 60, 64)),
        note_on(KEYS, 62),
        MidiEvent(KEYS, (176, 1, 64)),
        note_on(KEYS, 72),
    ]:
        harness.app.handle_event(event)
    assert [word for word, _ in harness.spoken()] == ["blue", "skies", "smiling"]
    assert [pitch for _, pitch in harness.spoken()] == pytest.approx([1.0, 1.2, 2.2])


def test_text_change_mid_performance() -> None:
    harness = Harness(["keys"], TextSource(text="one two three"))
    harness.app.start()
    harness.app.handle_event(note_on(KEYS, 60))
    harness.app.handle_event(TextEvent("four five"))
    harness.app.handle_event(note_on(KEYS, 60))
    assert [word for word, _ in harness.spoken()] == ["one", "four"]


def test_idle_handles_hot_plug() -> None:
    harness = Harness(["keys"], TextSource(text="hey you"))
    harness.app.start()
    harness.access.names = []
    harness.app.idle()
    assert harness.session.state == NoDevice()
    harness.access.names = ["pads"]
    harness.app.idle()
    assert harness.session.active_handle == PADS
    harness.app.handle_event(note_on(KEYS, 60))
    harness.app.handle_event(note_on(PADS, 60))
    assert [word for word, _ in harness.spoken()] == ["hey"]


def test_idle_ignores_devices_present_at_connect() -> None:
    harness = Harness(["keys", "pads"], TextSource(text="hey"), answer=None)
    harness.app.start()
    harness.app.idle()
    assert harness.session.active_handle is None
    harness.access.names = ["keys", "pads", "drums"]
    harness.app.idle()
    assert harness.session.active_handle == DeviceHandle("drums")


def test_idle_reloads_text_file(tmp_path: Path) -> None:
    path = tmp_path / "poem.txt"
    harness = Harness(["keys"], TextSource(path=path))
    harness.app.start()
    assert harness.display.words == [("—", 0, 0)]
    path.write_text("friends forever", encoding="utf-8")
    harness.app.idle()
    assert harness.display.words[-1] == ("—", 0, 2)
    harness.app.handle_event(note_on(KEYS, 60))
    assert [word for word, _ in harness.spoken()] == ["friends"]


def test_close_disconnects() -> None:
    harness = Harness(["keys"], TextSource(text="hey"))
    harness.app.start()
    harness.app.close()
    assert harness.access.open_listeners() == []


class Stop(Exception):
    pass


class CountingApp(App):
    def __init__(self, harness: Harness, limit: int) -> None:
        super().__init__(harness.session, harness.dispatcher, TextSource())
        self.handled: List[AppEvent] = []
        self.idles = 0
        self.limit = limit

    def handle_event(self, event: AppEvent) -> None:
        self.handled.append(event)
        super().handle_event(event)

    def idle(self) -> None:
        self.idles += 1
        if len(self.handled) >= self.limit:
            raise Stop()


def test_run_loop_handles_in_order() -> None:
    harness = Harness(["keys"], TextSource())
    harness.dispatcher.load_text("a b c")
    harness.session.connect()
    app = CountingApp(harness, limit=3)
    events: SimpleQueue[AppEvent] = SimpleQueue()
    for note in [60, 61, 62]:
        events.put(note_on(KEYS, note))
    with pytest.raises(Stop):
        run_loop(app, events, poll_interval=0.01)
    assert [word for word, _ in harness.spoken()] == ["a", "b", "c"]
    assert app.idles == 1
