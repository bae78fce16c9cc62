"""Event loop wiring for the wordkeys application.

All core work happens on the thread running run_loop. MIDI callbacks only
enqueue events; hot-plug scans and text file reloads happen on idle ticks.
Events are handled one at a time, in arrival order, each to completion.
"""

from __future__ import annotations

import logging
from queue import Empty, SimpleQueue
from typing import Optional, Union

from wordkeys.base import Closeable, MatchException
from wordkeys.dispatch import Dispatcher
from wordkeys.midi import MidiEvent, PortEvent, PortWatcher
from wordkeys.session import MidiSession, SessionState
from wordkeys.source import TextEvent, TextSource

AppEvent = Union[MidiEvent, PortEvent, TextEvent]


class App(Closeable):
    """Routes events to the MIDI session and the dispatcher."""

    def __init__(
        self,
        session: MidiSession,
        dispatcher: Dispatcher,
        source: TextSource,
        watcher: Optional[PortWatcher] = None,
    ) -> None:
        """Initialize the application.

        Args:
            session: The MIDI session; its note callback should reach the dispatcher.
            dispatcher: Speaks words for notes.
            source: Supplies the text and its changes.
            watcher: Rescans ports for hot-plug events, if the platform needs it.
        """
        self._session = session
        self._dispatcher = dispatcher
        self._source = source
        self._watcher = watcher

    def start(self) -> SessionState:
        """Load the initial text and connect to a MIDI device.

        Returns:
            The session state after connecting.
        """
        event = self._source.initial()
        self._dispatcher.load_text(event.text if event is not None else None)
        return self.reconnect()

    def reconnect(self) -> SessionState:
        """Run device discovery again, replacing any active device."""
        state = self._session.connect()
        if self._watcher is not None:
            self._watcher.reset()
        return state

    def handle_event(self, event: AppEvent) -> None:
        match event:
            case MidiEvent(handle=handle, data=data):
                self._session.handle_message(handle, data)
            case PortEvent():
                self._session.handle_port_event(event)
            case TextEvent(text=text):
                self._dispatcher.load_text(text)
            case _:
                raise MatchException(event)

    def idle(self) -> None:
        """Poll the sources that cannot notify on their own."""
        if self._watcher is not None:
            for port_event in self._watcher.poll():
                self.handle_event(port_event)
        text_event = self._source.poll()
        if text_event is not None:
            self.handle_event(text_event)

    def close(self) -> None:
        logging.info("app closing")
        self._session.disconnect()


def run_loop(app: App, events: "SimpleQueue[AppEvent]", poll_interval: float) -> None:
    """Handle events until interrupted.

    Args:
        app: The application to feed.
        events: Queue that MIDI callbacks put events on.
        poll_interval: Seconds to wait for an event before an idle tick.
    """
    while True:
        try:
            event = events.get(timeout=poll_interval)
        except Empty:
            app.idle()
            continue
        app.handle_event(event)
