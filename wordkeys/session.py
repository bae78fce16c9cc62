"""MIDI session manager: device discovery, selection, hot-plug and filtering.

The session owns at most one active input device. Its lifecycle is an
explicit state machine over the tagged states below; every transition goes
through MidiSession so listener attachment and detachment stay atomic with
respect to state changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple, Union

from wordkeys.base import Closeable, MatchException
from wordkeys.display import Display, SelectionPrompt
from wordkeys.midi import (
    DeviceAccess,
    DeviceAccessError,
    DeviceHandle,
    PortEvent,
    PortKind,
    PortState,
    UnsupportedPlatformError,
    match_note_on,
)


@dataclass(frozen=True)
class Disconnected:
    """No device is active and none has been requested."""


@dataclass(frozen=True)
class Discovering:
    """Device access has been requested and the answer is pending."""


@dataclass(frozen=True)
class NoDevice:
    """Access was granted but no device is active."""


@dataclass(frozen=True)
class AwaitingSelection:
    """Several devices were found and the user is choosing one."""

    devices: Tuple[DeviceHandle, ...]


@dataclass(frozen=True)
class Connected:
    """A device is active and its messages are filtered for note-on."""

    handle: DeviceHandle
    listener: Closeable = field(compare=False, repr=False)


SessionState = Union[Disconnected, Discovering, NoDevice, AwaitingSelection, Connected]

NoteCallback = Callable[[int], None]


class MidiSession:
    """Manages the single active MIDI input and forwards its note triggers.

    Once access has been granted with at least one device present, hot-plug
    events are honored: unplugging the active device drops to NoDevice, and
    a new input appearing while nothing is active is connected
    automatically. Messages from any device other than the active one are
    dropped, so a replaced device can never double-dispatch.
    """

    def __init__(
        self,
        access: DeviceAccess,
        prompt: SelectionPrompt,
        display: Display,
        on_note: NoteCallback,
        preferred_port: Optional[str] = None,
        omni: bool = False,
    ) -> None:
        """Initialize a disconnected session.

        Args:
            access: Lists and opens devices.
            prompt: Asks the user to pick among several devices.
            display: Receives status updates and notices.
            on_note: Called with the note number of every trigger.
            preferred_port: Device name chosen without prompting when present.
            omni: Accept note-on on every channel.
        """
        self._access = access
        self._prompt = prompt
        self._display = display
        self._on_note = on_note
        self._preferred_port = preferred_port
        self._omni = omni
        self._state: SessionState = Disconnected()
        self._watching = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def watching(self) -> bool:
        """Whether hot-plug events are currently acted upon."""
        return self._watching

    @property
    def active_handle(self) -> Optional[DeviceHandle]:
        match self._state:
            case Connected(handle=handle):
                return handle
            case _:
                return None

    def _transition(self, state: SessionState) -> None:
        logging.debug("MIDI session %s -> %s", self._state, state)
        self._state = state

    def connect(self) -> SessionState:
        """Discover devices and activate one.

        Any active device is released first. Failures are reported through
        the display and leave the session Disconnected.

        Returns:
            The state the session ends up in.
        """
        if self._detach() is not None:
            self._display.show_status(False)
        self._watching = False
        self._transition(Discovering())
        try:
            devices = self._access.request_access()
        except UnsupportedPlatformError as e:
            logging.warning("MIDI unsupported: %s", e)
            self._display.notify(f"MIDI input is not supported on this system: {e}")
            self._transition(Disconnected())
            return self._state
        except DeviceAccessError as e:
            logging.error("Error accessing MIDI: %s", e)
            self._display.notify(f"Error connecting to MIDI device: {e}")
            self._transition(Disconnected())
            return self._state
        self._on_discovered(devices)
        return self._state

    def _on_discovered(self, devices: Sequence[DeviceHandle]) -> None:
        logging.info("Found %d MIDI input(s)", len(devices))
        if not devices:
            self._transition(NoDevice())
            self._display.notify(
                "No MIDI devices found. Connect your MIDI keyboard and try again."
            )
            self._transition(Disconnected())
            return
        self._watching = True
        if len(devices) == 1:
            self._attach(devices[0])
            return
        chosen = self._select(devices)
        if chosen is None:
            self._transition(Disconnected())
        else:
            self._attach(chosen)

    def _select(self, devices: Sequence[DeviceHandle]) -> Optional[DeviceHandle]:
        self._transition(AwaitingSelection(tuple(devices)))
        for device in devices:
            if device.name == self._preferred_port:
                logging.info("Using preferred MIDI input %s", device.name)
                return device
        names: List[str] = [device.name for device in devices]
        choice = self._prompt.choose(names)
        if choice is None or not 1 <= choice <= len(devices):
            logging.info("No MIDI input selected (%s)", choice)
            return None
        return devices[choice - 1]

    def _attach(self, handle: DeviceHandle) -> None:
        # The previous listener must be gone before the new one exists
        self._detach()
        try:
            listener = self._access.open_input(handle)
        except DeviceAccessError as e:
            logging.error("Failed to open MIDI input %s: %s", handle.name, e)
            self._display.notify(f"Error connecting to MIDI device: {e}")
            self._transition(Disconnected())
            return
        self._transition(Connected(handle=handle, listener=listener))
        logging.info("Listening to MIDI input %s", handle.name)
        self._display.show_status(True, handle.name)

    def _detach(self) -> Optional[DeviceHandle]:
        match self._state:
            case Connected(handle=handle, listener=listener):
                listener.close()
                logging.info("Stopped listening to MIDI input %s", handle.name)
                self._transition(NoDevice())
                return handle
            case Disconnected() | Discovering() | NoDevice() | AwaitingSelection():
                return None
            case _:
                raise MatchException(self._state)

    def disconnect(self) -> None:
        """Release the active device and stop acting on hot-plug events."""
        released = self._detach()
        self._watching = False
        self._transition(Disconnected())
        if released is not None:
            self._display.show_status(False)

    def handle_port_event(self, event: PortEvent) -> None:
        """React to a device appearing or going away.

        Args:
            event: The hot-plug event.
        """
        if not self._watching or event.kind != PortKind.Input:
            return
        match event.state:
            case PortState.Connected:
                if self.active_handle is None:
                    logging.info("MIDI input %s appeared", event.handle.name)
                    self._attach(event.handle)
            case PortState.Disconnected:
                if self.active_handle == event.handle:
                    logging.info("Active MIDI input %s went away", event.handle.name)
                    self._detach()
                    self._display.show_status(False)
            case _:
                raise MatchException(event.state)

    def handle_message(self, handle: DeviceHandle, data: Sequence[int]) -> Optional[int]:
        """Filter a raw message and forward it if it is a note trigger.

        Args:
            handle: The device the message came from.
            data: The raw message bytes.

        Returns:
            The forwarded note number, or None if the message was dropped.
        """
        if self.active_handle != handle:
            return None
        note = match_note_on(data, omni=self._omni)
        if note is not None:
            self._on_note(note)
        return note
