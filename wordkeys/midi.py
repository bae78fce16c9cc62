"""MIDI input devices and note-on filtering for the wordkeys application.

This module defines the device access interface the session manager drives,
a mido-backed implementation of it, the hot-plug watcher that stands in for
platform port notifications, and the filter that reduces raw MIDI bytes to
note triggers.
"""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto, unique
from typing import Any, Callable, List, Optional, Sequence, Tuple

import mido
from mido.ports import BaseInput

from wordkeys import constants
from wordkeys.base import Closeable, Resettable


def match_note_on(data: Sequence[int], omni: bool = False) -> Optional[int]:
    """Extract the note number from a raw note-on message.

    Only a note-on with nonzero velocity is a trigger. A note-on with zero
    velocity is a note-off by convention and is ignored, as is every other
    kind of message.

    Args:
        data: The raw message bytes (status, note, velocity).
        omni: Accept note-on on every channel instead of only the first.

    Returns:
        The note number if the message is a trigger, None otherwise.
    """
    if len(data) < 3:
        return None
    status, note, velocity = data[0], data[1], data[2]
    if omni:
        is_note_on = status & constants.STATUS_TYPE_MASK == constants.NOTE_ON_STATUS
    else:
        is_note_on = status == constants.NOTE_ON_STATUS
    if is_note_on and velocity > 0:
        return note
    return None


@dataclass(frozen=True)
class DeviceHandle:
    """Identifies one MIDI input device by its port name."""

    name: str


@unique
class PortState(Enum):
    """Hot-plug state reported for a port."""

    Connected = auto()
    Disconnected = auto()


@unique
class PortKind(Enum):
    """Direction of a port."""

    Input = auto()
    Output = auto()


@dataclass(frozen=True)
class PortEvent:
    """A device appeared or went away while the session was running."""

    handle: DeviceHandle
    state: PortState
    kind: PortKind


@dataclass(frozen=True)
class MidiEvent:
    """Raw bytes received from a device, tagged with the device they came from."""

    handle: DeviceHandle
    data: Tuple[int, ...]


class DeviceAccessError(Exception):
    """Raised when the platform fails to list or open MIDI devices."""


class UnsupportedPlatformError(DeviceAccessError):
    """Raised when no MIDI backend is available at all."""


class DeviceAccess(metaclass=ABCMeta):
    """Abstract access to the platform's MIDI input devices."""

    @abstractmethod
    def request_access(self) -> List[DeviceHandle]:
        """List the input devices currently present.

        Raises:
            UnsupportedPlatformError: If there is no usable MIDI backend.
            DeviceAccessError: If the backend fails to enumerate devices.
        """
        raise NotImplementedError()

    @abstractmethod
    def open_input(self, handle: DeviceHandle) -> Closeable:
        """Start listening to a device.

        Messages from the device are delivered as MidiEvents tagged with
        the handle. Closing the returned listener stops delivery.

        Raises:
            DeviceAccessError: If the device cannot be opened.
        """
        raise NotImplementedError()


MidiEventSink = Callable[[MidiEvent], None]


class MidiInput(Closeable):
    """An open mido input port forwarding its messages to a sink.

    The sink is called from the backend's thread, so it should only hand
    the event over to the main loop (for example by enqueueing it).
    """

    @classmethod
    def open(cls, handle: DeviceHandle, sink: MidiEventSink) -> MidiInput:
        """Open the named input port and start forwarding.

        Args:
            handle: The device to open.
            sink: Where received events go.

        Returns:
            A new MidiInput listening to the device.
        """

        def forward(msg: Any) -> None:
            sink(MidiEvent(handle=handle, data=tuple(msg.bytes())))

        in_port = mido.open_input(handle.name, callback=forward)  # pyright: ignore
        return cls(handle=handle, in_port=in_port)

    def __init__(self, handle: DeviceHandle, in_port: BaseInput) -> None:
        self._handle = handle
        self._in_port = in_port

    @property
    def handle(self) -> DeviceHandle:
        return self._handle

    def close(self) -> None:
        """Stop forwarding and close the port."""
        self._in_port.callback = None  # pyright: ignore
        self._in_port.close()
        logging.debug("Closed input port %s", self._handle.name)


class MidoDeviceAccess(DeviceAccess):
    """Device access through mido and its configured backend."""

    def __init__(self, sink: MidiEventSink) -> None:
        """Initialize with the sink every opened input forwards to.

        Args:
            sink: Receives MidiEvents from all inputs opened through this.
        """
        self._sink = sink

    def input_names(self) -> List[str]:
        """List input port names, wrapping backend failures."""
        try:
            return list(mido.get_input_names())  # pyright: ignore
        except ImportError as e:
            raise UnsupportedPlatformError(f"No MIDI backend available: {e}") from e
        except Exception as e:
            raise DeviceAccessError(str(e)) from e

    def request_access(self) -> List[DeviceHandle]:
        return [DeviceHandle(name) for name in self.input_names()]

    def open_input(self, handle: DeviceHandle) -> Closeable:
        try:
            return MidiInput.open(handle, self._sink)
        except Exception as e:
            raise DeviceAccessError(f"Cannot open {handle.name}: {e}") from e


class PortWatcher(Resettable):
    """Reports input ports that appeared or vanished since the last poll.

    mido has no hot-plug notifications, so the event loop polls this on
    idle ticks and feeds the resulting events to the session.

    Only names are compared. A device unplugged and plugged back in between
    two polls produces no events, and the session keeps the port it opened
    before; reconnecting (App.reconnect) reopens it.
    """

    def __init__(self, list_names: Callable[[], List[str]]) -> None:
        """Initialize the watcher.

        Args:
            list_names: Returns the current input port names.
        """
        self._list_names = list_names
        self._known: List[str] = []

    def reset(self) -> None:
        """Take the ports present now as the baseline, reporting nothing."""
        try:
            self._known = list(self._list_names())
        except DeviceAccessError as e:
            logging.warning("Failed to scan MIDI inputs: %s", e)
            self._known = []

    def poll(self) -> List[PortEvent]:
        """Rescan ports and describe the differences as events.

        Disconnections are reported before connections. A failed scan
        reports nothing and keeps the previous baseline.

        Returns:
            The events in the order they should be handled.
        """
        try:
            current = self._list_names()
        except DeviceAccessError as e:
            logging.warning("Failed to rescan MIDI inputs: %s", e)
            return []
        events: List[PortEvent] = []
        for name in self._known:
            if name not in current:
                events.append(
                    PortEvent(DeviceHandle(name), PortState.Disconnected, PortKind.Input)
                )
        for name in current:
            if name not in self._known:
                events.append(
                    PortEvent(DeviceHandle(name), PortState.Connected, PortKind.Input)
                )
        self._known = list(current)
        return events
