"""Timed events, tracks and Standard MIDI File containers."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterable, Tuple

from .errors import InvalidRange
from .messages import Message, NoteOff, NoteOn
from .values import MF, SILENT, Channel, NoteNumber, Velocity

MAX_TICK = 0xFFFFFFFF
MAX_TICKS_PER_QUARTER_NOTE = 0xFFFF


@dataclass(frozen=True)
class Event:
    """A message placed at an absolute tick.

    Events order by tick alone; equality also compares the message.
    """

    tick: int
    message: Message

    def __post_init__(self) -> None:
        if isinstance(self.tick, bool) or not isinstance(self.tick, int):
            raise TypeError(f"Event tick must be an int, got {type(self.tick).__name__}")
        if not 0 <= self.tick <= MAX_TICK:
            raise InvalidRange(f"Event tick must be 0-{MAX_TICK}, got {self.tick}")

    def __lt__(self, other: "Event") -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.tick < other.tick

    def __le__(self, other: "Event") -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.tick <= other.tick

    def __gt__(self, other: "Event") -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.tick > other.tick

    def __ge__(self, other: "Event") -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.tick >= other.tick

    @classmethod
    def note_on(
        cls,
        tick: int,
        channel: Channel | int,
        note: NoteNumber | int,
        velocity: Velocity | int,
    ) -> "Event":
        return cls(tick, NoteOn(channel, note, velocity))

    @classmethod
    def note_off(
        cls,
        tick: int,
        channel: Channel | int,
        note: NoteNumber | int,
        velocity: Velocity | int = SILENT,
    ) -> "Event":
        return cls(tick, NoteOff(channel, note, velocity))

    def __str__(self) -> str:
        return f"[{self.tick}] {self.message}"


@dataclass(frozen=True)
class Track:
    """Named sequence of events; events need not be sorted."""

    name: str = ""
    events: Tuple[Event, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise TypeError(f"Track name must be a str, got {type(self.name).__name__}")
        events = tuple(self.events)
        for event in events:
            if not isinstance(event, Event):
                raise TypeError(f"Track events must be Event instances, got {type(event).__name__}")
        object.__setattr__(self, "events", events)

    @property
    def duration(self) -> int:
        return max((event.tick for event in self.events), default=0)

    def with_event(self, event: Event) -> "Track":
        return Track(self.name, self.events + (event,))

    def with_events(self, events: Iterable[Event]) -> "Track":
        return Track(self.name, self.events + tuple(events))

    def with_note(
        self,
        note: NoteNumber | int,
        channel: Channel | int,
        start_tick: int,
        duration: int,
        velocity: Velocity | int = MF,
    ) -> "Track":
        """Return a copy with a note-on at ``start_tick`` and its note-off."""

        return self.with_events(
            (
                Event.note_on(start_tick, channel, note, velocity),
                Event.note_off(start_tick + duration, channel, note),
            )
        )

    def sorted(self) -> "Track":
        """Return a copy with events in tick order; simultaneous events keep their order."""

        return Track(self.name, tuple(sorted(self.events, key=lambda event: event.tick)))

    def filter(self, predicate: Callable[[Event], bool]) -> "Track":
        return Track(self.name, tuple(event for event in self.events if predicate(event)))

    def events_in_range(self, start: int, end: int) -> "Track":
        """Events with ``start <= tick <= end``."""

        return self.filter(lambda event: start <= event.tick <= end)

    def __len__(self) -> int:
        return len(self.events)

    def __str__(self) -> str:
        return f"{self.name}: {len(self.events)} events"


class FileFormat(IntEnum):
    SINGLE = 0
    MULTI_TRACK = 1
    MULTI_SEQUENCE = 2


@dataclass(frozen=True)
class MidiFile:
    """Header values plus the tracks of a Standard MIDI File."""

    format: FileFormat = FileFormat.MULTI_TRACK
    ticks_per_quarter_note: int = 480
    tracks: Tuple[Track, ...] = ()

    def __post_init__(self) -> None:
        try:
            file_format = FileFormat(self.format)
        except ValueError as exc:
            raise InvalidRange(f"MIDI file format must be 0, 1 or 2, got {self.format}") from exc
        object.__setattr__(self, "format", file_format)
        if isinstance(self.ticks_per_quarter_note, bool) or not isinstance(
            self.ticks_per_quarter_note, int
        ):
            raise TypeError("Ticks per quarter note must be an int")
        if not 0 <= self.ticks_per_quarter_note <= MAX_TICKS_PER_QUARTER_NOTE:
            raise InvalidRange(
                "Ticks per quarter note must be 0-"
                f"{MAX_TICKS_PER_QUARTER_NOTE}, got {self.ticks_per_quarter_note}"
            )
        object.__setattr__(self, "tracks", tuple(self.tracks))

    def with_track(self, track: Track) -> "MidiFile":
        return MidiFile(self.format, self.ticks_per_quarter_note, self.tracks + (track,))

    def __str__(self) -> str:
        return (
            f"MIDI File ({self.format.name}, {self.ticks_per_quarter_note} TPQN, "
            f"{len(self.tracks)} tracks)"
        )


__all__ = [
    "Event",
    "FileFormat",
    "MAX_TICK",
    "MAX_TICKS_PER_QUARTER_NOTE",
    "MidiFile",
    "Track",
]
