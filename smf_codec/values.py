"""Range-checked MIDI channel, note number and velocity values.

Each type has three constructors that never blur into each other:

* the strict constructor (``Channel(3)``) raises
  :class:`~smf_codec.errors.InvalidRange` when the value is out of bounds;
* ``clamped`` saturates to the legal range and never fails;
* ``try_create`` returns a :class:`~shared.result.Result` instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple, Type, TypeVar

from shared.result import Result

from .errors import InvalidRange
from .pitch import midi_to_name, name_to_midi

B = TypeVar("B", bound="_BoundedValue")


@dataclass(frozen=True, order=True)
class _BoundedValue:
    value: int

    minimum: ClassVar[int] = 0
    maximum: ClassVar[int] = 127
    label: ClassVar[str] = "value"

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"{self.label} must be an int, got {type(self.value).__name__}")
        if not self.minimum <= self.value <= self.maximum:
            raise InvalidRange(
                f"{self.label} must be {self.minimum}-{self.maximum}, got {self.value}"
            )

    @classmethod
    def clamped(cls: Type[B], value: int) -> B:
        return cls(max(cls.minimum, min(cls.maximum, int(value))))

    @classmethod
    def try_create(cls: Type[B], value: int) -> Result[B, InvalidRange]:
        try:
            return Result.ok(cls(value))
        except InvalidRange as exc:
            return Result.err(exc)

    def __int__(self) -> int:
        return self.value


class Channel(_BoundedValue):
    """MIDI channel 0-15, displayed to users as 1-16."""

    maximum: ClassVar[int] = 15
    label: ClassVar[str] = "MIDI channel"

    @classmethod
    def from_display_number(cls, display_number: int) -> "Channel":
        if not 1 <= display_number <= 16:
            raise InvalidRange(
                f"MIDI channel display number must be 1-16, got {display_number}"
            )
        return cls(display_number - 1)

    @property
    def display_number(self) -> int:
        return self.value + 1

    def __str__(self) -> str:
        return f"Channel {self.display_number}"


class NoteNumber(_BoundedValue):
    """MIDI note number 0 (C-1) to 127 (G9)."""

    label: ClassVar[str] = "MIDI note"

    @classmethod
    def from_name(cls, name: str) -> "NoteNumber":
        return cls(name_to_midi(name))

    @property
    def name(self) -> str:
        return midi_to_name(self.value)

    def __str__(self) -> str:
        return f"{self.name} (MIDI {self.value})"


class Velocity(_BoundedValue):
    """Key velocity 0-127; 0 is silent."""

    label: ClassVar[str] = "MIDI velocity"

    @property
    def normalized(self) -> float:
        return self.value / 127.0

    def __str__(self) -> str:
        return f"Velocity({self.value})"


CHANNEL_1 = Channel(0)
DRUMS = Channel(9)
ALL_CHANNELS: Tuple[Channel, ...] = tuple(Channel(index) for index in range(16))

MIDDLE_C = NoteNumber(60)
A440 = NoteNumber(69)

PP = Velocity(20)
P = Velocity(40)
MP = Velocity(60)
MF = Velocity(80)
F = Velocity(100)
FF = Velocity(120)
DEFAULT = Velocity(64)
SILENT = Velocity(0)


__all__ = [
    "A440",
    "ALL_CHANNELS",
    "CHANNEL_1",
    "Channel",
    "DEFAULT",
    "DRUMS",
    "F",
    "FF",
    "MF",
    "MIDDLE_C",
    "MP",
    "NoteNumber",
    "P",
    "PP",
    "SILENT",
    "Velocity",
]
