"""Exception types raised by the MIDI codec."""
from __future__ import annotations


class MidiError(ValueError):
    """Base class for every error raised by :mod:`smf_codec`."""


class InvalidRange(MidiError):
    """A bounded MIDI value was constructed outside its legal range."""


class ParsingError(MidiError):
    """Raised when MIDI bytes cannot be decoded."""

    def __init__(self, detail: str, *, offset: int | None = None) -> None:
        self.detail = detail
        self.offset = offset
        if offset is not None:
            detail = f"{detail} (at offset {offset})"
        super().__init__(detail)


__all__ = ["InvalidRange", "MidiError", "ParsingError"]
