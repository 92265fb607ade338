"""Note-name spelling for MIDI note numbers (C4 = 60)."""

from __future__ import annotations

import re

NAME_TO_PC = {
    'C': 0,
    'C#': 1,
    'Db': 1,
    'D': 2,
    'D#': 3,
    'Eb': 3,
    'E': 4,
    'Fb': 4,
    'E#': 5,
    'F': 5,
    'F#': 6,
    'Gb': 6,
    'G': 7,
    'G#': 8,
    'Ab': 8,
    'A': 9,
    'A#': 10,
    'Bb': 10,
    'B': 11,
    'B#': 0,
    'Cb': 11,
}
PC_TO_NAME_SHARP = {0: 'C', 1: 'C#', 2: 'D', 3: 'D#', 4: 'E', 5: 'F', 6: 'F#', 7: 'G', 8: 'G#', 9: 'A', 10: 'A#', 11: 'B'}
PC_TO_NAME_FLAT = {0: 'C', 1: 'Db', 2: 'D', 3: 'Eb', 4: 'E', 5: 'F', 6: 'Gb', 7: 'G', 8: 'Ab', 9: 'A', 10: 'Bb', 11: 'B'}

_NAME_PATTERN = re.compile(r'^([A-Ga-g])([#b]?)(-?\d+)$')


def name_to_midi(name: str) -> int:
    """Parse forms like 'A4', 'F#5', 'Bb-1' into a MIDI integer (unbounded)."""
    m = _NAME_PATTERN.match(name.strip())
    if not m:
        raise ValueError(f"Bad note name: {name}")
    step = m.group(1).upper()
    key = step + m.group(2)
    octave = int(m.group(3))
    # B# and Cb cross the octave boundary.
    if key == 'B#':
        octave += 1
    elif key == 'Cb':
        octave -= 1
    return (octave + 1) * 12 + NAME_TO_PC[key]


def midi_to_name(midi: int, flats: bool = True) -> str:
    pc = midi % 12
    octave = midi // 12 - 1
    base = PC_TO_NAME_FLAT[pc] if flats else PC_TO_NAME_SHARP[pc]
    return f"{base}{octave}"


__all__ = [
    'NAME_TO_PC',
    'PC_TO_NAME_FLAT',
    'PC_TO_NAME_SHARP',
    'midi_to_name',
    'name_to_midi',
]
