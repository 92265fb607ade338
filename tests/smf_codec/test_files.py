from __future__ import annotations

import struct

import pytest

from app.config import DecodeOptions
from smf_codec import (
    ByteStream,
    Channel,
    Event,
    FileFormat,
    MidiFile,
    ParsingError,
    PitchBend,
    SysEx,
    Track,
    decode_file,
    encode_file,
    read_chunk,
    try_decode_file,
)

from tests.helpers import END_OF_TRACK, smf_bytes, track_chunk


def _piano_track() -> Track:
    return (
        Track("Piano")
        .with_note(60, Channel(0), start_tick=0, duration=480)
        .with_note(64, Channel(0), start_tick=480, duration=480)
    )


def test_header_layout_for_empty_file() -> None:
    data = encode_file(MidiFile(FileFormat.MULTI_TRACK, 480))
    assert data == b"MThd" + bytes([0, 0, 0, 6, 0, 1, 0, 0, 0x01, 0xE0])


def test_track_chunks_carry_body_length() -> None:
    data = encode_file(MidiFile(FileFormat.SINGLE, 96, (Track(),)))

    assert data[14:18] == b"MTrk"
    assert struct.unpack(">I", data[18:22])[0] == len(END_OF_TRACK)
    assert data[22:] == END_OF_TRACK


@pytest.mark.parametrize(
    "midi_file",
    [
        pytest.param(MidiFile(), id="no-tracks"),
        pytest.param(MidiFile(FileFormat.SINGLE, 96, (_piano_track(),)), id="single"),
        pytest.param(
            MidiFile(
                FileFormat.MULTI_TRACK,
                480,
                (
                    Track("Melody").with_note(72, Channel(0), 0, 480),
                    Track("Bass").with_note(36, Channel(1), 0, 960, velocity=80),
                    Track("Empty"),
                ),
            ),
            id="multi-with-empty",
        ),
        pytest.param(
            MidiFile(
                FileFormat.MULTI_SEQUENCE,
                1024,
                (
                    Track("FX", (Event(10, PitchBend(3, -4000)), Event(0, SysEx(b"\x41\x10")))),
                ),
            ),
            id="multi-sequence",
        ),
    ],
)
def test_file_round_trip(midi_file: MidiFile) -> None:
    decoded = decode_file(encode_file(midi_file))

    assert decoded.format == midi_file.format
    assert decoded.ticks_per_quarter_note == midi_file.ticks_per_quarter_note
    assert decoded.tracks == tuple(track.sorted() for track in midi_file.tracks)


def test_sorted_named_tracks_round_trip_exactly() -> None:
    midi_file = MidiFile(FileFormat.MULTI_TRACK, 480, (_piano_track(), Track("Empty")))
    assert decode_file(encode_file(midi_file)) == midi_file


def test_unnamed_tracks_decode_with_positional_names() -> None:
    midi_file = MidiFile(tracks=(Track(), Track()))

    decoded = decode_file(encode_file(midi_file))

    assert [track.name for track in decoded.tracks] == ["Track 1", "Track 2"]


def test_unnamed_tracks_round_trip_without_default_name() -> None:
    midi_file = MidiFile(
        FileFormat.MULTI_TRACK,
        96,
        (Track(events=(Event.note_on(0, 0, 60, 100), Event.note_off(96, 0, 60))), Track()),
    )

    decoded = decode_file(encode_file(midi_file), DecodeOptions(default_track_name=""))

    assert decoded == midi_file


def test_bad_magic_is_rejected() -> None:
    with pytest.raises(ParsingError, match="MThd"):
        decode_file(b"NotAMIDI")


def test_wrong_header_length_is_rejected() -> None:
    data = b"MThd" + struct.pack(">IHHHH", 8, 1, 0, 480, 0)
    with pytest.raises(ParsingError, match="Invalid header length: 8"):
        decode_file(data)


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(ParsingError, match="Invalid MIDI format: 3"):
        decode_file(smf_bytes([], file_format=3))


def test_truncated_header_is_rejected() -> None:
    with pytest.raises(ParsingError, match="Unexpected end of data"):
        decode_file(b"MThd\x00\x00\x00\x06\x00\x01")


def test_declared_track_count_must_be_present() -> None:
    data = smf_bytes([END_OF_TRACK], declared_tracks=2)
    with pytest.raises(ParsingError, match="Unexpected end of data"):
        decode_file(data)


def test_non_track_chunk_is_rejected() -> None:
    data = b"MThd" + struct.pack(">IHHH", 6, 1, 1, 480) + b"XTrk" + struct.pack(">I", 0)
    with pytest.raises(ParsingError, match="Invalid track header"):
        decode_file(data)


def test_track_chunk_shorter_than_declared_is_rejected() -> None:
    data = smf_bytes([END_OF_TRACK])[:-2]
    with pytest.raises(ParsingError, match="Unexpected end of data"):
        decode_file(data)


def test_track_errors_report_file_offsets() -> None:
    body = bytes([0x00, 0x3C, 0x40])
    with pytest.raises(ParsingError, match="Track 1: Running status") as excinfo:
        decode_file(smf_bytes([body]))
    # 14-byte header + 8-byte chunk header + delta byte.
    assert excinfo.value.offset == 23


def test_trailing_bytes_after_tracks_are_ignored() -> None:
    data = smf_bytes([END_OF_TRACK]) + b"\x00\x00"
    assert len(decode_file(data).tracks) == 1


def test_try_decode_file_returns_result() -> None:
    ok = try_decode_file(encode_file(MidiFile()))
    assert ok.is_ok()
    assert ok.unwrap() == MidiFile()

    failed = try_decode_file(b"RIFF")
    assert failed.is_err()
    assert isinstance(failed.error, ParsingError)


def test_read_chunk_returns_id_and_payload() -> None:
    stream = ByteStream(track_chunk(END_OF_TRACK) + b"rest")

    chunk_id, payload = read_chunk(stream)

    assert chunk_id == "MTrk"
    assert payload == END_OF_TRACK
    assert stream.remaining == 4
