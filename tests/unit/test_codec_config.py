import json

from app.config import (
    CodecConfig,
    DecodeOptions,
    EncodeOptions,
    get_decode_options,
    get_encode_options,
    load_codec_config,
    reset_codec_config_cache,
)


def test_default_config_values() -> None:
    reset_codec_config_cache()
    config = load_codec_config()
    assert isinstance(config, CodecConfig)
    assert config.decoding == DecodeOptions(
        require_end_of_track=False,
        default_track_name="Track {index}",
        max_vlq_bytes=5,
    )
    assert config.encoding == EncodeOptions(running_status=False)


def test_track_name_for_uses_one_based_index() -> None:
    assert DecodeOptions().track_name_for(0) == "Track 1"
    assert DecodeOptions(default_track_name="Part {index}").track_name_for(3) == "Part 4"


def test_load_codec_config_from_custom_path(tmp_path) -> None:
    custom_config = {
        "decoding": {
            "require_end_of_track": True,
            "default_track_name": "Staff {index}",
            "max_vlq_bytes": 4,
        },
        "encoding": {"running_status": True},
    }
    config_path = tmp_path / "codec.json"
    config_path.write_text(json.dumps(custom_config), encoding="utf-8")

    config = load_codec_config(config_path)
    assert config.decoding.require_end_of_track is True
    assert config.decoding.track_name_for(1) == "Staff 2"
    assert config.decoding.max_vlq_bytes == 4
    assert config.encoding.running_status is True


def test_invalid_config_values_fall_back_to_defaults(tmp_path) -> None:
    invalid_config = {
        "decoding": {
            "require_end_of_track": "sometimes",
            "default_track_name": "Track {number}",
            "max_vlq_bytes": -2,
        },
        "encoding": ["running_status"],
    }
    config_path = tmp_path / "codec.json"
    config_path.write_text(json.dumps(invalid_config), encoding="utf-8")

    config = load_codec_config(config_path)
    assert config.decoding == DecodeOptions()
    assert config.encoding == EncodeOptions()


def test_string_booleans_are_accepted(tmp_path) -> None:
    config_path = tmp_path / "codec.json"
    config_path.write_text(json.dumps({"encoding": {"running_status": "yes"}}), encoding="utf-8")

    assert load_codec_config(config_path).encoding.running_status is True


def test_missing_or_malformed_files_use_defaults(tmp_path) -> None:
    assert load_codec_config(tmp_path / "absent.json").decoding == DecodeOptions()

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_codec_config(broken).encoding == EncodeOptions()


def test_option_accessors_use_cached_config(monkeypatch, tmp_path) -> None:
    config_path = tmp_path / "codec.json"
    config_path.write_text(json.dumps({"encoding": {"running_status": True}}), encoding="utf-8")

    original_loader = load_codec_config

    def _load_override(path=None):  # noqa: ANN001 - signature dictated by monkeypatch
        return original_loader(config_path)

    reset_codec_config_cache()
    monkeypatch.setattr("app.config.load_codec_config", _load_override)

    first = get_encode_options()
    assert first.running_status is True

    config_path.write_text(json.dumps({"encoding": {"running_status": False}}), encoding="utf-8")

    second = get_encode_options()
    assert second is first
    assert get_decode_options() == DecodeOptions()
