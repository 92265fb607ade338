"""Codec configuration loaded from JSON resources."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "codec.json"
_CODEC_CONFIG_CACHE: CodecConfig | None = None

_DEFAULT_TRACK_NAME = "Track {index}"
_DEFAULT_MAX_VLQ_BYTES = 5

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodeOptions:
    """Settings that control how SMF bytes are decoded."""

    require_end_of_track: bool = False
    default_track_name: str = _DEFAULT_TRACK_NAME
    max_vlq_bytes: int = _DEFAULT_MAX_VLQ_BYTES

    def track_name_for(self, track_index: int) -> str:
        """Positional name used when a track carries no name meta event."""

        return self.default_track_name.format(index=track_index + 1)


@dataclass(frozen=True)
class EncodeOptions:
    """Settings that control how tracks are written."""

    running_status: bool = False


@dataclass(frozen=True)
class CodecConfig:
    """Structured configuration values for the codec."""

    decoding: DecodeOptions
    encoding: EncodeOptions


def get_codec_config() -> CodecConfig:
    """Return the cached codec configuration."""

    global _CODEC_CONFIG_CACHE
    if _CODEC_CONFIG_CACHE is None:
        _CODEC_CONFIG_CACHE = load_codec_config()
    return _CODEC_CONFIG_CACHE


def reset_codec_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _CODEC_CONFIG_CACHE
    _CODEC_CONFIG_CACHE = None


def load_codec_config(path: str | Path | None = None) -> CodecConfig:
    """Load configuration from ``path`` or the bundled JSON resource."""

    data = _read_config_data(path)
    decoding = _parse_decoding_section(data.get("decoding"))
    encoding = _parse_encoding_section(data.get("encoding"))
    return CodecConfig(decoding=decoding, encoding=encoding)


def get_decode_options() -> DecodeOptions:
    """Convenience accessor for the decoding configuration."""

    return get_codec_config().decoding


def get_encode_options() -> EncodeOptions:
    """Convenience accessor for the encoding configuration."""

    return get_codec_config().encoding


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        _LOGGER.warning("Could not read codec config %s; using defaults", path)
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        _LOGGER.warning("Codec config is not valid JSON; using defaults")
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _parse_decoding_section(section: Any) -> DecodeOptions:
    if not isinstance(section, Mapping):
        return DecodeOptions()
    require_eot = _coerce_bool(section.get("require_end_of_track"), default=False)
    track_name = _coerce_track_name(section.get("default_track_name"))
    max_vlq_bytes = _coerce_positive_int(
        section.get("max_vlq_bytes"), default=_DEFAULT_MAX_VLQ_BYTES
    )
    return DecodeOptions(
        require_end_of_track=require_eot,
        default_track_name=track_name,
        max_vlq_bytes=max_vlq_bytes,
    )


def _parse_encoding_section(section: Any) -> EncodeOptions:
    if not isinstance(section, Mapping):
        return EncodeOptions()
    running_status = _coerce_bool(section.get("running_status"), default=False)
    return EncodeOptions(running_status=running_status)


def _coerce_bool(value: Any, *, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "on", "1"}:
            return True
        if lowered in {"false", "no", "off", "0"}:
            return False
    return default


def _coerce_track_name(value: Any) -> str:
    if not isinstance(value, str):
        return _DEFAULT_TRACK_NAME
    try:
        value.format(index=1)
    except (IndexError, KeyError, ValueError):
        return _DEFAULT_TRACK_NAME
    return value


def _coerce_positive_int(value: Any, *, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = int(value)
    elif isinstance(value, str):
        try:
            candidate = int(float(value))
        except ValueError:
            return default
    else:
        return default
    if candidate <= 0:
        return default
    return candidate


__all__ = [
    "CodecConfig",
    "DecodeOptions",
    "EncodeOptions",
    "get_codec_config",
    "get_decode_options",
    "get_encode_options",
    "load_codec_config",
    "reset_codec_config_cache",
]
