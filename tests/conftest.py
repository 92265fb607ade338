from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()


@pytest.fixture(autouse=True)
def _fresh_codec_config():
    """Make every test read the bundled codec configuration from scratch."""

    from app.config import reset_codec_config_cache

    reset_codec_config_cache()
    yield
    reset_codec_config_cache()


@pytest.fixture(autouse=True)
def _isolated_log_dir(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Keep codec log files out of the real home directory."""

    log_dir = tmp_path_factory.mktemp("codec_logs")
    monkeypatch.delenv("SMF_CODEC_LOG_FILE", raising=False)
    monkeypatch.setenv("SMF_CODEC_LOG_DIR", str(log_dir))
    yield
