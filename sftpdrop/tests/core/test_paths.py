from __future__ import annotations

import os
from pathlib import Path

import pytest

from sftpdrop.core.paths import get_app_data_dir, get_config_path, get_logs_dir


def test_home_override_wins(tmp_path: Path) -> None:
    environ = {"SFTPDROP_HOME": str(tmp_path / "drop"), "XDG_CONFIG_HOME": str(tmp_path / "xdg")}

    assert get_app_data_dir(environ) == (tmp_path / "drop").resolve()
    assert get_config_path(environ) == (tmp_path / "drop" / "config.json").resolve()
    assert not (tmp_path / "xdg").exists()


@pytest.mark.skipif(os.name == "nt", reason="XDG layout is not used on Windows")
def test_xdg_config_home_is_used(tmp_path: Path) -> None:
    environ = {"XDG_CONFIG_HOME": str(tmp_path / "xdg")}

    assert get_app_data_dir(environ) == (tmp_path / "xdg" / "sftpdrop").resolve()


@pytest.mark.skipif(os.name == "nt", reason="XDG layout is not used on Windows")
def test_falls_back_to_dot_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    assert get_app_data_dir({"SFTPDROP_HOME": "  "}) == (tmp_path / ".config" / "sftpdrop").resolve()


def test_logs_dir_is_created(tmp_path: Path) -> None:
    logs_dir = get_logs_dir({"SFTPDROP_HOME": str(tmp_path)})

    assert logs_dir == (tmp_path / "logs").resolve()
    assert logs_dir.is_dir()
