from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

APP_NAME = "sftpdrop"

ENV_HOME = "SFTPDROP_HOME"


def get_app_data_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Directory holding ``config.json`` and ``logs/``.

    ``SFTPDROP_HOME`` wins when set. Otherwise ``%APPDATA%\\sftpdrop`` on
    Windows and ``$XDG_CONFIG_HOME/sftpdrop`` (default ``~/.config``) elsewhere.
    """
    env = os.environ if environ is None else environ

    override = env.get(ENV_HOME, "").strip()
    if override:
        app_data_dir = Path(override).expanduser()
    elif os.name == "nt":
        appdata = env.get("APPDATA")
        base_dir = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        app_data_dir = base_dir / APP_NAME
    else:
        xdg_config = env.get("XDG_CONFIG_HOME", "").strip()
        base_dir = Path(xdg_config) if xdg_config else Path.home() / ".config"
        app_data_dir = base_dir / APP_NAME

    app_data_dir.mkdir(parents=True, exist_ok=True)
    return app_data_dir.resolve()


def get_logs_dir(environ: Mapping[str, str] | None = None) -> Path:
    logs_dir = get_app_data_dir(environ) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir.resolve()


def get_config_path(environ: Mapping[str, str] | None = None) -> Path:
    return (get_app_data_dir(environ) / "config.json").resolve()
