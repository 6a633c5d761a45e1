from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from sftpdrop.core.paths import get_config_path
from sftpdrop.core.profiles.credentials import CredentialService

DEFAULT_PORT = 22
DEFAULT_TIMEOUT_SECONDS = 12.0

ENV_USER = "SFTPDROP_USER"
ENV_PASSWORD = "SFTPDROP_PASSWORD"
ENV_ADDRESS = "SFTPDROP_ADDRESS"
ENV_TIMEOUT = "SFTPDROP_TIMEOUT"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class Config:
    user: str
    password: str = field(repr=False)
    addr: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def host_port(self) -> tuple[str, int]:
        return split_address(self.addr)


def split_address(addr: str) -> tuple[str, int]:
    value = addr.strip()
    if not value:
        raise ValueError("empty address")

    if value.startswith("["):
        host, bracket, rest = value[1:].partition("]")
        if not bracket or not host:
            raise ValueError(f"invalid address: {addr}")
        if not rest:
            return host, DEFAULT_PORT
        if not rest.startswith(":"):
            raise ValueError(f"invalid address: {addr}")
        port_text = rest[1:]
    elif value.count(":") == 1:
        host, _, port_text = value.partition(":")
        if not host:
            raise ValueError(f"invalid address: {addr}")
    elif ":" in value:
        # bare IPv6 literal without a port
        return value, DEFAULT_PORT
    else:
        return value, DEFAULT_PORT

    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"invalid port in address: {addr}") from None
    if not 0 < port < 65536:
        raise ValueError(f"port out of range in address: {addr}")
    return host, port


class _FileSettings:
    _DEFAULTS: dict[str, Any] = {
        "user": "",
        "addr": "",
        "timeout_seconds": DEFAULT_TIMEOUT_SECONDS,
    }

    def __init__(self, config_path: Path) -> None:
        self._config_path = config_path
        self._data: dict[str, Any] = dict(self._DEFAULTS)
        self._load()

    def _load(self) -> None:
        if not self._config_path.exists():
            return

        try:
            content = self._config_path.read_text(encoding="utf-8")
            loaded = json.loads(content)
            if not isinstance(loaded, dict):
                loaded = {}
        except (json.JSONDecodeError, OSError):
            loaded = {}

        # passwords belong in the keyring, never in the settings file
        loaded.pop("password", None)
        self._data.update(loaded)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    credentials: CredentialService | None = None,
) -> Config:
    env = os.environ if environ is None else environ
    settings = _FileSettings(config_path or get_config_path(env))

    user = str(env.get(ENV_USER) or settings.get("user") or "").strip()
    addr = str(env.get(ENV_ADDRESS) or settings.get("addr") or "").strip()
    if not user:
        raise ConfigError(f"missing user: set {ENV_USER} or 'user' in the config file")
    if not addr:
        raise ConfigError(f"missing address: set {ENV_ADDRESS} or 'addr' in the config file")

    timeout_raw = env.get(ENV_TIMEOUT) or settings.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    try:
        timeout_seconds = float(timeout_raw)
    except (TypeError, ValueError):
        raise ConfigError(f"invalid timeout: {timeout_raw!r}") from None
    if timeout_seconds <= 0:
        raise ConfigError(f"timeout must be positive: {timeout_seconds}")

    password = env.get(ENV_PASSWORD)
    if password is None:
        password = (credentials or CredentialService()).get_password(user, addr)
    if password is None:
        raise ConfigError(f"missing password: set {ENV_PASSWORD} or store it in the keyring for {user}@{addr}")

    return Config(user=user, password=password, addr=addr, timeout_seconds=timeout_seconds)
