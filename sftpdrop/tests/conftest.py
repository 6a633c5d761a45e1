from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar

import asyncssh
import pytest
from asyncssh.constants import FXF_CREAT, FXF_READ

from sftpdrop.core.config import Config
from sftpdrop.core.remote.client_factory import create_client
from sftpdrop.core.remote.sftp_client import SFTPClient

T = TypeVar("T")

USER = "bob"
PASSWORD = "secret"


@dataclass
class PartnerServer:
    root: Path
    port: int = 0
    write_delay_seconds: float = 0.0
    open_requests: list[tuple[str, int]] = field(default_factory=list)
    connections_made: int = 0
    connections_lost: int = 0

    def config(self, password: str = PASSWORD, timeout_seconds: float = 5.0) -> Config:
        return Config(user=USER, password=password, addr=f"127.0.0.1:{self.port}", timeout_seconds=timeout_seconds)

    async def wait_for_disconnects(self) -> None:
        for _ in range(100):
            if self.connections_lost == self.connections_made:
                return
            await asyncio.sleep(0.02)


class PartnerSSHServer(asyncssh.SSHServer):
    def __init__(self, server: PartnerServer) -> None:
        self._server = server

    def connection_made(self, conn: asyncssh.SSHServerConnection) -> None:
        self._server.connections_made += 1

    def connection_lost(self, exc: Exception | None) -> None:
        self._server.connections_lost += 1

    def begin_auth(self, username: str) -> bool:
        return True

    def password_auth_supported(self) -> bool:
        return True

    def validate_password(self, username: str, password: str) -> bool:
        return username == USER and password == PASSWORD


class PartnerSFTPServer(asyncssh.SFTPServer):
    """Serves a local directory and refuses creates that also ask for read access."""

    def __init__(self, chan: asyncssh.SSHServerChannel, server: PartnerServer) -> None:
        super().__init__(chan, chroot=str(server.root))
        self._server = server

    def open(self, path: bytes, pflags: int, attrs: asyncssh.SFTPAttrs) -> object:
        self._server.open_requests.append((path.decode(), pflags))
        if pflags & FXF_CREAT and pflags & FXF_READ:
            raise asyncssh.SFTPPermissionDenied("create with read access refused")
        return super().open(path, pflags, attrs)

    async def write(self, file_obj: object, offset: int, data: bytes) -> int:
        if self._server.write_delay_seconds:
            await asyncio.sleep(self._server.write_delay_seconds)
        return super().write(file_obj, offset, data)


@contextlib.asynccontextmanager
async def serving(
    server: PartnerServer,
    host_key: asyncssh.SSHKey,
    *,
    sftp: bool = True,
) -> AsyncIterator[PartnerServer]:
    acceptor = await asyncssh.create_server(
        lambda: PartnerSSHServer(server),
        "127.0.0.1",
        0,
        server_host_keys=[host_key],
        sftp_factory=(lambda chan: PartnerSFTPServer(chan, server)) if sftp else None,
    )
    server.port = acceptor.get_port()
    try:
        yield server
    finally:
        acceptor.close()
        await acceptor.wait_closed()


@pytest.fixture(scope="session")
def host_key() -> asyncssh.SSHKey:
    return asyncssh.generate_private_key("ssh-ed25519")


@pytest.fixture
def partner(tmp_path: Path) -> PartnerServer:
    root = tmp_path / "remote"
    root.mkdir()
    return PartnerServer(root=root)


@pytest.fixture
def run_server(partner: PartnerServer, host_key: asyncssh.SSHKey) -> Callable[..., Any]:
    def run(scenario: Callable[[PartnerServer], Awaitable[T]], *, sftp: bool = True) -> T:
        async def main() -> T:
            async with serving(partner, host_key, sftp=sftp):
                return await scenario(partner)

        return asyncio.run(main())

    return run


@pytest.fixture
def run_client(run_server: Callable[..., Any]) -> Callable[..., Any]:
    def run(
        scenario: Callable[[SFTPClient, PartnerServer], Awaitable[T]],
        *,
        timeout_seconds: float = 5.0,
    ) -> T:
        async def connected(server: PartnerServer) -> T:
            async with await create_client(server.config(timeout_seconds=timeout_seconds)) as client:
                return await scenario(client, server)

        return run_server(connected)

    return run
