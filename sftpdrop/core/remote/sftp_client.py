"""Operation façade over a single asyncssh SFTP session.

Uploads follow a least-privilege open policy: destination files are opened
with ``LEAST_PRIVILEGE_WRITE_PFLAGS`` (write, create, truncate) and never with
read access. Some managed transfer services refuse create requests that also
ask for read, so these flags must not be widened to ``"w+"`` or similar.
"""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Any, Awaitable, BinaryIO, Callable, TypeVar

import asyncssh
from asyncssh.constants import FXF_CREAT, FXF_TRUNC, FXF_WRITE

from sftpdrop.core.remote.client_base import RemoteEntry
from sftpdrop.core.remote.errors import (
    ClientClosedError,
    CopyError,
    OperationError,
    OperationTimeoutError,
    RemoteClientError,
)

T = TypeVar("T")

LEAST_PRIVILEGE_WRITE_PFLAGS = FXF_WRITE | FXF_CREAT | FXF_TRUNC
READ_MODE = "rb"
COPY_CHUNK_SIZE = 32768

COLLABORATOR_ERRORS: tuple[type[BaseException], ...] = (OSError, asyncssh.Error)


class SFTPClient:
    """Owns one SSH connection and the SFTP session layered on it.

    asyncssh multiplexes SFTP requests by id, so any number of tasks on the
    event loop that created the connection may call into one client at once.
    Operations take an optional ``timeout``; ``None`` means no deadline.
    """

    def __init__(
        self,
        connection: asyncssh.SSHClientConnection,
        sftp_client: asyncssh.SFTPClient,
        logger: logging.Logger | None = None,
    ) -> None:
        self._connection = connection
        self._sftp_client = sftp_client
        self._logger = logger or logging.getLogger("sftpdrop.remote")
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> SFTPClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the SFTP session and the SSH connection. Repeated calls do nothing."""
        if self._closed:
            return
        self._closed = True

        try:
            self._sftp_client.exit()
            await self._sftp_client.wait_closed()
        except COLLABORATOR_ERRORS as error:
            raise RemoteClientError(f"failed to close session: {error}", error) from error
        finally:
            self._connection.close()
            await self._connection.wait_closed()
        self._logger.debug("SFTP session closed")

    async def open(self, path: str, *, timeout: float | None = None) -> RemoteFile:
        handle = await self._call("open", path, self._open_for_read, path, timeout=timeout)
        return RemoteFile(self, path, handle)

    async def read_dir(self, path: str, *, timeout: float | None = None) -> list[RemoteEntry]:
        return await self._call("read directory", path, self._list, path, timeout=timeout)

    async def remove(self, path: str, *, timeout: float | None = None) -> None:
        await self._call("remove", path, self._sftp_client.remove, path, timeout=timeout)
        self._logger.debug("Removed %s", path)

    async def save(self, path: str, source: BinaryIO, *, timeout: float | None = None) -> int:
        """Create or truncate ``path`` and copy all of ``source`` into it.

        Returns the number of bytes written. A copy that fails or runs past
        its deadline stops there and leaves whatever was already written on
        the server.
        """
        written = await self._call("save", path, self._save, path, source, timeout=timeout)
        self._logger.debug("Saved %d bytes to %s", written, path)
        return written

    async def save_bytes(
        self,
        path: str,
        data: bytes | bytearray | memoryview,
        *,
        timeout: float | None = None,
    ) -> int:
        return await self.save(path, io.BytesIO(bytes(data)), timeout=timeout)

    async def save_string(
        self,
        path: str,
        text: str,
        *,
        encoding: str = "utf-8",
        timeout: float | None = None,
    ) -> int:
        return await self.save(path, io.BytesIO(text.encode(encoding)), timeout=timeout)

    async def _open_for_read(self, path: str) -> asyncssh.SFTPClientFile:
        return await self._sftp_client.open(path, READ_MODE)

    async def _list(self, path: str) -> list[RemoteEntry]:
        entries: list[RemoteEntry] = []
        async for item in self._sftp_client.scandir(path):
            name = str(item.filename)
            if name in {".", ".."}:
                continue
            entries.append(RemoteEntry.from_attrs(name, item.attrs))
        return entries

    async def _save(self, path: str, source: BinaryIO) -> int:
        try:
            remote_file = await self._sftp_client.open(path, LEAST_PRIVILEGE_WRITE_PFLAGS, encoding=None)
        except COLLABORATOR_ERRORS as error:
            raise OperationError("open", path, error) from error

        try:
            try:
                return await _copy_stream(source, remote_file)
            finally:
                await remote_file.close()
        except COLLABORATOR_ERRORS as error:
            raise CopyError(path, error) from error

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError()

    async def _call(
        self,
        action: str,
        path: str,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        timeout: float | None = None,
    ) -> T:
        self._ensure_open()
        try:
            if timeout is None:
                return await func(*args)
            try:
                return await asyncio.wait_for(func(*args), timeout=timeout)
            except asyncio.TimeoutError as error:
                raise OperationTimeoutError(action, path, timeout) from error
        except COLLABORATOR_ERRORS as error:
            raise OperationError(action, path, error) from error


class RemoteFile:
    def __init__(self, client: SFTPClient, path: str, handle: asyncssh.SFTPClientFile) -> None:
        self._client = client
        self._path = path
        self._handle = handle
        self._closed = False

    @property
    def path(self) -> str:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> RemoteFile:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def read(self, size: int = -1, *, timeout: float | None = None) -> bytes:
        data = await self._client._call("read", self._path, self._handle.read, size, timeout=timeout)
        return bytes(data)

    async def close(self, *, timeout: float | None = None) -> None:
        if self._closed:
            return
        self._closed = True
        # the handle went away with the session
        if self._client.closed:
            return
        await self._client._call("close", self._path, self._handle.close, timeout=timeout)


async def _copy_stream(source: BinaryIO, target: asyncssh.SFTPClientFile) -> int:
    total = 0
    while True:
        chunk = source.read(COPY_CHUNK_SIZE)
        if not chunk:
            return total
        await target.write(chunk)
        total += len(chunk)
