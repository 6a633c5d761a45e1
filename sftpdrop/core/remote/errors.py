from __future__ import annotations

import asyncssh


class RemoteClientError(Exception):
    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConnectionFailedError(RemoteClientError):
    def __init__(self, addr: str, cause: BaseException) -> None:
        super().__init__(f"failed to connect ssh to {addr}: {cause}", cause)
        self.addr = addr


class SessionFailedError(RemoteClientError):
    def __init__(self, addr: str, cause: BaseException) -> None:
        super().__init__(f"failed to connect sftp to {addr}: {cause}", cause)
        self.addr = addr


class ClientClosedError(RemoteClientError):
    def __init__(self) -> None:
        super().__init__("client is closed")


class OperationError(RemoteClientError):
    def __init__(self, action: str, path: str, cause: BaseException) -> None:
        super().__init__(f"failed to {action} {path}: {cause}", cause)
        self.action = action
        self.path = path

    @property
    def not_found(self) -> bool:
        return isinstance(self.cause, (FileNotFoundError, asyncssh.SFTPNoSuchFile))


class CopyError(OperationError):
    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__("save", path, cause)


class OperationTimeoutError(OperationError):
    def __init__(self, action: str, path: str, timeout_seconds: float) -> None:
        super().__init__(action, path, TimeoutError(f"timed out after {timeout_seconds:g}s"))
        self.timeout_seconds = timeout_seconds
