from sftpdrop.core.remote.client_base import RemoteEntry
from sftpdrop.core.remote.client_factory import create_client
from sftpdrop.core.remote.errors import (
    ClientClosedError,
    ConnectionFailedError,
    CopyError,
    OperationError,
    OperationTimeoutError,
    RemoteClientError,
    SessionFailedError,
)
from sftpdrop.core.remote.sftp_client import LEAST_PRIVILEGE_WRITE_PFLAGS, RemoteFile, SFTPClient

__all__ = [
    "ClientClosedError",
    "ConnectionFailedError",
    "CopyError",
    "LEAST_PRIVILEGE_WRITE_PFLAGS",
    "OperationError",
    "OperationTimeoutError",
    "RemoteClientError",
    "RemoteEntry",
    "RemoteFile",
    "SFTPClient",
    "SessionFailedError",
    "create_client",
]
