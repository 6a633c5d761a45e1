"""Small SFTP client for delivering files to partners without an API."""

from sftpdrop.core.config import Config, ConfigError, load_config
from sftpdrop.core.remote import (
    ClientClosedError,
    ConnectionFailedError,
    CopyError,
    OperationError,
    OperationTimeoutError,
    RemoteClientError,
    RemoteEntry,
    RemoteFile,
    SessionFailedError,
    SFTPClient,
    create_client,
)

__all__ = [
    "ClientClosedError",
    "Config",
    "ConfigError",
    "ConnectionFailedError",
    "CopyError",
    "OperationError",
    "OperationTimeoutError",
    "RemoteClientError",
    "RemoteEntry",
    "RemoteFile",
    "SFTPClient",
    "SessionFailedError",
    "create_client",
    "load_config",
]
