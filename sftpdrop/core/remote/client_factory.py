from __future__ import annotations

import asyncio
import logging

import asyncssh

from sftpdrop.core.config import Config
from sftpdrop.core.remote.errors import ConnectionFailedError, SessionFailedError
from sftpdrop.core.remote.sftp_client import COLLABORATOR_ERRORS, SFTPClient


async def create_client(config: Config, *, logger: logging.Logger | None = None) -> SFTPClient:
    log = logger or logging.getLogger("sftpdrop.remote")

    try:
        host, port = config.host_port()
    except ValueError as error:
        raise ConnectionFailedError(config.addr, error) from error

    try:
        connection = await _open_connection(config, host, port)
    except (asyncio.TimeoutError, *COLLABORATOR_ERRORS) as error:
        raise ConnectionFailedError(config.addr, error) from error
    log.debug("SSH connected to %s:%s as %s", host, port, config.user)

    try:
        sftp_client = await asyncio.wait_for(connection.start_sftp_client(), timeout=config.timeout_seconds)
    except (asyncio.TimeoutError, *COLLABORATOR_ERRORS) as error:
        connection.close()
        await connection.wait_closed()
        raise SessionFailedError(config.addr, error) from error
    except BaseException:
        connection.close()
        raise
    log.debug("SFTP session started on %s", config.addr)

    return SFTPClient(connection=connection, sftp_client=sftp_client, logger=log)


async def _open_connection(config: Config, host: str, port: int) -> asyncssh.SSHClientConnection:
    # known_hosts=None: any remote host key is accepted without verification
    return await asyncssh.connect(
        host=host,
        port=port,
        username=config.user,
        password=config.password,
        known_hosts=None,
        preferred_auth="password",
        connect_timeout=config.timeout_seconds,
        login_timeout=config.timeout_seconds,
    )
