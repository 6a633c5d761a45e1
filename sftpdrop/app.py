from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from sftpdrop.core.config import ConfigError, load_config
from sftpdrop.core.logging import setup_logging
from sftpdrop.core.remote.client_factory import create_client
from sftpdrop.core.remote.errors import RemoteClientError
from sftpdrop.core.remote.sftp_client import SFTPClient

SAMPLE_TEXT = "This is a test."


async def _run_smoke(client: SFTPClient, logger: logging.Logger, sample_file: Path | None) -> None:
    if sample_file is not None:
        logger.info("Saving file from stream.")
        try:
            with sample_file.open("rb") as source:
                await client.save(sample_file.name, source)
        except (OSError, RemoteClientError) as error:
            logger.error("stream test: %s", error)

    logger.info("Saving file from string.")
    try:
        await client.save_string("test2.txt", SAMPLE_TEXT)
    except RemoteClientError as error:
        logger.error("string test: %s", error)

    logger.info("Saving file from bytes.")
    try:
        await client.save_bytes("test3.txt", SAMPLE_TEXT.encode("utf-8"))
    except RemoteClientError as error:
        logger.error("bytes test: %s", error)

    entries = await client.read_dir(".")
    logger.info("Found %d entries.", len(entries))
    for entry in entries:
        try:
            async with await client.open(entry.name) as remote_file:
                content = await remote_file.read()
        except RemoteClientError as error:
            logger.error("%s", error)
            continue
        logger.info("%s (%d bytes)\n%s", entry.name, len(content), content.decode("utf-8", errors="replace"))

    for entry in entries:
        logger.info("Deleting %s.", entry.name)
        try:
            await client.remove(entry.name)
        except RemoteClientError as error:
            logger.error("%s", error)


async def _amain(logger: logging.Logger, sample_file: Path | None) -> int:
    try:
        config = load_config()
    except ConfigError as error:
        logger.error("Invalid configuration: %s", error)
        return 1

    try:
        client = await create_client(config, logger=logger)
    except RemoteClientError as error:
        logger.error("%s", error)
        return 1

    async with client:
        try:
            await _run_smoke(client, logger, sample_file)
        except RemoteClientError as error:
            logger.error("%s", error)
            return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    sample_file = Path(args[0]) if args else None

    logger = setup_logging()
    return asyncio.run(_amain(logger, sample_file))


if __name__ == "__main__":
    raise SystemExit(main())
