#!/usr/bin/env python3
"""Transfer entrypoint script.

Moves an amount between two existing accounts in one database transaction
and prints the committed result as JSON.

Usage: transfer.py FROM_ACCOUNT_ID TO_ACCOUNT_ID AMOUNT
"""
import asyncio
import dataclasses
import json
import sys

import structlog

from transfer_ledger.application.services import TransferService
from transfer_ledger.config import settings
from transfer_ledger.domain.exceptions import DomainError
from transfer_ledger.domain.models import TransferTxParams
from transfer_ledger.infrastructure.database import Database
from transfer_ledger.logging import configure_logging


logger = structlog.get_logger()


async def main(argv: list[str]) -> int:
    configure_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        log_sql=settings.log_sql,
    )

    if len(argv) != 3:
        print(__doc__, file=sys.stderr)
        return 2

    try:
        params = TransferTxParams(
            from_account_id=int(argv[0]),
            to_account_id=int(argv[1]),
            amount=int(argv[2]),
        )
    except ValueError:
        print(__doc__, file=sys.stderr)
        return 2

    logger.info(
        "transfer_requested",
        database_url=settings.database_url.split("@")[-1],
        isolation_level=settings.database_isolation_level,
    )

    database = Database(
        settings.database_url,
        isolation_level=settings.database_isolation_level,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    service = TransferService.from_database(database)

    try:
        result = await service.transfer_tx(params)
    except DomainError as exc:
        logger.error("transfer_failed", error=str(exc), error_type=type(exc).__name__)
        return 1
    finally:
        await database.close()

    print(json.dumps(dataclasses.asdict(result), default=str, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
