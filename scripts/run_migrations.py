#!/usr/bin/env python3
"""Bring the invite ledger and bulk job tables up to the latest revision."""

import sys
from pathlib import Path

import logfire
from alembic import command
from alembic.config import Config

from portal.config import Settings
from portal.util.observability import configure_logfire

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def main(revision: str = "head") -> int:
    settings = Settings()
    configure_logfire(settings)

    alembic_cfg = Config(str(ALEMBIC_INI))

    with logfire.span("Run migrations", revision=revision):
        try:
            command.upgrade(alembic_cfg, revision)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                revision=revision,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # The portal must not start against a half-migrated schema
            raise

    logfire.info("Database migrations completed", revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
