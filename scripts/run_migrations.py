#!/usr/bin/env python3
"""Apply linkage schema migrations.

Usage:
    python scripts/run_migrations.py                       # upgrade to head
    python scripts/run_migrations.py upgrade [revision]    # default: head
    python scripts/run_migrations.py downgrade <revision>  # e.g. -1 or base
"""

from pathlib import Path
import sys

from alembic import command
from alembic.config import Config
import logfire

from linkage.config import Settings
from linkage.util.logging import get_logger, setup_logging
from linkage.util.observability import configure_logfire

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"

COMMANDS = {"upgrade": command.upgrade, "downgrade": command.downgrade}

logger = get_logger(__name__)


def parse_args(argv: list[str]) -> tuple[str, str]:
    """Return (direction, revision) for the command line.

    Raises:
        SystemExit: If the direction is unknown, or a downgrade has no target
    """
    args = argv[1:]
    if not args:
        return "upgrade", "head"
    direction = args[0]
    if direction not in COMMANDS or len(args) > 2:
        raise SystemExit(__doc__)
    if direction == "downgrade" and len(args) < 2:
        raise SystemExit("downgrade needs a target revision, e.g. -1 or base")
    return direction, args[1] if len(args) == 2 else "head"


def main(argv: list[str]) -> int:
    """Move the schema to the requested revision, logging failures to Logfire."""
    direction, target = parse_args(argv)

    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    alembic_cfg = Config(str(ALEMBIC_INI))

    with logfire.span("migrations.run", direction=direction, target=target):
        try:
            COMMANDS[direction](alembic_cfg, target)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                direction=direction,
                target=target,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # Fail loudly so nothing starts against a half-migrated schema
            raise

    logger.info(f"Database schema {direction}d to {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
