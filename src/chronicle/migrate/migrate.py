# SPDX-License-Identifier: MIT

import logging

from chronicle.migrate import registry
from chronicle.repository.migrate import MigrateRepository

logger = logging.getLogger(__name__)


def run_required_migrations(migrate_repo: MigrateRepository) -> list[int]:
    """Apply the store migrations newer than the recorded version, in order."""
    applied: list[int] = []
    pending = registry.pending_migrations(migrate_repo.get_latest_migration_number())

    for version, step in pending:
        logger.info("running store migration %s", version)
        step()
        migrate_repo.set_new_migration_number(version)
        applied.append(version)

    migrate_repo.flush()
    return applied
