# SPDX-License-Identifier: MIT

import importlib
import pkgutil
from typing import Callable, TypeAlias

MigrationStep: TypeAlias = Callable[[], None]

MIGRATIONS_PACKAGE = "chronicle.migrate.migrations"

_steps: dict[int, MigrationStep] = {}


class DuplicateMigrationError(Exception):
    pass


def migration(version: int) -> Callable[[MigrationStep], MigrationStep]:
    """Register a store migration. Versions are applied in ascending order."""

    def register(step: MigrationStep) -> MigrationStep:
        existing = _steps.get(version)
        if existing is not None and existing.__module__ != step.__module__:
            raise DuplicateMigrationError(
                f"migration {version} is defined in both {existing.__module__} "
                f"and {step.__module__}"
            )
        _steps[version] = step
        return step

    return register


def discover_migrations() -> None:
    package = importlib.import_module(MIGRATIONS_PACKAGE)
    for module_info in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"{MIGRATIONS_PACKAGE}.{module_info.name}")


def pending_migrations(applied_version: int) -> list[tuple[int, MigrationStep]]:
    discover_migrations()
    return sorted(
        ((version, step) for version, step in _steps.items() if version > applied_version),
        key=lambda pending: pending[0],
    )
