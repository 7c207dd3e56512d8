"""The module that records which indexing modules are enabled."""

from __future__ import annotations

from typing import Iterable, Protocol


class _Database(Protocol):
    def insert_enable_modules(self, modules: list[str]) -> None: ...


class EnabledModulesModule:
    """Stores the names of the enabled modules."""

    name = "modules"

    def __init__(self, modules: Iterable[str], db: _Database) -> None:
        self.modules = list(modules)
        self.db = db

    def run_additional_operations(self) -> None:
        """Store the list of enabled modules."""
        self.db.insert_enable_modules(list(self.modules))