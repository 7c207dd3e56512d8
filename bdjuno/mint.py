"""The module that tracks the mint parameters and the inflation."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any, Mapping, Protocol

from bdjuno.models import MintParams
from bdjuno.tasks import Scheduler, watch_method

logger = logging.getLogger(__name__)

MODULE_NAME = "mint"


class MintSource(Protocol):
    """Where the mint data of a given height comes from."""

    def get_inflation(self, height: int) -> Decimal: ...

    def params(self, height: int) -> Mapping[str, Any]: ...


class _Database(Protocol):
    def save_mint_params(self, params: MintParams) -> None: ...

    def get_last_block_height(self) -> int: ...

    def save_inflation(self, inflation: Decimal, height: int) -> None: ...


def _initial_height(doc: Any) -> int:
    if isinstance(doc, Mapping):
        return int(doc.get("initial_height", 0) or 0)
    return int(getattr(doc, "initial_height", 0) or 0)


def _module_state(app_state: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = app_state.get(name)
    if raw is None:
        raise ValueError(f"no {name} state in genesis")
    state = json.loads(raw) if isinstance(raw, (str, bytes, bytearray)) else raw
    if not isinstance(state, Mapping):
        raise ValueError(f"{name} state is not an object")
    return state


class MintModule:
    """Stores the mint parameters and the daily inflation."""

    name = MODULE_NAME

    def __init__(self, source: MintSource, db: _Database) -> None:
        self.source = source
        self.db = db

    def handle_genesis(self, doc: Any, app_state: Mapping[str, Any]) -> None:
        """Store the mint parameters found in the genesis."""
        logger.debug("parsing genesis")
        try:
            state = _module_state(app_state, MODULE_NAME)
            params = state.get("params") or {}
        except ValueError as err:
            raise RuntimeError(f"error while reading mint genesis data: {err}") from err

        try:
            self.db.save_mint_params(MintParams(params, _initial_height(doc)))
        except Exception as err:
            raise RuntimeError(f"error while storing genesis mint params: {err}") from err

    def register_periodic_operations(self, scheduler: Scheduler) -> None:
        """Update the inflation every day at midnight."""
        logger.debug("setting up periodic tasks")
        scheduler.daily("00:00", lambda: watch_method(self.update_inflation))

    def update_inflation(self) -> None:
        """Fetch the inflation at the latest height and store it."""
        logger.debug("getting inflation data")
        height = self.db.get_last_block_height()
        inflation = self.source.get_inflation(height)
        self.db.save_inflation(inflation, height)

    def update_params(self, height: int) -> None:
        """Fetch the mint parameters at height and store them."""
        logger.debug("updating params at height %d", height)
        try:
            params = self.source.params(height)
        except Exception as err:
            raise RuntimeError(f"error while getting params: {err}") from err
        self.db.save_mint_params(MintParams(params, height))