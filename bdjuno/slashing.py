"""The module that tracks validators' signing infos and slashing parameters."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Mapping, Protocol

from bdjuno.events import Event, find_attribute_by_key, find_events_by_type
from bdjuno.models import SlashingParams, ValidatorSigningInfo

logger = logging.getLogger(__name__)

MODULE_NAME = "slashing"
SLASH_EVENT_TYPE = "slash"
ADDRESS_ATTRIBUTE_KEY = "address"


class SlashingError(Exception):
    """Raised when the slashing module cannot do its work."""


class SlashingSource(Protocol):
    """Where the slashing data of a given height comes from."""

    def get_signing_info(self, height: int, cons_addr: str) -> Any: ...

    def get_signing_infos(self, height: int) -> Iterable[Any]: ...

    def get_params(self, height: int) -> Mapping[str, Any]: ...


class _StakingModule(Protocol):
    def refresh_validator_delegations(self, height: int, val_oper_addr: str) -> None: ...


class _Database(Protocol):
    def save_validators_signing_infos(self, infos: list[ValidatorSigningInfo]) -> None: ...

    def save_slashing_params(self, params: SlashingParams) -> None: ...

    def get_validator_operator_address(self, cons_addr: str) -> Any: ...


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record[name]
    return getattr(record, name)


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


def _to_signing_info(info: Any, height: int) -> ValidatorSigningInfo:
    return ValidatorSigningInfo(
        validator_address=_field(info, "address"),
        start_height=_field(info, "start_height"),
        index_offset=_field(info, "index_offset"),
        jailed_until=_field(info, "jailed_until"),
        tombstoned=_field(info, "tombstoned"),
        missed_blocks_counter=_field(info, "missed_blocks_counter"),
        height=height,
    )


class SlashingModule:
    """Stores signing infos and slashing parameters, refreshing slashed delegations."""

    name = MODULE_NAME

    def __init__(
        self,
        source: SlashingSource,
        db: _Database,
        staking_module: _StakingModule | None = None,
    ) -> None:
        self.source = source
        self.db = db
        self.staking_module = staking_module

    def handle_genesis(self, doc: Any, app_state: Mapping[str, Any]) -> None:
        """Store the slashing parameters found in the genesis."""
        logger.debug("parsing genesis")
        try:
            state = _module_state(app_state, MODULE_NAME)
        except ValueError as err:
            raise SlashingError(f"error while reading slashing genesis data: {err}") from err
        params = state.get("params") or {}

        try:
            self.db.save_slashing_params(SlashingParams(params, _initial_height(doc)))
        except Exception as err:
            raise SlashingError(f"error while storing genesis slashing params: {err}") from err

    def handle_block(self, height: int, begin_block_events: Iterable[Event]) -> None:
        """Store the signing infos at height and refresh slashed validators' delegations."""
        try:
            self._update_signing_info(height)
        except Exception as err:
            raise SlashingError(f"error while updating signing info: {err}") from err

        try:
            self._update_slashed_delegations(height, begin_block_events)
        except Exception as err:
            raise SlashingError(f"error while updating slashes: {err}") from err

    def _update_signing_info(self, height: int) -> None:
        logger.debug("updating signing info at height %d", height)
        self.db.save_validators_signing_infos(self.get_signing_infos(height))

    def _update_slashed_delegations(self, height: int, events: Iterable[Event]) -> None:
        for event in find_events_by_type(events, SLASH_EVENT_TYPE):
            cons_addr = find_attribute_by_key(event, ADDRESS_ATTRIBUTE_KEY).value
            try:
                val_oper_addr = self.db.get_validator_operator_address(cons_addr)
            except Exception as err:
                raise SlashingError(
                    "error while getting validator operator address; make sure the "
                    f"slashing module is listed after the staking module: {err}"
                ) from err

            if self.staking_module is None:
                raise SlashingError("no staking module set to refresh validator delegations")
            try:
                self.staking_module.refresh_validator_delegations(height, str(val_oper_addr))
            except Exception as err:
                raise SlashingError(
                    f"error while refreshing validator delegations for validator {cons_addr}: {err}"
                ) from err

    def update_params(self, height: int) -> None:
        """Fetch the slashing parameters at height and store them."""
        logger.debug("updating params at height %d", height)
        try:
            params = self.source.get_params(height)
        except Exception as err:
            raise SlashingError(f"error while getting params: {err}") from err
        self.db.save_slashing_params(SlashingParams(params, height))

    def get_signing_infos(self, height: int) -> list[ValidatorSigningInfo]:
        """Return the signing infos of all the validators at height."""
        return [_to_signing_info(info, height) for info in self.source.get_signing_infos(height)]

    def get_signing_info(self, height: int, cons_addr: str) -> ValidatorSigningInfo:
        """Return the signing info of the validator with the given consensus address."""
        return _to_signing_info(self.source.get_signing_info(height, cons_addr), height)