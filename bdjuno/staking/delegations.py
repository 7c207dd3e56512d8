"""Delegation handling of the staking module."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping, Protocol

from bdjuno.events import Tx
from bdjuno.models import Coin, Pool, StakingParams
from bdjuno.staking_types import Delegation, Redelegation, UnbondingDelegation

logger = logging.getLogger(__name__)

REDELEGATE_EVENT_TYPE = "redelegate"
UNBOND_EVENT_TYPE = "unbond"
COMPLETION_TIME_ATTRIBUTE_KEY = "completion_time"
NOT_FOUND_CODE = "NotFound"

_RFC3339 = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$"
)


class StakingError(Exception):
    """Raised when the staking module cannot do its work."""


@dataclass(frozen=True)
class DelegationResponse:
    """A delegation together with its balance, as returned by a node."""

    delegator_address: str
    validator_address: str
    balance: Coin


@dataclass(frozen=True)
class MsgDelegate:
    """A message delegating tokens to a validator."""

    delegator_address: str
    validator_address: str
    amount: Coin


@dataclass(frozen=True)
class MsgBeginRedelegate:
    """A message moving a delegation from one validator to another."""

    delegator_address: str
    validator_src_address: str
    validator_dst_address: str
    amount: Coin


@dataclass(frozen=True)
class MsgUndelegate:
    """A message starting the unbonding of a delegation."""

    delegator_address: str
    validator_address: str
    amount: Coin


class StakingSource(Protocol):
    """Where the staking data of a given height comes from."""

    def get_validator(self, height: int, val_oper: str) -> Any: ...

    def get_validators_with_status(self, height: int, status: str) -> list[Any]: ...

    def get_delegation(self, height: int, delegator: str, validator: str) -> DelegationResponse: ...

    def get_delegator_delegations(self, height: int, delegator: str) -> list[DelegationResponse]: ...

    def get_validator_delegations(self, height: int, validator: str) -> list[DelegationResponse]: ...

    def get_pool(self, height: int) -> Any: ...

    def get_params(self, height: int) -> Mapping[str, Any]: ...


class _DistrModule(Protocol):
    def refresh_delegator_rewards(self, height: int, delegator: str) -> None: ...


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record[name]
    return getattr(record, name)


def _parse_rfc3339(value: str) -> datetime:
    match = _RFC3339.match(value)
    if match is None:
        raise ValueError(f"invalid RFC3339 time: {value!r}")
    date, clock, fraction, zone = match.groups()
    fraction = (fraction or "")[:6].ljust(6, "0")
    if zone in ("Z", "z"):
        zone = "+00:00"
    return datetime.fromisoformat(f"{date}T{clock}.{fraction}{zone}")


def convert_delegation_response(height: int, response: DelegationResponse) -> Delegation:
    """Turn a node's delegation response into a Delegation at height."""
    return Delegation(
        delegator_address=response.delegator_address,
        validator_oper_addr=response.validator_address,
        amount=response.balance,
        height=height,
    )


def convert_delegations_responses(
    height: int, responses: Iterable[DelegationResponse]
) -> list[Delegation]:
    """Turn every delegation response into a Delegation at height."""
    return [convert_delegation_response(height, response) for response in responses]


class DelegationsMixin:
    """Delegation operations; expects source, db and distr_module attributes."""

    source: StakingSource
    db: Any
    distr_module: _DistrModule

    def _get_validator_delegations(self, height: int, validator: str) -> list[Delegation]:
        try:
            responses = self.source.get_validator_delegations(height, validator)
        except Exception as err:
            raise StakingError(f"error while getting validator delegations: {err}") from err
        return convert_delegations_responses(height, responses)

    def _get_delegator_delegations(self, height: int, delegator: str) -> list[Delegation]:
        try:
            responses = self.source.get_delegator_delegations(height, delegator)
        except Exception as err:
            raise StakingError(f"error while getting delegator delegations: {err}") from err
        return convert_delegations_responses(height, responses)

    def refresh_validator_delegations(self, height: int, val_oper_addr: str) -> None:
        """Replace the stored delegations of a validator with the ones at height."""
        delegations = self._get_validator_delegations(height, val_oper_addr)

        try:
            self.db.delete_validator_delegations(val_oper_addr)
        except Exception as err:
            raise StakingError(f"error while deleting validator delegations: {err}") from err

        try:
            self.db.save_delegations(delegations)
        except Exception as err:
            raise StakingError(f"error while storing validator delegations: {err}") from err

    def refresh_delegator_delegations(self, height: int, delegator: str) -> None:
        """Replace the stored delegations of a delegator and refresh its rewards."""
        try:
            delegations = self._get_delegator_delegations(height, delegator)
        except StakingError as err:
            if NOT_FOUND_CODE not in str(err):
                raise StakingError(f"error while getting delegator delegations: {err}") from err
            delegations = []

        try:
            self.db.delete_delegator_delegations(delegator)
        except Exception as err:
            raise StakingError(f"error while deleting delegator delegations: {err}") from err

        try:
            self.db.save_delegations(delegations)
        except Exception as err:
            raise StakingError(f"error while saving delegations: {err}") from err

        self.distr_module.refresh_delegator_rewards(height, delegator)

    def update_params(self, height: int) -> None:
        """Fetch the staking parameters at height and store them."""
        logger.debug("updating params at height %d", height)
        try:
            params = self.source.get_params(height)
        except Exception as err:
            raise StakingError(f"error while getting params: {err}") from err
        self.db.save_staking_params(StakingParams(params, height))

    def get_staking_pool(self, height: int) -> Pool:
        """Return the staking pool at height."""
        try:
            pool = self.source.get_pool(height)
        except Exception as err:
            raise StakingError(f"error while getting staking pool: {err}") from err
        return Pool(
            bonded_tokens=_field(pool, "bonded_tokens"),
            not_bonded_tokens=_field(pool, "not_bonded_tokens"),
            height=height,
        )

    def store_delegation_from_message(self, height: int, msg: MsgDelegate) -> None:
        """Store the delegation resulting from a delegate message."""
        response = self.source.get_delegation(
            height, msg.delegator_address, msg.validator_address
        )
        self.db.save_delegations([convert_delegation_response(height, response)])

    def _completion_time(self, tx: Tx, index: int, event_type: str, what: str) -> datetime:
        try:
            event = tx.find_event_by_type(index, event_type)
        except LookupError as err:
            raise StakingError(f"error while searching for {event_type} event: {err}") from err

        try:
            value = tx.find_attribute_by_key(event, COMPLETION_TIME_ATTRIBUTE_KEY)
        except LookupError as err:
            raise StakingError(
                f"error while searching for {COMPLETION_TIME_ATTRIBUTE_KEY} attribute: {err}"
            ) from err

        try:
            return _parse_rfc3339(value)
        except ValueError as err:
            raise StakingError(f"error while converting {what} completion time: {err}") from err

    def store_redelegation_from_message(
        self, tx: Tx, index: int, msg: MsgBeginRedelegate
    ) -> Redelegation:
        """Store the redelegation started by a message and return it."""
        completion_time = self._completion_time(
            tx, index, REDELEGATE_EVENT_TYPE, "redelegation"
        )
        redelegation = Redelegation(
            delegator_address=msg.delegator_address,
            src_validator=msg.validator_src_address,
            dst_validator=msg.validator_dst_address,
            amount=msg.amount,
            completion_time=completion_time,
            height=tx.height,
        )
        self.db.save_redelegations([redelegation])
        return redelegation

    def store_unbonding_delegation_from_message(
        self, tx: Tx, index: int, msg: MsgUndelegate
    ) -> UnbondingDelegation:
        """Store the unbonding delegation started by a message and return it."""
        completion_time = self._completion_time(
            tx, index, UNBOND_EVENT_TYPE, "unbonding delegation"
        )
        delegation = UnbondingDelegation(
            delegator_address=msg.delegator_address,
            validator_oper_addr=msg.validator_address,
            amount=msg.amount,
            completion_timestamp=completion_time,
            height=tx.height,
        )
        self.db.save_unbonding_delegations([delegation])
        return delegation