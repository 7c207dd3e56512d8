"""Records describing delegations and validators of the staking module."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from bdjuno.models import Coin

DO_NOT_MODIFY_DESC = "[do-not-modify]"


@dataclass(frozen=True)
class Delegation:
    """A delegation from a delegator to a validator at a given height."""

    delegator_address: str
    validator_oper_addr: str
    amount: Coin
    height: int


@dataclass(frozen=True, eq=False)
class UnbondingDelegation:
    """A single unbonding delegation."""

    delegator_address: str
    validator_oper_addr: str
    amount: Coin
    completion_timestamp: datetime
    height: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnbondingDelegation):
            return NotImplemented
        return (
            self.delegator_address == other.delegator_address
            and self.validator_oper_addr == other.validator_oper_addr
            and self.amount.is_equal(other.amount)
            and self.completion_timestamp == other.completion_timestamp
            and self.height == other.height
        )

    def __hash__(self) -> int:
        return hash((self.delegator_address, self.validator_oper_addr, self.height))


@dataclass(frozen=True, eq=False)
class Redelegation:
    """A single redelegation from one validator to another."""

    delegator_address: str
    src_validator: str
    dst_validator: str
    amount: Coin
    completion_time: datetime
    height: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Redelegation):
            return NotImplemented
        return (
            self.delegator_address == other.delegator_address
            and self.src_validator == other.src_validator
            and self.dst_validator == other.dst_validator
            and self.amount.is_equal(other.amount)
            and self.completion_time == other.completion_time
            and self.height == other.height
        )

    def __hash__(self) -> int:
        return hash(
            (self.delegator_address, self.src_validator, self.dst_validator, self.height)
        )


@dataclass(frozen=True)
class Validator:
    """The identity and commission limits of a single validator."""

    cons_address: str
    operator: str
    cons_pub_key: str
    self_delegate_address: str
    max_change_rate: Decimal | None
    max_rate: Decimal | None
    height: int


@dataclass(frozen=True)
class Description:
    """The public description of a validator."""

    moniker: str = ""
    identity: str = ""
    website: str = ""
    security_contact: str = ""
    details: str = ""


@dataclass(frozen=True)
class ValidatorDescription:
    """A validator description with its avatar URL at a given height.

    The avatar URL is DO_NOT_MODIFY_DESC when it should be left unchanged.
    """

    operator_address: str
    description: Description | Any
    avatar_url: str
    height: int


@dataclass(frozen=True)
class ValidatorCommission:
    """A validator commission at a given height."""

    val_address: str
    commission: Decimal | None
    min_self_delegation: int | None
    height: int


@dataclass(frozen=True)
class ValidatorVotingPower:
    """The voting power of a validator at a given height."""

    consensus_address: str
    voting_power: int
    height: int


@dataclass(frozen=True)
class ValidatorStatus:
    """The state of a validator at a given height."""

    consensus_address: str
    consensus_pub_key: str
    status: int
    jailed: bool
    tombstoned: bool
    height: int