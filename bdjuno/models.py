"""Plain data records describing chain state stored by the indexer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping


@dataclass(frozen=True)
class Coin:
    """An integer amount of a single denomination."""

    denom: str
    amount: int

    def is_equal(self, other: Coin) -> bool:
        """Tell whether both coins hold the same amount of the same denomination."""
        if self.denom != other.denom:
            raise ValueError(
                f"invalid coin denominations; {self.denom}, {other.denom}"
            )
        return self.amount == other.amount

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


@dataclass(frozen=True)
class DecCoin:
    """A decimal amount of a single denomination."""

    denom: str
    amount: Decimal


@dataclass(frozen=True)
class Account:
    """A chain account."""

    address: str


@dataclass(frozen=True)
class AccountBalance:
    """The balance of an account at a given height."""

    address: str
    balance: tuple[Coin, ...]
    height: int


@dataclass(frozen=True)
class Genesis:
    """The useful information about the genesis."""

    chain_id: str
    time: datetime
    initial_height: int


@dataclass(frozen=True)
class ConsensusEvent:
    """A single consensus step event."""

    height: int
    round: int
    step: str


@dataclass(frozen=True)
class DistributionParams:
    """The parameters of the distribution module at a given height."""

    params: Mapping[str, Any]
    height: int


@dataclass(frozen=True)
class ValidatorCommissionAmount:
    """The commission amount of a specific validator."""

    validator_oper_addr: str
    validator_self_delegate_addr: str
    amount: tuple[DecCoin, ...]
    height: int


@dataclass(frozen=True)
class DelegatorRewardAmount:
    """The reward amount of a delegator towards a validator."""

    delegator_address: str
    validator_oper_addr: str
    withdraw_address: str
    amount: tuple[DecCoin, ...]
    height: int


@dataclass(frozen=True)
class AccountBalanceHistory:
    """The balances of an account at a specific moment."""

    account: str
    balance: tuple[Coin, ...]
    delegations: tuple[Coin, ...]
    redelegations: tuple[Coin, ...]
    unbonding: tuple[Coin, ...]
    commission: tuple[DecCoin, ...]
    reward: tuple[DecCoin, ...]
    timestamp: datetime


@dataclass(frozen=True)
class MintParams:
    """The parameters of the mint module at a given height."""

    params: Mapping[str, Any]
    height: int


@dataclass(frozen=True)
class TokenUnit:
    """A unit of a token."""

    denom: str
    exponent: int
    aliases: tuple[str, ...] = ()
    price_id: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TokenUnit:
        """Build a unit from its configuration mapping."""
        return cls(
            denom=str(data.get("denom", "")),
            exponent=int(data.get("exponent", 0)),
            aliases=tuple(data.get("aliases") or ()),
            price_id=str(data.get("price_id") or ""),
        )


@dataclass(frozen=True)
class Token:
    """A token known to the chain, with its units."""

    name: str
    units: tuple[TokenUnit, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Token:
        """Build a token from its configuration mapping."""
        return cls(
            name=str(data.get("name", "")),
            units=tuple(TokenUnit.from_dict(unit) for unit in data.get("units") or ()),
        )


@dataclass(frozen=True)
class TokenPrice:
    """The price of a token unit at a given moment."""

    unit_name: str
    price: float
    market_cap: int
    timestamp: datetime | None = None


@dataclass(frozen=True)
class ValidatorSigningInfo:
    """The signing info of a validator at a given height."""

    validator_address: str
    start_height: int
    index_offset: int
    jailed_until: datetime
    tombstoned: bool
    missed_blocks_counter: int
    height: int


@dataclass(frozen=True)
class SlashingParams:
    """The parameters of the slashing module at a given height."""

    params: Mapping[str, Any]
    height: int


@dataclass(frozen=True)
class DoubleSignVote:
    """One of the two conflicting votes of a double sign evidence."""

    type: int
    height: int
    round: int
    block_id: str
    validator_address: str
    validator_index: int
    signature: str


@dataclass(frozen=True)
class DoubleSignEvidence:
    """Evidence of a validator signing two conflicting votes."""

    height: int
    vote_a: DoubleSignVote
    vote_b: DoubleSignVote


@dataclass(frozen=True)
class Pool:
    """The staking pool at a given height."""

    bonded_tokens: int
    not_bonded_tokens: int
    height: int


@dataclass(frozen=True)
class StakingParams:
    """The parameters of the staking module at a given height."""

    params: Mapping[str, Any] = field(default_factory=dict)
    height: int = 0