"""Records describing the governance module's parameters, proposals and votes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Iterable

from bdjuno.models import Coin, Pool

PROPOSAL_STATUS_INVALID = "PROPOSAL_STATUS_INVALID"
PROPOSAL_STATUS_PASSED = "PROPOSAL_STATUS_PASSED"


def _nanoseconds(duration: timedelta | int) -> int:
    if isinstance(duration, timedelta):
        whole_seconds = duration.days * 86_400 + duration.seconds
        return whole_seconds * 1_000_000_000 + duration.microseconds * 1_000
    if isinstance(duration, int) and not isinstance(duration, bool):
        return duration
    raise TypeError(f"invalid duration: {duration!r}")


@dataclass(frozen=True)
class DepositParams:
    """The deposit parameters of the governance module."""

    min_deposit: tuple[Coin, ...]
    max_deposit_period: int

    @classmethod
    def from_gov(
        cls, min_deposit: Iterable[Coin], max_deposit_period: timedelta | int
    ) -> DepositParams:
        """Build the parameters, storing the period in nanoseconds."""
        return cls(tuple(min_deposit), _nanoseconds(max_deposit_period))


@dataclass(frozen=True)
class VotingParams:
    """The voting parameters of the governance module."""

    voting_period: int

    @classmethod
    def from_gov(cls, voting_period: timedelta | int) -> VotingParams:
        """Build the parameters, storing the period in nanoseconds."""
        return cls(_nanoseconds(voting_period))


@dataclass(frozen=True)
class TallyParams:
    """The tally parameters of the governance module."""

    quorum: Decimal
    threshold: Decimal
    veto_threshold: Decimal


@dataclass(frozen=True)
class GovParams:
    """All the parameters of the governance module at a given height."""

    voting_params: VotingParams
    deposit_params: DepositParams
    tally_params: TallyParams
    height: int


@dataclass(frozen=True, eq=False)
class Proposal:
    """A single governance proposal."""

    proposal_id: int
    proposal_route: str
    proposal_type: str
    content: Any
    status: str
    submit_time: datetime
    deposit_end_time: datetime
    voting_start_time: datetime
    voting_end_time: datetime
    proposer: str

    def _key(self) -> tuple[Any, ...]:
        return (
            self.proposal_route,
            self.proposal_type,
            self.proposal_id,
            str(self.content),
            self.status,
            self.submit_time,
            self.deposit_end_time,
            self.voting_start_time,
            self.voting_end_time,
            self.proposer,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Proposal):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


@dataclass(frozen=True)
class ProposalUpdate:
    """The data used to update a stored governance proposal."""

    proposal_id: int
    status: str
    voting_start_time: datetime
    voting_end_time: datetime


@dataclass(frozen=True)
class Deposit:
    """A single deposit made towards a proposal."""

    proposal_id: int
    depositor: str
    amount: tuple[Coin, ...]
    height: int


@dataclass(frozen=True)
class Vote:
    """A single vote cast on a proposal."""

    proposal_id: int
    voter: str
    option: Any
    height: int


@dataclass(frozen=True)
class TallyResult:
    """The final results of a proposal."""

    proposal_id: int
    yes: str
    abstain: str
    no: str
    no_with_veto: str
    height: int


@dataclass(frozen=True)
class ProposalStakingPoolSnapshot:
    """A staking pool snapshot associated with a proposal."""

    proposal_id: int
    pool: Pool


@dataclass(frozen=True)
class ProposalValidatorStatusSnapshot:
    """A snapshot of a validator's status associated with a proposal."""

    proposal_id: int
    validator_cons_address: str
    validator_voting_power: int
    validator_status: int
    validator_jailed: bool
    height: int