from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from bdjuno.gov_types import (
    PROPOSAL_STATUS_PASSED,
    DepositParams,
    GovParams,
    Proposal,
    ProposalStakingPoolSnapshot,
    ProposalUpdate,
    TallyParams,
    VotingParams,
)
from bdjuno.models import Coin, Pool


class _Content:
    def __init__(self, text):
        self.text = text

    def __str__(self):
        return self.text


def _proposal(content, submit_time=None):
    moment = submit_time or datetime(2021, 1, 1, tzinfo=timezone.utc)
    return Proposal(
        proposal_id=1,
        proposal_route="gov",
        proposal_type="Text",
        content=content,
        status=PROPOSAL_STATUS_PASSED,
        submit_time=moment,
        deposit_end_time=moment,
        voting_start_time=moment,
        voting_end_time=moment,
        proposer="cosmos1proposer",
    )


def test_deposit_params_one_second_in_nanoseconds():
    params = DepositParams.from_gov([Coin("stake", 10)], timedelta(seconds=1))
    assert params.max_deposit_period == 1_000_000_000
    assert params.min_deposit == (Coin("stake", 10),)


def test_deposit_params_accepts_nanoseconds():
    assert DepositParams.from_gov([], 5).max_deposit_period == 5


def test_voting_period_scales_linearly():
    one = VotingParams.from_gov(timedelta(seconds=1)).voting_period
    assert VotingParams.from_gov(timedelta(days=2)).voting_period == one * 2 * 86_400


def test_voting_period_microseconds_kept():
    one_second = VotingParams.from_gov(timedelta(seconds=1)).voting_period
    one_micro = VotingParams.from_gov(timedelta(microseconds=1)).voting_period
    assert one_micro * 1_000_000 == one_second


def test_invalid_duration_rejected():
    with pytest.raises(TypeError):
        VotingParams.from_gov("two days")


def test_gov_params_holds_parts():
    tally = TallyParams(Decimal("0.4"), Decimal("0.5"), Decimal("0.334"))
    voting = VotingParams.from_gov(7)
    deposit = DepositParams.from_gov([], 3)
    params = GovParams(voting, deposit, tally, 10)
    assert params.tally_params.veto_threshold == Decimal("0.334")
    assert params.deposit_params.max_deposit_period == 3


def test_proposal_equality_uses_content_string():
    assert _proposal(_Content("a")) == _proposal(_Content("a"))
    assert not _proposal(_Content("a")) == _proposal(_Content("b"))


def test_proposal_equal_across_timezones():
    utc = datetime(2021, 1, 1, 12, tzinfo=timezone.utc)
    shifted = utc.astimezone(timezone(timedelta(hours=3)))
    first = _proposal(_Content("x"), utc)
    second = _proposal(_Content("x"), shifted)
    assert first == second
    assert hash(first) == hash(second)


def test_snapshot_keeps_pool():
    pool = Pool(100, 50, 3)
    snapshot = ProposalStakingPoolSnapshot(4, pool)
    assert snapshot.pool.bonded_tokens == 100


def test_proposal_update_is_frozen():
    update = ProposalUpdate(1, PROPOSAL_STATUS_PASSED, datetime(2021, 1, 1), datetime(2021, 1, 2))
    with pytest.raises(AttributeError):
        update.status = "other"
    assert update.status == PROPOSAL_STATUS_PASSED
    assert update.voting_end_time == datetime(2021, 1, 2)