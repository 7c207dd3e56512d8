import json
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from bdjuno.events import Attribute, Event
from bdjuno.models import SlashingParams, ValidatorSigningInfo
from bdjuno.slashing import SlashingError, SlashingModule

JAILED = datetime(2021, 5, 1, tzinfo=timezone.utc)


class FakeSource:
    def __init__(self, infos=(), params=None, fail_params=False):
        self.infos = list(infos)
        self.params = params or {}
        self.fail_params = fail_params

    def get_signing_infos(self, height):
        return self.infos

    def get_signing_info(self, height, cons_addr):
        for info in self.infos:
            if info["address"] == cons_addr:
                return info
        raise LookupError("rpc error: code = NotFound")

    def get_params(self, height):
        if self.fail_params:
            raise RuntimeError("boom")
        return self.params


class FakeDb:
    def __init__(self, operators=None):
        self.operators = operators or {}
        self.saved_infos = []
        self.saved_params = []

    def save_validators_signing_infos(self, infos):
        self.saved_infos.append(infos)

    def save_slashing_params(self, params):
        self.saved_params.append(params)

    def get_validator_operator_address(self, cons_addr):
        return self.operators[cons_addr]


class FakeStaking:
    def __init__(self):
        self.calls = []

    def refresh_validator_delegations(self, height, val_oper_addr):
        self.calls.append((height, val_oper_addr))


def _info(address):
    return {
        "address": address,
        "start_height": 5,
        "index_offset": 7,
        "jailed_until": JAILED,
        "tombstoned": False,
        "missed_blocks_counter": 2,
    }


def test_get_signing_infos_attaches_height():
    module = SlashingModule(FakeSource([_info("valcons1a"), _info("valcons1b")]), FakeDb())
    infos = module.get_signing_infos(42)
    assert [i.validator_address for i in infos] == ["valcons1a", "valcons1b"]
    assert all(i.height == 42 for i in infos)
    assert infos[0] == ValidatorSigningInfo("valcons1a", 5, 7, JAILED, False, 2, 42)


def test_get_signing_info_accepts_attribute_records():
    record = SimpleNamespace(**_info("valcons1x"))
    source = FakeSource()
    source.get_signing_info = lambda height, addr: record
    module = SlashingModule(source, FakeDb())
    info = module.get_signing_info(9, "valcons1x")
    assert info == ValidatorSigningInfo("valcons1x", 5, 7, JAILED, False, 2, 9)


def test_get_signing_info_propagates_source_error():
    module = SlashingModule(FakeSource(), FakeDb())
    with pytest.raises(LookupError, match="NotFound"):
        module.get_signing_info(1, "valcons1missing")


def test_handle_block_saves_infos_and_refreshes_slashed():
    db = FakeDb({"valcons1a": "valoper1a"})
    staking = FakeStaking()
    module = SlashingModule(FakeSource([_info("valcons1a")]), db, staking)
    events = [
        Event("transfer", (Attribute("address", "valcons1other"),)),
        Event("slash", (Attribute("address", "valcons1a"),)),
    ]
    module.handle_block(10, events)
    assert [i.validator_address for i in db.saved_infos[0]] == ["valcons1a"]
    assert staking.calls == [(10, "valoper1a")]


def test_handle_block_slash_without_address_fails():
    module = SlashingModule(FakeSource(), FakeDb(), FakeStaking())
    with pytest.raises(SlashingError, match="error while updating slashes"):
        module.handle_block(3, [Event("slash", (Attribute("power", "1"),))])


def test_handle_block_unknown_validator_fails():
    staking = FakeStaking()
    module = SlashingModule(FakeSource(), FakeDb(), staking)
    with pytest.raises(SlashingError, match="after the staking module"):
        module.handle_block(3, [Event("slash", (Attribute("address", "valcons1z"),))])
    assert staking.calls == []


def test_handle_block_without_staking_module_fails_on_slash():
    module = SlashingModule(FakeSource(), FakeDb({"valcons1a": "valoper1a"}))
    with pytest.raises(SlashingError, match="no staking module"):
        module.handle_block(3, [Event("slash", (Attribute("address", "valcons1a"),))])


def test_handle_genesis_stores_params_at_initial_height():
    db = FakeDb()
    params = {"signed_blocks_window": "100"}
    module = SlashingModule(FakeSource(), db)
    module.handle_genesis({"initial_height": 4}, {"slashing": json.dumps({"params": params})})
    assert db.saved_params == [SlashingParams(params, 4)]


def test_handle_genesis_without_state_fails():
    module = SlashingModule(FakeSource(), FakeDb())
    with pytest.raises(SlashingError, match="genesis data"):
        module.handle_genesis({"initial_height": 1}, {})


def test_update_params_stores_source_params():
    db = FakeDb()
    params = {"downtime_jail_duration": "600s"}
    SlashingModule(FakeSource(params=params), db).update_params(11)
    assert db.saved_params == [SlashingParams(params, 11)]


def test_update_params_wraps_source_error():
    db = FakeDb()
    with pytest.raises(SlashingError, match="error while getting params"):
        SlashingModule(FakeSource(fail_params=True), db).update_params(11)
    assert db.saved_params == []