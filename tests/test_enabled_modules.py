import pytest

from bdjuno.enabled_modules import EnabledModulesModule


class FakeDb:
    def __init__(self, fail=False):
        self.inserted = []
        self.fail = fail

    def insert_enable_modules(self, modules):
        if self.fail:
            raise RuntimeError("db down")
        self.inserted.append(modules)


def test_stores_enabled_modules():
    db = FakeDb()
    module = EnabledModulesModule(["auth", "bank", "staking"], db)
    module.run_additional_operations()
    assert db.inserted == [["auth", "bank", "staking"]]
    assert module.name == "modules"


def test_accepts_any_iterable():
    db = FakeDb()
    EnabledModulesModule(iter(("mint",)), db).run_additional_operations()
    assert db.inserted == [["mint"]]


def test_database_error_propagates():
    with pytest.raises(RuntimeError, match="db down"):
        EnabledModulesModule(["mint"], FakeDb(fail=True)).run_additional_operations()