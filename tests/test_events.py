import pytest

from bdjuno.events import (
    Attribute,
    Event,
    EventNotFoundError,
    MessageLog,
    Tx,
    find_attribute_by_key,
    find_events_by_type,
)

SLASH = Event("slash", (Attribute("address", "valcons1"), Attribute("power", "10")))
OTHER = Event("transfer", (Attribute("recipient", "acc1"),))
SLASH_TWO = Event("slash", (Attribute("address", "valcons2"),))


def test_find_events_by_type_keeps_order():
    assert find_events_by_type([SLASH, OTHER, SLASH_TWO], "slash") == [SLASH, SLASH_TWO]


def test_find_events_by_type_none_matching():
    assert find_events_by_type([OTHER], "slash") == []


def test_find_attribute_by_key():
    assert find_attribute_by_key(SLASH, "power") == Attribute("power", "10")


def test_find_attribute_by_key_missing_raises():
    with pytest.raises(EventNotFoundError):
        find_attribute_by_key(OTHER, "address")


def _tx():
    return Tx(
        hash="ABCD",
        height=5,
        logs=(MessageLog(0, (OTHER,)), MessageLog(1, (SLASH, SLASH_TWO))),
    )


def test_tx_find_event_by_type_uses_index():
    tx = _tx()
    assert tx.find_event_by_type(1, "slash") == SLASH
    with pytest.raises(EventNotFoundError):
        tx.find_event_by_type(0, "slash")


def test_tx_find_event_by_type_missing_index():
    with pytest.raises(EventNotFoundError, match="ABCD"):
        _tx().find_event_by_type(3, "transfer")


def test_tx_find_attribute_by_key():
    tx = _tx()
    assert tx.find_attribute_by_key(SLASH, "address") == "valcons1"
    with pytest.raises(EventNotFoundError):
        tx.find_attribute_by_key(SLASH, "missing")