import pytest

from purecfr.constants import (
    ActionAbstractionType,
    CardAbstractionType,
    EntryType,
)


def test_card_abstraction_codes_match_source():
    assert CardAbstractionType.from_label("NULL") == 0
    assert CardAbstractionType.from_label("POTENTIAL") == 1
    assert CardAbstractionType.from_label("BLIND") == 2


def test_action_abstraction_from_label():
    assert ActionAbstractionType.from_label("FCPA") is ActionAbstractionType.FCPA
    assert ActionAbstractionType.from_label("NULL") is ActionAbstractionType.NULL


@pytest.mark.parametrize("enum_cls", [CardAbstractionType, ActionAbstractionType])
def test_labels_round_trip(enum_cls):
    for member in enum_cls:
        assert enum_cls.from_label(member.label) is member


@pytest.mark.parametrize("label", ["fcpa", "", "BOGUS", "NULL "])
def test_unknown_action_label_raises(label):
    with pytest.raises(ValueError):
        ActionAbstractionType.from_label(label)


def test_unknown_card_label_raises():
    with pytest.raises(ValueError):
        CardAbstractionType.from_label("blind")


def test_regret_types_per_round():
    assert [EntryType.regret_type(r) for r in range(4)] == [
        EntryType.INT8_T,
        EntryType.INT,
        EntryType.INT16_T,
        EntryType.INT16_T,
    ]


def test_avg_strategy_types_per_round():
    assert [EntryType.avg_strategy_type(r) for r in range(4)] == [
        EntryType.UINT8_T,
        EntryType.UINT32_T,
        EntryType.UINT32_T,
        EntryType.UINT32_T,
    ]


def test_regret_types_are_signed_and_strategy_types_unsigned():
    for r in range(4):
        assert not EntryType.regret_type(r).dtype_name.startswith("u")
        assert EntryType.avg_strategy_type(r).dtype_name.startswith("u")


@pytest.mark.parametrize("round_", [-1, 4])
def test_round_out_of_range(round_):
    with pytest.raises(ValueError):
        EntryType.regret_type(round_)
    with pytest.raises(ValueError):
        EntryType.avg_strategy_type(round_)


def test_entry_type_codes_match_source():
    assert EntryType(1) is EntryType.INT
    assert EntryType(6) is EntryType.INT8_T