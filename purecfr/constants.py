"""Sizes and enumerations shared by the solver."""

from __future__ import annotations

from enum import IntEnum

from .gamedef import MAX_ROUNDS

# Maximum number of players the solver handles.
MAX_PURE_CFR_PLAYERS = 6

# Maximum number of abstract actions a player can choose from.
MAX_ABSTRACT_ACTIONS = 8

# Length of strings used for filenames.
PATH_LENGTH = 1024

# Iterations each thread runs before checking for pause or quit.
ITERATION_BLOCK_SIZE = 1000

# A leaf type is a bitmask of the players still in the hand (bit p = player p).
LEAF_UNUSED = 0
LEAF_ALL_PLAYERS = 63
LEAF_NUM_TYPES = 64


def _from_label(enum_cls, label: str):
    try:
        return enum_cls[label]
    except KeyError:
        choices = "|".join(member.name for member in enum_cls)
        raise ValueError(
            f"unrecognized {enum_cls.__name__} {label!r}; expected one of {{{choices}}}"
        ) from None


class CardAbstractionType(IntEnum):
    NULL = 0
    POTENTIAL = 1
    BLIND = 2

    @property
    def label(self) -> str:
        return self.name

    @classmethod
    def from_label(cls, label: str) -> CardAbstractionType:
        """Look up a card abstraction by its exact label, e.g. 'NULL'."""
        return _from_label(cls, label)


class ActionAbstractionType(IntEnum):
    NULL = 0
    FCPA = 1

    @property
    def label(self) -> str:
        return self.name

    @classmethod
    def from_label(cls, label: str) -> ActionAbstractionType:
        """Look up an action abstraction by its exact label, e.g. 'FCPA'."""
        return _from_label(cls, label)


_DTYPE_NAMES = {
    0: "uint8",
    1: "int32",
    2: "uint32",
    3: "uint64",
    4: "uint16",
    5: "int16",
    6: "int8",
}


class EntryType(IntEnum):
    """Storage types for regrets and average strategies."""

    UINT8_T = 0
    INT = 1
    UINT32_T = 2
    UINT64_T = 3
    UINT16_T = 4
    INT16_T = 5
    INT8_T = 6

    @property
    def dtype_name(self) -> str:
        """The numpy dtype name with the same width and signedness."""
        return _DTYPE_NAMES[self.value]

    @classmethod
    def regret_type(cls, round: int) -> EntryType:
        """Storage type of regrets in the given round; signed since regrets can be negative."""
        return _REGRET_TYPES[_check_round(round)]

    @classmethod
    def avg_strategy_type(cls, round: int) -> EntryType:
        """Storage type of average strategy counts in the given round."""
        return _AVG_STRATEGY_TYPES[_check_round(round)]


def _check_round(round: int) -> int:
    if not 0 <= round < MAX_ROUNDS:
        raise ValueError(f"round {round} out of range 0..{MAX_ROUNDS - 1}")
    return round


_REGRET_TYPES = (EntryType.INT8_T, EntryType.INT, EntryType.INT16_T, EntryType.INT16_T)
_AVG_STRATEGY_TYPES = (
    EntryType.UINT8_T,
    EntryType.UINT32_T,
    EntryType.UINT32_T,
    EntryType.UINT32_T,
)