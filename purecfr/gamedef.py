"""Game definitions: the rules file format, card encoding and action types."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from enum import IntEnum
from itertools import islice
from typing import Callable, Iterable, Iterator, TextIO

MAX_ROUNDS = 4
MAX_PLAYERS = 10
MAX_BOARD_CARDS = 7
MAX_HOLE_CARDS = 3
MAX_NUM_ACTIONS = 64
MAX_SUITS = 4
MAX_RANKS = 13
NUM_ACTION_TYPES = 3

INT32_MAX = 2**31 - 1
UINT8_MAX = 255

# Number of stack sizes assumed present when no "stack" line is given.
_DEFAULT_STACKS_READ = 4


class GameError(ValueError):
    """Raised when a game definition is malformed or inconsistent."""


class BettingType(IntEnum):
    LIMIT = 0
    NO_LIMIT = 1


class ActionType(IntEnum):
    FOLD = 0
    CALL = 1
    RAISE = 2
    INVALID = 3


@dataclass(frozen=True)
class Action:
    """A fold, call or raise; size is only meaningful for no-limit raises."""

    type: ActionType
    size: int = 0


def rank_of_card(card: int) -> int:
    return card // MAX_SUITS


def suit_of_card(card: int) -> int:
    return card % MAX_SUITS


def make_card(rank: int, suit: int) -> int:
    return rank * MAX_SUITS + suit


@dataclass
class Game:
    """The parameters of a poker game; first_player entries are zero-based."""

    stack: list[int] = field(default_factory=lambda: [INT32_MAX] * MAX_PLAYERS)
    blind: list[int] = field(default_factory=lambda: [0] * MAX_PLAYERS)
    raise_size: list[int] = field(default_factory=lambda: [0] * MAX_ROUNDS)
    betting_type: BettingType = BettingType.LIMIT
    num_players: int = 0
    num_rounds: int = 0
    first_player: list[int] = field(default_factory=lambda: [0] * MAX_ROUNDS)
    max_raises: list[int] = field(default_factory=lambda: [UINT8_MAX] * MAX_ROUNDS)
    num_suits: int = 0
    num_ranks: int = 0
    num_hole_cards: int = 0
    num_board_cards: list[int] = field(default_factory=lambda: [0] * MAX_ROUNDS)

    def bc_start(self, round: int) -> int:
        """Index of the first board card dealt in the given round."""
        return sum(self.num_board_cards[:round])

    def sum_board_cards(self, round: int) -> int:
        """Total number of board cards dealt once the given round is reached."""
        return sum(self.num_board_cards[: round + 1])

    def to_text(self) -> str:
        """Render the game in the game definition file format."""
        players = range(self.num_players)
        rounds = range(self.num_rounds)
        lines = ["GAMEDEF"]
        lines.append("nolimit" if self.betting_type == BettingType.NO_LIMIT else "limit")
        lines.append(f"numPlayers = {self.num_players}")
        lines.append(f"numRounds = {self.num_rounds}")
        if any(self.stack[p] < INT32_MAX for p in players):
            lines.append("stack =" + _joined(self.stack[p] for p in players))
        lines.append("blind =" + _joined(self.blind[p] for p in players))
        if self.betting_type == BettingType.LIMIT:
            lines.append("raiseSize =" + _joined(self.raise_size[r] for r in rounds))
        if any(self.first_player[r] != 0 for r in rounds):
            lines.append("firstPlayer =" + _joined(self.first_player[r] + 1 for r in rounds))
        if any(self.max_raises[r] != UINT8_MAX for r in rounds):
            lines.append("maxRaises =" + _joined(self.max_raises[r] for r in rounds))
        lines.append(f"numSuits = {self.num_suits}")
        lines.append(f"numRanks = {self.num_ranks}")
        lines.append(f"numHoleCards = {self.num_hole_cards}")
        lines.append("numBoardCards =" + _joined(self.num_board_cards[r] for r in rounds))
        lines.append("END GAMEDEF")
        return "\n".join(lines) + "\n"


def _joined(values: Iterable[int]) -> str:
    return "".join(f" {v}" for v in values)


_INT_RE = re.compile(r"[\s=]*([+-]?\d+)")


def _scan_ints(text: str) -> Iterator[int]:
    pos = 0
    while (match := _INT_RE.match(text, pos)) is not None:
        yield int(match.group(1))
        pos = match.end()


def _as_int32(value: int) -> int:
    return (value + 2**31) % 2**32 - 2**31


def _as_uint8(value: int) -> int:
    return value % 256


def _read_items(
    text: str, max_items: int, into: list[int], convert: Callable[[int], int]
) -> int:
    values = [convert(v) for v in islice(_scan_ints(text), max_items)]
    into[: len(values)] = values
    return len(values)


def _read_one(text: str, convert: Callable[[int], int], default: int) -> int:
    value = next(_scan_ints(text), None)
    return default if value is None else convert(value)


def read_game(file: TextIO) -> Game:
    """Read a game definition from an open text file."""
    game = Game(first_player=[1] * MAX_ROUNDS)
    stack_read = _DEFAULT_STACKS_READ
    blind_read = 0
    raise_size_read = 0
    board_cards_read = 0

    for line in file:
        if line.startswith("#") or line.startswith("\n"):
            continue
        lower = line.lower()
        if lower.startswith("end gamedef"):
            break
        if lower.startswith("gamedef"):
            continue
        if lower.startswith("stack"):
            stack_read = _read_items(line[5:], MAX_PLAYERS, game.stack, _as_int32)
        elif lower.startswith("blind"):
            blind_read = _read_items(line[5:], MAX_PLAYERS, game.blind, _as_int32)
        elif lower.startswith("raisesize"):
            raise_size_read = _read_items(line[9:], MAX_PLAYERS, game.raise_size, _as_int32)
        elif lower.startswith("limit"):
            game.betting_type = BettingType.LIMIT
        elif lower.startswith("nolimit"):
            game.betting_type = BettingType.NO_LIMIT
        elif lower.startswith("numplayers"):
            game.num_players = _read_one(line[10:], _as_uint8, game.num_players)
        elif lower.startswith("numrounds"):
            game.num_rounds = _read_one(line[9:], _as_uint8, game.num_rounds)
        elif lower.startswith("firstplayer"):
            _read_items(line[11:], MAX_ROUNDS, game.first_player, _as_uint8)
        elif lower.startswith("maxraises"):
            _read_items(line[9:], MAX_ROUNDS, game.max_raises, _as_uint8)
        elif lower.startswith("numsuits"):
            game.num_suits = _read_one(line[8:], _as_uint8, game.num_suits)
        elif lower.startswith("numranks"):
            game.num_ranks = _read_one(line[8:], _as_uint8, game.num_ranks)
        elif lower.startswith("numholecards"):
            game.num_hole_cards = _read_one(line[12:], _as_uint8, game.num_hole_cards)
        elif lower.startswith("numboardcards"):
            board_cards_read = _read_items(
                line[13:], MAX_ROUNDS, game.num_board_cards, _as_uint8
            )

    _check(game, stack_read, blind_read, raise_size_read, board_cards_read)
    return game


def _check(
    game: Game, stack_read: int, blind_read: int, raise_size_read: int, board_cards_read: int
) -> None:
    if game.num_rounds == 0 or game.num_rounds > MAX_ROUNDS:
        raise GameError(f"invalid number of rounds: {game.num_rounds}")
    if game.num_players < 2 or game.num_players > MAX_PLAYERS:
        raise GameError(f"invalid number of players: {game.num_players}")
    if stack_read < game.num_players:
        raise GameError(f"only read {stack_read} stack sizes, need {game.num_players}")
    if blind_read < game.num_players:
        raise GameError(f"only read {blind_read} blinds, need {game.num_players}")
    for p in range(game.num_players):
        if game.blind[p] > game.stack[p]:
            raise GameError(f"blind for player {p + 1} is greater than stack size")
    if game.betting_type == BettingType.LIMIT and raise_size_read < game.num_rounds:
        raise GameError(
            f"only read {raise_size_read} raise sizes, need {game.num_rounds}"
        )
    for r in range(game.num_rounds):
        first = game.first_player[r]
        if first == 0 or first > game.num_players:
            raise GameError(f"invalid first player {first} on round {r + 1}")
        game.first_player[r] = first - 1
    if game.num_suits == 0 or game.num_suits > MAX_SUITS:
        raise GameError(f"invalid number of suits: {game.num_suits}")
    if game.num_ranks == 0 or game.num_ranks > MAX_RANKS:
        raise GameError(f"invalid number of ranks: {game.num_ranks}")
    if game.num_hole_cards == 0 or game.num_hole_cards > MAX_HOLE_CARDS:
        raise GameError(f"invalid number of hole cards: {game.num_hole_cards}")
    if board_cards_read < game.num_rounds:
        raise GameError(
            f"only read {board_cards_read} board card numbers, need {game.num_rounds}"
        )
    cards_needed = game.num_hole_cards * game.num_players + sum(
        game.num_board_cards[: game.num_rounds]
    )
    if cards_needed > game.num_suits * game.num_ranks:
        raise GameError("too many hole and board cards for specified deck")


def parse_game(text: str) -> Game:
    """Read a game definition from a string."""
    return read_game(io.StringIO(text))