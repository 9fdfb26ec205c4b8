"""Text notation for cards, actions and hand states."""

from __future__ import annotations

import re

from .gamedef import (
    MAX_RANKS,
    MAX_SUITS,
    Action,
    ActionType,
    BettingType,
    Game,
    make_card,
    rank_of_card,
    suit_of_card,
)
from .rules import (
    MatchState,
    State,
    current_player,
    do_action,
    init_state,
    num_folded,
    validate_action,
)

SUIT_CHARS = "hdcs"
RANK_CHARS = "23456789TJQKA"
ACTION_CHARS = "fcr"

_CHAR_TO_ACTION = {
    "b": ActionType.RAISE,
    "B": ActionType.RAISE,
    "r": ActionType.RAISE,
    "R": ActionType.RAISE,
    "c": ActionType.CALL,
    "C": ActionType.CALL,
    "k": ActionType.CALL,
    "K": ActionType.CALL,
    "f": ActionType.FOLD,
    "F": ActionType.FOLD,
}

_SIZE_RE = re.compile(r"\s*([+-]?\d+)")
_HAND_ID_RE = re.compile(r":\s*\+?(\d+)")
_MATCH_HEADER_RE = re.compile(r"MATCHSTATE:\s*\+?(\d+)")

# Tolerance when matching a raise to one of the labelled pot fractions.
_FRACTION_TOLERANCE = 1e-4
_POT_FRACTION_LABELS = ((0.33, "0.33"), (0.5, "0.5"), (0.66, "0.66"), (1.0, "1"))
_ROUND_LABELS = ("p", "f", "t", "r")


class NotationError(ValueError):
    """Raised when text cannot be read as, or a value cannot be written in, the notation."""


def read_action(text: str, game: Game) -> tuple[Action, int]:
    """Read one action; return it with the number of characters consumed."""
    action_type = _CHAR_TO_ACTION.get(text[:1])
    if action_type is None:
        raise NotationError(f"not an action: {text[:1]!r}")
    if action_type == ActionType.RAISE and game.betting_type == BettingType.NO_LIMIT:
        match = _SIZE_RE.match(text, 1)
        if match is None:
            raise NotationError(f"no-limit raise without a size in {text!r}")
        return Action(action_type, int(match.group(1))), match.end()
    return Action(action_type, 0), 1


def format_action(game: Game, action: Action) -> str:
    """Write an action; no-limit raises carry their size."""
    if action.type == ActionType.INVALID:
        raise NotationError("cannot write an invalid action")
    text = ACTION_CHARS[action.type]
    if game.betting_type == BettingType.NO_LIMIT and action.type == ActionType.RAISE:
        text += str(action.size)
    return text


def read_card(text: str) -> tuple[int, int]:
    """Read a two-character card such as 'Ah'; return it and the characters consumed."""
    if len(text) < 2:
        raise NotationError(f"incomplete card: {text!r}")
    rank = RANK_CHARS.find(text[0].upper())
    suit = SUIT_CHARS.find(text[1].lower())
    if rank < 0 or suit < 0:
        raise NotationError(f"not a card: {text[:2]!r}")
    return make_card(rank, suit), 2


def read_cards(text: str, max_cards: int) -> tuple[list[int], int]:
    """Read up to max_cards cards, stopping at the first that is not a card."""
    cards: list[int] = []
    pos = 0
    while len(cards) < max_cards:
        try:
            card, used = read_card(text[pos:])
        except NotationError:
            break
        cards.append(card)
        pos += used
    return cards, pos


def format_card(card: int) -> str:
    if not 0 <= card < MAX_RANKS * MAX_SUITS:
        raise NotationError(f"card out of range: {card}")
    return RANK_CHARS[rank_of_card(card)] + SUIT_CHARS[suit_of_card(card)]


def format_cards(cards) -> str:
    return "".join(format_card(card) for card in cards)


def _read_betting(text: str, pos: int, game: Game, state: State) -> int:
    while pos < len(text):
        ch = text[pos]
        if ch == ":":
            return pos + 1
        if ch == "/":
            pos += 1
            continue
        action, used = read_action(text[pos:], game)
        legal = validate_action(game, state, action, False)
        if legal is None:
            raise NotationError(f"illegal action {text[pos:pos + used]!r} at {pos}")
        do_action(game, state, legal)
        pos += used
    return pos


def _read_hole_cards(text: str, pos: int, game: Game, state: State) -> int:
    for p in range(game.num_players):
        if p != 0 and text[pos:pos + 1] == "|":
            pos += 1
        cards, used = read_cards(text[pos:], game.num_hole_cards)
        if not cards:
            continue
        if len(cards) != game.num_hole_cards:
            raise NotationError(f"incomplete hole cards for player {p}")
        state.hole_cards[p][: len(cards)] = cards
        pos += used
    return pos


def _read_board_cards(text: str, pos: int, game: Game, state: State) -> int:
    for r in range(state.round + 1):
        if r != 0 and text[pos:pos + 1] == "/":
            pos += 1
        needed = game.num_board_cards[r]
        cards, used = read_cards(text[pos:], needed)
        if len(cards) != needed:
            raise NotationError(f"expected {needed} board cards in round {r}")
        start = game.bc_start(r)
        state.board_cards[start:start + needed] = cards
        pos += used
    return pos


def _read_state_common(text: str, pos: int, game: Game) -> tuple[State, int]:
    match = _HAND_ID_RE.match(text, pos)
    if match is None:
        raise NotationError("missing hand id")
    state = init_state(game, int(match.group(1)))
    pos = match.end()
    if text[pos:pos + 1] != ":":
        raise NotationError("missing ':' after hand id")
    pos = _read_betting(text, pos + 1, game, state)
    pos = _read_hole_cards(text, pos, game, state)
    pos = _read_board_cards(text, pos, game, state)
    return state, pos


def read_state(text: str, game: Game) -> tuple[State, int]:
    """Read a 'STATE:...' line; return the state and the characters consumed."""
    if not text.startswith("STATE"):
        raise NotationError("state must start with 'STATE'")
    return _read_state_common(text, len("STATE"), game)


def read_match_state(text: str, game: Game) -> tuple[MatchState, int]:
    """Read a 'MATCHSTATE:player:...' line; return it and the characters consumed."""
    match = _MATCH_HEADER_RE.match(text)
    if match is None:
        raise NotationError("match state must start with 'MATCHSTATE:<player>'")
    viewing_player = int(match.group(1))
    if viewing_player >= game.num_players:
        raise NotationError(f"viewing player {viewing_player} is not in the game")
    state, pos = _read_state_common(text, match.end(), game)
    return MatchState(state=state, viewing_player=viewing_player), pos


def _format_betting(game: Game, state: State) -> str:
    return "/".join(
        "".join(format_action(game, a) for a in state.actions[r])
        for r in range(state.round + 1)
    )


def _format_state_common(game: Game, state: State) -> str:
    return f":{state.hand_id}:{_format_betting(game, state)}:"


def _format_board_cards(game: Game, state: State) -> str:
    return "/".join(
        format_cards(
            state.board_cards[game.bc_start(r):game.bc_start(r) + game.num_board_cards[r]]
        )
        for r in range(state.round + 1)
    )


def _format_hole(game: Game, state: State, p: int) -> str:
    return format_cards(state.hole_cards[p][: game.num_hole_cards])


def format_state(game: Game, state: State) -> str:
    """Write a state with every player's hole cards."""
    hole = "|".join(_format_hole(game, state, p) for p in range(game.num_players))
    return "STATE" + _format_state_common(game, state) + hole + _format_board_cards(game, state)


def _shows_cards(game: Game, state: State, p: int, viewer: int) -> bool:
    if p == viewer:
        return True
    return (
        state.finished
        and not state.player_folded[p]
        and num_folded(game, state) + 1 != game.num_players
    )


def format_match_state(game: Game, match_state: MatchState) -> str:
    """Write a state as its viewer sees it: others' cards only at a showdown."""
    state = match_state.state
    viewer = match_state.viewing_player
    hole = "|".join(
        _format_hole(game, state, p) if _shows_cards(game, state, p, viewer) else ""
        for p in range(game.num_players)
    )
    return (
        f"MATCHSTATE:{viewer}"
        + _format_state_common(game, state)
        + hole
        + _format_board_cards(game, state)
    )


def _raise_label(game: Game, current: State, action: Action) -> str:
    player = current_player(game, current)
    amount_to_call = current.max_spent - current.spent[player]
    pot = sum(current.spent[p] for p in range(game.num_players)) + amount_to_call
    raise_size = action.size - amount_to_call - current.spent[player]
    if pot:
        fraction = raise_size / pot
        for target, label in _POT_FRACTION_LABELS:
            if abs(fraction - target) < _FRACTION_TOLERANCE:
                return label
    if current.max_spent + raise_size == game.stack[player]:
        return "all"
    return ""


def format_state_pluribus(game: Game, state: State) -> str:
    """Write the betting with raises labelled as fractions of the pot.

    Each round opens with '|<round letter>|'; actions after the first round
    are separated by commas.
    """
    current = init_state(game, 0)
    parts: list[str] = []
    for r in range(state.round + 1):
        parts.append(f"|{_ROUND_LABELS[r]}|")
        round_actions = state.actions[r]
        for a, action in enumerate(round_actions):
            if action.type == ActionType.FOLD:
                parts.append("f")
            elif action.type == ActionType.CALL:
                parts.append("c")
            elif action.type == ActionType.RAISE:
                parts.append("r" + _raise_label(game, current, action))
            do_action(game, current, action)
            if r != 0 and a < len(round_actions) - 1:
                parts.append(",")
    return "".join(parts)