"""Betting state of a hand and the rules that move it forward."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Protocol, Sequence

from .gamedef import (
    MAX_BOARD_CARDS,
    MAX_HOLE_CARDS,
    MAX_NUM_ACTIONS,
    MAX_PLAYERS,
    MAX_ROUNDS,
    Action,
    ActionType,
    BettingType,
    Game,
    make_card,
)

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def genrand_int32(self) -> int: ...


@dataclass
class State:
    """The betting, cards and chips of one hand in progress."""

    hand_id: int = 0
    max_spent: int = 0
    min_no_limit_raise_to: int = 0
    spent: list[int] = field(default_factory=lambda: [0] * MAX_PLAYERS)
    actions: list[list[Action]] = field(
        default_factory=lambda: [[] for _ in range(MAX_ROUNDS)]
    )
    acting_player: list[list[int]] = field(
        default_factory=lambda: [[] for _ in range(MAX_ROUNDS)]
    )
    round: int = 0
    finished: bool = False
    player_folded: list[bool] = field(default_factory=lambda: [False] * MAX_PLAYERS)
    board_cards: list[int] = field(default_factory=lambda: [0] * MAX_BOARD_CARDS)
    hole_cards: list[list[int]] = field(
        default_factory=lambda: [[0] * MAX_HOLE_CARDS for _ in range(MAX_PLAYERS)]
    )
    last_player_raise: int = 0
    last_round_raise: int = 0

    def copy(self) -> State:
        """Return an independent copy of this state."""
        return replace(
            self,
            spent=list(self.spent),
            actions=[list(a) for a in self.actions],
            acting_player=[list(p) for p in self.acting_player],
            player_folded=list(self.player_folded),
            board_cards=list(self.board_cards),
            hole_cards=[list(h) for h in self.hole_cards],
        )


@dataclass
class MatchState:
    """A state as seen by one player."""

    state: State
    viewing_player: int = 0


def init_state(game: Game, hand_id: int) -> State:
    """Return a state at the start of a hand; no cards are dealt."""
    state = State(hand_id=hand_id)
    players = range(game.num_players)
    for p in players:
        state.spent[p] = game.blind[p]
    state.max_spent = max([0, *(game.blind[p] for p in players)])

    if game.betting_type == BettingType.NO_LIMIT:
        # calling the big blind and raising by that amount: 2 * max blind
        state.min_no_limit_raise_to = state.max_spent * 2 if state.max_spent else 1
    else:
        state.min_no_limit_raise_to = 0
    return state


def _next_player(game: Game, state: State, cur_player: int) -> int:
    n = cur_player
    for _ in range(game.num_players):
        n = (n + 1) % game.num_players
        if not state.player_folded[n] and state.spent[n] < game.stack[n]:
            return n
    raise ValueError("no player is able to act")


def current_player(game: Game, state: State) -> int:
    """The player whose turn it is to act."""
    acting = state.acting_player[state.round]
    if acting:
        return _next_player(game, state, acting[-1])
    return _next_player(
        game, state, game.first_player[state.round] + game.num_players - 1
    )


def num_raises(state: State) -> int:
    """Number of raises in the current round."""
    return sum(a.type == ActionType.RAISE for a in state.actions[state.round])


def num_folded(game: Game, state: State) -> int:
    return sum(bool(state.player_folded[p]) for p in range(game.num_players))


def num_called(game: Game, state: State) -> int:
    """Players who have called (or made) the current bet and can still act."""
    count = 0
    round_actions = state.actions[state.round]
    round_players = state.acting_player[state.round]
    for action, p in zip(reversed(round_actions), reversed(round_players)):
        if action.type == ActionType.RAISE:
            if state.spent[p] < game.stack[p]:
                count += 1
            return count
        if action.type == ActionType.CALL and state.spent[p] < game.stack[p]:
            count += 1
    return count


def num_all_in(game: Game, state: State) -> int:
    return sum(state.spent[p] >= game.stack[p] for p in range(game.num_players))


def num_acting_players(game: Game, state: State) -> int:
    """Players who have neither folded nor gone all-in."""
    return sum(
        not state.player_folded[p] and state.spent[p] < game.stack[p]
        for p in range(game.num_players)
    )


def any_raises(state: State) -> bool:
    return any(a.type == ActionType.RAISE for a in state.actions[state.round])


def any_actions(state: State) -> bool:
    return bool(state.actions[state.round])


def raise_range(game: Game, state: State) -> tuple[int, int] | None:
    """The (min, max) raise-to sizes, or None if no raise is possible.

    Limit games report (0, 0) when a raise is allowed.
    """
    if len(state.actions[state.round]) + game.num_players > MAX_NUM_ACTIONS:
        logger.warning(
            "#actions in round is too close to MAX_NUM_ACTIONS, forcing call/fold"
        )
        return None
    if num_acting_players(game, state) <= 1:
        return None
    if game.betting_type != BettingType.NO_LIMIT:
        return 0, 0

    p = current_player(game, state)
    min_size = state.min_no_limit_raise_to
    max_size = game.stack[p]
    if min_size > game.stack[p]:
        if state.max_spent >= game.stack[p]:
            return None
        min_size = max_size
    return min_size, max_size


def validate_action(
    game: Game, state: State, action: Action, try_fixing: bool
) -> Action | None:
    """Return the action, possibly adjusted, if it is legal; otherwise None.

    With try_fixing, an out-of-range no-limit raise is moved to the nearest
    legal size.
    """
    if state.finished or action.type == ActionType.INVALID:
        return None

    p = current_player(game, state)

    if action.type == ActionType.RAISE:
        sizes = raise_range(game, state)
        if sizes is None:
            return None
        if game.betting_type == BettingType.NO_LIMIT:
            min_size, max_size = sizes
            if action.size < min_size:
                if not try_fixing:
                    return None
                logger.warning("raise of %d increased to %d", action.size, min_size)
                action = Action(action.type, min_size)
            elif action.size > max_size:
                if not try_fixing:
                    return None
                logger.warning("raise of %d decreased to %d", action.size, max_size)
                action = Action(action.type, max_size)
        return action

    if action.type == ActionType.FOLD:
        if state.round != 0 and not any_raises(state):
            return None
        if state.spent[p] == state.max_spent or state.spent[p] == game.stack[p]:
            return None
        if action.size != 0:
            logger.warning("size given for fold")
            action = Action(action.type, 0)
        return action

    if action.size != 0:
        logger.warning("size given for something other than a no-limit raise")
        action = Action(action.type, 0)
    return action


def do_action(game: Game, state: State, action: Action) -> None:
    """Record the action in the state; the action is not checked for legality."""
    p = current_player(game, state)
    if len(state.actions[state.round]) >= MAX_NUM_ACTIONS:
        raise ValueError("too many actions in round")

    if action.type == ActionType.FOLD:
        state.player_folded[p] = True
    elif action.type == ActionType.CALL:
        state.spent[p] = min(state.max_spent, game.stack[p])
    elif action.type == ActionType.RAISE:
        if game.betting_type == BettingType.NO_LIMIT:
            if action.size <= state.max_spent:
                raise ValueError(
                    f"raise to {action.size} does not exceed current bet {state.max_spent}"
                )
            if action.size > game.stack[p]:
                raise ValueError(
                    f"raise to {action.size} exceeds stack {game.stack[p]}"
                )
            next_min = action.size + action.size - state.max_spent
            if next_min > state.min_no_limit_raise_to:
                state.min_no_limit_raise_to = next_min
            state.max_spent = action.size
        else:
            state.max_spent = min(
                state.max_spent + game.raise_size[state.round], game.stack[p]
            )
        state.last_player_raise = p
        state.last_round_raise = state.round
        state.spent[p] = state.max_spent
    else:
        raise ValueError(f"trying to do invalid action {action.type!r}")

    state.actions[state.round].append(action)
    state.acting_player[state.round].append(p)

    if num_folded(game, state) + 1 >= game.num_players:
        state.finished = True
    elif num_called(game, state) >= num_acting_players(game, state):
        if num_acting_players(game, state) > 1:
            if state.round + 1 < game.num_rounds:
                state.round += 1
                min_raise_by = max([1, *(game.blind[q] for q in range(game.num_players))])
                state.min_no_limit_raise_to = min_raise_by + state.max_spent
            else:
                state.finished = True
        else:
            # nobody left to bet, but the hand still goes to a showdown
            state.finished = True
            state.round = game.num_rounds - 1


def deal_cards(game: Game, rng: RandomSource, state: State) -> None:
    """Shuffle a deck and deal hole and board cards into the state."""
    deck = [make_card(r, s) for s in range(game.num_suits) for r in range(game.num_ranks)]

    def deal() -> int:
        i = rng.genrand_int32() % len(deck)
        card = deck[i]
        deck[i] = deck[-1]
        deck.pop()
        return card

    for p in range(game.num_players):
        for i in range(game.num_hole_cards):
            state.hole_cards[p][i] = deal()

    for s in range(game.sum_board_cards(game.num_rounds - 1)):
        state.board_cards[s] = deal()


def _states_equal_common(game: Game, a: State, b: State) -> bool:
    if a.hand_id != b.hand_id or a.round != b.round:
        return False
    for r in range(a.round + 1):
        if a.actions[r] != b.actions[r]:
            return False
    shown = game.sum_board_cards(a.round)
    return a.board_cards[:shown] == b.board_cards[:shown]


def states_equal(game: Game, a: State, b: State) -> bool:
    """True if hand, betting, visible board and all hole cards match."""
    if not _states_equal_common(game, a, b):
        return False
    n = game.num_hole_cards
    return all(
        a.hole_cards[p][:n] == b.hole_cards[p][:n] for p in range(game.num_players)
    )


def match_states_equal(game: Game, a: MatchState, b: MatchState) -> bool:
    """True if two views match, comparing only the viewer's hole cards."""
    if a.viewing_player != b.viewing_player:
        return False
    if not _states_equal_common(game, a.state, b.state):
        return False
    p = a.viewing_player
    n = game.num_hole_cards
    return a.state.hole_cards[p][:n] == b.state.hole_cards[p][:n]


def value_of_state(
    game: Game, state: State, player: int, ranks: Sequence[int]
) -> float:
    """Chips won or lost by player in a finished hand.

    ranks[p] is the showdown hand rank of player p (higher is better); it is
    only consulted for players still in the hand.
    """
    if state.player_folded[player]:
        return float(-state.spent[player])

    if num_folded(game, state) + 1 == game.num_players:
        return float(
            sum(state.spent[p] for p in range(game.num_players) if p != player)
        )

    # Each entry is [spent, rank]; folded players rank -1 so they never win.
    contenders: list[list[int]] = []
    player_idx = -1
    for p in range(game.num_players):
        if state.spent[p] == 0:
            continue
        if state.player_folded[p]:
            rank = -1
        else:
            if p == player:
                player_idx = len(contenders)
            rank = ranks[p]
        contenders.append([state.spent[p], rank])
    if len(contenders) <= 1:
        raise ValueError("showdown needs at least two players")

    value = 0.0
    while True:
        size = min(spent for spent, _ in contenders)
        win_rank = max([0, *(rank for _, rank in contenders)])
        num_winners = sum(rank == win_rank for _, rank in contenders)
        n = len(contenders)

        if contenders[player_idx][1] == win_rank:
            value += (size * (n - num_winners)) / num_winners
        else:
            value -= size

        remaining: list[list[int]] = []
        new_idx = -1
        for idx, (spent, rank) in enumerate(contenders):
            spent -= size
            if spent == 0:
                if idx == player_idx:
                    return value
                continue
            if idx == player_idx:
                new_idx = len(remaining)
            remaining.append([spent, rank])
        contenders = remaining
        player_idx = new_idx