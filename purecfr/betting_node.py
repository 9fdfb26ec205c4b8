"""Nodes of the betting tree: the game tree with the cards left out.

Terminal nodes remember how to evaluate the hand so the tree walk never
needs to replay the betting.
"""

from __future__ import annotations

from numbers import Integral
from typing import Sequence

from .action_abstraction import ActionAbstraction
from .constants import LEAF_ALL_PLAYERS, MAX_PURE_CFR_PLAYERS
from .gamedef import MAX_ROUNDS, Game
from .rules import State, current_player, do_action

_RAKE_RATE = 0.05
_RAKE_CAP = 12
_UINT16_MASK = 0xFFFF


class BettingNode:
    """A node of the betting tree."""

    __slots__ = ("action_mask",)

    def __init__(self, action_mask: int = 0) -> None:
        self.action_mask = action_mask

    def children(self) -> tuple[BettingNode, ...]:
        """The nodes reached by each abstract action, in action order."""
        return ()


class TerminalNode2p(BettingNode):
    """End of a two-player hand, by fold or showdown."""

    __slots__ = ("showdown", "fold_value", "money")

    def __init__(self, showdown: bool, fold_value: Sequence[int], money: int) -> None:
        super().__init__()
        self.showdown = bool(showdown)
        self.fold_value = tuple(fold_value)
        self.money = money

    def evaluate(self, showdown_values: Sequence[int], position: int) -> int:
        """Chips won by position; showdown_values[p] is 1, 0 or -1 for win, tie, loss."""
        factor = showdown_values[position] if self.showdown else self.fold_value[position]
        return factor * self.money


class InfoSetNode2p(BettingNode):
    """A two-player decision point."""

    __slots__ = ("soln_idx", "player", "round", "_children")

    def __init__(
        self,
        soln_idx: int,
        player: int,
        round: int,
        children: Sequence[BettingNode],
        action_mask: int = 0,
    ) -> None:
        super().__init__(action_mask)
        self._children = tuple(children)
        if not self._children:
            raise ValueError("an information set needs at least one child")
        self.soln_idx = soln_idx
        self.player = player
        self.round = round

    @property
    def num_choices(self) -> int:
        return len(self._children)

    def children(self) -> tuple[BettingNode, ...]:
        return self._children

    def did_player_fold(self, position: int) -> bool:
        return False


class TerminalNode6p(BettingNode):
    """End of a six-player hand."""

    __slots__ = ("money_spent", "leaf_type")

    def __init__(self, money_spent: Sequence[int], leaf_type: int) -> None:
        super().__init__()
        spent = tuple(money_spent)
        if len(spent) != MAX_PURE_CFR_PLAYERS:
            raise ValueError(
                f"expected {MAX_PURE_CFR_PLAYERS} amounts spent, got {len(spent)}"
            )
        self.money_spent = spent
        self.leaf_type = leaf_type

    def evaluate(self, pot_frac_recip, position: int) -> int:
        """Chips won by position after rake.

        pot_frac_recip[position][leaf_type] is the reciprocal of the share of
        the pot that position takes when the players in leaf_type remain.
        """
        pot = sum(self.money_spent) & _UINT16_MASK
        pot -= min(_RAKE_CAP, int(_RAKE_RATE * pot))
        recip = pot_frac_recip[position][self.leaf_type]
        if isinstance(recip, Integral):
            return pot // int(recip) - self.money_spent[position]
        return int(pot / recip - self.money_spent[position])


class InfoSetNode6p(TerminalNode6p):
    """A six-player decision point.

    It is also a terminal node so a walk can stop early once the walking
    player has folded.
    """

    __slots__ = ("soln_idx", "player", "round", "player_folded", "_children")

    def __init__(
        self,
        soln_idx: int,
        player: int,
        round: int,
        player_folded: Sequence[bool],
        children: Sequence[BettingNode],
        money_spent: Sequence[int],
        leaf_type: int,
        action_mask: int = 0,
    ) -> None:
        super().__init__(money_spent, leaf_type)
        self.action_mask = action_mask
        self._children = tuple(children)
        if not self._children:
            raise ValueError("an information set needs at least one child")
        self.soln_idx = soln_idx
        self.player = player
        self.round = round
        self.player_folded = tuple(bool(f) for f in player_folded)

    @property
    def num_choices(self) -> int:
        return len(self._children)

    def children(self) -> tuple[BettingNode, ...]:
        return self._children

    def did_player_fold(self, position: int) -> bool:
        return self.player_folded[position]


def leaf_type_for(game: Game, state: State) -> int:
    """Bitmask of the players who have not folded (bit p for player p)."""
    leaf = LEAF_ALL_PLAYERS
    for p in range(game.num_players):
        if state.player_folded[p]:
            leaf &= ~(1 << p)
    return leaf


def _money_spent(state: State) -> tuple[int, ...]:
    return tuple(state.spent[p] & _UINT16_MASK for p in range(MAX_PURE_CFR_PLAYERS))


def _terminal(game: Game, state: State) -> BettingNode:
    if game.num_players == 2:
        folded = state.player_folded
        showdown = not (folded[0] or folded[1])
        fold_value: list[int] = []
        money = -1
        for p in (0, 1):
            other = 1 - p
            if folded[p]:
                fold_value.append(-1)
                money = state.spent[p]
            elif folded[other]:
                fold_value.append(1)
                money = state.spent[other]
            else:
                fold_value.append(0)
                money = state.spent[p]
        return TerminalNode2p(showdown, fold_value, money)
    return TerminalNode6p(_money_spent(state), leaf_type_for(game, state))


def _build(
    game: Game, state: State, action_abs: ActionAbstraction, counts: list[int]
) -> BettingNode:
    if state.finished:
        return _terminal(game, state)

    actions, mask = action_abs.get_actions(game, state)
    if not actions:
        raise ValueError("no abstract actions available at a decision point")

    soln_idx = counts[state.round]
    counts[state.round] += len(actions)

    children = []
    for action in actions:
        child_state = state.copy()
        do_action(game, child_state, action)
        children.append(_build(game, child_state, action_abs, counts))

    player = current_player(game, state)
    if game.num_players == 2:
        return InfoSetNode2p(soln_idx, player, state.round, children, mask)
    folded = [bool(state.player_folded[p]) for p in range(MAX_PURE_CFR_PLAYERS)]
    return InfoSetNode6p(
        soln_idx,
        player,
        state.round,
        folded,
        children,
        _money_spent(state),
        leaf_type_for(game, state),
        mask,
    )


def build_betting_tree(
    game: Game,
    state: State,
    action_abs: ActionAbstraction,
    num_entries_per_bucket: Sequence[int] | None = None,
) -> tuple[BettingNode, list[int]]:
    """Build the betting tree below state.

    num_entries_per_bucket gives the starting entry count for each round
    (zeros by default). Each decision point takes the next free solution
    index in its round. Returns the root and the updated counts.
    """
    if game.num_players not in (2, MAX_PURE_CFR_PLAYERS):
        raise ValueError(
            f"cannot initialize betting tree for {game.num_players}-players"
        )
    counts = [0] * MAX_ROUNDS if num_entries_per_bucket is None else list(num_entries_per_bucket)
    if len(counts) != MAX_ROUNDS:
        raise ValueError(f"expected {MAX_ROUNDS} entry counts, got {len(counts)}")
    root = _build(game, state, action_abs, counts)
    return root, counts