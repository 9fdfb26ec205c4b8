"""Action abstractions: which real-game actions a player may choose in the abstract game."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import NamedTuple

from .constants import MAX_ABSTRACT_ACTIONS, ActionAbstractionType
from .gamedef import Action, ActionType, Game
from .rules import (
    State,
    any_actions,
    any_raises,
    current_player,
    num_raises,
    raise_range,
    validate_action,
)

# Bits of the action mask, one per kind of abstract action.
MASK_FOLD = 1 << 0
MASK_CALL = 1 << 1
MASK_THIRD_POT = 1 << 2
MASK_HALF_POT = 1 << 3
MASK_TWO_THIRDS_POT = 1 << 4
MASK_POT = 1 << 5
MASK_OVERBET = 1 << 6
MASK_ALL_IN = 1 << 7

# Stack size the all-in rule of the FCPA abstraction is tuned for.
_REFERENCE_STACK = 200

_ACTION_ORDER = (ActionType.FOLD, ActionType.CALL, ActionType.RAISE)


class AbstractActions(NamedTuple):
    """The allowed actions in order, and a bitmask of which kinds they are."""

    actions: list[Action]
    mask: int


class ActionAbstraction(ABC):
    """Chooses the subset of legal actions available in the abstract game."""

    @abstractmethod
    def get_actions(self, game: Game, state: State) -> AbstractActions:
        """Return the abstract actions available at the state."""


class NullActionAbstraction(ActionAbstraction):
    """Every real-game action is allowed; only feasible for limit or tiny games."""

    def get_actions(self, game: Game, state: State) -> AbstractActions:
        actions: list[Action] = []
        for action_type in _ACTION_ORDER:
            if action_type == ActionType.RAISE:
                sizes = raise_range(game, state)
                if sizes is None:
                    continue
                low, high = sizes
                if len(actions) + high - low + 1 > MAX_ABSTRACT_ACTIONS:
                    raise ValueError(
                        "too many abstract actions; coarsen the betting abstraction"
                    )
                actions.extend(Action(ActionType.RAISE, size) for size in range(low, high + 1))
                continue
            legal = validate_action(game, state, Action(action_type), False)
            if legal is not None:
                if len(actions) >= MAX_ABSTRACT_ACTIONS:
                    raise ValueError(
                        "too many abstract actions; coarsen the betting abstraction"
                    )
                actions.append(legal)
        return AbstractActions(actions, 0)


class FcpaActionAbstraction(ActionAbstraction):
    """Fold, call, a few pot-fraction raises and all-in.

    Preflop allows pot and all-in raises; later rounds allow fractions of the
    pot depending on whether anyone has raised yet. A player who did not make
    the last raise of the previous round may only check at the start of a round.
    """

    def get_actions(self, game: Game, state: State) -> AbstractActions:
        player = current_player(game, state)
        if (
            state.round >= 1
            and not any_actions(state)
            and state.last_player_raise != player
            and state.last_round_raise == state.round - 1
        ):
            return AbstractActions([Action(ActionType.CALL)], MASK_CALL)

        actions: list[Action] = []
        mask = 0
        for action_type in _ACTION_ORDER:
            if action_type == ActionType.RAISE:
                sizes = raise_range(game, state)
                if sizes is None:
                    continue
                raises, raise_mask = self._raises(game, state, player, sizes)
                actions.extend(raises)
                mask |= raise_mask
                continue
            legal = validate_action(game, state, Action(action_type), False)
            if legal is None:
                continue
            if action_type == ActionType.FOLD:
                if state.round == 0 or any_raises(state):
                    mask |= MASK_FOLD
                    actions.append(legal)
            else:
                mask |= MASK_CALL
                actions.append(legal)
        return AbstractActions(actions, mask)

    @staticmethod
    def _raises(
        game: Game, state: State, player: int, sizes: tuple[int, int]
    ) -> tuple[list[Action], int]:
        min_size, max_size = sizes
        at_max_raises = num_raises(state) >= game.max_raises[state.round]
        amount_to_call = state.max_spent - state.spent[player]
        pot = sum(state.spent[p] for p in range(game.num_players)) + amount_to_call
        committed = state.spent[player] + amount_to_call
        preflop = state.round == 0
        raised = any_raises(state)

        candidates: list[tuple[bool, int, int]] = []
        if not at_max_raises:
            third = int(0.33 * pot) + committed
            half = int(0.5 * pot) + committed
            two_thirds = int(0.66 * pot) + committed
            full = pot + committed
            overbet = int(1.3 * pot) + committed
            candidates = [
                (min_size <= third < max_size and not preflop, third, MASK_THIRD_POT),
                (half < max_size and not preflop and raised, half, MASK_HALF_POT),
                (
                    two_thirds < max_size and not preflop and not raised,
                    two_thirds,
                    MASK_TWO_THIRDS_POT,
                ),
                (full < max_size and preflop, full, MASK_POT),
                (not preflop and overbet < max_size and not raised, overbet, MASK_OVERBET),
            ]
        all_in = (
            at_max_raises
            or preflop
            or (_REFERENCE_STACK - state.spent[player]) < int(1.5 * pot)
        )
        candidates.append((all_in, max_size, MASK_ALL_IN))

        actions = [Action(ActionType.RAISE, size) for allowed, size, _ in candidates if allowed]
        mask = 0
        for allowed, _, bit in candidates:
            if allowed:
                mask |= bit
        return actions, mask


def make_action_abstraction(kind: ActionAbstractionType | str) -> ActionAbstraction:
    """Create the action abstraction of the given type or label."""
    if isinstance(kind, str):
        kind = ActionAbstractionType.from_label(kind)
    kind = ActionAbstractionType(kind)
    if kind == ActionAbstractionType.NULL:
        return NullActionAbstraction()
    if kind == ActionAbstractionType.FCPA:
        return FcpaActionAbstraction()
    raise ValueError(f"unrecognized action abstraction type {kind!r}")