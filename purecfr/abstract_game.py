"""A game together with its action abstraction, card abstraction and betting tree."""

from __future__ import annotations

from os import PathLike

from .action_abstraction import make_action_abstraction
from .betting_node import BettingNode, build_betting_tree
from .card_abstraction import make_card_abstraction
from .constants import ActionAbstractionType, CardAbstractionType
from .gamedef import MAX_ROUNDS, Game, read_game
from .rules import init_state


class AbstractGame:
    """The abstract game the solver works on."""

    def __init__(
        self,
        game: Game,
        card_abs_type: CardAbstractionType | str = CardAbstractionType.NULL,
        action_abs_type: ActionAbstractionType | str = ActionAbstractionType.NULL,
    ) -> None:
        self.game = game
        self.action_abs = make_action_abstraction(action_abs_type)
        self.betting_tree_root: BettingNode
        self.betting_tree_root, _ = build_betting_tree(
            game, init_state(game, 0), self.action_abs
        )
        self.card_abs = make_card_abstraction(card_abs_type, game)

    @classmethod
    def from_file(
        cls,
        path: str | PathLike,
        card_abs_type: CardAbstractionType | str = CardAbstractionType.NULL,
        action_abs_type: ActionAbstractionType | str = ActionAbstractionType.NULL,
    ) -> AbstractGame:
        """Read the game definition at path and build its abstraction."""
        with open(path, encoding="utf-8") as file:
            game = read_game(file)
        return cls(game, card_abs_type, action_abs_type)

    def count_entries(self) -> tuple[list[int], list[int]]:
        """Entries per bucket and total entries, each as a list indexed by round."""
        per_bucket = [0] * MAX_ROUNDS
        total = [0] * MAX_ROUNDS
        pending = [self.betting_tree_root]
        while pending:
            node = pending.pop()
            children = node.children()
            if not children:
                continue
            num_choices = len(children)
            per_bucket[node.round] += num_choices
            total[node.round] += (
                self.card_abs.num_buckets_for_node(self.game, node) * num_choices
            )
            pending.extend(children)
        return per_bucket, total