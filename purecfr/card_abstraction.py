"""Card abstractions: how private and public cards are grouped into buckets."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Mapping, Sequence

from .constants import CardAbstractionType
from .gamedef import MAX_ROUNDS, Game, rank_of_card, suit_of_card
from .rules import State

logger = logging.getLogger(__name__)

# Bucket counts of the potential-aware abstraction, per round.
_PREFLOP_BUCKETS = 170
_FLOP_BUCKETS_PER_PREFLOP = 501
_NODE_BUCKETS = (_PREFLOP_BUCKETS, _PREFLOP_BUCKETS * _FLOP_BUCKETS_PER_PREFLOP, 201, 201)
_STATE_BUCKETS = (_PREFLOP_BUCKETS, _PREFLOP_BUCKETS * _FLOP_BUCKETS_PER_PREFLOP, 209, 201)

# Board cards in the cache key for each round, and whether they are sorted high to low.
_BOARD_LAYOUT = {1: (3, True), 2: (4, True), 3: (5, False)}


class CardAbstraction(ABC):
    """Maps the cards a player can see to a bucket number."""

    can_precompute_buckets = False

    @abstractmethod
    def num_buckets_for_node(self, game: Game, node) -> int:
        """Number of buckets in the round of the given decision node."""

    @abstractmethod
    def num_buckets_for_state(self, game: Game, state: State) -> int:
        """Number of buckets in the current round of the state."""

    @abstractmethod
    def get_bucket(
        self,
        game: Game,
        node,
        board_cards: Sequence[int],
        hole_cards: Sequence[Sequence[int]],
        cache: Mapping[int, int] | None = None,
    ) -> int:
        """The bucket of the acting player's cards at the node."""

    def precompute_buckets(
        self, game: Game, board_cards: Sequence[int], hole_cards: Sequence[Sequence[int]]
    ) -> list[list[int]]:
        """Buckets for every player and round, as result[player][round]."""
        raise TypeError(f"{type(self).__name__} cannot precompute buckets")


class NullCardAbstraction(CardAbstraction):
    """Every set of cards is its own bucket.

    Suit isomorphism, card removal and card order are all ignored, so more
    buckets are used than strictly needed.
    """

    can_precompute_buckets = True

    def __init__(self, game: Game) -> None:
        self.deck_size = game.num_suits * game.num_ranks
        counts = [0] * MAX_ROUNDS
        running = self.deck_size**game.num_hole_cards
        for r in range(game.num_rounds):
            running *= self.deck_size ** game.num_board_cards[r]
            counts[r] = running
        self._num_buckets = tuple(counts)

    def num_buckets_for_node(self, game: Game, node) -> int:
        return self._num_buckets[node.round]

    def num_buckets_for_state(self, game: Game, state: State) -> int:
        return self._num_buckets[state.round]

    def get_bucket(self, game, node, board_cards, hole_cards, cache=None) -> int:
        return self._bucket(game, board_cards, hole_cards, node.player, node.round)

    def precompute_buckets(self, game, board_cards, hole_cards) -> list[list[int]]:
        return [
            [self._bucket(game, board_cards, hole_cards, p, r) for r in range(game.num_rounds)]
            for p in range(game.num_players)
        ]

    def _card_index(self, game: Game, card: int) -> int:
        return rank_of_card(card) * game.num_suits + suit_of_card(card)

    def _bucket(
        self,
        game: Game,
        board_cards: Sequence[int],
        hole_cards: Sequence[Sequence[int]],
        player: int,
        round: int,
    ) -> int:
        bucket = 0
        for card in hole_cards[player][: game.num_hole_cards]:
            bucket = bucket * self.deck_size + self._card_index(game, card)
        for card in board_cards[: game.sum_board_cards(round)]:
            bucket = bucket * self.deck_size + self._card_index(game, card)
        return bucket


class BlindCardAbstraction(CardAbstraction):
    """All cards share one bucket: the player never looks at its cards."""

    can_precompute_buckets = True

    def num_buckets_for_node(self, game: Game, node) -> int:
        return 1

    def num_buckets_for_state(self, game: Game, state: State) -> int:
        return 1

    def get_bucket(self, game, node, board_cards, hole_cards, cache=None) -> int:
        return 0

    def precompute_buckets(self, game, board_cards, hole_cards) -> list[list[int]]:
        return [[0] * game.num_rounds for _ in range(game.num_players)]


def sort_cards(cards: Sequence[int], reverse: bool = True) -> list[int]:
    """Re-encode cards as 13 * suit + rank + 1 and sort them.

    Sorted from high to low when reverse is true, low to high otherwise.
    """
    return sorted((13 * (card % 4) + card // 4 + 1 for card in cards), reverse=reverse)


def _pack(values: Sequence[int]) -> int:
    key = 0
    for i, value in enumerate(values):
        key |= value << (8 * i)
    return key


class PotentialAwareImperfectRecallAbstraction(CardAbstraction):
    """Buckets looked up in a precomputed table keyed by the sorted cards.

    Flop buckets are combined with the preflop bucket; turn and river
    buckets stand alone.
    """

    def num_buckets_for_node(self, game: Game, node) -> int:
        if 0 <= node.round < len(_NODE_BUCKETS):
            return _NODE_BUCKETS[node.round]
        return 1

    def num_buckets_for_state(self, game: Game, state: State) -> int:
        if 0 <= state.round < len(_STATE_BUCKETS):
            return _STATE_BUCKETS[state.round]
        return 1

    def get_bucket(self, game, node, board_cards, hole_cards, cache=None) -> int:
        if cache is None:
            raise ValueError("the potential-aware abstraction needs a bucket table")
        hole = sort_cards(hole_cards[node.player][:2], True)
        preflop_key = _pack(hole)
        if node.round == 0:
            if preflop_key not in cache:
                logger.warning("missing idx %d for hole cards %d %d", preflop_key, *hole)
                return 0
            return int(cache[preflop_key])

        preflop_bucket = int(cache.get(preflop_key, 0))
        num_board, reverse = _BOARD_LAYOUT.get(node.round, (0, True))
        board = sort_cards(board_cards[:num_board], reverse)
        key = _pack(hole + board)
        if key not in cache:
            logger.warning("missing idx %d for cards %s", key, hole + board)
            return 0
        bucket = int(cache[key])
        if node.round == 1:
            bucket += preflop_bucket * _FLOP_BUCKETS_PER_PREFLOP
        return bucket


def make_card_abstraction(
    kind: CardAbstractionType | str, game: Game | None = None
) -> CardAbstraction:
    """Create the card abstraction of the given type or label."""
    if isinstance(kind, str):
        kind = CardAbstractionType.from_label(kind)
    kind = CardAbstractionType(kind)
    if kind == CardAbstractionType.NULL:
        if game is None:
            raise ValueError("the NULL card abstraction needs a game")
        return NullCardAbstraction(game)
    if kind == CardAbstractionType.BLIND:
        return BlindCardAbstraction()
    if kind == CardAbstractionType.POTENTIAL:
        return PotentialAwareImperfectRecallAbstraction()
    raise ValueError(f"unrecognized card abstraction type {kind!r}")