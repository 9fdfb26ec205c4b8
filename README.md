# purecfr

Building blocks for solving poker games with Pure CFR: game definitions,
the betting rules, text notation for hands, action and card abstractions,
betting trees, and typed storage for regrets and average strategies.

## Installation

```
pip install purecfr
```

With the test dependencies:

```
pip install "purecfr[test]"
```

## Modules

- `purecfr.gamedef`: `read_game(file)` and `parse_game(text)` read a game
  definition (`GAMEDEF` ... `END GAMEDEF`) into a `Game`; `Game.to_text()`
  writes it back. `Game.bc_start(round)` and `Game.sum_board_cards(round)`
  locate board cards by round. Cards are integers built with
  `make_card(rank, suit)` and taken apart with `rank_of_card` and
  `suit_of_card`. `Action` pairs an `ActionType` (`FOLD`, `CALL`, `RAISE`)
  with a size. An invalid definition raises `GameError`.
- `purecfr.rules`: `State` and `MatchState`, and the betting rules:
  `init_state`, `current_player`, `num_raises`, `num_folded`, `num_called`,
  `num_all_in`, `num_acting_players`, `any_raises`, `any_actions`,
  `raise_range` (the `(min, max)` raise-to sizes, or `None`),
  `validate_action` (the action, possibly resized, or `None` if illegal),
  `do_action`, `deal_cards`, `states_equal`, `match_states_equal` and
  `value_of_state`. `State.copy()` gives an independent copy.
- `purecfr.notation`: reading and writing cards, actions and states in the
  `STATE:` / `MATCHSTATE:` text format: `read_card`, `read_cards`,
  `format_card`, `format_cards`, `read_action`, `format_action`,
  `read_state`, `read_match_state`, `format_state`, `format_match_state`.
  The readers return the value together with the number of characters
  consumed. `format_state_pluribus` writes the betting with raises labelled
  as pot fractions (`0.33`, `0.5`, `0.66`, `1`) or `all`. Bad input raises
  `NotationError`.
- `purecfr.rng`: `MersenneTwister`, an MT19937 generator seeded with an
  integer or with `MersenneTwister.from_array(key)`, offering
  `genrand_int32`, `genrand_int31`, `genrand_real1`, `genrand_real2`,
  `genrand_real3` and `genrand_res53`.
- `purecfr.constants`: `CardAbstractionType` (`NULL`, `POTENTIAL`, `BLIND`),
  `ActionAbstractionType` (`NULL`, `FCPA`), both with `from_label`, and
  `EntryType` with `regret_type(round)` and `avg_strategy_type(round)`.
- `purecfr.entries`: `Entries`, a flat numpy-backed table of one
  `EntryType`, indexed by bucket and solution index. `update_regret` skips
  changes that would overflow, `increment_entry` reports overflow, and
  `write`/`load` store the type followed by the raw entries.
  `load_entries(buffer, offset, ...)` wraps entries already in a buffer
  without copying them; such entries may not be written or loaded over.
  Failures raise `EntriesError`.
- `purecfr.action_abstraction`: `NullActionAbstraction` (every legal
  action) and `FcpaActionAbstraction` (fold, call, a few pot-fraction
  raises and all-in); `get_actions(game, state)` returns the actions and a
  bitmask of their kinds. `make_action_abstraction(kind)` builds one from a
  type or label.
- `purecfr.betting_node`: `TerminalNode2p`, `InfoSetNode2p`,
  `TerminalNode6p` and `InfoSetNode6p`, `leaf_type_for(game, state)`, and
  `build_betting_tree(game, state, action_abs)`, which returns the root and
  the entry counts per round. Trees are built for two- and six-player games
  only.
- `purecfr.card_abstraction`: `NullCardAbstraction`, `BlindCardAbstraction`
  and `PotentialAwareImperfectRecallAbstraction`, `sort_cards`, and
  `make_card_abstraction(kind, game)`.
- `purecfr.abstract_game`: `AbstractGame`, which ties a `Game` to its
  abstractions and betting tree; `AbstractGame.from_file(path, ...)` reads
  the definition from a file, and `count_entries()` returns entries per
  bucket and total entries, each by round.

## Example

```python
from purecfr.gamedef import parse_game
from purecfr.rules import init_state, current_player, raise_range

game = parse_game("""GAMEDEF
nolimit
numPlayers = 2
numRounds = 1
stack = 4 4
blind = 2 1
firstPlayer = 2
numSuits = 4
numRanks = 13
numHoleCards = 2
numBoardCards = 0
END GAMEDEF
""")
state = init_state(game, 0)
print(current_player(game, state), raise_range(game, state))
```

Building an abstract game from a definition file:

```python
from purecfr.abstract_game import AbstractGame
from purecfr.constants import ActionAbstractionType, CardAbstractionType

abstract = AbstractGame.from_file(
    "my.game", CardAbstractionType.BLIND, ActionAbstractionType.FCPA
)
per_bucket, total = abstract.count_entries()
```

## What the package does not do

- It has no solver loop: nothing here runs CFR iterations, samples hands or
  updates regrets over a tree walk. `Entries` and the betting tree are the
  pieces such a loop would use.
- It has no command-line programs and no network client for playing
  matches.
- It has no hand evaluator. `value_of_state` takes the showdown ranks of
  the players as an argument.
- It does not build or store bucket tables. The potential-aware card
  abstraction looks buckets up in a mapping that the caller supplies.