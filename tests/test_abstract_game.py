import pytest

from purecfr.abstract_game import AbstractGame
from purecfr.action_abstraction import FcpaActionAbstraction, NullActionAbstraction
from purecfr.betting_node import InfoSetNode2p, build_betting_tree
from purecfr.card_abstraction import (
    BlindCardAbstraction,
    NullCardAbstraction,
    PotentialAwareImperfectRecallAbstraction,
)
from purecfr.constants import ActionAbstractionType, CardAbstractionType
from purecfr.gamedef import GameError, parse_game
from purecfr.rules import init_state

KUHN = """GAMEDEF
limit
numPlayers = 2
numRounds = 1
stack = 3 3
blind = 1 1
raiseSize = 1
firstPlayer = 1
numSuits = 1
numRanks = 3
numHoleCards = 1
numBoardCards = 0
END GAMEDEF
"""

NOLIMIT = """GAMEDEF
nolimit
numPlayers = 2
numRounds = 1
stack = 20 20
blind = 1 2
firstPlayer = 1
numSuits = 4
numRanks = 13
numHoleCards = 2
numBoardCards = 0
END GAMEDEF
"""


def info_sets(root):
    found = []
    pending = [root]
    while pending:
        node = pending.pop()
        if node.children():
            found.append(node)
            pending.extend(node.children())
    return found


def test_from_file(tmp_path):
    path = tmp_path / "kuhn.game"
    path.write_text(KUHN)
    ag = AbstractGame.from_file(path, "BLIND", "NULL")
    assert ag.game.num_ranks == 3
    assert isinstance(ag.card_abs, BlindCardAbstraction)
    assert isinstance(ag.action_abs, NullActionAbstraction)


def test_from_file_bad_game(tmp_path):
    path = tmp_path / "bad.game"
    path.write_text("GAMEDEF\nlimit\nnumPlayers = 2\nEND GAMEDEF\n")
    with pytest.raises(GameError):
        AbstractGame.from_file(path)


def test_root_is_first_player_decision():
    ag = AbstractGame(parse_game(KUHN))
    root = ag.betting_tree_root
    assert isinstance(root, InfoSetNode2p)
    assert root.player == 0
    assert root.round == 0
    assert root.soln_idx == 0
    assert isinstance(ag.card_abs, NullCardAbstraction)


def test_count_entries_null_cards():
    game = parse_game(KUHN)
    ag = AbstractGame(game, CardAbstractionType.NULL, ActionAbstractionType.NULL)
    per_bucket, total = ag.count_entries()
    assert per_bucket[1:] == [0, 0, 0]
    assert per_bucket[0] > 0
    assert total[0] == 3 * per_bucket[0]


def test_count_entries_matches_tree_build():
    game = parse_game(KUHN)
    ag = AbstractGame(game, "BLIND")
    per_bucket, total = ag.count_entries()
    _, counts = build_betting_tree(game, init_state(game, 0), ag.action_abs)
    assert per_bucket == counts
    assert total == per_bucket


def test_solution_indices_cover_entries():
    ag = AbstractGame(parse_game(KUHN))
    per_bucket, _ = ag.count_entries()
    nodes = sorted(info_sets(ag.betting_tree_root), key=lambda n: n.soln_idx)
    assert sum(n.num_choices for n in nodes) == per_bucket[0]
    position = 0
    for n in nodes:
        assert n.soln_idx == position
        position += n.num_choices


def test_nolimit_fcpa_with_potential_cards():
    game = parse_game(NOLIMIT)
    ag = AbstractGame(game, "POTENTIAL", "FCPA")
    assert isinstance(ag.action_abs, FcpaActionAbstraction)
    assert isinstance(ag.card_abs, PotentialAwareImperfectRecallAbstraction)
    per_bucket, total = ag.count_entries()
    assert per_bucket[0] > 0
    assert total[0] == 170 * per_bucket[0]
    assert ag.betting_tree_root.action_mask != 0


def test_unknown_abstraction_label():
    game = parse_game(KUHN)
    with pytest.raises(ValueError):
        AbstractGame(game, "NULL", "NOPE")
    with pytest.raises(ValueError):
        AbstractGame(game, "NOPE", "NULL")