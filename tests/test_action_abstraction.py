import pytest

from purecfr.action_abstraction import (
    MASK_ALL_IN,
    MASK_CALL,
    MASK_FOLD,
    MASK_OVERBET,
    MASK_POT,
    MASK_THIRD_POT,
    MASK_TWO_THIRDS_POT,
    ActionAbstraction,
    FcpaActionAbstraction,
    NullActionAbstraction,
    make_action_abstraction,
)
from purecfr.constants import ActionAbstractionType
from purecfr.gamedef import Action, ActionType, parse_game
from purecfr.rules import current_player, do_action, init_state, raise_range

FOLD, CALL, RAISE = ActionType.FOLD, ActionType.CALL, ActionType.RAISE


def nolimit_game(rounds=1, stack=200):
    first = " ".join(["2"] + ["1"] * (rounds - 1))
    board = " ".join(["0"] + ["3"] * (rounds - 1))
    return parse_game(
        "GAMEDEF\n"
        "nolimit\n"
        "numPlayers = 2\n"
        f"numRounds = {rounds}\n"
        f"stack = {stack} {stack}\n"
        "blind = 2 1\n"
        f"firstPlayer = {first}\n"
        "numSuits = 4\n"
        "numRanks = 13\n"
        "numHoleCards = 2\n"
        f"numBoardCards = {board}\n"
        "END GAMEDEF\n"
    )


def small_limit_game():
    return parse_game(
        "GAMEDEF\n"
        "limit\n"
        "numPlayers = 2\n"
        "numRounds = 1\n"
        "stack = 2 2\n"
        "blind = 1 1\n"
        "raiseSize = 1\n"
        "firstPlayer = 1\n"
        "numSuits = 1\n"
        "numRanks = 3\n"
        "numHoleCards = 1\n"
        "numBoardCards = 0\n"
        "END GAMEDEF\n"
    )


def test_fcpa_preflop_root():
    game = nolimit_game()
    state = init_state(game, 0)
    actions, mask = FcpaActionAbstraction().get_actions(game, state)
    assert [a.type for a in actions] == [FOLD, CALL, RAISE, RAISE]
    low, high = raise_range(game, state)
    assert low <= actions[2].size < high
    assert actions[2].size == 6
    assert actions[3] == Action(RAISE, game.stack[current_player(game, state)])
    assert mask == MASK_FOLD | MASK_CALL | MASK_POT | MASK_ALL_IN


def test_fcpa_forbids_donk_bet():
    game = nolimit_game(rounds=2)
    state = init_state(game, 0)
    abstraction = FcpaActionAbstraction()
    actions, _ = abstraction.get_actions(game, state)
    do_action(game, state, actions[2])
    do_action(game, state, Action(CALL))
    assert state.round == 1
    assert current_player(game, state) != state.last_player_raise
    actions, mask = abstraction.get_actions(game, state)
    assert actions == [Action(CALL)]
    assert mask == MASK_CALL


def test_fcpa_aggressor_postflop_options():
    game = nolimit_game(rounds=2)
    state = init_state(game, 0)
    abstraction = FcpaActionAbstraction()
    actions, _ = abstraction.get_actions(game, state)
    do_action(game, state, actions[2])
    actions, _ = abstraction.get_actions(game, state)
    assert [a.type for a in actions] == [FOLD, CALL, RAISE, RAISE]
    do_action(game, state, actions[2])
    do_action(game, state, Action(CALL))
    assert state.round == 1
    player = current_player(game, state)
    assert player == state.last_player_raise

    actions, mask = abstraction.get_actions(game, state)
    assert [a.type for a in actions] == [CALL, RAISE, RAISE, RAISE]
    sizes = [a.size for a in actions[1:]]
    assert sizes == sorted(sizes)
    assert len(set(sizes)) == len(sizes)
    assert all(size < game.stack[player] for size in sizes)
    assert mask == MASK_CALL | MASK_THIRD_POT | MASK_TWO_THIRDS_POT | MASK_OVERBET


def test_null_limit_actions():
    game = small_limit_game()
    state = init_state(game, 0)
    actions, mask = NullActionAbstraction().get_actions(game, state)
    assert actions == [Action(CALL), Action(RAISE, 0)]
    assert mask == 0


def test_null_nolimit_enumerates_every_raise_size():
    game = nolimit_game(stack=5)
    state = init_state(game, 0)
    actions, mask = NullActionAbstraction().get_actions(game, state)
    low, high = raise_range(game, state)
    assert high == game.stack[current_player(game, state)]
    assert actions == [Action(FOLD), Action(CALL)] + [
        Action(RAISE, size) for size in range(low, high + 1)
    ]
    assert mask == 0


def test_null_rejects_too_many_actions():
    game = nolimit_game(stack=200)
    state = init_state(game, 0)
    with pytest.raises(ValueError):
        NullActionAbstraction().get_actions(game, state)


def test_make_action_abstraction_by_label_and_type():
    game = nolimit_game()
    state = init_state(game, 0)
    expected = FcpaActionAbstraction().get_actions(game, state)
    assert make_action_abstraction("FCPA").get_actions(game, state) == expected
    assert (
        make_action_abstraction(ActionAbstractionType.FCPA).get_actions(game, state)
        == expected
    )
    limit = small_limit_game()
    limit_state = init_state(limit, 0)
    assert make_action_abstraction("NULL").get_actions(
        limit, limit_state
    ) == NullActionAbstraction().get_actions(limit, limit_state)


def test_make_action_abstraction_unknown_label():
    with pytest.raises(ValueError):
        make_action_abstraction("BOGUS")


def test_base_class_is_abstract():
    with pytest.raises(TypeError):
        ActionAbstraction()