import pytest

from purecfr.gamedef import Action, ActionType, make_card, parse_game
from purecfr.notation import (
    NotationError,
    format_action,
    format_card,
    format_cards,
    format_match_state,
    format_state,
    format_state_pluribus,
    read_action,
    read_card,
    read_cards,
    read_match_state,
    read_state,
)

LIMIT_TEXT = """GAMEDEF
limit
numPlayers = 2
numRounds = 4
blind = 10 5
raiseSize = 10 10 20 20
firstPlayer = 2 1 1 1
maxRaises = 3 4 4 4
numSuits = 4
numRanks = 13
numHoleCards = 2
numBoardCards = 0 3 1 1
END GAMEDEF
"""

NOLIMIT_TEXT = """GAMEDEF
nolimit
numPlayers = 2
numRounds = 4
stack = 200 200
blind = 2 1
firstPlayer = 2 1 1 1
numSuits = 4
numRanks = 13
numHoleCards = 2
numBoardCards = 0 3 1 1
END GAMEDEF
"""


@pytest.fixture
def limit_game():
    return parse_game(LIMIT_TEXT)


@pytest.fixture
def nolimit_game():
    return parse_game(NOLIMIT_TEXT)


def test_read_card_uses_rank_and_suit_order():
    assert read_card("Ah") == (make_card(12, 0), 2)
    assert read_card("2s") == (make_card(0, 3), 2)


def test_read_card_is_case_insensitive():
    assert read_card("ah")[0] == read_card("AH")[0]


@pytest.mark.parametrize("text", ["", "A", "Xh", "Az"])
def test_read_card_rejects_bad_text(text):
    with pytest.raises(NotationError):
        read_card(text)


def test_card_round_trip_over_whole_deck():
    for card in range(52):
        assert read_card(format_card(card))[0] == card


def test_format_card_out_of_range():
    with pytest.raises(NotationError):
        format_card(52)


def test_read_cards_stops_at_non_card():
    cards, used = read_cards("AhKdzz", 3)
    assert cards == [read_card("Ah")[0], read_card("Kd")[0]]
    assert used == 4


def test_read_cards_respects_maximum():
    cards, used = read_cards("AhKdQs", 2)
    assert format_cards(cards) == "AhKd"
    assert used == 4


def test_read_action_limit(limit_game):
    assert read_action("c", limit_game) == (Action(ActionType.CALL), 1)
    assert read_action("k", limit_game) == (Action(ActionType.CALL), 1)
    assert read_action("F", limit_game) == (Action(ActionType.FOLD), 1)
    assert read_action("r123", limit_game) == (Action(ActionType.RAISE, 0), 1)


def test_read_action_nolimit_reads_size(nolimit_game):
    assert read_action("r250c", nolimit_game) == (Action(ActionType.RAISE, 250), 4)
    assert read_action("b20", nolimit_game) == (Action(ActionType.RAISE, 20), 3)


def test_read_action_errors(limit_game, nolimit_game):
    with pytest.raises(NotationError):
        read_action("x", limit_game)
    with pytest.raises(NotationError):
        read_action("", limit_game)
    with pytest.raises(NotationError):
        read_action("r", nolimit_game)


def test_format_action(limit_game, nolimit_game):
    assert format_action(nolimit_game, Action(ActionType.RAISE, 250)) == "r250"
    assert format_action(limit_game, Action(ActionType.RAISE, 0)) == "r"
    assert format_action(limit_game, Action(ActionType.FOLD)) == "f"
    action = Action(ActionType.RAISE, 42)
    assert read_action(format_action(nolimit_game, action), nolimit_game)[0] == action


def test_state_round_trip_limit(limit_game):
    text = "STATE:0:cc/r:AhKd|QsJc/2c3d4h"
    state, used = read_state(text, limit_game)
    assert used == len(text)
    assert state.round == 1
    assert format_state(limit_game, state) == text


def test_state_round_trip_nolimit(nolimit_game):
    text = "STATE:7:r6c/r200c:AhKd|QsJc/2c3d4h/5s/6d"
    state, used = read_state(text, nolimit_game)
    assert used == len(text)
    assert state.finished
    assert state.hand_id == 7
    assert format_state(nolimit_game, state) == text


def test_read_state_rejects_missing_header(limit_game):
    with pytest.raises(NotationError):
        read_state("MATCH:0:cc:AhKd|QsJc", limit_game)


def test_read_state_rejects_illegal_betting(limit_game):
    # folding with no bet to face after the first round is not allowed
    with pytest.raises(NotationError):
        read_state("STATE:0:cc/f:AhKd|QsJc/2c3d4h", limit_game)


def test_read_state_rejects_incomplete_hole_cards(limit_game):
    with pytest.raises(NotationError):
        read_state("STATE:0:c:Ah|QsJc", limit_game)


def test_read_state_rejects_missing_board(limit_game):
    with pytest.raises(NotationError):
        read_state("STATE:0:cc/r:AhKd|QsJc/2c", limit_game)


def test_match_state_round_trip_hides_opponent(limit_game):
    text = "MATCHSTATE:1:5:cc/r:|QsJc/2c3d4h"
    match_state, used = read_match_state(text, limit_game)
    assert used == len(text)
    assert match_state.viewing_player == 1
    assert format_match_state(limit_game, match_state) == text


def test_match_state_shows_cards_at_showdown(limit_game):
    text = "MATCHSTATE:0:3:cc/cc/cc/cc:AhKd|QsJc/2c3d4h/5s/6d"
    match_state, _ = read_match_state(text, limit_game)
    assert match_state.state.finished
    assert format_match_state(limit_game, match_state) == text


def test_match_state_hides_folded_player(limit_game):
    match_state, _ = read_match_state("MATCHSTATE:0:3:f:AhKd|QsJc", limit_game)
    assert format_match_state(limit_game, match_state) == "MATCHSTATE:0:3:f:AhKd|"


def test_match_state_rejects_unknown_viewer(limit_game):
    with pytest.raises(NotationError):
        read_match_state("MATCHSTATE:2:0::AhKd|", limit_game)


def test_pluribus_labels_pot_raise(nolimit_game):
    state, _ = read_state("STATE:0:r6c:AhKd|QsJc/2c3d4h", nolimit_game)
    text = format_state_pluribus(nolimit_game, state)
    assert text.startswith("|")
    assert "|r1c|" in text
    assert text.endswith("|f|")


def test_pluribus_labels_all_in_and_commas(nolimit_game):
    state, _ = read_state(
        "STATE:0:r6c/r200c:AhKd|QsJc/2c3d4h/5s/6d", nolimit_game
    )
    text = format_state_pluribus(nolimit_game, state)
    assert "|f|rall,c|t||r|" in text