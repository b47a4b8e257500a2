"""
Tests for the turn state machine: play order, the decision loop, dice,
movement and jail.
"""

import pytest
from conftest import Harness, ScriptedUI, ScriptExhausted, give

from landlord.actions import get_available_actions
from landlord.events import Event, EventBus
from landlord.game import start_game
from landlord.models import Card, CardAction, DeckType


@pytest.fixture
def alice(game_state):
    return game_state.players[0]


# --- Start of game ---------------------------------------------------------

def test_highest_roll_goes_first(harness, game_state, fixed_dice):
    """Each player rolls one die; the first highest roll starts, seating order is kept."""
    fixed_dice([2], [5], [5])
    harness.use(Event.START_GAME).spy(Event.PLAYER_ORDER_CHANGED, Event.START_TURN)

    harness.emit(Event.START_GAME)

    assert [p.name for p in game_state.players] == ["Bob", "Charlie", "Alice"]
    assert game_state.current_player.name == "Bob"
    assert harness.count(Event.PLAYER_ORDER_CHANGED) == 1
    assert harness.count(Event.START_TURN) == 1
    assert len(harness.ui.called("opening_roll")) == 3


def test_start_turn_resets_turn_values(harness, game_state):
    game_state.turn_values.roll = [3, 4]
    game_state.turn_values.speeding_counter = 2
    harness.use(Event.START_TURN).spy(Event.CONTINUE_TURN)

    harness.emit(Event.START_TURN)

    assert game_state.turn_values.roll is None
    assert game_state.turn_values.speeding_counter == 0
    assert harness.count(Event.CONTINUE_TURN) == 1


# --- Decision loop ---------------------------------------------------------

def test_unknown_answer_prompts_again(game_state):
    ui = ScriptedUI(answers=["dance", "player info"])
    harness = Harness(game_state, ui).use(Event.CONTINUE_TURN).spy(Event.PLAYER_INFO)

    harness.emit(Event.CONTINUE_TURN)

    assert len(ui.called("unknown_action")) == 1
    assert harness.count(Event.PLAYER_INFO) == 1


def test_action_by_number(game_state):
    ui = ScriptedUI(answers=["1"])
    harness = Harness(game_state, ui).use(Event.CONTINUE_TURN).spy(Event.ROLL_DICE)

    harness.emit(Event.CONTINUE_TURN)

    assert harness.count(Event.ROLL_DICE) == 1
    assert game_state.current_player_actions[0] == Event.ROLL_DICE


def test_available_actions_before_and_after_rolling(game_state, alice):
    assert get_available_actions(game_state) == [Event.ROLL_DICE, Event.TRADE, Event.PLAYER_INFO]

    give(game_state, alice, "balticave")
    game_state.turn_values.roll = [2, 3]
    assert get_available_actions(game_state) == [
        Event.MANAGE_PROPERTIES,
        Event.TRADE,
        Event.PLAYER_INFO,
        Event.END_TURN,
    ]


def test_doubles_allow_another_roll(game_state):
    game_state.turn_values.roll = [3, 3]
    game_state.turn_values.speeding_counter = 1

    actions = get_available_actions(game_state)
    assert Event.ROLL_DICE in actions
    assert Event.END_TURN not in actions


def test_jailed_player_actions(game_state, alice):
    alice.jailed = 0
    assert get_available_actions(game_state) == [
        Event.ROLL_DICE,
        Event.PAY_FINE,
        Event.TRADE,
        Event.PLAYER_INFO,
    ]

    alice.cards.append(Card("Get Out of Jail Free", CardAction.GET_OUT_OF_JAIL_FREE, DeckType.CHANCE))
    assert Event.USE_GET_OUT_OF_JAIL_FREE_CARD in get_available_actions(game_state)


def test_bankrupt_player_can_only_end_turn(game_state, alice):
    alice.bankrupt = True
    assert get_available_actions(game_state) == [Event.END_TURN]


# --- Dice and movement -----------------------------------------------------

MOVEMENT = (Event.ROLL_DICE, Event.MOVE_ROLL, Event.UPDATE_POSITION_WITH_ROLL, Event.MOVE_PLAYER)


def test_roll_moves_player_and_resolves_tile(harness, game_state, alice, fixed_dice):
    fixed_dice([1, 2])
    harness.use(*MOVEMENT).spy(Event.RESOLVE_NEW_PROPERTY, Event.CONTINUE_TURN)

    harness.emit(Event.ROLL_DICE)

    assert alice.position == 3
    assert game_state.current_board_property.id == "balticave"
    assert harness.count(Event.RESOLVE_NEW_PROPERTY) == 1
    assert harness.count(Event.CONTINUE_TURN) == 1
    assert harness.ui.called("dice_roll_results") == [(1, 2)]


def test_passing_go_pays_salary(harness, game_state, alice, fixed_dice):
    alice.position = 38
    fixed_dice([1, 3])
    harness.use(*MOVEMENT, Event.PASS_GO).spy(Event.RESOLVE_SPECIAL_PROPERTY)

    harness.emit(Event.ROLL_DICE)

    assert alice.position == 2
    assert alice.cash == 1700
    assert harness.count(Event.RESOLVE_SPECIAL_PROPERTY) == 1


def test_landing_on_own_or_mortgaged_property_is_free(harness, game_state, alice, fixed_dice):
    bob = game_state.players[1]
    give(game_state, alice, "balticave")
    give(game_state, bob, "readingrailroad", mortgaged=True)
    fixed_dice([1, 2], [1, 1])
    harness.use(*MOVEMENT).spy(Event.PAY_RENT, Event.RESOLVE_NEW_PROPERTY)

    harness.emit(Event.ROLL_DICE)
    harness.emit(Event.ROLL_DICE)

    assert alice.position == 5
    assert harness.emitted == []


def test_third_double_sends_player_to_jail_without_moving(harness, game_state, alice, fixed_dice):
    alice.position = 5
    game_state.turn_values.roll = [2, 2]
    game_state.turn_values.speeding_counter = 2
    fixed_dice([4, 4])
    harness.use(*MOVEMENT, Event.SPEEDING, Event.JAIL).spy(
        Event.UPDATE_POSITION_WITH_ROLL, Event.END_TURN, Event.CONTINUE_TURN
    )

    harness.emit(Event.ROLL_DICE)

    assert alice.position == 10
    assert alice.jailed == 0
    assert harness.count(Event.UPDATE_POSITION_WITH_ROLL) == 0
    assert harness.count(Event.END_TURN) == 1
    assert harness.count(Event.CONTINUE_TURN) == 0
    assert len(harness.ui.called("caught_speeding")) == 1


# --- Jail ------------------------------------------------------------------

JAIL_FLOW = (
    Event.ROLL_DICE,
    Event.JAIL_ROLL,
    Event.PAY_FINE,
    Event.UPDATE_POSITION_WITH_ROLL,
    Event.MOVE_PLAYER,
)


def test_three_failed_jail_rolls_force_the_fine(harness, game_state, alice, fixed_dice):
    alice.position, alice.jailed = 10, 0
    fixed_dice([1, 2], [1, 2], [1, 2])
    harness.use(*JAIL_FLOW).spy(Event.RESOLVE_NEW_PROPERTY)
    fines = []
    harness.bus.subscribe(Event.PAY_FINE, lambda payload: fines.append(alice.jailed))

    for attempt in range(3):
        game_state.reset_turn_values()
        harness.emit(Event.ROLL_DICE)
        if attempt < 2:
            assert alice.in_jail
            assert alice.position == 10

    assert len(fines) == 1
    assert not alice.in_jail
    assert alice.cash == 1450
    assert alice.position == 13
    assert harness.count(Event.RESOLVE_NEW_PROPERTY) == 1


def test_fine_that_bankrupts_keeps_the_player_in_place(harness, game_state, alice, fixed_dice):
    """A third failed roll forces the fine; a player who cannot pay it does not move."""
    alice.position, alice.jailed, alice.cash = 10, 2, 0
    fixed_dice([1, 2])
    harness.use(*JAIL_FLOW, Event.COLLECTIONS, Event.BANKRUPTCY, Event.PASS_GO)
    harness.spy(Event.RESOLVE_NEW_PROPERTY, Event.AUCTION, Event.END_TURN)

    harness.emit(Event.ROLL_DICE)

    assert alice.bankrupt
    assert alice.position == 10
    assert alice.cash == 0
    assert game_state.current_board_property is None
    assert harness.count(Event.RESOLVE_NEW_PROPERTY) == 0
    assert harness.count(Event.AUCTION) == 0
    assert harness.count(Event.END_TURN) == 1
    assert harness.ui.called("player_lost") == [(alice,)]


def test_doubles_release_from_jail(harness, game_state, alice, fixed_dice):
    alice.position, alice.jailed = 10, 1
    fixed_dice([2, 2])
    harness.use(*JAIL_FLOW).spy(Event.PAY_FINE)

    harness.emit(Event.ROLL_DICE)

    assert not alice.in_jail
    assert alice.position == 14
    assert alice.cash == 1500
    assert harness.count(Event.PAY_FINE) == 0
    # leaving jail on doubles does not earn another roll
    actions = get_available_actions(game_state)
    assert Event.ROLL_DICE not in actions
    assert Event.END_TURN in actions


def test_pay_fine_before_rolling(harness, game_state, alice):
    alice.jailed = 1
    harness.use(Event.PAY_FINE).spy(Event.CONTINUE_TURN)

    harness.emit(Event.PAY_FINE)

    assert not alice.in_jail
    assert alice.cash == 1450
    assert harness.count(Event.CONTINUE_TURN) == 1


def test_use_get_out_of_jail_free_card(harness, game_state, alice):
    card = Card("Get Out of Jail Free", CardAction.GET_OUT_OF_JAIL_FREE, DeckType.CHANCE)
    alice.cards.append(card)
    alice.jailed = 0
    harness.use(Event.USE_GET_OUT_OF_JAIL_FREE_CARD)

    harness.emit(Event.USE_GET_OUT_OF_JAIL_FREE_CARD)

    assert not alice.in_jail
    assert alice.cards == []
    assert game_state.decks[DeckType.CHANCE].discarded_cards == [card]


# --- End of turn and game --------------------------------------------------

def test_end_turn_skips_bankrupt_players(harness, game_state):
    bob = game_state.players[1]
    bob.bankrupt = True
    harness.use(Event.END_TURN).spy(Event.START_TURN, Event.END_GAME)

    harness.emit(Event.END_TURN)

    assert game_state.current_player.name == "Charlie"
    assert harness.ui.called("skip_turn_for_bankrupt_player") == [(bob,)]
    assert harness.count(Event.START_TURN) == 1
    assert harness.count(Event.END_GAME) == 0


def test_last_player_standing_wins(harness, game_state, alice):
    for player in game_state.players[1:]:
        player.bankrupt = True
    harness.use(Event.END_TURN, Event.END_GAME).spy(Event.START_TURN)

    harness.emit(Event.END_TURN)

    assert game_state.game_over
    assert harness.ui.called("game_over") == [(alice, 1500)]
    assert harness.count(Event.START_TURN) == 0


def test_full_turn_through_the_bus(two_player_state, fixed_dice):
    """Bob wins the opening roll, buys Baltic Avenue and hands the turn to Alice."""
    fixed_dice([3], [5], [1, 2])
    ui = ScriptedUI(answers=["ROLL_DICE", "BUY_PROPERTY", "END_TURN"])

    with pytest.raises(ScriptExhausted):
        start_game(EventBus(strict=True), ui, two_player_state)

    alice, bob = two_player_state.players[1], two_player_state.players[0]
    assert bob.name == "Bob"
    assert bob.cash == 1440
    assert bob.assets == 60
    assert two_player_state.config.property_config.properties[3].owned_by == bob.id
    assert two_player_state.current_player is alice
    assert ui.called("start_turn") == [(bob,), (alice,)]
