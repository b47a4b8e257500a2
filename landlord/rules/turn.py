"""
Turn flow: game start, the decision loop, dice, movement and jail.
"""

import logging

from landlord import actions as player_actions
from landlord import dice, properties, wealth
from landlord.events import Context, Event
from landlord.models import NOT_JAILED, SPECIAL
from landlord.rules.finance import charge
from landlord.state import GameState

logger = logging.getLogger(__name__)

JAIL_TILE_ID = "jail"
MAX_JAIL_ATTEMPTS = 2
MAX_DOUBLES = 2


def continue_turn(context: Context, game_state: GameState, payload=None) -> None:
    context.notify(Event.CONTINUE_TURN)


# --- START_GAME ------------------------------------------------------------

def announce_game(context: Context, game_state: GameState, payload=None) -> None:
    context.ui.start_game()


def shuffle_decks(context: Context, game_state: GameState, payload=None) -> None:
    for deck in game_state.decks.values():
        deck.shuffle(game_state.rng)


def highest_rolling_player_goes_first(context: Context, game_state: GameState, payload=None) -> None:
    """Each player rolls one die; play starts with the first highest roll and keeps seating order."""
    rolls = []
    for player in game_state.players:
        (roll,) = dice.roll(rng=game_state.rng)
        context.ui.opening_roll(player, roll)
        rolls.append(roll)

    first = rolls.index(max(rolls))
    game_state.players = game_state.players[first:] + game_state.players[:first]
    logger.info(f"Play order: {[p.name for p in game_state.players]}")
    context.notify(Event.PLAYER_ORDER_CHANGED)


def begin_first_turn(context: Context, game_state: GameState, payload=None) -> None:
    context.notify(Event.START_TURN)


# --- START_TURN / CONTINUE_TURN / END_TURN ---------------------------------

def reset_turn_values(context: Context, game_state: GameState, payload=None) -> None:
    game_state.reset_turn_values()
    context.notify(Event.TURN_VALUES_RESET)


def announce_turn(context: Context, game_state: GameState, payload=None) -> None:
    context.ui.start_turn(game_state.current_player)


def prompt_player_action(context: Context, game_state: GameState, payload=None) -> None:
    """The decision loop. Every non-terminating action re-enters it when done."""
    if game_state.game_over:
        return
    if game_state.current_player.bankrupt:
        context.notify(Event.END_TURN)
        return

    available = player_actions.refresh(game_state)
    action = player_actions.prompt(context.ui, available)
    if action is None:
        context.ui.unknown_action()
        context.notify(Event.CONTINUE_TURN)
    else:
        context.notify(action)


def announce_end_turn(context: Context, game_state: GameState, payload=None) -> None:
    context.ui.end_turn()


def advance_turn(context: Context, game_state: GameState, payload=None) -> None:
    if len(game_state.active_players) <= 1:
        game_state.game_over = True
    if game_state.game_over:
        context.notify(Event.END_GAME)
        return

    game_state.turn += 1
    while game_state.current_player.bankrupt:
        context.ui.skip_turn_for_bankrupt_player(game_state.current_player)
        game_state.turn += 1
    context.notify(Event.START_TURN)


def declare_winner(context: Context, game_state: GameState, payload=None) -> None:
    game_state.game_over = True
    candidates = game_state.active_players or game_state.players
    winner = max(candidates, key=wealth.calculate_net_worth)
    logger.info(f"Game over after {game_state.turn + 1} turns, {winner.name} wins")
    context.ui.game_over(winner, wealth.calculate_net_worth(winner))


# --- Dice ------------------------------------------------------------------

def announce_rolling(context: Context, game_state: GameState, payload=None) -> None:
    context.ui.rolling_dice()


def roll_dice(context: Context, game_state: GameState, payload=None) -> None:
    game_state.turn_values.roll = dice.roll(quantity=2, rng=game_state.rng)
    context.notify(Event.TURN_VALUES_UPDATED)


def announce_roll(context: Context, game_state: GameState, payload=None) -> None:
    roll1, roll2 = game_state.turn_values.roll
    context.ui.dice_roll_results(roll1, roll2)


def branch_on_jail(context: Context, game_state: GameState, payload=None) -> None:
    if game_state.current_player.in_jail:
        context.notify(Event.JAIL_ROLL)
    else:
        context.notify(Event.MOVE_ROLL)


def announce_normal_roll(context: Context, game_state: GameState, payload=None) -> None:
    context.ui.roll_normal_dice()


def count_doubles(context: Context, game_state: GameState, payload=None) -> None:
    turn_values = game_state.turn_values
    turn_values.speeding_counter = turn_values.speeding_counter + 1 if turn_values.is_doubles else 0
    context.notify(Event.TURN_VALUES_UPDATED)


def move_unless_speeding(context: Context, game_state: GameState, payload=None) -> None:
    if game_state.turn_values.speeding_counter > MAX_DOUBLES:
        context.notify(Event.SPEEDING)
    else:
        context.notify(Event.UPDATE_POSITION_WITH_ROLL)


def announce_speeding(context: Context, game_state: GameState, payload=None) -> None:
    context.ui.caught_speeding()


def send_to_jail(context: Context, game_state: GameState, payload=None) -> None:
    context.notify(Event.JAIL)


def announce_jail_roll(context: Context, game_state: GameState, payload=None) -> None:
    context.ui.roll_jail_dice()


def attempt_jail_escape(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.current_player
    if game_state.turn_values.is_doubles:
        player.jailed = NOT_JAILED
    else:
        player.jailed += 1


def force_fine(context: Context, game_state: GameState, payload=None) -> None:
    if game_state.current_player.jailed > MAX_JAIL_ATTEMPTS:
        context.notify(Event.PAY_FINE)


def move_if_released(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.current_player
    if not player.in_jail and not player.bankrupt:
        context.notify(Event.UPDATE_POSITION_WITH_ROLL)


# --- Movement --------------------------------------------------------------

def update_position_with_roll(context: Context, game_state: GameState, payload=None) -> None:
    game_state.current_player.position += game_state.turn_values.roll_total
    context.notify(Event.MOVE_PLAYER)


def wrap_position(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.current_player
    if player.position >= game_state.board_length:
        context.notify(Event.PASS_GO)
    player.position %= game_state.board_length


def land_on_tile(context: Context, game_state: GameState, payload=None) -> None:
    tile = properties.find_by_position(game_state, game_state.current_player.position)
    game_state.current_board_property = tile
    context.ui.player_movement(tile)


def resolve_tile(context: Context, game_state: GameState, payload=None) -> None:
    tile = game_state.current_board_property
    player = game_state.current_player
    if tile.group == SPECIAL:
        context.notify(Event.RESOLVE_SPECIAL_PROPERTY)
    elif not tile.is_owned:
        context.notify(Event.RESOLVE_NEW_PROPERTY)
    elif tile.owned_by != player.id and not tile.mortgaged:
        context.notify(Event.PAY_RENT)


def clear_rent_multiplier(context: Context, game_state: GameState, payload=None) -> None:
    if game_state.turn_values.rent_multiplier is not None:
        game_state.turn_values.rent_multiplier = None
        context.notify(Event.TURN_VALUES_UPDATED)


def collect_salary(context: Context, game_state: GameState, payload=None) -> None:
    amount = game_state.config.pass_go_amount
    context.ui.pass_go(amount)
    wealth.increment(game_state.current_player, amount)


# --- Jail ------------------------------------------------------------------

def announce_jail(context: Context, game_state: GameState, payload=None) -> None:
    context.ui.jail()


def lock_up(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.current_player
    player.jailed = 0
    player.position = properties.find_property(game_state, JAIL_TILE_ID).position
    logger.info(f"{player.name} was sent to jail")


def end_turn(context: Context, game_state: GameState, payload=None) -> None:
    context.notify(Event.END_TURN)


def announce_fine(context: Context, game_state: GameState, payload=None) -> None:
    context.ui.pay_fine(game_state.config.fine_amount)


def pay_fine(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.current_player
    charge(context, game_state, player, game_state.config.fine_amount)
    if player.bankrupt:
        return
    player.jailed = NOT_JAILED


def use_get_out_of_jail_free_card(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.current_player
    if not player.cards:
        context.ui.unknown_action()
        return
    context.ui.get_out_of_jail_free_card_used()
    card = player.cards.pop(0)
    game_state.decks[card.deck].discard(card)
    player.jailed = NOT_JAILED


# --- PLAYER_INFO -----------------------------------------------------------

def show_player_info(context: Context, game_state: GameState, payload=None) -> None:
    ownable = [p for p in properties.get_properties(game_state) if p.is_ownable]
    context.ui.show_player_table(game_state.players, ownable)


RULES = {
    Event.START_GAME: [
        announce_game,
        shuffle_decks,
        highest_rolling_player_goes_first,
        begin_first_turn,
    ],
    Event.PLAYER_ORDER_CHANGED: [],
    Event.START_TURN: [reset_turn_values, announce_turn, continue_turn],
    Event.TURN_VALUES_RESET: [],
    Event.TURN_VALUES_UPDATED: [],
    Event.CONTINUE_TURN: [prompt_player_action],
    Event.ROLL_DICE: [announce_rolling, roll_dice, announce_roll, branch_on_jail, continue_turn],
    Event.MOVE_ROLL: [announce_normal_roll, count_doubles, move_unless_speeding],
    Event.SPEEDING: [announce_speeding, send_to_jail],
    Event.JAIL_ROLL: [announce_jail_roll, attempt_jail_escape, force_fine, move_if_released],
    Event.UPDATE_POSITION_WITH_ROLL: [update_position_with_roll],
    Event.MOVE_PLAYER: [wrap_position, land_on_tile, resolve_tile, clear_rent_multiplier],
    Event.PASS_GO: [collect_salary],
    Event.JAIL: [announce_jail, lock_up, end_turn],
    Event.PAY_FINE: [announce_fine, pay_fine, continue_turn],
    Event.USE_GET_OUT_OF_JAIL_FREE_CARD: [use_get_out_of_jail_free_card, continue_turn],
    Event.PLAYER_INFO: [show_player_info, continue_turn],
    Event.END_TURN: [announce_end_turn, advance_turn],
    Event.END_GAME: [declare_winner],
}
