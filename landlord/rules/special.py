"""
Special tiles: taxes, card draws and Go To Jail.
"""

import logging
import re

from landlord import actions as player_actions
from landlord import properties, wealth
from landlord.events import Context, Event
from landlord.models import Card, CardAction, DeckType
from landlord.rules.finance import charge
from landlord.state import GameState

logger = logging.getLogger(__name__)

FIXED = "FIXED"
VARIABLE = "VARIABLE"

# Tile ids share a prefix per kind, e.g. chance1..chance3.
SPECIAL_TILE_EVENTS = {
    "gotojail": Event.JAIL,
    "chance": Event.CHANCE,
    "communitychest": Event.COMMUNITY_CHEST,
    "incometax": Event.INCOME_TAX,
    "luxurytax": Event.LUXURY_TAX,
}


def tile_kind(tile_id: str) -> str:
    return re.sub(r"\d+$", "", tile_id)


def resolve_special_tile(context: Context, game_state: GameState, payload=None) -> None:
    tile = game_state.current_board_property
    event = SPECIAL_TILE_EVENTS.get(tile_kind(tile.id))
    if event is not None:
        context.notify(event)


# --- Taxes -----------------------------------------------------------------

def pay_luxury_tax(context: Context, game_state: GameState, payload=None) -> None:
    amount = game_state.config.luxury_tax_amount
    charge(context, game_state, game_state.current_player, amount)
    context.ui.luxury_tax_paid(amount)


def pay_income_tax(context: Context, game_state: GameState, payload=None) -> None:
    """The player picks the fixed amount or a share of their net worth."""
    config = game_state.config
    player = game_state.current_player
    context.ui.income_tax_payment(config.income_tax_amount, config.income_tax_rate * 100)

    choice = player_actions.prompt(context.ui, [FIXED, VARIABLE], "How would you like to pay? ")
    if choice is None:
        context.ui.unknown_action()
        context.notify(Event.INCOME_TAX)
        return

    if choice == VARIABLE:
        amount = round(wealth.calculate_net_worth(player) * config.income_tax_rate, 2)
    else:
        amount = config.income_tax_amount
    context.ui.income_tax_paid(amount)
    charge(context, game_state, player, amount)


# --- Cards -----------------------------------------------------------------

def draw_chance(context: Context, game_state: GameState, payload=None) -> None:
    draw_card(context, game_state, DeckType.CHANCE)


def draw_community_chest(context: Context, game_state: GameState, payload=None) -> None:
    draw_card(context, game_state, DeckType.COMMUNITY_CHEST)


def draw_card(context: Context, game_state: GameState, deck_type: DeckType) -> None:
    """
    Draw the top card and apply it to the current player.

    A Get Out of Jail Free card stays with the player until used; every
    other card goes straight to the discard pile.
    """
    deck = game_state.decks[deck_type]
    player = game_state.current_player
    card = deck.draw(game_state.rng)
    context.ui.drew_card(deck_type.value, card)
    logger.info(f"{player.name} drew '{card.title}'")

    if card.action == CardAction.GET_OUT_OF_JAIL_FREE:
        player.cards.append(card)
    else:
        deck.discard(card)
    apply_card(context, game_state, card)


def apply_card(context: Context, game_state: GameState, card: Card) -> None:
    player = game_state.current_player
    action = card.action

    if action == CardAction.MOVE:
        if card.tile_id is not None:
            target = properties.find_property(game_state, card.tile_id).position
            if target < player.position:
                target += game_state.board_length
            player.position = target
        else:
            player.position += card.count
        context.notify(Event.MOVE_PLAYER)

    elif action == CardAction.MOVE_NEAREST:
        nearest = properties.find_nearest(game_state, card.group_id, player.position)
        target = nearest.position
        if target < player.position:
            target += game_state.board_length
        player.position = target
        game_state.turn_values.rent_multiplier = card.rent_multiplier
        context.notify(Event.TURN_VALUES_UPDATED)
        context.notify(Event.MOVE_PLAYER)

    elif action == CardAction.ADD_FUNDS:
        wealth.increment(player, card.amount)

    elif action == CardAction.REMOVE_FUNDS:
        charge(context, game_state, player, card.amount)

    elif action == CardAction.JAIL:
        context.notify(Event.JAIL)

    elif action == CardAction.PROPERTY_CHARGES:
        amount = (
            properties.get_constructed_houses(game_state, player) * card.building_charge
            + properties.get_constructed_hotels(game_state, player) * card.hotel_charge
        )
        if amount > 0:
            charge(context, game_state, player, amount)

    elif action == CardAction.REMOVE_FUNDS_TO_PLAYERS:
        for other in game_state.active_players:
            if other is not player and not player.bankrupt:
                charge(context, game_state, player, card.amount, creditor=other)

    elif action == CardAction.ADD_FUNDS_FROM_PLAYERS:
        for other in game_state.active_players:
            if other is not player:
                charge(context, game_state, other, card.amount, creditor=player)


RULES = {
    Event.RESOLVE_SPECIAL_PROPERTY: [resolve_special_tile],
    Event.LUXURY_TAX: [pay_luxury_tax],
    Event.INCOME_TAX: [pay_income_tax],
    Event.CHANCE: [draw_chance],
    Event.COMMUNITY_CHEST: [draw_community_chest],
}
