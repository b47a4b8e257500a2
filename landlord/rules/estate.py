"""
Buying, auctioning, rent, property management and trades.
"""

import logging
from typing import Callable, List

from landlord import actions as player_actions
from landlord import auction as auction_service
from landlord import properties, wealth
from landlord import trade as trade_service
from landlord.events import Context, Event
from landlord.models import Player, Property
from landlord.rules.finance import charge, collect
from landlord.state import GameState

logger = logging.getLogger(__name__)


def _liquidity(game_state: GameState, player: Player) -> float:
    return wealth.calculate_liquidity(
        game_state, properties.get_player_properties(game_state, player), player
    )


def continue_turn(context: Context, game_state: GameState, payload=None) -> None:
    context.notify(Event.CONTINUE_TURN)


# --- RESOLVE_NEW_PROPERTY / BUY_PROPERTY -----------------------------------

def offer_new_property(context: Context, game_state: GameState, payload=None) -> None:
    """Buy or auction an unowned tile; auction straight away if the player cannot afford it."""
    prop = game_state.current_board_property
    player = game_state.current_player
    context.ui.display_property_details(prop)

    if _liquidity(game_state, player) < prop.price:
        context.notify(Event.AUCTION)
        return

    action = player_actions.prompt(
        context.ui,
        [Event.BUY_PROPERTY, Event.AUCTION],
        f"Buy {prop.name} for ${prop.price}, or put it up for auction? ",
    )
    if action is None:
        context.ui.unknown_action()
        context.notify(Event.RESOLVE_NEW_PROPERTY)
    else:
        context.notify(action)


def buy_property(context: Context, game_state: GameState, payload=None) -> None:
    prop = game_state.current_board_property
    player = game_state.current_player
    context.ui.property_bought(prop)

    collect(context, game_state, player, prop.price)
    if player.bankrupt:
        return
    wealth.buy_asset(player, prop.price)
    properties.change_owner(prop, player.id)
    logger.info(f"{player.name} bought {prop.name} for {prop.price}")


# --- AUCTION ---------------------------------------------------------------

def auction_base_cost(game_state: GameState, prop: Property) -> float:
    """Price an opening bid must beat. Mortgaged property starts at its interest."""
    config = game_state.property_config
    if prop.mortgaged:
        return max(prop.price * config.interest_rate, config.minimum_property_price)
    return config.minimum_property_price


def announce_auction(context: Context, game_state: GameState, payload=None) -> None:
    context.ui.auction_instructions()


def run_auction(context: Context, game_state: GameState, payload=None) -> None:
    """
    Auction the current tile, or the property given as payload.

    Only players whose liquidity exceeds the base cost may bid. With a
    single eligible bidder there is nothing to bid against and they take
    the property at the base cost; with none it stays where it is.
    """
    prop = payload if payload is not None else game_state.current_board_property
    base_cost = auction_base_cost(game_state, prop)
    bidders = [
        auction_service.Bidder(player, _liquidity(game_state, player))
        for player in game_state.active_players
    ]
    bidders = [b for b in bidders if b.liquidity > base_cost]

    if not bidders:
        logger.info(f"Nobody can bid on {prop.name}")
        return
    if len(bidders) == 1:
        result = auction_service.AuctionResult(bidders[0].player, base_cost)
    else:
        result = auction_service.auction(context.ui, bidders, prop, base_cost)

    winner, price = result.buyer, result.price
    context.ui.won_auction(winner, price)
    collect(context, game_state, winner, price)
    if winner.bankrupt:
        return

    wealth.buy_asset(winner, price, properties.asset_value(game_state, prop))
    properties.change_owner(prop, winner.id)
    logger.info(f"{winner.name} won {prop.name} at auction for {price}")

    value = properties.mortgage_value(game_state, prop)
    if prop.mortgaged and winner.cash >= value:
        if context.ui.prompt_confirm(f"{winner.name}, lift the mortgage on {prop.name} for ${value}?"):
            properties.unmortgage(game_state, prop, bypass_interest=True)


# --- PAY_RENT --------------------------------------------------------------

def pay_rent(context: Context, game_state: GameState, payload=None) -> None:
    prop = game_state.current_board_property
    player = game_state.current_player
    owner = game_state.get_player(prop.owned_by)
    rent = properties.calculate_rent(game_state, prop, game_state.turn_values.rent_multiplier)

    context.ui.paying_rent(player, owner, rent)
    paid = charge(context, game_state, player, rent, creditor=owner)
    logger.info(f"{player.name} paid {paid} rent to {owner.name} for {prop.name}")


# --- MANAGE_PROPERTIES and its sub-actions ---------------------------------

def manage_properties(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.acting_player
    while True:
        available = properties.get_available_management_actions(game_state, player)
        action = player_actions.prompt(context.ui, available, "What would you like to do with your properties? ")
        if action is None:
            context.ui.unknown_action()
            continue
        if action == properties.CANCEL:
            return
        context.notify(action)


def _select_and_apply(
    context: Context,
    game_state: GameState,
    candidates: List[Property],
    message: str,
    operation: Callable[[GameState, Property], bool],
) -> None:
    choice = context.ui.prompt_select([p.name for p in candidates], message, candidates)
    if not 0 <= choice < len(candidates):
        return
    operation(game_state, candidates[choice])


def renovate(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.acting_player
    _select_and_apply(
        context,
        game_state,
        properties.get_reno_properties(game_state, player),
        "Which property would you like to build on?",
        properties.renovate,
    )


def demolish(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.acting_player
    _select_and_apply(
        context,
        game_state,
        properties.get_demo_properties(game_state, player),
        "Which property would you like to sell a building from?",
        properties.demolish,
    )


def mortgage(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.acting_player
    _select_and_apply(
        context,
        game_state,
        properties.get_mortgageable_properties(game_state, player),
        "Which property would you like to mortgage?",
        properties.mortgage,
    )


def unmortgage(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.acting_player
    _select_and_apply(
        context,
        game_state,
        properties.get_unmortgageable_properties(game_state, player),
        "Which property would you like to unmortgage?",
        properties.unmortgage,
    )


# --- TRADE -----------------------------------------------------------------

def negotiate_trade(context: Context, game_state: GameState, payload=None) -> None:
    details = trade_service.trade(context.ui, game_state)
    if details is None or details.status != trade_service.TradeStatus.ACCEPT:
        return

    received_mortgages = trade_service.execute_trade(game_state, details)
    for owner, prop in received_mortgages:
        settle_received_mortgage(context, game_state, owner, prop)


def settle_received_mortgage(
    context: Context, game_state: GameState, owner: Player, prop: Property
) -> None:
    """
    Offer to lift the mortgage on a property received in a trade.
    Declining, or not being able to afford it, costs the interest only.
    """
    full_cost = properties.unmortgage_cost(game_state, prop)
    if _liquidity(game_state, owner) >= full_cost and context.ui.prompt_confirm(
        f"{owner.name}, unmortgage {prop.name} for ${full_cost}?"
    ):
        collect(context, game_state, owner, full_cost)
        if not owner.bankrupt:
            properties.unmortgage(game_state, prop)
        return

    charge(context, game_state, owner, properties.mortgage_interest(game_state, prop))


RULES = {
    Event.RESOLVE_NEW_PROPERTY: [offer_new_property],
    Event.BUY_PROPERTY: [buy_property],
    Event.AUCTION: [announce_auction, run_auction],
    Event.PAY_RENT: [pay_rent],
    Event.MANAGE_PROPERTIES: [manage_properties, continue_turn],
    Event.RENOVATE: [renovate],
    Event.DEMOLISH: [demolish],
    Event.MORTGAGE: [mortgage],
    Event.UNMORTGAGE: [unmortgage],
    Event.TRADE: [negotiate_trade, continue_turn],
}
