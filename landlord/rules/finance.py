"""
Charges, collections, liquidation and bankruptcy.

Any charge goes through `charge` (or `collect` for purchases). When the
player's cash does not cover it, a sub-turn is opened for the debtor and
COLLECTIONS keeps offering LIQUIDATION until the cash is there, or emits
BANKRUPTCY once even full liquidation could not cover the charge.
"""

import logging
from typing import Optional

from landlord import actions as player_actions
from landlord import properties, wealth
from landlord.events import Context, Event
from landlord.models import UNOWNED, Player
from landlord.state import GameState, SubTurn

logger = logging.getLogger(__name__)

LIQUIDATION_ACTIONS = [
    Event.MANAGE_PROPERTIES,
    Event.TRADE,
    Event.PLAYER_INFO,
    Event.BANKRUPTCY,
    properties.CANCEL,
]


def collect(context: Context, game_state: GameState, player: Player, amount: float) -> None:
    """Make sure `player` has `amount` in cash, or is bankrupt."""
    if player.cash >= amount:
        return
    previous = game_state.turn_values.sub_turn
    game_state.turn_values.sub_turn = SubTurn(player.id, amount)
    context.notify(Event.TURN_VALUES_UPDATED)
    context.notify(Event.COLLECTIONS)
    if previous is not None:
        game_state.turn_values.sub_turn = previous


def charge(
    context: Context,
    game_state: GameState,
    player: Player,
    amount: float,
    creditor: Optional[Player] = None,
) -> float:
    """
    Charge `player` an amount owed to the bank, or to `creditor`.

    A player who went bankrupt over the charge pays nothing to the bank
    and whatever cash is left to a creditor.

    Returns:
        The amount actually paid.
    """
    collect(context, game_state, player, amount)
    if player.bankrupt:
        if creditor is None:
            return 0
        amount = min(amount, max(player.cash, 0))
        if amount <= 0:
            return 0

    if creditor is None:
        wealth.decrement(player, amount)
    else:
        wealth.exchange(player, creditor, amount)
    return amount


# --- COLLECTIONS -----------------------------------------------------------

def resolve_collections(context: Context, game_state: GameState, payload=None) -> None:
    sub_turn = game_state.turn_values.sub_turn
    if sub_turn is None or sub_turn.player_id is None or sub_turn.charge is None:
        return

    player = game_state.get_player(sub_turn.player_id)
    amount = sub_turn.charge
    while player.cash < amount and not player.bankrupt:
        liquidity = wealth.calculate_liquidity(
            game_state, properties.get_player_properties(game_state, player), player
        )
        if liquidity < amount:
            logger.info(f"{player.name} cannot raise {amount} (liquidity {liquidity})")
            context.notify(Event.BANKRUPTCY)
            break
        context.ui.player_short_on_funds(player.cash, amount)
        context.notify(Event.LIQUIDATION)


def close_sub_turn(context: Context, game_state: GameState, payload=None) -> None:
    game_state.turn_values.sub_turn = None
    context.notify(Event.TURN_VALUES_UPDATED)


# --- LIQUIDATION -----------------------------------------------------------

def offer_liquidation(context: Context, game_state: GameState, payload=None) -> None:
    action = player_actions.prompt(
        context.ui, LIQUIDATION_ACTIONS, "How would you like to raise the funds? "
    )
    if action is None:
        context.ui.unknown_action()
        context.notify(Event.LIQUIDATION)
    elif action != properties.CANCEL:
        context.notify(action)


# --- BANKRUPTCY ------------------------------------------------------------

def announce_loss(context: Context, game_state: GameState, payload=None) -> None:
    context.ui.player_lost(game_state.acting_player)


def forfeit_cards(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.acting_player
    for card in player.cards:
        game_state.decks[card.deck].discard(card)
    player.cards = []


def liquidate_holdings(context: Context, game_state: GameState, payload=None) -> None:
    properties.liquidate(game_state, game_state.acting_player)


def declare_bankrupt(context: Context, game_state: GameState, payload=None) -> None:
    player = game_state.acting_player
    player.bankrupt = True
    logger.info(f"{player.name} is bankrupt")
    if len(game_state.active_players) <= 1:
        game_state.game_over = True


def auction_estate(context: Context, game_state: GameState, payload=None) -> None:
    """Auction every property of the bankrupt player; unsold ones return to the bank."""
    if game_state.game_over:
        return
    player = game_state.acting_player
    for prop in properties.get_player_properties(game_state, player):
        context.notify(Event.AUCTION, prop)
        if prop.owned_by == player.id:
            prop.owned_by = UNOWNED
            prop.mortgaged = False
    player.assets = 0


def end_bankrupt_turn(context: Context, game_state: GameState, payload=None) -> None:
    if game_state.game_over:
        context.notify(Event.END_GAME)
    elif game_state.acting_player is game_state.current_player:
        context.notify(Event.END_TURN)


RULES = {
    Event.COLLECTIONS: [resolve_collections, close_sub_turn],
    Event.LIQUIDATION: [offer_liquidation],
    Event.BANKRUPTCY: [
        announce_loss,
        forfeit_cards,
        liquidate_holdings,
        declare_bankrupt,
        auction_estate,
        end_bankrupt_turn,
    ],
}
