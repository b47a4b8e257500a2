"""
Interactive trading between two players.

A trade is negotiated in rounds. The acting side edits what each side
gives, then confirms to hand the offer over; confirming an offer that
came back unchanged accepts it, and cancelling an offer hands it back
to the source as a draft. `execute_trade` applies an accepted trade to
the game.
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple, Union

from landlord import properties, wealth
from landlord.models import Card, Player, Property

if TYPE_CHECKING:
    from landlord.state import GameState
    from landlord.ui import UserInterface

logger = logging.getLogger(__name__)

Asset = Union[Property, Card, float]

NO_OFFERED_ASSETS_IN_TRADE = "You must give something in the trade."
NO_REQUESTED_ASSETS_IN_TRADE = "You must ask for something in the trade."
BANKRUPTCY_IN_TRADE = "A player could not afford the interest on the mortgaged properties received."


class TradeStatus(str, Enum):
    NEW = "new"
    OFFER = "offer"
    ACCEPT = "accept"
    CANCEL = "cancel"


@dataclass
class TradeDetails:
    """Negotiation status and, per player id, the assets that player gives."""

    status: TradeStatus = TradeStatus.NEW
    assets: Dict[int, List[Asset]] = field(default_factory=dict)

    def gives(self, player: Player) -> List[Asset]:
        return self.assets.setdefault(player.id, [])

    def fingerprint(self) -> Dict[int, Tuple]:
        """Identity of the assets on each side, for change detection."""
        return {
            player_id: tuple(a if is_cash(a) else id(a) for a in assets)
            for player_id, assets in self.assets.items()
        }


def is_cash(asset: Asset) -> bool:
    return isinstance(asset, (int, float)) and not isinstance(asset, bool)


def cash_in(assets: List[Asset]) -> float:
    return sum(a for a in assets if is_cash(a))


def properties_in(assets: List[Asset]) -> List[Property]:
    return [a for a in assets if isinstance(a, Property)]


def cards_in(assets: List[Asset]) -> List[Card]:
    return [a for a in assets if isinstance(a, Card)]


# --- Negotiation -----------------------------------------------------------

def trade(ui: UserInterface, game_state: GameState) -> Optional[TradeDetails]:
    """
    Negotiate a trade for the acting player.

    Returns:
        The accepted trade, or None if the player backed out of choosing
        a trading partner.
    """
    source = game_state.acting_player
    participants = [p for p in game_state.players if not p.bankrupt]
    partners = [p for p in participants if p.id != source.id]

    ui.show_player_trade_table(participants)
    details = TradeDetails()

    while details.status == TradeStatus.NEW:
        selection = ui.prompt_select(
            [p.name for p in partners], "Which player would you like to trade with?", partners
        )
        if selection == -1:
            return None

        partner = partners[selection]
        details = TradeDetails(assets={source.id: [], partner.id: []})
        acting, target = source, partner

        while True:
            ui.player_trade_action(acting)
            outcome = determine_trade_assets(ui, game_state, acting, target, details)

            if outcome.status == TradeStatus.CANCEL:
                if acting is source:
                    # back to choosing a partner
                    details.status = TradeStatus.NEW
                    break
                # a refused offer goes back to the source as an unsent draft
                details = TradeDetails(assets=details.assets)
            elif outcome.status == TradeStatus.OFFER:
                details = outcome
            elif outcome.status == TradeStatus.ACCEPT:
                details = outcome
                break

            acting, target = target, acting

    logger.info(f"Trade accepted between players {list(details.assets)}")
    return details


def determine_trade_assets(
    ui: UserInterface,
    game_state: GameState,
    acting: Player,
    target: Player,
    details: TradeDetails,
) -> TradeDetails:
    """Let the acting player edit, confirm or cancel a working copy of the trade."""
    working = copy.copy(details)
    working.assets = {player_id: list(assets) for player_id, assets in details.assets.items()}

    ui.trade_introduction()
    ui.display_trade_details(acting, target, working)

    ui.prompt_cl_loop(
        {
            "help": lambda: ui.trade_instructions(),
            "info": lambda: info(ui, acting, target, working),
            "request": lambda: request(ui, game_state, target, acting, details, working),
            "offer": lambda: request(ui, game_state, acting, target, details, working),
            "confirm": lambda: confirm(ui, game_state, acting, target, working),
            "cancel": lambda: cancel(working),
        }
    )
    return working


def info(ui: UserInterface, acting: Player, target: Player, details: TradeDetails) -> None:
    ui.show_player_trade_table([acting, target])
    ui.display_trade_details(acting, target, details)


def cancel(details: TradeDetails) -> bool:
    details.status = TradeStatus.CANCEL
    return True


def request(
    ui: UserInterface,
    game_state: GameState,
    giver: Player,
    receiver: Player,
    original: TradeDetails,
    working: TradeDetails,
) -> None:
    """
    Toggle the assets `giver` hands over in `working`.

    Properties and cards are toggled in and out; cash is a single amount
    and setting it clears any cash on the receiver's side. Any change
    resets the trade status to NEW.
    """
    tradeable, _ = properties.get_player_properties_for_trade(game_state, giver)
    current = working.gives(giver)
    chosen_cash = cash_in(current)

    options: List[Asset] = [*tradeable, *giver.cards]
    selected = [any(a is option for a in current) for option in options]
    cash_selected = chosen_cash > 0

    while True:
        labels = [
            f"{'[x]' if picked else '[ ]'} {_describe(ui, option)}"
            for option, picked in zip(options, selected)
        ]
        offers_cash = giver.cash > 0 or cash_selected
        if offers_cash:
            labels.append(f"{'[x]' if cash_selected else '[ ]'} Cash: ${chosen_cash}/${giver.cash}")
        choice = ui.prompt_select(labels, "Select the asset you would like to include in the trade.")
        if choice == -1:
            break
        if choice < len(options):
            selected[choice] = not selected[choice]
            continue
        if not offers_cash or choice > len(options):
            continue

        chosen_cash = 0 if cash_selected else _prompt_cash(ui, giver)
        cash_selected = chosen_cash > 0

    new_assets: List[Asset] = [option for option, picked in zip(options, selected) if picked]
    if cash_selected and chosen_cash > 0:
        new_assets.append(chosen_cash)
        working.assets[receiver.id] = [a for a in working.gives(receiver) if not is_cash(a)]
    working.assets[giver.id] = new_assets

    if working.fingerprint() != original.fingerprint():
        working.status = TradeStatus.NEW


def _prompt_cash(ui: UserInterface, giver: Player) -> float:
    """Ask for an amount up to the giver's cash; a blank or non-positive answer withdraws the cash."""
    while True:
        amount = ui.prompt_number(f"How much cash? Maximum available is ${giver.cash}: ")
        if math.isnan(amount) or amount <= 0:
            return 0
        if amount <= giver.cash:
            return amount


def _describe(ui: UserInterface, asset: Asset) -> str:
    if isinstance(asset, Property):
        return ui.map_property_short_display(asset)
    return f"Card: {asset.title}"


def validate(
    game_state: GameState, acting: Player, target: Player, details: TradeDetails
) -> List[str]:
    """Reasons the trade cannot be confirmed, if any."""
    errors = []
    if not details.gives(acting):
        errors.append(NO_OFFERED_ASSETS_IN_TRADE)
    if not details.gives(target):
        errors.append(NO_REQUESTED_ASSETS_IN_TRADE)

    traded = properties_in(details.gives(acting)) + properties_in(details.gives(target))
    if any(p.mortgaged for p in traded):
        if not (
            _can_afford_interest(game_state, acting, details.gives(acting), details.gives(target))
            and _can_afford_interest(game_state, target, details.gives(target), details.gives(acting))
        ):
            errors.append(BANKRUPTCY_IN_TRADE)
    return errors


def _can_afford_interest(
    game_state: GameState, player: Player, giving: List[Asset], receiving: List[Asset]
) -> bool:
    given = properties_in(giving)
    kept = [p for p in properties.get_player_properties(game_state, player) if p not in given]
    received = properties_in(receiving)

    liquidity = wealth.calculate_liquidity(game_state, kept, player)
    liquidity += sum(properties.mortgage_value(game_state, p) for p in received if not p.mortgaged)
    liquidity += cash_in(receiving) - cash_in(giving)

    interest = sum(properties.mortgage_interest(game_state, p) for p in received if p.mortgaged)
    return liquidity >= interest


def confirm(
    ui: UserInterface,
    game_state: GameState,
    acting: Player,
    target: Player,
    details: TradeDetails,
) -> bool:
    ui.display_trade_details(acting, target, details)

    errors = validate(game_state, acting, target, details)
    if errors:
        ui.trade_error(errors)
        return False

    if ui.prompt_confirm("Confirm trade?"):
        details.status = TradeStatus.ACCEPT if details.status == TradeStatus.OFFER else TradeStatus.OFFER
        return True
    return False


# --- Execution -------------------------------------------------------------

def execute_trade(
    game_state: GameState, details: TradeDetails
) -> List[Tuple[Player, Property]]:
    """
    Apply an accepted two-party trade.

    Cash flows, cards change hands and properties change owner. Each
    side's asset total moves by the asset value of the properties.

    Returns:
        (new owner, property) for every mortgaged property that changed
        hands, so the caller can settle the mortgage interest.
    """
    first_id, second_id = list(details.assets)
    first = game_state.get_player(first_id)
    second = game_state.get_player(second_id)

    received_mortgages = []
    for giver, receiver in ((first, second), (second, first)):
        assets = details.gives(giver)
        cash = cash_in(assets)
        if cash:
            wealth.exchange(giver, receiver, cash)
        for card in cards_in(assets):
            giver.cards.remove(card)
            receiver.cards.append(card)
        for prop in properties_in(assets):
            value = properties.asset_value(game_state, prop)
            giver.assets -= value
            receiver.assets += value
            properties.change_owner(prop, receiver.id)
            if prop.mortgaged:
                received_mortgages.append((receiver, prop))

    logger.info(f"Trade executed between {first.name} and {second.name}")
    return received_mortgages
