"""
Cash and asset bookkeeping.

`cash` is spendable money. `assets` mirrors the capital a player has tied
up in property and buildings; it only feeds net worth and the variable
income tax and can never be spent directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

from landlord.models import Player, Property

if TYPE_CHECKING:
    from landlord.state import GameState


def increment(player: Player, amount: float) -> None:
    player.cash += amount


def decrement(player: Player, amount: float) -> None:
    player.cash -= amount


def buy_asset(player: Player, amount: float, asset_value: Optional[float] = None) -> None:
    """
    Pay `amount` in cash for something worth `asset_value`.

    The asset value defaults to the amount paid.
    """
    player.cash -= amount
    player.assets += amount if asset_value is None else asset_value


def sell_asset(player: Player, amount: float, asset_value: Optional[float] = None) -> None:
    """Receive `amount` in cash for giving up something worth `asset_value`."""
    player.cash += amount
    player.assets -= amount if asset_value is None else asset_value


def exchange(payer: Player, payee: Player, amount: float) -> None:
    """Move cash from one player to another."""
    payer.cash -= amount
    payee.cash += amount


def calculate_net_worth(player: Player) -> float:
    return player.cash + player.assets


def calculate_liquidity(
    game_state: GameState, properties: Iterable[Property], player: Player
) -> float:
    """
    Cash the player could raise without trading.

    Counts cash, plus the mortgage value of every unmortgaged property in
    `properties` owned by the player, plus half the house cost of each
    building on them. Mortgaged properties are already monetized.
    """
    multiplier = game_state.property_config.mortgage_value_multiplier
    liquidity = player.cash
    for prop in properties:
        if prop.owned_by != player.id or prop.mortgaged:
            continue
        liquidity += prop.price / multiplier
        liquidity += prop.buildings * prop.house_cost / 2
    return liquidity
