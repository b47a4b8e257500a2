"""
Property management: lookups, rent, mortgages and buildings.

All functions are stateless; they read and mutate the `GameState` and
`Property` objects they are given. Mutating operations validate their
target against the matching eligibility query and return False without
touching anything when the target is not eligible.
"""

from __future__ import annotations

import logging
from itertools import groupby
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from landlord import wealth
from landlord.exceptions import InvalidActionError, PropertyNotFoundError
from landlord.models import (
    NON_BUILDABLE_GROUPS,
    RAILROAD,
    UNOWNED,
    UTILITIES,
    Player,
    Property,
)

if TYPE_CHECKING:
    from landlord.state import GameState

logger = logging.getLogger(__name__)

MORTGAGE = "MORTGAGE"
UNMORTGAGE = "UNMORTGAGE"
RENOVATE = "RENOVATE"
DEMOLISH = "DEMOLISH"
CANCEL = "CANCEL"


# --- Lookups ---------------------------------------------------------------

def get_properties(game_state: GameState) -> List[Property]:
    return game_state.property_config.properties


def find_property(game_state: GameState, property_id: str) -> Property:
    for prop in get_properties(game_state):
        if prop.id == property_id:
            return prop
    raise PropertyNotFoundError(f"No property with id '{property_id}'")


def find_by_position(game_state: GameState, position: int) -> Property:
    position %= game_state.board_length
    for prop in get_properties(game_state):
        if prop.position == position:
            return prop
    raise PropertyNotFoundError(f"No property at position {position}")


def get_properties_in_group(game_state: GameState, group: str) -> List[Property]:
    return [p for p in get_properties(game_state) if p.group == group]


def get_player_properties(game_state: GameState, player: Player) -> List[Property]:
    return [p for p in get_properties(game_state) if p.owned_by == player.id]


def find_nearest(game_state: GameState, group: str, position: int) -> Property:
    """First property of `group` strictly ahead of `position`, wrapping past Go."""
    in_group = sorted(get_properties_in_group(game_state, group), key=lambda p: p.position)
    if not in_group:
        raise PropertyNotFoundError(f"No properties in group '{group}'")
    for prop in in_group:
        if prop.position > position:
            return prop
    return in_group[0]


def has_monopoly(game_state: GameState, group: str, player_id: int) -> bool:
    """Check if `player_id` owns every property in `group`."""
    in_group = get_properties_in_group(game_state, group)
    return bool(in_group) and all(p.owned_by == player_id for p in in_group)


def get_constructed_houses(game_state: GameState, player: Player) -> int:
    threshold = game_state.property_config.hotel_threshold
    return sum(
        p.buildings for p in get_player_properties(game_state, player) if p.buildings <= threshold
    )


def get_constructed_hotels(game_state: GameState, player: Player) -> int:
    threshold = game_state.property_config.hotel_threshold
    return sum(1 for p in get_player_properties(game_state, player) if p.buildings > threshold)


# --- Values ----------------------------------------------------------------

def mortgage_value(game_state: GameState, prop: Property) -> float:
    return prop.price / game_state.property_config.mortgage_value_multiplier


def mortgage_interest(game_state: GameState, prop: Property) -> float:
    return mortgage_value(game_state, prop) * game_state.property_config.interest_rate


def unmortgage_cost(game_state: GameState, prop: Property) -> float:
    return mortgage_value(game_state, prop) + mortgage_interest(game_state, prop)


def asset_value(game_state: GameState, prop: Property) -> float:
    """Capital a property represents for its owner, excluding buildings."""
    if prop.mortgaged:
        return prop.price - mortgage_value(game_state, prop)
    return prop.price


def calculate_rent(
    game_state: GameState, prop: Property, rent_multiplier: Optional[int] = None
) -> float:
    """
    Rent owed by a player landing on `prop`.

    Utilities charge the dice total times a multiplier (the card's, else
    double when both are owned, else single). Railroads follow the
    schedule for the number owned. Ordinary properties use the building
    schedule, or double base rent on an unbuilt monopoly.
    """
    config = game_state.property_config
    owner_id = prop.owned_by

    if prop.group == UTILITIES:
        if rent_multiplier is None:
            rent_multiplier = (
                config.utility_double_multiplier
                if has_monopoly(game_state, prop.group, owner_id)
                else config.utility_single_multiplier
            )
        return game_state.turn_values.roll_total * rent_multiplier

    if prop.group == RAILROAD:
        owned = sum(1 for p in get_properties_in_group(game_state, RAILROAD) if p.owned_by == owner_id)
        rent = config.railroad_rents[min(owned, len(config.railroad_rents)) - 1]
        return rent * (rent_multiplier or 1)

    if prop.buildings > 0:
        return prop.multiplied_rent[prop.buildings - 1]
    if has_monopoly(game_state, prop.group, owner_id):
        return prop.rent * 2
    return prop.rent


# --- Ownership and mortgages -----------------------------------------------

def change_owner(prop: Property, player_id: int) -> None:
    if not prop.is_ownable:
        raise InvalidActionError(f"'{prop.name}' cannot be owned")
    prop.owned_by = player_id


def _owner(game_state: GameState, prop: Property) -> Player:
    return game_state.get_player(prop.owned_by)


def _group_has_buildings(game_state: GameState, prop: Property) -> bool:
    return any(p.buildings > 0 for p in get_properties_in_group(game_state, prop.group))


def get_mortgageable_properties(game_state: GameState, player: Player) -> List[Property]:
    """Unmortgaged properties with no buildings anywhere in their group."""
    return [
        p
        for p in get_player_properties(game_state, player)
        if not p.mortgaged and not _group_has_buildings(game_state, p)
    ]


def get_unmortgageable_properties(game_state: GameState, player: Player) -> List[Property]:
    """Mortgaged properties the player can afford to lift the mortgage on."""
    return [
        p
        for p in get_player_properties(game_state, player)
        if p.mortgaged and unmortgage_cost(game_state, p) <= player.cash
    ]


def mortgage(game_state: GameState, prop: Property) -> bool:
    if not prop.is_owned:
        return False
    player = _owner(game_state, prop)
    if prop not in get_mortgageable_properties(game_state, player):
        return False
    prop.mortgaged = True
    wealth.sell_asset(player, mortgage_value(game_state, prop))
    logger.info(f"{player.name} mortgaged {prop.name}")
    return True


def unmortgage(game_state: GameState, prop: Property, bypass_interest: bool = False) -> bool:
    """
    Lift the mortgage on `prop`, charging its owner the mortgage value
    plus interest. `bypass_interest` waives the interest.
    """
    if not prop.is_owned or not prop.mortgaged:
        return False
    player = _owner(game_state, prop)
    value = mortgage_value(game_state, prop)
    cost = value if bypass_interest else unmortgage_cost(game_state, prop)
    if cost > player.cash:
        return False
    prop.mortgaged = False
    wealth.decrement(player, cost - value)
    wealth.buy_asset(player, value)
    logger.info(f"{player.name} unmortgaged {prop.name}")
    return True


# --- Buildings -------------------------------------------------------------

def _groups(properties: List[Property]) -> Dict[str, List[Property]]:
    ordered = sorted(properties, key=lambda p: (p.group, p.position))
    return {group: list(members) for group, members in groupby(ordered, key=lambda p: p.group)}


def get_reno_properties(game_state: GameState, player: Player) -> List[Property]:
    """
    Properties `player` may add a building to.

    The group must be a buildable monopoly and the property must be at the
    group's lowest building level, unmortgaged, below the cap, affordable
    and backed by the right pool (houses below the hotel threshold, a
    hotel at it).
    """
    config = game_state.property_config
    if config.houses + config.hotels == 0:
        return []

    eligible = []
    for group, members in _groups(get_player_properties(game_state, player)).items():
        if group in NON_BUILDABLE_GROUPS or not has_monopoly(game_state, group, player.id):
            continue
        lowest = min(p.buildings for p in members)
        for prop in members:
            if prop.buildings != lowest or prop.mortgaged:
                continue
            if prop.buildings >= config.max_buildings:
                continue
            if prop.buildings < config.hotel_threshold and config.houses == 0:
                continue
            if prop.buildings >= config.hotel_threshold and config.hotels == 0:
                continue
            if prop.house_cost > player.cash:
                continue
            eligible.append(prop)
    return eligible


def get_demo_properties(game_state: GameState, player: Player) -> List[Property]:
    """Built properties at their group's highest building level."""
    eligible = []
    built = [p for p in get_player_properties(game_state, player) if p.buildings > 0]
    for members in _groups(built).values():
        highest = max(p.buildings for p in members)
        eligible.extend(p for p in members if p.buildings == highest)
    return eligible


def renovate(game_state: GameState, prop: Property) -> bool:
    """Add one building, drawing a house or a hotel from the supply."""
    if not prop.is_owned:
        return False
    player = _owner(game_state, prop)
    if prop not in get_reno_properties(game_state, player):
        return False
    config = game_state.property_config
    if prop.buildings < config.hotel_threshold:
        config.houses -= 1
    else:
        config.hotels -= 1
    prop.buildings += 1
    wealth.buy_asset(player, prop.house_cost)
    logger.info(f"{player.name} built on {prop.name} ({prop.buildings} buildings)")
    return True


def demolish(game_state: GameState, prop: Property) -> bool:
    """Remove one building, returning it to the supply for half its cost."""
    if not prop.is_owned:
        return False
    player = _owner(game_state, prop)
    if prop not in get_demo_properties(game_state, player):
        return False
    config = game_state.property_config
    if prop.buildings > config.hotel_threshold:
        config.hotels += 1
    else:
        config.houses += 1
    prop.buildings -= 1
    wealth.sell_asset(player, prop.house_cost / 2, prop.house_cost)
    logger.info(f"{player.name} demolished a building on {prop.name} ({prop.buildings} left)")
    return True


def liquidate(game_state: GameState, player: Player) -> None:
    """Sell every building the player owns, then mortgage everything."""
    demo = get_demo_properties(game_state, player)
    while demo:
        for prop in demo:
            demolish(game_state, prop)
        demo = get_demo_properties(game_state, player)
    for prop in get_mortgageable_properties(game_state, player):
        mortgage(game_state, prop)


# --- Menus -----------------------------------------------------------------

def get_available_management_actions(game_state: GameState, player: Player) -> List[str]:
    actions = []
    if get_mortgageable_properties(game_state, player):
        actions.append(MORTGAGE)
    if get_unmortgageable_properties(game_state, player):
        actions.append(UNMORTGAGE)
    if get_reno_properties(game_state, player):
        actions.append(RENOVATE)
    if get_demo_properties(game_state, player):
        actions.append(DEMOLISH)
    actions.append(CANCEL)
    return actions


def get_player_properties_for_trade(
    game_state: GameState, player: Player
) -> Tuple[List[Property], List[Property]]:
    """Split a player's properties into (tradeable, untradeable).

    Properties in a group that still carries buildings cannot be traded.
    """
    tradeable, untradeable = [], []
    for prop in get_player_properties(game_state, player):
        if _group_has_buildings(game_state, prop):
            untradeable.append(prop)
        else:
            tradeable.append(prop)
    return tradeable, untradeable
