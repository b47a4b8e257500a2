"""
Runtime entities: players, board tiles and cards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

UNOWNED = -1
NOT_JAILED = -1

RAILROAD = "Railroad"
UTILITIES = "Utilities"
SPECIAL = "Special"
NON_BUILDABLE_GROUPS = (RAILROAD, UTILITIES, SPECIAL)


class DeckType(str, Enum):
    """The two card decks."""

    CHANCE = "chance"
    COMMUNITY_CHEST = "communitychest"


class CardAction(str, Enum):
    """Effects a card can have on the player who draws it."""

    MOVE = "move"
    MOVE_NEAREST = "movenearest"
    ADD_FUNDS = "addfunds"
    REMOVE_FUNDS = "removefunds"
    JAIL = "jail"
    PROPERTY_CHARGES = "propertycharges"
    ADD_FUNDS_FROM_PLAYERS = "addfundsfromplayers"
    REMOVE_FUNDS_TO_PLAYERS = "removefundstoplayers"
    GET_OUT_OF_JAIL_FREE = "getoutofjailfree"


@dataclass(eq=False)
class Card:
    """A Chance or Community Chest card."""

    title: str
    action: CardAction
    deck: DeckType
    tile_id: Optional[str] = None
    group_id: Optional[str] = None
    count: Optional[int] = None
    amount: float = 0
    building_charge: float = 0
    hotel_charge: float = 0
    rent_multiplier: Optional[int] = None

    def __repr__(self) -> str:
        return f"Card('{self.title}')"


@dataclass(eq=False)
class Property:
    """
    A board tile.

    Special tiles (Go, Jail, taxes, card tiles...) only use id, name,
    group and position; the economic fields stay at their defaults.
    """

    id: str
    name: str
    group: str
    position: int
    price: int = 0
    rent: int = 0
    multiplied_rent: List[int] = field(default_factory=list)
    house_cost: int = 0
    owned_by: int = UNOWNED
    buildings: int = 0
    mortgaged: bool = False

    @property
    def is_ownable(self) -> bool:
        return self.group != SPECIAL

    @property
    def is_owned(self) -> bool:
        return self.owned_by != UNOWNED

    def __repr__(self) -> str:
        return (
            f"Property(id='{self.id}', owned_by={self.owned_by}, "
            f"buildings={self.buildings}, mortgaged={self.mortgaged})"
        )


@dataclass(eq=False)
class Player:
    """The complete state of a player in the game."""

    id: int
    name: str
    cash: float = 1500
    position: int = 0
    assets: float = 0
    jailed: int = NOT_JAILED
    bankrupt: bool = False
    cards: List[Card] = field(default_factory=list)

    @property
    def net_worth(self) -> float:
        return self.cash + self.assets

    @property
    def in_jail(self) -> bool:
        return self.jailed >= 0

    def __repr__(self) -> str:
        return (
            f"Player(id={self.id}, name='{self.name}', cash={self.cash}, "
            f"position={self.position}, bankrupt={self.bankrupt})"
        )
