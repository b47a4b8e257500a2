"""
Static game configuration: board tiles, card decks and rule constants.

Board and card data are validated with pydantic when loaded. Any problem
with the data is fatal and raised as `ConfigurationError` at startup,
before a single event is emitted.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from landlord.exceptions import ConfigurationError
from landlord.models import (
    NON_BUILDABLE_GROUPS,
    SPECIAL,
    Card,
    CardAction,
    DeckType,
    Property,
)
from landlord.settings import EngineSettings, get_engine_settings

logger = logging.getLogger(__name__)

REQUIRED_TILES = ("go", "jail")


class TileSpec(BaseModel):
    """Schema of a single board tile."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    group: str = Field(min_length=1)
    position: int = Field(ge=0)
    price: int = Field(default=0, ge=0)
    rent: int = Field(default=0, ge=0)
    multiplied_rent: List[int] = Field(default_factory=list)
    house_cost: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_economics(self) -> TileSpec:
        if self.group == SPECIAL:
            return self
        if self.price <= 0:
            raise ValueError(f"ownable tile '{self.id}' needs a positive price")
        if self.group not in NON_BUILDABLE_GROUPS:
            if len(self.multiplied_rent) != 5:
                raise ValueError(f"tile '{self.id}' needs a 5-entry multiplied_rent schedule")
            if self.house_cost <= 0:
                raise ValueError(f"tile '{self.id}' needs a positive house_cost")
        return self


class CardSpec(BaseModel):
    """Schema of a single card."""

    title: str = Field(min_length=1)
    action: CardAction
    tile_id: Optional[str] = None
    group_id: Optional[str] = None
    count: Optional[int] = None
    amount: float = Field(default=0, ge=0)
    building_charge: float = Field(default=0, ge=0)
    hotel_charge: float = Field(default=0, ge=0)
    rent_multiplier: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def check_parameters(self) -> CardSpec:
        if self.action == CardAction.MOVE and self.tile_id is None and self.count is None:
            raise ValueError(f"move card '{self.title}' needs a tile_id or a count")
        if self.action == CardAction.MOVE_NEAREST and self.group_id is None:
            raise ValueError(f"movenearest card '{self.title}' needs a group_id")
        return self


class BoardSpec(BaseModel):
    """Schema of a complete board definition."""

    tiles: List[TileSpec]
    chance: List[CardSpec]
    community_chest: List[CardSpec]

    @model_validator(mode="after")
    def check_board(self) -> BoardSpec:
        ids = [t.id for t in self.tiles]
        if len(set(ids)) != len(ids):
            raise ValueError("tile ids must be unique")
        positions = sorted(t.position for t in self.tiles)
        if positions != list(range(len(self.tiles))):
            raise ValueError("tile positions must cover 0..n-1 exactly once")
        for required in REQUIRED_TILES:
            if required not in ids:
                raise ValueError(f"board is missing the '{required}' tile")

        groups = {t.group for t in self.tiles}
        for card in self.chance + self.community_chest:
            if card.tile_id is not None and card.tile_id not in ids:
                raise ValueError(f"card '{card.title}' targets unknown tile '{card.tile_id}'")
            if card.group_id is not None and card.group_id not in groups:
                raise ValueError(f"card '{card.title}' targets unknown group '{card.group_id}'")
        return self


@dataclass
class PropertyConfig:
    """Board tiles plus the process-wide building and mortgage rules."""

    properties: List[Property]
    houses: int = 32
    hotels: int = 12
    hotel_threshold: int = 4
    max_buildings: int = 5
    mortgage_value_multiplier: float = 2
    interest_rate: float = 0.1
    railroad_rents: List[int] = field(default_factory=lambda: [25, 50, 100, 200])
    utility_single_multiplier: int = 4
    utility_double_multiplier: int = 10
    minimum_property_price: int = 10


@dataclass
class GameConfig:
    """Everything a game session needs besides its players."""

    property_config: PropertyConfig
    chance_cards: List[Card] = field(default_factory=list)
    community_chest_cards: List[Card] = field(default_factory=list)
    starting_cash: int = 1500
    pass_go_amount: int = 200
    fine_amount: int = 50
    income_tax_amount: int = 200
    income_tax_rate: float = 0.1
    luxury_tax_amount: int = 75
    seed: Optional[int] = None

    @property
    def board_length(self) -> int:
        return len(self.property_config.properties)


def read_board_spec(path: Optional[Union[str, Path]] = None) -> BoardSpec:
    """
    Read and validate a board definition.

    Args:
        path: JSON file to read. Defaults to the bundled standard board.

    Raises:
        ConfigurationError: if the file cannot be read or fails validation.
    """
    try:
        if path is None:
            raw = resources.files("landlord").joinpath("data/standard_board.json").read_text(encoding="utf-8")
        else:
            raw = Path(path).read_text(encoding="utf-8")
        return BoardSpec.model_validate(json.loads(raw))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Could not read board definition: {exc}") from exc
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid board definition:\n{exc}") from exc


def _build_cards(specs: List[CardSpec], deck: DeckType) -> List[Card]:
    return [Card(deck=deck, **spec.model_dump()) for spec in specs]


def build_config(board: BoardSpec, settings: Optional[EngineSettings] = None) -> GameConfig:
    """Turn a validated board definition into fresh runtime objects."""
    settings = settings or get_engine_settings()
    properties = [
        Property(**tile.model_dump())
        for tile in sorted(board.tiles, key=lambda t: t.position)
    ]
    property_config = PropertyConfig(
        properties=properties,
        houses=settings.houses,
        hotels=settings.hotels,
        hotel_threshold=settings.hotel_threshold,
        max_buildings=settings.max_buildings,
        mortgage_value_multiplier=settings.mortgage_value_multiplier,
        interest_rate=settings.interest_rate,
        railroad_rents=list(settings.railroad_rents),
        utility_single_multiplier=settings.utility_single_multiplier,
        utility_double_multiplier=settings.utility_double_multiplier,
        minimum_property_price=settings.minimum_property_price,
    )
    return GameConfig(
        property_config=property_config,
        chance_cards=_build_cards(board.chance, DeckType.CHANCE),
        community_chest_cards=_build_cards(board.community_chest, DeckType.COMMUNITY_CHEST),
        starting_cash=settings.starting_cash,
        pass_go_amount=settings.pass_go_amount,
        fine_amount=settings.fine_amount,
        income_tax_amount=settings.income_tax_amount,
        income_tax_rate=settings.income_tax_rate,
        luxury_tax_amount=settings.luxury_tax_amount,
        seed=settings.seed,
    )


def load_config(
    settings: Optional[EngineSettings] = None,
    path: Optional[Union[str, Path]] = None,
) -> GameConfig:
    """Load, validate and build the configuration for a new game."""
    config = build_config(read_board_spec(path), settings)
    logger.info(
        f"Loaded board with {config.board_length} tiles, "
        f"{len(config.chance_cards)} chance and "
        f"{len(config.community_chest_cards)} community chest cards"
    )
    return config
