"""
Engine configuration using pydantic-settings.

Every economic constant of the rule set can be overridden from the
environment (prefix ``LANDLORD_``) or a ``.env`` file, e.g.::

    LANDLORD_STARTING_CASH=2000
    LANDLORD_PASS_GO_AMOUNT=400
    LANDLORD_SEED=7

Board tiles and card decks are static data and live in `landlord.config`.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """
    Rule constants and runtime options for a game session.

    Environment variables (prefix: LANDLORD_):
        LANDLORD_STARTING_CASH          - Cash each player starts with (default: 1500)
        LANDLORD_PASS_GO_AMOUNT         - Salary for passing Go (default: 200)
        LANDLORD_FINE_AMOUNT            - Fine to leave jail (default: 50)
        LANDLORD_INCOME_TAX_AMOUNT      - Fixed income tax (default: 200)
        LANDLORD_INCOME_TAX_RATE        - Variable income tax rate (default: 0.1)
        LANDLORD_LUXURY_TAX_AMOUNT      - Luxury tax (default: 75)
        LANDLORD_HOUSES                 - Global house supply (default: 32)
        LANDLORD_HOTELS                 - Global hotel supply (default: 12)
        LANDLORD_SEED                   - Seed for dice and shuffles (default: random)
        LANDLORD_LOG_LEVEL              - Logging level (default: WARNING)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="LANDLORD_",
    )

    starting_cash: int = Field(default=1500, ge=0, description="Cash each player starts with.")
    pass_go_amount: int = Field(default=200, ge=0, description="Salary collected when passing Go.")
    fine_amount: int = Field(default=50, ge=0, description="Fine paid to leave jail.")
    income_tax_amount: int = Field(default=200, ge=0, description="Fixed income tax option.")
    income_tax_rate: float = Field(
        default=0.1,
        ge=0,
        le=1,
        description="Share of net worth charged by the variable income tax option.",
    )
    luxury_tax_amount: int = Field(default=75, ge=0, description="Luxury tax charge.")

    houses: int = Field(default=32, ge=0, description="Global supply of houses.")
    hotels: int = Field(default=12, ge=0, description="Global supply of hotels.")
    hotel_threshold: int = Field(
        default=4,
        ge=1,
        description="Building count after which the next building is a hotel.",
    )
    max_buildings: int = Field(default=5, ge=1, description="Maximum buildings on one property.")
    mortgage_value_multiplier: float = Field(
        default=2,
        gt=0,
        description="Price divisor giving the mortgage value of a property.",
    )
    interest_rate: float = Field(default=0.1, ge=0, description="Interest charged on unmortgage.")
    railroad_rents: List[int] = Field(
        default=[25, 50, 100, 200],
        description="Railroad rent indexed by the number of railroads owned.",
    )
    utility_single_multiplier: int = Field(default=4, ge=0)
    utility_double_multiplier: int = Field(default=10, ge=0)
    minimum_property_price: int = Field(
        default=10,
        ge=0,
        description="Base cost an auction bid must exceed.",
    )

    seed: Optional[int] = Field(default=None, description="Seed for dice rolls and deck shuffles.")
    log_level: str = Field(default="WARNING", description="Logging level name.")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @field_validator("railroad_rents")
    @classmethod
    def validate_railroad_rents(cls, value: List[int]) -> List[int]:
        if not value:
            raise ValueError("railroad_rents must not be empty")
        return value


@lru_cache
def get_engine_settings() -> EngineSettings:
    """Return cached engine settings."""
    return EngineSettings()
