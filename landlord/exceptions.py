"""
Exception hierarchy for the landlord engine.

Domain-level failures (bad input, insufficient funds) are resolved by the
rules engine through further events and never raise. These exceptions
cover structural problems: malformed configuration, lookups of things that
do not exist, and direct misuse of the services.
"""


class LandlordError(Exception):
    """Base exception for all engine errors."""


class ConfigurationError(LandlordError):
    """Board, card or settings data is malformed."""


class PropertyNotFoundError(LandlordError):
    """No property with the requested id or position exists."""


class PlayerNotFoundError(LandlordError):
    """No player with the requested id takes part in the game."""


class UnknownEventError(LandlordError):
    """An event was emitted that has no registered handlers."""


class EmptyDeckError(LandlordError):
    """A card was drawn from a pile with no cards left."""


class InvalidActionError(LandlordError):
    """Action is not legal in the current state."""
