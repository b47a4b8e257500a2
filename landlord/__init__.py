"""
landlord: an event-driven rules engine for a property-trading board game.
"""

from landlord.events import Context, Event, EventBus
from landlord.game import create_game, register_rules, start_game
from landlord.state import GameState
from landlord.ui import ConsoleUI, UserInterface

__all__ = [
    "Context",
    "Event",
    "EventBus",
    "GameState",
    "create_game",
    "register_rules",
    "start_game",
    "ConsoleUI",
    "UserInterface",
]
