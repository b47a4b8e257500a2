"""
Bootstrap: build a game session, bind the rules to an event bus and start play.
"""

import functools
import logging
import random
from typing import Dict, List, Optional, Sequence

from landlord.config import GameConfig, load_config
from landlord.events import Context, Event, EventBus, Handler
from landlord.exceptions import ConfigurationError
from landlord.models import Player
from landlord.rules import build_rules
from landlord.settings import EngineSettings
from landlord.state import GameState
from landlord.ui import UserInterface

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2


def create_game(
    names: Sequence[str],
    settings: Optional[EngineSettings] = None,
    config: Optional[GameConfig] = None,
    rng: Optional[random.Random] = None,
) -> GameState:
    """
    Create a fresh game session.

    Args:
        names: Player names in seating order
        settings: Rule constants; defaults to the environment settings
        config: Pre-built configuration; loaded from the standard board if omitted
        rng: Random source for dice and shuffles; seeded from the config if omitted

    Raises:
        ConfigurationError: if fewer than two players are given or the board is invalid
    """
    if len(names) < MIN_PLAYERS:
        raise ConfigurationError(f"A game needs at least {MIN_PLAYERS} players, got {len(names)}")

    config = config or load_config(settings)
    players = [Player(i, name, cash=config.starting_cash) for i, name in enumerate(names)]
    logger.info(f"Created game for {', '.join(names)}")
    return GameState(config, players, rng=rng)


def register_rules(
    bus: EventBus,
    ui: UserInterface,
    game_state: GameState,
    rules: Optional[Dict[Event, List[Handler]]] = None,
) -> Dict[Event, List[Handler]]:
    """Subscribe every handler of `rules` to `bus`, bound to this session."""
    rules = build_rules() if rules is None else rules
    context = Context(notify=bus.emit, ui=ui)
    for event, handlers in rules.items():
        bus.declare(event)
        for handler in handlers:
            bus.subscribe(event, functools.partial(handler, context, game_state))
    return rules


def start_game(
    bus: EventBus,
    ui: UserInterface,
    game_state: GameState,
    rules: Optional[Dict[Event, List[Handler]]] = None,
) -> Dict[Event, List[Handler]]:
    """
    Register the rules and emit START_GAME.

    With an interactive front end this returns when the game is over.
    """
    rules = register_rules(bus, ui, game_state, rules)
    bus.emit(Event.START_GAME)
    return rules
