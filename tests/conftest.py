"""Shared test fixtures for the landlord engine."""

from __future__ import annotations

import functools
from collections import deque
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from landlord import dice
from landlord.config import load_config
from landlord.events import Context, Event, EventBus
from landlord.game import create_game
from landlord.models import UNOWNED
from landlord.properties import find_property
from landlord.rules import RULES
from landlord.settings import EngineSettings
from landlord.ui import UserInterface

INPUTS = ("prompt", "prompt_number", "prompt_confirm", "prompt_select", "prompt_cl_loop")

ANNOUNCEMENTS = [
    name
    for name, member in vars(UserInterface).items()
    if callable(member)
    and not name.startswith("_")
    and name not in INPUTS
    and name != "map_property_short_display"
]


class ScriptExhausted(AssertionError):
    """The code under test asked for more input than the test scripted."""


class ScriptedUI(UserInterface):
    """
    A front end that answers from scripted queues and records every
    announcement as (name, args) in `calls`.
    """

    def __init__(
        self,
        answers: Optional[List[str]] = None,
        numbers: Optional[List[float]] = None,
        confirms: Optional[List[bool]] = None,
        selections: Optional[List[int]] = None,
        commands: Optional[List[str]] = None,
    ):
        self.answers = deque(answers or [])
        self.numbers = deque(numbers or [])
        self.confirms = deque(confirms or [])
        self.selections = deque(selections or [])
        self.commands = deque(commands or [])
        self.calls: List[Tuple[str, tuple]] = []
        for name in ANNOUNCEMENTS:
            setattr(self, name, functools.partial(self._record, name))

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def _next(self, queue: deque, kind: str, message: str) -> Any:
        if not queue:
            raise ScriptExhausted(f"No scripted {kind} left for: {message}")
        return queue.popleft()

    def called(self, name: str) -> List[tuple]:
        return [args for call, args in self.calls if call == name]

    def prompt(self, message: str) -> str:
        return self._next(self.answers, "answer", message)

    def prompt_number(self, message: str) -> float:
        return self._next(self.numbers, "number", message)

    def prompt_confirm(self, message: str) -> bool:
        return self._next(self.confirms, "confirmation", message)

    def prompt_select(self, options, message: str, context: Any = None) -> int:
        self.calls.append(("prompt_select", (list(options), message)))
        return self._next(self.selections, "selection", message)

    def prompt_cl_loop(self, commands: Dict[str, Callable[[], Optional[bool]]]) -> None:
        while True:
            name = self._next(self.commands, "command", ", ".join(commands))
            if commands[name]():
                return


class Harness:
    """An event bus wired with a chosen subset of the real rules, plus spies."""

    def __init__(self, game_state, ui: ScriptedUI):
        self.game_state = game_state
        self.ui = ui
        self.bus = EventBus()
        self.context = Context(notify=self.bus.emit, ui=ui)
        self.emitted: List[Tuple[Event, Any]] = []

    def use(self, *events: Event) -> Harness:
        for event in events:
            self.bus.declare(event)
            for handler in RULES[event]:
                self.bus.subscribe(event, functools.partial(handler, self.context, self.game_state))
        return self

    def spy(self, *events: Event) -> Harness:
        for event in events:
            self.bus.subscribe(event, lambda payload, e=event: self.emitted.append((e, payload)))
        return self

    def emit(self, event: Event, payload: Any = None) -> None:
        self.bus.emit(event, payload)

    def count(self, event: Event) -> int:
        return sum(1 for e, _ in self.emitted if e == event)


@pytest.fixture
def settings():
    """Default rule constants with a fixed seed, ignoring any .env file."""
    return EngineSettings(_env_file=None, seed=7)


@pytest.fixture
def config(settings):
    return load_config(settings)


@pytest.fixture
def game_state(config):
    """Three players on the standard board."""
    return create_game(["Alice", "Bob", "Charlie"], config=config)


@pytest.fixture
def two_player_state(settings):
    return create_game(["Alice", "Bob"], config=load_config(settings))


@pytest.fixture
def ui():
    return ScriptedUI()


@pytest.fixture
def harness(game_state, ui):
    return Harness(game_state, ui)


@pytest.fixture
def fixed_dice(monkeypatch):
    """
    Replace dice rolls with scripted ones.

    Call the fixture with each roll as a list, e.g. fixed_dice([3, 4], [2, 2]).
    """
    rolls: deque = deque()

    def fake_roll(quantity=1, faces=6, rng=None):
        if not rolls:
            raise ScriptExhausted("No scripted dice roll left")
        roll = rolls.popleft()
        assert len(roll) == quantity
        return list(roll)

    monkeypatch.setattr(dice, "roll", fake_roll)
    return lambda *scripted: rolls.extend(scripted)


def give(game_state, player, *property_ids, mortgaged=False):
    """Hand properties to a player, keeping asset totals consistent."""
    props = []
    for property_id in property_ids:
        prop = find_property(game_state, property_id)
        assert prop.owned_by == UNOWNED
        prop.owned_by = player.id
        prop.mortgaged = mortgaged
        player.assets += prop.price / 2 if mortgaged else prop.price
        props.append(prop)
    return props[0] if len(props) == 1 else props
