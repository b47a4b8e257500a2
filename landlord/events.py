"""
Event names and the event bus driving the rules engine.

Every rule is a handler bound to a named event. Emitting an event runs its
handlers in registration order, synchronously, before `emit` returns; a
handler may emit further events, which run nested inside it.

Turn continuations (START_TURN, CONTINUE_TURN, END_TURN, END_GAME) are the
exception. A handler emitting one of them only schedules it, and the
outermost `emit` runs it once the current cascade has unwound. This keeps
the stack flat over a whole game, and it lets a turn-ending event win over
a stale "continue turn" scheduled by an outer handler: a pending
continuation is only replaced by one of equal or higher rank.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from landlord.exceptions import UnknownEventError

if TYPE_CHECKING:
    from landlord.state import GameState
    from landlord.ui import UserInterface

logger = logging.getLogger(__name__)


class Event(str, Enum):
    START_GAME = "START_GAME"
    PLAYER_ORDER_CHANGED = "PLAYER_ORDER_CHANGED"
    START_TURN = "START_TURN"
    TURN_VALUES_RESET = "TURN_VALUES_RESET"
    TURN_VALUES_UPDATED = "TURN_VALUES_UPDATED"
    CONTINUE_TURN = "CONTINUE_TURN"
    ROLL_DICE = "ROLL_DICE"
    MOVE_ROLL = "MOVE_ROLL"
    JAIL_ROLL = "JAIL_ROLL"
    SPEEDING = "SPEEDING"
    UPDATE_POSITION_WITH_ROLL = "UPDATE_POSITION_WITH_ROLL"
    MOVE_PLAYER = "MOVE_PLAYER"
    PASS_GO = "PASS_GO"
    RESOLVE_NEW_PROPERTY = "RESOLVE_NEW_PROPERTY"
    BUY_PROPERTY = "BUY_PROPERTY"
    AUCTION = "AUCTION"
    PAY_RENT = "PAY_RENT"
    RESOLVE_SPECIAL_PROPERTY = "RESOLVE_SPECIAL_PROPERTY"
    INCOME_TAX = "INCOME_TAX"
    LUXURY_TAX = "LUXURY_TAX"
    CHANCE = "CHANCE"
    COMMUNITY_CHEST = "COMMUNITY_CHEST"
    JAIL = "JAIL"
    PAY_FINE = "PAY_FINE"
    USE_GET_OUT_OF_JAIL_FREE_CARD = "USE_GET_OUT_OF_JAIL_FREE_CARD"
    MANAGE_PROPERTIES = "MANAGE_PROPERTIES"
    RENOVATE = "RENOVATE"
    DEMOLISH = "DEMOLISH"
    MORTGAGE = "MORTGAGE"
    UNMORTGAGE = "UNMORTGAGE"
    TRADE = "TRADE"
    PLAYER_INFO = "PLAYER_INFO"
    COLLECTIONS = "COLLECTIONS"
    LIQUIDATION = "LIQUIDATION"
    BANKRUPTCY = "BANKRUPTCY"
    END_TURN = "END_TURN"
    END_GAME = "END_GAME"


CONTINUATION_RANKS: Dict[str, int] = {
    Event.CONTINUE_TURN: 0,
    Event.START_TURN: 1,
    Event.END_TURN: 2,
    Event.END_GAME: 3,
}


@dataclass
class Context:
    """What a handler may use besides the game state."""

    notify: Callable[..., None]
    ui: UserInterface


Handler = Callable[[Context, "GameState", Any], None]
Callback = Callable[[Any], None]


class EventBus:
    """Ordered, re-entrant publish/subscribe with a continuation trampoline."""

    def __init__(
        self,
        continuations: Optional[Dict[str, int]] = None,
        strict: bool = False,
    ):
        self._subscribers: Dict[str, List[Callback]] = {}
        self._continuations = CONTINUATION_RANKS if continuations is None else continuations
        self._strict = strict
        self._depth = 0
        self._pending: Optional[Tuple[str, Any]] = None

    def declare(self, event: str) -> None:
        """Make `event` known to the bus, even without subscribers."""
        self._subscribers.setdefault(event, [])

    def subscribe(self, event: str, callback: Callback) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def has_subscribers(self, event: str) -> bool:
        return bool(self._subscribers.get(event))

    @property
    def pending(self) -> Optional[str]:
        """The continuation waiting to run, if any."""
        return self._pending[0] if self._pending else None

    def emit(self, event: str, payload: Any = None) -> None:
        if self._depth > 0 and event in self._continuations:
            self._schedule(event, payload)
            return

        self._dispatch(event, payload)
        if self._depth == 0:
            self._drain()

    def _schedule(self, event: str, payload: Any) -> None:
        if self._pending is not None:
            pending_rank = self._continuations[self._pending[0]]
            if self._continuations[event] < pending_rank:
                logger.debug(f"Dropped {event}, {self._pending[0]} already pending")
                return
        self._pending = (event, payload)

    def _dispatch(self, event: str, payload: Any) -> None:
        callbacks = self._subscribers.get(event)
        if callbacks is None:
            if self._strict:
                raise UnknownEventError(f"No handlers registered for {event}")
            logger.debug(f"No handlers registered for {event}")
            return

        logger.debug(f"{'  ' * self._depth}-> {event}")
        self._depth += 1
        try:
            for callback in list(callbacks):
                callback(payload)
        finally:
            self._depth -= 1

    def _drain(self) -> None:
        while self._pending is not None:
            event, payload = self._pending
            self._pending = None
            self._dispatch(event, payload)
