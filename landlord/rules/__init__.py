"""
The rule set: every event mapped to its ordered list of handlers.

Handlers share one signature, ``handler(context, game_state, payload)``,
and run in list order. Re-ordering or replacing handlers changes the
rules; `landlord.game.register_rules` accepts any such mapping.
"""

from typing import Dict, List

from landlord.events import Event, Handler
from landlord.rules import estate, finance, special, turn


def build_rules() -> Dict[Event, List[Handler]]:
    """A fresh copy of the standard rule set, safe to modify."""
    rules: Dict[Event, List[Handler]] = {}
    for module in (turn, finance, estate, special):
        for event, handlers in module.RULES.items():
            rules.setdefault(event, []).extend(handlers)
    return rules


RULES = build_rules()

__all__ = ["RULES", "build_rules"]
