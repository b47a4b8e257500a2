"""
Player-driven actions and when they are available.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

from landlord import properties
from landlord.events import Event

if TYPE_CHECKING:
    from landlord.state import GameState
    from landlord.ui import UserInterface


def get_available_actions(game_state: GameState) -> List[str]:
    """
    Legal choices for the current player right now.

    Rolling is allowed once per turn, again after doubles, but never
    again after leaving jail on a roll. A jailed player may pay the fine
    or play a card before rolling. The turn can only end once the dice
    are settled.
    """
    player = game_state.current_player
    if player.bankrupt:
        return [Event.END_TURN]

    turn_values = game_state.turn_values
    rolled = turn_values.roll is not None
    pending_doubles = rolled and turn_values.speeding_counter > 0 and not player.in_jail

    actions: List[str] = []
    if not rolled or pending_doubles:
        actions.append(Event.ROLL_DICE)
    if player.in_jail and not rolled:
        if player.cards:
            actions.append(Event.USE_GET_OUT_OF_JAIL_FREE_CARD)
        actions.append(Event.PAY_FINE)
    if properties.get_player_properties(game_state, player):
        actions.append(Event.MANAGE_PROPERTIES)
    if any(p is not player for p in game_state.active_players):
        actions.append(Event.TRADE)
    actions.append(Event.PLAYER_INFO)
    if rolled and not pending_doubles:
        actions.append(Event.END_TURN)
    return actions


def refresh(game_state: GameState) -> List[str]:
    game_state.current_player_actions = get_available_actions(game_state)
    return game_state.current_player_actions


def prompt(
    ui: UserInterface,
    actions: Sequence[str],
    message: str = "What would you like to do? ",
) -> Optional[str]:
    """
    Ask for one of `actions` by name or by its 1-based number.

    Returns:
        The chosen action, or None if the answer matched nothing.
    """
    ui.display_available_actions(list(actions))
    answer = ui.prompt(message).strip().upper().replace(" ", "_")
    if answer.isdigit() and 0 < int(answer) <= len(actions):
        return actions[int(answer) - 1]
    for action in actions:
        if answer == action:
            return action
    return None
