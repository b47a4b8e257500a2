"""
Per-game session state shared by every rule handler.
"""

import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from landlord.config import GameConfig, PropertyConfig
from landlord.deck import CardDeck
from landlord.dice import is_doubles
from landlord.exceptions import PlayerNotFoundError
from landlord.models import DeckType, Player, Property


@dataclass
class SubTurn:
    """A charge a player owes but could not pay from cash."""

    player_id: Optional[int] = None
    charge: Optional[float] = None


@dataclass
class TurnValues:
    """Scratch values that only live for the duration of one turn."""

    roll: Optional[List[int]] = None
    speeding_counter: int = 0
    rent_multiplier: Optional[int] = None
    sub_turn: Optional[SubTurn] = None

    @property
    def roll_total(self) -> int:
        return sum(self.roll) if self.roll else 0

    @property
    def is_doubles(self) -> bool:
        return is_doubles(self.roll)


class GameState:
    """
    The single mutable session object of a game.

    Every rule handler receives the instance explicitly; nothing about a
    game lives at module level, so several games can run side by side.
    """

    def __init__(
        self,
        config: GameConfig,
        players: List[Player],
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.players = players
        self.rng = rng or random.Random(config.seed)
        self.turn = 0
        self.turn_values = TurnValues()
        self.decks: Dict[DeckType, CardDeck] = {
            DeckType.CHANCE: CardDeck(DeckType.CHANCE, list(config.chance_cards)),
            DeckType.COMMUNITY_CHEST: CardDeck(
                DeckType.COMMUNITY_CHEST, list(config.community_chest_cards)
            ),
        }
        self.current_board_property: Optional[Property] = None
        self.current_player_actions: List[str] = []
        self.game_over = False

    @property
    def property_config(self) -> PropertyConfig:
        return self.config.property_config

    @property
    def board_length(self) -> int:
        return self.config.board_length

    @property
    def current_player(self) -> Player:
        return self.players[self.turn % len(self.players)]

    @property
    def acting_player(self) -> Player:
        """The player owing a pending charge, else the current player."""
        sub_turn = self.turn_values.sub_turn
        if sub_turn is not None and sub_turn.player_id is not None:
            return self.get_player(sub_turn.player_id)
        return self.current_player

    @property
    def active_players(self) -> List[Player]:
        return [p for p in self.players if not p.bankrupt]

    def get_player(self, player_id: int) -> Player:
        for player in self.players:
            if player.id == player_id:
                return player
        raise PlayerNotFoundError(f"No player with id {player_id}")

    def reset_turn_values(self) -> None:
        self.turn_values = TurnValues()

    def __repr__(self) -> str:
        return (
            f"GameState(turn={self.turn}, current={self.current_player.name}, "
            f"game_over={self.game_over})"
        )
