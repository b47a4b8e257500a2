"""
Chance and Community Chest card piles.

The module-level functions are plain transformations over card lists;
`CardDeck` pairs a draw pile with its discard pile.
"""

import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from landlord.exceptions import EmptyDeckError
from landlord.models import Card, DeckType


def shuffle(cards: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """Shuffle `cards` in place (Fisher-Yates) and return the same list."""
    rng = rng or random
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]
    return cards


def draw(cards: List[Card]) -> Tuple[Card, List[Card]]:
    """Return the top card and the remaining pile."""
    if not cards:
        raise EmptyDeckError("Cannot draw from an empty pile")
    return cards[0], cards[1:]


def discard(card: Card, discarded: List[Card]) -> List[Card]:
    """Put a card on the discard pile."""
    discarded.append(card)
    return discarded


def replace_available_cards(
    available: List[Card], discarded: List[Card]
) -> Tuple[List[Card], List[Card]]:
    """Turn the discard pile into the draw pile. Shuffling is up to the caller."""
    return available + discarded, []


@dataclass
class CardDeck:
    """A draw pile and a discard pile."""

    deck_type: DeckType
    available_cards: List[Card] = field(default_factory=list)
    discarded_cards: List[Card] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.available_cards) + len(self.discarded_cards)

    def shuffle(self, rng: Optional[random.Random] = None) -> None:
        shuffle(self.available_cards, rng)

    def draw(self, rng: Optional[random.Random] = None) -> Card:
        """
        Draw the top card.
        If the draw pile is empty, the shuffled discard pile replaces it.
        """
        if not self.available_cards:
            self.available_cards, self.discarded_cards = replace_available_cards(
                self.available_cards, self.discarded_cards
            )
            self.shuffle(rng)
        card, self.available_cards = draw(self.available_cards)
        return card

    def discard(self, card: Card) -> None:
        discard(card, self.discarded_cards)
