"""
Tests for card decks.
"""

import random

import pytest

from landlord import deck
from landlord.deck import CardDeck
from landlord.exceptions import EmptyDeckError
from landlord.models import Card, CardAction, DeckType


def make_cards(n):
    return [Card(f"Card {i}", CardAction.ADD_FUNDS, DeckType.CHANCE, amount=i) for i in range(n)]


def test_draw_returns_top_card_and_rest():
    cards = make_cards(3)
    card, rest = deck.draw(cards)

    assert card is cards[0]
    assert rest == cards[1:]
    assert len(cards) == 3


def test_draw_from_empty_pile_raises():
    with pytest.raises(EmptyDeckError):
        deck.draw([])


def test_shuffle_keeps_the_same_cards():
    cards = make_cards(16)
    original = list(cards)
    deck.shuffle(cards, random.Random(3))

    assert sorted(c.amount for c in cards) == sorted(c.amount for c in original)


def test_replace_available_cards_moves_discards():
    available, discarded = deck.replace_available_cards([], make_cards(4))

    assert len(available) == 4
    assert discarded == []


def test_card_deck_refills_from_discard_pile():
    """When the draw pile runs out, the discard pile is shuffled in."""
    cards = make_cards(2)
    pile = CardDeck(DeckType.CHANCE, list(cards))
    rng = random.Random(5)

    for _ in range(2):
        pile.discard(pile.draw(rng))
    assert pile.available_cards == []

    card = pile.draw(rng)
    assert card in cards
    assert len(pile.available_cards) == 1
    assert pile.discarded_cards == []


def test_card_count_is_conserved():
    """available + discarded + cards held by players never changes."""
    cards = make_cards(5)
    pile = CardDeck(DeckType.CHANCE, list(cards))
    rng = random.Random(9)
    held = []

    for turn in range(23):
        card = pile.draw(rng)
        if turn % 4 == 0:
            held.append(card)
        else:
            pile.discard(card)
        if len(held) > 2:
            pile.discard(held.pop(0))
        assert len(pile) + len(held) == 5
