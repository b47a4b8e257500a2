"""
Tests for property auctions.
"""

import math

import pytest
from conftest import ScriptedUI

from landlord.auction import Bidder, auction
from landlord.models import Player, Property

SKIP = math.nan


@pytest.fixture
def prop():
    return Property("boardwalk", "Boardwalk", "Dark Blue", 39, price=400)


@pytest.fixture
def players():
    return [Player(0, "A"), Player(1, "B"), Player(2, "C")]


def bidders_for(players, liquidity=1000):
    return [Bidder(p, liquidity) for p in players]


def test_highest_bid_wins(players, prop):
    """
    Bidders A, B, C with base cost 100.
    Bids: skip, 101, 102, 103, skip -> B wins at 103.
    """
    ui = ScriptedUI(numbers=[SKIP, 101, 102, 103, SKIP])
    result = auction(ui, bidders_for(players), prop, 100)

    assert result.buyer is players[1]
    assert result.price == 103
    assert not ui.numbers


def test_bid_must_beat_current_price(players, prop):
    ui = ScriptedUI(numbers=[150, 150, SKIP])
    result = auction(ui, bidders_for(players), prop, 100)

    assert result.buyer is players[0]
    assert result.price == 150
    assert [args[0] for args in ui.called("player_out_of_auction")] == [players[1], players[2]]


def test_bid_above_liquidity_is_rejected(players, prop):
    bidders = [Bidder(players[0], 120), Bidder(players[1], 500)]
    ui = ScriptedUI(numbers=[130, 110])
    result = auction(ui, bidders, prop, 100)

    assert result.buyer is players[1]
    assert result.price == 110


def test_last_good_bid_stands(players, prop):
    """The leader keeps their bid when everyone else drops out."""
    ui = ScriptedUI(numbers=[101, 102, 103, SKIP, 50])
    result = auction(ui, bidders_for(players), prop, 100)

    assert result.buyer is players[2]
    assert result.price == 103


def test_auction_restarts_without_bids(players, prop):
    """A round without any valid bid starts the auction over with everyone."""
    ui = ScriptedUI(numbers=[SKIP, SKIP, SKIP, SKIP, 105, SKIP])
    result = auction(ui, bidders_for(players), prop, 100)

    assert result.buyer is players[1]
    assert result.price == 105
    assert len(ui.called("player_in_auction")) == 6


def test_price_always_exceeds_base_cost(players, prop):
    ui = ScriptedUI(numbers=[100, 100.5, SKIP])
    result = auction(ui, bidders_for(players), prop, 100)

    assert result.buyer is players[1]
    assert result.price > 100
