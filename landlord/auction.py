"""
Ascending-bid auctions for a single property.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from landlord.models import Player, Property

if TYPE_CHECKING:
    from landlord.ui import UserInterface

logger = logging.getLogger(__name__)

OUT = -1


@dataclass
class Bidder:
    """A player taking part in an auction and the most they can pay."""

    player: Player
    liquidity: float


@dataclass
class AuctionResult:
    buyer: Player
    price: float


def _is_valid_bid(bid: float, cost: float, liquidity: float) -> bool:
    return not math.isnan(bid) and cost < bid <= liquidity


def auction(
    ui: UserInterface, bidders: List[Bidder], prop: Property, base_cost: float
) -> AuctionResult:
    """
    Run an auction until exactly one bidder holds a standing bid.

    Bidders are asked in order, round after round. A bid that is not a
    number, does not beat the current price or exceeds the bidder's
    liquidity knocks the bidder out of this auction. The current leader is
    not asked again until someone outbids them, so a leader's bid always
    stands. When a full round ends without any valid bid, the auction
    starts over with every original bidder at the base cost.

    Args:
        ui: Interface used to announce rounds and ask for bids.
        bidders: Eligible bidders, in bidding order.
        prop: The property being auctioned.
        base_cost: Price the first bid must exceed.

    Returns:
        The winning player and the price they bid.
    """
    while True:
        bids: List[float] = [0] * len(bidders)
        cost = base_cost

        while sum(1 for bid in bids if bid > 0) != 1:
            ui.display_property_details(prop)
            ui.players_in_auction([b.player for b, bid in zip(bidders, bids) if bid != OUT])

            for index, bidder in enumerate(bidders):
                if bids[index] == OUT:
                    continue
                if bids[index] > 0 and bids[index] == cost:
                    continue

                ui.player_in_auction(bidder.player)
                bid = ui.prompt_number(
                    f"{bidder.player.name}, enter a bid above ${cost} "
                    f"(up to ${bidder.liquidity}) or anything else to pass: "
                )
                if _is_valid_bid(bid, cost, bidder.liquidity):
                    bids[index] = bid
                    cost = bid
                    logger.debug(f"{bidder.player.name} bid {bid} for {prop.name}")
                else:
                    ui.player_out_of_auction(bidder.player)
                    bids[index] = OUT

            if not any(bid > 0 for bid in bids):
                logger.debug(f"No valid bids for {prop.name}, restarting auction")
                break
        else:
            winner = next(index for index, bid in enumerate(bids) if bid > 0)
            logger.info(f"{bidders[winner].player.name} won {prop.name} for {bids[winner]}")
            return AuctionResult(bidders[winner].player, bids[winner])
