"""
The boundary between the rules engine and whoever is playing.

The engine only ever talks to a `UserInterface`. Announcements are
fire-and-forget; input methods block until an answer is available.
`ConsoleUI` implements the boundary for a terminal.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

from landlord.models import SPECIAL, Card, Player, Property

if TYPE_CHECKING:
    from landlord.trade import TradeDetails


class UserInterface(ABC):
    """
    Abstract base class for game front ends.

    Subclasses must implement the five input methods. Every announcement
    has a no-op default so a front end only overrides what it shows.
    """

    # --- Input ------------------------------------------------------------

    @abstractmethod
    def prompt(self, message: str) -> str:
        """Ask for free text."""

    @abstractmethod
    def prompt_number(self, message: str) -> float:
        """Ask for a number; returns math.nan when the answer is not one."""

    @abstractmethod
    def prompt_confirm(self, message: str) -> bool:
        """Ask a yes/no question."""

    @abstractmethod
    def prompt_select(self, options: Sequence[str], message: str, context: Any = None) -> int:
        """Ask to pick one of `options`; returns its index, or -1 to cancel."""

    @abstractmethod
    def prompt_cl_loop(self, commands: Dict[str, Callable[[], Optional[bool]]]) -> None:
        """Run commands by name until one of them returns True."""

    # --- Turn flow --------------------------------------------------------

    def start_game(self) -> None:
        pass

    def opening_roll(self, player: Player, roll: int) -> None:
        pass

    def start_turn(self, player: Player) -> None:
        pass

    def skip_turn_for_bankrupt_player(self, player: Player) -> None:
        pass

    def display_available_actions(self, actions: List[str]) -> None:
        pass

    def unknown_action(self) -> None:
        pass

    def end_turn(self) -> None:
        pass

    def game_over(self, player: Player, net_worth: float) -> None:
        pass

    def rolling_dice(self) -> None:
        pass

    def dice_roll_results(self, roll1: int, roll2: int) -> None:
        pass

    def roll_normal_dice(self) -> None:
        pass

    def roll_jail_dice(self) -> None:
        pass

    def caught_speeding(self) -> None:
        pass

    def player_movement(self, tile: Property) -> None:
        pass

    def pass_go(self, amount: float) -> None:
        pass

    # --- Jail -------------------------------------------------------------

    def jail(self) -> None:
        pass

    def pay_fine(self, amount: float) -> None:
        pass

    def get_out_of_jail_free_card_used(self) -> None:
        pass

    # --- Money ------------------------------------------------------------

    def property_bought(self, prop: Property) -> None:
        pass

    def paying_rent(self, player: Player, owner: Player, amount: float) -> None:
        pass

    def income_tax_payment(self, amount: float, rate_percent: float) -> None:
        pass

    def income_tax_paid(self, amount: float) -> None:
        pass

    def luxury_tax_paid(self, amount: float) -> None:
        pass

    def drew_card(self, deck_name: str, card: Card) -> None:
        pass

    def player_short_on_funds(self, cash: float, charge: float) -> None:
        pass

    def player_lost(self, player: Player) -> None:
        pass

    def show_player_table(self, players: List[Player], properties: List[Property]) -> None:
        pass

    def display_property_details(self, prop: Property) -> None:
        pass

    # --- Auctions ---------------------------------------------------------

    def auction_instructions(self) -> None:
        pass

    def players_in_auction(self, players: List[Player]) -> None:
        pass

    def player_in_auction(self, player: Player) -> None:
        pass

    def player_out_of_auction(self, player: Player) -> None:
        pass

    def won_auction(self, player: Player, price: float) -> None:
        pass

    # --- Trades -----------------------------------------------------------

    def show_player_trade_table(self, players: List[Player]) -> None:
        pass

    def player_trade_action(self, player: Player) -> None:
        pass

    def trade_introduction(self) -> None:
        pass

    def trade_instructions(self) -> None:
        pass

    def display_trade_details(self, acting: Player, target: Player, details: TradeDetails) -> None:
        pass

    def trade_error(self, errors: List[str]) -> None:
        pass

    def map_property_short_display(self, prop: Property) -> str:
        flags = " (mortgaged)" if prop.mortgaged else ""
        return f"{prop.name} [{prop.group}] ${prop.price}{flags}"


def _money(amount: float) -> str:
    return f"${amount:,.2f}".replace(".00", "")


class ConsoleUI(UserInterface):
    """Plain-text front end reading from stdin and writing to stdout."""

    def __init__(self, input_fn: Callable[[str], str] = input, output_fn: Callable[..., None] = print):
        self._input = input_fn
        self._print = output_fn

    # --- Input ------------------------------------------------------------

    def prompt(self, message: str) -> str:
        return self._input(message).strip()

    def prompt_number(self, message: str) -> float:
        answer = self.prompt(message)
        try:
            return float(answer)
        except ValueError:
            return math.nan

    def prompt_confirm(self, message: str) -> bool:
        return self.prompt(f"{message} [y/N] ").lower() in ("y", "yes")

    def prompt_select(self, options: Sequence[str], message: str, context: Any = None) -> int:
        self._print(message)
        for index, option in enumerate(options, start=1):
            self._print(f"  {index}. {option}")
        self._print("  0. Cancel")
        answer = self.prompt_number("> ")
        if math.isnan(answer) or not answer.is_integer() or not 0 < answer <= len(options):
            return -1
        return int(answer) - 1

    def prompt_cl_loop(self, commands: Dict[str, Callable[[], Optional[bool]]]) -> None:
        names = ", ".join(commands)
        while True:
            command = self.prompt(f"({names}) > ").lower()
            handler = commands.get(command)
            if handler is None:
                self._print(f"Unknown command '{command}'. Try one of: {names}")
                continue
            if handler():
                return

    # --- Announcements ----------------------------------------------------

    def start_game(self) -> None:
        self._print("=" * 60)
        self._print("LANDLORD")
        self._print("=" * 60)
        self._print("Each player rolls a die; the highest roll goes first.")

    def opening_roll(self, player: Player, roll: int) -> None:
        self._print(f"  {player.name} rolled {roll}")

    def start_turn(self, player: Player) -> None:
        self._print("\n" + "-" * 60)
        status = f"in jail (attempt {player.jailed + 1})" if player.in_jail else f"on square {player.position}"
        self._print(f"{player.name}'s turn: {_money(player.cash)} cash, {status}")

    def skip_turn_for_bankrupt_player(self, player: Player) -> None:
        self._print(f"{player.name} is bankrupt and sits this turn out.")

    def display_available_actions(self, actions: List[str]) -> None:
        self._print("Available actions:")
        for index, action in enumerate(actions, start=1):
            self._print(f"  {index}. {action.replace('_', ' ').title()}")

    def unknown_action(self) -> None:
        self._print("That is not something you can do right now.")

    def end_turn(self) -> None:
        self._print("Turn over.")

    def game_over(self, player: Player, net_worth: float) -> None:
        self._print("\n" + "=" * 60)
        self._print(f"GAME OVER. {player.name} wins with a net worth of {_money(net_worth)}")
        self._print("=" * 60)

    def rolling_dice(self) -> None:
        self._print("Rolling the dice...")

    def dice_roll_results(self, roll1: int, roll2: int) -> None:
        doubles = " Doubles!" if roll1 == roll2 else ""
        self._print(f"You rolled {roll1} and {roll2}.{doubles}")

    def roll_jail_dice(self) -> None:
        self._print("Trying to roll doubles to get out of jail.")

    def caught_speeding(self) -> None:
        self._print("Three doubles in a row. You were caught speeding!")

    def player_movement(self, tile: Property) -> None:
        self._print(f"You landed on {tile.name}.")

    def pass_go(self, amount: float) -> None:
        self._print(f"You passed Go and collect {_money(amount)}.")

    def jail(self) -> None:
        self._print("Go directly to jail. Do not pass Go.")

    def pay_fine(self, amount: float) -> None:
        self._print(f"You pay a {_money(amount)} fine to leave jail.")

    def get_out_of_jail_free_card_used(self) -> None:
        self._print("You used a Get Out of Jail Free card.")

    def property_bought(self, prop: Property) -> None:
        self._print(f"You bought {prop.name} for {_money(prop.price)}.")

    def paying_rent(self, player: Player, owner: Player, amount: float) -> None:
        self._print(f"{player.name} owes {owner.name} {_money(amount)} in rent.")

    def income_tax_payment(self, amount: float, rate_percent: float) -> None:
        self._print(f"Income tax: pay {_money(amount)} (FIXED) or {rate_percent:g}% of your net worth (VARIABLE).")

    def income_tax_paid(self, amount: float) -> None:
        self._print(f"You paid {_money(amount)} in income tax.")

    def luxury_tax_paid(self, amount: float) -> None:
        self._print(f"You paid {_money(amount)} in luxury tax.")

    def drew_card(self, deck_name: str, card: Card) -> None:
        label = "Chance" if deck_name == "chance" else "Community Chest"
        self._print(f"{label}: {card.title}")

    def player_short_on_funds(self, cash: float, charge: float) -> None:
        self._print(f"You owe {_money(charge)} but only have {_money(cash)}. Raise funds or declare bankruptcy.")

    def player_lost(self, player: Player) -> None:
        self._print(f"{player.name} is bankrupt!")

    def show_player_table(self, players: List[Player], properties: List[Property]) -> None:
        self._print(f"{'Player':<16}{'Cash':>12}{'Assets':>12}  Properties")
        for player in players:
            owned = [
                self.map_property_short_display(p) for p in properties if p.owned_by == player.id
            ]
            status = " (bankrupt)" if player.bankrupt else ""
            self._print(
                f"{player.name + status:<16}{_money(player.cash):>12}{_money(player.assets):>12}  "
                f"{', '.join(owned) or '-'}"
            )

    def display_property_details(self, prop: Property) -> None:
        if prop.group == SPECIAL:
            self._print(prop.name)
            return
        self._print(f"{prop.name} ({prop.group}) price {_money(prop.price)}")
        if prop.multiplied_rent:
            schedule = ", ".join(_money(r) for r in prop.multiplied_rent)
            self._print(f"  rent {_money(prop.rent)}; with buildings {schedule}; house cost {_money(prop.house_cost)}")

    def auction_instructions(self) -> None:
        self._print("Auction! Enter a higher bid to stay in, anything else to drop out.")

    def players_in_auction(self, players: List[Player]) -> None:
        self._print("Bidding: " + ", ".join(p.name for p in players))

    def player_out_of_auction(self, player: Player) -> None:
        self._print(f"{player.name} is out of the auction.")

    def won_auction(self, player: Player, price: float) -> None:
        self._print(f"{player.name} won the auction for {_money(price)}.")

    def show_player_trade_table(self, players: List[Player]) -> None:
        for player in players:
            cards = f", {len(player.cards)} card(s)" if player.cards else ""
            self._print(f"  {player.name}: {_money(player.cash)}{cards}")

    def player_trade_action(self, player: Player) -> None:
        self._print(f"\n{player.name}, it is your move in the trade.")

    def trade_introduction(self) -> None:
        self._print("Type 'help' for the list of trade commands.")

    def trade_instructions(self) -> None:
        self._print("request - choose what you want from the other player")
        self._print("offer   - choose what you give")
        self._print("info    - show the current trade")
        self._print("confirm - send the offer, or accept an unchanged one")
        self._print("cancel  - walk away from this round")

    def display_trade_details(self, acting: Player, target: Player, details: TradeDetails) -> None:
        for player in (acting, target):
            assets = details.assets.get(player.id, [])
            described = [
                self.map_property_short_display(a)
                if isinstance(a, Property)
                else (f"Card: {a.title}" if isinstance(a, Card) else _money(a))
                for a in assets
            ]
            self._print(f"  {player.name} gives: {', '.join(described) or 'nothing'}")
        self._print(f"  Status: {details.status.value}")

    def trade_error(self, errors: List[str]) -> None:
        for error in errors:
            self._print(f"  ! {error}")
