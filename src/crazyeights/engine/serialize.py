from __future__ import annotations

from typing import Mapping

from .game import CrazyEights
from .types import SUITS, Card


def card_to_dict(card: Card | None) -> dict[str, object] | None:
    if card is None:
        return None
    return {"suit": card.suit, "rank": card.rank}


def card_from_dict(d: Mapping[str, object]) -> Card:
    suit = d.get("suit")
    rank = d.get("rank")
    if suit not in SUITS or not isinstance(rank, int):
        raise ValueError(f"Invalid card: {dict(d)!r}")
    return Card(suit=suit, rank=rank)  # type: ignore[arg-type]


def _cards(cards: list[Card]) -> list[dict[str, object] | None]:
    return [card_to_dict(c) for c in cards]


def snapshot(game: CrazyEights) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current game.

    Players are identified by their registration seat, which does not change
    when an Ace reverses the order of play.
    """
    seats = {id(p): i for i, p in enumerate(game.registered_players)}
    current = game.current_player
    winner = game.winner
    return {
        "state": game.state,
        "turn_order": [seats[id(p)] for p in game.players],
        "current_player": seats[id(current)] if current is not None else None,
        "winner": seats[id(winner)] if winner is not None else None,
        "hands": [_cards(game.get_hand(p)) for p in game.registered_players],
        "deck": _cards(game.deck_cards()),
        "discard_pile": _cards(game.discard_pile_cards()),
        "top_card": card_to_dict(game.top_card),
    }
