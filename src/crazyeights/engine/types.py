from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Suit = Literal["clubs", "diamonds", "hearts", "spades"]
SUITS: tuple[Suit, ...] = ("clubs", "diamonds", "hearts", "spades")

GameState = Literal["inactive", "playing", "waiting_for_card", "waiting_for_suit"]

EventKind = Literal["hand_size", "top_card", "game_complete"]

ACE = 1
JACK = 11
QUEEN = 12
KING = 13
RANKS: tuple[int, ...] = tuple(range(ACE, KING + 1))

FACE_DOWN_KEY = "00"

_SUIT_LETTERS: dict[str, str] = {"clubs": "C", "diamonds": "D", "hearts": "H", "spades": "S"}
_RANK_TOKENS: dict[int, str] = {ACE: "A", JACK: "J", QUEEN: "Q", KING: "K"}
_RANK_NAMES: dict[int, str] = {ACE: "Ace", JACK: "Jack", QUEEN: "Queen", KING: "King"}


@dataclass(frozen=True, eq=True)
class Card:
    """A playing card.

    Equal cards compare equal by value, but the engine tracks each dealt card
    by identity: two equal cards in one hand are two distinct occurrences.
    """

    suit: Suit
    rank: int

    def __post_init__(self) -> None:
        if self.suit not in SUITS:
            raise ValueError(f"Unknown suit: {self.suit!r}")
        if self.rank not in RANKS:
            raise ValueError(f"Rank must be between {ACE} and {KING}, got {self.rank!r}")

    def __str__(self) -> str:
        name = _RANK_NAMES.get(self.rank, str(self.rank))
        return f"{name} of {self.suit.capitalize()}"


@dataclass(frozen=True)
class GameEvent:
    """Change notification published to listeners.

    Carries only the changed field: the new top card for ``top_card``,
    ``True`` for ``game_complete`` and nothing for ``hand_size``.
    """

    kind: EventKind
    value: Card | bool | None = None


def card_image_key(card: Card | None) -> str:
    """Visual key used by renderers, e.g. ``"H10"``, ``"SA"``; ``"00"`` when face down."""
    if card is None:
        return FACE_DOWN_KEY
    return _SUIT_LETTERS[card.suit] + _RANK_TOKENS.get(card.rank, str(card.rank))


def all_image_keys() -> list[str]:
    keys = [card_image_key(Card(suit=s, rank=r)) for s in SUITS for r in RANKS]
    keys.append(FACE_DOWN_KEY)
    return keys
