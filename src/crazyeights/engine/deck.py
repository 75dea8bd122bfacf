from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from .types import RANKS, SUITS, Card, Suit

logger = logging.getLogger(__name__)

DECK_SIZE = len(SUITS) * len(RANKS)


def build_deck() -> list[Card]:
    """A fresh, unshuffled 52-card deck. Every card is a new object."""
    return [Card(suit=suit, rank=rank) for suit in SUITS for rank in RANKS]


@dataclass
class DiscardPile:
    """Played cards, oldest first.

    After a wild card the visible top is a virtual card carrying the declared
    suit; the wild card itself stays on the pile so it can be recycled.
    """

    cards: list[Card] = field(default_factory=list)
    _virtual_top: Card | None = field(default=None, init=False, repr=False)

    def __len__(self) -> int:
        return len(self.cards)

    @property
    def top(self) -> Card | None:
        if self._virtual_top is not None:
            return self._virtual_top
        return self.cards[-1] if self.cards else None

    @property
    def declared_suit(self) -> Suit | None:
        return self._virtual_top.suit if self._virtual_top is not None else None

    def push(self, card: Card) -> None:
        self.cards.append(card)
        self._virtual_top = None

    def declare_suit(self, suit: Suit) -> Card:
        if not self.cards:
            raise ValueError("Cannot declare a suit on an empty discard pile.")
        self._virtual_top = Card(suit=suit, rank=self.cards[-1].rank)
        return self._virtual_top

    def take_all_but_top(self) -> list[Card]:
        if len(self.cards) <= 1:
            return []
        taken = self.cards[:-1]
        del self.cards[:-1]
        return taken

    def clear(self) -> None:
        self.cards.clear()
        self._virtual_top = None


@dataclass
class Deck:
    cards: list[Card] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)

    def reset(self, rng: random.Random) -> None:
        self.cards = build_deck()
        rng.shuffle(self.cards)

    def replenish(self, pile: DiscardPile, rng: random.Random) -> int:
        """Move every discarded card except the top back into the deck and shuffle."""
        recycled = pile.take_all_but_top()
        self.cards.extend(recycled)
        rng.shuffle(self.cards)
        if recycled:
            logger.info("Reshuffled %d discarded cards into the deck", len(recycled))
        return len(recycled)

    def draw(self, pile: DiscardPile, rng: random.Random) -> Card | None:
        """Take the front card, recycling the discard pile first when running out.

        Returns None only when neither the deck nor the pile has a spare card.
        """
        if len(self.cards) <= 1:
            self.replenish(pile, rng)
        if not self.cards:
            return None
        return self.cards.pop(0)
