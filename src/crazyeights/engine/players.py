from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Literal

from .effects import DRAW_TWO_RANK, WILD_RANK, is_wild
from .game import CrazyEights, GameStateError, PlayResult
from .types import ACE, QUEEN, SUITS, Card, Suit


class RandomPlayer:
    """Shuffles its hand and plays the first playable card, drawing if there is none.

    Chooses a uniformly random suit after playing an eight.
    """

    def __init__(self, name: str = "Random", rng: random.Random | None = None) -> None:
        self.name = name
        self.rng = rng or random.Random()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    def pick_card(self, hand: list[Card], game: CrazyEights) -> Card | None:
        self.rng.shuffle(hand)
        for card in hand:
            if game.is_playable(card):
                return card
        return None

    def pick_suit(self, game: CrazyEights) -> Suit:
        return self.rng.choice(SUITS)

    def take_turn(self, hand: list[Card], game: CrazyEights) -> None:
        game.play_card(self, self.pick_card(hand, game))

    def choose_suit(self, game: CrazyEights) -> None:
        game.select_suit(self, self.pick_suit(game))


@dataclass(frozen=True)
class AISpec:
    """Tuning for HeuristicPlayer.

    save_wilds_above: keep eights while holding more than this many cards.
    """

    save_wilds_above: int = 3


def _card_priority(card: Card) -> int:
    if card.rank == DRAW_TWO_RANK:
        return 5
    if card.rank == QUEEN:
        return 4
    if card.rank == ACE:
        return 3
    if is_wild(card):
        return 1
    return 2


class HeuristicPlayer(RandomPlayer):
    """Prefers attacking cards, holds on to eights, and names its strongest suit."""

    def __init__(
        self, name: str = "Heuristic", rng: random.Random | None = None, spec: AISpec | None = None
    ) -> None:
        super().__init__(name=name, rng=rng)
        self.spec = spec or AISpec()

    def pick_card(self, hand: list[Card], game: CrazyEights) -> Card | None:
        best: tuple[int, float, Card] | None = None
        for card in hand:
            if not game.is_playable(card):
                continue
            score = _card_priority(card)
            if len(hand) <= 2:
                score += 2
            if card.rank == WILD_RANK and len(hand) > self.spec.save_wilds_above:
                score -= 1
            # random tie-break
            cand = (score, self.rng.random(), card)
            if best is None or cand[:2] > best[:2]:
                best = cand
        return best[2] if best is not None else None

    def pick_suit(self, game: CrazyEights) -> Suit:
        counts = Counter(card.suit for card in game.get_hand(self) if not is_wild(card))
        if not counts:
            return super().pick_suit(game)
        top = max(counts.values())
        return self.rng.choice([s for s in SUITS if counts[s] == top])


Awaiting = Literal["card", "suit"]


class ExternalPlayer:
    """A participant driven from outside the engine, e.g. by a UI.

    Prompts only record what is being waited for and notify the optional hooks;
    the adapter answers later through ``play_index``, ``draw`` or ``select``.
    Answers may come from several threads: each one checks the prompt, reads the
    hand and calls the engine while holding the game lock.
    """

    def __init__(
        self,
        name: str = "You",
        on_turn: Callable[[list[Card]], None] | None = None,
        on_choose_suit: Callable[[], None] | None = None,
    ) -> None:
        self.name = name
        self.on_turn = on_turn
        self.on_choose_suit = on_choose_suit
        self.game: CrazyEights | None = None
        self.awaiting: Awaiting | None = None
        self.hand: list[Card] = []

    def __repr__(self) -> str:
        return f"ExternalPlayer({self.name!r})"

    def take_turn(self, hand: list[Card], game: CrazyEights) -> None:
        self.game = game
        self.hand = hand
        self.awaiting = "card"
        if self.on_turn is not None:
            self.on_turn(list(hand))

    def choose_suit(self, game: CrazyEights) -> None:
        self.game = game
        self.awaiting = "suit"
        if self.on_choose_suit is not None:
            self.on_choose_suit()

    def _game(self) -> CrazyEights:
        if self.game is None:
            raise GameStateError(f"{self.name} has not been prompted yet.")
        return self.game

    def _require(self, awaiting: Awaiting) -> None:
        if self.awaiting != awaiting:
            raise GameStateError(f"{self.name} is not being asked for a {awaiting}.")

    def play_index(self, index: int) -> PlayResult:
        """Play the card at ``index`` of the player's current hand."""
        game = self._game()
        with game.lock:
            self._require("card")
            hand = game.get_hand(self)
            if not 0 <= index < len(hand):
                return PlayResult(ok=False, error="Invalid hand index.")
            return self._answer(game, hand[index])

    def draw(self) -> PlayResult:
        game = self._game()
        with game.lock:
            self._require("card")
            return self._answer(game, None)

    def _answer(self, game: CrazyEights, card: Card | None) -> PlayResult:
        # The engine may prompt this player again before play_card returns.
        self.awaiting = None
        result = game.play_card(self, card)
        if not result.ok:
            self.awaiting = "card"
        return result

    def select(self, suit: Suit) -> None:
        game = self._game()
        with game.lock:
            self._require("suit")
            self.awaiting = None
            try:
                game.select_suit(self, suit)
            except (GameStateError, ValueError):
                self.awaiting = "suit"
                raise
