from __future__ import annotations

import logging
import random
import threading
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Callable, Protocol

from .deck import DECK_SIZE, Deck, DiscardPile
from .effects import apply_effect, is_playable_on
from .types import SUITS, Card, EventKind, GameEvent, GameState, Suit

logger = logging.getLogger(__name__)

INITIAL_HAND_SIZE = 5

Listener = Callable[[GameEvent], None]


class GameStateError(RuntimeError):
    """An action was attempted by the wrong player or in the wrong game state."""


@dataclass(frozen=True)
class GameConfig:
    initial_hand_size: int = INITIAL_HAND_SIZE
    min_players: int = 1
    max_players: int = 8
    # Catch and log listener failures instead of aborting the turn. When False, a
    # failing listener leaves the game stuck mid-turn for good: start, add_player
    # and remove_player keep raising GameStateError on that engine.
    isolate_listeners: bool = False


@dataclass(frozen=True)
class PlayResult:
    ok: bool
    error: str | None = None

    def __bool__(self) -> bool:
        return self.ok


class CrazyEightsPlayer(Protocol):
    def take_turn(self, hand: list[Card], game: CrazyEights) -> None:
        """Called when it is this player's turn.

        The player must eventually call ``game.play_card`` with a card from
        ``hand``, or with None to draw. It may do so before returning or later.
        """
        ...

    def choose_suit(self, game: CrazyEights) -> None:
        """Called after this player played an eight; answer with ``game.select_suit``."""
        ...


def _label(player: object) -> str:
    return str(getattr(player, "name", None) or type(player).__name__)


class CrazyEights:
    """Crazy Eights game engine.

    Special ranks:
      Ace   - reverses the order of play
      2     - the next player draws 2 cards
      8     - wild, the player picks the suit to continue with
      Queen - the next player is skipped

    The engine drives play by prompting the current player. Players answer by
    calling back into ``play_card``/``draw_card``/``select_suit``, either from
    inside the prompt or at any later point.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng or random.Random(seed)
        self._players: list[CrazyEightsPlayer] = []
        self._registered: list[CrazyEightsPlayer] = []
        self._hands: dict[int, list[Card]] = {}
        self._deck = Deck()
        self._pile = DiscardPile()
        self._current: CrazyEightsPlayer | None = None
        self._winner: CrazyEightsPlayer | None = None
        self._state: GameState = "inactive"
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()
        self._prompting = False
        self._resolving = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_player(self, player: CrazyEightsPlayer) -> None:
        with self._lock:
            if self.is_game_active():
                raise GameStateError("Cannot add players to a game in progress.")
            if self._find_seat(player) is not None:
                raise ValueError(f"Player {_label(player)} is already registered.")
            self._players.append(player)
            self._registered.append(player)
            self._hands[id(player)] = []

    def remove_player(self, player: CrazyEightsPlayer) -> None:
        with self._lock:
            if self.is_game_active():
                raise GameStateError("Cannot remove players from a game in progress.")
            seat = self._seat(player)
            self._players.pop(seat)
            self._registered = [p for p in self._registered if p is not player]
            del self._hands[id(player)]
            if self._winner is player:
                self._winner = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def lock(self) -> AbstractContextManager[bool]:
        """Held by every mutating entry point. Adapters may hold it to make a
        read-then-act sequence atomic."""
        return self._lock

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def players(self) -> list[CrazyEightsPlayer]:
        """Snapshot of the current turn order."""
        return list(self._players)

    @property
    def registered_players(self) -> list[CrazyEightsPlayer]:
        """Players in registration order, unaffected by reversals."""
        return list(self._registered)

    @property
    def current_player(self) -> CrazyEightsPlayer | None:
        return self._current

    @property
    def winner(self) -> CrazyEightsPlayer | None:
        """The player who emptied their hand in the last finished game."""
        return self._winner

    @property
    def top_card(self) -> Card | None:
        return self._pile.top

    @property
    def deck_size(self) -> int:
        return len(self._deck)

    @property
    def discard_pile_size(self) -> int:
        return len(self._pile)

    def deck_cards(self) -> list[Card]:
        return list(self._deck.cards)

    def discard_pile_cards(self) -> list[Card]:
        """Physical discard pile, oldest first. The visible top may differ after an eight."""
        return list(self._pile.cards)

    def is_game_active(self) -> bool:
        return self._state != "inactive"

    def is_current(self, player: CrazyEightsPlayer) -> bool:
        return self._current is player

    def get_top_card(self) -> Card | None:
        # Cards are frozen, handing out the object itself is safe.
        return self._pile.top

    def get_hand(self, player: CrazyEightsPlayer) -> list[Card]:
        self._seat(player)
        return list(self._hands[id(player)])

    def turn_order(self, start: CrazyEightsPlayer | None = None) -> list[CrazyEightsPlayer]:
        """Players in order of play, beginning with ``start`` (default: first seat)."""
        if start is None:
            return list(self._players)
        seat = self._seat(start)
        return self._players[seat:] + self._players[:seat]

    def get_hand_sizes(self, player: CrazyEightsPlayer) -> list[int] | None:
        """Hand sizes in order of play, starting with ``player``. None when inactive."""
        if not self.is_game_active():
            return None
        return [len(self._hands[id(p)]) for p in self.turn_order(player)]

    def is_playable(self, card: Card) -> bool:
        top = self._pile.top
        if top is None:
            return False
        return is_playable_on(card, top)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def _notify(self, kind: EventKind, value: Card | bool | None = None) -> None:
        event = GameEvent(kind=kind, value=value)
        for listener in list(self._listeners):
            if not self.config.isolate_listeners:
                listener(event)
                continue
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %s event", listener, kind)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Deal a new game and play it until it ends or waits on a player."""
        with self._lock:
            if self.is_game_active():
                raise GameStateError("A game is already in progress.")
            count = len(self._players)
            if count == 0 or count < self.config.min_players:
                raise GameStateError(
                    f"Need at least {max(1, self.config.min_players)} players, have {count}."
                )
            if count > self.config.max_players:
                raise GameStateError(f"At most {self.config.max_players} players can play.")
            if count * self.config.initial_hand_size + 1 > DECK_SIZE:
                raise GameStateError(
                    f"Cannot deal {self.config.initial_hand_size} cards to {count} players."
                )

            self._state = "playing"
            self._winner = None
            # A previous game's Ace reversals do not carry over.
            self._players[:] = self._registered
            self._deck.reset(self.rng)
            self._pile.clear()
            for hand in self._hands.values():
                hand.clear()
            for player in self._players:
                self._current = player
                self.draw_cards(self.config.initial_hand_size)
            first = self._deck.draw(self._pile, self.rng)
            assert first is not None
            self._discard(first)
            self._current = self._players[0]
            logger.info("Started game with %d players, top card %s", count, first)
            self._run_rounds()

    def _run_rounds(self) -> None:
        # A play made from inside take_turn returns here through the loop below
        # instead of nesting another prompt.
        if self._prompting:
            return
        while self._state == "playing":
            player = self._current
            assert player is not None
            hand = list(self._hands[id(player)])
            self._state = "waiting_for_card"
            logger.debug("Prompting %s with %d cards", _label(player), len(hand))
            self._prompting = True
            try:
                player.take_turn(hand, self)
            finally:
                self._prompting = False

    def _check_end_game(self) -> bool:
        for player in self._players:
            if not self._hands[id(player)]:
                self._state = "inactive"
                self._winner = player
                logger.info("Game over, %s has no cards left", _label(player))
                self._notify("game_complete", True)
                return True
        return False

    def _finish_resolution(self) -> None:
        if not self._check_end_game():
            self._run_rounds()

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def play_card(self, player: CrazyEightsPlayer, card: Card | None) -> PlayResult:
        """Play ``card`` from the player's hand, or draw a card when ``card`` is None.

        Raises GameStateError when it is not this player's turn to play.
        Returns a failed PlayResult for a card that is not held or not playable;
        the player may then try again.
        """
        with self._lock:
            if self._state != "waiting_for_card" or not self.is_current(player):
                logger.debug("Rejected play by %s in state %s", _label(player), self._state)
                raise GameStateError("Player is not allowed to play a card at this time.")

            if card is None:
                self._state = "playing"
                drawn = self._draw_one()
                logger.debug("%s draws %s", _label(player), drawn)
                self.move_to_next_player()
                self._finish_resolution()
                return PlayResult(ok=True)

            hand = self._hands[id(player)]
            index = next((i for i, held in enumerate(hand) if held is card), None)
            if index is None:
                return PlayResult(ok=False, error=f"{card} is not in your hand.")
            if not self.is_playable(card):
                return PlayResult(ok=False, error=f"{card} cannot be played on {self.top_card}.")

            self._state = "playing"
            hand.pop(index)
            self._discard(card)
            self._notify("hand_size")
            logger.debug("%s plays %s", _label(player), card)
            self._resolving = True
            try:
                apply_effect(card, self)
            finally:
                self._resolving = False
            if self._state != "waiting_for_suit":
                self._finish_resolution()
            return PlayResult(ok=True)

    def draw_card(self, player: CrazyEightsPlayer) -> PlayResult:
        return self.play_card(player, None)

    def select_suit(self, player: CrazyEightsPlayer, suit: Suit) -> None:
        """Declare the suit after an eight. The top card becomes a virtual card of
        ``suit`` with the eight's rank, and the turn passes on.

        Raises GameStateError unless ``player`` was asked to choose a suit.
        """
        with self._lock:
            if self._state != "waiting_for_suit" or not self.is_current(player):
                raise GameStateError("Player is not allowed to select a suit at this time.")
            if suit not in SUITS:
                raise ValueError(f"Unknown suit: {suit!r}")
            self._state = "playing"
            top = self._pile.declare_suit(suit)
            logger.debug("%s selects %s", _label(player), suit)
            self._notify("top_card", top)
            self.move_to_next_player()
            if not self._resolving:
                self._finish_resolution()

    # ------------------------------------------------------------------
    # Card effects; each is a no-op outside the "playing" state
    # ------------------------------------------------------------------

    def move_to_next_player(self) -> None:
        if self._state != "playing":
            return
        seat = self._seat(self._current)
        self._current = self._players[(seat + 1) % len(self._players)]

    def reverse_turn_order(self) -> None:
        if self._state != "playing":
            return
        self._players.reverse()

    def draw_cards(self, n: int) -> None:
        if self._state != "playing":
            return
        for _ in range(n):
            self._draw_one()

    def request_suit(self) -> None:
        if self._state != "playing":
            return
        assert self._current is not None
        self._state = "waiting_for_suit"
        self._current.choose_suit(self)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find_seat(self, player: object) -> int | None:
        return next((i for i, p in enumerate(self._players) if p is player), None)

    def _seat(self, player: object) -> int:
        seat = self._find_seat(player)
        if seat is None:
            raise ValueError(f"Player {_label(player)} is not registered.")
        return seat

    def _draw_one(self) -> Card | None:
        if self._state != "playing":
            return None
        assert self._current is not None
        card = self._deck.draw(self._pile, self.rng)
        if card is None:
            logger.warning("No cards left to draw for %s", _label(self._current))
            return None
        self._hands[id(self._current)].append(card)
        self._notify("hand_size")
        return card

    def _discard(self, card: Card) -> None:
        self._pile.push(card)
        self._notify("top_card", card)
