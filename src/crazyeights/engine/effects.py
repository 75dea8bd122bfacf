from __future__ import annotations

from typing import Callable, Protocol

from .types import ACE, QUEEN, Card

WILD_RANK = 8
DRAW_TWO_RANK = 2
DRAW_TWO_COUNT = 2


class TurnControl(Protocol):
    """Operations a card effect may perform on the game.

    Every operation is a no-op unless the game is in the ``playing`` state.
    """

    def move_to_next_player(self) -> None: ...

    def reverse_turn_order(self) -> None: ...

    def draw_cards(self, n: int) -> None: ...

    def request_suit(self) -> None: ...


Effect = Callable[[TurnControl], None]


def _reverse(game: TurnControl) -> None:
    game.reverse_turn_order()
    game.move_to_next_player()


def _draw_two(game: TurnControl) -> None:
    game.move_to_next_player()
    game.draw_cards(DRAW_TWO_COUNT)


def _wild(game: TurnControl) -> None:
    # The turn advances once the suit is chosen, not here.
    game.request_suit()


def _skip(game: TurnControl) -> None:
    game.move_to_next_player()
    game.move_to_next_player()


def _pass(game: TurnControl) -> None:
    game.move_to_next_player()


RANK_EFFECTS: dict[int, Effect] = {
    ACE: _reverse,
    DRAW_TWO_RANK: _draw_two,
    WILD_RANK: _wild,
    QUEEN: _skip,
}

SPECIAL_PLAYABLE: frozenset[int] = frozenset({WILD_RANK})


def effect_for(rank: int) -> Effect:
    return RANK_EFFECTS.get(rank, _pass)


def apply_effect(card: Card, game: TurnControl) -> None:
    """Run the effect of a card that was just placed on the discard pile."""
    effect_for(card.rank)(game)


def is_wild(card: Card) -> bool:
    return card.rank in SPECIAL_PLAYABLE


def is_playable_on(card: Card, top: Card) -> bool:
    if is_wild(card):
        return True
    return card.suit == top.suit or card.rank == top.rank
