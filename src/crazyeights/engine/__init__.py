"""Headless rules engine for Crazy Eights.

IMPORTANT: This package must never import a UI toolkit.
"""

from .game import CrazyEights, CrazyEightsPlayer, GameConfig, GameStateError, PlayResult
from .players import AISpec, ExternalPlayer, HeuristicPlayer, RandomPlayer
from .types import SUITS, Card, GameEvent, GameState, Suit, card_image_key

__all__ = [
    "AISpec",
    "Card",
    "CrazyEights",
    "CrazyEightsPlayer",
    "ExternalPlayer",
    "GameConfig",
    "GameEvent",
    "GameState",
    "GameStateError",
    "HeuristicPlayer",
    "PlayResult",
    "RandomPlayer",
    "SUITS",
    "Suit",
    "card_image_key",
]
