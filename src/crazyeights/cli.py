from __future__ import annotations

import argparse
import logging
import random
from pathlib import Path
from typing import Sequence

from crazyeights.engine.game import CrazyEights, GameStateError
from crazyeights.engine.players import HeuristicPlayer, RandomPlayer
from crazyeights.logging_utils import LOG_LEVEL, setup_logging
from crazyeights.paths import get_paths
from crazyeights.services.content import ContentService
from crazyeights.services.telemetry import TelemetryService

logger = logging.getLogger(__name__)

STRATEGIES = {"random": RandomPlayer, "heuristic": HeuristicPlayer}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crazyeights", description="Play a game of Crazy Eights between automated players."
    )
    parser.add_argument("--players", type=int, default=3)
    parser.add_argument("--strategy", choices=sorted(STRATEGIES), default="random")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="game config JSON file")
    parser.add_argument("--telemetry", type=Path, default=None, help="append events to this JSONL file")
    parser.add_argument("--log-level", default=LOG_LEVEL)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    paths = get_paths()
    content = ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)
    config = content.load_config(args.config)

    rng = random.Random(args.seed)
    game = CrazyEights(config, rng=random.Random(rng.getrandbits(32)))
    player_cls = STRATEGIES[args.strategy]
    for i in range(args.players):
        game.add_player(player_cls(name=f"Bot{i + 1}", rng=random.Random(rng.getrandbits(32))))

    if args.telemetry is not None:
        game.add_listener(TelemetryService(args.telemetry).listener())

    logger.info("Simulating %d %s players, seed %s", args.players, args.strategy, args.seed)
    try:
        game.start()
    except GameStateError as e:
        print(f"Cannot start game: {e}")
        return 2

    for player in game.registered_players:
        print(f"{player.name}: {len(game.get_hand(player))} cards")  # type: ignore[attr-defined]
    winner = game.winner
    if winner is None:
        print("No winner.")
        return 1
    print(f"Winner: {winner.name}")  # type: ignore[attr-defined]
    return 0
