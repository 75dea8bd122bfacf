from __future__ import annotations

import random

import pytest

from crazyeights.engine.game import CrazyEights, GameConfig, GameStateError
from crazyeights.engine.players import ExternalPlayer, HeuristicPlayer, RandomPlayer
from crazyeights.engine.types import Card, GameEvent


def _locations(game: CrazyEights) -> list[Card]:
    cards = game.deck_cards() + game.discard_pile_cards()
    for p in game.registered_players:
        cards.extend(game.get_hand(p))
    return cards


def test_cards_are_conserved_through_whole_games() -> None:
    for seed in range(25):
        rng = random.Random(seed)
        game = CrazyEights(seed=seed)
        n = 2 + seed % 4
        for i in range(n):
            cls = RandomPlayer if i % 2 == 0 else HeuristicPlayer
            game.add_player(cls(name=f"P{i}", rng=random.Random(rng.getrandbits(32))))

        completions: list[GameEvent] = []
        checks = {"count": 0}

        def check(event: GameEvent) -> None:
            if event.kind == "game_complete":
                completions.append(event)
                return
            cards = _locations(game)
            assert len(cards) == 52
            assert len({id(c) for c in cards}) == 52
            checks["count"] += 1

        game.add_listener(check)
        game.start()

        assert checks["count"] > 0
        assert len(completions) == 1
        assert game.state == "inactive"
        assert game.winner is not None
        assert game.get_hand(game.winner) == []
        assert len(_locations(game)) == 52


def test_events_carry_changed_values() -> None:
    a, b = ExternalPlayer("a"), ExternalPlayer("b")
    game = CrazyEights(seed=3)
    events: list[GameEvent] = []
    game.add_listener(events.append)
    game.add_player(a)
    game.add_player(b)
    game.start()

    assert [e.kind for e in events].count("hand_size") == 10
    tops = [e for e in events if e.kind == "top_card"]
    assert len(tops) == 1
    assert tops[0].value is game.top_card

    events.clear()
    game.draw_card(a)
    assert events == [GameEvent("hand_size")]

    events.clear()
    eight = Card("spades", 8)
    game._hands[id(b)][:] = [eight, Card("clubs", 3)]
    game.play_card(b, eight)
    assert [e.kind for e in events] == ["top_card", "hand_size"]
    assert events[0].value is eight
    b.select("diamonds")
    assert events[-1] == GameEvent("top_card", Card("diamonds", 8))


def test_listeners_run_in_registration_order_and_can_unsubscribe() -> None:
    game = CrazyEights(seed=4)
    calls: list[str] = []

    def first(event: GameEvent) -> None:
        calls.append("first")

    def second(event: GameEvent) -> None:
        calls.append("second")

    game.add_listener(first)
    game.add_listener(second)
    game.add_player(ExternalPlayer("a"))
    game.add_player(ExternalPlayer("b"))
    game.start()
    assert calls[:2] == ["first", "second"]

    game.remove_listener(second)
    calls.clear()
    game.draw_card(game.current_player)  # type: ignore[arg-type]
    assert calls == ["first"]


def _broken(event: GameEvent) -> None:
    raise RuntimeError("display went away")


def test_listener_errors_propagate_by_default() -> None:
    game = CrazyEights(seed=5)
    game.add_player(ExternalPlayer("a"))
    game.add_player(ExternalPlayer("b"))
    game.add_listener(_broken)
    with pytest.raises(RuntimeError, match="display went away"):
        game.start()
    assert game.is_game_active()
    with pytest.raises(GameStateError):
        game.start()
    with pytest.raises(GameStateError):
        game.add_player(ExternalPlayer("c"))


def test_listener_errors_can_be_isolated(caplog) -> None:
    game = CrazyEights(GameConfig(isolate_listeners=True), seed=5)
    for i in range(3):
        game.add_player(RandomPlayer(f"P{i}", rng=random.Random(i)))
    seen: list[GameEvent] = []
    game.add_listener(_broken)
    game.add_listener(seen.append)
    game.start()

    assert game.state == "inactive"
    assert seen[-1] == GameEvent("game_complete", True)
    assert "Listener" in caplog.text
