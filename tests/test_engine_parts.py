from __future__ import annotations

import random

import pytest

from engine import PlayerController, Spawner, Ticker, collides
from model import Direction, Grid, Obstacle, ObstacleSet, Position


class ScriptedRandom:
    """Feeds fixed answers to randint/choice in call order."""

    def __init__(self, ints: list[int], choices: list[Direction]) -> None:
        self.ints = list(ints)
        self.choices = list(choices)
        self.randint_calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.randint_calls.append((a, b))
        return self.ints.pop(0)

    def choice(self, seq):
        value = self.choices.pop(0)
        assert value in seq
        return value


# --------- Ticker --------- #
def test_ticker_fires_every_period(scheduler) -> None:
    calls = []
    ticker = Ticker("move", scheduler, 400, lambda: calls.append(scheduler.now))
    ticker.start()
    scheduler.advance(1200)
    assert calls == [400, 800, 1200]


def test_ticker_immediate_first_fire(scheduler) -> None:
    calls = []
    ticker = Ticker("spawn", scheduler, 1200, lambda: calls.append(scheduler.now), immediate=True)
    ticker.start()
    assert calls == [0]
    scheduler.advance(2400)
    assert calls == [0, 1200, 2400]


def test_ticker_stop_leaves_nothing_scheduled(scheduler) -> None:
    calls = []
    ticker = Ticker("move", scheduler, 400, lambda: calls.append(1))
    ticker.start()
    ticker.stop()
    assert not ticker.running
    assert scheduler.pending == 0
    scheduler.advance(4000)
    assert calls == []


def test_ticker_restart_begins_fresh_period(scheduler) -> None:
    calls = []
    ticker = Ticker("move", scheduler, 400, lambda: calls.append(scheduler.now))
    ticker.start()
    scheduler.advance(300)
    ticker.stop()
    ticker.start()
    scheduler.advance(300)
    assert calls == []
    scheduler.advance(100)
    assert calls == [700]


def test_ticker_can_stop_itself_from_callback(scheduler) -> None:
    calls = []

    def once() -> None:
        calls.append(scheduler.now)
        ticker.stop()

    ticker = Ticker("move", scheduler, 400, once)
    ticker.start()
    scheduler.advance(2000)
    assert calls == [400]
    assert scheduler.pending == 0


# --------- Spawner --------- #
def test_spawner_skips_occupied_lanes(obstacles: ObstacleSet) -> None:
    rng = ScriptedRandom(ints=[3, 5, 5, 8], choices=[Direction.LEFT, Direction.RIGHT, Direction.RIGHT])
    placed = Spawner(obstacles, rng).spawn()

    assert placed == 2
    assert [(o.row, o.col, o.direction) for o in obstacles] == [
        (5, 9, Direction.LEFT),
        (8, 0, Direction.RIGHT),
    ]
    assert rng.randint_calls == [(2, 5), (1, 13), (1, 13), (1, 13)]


def test_spawner_batches_stay_in_bounds(obstacles: ObstacleSet) -> None:
    spawner = Spawner(obstacles, random.Random(1234))
    for _ in range(200):
        obstacles.clear()
        placed = spawner.spawn()
        assert 1 <= placed <= 5
        rows = [o.row for o in obstacles]
        assert len(rows) == len(set(rows))
        assert all(obstacles.grid.is_lane_row(r) for r in rows)
        for o in obstacles:
            assert o.col == (0 if o.direction is Direction.RIGHT else obstacles.grid.cols - 1)


# --------- Collision --------- #
def test_collision_requires_exact_cell() -> None:
    cars = [Obstacle(7, 4, Direction.LEFT), Obstacle(8, 5, Direction.RIGHT)]
    assert collides(Position(7, 4), cars)
    assert collides(Position(8, 5), cars)
    assert not collides(Position(7, 5), cars)
    assert not collides(Position(6, 4), cars)
    assert not collides(Position(7, 4), [])


# --------- Player controller --------- #
@pytest.fixture()
def player(grid: Grid, obstacles: ObstacleSet) -> PlayerController:
    return PlayerController(grid, obstacles)


def test_player_starts_bottom_middle(player: PlayerController) -> None:
    assert player.position == (14, 4)
    assert player.score == 0


def test_blocked_move_is_a_noop(player: PlayerController) -> None:
    assert player.apply_move(Direction.DOWN) is False
    assert player.position == (14, 4)
    player.state.col = 0
    assert player.apply_move(Direction.LEFT) is False
    player.state.col = 9
    assert player.apply_move(Direction.RIGHT) is False
    player.state.row = 0
    assert player.apply_move(Direction.UP) is False
    assert player.score == 0


def test_only_upward_moves_score(player: PlayerController) -> None:
    scores = []
    for direction in (Direction.UP, Direction.LEFT, Direction.UP, Direction.DOWN,
                      Direction.RIGHT, Direction.UP, Direction.DOWN):
        assert player.apply_move(direction, on_score=scores.append)
    assert player.score == 3
    assert scores == [1, 2, 3]


def test_no_scroll_at_or_below_score_threshold(player: PlayerController) -> None:
    player.state.row, player.state.score = 5, 12
    player.apply_move(Direction.UP)
    assert (player.state.row, player.score) == (4, 13)


def test_scroll_shift_moves_player_and_cars(player: PlayerController, obstacles: ObstacleSet) -> None:
    for row in (1, 4, 6, 12):
        obstacles.add(row, Direction.LEFT)
    player.state.row, player.state.score = 5, 13
    seen_rows = []

    assert player.apply_move(Direction.UP, on_score=lambda s: seen_rows.append(player.state.row))

    assert seen_rows == [4]  # score callback ran before the shift
    assert player.position == (14, 4)
    assert player.score == 14
    assert sorted(o.row for o in obstacles) == [11, 14]
    assert all(o.row < obstacles.grid.rows for o in obstacles)


def test_sideways_move_near_top_also_shifts(player: PlayerController) -> None:
    player.state.row, player.state.score = 3, 20
    player.apply_move(Direction.LEFT)
    assert player.position == (13, 3)
    assert player.score == 20


def test_scroll_constants_must_keep_player_on_grid(grid: Grid, obstacles: ObstacleSet) -> None:
    with pytest.raises(ValueError):
        PlayerController(grid, obstacles, scroll_row_limit=6, scroll_shift=10)
