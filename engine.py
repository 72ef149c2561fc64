# engine.py - Simulation and Run State Machine
"""
Headless core of the game: obstacle movement, spawning, player moves,
the endless-scroll shift, collisions and the Playing / Paused / GameOver
state machine.

Nothing here draws anything. The session pushes value-typed state to a
Renderer and is driven by input events plus two periodic ticks that run
on an injected Scheduler (tkinter's `after` in the real game, a manual
clock in tests). Everything runs on one event-loop thread.
"""

import logging
import random
from enum import Enum, auto
from typing import Any, Callable, Iterable, Protocol

from config import (
    MILESTONES, COMPETITIONS, PERMANENT_REVEAL_AFTER, STRICT_STATE,
    MOVE_PERIOD_MS, SPAWN_PERIOD_MS, SPAWN_MIN, SPAWN_MAX, PLAYER_START,
    SCROLL_SCORE_MIN, SCROLL_ROW_LIMIT, SCROLL_SHIFT,
)
from model import (
    ContentEntry, Direction, Grid, InputEvent, Move, Obstacle,
    ObstacleSet, PlayerState, Position,
)

logger = logging.getLogger(__name__)


class RunState(Enum):
    """Run states. IDLE and GAME_OVER are the between-run states."""
    IDLE = auto()
    PLAYING = auto()
    PAUSED_FOR_REVEAL = auto()
    GAME_OVER = auto()


class InvalidTransition(RuntimeError):
    """Raised in strict mode when calling code requests an illegal transition."""


# ------------------------------------------------------------------ #
# COLLABORATORS
# ------------------------------------------------------------------ #
class Renderer(Protocol):
    """Presentation side. Receives state, never calls back into the core."""

    def render_grid(self) -> None: ...
    def render_player(self, position: Position) -> None: ...
    def render_obstacles(self, obstacles: list[Obstacle]) -> None: ...
    def update_score(self, value: int) -> None: ...
    def render_cards(self, entries: list[ContentEntry]) -> None: ...
    def show_reveal(self, entry: ContentEntry) -> None: ...
    def hide_reveal(self) -> None: ...
    def show_game_over(self, final_score: int) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Any: ...
    def cancel(self, handle: Any) -> None: ...


class PersistentCounter(Protocol):
    def get(self) -> int: ...
    def increment(self) -> None: ...


class TkScheduler:
    """Scheduler backed by a tkinter widget's after/after_cancel."""

    def __init__(self, widget) -> None:
        self.widget = widget

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> str:
        return self.widget.after(delay_ms, callback)

    def cancel(self, handle: str) -> None:
        self.widget.after_cancel(handle)


class Ticker:
    """
    Named periodic task on a Scheduler.

    start() always begins a fresh period; stop() cancels the outstanding
    callback. A fire that was already queued when stop() ran is dropped.
    """

    def __init__(self, name: str, scheduler: Scheduler, period_ms: int,
                 callback: Callable[[], None], immediate: bool = False) -> None:
        self.name = name
        self.scheduler = scheduler
        self.period_ms = period_ms
        self.callback = callback
        self.immediate = immediate
        self._handle: Any = None
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        self.stop()
        self._schedule(self._generation)
        logger.debug(f"Ticker {self.name} started ({self.period_ms} ms)")
        if self.immediate:
            self.callback()

    def stop(self) -> None:
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None
            logger.debug(f"Ticker {self.name} stopped")
        self._generation += 1

    def _schedule(self, generation: int) -> None:
        self._handle = self.scheduler.call_later(
            self.period_ms, lambda: self._fire(generation))

    def _fire(self, generation: int) -> None:
        if generation != self._generation:
            return  # stale
        # Re-arm first so the callback may stop() us cleanly
        self._schedule(generation)
        self.callback()


# ------------------------------------------------------------------ #
# SPAWNING / PLAYER / COLLISION
# ------------------------------------------------------------------ #
class Spawner:
    """Drops a random batch of cars into random lanes on each spawn tick."""

    def __init__(self, obstacles: ObstacleSet, rng: random.Random,
                 min_count: int = SPAWN_MIN, max_count: int = SPAWN_MAX) -> None:
        self.obstacles = obstacles
        self.rng = rng
        self.min_count = min_count
        self.max_count = max_count

    def spawn(self) -> int:
        """Attempt a batch; occupied lanes are skipped. Returns how many were placed."""
        grid = self.obstacles.grid
        attempts = self.rng.randint(self.min_count, self.max_count)
        placed = 0
        for _ in range(attempts):
            row = self.rng.randint(grid.lane_row_min, grid.lane_row_max)
            direction = self.rng.choice((Direction.LEFT, Direction.RIGHT))
            if self.obstacles.add(row, direction) is not None:
                placed += 1
        logger.debug(f"Spawn tick: {placed}/{attempts} placed")
        return placed


def collides(position: Position, obstacles: Iterable[Obstacle]) -> bool:
    """True when some obstacle sits exactly on the player's cell."""
    return any(obs.row == position.row and obs.col == position.col for obs in obstacles)


class PlayerController:
    """Player position, score and the endless-scroll shift."""

    def __init__(self, grid: Grid, obstacles: ObstacleSet,
                 start: tuple[int, int] = PLAYER_START,
                 scroll_score_min: int = SCROLL_SCORE_MIN,
                 scroll_row_limit: int = SCROLL_ROW_LIMIT,
                 scroll_shift: int = SCROLL_SHIFT) -> None:
        if not grid.in_bounds(*start):
            raise ValueError(f"start position {start} outside the grid")
        if scroll_row_limit - 1 + scroll_shift >= grid.rows:
            raise ValueError("scroll shift would push the player off the grid")
        self.grid = grid
        self.obstacles = obstacles
        self.start = start
        self.scroll_score_min = scroll_score_min
        self.scroll_row_limit = scroll_row_limit
        self.scroll_shift = scroll_shift
        self.state = PlayerState(*start)

    @property
    def position(self) -> Position:
        return self.state.position

    @property
    def score(self) -> int:
        return self.state.score

    def reset(self) -> None:
        self.state = PlayerState(*self.start)

    def apply_move(self, direction: Direction,
                   on_score: Callable[[int], None] | None = None) -> bool:
        """
        Step one cell, clamped to the board.

        Upward steps score a point and call on_score with the new score
        before the scroll shift is evaluated. Returns False when an edge
        blocks the move (nothing changes).
        """
        s = self.state
        row = min(max(s.row + direction.d_row, 0), self.grid.rows - 1)
        col = min(max(s.col + direction.d_col, 0), self.grid.cols - 1)
        if row == s.row and col == s.col:
            return False

        old_row = s.row
        s.row, s.col = row, col
        if row < old_row:
            s.score += 1
            if on_score is not None:
                on_score(s.score)

        self._maybe_scroll()
        return True

    def _maybe_scroll(self) -> bool:
        s = self.state
        if s.score > self.scroll_score_min and s.row < self.scroll_row_limit:
            s.row += self.scroll_shift
            self.obstacles.shift_rows_by(self.scroll_shift)
            logger.debug(f"Scroll shift: player now at row {s.row}, "
                         f"{len(self.obstacles)} cars kept")
            return True
        return False


# ------------------------------------------------------------------ #
# SESSION (RUN STATE MACHINE)
# ------------------------------------------------------------------ #
class Session:
    """
    One game instance with an explicit lifecycle.

    Creating a session reads the play counter once to decide whether every
    card starts revealed; destroy() cancels both ticks. Between runs the
    session sits in IDLE or GAME_OVER and start_run() begins a new run.
    """

    VALID_TRANSITIONS: set[tuple[RunState, RunState]] = {
        (RunState.IDLE, RunState.PLAYING),
        (RunState.GAME_OVER, RunState.PLAYING),
        (RunState.PLAYING, RunState.PAUSED_FOR_REVEAL),
        (RunState.PAUSED_FOR_REVEAL, RunState.PLAYING),
        (RunState.PLAYING, RunState.GAME_OVER),
        # A move can reach a milestone and a car on the same step
        (RunState.PAUSED_FOR_REVEAL, RunState.GAME_OVER),
        (RunState.PLAYING, RunState.IDLE),
        (RunState.PAUSED_FOR_REVEAL, RunState.IDLE),
        (RunState.GAME_OVER, RunState.IDLE),
    }

    def __init__(self, renderer: Renderer, scheduler: Scheduler,
                 counter: PersistentCounter, *,
                 grid: Grid | None = None,
                 rng: random.Random | None = None,
                 milestones: tuple[int, ...] = MILESTONES,
                 content: list[ContentEntry] | None = None,
                 permanent_reveal_after: int | None = PERMANENT_REVEAL_AFTER,
                 move_period_ms: int = MOVE_PERIOD_MS,
                 spawn_period_ms: int = SPAWN_PERIOD_MS,
                 strict: bool = STRICT_STATE) -> None:
        if content is None:
            content = [ContentEntry.from_dict(c) for c in COMPETITIONS]
        if len(milestones) != len(content):
            raise ValueError("each milestone needs exactly one content entry")
        if list(milestones) != sorted(set(milestones)):
            raise ValueError("milestones must be strictly ascending")

        self.renderer = renderer
        self.counter = counter
        self.grid = grid or Grid()
        self.milestones = tuple(milestones)
        self.content = list(content)
        self.strict = strict

        self.obstacles = ObstacleSet(self.grid)
        self.player = PlayerController(self.grid, self.obstacles)
        self.spawner = Spawner(self.obstacles, rng or random.Random())

        self.move_ticker = Ticker("move", scheduler, move_period_ms, self._on_move_tick)
        self.spawn_ticker = Ticker("spawn", scheduler, spawn_period_ms,
                                   self._on_spawn_tick, immediate=True)

        self.state = RunState.IDLE

        # Decided once per session, never re-read mid-run
        plays = counter.get()
        self.preseeded = (permanent_reveal_after is not None
                          and plays >= permanent_reveal_after)
        self.revealed: set[int] = self._initial_reveals()
        logger.info(f"Session created (plays={plays}, preseeded={self.preseeded})")
        self.renderer.render_cards(self.revealed_entries())

    # --------- Read-only views --------- #
    @property
    def score(self) -> int:
        return self.player.score

    @property
    def position(self) -> Position:
        return self.player.position

    def revealed_entries(self) -> list[ContentEntry]:
        """Revealed cards in table order."""
        return [entry for i, entry in enumerate(self.content) if i in self.revealed]

    # --------- Lifecycle --------- #
    def start_run(self) -> bool:
        """Reset the board and start both ticks."""
        if not self._transition(RunState.PLAYING, "start_run",
                                (RunState.IDLE, RunState.GAME_OVER)):
            return False

        self.player.reset()
        self.obstacles.clear()
        self.revealed = self._initial_reveals()

        self.renderer.hide_reveal()
        self.renderer.render_cards(self.revealed_entries())
        self.renderer.update_score(self.score)
        self.renderer.render_grid()
        self.renderer.render_player(self.position)
        self._start_ticks()
        return True

    def destroy(self) -> None:
        """Cancel every outstanding tick and park the session in IDLE."""
        self._stop_ticks()
        if self.state is not RunState.IDLE:
            self._transition(RunState.IDLE)
        logger.info("Session destroyed")

    # --------- Input --------- #
    def handle(self, event: InputEvent) -> None:
        """Dispatch one input event according to the current state."""
        if self.state is RunState.PAUSED_FOR_REVEAL:
            # Any input dismisses the reveal; it is never taken as a move
            self.resume()
        elif self.state is RunState.PLAYING and isinstance(event, Move):
            self.move(event.direction)
        else:
            logger.debug(f"Discarded {event} in {self.state.name}")

    def move(self, direction: Direction) -> bool:
        """Apply a move intent. Returns whether the player actually moved."""
        if self.state is not RunState.PLAYING:
            return False
        if not self.player.apply_move(direction, on_score=self._on_score):
            return False

        self.renderer.render_player(self.position)
        self.renderer.render_obstacles(self.obstacles.snapshot())
        self._check_collision()
        return True

    # --------- Pause / resume --------- #
    def pause_for_reveal(self, index: int) -> bool:
        if not self._transition(RunState.PAUSED_FOR_REVEAL, "pause_for_reveal"):
            return False
        self._stop_ticks()
        self.renderer.show_reveal(self.content[index])
        return True

    def resume(self) -> bool:
        if not self._transition(RunState.PLAYING, "resume", (RunState.PAUSED_FOR_REVEAL,)):
            return False
        self.renderer.hide_reveal()
        self._start_ticks()
        return True

    # --------- Ticks --------- #
    def _on_move_tick(self) -> None:
        if self.state is not RunState.PLAYING:
            return
        self.obstacles.advance_all()
        self.renderer.render_obstacles(self.obstacles.snapshot())
        self._check_collision()

    def _on_spawn_tick(self) -> None:
        if self.state is not RunState.PLAYING:
            return
        self.spawner.spawn()
        self.renderer.render_obstacles(self.obstacles.snapshot())

    def _start_ticks(self) -> None:
        self.move_ticker.start()
        self.spawn_ticker.start()

    def _stop_ticks(self) -> None:
        self.move_ticker.stop()
        self.spawn_ticker.stop()

    # --------- Rules --------- #
    def _on_score(self, score: int) -> None:
        self.renderer.update_score(score)
        self._check_milestones(score)

    def _check_milestones(self, score: int) -> None:
        for index, threshold in enumerate(self.milestones):
            if score == threshold and index not in self.revealed:
                self.revealed.add(index)
                logger.info(f"Milestone {threshold} reached, revealing "
                            f"{self.content[index].name}")
                self.renderer.render_cards(self.revealed_entries())
                self.pause_for_reveal(index)

    def _check_collision(self) -> bool:
        if self.state is RunState.GAME_OVER:
            return True
        if not collides(self.position, self.obstacles):
            return False
        self._game_over()
        return True

    def _game_over(self) -> None:
        was_paused = self.state is RunState.PAUSED_FOR_REVEAL
        if not self._transition(RunState.GAME_OVER):
            return
        self._stop_ticks()
        self.counter.increment()
        if was_paused:
            self.renderer.hide_reveal()
        self.renderer.show_game_over(self.score)

    # --------- Helpers --------- #
    def _initial_reveals(self) -> set[int]:
        return set(range(len(self.content))) if self.preseeded else set()

    def _transition(self, to_state: RunState, action: str = "",
                    from_states: tuple[RunState, ...] | None = None) -> bool:
        allowed = (self.state, to_state) in self.VALID_TRANSITIONS
        if from_states is not None:
            allowed = allowed and self.state in from_states
        if not allowed:
            message = f"Invalid transition: {self.state.name} -> {to_state.name}"
            if action:
                message += f" ({action})"
            if self.strict:
                raise InvalidTransition(message)
            logger.warning(message)
            return False
        old_state = self.state
        self.state = to_state
        logger.info(f"State transition: {old_state.name} -> {to_state.name} "
                    f"(score={self.score})")
        return True
