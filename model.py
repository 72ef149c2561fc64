# model.py - Grid, Obstacles and Input Events
"""
Value types shared by the simulation and the front end.
The grid is a fixed rows x cols board; obstacles only travel on lane rows.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, NamedTuple

from config import GRID_ROWS, GRID_COLS, LANE_ROW_MIN, LANE_ROW_MAX


class Direction(Enum):
    """Move directions as (row delta, column delta)."""
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def d_row(self) -> int:
        return self.value[0]

    @property
    def d_col(self) -> int:
        return self.value[1]


@dataclass(frozen=True)
class Grid:
    """Fixed board dimensions and the lane sub-range."""
    rows: int = GRID_ROWS
    cols: int = GRID_COLS
    lane_row_min: int = LANE_ROW_MIN
    lane_row_max: int = LANE_ROW_MAX  # inclusive

    def __post_init__(self) -> None:
        if not 0 < self.lane_row_min <= self.lane_row_max < self.rows - 1:
            raise ValueError("lane rows must leave the first and last row free")

    def is_lane_row(self, row: int) -> bool:
        return self.lane_row_min <= row <= self.lane_row_max

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols


class Position(NamedTuple):
    row: int
    col: int


@dataclass
class Obstacle:
    """A car travelling horizontally along one lane."""
    row: int
    col: int
    direction: Direction

    def __post_init__(self) -> None:
        if self.direction not in (Direction.LEFT, Direction.RIGHT):
            raise ValueError(f"obstacles move horizontally, got {self.direction.name}")

    @property
    def position(self) -> Position:
        return Position(self.row, self.col)


class ObstacleSet:
    """Owns every obstacle on the board. At most one obstacle per lane."""

    def __init__(self, grid: Grid) -> None:
        self.grid = grid
        self._items: list[Obstacle] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(self._items)

    def clear(self) -> None:
        self._items.clear()

    def occupied(self, row: int) -> bool:
        return any(obs.row == row for obs in self._items)

    def add(self, row: int, direction: Direction) -> Obstacle | None:
        """
        Spawn an obstacle at the lane edge it drives away from.
        Returns None (and adds nothing) when the lane is already taken.
        """
        if not self.grid.is_lane_row(row):
            raise ValueError(f"row {row} is not a lane row")
        col = 0 if direction is Direction.RIGHT else self.grid.cols - 1
        return self.place(Obstacle(row, col, direction))

    def place(self, obstacle: Obstacle) -> Obstacle | None:
        """Insert a pre-built obstacle, honoring lane exclusivity."""
        if not self.grid.in_bounds(obstacle.row, obstacle.col):
            raise ValueError(f"obstacle outside the grid: {obstacle}")
        if self.occupied(obstacle.row):
            return None
        self._items.append(obstacle)
        return obstacle

    def advance_all(self) -> None:
        """Move every obstacle one column, wrapping around the board edges."""
        cols = self.grid.cols
        for obs in self._items:
            obs.col = (obs.col + obs.direction.d_col) % cols

    def shift_rows_by(self, delta: int) -> None:
        """Move every obstacle down by delta rows and drop those that fall off."""
        for obs in self._items:
            obs.row += delta
        self._items = [obs for obs in self._items if obs.row < self.grid.rows]

    def any_at(self, row: int, col: int) -> bool:
        return any(obs.row == row and obs.col == col for obs in self._items)

    def snapshot(self) -> list[Obstacle]:
        """Copies safe to hand to the renderer."""
        return [replace(obs) for obs in self._items]


@dataclass
class PlayerState:
    row: int
    col: int
    score: int = 0

    @property
    def position(self) -> Position:
        return Position(self.row, self.col)


@dataclass(frozen=True)
class ContentEntry:
    """One competition card revealed by a milestone."""
    name: str
    city: str
    host: str
    date: str

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> "ContentEntry":
        return cls(data["name"], data["city"], data["host"], data["date"])


# --------- Input events --------- #
@dataclass(frozen=True)
class Move:
    direction: Direction


@dataclass(frozen=True)
class AnyKey:
    """Generic 'continue' signal, only meaningful while a reveal is shown."""
    source: str = field(default="key", compare=False)


InputEvent = Move | AnyKey


# Keyboard mapping (arrows + WASD)
KEY_DIRECTIONS = {
    "Up": Direction.UP, "w": Direction.UP, "W": Direction.UP,
    "Down": Direction.DOWN, "s": Direction.DOWN, "S": Direction.DOWN,
    "Left": Direction.LEFT, "a": Direction.LEFT, "A": Direction.LEFT,
    "Right": Direction.RIGHT, "d": Direction.RIGHT, "D": Direction.RIGHT,
}
SWIPE_MIN = 30  # Pixels of drag before a click counts as a swipe


def swipe_direction(dx: float, dy: float, threshold: float = SWIPE_MIN) -> Direction | None:
    """Dominant-axis direction of a drag, or None for a tap."""
    if max(abs(dx), abs(dy)) < threshold:
        return None
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP
