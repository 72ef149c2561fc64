# game.py - Tkinter Front End
"""
Window side of the game: draws the lane grid on a tk.Canvas, shows the
score bar, the revealed competition cards and the overlays, and turns
keyboard and mouse input into events for the engine Session.
All game rules live in engine.py; this class only renders and forwards.
"""

import logging
import tkinter as tk

from config import (
    CELL_SIZE, BOARD_WIDTH, BOARD_HEIGHT, GRID_ROWS, GRID_COLS,
)
from audio_manager import AudioManager
from engine import Session, TkScheduler, RunState, PersistentCounter
from model import (
    KEY_DIRECTIONS, AnyKey, ContentEntry, Grid, Move, Obstacle, Position, swipe_direction,
)
from playcount import PlayCounter

logger = logging.getLogger(__name__)

# Colors
GRASS = "#2e8b57"
ROAD = "#3a3a3a"
LANE_MARK = "#555555"
ACCENT = "#00ffff"


class LaneGame(tk.Canvas):
    """Board canvas; implements the engine's Renderer interface."""

    def __init__(self, master: tk.Tk, counter: PersistentCounter | None = None,
                 **kwargs) -> None:
        """Build the widgets, then create the session that drives them."""
        super().__init__(master, width=BOARD_WIDTH, height=BOARD_HEIGHT,
                         bg="black", highlightthickness=0, **kwargs)

        self.grid_model = Grid(GRID_ROWS, GRID_COLS)
        self.audio = AudioManager()

        # Score bar (tkinter variable for automatic UI updates)
        self.score_txt = tk.StringVar(value="SCORE: 0")
        self.score_label = tk.Label(master, textvariable=self.score_txt,
                                    bg="black", fg=ACCENT, font=("Arial", 16, "bold"))
        self.score_label.pack(side="top", fill="x", pady=8)

        self.pack(side="left")

        # Revealed competition cards
        self.cards_frame = tk.Frame(master, bg="black")
        self.cards_frame.pack(side="right", fill="both", expand=True, padx=10)

        self._build_menu_overlay()
        self._build_reveal_overlay()

        # Swipe tracking
        self._drag_start: tuple[int, int] | None = None

        # Input binding
        master.bind("<KeyPress>", self._on_key)
        self.bind("<ButtonPress-1>", self._on_mouse_down)
        self.bind("<ButtonRelease-1>", self._on_mouse_up)

        self.session = Session(self, TkScheduler(self), counter or PlayCounter())
        self.render_grid()

    # ------------------------------------------------------------------ #
    # OVERLAYS
    # ------------------------------------------------------------------ #
    def _build_menu_overlay(self) -> None:
        """Title / game over panel with the play button."""
        self.menu_frame = tk.Frame(self.master, bg="#000000", bd=0)

        self.menu_title_label = tk.Label(self.menu_frame, text="",
                                         fg=ACCENT, bg="#000000", font=("Arial", 24, "bold"))
        self.menu_title_label.pack(pady=(0, 10))

        self.menu_info_label = tk.Label(self.menu_frame, text="",
                                        fg=ACCENT, bg="#000000", font=("Arial", 14, "bold"))
        self.menu_info_label.pack(pady=(0, 10))

        self.menu_button = tk.Button(self.menu_frame, text="PLAY", font=("Arial", 14, "bold"),
                                     fg="#000000", bg=ACCENT, activebackground="#33ffff",
                                     activeforeground="#000000", relief="flat",
                                     padx=20, pady=5, command=self.on_menu_button_pressed)
        self.menu_button.pack(pady=(0, 10))

        self.sound_button = tk.Button(self.menu_frame, text="Sound: ON",
                                      font=("Arial", 10, "bold"), fg="#000000", bg=ACCENT,
                                      activebackground="#33ffff", activeforeground="#000000",
                                      relief="flat", padx=10, pady=3,
                                      command=self._on_toggle_sound_clicked)
        self.sound_button.pack(pady=(0, 5))

        tk.Label(self.menu_frame,
                 text="Arrows / WASD or drag to move\nReach 10, 20, 30, 40 to reveal",
                 fg="#888888", bg="#000000", font=("Arial", 10, "italic")).pack(pady=(5, 0))

    def _build_reveal_overlay(self) -> None:
        """Full-board card shown when a milestone is reached."""
        self.reveal_frame = tk.Frame(self.master, bg="#111111", bd=2, relief="ridge")
        tk.Label(self.reveal_frame, text="COMPETITION UNLOCKED", fg="#ffcc00",
                 bg="#111111", font=("Arial", 12, "bold")).pack(pady=(10, 5), padx=20)
        self.reveal_name = tk.Label(self.reveal_frame, fg=ACCENT, bg="#111111",
                                    font=("Arial", 20, "bold"), wraplength=BOARD_WIDTH - 60)
        self.reveal_name.pack(pady=5, padx=20)
        self.reveal_city = tk.Label(self.reveal_frame, fg="white", bg="#111111", font=("Arial", 12))
        self.reveal_city.pack()
        self.reveal_host = tk.Label(self.reveal_frame, fg="white", bg="#111111", font=("Arial", 12))
        self.reveal_host.pack()
        self.reveal_date = tk.Label(self.reveal_frame, fg="white", bg="#111111", font=("Arial", 12))
        self.reveal_date.pack()
        tk.Label(self.reveal_frame, text="Press any key to continue", fg="#888888",
                 bg="#111111", font=("Arial", 10, "italic")).pack(pady=(10, 10))
        # Clicking the card also continues
        for widget in (self.reveal_frame, *self.reveal_frame.winfo_children()):
            widget.bind("<ButtonRelease-1>", lambda e: self.session.handle(AnyKey("click")))

    def show_menu(self, title: str, button_text: str, info: str = "") -> None:
        """Display menu with custom title and button text."""
        self.menu_title_label.configure(text=title)
        self.menu_info_label.configure(text=info)
        self.menu_button.configure(text=button_text)
        self.menu_frame.place(in_=self, relx=0.5, rely=0.5, anchor="center")

    def hide_menu(self) -> None:
        """Hide the menu overlay."""
        self.menu_frame.place_forget()

    def _on_toggle_sound_clicked(self) -> None:
        """Toggle global sound on/off and update button text."""
        enabled = self.audio.toggle_sound()
        self.sound_button.configure(text=f"Sound: {'ON' if enabled else 'OFF'}")

    def on_menu_button_pressed(self) -> None:
        """Handle menu button press (Play or Play Again)."""
        logger.debug(f"Play pressed in {self.session.state.name}")
        self.hide_menu()
        self.audio.play("start")
        self.session.start_run()

    # ------------------------------------------------------------------ #
    # RENDERER
    # ------------------------------------------------------------------ #
    def _cell_box(self, row: int, col: int) -> tuple[int, int, int, int]:
        x1 = col * CELL_SIZE
        y1 = row * CELL_SIZE
        return x1, y1, x1 + CELL_SIZE, y1 + CELL_SIZE

    def _cell_center(self, row: int, col: int) -> tuple[float, float]:
        x1, y1, x2, y2 = self._cell_box(row, col)
        return (x1 + x2) / 2, (y1 + y2) / 2

    def render_grid(self) -> None:
        """Draw the board background: grass on the edge rows, road on lanes."""
        self.delete("cell")
        for row in range(self.grid_model.rows):
            lane = self.grid_model.is_lane_row(row)
            for col in range(self.grid_model.cols):
                self.create_rectangle(*self._cell_box(row, col),
                                      fill=ROAD if lane else GRASS,
                                      outline=LANE_MARK if lane else GRASS, tags="cell")
        self.tag_lower("cell")

    def render_player(self, position: Position) -> None:
        self.delete("player")
        x, y = self._cell_center(position.row, position.col)
        self.create_text(x, y, text="🐻", font=("Arial", CELL_SIZE // 2), tags="player")
        self.tag_raise("player")

    def render_obstacles(self, obstacles: list[Obstacle]) -> None:
        self.delete("car")
        for obs in obstacles:
            x, y = self._cell_center(obs.row, obs.col)
            self.create_text(x, y, text="🚗", font=("Arial", CELL_SIZE // 2), tags="car")
        self.tag_raise("player")

    def update_score(self, value: int) -> None:
        self.score_txt.set(f"SCORE: {value}")
        if value > 0:
            self.audio.play("step")

    def render_cards(self, entries: list[ContentEntry]) -> None:
        """Rebuild the side panel with every revealed competition."""
        for child in self.cards_frame.winfo_children():
            child.destroy()
        tk.Label(self.cards_frame, text="COMPETITIONS", fg=ACCENT, bg="black",
                 font=("Arial", 14, "bold")).pack(anchor="w", pady=(0, 8))
        if not entries:
            tk.Label(self.cards_frame, text="Score 10 to reveal the first one",
                     fg="#888888", bg="black", font=("Arial", 10, "italic")).pack(anchor="w")
        for entry in entries:
            card = tk.Frame(self.cards_frame, bg="#1b1b1b", padx=8, pady=6)
            card.pack(fill="x", pady=4)
            tk.Label(card, text=entry.name, fg="#ffcc00", bg="#1b1b1b",
                     font=("Arial", 11, "bold"), wraplength=220, justify="left").pack(anchor="w")
            for line in (f"📍 {entry.city}", f"🏫 {entry.host}", f"📅 {entry.date}"):
                tk.Label(card, text=line, fg="white", bg="#1b1b1b",
                         font=("Arial", 10)).pack(anchor="w")

    def show_reveal(self, entry: ContentEntry) -> None:
        self.reveal_name.configure(text=entry.name)
        self.reveal_city.configure(text=f"📍 {entry.city}")
        self.reveal_host.configure(text=f"🏫 {entry.host}")
        self.reveal_date.configure(text=f"📅 {entry.date}")
        self.reveal_frame.place(in_=self, relx=0.5, rely=0.5, anchor="center")
        self.reveal_frame.lift()
        self.audio.play("reveal")

    def hide_reveal(self) -> None:
        self.reveal_frame.place_forget()

    def show_game_over(self, final_score: int) -> None:
        self.audio.play("gameover")
        self.show_menu("G  A  M  E    O  V  E  R", "PLAY AGAIN", f"FINAL SCORE: {final_score}")

    # ------------------------------------------------------------------ #
    # INPUT
    # ------------------------------------------------------------------ #
    def _on_key(self, event) -> None:
        """Forward key presses; Return/space also start a run from the menu."""
        if self.session.state in (RunState.IDLE, RunState.GAME_OVER):
            if event.keysym in ("Return", "space"):
                self.on_menu_button_pressed()
            return
        direction = KEY_DIRECTIONS.get(event.keysym)
        self.session.handle(Move(direction) if direction else AnyKey())

    def _on_mouse_down(self, event) -> None:
        self._drag_start = (event.x, event.y)

    def _on_mouse_up(self, event) -> None:
        """A drag is a move; a plain click only continues past a reveal."""
        if self._drag_start is None:
            return
        x0, y0 = self._drag_start
        self._drag_start = None
        direction = swipe_direction(event.x - x0, event.y - y0)
        self.session.handle(Move(direction) if direction else AnyKey("click"))

    # ------------------------------------------------------------------ #
    # SHUTDOWN
    # ------------------------------------------------------------------ #
    def close(self) -> None:
        """Stop the session's ticks and release audio."""
        self.session.destroy()
        self.audio.shutdown()
        logger.info("Window closed")
