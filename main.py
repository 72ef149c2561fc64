# main.py - Application Entry Point
"""
Main entry point for Bear Crossing.
Configures logging, builds the window and starts the Tk event loop.
"""

import logging
import tkinter as tk  # GUI framework

from config import WINDOW_WIDTH, WINDOW_HEIGHT, DEBUG  # Window size constants
from game import LaneGame  # Board canvas + renderer


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def main() -> None:
    """Create window, initialize game, and start event loop."""
    setup_logging(DEBUG)

    # Create main window
    root = tk.Tk()
    root.title("Bear Crossing")
    root.geometry(f"{WINDOW_WIDTH}x{WINDOW_HEIGHT}")
    root.resizable(False, False)  # Fixed window size
    root.configure(bg="black")

    game = LaneGame(root)
    game.show_menu("B E A R   C R O S S I N G", "PLAY")  # Title screen

    def on_close():
        """Cancel ticks and release audio before closing."""
        game.close()
        root.destroy()

    root.protocol("WM_DELETE_WINDOW", on_close)

    # Start the GUI event loop
    root.mainloop()


if __name__ == "__main__":
    main()  # Run application
