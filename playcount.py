# playcount.py - Play Count Persistence Module
"""
Counts finished runs across launches.
Simple file-based persistence, plus an in-memory variant for headless use.
"""

import logging

from config import PLAYCOUNT_FILE  # Path to count file: "playthroughs.txt"

logger = logging.getLogger(__name__)


class PlayCounter:
    """Number of completed runs, stored as a single integer in a text file."""

    def __init__(self, path: str = PLAYCOUNT_FILE) -> None:
        self.path = path

    def get(self) -> int:
        """
        Load the play count from file.
        Returns:
            int: The saved count, or 0 if the file doesn't exist/is corrupted.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                val = int(f.read().strip())  # Read, strip whitespace, convert to int
                return max(0, val)  # Ensure non-negative count
        except FileNotFoundError:
            return 0
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable play count in {self.path}: {e}")
            return 0

    def increment(self) -> None:
        """Add one finished run. Write failures are logged, the game continues."""
        value = self.get() + 1
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(str(value))
        except OSError as e:
            logger.warning(f"Could not save play count to {self.path}: {e}")


class MemoryCounter:
    """Play counter that lives only as long as the process."""

    def __init__(self, value: int = 0) -> None:
        self.value = max(0, value)

    def get(self) -> int:
        return self.value

    def increment(self) -> None:
        self.value += 1
