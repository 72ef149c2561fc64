# audio_manager.py - Audio Management System
"""
Plays the game's sound cues using pygame.mixer.
Missing files or an unavailable audio device simply mean silence.
"""

import logging
import os

import pygame  # Audio library

from config import audio_path, SOUNDS  # Helper for audio file paths, cue -> filename

logger = logging.getLogger(__name__)


class AudioManager:
    """Loads the cue sounds once and plays them on demand via pygame.mixer."""

    def __init__(self) -> None:
        """Initialize audio system and load sound assets."""
        self.sound_enabled: bool = True  # Global sound on/off toggle
        self.available: bool = True

        # 44.1kHz, 16-bit, stereo, small buffer for short cues
        try:
            pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=512)
        except pygame.error as e:
            logger.warning(f"Audio unavailable, continuing silently: {e}")
            self.available = False

        self.sounds: dict[str, pygame.mixer.Sound | None] = {
            cue: self._load_sound(filename) for cue, filename in SOUNDS.items()
        }

    def _load_sound(self, filename: str):
        """Load a sound file, return None if file missing or invalid."""
        if not self.available:
            return None
        path = audio_path(filename)
        if not os.path.exists(path):  # Check file exists
            logger.debug(f"Sound file not found: {path}")
            return None
        try:
            return pygame.mixer.Sound(path)  # Load sound into memory
        except pygame.error as e:
            logger.warning(f"Could not load {path}: {e}")
            return None

    def play(self, cue: str) -> None:
        """Play a named cue if sound is enabled and the cue was loaded."""
        snd = self.sounds.get(cue)
        if not self.sound_enabled or snd is None:
            return
        snd.play()  # Non-blocking playback

    def toggle_sound(self) -> bool:
        """
        Toggle sound on/off globally.

        Returns:
            bool: True if sound is enabled after toggle, False if disabled.
        """
        self.sound_enabled = not self.sound_enabled
        if not self.sound_enabled and self.available:
            pygame.mixer.stop()  # Silence anything still playing
        return self.sound_enabled

    def shutdown(self) -> None:
        """Release the mixer."""
        if self.available:
            pygame.mixer.quit()
