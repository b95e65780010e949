"""
Snake AI - Training Logger
Structured logging for debugging and observability.
"""

import logging
import os
from datetime import datetime

from config import CONFIG


class EventLogger:
    """Logger for training events."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True

        # Create logs directory
        log_dir = CONFIG.log_directory
        os.makedirs(log_dir, exist_ok=True)

        # Create logger
        self.logger = logging.getLogger("snake_ai")
        self.logger.setLevel(logging.DEBUG)

        # File handler
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = os.path.join(log_dir, f"snake_ai_{timestamp}.log")

        file_handler = logging.FileHandler(self.log_file)
        file_handler.setLevel(logging.DEBUG)

        # Format
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%H:%M:%S'
        )
        file_handler.setFormatter(formatter)

        self.logger.addHandler(file_handler)
        self.console_handler = None

    def enable_console(self, level: int = logging.INFO):
        """Mirror log output to stderr. Calling again only changes the level."""
        if self.console_handler is None:
            self.console_handler = logging.StreamHandler()
            self.console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
            self.logger.addHandler(self.console_handler)
        self.console_handler.setLevel(level)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def log_episode(self, episode: int, score: int, epsilon: float, frames: int,
                    q_size: int, updates: int, every: int = 50):
        """Log periodic episode summary."""
        if (episode + 1) % every == 0:
            self.info(
                f"Episode {episode + 1}: score={score} frames={frames} "
                f"eps={epsilon:.4f} q_entries={q_size} updates={updates}"
            )

    def log_step(self, episode: int, frame: int, action: int,
                 reward: float, new_q: float, every: int = 100):
        """Log a sampled learning update."""
        if frame % every == 0:
            self.debug(
                f"[Episode {episode}] Step {frame}: action={action} "
                f"reward={reward:.1f} q={new_q:.3f}"
            )

    def log_lifecycle(self, episode: int, event_type: str, details: str):
        """Log a trainer state change."""
        self.info(f"[Episode {episode}] {event_type}: {details}")


# Global logger instance
def get_logger() -> EventLogger:
    """Get the global event logger."""
    return EventLogger()
