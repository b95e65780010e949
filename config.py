"""
Snake AI - Configuration
All training parameters in one place.
"""

from dataclasses import dataclass
from typing import Optional
import random


@dataclass
class SimulationConfig:
    """Core simulation and scheduling parameters."""

    # Board
    board_width: int = 40
    board_height: int = 20
    timeout_frames_per_segment: int = 100  # Starvation limit = this * length

    # Training
    episode_limit: int = 5000

    # Throttle
    slow_step_delay: float = 0.02  # Seconds slept after every step when slow
    fast_yield_interval: int = 200  # Steps between yields when fast
    start_fast: bool = False

    # Logging
    log_directory: str = "logs"
    log_every_episodes: int = 50

    # Random seed (None = random)
    seed: Optional[int] = None

    def get_seed(self) -> int:
        """Get or generate random seed."""
        if self.seed is None:
            self.seed = random.randint(0, 2**32 - 1)
        return self.seed


@dataclass
class AgentConfig:
    """Tabular Q-learning hyper-parameters."""

    learning_rate: float = 0.1  # alpha
    discount: float = 0.9  # gamma
    epsilon_init: float = 1.0
    epsilon_min: float = 0.0
    epsilon_decay: float = 0.995


@dataclass
class RenderConfig:
    """Rendering parameters."""

    # Display
    window_title: str = "Snake AI"
    cell_size: int = 20
    hud_height: int = 48
    fps: int = 60
    manual_step_ms: int = 100

    # Colors
    color_background: tuple = (10, 10, 10)
    color_cell_even: tuple = (40, 40, 40)
    color_cell_odd: tuple = (50, 50, 50)
    color_snake: tuple = (50, 200, 100)
    color_snake_border: tuple = (30, 150, 80)
    color_food: tuple = (200, 50, 50)
    color_text: tuple = (240, 240, 240)
    color_accent: tuple = (255, 200, 0)

    # HUD
    hud_font_size: int = 16


# Global config instances
CONFIG = SimulationConfig()
AGENT_CONFIG = AgentConfig()
RENDER_CONFIG = RenderConfig()
