from dataclasses import dataclass, field, replace
from typing import Optional

from config import CONFIG, AGENT_CONFIG, AgentConfig


@dataclass
class SnakeConfig:
    """Settings for a single training run (board, schedule, agent)."""
    # --- Board ---
    width: int = CONFIG.board_width
    height: int = CONFIG.board_height
    timeout_frames_per_segment: int = CONFIG.timeout_frames_per_segment

    # --- Schedule ---
    episode_limit: int = CONFIG.episode_limit
    slow_step_delay: float = CONFIG.slow_step_delay
    fast_yield_interval: int = CONFIG.fast_yield_interval
    start_fast: bool = CONFIG.start_fast
    log_every_episodes: int = CONFIG.log_every_episodes

    # --- Agent ---
    agent: AgentConfig = field(default_factory=lambda: replace(AGENT_CONFIG))

    # --- Reproducibility ---
    seed: Optional[int] = CONFIG.seed

    def __post_init__(self):
        if self.width < 2 or self.height < 2:
            raise ValueError(f"Board must be at least 2x2, got {self.width}x{self.height}")
        if self.episode_limit <= 0:
            raise ValueError(f"episode_limit must be positive, got {self.episode_limit}")
        if self.fast_yield_interval <= 0:
            raise ValueError(f"fast_yield_interval must be positive, got {self.fast_yield_interval}")

    @property
    def action_space_size(self) -> int:
        # Left, Forward, Right
        return 3

    @property
    def state_dim(self) -> int:
        # [DirL, DirU, DirR, DirD, FoodL, FoodF, FoodR, FoodB, DangerL, DangerF, DangerR]
        return 11
