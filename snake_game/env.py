from typing import Optional

import numpy as np

from .config import SnakeConfig
from .sim import SnakeSim, ACTIONS, DIRECTION_VECTORS, Direction, compute_new_direction

STATE_SIZE = 11


class SnakeEnv:
    def __init__(self, config: SnakeConfig, rng: Optional[np.random.Generator] = None):
        self.config = config
        self.sim = SnakeSim(
            grid_w=config.width,
            grid_h=config.height,
            rng=rng,
            timeout_frames_per_segment=config.timeout_frames_per_segment,
        )
        self.max_score_record = 0

    def reset(self):
        self.sim.reset()
        return self._get_state_vector()

    def step(self, action):
        reward, done = self.sim.step(action)

        if self.sim.score > self.max_score_record:
            self.max_score_record = self.sim.score

        return self._get_state_vector(), reward, done

    # --- Read accessors ---

    def get_state(self) -> np.ndarray:
        return self._get_state_vector()

    def get_score(self) -> int:
        return self.sim.score

    def is_done(self) -> bool:
        return self.sim.game_over

    def get_elapsed_frames(self) -> int:
        return self.sim.frame

    def get_direction(self) -> Direction:
        return self.sim.direction

    def _get_state_vector(self):
        # [DirL, DirU, DirR, DirD, FoodL, FoodF, FoodR, FoodB, DangerL, DangerF, DangerR]
        state = np.zeros(STATE_SIZE, dtype=bool)
        d = self.sim.direction
        head = self.sim.head

        # 1. Direction (One-hot)
        state[d] = True

        # 2. Food, in the snake's own frame
        food = self.sim.food
        if food is not None:
            dx, dy = food[0] - head[0], food[1] - head[1]
            fx, fy = DIRECTION_VECTORS[d]
            rx, ry = DIRECTION_VECTORS[(d + 1) % len(DIRECTION_VECTORS)]
            forward = dx * fx + dy * fy
            lateral = dx * rx + dy * ry  # Positive = to the snake's right
            state[4] = lateral < 0
            state[5] = forward > 0
            state[6] = lateral > 0
            state[7] = forward < 0

        # 3. Dangers (one cell ahead for each relative action)
        for action in ACTIONS:
            vx, vy = DIRECTION_VECTORS[compute_new_direction(d, action)]
            state[8 + action] = self.sim.is_collision((head[0] + vx, head[1] + vy))

        return state
