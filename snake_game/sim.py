from enum import IntEnum
from typing import List, Optional, Tuple

import numpy as np

from learning.rewards import StepOutcome, calculate_step_reward

Position = Tuple[int, int]


class Direction(IntEnum):
    """Absolute heading, in cyclic order (a right turn is +1)."""
    LEFT = 0
    UP = 1
    RIGHT = 2
    DOWN = 3


class Action(IntEnum):
    """Move relative to the current heading."""
    TURN_LEFT = 0
    FORWARD = 1
    TURN_RIGHT = 2


DIRECTION_VECTORS: Tuple[Position, ...] = (
    (-1, 0),  # LEFT
    (0, -1),  # UP
    (1, 0),   # RIGHT
    (0, 1),   # DOWN
)

ACTIONS: Tuple[Action, ...] = tuple(Action)


def compute_new_direction(current: int, action: int) -> Direction:
    """Heading after applying a relative action to `current`."""
    n = len(DIRECTION_VECTORS)
    return Direction((current + action - 1) % n)


def relative_action_for(current: int, requested: int) -> Action:
    """
    Map an absolute requested heading to a relative action.

    Quarter turns map to TURN_LEFT / TURN_RIGHT. Everything else,
    including the current heading and the reverse heading, is FORWARD.
    """
    n = len(DIRECTION_VECTORS)
    diff = (requested - current) % n
    if diff == 1:
        return Action.TURN_RIGHT
    if diff == n - 1:
        return Action.TURN_LEFT
    return Action.FORWARD


class SnakeSim:
    def __init__(self, grid_w=40, grid_h=20, rng: Optional[np.random.Generator] = None,
                 timeout_frames_per_segment=100):
        self.grid_w = grid_w
        self.grid_h = grid_h
        self.timeout_frames_per_segment = timeout_frames_per_segment
        self.rng = rng if rng is not None else np.random.default_rng()

        self.reset()

    def reset(self):
        # Snake starts as a single head in the middle
        self.body: List[Position] = [(self.grid_w // 2, self.grid_h // 2)]
        self.direction = Direction(int(self.rng.integers(len(DIRECTION_VECTORS))))
        self.score = 0
        self.frame = 0
        self.game_over = False

        self.food = self._spawn_food()

    @property
    def head(self) -> Position:
        return self.body[0]

    def _spawn_food(self) -> Optional[Position]:
        """Rejection-sample a free cell. None once the snake fills the board."""
        if len(self.body) >= self.grid_w * self.grid_h:
            return None
        occupied = set(self.body)
        while True:
            food = (int(self.rng.integers(self.grid_w)), int(self.rng.integers(self.grid_h)))
            if food not in occupied:
                return food

    def step(self, action) -> Tuple[float, bool]:
        """
        Action: 0: Turn left, 1: Forward, 2: Turn right
        Returns: (reward, done)
        """
        if action not in ACTIONS:
            raise ValueError(f"Invalid action {action!r}, expected one of {[int(a) for a in ACTIONS]}")
        action = Action(int(action))

        if self.game_over:
            return 0.0, True

        prev_head = self.head

        self.direction = compute_new_direction(self.direction, action)
        dx, dy = DIRECTION_VECTORS[self.direction]
        new_head = (prev_head[0] + dx, prev_head[1] + dy)

        self.body.insert(0, new_head)
        ate = new_head == self.food
        if ate:
            self.score += 1
            self.food = self._spawn_food()
        else:
            self.body.pop()  # Remove tail

        self.frame += 1

        timeout = self.frame > self.timeout_frames_per_segment * len(self.body)
        collision = self.is_collision(new_head)
        self.game_over = timeout or collision

        reward = calculate_step_reward(StepOutcome(
            prev_head=prev_head,
            new_head=new_head,
            food=self.food,
            ate=ate,
            collision=collision,
            timeout=timeout,
        ))
        return reward, self.game_over

    def is_collision(self, pos: Optional[Position] = None) -> bool:
        """Wall or body hit at `pos` (defaults to the current head)."""
        x, y = self.head if pos is None else pos
        if x < 0 or x >= self.grid_w or y < 0 or y >= self.grid_h:
            return True
        return (x, y) in self.body[1:]

    def snapshot(self) -> dict:
        """Plain copy of the episode state for display."""
        return {
            'snake': list(self.body),
            'food': self.food,
            'direction': int(self.direction),
            'frame': self.frame,
            'score': self.score,
            'done': self.game_over,
        }
