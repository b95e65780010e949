"""
Snake AI - Reward System
Calculates the shaped reward for a single snake step.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

Position = Tuple[int, int]

TIMEOUT_PENALTY = -10.0
COLLISION_PENALTY = -10.0
FOOD_REWARD = 10.0
IDLE_PENALTY = -1.0


@dataclass
class StepOutcome:
    """What happened during one step, as seen by the reward policy."""
    prev_head: Position
    new_head: Position
    food: Optional[Position]
    ate: bool
    collision: bool
    timeout: bool


def manhattan(a: Position, b: Position) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def calculate_step_reward(outcome: StepOutcome) -> float:
    """
    Reward for one step, checked in priority order:
    timeout, collision, food eaten, then distance shaping.

    Distance shaping pays the change in Manhattan distance to the food
    plus a constant idle penalty, so a step straight toward the food
    nets 0 and a step away nets -2.
    """
    if outcome.timeout:
        return TIMEOUT_PENALTY

    if outcome.collision:
        return COLLISION_PENALTY

    if outcome.ate:
        return FOOD_REWARD

    # No free cell left for food
    if outcome.food is None:
        return IDLE_PENALTY

    prev_dist = manhattan(outcome.prev_head, outcome.food)
    curr_dist = manhattan(outcome.new_head, outcome.food)
    return float(prev_dist - curr_dist) + IDLE_PENALTY
