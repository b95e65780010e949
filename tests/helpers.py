from snake_game.config import SnakeConfig


def place(sim, body, direction, food, frame=0):
    """Put the sim into a hand-built position."""
    sim.body = list(body)
    sim.direction = direction
    sim.food = food
    sim.frame = frame
    sim.score = 0
    sim.game_over = False
    return sim


def small_config(**overrides):
    values = dict(width=6, height=6, episode_limit=5, slow_step_delay=0.0,
                  fast_yield_interval=10, seed=7)
    values.update(overrides)
    return SnakeConfig(**values)
