from config import RENDER_CONFIG
from render.renderer import Renderer
from utils.logger import get_logger
from .config import SnakeConfig
from .env import SnakeEnv
from .sim import Action, relative_action_for


def play_manual(config: SnakeConfig, renderer: Renderer):
    """
    Arrow-key play on the same environment the agent trains on.

    The snake advances every `manual_step_ms`. An arrow key becomes a
    relative action for the next step only, then the action falls back to
    FORWARD. Pressing the reverse arrow also means FORWARD. After a game over
    any key starts a new round.
    """
    logger = get_logger()
    env = SnakeEnv(config)
    step_interval = RENDER_CONFIG.manual_step_ms / 1000.0

    action = Action.FORWARD
    waiting = True  # Start screen / game over
    accumulated = 0.0

    while True:
        dt = renderer.tick()
        events = renderer.process_events()
        if events['quit']:
            break

        if waiting:
            if events['any_key']:
                env.reset()
                action = Action.FORWARD
                accumulated = 0.0
                waiting = False
        else:
            if events['direction'] is not None:
                action = relative_action_for(env.get_direction(), events['direction'])

            accumulated += dt
            if accumulated >= step_interval:
                accumulated -= step_interval
                env.step(action)
                action = Action.FORWARD
                if env.is_done():
                    logger.info(f"Manual game over: score={env.get_score()} best={env.max_score_record}")
                    waiting = True

        if not waiting:
            status = "Arrows to steer"
        elif env.is_done():
            status = "Game Over - press any key"
        else:
            status = "Press any key to start"

        renderer.render(env.sim.snapshot(), [
            f"Score: {env.get_score()} | Best: {env.max_score_record}",
            f"{status}  [ESC] quit",
        ])
