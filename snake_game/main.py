import argparse
import asyncio
from collections import deque
from typing import List, Optional

from config import CONFIG, RENDER_CONFIG
from render.renderer import Renderer
from utils.logger import get_logger
from .config import SnakeConfig
from .manual import play_manual
from .trainer import RunState, Trainer


def _hud_lines(trainer: Trainer, recent_scores) -> List[str]:
    avg = sum(recent_scores) / len(recent_scores) if recent_scores else 0.0
    return [
        f"Ep: {trainer.episode_index} | Score: {trainer.score} | Best: {trainer.best_score} | Avg100: {avg:.1f}",
        f"Eps: {trainer.epsilon:.3f} | {trainer.throttle.value.upper()} | {trainer.run_state.value}"
        f"  [ENTER] start [P] pause [S] stop [SPACE] speed",
    ]


async def train_with_window(config: SnakeConfig, renderer: Renderer):
    """Run the trainer and the window on one event loop until the user quits."""
    logger = get_logger()
    trainer = Trainer(config)

    recent_scores = deque(maxlen=100)
    trainer.add_listener(lambda episode, score, epsilon: recent_scores.append(score))

    trainer.start()
    frame_delay = 1.0 / RENDER_CONFIG.fps

    try:
        while True:
            events = renderer.process_events()
            if events['quit']:
                break

            if events['start']:
                recent_scores.clear()
                trainer.start()
            if events['pause_toggle']:
                if trainer.run_state is RunState.PAUSED:
                    trainer.resume()
                else:
                    trainer.pause()
            if events['stop']:
                trainer.stop()
            if events['throttle_toggle']:
                trainer.toggle_throttle()

            task = trainer.task
            if task is not None and task.done():
                task.result()  # Re-raise anything the episode loop hit

            renderer.render(trainer.env.sim.snapshot(), _hud_lines(trainer, recent_scores))
            await asyncio.sleep(frame_delay)
    finally:
        trainer.destroy()
        if trainer.task is not None:
            await trainer.task
        logger.info(f"Window closed after {trainer.episode_index} episodes, best score {trainer.best_score}")


def run_snake(config: Optional[SnakeConfig] = None, manual: bool = False,
              cell_size: Optional[int] = None):
    config = config or SnakeConfig()
    renderer = Renderer(cell_size)
    renderer.initialize(config.width, config.height)
    try:
        if manual:
            play_manual(config, renderer)
        else:
            asyncio.run(train_with_window(config, renderer))
    finally:
        renderer.shutdown()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Snake AI - tabular Q-learning trainer")
    parser.add_argument('--width', type=int, default=CONFIG.board_width, help='Board width in cells')
    parser.add_argument('--height', type=int, default=CONFIG.board_height, help='Board height in cells')
    parser.add_argument('--cell-size', type=int, default=RENDER_CONFIG.cell_size, help='Cell size in pixels')
    parser.add_argument('--episodes', type=int, default=CONFIG.episode_limit, help='Episode limit')
    parser.add_argument('--seed', type=int, help='Random seed')
    parser.add_argument('--fast', action='store_true', help='Start in fast mode')
    parser.add_argument('--manual', action='store_true', help='Play with the arrow keys instead of training')
    parser.add_argument('--verbose', action='store_true', help='Also log to the console')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Entry point."""
    args = parse_args(argv)

    if args.verbose:
        get_logger().enable_console()

    config = SnakeConfig(
        width=args.width,
        height=args.height,
        episode_limit=args.episodes,
        start_fast=args.fast,
        seed=args.seed if args.seed is not None else CONFIG.get_seed(),
    )
    get_logger().info(f"Starting {'manual' if args.manual else 'training'} run with seed {config.seed}")
    run_snake(config, manual=args.manual, cell_size=args.cell_size)


if __name__ == "__main__":
    main()
