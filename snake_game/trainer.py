import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

import numpy as np

from learning.agent import QLearningAgent
from utils.events import Event, EventTracker, EventType
from utils.logger import get_logger
from .config import SnakeConfig
from .env import SnakeEnv

EpisodeListener = Callable[[int, int, float], None]


class Throttle(Enum):
    FAST = "fast"
    SLOW = "slow"


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass
class TrainerState:
    """Counters and modes owned by one Trainer."""
    episode_index: int = 0
    episode_limit: int = 5000
    throttle: Throttle = Throttle.SLOW
    run_state: RunState = RunState.IDLE


class _RunControl:
    """Cancel flag and resume signal for a single run of the episode loop."""

    def __init__(self):
        self.cancelled = False
        self.paused = False
        self.resume_event = asyncio.Event()
        self.resume_event.set()

    def pause(self):
        self.paused = True
        self.resume_event.clear()

    def resume(self):
        self.paused = False
        self.resume_event.set()

    def cancel(self):
        self.cancelled = True
        self.paused = False
        self.resume_event.set()

    async def wait_resumed(self):
        # The event stays set after resume/cancel, so a wake that lands
        # before we start waiting is not lost.
        while self.paused and not self.cancelled:
            await self.resume_event.wait()


class Trainer:
    """
    Drives Q-learning episodes on a SnakeEnv as a single asyncio task.

    The episode loop yields to the event loop after every step when SLOW and
    every `fast_yield_interval` steps when FAST, so a host (the pygame window,
    a test) stays responsive and can pause, resume or stop training between
    steps.
    """

    def __init__(self, config: Optional[SnakeConfig] = None,
                 rng: Optional[np.random.Generator] = None,
                 env: Optional[SnakeEnv] = None,
                 agent: Optional[QLearningAgent] = None):
        self.config = config or SnakeConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        self.env = env or SnakeEnv(self.config, rng=self.rng)
        self.agent = agent or QLearningAgent(self.config.agent, rng=self.rng,
                                             state_dim=self.config.state_dim,
                                             n_actions=self.config.action_space_size)

        self.state = TrainerState(
            episode_limit=self.config.episode_limit,
            throttle=Throttle.FAST if self.config.start_fast else Throttle.SLOW,
        )
        self.events = EventTracker()
        self.logger = get_logger()

        self._control: Optional[_RunControl] = None
        self._task: Optional[asyncio.Task] = None
        self._listeners: Dict[EpisodeListener, Callable[[Event], None]] = {}
        self._steps_since_yield = 0
        self._state_vector = self.env.get_state()

    # --- Lifecycle ---

    def start(self) -> asyncio.Task:
        """Begin a fresh run. Must be called from inside a running event loop."""
        loop = asyncio.get_running_loop()

        if self._control is not None:
            self._control.cancel()

        control = _RunControl()
        self._control = control
        self.state.episode_index = 0
        self.state.run_state = RunState.RUNNING
        self._steps_since_yield = 0
        self._state_vector = self.env.reset()

        self._record(EventType.TRAINING_STARTED,
                     f"limit={self.state.episode_limit} throttle={self.state.throttle.value}")
        self._task = loop.create_task(self._run(control))
        return self._task

    def pause(self):
        if self.state.run_state is not RunState.RUNNING:
            return
        self._control.pause()
        self.state.run_state = RunState.PAUSED
        self._record(EventType.TRAINING_PAUSED, "paused")

    def resume(self):
        if self.state.run_state is not RunState.PAUSED:
            return
        self._control.resume()
        self.state.run_state = RunState.RUNNING
        self._record(EventType.TRAINING_RESUMED, "resumed")

    def stop(self):
        if self.state.run_state not in (RunState.RUNNING, RunState.PAUSED):
            return
        self._control.cancel()
        self.state.run_state = RunState.STOPPED
        self.state.throttle = Throttle.SLOW
        self._record(EventType.TRAINING_STOPPED,
                     f"stopped after {self.state.episode_index} episodes",
                     {'episode': self.state.episode_index})

    def destroy(self):
        """Stop training and drop every listener registered on this trainer."""
        self.stop()
        self.events.clear_listeners()
        self._listeners.clear()

    def set_throttle(self, mode: Throttle):
        mode = Throttle(mode)
        if mode is self.state.throttle:
            return
        self.state.throttle = mode
        self._record(EventType.THROTTLE_CHANGED, mode.value)

    def toggle_throttle(self):
        self.set_throttle(Throttle.SLOW if self.state.throttle is Throttle.FAST else Throttle.FAST)

    # --- Listeners ---

    def add_listener(self, callback: EpisodeListener):
        """
        Call `callback(episode_index, score, epsilon)` after every completed episode.

        Adding a callback that is already registered does nothing.
        """
        if callback in self._listeners:
            return

        def forward(event: Event):
            data = event.data
            callback(data['episode'], data['score'], data['epsilon'])

        self._listeners[callback] = forward
        self.events.subscribe(EventType.EPISODE_COMPLETED, forward)

    def remove_listener(self, callback: EpisodeListener) -> bool:
        forward = self._listeners.pop(callback, None)
        if forward is None:
            return False
        return self.events.unsubscribe(EventType.EPISODE_COMPLETED, forward)

    # --- Read accessors ---

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    @property
    def state_vector(self) -> np.ndarray:
        return self._state_vector.copy()

    @property
    def score(self) -> int:
        return self.env.get_score()

    @property
    def best_score(self) -> int:
        return self.env.max_score_record

    @property
    def episode_index(self) -> int:
        return self.state.episode_index

    @property
    def done(self) -> bool:
        return self.env.is_done()

    @property
    def run_state(self) -> RunState:
        return self.state.run_state

    @property
    def throttle(self) -> Throttle:
        return self.state.throttle

    @property
    def epsilon(self) -> float:
        return self.agent.epsilon

    # --- Episode loop ---

    async def _run(self, control: _RunControl):
        state = self._state_vector

        while not control.cancelled:
            completed = await self._run_episode(control, state)
            if not completed:
                break

            episode = self.state.episode_index
            score = self.env.get_score()
            self.agent.decay_epsilon()
            self.logger.log_episode(episode, score, self.agent.epsilon,
                                    self.env.get_elapsed_frames(), self.agent.q_table_size,
                                    self.agent.updates, every=self.config.log_every_episodes)
            self.events.record(episode, EventType.EPISODE_COMPLETED,
                               f"score={score}",
                               {'episode': episode, 'score': score, 'epsilon': self.agent.epsilon})
            self.state.episode_index += 1

            if control.cancelled:
                break
            if self.state.episode_index >= self.state.episode_limit:
                self.state.run_state = RunState.IDLE
                stats = self.events.get_statistics()
                self._record(EventType.TRAINING_COMPLETE,
                             f"best score {self.env.max_score_record}, "
                             f"pauses={stats['TRAINING_PAUSED']} "
                             f"throttle changes={stats['THROTTLE_CHANGED']}",
                             stats)
                return

            state = self._state_vector = self.env.reset()

    async def _run_episode(self, control: _RunControl, state: np.ndarray) -> bool:
        """Play one episode. Returns False if the run was cancelled first."""
        done = self.env.is_done()

        while not done and not control.cancelled:
            if control.paused:
                await control.wait_resumed()
                continue

            action = self.agent.choose_action(state)
            next_state, reward, done = self.env.step(action)
            new_q = self.agent.update_q(state, action, reward, next_state)
            self.logger.log_step(self.state.episode_index, self.env.get_elapsed_frames(),
                                 action, reward, new_q)
            state = self._state_vector = next_state

            await self._yield_to_host()

        return not control.cancelled

    async def _yield_to_host(self):
        if self.state.throttle is Throttle.SLOW:
            self._steps_since_yield = 0
            await asyncio.sleep(self.config.slow_step_delay)
            return

        self._steps_since_yield += 1
        if self._steps_since_yield >= self.config.fast_yield_interval:
            self._steps_since_yield = 0
            await asyncio.sleep(0)

    def _record(self, event_type: EventType, details: str, data: Optional[dict] = None):
        self.events.record(self.state.episode_index, event_type, details, data)
        self.logger.log_lifecycle(self.state.episode_index, event_type.name, details)
