import asyncio

import pytest

from helpers import small_config
from snake_game.trainer import RunState, Throttle, Trainer
from utils.events import EventType


async def spin(n=5):
    """Let the training task run for a few scheduler turns."""
    for _ in range(n):
        await asyncio.sleep(0)


def collect(trainer):
    completed = []
    trainer.add_listener(lambda episode, score, epsilon: completed.append((episode, score, epsilon)))
    return completed


def test_runs_until_episode_limit():
    trainer = Trainer(small_config(episode_limit=5))
    completed = collect(trainer)

    async def scenario():
        await asyncio.wait_for(trainer.start(), timeout=30)

    asyncio.run(scenario())

    assert [c[0] for c in completed] == [0, 1, 2, 3, 4]
    assert trainer.episode_index == 5
    assert trainer.run_state is RunState.IDLE
    assert trainer.epsilon == pytest.approx(0.995 ** 5)
    assert completed[-1][2] == trainer.epsilon
    assert all(score >= 0 for _, score, _ in completed)
    assert trainer.events.count_by_type(EventType.TRAINING_COMPLETE) == 1


def test_pause_then_stop_drops_partial_episode():
    # Big board: the head cannot reach a wall in the few steps before pausing
    trainer = Trainer(small_config(width=20, height=20))
    completed = collect(trainer)

    async def scenario():
        task = trainer.start()
        await spin(3)
        trainer.pause()
        assert trainer.run_state is RunState.PAUSED
        frame = trainer.env.get_elapsed_frames()
        await spin(10)
        assert trainer.env.get_elapsed_frames() == frame
        assert not task.done()

        trainer.stop()
        await asyncio.wait_for(task, timeout=5)

    asyncio.run(scenario())

    assert completed == []
    assert trainer.run_state is RunState.STOPPED
    assert trainer.episode_index == 0
    assert trainer.epsilon == 1.0
    assert trainer.agent.q_table_size > 0


def test_resume_wakes_paused_loop():
    trainer = Trainer(small_config(width=20, height=20))

    async def scenario():
        task = trainer.start()
        await spin(2)
        trainer.pause()
        await spin(3)
        frame = trainer.env.get_elapsed_frames()

        trainer.resume()
        assert trainer.run_state is RunState.RUNNING
        await spin(5)
        assert trainer.env.get_elapsed_frames() > frame

        trainer.stop()
        await asyncio.wait_for(task, timeout=5)

    asyncio.run(scenario())
    assert trainer.events.count_by_type(EventType.TRAINING_RESUMED) == 1


def test_resume_right_after_pause_is_not_lost():
    trainer = Trainer(small_config(width=20, height=20))

    async def scenario():
        task = trainer.start()
        await spin(2)
        trainer.pause()
        trainer.resume()
        frame = trainer.env.get_elapsed_frames()
        await spin(5)
        assert trainer.env.get_elapsed_frames() > frame
        trainer.stop()
        await asyncio.wait_for(task, timeout=5)

    asyncio.run(scenario())


def test_resume_when_not_paused_is_a_noop():
    trainer = Trainer(small_config())
    trainer.resume()
    assert trainer.run_state is RunState.IDLE

    async def scenario():
        task = trainer.start()
        trainer.resume()
        assert trainer.run_state is RunState.RUNNING
        trainer.stop()
        await task

    asyncio.run(scenario())
    assert trainer.events.count_by_type(EventType.TRAINING_RESUMED) == 0


def test_stop_is_idempotent():
    trainer = Trainer(small_config())
    trainer.stop()
    assert trainer.run_state is RunState.IDLE

    async def scenario():
        task = trainer.start()
        trainer.stop()
        trainer.stop()
        await task

    asyncio.run(scenario())
    assert trainer.events.count_by_type(EventType.TRAINING_STOPPED) == 1


def test_stop_then_start_resets_episode_index():
    trainer = Trainer(small_config(episode_limit=10_000))
    trainer.set_throttle(Throttle.FAST)
    completed = collect(trainer)

    async def scenario():
        first = trainer.start()
        while len(completed) < 3:
            await asyncio.sleep(0)
        trainer.stop()
        await asyncio.wait_for(first, timeout=5)
        assert trainer.episode_index >= 3
        assert trainer.throttle is Throttle.SLOW

        second = trainer.start()
        assert trainer.episode_index == 0
        assert trainer.run_state is RunState.RUNNING
        assert first.done()

        trainer.stop()
        await asyncio.wait_for(second, timeout=5)

    asyncio.run(scenario())
    assert trainer.events.count_by_type(EventType.TRAINING_STARTED) == 2


def test_restart_without_stop_retires_old_loop():
    # Big board so the first run cannot finish an episode before the restart
    trainer = Trainer(small_config(width=20, height=20, episode_limit=3))
    completed = collect(trainer)

    async def scenario():
        first = trainer.start()
        await spin(3)
        second = trainer.start()
        await asyncio.wait_for(asyncio.gather(first, second), timeout=30)

    asyncio.run(scenario())
    assert [c[0] for c in completed] == [0, 1, 2]
    assert trainer.run_state is RunState.IDLE


def test_destroy_releases_listeners():
    trainer = Trainer(small_config())
    collect(trainer)
    assert trainer.events.listener_count() == 1

    async def scenario():
        task = trainer.start()
        await spin(2)
        trainer.destroy()
        await task

    asyncio.run(scenario())
    assert trainer.events.listener_count() == 0
    assert trainer.run_state is RunState.STOPPED


def test_remove_listener():
    trainer = Trainer(small_config(episode_limit=2))
    completed = []

    def listener(episode, score, epsilon):
        completed.append(episode)

    trainer.add_listener(listener)
    assert trainer.remove_listener(listener)
    assert not trainer.remove_listener(listener)

    async def scenario():
        await trainer.start()

    asyncio.run(scenario())
    assert completed == []


def test_throttle_toggle():
    trainer = Trainer(small_config())
    assert trainer.throttle is Throttle.SLOW
    trainer.toggle_throttle()
    assert trainer.throttle is Throttle.FAST
    trainer.set_throttle("slow")
    assert trainer.throttle is Throttle.SLOW
    assert trainer.events.count_by_type(EventType.THROTTLE_CHANGED) == 2


def test_fast_mode_still_yields():
    trainer = Trainer(small_config(episode_limit=10_000, fast_yield_interval=50))
    trainer.set_throttle(Throttle.FAST)

    async def scenario():
        task = trainer.start()
        await asyncio.sleep(0)
        assert not task.done()
        trainer.stop()
        await asyncio.wait_for(task, timeout=5)

    asyncio.run(scenario())
    assert trainer.run_state is RunState.STOPPED


def test_start_needs_running_loop():
    trainer = Trainer(small_config())
    with pytest.raises(RuntimeError):
        trainer.start()


def test_state_vector_snapshot_is_a_copy():
    trainer = Trainer(small_config())
    snapshot = trainer.state_vector
    snapshot[:] = False
    assert trainer.state_vector.any()


def test_same_seed_same_training():
    def run(seed):
        trainer = Trainer(small_config(episode_limit=4, seed=seed))
        completed = collect(trainer)

        async def scenario():
            await trainer.start()

        asyncio.run(scenario())
        return completed, len(trainer.agent.q_table)

    assert run(11) == run(11)


def test_adding_a_listener_twice_registers_it_once():
    trainer = Trainer(small_config(episode_limit=2))
    completed = []

    def listener(episode, score, epsilon):
        completed.append(episode)

    trainer.add_listener(listener)
    trainer.add_listener(listener)
    assert trainer.events.listener_count() == 1

    assert trainer.remove_listener(listener)
    assert trainer.events.listener_count() == 0

    async def scenario():
        await trainer.start()

    asyncio.run(scenario())
    assert completed == []


def test_slow_mode_takes_one_step_per_host_turn():
    # Big board, so no episode ends during the few steps below
    trainer = Trainer(small_config(width=20, height=20))

    async def scenario():
        task = trainer.start()
        frames = []
        for _ in range(5):
            await asyncio.sleep(0)
            frames.append(trainer.env.get_elapsed_frames())
        trainer.stop()
        await asyncio.wait_for(task, timeout=5)
        return frames

    assert asyncio.run(scenario()) == [1, 2, 3, 4, 5]


def test_switch_to_slow_applies_from_next_step():
    trainer = Trainer(small_config(width=20, height=20, episode_limit=10_000,
                                   fast_yield_interval=500))
    trainer.set_throttle(Throttle.FAST)

    async def scenario():
        task = trainer.start()
        await asyncio.sleep(0)
        # Episodes may end inside the burst, so count Q updates, one per step
        burst = trainer.agent.updates

        trainer.set_throttle(Throttle.SLOW)
        steps = []
        for _ in range(4):
            before = trainer.agent.updates
            await asyncio.sleep(0)
            steps.append(trainer.agent.updates - before)
        trainer.stop()
        await asyncio.wait_for(task, timeout=5)
        return burst, steps

    burst, steps = asyncio.run(scenario())
    assert burst == 500
    assert steps == [1, 1, 1, 1]


def test_agent_sized_from_config():
    trainer = Trainer(small_config())
    assert trainer.agent.n_actions == trainer.config.action_space_size
    assert trainer.agent.q_table.state_dim == trainer.config.state_dim


def test_completion_reports_event_statistics():
    trainer = Trainer(small_config(episode_limit=2))

    async def scenario():
        task = trainer.start()
        trainer.pause()
        trainer.resume()
        await task

    asyncio.run(scenario())
    complete = [e for e in trainer.events.events if e.event_type is EventType.TRAINING_COMPLETE]
    assert len(complete) == 1
    assert complete[0].data['EPISODE_COMPLETED'] == 2
    assert complete[0].data['TRAINING_PAUSED'] == 1
    assert "pauses=1" in complete[0].message
