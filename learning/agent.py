import numpy as np
from .storage import QTable


class QLearningAgent:
    """
    Tabular Q-learning agent with epsilon-greedy exploration.

    Role:
    - Receives Observation (11-flag state vector)
    - Outputs Action (0: Turn left, 1: Forward, 2: Turn right)
    - Learns from (Obs, Act, Reward, NextObs)
    """
    def __init__(self, config, rng=None, state_dim=11, n_actions=3):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()

        self.alpha = config.learning_rate
        self.gamma = config.discount
        self.epsilon = config.epsilon_init
        self.min_epsilon = config.epsilon_min
        self.epsilon_decay = config.epsilon_decay

        self.n_actions = n_actions
        self.q_table = QTable(state_dim, n_actions)
        self.updates = 0

    @property
    def q_table_size(self):
        return len(self.q_table)

    def get_q(self, state, action):
        return self.q_table.get(state, action)

    def update_q(self, state, action, reward, next_state):
        current_q = self.q_table.get(state, action)
        max_q_next = self.q_table.values(next_state).max()
        new_q = (1 - self.alpha) * current_q + self.alpha * (reward + self.gamma * max_q_next)
        self.q_table.set(state, action, new_q)
        self.updates += 1
        return new_q

    def choose_action(self, state):
        """Select action via Epsilon-Greedy, breaking ties at random."""
        if self.rng.random() < self.epsilon:
            return int(self.rng.integers(self.n_actions))

        q_values = self.q_table.values(state)
        best_actions = np.flatnonzero(q_values == q_values.max())
        return int(self.rng.choice(best_actions))

    def decay_epsilon(self):
        self.epsilon = max(self.min_epsilon, self.epsilon * self.epsilon_decay)
