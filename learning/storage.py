import numpy as np

N_ACTIONS = 3
ACTION_BITS = 2


class QTable:
    """
    Sparse tabular store for Q(state, action).

    Each 11-flag state vector is packed into an int (bit i = flag i) and the
    action is appended in the low bits, so every (state, action) pair has a
    single canonical key. Unseen pairs read as 0.0. Entries are never removed.
    """
    def __init__(self, state_dim=11, n_actions=N_ACTIONS):
        self.state_dim = state_dim
        self.n_actions = n_actions
        self.table = {}
        self._weights = 1 << np.arange(state_dim, dtype=np.int64)

    def pack_state(self, state):
        flags = np.asarray(state, dtype=bool)
        if flags.shape != (self.state_dim,):
            raise ValueError(f"Expected state of shape ({self.state_dim},), got {flags.shape}")
        return int(flags.astype(np.int64) @ self._weights)

    def key(self, state, action):
        if action not in range(self.n_actions):
            raise ValueError(f"Invalid action {action!r}")
        return (self.pack_state(state) << ACTION_BITS) | int(action)

    def get(self, state, action):
        return self.table.get(self.key(state, action), 0.0)

    def set(self, state, action, value):
        self.table[self.key(state, action)] = float(value)

    def values(self, state):
        base = self.pack_state(state) << ACTION_BITS
        return np.array([self.table.get(base | a, 0.0) for a in range(self.n_actions)])

    def __contains__(self, item):
        state, action = item
        return self.key(state, action) in self.table

    def __len__(self):
        return len(self.table)
