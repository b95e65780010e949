import numpy as np
import pytest

from config import CONFIG
from snake_game.sim import SnakeSim


@pytest.fixture(autouse=True, scope="session")
def _log_to_tmp(tmp_path_factory):
    # Must run before the first get_logger() call creates the file handler
    CONFIG.log_directory = str(tmp_path_factory.mktemp("logs"))


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def sim(rng):
    return SnakeSim(grid_w=10, grid_h=10, rng=rng)
