"""Pytest configuration and shared fixtures."""

import pytest
import random
import sys
import numpy as np
from pathlib import Path

# Make the package (src layout) and the examples importable without installation
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir / "src"))
sys.path.insert(0, str(root_dir))


@pytest.fixture(autouse=True)
def set_random_seeds():
    """Seed both random number generators so every test is reproducible."""
    np.random.seed(42)
    random.seed(42)
    yield
    np.random.seed(None)
    random.seed(None)


@pytest.fixture
def small_config():
    """A default Config shrunk to a [4, 3, 2] network and short runs."""
    from sketchnet.run.config import Config
    config = Config()
    config.layer_sizes     = [4, 3, 2]
    config.training_rounds = 50
    config.population_size = 6
    config.max_generations = 3
    config.gradient_rounds = 0
    return config


@pytest.fixture
def xor_samples():
    """XOR (input, expected) pairs."""
    return [([0.0, 0.0], [0.0]),
            ([0.0, 1.0], [1.0]),
            ([1.0, 0.0], [1.0]),
            ([1.0, 1.0], [0.0])]
