"""
Sketchnet Random Utilities Module

Uniform scalar sampling, and sampling of unique integer indices without
replacement (used by mutation to pick which parameters to perturb).

Functions:
    random_uniform: Uniform float in [min, max)
    random_set:     Distinct integers drawn uniformly from [min, max]
    seed:           Seed every random number generator used by the package
"""

import numpy as np
import random

def random_uniform(min_value: float, max_value: float) -> float:
    """
    Get a random number in the half-open interval [min_value, max_value).
    """
    return random.random() * (max_value - min_value) + min_value

def random_set(min_value: int, max_value: int, size: int) -> list[int]:
    """
    Get 'size' distinct integers drawn uniformly from the inclusive range [min_value, max_value].

    Parameters:
        min_value: Smallest integer that may be drawn
        max_value: Largest integer that may be drawn
        size:      Number of integers to draw

    Returns:
        List of distinct integers, in the order they were drawn
    """
    population = range(int(min_value), int(max_value) + 1)
    if size < 0 or size > len(population):
        raise ValueError(f"Cannot draw {size} distinct integers from [{min_value}, {max_value}]")
    return random.sample(population, size)

def seed(value: int | None) -> None:
    """Seed both the stdlib and the numpy random number generators."""
    random.seed(value)
    np.random.seed(value)
