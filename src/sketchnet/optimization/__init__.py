"""
Optimization module for hyperparameter tuning in sketchnet.

This module provides Bayesian optimization of Config values using Optuna.
"""

from sketchnet.optimization.search_space import SearchSpace
from sketchnet.optimization.bayesian_optimizer import BayesianOptimizer

__all__ = [
    'SearchSpace',
    'BayesianOptimizer',
]
