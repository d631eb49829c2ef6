"""
Sketchnet Core Package

Dense matrix container and random sampling helpers on which the network layers
are built.

Modules:
    matrix:       Matrix class and its error types
    random_utils: Uniform scalar sampling and unique index sampling

Exported:
    Matrix, DimensionMismatchError, OutOfBoundsError,
    random_uniform, random_set, seed
"""

from sketchnet.core.matrix       import Matrix, DimensionMismatchError, OutOfBoundsError
from sketchnet.core.random_utils import random_uniform, random_set, seed

__all__ = ['Matrix',
           'DimensionMismatchError',
           'OutOfBoundsError',
           'random_uniform',
           'random_set',
           'seed']
