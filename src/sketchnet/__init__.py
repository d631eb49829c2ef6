"""
sketchnet - train a small feed-forward neural network to classify drawings.

A bitmap painted on a grid is fed to a network, which is either trained by
gradient descent or queried by forward inference to classify the drawing into
one of a fixed set of categories. Networks can also be combined and perturbed
with genetic operators (crossover and mutation) and evolved as a population.

Main components:
- core: Dense Matrix container and random sampling helpers
- activations: Activation functions paired with their derivatives
- network: Layer and Network (forward pass, backpropagation, genetic operators)
- pool: Populations of networks
- run: Configuration, background worker channel, classifier glue, trials and experiments
- optimization: Bayesian optimization for hyperparameter tuning

Example:
    >>> from sketchnet import Network
    >>> network = Network.from_random([4, 3, 2])
    >>> network.train([1, 0, 1, 0], [1, 0])
    >>> outputs = network.predict([1, 0, 1, 0])
"""

__version__ = "0.1.0"

from sketchnet.core.matrix   import Matrix, DimensionMismatchError, OutOfBoundsError
from sketchnet.activations   import ActivationFunction, ActivationType, make_activation
from sketchnet.network       import Layer, Network
from sketchnet.pool          import Population
from sketchnet.run           import Config, DrawingClassifier, Experiment, NetworkWorker, Trial, create_channel
from sketchnet.optimization  import BayesianOptimizer, SearchSpace

__all__ = [
    "Matrix",
    "DimensionMismatchError",
    "OutOfBoundsError",
    "ActivationFunction",
    "ActivationType",
    "make_activation",
    "Layer",
    "Network",
    "Population",
    "Config",
    "DrawingClassifier",
    "Experiment",
    "NetworkWorker",
    "Trial",
    "create_channel",
    "BayesianOptimizer",
    "SearchSpace",
]
