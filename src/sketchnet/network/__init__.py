"""
Sketchnet Network Package

Layers and the feed-forward network built on the core Matrix.

Modules:
    layer:   Layer class (affine transform + activation, genetic operators)
    network: Network class (forward pass, backpropagation, genetic operators)

Exported Classes:
    Layer:   A fully connected layer
    Network: An ordered stack of layers sharing a learning rate
"""

from sketchnet.network.layer   import Layer
from sketchnet.network.network import Network, mean_squared_error

__all__ = ['Layer',
           'Network',
           'mean_squared_error']
