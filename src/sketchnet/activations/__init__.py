"""
Activations Package

This package provides the activation functions applied by network layers,
each paired with its hand-derived derivative for backpropagation.

Exported:
    ActivationType:     Closed set of supported variants
    ActivationFunction: Immutable (type, alpha, scale) value with generate/derivative
    activations:        Dictionary mapping activation names to constructors
    make_activation:    Build an activation function by name
    gradient_check:     Compare a hand-derived derivative against autograd
"""

from sketchnet.activations.basic_activations import (
    ActivationType,
    ActivationFunction,
    activations,
    make_activation,
    gradient_check
)

__all__ = [
    'ActivationType',
    'ActivationFunction',
    'activations',
    'make_activation',
    'gradient_check'
]
