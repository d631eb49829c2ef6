"""
Sketchnet Pool Package

Populations of networks evolved with crossover and mutation.

Exported:
    Population:       A generation of networks with their fitness
    evaluate_fitness: Fitness of one network on a set of samples
    train_network:    Gradient descent on a set of samples
"""

from sketchnet.pool.population import Population, evaluate_fitness, train_network

__all__ = ['Population',
           'evaluate_fitness',
           'train_network']
