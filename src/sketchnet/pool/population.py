"""
Sketchnet Population Module

This module implements the Population class, a pool of networks of identical
topology evolved with the network-level genetic operators (crossover and
mutation), optionally combined with gradient descent.

Classes:
    Population: A generation of networks with their fitness

Functions:
    evaluate_fitness: Fitness of one network on a set of samples
    train_network:    Gradient descent on a set of samples
"""

import math
import random
from joblib import Parallel, delayed
from typing import Sequence, TYPE_CHECKING

from sketchnet.network    import Network
if TYPE_CHECKING:
    from sketchnet.run.config import Config

Sample = tuple[Sequence[float], Sequence[float]]

def evaluate_fitness(network: Network, samples: Sequence[Sample]) -> float:
    """
    Fitness of a network: 1 / (1 + mean squared error over all samples).
    Always in (0, 1]; higher is better.
    """
    if not samples:
        raise ValueError("Cannot evaluate fitness without samples")
    loss = sum(network.error(input, expected) for input, expected in samples) / len(samples)
    return 1.0 / (1.0 + loss)

def train_network(network: Network, samples: Sequence[Sample], rounds: int) -> Network:
    """Run 'rounds' passes of Network.train over the samples; returns the (trained) network."""
    for _ in range(rounds):
        for input, expected in samples:
            network.train(input, expected)
    return network

class Population:
    """
    A generation of networks sharing one topology.

    Public Attributes:
        networks: The networks of the current generation
        fitness:  Fitness of each network (None until evaluated)

    Public Methods:
        evaluate(samples, num_jobs): Compute the fitness of every network
        train(samples, rounds, num_jobs): Apply gradient descent to every network
        get_fittest():               The network with the highest fitness
        spawn_next_generation():     Replace the networks by their offspring
    """

    def __init__(self, config: 'Config'):
        """
        Create 'population_size' networks with random parameters.

        Parameters:
            config: Stores configuration parameters
        """
        if config.population_size < 1:
            raise ValueError(f"population_size must be positive, got {config.population_size}")

        self._config = config
        activation   = config.make_activation()
        self.networks: list[Network]       = [Network.from_random(config.layer_sizes,
                                                                  config.learning_rate,
                                                                  activation,
                                                                  config.init_min,
                                                                  config.init_max)
                                              for _ in range(config.population_size)]
        self.fitness : list[float | None]  = [None] * len(self.networks)

    def evaluate(self, samples: Sequence[Sample], num_jobs: int = 1) -> None:
        """
        Compute the fitness of every network.

        Parameters:
            samples:  (input, expected) pairs
            num_jobs: Number of parallel processes (1 = serial, -1 = all CPU cores)
        """
        if num_jobs == 1:
            self.fitness = [evaluate_fitness(network, samples) for network in self.networks]
        else:
            self.fitness = Parallel(num_jobs)(delayed(evaluate_fitness)(network, samples)
                                              for network in self.networks)

    def train(self, samples: Sequence[Sample], rounds: int, num_jobs: int = 1) -> None:
        """
        Apply 'rounds' passes of gradient descent to every network.
        Fitness values become stale and are cleared.
        """
        if rounds <= 0:
            return
        if num_jobs == 1:
            for network in self.networks:
                train_network(network, samples, rounds)
        else:
            # worker processes train copies, so collect them back
            self.networks = Parallel(num_jobs)(delayed(train_network)(network, samples, rounds)
                                               for network in self.networks)
        self.fitness = [None] * len(self.networks)

    def _ranked(self) -> list[tuple[float, Network]]:
        if any(value is None for value in self.fitness):
            raise RuntimeError("Population must be evaluated first")
        order = sorted(range(len(self.networks)), key=lambda index: self.fitness[index], reverse=True)
        return [(self.fitness[index], self.networks[index]) for index in order]

    def get_fittest(self) -> tuple[Network, float] | None:
        """
        Returns:
            (network, fitness) of the fittest network, or None if the
            population has not been evaluated yet
        """
        if any(value is None for value in self.fitness):
            return None
        fitness, network = self._ranked()[0]
        return network, fitness

    def spawn_next_generation(self) -> None:
        """
        Create the next generation.

        The 'elitism' fittest networks survive unchanged. The rest of the new
        generation are children of two parents picked at random among the top
        'survival_threshold' fraction, built with Network.from_crossover and
        then mutated with Network.mutate.
        """
        ranked = [network for _, network in self._ranked()]
        size   = len(ranked)

        elitism     = max(0, min(self._config.elitism, size))
        num_parents = max(1, min(size, math.ceil(size * self._config.survival_threshold)))
        parents     = ranked[:num_parents]

        offspring = ranked[:elitism]
        while len(offspring) < size:
            parent1 = random.choice(parents)
            parent2 = random.choice(parents)
            child   = Network.from_crossover(parent1, parent2)
            Network.mutate(child, self._config.mutation_min, self._config.mutation_max, self._config.mutation_rate)
            offspring.append(child)

        self.networks = offspring
        self.fitness  = [None] * size
