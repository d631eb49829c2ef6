"""
Sketchnet Trial Module

This module defines the abstract base class for evolutionary trials. A trial is
one independent run: a population of networks is evaluated, optionally refined
by gradient descent, and bred through crossover and mutation, generation after
generation, until a solution is found or the maximum number of generations is
reached.
"""

from abc        import ABC, abstractmethod
from statistics import mean
from typing     import Sequence

from sketchnet.core.random_utils import seed
from sketchnet.network           import Network
from sketchnet.pool              import Population
from sketchnet.run.config        import Config

class Trial(ABC):
    """
    Abstract base class for implementing an evolutionary trial.

    Subclasses must implement:
    - _get_training_data(): Provide the (input, expected) samples

    Subclasses can override:
    - _reset(): Reset trial-specific state (call super()._reset())
    - _terminate(): Custom termination logic (default: max generations + fitness threshold)
    - _report_progress(), _final_report(): Output after each generation / at the end

    Public Attributes:
        failed: Whether the trial ended without reaching the fitness threshold

    Public Methods:
        run(num_jobs): Execute a complete trial

    Parallelization of fitness evaluation and gradient descent:
        num_jobs=1:  Serial (no parallelization)
        num_jobs>1:  Use specified number of parallel processes
        num_jobs=-1: Use all available CPU cores
    """

    def __init__(self, config: Config, suppress_output: bool = False, random_seed: int | None = None):
        """
        Parameters:
            config:          Configuration parameters
            suppress_output: If True, suppress progress and final reports
                             (useful when running multiple trials in experiments)
            random_seed:     Seed applied at the start of every run (None = not reproducible)
        """
        self._config            : Config            = config
        self._generation_counter: int               = 0
        self._population        : Population | None = None
        self._suppress_output   : bool              = suppress_output
        self._random_seed       : int | None        = random_seed
        self.failed             : bool              = True

    @property
    def population(self) -> Population | None:
        return self._population

    @property
    def generation_counter(self) -> int:
        return self._generation_counter

    def run(self, num_jobs: int = 1) -> None:
        """
        Run the trial.

        Parameters:
            num_jobs: Number of parallel processes for evaluating the networks
        """
        self._reset()
        samples = self._get_training_data()

        self._population = Population(self._config)
        self._evaluate_all(samples, num_jobs)
        if not self._suppress_output:
            self._report_progress()

        while not self._terminate():
            self._generation_counter += 1
            self._population.spawn_next_generation()
            self._evaluate_all(samples, num_jobs)
            if not self._suppress_output:
                self._report_progress()

        if not self._suppress_output:
            self._final_report()

    def _evaluate_all(self, samples, num_jobs: int) -> None:
        # Gradient descent (if enabled) refines each network before it is scored
        self._population.train(samples, self._config.gradient_rounds, num_jobs)
        self._population.evaluate(samples, num_jobs)

    def _reset(self) -> None:
        if self._random_seed is not None:
            seed(self._random_seed)
        self._generation_counter = 0
        self._population = None
        self.failed = True

    @abstractmethod
    def _get_training_data(self) -> Sequence[tuple[Sequence[float], Sequence[float]]]:
        """
        Provide the samples used to train and score the networks.

        Returns:
            List of (input, expected) pairs; inputs have length 'layer_sizes[0]'
            and expected outputs length 'layer_sizes[-1]'
        """
        pass

    def _terminate(self) -> bool:
        """
        Stop when the fittest network reaches 'fitness_threshold'
        or after 'max_generations' generations.
        """
        _, best = self._population.get_fittest()
        if best >= self._config.fitness_threshold:
            self.failed = False
            return True
        return self._generation_counter >= self._config.max_generations

    def get_fittest_network(self) -> Network | None:
        if self._population is None:
            return None
        fittest = self._population.get_fittest()
        return fittest[0] if fittest else None

    def _report_progress(self) -> None:
        _, best = self._population.get_fittest()
        average = mean(self._population.fitness)
        print(f"Generation {self._generation_counter:04d}: best fitness = {best:.4f}, mean fitness = {average:.4f}")

    def _final_report(self) -> None:
        _, best = self._population.get_fittest()
        status = "FAILED" if self.failed else "SOLVED"
        print(f"\n{status} after {self._generation_counter} generations, best fitness = {best:.4f}")
