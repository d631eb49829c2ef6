"""
Sketchnet Experiment Module

This module defines the Experiment class, with built-in support for CPU-based
parallelization using joblib.

An experiment represents a collection of multiple independent trials (runs),
used to gather statistical data about how reliably a configuration learns.
"""

from joblib     import Parallel, delayed
from statistics import mean
from sys        import stdout
from typing     import Type

from sketchnet.run.config import Config
from sketchnet.run.trial  import Trial

class Experiment:
    """
    A collection of independent trials of the same problem.

    Each trial is one complete evolutionary run; the experiment aggregates the
    results: success rate, generations needed and best fitness reached.

    Subclasses can override:
    - _prepare_trial(trial, trial_number): Configure each trial before execution
    - _extract_trial_results(trial, trial_number): Extract results after a trial (call super())
    - _analyze_trial_results(results): Process individual trial results (call super())
    - _final_report(): Produce the aggregated report

    Public Attributes:
        results: Per-trial result dictionaries of the last run

    Public Methods:
        run(num_jobs_trials=1, num_jobs_fitness=1): Execute the complete experiment
    """

    def __init__(self, trial_class: Type[Trial], num_trials: int, config: Config,
                 suppress_output: bool = False, *args, **kwargs):
        """
        Parameters:
            trial_class:     the class describing the trials in this experiment
            num_trials:      number of trials in this experiment
            config:          configuration parameters
            suppress_output: If True, suppress progress and final reports
            *args:           positional arguments to pass to trial class constructor
            **kwargs:        keyword arguments to pass to trial class constructor
        """
        self._num_trials     : int         = num_trials
        self._trial_class    : Type[Trial] = trial_class
        self._config         : Config      = config
        self._suppress_output: bool        = suppress_output
        self._trial_args                   = args
        self._trial_kwargs                 = kwargs
        self.results         : list[dict]  = []

        self._reset()

    def _reset(self):
        self._trial_counter     : int         = 0
        self._success_counter   : int         = 0
        self._number_generations: list[int]   = []
        self._best_fitness      : list[float] = []
        self.results = []

    @property
    def success_rate(self) -> float:
        return self._success_counter / self._trial_counter if self._trial_counter else 0.0

    def run(self, num_jobs_trials: int = 1, num_jobs_fitness: int = 1):
        """
        Run the experiment.

        Parameters:
            num_jobs_trials:  Number of parallel processes for running trials
                               1 = serial trial execution (default)
                              -1 = use all available CPU cores for trials
                              >1 = use specified number of processes for trials
            num_jobs_fitness: Number of parallel processes for evaluation within each trial
                               1 = serial (default, recommended when num_jobs_trials > 1)
        """
        self._reset()

        if num_jobs_trials == 1:
            results = []
            while self._trial_counter < self._num_trials:
                self._trial_counter += 1
                results.append(self._run_trial(self._trial_counter, num_jobs_fitness))
        else:
            results = Parallel(num_jobs_trials)(
                delayed(self._run_trial)(n, num_jobs_fitness)
                for n in range(1, self._num_trials + 1)
            )
            self._trial_counter = self._num_trials

        for r in results:
            self._analyze_trial_results(r)
        self.results = results

        if not self._suppress_output:
            self._final_report()

    def _run_trial(self, trial_number: int, num_jobs: int = 1) -> dict:
        trial = self._trial_class(*self._trial_args, config=self._config, suppress_output=True, **self._trial_kwargs)
        self._prepare_trial(trial, trial_number)
        trial.run(num_jobs)
        return self._extract_trial_results(trial, trial_number)

    def _prepare_trial(self, trial: Trial, trial_number: int):
        """
        Configure the trial about to run. The default implementation prints a progress report.
        """
        if not self._suppress_output:
            stdout.write(f"Starting trial {trial_number:03d} of {self._num_trials}...\r")
            stdout.flush()

    def _extract_trial_results(self, trial: Trial, trial_number: int) -> dict:
        _, best = trial.population.get_fittest()
        return {"trial_number"      : trial_number,
                "number_generations": trial.generation_counter,
                "best_fitness"      : best,
                "success"           : not trial.failed}

    def _analyze_trial_results(self, results: dict):
        self._best_fitness.append(results["best_fitness"])
        if results["success"]:
            self._success_counter += 1
            self._number_generations.append(results["number_generations"])

    def _final_report(self):
        print(f"\nTrials run:          {self._trial_counter}")
        print(f"Successful trials:   {self._success_counter} ({100 * self.success_rate:.1f}%)")
        if self._best_fitness:
            print(f"Mean best fitness:   {mean(self._best_fitness):.4f}")
        if self._number_generations:
            print(f"Mean generations:    {mean(self._number_generations):.1f} "
                  f"(min {min(self._number_generations)}, max {max(self._number_generations)})")
