"""
Bayesian tuning of the Config driving evolutionary trials.

BayesianOptimizer lets an Optuna study propose Config overrides drawn from a
SearchSpace. Each proposal is scored by an Experiment of one or more
independent trials: the score is the mean best fitness those trials reach,
and the experiment's success rate is kept alongside as a user attribute.
"""

import copy
import warnings
from statistics import mean
from typing     import Any, Callable, Optional, Type

import optuna                                   # type: ignore
from optuna.visualization import (              # type: ignore
    plot_optimization_history,
    plot_param_importances
)

from sketchnet.optimization.search_space import SearchSpace
from sketchnet.run.config                import Config
from sketchnet.run.experiment            import Experiment
from sketchnet.run.trial                 import Trial

# Fewest finished configurations for which parameter importances are meaningful
MIN_CONFIGS_FOR_IMPORTANCE = 10

class BayesianOptimizer:
    """
    Search for the Config under which a Trial subclass learns best.

    Example:
        >>> space = SearchSpace().add_float('mutation_rate', 0.01, 0.3)
        >>> optimizer = BayesianOptimizer(ShapesTrial, config, space, trials_per_config=3)
        >>> optimizer.optimize(num_configs=20)
        >>> optimizer.best_config().save('best.ini')

    Subclasses can override '_score' to maximize something other than the
    mean best fitness (the per-trial result dictionaries come from Experiment).
    """

    def __init__(self,
                 trial_class      : Type[Trial],
                 config           : Config | str,
                 search_space     : SearchSpace,
                 trials_per_config: int = 1,
                 num_jobs_fitness : int = 1,
                 study_name       : Optional[str] = None,
                 storage          : Optional[str] = None,
                 sampler          : Optional[optuna.samplers.BaseSampler] = None,
                 **trial_kwargs):
        """
        Parameters:
            trial_class:       Trial subclass run for every proposed Config
            config:            Base Config (or path of an INI file); overrides are applied to copies
            search_space:      The Config attributes to tune
            trials_per_config: Independent trials run to score one proposal
            num_jobs_fitness:  Parallel processes for fitness evaluation inside each trial
            study_name:        Optuna study name (needed to resume a stored study)
            storage:           Optuna storage URL, e.g. 'sqlite:///tuning.db' (None keeps it in memory)
            sampler:           Optuna sampler (default: TPESampler)
            **trial_kwargs:    Extra keyword arguments for the trial constructor
        """
        if trials_per_config < 1:
            raise ValueError(f"trials_per_config must be positive, got {trials_per_config}")

        self._trial_class       = trial_class
        self._base_config       = config if isinstance(config, Config) else Config(config)
        self._search_space      = search_space
        self._trials_per_config = trials_per_config
        self._num_jobs_fitness  = num_jobs_fitness
        self._trial_kwargs      = trial_kwargs

        self.study = optuna.create_study(direction      = 'maximize',
                                         study_name     = study_name,
                                         storage        = storage,
                                         sampler        = sampler if sampler is not None else optuna.samplers.TPESampler(),
                                         load_if_exists = True)

    @property
    def base_config(self) -> Config:
        return self._base_config

    def _apply(self, overrides: dict[str, Any]) -> Config:
        config = copy.deepcopy(self._base_config)
        for name, value in overrides.items():
            setattr(config, name, value)
        return config

    def _score(self, results: list[dict]) -> float:
        return mean(result["best_fitness"] for result in results)

    def _objective(self, optuna_trial: optuna.Trial) -> float:
        config     = self._apply(self._search_space.sample(optuna_trial))
        experiment = Experiment(self._trial_class, self._trials_per_config, config, True, **self._trial_kwargs)
        experiment.run(num_jobs_fitness=self._num_jobs_fitness)

        optuna_trial.set_user_attr("success_rate", experiment.success_rate)
        return self._score(experiment.results)

    def optimize(self,
                 num_configs      : Optional[int] = None,
                 timeout          : Optional[float] = None,
                 num_jobs_configs : int = 1,
                 callbacks        : Optional[list[Callable]] = None,
                 show_progress_bar: bool = False) -> optuna.Study:
        """
        Evaluate proposals until 'num_configs' are done or 'timeout' seconds have passed.

        Parameters:
            num_configs:       Number of proposals to evaluate
            timeout:           Wall-clock budget in seconds
            num_jobs_configs:  Proposals evaluated concurrently (Optuna threads)
            callbacks:         Optuna callbacks invoked after every proposal
            show_progress_bar: Display Optuna's progress bar

        Returns:
            The Optuna study
        """
        if num_configs is None and timeout is None:
            raise ValueError("Either 'num_configs' or 'timeout' must be given")

        self.study.optimize(self._objective,
                            n_trials          = num_configs,
                            timeout           = timeout,
                            n_jobs            = num_jobs_configs,
                            callbacks         = callbacks,
                            gc_after_trial    = True,
                            show_progress_bar = show_progress_bar)
        return self.study

    @property
    def best_params(self) -> dict[str, Any]:
        return self.study.best_params

    @property
    def best_value(self) -> float:
        return self.study.best_value

    def best_config(self) -> Config:
        """The base Config with the best proposal's overrides applied."""
        return self._apply(self.study.best_params)

    def plot_history(self, **kwargs):
        """Plotly figure of the score of every evaluated proposal."""
        return plot_optimization_history(self.study, **kwargs)

    def plot_importances(self, **kwargs):
        """Plotly figure ranking the tuned parameters by influence on the score."""
        if len(self.study.trials) < MIN_CONFIGS_FOR_IMPORTANCE:
            warnings.warn(f"Parameter importances need at least {MIN_CONFIGS_FOR_IMPORTANCE} "
                          f"evaluated configurations, got {len(self.study.trials)}")
            return None
        return plot_param_importances(self.study, **kwargs)

    def report(self) -> None:
        best = self.study.best_trial
        print(f"\nConfigurations evaluated: {len(self.study.trials)}")
        print(f"Best mean fitness:        {best.value:.4f}")
        print(f"Success rate of best:     {100 * best.user_attrs.get('success_rate', 0.0):.1f}%")
        print("Best overrides:")
        for name, value in best.params.items():
            print(f"    {name} = {value}")
