"""
Hyperparameter ranges explored when tuning a Config.

Every parameter is named after the Config attribute it overrides
('learning_rate', 'mutation_rate', 'layer_sizes', ...), so the values drawn
for an Optuna trial can be assigned straight onto a copy of the base Config.
"""

from abc    import ABC, abstractmethod
from typing import Any, Optional
import optuna   # type: ignore

class Parameter(ABC):

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def sample(self, trial: optuna.Trial) -> Any:
        """Draw a value for this parameter from the Optuna trial."""

class FloatRange(Parameter):

    def __init__(self, name: str, low: float, high: float, log: bool = False, step: Optional[float] = None):
        super().__init__(name)
        if low > high:
            raise ValueError(f"Empty range for '{name}': [{low}, {high}]")
        if log and step is not None:
            raise ValueError(f"'{name}' cannot be both log-scaled and stepped")
        self.low, self.high, self.log, self.step = low, high, log, step

    def sample(self, trial: optuna.Trial) -> float:
        return trial.suggest_float(self.name, self.low, self.high, log=self.log, step=self.step)

    def __repr__(self):
        return f"FloatRange({self.name!r}, {self.low}, {self.high}, log={self.log}, step={self.step})"

class IntRange(Parameter):

    def __init__(self, name: str, low: int, high: int, log: bool = False, step: int = 1):
        super().__init__(name)
        if low > high:
            raise ValueError(f"Empty range for '{name}': [{low}, {high}]")
        self.low, self.high, self.log, self.step = low, high, log, step

    def sample(self, trial: optuna.Trial) -> int:
        return trial.suggest_int(self.name, self.low, self.high, log=self.log, step=self.step)

    def __repr__(self):
        return f"IntRange({self.name!r}, {self.low}, {self.high}, log={self.log}, step={self.step})"

class Choice(Parameter):
    """
    One of a fixed set of values.

    Optuna only persists scalar choices, so a candidate topology such as
    [225, 60, 6] is offered as the text '225, 60, 6'; Config parses it back
    into a list when it is assigned to 'layer_sizes'.
    """

    def __init__(self, name: str, options: list[Any]):
        super().__init__(name)
        if not options:
            raise ValueError(f"'{name}' needs at least one option")
        self.options = [_as_scalar(option) for option in options]

    def sample(self, trial: optuna.Trial) -> Any:
        return trial.suggest_categorical(self.name, self.options)

    def __repr__(self):
        return f"Choice({self.name!r}, {self.options})"

def _as_scalar(option: Any) -> Any:
    if isinstance(option, (list, tuple)):
        return ', '.join(str(item) for item in option)
    return option

class SearchSpace:
    """
    The set of Config attributes to tune, each with its range.

    Example:
        >>> space = (SearchSpace()
        ...          .add_float('learning_rate', 0.01, 1.0, log=True)
        ...          .add_float('mutation_rate', 0.01, 0.2)
        ...          .add_categorical('layer_sizes', [[225, 60, 6], [225, 120, 60, 6]]))
    """

    def __init__(self):
        self._parameters: dict[str, Parameter] = {}

    def add(self, parameter: Parameter) -> 'SearchSpace':
        if parameter.name in self._parameters:
            raise ValueError(f"'{parameter.name}' is already part of the search space")
        self._parameters[parameter.name] = parameter
        return self

    def add_float(self, name: str, low: float, high: float, log: bool = False,
                  step: Optional[float] = None) -> 'SearchSpace':
        return self.add(FloatRange(name, low, high, log, step))

    def add_int(self, name: str, low: int, high: int, log: bool = False, step: int = 1) -> 'SearchSpace':
        return self.add(IntRange(name, low, high, log, step))

    def add_categorical(self, name: str, options: list[Any]) -> 'SearchSpace':
        return self.add(Choice(name, options))

    def sample(self, trial: optuna.Trial) -> dict[str, Any]:
        """Config overrides drawn for one Optuna trial."""
        return {name: parameter.sample(trial) for name, parameter in self._parameters.items()}

    @property
    def names(self) -> list[str]:
        return list(self._parameters)

    def __len__(self) -> int:
        return len(self._parameters)

    def __repr__(self) -> str:
        return f"SearchSpace({list(self._parameters.values())})"
