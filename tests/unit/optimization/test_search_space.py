"""
Unit tests for the hyperparameter search space.
"""

import pytest
from optuna.trial import FixedTrial

from sketchnet.optimization.search_space import Choice, FloatRange, IntRange, SearchSpace


class TestParameters:

    def test_float_bounds_are_checked(self):
        with pytest.raises(ValueError):
            FloatRange('learning_rate', 1.0, 0.1)

    def test_float_log_and_step_are_exclusive(self):
        with pytest.raises(ValueError):
            FloatRange('learning_rate', 0.01, 1.0, log=True, step=0.01)

    def test_int_bounds_are_checked(self):
        with pytest.raises(ValueError):
            IntRange('elitism', 5, 1)

    def test_choice_needs_options(self):
        with pytest.raises(ValueError):
            Choice('activation', [])

    def test_list_options_become_text(self):
        parameter = Choice('layer_sizes', [[4, 3, 2], (4, 8, 2), 'sigmoid'])
        assert parameter.options == ['4, 3, 2', '4, 8, 2', 'sigmoid']


class TestSearchSpace:

    def test_chaining_and_names(self):
        space = (SearchSpace()
                 .add_float('learning_rate', 0.01, 1.0, log=True)
                 .add_int('population_size', 4, 20)
                 .add_categorical('activation', ['sigmoid', 'elu']))
        assert len(space) == 3
        assert space.names == ['learning_rate', 'population_size', 'activation']

    def test_duplicate_names_raise(self):
        space = SearchSpace().add_float('mutation_rate', 0.01, 0.5)
        with pytest.raises(ValueError):
            space.add_float('mutation_rate', 0.1, 0.2)

    def test_sample(self):
        space = (SearchSpace()
                 .add_float('learning_rate', 0.01, 1.0)
                 .add_float('mutation_min', -0.5, 0.0, step=0.1)
                 .add_int('elitism', 0, 4)
                 .add_categorical('layer_sizes', [[2, 3, 1], [2, 5, 1]]))
        trial = FixedTrial({'learning_rate': 0.2, 'mutation_min': -0.3, 'elitism': 1, 'layer_sizes': '2, 5, 1'})
        assert space.sample(trial) == {'learning_rate': 0.2,
                                       'mutation_min' : -0.3,
                                       'elitism'      : 1,
                                       'layer_sizes'  : '2, 5, 1'}

    def test_repr(self):
        space = SearchSpace().add_int('max_generations', 1, 10)
        assert "IntRange('max_generations', 1, 10" in repr(space)
