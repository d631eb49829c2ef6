#!/usr/bin/env python3
"""
Utility script to run the sketchnet examples easily.

Usage:
    python scripts/run_example.py xor
    python scripts/run_example.py shapes --mode experiment --num-trials 10
    python scripts/run_example.py shapes --mode classifier
    python scripts/run_example.py xor --mode optimize --num-configs 20
"""

import sys
import argparse
from pathlib import Path

# Add parent directory to path (for the 'examples' package)
sys.path.insert(0, str(Path(__file__).parent.parent))

from sketchnet import BayesianOptimizer, Config, SearchSpace
from examples.trial_XOR import XORTrial, XORExperiment
from examples.trial_shapes import ShapesTrial, ShapesExperiment, run_classifier_demo


EXAMPLES = {
    'xor': {
        'trial': XORTrial,
        'experiment': XORExperiment,
        'config': 'examples/configs/config_xor.ini',
        'description': 'XOR logic problem'
    },
    'shapes': {
        'trial': ShapesTrial,
        'experiment': ShapesExperiment,
        'config': 'examples/configs/config_shapes.ini',
        'description': 'Shapes drawn on a 15x15 grid'
    }
}


def main():
    parser = argparse.ArgumentParser(description='Run sketchnet examples')
    parser.add_argument('example', choices=EXAMPLES.keys(),
                        help='Example to run')
    parser.add_argument('--mode', choices=['trial', 'experiment', 'classifier', 'optimize'], default='trial',
                        help='Run a single evolutionary trial, a full experiment, '
                             'the background classifier (shapes only) or a hyperparameter search')
    parser.add_argument('--config', default=None,
                        help='Configuration file (default: the example configuration)')
    parser.add_argument('--num-trials', type=int, default=10,
                        help='Number of trials for experiment mode')
    parser.add_argument('--num-configs', type=int, default=20,
                        help='Number of configurations to evaluate in optimize mode')
    parser.add_argument('--num-jobs', type=int, default=1,
                        help='Number of parallel jobs')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducible trials')

    args = parser.parse_args()

    example = EXAMPLES[args.example]
    print(f"Running {example['description']}...")
    print(f"Mode: {args.mode}")

    root   = Path(__file__).parent.parent
    config = Config(args.config or str(root / example['config']))

    if args.mode == 'trial':
        trial = example['trial'](config, random_seed=args.seed)
        trial.run(num_jobs=args.num_jobs)
    elif args.mode == 'experiment':
        experiment = example['experiment'](
            example['trial'],
            num_trials=args.num_trials,
            config=config
        )
        experiment.run(num_jobs_trials=args.num_jobs, num_jobs_fitness=1)
    elif args.mode == 'optimize':
        search_space = (SearchSpace()
                        .add_float('learning_rate', 0.05, 1.0, log=True)
                        .add_float('mutation_rate', 0.01, 0.3)
                        .add_int('gradient_rounds', 0, 50, step=5))
        optimizer = BayesianOptimizer(example['trial'], config, search_space,
                                      trials_per_config=3, num_jobs_fitness=args.num_jobs)
        optimizer.optimize(num_configs=args.num_configs)
        optimizer.report()
    else:
        if args.example != 'shapes':
            parser.error('classifier mode is only available for the shapes example')
        run_classifier_demo(config)


if __name__ == '__main__':
    main()
