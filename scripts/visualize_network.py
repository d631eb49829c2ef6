#!/usr/bin/env python3
"""
Utility script to visualize a sketchnet network.

Builds a random network from a configuration file (optionally trained on the
XOR samples first) and renders it with Graphviz.

Usage:
    python scripts/visualize_network.py --config examples/configs/config_xor.ini --train 2000
"""

import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sketchnet import Config, Network
from examples.trial_XOR import XOR_SAMPLES


def main():
    parser = argparse.ArgumentParser(description='Visualize a sketchnet network')
    parser.add_argument('--config', default='examples/configs/config_xor.ini',
                        help='Configuration file describing the network')
    parser.add_argument('--train', type=int, default=0,
                        help='Rounds of gradient descent on the XOR samples before rendering')
    parser.add_argument('--output', default='network',
                        help='Output filename (without extension)')
    parser.add_argument('--format', default='png',
                        help='Output format (png, pdf, svg, etc.)')
    parser.add_argument('--view', action='store_true',
                        help='Open the generated file')

    args = parser.parse_args()

    config  = Config(args.config)
    network = Network.from_random(config.layer_sizes, config.learning_rate, config.make_activation(),
                                  config.init_min, config.init_max)
    if args.train:
        if network.sizes[0] != 2 or network.sizes[-1] != 1:
            parser.error("--train needs a network with 2 inputs and 1 output")
        for _ in range(args.train):
            for input, expected in XOR_SAMPLES:
                network.train(input, expected)

    dot = network.visualize()
    dot.format = args.format
    path = dot.render(args.output, view=args.view, cleanup=True)
    print(f"Network saved to {path}")


if __name__ == '__main__':
    main()
