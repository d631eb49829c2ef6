"""
XOR Problem Example

The classic XOR benchmark: two binary inputs, one output that is 1 only when
the inputs differ. It is not linearly separable, so the network needs a hidden
layer. Networks are evolved with crossover and mutation, and refined by
gradient descent every generation.

Usage:
    config = Config("examples/configs/config_xor.ini")
    trial  = XORTrial(config)
    trial.run()
"""

from sketchnet.run import Config, Experiment, Trial

XOR_SAMPLES = [([0.0, 0.0], [0.0]),
               ([0.0, 1.0], [1.0]),
               ([1.0, 0.0], [1.0]),
               ([1.0, 1.0], [0.0])]

class XORTrial(Trial):

    def __init__(self, config: Config, suppress_output: bool = False, random_seed: int | None = None):
        if config.layer_sizes[0] != 2 or config.layer_sizes[-1] != 1:
            raise ValueError(f"XOR needs 2 inputs and 1 output, got layer sizes {config.layer_sizes}")
        super().__init__(config, suppress_output, random_seed)

    def _get_training_data(self):
        return XOR_SAMPLES

    def _final_report(self):
        super()._final_report()
        network = self.get_fittest_network()
        for input, expected in XOR_SAMPLES:
            print(f"  {input} => {network.predict(input)[0]:.3f} (expected {expected[0]:.0f})")

class XORExperiment(Experiment):
    pass
