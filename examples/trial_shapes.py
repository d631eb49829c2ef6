"""
Shapes Classification Example

Networks learn to recognize six simple shapes drawn on a small grid:
horizontal line, vertical line, diagonal, anti-diagonal, square and cross.

Two ways of using the engine are shown:
    - ShapesTrial / ShapesExperiment: a population of networks is evolved with
      crossover and mutation, each network also refined by a few rounds of
      gradient descent every generation.
    - run_classifier_demo(): the interactive setting, where a DrawingClassifier
      trains and queries one network living on a background worker.

Fitness:
    1 / (1 + mean squared error) over all training drawings, in (0, 1].

Usage:
    config = Config("examples/configs/config_shapes.ini")
    trial  = ShapesTrial(config)
    trial.run(num_jobs=1)
"""

from statistics import mean

from sketchnet.run            import Config, Experiment, Trial
from sketchnet.run.classifier import DrawingClassifier, best_answer

from examples.shapes import SHAPES, draw_shape, make_samples

class ShapesTrial(Trial):
    """
    Evolutionary trial on the shapes problem.

    The grid width is derived from the first layer size, and the number of
    shapes from the last one (at most six).
    """

    def __init__(self, config: Config, suppress_output: bool = False, random_seed: int | None = None,
                 samples_per_shape: int = 2, noise: float = 0.02):
        super().__init__(config, suppress_output, random_seed)
        self._samples_per_shape = samples_per_shape
        self._noise             = noise

        self._grid = int(round(config.layer_sizes[0] ** 0.5))
        if self._grid * self._grid != config.layer_sizes[0]:
            raise ValueError(f"Input width {config.layer_sizes[0]} is not a square grid")
        if config.layer_sizes[-1] > len(SHAPES):
            raise ValueError(f"At most {len(SHAPES)} categories are available")
        self._shapes = SHAPES[:config.layer_sizes[-1]]

    def _get_training_data(self):
        return make_samples(self._samples_per_shape, self._grid, self._noise, self._shapes)

    def _final_report(self):
        super()._final_report()
        network = self.get_fittest_network()
        for index, shape in enumerate(self._shapes):
            outputs = network.predict(draw_shape(shape, self._grid))
            answer  = best_answer(outputs, self._config.answer_threshold)
            guess   = self._shapes[answer] if answer is not None else "no answer"
            print(f"  {shape:>13} => {guess:<13} [{', '.join(f'{v:.2f}' for v in outputs)}]")

class ShapesExperiment(Experiment):
    """Multiple independent ShapesTrials, reporting how often the threshold is reached."""

    def _final_report(self):
        super()._final_report()
        if self._best_fitness:
            print(f"Worst best fitness:  {min(self._best_fitness):.4f}")

def run_classifier_demo(config: Config, repetitions: int = 3) -> float:
    """
    Train a classifier on clean drawings of every shape through the background
    worker, then classify noisy drawings.

    Returns:
        Fraction of noisy drawings classified correctly
    """
    grid   = int(round(config.layer_sizes[0] ** 0.5))
    shapes = SHAPES[:config.layer_sizes[-1]]

    with DrawingClassifier(config) as classifier:
        for _ in range(repetitions):
            for label, shape in enumerate(shapes):
                classifier.train(draw_shape(shape, grid), label)
        print(f"Training requests per shape: {classifier.counters}")

        hits = []
        for label, shape in enumerate(shapes):
            prediction = classifier.predict(draw_shape(shape, grid, noise=0.03))
            guess = shapes[prediction.answer] if prediction.answer is not None else "no answer"
            print(f"  {shape:>13} => {guess:<13} ({', '.join(prediction.confidences)})")
            hits.append(prediction.answer == label)

    accuracy = mean(hits)
    print(f"Accuracy: {100 * accuracy:.0f}%")
    return accuracy
