"""
Sketchnet Classifier Module

Host-side glue between a drawing surface and the background network worker.
The host hands over the raw pixel vector of a drawing, either with the label
to learn or to be classified, and turns the network outputs into an answer.

Classes:
    Prediction:        Outputs of one classification with the derived answer
    DrawingClassifier: Owns a NetworkWorker and talks to it through a channel

Functions:
    one_hot:          Target vector for one or more category indices
    best_answer:      Index of the winning category, if confident enough
    confidence_level: 'high', 'medium' or 'low' label for one output value
"""

from itertools import count
from typing    import Iterator, NamedTuple, Sequence

from sketchnet.network    import Network
from sketchnet.run.config import Config
from sketchnet.run.worker import NetworkWorker, create_channel

def one_hot(labels: int | Sequence[int], width: int) -> list[int]:
    """
    Target vector with a 1 at every labelled category and 0 elsewhere.

    Parameters:
        labels: One category index, or several for a drawing that belongs to
                more than one category (an empty sequence gives all zeros)
        width:  Number of categories
    """
    indices = {labels} if isinstance(labels, int) else set(labels)
    for index in indices:
        if not 0 <= index < width:
            raise ValueError(f"Category {index} out of range [0, {width})")
    return [1 if position in indices else 0 for position in range(width)]

def best_answer(outputs: Sequence[float], threshold: float = 0.4) -> int | None:
    """
    Index of the highest output, or None when no output exceeds 'threshold'.
    Ties go to the lowest index.
    """
    if not outputs:
        return None
    higher = max(outputs)
    if higher > threshold:
        return list(outputs).index(higher)
    return None

def confidence_level(value: float, high: float = 0.7, medium: float = 0.4) -> str:
    if value > high:
        return 'high'
    if value > medium:
        return 'medium'
    return 'low'

class Prediction(NamedTuple):
    outputs    : list[float]
    answer     : int | None
    confidences: list[str]

class DrawingClassifier:
    """
    Classifies drawings with a network running on a background worker.

    Requests are sent through a channel and each call blocks until the worker
    replies. Every request is numbered and waits only for the reply carrying
    its number, so after a timed-out call the late reply is discarded instead
    of being returned by the next call.

    Public Attributes:
        timeout:  Seconds to wait for each worker reply (None waits forever)
        counters: Number of completed training requests for each category.
                  A training request that timed out is counted once its
                  late acknowledgement is read, during a later call.

    Public Methods:
        train(pixels, labels): Teach the network that 'pixels' shows the category (or categories) 'labels'
        predict(pixels):       Classify 'pixels'
        close():               Stop the worker
    """

    def __init__(self, config: Config, network: Network | None = None, timeout: float | None = 60.0):
        """
        Parameters:
            config:  Configuration parameters
            network: Network to serve (default: a random network built from 'config')
            timeout: Seconds to wait for each worker reply (None waits forever)
        """
        if network is None:
            network = Network.from_random(config.layer_sizes,
                                          config.learning_rate,
                                          config.make_activation(),
                                          config.init_min,
                                          config.init_max)

        self._config    : Config                = config
        self.timeout    : float | None          = timeout
        self._categories: int                   = network.sizes[-1]
        self._requests  : Iterator[int]         = count(1)
        self._pending   : dict[int, list[int]]  = {}
        self.counters   : list[int]             = [0] * self._categories

        self._endpoint, worker_endpoint = create_channel()
        self._endpoint.listen('trained', self._on_trained)
        self._endpoint.listen('error',   self._on_error)
        self._worker = NetworkWorker(network, worker_endpoint, config.training_rounds)
        self._worker.start()

    def _on_trained(self, request_id):
        for index in self._pending.pop(request_id, []):
            self.counters[index] += 1

    def _on_error(self, request_id, *details):
        self._pending.pop(request_id, None)

    def train(self, pixels: Sequence[float], labels: int | Sequence[int]) -> None:
        expected   = one_hot(labels, self._categories)
        request_id = next(self._requests)
        self._pending[request_id] = [index for index, value in enumerate(expected) if value]
        self._endpoint.emit('train', request_id, list(pixels), expected)
        self._endpoint.wait_for('trained', self.timeout, request_id)

    def predict(self, pixels: Sequence[float]) -> Prediction:
        request_id = next(self._requests)
        self._endpoint.emit('predict', request_id, list(pixels))
        message = self._endpoint.wait_for('predicted', self.timeout, request_id)
        outputs = message.values[1]

        answer      = best_answer(outputs, self._config.answer_threshold)
        confidences = [confidence_level(value, self._config.high_confidence, self._config.medium_confidence)
                       for value in outputs]
        return Prediction(outputs, answer, confidences)

    def close(self) -> None:
        self._endpoint.emit('stop')
        self._worker.join(self.timeout)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
