"""
Sketchnet Worker Module

This module implements the background execution channel that runs training and
inference off the interactive thread. The two sides of a channel exchange typed
messages only; payloads are copied on the way in, so the host and the worker
never share mutable memory.

Message values are restricted to booleans, numbers, text and nested lists of
those. Requests carry an id that the reply echoes, so a host that gave up
waiting for one reply never mistakes it for the answer to a later request.

Classes:
    Message:       Envelope carrying an operation name and its values
    Endpoint:      One side of a channel (emit / listen / receive)
    NetworkWorker: Owns a Network on a background thread and serves 'train' and 'predict'

Functions:
    validate_values: Check (and copy) a message payload
    create_channel:  Build two connected endpoints
"""

import queue
import threading
import time
from typing import Any, Callable, NamedTuple

from sketchnet.network import Network

class Message(NamedTuple):
    operation: str
    values   : tuple

def _copy_value(value: Any) -> Any:
    # bool is checked first since it is a subclass of int
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [_copy_value(item) for item in value]
    # numpy scalars
    if hasattr(value, 'item') and getattr(value, 'ndim', None) == 0:
        return _copy_value(value.item())
    raise TypeError(f"Unsupported message value of type {type(value).__name__}")

def validate_values(values: tuple) -> tuple:
    """
    Check that a payload only holds booleans, numbers, text and nested lists.

    Returns:
        A deep copy of the payload (tuples become lists)

    Raises:
        TypeError: if any value has an unsupported type
    """
    return tuple(_copy_value(value) for value in values)

class Endpoint:
    """
    One side of a two-endpoint channel.

    Messages emitted on one endpoint are received, in order, by the other one.
    'receive' takes one message from the inbox and calls every listener
    registered for its operation.

    Public Methods:
        emit(name, *values):      Send a message to the other side
        listen(name, callback):   Register a listener for an operation
        receive(timeout):         Dispatch one incoming message
        wait_for(name, timeout):  Dispatch messages until one named 'name' arrives
    """

    def __init__(self, inbox: queue.Queue, outbox: queue.Queue):
        self._inbox    : queue.Queue                            = inbox
        self._outbox   : queue.Queue                            = outbox
        self._listeners: dict[str, list[Callable[..., None]]]   = {}

    def emit(self, name: str, *values) -> None:
        self._outbox.put(Message(name, validate_values(values)))

    def listen(self, name: str, callback: Callable[..., None]) -> None:
        self._listeners.setdefault(name, []).append(callback)

    def receive(self, timeout: float | None = None) -> Message | None:
        """
        Take one message from the inbox and dispatch it to its listeners.

        Parameters:
            timeout: Seconds to wait for a message (None waits forever)

        Returns:
            The dispatched message, or None if nothing arrived in time
        """
        try:
            message = self._inbox.get(timeout=timeout)
        except queue.Empty:
            return None

        for callback in self._listeners.get(message.operation, []):
            callback(*message.values)
        return message

    def wait_for(self, name: str, timeout: float | None = None, request_id: int | None = None) -> Message:
        """
        Dispatch incoming messages until one for operation 'name' arrives.

        When 'request_id' is given, only a reply whose first value is that id
        counts; replies to other (earlier, timed out) requests are dispatched
        to their listeners and otherwise dropped.

        Raises:
            TimeoutError: if no matching message arrives within 'timeout' seconds
            RuntimeError: if the other side reports an error for this request
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            message   = self.receive(remaining)
            if message is None:
                raise TimeoutError(f"No '{name}' message received within {timeout} seconds")
            if request_id is not None and _request_of(message) not in (request_id, None):
                continue
            if message.operation == name and (request_id is None or _request_of(message) == request_id):
                return message
            if message.operation == 'error':
                raise RuntimeError(*message.values[1:])

def _request_of(message: Message) -> Any:
    return message.values[0] if message.values else None

def create_channel() -> tuple[Endpoint, Endpoint]:
    """
    Build a channel.

    Returns:
        (host endpoint, worker endpoint)
    """
    to_worker = queue.Queue()
    to_host   = queue.Queue()
    return Endpoint(to_host, to_worker), Endpoint(to_worker, to_host)

class NetworkWorker:
    """
    Background owner of one Network.

    The worker thread is the only code touching the network once started. It
    serves three operations, one at a time, in arrival order; every request
    carries an id that is echoed back as the first value of the reply:
        'train'   (id, input, expected): runs 'training_rounds' rounds of Network.train,
                                         then emits 'trained' (id)
        'predict' (id, input):           emits 'predicted' (id, output vector)
        'stop'    ():                    ends the thread
    A request that fails is answered with 'error' (id, description); a
    malformed message that cannot be attributed to a request gets the id None.
    """

    def __init__(self, network: Network, endpoint: Endpoint, training_rounds: int = 1000):
        self._network        : Network                 = network
        self._endpoint       : Endpoint                = endpoint
        self._training_rounds: int                     = training_rounds
        self._thread         : threading.Thread | None = None
        self._running        : bool                    = False

        endpoint.listen('train',   self._serving(self._on_train))
        endpoint.listen('predict', self._serving(self._on_predict))
        endpoint.listen('stop',    self._on_stop)

    def _serving(self, handler: Callable[..., None]) -> Callable[..., None]:
        def callback(request_id, *values):
            try:
                handler(request_id, *values)
            except Exception as error:
                self._endpoint.emit('error', request_id, _describe(error))
        return callback

    def _on_train(self, request_id, input, expected):
        for _ in range(self._training_rounds):
            self._network.train(input, expected)
        self._endpoint.emit('trained', request_id)

    def _on_predict(self, request_id, input):
        self._endpoint.emit('predicted', request_id, self._network.predict(input))

    def _on_stop(self):
        self._running = False

    def _run(self):
        while self._running:
            try:
                self._endpoint.receive()
            except Exception as error:
                self._endpoint.emit('error', None, _describe(error))

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Worker already started")
        self._running = True
        self._thread  = threading.Thread(target=self._run, name='sketchnet-worker', daemon=True)
        self._thread.start()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

def _describe(error: Exception) -> str:
    return f"{type(error).__name__}: {error}"
