import autograd.numpy as np  # type: ignore
from autograd import elementwise_grad  # type: ignore
from enum     import Enum
from typing   import NamedTuple

class ActivationType(Enum):
    SIGMOID    = "sigmoid"
    LINEAR     = "linear"
    RELU       = "relu"
    LEAKY_RELU = "leaky_relu"
    ELU        = "elu"

def sigmoid_activation(z):
    z = np.clip(z, -500, 500)   # exp(500) is still finite in float64
    return 1.0 / (1.0 + np.exp(-z))

def sigmoid_derivative(y):
    # 'y' is the already-activated value
    return y * (1.0 - y)

def linear_activation(z, scale):
    return z * scale

def linear_derivative(z, scale):
    return np.ones_like(z) * scale

def relu_activation(z, scale):
    return np.where(z < 0, 0.0, z * scale)

def relu_derivative(z, scale):
    return np.where(z > 0, scale, 0.0)

def leaky_relu_activation(z, alpha, scale):
    return np.where(z < 0, z * alpha, z) * scale

def leaky_relu_derivative(z, alpha, scale):
    return np.where(z > 0, 1.0, alpha) * scale

def elu_activation(z, alpha, scale):
    # expm1 only sees non-positive values, so the unused branch never overflows
    return np.where(z < 0, alpha * np.expm1(np.minimum(z, 0.0)), z) * scale

def elu_derivative(z, alpha, scale):
    return np.where(z > 0, 1.0, alpha * np.exp(np.minimum(z, 0.0))) * scale

def _generate(function: 'ActivationFunction', z):
    kind = function.type
    if kind is ActivationType.SIGMOID:
        return sigmoid_activation(z)
    if kind is ActivationType.LINEAR:
        return linear_activation(z, function.scale)
    if kind is ActivationType.RELU:
        return relu_activation(z, function.scale)
    if kind is ActivationType.LEAKY_RELU:
        return leaky_relu_activation(z, function.alpha, function.scale)
    if kind is ActivationType.ELU:
        return elu_activation(z, function.alpha, function.scale)
    raise ValueError(f"Unknown activation type '{kind}'")

def _derivative(function: 'ActivationFunction', x):
    kind = function.type
    if kind is ActivationType.SIGMOID:
        return sigmoid_derivative(x)
    if kind is ActivationType.LINEAR:
        return linear_derivative(x, function.scale)
    if kind is ActivationType.RELU:
        return relu_derivative(x, function.scale)
    if kind is ActivationType.LEAKY_RELU:
        return leaky_relu_derivative(x, function.alpha, function.scale)
    if kind is ActivationType.ELU:
        return elu_derivative(x, function.alpha, function.scale)
    raise ValueError(f"Unknown activation type '{kind}'")

def _as_output(value, result):
    # scalars in, python floats out; arrays in, arrays out
    if np.ndim(value) == 0:
        return float(result)
    return np.asarray(result, dtype=np.float64)

class ActivationFunction(NamedTuple):
    """
    An activation function together with its derivative.

    Instances are immutable values holding only their scalar hyperparameters;
    two instances with the same type and parameters are interchangeable.
    Both 'generate' and 'derivative' accept a python scalar (returning a float)
    or a numpy array (applied elementwise).

    Note that for SIGMOID, 'derivative' expects the *activated* value y and
    returns y * (1 - y); backpropagation feeds it the layer outputs.
    """
    type : ActivationType
    alpha: float = 0.0
    scale: float = 1.0

    def generate(self, value):
        return _as_output(value, _generate(self, value))

    def derivative(self, value):
        return _as_output(value, _derivative(self, value))

    @classmethod
    def sigmoid(cls) -> 'ActivationFunction':
        return cls(ActivationType.SIGMOID)

    @classmethod
    def linear(cls, scale: float = 1.0) -> 'ActivationFunction':
        return cls(ActivationType.LINEAR, scale=scale)

    @classmethod
    def relu(cls, scale: float = 0.1) -> 'ActivationFunction':
        return cls(ActivationType.RELU, scale=scale)

    @classmethod
    def leaky_relu(cls, alpha: float = 0.1, scale: float = 0.1) -> 'ActivationFunction':
        return cls(ActivationType.LEAKY_RELU, alpha=alpha, scale=scale)

    @classmethod
    def elu(cls, alpha: float = 0.1, scale: float = 0.1) -> 'ActivationFunction':
        return cls(ActivationType.ELU, alpha=alpha, scale=scale)

    def __str__(self):
        if self.type is ActivationType.SIGMOID:
            return "sigmoid"
        if self.type is ActivationType.LINEAR:
            return f"linear(scale={self.scale:g})"
        if self.type is ActivationType.RELU:
            return f"relu(scale={self.scale:g})"
        return f"{self.type.value}(alpha={self.alpha:g}, scale={self.scale:g})"

# Name => constructor (called with the hyperparameters the variant accepts)
activations = {
    "sigmoid"   : ActivationFunction.sigmoid,
    "linear"    : ActivationFunction.linear,
    "relu"      : ActivationFunction.relu,
    "leaky_relu": ActivationFunction.leaky_relu,
    "elu"       : ActivationFunction.elu
    }

def make_activation(name: str, alpha: float | None = None, scale: float | None = None) -> ActivationFunction:
    """
    Build an activation function by name.

    Parameters:
        name:  One of the keys of 'activations'
        alpha: Alpha hyperparameter (leaky_relu, elu); None keeps the default
        scale: Scale hyperparameter (all but sigmoid); None keeps the default

    Returns:
        The ActivationFunction value
    """
    if name not in activations:
        raise ValueError(f"Invalid activation function '{name}'")

    kwargs = {}
    if alpha is not None and name in ("leaky_relu", "elu"):
        kwargs["alpha"] = alpha
    if scale is not None and name != "sigmoid":
        kwargs["scale"] = scale
    return activations[name](**kwargs)

def gradient_check(function: ActivationFunction, points) -> float:
    """
    Compare the hand-derived derivative against autograd's gradient of 'generate'.

    For SIGMOID the hand-derived derivative is evaluated at the activated value,
    matching how backpropagation uses it. The variants with a kink at zero
    (relu, leaky_relu, elu) disagree with autograd exactly at 0, so avoid it.

    Parameters:
        function: The activation function to check
        points:   Pre-activation values at which to compare

    Returns:
        Largest absolute difference between the two derivatives
    """
    z = np.asarray(points, dtype=np.float64)
    reference = elementwise_grad(lambda x: _generate(function, x))(z)

    if function.type is ActivationType.SIGMOID:
        derived = _derivative(function, _generate(function, z))
    else:
        derived = _derivative(function, z)

    return float(np.max(np.abs(reference - derived)))
