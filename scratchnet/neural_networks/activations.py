"""
Element-wise activation functions and their derivatives.
"""
import numpy as np


class Activation:
    """Base class for all activation functions."""

    def apply(self, x):
        """Apply the activation function to every element of `x`."""
        raise NotImplementedError

    def apply_derivative(self, x):
        """Apply the first derivative of the activation function to every element of `x`."""
        raise NotImplementedError

    def __repr__(self):
        return f"{self.__class__.__name__}()"

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))


class Sigmoid(Activation):
    """Logistic function 1 / (1 + e^-x)."""

    def apply(self, x):
        return 1.0 / (1.0 + (-x).exp())

    def apply_derivative(self, x):
        sigmoid = self.apply(x)
        return sigmoid * (1.0 - sigmoid)


class Rectifier(Activation):
    """
    Rectified linear unit max(x, 0).

    The derivative at x == 0 is taken to be 0.
    """

    def apply(self, x):
        return x.apply(lambda values: np.maximum(values, 0.0))

    def apply_derivative(self, x):
        return x.apply(lambda values: np.where(values > 0.0, 1.0, 0.0))


ACTIVATIONS = {
    'sigmoid': Sigmoid,
    'relu': Rectifier,
    'rectifier': Rectifier,
}


def get_activation(activation='sigmoid'):
    """
    Factory function to get activation instances.

    Args:
        activation (str or Activation): Activation name ('sigmoid', 'relu', 'rectifier')
            or an instance which is returned unchanged

    Returns:
        Activation instance
    """
    if isinstance(activation, Activation):
        return activation
    if activation in ACTIVATIONS:
        return ACTIVATIONS[activation]()
    raise ValueError(f"Unknown activation: {activation}")
