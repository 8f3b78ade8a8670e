# pylint: disable=missing-docstring
from abc import abstractmethod
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar

from scratchnet.maths import Matrix

T = TypeVar("T", bound="BaseNetwork")

Sample = Tuple[Matrix, Matrix]


class BaseNetwork:
    @abstractmethod
    def predict(self, input_data: Matrix) -> Matrix:
        """
        :param input_data: input values for the network's input neurons
        :return: column vector with one value per output neuron
        """
        raise NotImplementedError

    @abstractmethod
    def train(self: T, training_set: List[Sample], epochs: int, mini_batch_size: int,
              learning_rate: float, test_set: Optional[Sequence[Sample]] = None,
              progress_callback: Optional[Callable[[int, int, int], None]] = None) -> T:
        """
        :param training_set: list of (input, desired output) samples
        :param epochs: number of full iterations over the training set
        :param mini_batch_size: number of samples in each mini batch
        :param learning_rate: learning rate used for gradient descent
        :param test_set: optional samples whose classification accuracy is reported after each epoch
        :param progress_callback: optional callable invoked as progress_callback(epoch, batch_index, batch_count) after each mini batch
        :return: the trained network
        """
        raise NotImplementedError

    def test(self, test_set: Sequence[Sample]) -> int:
        """
        :param test_set: list of (input, desired output) samples
        :return: number of samples whose predicted class (index of the maximum output) matches the desired one
        """
        correctly_classified = 0
        for input_data, desired_output in test_set:
            _, predicted_row, predicted_column = self.predict(input_data).max_value_and_index()
            _, desired_row, desired_column = desired_output.max_value_and_index()
            if (predicted_row, predicted_column) == (desired_row, desired_column):
                correctly_classified += 1
        return correctly_classified

    def score(self, test_set: Sequence[Sample]) -> float:
        """
        :param test_set: list of (input, desired output) samples
        :return: accuracy
        """
        if not test_set:
            return 0.0
        return self.test(test_set) / len(test_set)

    def get_params(self, mode: str = "all") -> Any:
        """
        Get parameters for this network.

        :param mode: Specifies which parameters to return. Options are:
            - "all": Return all parameters.
            - "trainable": Return only trainable parameters (the layers).
            - "non_trainable": Return only non-trainable parameters (e.g., configuration settings).
        :return: Dictionary of parameter names mapped to their values.
        """
        if mode == "all":
            return self.__dict__
        if mode == "trainable":
            return {k: v for k, v in self.__dict__.items() if k == "layers"}
        if mode == "non_trainable":
            return {k: v for k, v in self.__dict__.items() if k != "layers"}

        raise ValueError(
            f"Invalid mode '{mode}'. Choose from 'all', 'trainable', or 'non_trainable'."
        )
