import numpy as np
import pandas as pd

from ..maths import Matrix, VectorShape


def fisher_yates_shuffle(sequence, rng=None):
    """
    Shuffle a mutable, indexable sequence in place with a uniform Fisher-Yates shuffle.

    Args:
        sequence (list): Sequence to shuffle
        rng (np.random.Generator, optional): Random number generator
    """
    # Sequences with one element or less cannot be shuffled
    if len(sequence) <= 1:
        return
    if rng is None:
        rng = np.random.default_rng()
    last_index = len(sequence) - 1
    for i in range(last_index):
        # integers() draws without modulo bias, high is exclusive
        j = int(rng.integers(i, last_index + 1))
        if i != j:
            sequence[i], sequence[j] = sequence[j], sequence[i]


def normal_random_values(count, rng=None):
    """
    Draw `count` standard normal values with the Box-Muller transform.

    Args:
        count (int): Number of values
        rng (np.random.Generator, optional): Random number generator

    Returns:
        ndarray: Values of shape (count,)
    """
    if rng is None:
        rng = np.random.default_rng()
    # 1 - U maps [0, 1) onto (0, 1], keeping log() finite
    u = 1.0 - rng.random(count)
    v = 1.0 - rng.random(count)
    return np.sqrt(-2.0 * np.log(u)) * np.cos(2.0 * np.pi * v)


def versor(component, count, shape=VectorShape.COLUMN):
    """One-hot vector of `count` elements with a 1.0 at `component`."""
    return Matrix.versor(component, count, shape)


def samples_from_frame(data, label_column=-1, n_classes=None, scale=None):
    """
    Convert tabular data into (input, desired output) samples.

    Args:
        data (pd.DataFrame or ndarray): One row per sample, features plus an
            integer class label column
        label_column (int or str): Position (or name for DataFrames) of the label column
        n_classes (int, optional): Number of classes; inferred from the labels if omitted
        scale (sequence of float, optional): Per-feature divisor, e.g. the feature maxima

    Returns:
        list: Tuples of (column vector input, one-hot column vector desired output)
    """
    if isinstance(data, pd.DataFrame):
        if isinstance(label_column, str):
            labels = data[label_column].to_numpy()
            features = data.drop(columns=[label_column]).to_numpy(dtype=np.float64)
        else:
            labels = data.iloc[:, label_column].to_numpy()
            features = data.drop(columns=data.columns[label_column]).to_numpy(dtype=np.float64)
    elif isinstance(data, np.ndarray):
        if data.ndim != 2:
            raise ValueError(f"Sample data must be 2D, got shape {data.shape}")
        labels = data[:, label_column]
        features = np.delete(data, label_column % data.shape[1], axis=1).astype(np.float64)
    else:
        raise TypeError(f"Input data must be a pandas DataFrame or a numpy ndarray. Got {type(data)} instead.")

    labels = labels.astype(int)
    if n_classes is None:
        n_classes = int(labels.max()) + 1
    if scale is not None:
        features = features / np.asarray(scale, dtype=np.float64)

    return [(Matrix.vector(row), versor(int(label), n_classes))
            for row, label in zip(features, labels)]
