"""Shared helpers: shuffling, random initialisation and sample conversion."""

from .utils import fisher_yates_shuffle, normal_random_values, versor, samples_from_frame

__all__ = ['fisher_yates_shuffle', 'normal_random_values', 'versor', 'samples_from_frame']
