"""Multilayer perceptron kernels, sequential and simulated across processing-in-memory units."""

__version__ = "0.1.0"