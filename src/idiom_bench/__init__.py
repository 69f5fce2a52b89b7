"""Micro-benchmark harness for comparing interchangeable code idioms."""

__version__ = "0.1.0"
