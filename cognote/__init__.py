"""Cognote - personal memory store with retrieval-augmented chat."""

__version__ = "0.1.0"
