"""Retrieval-augmented question answering over documents."""

__version__ = "0.1.0"
