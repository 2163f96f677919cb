"""Client library for transit station accessibility reports."""

__version__ = "0.1.0"
