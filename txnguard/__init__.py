"""Adaptive per-user fraud scoring for payment transactions."""

__version__ = "0.1.0"
