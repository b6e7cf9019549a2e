"""Thirty25: build pipeline for a personal technical blog."""

__version__ = "0.1.0"
