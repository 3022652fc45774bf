"""Measure the bundled size each external dependency contributes to a project."""

__version__ = "0.1.0"
