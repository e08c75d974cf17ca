"""
Command-line interface for record-builder.

Provides commands for generating builder modules and inspecting
how record fields are classified.
"""

from .main import app, main

__all__ = ["main", "app"]
