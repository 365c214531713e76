"""
Command-line interface for proccapture.
"""

from .main import main_cli

__all__ = ["main_cli"]
