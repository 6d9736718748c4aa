"""
Command-line interface for Merklet.
"""

from merklet.cli.main import cli

__all__ = ["cli"]
