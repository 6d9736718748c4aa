"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklet, a product of Garudex Labs

CLI context for Merklet.

Provides shared context object and decorators for CLI commands.
"""

from typing import Optional

import click

from merklet.config.settings import MerkletConfig, get_default_config
from merklet.hashing import HashFunction, get_hash_function


# Global context object to share configuration across commands
class CLIContext:
    """Context object for CLI commands."""

    def __init__(self):
        self.config: Optional[MerkletConfig] = None
        self.config_path: Optional[str] = None
        self.verbose = False

    def get_config(self) -> MerkletConfig:
        if self.config is None:
            self.config = get_default_config()
        return self.config

    def resolve_hash_function(
        self, algorithm: Optional[str] = None, backend: Optional[str] = None
    ) -> HashFunction:
        """Pick the hash function from command options, falling back to config."""
        config = self.get_config()
        return get_hash_function(
            algorithm or config.hashing.algorithm,
            backend or config.hashing.backend,
        )


pass_context = click.make_pass_decorator(CLIContext, ensure=True)
