"""
Exception hierarchy for Merklet.

All custom exceptions inherit from MerkletError base class.
"""


class MerkletError(Exception):
    """Base exception for all Merklet errors."""
    pass


# Tree Errors
class TreeError(MerkletError):
    """Base exception for tree construction and traversal errors."""
    pass


class EmptyInputError(TreeError):
    """Raised when a tree is requested over zero leaves."""
    pass


class TreeNotBuiltError(TreeError):
    """Raised when a builder is queried before build_tree() has been called."""
    pass


class LeafIndexError(TreeError):
    """Raised when a leaf index is outside the range of the tree."""
    pass


# Hashing Errors
class HashingError(MerkletError):
    """Base exception for hash primitive selection errors."""
    pass


class UnsupportedHashAlgorithmError(HashingError):
    """Raised when a hash algorithm or backend name is not recognised."""
    pass


# Configuration Errors
class ConfigurationError(MerkletError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass


# Input Errors
class LeafLoadError(MerkletError):
    """Raised when leaf data cannot be read or parsed."""
    pass
