"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklet, a product of Garudex Labs

Merklet - Binary Merkle trees over ordered collections of hashable items.

Merklet builds a Merkle hash tree from an ordered sequence of leaves and
computes a single root digest that commits to the whole sequence, including
element order.
"""

from merklet._version import __version__

__all__ = ["__version__"]
