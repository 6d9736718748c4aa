"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklet, a product of Garudex Labs

Merkle tree construction.

This module builds a binary Merkle tree bottom-up from an ordered sequence of
hashable items. It supports:
- Root construction with build_tree()
- Level-by-level construction with build_levels()
- Builder pattern that keeps the levels for diagnostics and proofs

Odd-node-out policy: when a level has an odd number of nodes, the last node
is paired with itself, make_branch(last, last). It is never promoted
unpaired. Root digests depend on this rule.
"""

import time
from typing import List, Optional, Sequence

from merklet.exceptions import EmptyInputError, TreeNotBuiltError
from merklet.hashing import HashFunction, default_hash_function, to_hex
from merklet.logging_config import get_logger, log_merkle_root_computation
from merklet.merkle.hashable import Hashable
from merklet.merkle.node import MerkleNode, make_branch, make_leaf
from merklet.merkle.proof import MerkleProof, generate_proof

logger = get_logger(__name__)


def build_next_level(
    current_level: Sequence[MerkleNode], hash_function: HashFunction = None
) -> List[MerkleNode]:
    """
    Reduce one level to the next by pairing nodes left to right.

    Args:
        current_level: Nodes of the current level (non-empty)
        hash_function: Hash primitive for branches

    Returns:
        Branch nodes of the next level, ceil(n / 2) of them
    """
    next_level: List[MerkleNode] = []

    for i in range(0, len(current_level), 2):
        left = current_level[i]

        # If odd number of nodes, duplicate the last one
        if i + 1 < len(current_level):
            right = current_level[i + 1]
        else:
            right = left

        next_level.append(make_branch(left, right, hash_function))

    return next_level


def build_levels(
    leaves: Sequence[Hashable], hash_function: HashFunction = None
) -> List[List[MerkleNode]]:
    """
    Build every level of the tree, from the leaves up to the root.

    Leaf items hash with their own primitive. When their digests are not
    hash_function.digest_size bytes wide, leaves and branches differ in
    width; the tree is still built and a warning is logged.

    Args:
        leaves: Ordered leaf items
        hash_function: Hash primitive for branches (default SHA-256)

    Returns:
        List of levels; levels[0] holds the leaf nodes and levels[-1] holds
        the root alone

    Raises:
        EmptyInputError: If leaves is empty
    """
    if len(leaves) == 0:
        raise EmptyInputError("Cannot build Merkle tree from empty leaves list")

    if hash_function is None:
        hash_function = default_hash_function()

    current_level: List[MerkleNode] = [make_leaf(item) for item in leaves]
    mismatched = sum(
        1 for leaf in current_level if len(leaf.digest) != hash_function.digest_size
    )
    if mismatched:
        logger.warning(
            "leaf_digest_width_mismatch",
            mismatched_leaves=mismatched,
            leaf_count=len(current_level),
            branch_digest_size=hash_function.digest_size,
            hash_algorithm=hash_function.name,
        )

    levels = [current_level]

    while len(current_level) > 1:
        current_level = build_next_level(current_level, hash_function)
        levels.append(current_level)

    return levels


def build_tree(leaves: Sequence[Hashable], hash_function: HashFunction = None) -> MerkleNode:
    """
    Build a Merkle tree and return its root node.

    A single item yields its leaf node as the root.

    Args:
        leaves: Ordered leaf items
        hash_function: Hash primitive for branches (default SHA-256)

    Returns:
        Root node

    Raises:
        EmptyInputError: If leaves is empty

    Example:
        >>> from merklet.merkle.hashable import TextItem
        >>> root = build_tree([TextItem("A"), TextItem("B")])
        >>> root.digest.hex()
        '63956f0ce48edc48a0d528cb0b5d58e4d625afb14d63ca1bb9950eb657d61f40'
    """
    return build_levels(leaves, hash_function)[-1][0]


class MerkleTreeBuilder:
    """
    Builder class for constructing Merkle trees.

    Keeps the levels of the most recent build so callers can inspect the
    tree shape and generate inclusion proofs.

    Example:
        >>> builder = MerkleTreeBuilder()
        >>> root = builder.build_tree(items).get_root()
        >>> proof = builder.get_proof(0)
    """

    def __init__(self, hash_function: HashFunction = None):
        """
        Initialize the Merkle tree builder.

        Args:
            hash_function: Hash primitive for branches (default SHA-256)
        """
        self.hash_function = hash_function or default_hash_function()
        self._levels: Optional[List[List[MerkleNode]]] = None

    def build_tree(self, leaves: Sequence[Hashable]) -> "MerkleTreeBuilder":
        """
        Build Merkle tree from leaf items.

        Args:
            leaves: Ordered leaf items

        Returns:
            Self for method chaining

        Raises:
            EmptyInputError: If leaves is empty
        """
        start = time.perf_counter()
        self._levels = build_levels(leaves, self.hash_function)
        duration_ms = (time.perf_counter() - start) * 1000

        log_merkle_root_computation(
            logger,
            leaf_count=self.leaf_count,
            depth=self.depth,
            merkle_root=to_hex(self.get_root_digest()),
            duration_ms=round(duration_ms, 3),
            hash_algorithm=self.hash_function.name,
        )

        return self

    def _require_built(self) -> List[List[MerkleNode]]:
        if self._levels is None:
            raise TreeNotBuiltError("Tree has not been built yet. Call build_tree() first.")
        return self._levels

    @property
    def levels(self) -> List[List[MerkleNode]]:
        """Node levels of the built tree, leaves first."""
        return self._require_built()

    @property
    def leaf_count(self) -> int:
        return len(self._require_built()[0])

    @property
    def depth(self) -> int:
        return len(self._require_built())

    def get_root(self) -> MerkleNode:
        """
        Get the root node.

        Raises:
            TreeNotBuiltError: If tree has not been built yet
        """
        return self._require_built()[-1][0]

    def get_root_digest(self) -> bytes:
        return self.get_root().digest

    def get_proof(self, leaf_index: int) -> MerkleProof:
        """
        Generate Merkle proof for the leaf at given index.

        Args:
            leaf_index: Index of the leaf (0-based)

        Returns:
            MerkleProof for the leaf

        Raises:
            TreeNotBuiltError: If tree has not been built yet
            LeafIndexError: If leaf_index is out of range
        """
        return generate_proof(self._require_built(), leaf_index)
