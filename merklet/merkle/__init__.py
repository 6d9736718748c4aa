"""
Merkle tree construction over ordered collections of hashable items.

This package provides the node model, the tree builder and inclusion proofs.
"""

from merklet.merkle.hashable import BytesItem, Hashable, TextItem, as_items
from merklet.merkle.node import (
    Branch,
    Leaf,
    MerkleNode,
    compute_digest,
    iter_leaves,
    make_branch,
    make_leaf,
    render_tree,
    tree_depth,
)
from merklet.merkle.proof import (
    MerkleProof,
    directions_match_index,
    generate_proof,
    verify_proof,
)
from merklet.merkle.tree import MerkleTreeBuilder, build_levels, build_tree

__all__ = [
    "Hashable",
    "BytesItem",
    "TextItem",
    "as_items",
    "MerkleNode",
    "Leaf",
    "Branch",
    "compute_digest",
    "make_leaf",
    "make_branch",
    "iter_leaves",
    "tree_depth",
    "render_tree",
    "MerkleProof",
    "generate_proof",
    "directions_match_index",
    "verify_proof",
    "MerkleTreeBuilder",
    "build_levels",
    "build_tree",
]
