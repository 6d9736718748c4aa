"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklet, a product of Garudex Labs

Node model for Merkle trees.

A node is either a Leaf, holding one hashable item, or a Branch, holding
exactly two child nodes (left and right, order-significant). Every node
carries a digest that is computed once at construction and cannot be
supplied by the caller:
- Leaf digest = item.digest()
- Branch digest = H(left.digest + right.digest), H being the branch's own
  hash function

Nodes are immutable. Children are plain references, so the same node may
appear as both children of a branch (the odd-node-out case).
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from merklet.hashing import HashFunction, default_hash_function
from merklet.merkle.hashable import BytesItem, Hashable, TextItem


@dataclass(frozen=True, eq=False)
class MerkleNode:
    """
    Base class for Merkle tree nodes.

    Attributes:
        digest: Digest of this node, fixed at construction
    """
    digest: bytes = field(init=False)

    @property
    def is_leaf(self) -> bool:
        return isinstance(self, Leaf)

    @property
    def is_branch(self) -> bool:
        return isinstance(self, Branch)

    def get_left_child(self) -> Optional["MerkleNode"]:
        """Return the left child of a branch, or None for a leaf."""
        return self.left if isinstance(self, Branch) else None

    def get_right_child(self) -> Optional["MerkleNode"]:
        """Return the right child of a branch, or None for a leaf."""
        return self.right if isinstance(self, Branch) else None

    def get_leaf_data(self) -> Optional[Any]:
        """Return the wrapped item of a leaf, or None for a branch."""
        return self.item if isinstance(self, Leaf) else None


@dataclass(frozen=True, eq=False)
class Leaf(MerkleNode):
    """Leaf node wrapping one input item."""
    item: Hashable

    def __post_init__(self):
        object.__setattr__(self, "digest", compute_digest(self))


@dataclass(frozen=True, eq=False)
class Branch(MerkleNode):
    """
    Branch node with exactly two children.

    Attributes:
        left: Left child
        right: Right child (may be the same node as left)
        hash_function: Hash primitive the digest was computed with
    """
    left: MerkleNode
    right: MerkleNode
    hash_function: Optional[HashFunction] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.hash_function is None:
            object.__setattr__(self, "hash_function", default_hash_function())
        object.__setattr__(self, "digest", compute_digest(self))


def compute_digest(node: MerkleNode, hash_function: HashFunction = None) -> bytes:
    """
    Compute the digest a node must carry.

    For a leaf this is the item's own digest. For a branch it is the hash of
    the left child's digest followed by the right child's digest; swapping
    the children changes the result.

    Args:
        node: Leaf or Branch
        hash_function: Hash primitive for a branch (default: the one the
            branch was built with)

    Returns:
        Digest bytes
    """
    if isinstance(node, Leaf):
        return node.item.digest()
    if isinstance(node, Branch):
        return hash_children(node.left, node.right, hash_function or node.hash_function)
    raise TypeError(f"Unknown node type: {type(node).__name__}")


def hash_children(
    left: MerkleNode, right: MerkleNode, hash_function: HashFunction = None
) -> bytes:
    """Hash the concatenation of two child digests, left first."""
    if hash_function is None:
        hash_function = default_hash_function()
    return hash_function(left.digest + right.digest)


def make_leaf(item: Hashable) -> Leaf:
    """
    Create a leaf node for an item.

    Args:
        item: Object providing digest()

    Returns:
        Leaf whose digest equals item.digest()
    """
    return Leaf(item)


def make_branch(
    left: MerkleNode, right: MerkleNode, hash_function: HashFunction = None
) -> Branch:
    """
    Create a branch node over two children.

    Args:
        left: Left child
        right: Right child (may be the same node as left)
        hash_function: Hash primitive (default SHA-256)

    Returns:
        Branch whose digest equals H(left.digest + right.digest)
    """
    return Branch(left, right, hash_function)


def iter_leaves(root: MerkleNode) -> Iterator[Leaf]:
    """
    Yield the leaves under a node from left to right.

    Subtrees that were duplicated to fill an odd level are visited once per
    position, so their leaves are yielded again.

    Args:
        root: Node to traverse

    Yields:
        Leaf nodes in left-to-right order
    """
    stack: List[MerkleNode] = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Branch):
            stack.append(node.right)
            stack.append(node.left)
        else:
            yield node


def tree_depth(leaf_count: int) -> int:
    """
    Compute the number of levels of a tree with the given number of leaves.

    Levels are counted from the leaves to the root inclusive; a single leaf
    has depth 1. Odd levels are padded by duplicating their last node.

    Args:
        leaf_count: Number of leaves

    Returns:
        Tree depth (0 for an empty tree)
    """
    if leaf_count <= 0:
        return 0

    depth = 1
    n = leaf_count
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


def render_tree(root: MerkleNode, digest_chars: int = 12) -> str:
    """
    Render a node and its descendants as an indented text diagram.

    Args:
        root: Node to render
        digest_chars: Number of hex characters shown per digest

    Returns:
        Multi-line string, one node per line
    """
    lines: List[str] = []

    def _render(node: MerkleNode, prefix: str, label: str) -> None:
        short = node.digest.hex()[:digest_chars]
        if isinstance(node, Leaf):
            lines.append(f"{prefix}{label}leaf {short} {_describe(node.item)}")
            return
        duplicated = " (duplicated)" if node.left is node.right else ""
        lines.append(f"{prefix}{label}branch {short}{duplicated}")
        _render(node.left, prefix + "  ", "L: ")
        _render(node.right, prefix + "  ", "R: ")

    _render(root, "", "")
    return "\n".join(lines)


def _describe(item: Any, limit: int = 32) -> str:
    if isinstance(item, TextItem):
        text = repr(item.text)
    elif isinstance(item, BytesItem):
        text = "0x" + item.data.hex()
    else:
        text = repr(item)
    if len(text) > limit:
        text = text[: limit - 3] + "..."
    return text
