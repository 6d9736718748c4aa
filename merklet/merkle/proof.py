"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklet, a product of Garudex Labs

Merkle inclusion proofs.

A proof lists the sibling digests met on the path from one leaf to the
root, each tagged with the side the sibling sits on. Proofs follow the same
odd-node-out rule as tree construction: a trailing unpaired node is its own
sibling.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from merklet.exceptions import LeafIndexError
from merklet.hashing import HashFunction, default_hash_function, from_hex, to_hex
from merklet.merkle.node import MerkleNode

LEFT = "left"
RIGHT = "right"


@dataclass
class MerkleProof:
    """
    Proof that a leaf is included in a Merkle tree.

    Attributes:
        leaf_digest: Digest of the leaf being proven
        index: 0-based position of the leaf in the input sequence
        siblings: Sibling digests from leaf level to just below the root
        directions: Side of each sibling ("left" or "right")
        root_digest: Root digest the proof was generated against
    """
    leaf_digest: bytes
    index: int
    siblings: List[bytes] = field(default_factory=list)
    directions: List[str] = field(default_factory=list)
    root_digest: bytes = b""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the proof with hex-encoded digests."""
        return {
            "leaf": to_hex(self.leaf_digest),
            "index": self.index,
            "siblings": [
                {"digest": to_hex(digest), "direction": direction}
                for digest, direction in zip(self.siblings, self.directions)
            ],
            "root": to_hex(self.root_digest),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MerkleProof":
        """
        Deserialize a proof produced by to_dict().

        Raises:
            ValueError: If a field is missing or a digest is not valid hex
        """
        try:
            siblings = data.get("siblings", [])
            return cls(
                leaf_digest=from_hex(data["leaf"]),
                index=int(data["index"]),
                siblings=[from_hex(entry["digest"]) for entry in siblings],
                directions=[entry["direction"] for entry in siblings],
                root_digest=from_hex(data["root"]),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed proof: {e}") from e


def generate_proof(levels: Sequence[Sequence[MerkleNode]], index: int) -> MerkleProof:
    """
    Generate an inclusion proof for the leaf at the given index.

    Args:
        levels: Node levels as produced by build_levels(), leaves first
        index: 0-based leaf index

    Returns:
        MerkleProof for the leaf

    Raises:
        LeafIndexError: If index is out of range
    """
    leaf_count = len(levels[0]) if levels else 0
    if index < 0 or index >= leaf_count:
        raise LeafIndexError(f"Leaf index {index} out of range [0, {leaf_count})")

    siblings: List[bytes] = []
    directions: List[str] = []
    current_index = index

    for level in levels[:-1]:
        if current_index % 2 == 0:
            sibling_index = current_index + 1
            direction = RIGHT
        else:
            sibling_index = current_index - 1
            direction = LEFT

        # Trailing node of an odd level is paired with itself
        if sibling_index >= len(level):
            sibling_index = current_index

        siblings.append(level[sibling_index].digest)
        directions.append(direction)
        current_index //= 2

    return MerkleProof(
        leaf_digest=levels[0][index].digest,
        index=index,
        siblings=siblings,
        directions=directions,
        root_digest=levels[-1][0].digest,
    )


def compute_root_from_proof(proof: MerkleProof, hash_function: HashFunction = None) -> bytes:
    """
    Recompute the root digest implied by a proof.

    Raises:
        ValueError: If the proof's siblings and directions do not line up
    """
    if hash_function is None:
        hash_function = default_hash_function()

    if len(proof.siblings) != len(proof.directions):
        raise ValueError(
            f"Proof has {len(proof.siblings)} siblings but {len(proof.directions)} directions"
        )

    current = proof.leaf_digest
    for sibling, direction in zip(proof.siblings, proof.directions):
        if direction == LEFT:
            current = hash_function(sibling + current)
        elif direction == RIGHT:
            current = hash_function(current + sibling)
        else:
            raise ValueError(f"Invalid proof direction '{direction}'")
    return current


def directions_match_index(directions: Sequence[str], index: int) -> bool:
    """
    Check that a direction path is the one leaf `index` takes to the root.

    Bit k of the index is 0 exactly when the sibling at level k sits on the
    right, and no bits may remain above the top level.
    """
    if index < 0:
        return False
    for level, direction in enumerate(directions):
        expected = LEFT if (index >> level) & 1 else RIGHT
        if direction != expected:
            return False
    return index >> len(directions) == 0


def verify_proof(
    proof: MerkleProof,
    expected_root: Optional[bytes] = None,
    hash_function: HashFunction = None,
) -> bool:
    """
    Verify an inclusion proof.

    Args:
        proof: Proof to check
        expected_root: Trusted root digest; defaults to the root in the proof
        hash_function: Hash primitive the tree was built with (default SHA-256)

    Returns:
        True if the proof leads to the expected root and its directions
        match its leaf index, False otherwise
    """
    if expected_root is None:
        expected_root = proof.root_digest

    if not directions_match_index(proof.directions, proof.index):
        return False

    try:
        computed = compute_root_from_proof(proof, hash_function)
    except ValueError:
        return False

    return computed == expected_root
