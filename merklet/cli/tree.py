"""
CLI commands for Merkle tree operations.

Provides commands for:
- Computing the root digest of a leaf file
- Rendering the tree structure
- Generating and verifying inclusion proofs
"""

import json
import sys

import click

from merklet.cli.context import CLIContext, pass_context
from merklet.exceptions import MerkletError
from merklet.hashing import SUPPORTED_ALGORITHMS, SUPPORTED_BACKENDS, from_hex, to_hex
from merklet.loader import LEAF_FORMATS, load_leaves
from merklet.logging_config import get_logger, log_merkle_verification
from merklet.merkle.node import render_tree
from merklet.merkle.proof import MerkleProof, directions_match_index, verify_proof
from merklet.merkle.tree import MerkleTreeBuilder

logger = get_logger(__name__)


def leaf_options(func):
    """Attach the leaf file argument and hashing options to a command."""
    func = click.option(
        "--backend",
        "-b",
        type=click.Choice(SUPPORTED_BACKENDS, case_sensitive=False),
        default=None,
        help="Hash backend (default from configuration)",
    )(func)
    func = click.option(
        "--algorithm",
        "-a",
        type=click.Choice(SUPPORTED_ALGORITHMS, case_sensitive=False),
        default=None,
        help="Hash algorithm (default from configuration)",
    )(func)
    func = click.option(
        "--format",
        "-f",
        "fmt",
        type=click.Choice(LEAF_FORMATS),
        default=None,
        help="Leaf file format (default from configuration)",
    )(func)
    func = click.argument(
        "leaf_file",
        type=click.Path(dir_okay=False, allow_dash=True),
    )(func)
    return func


def _build(ctx: CLIContext, leaf_file, fmt, algorithm, backend) -> MerkleTreeBuilder:
    config = ctx.get_config()
    hash_function = ctx.resolve_hash_function(algorithm, backend)
    leaves = load_leaves(
        leaf_file,
        fmt=fmt or config.input.format,
        encoding=config.input.encoding,
        skip_blank=config.input.skip_blank,
        hash_function=hash_function,
    )
    return MerkleTreeBuilder(hash_function).build_tree(leaves)


@click.command("root")
@leaf_options
@pass_context
def root(ctx: CLIContext, leaf_file, fmt, algorithm, backend):
    """
    Print the Merkle root digest of LEAF_FILE.

    Examples:

        merklet root leaves.txt

        merklet root --format json --algorithm sha3_256 leaves.json
    """
    try:
        builder = _build(ctx, leaf_file, fmt, algorithm, backend)
    except MerkletError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(to_hex(builder.get_root_digest()))

    if ctx.verbose:
        click.echo(f"Leaves: {builder.leaf_count}", err=True)
        click.echo(f"Depth: {builder.depth}", err=True)
        click.echo(f"Hash: {builder.hash_function.name} ({builder.hash_function.backend})", err=True)


@click.command("show")
@leaf_options
@click.option(
    "--digest-chars",
    "-d",
    type=click.IntRange(4, 128),
    default=12,
    show_default=True,
    help="Hex characters shown per digest",
)
@pass_context
def show(ctx: CLIContext, leaf_file, fmt, algorithm, backend, digest_chars):
    """
    Print the tree built from LEAF_FILE, root first.

    Branches built from a duplicated trailing node are marked (duplicated).
    """
    try:
        builder = _build(ctx, leaf_file, fmt, algorithm, backend)
    except MerkletError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(render_tree(builder.get_root(), digest_chars=digest_chars))


@click.command("proof")
@leaf_options
@click.option(
    "--index",
    "-i",
    type=int,
    required=True,
    help="0-based index of the leaf to prove",
)
@click.option(
    "--output",
    "-o",
    type=click.File("w"),
    default="-",
    help="Write the proof JSON to this file (default: stdout)",
)
@pass_context
def proof(ctx: CLIContext, leaf_file, fmt, algorithm, backend, index, output):
    """
    Generate an inclusion proof for one leaf of LEAF_FILE.

    The proof is written as JSON with hex-encoded digests.
    """
    try:
        builder = _build(ctx, leaf_file, fmt, algorithm, backend)
        merkle_proof = builder.get_proof(index)
    except MerkletError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    data = merkle_proof.to_dict()
    data["algorithm"] = builder.hash_function.name
    data["backend"] = builder.hash_function.backend

    output.write(json.dumps(data, indent=2))
    output.write("\n")


def _failure_reason(valid: bool, merkle_proof: MerkleProof):
    if valid:
        return None
    if not directions_match_index(merkle_proof.directions, merkle_proof.index):
        return "index_mismatch"
    return "root_mismatch"


@click.command("verify")
@click.argument("proof_file", type=click.File("r"))
@click.option(
    "--root",
    "-r",
    "expected_root",
    default=None,
    help="Trusted root digest in hex (default: the root recorded in the proof)",
)
@click.option(
    "--algorithm",
    "-a",
    type=click.Choice(SUPPORTED_ALGORITHMS, case_sensitive=False),
    default=None,
    help="Hash algorithm (default: from the proof, then configuration)",
)
@click.option(
    "--backend",
    "-b",
    type=click.Choice(SUPPORTED_BACKENDS, case_sensitive=False),
    default=None,
    help="Hash backend (default: from the proof, then configuration)",
)
@pass_context
def verify(ctx: CLIContext, proof_file, expected_root, algorithm, backend):
    """
    Verify an inclusion proof written by 'merklet proof'.

    Exits with status 0 when the proof is valid and 1 otherwise.
    """
    try:
        data = json.load(proof_file)
        merkle_proof = MerkleProof.from_dict(data)
        root_digest = from_hex(expected_root) if expected_root else None
        hash_function = ctx.resolve_hash_function(
            algorithm or data.get("algorithm"),
            backend or data.get("backend"),
        )
    except (ValueError, AttributeError) as e:
        click.echo(f"Error: Invalid proof: {e}", err=True)
        sys.exit(1)
    except MerkletError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    valid = verify_proof(merkle_proof, root_digest, hash_function)

    log_merkle_verification(
        logger,
        leaf_index=merkle_proof.index,
        success=valid,
        failure_reason=_failure_reason(valid, merkle_proof),
    )

    if valid:
        click.echo(f"✓ Proof valid for leaf {merkle_proof.index}")
    else:
        click.echo(f"✗ Proof invalid for leaf {merkle_proof.index}")
        sys.exit(1)
