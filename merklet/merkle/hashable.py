"""
Hashable capability for Merkle leaf items.

Any object used as leaf content must provide a pure ``digest()`` method that
maps its logical content to a fixed-size digest. Semantically equal values
must produce equal digests.

Two stock item types cover the common cases: raw bytes and text.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Protocol, Union, runtime_checkable

from merklet.hashing import HashFunction, default_hash_function


@runtime_checkable
class Hashable(Protocol):
    """Protocol for leaf items that can produce their own digest."""

    def digest(self) -> bytes:
        ...


@dataclass(frozen=True)
class BytesItem:
    """
    Leaf item wrapping raw bytes.

    Attributes:
        data: Raw leaf content
        hash_function: Hash primitive used for the digest
    """
    data: bytes
    hash_function: HashFunction = field(
        default_factory=default_hash_function, compare=False, repr=False
    )

    def digest(self) -> bytes:
        return self.hash_function(self.data)


@dataclass(frozen=True)
class TextItem:
    """
    Leaf item wrapping a text string.

    The digest is the hash of the encoded text, so ``TextItem("A")`` under
    SHA-256 digests to ``sha256(b"A")``.

    Attributes:
        text: Leaf content
        encoding: Encoding applied before hashing
        hash_function: Hash primitive used for the digest
    """
    text: str
    encoding: str = "utf-8"
    hash_function: HashFunction = field(
        default_factory=default_hash_function, compare=False, repr=False
    )

    def digest(self) -> bytes:
        return self.hash_function(self.text.encode(self.encoding))


def as_items(
    values: Iterable[Union[bytes, str, Hashable]],
    hash_function: HashFunction = None,
    encoding: str = "utf-8",
) -> List[Hashable]:
    """
    Wrap raw values as leaf items, preserving order.

    ``bytes`` become BytesItem, ``str`` become TextItem, and objects that
    already provide ``digest()`` pass through untouched.

    Args:
        values: Raw values or hashable items
        hash_function: Hash primitive for wrapped values (default SHA-256)
        encoding: Text encoding for ``str`` values

    Returns:
        List of hashable leaf items

    Raises:
        TypeError: If a value is neither bytes, str nor hashable
    """
    if hash_function is None:
        hash_function = default_hash_function()

    items: List[Hashable] = []
    for value in values:
        if isinstance(value, (bytes, bytearray)):
            items.append(BytesItem(bytes(value), hash_function))
        elif isinstance(value, str):
            items.append(TextItem(value, encoding, hash_function))
        elif isinstance(value, Hashable):
            items.append(value)
        else:
            raise TypeError(
                f"Leaf value of type {type(value).__name__} has no digest() method"
            )
    return items
