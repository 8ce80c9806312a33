"""Revision key parsing.

etcd stores every version of every key in the bolt ``key`` bucket under a
binary revision key::

    bytes[0:8]   big-endian main revision
    bytes[8]     separator ('_'), not validated
    bytes[9:17]  big-endian sub revision
    bytes[17]    optional 't' marking a deletion tombstone
"""

from __future__ import annotations

import struct

from k8sexport.core.errors import RevisionKeyError
from k8sexport.models.revision import Revision

REVISION_KEY_SIZE = 17
_TOMBSTONE_MARKER = ord("t")

_HALF = struct.Struct(">q")


def parse_revision(key: bytes) -> Revision:
    """Decode the ``{main, sub}`` revision from a bolt key.

    Raises
    ------
    RevisionKeyError
        If *key* is shorter than 17 bytes.

    Examples
    --------
    >>> parse_revision(bytes(7) + b"\\x05_" + bytes(8)).suffix
    '-5-0'
    """
    if len(key) < REVISION_KEY_SIZE:
        raise RevisionKeyError(
            f"revision key is {len(key)} bytes, need at least {REVISION_KEY_SIZE}"
        )
    (main,) = _HALF.unpack_from(key, 0)
    (sub,) = _HALF.unpack_from(key, 9)
    return Revision(main=main, sub=sub)


def is_tombstone(key: bytes) -> bool:
    """Return ``True`` if *key* carries etcd's deletion marker."""
    return len(key) == REVISION_KEY_SIZE + 1 and key[-1] == _TOMBSTONE_MARKER
