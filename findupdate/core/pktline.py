"""Decoder for the Git smart-HTTP reference advertisement.

A ``GET <repo>/info/refs?service=git-upload-pack`` answer is a stream of
pkt-lines. Each line starts with four hex digits giving its total length,
followed by the payload; ``0000`` is a flush packet closing a section::

    001e# service=git-upload-pack\\n
    0000
    00fe68e3802b238b964900acac9422a70e295482243f HEAD\\0multi_ack ...\\n
    003fdb358a2993be0e0aa3864ed3290105dd4a544c35 refs/heads/avx512\\n
    003e4d9f2c0e5a8c13e0d1a3f6c89c3d94c6d0b1f2aa refs/tags/v1.0\\n
    00414d9f2c0e5a8c13e0d1a3f6c89c3d94c6d0b1f2ab refs/tags/v1.0^{}\\n
    0000

Rather than honouring the length prefixes, lines are tokenised textually:
a run of hex digits (or the ``#`` of the service announcement), blanks, the
rest of the line, then at least one whitespace character. Length prefixes,
flush packets and object ids run together in the first token, which is why
the object id is recovered from its tail.

Typical usage::

    from findupdate.core.pktline import Branch, Tag, decode_refs

    for ref in decode_refs(body):
        if isinstance(ref, Tag):
            print("tag", ref.name)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from findupdate.exceptions import MalformedPktLineError
from findupdate.utils.logger import get_logger

logger = get_logger("pktline")

__all__ = [
    "Branch",
    "GitRef",
    "Tag",
    "FLUSH_PKT",
    "classify_ref",
    "decode_refs",
    "parse_manifest",
]

#: Flush packet marking the end of a section.
FLUSH_PKT = b"0000"

TAG_PREFIX = b"refs/tags/"
BRANCH_PREFIX = b"refs/heads/"
PEELED_SUFFIX = b"^{}"

_SHA1_HEX_LEN = 40
_SHA256_HEX_LEN = 64

# hex-or-# token, blanks, rest of line, line ending, any further whitespace
_LINE = re.compile(rb"([0-9A-Fa-f#]+)[ \t]+([^\r\n]*)\r?\n[ \t\r\n]*")


@dataclass(frozen=True)
class Tag:
    """A ``refs/tags/<name>`` entry."""

    name: str


@dataclass(frozen=True)
class Branch:
    """A ``refs/heads/<name>`` entry and the object id it points at."""

    name: str
    revision: str


GitRef = Union[Tag, Branch]


def parse_manifest(data: bytes) -> Tuple[List[Tuple[bytes, bytes]], bytes]:
    """Split an advertisement into raw ``(hex, payload)`` pairs.

    Lines are consumed from the start of ``data`` for as long as they match
    the line grammar; whatever follows (typically a trailing flush packet)
    is returned untouched.

    Args:
        data: Raw response body.

    Returns:
        The decoded pairs and the unconsumed remainder of ``data``.

    Raises:
        MalformedPktLineError: Not even the first line could be decoded.

    Example::

        >>> parse_manifest(b"01234abc heads\\n12345bcd tags\\n0000")
        ([(b'01234abc', b'heads'), (b'12345bcd', b'tags')], b'0000')
    """
    pairs: List[Tuple[bytes, bytes]] = []
    pos = 0

    while True:
        match = _LINE.match(data, pos)
        if match is None:
            break
        pairs.append((match.group(1), match.group(2)))
        pos = match.end()

    if not pairs:
        raise MalformedPktLineError(
            "Reference advertisement contains no decodable line",
            offset=0,
        )

    return pairs, data[pos:]


def _object_id(field: bytes) -> str:
    """Strip the pkt-line length prefix(es) glued in front of an object id.

    Fields no longer than an object id carry no prefix and are returned as is.
    """
    size = _SHA256_HEX_LEN if len(field) >= _SHA256_HEX_LEN + 4 else _SHA1_HEX_LEN
    return field[-size:].decode("ascii")


def classify_ref(field: bytes, payload: bytes) -> Optional[GitRef]:
    """Turn one decoded line into a :class:`Tag` or :class:`Branch`.

    Returns ``None`` for peeled tags (``^{}``), for anything outside
    ``refs/tags/`` and ``refs/heads/`` (``HEAD``, the service line), and for
    names that are not valid UTF-8.
    """
    # The first ref line carries capabilities after a NUL byte.
    name = payload.split(b"\0", 1)[0]

    if name.endswith(PEELED_SUFFIX):
        return None

    try:
        if name.startswith(TAG_PREFIX):
            return Tag(name[len(TAG_PREFIX):].decode("utf-8"))

        if name.startswith(BRANCH_PREFIX):
            return Branch(name[len(BRANCH_PREFIX):].decode("utf-8"), _object_id(field))
    except UnicodeDecodeError:
        logger.debug("Skipping reference with non UTF-8 name: %r", name)

    return None


def decode_refs(data: bytes) -> List[GitRef]:
    """Decode a reference advertisement into tags and branches.

    Anything left after the decodable lines must begin with a flush packet;
    other leftovers mean the advertisement is corrupted.

    Raises:
        MalformedPktLineError: The advertisement cannot be decoded.
    """
    pairs, rest = parse_manifest(data)

    if rest and not rest.startswith(FLUSH_PKT):
        raise MalformedPktLineError(
            "Undecodable pkt-line in reference advertisement",
            offset=len(data) - len(rest),
        )

    refs: List[GitRef] = []
    for field, payload in pairs:
        ref = classify_ref(field, payload)
        if ref is not None:
            refs.append(ref)

    logger.debug("Decoded %d references from %d lines", len(refs), len(pairs))
    return refs
