"""Binary encode/decode pipeline.

encode:  base64 -> shuffle -> pairwise(ascending) -> pairwise(descending) -> package
decode:  package -> inverse(descending) -> inverse(ascending) -> unshuffle -> base64 decode

Both matrices and the permutation table are public, so anyone holding a
package can invert it. Obfuscation only, not confidentiality.
"""
from __future__ import annotations

import base64
import logging
import random
from typing import Optional, Union

from ..errors import TransformError
from .package import EncodedPackage, MalformedPackage
from .permutation import shuffle, unshuffle
from .substitution import (
    ASCENDING,
    DESCENDING,
    inverse_transform_buffer,
    transform_buffer,
)

logger = logging.getLogger(__name__)


def encode_package(raw: bytes, rng: Optional[random.Random] = None) -> EncodedPackage:
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise TransformError(f"encode expects a bytes-like payload, got {type(raw).__name__}")
    try:
        printable = base64.b64encode(bytes(raw))
        shuffled, table = shuffle(printable, rng)
        state = transform_buffer(ASCENDING, shuffled)
        state = transform_buffer(DESCENDING, state)
        return EncodedPackage(ciphertext=state, permutation=table)
    except ValueError as e:
        raise TransformError(f"Could not build package: {e}") from e


def decode_package(package: EncodedPackage) -> bytes:
    state = inverse_transform_buffer(DESCENDING, package.ciphertext)
    state = inverse_transform_buffer(ASCENDING, state)
    # EncodedPackage has already validated the table
    printable = unshuffle(state, package.permutation, validate=False)
    return base64.b64decode(printable, validate=True)


def encode(raw: bytes, rng: Optional[random.Random] = None) -> str:
    """Encode ``raw`` into a self-describing package string."""
    return encode_package(raw, rng).to_wire()


def decode(package: Union[str, bytes, None]) -> Optional[bytes]:
    """Invert :func:`encode`.

    A package that cannot be parsed is returned unchanged as bytes, on the
    assumption that it already is the payload. ``None`` or an empty
    package means there is no attachment and returns ``None``.
    """
    if not package:
        return None
    try:
        parsed = EncodedPackage.from_wire(package)
    except MalformedPackage as e:
        logger.warning("Package could not be parsed (%s); returning raw content", e)
        return package.encode("utf-8") if isinstance(package, str) else bytes(package)
    try:
        return decode_package(parsed)
    except ValueError as e:
        # Well-formed table but the inverted bytes are not valid base64.
        logger.warning("Package did not decode (%s); returning raw content", e)
        return package.encode("utf-8") if isinstance(package, str) else bytes(package)


def to_data_url(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"
