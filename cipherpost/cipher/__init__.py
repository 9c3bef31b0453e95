"""Reversible byte obfuscation: substitution matrices, permutation, packages."""

from .package import EncodedPackage, MalformedPackage
from .permutation import is_permutation, random_permutation, shuffle, unshuffle
from .pipeline import decode, decode_package, encode, encode_package, to_data_url
from .substitution import (
    ASCENDING,
    DESCENDING,
    SubstitutionMatrix,
    inverse_transform,
    inverse_transform_buffer,
    transform,
    transform_buffer,
)
from .text import decode_text, encode_text

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "EncodedPackage",
    "MalformedPackage",
    "SubstitutionMatrix",
    "decode",
    "decode_package",
    "decode_text",
    "encode",
    "encode_package",
    "encode_text",
    "inverse_transform",
    "inverse_transform_buffer",
    "is_permutation",
    "random_permutation",
    "shuffle",
    "to_data_url",
    "transform",
    "transform_buffer",
    "unshuffle",
]
