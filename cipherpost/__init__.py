"""cipherpost: ephemeral message drop with a reversible byte-obfuscation pipeline.

Obfuscation only. The substitution matrices are public and the permutation
table travels with its ciphertext, so any package can be inverted without a key.
"""

__version__ = "0.1.0"
