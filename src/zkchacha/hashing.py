"""
Digest strategies available to the commitment program.

SHA-256 costs far fewer guest instructions to prove. Keccak-256 is what the
EVM computes natively (30 gas + 6 gas per 32-byte word), so it is cheaper to
recompute on-chain. A deployment picks one and uses it for both proving and
verification; the choice is part of the program image.
"""

import hashlib
from enum import Enum

from Crypto.Hash import keccak

DIGEST_SIZE = 32


def sha256(data) -> bytes:
    return hashlib.sha256(bytes(data)).digest()


def keccak256(data) -> bytes:
    k = keccak.new(digest_bits=256)
    k.update(bytes(data))
    return k.digest()


class HashAlgorithm(Enum):
    SHA256 = "sha256"
    KECCAK256 = "keccak256"

    def digest(self, data) -> bytes:
        """Compute the 32-byte digest of `data`"""
        if self is HashAlgorithm.SHA256:
            return sha256(data)
        return keccak256(data)

    @classmethod
    def from_name(cls, name: str) -> "HashAlgorithm":
        try:
            return cls(name.strip().lower())
        except ValueError as exc:
            choices = ", ".join(h.value for h in cls)
            raise ValueError(f"Unknown hash algorithm {name!r}, expected one of: {choices}") from exc
