"""
The encrypt-and-commit guest program.

`encrypt_and_commit` is the exact computation whose execution is proved. It
reads from the VM input stream:

    key (32 bytes) | nonce (12 bytes) | plaintext (remaining segment)

and commits, in this order:

    digest(plaintext) (32 bytes) | ciphertext (len(plaintext) bytes)

External verifiers split the public values positionally at byte 32, so this
layout must not change without a new program name.
"""

import functools
import hashlib
import inspect
from dataclasses import dataclass, field
from typing import Callable

from . import cipher, hashing
from .cipher import KEY_SIZE, NONCE_SIZE, chacha, to_fixed
from .hashing import HashAlgorithm
from .utils import bytes32_from_image, vkey_hash_from_image

PROGRAM_NAME = "chacha-program"


def encrypt_and_commit(io, hash_algorithm: HashAlgorithm = HashAlgorithm.SHA256):
    # incorrectly sized key or nonce is unacceptable and aborts the execution
    key = to_fixed(io.read_vec(), KEY_SIZE, "key")
    nonce = to_fixed(io.read_vec(), NONCE_SIZE, "nonce")
    # the plaintext to be encrypted _in place_
    buffer = bytearray(io.read_vec())

    # digest must be taken before the buffer is mutated
    io.commit_slice(hash_algorithm.digest(buffer))

    # TODO: decide whether a hash of the key and/or nonce should be committed too
    chacha(key, nonce, buffer)
    io.commit_slice(buffer)


@dataclass(frozen=True)
class Program:
    """
    Compiled program image, loaded once and shared read-only by every run

    Args:
        name: program name
        hash_algorithm: digest strategy baked into the image
        image_id: 32-byte identity of the image
        entrypoint: guest main taking the VM io channel
    """

    name: str
    hash_algorithm: HashAlgorithm
    image_id: bytes
    entrypoint: Callable = field(repr=False, compare=False)

    @property
    def vkey_hash(self) -> int:
        return vkey_hash_from_image(self.image_id)

    def bytes32(self) -> str:
        return bytes32_from_image(self.image_id)


def compute_image_id(name: str, hash_algorithm: HashAlgorithm) -> bytes:
    """Hash of the program name, digest strategy and guest source text"""
    h = hashlib.sha256()
    h.update(name.encode() + b"\x00")
    h.update(hash_algorithm.value.encode() + b"\x00")
    for module in (cipher, hashing, inspect.getmodule(encrypt_and_commit)):
        h.update(inspect.getsource(module).encode())
    return h.digest()


@functools.lru_cache(maxsize=None)
def load_program(hash_algorithm: HashAlgorithm = HashAlgorithm.SHA256) -> Program:
    return Program(
        name=PROGRAM_NAME,
        hash_algorithm=hash_algorithm,
        image_id=compute_image_id(PROGRAM_NAME, hash_algorithm),
        entrypoint=functools.partial(encrypt_and_commit, hash_algorithm=hash_algorithm),
    )
