import secrets

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from .errors import MalformedInputError

KEY_SIZE = 32
NONCE_SIZE = 12


def to_fixed(data, size: int, name: str) -> bytes:
    """
    Convert `data` to exactly `size` bytes.
    Any other length raises `MalformedInputError`, nothing is padded or truncated.
    """
    data = bytes(data)
    if len(data) != size:
        raise MalformedInputError(f"{name}={size}B, got {len(data)}B")
    return data


def chacha(key: bytes, nonce: bytes, buffer: bytearray):
    """
    Encrypt a buffer in-place using ChaCha20 (RFC 8439, block counter starting at 0).

    Decryption is the same call with the same key and nonce.

    No Poly1305 tag is produced. Ciphertext integrity rests on the proof that
    accompanies it.
    """
    key = to_fixed(key, KEY_SIZE, "key")
    nonce = to_fixed(nonce, NONCE_SIZE, "nonce")

    # 16-byte value is the little-endian block counter followed by the nonce
    algorithm = algorithms.ChaCha20(key, b"\x00" * 4 + nonce)
    encryptor = Cipher(algorithm, mode=None).encryptor()

    buffer[:] = encryptor.update(bytes(buffer)) + encryptor.finalize()


def random_nonce() -> bytes:
    """Fresh 12-byte nonce from the OS CSPRNG. Never reuse one with the same key."""
    return secrets.token_bytes(NONCE_SIZE)
